"""Personal movie catalog core.

Stores movies, actors and genres with their many-to-many links, serves
filtered and searched views over them, and manages the images attached
to each entry.

Usage:
    from movielibrary.app import build_catalog

    app = build_catalog()
    async with app:
        movies = await app.catalog.fetch_all_movies()
"""

__version__ = "0.1.0"
