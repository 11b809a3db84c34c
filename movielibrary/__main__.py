"""Command line entry point. Allows ``python -m movielibrary``."""

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

from movielibrary.app import CatalogApp, build_catalog
from movielibrary.database.exceptions import CommitFailedError, SeedLoadError
from movielibrary.database.repositories.filters import FavoriteFilter, Filter, NameFilter
from movielibrary.images.exceptions import ImageStoreError
from movielibrary.utils.logger import setup_logger

logger = setup_logger("cli")

T = TypeVar("T")


async def _with_app(action: Callable[[CatalogApp], Awaitable[T]]) -> T:
    """Start the catalog, run *action*, and always close it."""
    app = build_catalog()
    async with app:
        return await action(app)


def _describe(entity: object) -> str:
    """One-line listing of a catalog entry."""
    favorite = " *" if getattr(entity, "is_favorite", False) else ""
    if hasattr(entity, "release_year"):
        return f"{entity.title} ({entity.release_year}) rating {entity.rating}{favorite}"
    return f"{entity.name}{favorite}"


# =============================================================================
# COMMANDS
# =============================================================================


def run_init(drop: bool) -> None:
    """Create (or recreate) the database schema."""

    async def action(app: CatalogApp) -> None:
        if drop:
            await app.database.drop_all()
            await app.database.create_all()
            app.seed_marker.clear()

    asyncio.run(_with_app(action))
    print("✅ Database schema ready")


def run_seed(force: bool, seed_file: Path | None) -> None:
    """Import the seed dataset once."""

    async def action(app: CatalogApp) -> None:
        if app.seed_marker.is_set() and not force:
            print("Seed dataset already imported (use --force to import again)")
            return
        if seed_file:
            result = await app.seed_loader.load_file(seed_file)
        else:
            result = await app.seed_loader.load_bundled()
        app.seed_marker.set()
        print(
            f"✅ Seeded {result.movies_created} movies, {result.actors_created} actors, "
            f"{result.genres_created} genres ({result.images_migrated} images)"
        )

    asyncio.run(_with_app(action))


def run_list(kind: str, name: str | None, favorite: bool) -> None:
    """List one entity type, optionally filtered."""
    filters: list[Filter] = []
    if name:
        filters.append(NameFilter(name))
    if favorite:
        filters.append(FavoriteFilter(True))

    async def action(app: CatalogApp) -> list:
        repo = {"movies": app.movies, "actors": app.actors, "genres": app.genres}[kind]
        return await repo.fetch(filters)

    entities = asyncio.run(_with_app(action))
    for entity in entities:
        print(f"  - {_describe(entity)}")
    print(f"\nTotal : {len(entities)}")


def run_search(term: str) -> None:
    """Search movies, actors and genres by name or summary."""
    results = asyncio.run(_with_app(lambda app: app.search.fetch_by_partial_string(term)))
    for label, entities in (
        ("Movies", results.movies),
        ("Actors", results.actors),
        ("Genres", results.genres),
    ):
        print(f"\n{label} ({len(entities)}):")
        for entity in entities:
            print(f"  - {_describe(entity)}")


def run_add_image(path: Path) -> None:
    """Store an image file and print its reference."""
    data = path.read_bytes()
    reference = asyncio.run(_with_app(lambda app: app.images.save(data)))
    print(reference)


# =============================================================================
# MAIN
# =============================================================================


def main() -> None:
    """Main CLI."""
    parser = argparse.ArgumentParser(
        description="MovieLibrary - personal movie catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m movielibrary init --drop               # Recreate schema
  python -m movielibrary seed                      # Import bundled dataset
  python -m movielibrary list movies --favorite    # Favorite movies
  python -m movielibrary search alien              # Search everything
  python -m movielibrary add-image poster.png      # Store an image
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # Init
    init_parser = subparsers.add_parser("init", help="Create database schema")
    init_parser.add_argument("--drop", action="store_true", help="Drop tables first")

    # Seed
    seed_parser = subparsers.add_parser("seed", help="Import seed dataset")
    seed_parser.add_argument("--force", action="store_true", help="Ignore the seed marker")
    seed_parser.add_argument("--file", type=Path, help="JSON dataset to import")

    # List
    list_parser = subparsers.add_parser("list", help="List catalog entries")
    list_parser.add_argument("kind", choices=["movies", "actors", "genres"])
    list_parser.add_argument("--name", help="Case-insensitive name substring")
    list_parser.add_argument("--favorite", action="store_true", help="Favorites only")

    # Search
    search_parser = subparsers.add_parser("search", help="Search by name or summary")
    search_parser.add_argument("term")

    # Images
    image_parser = subparsers.add_parser("add-image", help="Store an image file")
    image_parser.add_argument("path", type=Path)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "init":
            run_init(args.drop)
        elif args.command == "seed":
            run_seed(args.force, args.file)
        elif args.command == "list":
            run_list(args.kind, args.name, args.favorite)
        elif args.command == "search":
            run_search(args.term)
        elif args.command == "add-image":
            run_add_image(args.path)

    except CommitFailedError as e:
        logger.critical(f"Store is no longer consistent, stopping: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted")
        sys.exit(130)
    except (SeedLoadError, ImageStoreError, OSError) as e:
        print(f"\n❌ ERROR : {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
