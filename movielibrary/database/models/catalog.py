"""Catalog SQLAlchemy models.

Contains the Movie, Actor and Genre entities and the two association
tables linking them. Both sides of each many-to-many relationship read
the same association table, so an edge is always visible from both
ends.
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, synonym

from movielibrary.database.models.base import Base, CatalogEntryMixin

# Foreign key references
MOVIE_FK = "movies.id"


# =============================================================================
# MOVIE
# =============================================================================


class Movie(CatalogEntryMixin, Base):
    """Catalog movie entry.

    Attributes:
        id: Opaque unique identifier (uuid4 string).
        title: Movie title. Also reachable as ``name`` so that every
            catalog entity sorts and filters on the same attribute.
        summary: Synopsis.
        poster_ref: Image reference (generated or bundled), if any.
        rating: User rating; the store does not clamp it.
        release_year: Year of release.
        is_favorite: User favorite flag.
    """

    __tablename__ = "movies"

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    poster_ref: Mapped[str | None] = mapped_column(String(255))
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    release_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    name = synonym("title")

    # Relationships
    actors: Mapped[list["Actor"]] = relationship(
        "Actor",
        secondary="movie_actors",
        back_populates="movies",
        order_by="Actor.name",
    )
    genres: Mapped[list["Genre"]] = relationship(
        "Genre",
        secondary="movie_genres",
        back_populates="movies",
        order_by="Genre.name",
    )

    @property
    def image_ref(self) -> str | None:
        """Reference of the image owned by this entry."""
        return self.poster_ref

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Movie(id={self.id}, title='{self.title}', year={self.release_year})>"


# =============================================================================
# ACTOR
# =============================================================================


class Actor(CatalogEntryMixin, Base):
    """Catalog actor entry.

    Attributes:
        id: Opaque unique identifier.
        name: Full name.
        summary: Short biography.
        photo_ref: Image reference, if any.
        is_favorite: User favorite flag.
    """

    __tablename__ = "actors"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    photo_ref: Mapped[str | None] = mapped_column(String(255))

    # Relationships
    movies: Mapped[list["Movie"]] = relationship(
        "Movie",
        secondary="movie_actors",
        back_populates="actors",
        order_by="Movie.title",
    )

    @property
    def image_ref(self) -> str | None:
        """Reference of the image owned by this entry."""
        return self.photo_ref

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Actor(id={self.id}, name='{self.name}')>"


# =============================================================================
# GENRE
# =============================================================================


class Genre(CatalogEntryMixin, Base):
    """Catalog genre entry.

    ``Genre.movies`` is the owning side: assigning it rewrites the
    ``movie_genres`` rows, which ``Movie.genres`` reads as well.

    Attributes:
        id: Opaque unique identifier.
        name: Genre display name.
        summary: What the genre covers.
        is_favorite: User favorite flag.
    """

    __tablename__ = "genres"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Relationships
    movies: Mapped[list["Movie"]] = relationship(
        "Movie",
        secondary="movie_genres",
        back_populates="genres",
        order_by="Movie.title",
    )

    @property
    def image_ref(self) -> str | None:
        """Genres carry no image."""
        return None

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Genre(id={self.id}, name='{self.name}')>"


# =============================================================================
# ASSOCIATION TABLES
# =============================================================================


class MovieActor(Base):
    """Association table for Movie-Actor many-to-many relationship."""

    __tablename__ = "movie_actors"

    movie_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey(MOVIE_FK, ondelete="CASCADE"),
        primary_key=True,
    )
    actor_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("actors.id", ondelete="CASCADE"),
        primary_key=True,
    )


class MovieGenre(Base):
    """Association table for Movie-Genre many-to-many relationship."""

    __tablename__ = "movie_genres"

    movie_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey(MOVIE_FK, ondelete="CASCADE"),
        primary_key=True,
    )
    genre_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("genres.id", ondelete="CASCADE"),
        primary_key=True,
    )
