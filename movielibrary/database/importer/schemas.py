"""Seed dataset records.

The bundled dataset uses camelCase keys; fields are exposed in
snake_case and accept either spelling.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class SeedRecord(BaseModel):
    """Common seed record configuration."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SeedGenre(SeedRecord):
    """Genre nested in a seed movie."""

    name: str = Field(min_length=1)
    summary: str = ""


class SeedActor(SeedRecord):
    """Actor nested in a seed movie."""

    name: str = Field(min_length=1)
    poster_asset_name: str = Field(default="", alias="posterAssetName")
    summary: str = ""


class SeedMovie(SeedRecord):
    """Top-level seed record."""

    title: str = Field(min_length=1)
    poster_asset_name: str = Field(default="", alias="posterAssetName")
    summary: str = ""
    rating: int = 0
    release_year: int = Field(alias="releaseYear")
    genres: list[SeedGenre] = Field(default_factory=list)
    actors: list[SeedActor] = Field(default_factory=list)


# The dataset is a JSON array of movies
SEED_DATASET = TypeAdapter(list[SeedMovie])
