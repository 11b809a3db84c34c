"""Unit tests for update schemas and seed records."""

import pytest
from pydantic import ValidationError

from movielibrary.database.importer.schemas import SEED_DATASET, SeedActor, SeedMovie
from movielibrary.database.schemas import ActorUpdate, GenreUpdate, MovieUpdate

MOVIE_RELATIONS = ("actors", "genres")


class TestMovieUpdate:
    @staticmethod
    def test_only_set_fields_are_applied() -> None:
        update = MovieUpdate(rating=4)
        assert update.scalar_changes(MOVIE_RELATIONS) == {"rating": 4}

    @staticmethod
    def test_none_means_unchanged() -> None:
        update = MovieUpdate(title=None, summary="New synopsis")
        assert update.scalar_changes(MOVIE_RELATIONS) == {"summary": "New synopsis"}

    @staticmethod
    def test_relations_excluded_from_scalars() -> None:
        update = MovieUpdate(genres=["g1"], release_year=1986)
        assert update.scalar_changes(MOVIE_RELATIONS) == {"release_year": 1986}

    @staticmethod
    def test_relation_changes_keep_order() -> None:
        update = MovieUpdate(actors=["a2", "a1"])
        assert update.relation_changes(MOVIE_RELATIONS) == {"actors": ["a2", "a1"]}

    @staticmethod
    def test_empty_relation_list_is_no_change() -> None:
        update = MovieUpdate(actors=[], genres=None)
        assert update.relation_changes(MOVIE_RELATIONS) == {}

    @staticmethod
    def test_empty_title_rejected() -> None:
        with pytest.raises(ValidationError):
            MovieUpdate(title="")

    @staticmethod
    def test_unknown_field_rejected() -> None:
        with pytest.raises(ValidationError):
            MovieUpdate.model_validate({"director": "Ridley Scott"})


class TestActorAndGenreUpdate:
    @staticmethod
    def test_actor_photo_ref() -> None:
        update = ActorUpdate(photo_ref="abc-def.jpg")
        assert update.scalar_changes(("movies",)) == {"photo_ref": "abc-def.jpg"}

    @staticmethod
    def test_genre_movies() -> None:
        update = GenreUpdate(movies=["m1"])
        assert update.relation_changes(("movies",)) == {"movies": ["m1"]}
        assert update.scalar_changes(("movies",)) == {}

    @staticmethod
    def test_genre_has_no_image_field() -> None:
        with pytest.raises(ValidationError):
            GenreUpdate.model_validate({"photo_ref": "x-y.jpg"})


class TestSeedRecords:
    @staticmethod
    def test_camel_case_keys() -> None:
        movie = SeedMovie.model_validate(
            {
                "title": "Alien",
                "posterAssetName": "alienposter",
                "releaseYear": 1979,
                "actors": [{"name": "Sigourney Weaver", "posterAssetName": "weaver"}],
            }
        )
        assert movie.poster_asset_name == "alienposter"
        assert movie.release_year == 1979
        assert movie.actors[0].poster_asset_name == "weaver"

    @staticmethod
    def test_snake_case_keys() -> None:
        actor = SeedActor(name="Michael Biehn", poster_asset_name="biehn")
        assert actor.poster_asset_name == "biehn"

    @staticmethod
    def test_defaults() -> None:
        movie = SeedMovie.model_validate({"title": "Heat", "releaseYear": 1995})
        assert movie.rating == 0
        assert movie.summary == ""
        assert movie.genres == []
        assert movie.actors == []

    @staticmethod
    def test_missing_year_rejected() -> None:
        with pytest.raises(ValidationError):
            SeedMovie.model_validate({"title": "Heat"})

    @staticmethod
    def test_dataset_is_a_list() -> None:
        with pytest.raises(ValidationError):
            SEED_DATASET.validate_python({"title": "Heat", "releaseYear": 1995})

    @staticmethod
    def test_dataset_from_json() -> None:
        records = SEED_DATASET.validate_json(
            b'[{"title": "Aliens", "releaseYear": 1986, "genres": [{"name": "Action"}]}]'
        )
        assert records[0].genres[0].name == "Action"
