"""Tests for movie filtering and sorting."""

from dataclasses import dataclass, field
from datetime import datetime

import pytest

from moviematic.models import Genre
from moviematic.services.search import MovieFilters, MovieSort, filter_movies, sort_movies


@dataclass
class FakeMovie:
    title: str
    director: str = "Someone"
    description: str = "Something happens."
    cast: list[str] = field(default_factory=list)
    genre: list[str] = field(default_factory=lambda: ["Drama"])
    release_year: int = 2000
    rating: float = 5.0
    created_at: datetime = datetime(2024, 1, 1)


MOVIES = [
    FakeMovie("Star Wars", rating=8.6, release_year=1977, genre=["Sci-Fi"]),
    FakeMovie("All Stars", rating=4.0, release_year=2012, genre=["Comedy"]),
    FakeMovie("Galaxy", rating=6.5, release_year=2012, genre=["Sci-Fi", "Drama"]),
]


class TestFilters:
    """Tests for MovieFilters."""

    def test_text_query_is_case_insensitive_substring(self) -> None:
        result = filter_movies(MOVIES, MovieFilters(q="star"))

        assert [m.title for m in result] == ["Star Wars", "All Stars"]

    def test_text_query_checks_director_description_and_cast(self) -> None:
        movie = FakeMovie(
            "Untitled", director="Ridley Scott", description="Crew meets alien.", cast=["Ian Holm"]
        )

        assert MovieFilters(q="scott").matches(movie)
        assert MovieFilters(q="ALIEN").matches(movie)
        assert MovieFilters(q="holm").matches(movie)
        assert not MovieFilters(q="kubrick").matches(movie)

    def test_blank_query_is_ignored(self) -> None:
        assert MovieFilters(q="  ").q is None
        assert len(filter_movies(MOVIES, MovieFilters(q=""))) == 3

    def test_filters_combine_with_and(self) -> None:
        filters = MovieFilters(genre=Genre.SCI_FI, year=2012, min_rating=6)

        assert [m.title for m in filter_movies(MOVIES, filters)] == ["Galaxy"]

    def test_genre_is_exact_membership(self) -> None:
        musical = FakeMovie("Cabaret", genre=["Musical"])

        assert not MovieFilters(genre=Genre.MUSIC).matches(musical)
        assert MovieFilters(genre=Genre.MUSICAL).matches(musical)

    def test_min_rating_is_inclusive(self) -> None:
        assert MovieFilters(min_rating=6.5).matches(MOVIES[2])

    def test_no_filters_match_everything(self) -> None:
        assert filter_movies(MOVIES, MovieFilters()) == MOVIES


class TestSorting:
    """Tests for sort orders."""

    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            (MovieSort.TITLE_ASC, ["All Stars", "Galaxy", "Star Wars"]),
            (MovieSort.TITLE_DESC, ["Star Wars", "Galaxy", "All Stars"]),
            (MovieSort.RATING_DESC, ["Star Wars", "Galaxy", "All Stars"]),
            (MovieSort.RATING_ASC, ["All Stars", "Galaxy", "Star Wars"]),
            (MovieSort.YEAR_ASC, ["Star Wars", "All Stars", "Galaxy"]),
        ],
    )
    def test_sort_orders(self, sort: MovieSort, expected: list[str]) -> None:
        assert [m.title for m in sort_movies(MOVIES, sort)] == expected

    def test_ties_keep_input_order(self) -> None:
        result = sort_movies(MOVIES, MovieSort.YEAR_DESC)

        assert [m.title for m in result] == ["All Stars", "Galaxy", "Star Wars"]

    def test_newest_uses_creation_time(self) -> None:
        old = FakeMovie("Old", created_at=datetime(2020, 1, 1))
        new = FakeMovie("New", created_at=datetime(2025, 1, 1))

        assert [m.title for m in sort_movies([old, new])] == ["New", "Old"]
        assert [m.title for m in sort_movies([new, old], MovieSort.OLDEST)] == ["Old", "New"]
