"""Movie search: filtering and sort orders.

Filters combine with AND across dimensions. The text query matches with OR
across title, director, description and cast. Sorting is stable, so movies
that compare equal keep their natural (insertion) order.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.models.movie import Movie


class MovieSort(StrEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"
    RATING_DESC = "rating-desc"
    RATING_ASC = "rating-asc"
    YEAR_DESC = "year-desc"
    YEAR_ASC = "year-asc"


# sort option -> (key, descending)
_SORT_KEYS: dict[MovieSort, tuple[Callable[[Any], Any], bool]] = {
    MovieSort.NEWEST: (lambda m: m.created_at, True),
    MovieSort.OLDEST: (lambda m: m.created_at, False),
    MovieSort.TITLE_ASC: (lambda m: m.title.casefold(), False),
    MovieSort.TITLE_DESC: (lambda m: m.title.casefold(), True),
    MovieSort.RATING_DESC: (lambda m: m.rating or 0, True),
    MovieSort.RATING_ASC: (lambda m: m.rating or 0, False),
    MovieSort.YEAR_DESC: (lambda m: m.release_year, True),
    MovieSort.YEAR_ASC: (lambda m: m.release_year, False),
}


@dataclass(frozen=True)
class MovieFilters:
    """Optional search criteria; ``None`` means the dimension is not filtered."""

    q: str | None = None
    genre: str | None = None
    year: int | None = None
    min_rating: float | None = None

    def __post_init__(self) -> None:
        # A blank query string does not filter anything
        if self.q is not None and not self.q.strip():
            object.__setattr__(self, "q", None)

    def matches_text(self, movie: Any) -> bool:
        if self.q is None:
            return True
        needle = self.q.strip().casefold()
        fields = [movie.title, movie.director, movie.description, *(movie.cast or [])]
        return any(needle in (value or "").casefold() for value in fields)

    def matches(self, movie: Any) -> bool:
        """True if the movie satisfies every supplied filter."""
        if not self.matches_text(movie):
            return False
        if self.genre is not None and self.genre not in (movie.genre or []):
            return False
        if self.year is not None and movie.release_year != self.year:
            return False
        if self.min_rating is not None and (movie.rating or 0) < self.min_rating:
            return False
        return True


def filter_movies(movies: Iterable[Any], filters: MovieFilters) -> list[Any]:
    return [movie for movie in movies if filters.matches(movie)]


def sort_movies(movies: Iterable[Any], sort: MovieSort = MovieSort.NEWEST) -> list[Any]:
    """Return movies in the requested order; ties keep their input order."""
    key, descending = _SORT_KEYS[sort]
    return sorted(movies, key=key, reverse=descending)


async def search_movies(
    db: AsyncSession,
    filters: MovieFilters | None = None,
    sort: MovieSort = MovieSort.NEWEST,
) -> Sequence[Movie]:
    """Find movies matching all filters, in the requested order."""
    filters = filters or MovieFilters()

    # Year and rating narrow the scan in SQL; text and genre run on the rows
    query = select(Movie).order_by(Movie.id)
    if filters.year is not None:
        query = query.where(Movie.release_year == filters.year)
    if filters.min_rating is not None:
        query = query.where(Movie.rating >= filters.min_rating)

    result = await db.execute(query)
    movies = filter_movies(result.scalars().all(), filters)
    return sort_movies(movies, sort)


async def list_genres(db: AsyncSession) -> list[str]:
    """Distinct genres used by at least one movie, alphabetically."""
    result = await db.execute(select(Movie.genre))
    genres: set[str] = set()
    for (movie_genres,) in result.all():
        genres.update(movie_genres or [])
    return sorted(genres)
