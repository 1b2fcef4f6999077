"""Homepage section API endpoints."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from moviematic.database import get_db
from moviematic.exceptions import NotFoundError
from moviematic.models.homepage_section import HomepageSection
from moviematic.models.movie import Movie
from moviematic.schemas.homepage_section import (
    AvailableMovie,
    HomepageSectionCreate,
    HomepageSectionResponse,
    HomepageSectionUpdate,
)
from moviematic.schemas.movie import MovieResponse
from moviematic.services.integrity import validate_movie_references
from moviematic.utils.security import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/homepage-sections", tags=["homepage-sections"])


def section_to_response(section: HomepageSection, movies: dict[int, Movie]) -> HomepageSectionResponse:
    """Convert a section, resolving its movie ids in display order.

    Ids whose movie has since been deleted are left out of ``movies``.
    """
    return HomepageSectionResponse(
        id=section.id,
        title=section.title,
        movie_ids=section.movie_ids,
        order=section.order,
        is_active=section.is_active,
        created_at=section.created_at,
        updated_at=section.updated_at,
        movies=[
            MovieResponse.model_validate(movies[movie_id])
            for movie_id in section.movie_ids
            if movie_id in movies
        ],
    )


async def sections_to_response(
    db: AsyncSession, sections: Sequence[HomepageSection]
) -> list[HomepageSectionResponse]:
    ids = {movie_id for section in sections for movie_id in section.movie_ids}
    movies: dict[int, Movie] = {}
    if ids:
        result = await db.execute(select(Movie).where(Movie.id.in_(ids)))
        movies = {movie.id: movie for movie in result.scalars().all()}
    return [section_to_response(section, movies) for section in sections]


async def get_section(db: AsyncSession, section_id: int) -> HomepageSection:
    result = await db.execute(select(HomepageSection).where(HomepageSection.id == section_id))
    section = result.scalar_one_or_none()
    if section is None:
        raise NotFoundError("Homepage section not found", code="SECTION_NOT_FOUND")
    return section


def ordered(query: Select) -> Select:
    return query.order_by(HomepageSection.order, HomepageSection.created_at, HomepageSection.id)


@router.get("", response_model=list[HomepageSectionResponse])
async def list_active_sections(db: AsyncSession = Depends(get_db)) -> list[HomepageSectionResponse]:
    """Active sections in display order with their movies."""
    query = ordered(select(HomepageSection).where(HomepageSection.is_active.is_(True)))
    result = await db.execute(query)
    return await sections_to_response(db, result.scalars().all())


@router.get("/admin", response_model=list[HomepageSectionResponse])
async def list_all_sections(
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> list[HomepageSectionResponse]:
    """Every section, inactive ones included. Admin only."""
    result = await db.execute(ordered(select(HomepageSection)))
    return await sections_to_response(db, result.scalars().all())


@router.get("/movies/available", response_model=list[AvailableMovie])
async def list_available_movies(
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> list[AvailableMovie]:
    """Movies that can be placed in a section, sorted by title. Admin only."""
    result = await db.execute(select(Movie).order_by(Movie.title, Movie.id))
    return [AvailableMovie.model_validate(movie) for movie in result.scalars().all()]


@router.post("", response_model=HomepageSectionResponse, status_code=201)
async def create_section(
    admin: AdminUser,
    section_data: HomepageSectionCreate,
    db: AsyncSession = Depends(get_db),
) -> HomepageSectionResponse:
    """Create a homepage section. Admin only.

    Raises:
        InvalidMovieReferenceError (400): If any movie id does not exist;
            nothing is stored
    """
    movies = await validate_movie_references(db, section_data.movie_ids)

    now = datetime.now(UTC)
    section = HomepageSection(**section_data.model_dump(), created_at=now, updated_at=now)
    db.add(section)
    await db.flush()

    logger.info("Admin %s created homepage section %s (%s)", admin.id, section.id, section.title)
    return section_to_response(section, {movie.id: movie for movie in movies})


@router.put("/{section_id}", response_model=HomepageSectionResponse)
async def update_section(
    section_id: int,
    admin: AdminUser,
    section_data: HomepageSectionUpdate,
    db: AsyncSession = Depends(get_db),
) -> HomepageSectionResponse:
    """Update a homepage section. Admin only.

    A new movie_ids list is validated the same way as on creation.

    Raises:
        NotFoundError (404): If the section does not exist
        InvalidMovieReferenceError (400): If any movie id does not exist
    """
    section = await get_section(db, section_id)

    changes = section_data.model_dump(exclude_unset=True)
    if "movie_ids" in changes:
        await validate_movie_references(db, changes["movie_ids"])

    for field, value in changes.items():
        setattr(section, field, value)
    section.updated_at = datetime.now(UTC)
    await db.flush()

    return (await sections_to_response(db, [section]))[0]


@router.delete("/{section_id}", status_code=204)
async def delete_section(
    section_id: int,
    admin: AdminUser,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a homepage section. Admin only."""
    section = await get_section(db, section_id)
    await db.delete(section)
    await db.flush()
    logger.info("Admin %s deleted homepage section %s", admin.id, section_id)
