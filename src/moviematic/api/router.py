"""Main API router aggregation."""

from fastapi import APIRouter

from moviematic.api.auth import router as auth_router
from moviematic.api.homepage_sections import router as homepage_sections_router
from moviematic.api.movies import router as movies_router
from moviematic.api.reviews import router as reviews_router
from moviematic.api.streaming_services import router as streaming_services_router
from moviematic.api.watchlist import router as watchlist_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(movies_router)
api_router.include_router(reviews_router)
api_router.include_router(watchlist_router)
api_router.include_router(streaming_services_router)
api_router.include_router(homepage_sections_router)
