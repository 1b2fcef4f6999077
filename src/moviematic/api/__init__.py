"""API routers."""

from moviematic.api.router import api_router

__all__ = ["api_router"]
