"""API routers for the upload pipeline."""

from .router import router

__all__ = ["router"]
