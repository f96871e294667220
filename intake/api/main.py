from fastapi import APIRouter

from intake.uploads.api import router as uploads_router
from . import health

api_router = APIRouter()

api_router.include_router(uploads_router)
api_router.include_router(health.router)
