"""Health check and system status endpoints."""
import os
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from intake.logging_config import get_logger
from intake.settings import UPLOAD_DIRECTORIES, get_settings
from intake.uploads.dependencies import get_reference_fetcher
from intake.uploads.errors import UpstreamUnavailable
from intake.uploads.reference_gateway import ReferenceSetFetcher

logger = get_logger(name=__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class ReferenceServiceStatus(BaseModel):
    reachable: bool
    url: str
    identifiers: Optional[int] = None


class UploadDirectoryStatus(BaseModel):
    upload_type: str
    path: str
    writable: bool


class HealthResponse(BaseModel):
    status: str  # "healthy" or "unhealthy"
    reference_service: ReferenceServiceStatus
    upload_directories: List[UploadDirectoryStatus]


@router.get("", response_model=HealthResponse)
async def health_check(fetcher: ReferenceSetFetcher = Depends(get_reference_fetcher)):
    """Check the reference lookup service and the upload directories."""
    reference_status = ReferenceServiceStatus(reachable=False, url=fetcher.url)
    try:
        identifiers = await fetcher.fetch_known_identifiers()
        reference_status = ReferenceServiceStatus(
            reachable=True,
            url=fetcher.url,
            identifiers=len(identifiers),
        )
    except UpstreamUnavailable as e:
        logger.warning("Reference service unavailable: {}", e.message)

    root = get_settings().uploads_root
    directories = []
    for upload_type, name in UPLOAD_DIRECTORIES.items():
        path = root / name
        directories.append(UploadDirectoryStatus(
            upload_type=upload_type,
            path=str(path),
            writable=path.is_dir() and os.access(path, os.W_OK),
        ))

    healthy = reference_status.reachable and all(d.writable for d in directories)

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        reference_service=reference_status,
        upload_directories=directories,
    )
