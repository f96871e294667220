"""Upload API endpoints."""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from intake.auth.dependencies import optional_caller, require_caller
from intake.auth.models import CallerIdentity

from ..dependencies import get_reference_fetcher
from ..reference_gateway import ReferenceSetFetcher
from ..service import handle_upload
from .models import RootResponse, UploadErrorResponse, UploadResponse


router = APIRouter(tags=["Uploads"])

_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": UploadErrorResponse},
    422: {"model": UploadErrorResponse},
    500: {"model": UploadErrorResponse},
    503: {"model": UploadErrorResponse},
}


@router.get("/", response_model=RootResponse)
async def root(caller: Optional[CallerIdentity] = Depends(optional_caller)):
    """Root probe reporting whether the request carries a valid token."""
    return RootResponse(authenticated=caller is not None, message="Root path reached")


@router.post("/upload", status_code=201, response_model=UploadResponse, responses=_ERROR_RESPONSES)
async def upload_file(
    file: Optional[UploadFile] = File(default=None),
    caller: CallerIdentity = Depends(require_caller),
    fetcher: ReferenceSetFetcher = Depends(get_reference_fetcher),
):
    """
    Upload a clients, contacts or results CSV.

    - **file**: CSV named `<prefix>_<clients|contacts|results>_<suffix>.csv`

    Accepted rows are stamped with the caller's provider, team and location
    and saved under the type's upload directory; rejected rows are returned
    with their rejection reason.
    """
    try:
        report = await handle_upload(
            file.file if file else None,
            file.filename if file else None,
            caller,
            fetcher=fetcher,
        )
    finally:
        if file is not None:
            await file.close()

    return UploadResponse(
        message=report.message,
        acceptedCount=report.accepted_count,
        rejected=report.rejected,
        rejectedRows=report.rejected_rows,
    )
