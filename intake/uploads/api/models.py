"""Response models for the upload API."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    """Response for the root probe."""
    token: Optional[str] = None
    authenticated: bool
    message: str


class UploadResponse(BaseModel):
    """Response for a processed upload."""
    token: Optional[str] = None
    authenticated: bool = True
    message: str
    acceptedCount: int
    rejected: bool
    rejectedRows: List[Dict[str, str]] = Field(default_factory=list)


class UploadErrorResponse(BaseModel):
    """Error body for a failed upload."""
    token: Optional[str] = None
    authenticated: bool = True
    code: str
    message: str
    status: int
    details: Dict[str, Any] = Field(default_factory=dict)
