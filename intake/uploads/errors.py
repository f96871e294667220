"""Upload error taxonomy.

Every failure of the pipeline is an ``UploadError`` subclass with a stable
machine code and the HTTP status the API answers with.
"""
from typing import Any, Dict, Optional


class UploadError(Exception):
    """Base error rendered by the API exception handler."""

    code = "UPLOAD_ERROR"
    status = 400

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "status": self.status,
            "details": self.details,
        }


class MissingFile(UploadError):
    code = "MISSING_FILE"
    status = 400


class UpstreamUnavailable(UploadError):
    code = "UPSTREAM_UNAVAILABLE"
    status = 503


class NoAcceptableRows(UploadError):
    code = "NO_ACCEPTABLE_ROWS"
    status = 400


class InvalidUploadType(UploadError):
    code = "INVALID_UPLOAD_TYPE"
    status = 400


class SchemaMismatch(UploadError):
    code = "SCHEMA_MISMATCH"
    status = 422


class UnreadableFile(UploadError):
    code = "UNREADABLE_FILE"
    status = 400


class WriteFailure(UploadError):
    code = "WRITE_FAILURE"
    status = 500
