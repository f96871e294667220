"""CSV upload pipeline.

Submodules:
    reference_gateway: fetches known identifiers from the lookup service
    classifier: accepts or rejects rows against the reference set
    enricher: stamps accepted rows with the caller's identity
    writer: writes accepted rows to a fully quoted CSV
    service: orchestrates one upload end to end
    api: FastAPI router
"""
from .errors import (
    InvalidUploadType,
    MissingFile,
    NoAcceptableRows,
    SchemaMismatch,
    UnreadableFile,
    UploadError,
    UpstreamUnavailable,
    WriteFailure,
)
from .models import UploadReport, UploadType
from .service import handle_upload

__all__ = [
    "handle_upload",
    "UploadReport",
    "UploadType",
    "UploadError",
    "MissingFile",
    "UpstreamUnavailable",
    "NoAcceptableRows",
    "InvalidUploadType",
    "SchemaMismatch",
    "UnreadableFile",
    "WriteFailure",
]
