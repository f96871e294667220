"""Storage locations for accepted upload rows.

Directory structure:

UPLOADS_ROOT/
├── index_uploads/      clients files
├── contacts_uploads/   contacts files
└── results_uploads/    results files

Each processed file keeps its original name inside its type directory.
"""
from pathlib import Path
from typing import Optional

from intake.settings import UPLOAD_DIRECTORIES, get_settings

from .errors import InvalidUploadType
from .models import UploadType


def get_uploads_root() -> Path:
    return get_settings().uploads_root


def get_upload_directory(upload_type: Optional[UploadType], root: Optional[Path] = None) -> Path:
    """Directory for an upload type; unknown or missing types are fatal."""
    directory = UPLOAD_DIRECTORIES.get(upload_type.value) if upload_type else None
    if directory is None:
        raise InvalidUploadType(
            f"Invalid upload type: {upload_type.value if upload_type else None}",
            details={"allowed": sorted(UPLOAD_DIRECTORIES)},
        )
    return (root or get_uploads_root()) / directory


def get_target_path(upload_type: Optional[UploadType], file_name: str, root: Optional[Path] = None) -> Path:
    """Output path for an upload; only the base name of ``file_name`` is used."""
    base_name = Path(file_name).name
    if not base_name:
        raise InvalidUploadType("Upload file name is empty", details={"file_name": file_name})
    return get_upload_directory(upload_type, root) / base_name
