"""Unified settings for the intake service.

Values come from the environment (prefix ``INTAKE_``) or the ``.env`` file
next to this package. Only the JWT secret is mandatory; a missing secret
raises at startup.
"""

from pathlib import Path
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Package directory (for .env file location)
_PACKAGE_DIR = Path(__file__).resolve().parent

# Output directory per upload type
UPLOAD_DIRECTORIES = {
    "clients": "index_uploads",
    "contacts": "contacts_uploads",
    "results": "results_uploads",
}


def _split_csv(value: str) -> List[str]:
    """Split comma-separated string into list."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """All settings loaded from environment / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="INTAKE_",
        env_file=_PACKAGE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Auth (token decoding only) - secret REQUIRED ===
    jwt_secret: str = Field(description="Shared secret used to verify caller tokens")
    jwt_algorithms: str = Field(
        default="HS256",
        description="Comma-separated accepted JWT algorithms",
    )

    # === Reference service (deduplication lookup) ===
    reference_service_url: str = Field(
        default="http://localhost:8090",
        description="Base URL of the uploaded-CTC-numbers lookup service",
    )
    reference_service_path: str = Field(
        default="/get-uploaded-ctc-numbers",
        description="Path returning the JSON array of known identifiers",
    )
    reference_identifier_field: str = Field(
        default="ctc_number",
        description="Key holding the identifier in each returned object",
    )
    reference_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for the reference lookup",
        gt=0,
    )

    # === Column roles (column name or zero-based position) ===
    clients_identifier_column: str = Field(
        default="0",
        description="Identifier column checked for duplicates in clients files",
    )
    contacts_cross_reference_column: str = Field(
        default="12",
        description="Index client column that must be known in contacts files",
    )
    results_cross_reference_column: str = Field(
        default="12",
        description="Index client column that must be known in results files",
    )

    # === Report ===
    drop_first_rejected_row: bool = Field(
        default=False,
        description="Legacy: omit the first rejected row from the upload report",
    )

    # === Paths ===
    uploads_root: Path = Field(
        default=_PACKAGE_DIR.parent / "public",
        description="Base directory holding the per-type upload directories",
    )
    csv_encoding: str = Field(default="utf-8-sig", description="Encoding of uploaded CSV files")

    # === Server ===
    allowed_origins: str = Field(default="*", description="Comma-separated CORS origins")
    uvicorn_host: str = Field(default="0.0.0.0", description="Server host")
    uvicorn_port: int = Field(default=8000, description="Server port")

    # === Validators ===
    @field_validator("uploads_root", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        if v is None or v == "":
            raise ValueError("INTAKE_UPLOADS_ROOT must not be empty")
        return Path(v)

    @field_validator("jwt_secret")
    @classmethod
    def require_secret(cls, v: str) -> str:
        if not v:
            raise ValueError("INTAKE_JWT_SECRET must be specified")
        return v

    # === Computed Properties ===
    @property
    def reference_url(self) -> str:
        path = self.reference_service_path
        normalized = path if path.startswith("/") else f"/{path}"
        return f"{self.reference_service_url.rstrip('/')}{normalized}"

    @property
    def jwt_algorithms_list(self) -> List[str]:
        return _split_csv(self.jwt_algorithms)

    @property
    def allowed_origins_list(self) -> List[str]:
        return _split_csv(self.allowed_origins)

    @property
    def column_roles(self) -> dict:
        """Raw column reference configured for each upload type."""
        return {
            "clients": self.clients_identifier_column,
            "contacts": self.contacts_cross_reference_column,
            "results": self.results_cross_reference_column,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings singleton.

    Creates the upload directories on first call.
    """
    settings = Settings()

    for directory in UPLOAD_DIRECTORIES.values():
        (settings.uploads_root / directory).mkdir(parents=True, exist_ok=True)

    return settings
