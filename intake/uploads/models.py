"""Domain types for the CSV upload pipeline."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Report field carrying the reason of a rejected row
REJECTION_REASON_FIELD = "rejectionReason"


class UploadType(str, Enum):
    """Business purpose of an uploaded file, taken from its name."""

    CLIENTS = "clients"
    CONTACTS = "contacts"
    RESULTS = "results"

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional["UploadType"]:
        """Parse ``<prefix>_<type>_<suffix>``; unknown types give None.

        Matching is exact (case-sensitive) on the second underscore-delimited
        segment of the base name; directory parts are ignored.
        """
        parts = Path(file_name).name.split("_")
        if len(parts) < 2:
            return None
        try:
            return cls(parts[1])
        except ValueError:
            return None


@dataclass(frozen=True)
class Row:
    """One data line of an uploaded CSV, with the file's column names."""

    line_number: int
    values: Tuple[str, ...]
    columns: Tuple[str, ...]

    def value_at(self, position: int) -> str:
        if position < len(self.values):
            return self.values[position]
        return ""

    def as_dict(self) -> Dict[str, str]:
        """Map values to column names.

        Values past the header are keyed ``_<index>``; a repeated column name
        gets an ``_<index>`` suffix so no value is lost.
        """
        entry: Dict[str, str] = {}
        for i, value in enumerate(self.values):
            name = self.columns[i] if i < len(self.columns) else f"_{i}"
            if name in entry:
                name = f"{name}_{i}"
            entry[name] = value
        return entry


@dataclass(frozen=True)
class Outcome:
    accepted: bool
    reason: Optional[str] = None

    @classmethod
    def accept(cls) -> "Outcome":
        return ACCEPTED

    @classmethod
    def reject(cls, reason: str) -> "Outcome":
        return cls(accepted=False, reason=reason)


ACCEPTED = Outcome(accepted=True)


@dataclass(frozen=True)
class ClassifiedRow:
    row: Row
    outcome: Outcome

    def to_report_entry(self) -> Dict[str, str]:
        """Row fields plus ``rejectionReason`` (rejected rows only)."""
        entry = self.row.as_dict()
        if not self.outcome.accepted:
            entry[REJECTION_REASON_FIELD] = self.outcome.reason or ""
        return entry


@dataclass
class PipelineBuffers:
    """In-memory result of one streamed pass over an upload."""

    header: List[str] = field(default_factory=list)
    accepted: List[List[str]] = field(default_factory=list)
    rejected: List[ClassifiedRow] = field(default_factory=list)
    rows_read: int = 0


@dataclass
class UploadReport:
    """Outcome of a processed upload as returned to the caller."""

    file_name: str
    upload_type: Optional[UploadType]
    accepted_count: int
    rejected: bool
    rejected_rows: List[Dict[str, str]] = field(default_factory=list)
    output_path: Optional[Path] = None

    @property
    def message(self) -> str:
        return "File uploaded, processed, and saved successfully!"

