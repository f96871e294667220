"""Row classification against the reference set.

Clients files must not repeat an identifier that is already known; contacts
and results files must point at a known index client. The column holding
the identifier is configured per upload type, either by column name or by
zero-based position, and is checked against the file header before the
first row is classified.
"""
from dataclasses import dataclass
from typing import AbstractSet, Dict, Mapping, Optional, Sequence, Union

from intake.logging_config import get_logger
from intake.settings import Settings

from .errors import SchemaMismatch
from .models import Outcome, Row, UploadType

logger = get_logger(name=__name__)

ColumnRef = Union[int, str]

DUPLICATE_IDENTIFIER_REASON = "Duplicate identifier in clients file"
NO_MATCH_REASON = "No matching index client identifier in {upload_type} file"


def parse_column_ref(raw: str) -> ColumnRef:
    """Digits select a position, anything else a column name."""
    value = raw.strip()
    if value.isdigit():
        return int(value)
    return value


def column_roles_from_settings(settings: Settings) -> Dict[UploadType, ColumnRef]:
    return {
        UploadType(name): parse_column_ref(raw)
        for name, raw in settings.column_roles.items()
    }


def resolve_key_position(column: ColumnRef, columns: Sequence[str], upload_type: UploadType) -> int:
    """Validate a column reference against the header and return its position."""
    if isinstance(column, int):
        if column >= len(columns):
            raise SchemaMismatch(
                f"{upload_type.value} files need at least {column + 1} columns, got {len(columns)}",
                details={"upload_type": upload_type.value, "column": column, "columns": list(columns)},
            )
        return column

    if column not in columns:
        raise SchemaMismatch(
            f"{upload_type.value} files must contain a '{column}' column",
            details={"upload_type": upload_type.value, "column": column, "columns": list(columns)},
        )
    return list(columns).index(column)


def classify(
    upload_type: Optional[UploadType],
    row: Row,
    reference_set: AbstractSet[str],
    key_position: int,
) -> Outcome:
    """Accept or reject one row; pure and idempotent."""
    if upload_type is UploadType.CLIENTS:
        if row.value_at(key_position) in reference_set:
            return Outcome.reject(DUPLICATE_IDENTIFIER_REASON)
    elif upload_type in (UploadType.CONTACTS, UploadType.RESULTS):
        if row.value_at(key_position) not in reference_set:
            return Outcome.reject(NO_MATCH_REASON.format(upload_type=upload_type.value))
    return Outcome.accept()


@dataclass(frozen=True)
class RowClassifier:
    """Classifier bound to one upload's type, header and reference set."""

    upload_type: Optional[UploadType]
    reference_set: AbstractSet[str]
    key_position: int = 0

    @classmethod
    def for_header(
        cls,
        upload_type: Optional[UploadType],
        columns: Sequence[str],
        reference_set: AbstractSet[str],
        roles: Mapping[UploadType, ColumnRef],
    ) -> "RowClassifier":
        if upload_type is None:
            # Unknown types accept every row; the type is rejected at write time.
            return cls(upload_type=None, reference_set=reference_set)

        column = roles.get(upload_type)
        if column is None:
            raise SchemaMismatch(
                f"No identifier column configured for {upload_type.value} files",
                details={"upload_type": upload_type.value},
            )
        position = resolve_key_position(column, columns, upload_type)
        logger.debug(
            "Classifying {} rows on column {} ({})",
            upload_type.value, position, columns[position],
        )
        return cls(upload_type=upload_type, reference_set=reference_set, key_position=position)

    def classify(self, row: Row) -> Outcome:
        return classify(self.upload_type, row, self.reference_set, self.key_position)
