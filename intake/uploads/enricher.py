"""Caller-identity enrichment of accepted rows."""
from typing import List, Sequence

from intake.auth.models import CallerIdentity
from intake.logging_config import get_logger

from .models import Row

logger = get_logger(name=__name__)

# Labels of the appended identity columns, in output order
IDENTITY_LABELS = ("providerId", "team", "teamId", "locationId")


def label_header(columns: Sequence[str]) -> List[str]:
    """Output header: the file's columns followed by the identity labels."""
    return [*columns, *IDENTITY_LABELS]


def enrich(row: Row, caller: CallerIdentity) -> List[str]:
    """Return the row's values aligned to the header plus the caller's identity.

    Short rows are padded with empty strings so the identity values always
    land under their labels. Values past the header are dropped.
    """
    width = len(row.columns)
    values = list(row.values[:width])
    if len(row.values) > width:
        logger.warning(
            "Line {}: dropped {} value(s) beyond the {} header columns",
            row.line_number, len(row.values) - width, width,
        )
    values.extend([""] * (width - len(values)))
    values.extend(caller.identity_values())
    return values
