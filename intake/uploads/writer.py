"""Write accepted rows back out as a fully quoted CSV file."""
import csv
import os
import tempfile
from pathlib import Path
from typing import Sequence

from intake.logging_config import get_logger

from .errors import NoAcceptableRows, WriteFailure

logger = get_logger(name=__name__)


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# Output mode follows the process umask (mkstemp alone gives 0600).
# Read once at import: os.umask is process-wide.
OUTPUT_FILE_MODE = _default_file_mode()


def write_rows(target_path: Path, header: Sequence[str], rows: Sequence[Sequence[str]]) -> int:
    """Write ``header`` then ``rows`` to ``target_path`` with every value quoted.

    The file is written to a temporary sibling and renamed into place, so
    readers never see a partial file. Returns the number of data rows.
    """
    if not rows:
        raise NoAcceptableRows("All rows were rejected.")

    target_path = Path(target_path)
    tmp_name = None
    try:
        target_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target_path.name}.",
            suffix=".tmp",
            dir=target_path.parent,
        )
        with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
            writer.writerow(header)
            writer.writerows(rows)
        os.chmod(tmp_name, OUTPUT_FILE_MODE)
        os.replace(tmp_name, target_path)
        tmp_name = None
    except OSError as exc:
        logger.exception("Failed to write {}", target_path)
        raise WriteFailure(
            "Failed to save processed file",
            details={"path": str(target_path), "reason": str(exc)},
        ) from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.info("Wrote {} rows to {}", len(rows), target_path)
    return len(rows)
