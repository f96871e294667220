"""Lazy CSV row stream over an uploaded file object."""
import csv
import io
from typing import BinaryIO, Iterator, Tuple

from intake.logging_config import get_logger

from .errors import UnreadableFile
from .models import Row

logger = get_logger(name=__name__)


def _has_content(values) -> bool:
    return any(value.strip() for value in values)


class CsvRowStream:
    """Single-pass reader: the first line is the header, the rest are rows.

    Rows are produced one at a time from the underlying binary stream and
    cannot be replayed. Blank lines are skipped, including any before the
    header. The binary stream stays owned by the caller; closing this
    reader only detaches from it.
    """

    def __init__(self, binary: BinaryIO, encoding: str = "utf-8-sig") -> None:
        self._text = io.TextIOWrapper(binary, encoding=encoding, newline="")
        self._reader = csv.reader(self._text)
        self._consumed = False
        self.columns: Tuple[str, ...] = tuple(self._first_record() or ())

    def _first_record(self):
        """First non-blank record; leading blank lines are not a header."""
        while True:
            values = self._next_record()
            if values is None or _has_content(values):
                return values

    def _next_record(self):
        try:
            return next(self._reader, None)
        except UnicodeDecodeError as exc:
            raise UnreadableFile(
                "Uploaded file is not valid text",
                details={"line": self._reader.line_num + 1, "reason": str(exc)},
            ) from exc
        except csv.Error as exc:
            raise UnreadableFile(
                "Uploaded file is not a readable CSV",
                details={"line": self._reader.line_num, "reason": str(exc)},
            ) from exc

    def __iter__(self) -> Iterator[Row]:
        if self._consumed:
            return
        self._consumed = True
        while True:
            values = self._next_record()
            if values is None:
                return
            if not _has_content(values):
                continue
            yield Row(
                line_number=self._reader.line_num,
                values=tuple(values),
                columns=self.columns,
            )

    def close(self) -> None:
        try:
            self._text.detach()
        except ValueError:
            pass  # already detached

    def __enter__(self) -> "CsvRowStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
