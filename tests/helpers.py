"""
tests/helpers.py

Builders for CSV uploads, caller tokens and a fake reference service.
"""

from __future__ import annotations

import csv
import io
from typing import Iterable, Optional, Sequence

import httpx
import jwt

TEST_JWT_SECRET = "intake-test-secret-0123456789abcdef"

CLIENTS_HEADER = ["ctc_number", "first_name", "last_name", "sex", "age"]

# Index client CTC number is the 13th column (position 12)
CONTACTS_HEADER = [
    "contact_id",
    "first_name",
    "last_name",
    "sex",
    "age",
    "phone",
    "relationship",
    "village",
    "ward",
    "district",
    "region",
    "elicitation_number",
    "index_ctc_number",
]

CALLER_CLAIMS = {
    "providerId": "PRV-17",
    "team": "Mbeya CTC",
    "teamId": 42,
    "locationId": "LOC-9",
}


def csv_bytes(header: Optional[Sequence[str]], rows: Iterable[Sequence[str]] = ()) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if header is not None:
        writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def contact_row(contact_id: str, index_ctc_number: str) -> list[str]:
    return [
        contact_id, "Asha", "Juma", "F", "31", "0755000000", "spouse",
        "Iyunga", "Iyela", "Mbeya", "Mbeya", f"EL-{contact_id}", index_ctc_number,
    ]


def make_token(data: Optional[dict] = None, secret: str = TEST_JWT_SECRET, **claims) -> str:
    payload = {"data": CALLER_CLAIMS if data is None else data, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(token: Optional[str] = None) -> dict:
    return {"Authorization": f"Bearer {token or make_token()}"}


class FakeReferenceService:
    """httpx transport answering the uploaded-CTC-numbers lookup."""

    def __init__(
        self,
        identifiers: Iterable[str] = (),
        *,
        status_code: int = 200,
        content: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.identifiers = list(identifiers)
        self.status_code = status_code
        self.content = content
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(
            self.status_code,
            json=[{"ctc_number": value} for value in self.identifiers],
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
