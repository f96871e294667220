"""HTTP gateway for the uploaded-identifier lookup service."""

from __future__ import annotations

from typing import FrozenSet, Optional

import httpx
import orjson

from intake.logging_config import get_logger
from intake.settings import Settings

from .errors import UpstreamUnavailable

logger = get_logger(name=__name__)


def _truncate(value: str, max_len: int = 500) -> str:
    if len(value) <= max_len:
        return value
    return f"{value[:max_len]}..."


class ReferenceSetFetcher:
    """Fetches the set of already known identifiers (CTC numbers).

    The lookup answers with a JSON array of objects, each holding the
    identifier under ``identifier_field``. Any failure raises
    ``UpstreamUnavailable``; there is no retry and no cached fallback.
    """

    def __init__(
        self,
        url: str,
        *,
        identifier_field: str = "ctc_number",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.identifier_field = identifier_field
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ReferenceSetFetcher":
        return cls(
            settings.reference_url,
            identifier_field=settings.reference_identifier_field,
            timeout_seconds=settings.reference_timeout_seconds,
            **kwargs,
        )

    async def fetch_known_identifiers(self) -> FrozenSet[str]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.get(self.url)
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(
                "Deduplication checker timed out. Retry later!",
                details={"timeout_seconds": self.timeout_seconds},
            ) from exc
        except httpx.RequestError as exc:
            raise UpstreamUnavailable(
                "Deduplication checker unavailable. Retry later!",
                details={"reason": str(exc)},
            ) from exc

        if not response.is_success:
            logger.error(
                "Reference lookup failed ({}): {}",
                response.status_code,
                _truncate(response.text or ""),
            )
            raise UpstreamUnavailable(
                "Deduplication checker unavailable. Retry later!",
                details={"upstream_status": response.status_code, "upstream_url": self.url},
            )

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            raise UpstreamUnavailable(
                "Deduplication checker returned invalid JSON",
                details={"upstream_url": self.url},
            ) from exc

        if not isinstance(payload, list):
            raise UpstreamUnavailable(
                "Deduplication checker returned an unexpected payload shape",
                details={"payload_type": type(payload).__name__},
            )

        identifiers = set()
        skipped = 0
        for item in payload:
            value = item.get(self.identifier_field) if isinstance(item, dict) else None
            if value is None:
                skipped += 1
                continue
            identifiers.add(str(value))

        if skipped:
            logger.warning("Ignored {} reference entries without '{}'", skipped, self.identifier_field)
        logger.info("Fetched {} known identifiers from {}", len(identifiers), self.url)
        return frozenset(identifiers)
