"""
Infrastructure Gateway - History Source Implementation

This module implements the history source gateway, fetching the event
history over HTTP and normalising it into domain events.
"""

from typing import Any, List, Optional

import httpx
import structlog

from ensemble_forecaster.domain.entities.errors import (
    HistorySourceError,
    HistorySourcePayloadError,
)
from ensemble_forecaster.domain.entities.event import Event
from ensemble_forecaster.domain.gateways.history_source_gateway import (
    IHistorySourceGateway,
)
from ensemble_forecaster.infrastructure.gateways.record_normalizer import (
    normalize_records,
)

logger = structlog.get_logger(__name__)

WRAPPER_KEYS = ("data", "history", "items", "results")


class HttpHistorySourceGateway(IHistorySourceGateway):
    """Implementation of history source gateway using HTTP client."""

    def __init__(self, default_url: str, timeout: float = 8.0):
        """
        Initialize history source gateway.

        Args:
            default_url: History feed used when a request names no source
            timeout: Request timeout in seconds
        """
        self.default_url = default_url
        self.timeout = timeout

    async def fetch_events(
        self, source_url: Optional[str] = None, timeout: Optional[float] = None
    ) -> List[Event]:
        """Fetch the history feed and normalise its records."""
        url = source_url or self.default_url
        if not url:
            raise HistorySourceError("No history source configured")

        logger.info("history_source.fetch", url=url)

        try:
            async with httpx.AsyncClient(timeout=timeout or self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                payload = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                "history_source.http_error",
                status_code=e.response.status_code,
                url=url,
            )
            raise HistorySourceError(
                f"History source HTTP error {e.response.status_code}",
                details={"url": url, "status_code": e.response.status_code},
            ) from e

        except httpx.RequestError as e:
            logger.error("history_source.request_error", error=str(e), url=url)
            raise HistorySourceError(
                f"History source request failed: {e}", details={"url": url}
            ) from e

        except ValueError as e:
            logger.error("history_source.invalid_json", error=str(e), url=url)
            raise HistorySourcePayloadError(
                "History source returned invalid JSON", details={"url": url}
            ) from e

        records = self._extract_records(payload)
        if records is None:
            logger.error(
                "history_source.unexpected_payload",
                url=url,
                payload_type=type(payload).__name__,
            )
            raise HistorySourcePayloadError(
                "History source payload is not a list of records",
                details={"url": url},
            )

        events = normalize_records(records)
        logger.info(
            "history_source.fetched", url=url, records=len(records), events=len(events)
        )
        return events

    def _extract_records(self, payload: Any) -> Optional[List[Any]]:
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            for key in WRAPPER_KEYS:
                if isinstance(payload.get(key), list):
                    return payload[key]
        return None
