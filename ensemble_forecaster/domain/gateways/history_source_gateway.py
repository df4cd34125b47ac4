"""
Domain Gateway - History Source

This module defines the gateway interface for fetching the event history
a forecast is computed from.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ensemble_forecaster.domain.entities.event import Event


class IHistorySourceGateway(ABC):
    """Interface for history source gateway."""

    @abstractmethod
    async def fetch_events(
        self, source_url: Optional[str] = None, timeout: Optional[float] = None
    ) -> List[Event]:
        """
        Fetch and normalise the full event history.

        Args:
            source_url: URL of the history feed; the configured default
                source is used when omitted
            timeout: Request timeout in seconds; the configured default is
                used when omitted

        Returns:
            Events sorted ascending by index, one per index

        Raises:
            HistorySourceError: When the source cannot be reached
            HistorySourcePayloadError: When the payload holds no record list
        """
        pass
