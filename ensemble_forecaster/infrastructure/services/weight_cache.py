"""Infrastructure cache of tuned weight vectors."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import structlog

from ensemble_forecaster.domain.entities.expert import WeightVector
from ensemble_forecaster.domain.ports.weight_cache import ITunedWeightCache

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    weights: WeightVector
    latest_index: int
    stored_at: float


class TunedWeightCache(ITunedWeightCache):
    """
    Tuned weights keyed by history source.

    An entry stays fresh while the source has advanced by fewer than
    ``retune_interval`` events since tuning and it is younger than
    ``ttl_seconds``. A disabled cache never returns weights but still
    remembers the last ones stored for reporting.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        ttl_seconds: float = 300.0,
        retune_interval: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._enabled = enabled
        self._ttl_seconds = ttl_seconds
        self._retune_interval = retune_interval
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}
        self._last: Optional[WeightVector] = None

    def get(self, key: str, latest_index: int) -> Optional[WeightVector]:
        if not self._enabled:
            return None
        entry = self._entries.get(key)
        if entry is None:
            return None

        age = self._clock() - entry.stored_at
        advanced = latest_index - entry.latest_index
        if age >= self._ttl_seconds or not 0 <= advanced < self._retune_interval:
            logger.debug(
                "weight_cache.stale", key=key, age_seconds=age, advanced=advanced
            )
            del self._entries[key]
            return None
        return entry.weights

    def put(self, key: str, latest_index: int, weights: WeightVector) -> None:
        self._last = weights
        if not self._enabled:
            return
        self._entries[key] = _CacheEntry(
            weights=weights, latest_index=latest_index, stored_at=self._clock()
        )

    def last(self) -> Optional[WeightVector]:
        return self._last

    def clear(self) -> None:
        self._entries.clear()
