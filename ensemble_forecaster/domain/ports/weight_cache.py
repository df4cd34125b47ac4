"""Domain port for reusing tuned weight vectors between requests."""

from __future__ import annotations

from typing import Optional, Protocol

from ensemble_forecaster.domain.entities.expert import WeightVector


class ITunedWeightCache(Protocol):
    """Caller-owned cache of tuned weights keyed by history source."""

    def get(self, key: str, latest_index: int) -> Optional[WeightVector]:
        """Return fresh weights for ``key``, or None when they must be re-tuned."""
        ...

    def put(self, key: str, latest_index: int, weights: WeightVector) -> None:
        """Remember ``weights`` tuned on a sequence ending at ``latest_index``."""
        ...

    def last(self) -> Optional[WeightVector]:
        """Most recently stored weights, whatever their source."""
        ...
