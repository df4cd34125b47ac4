from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ensemble_forecaster.domain.entities.errors import (  # noqa: E402
    HistorySourceError,
)
from ensemble_forecaster.domain.entities.event import Event, Label  # noqa: E402
from ensemble_forecaster.domain.gateways.history_source_gateway import (  # noqa: E402
    IHistorySourceGateway,
)

# Totals that keep the total heuristic neutral (both map to 0.5).
A_TOTAL = 12.0
B_TOTAL = 9.0


def make_events(
    labels: str, start: int = 1, totals: Optional[Sequence[float]] = None
) -> List[Event]:
    """Build a sequence from a label string such as ``"AABAB"``."""
    events = []
    for offset, symbol in enumerate(labels):
        label = Label(symbol)
        if totals is not None:
            value = totals[offset]
        else:
            value = A_TOTAL if label is Label.A else B_TOTAL
        events.append(Event(index=start + offset, measured_value=value, label=label))
    return events


def pseudo_random_labels(length: int, seed: int = 7) -> str:
    """Deterministic label string from a linear congruential generator."""
    state = seed
    symbols = []
    for _ in range(length):
        state = (1103515245 * state + 12345) % (2**31)
        symbols.append("A" if (state >> 16) & 1 else "B")
    return "".join(symbols)


class StubHistoryGateway(IHistorySourceGateway):
    def __init__(self, events: Iterable[Event] = (), error: Exception | None = None):
        self.events = list(events)
        self.error = error
        self.requested: List[tuple] = []

    async def fetch_events(self, source_url=None, timeout=None) -> List[Event]:
        self.requested.append((source_url, timeout))
        if self.error is not None:
            raise self.error
        return list(self.events)


@pytest.fixture()
def alternating_events() -> List[Event]:
    # Starts with B so the sequence ends with A.
    return make_events("BA" * 20)


@pytest.fixture()
def streak_events() -> List[Event]:
    return make_events("A" * 20)


@pytest.fixture()
def mixed_events() -> List[Event]:
    return make_events(pseudo_random_labels(60))


@pytest.fixture()
def shifted_events() -> List[Event]:
    return make_events("B" * 50 + "A" * 50)


@pytest.fixture()
def stub_gateway_factory():
    def _factory(events: Iterable[Event] = (), error: Exception | None = None):
        return StubHistoryGateway(events, error)

    return _factory


@pytest.fixture()
def unreachable_source_error() -> HistorySourceError:
    return HistorySourceError("History source request failed: boom")
