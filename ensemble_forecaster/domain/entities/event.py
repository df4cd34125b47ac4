"""Domain entities for the observed event sequence."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# Dice-sum threshold separating the two outcomes (3..10 -> B, 11..18 -> A).
LABEL_THRESHOLD = 10.5


class Label(str, Enum):
    """Binary outcome of an event. A is the "big" side, B the "small" side."""

    A = "A"
    B = "B"

    @property
    def opposite(self) -> "Label":
        return Label.B if self is Label.A else Label.A

    @classmethod
    def from_value(cls, measured_value: float) -> "Label":
        return cls.A if measured_value > LABEL_THRESHOLD else cls.B

    @classmethod
    def coerce(cls, raw: str) -> "Label":
        """Parse a label written either as A/B or with its source names."""
        key = raw.strip().lower()
        if key in _LABEL_ALIASES:
            return _LABEL_ALIASES[key]
        raise ValueError(f"Unknown label {raw!r}")


_LABEL_ALIASES = {
    "a": Label.A,
    "tài": Label.A,
    "tai": Label.A,
    "big": Label.A,
    "b": Label.B,
    "xỉu": Label.B,
    "xiu": Label.B,
    "small": Label.B,
}


@dataclass(frozen=True, slots=True)
class Event:
    """A single labelled observation of the sequence."""

    index: int
    measured_value: Optional[float]
    label: Label
    dice: Optional[Tuple[int, ...]] = None

    @property
    def is_a(self) -> bool:
        return self.label is Label.A
