"""Domain entity for issued predictions and their realised outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional
from uuid import UUID, uuid4

from ensemble_forecaster.domain.entities.event import Label


@dataclass(slots=True)
class PredictionRecord:
    """A forecast that was served, waiting for the actual outcome."""

    target_index: int
    label: Label
    probability_a: float
    confidence: float
    source: str
    expert_breakdown: Dict[str, float] = field(default_factory=dict)
    actual: Optional[Label] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resolved_at: Optional[datetime] = None

    @property
    def pending(self) -> bool:
        return self.actual is None

    @property
    def hit(self) -> Optional[bool]:
        if self.actual is None:
            return None
        return self.actual is self.label

    def resolve(self, actual: Label) -> None:
        self.actual = actual
        self.resolved_at = datetime.now(timezone.utc)
