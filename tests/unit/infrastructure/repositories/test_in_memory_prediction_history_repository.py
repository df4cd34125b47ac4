from __future__ import annotations

import pytest

from ensemble_forecaster.domain.entities.event import Label
from ensemble_forecaster.domain.entities.prediction import PredictionRecord
from ensemble_forecaster.infrastructure.repositories import (
    InMemoryPredictionHistoryRepository,
)


def _record(target_index: int, label: Label = Label.A) -> PredictionRecord:
    return PredictionRecord(
        target_index=target_index,
        label=label,
        probability_a=0.7 if label is Label.A else 0.3,
        confidence=40.0,
        source="http://source",
    )


@pytest.mark.asyncio
async def test_add_and_list_recent_oldest_first() -> None:
    repository = InMemoryPredictionHistoryRepository()
    for index in (10, 11, 12):
        await repository.add(_record(index))

    records = await repository.list_recent()

    assert [r.target_index for r in records] == [10, 11, 12]
    assert await repository.count() == 3


@pytest.mark.asyncio
async def test_list_recent_limit() -> None:
    repository = InMemoryPredictionHistoryRepository()
    for index in range(5):
        await repository.add(_record(index))

    assert [r.target_index for r in await repository.list_recent(2)] == [3, 4]
    assert await repository.list_recent(0) == []


@pytest.mark.asyncio
async def test_bounded_log_keeps_issued_count() -> None:
    repository = InMemoryPredictionHistoryRepository(max_records=2)
    for index in range(4):
        await repository.add(_record(index))

    assert [r.target_index for r in await repository.list_recent()] == [2, 3]
    assert await repository.count() == 4


@pytest.mark.asyncio
async def test_mark_latest_actual_resolves_newest_pending() -> None:
    repository = InMemoryPredictionHistoryRepository()
    older = await repository.add(_record(1))
    newer = await repository.add(_record(2, Label.B))

    resolved = await repository.mark_latest_actual(Label.A)

    assert resolved is newer
    assert newer.actual is Label.A
    assert newer.hit is False
    assert newer.resolved_at is not None
    assert older.pending


@pytest.mark.asyncio
async def test_mark_latest_actual_without_pending_record() -> None:
    repository = InMemoryPredictionHistoryRepository()
    assert await repository.mark_latest_actual(Label.A) is None

    await repository.add(_record(1))
    await repository.mark_latest_actual(Label.A)

    assert await repository.mark_latest_actual(Label.B) is None
    assert (await repository.list_recent())[0].actual is Label.A
