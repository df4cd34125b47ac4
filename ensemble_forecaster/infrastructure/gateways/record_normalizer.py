"""
Normalisation of raw history records.

History feeds name their fields in several dialects (English, Vietnamese,
single letters). Each record is mapped onto an ``Event``; records without
an index, a measured value or a label are dropped.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import structlog

from ensemble_forecaster.domain.entities.event import Event, Label

logger = structlog.get_logger(__name__)

INDEX_KEYS = ("session", "phien", "id", "s", "index")
VALUE_KEYS = ("total", "tong", "sum", "t", "total_points")
DICE_KEYS = ("dice", "xuc_xac", "xucxac", "x", "d")
RESULT_KEYS = ("result", "ket_qua", "res", "outcome", "kq")


def _first_present(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_index(value: Any) -> Optional[int]:
    number = _to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _to_dice(value: Any) -> Optional[Tuple[int, ...]]:
    if not isinstance(value, (list, tuple)):
        return None
    faces = [_to_number(face) for face in value]
    if not faces or any(face is None for face in faces):
        return None
    return tuple(int(face) for face in faces)


def _label_from_text(text: str) -> Optional[Label]:
    lowered = text.strip().lower()
    if (
        ("t" in lowered and "ài" in lowered)
        or "tai" in lowered
        or lowered == "t"
        or "big" in lowered
    ):
        return Label.A
    if (
        ("x" in lowered and "ỉu" in lowered)
        or "xiu" in lowered
        or lowered == "x"
        or "small" in lowered
    ):
        return Label.B
    number = _to_number(lowered)
    return None if number is None else Label.from_value(number)


def _label_of(raw_result: Any, measured_value: Optional[float]) -> Optional[Label]:
    if isinstance(raw_result, str):
        return _label_from_text(raw_result)
    number = _to_number(raw_result)
    if number is not None:
        return Label.from_value(number)
    if measured_value is not None:
        return Label.from_value(measured_value)
    return None


def normalize_record(record: Any) -> Optional[Event]:
    """Map one raw record onto an ``Event``; None when it is unusable."""
    if not isinstance(record, Mapping):
        return None

    index = _to_index(_first_present(record, INDEX_KEYS))
    raw_result = _first_present(record, RESULT_KEYS)
    raw_value = _first_present(record, VALUE_KEYS)
    measured_value = (
        _to_number(raw_value) if raw_value is not None else _to_number(raw_result)
    )
    label = _label_of(raw_result, measured_value)

    if index is None or measured_value is None or label is None:
        return None

    return Event(
        index=index,
        measured_value=measured_value,
        label=label,
        dice=_to_dice(_first_present(record, DICE_KEYS)),
    )


def normalize_records(records: Iterable[Any]) -> List[Event]:
    """
    Normalise raw records into a sequence sorted ascending by index.

    When two records share an index the one appearing first is kept.
    """
    events: List[Event] = []
    seen = set()
    duplicates = 0

    normalized = [normalize_record(record) for record in records]
    usable = [event for event in normalized if event is not None]
    dropped = len(normalized) - len(usable)

    for event in sorted(usable, key=lambda e: e.index):
        if event.index in seen:
            duplicates += 1
            continue
        seen.add(event.index)
        events.append(event)

    if dropped or duplicates:
        logger.info(
            "history_source.records_skipped",
            dropped=dropped,
            duplicates=duplicates,
            kept=len(events),
        )
    return events
