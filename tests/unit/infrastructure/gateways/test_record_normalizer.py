from __future__ import annotations

import pytest

from ensemble_forecaster.domain.entities.event import Event, Label
from ensemble_forecaster.infrastructure.gateways.record_normalizer import (
    normalize_record,
    normalize_records,
)


def test_vietnamese_record() -> None:
    record = {"phien": 12, "tong": 14, "ket_qua": "Tài", "xuc_xac": [4, 5, 5]}

    assert normalize_record(record) == Event(
        index=12, measured_value=14.0, label=Label.A, dice=(4, 5, 5)
    )


def test_english_record_with_numeric_strings() -> None:
    event = normalize_record({"session": "7", "total": "9", "result": "Xỉu"})

    assert event.index == 7
    assert event.measured_value == 9.0
    assert event.label is Label.B
    assert event.dice is None


@pytest.mark.parametrize(
    "result, expected",
    [
        ("TAI", Label.A),
        ("t", Label.A),
        ("Big", Label.A),
        ("xiu", Label.B),
        ("X", Label.B),
        ("small", Label.B),
        ("12", Label.A),
        ("4", Label.B),
    ],
)
def test_result_text_dialects(result: str, expected: Label) -> None:
    event = normalize_record({"id": 1, "total": 10, "result": result})
    assert event.label is expected


def test_label_from_total_when_result_missing() -> None:
    assert normalize_record({"id": 3, "total": 11}).label is Label.A
    assert normalize_record({"id": 3, "sum": 10}).label is Label.B


def test_numeric_result_doubles_as_total() -> None:
    event = normalize_record({"id": 4, "result": 6})

    assert event.measured_value == 6.0
    assert event.label is Label.B


@pytest.mark.parametrize(
    "record",
    [
        {"total": 12, "result": "Tài"},
        {"id": True, "total": 12, "result": "Tài"},
        {"id": 3.5, "total": 12, "result": "Tài"},
        {"id": 1, "result": "Tài"},
        {"id": 1, "total": "nan", "result": "Tài"},
        {"id": 1, "total": 12, "result": "unknown"},
        ["not", "a", "mapping"],
        None,
    ],
)
def test_unusable_records_are_dropped(record) -> None:
    assert normalize_record(record) is None


def test_invalid_dice_are_ignored() -> None:
    event = normalize_record({"id": 1, "total": 12, "dice": ["a", 2, 3]})

    assert event is not None
    assert event.dice is None


def test_records_are_sorted_and_deduplicated() -> None:
    records = [
        {"id": 5, "total": 12, "result": "T"},
        {"id": 3, "total": 4, "result": "X"},
        {"id": 5, "total": 4, "result": "X"},
        {"broken": True},
    ]

    events = normalize_records(records)

    assert [event.index for event in events] == [3, 5]
    assert events[1].label is Label.A


def test_empty_input() -> None:
    assert normalize_records([]) == []
