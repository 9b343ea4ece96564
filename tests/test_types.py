# tests/test_types.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from taskledger.domain.shared import ValidationError
from taskledger.domain.task.models import Priority, Status
from taskledger.domain.types import DueDate, TagId, TagName, TaskId, TaskTitle


def test_title_is_trimmed() -> None:
    assert TaskTitle("  Buy milk  ").value == "Buy milk"


@pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
def test_blank_title_rejected(raw: str) -> None:
    with pytest.raises(ValidationError):
        TaskTitle(raw)


def test_title_length_boundary() -> None:
    assert len(TaskTitle("x" * 100).value) == 100
    with pytest.raises(ValidationError):
        TaskTitle("x" * 101)


def test_title_length_counts_after_trim() -> None:
    assert TaskTitle("  " + "x" * 100 + "  ").value == "x" * 100


def test_tag_name_limits() -> None:
    assert TagName(" work ").value == "work"
    assert TagName("t" * 50).value == "t" * 50
    with pytest.raises(ValidationError):
        TagName("t" * 51)
    with pytest.raises(ValidationError):
        TagName("  ")


@pytest.mark.parametrize("cls", [TaskId, TagId])
def test_ids_must_be_positive(cls) -> None:
    assert cls(1).value == 1
    for bad in (0, -3):
        with pytest.raises(ValidationError):
            cls(bad)
    with pytest.raises(ValidationError):
        cls(True)


def test_ids_compare_by_value() -> None:
    assert TaskId(3) == TaskId(3)
    assert TaskId(2) < TaskId(5)
    assert len({TagId(1), TagId(1), TagId(2)}) == 2


def test_due_date_parse() -> None:
    assert DueDate.parse("2026-01-31").value == date(2026, 1, 31)
    assert str(DueDate(date(2026, 1, 31))) == "2026-01-31"
    with pytest.raises(ValidationError):
        DueDate.parse("31/01/2026")
    with pytest.raises(ValidationError):
        DueDate(datetime(2026, 1, 31, 10, 0))


def test_due_date_is_before() -> None:
    due = DueDate(date(2026, 1, 10))
    assert due.is_before(date(2026, 1, 11))
    assert not due.is_before(date(2026, 1, 10))


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("pending", Status.PENDING),
        ("todo", Status.PENDING),
        ("InProgress", Status.IN_PROGRESS),
        ("progress", Status.IN_PROGRESS),
        ("in-progress", Status.IN_PROGRESS),
        ("DONE", Status.COMPLETED),
        ("Completed", Status.COMPLETED),
    ],
)
def test_status_aliases(text: str, expected: Status) -> None:
    assert Status.parse(text) is expected


def test_unknown_status_and_priority_rejected() -> None:
    with pytest.raises(ValidationError):
        Status.parse("archived")
    with pytest.raises(ValidationError):
        Priority.parse("urgent")


def test_priority_rank_order() -> None:
    assert Priority.parse("HIGH") is Priority.HIGH
    ranks = [p.rank for p in (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL)]
    assert ranks == [1, 2, 3, 4]
