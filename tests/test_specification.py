# tests/test_specification.py

from __future__ import annotations

from datetime import date, timedelta

from taskledger.domain.task.models import Priority, Status, TaskAggregate
from taskledger.domain.task.specification import (
    AndSpecification,
    ByKeyword,
    ByPriority,
    ByStatus,
    ByTag,
    OrSpecification,
    Overdue,
    SearchField,
    Specification,
)
from taskledger.domain.types import DueDate, TagId, TaskDescription, TaskTitle


def _task(title: str = "Task", **kwargs) -> TaskAggregate:
    return TaskAggregate.create(TaskTitle(title), **kwargs)


class _Exploding(Specification):
    """Fails the test if it is ever evaluated."""

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        raise AssertionError("right-hand side should not be evaluated")


def test_or_of_statuses_selects_open_tasks() -> None:
    pending = _task("a", status=Status.PENDING)
    in_progress = _task("b", status=Status.IN_PROGRESS)
    completed = _task("c", status=Status.COMPLETED)

    spec = ByStatus(Status.PENDING).or_(ByStatus(Status.IN_PROGRESS))

    assert spec.filter([pending, in_progress, completed]) == [pending, in_progress]


def test_and_is_intersection() -> None:
    tasks = [
        _task("a", status=Status.PENDING, priority=Priority.HIGH),
        _task("b", status=Status.PENDING, priority=Priority.LOW),
        _task("c", status=Status.COMPLETED, priority=Priority.HIGH),
    ]
    spec = ByStatus(Status.PENDING).and_(ByPriority(Priority.HIGH))
    assert [t.title.value for t in spec.filter(tasks)] == ["a"]


def test_operators_build_same_tree() -> None:
    left, right = ByStatus(Status.PENDING), ByPriority(Priority.LOW)
    assert isinstance(left & right, AndSpecification)
    assert isinstance(left | right, OrSpecification)
    assert (left & right) == left.and_(right)


def test_and_short_circuits() -> None:
    task = _task(status=Status.COMPLETED)
    assert not ByStatus(Status.PENDING).and_(_Exploding()).is_satisfied_by(task)


def test_or_short_circuits() -> None:
    task = _task(status=Status.PENDING)
    assert ByStatus(Status.PENDING).or_(_Exploding()).is_satisfied_by(task)


def test_overdue_turns_false_on_completion() -> None:
    today = date(2026, 3, 1)
    task = _task(due_date=DueDate(today - timedelta(days=1)))
    spec = Overdue(today)

    assert spec.is_satisfied_by(task)
    task.change_status(Status.COMPLETED)
    assert not spec.is_satisfied_by(task)


def test_overdue_ignores_undated_and_future() -> None:
    today = date(2026, 3, 1)
    assert not Overdue(today).is_satisfied_by(_task())
    assert not Overdue(today).is_satisfied_by(_task(due_date=DueDate(today)))


def test_by_tag() -> None:
    tagged = _task(tag_ids=[TagId(2)])
    assert ByTag(TagId(2)).is_satisfied_by(tagged)
    assert not ByTag(TagId(3)).is_satisfied_by(tagged)


def test_keyword_requires_every_keyword() -> None:
    task = _task("Fix login bug", description=TaskDescription("Session expires too early"))

    assert ByKeyword.from_query("LOGIN bug").is_satisfied_by(task)
    assert ByKeyword.from_query("login session").is_satisfied_by(task)
    assert not ByKeyword.from_query("login crash").is_satisfied_by(task)


def test_keyword_field_selection() -> None:
    task = _task("Fix login bug", description=TaskDescription("Session expires"))

    assert not ByKeyword.from_query("session", SearchField.TITLE).is_satisfied_by(task)
    assert ByKeyword.from_query("session", SearchField.DESCRIPTION).is_satisfied_by(task)
    assert not ByKeyword.from_query("login", SearchField.DESCRIPTION).is_satisfied_by(task)


def test_nested_composition() -> None:
    today = date(2026, 3, 1)
    urgent_or_late = ByPriority(Priority.CRITICAL).or_(Overdue(today))
    spec = ByStatus(Status.PENDING).and_(urgent_or_late)

    critical = _task("critical", priority=Priority.CRITICAL)
    late = _task("late", due_date=DueDate(date(2026, 2, 1)))
    calm = _task("calm")
    done = _task("done", status=Status.COMPLETED, priority=Priority.CRITICAL)

    assert spec.filter([critical, late, calm, done]) == [critical, late]
