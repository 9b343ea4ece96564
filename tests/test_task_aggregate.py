# tests/test_task_aggregate.py

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from taskledger.domain.shared import ValidationError
from taskledger.domain.task import events
from taskledger.domain.task.models import DueDateStatus, Priority, Status, TaskAggregate
from taskledger.domain.types import DueDate, TagId, TaskDescription, TaskId, TaskTitle


def _task(**kwargs) -> TaskAggregate:
    return TaskAggregate.create(TaskTitle("Write report"), **kwargs)


def test_create_defaults() -> None:
    task = _task()
    assert task.id is None
    assert task.status is Status.PENDING
    assert task.priority is Priority.MEDIUM
    assert task.tags == []
    assert task.completed_at is None
    assert task.created_at == task.updated_at
    assert task.take_events() == []


def test_create_completed_sets_completed_at() -> None:
    task = _task(status=Status.COMPLETED)
    assert task.completed_at is not None


def test_create_drops_duplicate_tags() -> None:
    task = _task(tag_ids=[TagId(2), TagId(1), TagId(2)])
    assert task.tags == [TagId(2), TagId(1)]


def test_rename_records_title_changed() -> None:
    task = _task()
    task.rename(TaskTitle("Write final report"))

    recorded = task.take_events()
    assert len(recorded) == 1
    event = recorded[0]
    assert isinstance(event, events.TitleChanged)
    assert event.old_title == "Write report"
    assert event.new_title == "Write final report"
    assert task.take_events() == []


def test_completion_cycle() -> None:
    task = _task()
    task.change_status(Status.IN_PROGRESS)
    assert task.completed_at is None

    task.change_status(Status.COMPLETED)
    assert task.completed_at is not None
    completed = task.take_events()
    assert [e.name for e in completed] == ["TaskCompleted"]
    assert completed[0].completed_at == task.completed_at

    task.change_status(Status.PENDING)
    assert task.completed_at is None
    assert task.take_events() == []


def test_same_status_is_noop() -> None:
    task = _task(status=Status.COMPLETED)
    stamped = task.completed_at
    task.change_status(Status.COMPLETED)
    assert task.completed_at == stamped
    assert task.take_events() == []


def test_add_tag_is_idempotent() -> None:
    task = _task()
    task.add_tag(TagId(1))
    task.add_tag(TagId(1))

    assert task.tags == [TagId(1)]
    assert [e.name for e in task.take_events()] == ["TagAdded"]


def test_remove_absent_tag_is_noop() -> None:
    task = _task(tag_ids=[TagId(1)])
    task.remove_tag(TagId(9))
    assert task.tags == [TagId(1)]
    assert task.take_events() == []

    task.remove_tag(TagId(1))
    assert task.tags == []
    assert [e.name for e in task.take_events()] == ["TagRemoved"]


def test_replace_tags_emits_only_differences() -> None:
    task = _task(tag_ids=[TagId(1), TagId(2)])
    task.replace_tags([TagId(2), TagId(3)])

    assert set(task.tags) == {TagId(2), TagId(3)}
    recorded = [(e.name, e.tag_id) for e in task.take_events()]
    assert recorded == [("TagRemoved", 1), ("TagAdded", 3)]


def test_pending_events_does_not_drain() -> None:
    task = _task()
    task.add_tag(TagId(4))
    assert len(task.pending_events) == 1
    assert len(task.take_events()) == 1


def test_mutations_advance_updated_at() -> None:
    task = _task()
    before = task.updated_at
    task.change_priority(Priority.HIGH)
    task.change_description(TaskDescription("details"))
    task.set_due_date(DueDate(date(2030, 1, 1)))
    assert task.updated_at >= before
    assert task.priority is Priority.HIGH
    assert task.description.value == "details"


def test_reconstruct_rejects_broken_completion_invariant() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    with pytest.raises(ValidationError):
        TaskAggregate.reconstruct(
            id=TaskId(1),
            title=TaskTitle("x"),
            description=TaskDescription(),
            status=Status.COMPLETED,
            priority=Priority.LOW,
            tags=[],
            due_date=None,
            completed_at=None,
            created_at=now,
            updated_at=now,
        )


def test_reconstruct_starts_with_empty_buffer() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    task = TaskAggregate.reconstruct(
        id=TaskId(7),
        title=TaskTitle("Stored"),
        description=TaskDescription("d"),
        status=Status.COMPLETED,
        priority=Priority.CRITICAL,
        tags=[TagId(1)],
        due_date=DueDate(date(2026, 2, 1)),
        completed_at=now,
        created_at=now,
        updated_at=now,
    )
    assert task.id == TaskId(7)
    assert task.pending_events == ()


def test_events_carry_task_id_once_persisted() -> None:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    task = TaskAggregate.reconstruct(
        id=TaskId(3),
        title=TaskTitle("Stored"),
        description=TaskDescription(),
        status=Status.PENDING,
        priority=Priority.LOW,
        tags=[],
        due_date=None,
        completed_at=None,
        created_at=now,
        updated_at=now,
    )
    task.add_tag(TagId(5))
    assert task.take_events()[0].task_id == 3


def test_overdue_and_due_buckets() -> None:
    today = date(2026, 1, 10)
    late = _task(due_date=DueDate(date(2026, 1, 9)))
    on_time = _task(due_date=DueDate(date(2026, 1, 10)))
    soon = _task(due_date=DueDate(date(2026, 1, 15)))
    far = _task(due_date=DueDate(date(2026, 3, 1)))
    undated = _task()
    done_late = _task(status=Status.COMPLETED, due_date=DueDate(date(2026, 1, 1)))

    assert late.is_overdue(today)
    assert not on_time.is_overdue(today)
    assert not done_late.is_overdue(today)

    assert late.due_date_status(today) is DueDateStatus.OVERDUE
    assert on_time.due_date_status(today) is DueDateStatus.DUE_TODAY
    assert soon.due_date_status(today) is DueDateStatus.DUE_THIS_WEEK
    assert far.due_date_status(today) is None
    assert undated.due_date_status(today) is DueDateStatus.NO_DUE_DATE
    assert done_late.due_date_status(today) is None


def test_reconstruct_from_created_fields_round_trips() -> None:
    original = _task(
        description=TaskDescription("quarterly numbers"),
        status=Status.COMPLETED,
        priority=Priority.CRITICAL,
        tag_ids=[TagId(3), TagId(1)],
        due_date=DueDate(date(2026, 4, 30)),
    )

    copy = TaskAggregate.reconstruct(
        id=TaskId(11),
        title=original.title,
        description=original.description,
        status=original.status,
        priority=original.priority,
        tags=original.tags,
        due_date=original.due_date,
        completed_at=original.completed_at,
        created_at=original.created_at,
        updated_at=original.updated_at,
    )

    for field in TaskAggregate.model_fields:
        if field != "id":
            assert getattr(copy, field) == getattr(original, field), field
    assert copy.id == TaskId(11)
    assert copy.pending_events == ()

    original.rename(TaskTitle("Renamed"))
    original.add_tag(TagId(9))

    assert [e.name for e in original.take_events()] == ["TitleChanged", "TagAdded"]
    assert copy.pending_events == ()
    assert copy.title.value == "Write report"
    assert copy.tags == [TagId(3), TagId(1)]
