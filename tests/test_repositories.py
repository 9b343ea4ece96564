# tests/test_repositories.py
#
# Contract tests: every test runs against both storage backends.

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from taskledger.domain.shared import (
    NotFoundError,
    PersistenceError,
    ReferentialIntegrityError,
)
from taskledger.domain.tag.models import TagAggregate
from taskledger.domain.task.models import Priority, Status, TaskAggregate
from taskledger.domain.task.specification import ByStatus
from taskledger.domain.types import (
    DueDate,
    TagDescription,
    TagId,
    TagName,
    TaskDescription,
    TaskId,
    TaskTitle,
)
from taskledger.infrastructure.storage import Repositories, in_memory_repositories

from .conftest import UPDATE_TIME


def _save_tag(repos: Repositories, name: str) -> TagAggregate:
    return repos.tags.save(TagAggregate.create(TagName(name)))


def _save_task(repos: Repositories, title: str, **kwargs) -> TaskAggregate:
    return repos.tasks.save(TaskAggregate.create(TaskTitle(title), **kwargs))


def test_insert_assigns_id_and_round_trips(repos: Repositories) -> None:
    tag = _save_tag(repos, "home")
    draft = TaskAggregate.create(
        TaskTitle("Buy milk"),
        description=TaskDescription("2 litres"),
        priority=Priority.HIGH,
        tag_ids=[tag.id],
        due_date=DueDate(date(2026, 5, 1)),
    )

    saved = repos.tasks.save(draft)

    assert saved.id is not None and saved.id.value > 0
    loaded = repos.tasks.find_by_id(saved.id)
    assert loaded is not None
    assert loaded.title.value == "Buy milk"
    assert loaded.description.value == "2 litres"
    assert loaded.status is Status.PENDING
    assert loaded.priority is Priority.HIGH
    assert loaded.tags == [tag.id]
    assert loaded.due_date == DueDate(date(2026, 5, 1))
    assert loaded.created_at == draft.created_at
    assert loaded.pending_events == ()


def test_ids_increase_and_are_never_reused(repos: Repositories) -> None:
    first = _save_task(repos, "one")
    second = _save_task(repos, "two")
    assert second.id > first.id

    assert repos.tasks.delete(second.id)
    third = _save_task(repos, "three")
    assert third.id > second.id


def test_tag_ids_are_never_reused(repos: Repositories) -> None:
    first = _save_tag(repos, "a")
    assert repos.tags.delete(first.id)
    second = _save_tag(repos, "b")
    assert second.id > first.id


def test_update_preserves_created_at(repos: Repositories) -> None:
    saved = _save_task(repos, "draft")
    saved.rename(TaskTitle("final"))
    saved.change_status(Status.COMPLETED)

    updated = repos.tasks.save(saved)

    assert updated.id == saved.id
    assert updated.title.value == "final"
    assert updated.status is Status.COMPLETED
    assert updated.completed_at is not None
    assert updated.created_at == saved.created_at
    assert updated.updated_at == UPDATE_TIME


def test_update_of_missing_id_raises(repos: Repositories) -> None:
    saved = _save_task(repos, "ghost")
    assert repos.tasks.delete(saved.id)

    with pytest.raises(NotFoundError):
        repos.tasks.save(saved)


def test_find_by_id_absent_returns_none(repos: Repositories) -> None:
    assert repos.tasks.find_by_id(TaskId(999)) is None
    assert repos.tags.find_by_id(TagId(999)) is None


def test_delete_absent_returns_false(repos: Repositories) -> None:
    assert repos.tasks.delete(TaskId(42)) is False
    assert repos.tags.delete(TagId(42)) is False


def test_task_with_unknown_tags_rejected(repos: Repositories) -> None:
    known = _save_tag(repos, "known")

    with pytest.raises(ReferentialIntegrityError) as exc_info:
        _save_task(repos, "bad", tag_ids=[known.id, TagId(98), TagId(99)])

    assert exc_info.value.ids == [98, 99]
    assert repos.tasks.find_all() == []


def test_tag_in_use_cannot_be_deleted(repos: Repositories) -> None:
    tag = _save_tag(repos, "urgent")
    task = _save_task(repos, "Fix prod", tag_ids=[tag.id])

    with pytest.raises(ReferentialIntegrityError) as exc_info:
        repos.tags.delete(tag.id)

    assert exc_info.value.ids == [task.id.value]
    assert repos.tags.find_by_id(tag.id) is not None


def test_deleting_task_removes_associations(repos: Repositories) -> None:
    tag = _save_tag(repos, "work")
    task = _save_task(repos, "Report", tag_ids=[tag.id])

    assert repos.tasks.delete(task.id)

    assert repos.tasks.find_ids_by_tag(tag.id) == []
    assert repos.tags.delete(tag.id)


def test_tag_names_are_unique(repos: Repositories) -> None:
    _save_tag(repos, "home")
    with pytest.raises(PersistenceError):
        _save_tag(repos, "home")


def test_renaming_tag_onto_existing_name_fails(repos: Repositories) -> None:
    _save_tag(repos, "home")
    other = _save_tag(repos, "work")
    other.rename(TagName("home"))
    with pytest.raises(PersistenceError):
        repos.tags.save(other)


def test_tag_update_round_trip(repos: Repositories) -> None:
    tag = _save_tag(repos, "errands")
    tag.rename(TagName("chores"))
    tag.update_description(TagDescription("weekend jobs"))

    updated = repos.tags.save(tag)

    assert updated.name.value == "chores"
    assert updated.description.value == "weekend jobs"
    assert updated.created_at == tag.created_at
    assert repos.tags.find_by_name("chores").id == tag.id
    assert repos.tags.find_by_name("errands") is None


def test_find_by_ids_skips_unknown(repos: Repositories) -> None:
    a = _save_tag(repos, "a")
    b = _save_tag(repos, "b")
    found = repos.tags.find_by_ids([b.id, TagId(77), a.id])
    assert sorted(t.id.value for t in found) == [a.id.value, b.id.value]


def test_replacing_tags_on_update(repos: Repositories) -> None:
    a = _save_tag(repos, "a")
    b = _save_tag(repos, "b")
    task = _save_task(repos, "Tagged", tag_ids=[a.id])

    task.replace_tags([b.id])
    updated = repos.tasks.save(task)

    assert updated.tags == [b.id]
    assert repos.tasks.find_ids_by_tag(a.id) == []
    assert repos.tasks.find_ids_by_tag(b.id) == [task.id]


def test_find_by_specification(repos: Repositories) -> None:
    _save_task(repos, "open")
    _save_task(repos, "done", status=Status.COMPLETED)

    found = repos.tasks.find_by_specification(ByStatus(Status.COMPLETED))

    assert [t.title.value for t in found] == ["done"]


def test_stored_aggregates_are_detached(repos: Repositories) -> None:
    saved = _save_task(repos, "original")
    saved.rename(TaskTitle("changed but not saved"))

    assert repos.tasks.find_by_id(saved.id).title.value == "original"


def test_in_memory_ids_unique_under_parallel_saves() -> None:
    shared = in_memory_repositories()
    workers, per_worker = 8, 200

    def insert_many(worker: int) -> list[int]:
        return [
            shared.tasks.save(TaskAggregate.create(TaskTitle(f"w{worker}-{n}"))).id.value
            for n in range(per_worker)
        ]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        batches = list(pool.map(insert_many, range(workers)))

    ids = [task_id for batch in batches for task_id in batch]
    assert len(ids) == workers * per_worker
    assert len(set(ids)) == len(ids)
    assert len(shared.tasks.find_all()) == len(ids)
