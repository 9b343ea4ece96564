"""
SQL repository implementations.

Map ``TaskAggregate``/``TagAggregate`` onto the tasks, tags and
task_tags tables with SQLAlchemy Core. The insert-vs-update branching
lives in the shared ``Repository.save``; these classes only provide the
row operations and reads.

Referential integrity is checked explicitly inside each write
transaction; the foreign keys on task_tags are a second line of defence.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Connection, Row
from sqlalchemy.exc import IntegrityError

from taskledger.domain.shared.errors import PersistenceError, ReferentialIntegrityError
from taskledger.domain.clock import Clock
from taskledger.domain.tag.models import TagAggregate
from taskledger.domain.tag.repository import TagRepository
from taskledger.domain.task.models import Priority, Status, TaskAggregate
from taskledger.domain.task.repository import TaskRepository
from taskledger.domain.types import (
    DueDate,
    TagDescription,
    TagId,
    TagName,
    TaskDescription,
    TaskId,
    TaskTitle,
)
from taskledger.infrastructure.storage import schema
from taskledger.infrastructure.storage.sql_storage import (
    SqlStorage,
    from_db_timestamp,
    to_db_timestamp,
    translate_errors,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Row mapping
# ============================================================================


def _row_to_task(row: Row, tag_ids: Iterable[int]) -> TaskAggregate:
    return TaskAggregate.reconstruct(
        id=TaskId(row.id),
        title=TaskTitle(row.title),
        description=TaskDescription(row.description or ""),
        status=Status(row.status),
        priority=Priority(row.priority),
        tags=[TagId(tag_id) for tag_id in sorted(tag_ids)],
        due_date=DueDate(row.due_date) if row.due_date is not None else None,
        completed_at=from_db_timestamp(row.completed_at),
        created_at=from_db_timestamp(row.created_at),
        updated_at=from_db_timestamp(row.updated_at),
    )


def _task_values(task: TaskAggregate) -> dict:
    return {
        "title": task.title.value,
        "description": task.description.value,
        "status": task.status.value,
        "priority": task.priority.value,
        "due_date": task.due_date.value if task.due_date else None,
        "completed_at": to_db_timestamp(task.completed_at),
    }


def _row_to_tag(row: Row) -> TagAggregate:
    return TagAggregate.reconstruct(
        id=TagId(row.id),
        name=TagName(row.name),
        description=TagDescription(row.description or ""),
        created_at=from_db_timestamp(row.created_at),
        updated_at=from_db_timestamp(row.updated_at),
    )


# ============================================================================
# Tasks
# ============================================================================


class SqlTaskRepository(TaskRepository):
    """Task repository backed by a relational database."""

    def __init__(self, storage: SqlStorage, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._engine = storage.engine

    def find_by_id(self, aggregate_id: TaskId) -> TaskAggregate | None:
        with translate_errors(f"find task #{aggregate_id.value}"), self._engine.connect() as conn:
            row = conn.execute(
                select(schema.tasks).where(schema.tasks.c.id == aggregate_id.value)
            ).fetchone()
            if row is None:
                return None
            tag_ids = conn.execute(
                select(schema.task_tags.c.tag_id).where(
                    schema.task_tags.c.task_id == aggregate_id.value
                )
            ).scalars()
            return _row_to_task(row, tag_ids)

    def find_all(self) -> list[TaskAggregate]:
        with translate_errors("list tasks"), self._engine.connect() as conn:
            tags_by_task: dict[int, list[int]] = defaultdict(list)
            for link in conn.execute(select(schema.task_tags)):
                tags_by_task[link.task_id].append(link.tag_id)
            rows = conn.execute(select(schema.tasks).order_by(schema.tasks.c.id)).fetchall()
            return [_row_to_task(row, tags_by_task.get(row.id, ())) for row in rows]

    def find_ids_by_tag(self, tag_id: TagId) -> list[TaskId]:
        with translate_errors(f"find tasks for tag #{tag_id.value}"), self._engine.connect() as conn:
            task_ids = conn.execute(
                select(schema.task_tags.c.task_id)
                .where(schema.task_tags.c.tag_id == tag_id.value)
                .order_by(schema.task_tags.c.task_id)
            ).scalars()
            return [TaskId(task_id) for task_id in task_ids]

    def delete(self, aggregate_id: TaskId) -> bool:
        with translate_errors(f"delete task #{aggregate_id.value}"), self._engine.begin() as conn:
            # Explicit for engines that don't enforce ON DELETE CASCADE
            conn.execute(
                delete(schema.task_tags).where(schema.task_tags.c.task_id == aggregate_id.value)
            )
            result = conn.execute(
                delete(schema.tasks).where(schema.tasks.c.id == aggregate_id.value)
            )
            removed = result.rowcount > 0
        if removed:
            logger.debug(f"Deleted task #{aggregate_id.value}")
        return removed

    def _insert(self, aggregate: TaskAggregate) -> TaskId:
        with translate_errors("insert task"), self._engine.begin() as conn:
            self._check_tags_exist(conn, aggregate.tags)
            result = conn.execute(
                insert(schema.tasks).values(
                    **_task_values(aggregate),
                    created_at=to_db_timestamp(aggregate.created_at),
                    updated_at=to_db_timestamp(aggregate.updated_at),
                )
            )
            new_id = result.inserted_primary_key[0]
            self._write_tags(conn, new_id, aggregate.tags)
            return TaskId(new_id)

    def _update(self, aggregate: TaskAggregate, updated_at: datetime) -> bool:
        task_id = aggregate.id.value
        with translate_errors(f"update task #{task_id}"), self._engine.begin() as conn:
            result = conn.execute(
                update(schema.tasks)
                .where(schema.tasks.c.id == task_id)
                .values(**_task_values(aggregate), updated_at=to_db_timestamp(updated_at))
            )
            if result.rowcount == 0:
                return False
            self._check_tags_exist(conn, aggregate.tags)
            conn.execute(delete(schema.task_tags).where(schema.task_tags.c.task_id == task_id))
            self._write_tags(conn, task_id, aggregate.tags)
            return True

    @staticmethod
    def _check_tags_exist(conn: Connection, tag_ids: list[TagId]) -> None:
        if not tag_ids:
            return
        wanted = {tag_id.value for tag_id in tag_ids}
        found = set(
            conn.execute(select(schema.tags.c.id).where(schema.tags.c.id.in_(wanted))).scalars()
        )
        missing = wanted - found
        if missing:
            raise ReferentialIntegrityError.missing_tags(missing)

    @staticmethod
    def _write_tags(conn: Connection, task_id: int, tag_ids: list[TagId]) -> None:
        if tag_ids:
            conn.execute(
                insert(schema.task_tags),
                [{"task_id": task_id, "tag_id": tag_id.value} for tag_id in tag_ids],
            )


# ============================================================================
# Tags
# ============================================================================


class SqlTagRepository(TagRepository):
    """Tag repository backed by a relational database."""

    def __init__(self, storage: SqlStorage, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._engine = storage.engine

    def find_by_id(self, aggregate_id: TagId) -> TagAggregate | None:
        with translate_errors(f"find tag #{aggregate_id.value}"), self._engine.connect() as conn:
            row = conn.execute(
                select(schema.tags).where(schema.tags.c.id == aggregate_id.value)
            ).fetchone()
            return _row_to_tag(row) if row is not None else None

    def find_all(self) -> list[TagAggregate]:
        with translate_errors("list tags"), self._engine.connect() as conn:
            rows = conn.execute(select(schema.tags).order_by(schema.tags.c.id)).fetchall()
            return [_row_to_tag(row) for row in rows]

    def find_by_ids(self, tag_ids: Iterable[TagId]) -> list[TagAggregate]:
        wanted = sorted({tag_id.value for tag_id in tag_ids})
        if not wanted:
            return []
        with translate_errors("find tags by id"), self._engine.connect() as conn:
            rows = conn.execute(
                select(schema.tags).where(schema.tags.c.id.in_(wanted)).order_by(schema.tags.c.id)
            ).fetchall()
            return [_row_to_tag(row) for row in rows]

    def find_by_name(self, name: str) -> TagAggregate | None:
        with translate_errors("find tag by name"), self._engine.connect() as conn:
            row = conn.execute(
                select(schema.tags).where(schema.tags.c.name == name.strip())
            ).fetchone()
            return _row_to_tag(row) if row is not None else None

    def delete(self, aggregate_id: TagId) -> bool:
        tag_id = aggregate_id.value
        try:
            with translate_errors(f"delete tag #{tag_id}"), self._engine.begin() as conn:
                referencing = list(
                    conn.execute(
                        select(schema.task_tags.c.task_id)
                        .where(schema.task_tags.c.tag_id == tag_id)
                        .order_by(schema.task_tags.c.task_id)
                    ).scalars()
                )
                if referencing:
                    raise ReferentialIntegrityError.tag_in_use(tag_id, referencing)
                result = conn.execute(delete(schema.tags).where(schema.tags.c.id == tag_id))
                removed = result.rowcount > 0
        except PersistenceError as e:
            # The RESTRICT foreign key caught a reference added concurrently
            if isinstance(e.__cause__, IntegrityError):
                raise ReferentialIntegrityError.tag_in_use(tag_id, ()) from e
            raise
        if removed:
            logger.debug(f"Deleted tag #{tag_id}")
        return removed

    def _insert(self, aggregate: TagAggregate) -> TagId:
        with translate_errors(f"insert tag {aggregate.name.value!r}"), self._engine.begin() as conn:
            result = conn.execute(
                insert(schema.tags).values(
                    name=aggregate.name.value,
                    description=aggregate.description.value,
                    created_at=to_db_timestamp(aggregate.created_at),
                    updated_at=to_db_timestamp(aggregate.updated_at),
                )
            )
            return TagId(result.inserted_primary_key[0])

    def _update(self, aggregate: TagAggregate, updated_at: datetime) -> bool:
        tag_id = aggregate.id.value
        with translate_errors(f"update tag #{tag_id}"), self._engine.begin() as conn:
            result = conn.execute(
                update(schema.tags)
                .where(schema.tags.c.id == tag_id)
                .values(
                    name=aggregate.name.value,
                    description=aggregate.description.value,
                    updated_at=to_db_timestamp(updated_at),
                )
            )
            return result.rowcount > 0
