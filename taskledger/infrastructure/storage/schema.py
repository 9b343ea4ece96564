"""
Database schema definition using SQLAlchemy Core.

Three tables: tasks, tags and the task_tags association. Status and
priority are stored as their lowercase string values so the database
stays readable by hand. Timestamps are stored as naive UTC.
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

from taskledger.domain.types import TAG_NAME_MAX_LENGTH, TITLE_MAX_LENGTH

# Metadata container for all tables
metadata = MetaData()

# sqlite_autoincrement keeps SQLite from reusing the highest id after a delete

tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(TITLE_MAX_LENGTH), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("status", String(20), nullable=False),
    Column("priority", String(20), nullable=False),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    Column("due_date", Date, nullable=True),
    Column("completed_at", DateTime, nullable=True),
    Index("idx_tasks_status", "status"),
    Index("idx_tasks_priority", "priority"),
    sqlite_autoincrement=True,
)

tags = Table(
    "tags",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(TAG_NAME_MAX_LENGTH), nullable=False, unique=True),
    Column("description", Text, nullable=False, default=""),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
    sqlite_autoincrement=True,
)

task_tags = Table(
    "task_tags",
    metadata,
    Column(
        "task_id",
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="RESTRICT"),
        primary_key=True,
    ),
    Index("idx_task_tags_tag", "tag_id"),
)
