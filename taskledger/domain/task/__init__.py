"""Task domain.

Key Types:
    Status - Task lifecycle status
    Priority - Task priority
    DueDateStatus - Due-date bucket of an open task
    TaskAggregate - Aggregate root for tasks
    TaskRepository - Persistence contract

Specifications:
    Specification - Base predicate with and_/or_ combinators
    ByStatus, ByPriority, Overdue, ByTag, ByKeyword - Leaf predicates

Statistics:
    TaskStats - Count snapshot
    calculate_stats - Aggregate counts over tasks

Domain Events:
    TitleChanged - Task renamed
    TaskCompleted - Task entered the completed status
    TagAdded - Tag reference added
    TagRemoved - Tag reference removed
"""

from .events import TagAdded, TagRemoved, TaskCompleted, TitleChanged
from .models import DueDateStatus, Priority, Status, TaskAggregate
from .repository import TaskRepository
from .specification import (
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
from .statistics import TaskStats, calculate_stats

__all__ = [
    # Models
    "Status",
    "Priority",
    "DueDateStatus",
    "TaskAggregate",
    "TaskRepository",
    # Specifications
    "Specification",
    "AndSpecification",
    "OrSpecification",
    "ByStatus",
    "ByPriority",
    "Overdue",
    "ByTag",
    "ByKeyword",
    "SearchField",
    # Statistics
    "TaskStats",
    "calculate_stats",
    # Events
    "TitleChanged",
    "TaskCompleted",
    "TagAdded",
    "TagRemoved",
]
