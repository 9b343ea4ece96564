"""Composable task specifications.

A specification is a predicate over a ``TaskAggregate``. Leaves test a
single condition; ``and_``/``or_`` (or ``&``/``|``) build a binary tree
of them. Composition is explicit and left-associative: ``a & b | c``
follows Python operator precedence, so build trees with the methods
when in doubt.

Evaluation is pure: specifications hold no mutable state, so filtering
a collection evaluates each task independently.

Example:
    >>> open_work = ByStatus(Status.PENDING).or_(ByStatus(Status.IN_PROGRESS))
    >>> urgent = open_work.and_(ByPriority(Priority.CRITICAL))
    >>> urgent.filter(tasks)
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from taskledger.domain.task.models import Priority, Status, TaskAggregate
from taskledger.domain.types import TagId


class Specification(ABC):
    """Base class for task predicates."""

    @abstractmethod
    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        """Return True if ``task`` meets this specification."""

    def and_(self, other: "Specification") -> "AndSpecification":
        """Satisfied when both this and ``other`` are; ``other`` is skipped if this fails."""
        return AndSpecification(self, other)

    def or_(self, other: "Specification") -> "OrSpecification":
        """Satisfied when either is; ``other`` is skipped if this already holds."""
        return OrSpecification(self, other)

    def __and__(self, other: "Specification") -> "AndSpecification":
        return self.and_(other)

    def __or__(self, other: "Specification") -> "OrSpecification":
        return self.or_(other)

    def filter(self, tasks: Iterable[TaskAggregate]) -> list[TaskAggregate]:
        """Return the tasks that satisfy this specification, in input order."""
        return [task for task in tasks if self.is_satisfied_by(task)]


# =============================================================================
# Combinators
# =============================================================================


@dataclass(frozen=True)
class AndSpecification(Specification):
    left: Specification
    right: Specification

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        return self.left.is_satisfied_by(task) and self.right.is_satisfied_by(task)


@dataclass(frozen=True)
class OrSpecification(Specification):
    left: Specification
    right: Specification

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        return self.left.is_satisfied_by(task) or self.right.is_satisfied_by(task)


# =============================================================================
# Leaves
# =============================================================================


@dataclass(frozen=True)
class ByStatus(Specification):
    status: Status

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        return task.status is self.status


@dataclass(frozen=True)
class ByPriority(Specification):
    priority: Priority

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        return task.priority is self.priority


@dataclass(frozen=True)
class Overdue(Specification):
    """Open tasks whose due date is strictly before ``reference_date``.

    Completed tasks never satisfy this, whatever their due date.
    """

    reference_date: date

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        return task.is_overdue(self.reference_date)


@dataclass(frozen=True)
class ByTag(Specification):
    tag_id: TagId

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        return task.has_tag(self.tag_id)


class SearchField(str, Enum):
    """Which text fields a keyword search looks at."""

    TITLE = "title"
    DESCRIPTION = "description"
    ALL = "all"


@dataclass(frozen=True)
class ByKeyword(Specification):
    """Tasks whose text contains every keyword, ignoring case.

    An empty keyword list matches every task.
    """

    keywords: tuple[str, ...]
    field: SearchField = SearchField.ALL

    @classmethod
    def from_query(cls, query: str, field: SearchField = SearchField.ALL) -> "ByKeyword":
        """Split a whitespace-separated query into keywords."""
        return cls(tuple(query.split()), field)

    def is_satisfied_by(self, task: TaskAggregate) -> bool:
        haystacks: list[str] = []
        if self.field in (SearchField.TITLE, SearchField.ALL):
            haystacks.append(task.title.value.lower())
        if self.field in (SearchField.DESCRIPTION, SearchField.ALL):
            haystacks.append(task.description.value.lower())
        return all(
            any(keyword.lower() in text for text in haystacks) for keyword in self.keywords
        )
