"""Domain value objects for taskledger.

Immutable value objects representing the validated primitives of the
task and tag domain. Each one validates in its constructor and raises
``ValidationError`` on bad input; there are no setters.
"""

from dataclasses import dataclass
from datetime import date, datetime

from taskledger.domain.clock import utc_now
from taskledger.domain.shared.errors import ValidationError

TITLE_MAX_LENGTH = 100
TAG_NAME_MAX_LENGTH = 50

__all__ = [
    "TITLE_MAX_LENGTH",
    "TAG_NAME_MAX_LENGTH",
    "utc_now",
    "TaskId",
    "TagId",
    "TaskTitle",
    "TaskDescription",
    "TagName",
    "TagDescription",
    "DueDate",
]


@dataclass(frozen=True, order=True)
class TaskId:
    """Identity of a persisted task.

    Only positive integers are valid. 0 is reserved for "not yet
    persisted", which aggregates express as ``id is None``.

    Attributes:
        value: The integer id
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Task id must be an integer, got {self.value!r}")
        if self.value <= 0:
            raise ValidationError(f"Task id must be positive (0 is reserved), got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class TagId:
    """Identity of a persisted tag.

    Same rules as ``TaskId``: positive integers only.

    Attributes:
        value: The integer id
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Tag id must be an integer, got {self.value!r}")
        if self.value <= 0:
            raise ValidationError(f"Tag id must be positive (0 is reserved), got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TaskTitle:
    """Task title, trimmed and between 1 and 100 characters.

    Example:
        TaskTitle("  Buy milk ")  # -> TaskTitle(value="Buy milk")
        TaskTitle("   ")          # raises ValidationError
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(f"Title must be a string, got {type(self.value).__name__}")
        trimmed = self.value.strip()
        if not trimmed:
            raise ValidationError("Title must not be empty")
        if len(trimmed) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters (got {len(trimmed)})"
            )
        object.__setattr__(self, "value", trimmed)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TaskDescription:
    """Free-form task description. Empty is valid and the default."""

    value: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(
                f"Description must be a string, got {type(self.value).__name__}"
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TagName:
    """Tag name, trimmed and between 1 and 50 characters."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(f"Tag name must be a string, got {type(self.value).__name__}")
        trimmed = self.value.strip()
        if not trimmed:
            raise ValidationError("Tag name must not be empty")
        if len(trimmed) > TAG_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Tag name must be at most {TAG_NAME_MAX_LENGTH} characters (got {len(trimmed)})"
            )
        object.__setattr__(self, "value", trimmed)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TagDescription:
    """Optional tag description; empty string when absent."""

    value: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise ValidationError(
                f"Tag description must be a string, got {type(self.value).__name__}"
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class DueDate:
    """Calendar due date with no time component.

    No range validation is applied; any real date is accepted.

    Example:
        DueDate.parse("2026-01-31")
        # -> DueDate(value=datetime.date(2026, 1, 31))
    """

    value: date

    def __post_init__(self) -> None:
        # datetime is a subclass of date but carries a time component
        if isinstance(self.value, datetime) or not isinstance(self.value, date):
            raise ValidationError(f"Due date must be a calendar date, got {self.value!r}")

    @classmethod
    def parse(cls, text: str) -> "DueDate":
        """Create a DueDate from an ISO ``YYYY-MM-DD`` string.

        Raises:
            ValidationError: If the text is not a valid date.
        """
        try:
            return cls(date.fromisoformat(text.strip()))
        except (AttributeError, ValueError) as e:
            raise ValidationError(f"Invalid due date {text!r}: expected YYYY-MM-DD") from e

    def is_before(self, other: date) -> bool:
        """Return True if this due date falls strictly before ``other``."""
        return self.value < other

    def __str__(self) -> str:
        return self.value.isoformat()
