"""Result monad returned by the application use cases.

Use cases never raise for expected failures (bad input, missing ids,
blocked deletions). They return ``Ok(value)`` on success and
``Err(error)`` carrying the ``TrackerError`` that stopped them.

Example usage:
    >>> result = add_tag(tags, CreateTagRequest(name="urgent"))
    >>> if is_ok(result):
    ...     print(f"Created tag #{result.value.id}")
    ... else:
    ...     print(f"Rejected: {result.error}")
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is Ok."""
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is Err."""
    return isinstance(result, Err)


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Apply a function to the value inside an Ok result.

    Args:
        result: The result to transform.
        fn: Function to apply to the Ok value.

    Returns:
        A new Result with the transformed value, or the original Err.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def unwrap(result: Ok[T] | Err[E]) -> T:
    """Extract the value from a Result, raising the error if it failed.

    Intended for tests and scripts where a failure is a bug. When the
    error is an exception instance it is raised as-is.

    Raises:
        The contained error (or ValueError wrapping it) for Err results.
    """
    if isinstance(result, Ok):
        return result.value
    if isinstance(result.error, BaseException):
        raise result.error
    raise ValueError(f"Called unwrap on Err: {result.error!r}")
