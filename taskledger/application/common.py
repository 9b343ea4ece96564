"""Helpers shared by the task and tag use cases."""

import functools
import logging
from collections.abc import Callable, Iterable
from typing import ParamSpec, TypeVar

from taskledger.domain.shared import Err, Ok, Result, TrackerError
from taskledger.domain.shared.errors import ReferentialIntegrityError
from taskledger.domain.shared.events import DomainEvent
from taskledger.domain.tag.repository import TagRepository
from taskledger.domain.task.models import TaskAggregate
from taskledger.domain.types import TagId

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def use_case(fn: Callable[P, T]) -> Callable[P, Result[T, TrackerError]]:
    """Turn a raising use case into one that returns a Result.

    ``TrackerError`` becomes ``Err(error)``; anything else is a bug and
    propagates.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, TrackerError]:
        try:
            return Ok(fn(*args, **kwargs))
        except TrackerError as e:
            logger.info(f"{fn.__name__} rejected: {e}")
            return Err(e)

    return wrapper


def require_tags(tags: TagRepository, tag_ids: Iterable[TagId]) -> None:
    """Check that every tag id exists.

    Raises:
        ReferentialIntegrityError: Listing every missing id, not just the first.
    """
    wanted = list(dict.fromkeys(tag_ids))
    if not wanted:
        return
    found = {tag.id for tag in tags.find_by_ids(wanted)}
    missing = [tag_id.value for tag_id in wanted if tag_id not in found]
    if missing:
        raise ReferentialIntegrityError.missing_tags(missing)


def tag_names_for(tags: TagRepository, tasks: Iterable[TaskAggregate]) -> dict[int, str]:
    """Resolve every tag id referenced by ``tasks`` to its name."""
    tag_ids = {tag_id for task in tasks for tag_id in task.tags}
    if not tag_ids:
        return {}
    return {tag.id.value: tag.name.value for tag in tags.find_by_ids(tag_ids)}


def drain_events(aggregate: TaskAggregate, task_id: int) -> list[DomainEvent]:
    """Take the aggregate's events after a successful save and log them."""
    events = aggregate.take_events()
    for event in events:
        logger.debug(f"{event.name} on task #{task_id}: {event.model_dump(exclude={'event_id'})}")
    return events
