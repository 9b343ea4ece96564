"""Tag application service.

Tag use cases. Tag names are unique, which is checked here before the
repository's own constraint is reached. Deleting a tag is coordinated
with the task repository: a tag that any task still references is
never deleted, and the error names every referencing task.
"""

from taskledger.application.common import use_case
from taskledger.application.dto import CreateTagRequest, TagDTO, UpdateTagRequest
from taskledger.domain.shared.errors import (
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from taskledger.domain.tag.models import TagAggregate
from taskledger.domain.tag.repository import TagRepository
from taskledger.domain.task.repository import TaskRepository
from taskledger.domain.types import TagDescription, TagId, TagName


def _ensure_name_free(tags: TagRepository, name: TagName, own_id: TagId | None = None) -> None:
    existing = tags.find_by_name(name.value)
    if existing is not None and existing.id != own_id:
        raise ValidationError(f"Tag name {name.value!r} is already used by tag #{existing.id}")


@use_case
def add_tag(tags: TagRepository, request: CreateTagRequest) -> TagDTO:
    """Create and store a new tag."""
    name = TagName(request.name)
    description = TagDescription(request.description or "")
    _ensure_name_free(tags, name)

    saved = tags.save(TagAggregate.create(name, description))
    return TagDTO.from_aggregate(saved)


@use_case
def edit_tag(tags: TagRepository, tag_id: int, request: UpdateTagRequest) -> TagDTO:
    """Rename a tag and/or change its description."""
    identity = TagId(tag_id)
    name = TagName(request.name) if request.name is not None else None
    description = (
        TagDescription(request.description) if request.description is not None else None
    )

    tag = tags.find_by_id(identity)
    if tag is None:
        raise NotFoundError("tag", tag_id)
    if name is not None:
        _ensure_name_free(tags, name, identity)

    if name is not None:
        tag.rename(name)
    if description is not None:
        tag.update_description(description)
    return TagDTO.from_aggregate(tags.save(tag))


@use_case
def delete_tag(tasks: TaskRepository, tags: TagRepository, tag_id: int) -> int:
    """Delete a tag that no task references.

    Callers that want the tag gone from tasks must edit those tasks
    first; nothing is cascaded.

    Returns:
        Ok(tag_id), or Err with NotFoundError / ReferentialIntegrityError.
    """
    identity = TagId(tag_id)
    if tags.find_by_id(identity) is None:
        raise NotFoundError("tag", tag_id)

    referencing = tasks.find_ids_by_tag(identity)
    if referencing:
        raise ReferentialIntegrityError.tag_in_use(tag_id, [t.value for t in referencing])

    if not tags.delete(identity):
        raise NotFoundError("tag", tag_id)
    return tag_id


@use_case
def list_tags(tags: TagRepository) -> list[TagDTO]:
    """List every tag in ascending id order."""
    return [TagDTO.from_aggregate(tag) for tag in sorted(tags.find_all(), key=lambda t: t.id.value)]


@use_case
def show_tag(tags: TagRepository, tag_id: int) -> TagDTO | None:
    """Return one tag, or Ok(None) if it does not exist."""
    tag = tags.find_by_id(TagId(tag_id))
    return TagDTO.from_aggregate(tag) if tag is not None else None
