"""Tag domain models.

Tags are reference data: tasks point at them by id. ``TagAggregate``
follows the same create/reconstruct split as tasks but records no
events.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskledger.domain.types import TagDescription, TagId, TagName, utc_now


class TagAggregate(BaseModel):
    """Aggregate root for a tag. ``id`` is None until the tag is saved."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: TagId | None = None
    name: TagName
    description: TagDescription = Field(default_factory=TagDescription)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, name: TagName, description: TagDescription | None = None) -> "TagAggregate":
        """Create a new, not yet persisted tag."""
        now = utc_now()
        return cls(
            id=None,
            name=name,
            description=description or TagDescription(),
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def reconstruct(
        cls,
        id: TagId,
        name: TagName,
        description: TagDescription,
        created_at: datetime,
        updated_at: datetime,
    ) -> "TagAggregate":
        """Rehydrate a stored tag. Used by repositories only."""
        return cls(
            id=id,
            name=name,
            description=description,
            created_at=created_at,
            updated_at=updated_at,
        )

    def rename(self, name: TagName) -> None:
        self.name = name
        self._touch()

    def update_description(self, description: TagDescription) -> None:
        self.description = description
        self._touch()

    def _touch(self) -> None:
        self.updated_at = max(utc_now(), self.updated_at)
