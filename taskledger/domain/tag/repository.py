"""Tag repository contract."""

from abc import abstractmethod
from collections.abc import Iterable

from taskledger.domain.shared.repository import Repository
from taskledger.domain.tag.models import TagAggregate
from taskledger.domain.types import TagId


class TagRepository(Repository[TagAggregate, TagId]):
    """Persistence for ``TagAggregate``.

    ``delete`` must refuse, with ReferentialIntegrityError, to remove a
    tag that any stored task still references. Tag names are unique; a
    clash on save raises PersistenceError.
    """

    entity_name = "tag"

    def find_by_ids(self, tag_ids: Iterable[TagId]) -> list[TagAggregate]:
        """Return the stored tags among ``tag_ids``; unknown ids are skipped."""
        found = []
        for tag_id in dict.fromkeys(tag_ids):
            tag = self.find_by_id(tag_id)
            if tag is not None:
                found.append(tag)
        return found

    @abstractmethod
    def find_by_name(self, name: str) -> TagAggregate | None:
        """Return the tag with exactly this (trimmed) name, or None."""
