"""Task repository contract."""

from abc import abstractmethod

from taskledger.domain.shared.repository import Repository
from taskledger.domain.task.models import TaskAggregate
from taskledger.domain.task.specification import Specification
from taskledger.domain.types import TagId, TaskId


class TaskRepository(Repository[TaskAggregate, TaskId]):
    """Persistence for ``TaskAggregate``.

    Tag references are stored as a separate (task_id, tag_id) relation.
    Deleting a task also deletes its tag associations.
    """

    entity_name = "task"

    def find_by_specification(self, spec: Specification) -> list[TaskAggregate]:
        """Return the stored tasks that satisfy ``spec``."""
        return spec.filter(self.find_all())

    @abstractmethod
    def find_ids_by_tag(self, tag_id: TagId) -> list[TaskId]:
        """Return the ids of every task referencing ``tag_id``, ascending."""
