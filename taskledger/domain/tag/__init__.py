"""Tag domain: the tag aggregate and its repository contract."""

from .models import TagAggregate
from .repository import TagRepository

__all__ = ["TagAggregate", "TagRepository"]
