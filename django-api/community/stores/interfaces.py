"""Store interfaces (repository and unit of work pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from types import UnionType
from typing import Callable, Generic, Self, TypeVar
from uuid import UUID

from community.domain import BaseEntity, EntityId

T = TypeVar("T", bound=BaseEntity)

EntityKind = type[BaseEntity] | UnionType
AnyId = EntityId | UUID


class Repository(ABC, Generic[T]):
    """Type-scoped access to one entity kind.

    Writes are staged; nothing is durable until the owning unit of work
    commits. Repositories never check permissions.
    """

    @abstractmethod
    def all(self) -> list[T]:
        """Return every entity of this kind."""
        ...

    @abstractmethod
    def get(self, entity_id: AnyId) -> T | None:
        """Return an entity by ID, or None if not found."""
        ...

    @abstractmethod
    def try_get(self, entity_id: AnyId) -> tuple[bool, T | None]:
        """Probe for an entity without raising."""
        ...

    @abstractmethod
    def get_or_raise(self, entity_id: AnyId) -> T:
        """Return an entity by ID.

        Raises:
            EntityNotFoundError: If no entity of this kind has that ID.
        """
        ...

    @abstractmethod
    def add(self, entity: T) -> None:
        """Stage an insert. Duplicate IDs raise ValueError."""
        ...

    @abstractmethod
    def update(self, entity: T) -> None:
        """Stage the replacement of a stored entity by a new value."""
        ...

    @abstractmethod
    def delete(self, entity: T) -> None:
        """Stage removal by identity."""
        ...

    def find(self, predicate: Callable[[T], bool]) -> list[T]:
        return [entity for entity in self.all() if predicate(entity)]


class UnitOfWork(ABC):
    """One repository per entity kind over a single store, plus a commit boundary."""

    @abstractmethod
    def repository(self, kind: type[T]) -> Repository[T]:
        """Return the repository for ``kind`` (a concrete class or a union)."""
        ...

    @abstractmethod
    def commit(self) -> None:
        """Apply every staged change atomically."""
        ...

    @abstractmethod
    def rollback(self) -> None:
        """Discard every staged change."""
        ...

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        return False
