"""In-process entity store.

One ``MemoryStore`` holds the committed state and is shared between
requests. Each request works through its own ``MemoryUnitOfWork``; commits
are serialized on a store-wide lock held only while a batch is validated
and applied.
"""

import logging
import threading
from collections import defaultdict
from typing import Iterable
from uuid import UUID

from community.domain import (
    BaseEntity,
    DomainError,
    EntityNotFoundError,
    Feedback,
    InvalidStateError,
    Reaction,
    User,
)
from community.stores.staging import (
    Change,
    ChangeType,
    StagingUnitOfWork,
    same_state,
    sibling_kinds,
)

logger = logging.getLogger(__name__)

# Field combinations that identify at most one stored entity of a kind.
UNIQUE_FIELDS: dict[type[BaseEntity], tuple[str, ...]] = {
    User: ("email",),
    Reaction: ("author_id", "target"),
    Feedback: ("event_id", "author_id"),
}


class MemoryStore:
    """Committed entities, one homogeneous table per concrete kind."""

    def __init__(self, entities: Iterable[BaseEntity] = ()) -> None:
        self._tables: dict[type[BaseEntity], dict[UUID, BaseEntity]] = defaultdict(dict)
        self._lock = threading.Lock()
        self.apply([Change(ChangeType.ADD, entity) for entity in entities])

    def get(self, kind: type[BaseEntity], key: UUID) -> BaseEntity | None:
        with self._lock:
            return self._tables[kind].get(key)

    def all(self, kind: type[BaseEntity]) -> list[BaseEntity]:
        with self._lock:
            return list(self._tables[kind].values())

    def apply(self, changes: list[Change]) -> None:
        """Apply a batch atomically.

        Raises:
            ValueError: If an insert collides with a stored id or unique fields.
            EntityNotFoundError: If an update targets an entity that no longer exists.
            InvalidStateError: If an update targets a value changed since it was read.
        """
        with self._lock:
            self._validate(changes)
            for change in changes:
                table = self._tables[change.kind]
                if change.type is ChangeType.DELETE:
                    table.pop(change.key, None)
                else:
                    table[change.key] = change.entity

    def unit_of_work(self) -> "MemoryUnitOfWork":
        return MemoryUnitOfWork(self)

    def _validate(self, changes: list[Change]) -> None:
        added: set[UUID] = set()
        for change in changes:
            if change.type is ChangeType.ADD:
                taken = change.key in added or any(
                    change.key in self._tables[sibling] for sibling in sibling_kinds(change.kind)
                )
                if taken:
                    raise ValueError(f"{change.kind.__name__} {change.key} already exists")
                added.add(change.key)
            elif change.type is ChangeType.UPDATE:
                current = self._tables[change.kind].get(change.key)
                if current is None:
                    raise EntityNotFoundError(change.kind, change.key)
                if change.base is not None and not same_state(current, change.base):
                    raise InvalidStateError(
                        f"{change.kind.__name__} was changed by another request"
                    )
        self._check_unique(changes)

    def _check_unique(self, changes: list[Change]) -> None:
        for kind, names in UNIQUE_FIELDS.items():
            batch = [change for change in changes if change.kind is kind]
            if not batch:
                continue
            rows = dict(self._tables[kind])
            for change in batch:
                if change.type is ChangeType.DELETE:
                    rows.pop(change.key, None)
                else:
                    rows[change.key] = change.entity
            seen = set()
            for entity in rows.values():
                value = tuple(getattr(entity, name) for name in names)
                if value in seen:
                    raise ValueError(f"{kind.__name__} with the same {', '.join(names)} already exists")
                seen.add(value)


class MemoryUnitOfWork(StagingUnitOfWork):
    """Unit of work over a ``MemoryStore``."""

    def __init__(self, store: MemoryStore | None = None) -> None:
        super().__init__()
        self.store = store if store is not None else MemoryStore()

    @classmethod
    def seeded(cls, entities: Iterable[BaseEntity]) -> "MemoryUnitOfWork":
        """Build a unit of work over a fresh store holding ``entities``."""
        return cls(MemoryStore(entities))

    def _load(self, kind: type[BaseEntity], key: UUID) -> BaseEntity | None:
        return self.store.get(kind, key)

    def _load_all(self, kind: type[BaseEntity]) -> list[BaseEntity]:
        return self.store.all(kind)

    def _apply(self, changes: list[Change]) -> None:
        try:
            self.store.apply(changes)
        except (DomainError, ValueError):
            logger.warning("Commit of %d change(s) rejected, rolling back", len(changes))
            self.rollback()
            raise
