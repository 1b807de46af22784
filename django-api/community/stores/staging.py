"""Staged repositories shared by every unit of work implementation.

A unit of work keeps the changes of one logical operation in a staging
area. Reads see those changes layered over the committed state; ``commit``
hands the whole batch to the backend, which applies all of it or none.
"""

import logging
from abc import abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from types import UnionType
from typing import Generic, Iterable, get_args
from uuid import UUID

from community.domain import BaseEntity, EntityNotFoundError, Report
from community.domain.value_objects import as_uuid
from community.stores.interfaces import AnyId, EntityKind, Repository, T, UnitOfWork

logger = logging.getLogger(__name__)


def concrete_kinds(kind: EntityKind) -> tuple[type[BaseEntity], ...]:
    """Expand a repository kind into the concrete classes it covers."""
    if isinstance(kind, UnionType):
        return get_args(kind)
    return (kind,)


def sibling_kinds(kind: type[BaseEntity]) -> tuple[type[BaseEntity], ...]:
    """Concrete kinds that share an id space with ``kind``."""
    report_kinds = get_args(Report)
    if kind in report_kinds:
        return report_kinds
    return (kind,)


def same_state(first: BaseEntity, second: BaseEntity) -> bool:
    """True if both values carry identical field values."""
    return type(first) is type(second) and all(
        getattr(first, f.name) == getattr(second, f.name) for f in fields(first)
    )


class ChangeType(Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Change:
    """One staged write.

    An update carries the committed value it was derived from in ``base``;
    backends refuse it if the stored value no longer matches.
    """

    type: ChangeType
    entity: BaseEntity
    base: BaseEntity | None = None

    @property
    def kind(self) -> type[BaseEntity]:
        return type(self.entity)

    @property
    def key(self) -> UUID:
        return as_uuid(self.entity.id)


class StagedRepository(Repository[T], Generic[T]):
    """Repository view of one kind over a staging unit of work."""

    def __init__(self, uow: "StagingUnitOfWork", kind: EntityKind) -> None:
        self._uow = uow
        self._kind = kind

    @property
    def kind(self) -> EntityKind:
        return self._kind

    def all(self) -> list[T]:
        entities: list[T] = []
        for concrete in concrete_kinds(self._kind):
            entities.extend(self._uow._read_all(concrete))
        return entities

    def get(self, entity_id: AnyId) -> T | None:
        key = as_uuid(entity_id)
        for concrete in concrete_kinds(self._kind):
            entity = self._uow._read(concrete, key)
            if entity is not None:
                return entity
        return None

    def try_get(self, entity_id: AnyId) -> tuple[bool, T | None]:
        entity = self.get(entity_id)
        return entity is not None, entity

    def get_or_raise(self, entity_id: AnyId) -> T:
        entity = self.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(self._kind, entity_id)
        return entity

    def add(self, entity: T) -> None:
        self._check_kind(entity)
        key = as_uuid(entity.id)
        for sibling in sibling_kinds(type(entity)):
            if self._uow._read(sibling, key) is not None:
                raise ValueError(f"{type(entity).__name__} {key} already exists")
        self._uow._stage(Change(ChangeType.ADD, entity))

    def update(self, entity: T) -> None:
        self._check_kind(entity)
        key = as_uuid(entity.id)
        if self._uow._read(type(entity), key) is None:
            raise EntityNotFoundError(type(entity), entity.id)
        base = self._uow._snapshot(type(entity), key)
        self._uow._stage(Change(ChangeType.UPDATE, entity, base))

    def delete(self, entity: T) -> None:
        self._check_kind(entity)
        self._uow._stage(Change(ChangeType.DELETE, entity))

    def _check_kind(self, entity: BaseEntity) -> None:
        if not isinstance(entity, self._kind):
            raise TypeError(
                f"Repository of {self._kind!r} cannot store {type(entity).__name__}"
            )


class StagingUnitOfWork(UnitOfWork):
    """Unit of work that stages writes in memory until ``commit``.

    Subclasses provide the committed view (``_load``/``_load_all``) and the
    atomic application of a batch (``_apply``). Committed values are read
    once per unit of work and kept until the next commit or rollback, so an
    update is checked against the value the operation actually saw.
    """

    def __init__(self) -> None:
        self._staged: dict[tuple[type[BaseEntity], UUID], Change] = {}
        self._loaded: dict[tuple[type[BaseEntity], UUID], BaseEntity | None] = {}
        self._repositories: dict[EntityKind, StagedRepository] = {}

    def repository(self, kind: type[T]) -> Repository[T]:
        repository = self._repositories.get(kind)
        if repository is None:
            repository = StagedRepository(self, kind)
            self._repositories[kind] = repository
        return repository

    @property
    def has_changes(self) -> bool:
        return bool(self._staged)

    def commit(self) -> None:
        changes = list(self._staged.values())
        if not changes:
            logger.debug("Nothing to commit")
            return
        self._apply(changes)
        self._staged.clear()
        self._loaded.clear()
        logger.debug("Committed %d change(s)", len(changes))

    def rollback(self) -> None:
        if self._staged:
            logger.debug("Rolled back %d staged change(s)", len(self._staged))
        self._staged.clear()
        self._loaded.clear()

    # ------------------------------------------------------------------ #
    # Backend hooks
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _load(self, kind: type[BaseEntity], key: UUID) -> BaseEntity | None:
        """Return the committed entity of exactly ``kind`` with ``key``."""
        ...

    @abstractmethod
    def _load_all(self, kind: type[BaseEntity]) -> Iterable[BaseEntity]:
        """Return every committed entity of exactly ``kind``."""
        ...

    @abstractmethod
    def _apply(self, changes: list[Change]) -> None:
        """Apply ``changes`` all at once, or raise without applying any."""
        ...

    # ------------------------------------------------------------------ #
    # Staging area
    # ------------------------------------------------------------------ #

    def _stage(self, change: Change) -> None:
        slot = (change.kind, change.key)
        previous = self._staged.get(slot)
        if previous is not None and previous.type is ChangeType.ADD:
            if change.type is ChangeType.DELETE:
                del self._staged[slot]
                return
            change = Change(ChangeType.ADD, change.entity)
        elif previous is not None and previous.type is ChangeType.DELETE:
            if change.type is ChangeType.ADD:
                change = Change(ChangeType.UPDATE, change.entity, self._snapshot(*slot))
        self._staged[slot] = change

    def _read(self, kind: type[BaseEntity], key: UUID) -> BaseEntity | None:
        change = self._staged.get((kind, key))
        if change is not None:
            return None if change.type is ChangeType.DELETE else change.entity
        return self._snapshot(kind, key)

    def _snapshot(self, kind: type[BaseEntity], key: UUID) -> BaseEntity | None:
        slot = (kind, key)
        if slot not in self._loaded:
            self._loaded[slot] = self._load(kind, key)
        return self._loaded[slot]

    def _read_all(self, kind: type[BaseEntity]) -> list[BaseEntity]:
        entities = {}
        for entity in self._load_all(kind):
            key = as_uuid(entity.id)
            if self._loaded.get((kind, key)) is None:
                self._loaded[(kind, key)] = entity
            entities[key] = self._loaded[(kind, key)]
        for (staged_kind, key), change in self._staged.items():
            if staged_kind is not kind:
                continue
            if change.type is ChangeType.DELETE:
                entities.pop(key, None)
            else:
                entities[key] = change.entity
        return list(entities.values())
