"""Django ORM implementation of the UnitOfWork.

Each domain kind has a mapper converting between ORM rows and domain
models. Staged changes are written in a single ``transaction.atomic`` block.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from django.db import DatabaseError, IntegrityError, models, transaction

from community import models as orm
from community.domain import (
    BaseEntity,
    Capacity,
    Comment,
    CommentId,
    CommentReport,
    DomainError,
    EntityNotFoundError,
    Event,
    EventCategory,
    EventId,
    EventReport,
    Feedback,
    FeedbackId,
    InvalidStateError,
    Money,
    Post,
    PostId,
    PostReport,
    Reaction,
    ReactionId,
    ReactionType,
    ReportBody,
    ReportCategory,
    ReportId,
    ReportState,
    User,
    UserId,
)
from community.domain.value_objects import as_uuid
from community.stores.staging import Change, ChangeType, StagingUnitOfWork, same_state

logger = logging.getLogger(__name__)


def _user_id(value: UUID | None) -> UserId | None:
    return UserId(value) if value is not None else None


def _raw(value) -> UUID | None:
    return as_uuid(value) if value is not None else None


class RowMapper(ABC):
    """Converts one domain kind to and from its ORM rows."""

    model: type[models.Model]

    def queryset(self) -> models.QuerySet:
        return self.model.objects.all()

    @abstractmethod
    def to_domain(self, row: Any) -> BaseEntity:
        ...

    @abstractmethod
    def fields(self, entity: Any) -> dict[str, Any]:
        """Column values for ``entity``, excluding the primary key."""
        ...

    def relations(self, entity: Any) -> dict[str, list[UUID]]:
        """Many-to-many memberships for ``entity``."""
        return {}

    def lock(self, key: UUID, using: str) -> BaseEntity | None:
        """Return the stored value of ``key``, locking its row until the transaction ends."""
        row = self.queryset().using(using).select_for_update().filter(pk=key).first()
        return self.to_domain(row) if row is not None else None

    def write(self, change: Change, using: str) -> None:
        """Write one change.

        Raises:
            EntityNotFoundError: If an updated row no longer exists.
        """
        if change.type is ChangeType.DELETE:
            self.queryset().using(using).filter(pk=change.key).delete()
            return
        fields = self.fields(change.entity)
        if change.type is ChangeType.ADD:
            row = self.model(pk=change.key, **fields)
            row.save(using=using, force_insert=True)
        elif self.model.objects.using(using).filter(pk=change.key).update(**fields):
            row = self.model.objects.using(using).get(pk=change.key)
        else:
            raise EntityNotFoundError(change.kind, change.key)
        for name, ids in self.relations(change.entity).items():
            getattr(row, name).set(ids)


class UserMapper(RowMapper):
    model = orm.User

    def to_domain(self, row: orm.User) -> User:
        return User(
            id=UserId(row.id),
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            password_hash=row.password_hash,
            created_at=row.created_at,
            date_of_birth=row.date_of_birth,
            description=row.description,
            is_admin=row.is_admin,
            is_organizer=row.is_organizer,
            email_notification=row.email_notification,
        )

    def fields(self, entity: User) -> dict[str, Any]:
        return {
            "first_name": entity.first_name,
            "last_name": entity.last_name,
            "email": entity.email,
            "password_hash": entity.password_hash,
            "created_at": entity.created_at,
            "date_of_birth": entity.date_of_birth,
            "description": entity.description,
            "is_admin": entity.is_admin,
            "is_organizer": entity.is_organizer,
            "email_notification": entity.email_notification,
        }


class EventMapper(RowMapper):
    model = orm.Event

    def queryset(self) -> models.QuerySet:
        return self.model.objects.prefetch_related("participants", "interested")

    def to_domain(self, row: orm.Event) -> Event:
        return Event(
            id=EventId(row.id),
            organizer_id=_user_id(row.organizer_id),
            title=row.title,
            description=row.description,
            category=EventCategory(row.category),
            publication_date=row.publication_date,
            start_date=row.start_date,
            end_date=row.end_date,
            location=row.location,
            capacity=Capacity(row.capacity) if row.capacity is not None else None,
            fee=Money(row.fee) if row.fee is not None else None,
            participant_ids=frozenset(UserId(user.pk) for user in row.participants.all()),
            interested_ids=frozenset(UserId(user.pk) for user in row.interested.all()),
            view_count=row.view_count,
        )

    def fields(self, entity: Event) -> dict[str, Any]:
        return {
            "organizer_id": _raw(entity.organizer_id),
            "title": entity.title,
            "description": entity.description,
            "category": entity.category.value,
            "publication_date": entity.publication_date,
            "start_date": entity.start_date,
            "end_date": entity.end_date,
            "location": entity.location,
            "capacity": entity.capacity.value if entity.capacity is not None else None,
            "fee": entity.fee.amount if entity.fee is not None else None,
            "view_count": entity.view_count,
        }

    def relations(self, entity: Event) -> dict[str, list[UUID]]:
        return {
            "participants": [as_uuid(user_id) for user_id in entity.participant_ids],
            "interested": [as_uuid(user_id) for user_id in entity.interested_ids],
        }


class PostMapper(RowMapper):
    model = orm.Post

    def to_domain(self, row: orm.Post) -> Post:
        return Post(
            id=PostId(row.id),
            event_id=EventId(row.event_id),
            author_id=_user_id(row.author_id),
            content=row.content,
            creation_date=row.creation_date,
        )

    def fields(self, entity: Post) -> dict[str, Any]:
        return {
            "event_id": as_uuid(entity.event_id),
            "author_id": _raw(entity.author_id),
            "content": entity.content,
            "creation_date": entity.creation_date,
        }


class CommentMapper(RowMapper):
    model = orm.Comment

    def to_domain(self, row: orm.Comment) -> Comment:
        return Comment(
            id=CommentId(row.id),
            post_id=PostId(row.post_id),
            author_id=_user_id(row.author_id),
            content=row.content,
            creation_date=row.creation_date,
            in_response_to_id=CommentId(row.in_response_to_id) if row.in_response_to_id else None,
        )

    def fields(self, entity: Comment) -> dict[str, Any]:
        return {
            "post_id": as_uuid(entity.post_id),
            "author_id": _raw(entity.author_id),
            "content": entity.content,
            "creation_date": entity.creation_date,
            "in_response_to_id": _raw(entity.in_response_to_id),
        }


class ReactionMapper(RowMapper):
    model = orm.Reaction

    def to_domain(self, row: orm.Reaction) -> Reaction:
        target = PostId(row.post_id) if row.post_id else CommentId(row.comment_id)
        return Reaction(
            id=ReactionId(row.id),
            author_id=UserId(row.author_id),
            target=target,
            type=ReactionType(row.type),
        )

    def fields(self, entity: Reaction) -> dict[str, Any]:
        on_post = isinstance(entity.target, PostId)
        return {
            "author_id": as_uuid(entity.author_id),
            "post_id": as_uuid(entity.target) if on_post else None,
            "comment_id": None if on_post else as_uuid(entity.target),
            "type": entity.type.value,
        }


class ReportMapper(RowMapper):
    """Maps one report variant onto the shared report table."""

    model = orm.Report

    def __init__(self, variant: type[EventReport | PostReport | CommentReport], target_id: type) -> None:
        self.variant = variant
        self.target_id = target_id

    def queryset(self) -> models.QuerySet:
        return self.model.objects.filter(report_type=self.variant.report_type.value)

    def to_domain(self, row: orm.Report):
        body = ReportBody(
            author_id=_user_id(row.author_id),
            title=row.title,
            details=row.details,
            category=ReportCategory(row.category),
            creation_date=row.creation_date,
            update_date=row.update_date,
            responder_id=_user_id(row.responder_id),
            feedback=row.feedback,
            state=ReportState(row.state),
        )
        return self.variant(id=ReportId(row.id), body=body, target=self.target_id(row.target_id))

    def fields(self, entity) -> dict[str, Any]:
        body = entity.body
        return {
            "report_type": entity.report_type.value,
            "target_id": as_uuid(entity.target),
            "author_id": _raw(body.author_id),
            "responder_id": _raw(body.responder_id),
            "title": body.title,
            "details": body.details,
            "category": body.category.value,
            "creation_date": body.creation_date,
            "update_date": body.update_date,
            "feedback": body.feedback,
            "state": body.state.value,
        }


class FeedbackMapper(RowMapper):
    model = orm.Feedback

    def to_domain(self, row: orm.Feedback) -> Feedback:
        return Feedback(
            id=FeedbackId(row.id),
            event_id=EventId(row.event_id),
            author_id=UserId(row.author_id),
            rating=row.rating,
            creation_date=row.creation_date,
        )

    def fields(self, entity: Feedback) -> dict[str, Any]:
        return {
            "event_id": as_uuid(entity.event_id),
            "author_id": as_uuid(entity.author_id),
            "rating": entity.rating,
            "creation_date": entity.creation_date,
        }


MAPPERS: dict[type[BaseEntity], RowMapper] = {
    User: UserMapper(),
    Event: EventMapper(),
    Post: PostMapper(),
    Comment: CommentMapper(),
    Reaction: ReactionMapper(),
    Feedback: FeedbackMapper(),
    EventReport: ReportMapper(EventReport, EventId),
    PostReport: ReportMapper(PostReport, PostId),
    CommentReport: ReportMapper(CommentReport, CommentId),
}


class DjangoUnitOfWork(StagingUnitOfWork):
    """Database-backed unit of work using Django ORM."""

    def __init__(self, using: str = "default") -> None:
        super().__init__()
        self._using = using

    def _mapper(self, kind: type[BaseEntity]) -> RowMapper:
        try:
            return MAPPERS[kind]
        except KeyError:
            raise TypeError(f"No persistence mapping for {kind.__name__}") from None

    def _check_unchanged(self, mapper: RowMapper, change: Change) -> None:
        current = mapper.lock(change.key, self._using)
        if current is None:
            raise EntityNotFoundError(change.kind, change.key)
        if change.base is not None and not same_state(current, change.base):
            raise InvalidStateError(f"{change.kind.__name__} was changed by another request")

    def _load(self, kind: type[BaseEntity], key: UUID) -> BaseEntity | None:
        mapper = self._mapper(kind)
        row = mapper.queryset().using(self._using).filter(pk=key).first()
        return mapper.to_domain(row) if row is not None else None

    def _load_all(self, kind: type[BaseEntity]) -> list[BaseEntity]:
        mapper = self._mapper(kind)
        return [mapper.to_domain(row) for row in mapper.queryset().using(self._using)]

    def _apply(self, changes: list[Change]) -> None:
        try:
            with transaction.atomic(using=self._using):
                for change in changes:
                    mapper = self._mapper(change.kind)
                    if change.type is ChangeType.UPDATE:
                        self._check_unchanged(mapper, change)
                    mapper.write(change, self._using)
        except DomainError:
            logger.info("Commit of %d change(s) rejected, rolling back", len(changes))
            self.rollback()
            raise
        except IntegrityError as exc:
            logger.warning("Commit of %d change(s) rejected: %s", len(changes), exc)
            self.rollback()
            raise ValueError("Commit violates a uniqueness or reference constraint") from exc
        except DatabaseError:
            logger.exception("Commit of %d change(s) failed", len(changes))
            self.rollback()
            raise
