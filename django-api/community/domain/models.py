"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in community/models.py (persistence layer).

Entities are immutable. Services change state by building a new value
(``dataclasses.replace``) and handing it back to a repository.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from community.domain.value_objects import (
    Capacity,
    CommentId,
    EntityId,
    EventCategory,
    EventId,
    FeedbackId,
    Money,
    PostId,
    ReactionId,
    ReactionType,
    ReportCategory,
    ReportId,
    ReportState,
    ReportType,
    UserId,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=False)
class BaseEntity:
    """Anything with an identity. Two entities are equal iff their ids are."""

    id: EntityId

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseEntity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, eq=False)
class User(BaseEntity):
    """Domain representation of a User."""

    id: UserId
    first_name: str
    last_name: str
    email: str
    password_hash: str
    created_at: datetime
    date_of_birth: date | None = None
    description: str = ""
    is_admin: bool = False
    is_organizer: bool = False
    email_notification: bool = True

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str = "",
        **extra,
    ) -> "User":
        return cls(
            id=UserId.new(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            created_at=utcnow(),
            **extra,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True, eq=False)
class Event(BaseEntity):
    """Domain representation of an Event."""

    id: EventId
    organizer_id: UserId | None
    title: str
    description: str
    category: EventCategory
    publication_date: datetime
    start_date: datetime
    end_date: datetime
    location: str
    capacity: Capacity | None = None
    fee: Money | None = None
    participant_ids: frozenset[UserId] = frozenset()
    interested_ids: frozenset[UserId] = frozenset()
    view_count: int = 0

    def __post_init__(self) -> None:
        if self.participant_ids & self.interested_ids:
            raise ValueError("A user cannot be both participant and interested")

    @property
    def participant_count(self) -> int:
        return len(self.participant_ids)

    @property
    def interested_count(self) -> int:
        return len(self.interested_ids)

    @property
    def free_places(self) -> int | None:
        """Remaining places, or None when the event has no capacity limit."""
        if self.capacity is None:
            return None
        return self.capacity.value - self.participant_count

    @property
    def is_full(self) -> bool:
        free = self.free_places
        return free is not None and free <= 0


@dataclass(frozen=True, eq=False)
class Post(BaseEntity):
    """Domain representation of a Post."""

    id: PostId
    event_id: EventId
    author_id: UserId | None
    content: str
    creation_date: datetime = field(default_factory=utcnow)


@dataclass(frozen=True, eq=False)
class Comment(BaseEntity):
    """Domain representation of a Comment, optionally replying to another one."""

    id: CommentId
    post_id: PostId
    author_id: UserId | None
    content: str
    creation_date: datetime = field(default_factory=utcnow)
    in_response_to_id: CommentId | None = None


@dataclass(frozen=True, eq=False)
class Reaction(BaseEntity):
    """A user's stance on a post or a comment."""

    id: ReactionId
    author_id: UserId
    target: PostId | CommentId
    type: ReactionType

    def __post_init__(self) -> None:
        if not isinstance(self.target, (PostId, CommentId)):
            raise TypeError(f"Cannot react to {type(self.target).__name__}")


@dataclass(frozen=True, eq=False)
class Feedback(BaseEntity):
    """A member's rating of an event."""

    MIN_RATING = 1
    MAX_RATING = 5

    id: FeedbackId
    event_id: EventId
    author_id: UserId
    rating: int
    creation_date: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.MIN_RATING <= self.rating <= self.MAX_RATING:
            raise ValueError(
                f"Rating must be between {self.MIN_RATING} and {self.MAX_RATING}"
            )


@dataclass(frozen=True)
class ReportBody:
    """Fields shared by every report variant."""

    author_id: UserId | None
    title: str
    details: str
    category: ReportCategory
    creation_date: datetime = field(default_factory=utcnow)
    update_date: datetime | None = None
    responder_id: UserId | None = None
    feedback: str = ""
    state: ReportState = ReportState.OPEN

    @property
    def is_open(self) -> bool:
        return not self.state.is_closed


class _ReportFields:
    """Read access to the shared body of a report variant."""

    body: ReportBody
    target: EntityId

    @property
    def author_id(self) -> UserId | None:
        return self.body.author_id

    @property
    def state(self) -> ReportState:
        return self.body.state

    @property
    def is_open(self) -> bool:
        return self.body.is_open

    @property
    def target_id(self) -> EntityId:
        return self.target

    def _check_target(self, expected: type[EntityId]) -> None:
        if not isinstance(self.target, expected):
            raise TypeError(
                f"{type(self).__name__} must target a {expected.__name__}, "
                f"got {type(self.target).__name__}"
            )


@dataclass(frozen=True, eq=False)
class EventReport(_ReportFields, BaseEntity):
    id: ReportId
    body: ReportBody
    target: EventId

    report_type = ReportType.EVENT

    def __post_init__(self) -> None:
        self._check_target(EventId)


@dataclass(frozen=True, eq=False)
class PostReport(_ReportFields, BaseEntity):
    id: ReportId
    body: ReportBody
    target: PostId

    report_type = ReportType.POST

    def __post_init__(self) -> None:
        self._check_target(PostId)


@dataclass(frozen=True, eq=False)
class CommentReport(_ReportFields, BaseEntity):
    id: ReportId
    body: ReportBody
    target: CommentId

    report_type = ReportType.COMMENT

    def __post_init__(self) -> None:
        self._check_target(CommentId)


Report = EventReport | PostReport | CommentReport
