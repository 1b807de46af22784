"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EntityId:
    """Unique identifier of a persisted entity."""

    value: UUID

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


class UserId(EntityId):
    """Unique identifier for a User."""


class EventId(EntityId):
    """Unique identifier for an Event."""


class PostId(EntityId):
    """Unique identifier for a Post."""


class CommentId(EntityId):
    """Unique identifier for a Comment."""


class ReactionId(EntityId):
    """Unique identifier for a Reaction."""


class ReportId(EntityId):
    """Unique identifier for a Report."""


class FeedbackId(EntityId):
    """Unique identifier for an event Feedback."""


def as_uuid(value: EntityId | UUID) -> UUID:
    """Return the raw UUID behind a typed id."""
    if isinstance(value, EntityId):
        return value.value
    return value


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


class EventCategory(Enum):
    UNCATEGORIZED = "UNCATEGORIZED"
    MUSIC = "MUSIC"
    SPORT = "SPORT"
    EDUCATION = "EDUCATION"
    PARTY = "PARTY"
    CULTURE = "CULTURE"


class ReactionType(Enum):
    LIKE = "LIKE"
    DISLIKE = "DISLIKE"


class ReportType(Enum):
    """Kind of entity a report is filed against."""

    EVENT = "EVENT"
    POST = "POST"
    COMMENT = "COMMENT"


class ReportCategory(Enum):
    UNKNOWN = "UNKNOWN"
    BUG = "BUG"
    BEHAVIOUR = "BEHAVIOUR"
    SPAM = "SPAM"


class ReportState(Enum):
    """Report lifecycle. Anything but OPEN is terminal."""

    OPEN = "OPEN"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @property
    def is_closed(self) -> bool:
        return self is not ReportState.OPEN
