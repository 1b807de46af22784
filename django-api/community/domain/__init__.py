from community.domain.errors import (
    DomainError,
    EntityNotFoundError,
    ErrorCode,
    InvalidArgumentError,
    InvalidStateError,
    UserUnauthorizedError,
)
from community.domain.models import (
    BaseEntity,
    Comment,
    CommentReport,
    Event,
    EventReport,
    Feedback,
    Post,
    PostReport,
    Reaction,
    Report,
    ReportBody,
    User,
)
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

__all__ = [
    "BaseEntity",
    "User",
    "Event",
    "Post",
    "Comment",
    "Reaction",
    "Feedback",
    "Report",
    "ReportBody",
    "EventReport",
    "PostReport",
    "CommentReport",
    "EntityId",
    "UserId",
    "EventId",
    "PostId",
    "CommentId",
    "ReactionId",
    "ReportId",
    "FeedbackId",
    "Money",
    "Capacity",
    "EventCategory",
    "ReactionType",
    "ReportType",
    "ReportCategory",
    "ReportState",
    "ErrorCode",
    "DomainError",
    "EntityNotFoundError",
    "UserUnauthorizedError",
    "InvalidStateError",
    "InvalidArgumentError",
]
