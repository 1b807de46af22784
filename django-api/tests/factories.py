"""Builders for domain objects used across the test suite."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from community.domain import (
    Capacity,
    Comment,
    CommentId,
    CommentReport,
    Event,
    EventCategory,
    EventId,
    EventReport,
    Money,
    Post,
    PostId,
    PostReport,
    ReportBody,
    ReportCategory,
    ReportId,
    ReportState,
    User,
    UserId,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_user(first_name: str = "Anna", last_name: str = "Nowak", **extra) -> User:
    email = f"{first_name.lower()}.{last_name.lower()}@example.com"
    return User.create(first_name, last_name, email, password_hash="x", **extra)


def make_event(
    organizer: User | None = None,
    *,
    title: str = "Test event",
    participants: int = 0,
    start: datetime | None = None,
    end: datetime | None = None,
    capacity: int | None = None,
    fee: str | None = None,
    participant_ids=None,
) -> Event:
    start = start or NOW + timedelta(days=10)
    end = end or start + timedelta(days=1)
    if participant_ids is None:
        participant_ids = frozenset(UserId.new() for _ in range(participants))
    return Event(
        id=EventId.new(),
        organizer_id=organizer.id if organizer else None,
        title=title,
        description="test description",
        category=EventCategory.UNCATEGORIZED,
        publication_date=NOW,
        start_date=start,
        end_date=end,
        location="test location",
        capacity=Capacity(capacity) if capacity is not None else None,
        fee=Money(Decimal(fee)) if fee is not None else None,
        participant_ids=frozenset(participant_ids),
    )


def make_post(event: Event, author: User, content: str = "post", created: datetime = NOW) -> Post:
    return Post(id=PostId.new(), event_id=event.id, author_id=author.id, content=content, creation_date=created)


def make_comment(post: Post, author: User, content: str = "comment", reply_to: Comment | None = None) -> Comment:
    return Comment(
        id=CommentId.new(),
        post_id=post.id,
        author_id=author.id,
        content=content,
        creation_date=NOW,
        in_response_to_id=reply_to.id if reply_to else None,
    )


def make_body(author: User, title: str = "report", category=ReportCategory.UNKNOWN,
              state=ReportState.OPEN) -> ReportBody:
    return ReportBody(
        author_id=author.id,
        title=title,
        details="report details",
        category=category,
        creation_date=NOW,
        state=state,
    )


def event_report(event: Event, author: User, **body) -> EventReport:
    return EventReport(id=ReportId.new(), body=make_body(author, **body), target=event.id)


def post_report(post: Post, author: User, **body) -> PostReport:
    return PostReport(id=ReportId.new(), body=make_body(author, **body), target=post.id)


def comment_report(comment: Comment, author: User, **body) -> CommentReport:
    return CommentReport(id=ReportId.new(), body=make_body(author, **body), target=comment.id)
