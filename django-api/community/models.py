"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models

from community.domain.value_objects import (
    EventCategory,
    ReactionType,
    ReportCategory,
    ReportState,
    ReportType,
)


def _choices(enum) -> list[tuple[str, str]]:
    return [(member.value, member.name.replace("_", " ").title()) for member in enum]


class User(models.Model):
    """Persistence model for community members."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(unique=True)
    password_hash = models.CharField(max_length=255, blank=True)
    date_of_birth = models.DateField(blank=True, null=True)
    description = models.TextField(blank=True)
    is_admin = models.BooleanField(default=False)
    is_organizer = models.BooleanField(default=False)
    email_notification = models.BooleanField(default=True)
    created_at = models.DateTimeField()

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organizer = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="organized_events"
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=32, choices=_choices(EventCategory))
    publication_date = models.DateTimeField()
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    location = models.CharField(max_length=255)
    capacity = models.PositiveIntegerField(blank=True, null=True)
    fee = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    view_count = models.PositiveIntegerField(default=0)
    participants = models.ManyToManyField(User, related_name="participating_in", blank=True)
    interested = models.ManyToManyField(User, related_name="interested_in", blank=True)

    class Meta:
        ordering = ["start_date"]
        indexes = [
            models.Index(fields=["start_date"]),
        ]

    def __str__(self) -> str:
        return self.title


class Post(models.Model):
    """Persistence model for posts published under an event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="posts")
    author = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="posts"
    )
    content = models.TextField()
    creation_date = models.DateTimeField()

    class Meta:
        ordering = ["-creation_date"]
        indexes = [
            models.Index(fields=["event", "-creation_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.event.title} - {self.creation_date}"


class Comment(models.Model):
    """Persistence model for comments on posts."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    author = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="comments"
    )
    content = models.TextField()
    creation_date = models.DateTimeField()
    in_response_to = models.ForeignKey(
        "self", on_delete=models.CASCADE, null=True, blank=True, related_name="replies"
    )

    class Meta:
        ordering = ["-creation_date"]


class Reaction(models.Model):
    """Persistence model for reactions. Exactly one of post/comment is set."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reactions")
    post = models.ForeignKey(
        Post, on_delete=models.CASCADE, null=True, blank=True, related_name="reactions"
    )
    comment = models.ForeignKey(
        Comment, on_delete=models.CASCADE, null=True, blank=True, related_name="reactions"
    )
    type = models.CharField(max_length=16, choices=_choices(ReactionType))

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["author", "post"], name="one_reaction_per_post"),
            models.UniqueConstraint(fields=["author", "comment"], name="one_reaction_per_comment"),
        ]


class Report(models.Model):
    """Persistence model for every report variant, discriminated by ``report_type``."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    report_type = models.CharField(max_length=16, choices=_choices(ReportType))
    target_id = models.UUIDField(db_index=True)
    author = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="reports"
    )
    responder = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="answered_reports"
    )
    title = models.CharField(max_length=255)
    details = models.TextField(blank=True)
    category = models.CharField(max_length=16, choices=_choices(ReportCategory))
    creation_date = models.DateTimeField()
    update_date = models.DateTimeField(blank=True, null=True)
    feedback = models.TextField(blank=True)
    state = models.CharField(max_length=16, choices=_choices(ReportState))

    class Meta:
        ordering = ["-creation_date"]
        indexes = [
            models.Index(fields=["report_type", "state"]),
        ]

    def __str__(self) -> str:
        return f"{self.report_type} report: {self.title}"


class Feedback(models.Model):
    """Persistence model for event ratings. One per member and event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="feedback")
    author = models.ForeignKey(User, on_delete=models.CASCADE, related_name="feedback")
    rating = models.PositiveSmallIntegerField()
    creation_date = models.DateTimeField()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "author"], name="one_feedback_per_event"),
        ]
