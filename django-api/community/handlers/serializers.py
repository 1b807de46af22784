"""Serializers for transforming domain models to API responses and binding input."""

from enum import Enum

from rest_framework import serializers

from community.conf import get_setting
from community.domain import EventCategory, ReactionType, ReportCategory, ReportState, ReportType
from community.domain.value_objects import as_uuid
from community.listing import EventFilters, Paged, Paging, ParticipantsBucket, PriceType, TimeBucket


class EntityIdField(serializers.UUIDField):
    """Renders typed ids as plain UUID strings."""

    def to_representation(self, value):
        return super().to_representation(as_uuid(value))


class EnumField(serializers.ChoiceField):
    def __init__(self, enum: type[Enum], **kwargs) -> None:
        self.enum = enum
        super().__init__(choices=[member.value for member in enum], **kwargs)

    def to_internal_value(self, data):
        return self.enum(super().to_internal_value(data))

    def to_representation(self, value):
        return value.value if isinstance(value, self.enum) else value


# ---------------------------------------------------------------------- #
# Output
# ---------------------------------------------------------------------- #


class UserSerializer(serializers.Serializer):
    """Serializer for User domain model."""

    id = EntityIdField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    full_name = serializers.CharField()
    email = serializers.EmailField()
    description = serializers.CharField()
    date_of_birth = serializers.DateField(allow_null=True)
    is_admin = serializers.BooleanField()
    is_organizer = serializers.BooleanField()
    email_notification = serializers.BooleanField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = EntityIdField()
    organizer_id = EntityIdField(allow_null=True)
    title = serializers.CharField()
    description = serializers.CharField()
    category = EnumField(EventCategory)
    publication_date = serializers.DateTimeField()
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    location = serializers.CharField()
    capacity = serializers.SerializerMethodField()
    fee = serializers.SerializerMethodField()
    participants_count = serializers.IntegerField(source="participant_count")
    interested_count = serializers.IntegerField()
    view_count = serializers.IntegerField()

    def get_capacity(self, event) -> int | None:
        return event.capacity.value if event.capacity is not None else None

    def get_fee(self, event) -> str | None:
        return str(event.fee) if event.fee is not None else None


class PostSerializer(serializers.Serializer):
    """Serializer for Post domain model."""

    id = EntityIdField()
    event_id = EntityIdField()
    author_id = EntityIdField(allow_null=True)
    content = serializers.CharField()
    creation_date = serializers.DateTimeField()


class CommentSerializer(serializers.Serializer):
    id = EntityIdField()
    post_id = EntityIdField()
    author_id = EntityIdField(allow_null=True)
    content = serializers.CharField()
    creation_date = serializers.DateTimeField()
    in_response_to_id = EntityIdField(allow_null=True)


class ReactionSerializer(serializers.Serializer):
    id = EntityIdField()
    author_id = EntityIdField()
    target_id = EntityIdField(source="target")
    type = EnumField(ReactionType)


class ReportSerializer(serializers.Serializer):
    """Serializer for every report variant."""

    id = EntityIdField()
    report_type = EnumField(ReportType)
    target_id = EntityIdField()
    author_id = EntityIdField(allow_null=True)
    responder_id = EntityIdField(source="body.responder_id", allow_null=True)
    title = serializers.CharField(source="body.title")
    details = serializers.CharField(source="body.details")
    category = EnumField(ReportCategory, source="body.category")
    creation_date = serializers.DateTimeField(source="body.creation_date")
    update_date = serializers.DateTimeField(source="body.update_date", allow_null=True)
    feedback = serializers.CharField(source="body.feedback")
    state = EnumField(ReportState, source="body.state")


class FeedbackSerializer(serializers.Serializer):
    id = EntityIdField()
    event_id = EntityIdField()
    author_id = EntityIdField()
    rating = serializers.IntegerField()
    creation_date = serializers.DateTimeField()


def paged_data(paged: Paged, serializer_class: type[serializers.Serializer]) -> dict:
    return {
        "items": serializer_class(paged.items, many=True).data,
        "page_index": paged.page_index,
        "page_size": paged.page_size,
        "total_count": paged.total_count,
        "total_pages": paged.total_pages,
        "is_last": paged.is_last,
    }


# ---------------------------------------------------------------------- #
# Input
# ---------------------------------------------------------------------- #


class PagingSerializer(serializers.Serializer):
    page_index = serializers.IntegerField(min_value=0, default=0)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False)

    def to_paging(self) -> Paging:
        data = self.validated_data
        return Paging(
            page_index=data["page_index"],
            page_size=data.get("page_size") or get_setting("PAGE_SIZE"),
        )


class EventFiltersSerializer(serializers.Serializer):
    time = serializers.ListField(child=EnumField(TimeBucket), required=False)
    participants = serializers.ListField(child=EnumField(ParticipantsBucket), required=False)
    price = serializers.ListField(child=EnumField(PriceType), required=False)
    event_name = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    organizer_name = serializers.CharField(required=False, allow_blank=True)
    only_available = serializers.BooleanField(default=False)

    def to_filters(self) -> EventFilters:
        data = self.validated_data
        return EventFilters(
            time=frozenset(data.get("time", ())),
            participants=frozenset(data.get("participants", ())),
            price=frozenset(data.get("price", ())),
            event_name=data.get("event_name", ""),
            organizer_name=data.get("organizer_name", ""),
            only_available=data["only_available"],
        )


class CreateEventSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default="")
    category = EnumField(EventCategory, default=EventCategory.UNCATEGORIZED)
    publication_date = serializers.DateTimeField()
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    location = serializers.CharField(max_length=255)
    capacity = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    fee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True
    )


class AddFeedbackSerializer(serializers.Serializer):
    rating = serializers.IntegerField()


class CreatePostSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    content = serializers.CharField()


class AddCommentSerializer(serializers.Serializer):
    content = serializers.CharField()
    in_response_to_id = serializers.UUIDField(required=False, allow_null=True)


class SetReactionSerializer(serializers.Serializer):
    type = EnumField(ReactionType, allow_null=True)


class CreateReportSerializer(serializers.Serializer):
    target_id = serializers.UUIDField()
    title = serializers.CharField(max_length=255)
    details = serializers.CharField(allow_blank=True, default="")
    category = EnumField(ReportCategory, default=ReportCategory.UNKNOWN)
    report_type = EnumField(ReportType)


class AnswerReportSerializer(serializers.Serializer):
    feedback = serializers.CharField(allow_blank=True)
    state = EnumField(ReportState)
