"""Unit tests for domain primitives and entities.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from dataclasses import replace
from decimal import Decimal
from uuid import UUID

import pytest

from community.domain import (
    Capacity,
    CommentId,
    CommentReport,
    EntityNotFoundError,
    EventId,
    EventReport,
    Feedback,
    FeedbackId,
    Money,
    PostId,
    Reaction,
    ReactionId,
    ReactionType,
    Report,
    ReportId,
    ReportState,
    UserId,
)
from tests.factories import make_body, make_event, make_user


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).is_zero

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("12.5"))) == "12.50"


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_zero(self):
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)


class TestEntityIds:
    """Tests for typed identifiers."""

    def test_from_string_valid_uuid(self):
        """EventId.from_string parses valid UUID."""
        value = "12345678-1234-5678-1234-567812345678"
        assert EventId.from_string(value).value == UUID(value)

    def test_from_string_invalid_uuid(self):
        """EventId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            EventId.from_string("not-a-uuid")

    def test_ids_of_different_kinds_are_not_equal(self):
        """The same UUID wrapped as two kinds is two different ids."""
        raw = UserId.new().value
        assert UserId(raw) != EventId(raw)


class TestEntities:
    """Tests for entity identity and invariants."""

    def test_equality_is_by_identity(self):
        """An edited copy of an entity is still the same entity."""
        user = make_user()
        assert replace(user, first_name="Changed") == user
        assert make_user() != user

    def test_entities_hash_by_id(self):
        user = make_user()
        assert {user, replace(user, description="x")} == {user}

    def test_event_rejects_user_both_participant_and_interested(self):
        user_id = UserId.new()
        with pytest.raises(ValueError):
            replace(make_event(participant_ids={user_id}), interested_ids=frozenset({user_id}))

    def test_event_free_places(self):
        event = make_event(participants=3, capacity=5)
        assert event.free_places == 2
        assert not event.is_full
        assert make_event(participants=2, capacity=2).is_full
        assert make_event(participants=200).free_places is None

    def test_reaction_rejects_event_target(self):
        with pytest.raises(TypeError):
            Reaction(id=ReactionId.new(), author_id=UserId.new(), target=EventId.new(),
                     type=ReactionType.LIKE)

    @pytest.mark.parametrize("rating", [Feedback.MIN_RATING - 1, Feedback.MAX_RATING + 1])
    def test_feedback_rejects_rating_out_of_range(self, rating):
        with pytest.raises(ValueError):
            Feedback(id=FeedbackId.new(), event_id=EventId.new(), author_id=UserId.new(), rating=rating)

    def test_feedback_accepts_bounds(self):
        for rating in (Feedback.MIN_RATING, Feedback.MAX_RATING):
            assert Feedback(id=FeedbackId.new(), event_id=EventId.new(),
                            author_id=UserId.new(), rating=rating).rating == rating


class TestReports:
    """Tests for the report variants."""

    def test_variant_must_match_target_kind(self):
        """Constructing a variant against the wrong kind of target is a programming error."""
        with pytest.raises(TypeError):
            EventReport(id=ReportId.new(), body=make_body(make_user()), target=PostId.new())

    def test_variant_accepts_matching_target(self):
        report = CommentReport(id=ReportId.new(), body=make_body(make_user()), target=CommentId.new())
        assert isinstance(report, Report)
        assert report.is_open

    def test_closed_states(self):
        assert not ReportState.OPEN.is_closed
        assert ReportState.SUCCESS.is_closed
        assert ReportState.FAILURE.is_closed


class TestErrors:
    def test_not_found_names_the_kind(self):
        error = EntityNotFoundError(Report, ReportId.new())
        assert error.kind is Report
        assert error.message == "Report not found"
        assert str(error) == "NOT_FOUND: Report not found"
