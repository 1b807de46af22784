"""Integration tests for the Django ORM unit of work.

Run with: pytest tests/test_django_store.py -v
"""

from dataclasses import replace

import pytest

from community.domain import (
    Comment,
    CommentReport,
    EntityNotFoundError,
    Event,
    Feedback,
    FeedbackId,
    InvalidStateError,
    Post,
    Reaction,
    ReactionId,
    ReactionType,
    Report,
    User,
)
from community.services import EventService
from community.stores.django_store import DjangoUnitOfWork
from tests.factories import make_event, make_user

pytestmark = pytest.mark.django_db


class TestRoundTrip:
    def test_event_round_trip(self, db_world):
        event = DjangoUnitOfWork().repository(Event).get(db_world.ev0.id)

        assert event.title == db_world.ev0.title
        assert event.organizer_id == db_world.st1.id
        assert event.capacity.value == 20
        assert event.start_date == db_world.ev0.start_date
        assert event.participant_ids == frozenset()

    def test_memberships_round_trip(self, db_world):
        writer = DjangoUnitOfWork()
        event = replace(
            db_world.ev0,
            participant_ids=frozenset({db_world.st0.id}),
            interested_ids=frozenset({db_world.st2.id}),
        )
        writer.repository(Event).update(event)
        writer.commit()

        stored = DjangoUnitOfWork().repository(Event).get(db_world.ev0.id)
        assert stored.participant_ids == {db_world.st0.id}
        assert stored.interested_ids == {db_world.st2.id}

    def test_fee_round_trip(self, db_world):
        event = make_event(db_world.st1, fee="12.50")
        writer = DjangoUnitOfWork()
        writer.repository(Event).add(event)
        writer.commit()

        assert str(DjangoUnitOfWork().repository(Event).get(event.id).fee) == "12.50"

    def test_report_variants_share_one_table(self, db_world):
        uow = DjangoUnitOfWork()

        assert len(uow.repository(Report).all()) == 4
        comment_reports = uow.repository(CommentReport).all()
        assert {report.id for report in comment_reports} == {db_world.c_re0.id, db_world.c_re1.id}
        assert uow.repository(CommentReport).get(db_world.ev_re0.id) is None

    def test_reaction_on_comment_round_trip(self, db_world):
        reaction = Reaction(id=ReactionId.new(), author_id=db_world.st0.id,
                            target=db_world.c1.id, type=ReactionType.LIKE)
        writer = DjangoUnitOfWork()
        writer.repository(Reaction).add(reaction)
        writer.commit()

        stored = DjangoUnitOfWork().repository(Reaction).get(reaction.id)
        assert stored.target == db_world.c1.id
        assert stored.type is ReactionType.LIKE


    def test_feedback_round_trip(self, db_world):
        feedback = Feedback(id=FeedbackId.new(), event_id=db_world.ev0.id,
                            author_id=db_world.st0.id, rating=4)
        writer = DjangoUnitOfWork()
        writer.repository(Feedback).add(feedback)
        writer.commit()

        stored = DjangoUnitOfWork().repository(Feedback).get(feedback.id)
        assert stored == feedback
        assert stored.event_id == db_world.ev0.id
        assert stored.author_id == db_world.st0.id
        assert stored.rating == 4


class TestCommit:
    def test_uncommitted_changes_are_not_persisted(self, db_world):
        writer = DjangoUnitOfWork()
        writer.repository(User).add(make_user("Staged", "Only"))

        assert len(DjangoUnitOfWork().repository(User).all()) == 4

    def test_constraint_violation_rejects_whole_batch(self, db_world):
        event = make_event(db_world.st1, title="never stored")
        writer = DjangoUnitOfWork()
        writer.repository(Event).add(event)
        writer.repository(User).add(make_user("Anna", "Nowak"))

        with pytest.raises(ValueError):
            writer.commit()

        assert not writer.has_changes
        assert DjangoUnitOfWork().repository(Event).get(event.id) is None

    def test_service_cascade_is_persisted(self, db_world):
        EventService.as_user(DjangoUnitOfWork(), db_world.st1.id).delete_event(db_world.ev0.id)

        uow = DjangoUnitOfWork()
        assert uow.repository(Event).all() == []
        assert uow.repository(Post).all() == []
        assert uow.repository(Comment).all() == []
        assert uow.repository(Report).all() == []
        assert len(uow.repository(User).all()) == 4

    def test_view_count_is_persisted(self, db_world):
        EventService.as_user(DjangoUnitOfWork(), None).get_event(db_world.ev0.id)

        assert DjangoUnitOfWork().repository(Event).get(db_world.ev0.id).view_count == 1


class TestConcurrentWriters:
    """Tests for units of work that read the same rows before writing."""

    def test_update_of_stale_row_is_rejected(self, db_world):
        first = DjangoUnitOfWork()
        second = DjangoUnitOfWork()
        seen_first = first.repository(Event).get(db_world.ev0.id)
        seen_second = second.repository(Event).get(db_world.ev0.id)

        first.repository(Event).update(
            replace(seen_first, participant_ids=frozenset({db_world.st0.id}))
        )
        second.repository(Event).update(
            replace(seen_second, participant_ids=frozenset({db_world.st2.id}))
        )
        first.commit()

        with pytest.raises(InvalidStateError):
            second.commit()

        assert not second.has_changes
        stored = DjangoUnitOfWork().repository(Event).get(db_world.ev0.id)
        assert stored.participant_ids == {db_world.st0.id}

    def test_update_of_row_deleted_elsewhere_raises_not_found(self, db_world):
        writer = DjangoUnitOfWork()
        writer.repository(User).update(replace(db_world.st2, description="edited"))

        remover = DjangoUnitOfWork()
        remover.repository(User).delete(db_world.st2)
        remover.commit()

        with pytest.raises(EntityNotFoundError) as exc_info:
            writer.commit()
        assert exc_info.value.kind is User
        assert DjangoUnitOfWork().repository(User).get(db_world.st2.id) is None

    def test_second_reaction_for_same_author_and_target_is_rejected(self, db_world):
        first = DjangoUnitOfWork()
        second = DjangoUnitOfWork()
        for uow in (first, second):
            uow.repository(Reaction).add(
                Reaction(id=ReactionId.new(), author_id=db_world.st0.id,
                         target=db_world.p0.id, type=ReactionType.LIKE)
            )
        first.commit()

        with pytest.raises(ValueError):
            second.commit()
        assert len(DjangoUnitOfWork().repository(Reaction).all()) == 1

    def test_second_feedback_by_same_member_is_rejected(self, db_world):
        uow = DjangoUnitOfWork()
        for rating in (2, 5):
            uow.repository(Feedback).add(
                Feedback(id=FeedbackId.new(), event_id=db_world.ev0.id,
                         author_id=db_world.st0.id, rating=rating)
            )

        with pytest.raises(ValueError):
            uow.commit()
        assert DjangoUnitOfWork().repository(Feedback).all() == []
