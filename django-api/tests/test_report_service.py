"""Unit tests for ReportService.

Run with: pytest tests/test_report_service.py -v
"""

from dataclasses import replace
from uuid import UUID, uuid4

import pytest

from community.domain import (
    CommentReport,
    EntityNotFoundError,
    Event,
    EventReport,
    InvalidStateError,
    Report,
    ReportCategory,
    ReportState,
    ReportType,
    UserUnauthorizedError,
)
from community.services import ReportService
from community.stores import MemoryUnitOfWork


def service_for(uow, user):
    return ReportService.as_user(uow, user.id if user else None)


class TestGetAll:
    def test_base_kind_returns_every_report(self, uow, world):
        """Given four reports of three variants, Report returns all four."""
        assert len(service_for(uow, world.ad0).get_all(Report)) == 4

    def test_variant_returns_only_that_variant(self, uow, world):
        result = service_for(uow, world.ad0).get_all(CommentReport)

        assert len(result) == 2
        assert all(isinstance(report, CommentReport) for report in result)

    def test_non_admin_is_rejected(self, uow, world):
        with pytest.raises(UserUnauthorizedError):
            service_for(uow, world.st0).get_all()


class TestGetById:
    def test_unknown_id_raises_not_found_for_report(self, uow, world):
        with pytest.raises(EntityNotFoundError) as exc_info:
            service_for(uow, world.ad0).get_by_id(UUID(int=0))
        assert exc_info.value.kind is Report

    def test_known_id_returns_report(self, uow, world):
        result = service_for(uow, world.ad0).get_by_id(world.ev_re0.id)
        assert result.id == world.ev_re0.id

    def test_variant_lookup_returns_variant(self, uow, world):
        result = service_for(uow, world.ad0).get_by_id(world.c_re0.id, CommentReport)
        assert isinstance(result, CommentReport)

    def test_variant_lookup_of_other_variant_raises(self, uow, world):
        with pytest.raises(EntityNotFoundError) as exc_info:
            service_for(uow, world.ad0).get_by_id(world.ev_re0.id, CommentReport)
        assert exc_info.value.kind is CommentReport

    def test_author_sees_own_report(self, uow, world):
        assert service_for(uow, world.st0).get_by_id(world.p_re0.id) == world.p_re0

    def test_other_member_is_rejected(self, uow, world):
        with pytest.raises(UserUnauthorizedError):
            service_for(uow, world.st2).get_by_id(world.p_re0.id)

    def test_anonymous_is_rejected(self, uow, world):
        with pytest.raises(UserUnauthorizedError):
            service_for(uow, None).get_by_id(world.p_re0.id)


class TestCreateReport:
    def test_unknown_target_raises_not_found_for_target_kind(self, uow, world):
        with pytest.raises(EntityNotFoundError) as exc_info:
            service_for(uow, world.st0).create_report(
                uuid4(), "title", "details", ReportCategory.BUG, ReportType.EVENT
            )
        assert exc_info.value.kind is Event

    def test_anonymous_is_rejected(self, uow, world):
        with pytest.raises(UserUnauthorizedError):
            service_for(uow, None).create_report(
                world.ev0.id.value, "title", "details", ReportCategory.BUG, ReportType.EVENT
            )

    def test_creates_event_report(self, uow, world):
        report = service_for(uow, world.st0).create_report(
            world.ev0.id.value, "title", "details", ReportCategory.BUG, ReportType.EVENT
        )

        stored = MemoryUnitOfWork(world.store).repository(EventReport).get(report.id)
        assert stored is not None
        assert stored.target == world.ev0.id
        assert stored.author_id == world.st0.id
        assert stored.state is ReportState.OPEN

    def test_comment_report_targets_comment(self, uow, world):
        report = service_for(uow, world.st2).create_report(
            world.c0.id.value, "title", "details", ReportCategory.SPAM, ReportType.COMMENT
        )
        assert isinstance(report, CommentReport)
        assert report.target == world.c0.id

    def test_unknown_report_type_is_a_programming_error(self, uow, world):
        with pytest.raises(ValueError):
            service_for(uow, world.st0).create_report(
                world.ev0.id.value, "title", "details", ReportCategory.BUG, "EVENT"
            )

    def test_type_mismatch_raises_not_found(self, uow, world):
        """A post id filed as an event report does not resolve."""
        with pytest.raises(EntityNotFoundError):
            service_for(uow, world.st0).create_report(
                world.p0.id.value, "title", "details", ReportCategory.BUG, ReportType.EVENT
            )


class TestAnswerReport:
    def test_member_cannot_update(self, uow, world):
        edited = replace(world.c_re1, body=replace(world.c_re1.body, state=ReportState.SUCCESS))
        with pytest.raises(UserUnauthorizedError):
            service_for(uow, world.st0).update_report(edited)

    def test_unknown_report_raises_not_found(self, uow, world):
        with pytest.raises(EntityNotFoundError) as exc_info:
            service_for(uow, world.ad0).answer_report(uuid4(), "feedback", ReportState.SUCCESS)
        assert exc_info.value.kind is Report

    def test_closed_report_cannot_be_answered(self, uow, world):
        edited = replace(world.c_re0, body=replace(world.c_re0.body, feedback="again"))
        with pytest.raises(InvalidStateError):
            service_for(uow, world.ad0).update_report(edited)

    def test_admin_answers_open_report(self, uow, world):
        answered = service_for(uow, world.ad0).answer_report(
            world.p_re0.id, "handled", ReportState.SUCCESS
        )

        assert answered.body.responder_id == world.ad0.id
        assert answered.body.update_date is not None
        stored = MemoryUnitOfWork(world.store).repository(Report).get(world.p_re0.id)
        assert stored.body.feedback == "handled"
        assert not stored.is_open

    def test_answered_report_is_then_closed(self, uow, world):
        service = service_for(uow, world.ad0)
        service.answer_report(world.p_re0.id, "handled", ReportState.FAILURE)

        with pytest.raises(InvalidStateError):
            service.answer_report(world.p_re0.id, "twice", ReportState.SUCCESS)


class TestDeleteReport:
    def test_unknown_id_raises_not_found(self, uow, world):
        with pytest.raises(EntityNotFoundError):
            service_for(uow, world.ad0).delete_report(UUID(int=0))

    def test_author_deletes_report(self, uow, world):
        service_for(uow, world.st0).delete_report(world.ev_re0.id)

        found, _ = MemoryUnitOfWork(world.store).repository(Report).try_get(world.ev_re0.id)
        assert not found

    def test_admin_deletes_any_report(self, uow, world):
        service_for(uow, world.ad0).delete_report(world.c_re0.id)
        assert MemoryUnitOfWork(world.store).repository(Report).get(world.c_re0.id) is None

    def test_other_member_cannot_delete(self, uow, world):
        with pytest.raises(UserUnauthorizedError):
            service_for(uow, world.st2).delete_report(world.ev_re0.id)
        assert MemoryUnitOfWork(world.store).repository(Report).get(world.ev_re0.id) is not None
