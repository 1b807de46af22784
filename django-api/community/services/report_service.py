"""Report service - moderation reports against events, posts and comments."""

import logging
from dataclasses import replace
from uuid import UUID

from community.domain import (
    Comment,
    CommentReport,
    Event,
    EventReport,
    InvalidStateError,
    Post,
    PostReport,
    Report,
    ReportBody,
    ReportCategory,
    ReportId,
    ReportState,
    ReportType,
)
from community.domain.models import utcnow
from community.services.base import BaseService

logger = logging.getLogger(__name__)


class ReportService(BaseService):
    """Service for filing and moderating reports."""

    def get_all(self, kind=Report) -> list[Report]:
        """Return every report of ``kind`` (a variant, or ``Report`` for all)."""
        self.allow_only_admins()

        return self.uow.repository(kind).all()

    def get_by_id(self, report_id: ReportId | UUID, kind=Report) -> Report:
        """Return a report to its author or an admin.

        Raises:
            EntityNotFoundError: If no report of exactly ``kind`` has that id.
            UserUnauthorizedError: If the acting user is neither author nor admin.
        """
        report = self.uow.repository(kind).get_or_raise(report_id)

        self.allow_only_user(report.author_id)

        return report

    def create_report(
        self,
        target_id: UUID,
        title: str,
        details: str,
        category: ReportCategory,
        report_type: ReportType,
    ) -> Report:
        """File a report against an event, post or comment.

        Raises:
            UserUnauthorizedError: For the anonymous context.
            EntityNotFoundError: If the target does not exist.
            ValueError: If ``report_type`` is not a ReportType member.
        """
        author = self.allow_signed_in_users()
        body = ReportBody(author_id=author.id, title=title, details=details, category=category)

        match report_type:
            case ReportType.EVENT:
                event = self.uow.repository(Event).get_or_raise(target_id)
                report = EventReport(id=ReportId.new(), body=body, target=event.id)
            case ReportType.POST:
                post = self.uow.repository(Post).get_or_raise(target_id)
                report = PostReport(id=ReportId.new(), body=body, target=post.id)
            case ReportType.COMMENT:
                comment = self.uow.repository(Comment).get_or_raise(target_id)
                report = CommentReport(id=ReportId.new(), body=body, target=comment.id)
            case _:
                raise ValueError(f"Unknown report type: {report_type!r}")

        self.uow.repository(Report).add(report)
        self.uow.commit()

        logger.info("Report %s filed by %s against %s", report.id, author.id, target_id)
        return report

    def update_report(self, edited: Report) -> Report:
        """Answer an open report with the feedback and state carried by ``edited``."""
        return self.answer_report(edited.id, edited.body.feedback, edited.body.state)

    def answer_report(self, report_id: ReportId | UUID, feedback: str, state: ReportState) -> Report:
        """Answer an open report with feedback and a new state.

        Raises:
            UserUnauthorizedError: If the acting user is not an admin.
            EntityNotFoundError: If the report does not exist.
            InvalidStateError: If the report is already closed.
        """
        admin = self.allow_only_admins()

        report = self.uow.repository(Report).get_or_raise(report_id)

        if not report.is_open:
            raise InvalidStateError("Report is closed")

        body = replace(
            report.body,
            responder_id=admin.id,
            feedback=feedback,
            state=state,
            update_date=utcnow(),
        )
        updated = replace(report, body=body)

        self.uow.repository(Report).update(updated)
        self.uow.commit()

        logger.info("Report %s answered by %s: %s", report.id, admin.id, body.state.value)
        return updated

    def delete_report(self, report_id: ReportId | UUID) -> None:
        """Remove a report. Only its author or an admin may do so."""
        report = self.uow.repository(Report).get_or_raise(report_id)

        self.allow_only_user(report.author_id)

        self.uow.repository(Report).delete(report)
        self.uow.commit()

