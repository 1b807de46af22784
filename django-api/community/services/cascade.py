"""Staged removal of an entity together with everything that depends on it.

These helpers only stage deletes; the calling service has already passed
its guard and commits once at the end.
"""

from uuid import UUID

from community.domain import Comment, Event, Feedback, Post, Reaction, Report
from community.domain.value_objects import as_uuid
from community.stores.interfaces import UnitOfWork


def remove_comment(uow: UnitOfWork, comment: Comment) -> set[UUID]:
    """Stage removal of a comment, its replies and their reactions."""
    removed = {as_uuid(comment.id)}
    replies = uow.repository(Comment).find(lambda c: c.in_response_to_id == comment.id)
    for reply in replies:
        removed |= remove_comment(uow, reply)
    uow.repository(Comment).delete(comment)
    _remove_reactions(uow, {as_uuid(comment.id)})
    return removed


def remove_post(uow: UnitOfWork, post: Post) -> set[UUID]:
    """Stage removal of a post, its comments and reactions."""
    removed = {as_uuid(post.id)}
    comments = uow.repository(Comment).find(lambda c: c.post_id == post.id)
    for comment in comments:
        if uow.repository(Comment).get(comment.id) is not None:
            removed |= remove_comment(uow, comment)
    uow.repository(Post).delete(post)
    _remove_reactions(uow, {as_uuid(post.id)})
    return removed


def remove_event(uow: UnitOfWork, event: Event) -> set[UUID]:
    """Stage removal of an event, its posts and its feedback."""
    removed = {as_uuid(event.id)}
    for post in uow.repository(Post).find(lambda p: p.event_id == event.id):
        removed |= remove_post(uow, post)
    for feedback in uow.repository(Feedback).find(lambda f: f.event_id == event.id):
        uow.repository(Feedback).delete(feedback)
    uow.repository(Event).delete(event)
    return removed


def remove_reports_against(uow: UnitOfWork, target_ids: set[UUID]) -> int:
    """Stage removal of every report whose target is in ``target_ids``."""
    repository = uow.repository(Report)
    doomed = repository.find(lambda report: as_uuid(report.target_id) in target_ids)
    for report in doomed:
        repository.delete(report)
    return len(doomed)


def _remove_reactions(uow: UnitOfWork, target_ids: set[UUID]) -> None:
    repository = uow.repository(Reaction)
    for reaction in repository.find(lambda r: as_uuid(r.target) in target_ids):
        repository.delete(reaction)
