"""Event service - all event business logic lives here.

Services:
- Depend only on interfaces (unit of work and its repositories)
- Call exactly one guard before touching data
- Validate domain invariants
- Return domain models or raise domain errors
"""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from community.domain import (
    Capacity,
    Event,
    EventCategory,
    EventId,
    Feedback,
    FeedbackId,
    InvalidArgumentError,
    InvalidStateError,
    Money,
    Post,
    User,
    UserId,
)
from community.services import cascade
from community.services.base import BaseService

logger = logging.getLogger(__name__)


class EventService(BaseService):
    """Service for event catalog and membership operations."""

    def get_all(self) -> list[Event]:
        """Return all events."""
        self.allow_all_users()

        return self.uow.repository(Event).all()

    def get_organizers(self) -> dict[UserId, User]:
        """Return the organizers of all events, keyed by id."""
        self.allow_all_users()

        organizer_ids = {event.organizer_id for event in self.uow.repository(Event).all()}
        users = self.uow.repository(User).find(lambda user: user.id in organizer_ids)
        return {user.id: user for user in users}

    def get_event(self, event_id: EventId | UUID) -> Event:
        """Return an event by ID and count the view.

        Raises:
            EntityNotFoundError: If the event does not exist.
        """
        self.allow_all_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        event = replace(event, view_count=event.view_count + 1)
        self.uow.repository(Event).update(event)
        self.uow.commit()

        return event

    def get_event_posts(self, event_id: EventId | UUID) -> list[Post]:
        """Return the posts published under an event.

        Raises:
            UserUnauthorizedError: For the anonymous context.
            EntityNotFoundError: If the event does not exist.
        """
        self.allow_signed_in_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        return self.uow.repository(Post).find(lambda post: post.event_id == event.id)

    def create_event(
        self,
        title: str,
        description: str,
        category: EventCategory,
        publication_date: datetime,
        start_date: datetime,
        end_date: datetime,
        location: str,
        capacity: int | None = None,
        fee: Decimal | None = None,
    ) -> Event:
        """Create an event organized by the acting user.

        Raises:
            UserUnauthorizedError: If the acting user is not an organizer or admin.
            InvalidArgumentError: If the dates, capacity or fee are invalid.
        """
        organizer = self.allow_only_organizers()

        if end_date < start_date:
            raise InvalidArgumentError("Event cannot end before it starts")
        try:
            event = Event(
                id=EventId.new(),
                organizer_id=organizer.id,
                title=title,
                description=description,
                category=category,
                publication_date=publication_date,
                start_date=start_date,
                end_date=end_date,
                location=location,
                capacity=Capacity(capacity) if capacity is not None else None,
                fee=Money(fee) if fee is not None else None,
            )
        except ValueError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        self.uow.repository(Event).add(event)
        self.uow.commit()

        logger.info("Event %s created by %s", event.id, organizer.id)
        return event

    def delete_event(self, event_id: EventId | UUID) -> None:
        """Delete an event with its posts, comments, reactions and reports.

        Raises:
            EntityNotFoundError: If the event does not exist.
            UserUnauthorizedError: If the acting user is neither organizer nor admin.
        """
        event = self.uow.repository(Event).get_or_raise(event_id)

        self.allow_only_user(event.organizer_id)

        removed = cascade.remove_event(self.uow, event)
        reports = cascade.remove_reports_against(self.uow, removed)
        self.uow.commit()

        logger.info("Event %s deleted with %d dependant(s), %d report(s)",
                    event.id, len(removed) - 1, reports)

    def try_add_participant(self, event_id: EventId | UUID) -> bool:
        """Register the acting user. Returns False if already registered or full."""
        user = self.allow_signed_in_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        if user.id in event.participant_ids or event.is_full:
            return False

        self._save(replace(
            event,
            participant_ids=event.participant_ids | {user.id},
            interested_ids=event.interested_ids - {user.id},
        ))
        return True

    def try_remove_participant(self, event_id: EventId | UUID) -> bool:
        """Unregister the acting user. Returns False if not registered."""
        user = self.allow_signed_in_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        if user.id not in event.participant_ids:
            return False

        self._save(replace(event, participant_ids=event.participant_ids - {user.id}))
        return True

    def try_add_interested(self, event_id: EventId | UUID) -> bool:
        """Mark the acting user as interested. Participants cannot also be interested."""
        user = self.allow_signed_in_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        if user.id in event.interested_ids or user.id in event.participant_ids:
            return False

        self._save(replace(event, interested_ids=event.interested_ids | {user.id}))
        return True

    def try_remove_interested(self, event_id: EventId | UUID) -> bool:
        user = self.allow_signed_in_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        if user.id not in event.interested_ids:
            return False

        self._save(replace(event, interested_ids=event.interested_ids - {user.id}))
        return True

    def add_feedback(self, event_id: EventId | UUID, rating: int) -> Feedback:
        """Rate an event. Each member rates an event once.

        Raises:
            EntityNotFoundError: If the event does not exist.
            InvalidArgumentError: If the rating is out of range.
            InvalidStateError: If the acting user already rated the event.
        """
        user = self.allow_signed_in_users()

        event = self.uow.repository(Event).get_or_raise(event_id)
        repository = self.uow.repository(Feedback)
        if repository.find(lambda f: f.event_id == event.id and f.author_id == user.id):
            raise InvalidStateError("Event already rated")
        try:
            feedback = Feedback(id=FeedbackId.new(), event_id=event.id, author_id=user.id, rating=rating)
        except ValueError as exc:
            raise InvalidArgumentError(str(exc)) from exc

        repository.add(feedback)
        self.uow.commit()

        logger.info("Event %s rated %d by %s", event.id, rating, user.id)
        return feedback

    def _save(self, event: Event) -> None:
        self.uow.repository(Event).update(event)
        self.uow.commit()
