"""Event list filters.

Bucketed dimensions treat "nothing selected" and "everything selected" the
same way: the dimension does not filter. Text filters are case-sensitive
substring checks. All active filters combine conjunctively.
"""

from collections.abc import Callable, Collection, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from community.domain import Event, User, UserId
from community.domain.models import utcnow


class TimeBucket(Enum):
    PAST = "PAST"
    CURRENT = "CURRENT"
    FUTURE = "FUTURE"


class ParticipantsBucket(Enum):
    TO_50 = "TO_50"
    FROM_50_TO_100 = "FROM_50_TO_100"
    ABOVE_100 = "ABOVE_100"


class PriceType(Enum):
    FREE = "FREE"
    PAID = "PAID"


@dataclass(frozen=True)
class EventFilters:
    """Declarative list filters, as bound from a query string."""

    time: frozenset[TimeBucket] = frozenset()
    participants: frozenset[ParticipantsBucket] = frozenset()
    price: frozenset[PriceType] = frozenset()
    event_name: str = ""
    organizer_name: str = ""
    only_available: bool = False


EventPredicate = Callable[[Event], bool]


def participants_predicate(selected: Collection[ParticipantsBucket]) -> EventPredicate | None:
    """Predicate for the participant-count buckets, or None when it does not filter."""
    if not selected or len(selected) >= len(ParticipantsBucket):
        return None

    if len(selected) == 1:
        (bucket,) = selected
        match bucket:
            case ParticipantsBucket.TO_50:
                return lambda e: 0 <= e.participant_count <= 50
            case ParticipantsBucket.FROM_50_TO_100:
                return lambda e: 50 <= e.participant_count <= 100
            case ParticipantsBucket.ABOVE_100:
                return lambda e: e.participant_count >= 100
        raise ValueError(f"Unknown participants bucket: {bucket!r}")

    if ParticipantsBucket.TO_50 not in selected:
        return lambda e: e.participant_count >= 50
    if ParticipantsBucket.ABOVE_100 not in selected:
        return lambda e: 0 <= e.participant_count <= 100
    return lambda e: 0 <= e.participant_count <= 50 or e.participant_count >= 100


def time_predicate(selected: Collection[TimeBucket], now: datetime) -> EventPredicate | None:
    """Predicate for the past/current/future buckets, or None when it does not filter."""
    if not selected or len(selected) >= len(TimeBucket):
        return None

    if len(selected) == 1:
        (bucket,) = selected
        match bucket:
            case TimeBucket.PAST:
                return lambda e: e.end_date <= now
            case TimeBucket.CURRENT:
                return lambda e: e.start_date <= now <= e.end_date
            case TimeBucket.FUTURE:
                return lambda e: e.start_date >= now
        raise ValueError(f"Unknown time bucket: {bucket!r}")

    if TimeBucket.PAST not in selected:
        return lambda e: e.end_date >= now
    if TimeBucket.FUTURE not in selected:
        return lambda e: e.start_date <= now
    return lambda e: e.end_date <= now or e.start_date >= now


def price_predicate(selected: Collection[PriceType]) -> EventPredicate | None:
    if len(selected) != 1:
        return None
    if PriceType.FREE in selected:
        return lambda e: e.fee is None or e.fee.is_zero
    # Any declared fee counts as paid, a zero fee included.
    return lambda e: e.fee is not None


def organizer_predicate(query: str, organizers: Mapping[UserId, User]) -> EventPredicate | None:
    """First token must be in the first name, second token in the last name."""
    if not query:
        return None
    tokens = query.split()
    first_name = tokens[0] if tokens else ""
    last_name = tokens[1] if len(tokens) > 1 else ""

    def matches(event: Event) -> bool:
        organizer = organizers.get(event.organizer_id) if event.organizer_id else None
        return (
            organizer is not None
            and first_name in organizer.first_name
            and last_name in organizer.last_name
        )

    return matches


def filter_events(
    events: Iterable[Event],
    filters: EventFilters,
    organizers: Mapping[UserId, User] | None = None,
    now: datetime | None = None,
) -> list[Event]:
    """Return the events passing every active filter, in input order."""
    now = now or utcnow()
    predicates = [
        (lambda e: filters.event_name in e.title) if filters.event_name else None,
        organizer_predicate(filters.organizer_name, organizers or {}),
        participants_predicate(filters.participants),
        time_predicate(filters.time, now),
        price_predicate(filters.price),
        (lambda e: e.capacity is None or e.free_places > 0) if filters.only_available else None,
    ]
    active = [predicate for predicate in predicates if predicate is not None]
    return [event for event in events if all(predicate(event) for predicate in active)]
