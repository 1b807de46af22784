from community.listing.filters import (
    EventFilters,
    ParticipantsBucket,
    PriceType,
    TimeBucket,
    filter_events,
)
from community.listing.paging import Paged, Paging, creation_date_key, event_state_key

__all__ = [
    "EventFilters",
    "ParticipantsBucket",
    "PriceType",
    "TimeBucket",
    "filter_events",
    "Paged",
    "Paging",
    "creation_date_key",
    "event_state_key",
]
