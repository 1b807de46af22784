"""Deterministic pagination of in-memory sequences."""

import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, TypeVar

from community.domain import Event
from community.domain.value_objects import as_uuid

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Paging:
    """Zero-based page request."""

    page_index: int = 0
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page_index < 0:
            raise ValueError("Page index cannot be negative")
        if self.page_size <= 0:
            raise ValueError("Page size must be positive")


@dataclass(frozen=True)
class Paged(Generic[T]):
    """One page of a sorted sequence plus totals."""

    items: tuple[T, ...]
    page_index: int
    page_size: int
    total_count: int
    total_pages: int
    is_last: bool

    @classmethod
    def page_from(
        cls,
        items: Iterable[T],
        key: Callable[[T], Any],
        paging: Paging,
    ) -> "Paged[T]":
        """Sort ``items`` by ``key`` and cut out the requested page."""
        ordered = sorted(items, key=key)
        total_count = len(ordered)
        total_pages = math.ceil(total_count / paging.page_size)
        start = paging.page_index * paging.page_size
        return cls(
            items=tuple(ordered[start:start + paging.page_size]),
            page_index=paging.page_index,
            page_size=paging.page_size,
            total_count=total_count,
            total_pages=total_pages,
            is_last=paging.page_index >= total_pages - 1,
        )

    def map(self, function: Callable[[T], R]) -> "Paged[R]":
        return Paged(
            items=tuple(function(item) for item in self.items),
            page_index=self.page_index,
            page_size=self.page_size,
            total_count=self.total_count,
            total_pages=self.total_pages,
            is_last=self.is_last,
        )


def creation_date_key(item: Any) -> tuple:
    """Newest first; ties broken by id."""
    return (-item.creation_date.timestamp(), str(as_uuid(item.id)))


def event_state_key(now: datetime) -> Callable[[Event], tuple]:
    """Ongoing events first, then upcoming by start, then past by most recent end."""

    def key(event: Event) -> tuple:
        if event.start_date <= now <= event.end_date:
            rank, moment = 0, event.end_date.timestamp()
        elif event.start_date > now:
            rank, moment = 1, event.start_date.timestamp()
        else:
            rank, moment = 2, -event.end_date.timestamp()
        return (rank, moment, str(as_uuid(event.id)))

    return key
