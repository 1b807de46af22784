"""Pytest configuration and shared fixtures."""

from types import SimpleNamespace

import pytest
from rest_framework.test import APIClient

from community.domain import ReportCategory, ReportState
from community.stores import MemoryStore, MemoryUnitOfWork
from tests.factories import (
    comment_report,
    event_report,
    make_comment,
    make_event,
    make_post,
    make_user,
    post_report,
)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def world() -> SimpleNamespace:
    """Two members, an organizer, an admin, one event with a post, comments and reports."""
    st0 = make_user("Anna", "Nowak")
    st1 = make_user("Olga", "Organizer", is_organizer=True)
    ad0 = make_user("Adam", "Admin", is_admin=True)
    st2 = make_user("Piotr", "Kowalski")
    ev0 = make_event(st1, capacity=20)
    p0 = make_post(ev0, st1)
    c0 = make_comment(p0, st0, "first comment")
    c1 = make_comment(p0, st1, "second comment")

    ev_re0 = event_report(ev0, st0, title="event report")
    p_re0 = post_report(p0, st0, title="post report", category=ReportCategory.BEHAVIOUR)
    c_re0 = comment_report(c0, st1, title="comment report", category=ReportCategory.BEHAVIOUR,
                           state=ReportState.FAILURE)
    c_re1 = comment_report(c1, st0, title="comment report")

    store = MemoryStore([st0, st1, ad0, st2, ev0, p0, c0, c1, ev_re0, p_re0, c_re0, c_re1])
    return SimpleNamespace(
        store=store,
        st0=st0, st1=st1, ad0=ad0, st2=st2,
        ev0=ev0, p0=p0, c0=c0, c1=c1,
        ev_re0=ev_re0, p_re0=p_re0, c_re0=c_re0, c_re1=c_re1,
    )


@pytest.fixture
def uow(world) -> MemoryUnitOfWork:
    return MemoryUnitOfWork(world.store)


@pytest.fixture
def db_world(world, db) -> SimpleNamespace:
    """The same world, persisted through the Django unit of work."""
    from community.stores.django_store import DjangoUnitOfWork

    uow = DjangoUnitOfWork()
    for entity in (
        world.st0, world.st1, world.ad0, world.st2,
        world.ev0, world.p0, world.c0, world.c1,
        world.ev_re0, world.p_re0, world.c_re0, world.c_re1,
    ):
        uow.repository(type(entity)).add(entity)
    uow.commit()
    return world
