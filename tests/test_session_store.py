"""Session store tests."""

from datetime import datetime, timedelta

import pytest

from docchat.data.errors import SessionNotFoundError
from docchat.data.models import Placeholder
from docchat.service.session_store import SessionStore


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 15, 9, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return SessionStore(max_sessions=2, ttl=timedelta(minutes=30), clock=clock)


def new_session(store):
    return store.create(b"package", [Placeholder(name="Name", original_text="{Name}")], filename="t.docx")


def test_create_and_get(store):
    session = new_session(store)

    assert store.get(session.session_id) is session
    assert session.session_id in store
    assert len(store) == 1


@pytest.mark.parametrize("session_id", ["missing", "", None])
def test_unknown_session(store, session_id):
    with pytest.raises(SessionNotFoundError):
        store.get(session_id)


def test_expired_session_is_dropped(store, clock):
    session = new_session(store)
    clock.advance(minutes=31)

    with pytest.raises(SessionNotFoundError):
        store.get(session.session_id)
    assert len(store) == 0


def test_access_extends_lifetime(store, clock):
    session = new_session(store)
    clock.advance(minutes=20)
    store.get(session.session_id)
    clock.advance(minutes=20)

    assert store.get(session.session_id) is session


def test_capacity_evicts_least_recently_used(store, clock):
    first = new_session(store)
    second = new_session(store)
    store.get(first.session_id)

    third = new_session(store)

    assert first.session_id in store
    assert third.session_id in store
    assert second.session_id not in store
    assert len(store) == 2


def test_purge_expired(store, clock):
    new_session(store)
    clock.advance(minutes=10)
    kept = new_session(store)
    clock.advance(minutes=25)

    assert store.purge_expired() == 1
    assert kept.session_id in store
