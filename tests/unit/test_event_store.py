"""Tests for EventStore create/list_recent."""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError
from sqlmodel import Session, select

from chronos.config import Settings
from chronos.models.activity import ActivityRecord
from chronos.models.user import User
from chronos.store.events import EventStore


def as_utc(value: datetime) -> datetime:
    # SQLite may return naive values depending on the sqlmodel release
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@pytest.fixture
def owner(test_session: Session) -> User:
    user = User(email="owner@example.com", name="Owner")
    test_session.add(user)
    test_session.commit()
    test_session.refresh(user)
    return user


@pytest.fixture
def store(test_session: Session) -> EventStore:
    return EventStore(test_session)


class TestCreate:
    def test_creates_window_record(self, store, owner):
        record = store.create(
            owner.id,
            "2024-01-01T10:00:00Z",
            "window",
            {"processName": "chrome.exe", "windowTitle": "Example"},
        )
        assert record.id is not None
        assert record.user_id == owner.id
        assert record.kind == "window"
        assert as_utc(record.timestamp) == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
        assert record.data == {"processName": "chrome.exe", "windowTitle": "Example"}

    def test_event_time_is_independent_of_bookkeeping_time(self, store, owner):
        record = store.create(owner.id, "2020-06-01T00:00:00Z", "mouse", {})
        assert as_utc(record.timestamp) == datetime(2020, 6, 1, tzinfo=timezone.utc)
        assert as_utc(record.created_at) > as_utc(record.timestamp)

    def test_invalid_kind_raises_and_writes_nothing(self, store, owner, test_session):
        with pytest.raises(ValidationError):
            store.create(owner.id, "2024-01-01T10:00:00Z", "bogus", {})
        assert test_session.exec(select(ActivityRecord)).all() == []

    def test_missing_payload_field_raises(self, store, owner):
        with pytest.raises(ValidationError):
            store.create(owner.id, "2024-01-01T10:00:00Z", "browser", {"url": "https://x"})

    def test_owner_is_not_checked(self, store):
        """Token path trusts the embedded id; SQLite does not enforce the FK."""
        record = store.create(9999, "2024-01-01T10:00:00Z", "keyboard")
        assert record.user_id == 9999


class TestListRecent:
    def test_newest_first(self, store, owner):
        base = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
        for minutes in (30, 0, 90, 60):
            store.create(owner.id, base + timedelta(minutes=minutes), "keyboard", {})

        records = store.list_recent(owner.id)
        stamps = [as_utc(r.timestamp) for r in records]
        assert stamps == sorted(stamps, reverse=True)
        assert stamps[0] == base + timedelta(minutes=90)

    def test_limit_caps_results(self, store, owner):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for i in range(5):
            store.create(owner.id, base + timedelta(seconds=i), "mouse", {})
        records = store.list_recent(owner.id, limit=3)
        assert len(records) == 3
        assert as_utc(records[0].timestamp) == base + timedelta(seconds=4)

    def test_default_cap_is_100(self, store, owner):
        base = datetime(2024, 1, 1)
        for i in range(105):
            store.create(owner.id, base + timedelta(seconds=i), "mouse", {})
        assert len(store.list_recent(owner.id)) == 100

    def test_default_cap_follows_settings(self, store, owner, monkeypatch):
        monkeypatch.setattr(
            "chronos.store.events.get_settings",
            lambda: Settings(logs_read_limit=3),
        )
        for i in range(5):
            store.create(owner.id, datetime(2024, 1, 1, 0, 0, i), "mouse", {})
        assert len(store.list_recent(owner.id)) == 3

    def test_only_owners_records(self, store, owner, test_session):
        other = User(email="other@example.com", name="Other")
        test_session.add(other)
        test_session.commit()
        test_session.refresh(other)

        store.create(owner.id, "2024-01-01T10:00:00Z", "mouse", {})
        store.create(other.id, "2024-01-01T11:00:00Z", "mouse", {})

        records = store.list_recent(owner.id)
        assert [r.user_id for r in records] == [owner.id]
