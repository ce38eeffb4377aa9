from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from db import session_scope
from domain import ARABIC, Application, LoggedIn, LoggedOut, Notification
from models import PersistedState
from persistence import SqlStateStorage
from seed import demo_user, initialize_store
from store import AppState, AppStore, reduce

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_notification(notification_id: str = "n1", **overrides) -> Notification:
    data = {
        "id": notification_id,
        "user_id": "user-demo-001",
        "title": "Title",
        "title_ar": "عنوان",
        "message": "Body",
        "message_ar": "نص",
        "type": "info",
        "created_at": NOW,
    }
    data.update(overrides)
    return Notification(**data)


def make_application(application_id: str = "a1", **overrides) -> Application:
    data = {
        "id": application_id,
        "service_id": "passport-application",
        "user_id": "user-demo-001",
        "status": "submitted",
        "submission_date": NOW,
        "estimated_completion_date": NOW + timedelta(days=7),
        "fees": 60,
        "is_paid": False,
        "current_step": 1,
        "total_steps": 3,
        "tracking_number": "LB-INTERIOR-123456",
    }
    data.update(overrides)
    return Application(**data)


class BrokenStorage:
    def load(self, key):
        raise SQLAlchemyError("database unavailable")

    def save(self, key, payload):
        raise SQLAlchemyError("database unavailable")


def test_initial_state_defaults() -> None:
    store = AppStore()
    assert store.user is None
    assert store.language.code == "en"
    assert store.direction == "ltr"
    assert store.is_authenticated is False
    assert store.is_loading is False
    assert store.notifications == []
    assert store.applications == []
    assert isinstance(store.session, LoggedOut)


def test_login_is_a_single_transition() -> None:
    store = AppStore()
    seen = []
    store.subscribe(seen.append)
    user = demo_user()

    store.login(user)

    assert len(seen) == 1
    assert seen[0].user == user
    assert seen[0].is_authenticated is True
    assert store.session == LoggedIn(user)


def test_unsubscribe_stops_notifications() -> None:
    store = AppStore()
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.set_loading(True)
    unsubscribe()
    store.set_loading(False)
    assert len(seen) == 1


def test_logout_keeps_language_and_catalog() -> None:
    store = AppStore()
    initialize_store(store)
    store.set_language(ARABIC)
    store.login(demo_user())
    store.add_notification(make_notification())
    store.add_application(make_application())

    store.logout()

    assert store.user is None
    assert store.is_authenticated is False
    assert store.notifications == []
    assert store.applications == []
    assert store.language == ARABIC
    assert store.services
    assert store.ministries


def test_session_requires_both_user_and_flag() -> None:
    store = AppStore()
    store.set_user(demo_user())
    assert isinstance(store.session, LoggedOut)
    store.set_authenticated(True)
    assert isinstance(store.session, LoggedIn)
    store.set_user(None)
    assert isinstance(store.session, LoggedOut)


def test_toggle_language_switches_direction() -> None:
    store = AppStore()
    assert store.toggle_language() == ARABIC
    assert store.direction == "rtl"
    assert store.toggle_language().code == "en"


def test_notifications_are_prepended_and_counted() -> None:
    store = AppStore()
    store.add_notification(make_notification("n1"))
    store.add_notification(make_notification("n2"))
    assert [item.id for item in store.notifications] == ["n2", "n1"]
    assert store.unread_count == 2


def test_mark_notification_as_read_is_idempotent() -> None:
    store = AppStore()
    store.add_notification(make_notification("n1"))
    store.add_notification(make_notification("n2"))

    assert store.mark_notification_as_read("n1") is True
    first = store.notifications
    assert store.mark_notification_as_read("n1") is True
    assert store.notifications == first
    assert store.unread_count == 1

    before = store.state
    assert store.mark_notification_as_read("missing") is False
    assert store.state is before


def test_update_application_merges_known_fields() -> None:
    store = AppStore()
    store.add_application(make_application("a1"))
    store.add_application(make_application("a2"))
    assert [item.id for item in store.applications] == ["a2", "a1"]

    assert store.update_application("missing", {"status": "approved"}) is False
    assert store.update_application("a1", {"status": "approved", "is_paid": True, "bogus": 1, "id": "x"}) is True

    updated = next(item for item in store.applications if item.id == "a1")
    assert updated.status == "approved"
    assert updated.is_paid is True
    assert next(item for item in store.applications if item.id == "a2").status == "submitted"


def test_reduce_rejects_unknown_actions() -> None:
    with pytest.raises(TypeError):
        reduce(AppState(), object())


def test_dashboard_stats_selector() -> None:
    store = AppStore()
    store.add_application(make_application("a1", status="completed", is_paid=True))
    store.add_application(make_application("a2"))
    stats = store.dashboard_stats
    assert stats.total_applications == 2
    assert stats.completed_applications == 1
    assert stats.pending_applications == 1
    assert stats.total_payments == 60


def test_session_fields_persist_across_stores(session_factory) -> None:
    storage = SqlStateStorage(session_factory)
    store = AppStore(storage=storage, storage_key="client-1")
    user = demo_user()
    store.login(user)
    store.set_language(ARABIC)
    store.add_notification(make_notification())

    restored = AppStore(storage=storage, storage_key="client-1")
    assert restored.user == user
    assert restored.language == ARABIC
    assert restored.is_authenticated is True
    assert restored.notifications == []

    other = AppStore(storage=storage, storage_key="client-2")
    assert other.user is None

    with session_scope(session_factory) as db:
        row = db.scalar(select(PersistedState).where(PersistedState.key == "client-1"))
        assert row.version == 2
        assert row.payload_json["language"] == "ar"


def test_storage_failures_do_not_break_the_store() -> None:
    store = AppStore(storage=BrokenStorage(), storage_key="client-1")
    store.login(demo_user())
    assert store.is_authenticated is True
