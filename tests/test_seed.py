from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from db import session_scope
from models import Account
from seed import (
    MINISTRY_ROWS,
    SERVICE_ROWS,
    demo_user,
    initialize_store,
    load_dashboard,
    load_ministries,
    load_services,
    seed_demo_account,
)
from store import AppStore
from wizard import ApplicationWizard

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_catalog_rows_load_into_domain_records() -> None:
    services = load_services(SERVICE_ROWS)
    ministries = load_ministries(MINISTRY_ROWS)

    service_ids = {service.id for service in services}
    assert len(service_ids) == len(SERVICE_ROWS)
    for ministry in ministries:
        assert set(ministry.services) <= service_ids
    assert any(service.ministry == "Interior" for service in services)
    assert any(not service.is_available for service in services)
    assert all(isinstance(service.required_documents, tuple) for service in services)


def test_rows_missing_fields_are_rejected() -> None:
    row = dict(SERVICE_ROWS[0])
    del row["fees"]
    with pytest.raises(ValueError, match="fees"):
        load_services([row])

    ministry = dict(MINISTRY_ROWS[0])
    del ministry["services"]
    with pytest.raises(ValueError, match="services"):
        load_ministries([ministry])


def test_initialize_store_only_loads_once() -> None:
    store = AppStore()
    seen = []
    store.subscribe(seen.append)
    initialize_store(store)
    initialize_store(store)
    assert len(seen) == 2
    assert len(store.services) == len(SERVICE_ROWS)
    assert len(store.ministries) == len(MINISTRY_ROWS)


def test_load_dashboard_requires_a_user() -> None:
    store = AppStore()
    load_dashboard(store, NOW)
    assert store.applications == []
    assert store.notifications == []


def test_load_dashboard_merges_without_duplicates() -> None:
    store = AppStore()
    initialize_store(store)
    store.login(demo_user())
    wizard = ApplicationWizard(store.get_service("criminal-record"), store.user)
    while wizard.can_go_next():
        wizard.next()
    submitted = wizard.submit(store, now=NOW).application

    load_dashboard(store, NOW)
    load_dashboard(store, NOW)

    ids = [item.id for item in store.applications]
    assert len(ids) == len(set(ids)) == 5
    assert submitted.id in ids
    assert len(store.notifications) == 6
    assert store.unread_count == 5


def test_seed_demo_account_is_idempotent(session_factory) -> None:
    with session_scope(session_factory) as db:
        seed_demo_account(db, "demo@example.com", "demo123")
    with session_scope(session_factory) as db:
        seed_demo_account(db, "demo@example.com", "demo123")
        assert db.scalar(select(func.count()).select_from(Account)) == 1
