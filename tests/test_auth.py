from dataclasses import replace

import pytest
from sqlalchemy import func, select

from auth import (
    authenticate_user,
    create_account,
    get_account_by_email,
    hash_password,
    register_account,
    update_account_profile,
    verify_password,
)
from db import session_scope
from models import Account
from seed import demo_user, seed_demo_account

DEMO_EMAIL = "ahmad.khalil@example.com"
DEMO_PASSWORD = "demo123"


def registration_form(**overrides) -> dict:
    form = {
        "first_name": "Rima",
        "last_name": "Haddad",
        "first_name_ar": "ريما",
        "last_name_ar": "حداد",
        "email": "Rima.Haddad@example.com",
        "phone": "+961 3 123 456",
        "national_id": "123 456 789 01",
        "date_of_birth": "1990-06-01",
        "gender": "female",
        "city": "Tripoli",
        "password": "secret123",
        "confirm_password": "secret123",
        "accept_terms": True,
    }
    form.update(overrides)
    return form


def test_password_hashing_round_trip() -> None:
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_registered_account_must_match_its_password(session_factory) -> None:
    with session_scope(session_factory) as db:
        seed_demo_account(db, DEMO_EMAIL, DEMO_PASSWORD)

    with session_scope(session_factory) as db:
        user = authenticate_user(db, DEMO_EMAIL.upper(), DEMO_PASSWORD)
        assert user == demo_user()
        assert authenticate_user(db, DEMO_EMAIL, "wrong-password", fallback_user=demo_user()) is None


def test_demo_login_accepts_any_well_formed_credentials(session_factory) -> None:
    fallback = demo_user()
    with session_scope(session_factory) as db:
        assert authenticate_user(db, "someone@example.com", "123456", fallback_user=fallback) == fallback
        assert authenticate_user(db, "someone@example.com", "12345", fallback_user=fallback) is None
        assert authenticate_user(db, "not-an-email", "123456", fallback_user=fallback) is None
        assert authenticate_user(db, "someone@example.com", "123456") is None


def test_register_account_creates_unverified_user(session_factory) -> None:
    with session_scope(session_factory) as db:
        user = register_account(db, registration_form())

    assert user.email == "rima.haddad@example.com"
    assert user.national_id == "12345678901"
    assert user.is_verified is False
    assert user.address.city == "Tripoli"

    with session_scope(session_factory) as db:
        account = get_account_by_email(db, "rima.haddad@example.com")
        assert account is not None
        assert account.id == user.id
        assert authenticate_user(db, "rima.haddad@example.com", "secret123") == user


def test_register_account_rejects_duplicates_and_invalid_forms(session_factory) -> None:
    with session_scope(session_factory) as db:
        register_account(db, registration_form())

    with pytest.raises(ValueError):
        with session_scope(session_factory) as db:
            register_account(db, registration_form())

    with pytest.raises(ValueError):
        with session_scope(session_factory) as db:
            register_account(db, registration_form(email="other@example.com", national_id="42"))

    with session_scope(session_factory) as db:
        assert db.scalar(select(func.count()).select_from(Account)) == 1


def test_update_account_profile(session_factory) -> None:
    with session_scope(session_factory) as db:
        seed_demo_account(db, DEMO_EMAIL, DEMO_PASSWORD)

    updated = replace(demo_user(), first_name="Ahmed", email="ahmed.k@example.com")
    with session_scope(session_factory) as db:
        assert update_account_profile(db, updated) is True
        assert update_account_profile(db, replace(updated, id="missing")) is False

    with session_scope(session_factory) as db:
        user = authenticate_user(db, "ahmed.k@example.com", DEMO_PASSWORD)
        assert user is not None
        assert user.first_name == "Ahmed"


def test_update_account_profile_rejects_an_email_owned_by_another_account(session_factory) -> None:
    alice = replace(demo_user(), id="user-alice", email="alice@example.com", national_id="11111111111")
    bob = replace(demo_user(), id="user-bob", email="bob@example.com", national_id="22222222222")
    with session_scope(session_factory) as db:
        create_account(db, alice, "alice-pass")
        create_account(db, bob, "bob-pass")

    with pytest.raises(ValueError):
        with session_scope(session_factory) as db:
            update_account_profile(db, replace(bob, email=" Alice@Example.com "))

    with session_scope(session_factory) as db:
        assert db.get(Account, "user-bob").email == "bob@example.com"
        assert get_account_by_email(db, "alice@example.com").id == "user-alice"
        assert update_account_profile(db, replace(bob, first_name="Robert")) is True

    with session_scope(session_factory) as db:
        assert authenticate_user(db, "bob@example.com", "bob-pass").first_name == "Robert"
