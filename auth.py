from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.orm import Session

from domain import Address, User
from logic import LOGIN_PASSWORD_MIN, generate_id, validate_email, validate_registration_form
from models import Account

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def get_account_by_email(db: Session, email: str) -> Optional[Account]:
    return db.scalar(select(Account).where(Account.email == email.strip().lower()))


def authenticate_user(
    db: Session,
    email: str,
    password: str,
    fallback_user: User | None = None,
) -> Optional[User]:
    """Resolve a login attempt to a citizen record.

    Registered accounts must match their stored hash. When ``fallback_user``
    is given, any other well-formed email with a long enough password signs
    in as that user (demo mode).
    """
    email = (email or "").strip().lower()
    account = get_account_by_email(db, email) if email else None
    if account:
        if not verify_password(password or "", account.password_hash):
            logger.info("Rejected login for registered account %s", account.id)
            return None
        return User.from_dict(account.profile_json)
    if fallback_user and validate_email(email) and len(password or "") >= LOGIN_PASSWORD_MIN:
        return fallback_user
    return None


def create_account(db: Session, user: User, password: str) -> Account:
    account = Account(
        id=user.id,
        email=user.email.strip().lower(),
        password_hash=hash_password(password),
        national_id=user.national_id,
        profile_json=user.to_dict(),
    )
    db.add(account)
    db.flush()
    return account


def register_account(db: Session, form: dict[str, Any], language: Any = "en") -> User:
    errors = validate_registration_form(form, language)
    if errors:
        raise ValueError(f"Invalid registration form: {', '.join(sorted(errors))}")

    email = form["email"].strip().lower()
    if get_account_by_email(db, email):
        raise ValueError(f"An account already exists for {email}")

    user = User(
        id=generate_id(),
        national_id="".join(str(form["national_id"]).split()),
        first_name=form["first_name"].strip(),
        last_name=form["last_name"].strip(),
        first_name_ar=(form.get("first_name_ar") or "").strip(),
        last_name_ar=(form.get("last_name_ar") or "").strip(),
        email=email,
        phone=form["phone"].strip(),
        date_of_birth=str(form["date_of_birth"]),
        gender=form.get("gender") or "male",
        nationality=form.get("nationality") or "Lebanese",
        address=Address(
            street=(form.get("street") or "").strip(),
            city=(form.get("city") or "").strip(),
            district=(form.get("district") or "").strip(),
        ),
        is_verified=False,
        registration_date=datetime.now(timezone.utc),
    )
    create_account(db, user, form["password"])
    logger.info("Registered account for user %s", user.id)
    return user


def update_account_profile(db: Session, user: User) -> bool:
    account = db.get(Account, user.id)
    if not account:
        return False
    email = user.email.strip().lower()
    owner = get_account_by_email(db, email)
    if owner is not None and owner.id != account.id:
        raise ValueError(f"An account already exists for {email}")
    account.email = email
    account.profile_json = user.to_dict()
    return True
