from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from sqlalchemy.orm import Session, sessionmaker

from db import session_scope
from domain import Language, User, language_from_code
from models import AuditLog, PersistedState

logger = logging.getLogger(__name__)


class StateStorage(Protocol):
    def load(self, key: str) -> Optional[dict[str, Any]]:
        ...

    def save(self, key: str, payload: dict[str, Any]) -> int:
        ...


def load_state(db: Session, key: str) -> Optional[dict[str, Any]]:
    row = db.get(PersistedState, key)
    if not row:
        return None
    return dict(row.payload_json or {})


def save_state(db: Session, key: str, payload: dict[str, Any]) -> int:
    row = db.get(PersistedState, key)
    if not row:
        row = PersistedState(key=key, payload_json=payload, version=1)
        db.add(row)
    else:
        # Last writer wins; the version only makes overlapping writers visible.
        row.payload_json = payload
        row.version = (row.version or 0) + 1
    db.flush()
    return row.version


def log_action(db: Session, user_id: str | None, action: str, details: dict[str, Any]) -> None:
    db.add(AuditLog(user_id=user_id, action=action, details_json=details))


class SqlStateStorage:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def load(self, key: str) -> Optional[dict[str, Any]]:
        with session_scope(self._session_factory) as db:
            return load_state(db, key)

    def save(self, key: str, payload: dict[str, Any]) -> int:
        with session_scope(self._session_factory) as db:
            version = save_state(db, key, payload)
        logger.debug("Persisted session state under %s (version %s)", key, version)
        return version


def serialize_session(user: User | None, language: Language, is_authenticated: bool) -> dict[str, Any]:
    return {
        "user": user.to_dict() if user else None,
        "language": language.code,
        "is_authenticated": bool(is_authenticated),
    }


def deserialize_session(payload: dict[str, Any]) -> tuple[User | None, Language, bool]:
    raw_user = payload.get("user")
    user = None
    if raw_user:
        try:
            user = User.from_dict(raw_user)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable persisted user record")
    return user, language_from_code(payload.get("language")), bool(payload.get("is_authenticated"))
