from contextlib import contextmanager
from typing import Iterator
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import streamlit as st
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import DEFAULT_DATABASE_URL, get_settings
from models import Base

LOCAL_HOSTS = frozenset({"", "localhost", "127.0.0.1"})
DRIVER_PREFIXES = (
    ("postgres://", "postgresql+psycopg2://"),
    ("postgresql://", "postgresql+psycopg2://"),
)


def _secret_database_url() -> str | None:
    """Look up the portal database in ``st.secrets``, flat key first."""
    try:
        candidates = [st.secrets.get("DATABASE_URL")]
        section = st.secrets.get("database")
        if section:
            candidates.append(section.get("url"))
    except Exception:
        # No secrets.toml outside a deployed app.
        return None
    for candidate in candidates:
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    return None


def _with_ssl_required(url: str) -> str:
    parsed = urlparse(url)
    if (parsed.hostname or "").lower() in LOCAL_HOSTS:
        return url
    query = dict(parse_qsl(parsed.query, keep_blank_values=True))
    query.setdefault("sslmode", "require")
    return urlunparse(parsed._replace(query=urlencode(query)))


def normalize_database_url(raw_url: str) -> str:
    """Pin Postgres URLs to psycopg2 and require TLS for remote hosts.

    Other backends (the SQLite default) pass through untouched.
    """
    url = raw_url.strip().strip("\"'")
    for prefix, replacement in DRIVER_PREFIXES:
        if url.startswith(prefix):
            return _with_ssl_required(replacement + url[len(prefix):])
    if url.startswith("postgresql+"):
        return _with_ssl_required(url)
    return url


def resolve_database_url() -> str:
    return get_settings().database_url or _secret_database_url() or DEFAULT_DATABASE_URL


@st.cache_resource
def get_engine() -> Engine:
    return create_engine(normalize_database_url(resolve_database_url()), pool_pre_ping=True)


@st.cache_resource
def get_session_factory() -> sessionmaker:
    # expire_on_commit=False: callers turn rows into dataclasses after the scope exits.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    session: Session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def db_session() -> Iterator[Session]:
    with session_scope(get_session_factory()) as session:
        yield session


def init_schema(engine: Engine | None = None) -> None:
    Base.metadata.create_all(bind=engine or get_engine())
