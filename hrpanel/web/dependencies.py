"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy.orm import Session, sessionmaker

from hrpanel.db.session import get_sessionmaker


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    """Session factory bound to the shared engine, built on first request."""

    return get_sessionmaker()


def get_db_session() -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()
