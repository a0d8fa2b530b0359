"""SQLAlchemy session factory."""
from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from .engine import create_sync_engine, get_engine


def get_sessionmaker(url: str | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to the shared engine.

    An explicit ``url`` builds a dedicated engine instead.
    """

    engine = create_sync_engine(url, **kwargs) if url or kwargs else get_engine()
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
