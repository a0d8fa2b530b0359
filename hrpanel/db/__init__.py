"""Database engine and session factories."""

from .engine import create_sync_engine, get_engine
from .session import get_sessionmaker

__all__ = ["create_sync_engine", "get_engine", "get_sessionmaker"]
