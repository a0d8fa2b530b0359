"""Declarative base and shared column helpers for ORM models."""
from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_uuid() -> str:
    """Return a textual UUID, matching the ``VARCHAR(36)`` ids of the schema."""

    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""

    pass


class UUIDPrimaryKeyMixin:
    """Primary key stored as a 36 character UUID string."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
