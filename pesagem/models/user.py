"""
User model — workers and administrators.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, false, true

from pesagem.db.base import Base

# Kinds of labour a worker performs; copied onto each of their weight records.
WORK_TYPES = ("filetagem", "espinho")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    cpf: str = Column(String(11), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    hashed_password: str = Column(String(128), nullable=False)  # type: ignore[assignment]
    first_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    last_name: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    is_admin: bool = Column(Boolean, nullable=False, default=False, server_default=false())  # type: ignore[assignment]
    work_type: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    # filetagem | espinho
    is_active: bool = Column(Boolean, nullable=False, default=True, server_default=true())  # type: ignore[assignment]
    created_at: datetime = Column(DateTime(timezone=True), default=_utcnow)  # type: ignore[assignment]
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
    )
