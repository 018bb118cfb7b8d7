"""
WeightRecord model — one production-weight entry for a worker.

Records are append-only: entered once by an admin and never edited.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from sqlalchemy import (CheckConstraint, Column, Date, DateTime, ForeignKey,
                        Index, Integer, Numeric, String, Text)
from sqlalchemy.orm import relationship

from pesagem.db.base import Base


class WeightRecord(Base):
    __tablename__ = "weight_records"
    __table_args__ = (
        CheckConstraint("weight > 0", name="ck_weight_positive"),
        Index("ix_weight_records_user_date", "user_id", "date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    weight: Decimal = Column(Numeric(10, 2), nullable=False)  # type: ignore[assignment]
    date: dt.date = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    work_type: str | None = Column(String(20), nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    created_at: dt.datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )
    created_by: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]

    user = relationship("User", foreign_keys=[user_id])
    creator = relationship("User", foreign_keys=[created_by])
