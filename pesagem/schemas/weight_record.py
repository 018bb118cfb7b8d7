"""Pydantic schemas for weight records and the reports built from them."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from pesagem.db.base import MAX_ID

_CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


# ── Weight records ──────────────────────────────────────────────────
class WeightRecordCreate(BaseModel):
    user_id: int = Field(gt=0, le=MAX_ID)
    weight: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    date: dt.date
    notes: str | None = Field(default=None, max_length=2000)

    model_config = _CAMEL


class WeightRecordRead(BaseModel):
    id: int
    user_id: int
    weight: float
    date: dt.date
    work_type: str | None
    notes: str | None
    created_at: dt.datetime | None
    created_by: int

    model_config = {**_CAMEL, "from_attributes": True}


# ── Reports ─────────────────────────────────────────────────────────
class DailyStats(BaseModel):
    total_weight: float
    record_count: int
    records: list[WeightRecordRead]

    model_config = _CAMEL


class DayTotal(BaseModel):
    date: str  # YYYY-MM-DD
    weight: float
    record_count: int

    model_config = _CAMEL


class MonthlyStats(BaseModel):
    total_weight: float
    record_count: int
    daily_stats: list[DayTotal]

    model_config = _CAMEL


class DashboardStats(BaseModel):
    total_today: float
    active_users: int
    avg_daily: float
    total_month: float

    model_config = _CAMEL


class UserSummaryStats(BaseModel):
    total_today: float
    total_month: float
    avg_daily: float

    model_config = _CAMEL
