"""
Weight reports — daily, monthly, per-user summary and dashboard totals.

Every report fetches its rows in one query through ``Storage`` and
reduces them in Python. The reducers are plain functions over any
iterable of records so they can be tested without a database.
"""

from __future__ import annotations

import calendar
import datetime as dt
from collections.abc import Iterable, Sequence

from pesagem.models.weight_record import WeightRecord
from pesagem.schemas.weight_record import (DailyStats, DashboardStats,
                                           DayTotal, MonthlyStats,
                                           UserSummaryStats, WeightRecordRead)
from pesagem.services.storage import Storage


# ── Calendar helpers ────────────────────────────────────────────────
def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[dt.date, dt.date]:
    """First and last calendar day of the month (leap years included)."""
    return dt.date(year, month, 1), dt.date(year, month, days_in_month(year, month))


def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


# ── Reducers ────────────────────────────────────────────────────────
def sum_weights(records: Iterable[WeightRecord]) -> float:
    total = 0.0
    for record in records:
        total += float(record.weight)
    return total


def summarize_day(records: Sequence[WeightRecord]) -> DailyStats:
    """*records* are expected newest first; order is preserved."""
    return DailyStats(
        total_weight=sum_weights(records),
        record_count=len(records),
        records=[WeightRecordRead.model_validate(r) for r in records],
    )


def summarize_month(records: Sequence[WeightRecord]) -> MonthlyStats:
    by_date: dict[str, DayTotal] = {}
    for record in records:
        key = record.date.isoformat()
        entry = by_date.get(key)
        if entry is None:
            entry = by_date[key] = DayTotal(date=key, weight=0.0, record_count=0)
        entry.weight += float(record.weight)
        entry.record_count += 1

    # ISO dates are zero-padded, so string order is calendar order.
    return MonthlyStats(
        total_weight=sum_weights(records),
        record_count=len(records),
        daily_stats=sorted(by_date.values(), key=lambda d: d.date),
    )


def average_daily(total_month: float, year: int, month: int) -> float:
    """Month total spread over every day of the month, not just days elapsed."""
    return total_month / days_in_month(year, month)


# ── Reports ─────────────────────────────────────────────────────────
async def user_daily_stats(storage: Storage, user_id: int, day: dt.date) -> DailyStats:
    records = await storage.list_records_on(day, user_id=user_id)
    return summarize_day(records)


async def user_monthly_stats(
    storage: Storage, user_id: int, year: int, month: int
) -> MonthlyStats:
    start, end = month_bounds(year, month)
    records = await storage.list_user_records(user_id, start, end)
    return summarize_month(records)


async def user_summary_stats(
    storage: Storage, user_id: int, today: dt.date | None = None
) -> UserSummaryStats:
    today = today or utc_today()
    start, end = month_bounds(today.year, today.month)

    total_today = sum_weights(await storage.list_records_on(today, user_id=user_id))
    total_month = sum_weights(await storage.list_user_records(user_id, start, end))

    return UserSummaryStats(
        total_today=total_today,
        total_month=total_month,
        avg_daily=average_daily(total_month, today.year, today.month),
    )


async def dashboard_stats(storage: Storage, today: dt.date | None = None) -> DashboardStats:
    today = today or utc_today()
    start, end = month_bounds(today.year, today.month)

    total_today = sum_weights(await storage.list_records_on(today))
    active_users = await storage.count_active_users()
    total_month = sum_weights(await storage.list_records(start, end))

    return DashboardStats(
        total_today=total_today,
        active_users=active_users,
        avg_daily=average_daily(total_month, today.year, today.month),
        total_month=total_month,
    )
