"""Unit tests for the weight report reducers and calendar helpers."""

import datetime as dt
from decimal import Decimal
from types import SimpleNamespace

import pytest

from pesagem.services.stats import (average_daily, days_in_month,
                                    month_bounds, summarize_day,
                                    summarize_month, sum_weights)

_NOW = dt.datetime(2024, 3, 15, 12, 0, tzinfo=dt.timezone.utc)


def _record(weight, day, rid=1, user_id=1):
    return SimpleNamespace(
        id=rid,
        user_id=user_id,
        weight=Decimal(str(weight)),
        date=day,
        work_type="filetagem",
        notes=None,
        created_at=_NOW,
        created_by=99,
    )


@pytest.mark.parametrize(
    "year, month, last_day",
    [
        (2024, 2, 29),
        (2023, 2, 28),
        (2000, 2, 29),
        (1900, 2, 28),
        (2024, 1, 31),
        (2024, 4, 30),
        (2024, 12, 31),
    ],
)
def test_month_bounds_uses_true_calendar_end(year, month, last_day):
    start, end = month_bounds(year, month)
    assert start == dt.date(year, month, 1)
    assert end == dt.date(year, month, last_day)
    assert days_in_month(year, month) == last_day


def test_average_daily_divides_by_full_month_length():
    assert average_daily(290.0, 2024, 2) == 290.0 / 29
    assert average_daily(280.0, 2023, 2) == 280.0 / 28
    assert average_daily(310.0, 2024, 3) == 310.0 / 31
    assert average_daily(0.0, 2024, 4) == 0.0


def test_sum_weights_converts_decimals():
    records = [_record("12.50", dt.date(2024, 3, 1)), _record("7.25", dt.date(2024, 3, 1))]
    assert sum_weights(records) == 19.75
    assert sum_weights([]) == 0.0


def test_summarize_day_empty():
    result = summarize_day([])
    assert result.total_weight == 0
    assert result.record_count == 0
    assert result.records == []


def test_summarize_day_keeps_order_and_counts():
    day = dt.date(2024, 3, 15)
    records = [_record(3.5, day, rid=2), _record(10, day, rid=1)]
    result = summarize_day(records)
    assert result.total_weight == 13.5
    assert result.record_count == 2
    assert [r.id for r in result.records] == [2, 1]
    assert result.records[0].weight == 3.5


def test_summarize_month_groups_and_sorts_ascending():
    records = [
        _record(5, dt.date(2024, 3, 20), rid=4),
        _record(2.25, dt.date(2024, 3, 9), rid=3),
        _record(1.75, dt.date(2024, 3, 9), rid=2),
        _record(10, dt.date(2024, 3, 1), rid=1),
    ]
    result = summarize_month(records)

    assert result.total_weight == 19.0
    assert result.record_count == 4
    assert [d.date for d in result.daily_stats] == ["2024-03-01", "2024-03-09", "2024-03-20"]
    assert [d.record_count for d in result.daily_stats] == [1, 2, 1]
    assert result.daily_stats[1].weight == 4.0
    assert sum(d.weight for d in result.daily_stats) == result.total_weight


def test_summarize_month_empty():
    result = summarize_month([])
    assert result.total_weight == 0
    assert result.record_count == 0
    assert result.daily_stats == []


def test_monthly_serialises_camel_case():
    payload = summarize_month([_record(1, dt.date(2024, 3, 1))]).model_dump(by_alias=True)
    assert set(payload) == {"totalWeight", "recordCount", "dailyStats"}
    assert payload["dailyStats"][0] == {"date": "2024-03-01", "weight": 1.0, "recordCount": 1}
