"""
Weight record entry + per-user record listing and daily / monthly stats.

- POST requires admin; the record is tagged with the worker's work type
  and the admin who entered it.
- GET endpoints are open to the worker themself and to admins.
"""

from __future__ import annotations

import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from pesagem.api.v1.deps import get_storage, require_admin, require_user_access
from pesagem.db.base import MAX_ID
from pesagem.models.user import User
from pesagem.models.weight_record import WeightRecord
from pesagem.schemas.weight_record import (DailyStats, MonthlyStats,
                                           WeightRecordCreate,
                                           WeightRecordRead)
from pesagem.services import stats
from pesagem.services.storage import Storage

router = APIRouter(prefix="/weight-records", tags=["weight-records"])
logger = logging.getLogger(__name__)


@router.post("", response_model=WeightRecordRead, status_code=201)
async def create_weight_record(
    body: WeightRecordCreate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> WeightRecord:
    worker = await storage.get_user(body.user_id)
    if worker is None:
        raise HTTPException(status_code=404, detail="User not found")

    record = await storage.create_weight_record(
        user=worker,
        weight=body.weight,
        day=body.date,
        notes=body.notes,
        created_by=admin.id,
    )
    logger.info(
        "Weight record %d: %s kg for user %d on %s (entered by %d)",
        record.id,
        body.weight,
        worker.id,
        body.date.isoformat(),
        admin.id,
    )
    return record


@router.get("/user/{user_id}", response_model=list[WeightRecordRead])
async def list_user_records(
    user_id: int = Path(ge=1, le=MAX_ID),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    storage: Storage = Depends(get_storage),
    _caller: User = Depends(require_user_access),
) -> list[WeightRecord]:
    """A worker's records, newest first, optionally within an inclusive date range."""
    if (start_date is None) != (end_date is None):
        raise HTTPException(
            status_code=422,
            detail="startDate and endDate must be given together",
        )
    return await storage.list_user_records(user_id, start_date, end_date)


@router.get("/daily/{user_id}/{day}", response_model=DailyStats)
async def daily_stats(
    day: dt.date,
    user_id: int = Path(ge=1, le=MAX_ID),
    storage: Storage = Depends(get_storage),
    _caller: User = Depends(require_user_access),
) -> DailyStats:
    return await stats.user_daily_stats(storage, user_id, day)


@router.get("/monthly/{user_id}/{year}/{month}", response_model=MonthlyStats)
async def monthly_stats(
    user_id: int = Path(ge=1, le=MAX_ID),
    year: int = Path(ge=1, le=9999),
    month: int = Path(ge=1, le=12),
    storage: Storage = Depends(get_storage),
    _caller: User = Depends(require_user_access),
) -> MonthlyStats:
    """Month total plus one entry per day that has records, oldest day first."""
    return await stats.user_monthly_stats(storage, user_id, year, month)
