"""
Organisation-wide reporting & health endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select

from pesagem.api.v1.deps import get_session_store, get_storage, require_admin
from pesagem.models.user import User
from pesagem.schemas.auth import HealthResponse
from pesagem.schemas.weight_record import DashboardStats
from pesagem.services import stats
from pesagem.services.sessions import SessionStore
from pesagem.services.storage import Storage

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)


# ── Dashboard (admin) ───────────────────────────────────────────────
@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_admin),
) -> DashboardStats:
    """Today's total, active user count, this month's total and daily average."""
    return await stats.dashboard_stats(storage)


# ── Health ──────────────────────────────────────────────────────────
@router.get("/health", response_model=HealthResponse)
async def health(
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
) -> HealthResponse:
    """Public health check — DB and session store connectivity."""
    result = HealthResponse(db=False, sessions=False)

    try:
        await storage.db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    result.sessions = await sessions.ping()
    return result
