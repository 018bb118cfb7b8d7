"""
User management + per-user summary.

- Listing every user, creating and updating users require admin.
- The active worker list needs any session; the public list needs none.
- A user's summary is visible to that user and to admins.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.exc import IntegrityError

from pesagem.api.v1.deps import (get_current_active_user, get_storage,
                                 require_admin, require_user_access)
from pesagem.db.base import MAX_ID
from pesagem.models.user import User
from pesagem.schemas.user import (PublicUserRead, UserCreate, UserRead,
                                  UserUpdate)
from pesagem.schemas.weight_record import UserSummaryStats
from pesagem.services import stats
from pesagem.services.storage import Storage

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[UserRead])
async def list_users(
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_admin),
) -> list[User]:
    return await storage.list_users()


@router.get("/active", response_model=list[UserRead])
async def list_active_users(
    storage: Storage = Depends(get_storage),
    _user: User = Depends(get_current_active_user),
) -> list[User]:
    """Active workers (admins excluded), by first name."""
    return await storage.list_active_workers()


@router.get("/public", response_model=list[PublicUserRead])
async def list_public_users(
    storage: Storage = Depends(get_storage),
) -> list[User]:
    """Active workers with only the fields safe to show before login."""
    return await storage.list_active_workers()


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> User:
    """Create a user account (admin only). CPF uniqueness is enforced by the database."""
    try:
        user = await storage.create_user(body)
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="CPF already registered",
        )
    logger.info("Admin %d created user %d", admin.id, user.id)
    return user


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    body: UserUpdate,
    user_id: int = Path(ge=1, le=MAX_ID),
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
) -> User:
    user = await storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    changes = body.model_dump(exclude_unset=True)
    user = await storage.update_user(user, changes)
    logger.info("Admin %d updated user %d: %s", admin.id, user_id, sorted(changes))
    return user


@router.get("/{user_id}/summary", response_model=UserSummaryStats)
async def user_summary(
    user_id: int = Path(ge=1, le=MAX_ID),
    storage: Storage = Depends(get_storage),
    _caller: User = Depends(require_user_access),
) -> UserSummaryStats:
    """Today's total, this month's total and the month's daily average."""
    return await stats.user_summary_stats(storage, user_id)
