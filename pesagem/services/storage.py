"""
Persistence gateway — every read and write against ``users`` and
``weight_records`` goes through ``Storage``.

Route handlers get one ``Storage`` per request (see ``deps.get_storage``),
wrapping that request's ``AsyncSession``.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pesagem.core.security import (burn_password_check, get_password_hash,
                                   verify_password)
from pesagem.models.user import User
from pesagem.models.weight_record import WeightRecord
from pesagem.schemas.user import UserCreate

_RECORD_ORDER = (
    WeightRecord.date.desc(),
    WeightRecord.created_at.desc(),
    WeightRecord.id.desc(),
)


class Storage:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ── Users ───────────────────────────────────────────────────────
    async def get_user(self, user_id: int) -> User | None:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_cpf(self, cpf: str) -> User | None:
        result = await self.db.execute(select(User).where(User.cpf == cpf))
        return result.scalar_one_or_none()

    async def create_user(self, data: UserCreate) -> User:
        """Insert a user. A duplicate CPF raises ``IntegrityError`` from the database."""
        fields = data.model_dump(exclude={"password"})
        user = User(**fields, hashed_password=get_password_hash(data.password))
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise
        await self.db.refresh(user)
        return user

    async def update_user(self, user: User, changes: dict[str, Any]) -> User:
        changes = dict(changes)
        changes.pop("id", None)
        changes.pop("cpf", None)
        password = changes.pop("password", None)
        if password is not None:
            user.hashed_password = get_password_hash(password)
        for field, value in changes.items():
            setattr(user, field, value)
        # onupdate only fires when a column actually changed
        user.updated_at = dt.datetime.now(dt.timezone.utc)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.first_name, User.id))
        return list(result.scalars().all())

    async def list_active_workers(self) -> list[User]:
        """Active users that are not admins, by first name."""
        result = await self.db.execute(
            select(User)
            .where(User.is_active.is_(True), User.is_admin.is_(False))
            .order_by(User.first_name, User.id)
        )
        return list(result.scalars().all())

    async def count_active_users(self) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.is_active.is_(True))
        )
        return int(result.scalar_one())

    async def validate_user(self, cpf: str, password: str) -> User | None:
        """Return the active user matching *cpf* and *password*, else ``None``."""
        result = await self.db.execute(
            select(User).where(User.cpf == cpf, User.is_active.is_(True))
        )
        user = result.scalar_one_or_none()
        if user is None:
            burn_password_check(password)
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    # ── Weight records ──────────────────────────────────────────────
    async def create_weight_record(
        self,
        *,
        user: User,
        weight: Decimal,
        day: dt.date,
        created_by: int,
        notes: str | None = None,
    ) -> WeightRecord:
        record = WeightRecord(
            user_id=user.id,
            weight=weight,
            date=day,
            work_type=user.work_type,
            notes=notes,
            created_by=created_by,
        )
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def list_user_records(
        self,
        user_id: int,
        start: dt.date | None = None,
        end: dt.date | None = None,
    ) -> list[WeightRecord]:
        """A user's records, newest date first.

        The inclusive range applies only when both *start* and *end* are
        given; with one bound missing the full history is returned.
        """
        query = select(WeightRecord).where(WeightRecord.user_id == user_id)
        if start is not None and end is not None:
            query = query.where(WeightRecord.date >= start, WeightRecord.date <= end)
        result = await self.db.execute(query.order_by(*_RECORD_ORDER))
        return list(result.scalars().all())

    async def list_records(
        self,
        start: dt.date | None = None,
        end: dt.date | None = None,
    ) -> list[WeightRecord]:
        """All users' records, same ordering and range rule as ``list_user_records``."""
        query = select(WeightRecord)
        if start is not None and end is not None:
            query = query.where(WeightRecord.date >= start, WeightRecord.date <= end)
        result = await self.db.execute(query.order_by(*_RECORD_ORDER))
        return list(result.scalars().all())

    async def list_records_on(
        self, day: dt.date, user_id: int | None = None
    ) -> list[WeightRecord]:
        query = select(WeightRecord).where(WeightRecord.date == day)
        if user_id is not None:
            query = query.where(WeightRecord.user_id == user_id)
        result = await self.db.execute(
            query.order_by(WeightRecord.created_at.desc(), WeightRecord.id.desc())
        )
        return list(result.scalars().all())
