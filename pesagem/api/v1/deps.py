"""
FastAPI dependencies — database session, session store, request context
and auth guards.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Path, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pesagem.core.config import settings
from pesagem.core.permissions import can_access_user, is_admin
from pesagem.core.security import decode_session_token
from pesagem.db.base import MAX_ID
from pesagem.db.session import async_session_factory
from pesagem.models.user import User
from pesagem.services.sessions import SessionStore
from pesagem.services.storage import Storage

# auto_error=False so a missing header falls back to the session cookie
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/login", auto_error=False
)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    return Storage(db)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


# ── Request context ─────────────────────────────────────────────────
@dataclass(frozen=True)
class RequestContext:
    """Who is calling. ``user`` is ``None`` for anonymous requests."""

    user: User | None = None
    session_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


def _extract_token(request: Request, header_token: str | None) -> str | None:
    # Priority: Header > Cookie
    if header_token:
        return header_token
    cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if cookie and cookie.startswith("Bearer "):
        return cookie.split(" ", 1)[1]
    return cookie or None


async def get_request_context(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
) -> RequestContext:
    """Resolve token → session id → user id → user. Any miss is anonymous."""
    raw = _extract_token(request, token)
    if not raw:
        return RequestContext()

    session_id = decode_session_token(raw)
    if session_id is None:
        return RequestContext()

    user_id = await sessions.get_user_id(session_id)
    if user_id is None:
        return RequestContext()

    user = await storage.get_user(user_id)
    if user is None:
        return RequestContext()
    return RequestContext(user=user, session_id=session_id)


# ── Auth guards ─────────────────────────────────────────────────────
async def get_current_user(
    ctx: RequestContext = Depends(get_request_context),
) -> User:
    if ctx.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return ctx.user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject accounts deactivated after their session was opened."""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account",
        )
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Only allow admins to proceed."""
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


async def require_user_access(
    user_id: int = Path(ge=1, le=MAX_ID),
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Allow the user named by the ``user_id`` path parameter, or any admin."""
    if not can_access_user(current_user, user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return current_user
