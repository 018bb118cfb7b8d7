"""
Auth endpoints — login, logout and current user.

Login opens a server-side session and hands the browser a signed token
for it in an HttpOnly cookie. Logout revokes the session.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address

from pesagem.api.v1.deps import (RequestContext, get_current_active_user,
                                 get_request_context, get_session_store,
                                 get_storage)
from pesagem.core.config import settings
from pesagem.core.security import create_session_token
from pesagem.models.user import User
from pesagem.schemas.auth import LoginRequest, MessageResponse
from pesagem.schemas.user import UserRead
from pesagem.services.sessions import SessionStore
from pesagem.services.storage import Storage

# Rate limiter — keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=UserRead)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
) -> User:
    """Authenticate with CPF + password. Sets the session cookie."""
    user = await storage.validate_user(body.cpf, body.password)
    # Unknown CPF, wrong password and inactive account look the same.
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid CPF or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session_id = await sessions.create(user.id)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=create_session_token(session_id),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.SESSION_TTL_HOURS * 60 * 60,
    )
    logger.info("User %d logged in", user.id)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    sessions: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    """Revoke the current session (if any) and clear the cookie."""
    if ctx.user is not None and ctx.session_id is not None:
        await sessions.delete(ctx.session_id)
        logger.info("User %d logged out", ctx.user.id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return MessageResponse(message="Logout successful")


@router.get("/auth/user", response_model=UserRead)
async def read_current_user(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Return profile of the currently authenticated user."""
    return current_user
