"""
Session token signing / verification and password hashing (bcrypt).

The browser only ever sees a signed token whose subject is an opaque
session id. The session id itself is resolved through the session store,
so logging out revokes the token even before it expires.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from pesagem.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_ALGORITHM = settings.ALGORITHM
_SECRET = settings.SECRET_KEY
_TOKEN_TYPE = "session"


# ── Passwords ───────────────────────────────────────────────────────
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


# Verified against when the CPF is unknown so a miss costs the same as a
# wrong password.
_DUMMY_HASH = get_password_hash("pesagem-dummy-password")


def burn_password_check(plain: str) -> None:
    pwd_context.verify(plain, _DUMMY_HASH)


# ── Session tokens ──────────────────────────────────────────────────
def create_session_token(
    session_id: str,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.SESSION_TTL_HOURS)
    )
    return jwt.encode(
        {"exp": expire, "sub": session_id, "type": _TOKEN_TYPE},
        _SECRET,
        algorithm=_ALGORITHM,
    )


def decode_session_token(token: str) -> str | None:
    """Return the session id if *token* is a valid session token, else ``None``."""
    try:
        payload = jwt.decode(token, _SECRET, algorithms=[_ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != _TOKEN_TYPE:
        return None
    session_id = payload.get("sub")
    if not isinstance(session_id, str) or not session_id:
        return None
    return session_id
