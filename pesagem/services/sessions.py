"""
Session repository — opaque session id → user id, with expiry.

Two interchangeable backends:

- ``RedisSessionStore`` for production (shared between workers, TTL
  enforced by Redis itself).
- ``MemorySessionStore`` for tests and single-process development.

The store is created once by the app factory, kept on ``app.state`` and
handed to request handlers through the ``get_session_store`` dependency.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Protocol

import redis.asyncio as aioredis

from pesagem.core.config import Settings

logger = logging.getLogger(__name__)

_KEY_PREFIX = "pesagem:session:"


def new_session_id() -> str:
    return secrets.token_urlsafe(32)


class SessionStore(Protocol):
    async def create(self, user_id: int) -> str: ...

    async def get_user_id(self, session_id: str) -> int | None: ...

    async def delete(self, session_id: str) -> None: ...

    async def ping(self) -> bool: ...

    async def close(self) -> None: ...


class RedisSessionStore:
    def __init__(self, client: aioredis.Redis, ttl_seconds: int) -> None:
        self._redis = client
        self._ttl = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int) -> RedisSessionStore:
        return cls(aioredis.from_url(url, decode_responses=True), ttl_seconds)

    async def create(self, user_id: int) -> str:
        session_id = new_session_id()
        await self._redis.set(_KEY_PREFIX + session_id, str(user_id), ex=self._ttl)
        return session_id

    async def get_user_id(self, session_id: str) -> int | None:
        value = await self._redis.get(_KEY_PREFIX + session_id)
        return int(value) if value is not None else None

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(_KEY_PREFIX + session_id)

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except aioredis.RedisError as e:
            logger.error("Session store ping failed: %s", e)
            return False

    async def close(self) -> None:
        await self._redis.aclose()


class MemorySessionStore:
    """In-process store.

    Expired entries are dropped when looked up and on every ``create``.
    """

    def __init__(self, ttl_seconds: int, clock=time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, tuple[int, float]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _purge_expired(self, now: float) -> None:
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if now >= expires_at]
        for sid in expired:
            del self._sessions[sid]

    async def create(self, user_id: int) -> str:
        now = self._clock()
        self._purge_expired(now)
        session_id = new_session_id()
        self._sessions[session_id] = (user_id, now + self._ttl)
        return session_id

    async def get_user_id(self, session_id: str) -> int | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        user_id, expires_at = entry
        if self._clock() >= expires_at:
            del self._sessions[session_id]
            return None
        return user_id

    async def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._sessions.clear()


def build_session_store(settings: Settings) -> SessionStore:
    ttl = settings.SESSION_TTL_HOURS * 3600
    if settings.SESSION_BACKEND == "memory":
        logger.warning("Using in-memory session store; sessions are not shared between workers")
        return MemorySessionStore(ttl)
    return RedisSessionStore.from_url(settings.REDIS_URL, ttl)
