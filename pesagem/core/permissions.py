"""
Access policy — who may read or change which user's data.

Plain functions over the resolved caller so they can be used both by the
FastAPI guards in ``api/v1/deps.py`` and directly in tests.
"""

from __future__ import annotations

from pesagem.models.user import User


def is_admin(caller: User | None) -> bool:
    return caller is not None and bool(caller.is_admin)


def can_access_user(caller: User | None, target_user_id: int) -> bool:
    """A caller may see a user's records and stats if it is that user or an admin."""
    if caller is None:
        return False
    return caller.id == target_user_id or is_admin(caller)
