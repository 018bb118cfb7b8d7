"""
Promote an existing user to administrator by CPF.

    python -m scripts.promote_admin 12345678901
    python -m scripts.promote_admin 12345678901 --first-name Maria --last-name Souza
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pesagem.db.session import async_session_factory, engine
from pesagem.services.storage import Storage

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger("promote_admin")


async def promote(cpf: str, first_name: str | None, last_name: str | None) -> bool:
    async with async_session_factory() as session:
        storage = Storage(session)
        user = await storage.get_user_by_cpf(cpf)
        if user is None:
            logger.error("No user found with CPF %s", cpf)
            return False

        changes: dict[str, object] = {"is_admin": True}
        if first_name:
            changes["first_name"] = first_name
        if last_name:
            changes["last_name"] = last_name
        await storage.update_user(user, changes)
        logger.info("User %d (%s %s) is now an administrator", user.id, user.first_name, user.last_name)
        return True


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("cpf", help="11-digit CPF of the user to promote")
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    args = parser.parse_args(argv)

    try:
        ok = await promote(args.cpf, args.first_name, args.last_name)
    finally:
        await engine.dispose()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
