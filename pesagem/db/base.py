"""Declarative base shared by all ORM models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Models use plain Column() attributes with ordinary type annotations.
    __allow_unmapped__ = True


# Upper bound of the INTEGER primary keys (Postgres int4).
MAX_ID = 2_147_483_647
