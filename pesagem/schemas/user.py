"""Pydantic schemas for User CRUD.

Field names are camelCase on the wire (``firstName``, ``isAdmin``) and
snake_case in Python; both spellings are accepted on input.
"""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from pesagem.models.user import WORK_TYPES

_CPF_RE = re.compile(r"^\d{11}$")

_CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


def _check_work_type(v: str | None) -> str | None:
    if v is not None and v not in WORK_TYPES:
        raise ValueError(f"Work type must be one of: {', '.join(WORK_TYPES)}")
    return v


def _check_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be empty")
    return v


class UserCreate(BaseModel):
    cpf: str
    password: str = Field(min_length=1, max_length=72)
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    is_admin: bool = False
    work_type: str | None = None
    is_active: bool = True

    model_config = _CAMEL

    @field_validator("cpf")
    @classmethod
    def _cpf(cls, v: str) -> str:
        v = v.strip()
        if not _CPF_RE.match(v):
            raise ValueError("CPF must be exactly 11 digits")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("work_type")
    @classmethod
    def _work_type(cls, v: str | None) -> str | None:
        return _check_work_type(v)


class UserUpdate(BaseModel):
    """Partial update. ``id`` and ``cpf`` are not updatable."""

    password: str | None = Field(default=None, min_length=1, max_length=72)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    is_admin: bool | None = None
    work_type: str | None = None
    is_active: bool | None = None

    model_config = {**_CAMEL, "extra": "forbid"}

    # Defaults are not validated, so this only fires on an explicit null.
    @field_validator("password", "first_name", "last_name", "is_admin", "is_active")
    @classmethod
    def _not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def _names(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("work_type")
    @classmethod
    def _work_type(cls, v: str | None) -> str | None:
        return _check_work_type(v)


class UserRead(BaseModel):
    id: int
    cpf: str
    first_name: str
    last_name: str
    is_admin: bool
    work_type: str | None
    is_active: bool
    created_at: datetime | None
    updated_at: datetime | None

    model_config = {**_CAMEL, "from_attributes": True}


class PublicUserRead(BaseModel):
    """Fields safe to expose without a session (worker picker on the landing page)."""

    id: int
    first_name: str
    last_name: str
    work_type: str | None

    model_config = {**_CAMEL, "from_attributes": True}
