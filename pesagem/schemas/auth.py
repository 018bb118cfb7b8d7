"""Pydantic schemas for login / logout / health."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    cpf: str = Field(min_length=11, max_length=11)
    password: str = Field(min_length=1, max_length=72)


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    db: bool
    sessions: bool
