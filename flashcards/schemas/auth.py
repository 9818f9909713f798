"""Schemas for issued bearer tokens."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Token(BaseModel):
    """Bearer token returned by the login endpoint."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Seconds until the token expires")
    identity: str = Field(description="Opaque learner identity carried in the token")


class TokenClaims(BaseModel):
    sub: str = Field(min_length=1)
    exp: datetime
    type: str
