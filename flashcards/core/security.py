"""Credentials and bearer tokens for the built-in identity provider.

A token's ``sub`` claim is the learner's opaque identity (``User.identity``),
the same string the review core receives as ``user_id``.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from pydantic import ValidationError

from flashcards.config import settings
from flashcards.schemas.auth import TokenClaims

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


class InvalidTokenError(Exception):
    """Raised when a bearer token is malformed, expired or of the wrong type."""


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))


def issue_access_token(
    identity: str, *, lifetime: timedelta | None = None, now: datetime | None = None
) -> tuple[str, datetime]:
    """Sign a token for ``identity`` and return it with its expiry."""

    if not identity:
        raise ValueError("identity must not be empty")
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + (lifetime or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": identity, "exp": expires_at, "iat": issued_at, "type": ACCESS_TOKEN_TYPE}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM), expires_at


def read_identity(token: str) -> str:
    """Return the identity carried by a valid access token."""

    try:
        raw = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        claims = TokenClaims.model_validate(raw)
    except (JWTError, ValidationError) as exc:
        raise InvalidTokenError(str(exc)) from exc
    if claims.type != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError(f"Unexpected token type {claims.type!r}")
    return claims.sub
