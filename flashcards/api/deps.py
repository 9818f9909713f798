"""Shared API dependencies."""
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from flashcards.config import settings
from flashcards.core.security import InvalidTokenError, read_identity
from flashcards.db.models.user import User
from flashcards.db.session import get_db
from flashcards.services.progress import ProgressRecorder
from flashcards.services.statistics import StatisticsService
from flashcards.services.stores import SqlProgressStore, SqlVocabularyStore
from flashcards.services.word_selector import WordSelector

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False
)


def resolve_user(token: str, db: Session) -> User | None:
    """Return the active user behind an access token, or ``None``."""

    try:
        user_id = uuid.UUID(read_identity(token))
    except (InvalidTokenError, ValueError):
        return None

    user = db.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    """Resolve the authenticated user from the Authorization header."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception
    user = resolve_user(token, db)
    if not user:
        raise credentials_exception
    return user


def get_optional_user(
    token: str | None = Depends(optional_oauth2_scheme), db: Session = Depends(get_db)
) -> User | None:
    """Return the caller when a valid token is sent; guests get ``None``.

    A token that is present but invalid is rejected rather than silently
    downgraded to guest access.
    """

    if not token:
        return None
    user = resolve_user(token, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_word_selector(db: Session = Depends(get_db)) -> WordSelector:
    return WordSelector(SqlVocabularyStore(db))


def get_progress_recorder(db: Session = Depends(get_db)) -> ProgressRecorder:
    return ProgressRecorder(SqlProgressStore(db))


def get_statistics_service(db: Session = Depends(get_db)) -> StatisticsService:
    return StatisticsService(SqlProgressStore(db))
