"""Account registration and login."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.db.models.user import User
from flashcards.schemas import Token, UserCreate, UserLogin, UserRead
from flashcards.services.auth import IdentityProvider

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(deps.get_db)) -> User:
    """Create an account; a taken email answers 400."""

    return IdentityProvider(db).register(payload)


@router.post("/login", response_model=Token)
def login(payload: UserLogin, db: Session = Depends(deps.get_db)) -> Token:
    """Exchange email and password for a bearer token carrying the learner identity."""

    return IdentityProvider(db).login(payload.email, payload.password)
