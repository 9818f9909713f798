"""Built-in identity provider: accounts, password checks and bearer tokens.

The review core never sees ``User`` rows. All it gets from here is the opaque
identity string carried in the token.
"""
from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.core.security import hash_password, issue_access_token, verify_password
from flashcards.db.models.user import User
from flashcards.schemas import Token, UserCreate
from flashcards.utils.exceptions import DuplicateAccount, Unauthorized, WriteFailed

DUPLICATE_EMAIL_MESSAGE = "A user with this email already exists."
BAD_CREDENTIALS_MESSAGE = "Incorrect email or password"


class IdentityProvider:
    def __init__(self, db: Session):
        self.db = db

    def _find(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email.strip().lower()))

    def register(self, payload: UserCreate) -> User:
        email = payload.email.strip().lower()
        if self._find(email):
            raise DuplicateAccount(DUPLICATE_EMAIL_MESSAGE, {"email": email})

        user = User(
            email=email,
            hashed_password=hash_password(payload.password),
            full_name=payload.full_name,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration.
            self.db.rollback()
            raise DuplicateAccount(DUPLICATE_EMAIL_MESSAGE, {"email": email}) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise WriteFailed("Failed to create account", {"email": email}) from exc
        self.db.refresh(user)
        logger.info("Registered learner", identity=user.identity)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Return the active account for these credentials or raise ``Unauthorized``."""

        user = self._find(email)
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            raise Unauthorized(BAD_CREDENTIALS_MESSAGE)
        return user

    def issue_token(self, user: User, *, now: datetime | None = None) -> Token:
        issued_at = now or datetime.now(timezone.utc)
        token, expires_at = issue_access_token(user.identity, now=issued_at)
        return Token(
            access_token=token,
            expires_in=int((expires_at - issued_at).total_seconds()),
            identity=user.identity,
        )

    def login(self, email: str, password: str) -> Token:
        return self.issue_token(self.authenticate(email, password))
