"""Vocabulary progress models."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from flashcards.db.base import Base
from flashcards.db.models.enums import PROGRESS_STATUS_VALUES, ProgressStatus

_STATUS_LIST = ", ".join(f"'{value}'" for value in PROGRESS_STATUS_VALUES)


class UserProgress(Base):
    """Learning status of one word for one user, keyed by ``(user_id, word_id)``."""

    __tablename__ = "user_progress"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_LIST})", name="status_domain"),
    )

    # Opaque identity issued by the identity provider; no FK on purpose.
    user_id = Column(String(255), primary_key=True, index=True)
    word_id = Column(
        UUID(as_uuid=True),
        ForeignKey("dictionary.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    status = Column(String(16), nullable=False, default=ProgressStatus.NEW.value, index=True)

    last_reviewed_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    word = relationship("VocabularyEntry", passive_deletes=True)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<UserProgress user_id={self.user_id!r} word_id={self.word_id!s} status={self.status!r}>"
