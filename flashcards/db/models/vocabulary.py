"""Vocabulary database models."""
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from flashcards.db.base import Base

TERM_MAX_LENGTH = 500
TRANSLATION_MAX_LENGTH = 1000


class VocabularyEntry(Base):
    """A source-language term and its translation. Rows are never updated.

    Terms are stored stripped and lower-cased; lookups rely on it.
    """

    __tablename__ = "dictionary"
    __table_args__ = (
        CheckConstraint("length(term) > 0", name="term_not_empty"),
        CheckConstraint("term = lower(term)", name="term_lowercase"),
        CheckConstraint("length(translation) > 0", name="translation_not_empty"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    term = Column(String(TERM_MAX_LENGTH), nullable=False, unique=True, index=True)
    translation = Column(String(TRANSLATION_MAX_LENGTH), nullable=False)
    example_sentence = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    @validates("term")
    def _normalize_term(self, key: str, value: str | None) -> str | None:
        return value.strip().lower() if value is not None else None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<VocabularyEntry term={self.term!r}>"
