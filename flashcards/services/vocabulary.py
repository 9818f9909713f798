"""Service helpers for vocabulary endpoints."""
from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.db.models.vocabulary import VocabularyEntry
from flashcards.utils.exceptions import ReadFailed


class VocabularyNotFoundError(ValueError):
    """Raised when a vocabulary item cannot be located."""


class VocabularyService:
    """Provide querying utilities for the dictionary."""

    def __init__(self, db: Session):
        self.db = db

    def list_words(self, *, limit: int, offset: int) -> list[VocabularyEntry]:
        """Return a slice of the dictionary in alphabetical order."""

        stmt = select(VocabularyEntry).order_by(VocabularyEntry.term).offset(offset).limit(limit)
        try:
            return list(self.db.scalars(stmt))
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to list vocabulary", {"error": str(exc)}) from exc

    def count_words(self) -> int:
        """Return the number of dictionary entries."""

        try:
            return int(self.db.scalar(select(func.count()).select_from(VocabularyEntry)) or 0)
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to count vocabulary", {"error": str(exc)}) from exc

    def get_word(self, word_id: uuid.UUID) -> VocabularyEntry:
        """Retrieve a single entry by identifier."""

        word = self.db.get(VocabularyEntry, word_id)
        if not word:
            raise VocabularyNotFoundError("Vocabulary word not found")
        return word

    def lookup_word(self, term: str) -> VocabularyEntry:
        """Return the entry for a source-language term, case-insensitively."""

        value = term.strip().lower()
        if not value:
            raise VocabularyNotFoundError("Vocabulary word not found")
        word = self.db.scalars(
            select(VocabularyEntry).where(VocabularyEntry.term == value).limit(1)
        ).first()
        if not word:
            raise VocabularyNotFoundError("Vocabulary word not found")
        return word
