"""Load dictionary entries from CSV files or the built-in starter list."""
from __future__ import annotations

import csv
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.db.models.vocabulary import (
    TERM_MAX_LENGTH,
    TRANSLATION_MAX_LENGTH,
    VocabularyEntry,
)
from flashcards.utils.cache import VOCABULARY_LIST_CACHE, cache_backend
from flashcards.utils.exceptions import ValidationError, WriteFailed

STARTER_WORDS: list[dict[str, str]] = [
    {"term": "hello", "translation": "你好", "example_sentence": "Hello, how are you today?"},
    {"term": "world", "translation": "世界", "example_sentence": "The world is full of opportunities."},
    {"term": "learn", "translation": "学习", "example_sentence": "I want to learn new vocabulary every day."},
    {"term": "vocabulary", "translation": "词汇", "example_sentence": "Building vocabulary is essential for language learning."},
    {"term": "practice", "translation": "练习", "example_sentence": "Daily practice helps improve language skills."},
    {"term": "progress", "translation": "进步", "example_sentence": "I can see my progress in learning Chinese."},
    {"term": "language", "translation": "语言", "example_sentence": "Language learning requires patience and dedication."},
    {"term": "knowledge", "translation": "知识", "example_sentence": "Knowledge is power in today's world."},
]


def normalize_term(term: str) -> str:
    """Terms are stored stripped and lower-cased."""

    return term.strip().lower()


@dataclass(slots=True)
class ImportReport:
    created: int = 0
    skipped: int = 0
    invalid: list[str] = field(default_factory=list)


def validate_row(row: Mapping[str, str | None]) -> VocabularyEntry:
    """Build an entry from a raw row or raise ``ValidationError``."""

    term = normalize_term(row.get("term") or "")
    translation = (row.get("translation") or "").strip()
    example = (row.get("example_sentence") or "").strip() or None

    if not term:
        raise ValidationError("Term must not be empty", {"row": dict(row)})
    if len(term) > TERM_MAX_LENGTH:
        raise ValidationError("Term is too long", {"term": term[:40]})
    if not translation:
        raise ValidationError("Translation must not be empty", {"term": term})
    if len(translation) > TRANSLATION_MAX_LENGTH:
        raise ValidationError("Translation is too long", {"term": term})
    return VocabularyEntry(term=term, translation=translation, example_sentence=example)


class DictionaryImporter:
    """Insert new dictionary entries, skipping terms that already exist."""

    def __init__(self, db: Session, *, batch_size: int = 100) -> None:
        self.db = db
        self.batch_size = batch_size

    def _existing_terms(self, terms: Iterable[str]) -> set[str]:
        wanted = list(set(terms))
        if not wanted:
            return set()
        stmt = select(VocabularyEntry.term).where(VocabularyEntry.term.in_(wanted))
        return set(self.db.scalars(stmt))

    def import_rows(self, rows: Iterable[Mapping[str, str | None]]) -> ImportReport:
        report = ImportReport()
        batch: list[VocabularyEntry] = []
        seen: set[str] = set()

        for row in rows:
            try:
                entry = validate_row(row)
            except ValidationError as exc:
                logger.warning("Skipping invalid dictionary row", reason=exc.message)
                report.invalid.append(exc.message)
                continue
            if entry.term in seen:
                report.skipped += 1
                continue
            seen.add(entry.term)
            batch.append(entry)
            if len(batch) >= self.batch_size:
                self._flush(batch, report)
                batch = []

        if batch:
            self._flush(batch, report)
        logger.info(
            "Dictionary import finished",
            created=report.created,
            skipped=report.skipped,
            invalid=len(report.invalid),
        )
        return report

    def _flush(self, batch: list[VocabularyEntry], report: ImportReport) -> None:
        try:
            existing = self._existing_terms(entry.term for entry in batch)
            fresh = [entry for entry in batch if entry.term not in existing]
            self.db.add_all(fresh)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise WriteFailed("Failed to store dictionary entries", {"error": str(exc)}) from exc
        if fresh:
            # Cached pages include the total.
            cache_backend.invalidate(VOCABULARY_LIST_CACHE, prefix="")
        report.created += len(fresh)
        report.skipped += len(batch) - len(fresh)
        logger.debug("Stored dictionary batch", created=len(fresh))

    def import_csv(self, csv_path: str | Path) -> ImportReport:
        """Load a UTF-8 CSV with ``term,translation,example_sentence`` columns."""

        with open(csv_path, "r", encoding="utf-8", newline="") as handle:
            reader = csv.DictReader(handle)
            missing = {"term", "translation"} - set(reader.fieldnames or [])
            if missing:
                raise ValidationError(
                    "CSV is missing required columns", {"missing": sorted(missing)}
                )
            return self.import_rows(reader)

    def seed_starter_words(self) -> ImportReport:
        return self.import_rows(STARTER_WORDS)
