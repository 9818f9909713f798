"""Typed access to the vocabulary and progress tables.

The review core (selector, recorder, statistics) talks to the database only
through the two protocols below. The SQLAlchemy implementations convert rows
into frozen dataclasses and every driver error into the application's error
taxonomy, so callers never see ``sqlalchemy.exc`` types.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from loguru import logger
from sqlalchemy import DateTime, and_, case, func, literal, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from flashcards.db.models.enums import ProgressStatus
from flashcards.db.models.progress import UserProgress
from flashcards.db.models.vocabulary import VocabularyEntry
from flashcards.utils.clock import EPOCH, as_utc
from flashcards.utils.exceptions import InvalidReference, ReadFailed, WriteFailed


@dataclass(slots=True, frozen=True)
class WordEntry:
    """A vocabulary entry as seen by the review core."""

    id: uuid.UUID
    term: str
    translation: str
    example_sentence: str | None = None
    created_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class WordWithStatus:
    """A vocabulary entry together with the caller's learning status."""

    word: WordEntry
    status: ProgressStatus = ProgressStatus.NEW
    last_reviewed_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class ProgressRecord:
    user_id: str
    word_id: uuid.UUID
    status: ProgressStatus
    last_reviewed_at: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class ProgressCounts:
    """Counts taken from one consistent read of a user's progress."""

    total: int
    today: int
    this_week: int
    new: int
    known: int
    unknown: int
    vocabulary_size: int


class VocabularyStore(Protocol):
    def read_random(self) -> WordEntry | None: ...

    def read_random_sample(self, count: int) -> list[WordEntry]: ...

    def read_prioritized(self, user_id: str) -> WordWithStatus | None: ...

    def get(self, word_id: uuid.UUID) -> WordEntry | None: ...

    def count(self) -> int: ...


class ProgressStore(Protocol):
    def upsert(
        self, user_id: str, word_id: uuid.UUID, status: ProgressStatus, timestamp: datetime
    ) -> ProgressRecord: ...

    def read_one(self, user_id: str, word_id: uuid.UUID) -> ProgressRecord | None: ...

    def read_all(self, user_id: str) -> list[ProgressRecord]: ...

    def read_review_times(self, user_id: str, since: datetime) -> list[datetime]: ...

    def snapshot_counts(
        self,
        user_id: str,
        *,
        day_start: datetime,
        day_end: datetime,
        week_start: datetime,
    ) -> ProgressCounts: ...


def status_rank():
    """``1`` for new/unknown (or no record), ``2`` for known."""

    return case((UserProgress.status == ProgressStatus.KNOWN.value, 2), else_=1)


def _to_word(entry: VocabularyEntry) -> WordEntry:
    return WordEntry(
        id=entry.id,
        term=entry.term,
        translation=entry.translation,
        example_sentence=entry.example_sentence,
        created_at=entry.created_at,
    )


def _optional_utc(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


_PROGRESS_COLUMNS = (
    UserProgress.user_id,
    UserProgress.word_id,
    UserProgress.status,
    UserProgress.last_reviewed_at,
    UserProgress.created_at,
    UserProgress.updated_at,
)


def _to_record(row) -> ProgressRecord:
    return ProgressRecord(
        user_id=row.user_id,
        word_id=row.word_id,
        status=ProgressStatus(row.status),
        last_reviewed_at=as_utc(row.last_reviewed_at),
        created_at=_optional_utc(row.created_at),
        updated_at=_optional_utc(row.updated_at),
    )


class SqlVocabularyStore:
    """Vocabulary reads over a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def read_random(self) -> WordEntry | None:
        stmt = select(VocabularyEntry).order_by(func.random()).limit(1)
        try:
            entry = self.db.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to fetch random word", {"error": str(exc)}) from exc
        return _to_word(entry) if entry else None

    def read_random_sample(self, count: int) -> list[WordEntry]:
        """Up to ``count`` distinct entries in random order."""

        stmt = select(VocabularyEntry).order_by(func.random()).limit(count)
        try:
            entries = self.db.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to fetch random words", {"count": count, "error": str(exc)}) from exc
        return [_to_word(entry) for entry in entries]

    def read_prioritized(self, user_id: str) -> WordWithStatus | None:
        reviewed_at = func.coalesce(
            UserProgress.last_reviewed_at, literal(EPOCH, DateTime(timezone=True))
        )
        stmt = (
            select(VocabularyEntry, UserProgress.status, UserProgress.last_reviewed_at)
            .outerjoin(
                UserProgress,
                and_(
                    UserProgress.word_id == VocabularyEntry.id,
                    UserProgress.user_id == user_id,
                ),
            )
            .order_by(status_rank().asc(), reviewed_at.asc(), func.random())
            .limit(1)
        )
        try:
            row = self.db.execute(stmt).first()
        except SQLAlchemyError as exc:
            raise ReadFailed(
                "Failed to fetch prioritized word", {"user_id": user_id, "error": str(exc)}
            ) from exc
        if row is None:
            return None
        entry, status, last_reviewed_at = row
        return WordWithStatus(
            word=_to_word(entry),
            status=ProgressStatus(status) if status else ProgressStatus.NEW,
            last_reviewed_at=_optional_utc(last_reviewed_at),
        )

    def get(self, word_id: uuid.UUID) -> WordEntry | None:
        try:
            entry = self.db.get(VocabularyEntry, word_id)
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to fetch word", {"word_id": str(word_id)}) from exc
        return _to_word(entry) if entry else None

    def count(self) -> int:
        try:
            return int(self.db.scalar(select(func.count()).select_from(VocabularyEntry)) or 0)
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to count words", {"error": str(exc)}) from exc


class SqlProgressStore:
    """Progress reads and upserts over a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            return None
        return insert

    def upsert(
        self, user_id: str, word_id: uuid.UUID, status: ProgressStatus, timestamp: datetime
    ) -> ProgressRecord:
        """Create or overwrite the record for ``(user_id, word_id)`` in one statement."""

        timestamp = as_utc(timestamp)
        insert = self._insert()
        try:
            if insert is None:
                self._merge(user_id, word_id, status, timestamp)
            else:
                stmt = insert(UserProgress).values(
                    user_id=user_id,
                    word_id=word_id,
                    status=status.value,
                    last_reviewed_at=timestamp,
                    created_at=timestamp,
                    updated_at=timestamp,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[UserProgress.user_id, UserProgress.word_id],
                    set_={
                        "status": stmt.excluded.status,
                        "last_reviewed_at": stmt.excluded.last_reviewed_at,
                        "updated_at": stmt.excluded.updated_at,
                    },
                )
                self.db.execute(stmt)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise InvalidReference(
                "Vocabulary word not found",
                {"user_id": user_id, "word_id": str(word_id)},
            ) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise WriteFailed(
                "Failed to update word status",
                {"user_id": user_id, "word_id": str(word_id), "error": str(exc)},
            ) from exc

        record = self.read_one(user_id, word_id)
        if record is None:
            raise WriteFailed(
                "Progress record missing after write",
                {"user_id": user_id, "word_id": str(word_id)},
            )
        return record

    def _merge(
        self, user_id: str, word_id: uuid.UUID, status: ProgressStatus, timestamp: datetime
    ) -> None:
        # Dialects without ON CONFLICT support.
        progress = self.db.get(UserProgress, (user_id, word_id), with_for_update=True)
        if progress is None:
            progress = UserProgress(user_id=user_id, word_id=word_id, created_at=timestamp)
            self.db.add(progress)
        progress.status = status.value
        progress.last_reviewed_at = timestamp
        progress.updated_at = timestamp
        self.db.flush()

    def read_one(self, user_id: str, word_id: uuid.UUID) -> ProgressRecord | None:
        stmt = select(*_PROGRESS_COLUMNS).where(
            UserProgress.user_id == user_id, UserProgress.word_id == word_id
        )
        try:
            row = self.db.execute(stmt).first()
        except SQLAlchemyError as exc:
            raise ReadFailed(
                "Failed to fetch word progress", {"user_id": user_id, "word_id": str(word_id)}
            ) from exc
        return _to_record(row) if row else None

    def read_all(self, user_id: str) -> list[ProgressRecord]:
        stmt = (
            select(*_PROGRESS_COLUMNS)
            .where(UserProgress.user_id == user_id)
            .order_by(UserProgress.last_reviewed_at.desc())
        )
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to fetch user progress", {"user_id": user_id}) from exc
        return [_to_record(row) for row in rows]

    def read_review_times(self, user_id: str, since: datetime) -> list[datetime]:
        stmt = (
            select(UserProgress.last_reviewed_at)
            .where(UserProgress.user_id == user_id)
            .where(UserProgress.last_reviewed_at >= as_utc(since))
            .order_by(UserProgress.last_reviewed_at.desc())
        )
        try:
            values = self.db.scalars(stmt).all()
        except SQLAlchemyError as exc:
            raise ReadFailed("Failed to fetch review history", {"user_id": user_id}) from exc
        return [as_utc(value) for value in values]

    def snapshot_counts(
        self,
        user_id: str,
        *,
        day_start: datetime,
        day_end: datetime,
        week_start: datetime,
    ) -> ProgressCounts:
        """Read every dashboard count, vocabulary size included, in one statement."""

        reviewed = UserProgress.last_reviewed_at

        def _count_if(condition):
            return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)

        vocabulary_size = (
            select(func.count()).select_from(VocabularyEntry).scalar_subquery()
        )
        stmt = (
            select(
                func.count().label("total"),
                _count_if(and_(reviewed >= as_utc(day_start), reviewed < as_utc(day_end))).label("today"),
                _count_if(reviewed >= as_utc(week_start)).label("this_week"),
                _count_if(UserProgress.status == ProgressStatus.NEW.value).label("new"),
                _count_if(UserProgress.status == ProgressStatus.KNOWN.value).label("known"),
                _count_if(UserProgress.status == ProgressStatus.UNKNOWN.value).label("unknown"),
                vocabulary_size.label("vocabulary_size"),
            )
            .select_from(UserProgress)
            .where(UserProgress.user_id == user_id)
        )
        try:
            row = self.db.execute(stmt).one()
        except SQLAlchemyError as exc:
            logger.error("Statistics query failed", user_id=user_id, error=str(exc))
            raise ReadFailed("Failed to fetch user statistics", {"user_id": user_id}) from exc
        return ProgressCounts(
            total=int(row.total or 0),
            today=int(row.today or 0),
            this_week=int(row.this_week or 0),
            new=int(row.new or 0),
            known=int(row.known or 0),
            unknown=int(row.unknown or 0),
            vocabulary_size=int(row.vocabulary_size or 0),
        )


__all__ = [
    "ProgressCounts",
    "ProgressRecord",
    "ProgressStore",
    "SqlProgressStore",
    "SqlVocabularyStore",
    "VocabularyStore",
    "WordEntry",
    "WordWithStatus",
    "status_rank",
]
