"""Business logic for learner vocabulary progress."""
from __future__ import annotations

import uuid
from datetime import datetime

from loguru import logger

from flashcards.db.models.enums import Decision, ProgressStatus
from flashcards.services.stores import ProgressRecord, ProgressStore
from flashcards.utils.clock import as_utc, utcnow
from flashcards.utils.exceptions import InvalidReference, Unauthorized, ValidationError


def coerce_decision(value: Decision | str) -> Decision:
    """Accept ``Decision`` members or their string values."""

    if isinstance(value, Decision):
        return value
    try:
        return Decision(str(value).lower())
    except ValueError as exc:
        raise ValidationError(
            'Status must be either "known" or "unknown"', {"decision": value}
        ) from exc


def coerce_word_id(value: uuid.UUID | str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if not value:
        raise InvalidReference("Word ID is required")
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise InvalidReference("Word ID is not a valid identifier", {"word_id": value}) from exc


class ProgressRecorder:
    """Apply a learner's known/unknown verdict to their progress record.

    The write is an upsert keyed by ``(user_id, word_id)``, so repeating a call
    leaves a single record carrying the latest status and review time. Guests
    have no records; the review controller never calls this for them.
    """

    def __init__(self, progress_store: ProgressStore) -> None:
        self.progress_store = progress_store

    def record_decision(
        self,
        user_id: str,
        word_id: uuid.UUID | str,
        decision: Decision | str,
        *,
        now: datetime | None = None,
    ) -> ProgressRecord:
        """Upsert the record and return it as stored."""

        if not user_id:
            raise Unauthorized("User ID is required to record progress")
        verdict = coerce_decision(decision)
        word_uuid = coerce_word_id(word_id)
        timestamp = as_utc(now) if now is not None else utcnow()

        record = self.progress_store.upsert(user_id, word_uuid, verdict.status, timestamp)
        logger.info(
            "Recorded decision",
            user_id=user_id,
            word_id=str(word_uuid),
            status=record.status.value,
        )
        return record

    def mark_known(self, user_id: str, word_id: uuid.UUID | str) -> ProgressRecord:
        return self.record_decision(user_id, word_id, Decision.KNOWN)

    def mark_unknown(self, user_id: str, word_id: uuid.UUID | str) -> ProgressRecord:
        return self.record_decision(user_id, word_id, Decision.UNKNOWN)

    def get_progress(self, user_id: str, word_id: uuid.UUID | str) -> ProgressRecord | None:
        """Return an existing progress record if present."""

        return self.progress_store.read_one(user_id, coerce_word_id(word_id))

    def get_status(self, user_id: str, word_id: uuid.UUID | str) -> ProgressStatus:
        """Return the learner's status for a word; no record means ``new``."""

        record = self.get_progress(user_id, word_id)
        return record.status if record else ProgressStatus.NEW

    def list_progress(self, user_id: str) -> list[ProgressRecord]:
        return self.progress_store.read_all(user_id)
