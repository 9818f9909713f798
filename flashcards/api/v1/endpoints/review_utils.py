"""Conversions between review-core dataclasses and response schemas."""
from __future__ import annotations

from flashcards.schemas import NextWordResponse, ReviewStateRead, VocabularyWordRead
from flashcards.services.review_session import ReviewSnapshot
from flashcards.services.stores import WordWithStatus


def word_to_schema(candidate: WordWithStatus, *, is_guest: bool) -> NextWordResponse:
    return NextWordResponse(
        word=VocabularyWordRead.model_validate(candidate.word),
        status=candidate.status,
        last_reviewed_at=candidate.last_reviewed_at,
        is_guest=is_guest,
    )


def snapshot_to_schema(
    snapshot: ReviewSnapshot, *, is_guest: bool, accepted: bool = True
) -> ReviewStateRead:
    return ReviewStateRead(
        state=snapshot.state.value,
        word=word_to_schema(snapshot.word, is_guest=is_guest) if snapshot.word else None,
        revealed=snapshot.revealed,
        busy=snapshot.busy,
        error=snapshot.error,
        error_code=snapshot.error_code,
        can_retry=snapshot.can_retry,
        accepted=accepted,
    )
