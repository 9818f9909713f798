"""Endpoints for learner vocabulary progress."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from flashcards.api import deps
from flashcards.db.models.enums import ProgressStatus
from flashcards.db.models.user import User
from flashcards.schemas import DecisionRequest, ProgressDetail, ProgressRead
from flashcards.services.progress import ProgressRecorder
from flashcards.utils.exceptions import FlashcardsException, to_http_exception


router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/", response_model=list[ProgressRead])
def list_progress(
    *,
    current_user: User = Depends(deps.get_current_user),
    recorder: ProgressRecorder = Depends(deps.get_progress_recorder),
) -> list[ProgressRead]:
    """Return every progress record of the learner, most recent first."""

    try:
        records = recorder.list_progress(current_user.identity)
    except FlashcardsException as exc:
        raise to_http_exception(exc) from exc
    return [ProgressRead.model_validate(record) for record in records]


@router.post("/decision", response_model=ProgressRead)
def submit_decision(
    *,
    payload: DecisionRequest,
    current_user: User = Depends(deps.get_current_user),
    recorder: ProgressRecorder = Depends(deps.get_progress_recorder),
) -> ProgressRead:
    """Store the learner's known/unknown verdict for a word."""

    try:
        record = recorder.record_decision(current_user.identity, payload.word_id, payload.decision)
    except FlashcardsException as exc:
        raise to_http_exception(exc) from exc
    return ProgressRead.model_validate(record)


@router.get("/{word_id}", response_model=ProgressDetail)
def get_progress_detail(
    *,
    word_id: uuid.UUID,
    current_user: User = Depends(deps.get_current_user),
    recorder: ProgressRecorder = Depends(deps.get_progress_recorder),
) -> ProgressDetail:
    """Return the learner's status for one word; no record reads as ``new``."""

    try:
        record = recorder.get_progress(current_user.identity, word_id)
    except FlashcardsException as exc:
        raise to_http_exception(exc) from exc
    return ProgressDetail(
        word_id=word_id,
        status=record.status if record else ProgressStatus.NEW,
        last_reviewed_at=record.last_reviewed_at if record else None,
        has_record=record is not None,
    )
