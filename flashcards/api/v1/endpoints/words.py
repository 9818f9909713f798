"""Card-selection endpoints shared by guests and signed-in learners."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from flashcards.api import deps
from flashcards.api.v1.endpoints.review_utils import word_to_schema
from flashcards.db.models.user import User
from flashcards.schemas import NextWordResponse
from flashcards.services.word_selector import MAX_RANDOM_BATCH, WordSelector
from flashcards.utils.exceptions import FlashcardsException, to_http_exception

router = APIRouter(prefix="/words", tags=["words"])


@router.get("/next", response_model=NextWordResponse)
def read_next_word(
    *,
    current_user: User | None = Depends(deps.get_optional_user),
    selector: WordSelector = Depends(deps.get_word_selector),
) -> NextWordResponse:
    """Return a random word for guests or the highest-priority word for learners."""

    caller = current_user.identity if current_user else None
    try:
        candidate = selector.select_next_word(caller)
    except FlashcardsException as exc:
        raise to_http_exception(exc) from exc
    return word_to_schema(candidate, is_guest=caller is None)


@router.get("/random", response_model=list[NextWordResponse])
def read_random_words(
    count: int = Query(default=5, ge=1, le=MAX_RANDOM_BATCH),
    selector: WordSelector = Depends(deps.get_word_selector),
) -> list[NextWordResponse]:
    """Return a batch of distinct random words; no progress is read or written."""

    try:
        candidates = selector.select_random_words(count)
    except FlashcardsException as exc:
        raise to_http_exception(exc) from exc
    return [word_to_schema(candidate, is_guest=True) for candidate in candidates]
