"""Dictionary browsing endpoints."""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.config import settings
from flashcards.schemas import VocabularyListResponse, VocabularyWordRead
from flashcards.services.vocabulary import VocabularyNotFoundError, VocabularyService
from flashcards.utils.cache import (
    VOCABULARY_ITEM_CACHE,
    VOCABULARY_LIST_CACHE,
    build_cache_key,
    cache_backend,
)
from flashcards.utils.exceptions import ReadFailed, to_http_exception

router = APIRouter(prefix="/vocabulary", tags=["vocabulary"])


@router.get("/", response_model=VocabularyListResponse)
def list_vocabulary(
    limit: int = Query(default=25, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(deps.get_db),
) -> VocabularyListResponse:
    """Return dictionary entries in alphabetical order."""

    cache_key = build_cache_key(limit=limit, offset=offset)
    cached = cache_backend.get(VOCABULARY_LIST_CACHE, cache_key)
    if cached is not None:
        return cached

    service = VocabularyService(db)
    try:
        items = service.list_words(limit=limit, offset=offset)
        total = service.count_words()
    except ReadFailed as exc:
        raise to_http_exception(exc) from exc
    response = VocabularyListResponse(
        total=total, items=[VocabularyWordRead.model_validate(item) for item in items]
    )
    payload = response.model_dump(mode="json")
    cache_backend.set(
        VOCABULARY_LIST_CACHE, cache_key, payload, ttl_seconds=settings.VOCABULARY_CACHE_TTL_SECONDS
    )
    return payload


@router.get("/lookup", response_model=VocabularyWordRead)
def lookup_vocabulary_word(
    term: str = Query(..., min_length=1, max_length=500, description="Source-language term"),
    db: Session = Depends(deps.get_db),
) -> VocabularyWordRead:
    """Find an entry by its term; matching is case-insensitive."""

    service = VocabularyService(db)
    try:
        word = service.lookup_word(term)
    except VocabularyNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return word


@router.get("/{word_id}", response_model=VocabularyWordRead)
def get_vocabulary_word(word_id: uuid.UUID, db: Session = Depends(deps.get_db)) -> VocabularyWordRead:
    """Retrieve a dictionary entry by identifier."""

    cache_key = build_cache_key(word_id=word_id)
    cached = cache_backend.get(VOCABULARY_ITEM_CACHE, cache_key)
    if cached is not None:
        return cached

    service = VocabularyService(db)
    try:
        word = service.get_word(word_id)
    except VocabularyNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    payload = VocabularyWordRead.model_validate(word).model_dump(mode="json")
    cache_backend.set(
        VOCABULARY_ITEM_CACHE, cache_key, payload, ttl_seconds=settings.VOCABULARY_CACHE_TTL_SECONDS
    )
    return payload
