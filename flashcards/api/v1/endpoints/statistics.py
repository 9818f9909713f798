"""Statistics endpoint for the learner dashboard."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from flashcards.api import deps
from flashcards.db.models.user import User
from flashcards.schemas import StatisticsResponse
from flashcards.services.statistics import StatisticsService
from flashcards.utils.exceptions import FlashcardsException, to_http_exception


router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("", response_model=StatisticsResponse)
def read_statistics(
    *,
    breakdown: bool = Query(True, description="Include counts per status"),
    streak: bool = Query(True, description="Include the study streak"),
    current_user: User = Depends(deps.get_current_user),
    service: StatisticsService = Depends(deps.get_statistics_service),
) -> StatisticsResponse:
    """Return total, today, this-week and remaining counts."""

    try:
        stats = service.compute_statistics(
            current_user.identity, include_breakdown=breakdown, include_streak=streak
        )
    except FlashcardsException as exc:
        raise to_http_exception(exc) from exc
    return StatisticsResponse.model_validate(stats)
