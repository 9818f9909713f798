"""Pydantic schemas package."""

from flashcards.schemas.auth import Token, TokenClaims
from flashcards.schemas.progress import (
    DecisionRequest,
    NextWordResponse,
    ProgressDetail,
    ProgressRead,
)
from flashcards.schemas.review import ReviewClientMessage, ReviewStateRead
from flashcards.schemas.statistics import StatisticsResponse, StatusBreakdownRead, StreakRead
from flashcards.schemas.user import UserCreate, UserLogin, UserRead
from flashcards.schemas.vocabulary import VocabularyListResponse, VocabularyWordRead

__all__ = [
    "Token",
    "TokenClaims",
    "DecisionRequest",
    "NextWordResponse",
    "ProgressDetail",
    "ProgressRead",
    "ReviewClientMessage",
    "ReviewStateRead",
    "StatisticsResponse",
    "StatusBreakdownRead",
    "StreakRead",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "VocabularyListResponse",
    "VocabularyWordRead",
]
