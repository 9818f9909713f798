"""Database models package."""
from flashcards.db.models.enums import Decision, ProgressStatus
from flashcards.db.models.progress import UserProgress
from flashcards.db.models.user import User
from flashcards.db.models.vocabulary import VocabularyEntry

__all__ = [
    "Decision",
    "ProgressStatus",
    "User",
    "UserProgress",
    "VocabularyEntry",
]
