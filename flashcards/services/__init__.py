"""Service layer package."""

from flashcards.services.progress import ProgressRecorder
from flashcards.services.review_session import ReviewSessionController, ReviewState
from flashcards.services.statistics import StatisticsService
from flashcards.services.stores import SqlProgressStore, SqlVocabularyStore
from flashcards.services.vocabulary import VocabularyService
from flashcards.services.word_selector import WordSelector

__all__ = [
    "ProgressRecorder",
    "ReviewSessionController",
    "ReviewState",
    "SqlProgressStore",
    "SqlVocabularyStore",
    "StatisticsService",
    "VocabularyService",
    "WordSelector",
]
