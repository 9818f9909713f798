"""Choose the next flashcard for guests and authenticated learners."""
from __future__ import annotations

from loguru import logger

from flashcards.db.models.enums import ProgressStatus
from flashcards.services.stores import VocabularyStore, WordWithStatus
from flashcards.utils.exceptions import NoWordsAvailable, ValidationError

MAX_RANDOM_BATCH = 50


class WordSelector:
    """Pick one word per call; every call reads the store afresh.

    Guests get a uniformly random entry. Authenticated learners get the head of
    a two-tier queue: ``new``/``unknown`` (or never reviewed) words first, then
    ``known`` words, each tier oldest ``last_reviewed_at`` first. Once every
    word is known the selector keeps returning known words instead of stopping.
    """

    def __init__(self, vocabulary_store: VocabularyStore) -> None:
        self.vocabulary_store = vocabulary_store

    def select_next_word(self, caller: str | None) -> WordWithStatus:
        """Return the next word for ``caller`` (``None`` means guest)."""

        if not caller:
            return self._select_for_guest()
        return self._select_for_user(caller)

    def _select_for_guest(self) -> WordWithStatus:
        entry = self.vocabulary_store.read_random()
        if entry is None:
            raise NoWordsAvailable()
        logger.debug("Selected random word for guest", word_id=str(entry.id))
        return WordWithStatus(word=entry, status=ProgressStatus.NEW)

    def _select_for_user(self, user_id: str) -> WordWithStatus:
        candidate = self.vocabulary_store.read_prioritized(user_id)
        if candidate is None:
            raise NoWordsAvailable()
        logger.debug(
            "Selected prioritized word",
            user_id=user_id,
            word_id=str(candidate.word.id),
            status=candidate.status.value,
        )
        return candidate

    def select_random_words(self, count: int = 5) -> list[WordWithStatus]:
        """Return up to ``count`` distinct random words for a guest browsing cards."""

        if not 1 <= count <= MAX_RANDOM_BATCH:
            raise ValidationError(
                f"count must be between 1 and {MAX_RANDOM_BATCH}", {"count": count}
            )
        entries = self.vocabulary_store.read_random_sample(count)
        if not entries:
            raise NoWordsAvailable()
        logger.debug("Selected random batch", requested=count, returned=len(entries))
        return [WordWithStatus(word=entry, status=ProgressStatus.NEW) for entry in entries]
