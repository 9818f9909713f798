"""Interactive review loop: load a word, reveal it, record the verdict, repeat."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

from loguru import logger
from starlette.concurrency import run_in_threadpool

from flashcards.db.models.enums import Decision
from flashcards.services.progress import ProgressRecorder, coerce_decision
from flashcards.services.stores import WordWithStatus
from flashcards.services.word_selector import WordSelector
from flashcards.utils.exceptions import FlashcardsException, Unauthorized

Executor = Callable[..., Awaitable[Any]]


class ReviewState(str, Enum):
    LOADING = "loading"
    HIDDEN = "hidden"
    REVEALED = "revealed"
    ERROR = "error"


class ReviewAction(str, Enum):
    REVEAL = "reveal"
    KNOWN = "known"
    UNKNOWN = "unknown"
    SKIP = "skip"
    RETRY = "retry"


# Same layout as the browser keyboard handler: Space flips, arrows judge.
KEY_BINDINGS: dict[str, ReviewAction] = {
    " ": ReviewAction.REVEAL,
    "Space": ReviewAction.REVEAL,
    "Spacebar": ReviewAction.REVEAL,
    "ArrowRight": ReviewAction.KNOWN,
    "Right": ReviewAction.KNOWN,
    "ArrowLeft": ReviewAction.UNKNOWN,
    "Left": ReviewAction.UNKNOWN,
    "Enter": ReviewAction.SKIP,
    "n": ReviewAction.SKIP,
    "r": ReviewAction.RETRY,
}


@dataclass(slots=True)
class ReviewSnapshot:
    """What a presentation layer needs to render the card."""

    state: ReviewState
    word: WordWithStatus | None
    revealed: bool
    busy: bool
    error: str | None = None
    error_code: str | None = None
    can_retry: bool = False


class ReviewSessionController:
    """State machine for one reviewer: ``loading → hidden → revealed → loading``.

    Store calls run off the event loop. While one is in flight ``busy`` is set
    and every input is dropped (the method returns ``False``), so a decision
    for word W always finishes before the fetch of W+1 starts. Guests never
    reach the recorder. A failed write moves to ``error`` but keeps the word
    and the revealed flag so ``retry`` can resend the same verdict.
    """

    def __init__(
        self,
        selector: WordSelector,
        recorder: ProgressRecorder | None = None,
        user_id: str | None = None,
        *,
        executor: Executor = run_in_threadpool,
    ) -> None:
        if user_id and recorder is None:
            raise ValueError("Authenticated review sessions need a progress recorder")
        self.selector = selector
        self.recorder = recorder
        self.user_id = user_id or None
        self._execute = executor

        self.state = ReviewState.LOADING
        self.word: WordWithStatus | None = None
        self.revealed = False
        self.busy = False
        self.error: FlashcardsException | None = None
        self._pending_decision: Decision | None = None
        self._closed = False

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> ReviewSnapshot:
        return ReviewSnapshot(
            state=self.state,
            word=self.word,
            revealed=self.revealed,
            busy=self.busy,
            error=self.error.message if self.error else None,
            error_code=type(self.error).__name__ if self.error else None,
            can_retry=self.state is ReviewState.ERROR and not isinstance(self.error, Unauthorized),
        )

    def close(self) -> None:
        """Detach the session; results that arrive later are thrown away."""

        self._closed = True

    def _accepts(self, *states: ReviewState) -> bool:
        return not self.busy and not self._closed and self.state in states

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------
    async def start(self) -> bool:
        """Fetch the first word."""

        if self.busy or self._closed or self.word is not None:
            return False
        return await self._load_next()

    async def reveal(self) -> bool:
        if not self._accepts(ReviewState.HIDDEN):
            return False
        self.revealed = True
        self.state = ReviewState.REVEALED
        return True

    async def decide(self, decision: Decision | str) -> bool:
        if not self._accepts(ReviewState.REVEALED):
            return False
        verdict = coerce_decision(decision)
        if self.is_guest:
            return await self._load_next()
        return await self._record_and_advance(verdict)

    async def skip(self) -> bool:
        """Move on without writing progress."""

        if not self._accepts(ReviewState.HIDDEN, ReviewState.REVEALED, ReviewState.ERROR):
            return False
        self._pending_decision = None
        return await self._load_next()

    async def retry(self) -> bool:
        if not self._accepts(ReviewState.ERROR):
            return False
        if isinstance(self.error, Unauthorized):
            return False
        if self._pending_decision is not None and self.word is not None:
            return await self._record_and_advance(self._pending_decision)
        return await self._load_next()

    async def handle_key(self, key: str) -> bool:
        """Dispatch a keyboard key through ``KEY_BINDINGS``."""

        action = KEY_BINDINGS.get(key)
        if action is None:
            return False
        return await self.dispatch(action)

    async def dispatch(self, action: ReviewAction | str) -> bool:
        action = ReviewAction(action)
        if action is ReviewAction.REVEAL:
            return await self.reveal()
        if action is ReviewAction.KNOWN:
            return await self.decide(Decision.KNOWN)
        if action is ReviewAction.UNKNOWN:
            return await self.decide(Decision.UNKNOWN)
        if action is ReviewAction.SKIP:
            return await self.skip()
        return await self.retry()

    # ------------------------------------------------------------------
    # Store round trips
    # ------------------------------------------------------------------
    async def _load_next(self) -> bool:
        self.busy = True
        self.state = ReviewState.LOADING
        self.revealed = False
        self.error = None
        try:
            word = await self._execute(self.selector.select_next_word, self.user_id)
        except FlashcardsException as exc:
            if self._closed:
                return False
            self.word = None
            self._fail(exc)
            return True
        finally:
            self.busy = False

        if self._closed:
            return False
        self.word = word
        self.state = ReviewState.HIDDEN
        return True

    async def _record_and_advance(self, verdict: Decision) -> bool:
        if self.word is None or self.recorder is None:
            raise RuntimeError("No card or recorder to record a decision against")
        self.busy = True
        self._pending_decision = verdict
        self.error = None
        try:
            await self._execute(
                self.recorder.record_decision, self.user_id, self.word.word.id, verdict
            )
        except FlashcardsException as exc:
            self.busy = False
            if self._closed:
                return False
            self._fail(exc)
            return True
        except BaseException:
            self.busy = False
            raise

        self._pending_decision = None
        if self._closed:
            self.busy = False
            return False
        return await self._load_next()

    def _fail(self, exc: FlashcardsException) -> None:
        logger.warning(
            "Review step failed",
            user_id=self.user_id,
            error=type(exc).__name__,
            detail=exc.message,
        )
        self.error = exc
        self.state = ReviewState.ERROR
