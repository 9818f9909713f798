"""Real-time WebSocket endpoint driving a review session."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from flashcards.api import deps
from flashcards.api.v1.endpoints.review_utils import snapshot_to_schema
from flashcards.schemas.review import (
    DecideMessage,
    KeyMessage,
    RetryMessage,
    ReviewClientMessage,
    RevealMessage,
    SkipMessage,
)
from flashcards.services.progress import ProgressRecorder
from flashcards.services.review_session import ReviewSessionController
from flashcards.services.stores import SqlProgressStore, SqlVocabularyStore
from flashcards.services.word_selector import WordSelector

router = APIRouter(prefix="/review", tags=["review"])

client_message_adapter = TypeAdapter(ReviewClientMessage)


def _extract_token(websocket: WebSocket) -> str | None:
    header = websocket.headers.get("Authorization")
    if header and header.lower().startswith("bearer "):
        return header.split(" ", 1)[1]
    return websocket.query_params.get("token")


async def _apply(controller: ReviewSessionController, message) -> bool:
    if isinstance(message, RevealMessage):
        return await controller.reveal()
    if isinstance(message, DecideMessage):
        return await controller.decide(message.decision)
    if isinstance(message, SkipMessage):
        return await controller.skip()
    if isinstance(message, RetryMessage):
        return await controller.retry()
    if isinstance(message, KeyMessage):
        return await controller.handle_key(message.key)
    return False


class _ReviewChannel:
    """Serialises outbound frames; inputs are handled while earlier ones are in flight."""

    def __init__(self, websocket: WebSocket, controller: ReviewSessionController) -> None:
        self.websocket = websocket
        self.controller = controller
        self._send_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()

    async def send(self, message: dict) -> None:
        async with self._send_lock:
            try:
                await self.websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.debug("Dropping frame for closed review socket", error=str(exc))

    async def send_state(self, *, accepted: bool = True) -> None:
        state = snapshot_to_schema(
            self.controller.snapshot(), is_guest=self.controller.is_guest, accepted=accepted
        )
        await self.send({"type": "state", "data": state.model_dump(mode="json")})

    def submit(self, message) -> None:
        task = asyncio.create_task(self._handle(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle(self, message) -> None:
        accepted = await _apply(self.controller, message)
        if not self.controller.closed:
            await self.send_state(accepted=accepted)

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


@router.websocket("/ws")
async def review_stream(websocket: WebSocket, db: Session = Depends(deps.get_db)) -> None:
    token = _extract_token(websocket)
    user = None
    if token:
        user = deps.resolve_user(token, db)
        if not user:
            await websocket.close(code=1008)
            return

    await websocket.accept()
    user_id = user.identity if user else None
    controller = ReviewSessionController(
        WordSelector(SqlVocabularyStore(db)),
        ProgressRecorder(SqlProgressStore(db)),
        user_id=user_id,
    )
    channel = _ReviewChannel(websocket, controller)
    logger.info("Review socket connected", user_id=user_id, guest=user_id is None)

    try:
        await controller.start()
        await channel.send_state()

        while True:
            try:
                data = await websocket.receive_json()
            except WebSocketDisconnect:
                break

            try:
                message = client_message_adapter.validate_python(data)
            except ValidationError as exc:
                await channel.send(
                    {
                        "type": "error",
                        "data": {
                            "detail": "invalid_payload",
                            "errors": exc.errors(include_url=False, include_context=False),
                        },
                    }
                )
                continue

            channel.submit(message)
    finally:
        controller.close()
        await channel.drain()
        logger.info("Review socket closed", user_id=user_id)
