"""Schemas for the real-time review socket."""
from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field

from flashcards.db.models.enums import Decision
from flashcards.schemas.progress import NextWordResponse


class RevealMessage(BaseModel):
    type: Literal["reveal"]


class DecideMessage(BaseModel):
    """Inbound verdict on the revealed card."""

    type: Literal["decide"]
    decision: Decision


class SkipMessage(BaseModel):
    type: Literal["skip"]


class RetryMessage(BaseModel):
    type: Literal["retry"]


class KeyMessage(BaseModel):
    """Raw keyboard key, mapped server-side (Space, ArrowLeft, ArrowRight...)."""

    type: Literal["key"]
    key: str = Field(min_length=1, max_length=32)


ReviewClientMessage = Annotated[
    RevealMessage | DecideMessage | SkipMessage | RetryMessage | KeyMessage,
    Field(discriminator="type"),
]


class ReviewStateRead(BaseModel):
    """Controller snapshot pushed after every input."""

    state: Literal["loading", "hidden", "revealed", "error"]
    word: Optional[NextWordResponse] = None
    revealed: bool
    busy: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    can_retry: bool = False
    accepted: bool = True
