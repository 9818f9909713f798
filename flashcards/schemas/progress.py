"""Pydantic schemas for word selection and learner progress."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from flashcards.db.models.enums import Decision, ProgressStatus
from flashcards.schemas.vocabulary import VocabularyWordRead


class NextWordResponse(BaseModel):
    """The word the learner should see next."""

    word: VocabularyWordRead
    status: ProgressStatus = ProgressStatus.NEW
    last_reviewed_at: Optional[datetime] = None
    is_guest: bool = False


class DecisionRequest(BaseModel):
    """Payload for recording a known/unknown verdict."""

    word_id: uuid.UUID
    decision: Decision = Field(description="Either 'known' or 'unknown'")


class ProgressRead(BaseModel):
    """A stored progress record."""

    word_id: uuid.UUID
    status: ProgressStatus
    last_reviewed_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProgressDetail(BaseModel):
    """Status of one word for the learner; absent records read as ``new``."""

    word_id: uuid.UUID
    status: ProgressStatus
    last_reviewed_at: Optional[datetime] = None
    has_record: bool
