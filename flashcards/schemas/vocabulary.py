"""Pydantic schemas for vocabulary endpoints."""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VocabularyWordRead(BaseModel):
    """Representation of a dictionary entry."""

    id: uuid.UUID
    term: str = Field(max_length=500)
    translation: str = Field(max_length=1000)
    example_sentence: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VocabularyListResponse(BaseModel):
    """Paginated vocabulary response payload."""

    total: int
    items: list[VocabularyWordRead]
