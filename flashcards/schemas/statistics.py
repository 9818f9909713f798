"""Pydantic models for the statistics dashboard."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


class StatusBreakdownRead(BaseModel):
    new: int
    known: int
    unknown: int

    model_config = ConfigDict(from_attributes=True)


class StreakRead(BaseModel):
    """Current and longest streak data."""

    current: int
    longest: int
    last_study_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class StatisticsResponse(BaseModel):
    """Headline learner statistics."""

    total: int
    today: int
    this_week: int
    remaining: int
    breakdown: Optional[StatusBreakdownRead] = None
    streak: Optional[StreakRead] = None

    model_config = ConfigDict(from_attributes=True)
