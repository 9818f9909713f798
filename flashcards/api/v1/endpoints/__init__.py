"""API endpoint modules for v1."""

from flashcards.api.v1.endpoints import (
    auth,
    progress,
    review_ws,
    statistics,
    users,
    vocabulary,
    words,
)

__all__ = [
    "auth",
    "progress",
    "review_ws",
    "statistics",
    "users",
    "vocabulary",
    "words",
]
