"""API router for version 1."""
from fastapi import APIRouter

from flashcards.api.v1.endpoints import (
    auth,
    progress,
    review_ws,
    statistics,
    users,
    vocabulary,
    words,
)


api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(vocabulary.router)
api_router.include_router(words.router)
api_router.include_router(progress.router)
api_router.include_router(statistics.router)
api_router.include_router(review_ws.router)
