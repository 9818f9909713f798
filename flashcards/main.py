"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from flashcards import __version__
from flashcards.api.v1 import api_router
from flashcards.config import settings
from flashcards.utils.exceptions import FlashcardsException, to_http_exception


tags_metadata: List[dict[str, str]] = [
    {"name": "auth", "description": "Register users and issue authentication tokens."},
    {"name": "users", "description": "Read the signed-in learner."},
    {"name": "vocabulary", "description": "Browse the dictionary."},
    {"name": "words", "description": "Pick the next flashcard for guests and learners."},
    {"name": "progress", "description": "Record and read known/unknown verdicts."},
    {"name": "statistics", "description": "Dashboard counts and study streaks."},
    {"name": "review", "description": "Keyboard-driven review loop over WebSocket."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Flashcard review loop and progress dashboard for vocabulary learners.",
        version=__version__,
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=jsonable_encoder({"detail": exc.errors(), "message": "Validation failed"}),
        )

    @app.exception_handler(FlashcardsException)
    async def application_exception_handler(
        request: Request, exc: FlashcardsException
    ) -> JSONResponse:
        http_exc = to_http_exception(exc)
        return JSONResponse(
            status_code=http_exc.status_code,
            content={"detail": http_exc.detail},
            headers=http_exc.headers,
        )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
