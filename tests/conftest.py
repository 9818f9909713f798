"""Pytest fixtures for service and API tests."""

import os
from collections.abc import AsyncGenerator, Generator

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from flashcards.api.deps import get_db
from flashcards.db import models  # noqa: F401  # Imported for side effects
from flashcards.db.base import Base
from flashcards.db.models import VocabularyEntry
from flashcards.db.session import build_engine
from flashcards.main import create_app
from flashcards.utils.cache import cache_backend


@pytest.fixture()
def db_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine, expire_on_commit=False
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clear_cache() -> Generator[None, None, None]:
    cache_backend.clear()
    try:
        yield
    finally:
        cache_backend.clear()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def async_client(db_session: Session) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app()

    async def override_get_db() -> AsyncGenerator[Session, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def vocabulary(db_session: Session) -> list[VocabularyEntry]:
    words = [
        VocabularyEntry(term="apple", translation="苹果", example_sentence="An apple a day."),
        VocabularyEntry(term="book", translation="书", example_sentence="I read a book."),
        VocabularyEntry(term="cat", translation="猫", example_sentence=None),
    ]
    db_session.add_all(words)
    db_session.commit()
    return words
