"""Tests for dictionary browsing endpoints."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from flashcards.db.models import VocabularyEntry
from flashcards.services.dictionary_import import DictionaryImporter
from flashcards.utils.cache import VOCABULARY_LIST_CACHE, build_cache_key, cache_backend


def test_list_vocabulary_is_alphabetical(client: TestClient, vocabulary) -> None:
    response = client.get("/api/v1/vocabulary/", params={"limit": 10})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [item["term"] for item in data["items"]] == ["apple", "book", "cat"]


def test_list_vocabulary_paginates(client: TestClient, vocabulary) -> None:
    response = client.get("/api/v1/vocabulary/", params={"limit": 1, "offset": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [item["term"] for item in data["items"]] == ["book"]


def test_get_vocabulary_word(client: TestClient, vocabulary) -> None:
    word = vocabulary[0]

    response = client.get(f"/api/v1/vocabulary/{word.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(word.id)
    assert data["translation"] == "苹果"
    assert data["example_sentence"] == "An apple a day."


def test_get_vocabulary_word_not_found(client: TestClient, vocabulary) -> None:
    response = client.get(f"/api/v1/vocabulary/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["detail"] == "Vocabulary word not found"


def test_get_vocabulary_word_is_cached(client: TestClient, db_session, vocabulary) -> None:
    word = vocabulary[1]
    first = client.get(f"/api/v1/vocabulary/{word.id}")
    assert first.status_code == 200

    db_session.delete(word)
    db_session.commit()

    second = client.get(f"/api/v1/vocabulary/{word.id}")
    assert second.status_code == 200
    assert second.json() == first.json()

    cache_backend.clear()
    third = client.get(f"/api/v1/vocabulary/{word.id}")
    assert third.status_code == 404


def test_lookup_is_case_insensitive(client: TestClient, vocabulary) -> None:
    response = client.get("/api/v1/vocabulary/lookup", params={"term": "  CAT "})

    assert response.status_code == 200
    assert response.json()["term"] == "cat"


def test_lookup_unknown_term(client: TestClient, vocabulary) -> None:
    response = client.get("/api/v1/vocabulary/lookup", params={"term": "zebra"})

    assert response.status_code == 404


def test_terms_are_unique(db_session, vocabulary) -> None:
    db_session.add(VocabularyEntry(term="apple", translation="another"))

    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


@pytest.mark.asyncio
async def test_list_vocabulary_async(async_client, vocabulary) -> None:
    response = await async_client.get("/api/v1/vocabulary/", params={"limit": 2})

    assert response.status_code == 200
    assert [item["term"] for item in response.json()["items"]] == ["apple", "book"]


def test_import_refreshes_cached_listing(client: TestClient, db_session, vocabulary) -> None:
    first = client.get("/api/v1/vocabulary/")
    assert first.json()["total"] == 3

    report = DictionaryImporter(db_session).seed_starter_words()

    second = client.get("/api/v1/vocabulary/")
    assert second.json()["total"] == 3 + report.created
    assert len(second.json()["items"]) == 3 + report.created


def test_import_without_new_rows_keeps_cached_listing(client: TestClient, db_session, vocabulary) -> None:
    client.get("/api/v1/vocabulary/")

    DictionaryImporter(db_session).import_rows([{"term": "Apple", "translation": "苹果"}])

    assert cache_backend.get(VOCABULARY_LIST_CACHE, build_cache_key(limit=25, offset=0)) is not None


def test_terms_are_stored_lowercase(db_session) -> None:
    entry = VocabularyEntry(term="  Apple Pie ", translation="苹果派")
    db_session.add(entry)
    db_session.commit()

    stored = db_session.scalar(select(VocabularyEntry.term).where(VocabularyEntry.id == entry.id))
    assert stored == "apple pie"


def test_mixed_case_terms_are_rejected_by_database(db_session) -> None:
    with pytest.raises(IntegrityError):
        db_session.execute(
            text("INSERT INTO dictionary (id, term, translation) VALUES (:id, 'Apple', 'x')"),
            {"id": uuid.uuid4().hex},
        )
    db_session.rollback()


def test_lookup_finds_entries_created_with_mixed_case(client: TestClient, db_session) -> None:
    db_session.add(VocabularyEntry(term="River", translation="河"))
    db_session.commit()

    response = client.get("/api/v1/vocabulary/lookup", params={"term": "RIVER"})

    assert response.status_code == 200
    assert response.json()["term"] == "river"
