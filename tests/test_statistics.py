"""Tests for dashboard statistics and streaks."""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from flashcards.db.models import ProgressStatus, VocabularyEntry
from flashcards.services.statistics import StatisticsService, calculate_streak
from flashcards.services.stores import SqlProgressStore
from flashcards.utils.exceptions import Unauthorized

from tests.helpers import register_and_login

USER = "user-1"
NOW = datetime(2024, 5, 10, 15, 0, tzinfo=timezone.utc)


@pytest.fixture()
def words(db_session) -> list[VocabularyEntry]:
    entries = [VocabularyEntry(term=f"word-{index}", translation=f"t{index}") for index in range(10)]
    db_session.add_all(entries)
    db_session.commit()
    return entries


def _service(db_session, tz=timezone.utc) -> StatisticsService:
    return StatisticsService(SqlProgressStore(db_session), tz=tz)


def test_remaining_subtracts_known_from_vocabulary(db_session, words) -> None:
    store = SqlProgressStore(db_session)
    for entry in words[:3]:
        store.upsert(USER, entry.id, ProgressStatus.KNOWN, NOW)
    store.upsert(USER, words[3].id, ProgressStatus.UNKNOWN, NOW)

    stats = _service(db_session).compute_statistics(USER, now=NOW)

    assert stats.remaining == 7
    assert stats.total == 4
    assert stats.breakdown.known == 3
    assert stats.breakdown.unknown == 1
    assert stats.breakdown.new == 0


def test_today_and_rolling_week_counts(db_session, words) -> None:
    store = SqlProgressStore(db_session)
    store.upsert(USER, words[0].id, ProgressStatus.KNOWN, NOW - timedelta(hours=1))
    store.upsert(USER, words[1].id, ProgressStatus.UNKNOWN, NOW - timedelta(hours=5))
    store.upsert(USER, words[2].id, ProgressStatus.KNOWN, NOW - timedelta(days=2))
    store.upsert(USER, words[3].id, ProgressStatus.UNKNOWN, NOW - timedelta(days=4))
    store.upsert(USER, words[4].id, ProgressStatus.KNOWN, NOW - timedelta(days=6))
    store.upsert(USER, words[5].id, ProgressStatus.KNOWN, NOW - timedelta(days=9))

    stats = _service(db_session).compute_statistics(USER, now=NOW)

    assert stats.today == 2
    assert stats.this_week == 5
    assert stats.total == 6


def test_breakdown_sums_to_total(db_session, words) -> None:
    store = SqlProgressStore(db_session)
    statuses = [ProgressStatus.KNOWN, ProgressStatus.UNKNOWN, ProgressStatus.NEW, ProgressStatus.KNOWN]
    for entry, status in zip(words, statuses):
        store.upsert(USER, entry.id, status, NOW)

    stats = _service(db_session).compute_statistics(USER, now=NOW)

    breakdown = stats.breakdown
    assert breakdown.new + breakdown.known + breakdown.unknown == stats.total == 4


def test_new_user_statistics(db_session, words) -> None:
    stats = _service(db_session).compute_statistics(USER, now=NOW)

    assert (stats.total, stats.today, stats.this_week, stats.remaining) == (0, 0, 0, 10)
    assert stats.streak.current == 0
    assert stats.streak.longest == 0
    assert stats.streak.last_study_date is None


def test_remaining_is_zero_for_empty_vocabulary(db_session) -> None:
    stats = _service(db_session).compute_statistics(USER, now=NOW)

    assert stats.remaining == 0


def test_optional_sections_can_be_skipped(db_session, words) -> None:
    stats = _service(db_session).compute_statistics(
        USER, now=NOW, include_breakdown=False, include_streak=False
    )

    assert stats.breakdown is None
    assert stats.streak is None


def test_missing_user_is_unauthorized(db_session) -> None:
    with pytest.raises(Unauthorized):
        _service(db_session).compute_statistics("")


def test_streak_with_gap(db_session, words) -> None:
    store = SqlProgressStore(db_session)
    for entry, days_ago in zip(words, [0, 1, 2, 4]):
        store.upsert(USER, entry.id, ProgressStatus.KNOWN, NOW - timedelta(days=days_ago))

    streak = _service(db_session).compute_streak(USER, now=NOW)

    assert streak.current == 3
    assert streak.longest == 3
    assert streak.last_study_date == date(2024, 5, 10)


def test_streak_outside_window_is_ignored(db_session, words) -> None:
    store = SqlProgressStore(db_session)
    store.upsert(USER, words[0].id, ProgressStatus.KNOWN, NOW - timedelta(days=40))

    streak = _service(db_session).compute_streak(USER, now=NOW)

    assert streak.longest == 0


def test_today_follows_configured_timezone(db_session, words) -> None:
    store = SqlProgressStore(db_session)
    # 2024-05-10 01:30 in Berlin, still 2024-05-09 in UTC.
    store.upsert(USER, words[0].id, ProgressStatus.KNOWN, datetime(2024, 5, 9, 23, 30, tzinfo=timezone.utc))
    now = datetime(2024, 5, 10, 8, 0, tzinfo=timezone.utc)

    berlin = _service(db_session, tz=ZoneInfo("Europe/Berlin")).compute_statistics(USER, now=now)
    utc = _service(db_session).compute_statistics(USER, now=now)

    assert berlin.today == 1
    assert berlin.streak.current == 1
    assert utc.today == 0
    assert utc.streak.current == 1


@pytest.mark.parametrize(
    ("days", "expected_current", "expected_longest"),
    [
        ([], 0, 0),
        ([0], 1, 1),
        ([1, 2], 2, 2),
        ([2, 3], 0, 2),
        ([0, 1, 2, 4], 3, 3),
        ([0, 5, 6, 7, 8], 1, 4),
    ],
)
def test_calculate_streak(days, expected_current, expected_longest) -> None:
    today = date(2024, 5, 10)
    streak = calculate_streak([today - timedelta(days=offset) for offset in days], today)

    assert streak.current == expected_current
    assert streak.longest == expected_longest


def test_calculate_streak_ignores_duplicates() -> None:
    today = date(2024, 5, 10)

    streak = calculate_streak([today, today, today - timedelta(days=1)], today)

    assert streak.current == 2
    assert streak.last_study_date == today


def test_statistics_endpoint(client: TestClient, vocabulary) -> None:
    headers, _ = register_and_login(client)
    client.post(
        "/api/v1/progress/decision",
        json={"word_id": str(vocabulary[0].id), "decision": "known"},
        headers=headers,
    )
    client.post(
        "/api/v1/progress/decision",
        json={"word_id": str(vocabulary[1].id), "decision": "unknown"},
        headers=headers,
    )

    response = client.get("/api/v1/statistics", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["today"] == 2
    assert data["this_week"] == 2
    assert data["remaining"] == 2
    assert data["breakdown"] == {"new": 0, "known": 1, "unknown": 1}
    assert data["streak"]["current"] == 1


def test_statistics_endpoint_without_extras(client: TestClient, vocabulary) -> None:
    headers, _ = register_and_login(client)

    response = client.get(
        "/api/v1/statistics", params={"breakdown": False, "streak": False}, headers=headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["breakdown"] is None
    assert data["streak"] is None


def test_statistics_endpoint_requires_authentication(client: TestClient) -> None:
    response = client.get("/api/v1/statistics")

    assert response.status_code == 401
