from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from starlette.websockets import WebSocketDisconnect

from flashcards.db.models import UserProgress

from tests.helpers import register_and_login

WS_PATH = "/api/v1/review/ws"


def _progress_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(UserProgress))


def test_guest_review_loop(client: TestClient, db_session, vocabulary) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        initial = websocket.receive_json()
        assert initial["type"] == "state"
        assert initial["data"]["state"] == "hidden"
        assert initial["data"]["word"]["is_guest"] is True

        websocket.send_json({"type": "reveal"})
        revealed = websocket.receive_json()["data"]
        assert revealed["state"] == "revealed"
        assert revealed["revealed"] is True

        websocket.send_json({"type": "decide", "decision": "known"})
        advanced = websocket.receive_json()["data"]
        assert advanced["state"] == "hidden"
        assert advanced["revealed"] is False

    assert _progress_count(db_session) == 0


def test_learner_review_records_decisions(client: TestClient, vocabulary) -> None:
    headers, _ = register_and_login(client)

    with client.websocket_connect(WS_PATH, headers=headers) as websocket:
        initial = websocket.receive_json()["data"]
        word_id = initial["word"]["word"]["id"]
        assert initial["word"]["is_guest"] is False

        websocket.send_json({"type": "key", "key": " "})
        assert websocket.receive_json()["data"]["state"] == "revealed"

        websocket.send_json({"type": "key", "key": "ArrowRight"})
        advanced = websocket.receive_json()["data"]
        assert advanced["state"] == "hidden"
        assert advanced["word"]["word"]["id"] != word_id

    records = client.get("/api/v1/progress/", headers=headers).json()
    assert [(record["word_id"], record["status"]) for record in records] == [(word_id, "known")]


def test_token_in_query_string(client: TestClient, vocabulary) -> None:
    headers, _ = register_and_login(client)
    token = headers["Authorization"].split(" ", 1)[1]

    with client.websocket_connect(f"{WS_PATH}?token={token}") as websocket:
        initial = websocket.receive_json()["data"]
        assert initial["word"]["is_guest"] is False


def test_ignored_input_is_reported(client: TestClient, vocabulary) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        websocket.receive_json()

        websocket.send_json({"type": "decide", "decision": "unknown"})
        reply = websocket.receive_json()["data"]

        assert reply["accepted"] is False
        assert reply["state"] == "hidden"


def test_invalid_payload(client: TestClient, vocabulary) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        websocket.receive_json()

        websocket.send_json({"type": "dance"})
        reply = websocket.receive_json()

        assert reply["type"] == "error"
        assert reply["data"]["detail"] == "invalid_payload"


def test_empty_vocabulary_reports_error(client: TestClient) -> None:
    with client.websocket_connect(WS_PATH) as websocket:
        state = websocket.receive_json()["data"]

    assert state["state"] == "error"
    assert state["error_code"] == "NoWordsAvailable"
    assert state["can_retry"] is True
    assert state["word"] is None


def test_invalid_token_is_rejected(client: TestClient, vocabulary) -> None:
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect(WS_PATH, headers={"Authorization": "Bearer nonsense"}):
            pass

    assert excinfo.value.code == 1008
