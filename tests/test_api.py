"""Tests for the FastAPI tic-tac-toe interface."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tictactoe import ui
from tictactoe.ui import app


client = TestClient(app)
ui.AI_THINK_DELAY = (0.0, 0.0)


def _new_session(mode=None):
    response = client.post("/api/session", json={"mode": mode} if mode else {})
    assert response.status_code == 200
    return response.json()


def test_create_session_starts_at_mode_select():
    payload = _new_session()
    assert payload["status"] == "mode_select"
    assert payload["mode"] is None
    assert payload["board"] == [" "] * 9
    assert payload["message"] == "Select a game mode"


def test_hard_game_first_move_and_ai_reply():
    payload = _new_session("hard")
    assert payload["status"] == "in_progress"
    assert payload["currentPlayer"] == "X"

    game_id = payload["id"]
    move_response = client.post(f"/api/session/{game_id}/move", json={"index": 0})
    assert move_response.status_code == 200
    state = move_response.json()
    assert state["accepted"] is True
    assert state["board"][0] == "X"
    assert state["currentPlayer"] == "O"
    assert state["aiPending"] is True
    assert state["message"] == "AI is thinking..."

    follow_up = client.get(f"/api/session/{game_id}")
    assert follow_up.status_code == 200
    final_state = follow_up.json()
    assert final_state["aiPending"] is False
    assert final_state["currentPlayer"] == "X"
    assert final_state["board"][4] == "O"
    assert final_state["moveLog"][-1] == {"player": "O", "index": 4}


def test_occupied_cell_is_ignored():
    game_id = _new_session("multiplayer")["id"]
    assert client.post(f"/api/session/{game_id}/move", json={"index": 0}).json()["accepted"]

    duplicate = client.post(f"/api/session/{game_id}/move", json={"index": 0})
    assert duplicate.status_code == 200
    state = duplicate.json()
    assert state["accepted"] is False
    assert state["currentPlayer"] == "O"
    assert state["message"] == "Player O's Turn"


def test_multiplayer_win_updates_stats_and_reset():
    game_id = _new_session("multiplayer")["id"]
    for index in (0, 3, 1, 4, 2):
        state = client.post(f"/api/session/{game_id}/move", json={"index": index}).json()
    assert state["status"] == "win"
    assert state["winner"] == "X"
    assert state["winningLine"] == [0, 1, 2]
    assert state["stats"] == {"xWins": 1, "oWins": 0, "draws": 0}

    fresh = client.post(f"/api/session/{game_id}/new-game").json()
    assert fresh["status"] == "in_progress"
    assert fresh["board"] == [" "] * 9
    assert fresh["stats"]["xWins"] == 1

    cleared = client.post(f"/api/session/{game_id}/reset-stats").json()
    assert cleared["stats"] == {"xWins": 0, "oWins": 0, "draws": 0}


def test_change_mode_and_back_to_selection():
    game_id = _new_session()["id"]
    state = client.post(f"/api/session/{game_id}/mode", json={"mode": "easy"}).json()
    assert state["mode"] == "easy"
    assert state["status"] == "in_progress"

    state = client.post(f"/api/session/{game_id}/mode", json={"mode": None}).json()
    assert state["mode"] is None
    assert state["status"] == "mode_select"


def test_rejects_unknown_mode():
    response = client.post("/api/session", json={"mode": "impossible"})
    assert response.status_code == 422


def test_rejects_out_of_range_index():
    game_id = _new_session("multiplayer")["id"]
    response = client.post(f"/api/session/{game_id}/move", json={"index": 9})
    assert response.status_code == 422


def test_missing_session_returns_404():
    missing = client.get("/api/session/does-not-exist")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Session not found"


def test_index_page_served():
    response = client.get("/")
    assert response.status_code == 200
    assert "Tic-Tac-Toe" in response.text
