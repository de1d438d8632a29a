"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import random
import time
import uuid
from typing import Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .session import GameMode, GameSession

logger = logging.getLogger(__name__)

SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe against an easy or unbeatable AI")


def _think_delay_from_env() -> Tuple[float, float]:
    raw = os.environ.get("TICTACTOE_AI_DELAY")
    if raw is None:
        return (0.3, 0.6)
    delay = max(0.0, float(raw))
    return (delay, delay)


AI_THINK_DELAY: Tuple[float, float] = _think_delay_from_env()


class NewSessionRequest(BaseModel):
    """Request payload for opening a session, optionally with a mode."""

    mode: Optional[GameMode] = Field(
        default=None,
        description="easy, hard or multiplayer; omit to start at mode selection",
    )


class ModeRequest(BaseModel):
    """Request payload for switching modes; ``null`` returns to mode selection."""

    mode: Optional[GameMode] = None


class MoveRequest(BaseModel):
    """Request payload for playing a cell on the current board."""

    index: int = Field(ge=0, le=8, description="Cell index, row-major 0-8")


def _create_session(mode: Optional[GameMode]) -> Tuple[str, GameSession]:
    """Create a new session and register it for later access."""

    session = GameSession(mode=mode, defer_ai=True)
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("created session %s (mode=%s)", session_id, mode.value if mode else None)
    return session_id, session


def _get_session(session_id: str) -> GameSession:
    try:
        return SESSIONS[session_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc


def _run_ai_turn(session_id: str, generation: int) -> None:
    session = SESSIONS.get(session_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    move = session.resolve_ai_turn(generation)
    if move is not None:
        logger.debug("session %s: AI played %d", session_id, move)


def _serialize_session(session_id: str, session: GameSession) -> Dict[str, object]:
    payload: Dict[str, object] = {"id": session_id}
    payload.update(session.snapshot())
    return payload


@app.post("/api/session")
def create_session(request: NewSessionRequest) -> Dict[str, object]:
    session_id, session = _create_session(request.mode)
    return _serialize_session(session_id, session)


@app.get("/api/session/{session_id}")
def get_session(session_id: str) -> Dict[str, object]:
    session = _get_session(session_id)
    return _serialize_session(session_id, session)


@app.post("/api/session/{session_id}/move")
def make_move(
    session_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(session_id)
    accepted = session.apply_move(request.index)
    if accepted and session.ai_pending:
        background_tasks.add_task(_run_ai_turn, session_id, session.generation)
    payload = _serialize_session(session_id, session)
    payload["accepted"] = accepted
    return payload


@app.post("/api/session/{session_id}/new-game")
def new_game(session_id: str) -> Dict[str, object]:
    session = _get_session(session_id)
    session.new_game()
    return _serialize_session(session_id, session)


@app.post("/api/session/{session_id}/mode")
def change_mode(session_id: str, request: ModeRequest) -> Dict[str, object]:
    session = _get_session(session_id)
    session.change_mode(request.mode)
    return _serialize_session(session_id, session)


@app.post("/api/session/{session_id}/reset-stats")
def reset_stats(session_id: str) -> Dict[str, object]:
    session = _get_session(session_id)
    session.reset_stats()
    return _serialize_session(session_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: 2rem;
        width: min(420px, 100%);
        text-align: center;
      }
      .modes button, .actions button {
        margin: 0.25rem;
        padding: 0.5rem 1rem;
        border-radius: 10px;
        border: 1px solid #c3cbea;
        background: #f7f8ff;
        cursor: pointer;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 8px;
        margin: 1.25rem auto;
        max-width: 300px;
      }
      .cell {
        aspect-ratio: 1;
        font-size: 2.4rem;
        font-weight: 600;
        border-radius: 12px;
        border: 1px solid #dfe3f5;
        background: #fff;
        cursor: pointer;
      }
      .cell.win { background: #e2f6e7; }
      .cell:disabled { cursor: default; color: #13203a; }
      .stats { display: flex; justify-content: space-around; margin-top: 1rem; }
      .hidden { display: none; }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <div class=\"modes\" id=\"modes\">
        <button data-mode=\"easy\">Easy</button>
        <button data-mode=\"hard\">Hard</button>
        <button data-mode=\"multiplayer\">Two players</button>
      </div>
      <p id=\"status\">Select a game mode</p>
      <div class=\"board\" id=\"board\"></div>
      <div class=\"actions\">
        <button id=\"new-game\">New game</button>
        <button id=\"change-mode\">Change mode</button>
        <button id=\"reset-stats\">Reset stats</button>
      </div>
      <div class=\"stats\">
        <span>X: <strong id=\"x-wins\">0</strong></span>
        <span>Draws: <strong id=\"draws\">0</strong></span>
        <span>O: <strong id=\"o-wins\">0</strong></span>
      </div>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const modesEl = document.getElementById('modes');
      let sessionId = null;
      let state = null;
      let pollTimer = null;

      async function call(path, body) {
        const response = await fetch(path, {
          method: body === undefined ? 'GET' : 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (!response.ok) {
          throw new Error('Request failed: ' + response.status);
        }
        return response.json();
      }

      function render() {
        boardEl.innerHTML = '';
        const cells = state ? state.board : Array(9).fill(' ');
        cells.forEach((mark, index) => {
          const cell = document.createElement('button');
          cell.className = 'cell';
          cell.textContent = mark.trim();
          if (state && state.winningLine.includes(index)) {
            cell.classList.add('win');
          }
          cell.disabled = !state || state.status !== 'in_progress' || state.aiPending || mark !== ' ';
          cell.addEventListener('click', () => play(index));
          boardEl.appendChild(cell);
        });
        statusEl.textContent = state ? state.message : 'Select a game mode';
        modesEl.classList.toggle('hidden', Boolean(state && state.mode));
        document.getElementById('x-wins').textContent = state ? state.stats.xWins : 0;
        document.getElementById('o-wins').textContent = state ? state.stats.oWins : 0;
        document.getElementById('draws').textContent = state ? state.stats.draws : 0;
      }

      function pollWhileThinking() {
        clearTimeout(pollTimer);
        if (state && state.aiPending) {
          pollTimer = setTimeout(async () => {
            state = await call(`/api/session/${sessionId}`);
            render();
            pollWhileThinking();
          }, 200);
        }
      }

      async function ensureSession() {
        if (!sessionId) {
          state = await call('/api/session', {});
          sessionId = state.id;
        }
      }

      async function chooseMode(mode) {
        await ensureSession();
        state = await call(`/api/session/${sessionId}/mode`, { mode });
        render();
      }

      async function play(index) {
        state = await call(`/api/session/${sessionId}/move`, { index });
        render();
        pollWhileThinking();
      }

      modesEl.querySelectorAll('button').forEach((button) => {
        button.addEventListener('click', () => chooseMode(button.dataset.mode));
      });
      document.getElementById('new-game').addEventListener('click', async () => {
        if (!sessionId) return;
        state = await call(`/api/session/${sessionId}/new-game`, {});
        render();
      });
      document.getElementById('change-mode').addEventListener('click', () => chooseMode(null));
      document.getElementById('reset-stats').addEventListener('click', async () => {
        if (!sessionId) return;
        state = await call(`/api/session/${sessionId}/reset-stats`, {});
        render();
      });

      render();
    </script>
  </body>
</html>
"""
