"""FastAPI-powered web UI for playing tic-tac-toe against the computer."""

from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import Difficulty
from .game import MoveError
from .session import GameSession

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    """A ``GameSession`` plus the bookkeeping the HTTP layer needs."""

    session: GameSession
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, SessionEntry] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Play tic-tac-toe against a minimax AI")

AI_THINK_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", "0.5"))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    difficulty: Difficulty = Field(
        default=Difficulty.HARD,
        description="easy: random, medium: 70% optimal, hard: always optimal",
    )


class NewRoundRequest(BaseModel):
    """Request payload for the next game in an existing session."""

    difficulty: Optional[Difficulty] = None


class DifficultyRequest(BaseModel):
    difficulty: Difficulty


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    index: int = Field(ge=0, le=8, description="Cell index, row-major from the top left")


def _create_session(difficulty: Difficulty) -> Tuple[str, SessionEntry]:
    """Create a new game session and register it for later access."""

    entry = SessionEntry(session=GameSession(difficulty=difficulty))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = entry
    logger.info("created game %s (%s)", session_id, difficulty.value)
    return session_id, entry


def _get_session(game_id: str) -> SessionEntry:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    entry = SESSIONS.get(game_id)
    if not entry:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with entry.lock:
        try:
            index = entry.session.play_computer_move()
            if index is not None:
                logger.debug("game %s: computer played %d", game_id, index)
        finally:
            entry.ai_pending = False


def _serialize_session(game_id: str, entry: SessionEntry) -> Dict[str, object]:
    with entry.lock:
        session = entry.session
        game = session.state
        outcome = session.outcome

        state: Dict[str, object] = {
            "id": game_id,
            "board": [cell.value for cell in game.board],
            "currentPlayer": game.active_mark.value,
            "moveCount": game.move_count,
            "status": game.status.value,
            "winner": game.winner.value if game.winner else None,
            "winningLine": list(game.winning_line) if game.winning_line else None,
            "outcome": outcome.value if outcome else None,
            "availableMoves": [] if game.is_over else game.available_moves(),
            "difficulty": session.difficulty.value,
            "scores": {
                "player": session.scores.player,
                "ai": session.scores.ai,
                "draws": session.scores.draws,
            },
            "gamesPlayed": session.scores.games_played,
            "moveLog": list(session.move_log),
            "aiPending": entry.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    entry: SessionEntry,
    index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with entry.lock:
        if entry.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        session = entry.session
        try:
            session.play_human_move(index)
        except MoveError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        should_schedule_ai = session.computer_should_move
        if should_schedule_ai:
            entry.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, entry = _create_session(request.difficulty)
    return _serialize_session(game_id, entry)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    entry = _get_session(game_id)
    return _serialize_session(game_id, entry)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    entry = _get_session(game_id)
    _apply_player_move(game_id, entry, request.index, background_tasks)
    return _serialize_session(game_id, entry)


@app.post("/api/game/{game_id}/new")
def new_round(
    game_id: str, request: Optional[NewRoundRequest] = None
) -> Dict[str, object]:
    entry = _get_session(game_id)
    with entry.lock:
        if request is not None and request.difficulty is not None:
            entry.session.set_difficulty(request.difficulty)
        entry.session.new_game()
        entry.ai_pending = False
    return _serialize_session(game_id, entry)


@app.post("/api/game/{game_id}/difficulty")
def change_difficulty(game_id: str, request: DifficultyRequest) -> Dict[str, object]:
    entry = _get_session(game_id)
    with entry.lock:
        entry.session.set_difficulty(request.difficulty)
    return _serialize_session(game_id, entry)


@app.post("/api/game/{game_id}/reset-scores")
def reset_scores(game_id: str) -> Dict[str, object]:
    entry = _get_session(game_id)
    with entry.lock:
        entry.session.reset_scores()
    return _serialize_session(game_id, entry)


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
      body {
        margin: 0;
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: center;
        font-family: system-ui, -apple-system, \"Segoe UI\", sans-serif;
        background: #1b1f3a;
        color: #f2f5ff;
      }
      main {
        text-align: center;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 96px);
        gap: 8px;
        margin: 1.5rem auto;
        width: max-content;
      }
      .cell {
        width: 96px;
        height: 96px;
        font-size: 2.6rem;
        font-weight: 700;
        border: none;
        border-radius: 12px;
        background: rgba(255, 255, 255, 0.08);
        color: inherit;
        cursor: pointer;
      }
      .cell.x { color: #ff6b6b; }
      .cell.o { color: #4ecdc4; }
      .cell.winning { background: rgba(255, 215, 0, 0.35); }
      .scores span { margin: 0 0.75rem; }
      button.action { margin: 0 0.25rem; padding: 0.5rem 1rem; }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic-Tac-Toe</h1>
      <label>
        Difficulty
        <select id=\"difficulty\">
          <option value=\"easy\">Easy</option>
          <option value=\"medium\">Medium</option>
          <option value=\"hard\" selected>Hard</option>
        </select>
      </label>
      <p id=\"status\">Your Turn (X)</p>
      <div id=\"board\"></div>
      <p class=\"scores\">
        <span>You: <strong id=\"player-score\">0</strong></span>
        <span>AI: <strong id=\"ai-score\">0</strong></span>
        <span>Games: <strong id=\"games-played\">0</strong></span>
        <span>Moves: <strong id=\"move-count\">0</strong></span>
      </p>
      <button class=\"action\" id=\"new-game\">New Game</button>
      <button class=\"action\" id=\"reset-scores\">Reset Scores</button>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const difficultyEl = document.getElementById('difficulty');
      const messages = { player: 'You won!', ai: 'AI wins!', draw: "It's a draw!" };
      let gameId = null;
      let pollHandle = null;

      for (let i = 0; i < 9; i += 1) {
        const cell = document.createElement('button');
        cell.className = 'cell';
        cell.dataset.index = String(i);
        cell.addEventListener('click', () => play(i));
        boardEl.appendChild(cell);
      }

      async function request(path, body) {
        const response = await fetch(path, {
          method: body === undefined ? 'GET' : 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        const payload = await response.json();
        if (!response.ok) {
          throw new Error(payload.detail || 'Request failed');
        }
        return payload;
      }

      function render(state) {
        boardEl.querySelectorAll('.cell').forEach((cell, index) => {
          const mark = state.board[index];
          cell.textContent = mark;
          cell.className = 'cell' + (mark ? ' ' + mark.toLowerCase() : '');
          if (state.winningLine && state.winningLine.includes(index)) {
            cell.classList.add('winning');
          }
        });
        document.getElementById('player-score').textContent = state.scores.player;
        document.getElementById('ai-score').textContent = state.scores.ai;
        document.getElementById('games-played').textContent = state.gamesPlayed;
        document.getElementById('move-count').textContent = state.moveCount;
        difficultyEl.value = state.difficulty;
        if (state.outcome) {
          statusEl.textContent = messages[state.outcome];
        } else if (state.aiPending) {
          statusEl.textContent = 'AI Thinking... (O)';
        } else {
          statusEl.textContent = 'Your Turn (X)';
        }
        clearTimeout(pollHandle);
        if (state.aiPending) {
          pollHandle = setTimeout(refresh, 250);
        }
      }

      async function refresh() {
        render(await request('/api/game/' + gameId));
      }

      async function play(index) {
        try {
          render(await request('/api/game/' + gameId + '/move', { index }));
        } catch (error) {
          statusEl.textContent = error.message;
        }
      }

      document.getElementById('new-game').addEventListener('click', async () => {
        try {
          render(await request('/api/game/' + gameId + '/new', { difficulty: difficultyEl.value }));
        } catch (error) {
          statusEl.textContent = error.message;
        }
      });
      document.getElementById('reset-scores').addEventListener('click', async () => {
        try {
          render(await request('/api/game/' + gameId + '/reset-scores', {}));
        } catch (error) {
          statusEl.textContent = error.message;
        }
      });
      difficultyEl.addEventListener('change', async () => {
        try {
          render(await request('/api/game/' + gameId + '/difficulty', { difficulty: difficultyEl.value }));
        } catch (error) {
          statusEl.textContent = error.message;
        }
      });

      request('/api/game', { difficulty: difficultyEl.value }).then((state) => {
        gameId = state.id;
        render(state);
      });
    </script>
  </body>
</html>
"""
