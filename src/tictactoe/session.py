"""Game session: turn sequencing, AI dispatch and the in-memory tally."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .ai import AIPlayer, ai_for_mode
from .game import BOARD_SIZE, Board, Player, evaluate, opponent

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    EASY = "easy"
    HARD = "hard"
    MULTIPLAYER = "multiplayer"


class GameStatus(str, Enum):
    MODE_SELECT = "mode_select"
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass
class SessionStats:
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0

    def record(self, winner: Optional[Player]) -> None:
        """Count one finished game; ``None`` means a draw."""
        if winner == "X":
            self.x_wins += 1
        elif winner == "O":
            self.o_wins += 1
        else:
            self.draws += 1

    def reset(self) -> None:
        self.x_wins = self.o_wins = self.draws = 0


@dataclass
class GameSession:
    """One player's table: the board, whose turn it is, and the running tally.

    The human always plays "X" and moves first; in easy/hard modes the AI plays
    ``ai_mark``. Every rejected action (occupied cell, wrong turn, game over,
    AI still deciding) is ignored and reported as ``False``/``None``.

    With ``defer_ai=True`` a human move only flags ``ai_pending``; the caller is
    expected to call :meth:`resolve_ai_turn` later (the web UI does it from a
    background task after a short delay). Otherwise the AI answers inline.
    """

    mode: Optional[GameMode] = None
    ai_mark: Player = field(default="O", init=False)
    defer_ai: bool = False
    rng: Optional[Any] = field(default=None, repr=False)
    board: Board = field(default_factory=Board)
    current_player: Player = "X"
    status: GameStatus = GameStatus.MODE_SELECT
    winner: Optional[Player] = None
    winning_line: Optional[Tuple[int, int, int]] = None
    stats: SessionStats = field(default_factory=SessionStats)
    move_log: List[Dict[str, Any]] = field(default_factory=list)
    ai_pending: bool = False
    # Bumped on every reset so a late AI result can tell it is stale
    generation: int = 0
    ai: Optional[AIPlayer] = field(default=None, init=False, repr=False)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __post_init__(self) -> None:
        if self.mode is not None:
            self.mode = GameMode(self.mode)
            self.status = GameStatus.IN_PROGRESS
        self._bind_ai()

    # ---- observers ----

    @property
    def in_progress(self) -> bool:
        return self.status == GameStatus.IN_PROGRESS

    @property
    def ai_turn(self) -> bool:
        return (
            self.ai is not None
            and self.in_progress
            and self.current_player == self.ai.player
        )

    # ---- mutators ----

    def apply_move(self, index: int) -> bool:
        """Play ``index`` for the human whose turn it is."""
        with self.lock:
            if self.ai_pending or self.ai_turn:
                return False
            if not self._play(index, self.current_player):
                return False
            if self.ai_turn:
                self.ai_pending = True
            pending = self.ai_pending
            generation = self.generation

        if pending and not self.defer_ai:
            self.resolve_ai_turn(generation)
        return True

    def resolve_ai_turn(self, generation: Optional[int] = None) -> Optional[int]:
        """Let the AI pick and play its move; returns the index played.

        A call carrying an outdated ``generation`` (the board was reset while
        the AI was "thinking") is dropped without touching the board.
        """
        with self.lock:
            if generation is not None and generation != self.generation:
                logger.debug(
                    "discarding stale AI turn (generation %d, now %d)",
                    generation,
                    self.generation,
                )
                return None
            try:
                if not self.ai_turn:
                    return None
                assert self.ai is not None
                move = self.ai.choose(self.board)
                self._play(move, self.ai.player)
                return move
            finally:
                self.ai_pending = False

    def new_game(self) -> None:
        """Clear the board for another game in the same mode; stats survive."""
        with self.lock:
            self._reset_board()
            self.status = (
                GameStatus.IN_PROGRESS
                if self.mode is not None
                else GameStatus.MODE_SELECT
            )

    def change_mode(self, mode: Optional[GameMode]) -> None:
        """Switch to ``mode`` with a fresh board, or back to mode selection."""
        with self.lock:
            self.mode = GameMode(mode) if mode is not None else None
            self._bind_ai()
            self._reset_board()
            self.status = (
                GameStatus.IN_PROGRESS
                if self.mode is not None
                else GameStatus.MODE_SELECT
            )
            logger.info("mode changed to %s", self.mode.value if self.mode else None)

    def reset_stats(self) -> None:
        with self.lock:
            self.stats.reset()

    def snapshot(self) -> Dict[str, Any]:
        with self.lock:
            return {
                "mode": self.mode.value if self.mode else None,
                "board": list(self.board.cells),
                "currentPlayer": self.current_player,
                "status": self.status.value,
                "winner": self.winner,
                "winningLine": list(self.winning_line) if self.winning_line else [],
                "stats": {
                    "xWins": self.stats.x_wins,
                    "oWins": self.stats.o_wins,
                    "draws": self.stats.draws,
                },
                "aiPending": self.ai_pending,
                "message": self.status_message(),
                "moveLog": [dict(entry) for entry in self.move_log],
            }

    def status_message(self) -> str:
        if self.status == GameStatus.MODE_SELECT:
            return "Select a game mode"
        if self.status == GameStatus.DRAW:
            return "It's a Draw!"
        multiplayer = self.mode == GameMode.MULTIPLAYER
        if self.status == GameStatus.WIN:
            if multiplayer:
                return f"Player {self.winner} Wins!"
            return "AI Wins!" if self.winner == self.ai_mark else "You Win!"
        if multiplayer:
            return f"Player {self.current_player}'s Turn"
        if self.ai_pending:
            return "AI is thinking..."
        return "Your Turn"

    # ---- helpers ----

    def _play(self, index: int, player: Player) -> bool:
        if not self.in_progress or player != self.current_player:
            return False
        if not 0 <= index < BOARD_SIZE or not self.board.is_empty(index):
            return False

        self.board.place(index, player)
        self.move_log.append({"player": player, "index": index})

        result = evaluate(self.board)
        if result.has_winner:
            self.status = GameStatus.WIN
            self.winner = result.winner
            self.winning_line = result.line
            self._finish()
        elif self.board.is_full():
            self.status = GameStatus.DRAW
            self._finish()
        else:
            self.current_player = opponent(self.current_player)
        return True

    def _finish(self) -> None:
        self.stats.record(self.winner)
        logger.info(
            "game over in %s mode: %s after %d moves",
            self.mode.value if self.mode else None,
            self.winner or "draw",
            len(self.move_log),
        )

    def _bind_ai(self) -> None:
        self.ai = ai_for_mode(self.mode, self.ai_mark, self.rng)

    def _reset_board(self) -> None:
        self.generation += 1
        self.board = Board()
        self.current_player = "X"
        self.winner = None
        self.winning_line = None
        self.move_log = []
        self.ai_pending = False
