"""Easy (random) and hard (exhaustive minimax) AI players for tic-tac-toe."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .game import Board, BoardLike, Player, evaluate, legal_moves, opponent

logger = logging.getLogger(__name__)

WIN_SCORE = 10


def _as_board(board: BoardLike) -> Board:
    # Always a private copy so the caller's board is never touched
    if isinstance(board, Board):
        return board.copy()
    return Board(cells=list(board))


# ---- easy ----


def choose_random_move(board: BoardLike, rng: Optional[Any] = None) -> int:
    """Pick uniformly among the legal moves.

    ``rng`` is anything with a ``choice`` method (``random.Random(seed)`` in
    tests); the module-level generator is used otherwise.
    """
    moves = legal_moves(board)
    if not moves:
        raise ValueError("No valid moves available")
    return (rng or random).choice(moves)


# ---- hard ----


# Per-search memo: (cells, depth, maximizing) -> score
ScoreCache = Dict[Tuple[Tuple[str, ...], int, bool], int]


def minimax_score(
    board: Board,
    ai_mark: Player,
    depth: int,
    maximizing: bool,
    cache: Optional[ScoreCache] = None,
) -> int:
    """Exact minimax value of ``board`` from ``ai_mark``'s point of view.

    Wins score ``10 - depth`` and losses ``depth - 10`` so that faster wins and
    slower losses are preferred; a full board without a line scores 0.
    ``cache`` only short-circuits positions already scored at the same depth
    and side to move, so results are identical with or without it.
    """
    key = (tuple(board.cells), depth, maximizing)
    if cache is not None and key in cache:
        return cache[key]

    winner = evaluate(board).winner
    if winner == ai_mark:
        return WIN_SCORE - depth
    if winner is not None:
        return depth - WIN_SCORE

    moves = legal_moves(board)
    if not moves:
        return 0

    mover = ai_mark if maximizing else opponent(ai_mark)
    if maximizing:
        value = -math.inf
        for move in moves:
            child = board.copy()
            child.place(move, mover)
            value = max(value, minimax_score(child, ai_mark, depth + 1, False, cache))
    else:
        value = math.inf
        for move in moves:
            child = board.copy()
            child.place(move, mover)
            value = min(value, minimax_score(child, ai_mark, depth + 1, True, cache))

    score = int(value)
    if cache is not None:
        cache[key] = score
    return score


def choose_optimal_move(board: BoardLike, ai_mark: Player) -> int:
    """Best move for ``ai_mark``; ties go to the lowest index."""
    root = _as_board(board)
    moves = legal_moves(root)
    if not moves:
        raise ValueError("No valid moves available")

    cache: ScoreCache = {}
    best_move = moves[0]
    best_score = -math.inf
    for move in moves:
        child = root.copy()
        child.place(move, ai_mark)
        score = minimax_score(child, ai_mark, 1, False, cache)
        if score > best_score:
            best_score, best_move = score, move

    logger.debug(
        "minimax picked %d for %s (score %s, %d candidates, %d positions)",
        best_move,
        ai_mark,
        best_score,
        len(moves),
        len(cache),
    )
    return best_move


# ---- player objects bound to a mark ----


@dataclass
class RandomAI:
    """Easy opponent: any legal move, uniformly."""

    player: Player
    rng: Optional[Any] = field(default=None, repr=False)

    def choose(self, board: BoardLike) -> int:
        return choose_random_move(board, self.rng)


@dataclass
class MinimaxAI:
    """Hard opponent: full-depth minimax, never loses."""

    player: Player

    def choose(self, board: BoardLike) -> int:
        return choose_optimal_move(board, self.player)


AIPlayer = Union[RandomAI, MinimaxAI]


def ai_for_mode(mode: Any, player: Player, rng: Optional[Any] = None) -> Optional[AIPlayer]:
    """Strategy for a game mode value ("easy", "hard"); ``None`` for multiplayer."""
    value = getattr(mode, "value", mode)
    if value == "easy":
        return RandomAI(player=player, rng=rng)
    if value == "hard":
        return MinimaxAI(player=player)
    return None
