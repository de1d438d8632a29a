"""Tic-tac-toe package exposing game rules, AI players, sessions and the web app."""

from .ai import MinimaxAI, RandomAI, choose_optimal_move, choose_random_move
from .game import Board, EvaluationResult, evaluate, legal_moves
from .session import GameMode, GameSession, GameStatus, SessionStats
from .ui import app

__all__ = [
    "Board",
    "EvaluationResult",
    "GameMode",
    "GameSession",
    "GameStatus",
    "MinimaxAI",
    "RandomAI",
    "SessionStats",
    "app",
    "choose_optimal_move",
    "choose_random_move",
    "evaluate",
    "legal_moves",
]
