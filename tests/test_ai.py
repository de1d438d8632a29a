"""Tests for the easy and hard tic-tac-toe AIs."""

import random

import pytest

from tictactoe.ai import (
    MinimaxAI,
    RandomAI,
    ai_for_mode,
    choose_optimal_move,
    choose_random_move,
    minimax_score,
)
from tictactoe.game import Board, evaluate, legal_moves, opponent


class FixedChoice:
    """Stand-in random source that always picks the last option."""

    def __init__(self):
        self.seen = []

    def choice(self, seq):
        self.seen.append(list(seq))
        return seq[-1]


def _play_out(board, to_move, pick_x, pick_o):
    while evaluate(board).winner is None and legal_moves(board):
        pick = pick_x if to_move == "X" else pick_o
        board.place(pick(board, to_move), to_move)
        to_move = opponent(to_move)
    return evaluate(board).winner


def test_random_move_is_legal():
    board = Board.from_string("XOX O X  ")
    rng = random.Random(3)
    for _ in range(20):
        assert choose_random_move(board, rng) in (3, 5, 7, 8)


def test_random_move_uses_injected_source():
    rng = FixedChoice()
    board = Board.from_string("XO       ")
    assert choose_random_move(board, rng) == 8
    assert rng.seen == [[2, 3, 4, 5, 6, 7, 8]]


def test_random_move_requires_a_legal_move():
    with pytest.raises(ValueError):
        choose_random_move(Board.from_string("XOXXOOOXX"))


def test_ai_takes_immediate_win():
    board = Board.from_string("XX OO    ")
    assert choose_optimal_move(board, "X") == 2


def test_ai_prefers_win_over_block():
    # O can block at 2 or win at 5
    board = Board.from_string("XX OO X  ")
    assert choose_optimal_move(board, "O") == 5


def test_ai_blocks_column_threat():
    board = Board.from_string("X  XO   O")
    assert choose_optimal_move(board, "O") == 6


def test_ai_blocks_row_threat():
    board = Board.from_string("XX  O    ")
    assert choose_optimal_move(board, "O") == 2


def test_ai_does_not_mutate_callers_board():
    board = Board.from_string("X   O    ")
    before = list(board.cells)
    choose_optimal_move(board, "X")
    assert board.cells == before

    cells = list(before)
    choose_optimal_move(cells, "X")
    assert cells == before


def test_ties_go_to_lowest_index():
    # Every move on an empty board is a draw with perfect play
    assert choose_optimal_move(Board(), "X") == 0
    board = Board()
    scores = []
    cache = {}
    for move in legal_moves(board):
        child = board.copy()
        child.place(move, "X")
        scores.append(minimax_score(child, "X", 1, False, cache))
    assert set(scores) == {0}


def test_second_player_reply_on_empty_board_does_not_lose():
    board = Board()
    move = choose_optimal_move(board, "O")
    board.place(move, "O")
    # X now moves; with perfect play from here O never loses
    assert minimax_score(board, "O", 1, False, {}) >= 0


def test_perfect_play_against_itself_is_a_draw():
    winner = _play_out(Board(), "X", choose_optimal_move, choose_optimal_move)
    assert winner is None


def test_perfect_play_never_loses_to_random():
    rng = random.Random(1234)

    def random_pick(board, _mark):
        return choose_random_move(board, rng)

    for game in range(30):
        if game % 2:
            winner = _play_out(Board(), "X", choose_optimal_move, random_pick)
            assert winner != "O"
        else:
            winner = _play_out(Board(), "X", random_pick, choose_optimal_move)
            assert winner != "X"


def test_faster_win_scores_higher():
    assert minimax_score(Board.from_string("XXXOO    "), "X", 1, False) == 9
    assert minimax_score(Board.from_string("XXXOO    "), "X", 3, False) == 7
    assert minimax_score(Board.from_string("XXXOO    "), "O", 2, True) == -8
    assert minimax_score(Board.from_string("XOXXOOOXX"), "X", 9, True) == 0


def test_optimal_move_requires_a_legal_move():
    with pytest.raises(ValueError):
        choose_optimal_move(Board.from_string("XOXXOOOXX"), "O")


def test_ai_for_mode():
    assert isinstance(ai_for_mode("easy", "O"), RandomAI)
    assert ai_for_mode("hard", "O") == MinimaxAI(player="O")
    assert ai_for_mode("multiplayer", "O") is None
    assert ai_for_mode(None, "O") is None
