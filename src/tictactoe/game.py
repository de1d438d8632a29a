"""Core rules for 3x3 tic-tac-toe: board, win probe and legal moves."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

Player = str  # "X" or "O"

EMPTY = " "
PLAYERS: Tuple[Player, Player] = ("X", "O")
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def opponent(player: Player) -> Player:
    return "O" if player == "X" else "X"


# ---------- Board ----------


@dataclass
class Board:
    # 'X', 'O', or ' ' (space) for empty, row-major
    cells: List[str] = field(default_factory=lambda: [EMPTY] * BOARD_SIZE)

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE:
            raise ValueError(
                f"Board needs exactly {BOARD_SIZE} cells, got {len(self.cells)}"
            )

    @classmethod
    def from_string(cls, layout: str) -> "Board":
        """
        Build a board from a 9-character layout such as ``"XX OO    "``.
        '.', '-' and '_' are accepted as empty cells too.
        """
        return cls(cells=[EMPTY if c in ".-_ " else c for c in layout])

    def is_full(self) -> bool:
        return all(c != EMPTY for c in self.cells)

    def is_empty(self, idx: int) -> bool:
        return self.cells[idx] == EMPTY

    def place(self, idx: int, player: Player) -> None:
        if player not in PLAYERS:
            raise ValueError(f"Unknown player {player!r}")
        if self.cells[idx] != EMPTY:
            raise ValueError("Cell already occupied")
        self.cells[idx] = player

    def copy(self) -> "Board":
        return Board(cells=self.cells.copy())

    def __str__(self) -> str:
        rows = [
            " | ".join(self.cells[r * 3 : r * 3 + 3]) for r in range(3)
        ]
        return "\n---------\n".join(rows)


BoardLike = Union[Board, Sequence[str]]


def _cells(board: BoardLike) -> Sequence[str]:
    return board.cells if isinstance(board, Board) else board


# ---------- Evaluation ----------


@dataclass(frozen=True)
class EvaluationResult:
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def has_winner(self) -> bool:
        return self.winner is not None


def evaluate(board: BoardLike) -> EvaluationResult:
    """Return the first completed line (rows, columns, diagonals) and its mark.

    Draws are not decided here: a full board without a line still comes back
    as ``EvaluationResult()``, see :func:`is_draw`.
    """
    cells = _cells(board)
    for a, b, c in WINNING_LINES:
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return EvaluationResult(winner=v, line=(a, b, c))
    return EvaluationResult()


def legal_moves(board: BoardLike) -> List[int]:
    """All empty cell indices in ascending order."""
    return [i for i, c in enumerate(_cells(board)) if c == EMPTY]


def is_draw(board: BoardLike) -> bool:
    return not evaluate(board).has_winner and not legal_moves(board)
