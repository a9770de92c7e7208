"""
Win checker for TicTacToe.
Decides whether a board is won, drawn, or still in play.
"""

from enum import Enum
from typing import Optional, Tuple
from dataclasses import dataclass
from .board import Board, Player

Line = Tuple[int, int, int]

# All possible winning lines as cell indices.
# Scan order matters: rows, then columns, then diagonals.
WINNING_LINES: Tuple[Line, ...] = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)


class OutcomeKind(Enum):
    """What a board evaluates to."""
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    """
    Result of evaluating a board.

    winner and line are set only for a WIN.
    """
    kind: OutcomeKind
    winner: Optional[Player] = None
    line: Optional[Line] = None

    @classmethod
    def ongoing(cls) -> "Outcome":
        return cls(OutcomeKind.ONGOING)

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(OutcomeKind.DRAW)

    @classmethod
    def win(cls, player: Player, line: Line) -> "Outcome":
        return cls(OutcomeKind.WIN, player, tuple(line))

    @property
    def is_terminal(self) -> bool:
        return self.kind != OutcomeKind.ONGOING

    @property
    def is_win(self) -> bool:
        return self.kind == OutcomeKind.WIN

    @property
    def is_draw(self) -> bool:
        return self.kind == OutcomeKind.DRAW

    def label(self) -> str:
        """Short text for status displays."""
        if self.is_win:
            return f"{self.winner.value} wins!"
        if self.is_draw:
            return "Draw!"
        return "In progress"


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 marks of the same player in a row
    (horizontally, vertically, or diagonally).
    Works on any 9-cell board, reachable or not.
    """

    WINNING_LINES = WINNING_LINES

    def evaluate(self, board: Board) -> Outcome:
        """
        Evaluate a board.

        Args:
            board: The board to check.

        Returns:
            WIN for the first completed line in scan order, DRAW when
            the board is full with no line, ONGOING otherwise.
        """
        for line in self.WINNING_LINES:
            winner = self._check_line(board, line)
            if winner is not None:
                return Outcome.win(winner, line)

        if board.is_full():
            return Outcome.draw()

        return Outcome.ongoing()

    def check_winner(self, board: Board) -> Optional[Player]:
        """The winning Player, or None if no line is complete."""
        return self.evaluate(board).winner

    def get_winning_line(self, board: Board) -> Optional[Line]:
        """The first completed line, or None."""
        return self.evaluate(board).line

    def _check_line(self, board: Board, line: Line) -> Optional[Player]:
        a, b, c = line
        first = board[a]
        if first is not None and first == board[b] == board[c]:
            return first
        return None


_checker = WinChecker()


def evaluate(board: Board) -> Outcome:
    """Module-level shortcut for WinChecker().evaluate(board)."""
    return _checker.evaluate(board)
