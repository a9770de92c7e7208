"""
Move validator for TicTacToe.
Lists legal moves and explains why a move would be rejected.
"""

from typing import Optional, List
from dataclasses import dataclass
from .board import Board, Player, CELL_COUNT


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. The round must not be over
    2. The index must be 0-8
    3. Only the side to move may play
    4. Can only place on empty cells
    """

    def validate_move(
        self,
        board: Board,
        index: int,
        player: Player,
        turn: Player,
        round_over: bool = False
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            index: Cell to mark (0-8).
            player: Who is trying to move.
            turn: Whose turn it actually is.
            round_over: True once the round has a result.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if round_over:
            return ValidationResult(
                is_valid=False,
                error_message="Round is already over"
            )

        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < CELL_COUNT:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell {index!r}. Must be 0-{CELL_COUNT - 1}."
            )

        if player != turn:
            return ValidationResult(
                is_valid=False,
                error_message=f"It is {turn.value}'s turn, not {player.value}'s"
            )

        if board[index] is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {board[index].value}"
            )

        return ValidationResult(is_valid=True)

    def get_valid_moves(self, board: Board) -> List[int]:
        """
        Get all empty cells, in ascending index order.
        Empty list when the board is full.
        """
        return board.empty_cells()


def legal_moves(board: Board) -> List[int]:
    """Indices of empty cells, ascending."""
    return board.empty_cells()
