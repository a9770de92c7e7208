"""
AI player for TicTacToe.
Uses the Minimax algorithm to choose the best move.
"""

import logging
from typing import Optional, Dict, Tuple
from dataclasses import dataclass
from .board import Board, Player, Cell, index_to_row_col
from .win_checker import WinChecker, Outcome

logger = logging.getLogger(__name__)

# Absolute scores: X maximizes, O minimizes
SCORES = {Player.X: 1, Player.O: -1}
DRAW_SCORE = 0

# (cells, side to move) -> result. A position always has the same value
# and the same first-best move, so sharing results is safe.
_SEARCH_CACHE: Dict[Tuple[Tuple[Cell, ...], Player], "SearchResult"] = {}


@dataclass(frozen=True)
class SearchResult:
    """Score of a position and the move that achieves it (None at terminal positions)."""
    score: float
    move: Optional[int] = None


def terminal_score(outcome: Outcome) -> int:
    if outcome.is_win:
        return SCORES[outcome.winner]
    return DRAW_SCORE


class AIPlayer:
    """
    An AI that plays TicTacToe using the Minimax algorithm.

    The search is exhaustive with no pruning. Moves are tried in
    ascending index order and only a strictly better score replaces the
    current best, so the first best move found wins ties.

    The AI will always play optimally - it will win if possible,
    block the opponent if needed, and never lose (at worst, draw).
    """

    def __init__(self, player: Player = Player.O):
        """
        Initialize the AI player.

        Args:
            player: Which side the AI plays when get_best_move is
                    called without an explicit side (default: O).
        """
        self.player = player
        self.win_checker = WinChecker()

        # Positions searched by the last call that were not already cached
        self.positions_evaluated = 0

    def get_best_move(self, board: Board, player: Optional[Player] = None) -> SearchResult:
        """
        Get the best move for the side to move.

        Args:
            board: Current board. Never modified.
            player: Side to move (default: self.player).

        Returns:
            SearchResult. move is None if the board is already terminal.
        """
        player = player or self.player
        self.positions_evaluated = 0

        result = self._minimax(board, player)

        if result.move is None:
            logger.debug("No move available for %s on %s", player.value, board.to_string())
        else:
            logger.debug(
                "%s best move on %s: %d (score %s, %d new positions)",
                player.value, board.to_string(), result.move, result.score,
                self.positions_evaluated
            )
        return result

    def _minimax(self, board: Board, player: Player) -> SearchResult:
        """
        Minimax over every continuation of `board` with `player` to move.

        Args:
            board: Position to evaluate.
            player: Side to move.

        Returns:
            The best absolute score and the move that reaches it.
        """
        key = (board.cells, player)
        cached = _SEARCH_CACHE.get(key)
        if cached is not None:
            return cached

        self.positions_evaluated += 1

        outcome = self.win_checker.evaluate(board)
        if outcome.is_terminal:
            result = SearchResult(score=terminal_score(outcome))
            _SEARCH_CACHE[key] = result
            return result

        maximizing = player == Player.X
        best = SearchResult(score=float("-inf") if maximizing else float("inf"))

        for move in board.empty_cells():
            # Each child is a fresh board, the input board is never touched
            score = self._minimax(board.with_move(move, player), player.opposite()).score

            if maximizing:
                if score > best.score:
                    best = SearchResult(score, move)
            else:
                if score < best.score:
                    best = SearchResult(score, move)

        _SEARCH_CACHE[key] = best
        return best

    def get_move_suggestion(self, board: Board, player: Optional[Player] = None) -> str:
        """
        Get a human-readable move suggestion.

        Args:
            board: Current board.
            player: Side to move (default: self.player).

        Returns:
            A string describing the suggested move.
        """
        player = player or self.player
        move = self.get_best_move(board, player).move

        if move is None:
            return "No moves available!"

        row, col = index_to_row_col(move)
        return f"Play {player.value} at row {row + 1}, column {col + 1} (key {move + 1})"


def best_move(board: Board, player: Player) -> SearchResult:
    """Module-level shortcut for AIPlayer().get_best_move(board, player)."""
    return AIPlayer(player).get_best_move(board, player)


def clear_cache() -> None:
    _SEARCH_CACHE.clear()
