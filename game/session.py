"""
Game session for TicTacToe.

Owns the board, the turn, the score and the settings. Runs rounds for
two humans or for a human against the minimax AI, and tells listeners
about every change so a front end can redraw.
"""

import logging
from typing import Optional, List, Callable, Any, Dict
from dataclasses import dataclass, replace

from .board import Board, Player
from .win_checker import WinChecker, Outcome, Line
from .move_validator import MoveValidator
from .ai_player import AIPlayer
from .config import GameConfig, OpponentMode, SessionSettings
from .scheduler import Scheduler, ManualScheduler

logger = logging.getLogger(__name__)


@dataclass
class Score:
    """Cumulative results across rounds."""
    x_wins: int = 0
    o_wins: int = 0
    draws: int = 0

    def record(self, outcome: Outcome) -> None:
        """Count a finished round."""
        if outcome.is_win:
            if outcome.winner == Player.X:
                self.x_wins += 1
            else:
                self.o_wins += 1
        elif outcome.is_draw:
            self.draws += 1

    def reset(self) -> None:
        self.x_wins = 0
        self.o_wins = 0
        self.draws = 0

    def as_dict(self) -> Dict[str, int]:
        return {"X": self.x_wins, "O": self.o_wins, "D": self.draws}


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Everything a front end needs to draw the session.

    A snapshot is a copy: later changes to the session do not affect it.
    """
    board: Board
    turn: Player
    outcome: Outcome
    score: Score
    accepting_input: bool
    computer_pending: bool
    mode: OpponentMode
    human_side: Player
    status_text: str
    generation: int = 0

    @property
    def round_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def winning_line(self) -> Optional[Line]:
        return self.outcome.line


Listener = Callable[[SessionSnapshot], None]


class GameSession:
    """
    The turn and round state machine.

    A round starts with an empty board and one side to move, and ends when
    the board is won or drawn. Invalid requests (occupied cell, wrong side,
    round over) are ignored and logged, never raised.

    In computer mode the AI's move is applied after a short delay through
    the scheduler. Each round has a generation number; a delayed move
    carries the generation it was scheduled in and is dropped if a new
    round or reset happened before it fired.
    """

    def __init__(
        self,
        settings: Optional[SessionSettings] = None,
        scheduler: Optional[Scheduler] = None,
        ai: Optional[AIPlayer] = None
    ):
        """
        Initialize the session and start the first round (X to move).

        Args:
            settings: Mode, human side and computer delay.
            scheduler: Runs the delayed computer move (default: ManualScheduler).
            ai: Search engine for the computer side.
        """
        self.settings = settings or SessionSettings()
        self.scheduler = scheduler or ManualScheduler()
        self.ai = ai or AIPlayer(self.settings.computer_side)
        self.validator = MoveValidator()
        self.win_checker = WinChecker()

        self.score = Score()
        self.board = Board.empty()
        self.turn = GameConfig.FIRST_PLAYER
        self.outcome = Outcome.ongoing()

        # Bumped on every new round; stale delayed moves compare against it
        self.generation = 0
        self._pending_handle: Any = None

        self._listeners: List[Listener] = []

        self.new_round(GameConfig.FIRST_PLAYER)

    # ==================== STATE ====================

    @property
    def game_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def winning_line(self) -> Optional[Line]:
        return self.outcome.line

    @property
    def computer_pending(self) -> bool:
        return self._pending_handle is not None

    @property
    def is_computer_turn(self) -> bool:
        return (
            self.settings.vs_computer
            and not self.game_over
            and self.turn == self.settings.computer_side
        )

    @property
    def accepting_input(self) -> bool:
        """True when a human may click a cell right now."""
        if self.game_over:
            return False
        return not self.is_computer_turn

    def status_text(self) -> str:
        if self.game_over:
            return self.outcome.label()
        return f"{self.turn.value} to move"

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            board=self.board,
            turn=self.turn,
            outcome=self.outcome,
            score=replace(self.score),
            accepting_input=self.accepting_input,
            computer_pending=self.computer_pending,
            mode=self.settings.mode,
            human_side=self.settings.human_side,
            status_text=self.status_text(),
            generation=self.generation,
        )

    # ==================== LISTENERS ====================

    def add_listener(self, listener: Listener) -> None:
        """Call `listener` with a snapshot after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # ==================== MOVES ====================

    def apply_move(self, index: int, player) -> bool:
        """
        Mark a cell for `player` and update the round.

        Ignored (returns False) if the round is over, the index is not
        0-8, it is not `player`'s turn, or the cell is occupied.

        Args:
            index: Cell to mark (0-8).
            player: The side making the move.

        Returns:
            True if the move was applied.
        """
        player = Player.parse(player)
        result = self.validator.validate_move(
            self.board, index, player, self.turn, self.game_over
        )
        if not result.is_valid:
            logger.debug("Ignoring move %r by %s: %s", index, player.value, result.error_message)
            return False

        self.board = self.board.with_move(index, player)
        self.outcome = self.win_checker.evaluate(self.board)

        if self.outcome.is_terminal:
            self.score.record(self.outcome)
            logger.info(
                "Round %d over: %s (score X=%d O=%d D=%d)",
                self.generation, self.outcome.label(),
                self.score.x_wins, self.score.o_wins, self.score.draws
            )
        else:
            self.turn = player.opposite()
            self.maybe_trigger_computer()

        self._notify()
        return True

    def maybe_trigger_computer(self) -> bool:
        """
        Schedule the computer's move if it is the computer's turn.

        The move is searched and applied when the delay expires, unless
        the round has been replaced by then.

        Returns:
            True if a move was scheduled by this call.
        """
        if not self.is_computer_turn:
            return False
        if self._pending_handle is not None:
            return False

        token = self.generation
        self._pending_handle = self.scheduler.call_later(
            self.settings.computer_delay_ms,
            lambda: self._run_computer_move(token)
        )
        logger.debug(
            "Computer (%s) will move in %d ms (round %d)",
            self.settings.computer_side.value, self.settings.computer_delay_ms, token
        )
        return True

    def _run_computer_move(self, token: int) -> None:
        if token != self.generation:
            logger.info("Dropping stale computer move from round %d (now round %d)", token, self.generation)
            return

        self._pending_handle = None

        if not self.is_computer_turn:
            self._notify()
            return

        side = self.settings.computer_side
        result = self.ai.get_best_move(self.board, side)

        if result.move is None:
            logger.warning("Computer found no move on %s", self.board.to_string())
            self._notify()
            return

        self.apply_move(result.move, side)

    # ==================== HUMAN REQUESTS ====================

    def request_move(self, index: int) -> bool:
        """
        A human clicked a cell.

        Applied only when input is accepted (round running and, in
        computer mode, the human's turn).

        Returns:
            True if the move was applied.
        """
        if not self.accepting_input:
            logger.debug("Ignoring click on %r: input not accepted (%s)", index, self.status_text())
            return False
        return self.apply_move(index, self.turn)

    def request_new_round(self, starting_player=None) -> None:
        """
        Start a new round, keeping the score.

        Args:
            starting_player: Side to move first. Default: the side that
                             was not on move, so starts alternate.
        """
        if starting_player is None:
            starting_player = self.turn.opposite()
        self.new_round(starting_player)

    def request_full_reset(self) -> None:
        self.reset_all()

    def set_opponent_mode(self, mode) -> None:
        """Switch between two humans and human vs computer. Starts a new round."""
        mode = OpponentMode.parse(mode)
        if mode == self.settings.mode:
            return
        self.settings.mode = mode
        logger.info("Opponent mode set to %s", mode.value)
        self.new_round(GameConfig.FIRST_PLAYER)

    def set_human_side(self, side) -> None:
        """Choose which side the human plays against the computer. Starts a new round."""
        side = Player.parse(side)
        if side == self.settings.human_side:
            return
        self.settings.human_side = side
        self.ai.player = self.settings.computer_side
        logger.info("Human side set to %s", side.value)
        self.new_round(GameConfig.FIRST_PLAYER)

    # ==================== ROUNDS ====================

    def new_round(self, starting_player=GameConfig.FIRST_PLAYER) -> None:
        """
        Clear the board and start a round. The score is kept.

        Any computer move still waiting from the previous round is
        cancelled; if the computer moves first, its move is scheduled.
        """
        starting_player = Player.parse(starting_player)

        self._cancel_pending()
        self.generation += 1

        self.board = Board.empty()
        self.turn = starting_player
        self.outcome = Outcome.ongoing()

        logger.debug("Round %d started, %s to move", self.generation, starting_player.value)

        self.maybe_trigger_computer()
        self._notify()

    def reset_all(self) -> None:
        """New round with X to move, and zero the score."""
        self.score.reset()
        self.new_round(GameConfig.FIRST_PLAYER)

    def close(self) -> None:
        """Cancel any pending computer move. Call before dropping the scheduler."""
        self._cancel_pending()
        self.generation += 1

    def _cancel_pending(self) -> None:
        if self._pending_handle is not None:
            self.scheduler.cancel(self._pending_handle)
            self._pending_handle = None
