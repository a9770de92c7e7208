"""
Game module for TicTacToe.
Handles the board, rules, minimax AI, and the session state machine.
"""

__version__ = "1.0.0"

from .board import Board, Player
from .win_checker import WinChecker, Outcome, OutcomeKind, WINNING_LINES, evaluate
from .move_validator import MoveValidator, legal_moves
from .ai_player import AIPlayer, SearchResult, best_move
from .config import GameConfig, OpponentMode, SessionSettings
from .scheduler import Scheduler, TkScheduler, ManualScheduler
from .session import GameSession, Score, SessionSnapshot
