"""
Game configuration for TicTacToe.
Timing and default settings for a session.
"""

from enum import Enum
from dataclasses import dataclass
from .board import Player


class OpponentMode(Enum):
    """Who plays against the human."""
    HUMAN = "hvh"       # Two humans share the board
    COMPUTER = "hvc"    # Human vs the minimax AI

    @classmethod
    def parse(cls, value) -> "OpponentMode":
        """Accept an OpponentMode or its value ("hvh"/"hvc")."""
        if isinstance(value, OpponentMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown opponent mode: {value!r}") from None


class GameConfig:
    """
    Configuration class for game settings.
    Change these values to tune the feel of the game.
    """

    # ==================== COMPUTER TIMING ====================
    # Pause before the computer's move is applied (milliseconds)
    # Long enough to notice, short enough not to annoy
    COMPUTER_DELAY_MS = 280

    # ==================== DEFAULTS ====================
    DEFAULT_MODE = OpponentMode.COMPUTER
    DEFAULT_HUMAN_SIDE = Player.X

    # Side to move at the start of a session, after a reset or a
    # configuration change
    FIRST_PLAYER = Player.X


@dataclass
class SessionSettings:
    """
    Settings handed to a GameSession.

    human_side only matters in COMPUTER mode; the AI plays the other side.
    """
    mode: OpponentMode = GameConfig.DEFAULT_MODE
    human_side: Player = GameConfig.DEFAULT_HUMAN_SIDE
    computer_delay_ms: int = GameConfig.COMPUTER_DELAY_MS

    def __post_init__(self):
        self.mode = OpponentMode.parse(self.mode)
        self.human_side = Player.parse(self.human_side)
        if self.computer_delay_ms < 0:
            raise ValueError(f"computer_delay_ms must be >= 0, got {self.computer_delay_ms}")

    @property
    def computer_side(self) -> Player:
        return self.human_side.opposite()

    @property
    def vs_computer(self) -> bool:
        return self.mode == OpponentMode.COMPUTER
