"""
Render module for TicTacToe.
Draws the board and maps clicks to cells.
"""

from .config import RenderConfig
from .board_renderer import BoardRenderer
