"""
Board renderer for TicTacToe.
Draws a session snapshot as an image: grid, X and O marks, the
highlighted winning cells and the strike line through them.
"""

import cv2
import numpy as np
from typing import Optional, Tuple
from .config import RenderConfig

from game.board import Board, Player, BOARD_SIZE, CELL_COUNT
from game.session import SessionSnapshot
from game.win_checker import Line

Point = Tuple[int, int]


class BoardRenderer:
    """
    Turns game state into BGR images (numpy arrays).

    Also maps pixels back to cells so a front end can turn a click into
    a cell index.
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize the renderer.

        Args:
            config: Render configuration. Uses defaults if not provided.
        """
        self.config = config or RenderConfig()
        self.size = self.config.BOARD_OUTPUT_SIZE
        self.cell_size = self.config.CELL_OUTPUT_SIZE

    # ==================== GEOMETRY ====================

    def cell_center(self, index: int) -> Point:
        """Pixel centre of a cell."""
        row, col = divmod(index, BOARD_SIZE)
        cx = col * self.cell_size + self.cell_size // 2
        cy = row * self.cell_size + self.cell_size // 2
        return cx, cy

    def cell_at(self, x: float, y: float) -> Optional[int]:
        """
        Convert a pixel to a cell index.

        Args:
            x: X coordinate in the board image.
            y: Y coordinate in the board image.

        Returns:
            Cell index (0-8), or None if the point is outside the board.
        """
        if not (0 <= x < self.cell_size * BOARD_SIZE and 0 <= y < self.cell_size * BOARD_SIZE):
            return None

        col = int(x // self.cell_size)
        row = int(y // self.cell_size)
        return row * BOARD_SIZE + col

    def strike_endpoints(self, line: Line) -> Tuple[Point, Point]:
        """
        Endpoints of the strike line: centre of the first cell of the
        line to centre of the last.
        """
        first, _, last = line
        return self.cell_center(first), self.cell_center(last)

    # ==================== DRAWING ====================

    def draw(self, snapshot: SessionSnapshot) -> np.ndarray:
        """Draw a full session snapshot."""
        return self.draw_board(
            snapshot.board,
            winning_line=snapshot.winning_line,
            dimmed=snapshot.round_over
        )

    def draw_board(
        self,
        board: Board,
        winning_line: Optional[Line] = None,
        dimmed: bool = False
    ) -> np.ndarray:
        """
        Draw a board.

        Args:
            board: The board to draw.
            winning_line: Cells to highlight and strike through.
            dimmed: Darken cells outside the winning line (round over).

        Returns:
            BGR image of size BOARD_OUTPUT_SIZE x BOARD_OUTPUT_SIZE.
        """
        cfg = self.config
        img = np.zeros((self.size, self.size, 3), dtype=np.uint8)
        img[:] = cfg.BACKGROUND_COLOR

        # Winning cells get a lighter background
        if winning_line:
            for index in winning_line:
                row, col = divmod(index, BOARD_SIZE)
                x1, y1 = col * self.cell_size, row * self.cell_size
                cv2.rectangle(
                    img,
                    (x1, y1),
                    (x1 + self.cell_size - 1, y1 + self.cell_size - 1),
                    cfg.WIN_CELL_COLOR,
                    -1
                )

        self._draw_grid(img)

        for index in range(CELL_COUNT):
            cell = board[index]
            if cell is None:
                if cfg.SHOW_CELL_KEYS and not dimmed:
                    self._draw_key_hint(img, index)
            elif cell == Player.X:
                self._draw_x(img, index)
            else:
                self._draw_o(img, index)

        if dimmed:
            self._dim(img, winning_line)

        if winning_line:
            start, end = self.strike_endpoints(winning_line)
            cv2.line(img, start, end, cfg.STRIKE_COLOR, cfg.STRIKE_THICKNESS, cv2.LINE_AA)

        return img

    def _draw_grid(self, img: np.ndarray):
        cfg = self.config
        for i in range(1, BOARD_SIZE):
            # Vertical lines
            x = i * self.cell_size
            cv2.line(img, (x, 0), (x, self.size), cfg.GRID_COLOR, cfg.GRID_THICKNESS)
            # Horizontal lines
            y = i * self.cell_size
            cv2.line(img, (0, y), (self.size, y), cfg.GRID_COLOR, cfg.GRID_THICKNESS)

    def _mark_radius(self) -> int:
        return int(self.cell_size / 2 - self.cell_size * self.config.MARK_MARGIN)

    def _draw_x(self, img: np.ndarray, index: int):
        cx, cy = self.cell_center(index)
        r = self._mark_radius()
        color = self.config.X_COLOR
        thickness = self.config.MARK_THICKNESS
        cv2.line(img, (cx - r, cy - r), (cx + r, cy + r), color, thickness, cv2.LINE_AA)
        cv2.line(img, (cx + r, cy - r), (cx - r, cy + r), color, thickness, cv2.LINE_AA)

    def _draw_o(self, img: np.ndarray, index: int):
        cx, cy = self.cell_center(index)
        cv2.circle(
            img, (cx, cy), self._mark_radius(),
            self.config.O_COLOR, self.config.MARK_THICKNESS, cv2.LINE_AA
        )

    def _draw_key_hint(self, img: np.ndarray, index: int):
        cx, cy = self.cell_center(index)
        cv2.putText(
            img, str(index + 1), (cx - 8, cy + 8),
            self.config.FONT, 0.7, self.config.HINT_COLOR, 1, cv2.LINE_AA
        )

    def _dim(self, img: np.ndarray, keep: Optional[Line]):
        """Blend cells outside `keep` towards black."""
        alpha = self.config.DISABLED_OVERLAY_ALPHA
        keep = set(keep or ())
        for index in range(CELL_COUNT):
            if index in keep:
                continue
            row, col = divmod(index, BOARD_SIZE)
            y1, x1 = row * self.cell_size, col * self.cell_size
            region = img[y1:y1 + self.cell_size, x1:x1 + self.cell_size]
            region[:] = (region * (1.0 - alpha)).astype(np.uint8)

    # ==================== OUTPUT ====================

    def to_rgb(self, img: np.ndarray) -> np.ndarray:
        """BGR -> RGB, for PIL / Tk display."""
        return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)

    def save(self, snapshot: SessionSnapshot, path: str) -> bool:
        """
        Write a snapshot to an image file.

        Returns:
            True if the file was written.
        """
        return bool(cv2.imwrite(str(path), self.draw(snapshot)))
