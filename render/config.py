"""
Render configuration for TicTacToe.
Sizes and colours used to draw the board.
"""

import cv2


class RenderConfig:
    """
    Configuration class for drawing settings.
    All colours are BGR, as OpenCV expects.
    """

    # ==================== BOARD SETTINGS ====================
    BOARD_SIZE = 3

    # Output size of the board image (pixels)
    BOARD_OUTPUT_SIZE = 480
    CELL_OUTPUT_SIZE = BOARD_OUTPUT_SIZE // BOARD_SIZE  # 160 pixels per cell

    GRID_THICKNESS = 4
    MARK_THICKNESS = 12
    STRIKE_THICKNESS = 10

    # Gap between a mark and its cell border, as a fraction of the cell
    MARK_MARGIN = 0.22

    # ==================== COLOURS ====================
    BACKGROUND_COLOR = (46, 26, 26)     # Dark navy
    GRID_COLOR = (94, 73, 59)
    X_COLOR = (255, 212, 0)             # Cyan
    O_COLOR = (107, 107, 255)           # Coral
    WIN_CELL_COLOR = (62, 33, 22)       # Slightly lighter than background
    STRIKE_COLOR = (0, 215, 255)        # Gold

    # Drawn over the board when no input is accepted (round over)
    DISABLED_OVERLAY_ALPHA = 0.25

    # ==================== TEXT ====================
    FONT = cv2.FONT_HERSHEY_SIMPLEX
    HINT_COLOR = (110, 90, 80)
    SHOW_CELL_KEYS = True   # Faint 1-9 in empty cells
