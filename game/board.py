"""
Board model for TicTacToe.
A fixed 3x3 grid stored as 9 cells in row-major order.
"""

from enum import Enum
from typing import Optional, List, Tuple, Iterator
from dataclasses import dataclass


class Player(Enum):
    """The two sides in the game."""
    X = "X"
    O = "O"

    def opposite(self) -> "Player":
        """Get the opposite player."""
        return Player.O if self == Player.X else Player.X

    @classmethod
    def parse(cls, value) -> "Player":
        """Accept a Player or its symbol ("X"/"O", any case)."""
        if isinstance(value, Player):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown player: {value!r}") from None


BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# Characters accepted as an empty cell by Board.from_string
EMPTY_CHARS = ".-_ "

Cell = Optional[Player]


@dataclass(frozen=True)
class Board:
    """
    An immutable snapshot of the board.

    None means empty, otherwise the Player who marked the cell.
    Index 0 is the top-left cell, index 8 the bottom-right.
    """

    cells: Tuple[Cell, ...] = (None,) * CELL_COUNT

    def __post_init__(self):
        # Lists and other sequences become a tuple so boards compare and hash by value
        object.__setattr__(self, "cells", tuple(self.cells))
        if len(self.cells) != CELL_COUNT:
            raise ValueError(f"A board has {CELL_COUNT} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def from_string(cls, text: str) -> "Board":
        """
        Build a board from a 9 character string, e.g. "XX.OO....".

        Args:
            text: One character per cell. X and O are marks; '.', '-', '_'
                  or a space mean empty. Newlines and '|' are ignored.

        Returns:
            The board.
        """
        chars = [c for c in text if c not in "\n|"]
        if len(chars) != CELL_COUNT:
            raise ValueError(f"Expected {CELL_COUNT} cells, got {len(chars)} in {text!r}")

        cells: List[Cell] = []
        for char in chars:
            if char in EMPTY_CHARS:
                cells.append(None)
            elif char.upper() in ("X", "O"):
                cells.append(Player(char.upper()))
            else:
                raise ValueError(f"Invalid cell character {char!r} in {text!r}")
        return cls(tuple(cells))

    def __getitem__(self, index: int) -> Cell:
        return self.cells[index]

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return CELL_COUNT

    def with_move(self, index: int, player: Player) -> "Board":
        """
        Return a new board with `player` marked at `index`.
        The cell must be empty.
        """
        if self.cells[index] is not None:
            raise ValueError(f"Cell {index} is already occupied by {self.cells[index].value}")
        cells = list(self.cells)
        cells[index] = player
        return Board(tuple(cells))

    def empty_cells(self) -> List[int]:
        """Indices of empty cells, ascending."""
        return [i for i, cell in enumerate(self.cells) if cell is None]

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    def count(self, player: Player) -> int:
        return sum(1 for cell in self.cells if cell == player)

    def to_string(self) -> str:
        """Inverse of from_string, with '.' for empty cells."""
        return "".join(cell.value if cell else "." for cell in self.cells)

    def format(self) -> str:
        """Console drawing of the board. Empty cells show their 1-9 key."""
        lines = ["┌───┬───┬───┐"]
        for row in range(BOARD_SIZE):
            row_str = "│"
            for col in range(BOARD_SIZE):
                index = row * BOARD_SIZE + col
                cell = self.cells[index]
                mark = cell.value if cell else str(index + 1)
                row_str += f" {mark} │"
            lines.append(row_str)
            if row < BOARD_SIZE - 1:
                lines.append("├───┼───┼───┤")
        lines.append("└───┴───┴───┘")
        return "\n".join(lines)


def index_to_row_col(index: int) -> Tuple[int, int]:
    """Convert a cell index (0-8) to (row, col)."""
    return divmod(index, BOARD_SIZE)


def row_col_to_index(row: int, col: int) -> int:
    """Convert (row, col) to a cell index (0-8)."""
    return row * BOARD_SIZE + col
