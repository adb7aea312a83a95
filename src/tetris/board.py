"""
Tetris Board Module.

This module implements the game board with:
- 20x10 grid of piece ids (0 = empty)
- Sentinel reads outside the grid
- Collision validation between two poses of a piece
- Row collapse after a lock
- Board heuristics for statistics and reward shaping

Boards are values: the grid is read-only and every change returns a new Board.
"""
from typing import Iterable, List, Optional, Tuple
import numpy as np

from .pieces import Offset, Tetromino, NUM_PIECES


class Board:
    """
    Represents the 20x10 playfield.

    The board is a 2D numpy array where:
    - 0 = empty cell
    - 1-7 = cell locked by the piece with that catalog id
    """

    ROWS = 20
    COLS = 10
    EMPTY = 0
    OUT_OF_BOUNDS = -1  # never equal to EMPTY

    def __init__(self, grid: Optional[np.ndarray] = None):
        """
        Initialize a board.

        Args:
            grid: Optional 20x10 array of ids 0-7 (copied); empty if omitted
        """
        if grid is None:
            grid = np.zeros((self.ROWS, self.COLS), dtype=np.int8)
        else:
            values = np.asarray(grid)
            if values.shape != (self.ROWS, self.COLS):
                raise ValueError(
                    f"Board must be {self.ROWS}x{self.COLS}, got {values.shape}"
                )
            if not np.issubdtype(values.dtype, np.integer):
                raise ValueError(f"Cell values must be integers, got {values.dtype}")
            if values.min() < 0 or values.max() > NUM_PIECES:
                raise ValueError(f"Cell values must be 0-{NUM_PIECES}")
            grid = values.astype(np.int8)
        grid.setflags(write=False)
        self.grid = grid

    @classmethod
    def empty(cls) -> "Board":
        """Create an empty board."""
        return cls()

    def copy(self) -> "Board":
        """Create a copy of this board."""
        return Board(self.grid)

    @property
    def size(self) -> Tuple[int, int]:
        return self.grid.shape

    @property
    def total_blocks(self) -> int:
        """Return total number of filled cells on the board."""
        return int(np.count_nonzero(self.grid))

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if coordinates are within board bounds."""
        return 0 <= row < self.ROWS and 0 <= col < self.COLS

    def get_cell(self, row: int, col: int) -> int:
        """Get the value of a cell, or OUT_OF_BOUNDS outside the grid."""
        if not self.in_bounds(row, col):
            return self.OUT_OF_BOUNDS
        return int(self.grid[row, col])

    def is_empty(self, row: int, col: int) -> bool:
        """Check if a cell is empty. Cells outside the grid never are."""
        return self.get_cell(row, col) == self.EMPTY

    def can_move(self, old: Optional[Tetromino], new: Tetromino) -> bool:
        """
        Check whether a piece may go from one pose to another.

        Cells the piece already covers in the old pose are exempt; every
        other cell of the new pose must read as empty.

        Args:
            old: Current pose, or None when nothing is exempt
            new: Candidate pose

        Returns:
            True if the move is legal
        """
        held = set(old.cells()) if old is not None else set()
        for row, col in new.cells():
            if (row, col) in held:
                continue
            if self.get_cell(row, col) != self.EMPTY:
                return False
        return True

    def replace_piece(self, old: Optional[Tetromino], new: Tetromino) -> "Board":
        """
        Lift a piece out of its old pose and write it in the new one.

        The old cells are cleared before the new ones are written, so cells
        shared by both poses keep the piece id. Does NOT validate the move;
        callers check can_move first.
        """
        grid = self.grid.copy()
        if old is not None:
            self._write(grid, old.cells(), self.EMPTY)
        self._write(grid, new.cells(), new.piece_id)
        return Board(grid)

    def place(self, tetromino: Tetromino) -> "Board":
        """Write a piece onto the board."""
        return self.replace_piece(None, tetromino)

    def _write(self, grid: np.ndarray, cells: Iterable[Offset], value: int) -> None:
        for row, col in cells:
            if self.in_bounds(row, col):
                grid[row, col] = value

    def find_complete_rows(self) -> List[int]:
        """Find all rows with every column filled."""
        return [row for row in range(self.ROWS) if np.all(self.grid[row, :] != 0)]

    def collapse(self) -> Tuple["Board", int]:
        """
        Remove complete rows and let the rows above fall into the gaps.

        Rows are scanned from the bottom up; each incomplete row is copied to
        the lowest free destination row, and whatever is left above the last
        copied row stays empty.

        Returns:
            Tuple of (collapsed board, number of rows removed)
        """
        complete = set(self.find_complete_rows())
        if not complete:
            return self, 0

        grid = np.zeros_like(self.grid)
        dest = self.ROWS - 1
        for row in range(self.ROWS - 1, -1, -1):
            if row in complete:
                continue
            grid[dest, :] = self.grid[row, :]
            dest -= 1

        return Board(grid), len(complete)

    def get_height_map(self) -> np.ndarray:
        """
        Get the height of each column (distance from the floor to its
        topmost filled cell).
        """
        heights = np.zeros(self.COLS, dtype=np.int32)
        for col in range(self.COLS):
            filled = np.flatnonzero(self.grid[:, col])
            if filled.size:
                heights[col] = self.ROWS - filled[0]
        return heights

    def count_holes(self) -> int:
        """Count empty cells that have a filled cell somewhere above them."""
        holes = 0
        heights = self.get_height_map()
        for col in range(self.COLS):
            top = self.ROWS - heights[col]
            holes += int(np.sum(self.grid[top:, col] == 0))
        return holes

    def get_bumpiness(self) -> int:
        """Sum of absolute height differences between adjacent columns."""
        heights = self.get_height_map()
        return int(np.sum(np.abs(np.diff(heights))))

    def get_state(self) -> np.ndarray:
        """Get a writable copy of the grid."""
        return self.grid.copy()

    def to_tensor(self) -> np.ndarray:
        """Convert board to a binary float occupancy array."""
        return (self.grid != 0).astype(np.float32)

    def __str__(self) -> str:
        """Create a string visualization of the board."""
        lines = []
        lines.append("   " + "".join(str(i) for i in range(self.COLS)))
        for row in range(self.ROWS):
            cells = "".join(
                str(v) if v else "·" for v in self.grid[row]
            )
            lines.append(f"{row:2d}|{cells}|")
        lines.append("   " + "-" * self.COLS)
        lines.append(f"Blocks: {self.total_blocks}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(blocks={self.total_blocks})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return np.array_equal(self.grid, other.grid)

    def __hash__(self) -> int:
        return hash(self.grid.tobytes())


def can_move(old: Optional[Tetromino], new: Tetromino, board: Board) -> bool:
    """Module-level form of Board.can_move."""
    return board.can_move(old, new)
