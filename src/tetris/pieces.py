"""
Tetromino Piece Definitions.

This module defines the seven standard pieces (I, T, S, Z, J, L, O).
Each piece is represented as a list of (row, col) offsets around an implicit
anchor at (0, 0). The anchor is what gets translated onto the board.
"""
from dataclasses import dataclass
from typing import List, Tuple
import numpy as np


Offset = Tuple[int, int]


@dataclass(frozen=True)
class Piece:
    """Represents one catalog entry."""
    name: str
    blocks: Tuple[Offset, ...]  # Immutable tuple of (row, col) offsets
    color: Tuple[int, int, int]  # RGB

    @property
    def num_blocks(self) -> int:
        """Return the number of blocks in this piece."""
        return len(self.blocks)

    @property
    def width(self) -> int:
        """Return the width of the bounding box."""
        if not self.blocks:
            return 0
        cols = [c for _, c in self.blocks]
        return max(cols) - min(cols) + 1

    @property
    def height(self) -> int:
        """Return the height of the bounding box."""
        if not self.blocks:
            return 0
        rows = [r for r, _ in self.blocks]
        return max(rows) - min(rows) + 1

    def get_shape_array(self) -> np.ndarray:
        """Get a minimal bounding box array for this piece."""
        arr = np.zeros((self.height, self.width), dtype=np.int8)
        if not self.blocks:
            return arr
        min_row = min(r for r, _ in self.blocks)
        min_col = min(c for _, c in self.blocks)
        for r, c in self.blocks:
            arr[r - min_row, c - min_col] = 1
        return arr

    def __repr__(self) -> str:
        return f"Piece({self.name}, {self.num_blocks} blocks)"


# =============================================================================
# CATALOG
# =============================================================================
# Spawn orientation keeps every offset at row >= 0 so a piece anchored on
# row 0 fits entirely inside the board.

EMPTY = Piece("EMPTY", tuple(), (0, 0, 0))

I = Piece("I", ((0, -1), (0, 0), (0, 1), (0, 2)), (0, 240, 240))     # □□□□

T = Piece("T", ((0, -1), (0, 0), (0, 1), (1, 0)), (160, 0, 240))     # □□□
                                                                     #  □

S = Piece("S", ((0, 0), (0, 1), (1, -1), (1, 0)), (0, 240, 0))       #  □□
                                                                     # □□

Z = Piece("Z", ((0, -1), (0, 0), (1, 0), (1, 1)), (240, 0, 0))       # □□
                                                                     #  □□

J = Piece("J", ((0, -1), (0, 0), (0, 1), (1, 1)), (0, 0, 240))       # □□□
                                                                     #   □

L = Piece("L", ((0, -1), (0, 0), (0, 1), (1, -1)), (240, 160, 0))    # □□□
                                                                     # □

O = Piece("O", ((0, 0), (0, 1), (1, 0), (1, 1)), (240, 240, 0))      # □□
                                                                     # □□

# Indexed by piece id; id 0 is the sentinel empty entry.
PIECES: Tuple[Piece, ...] = (EMPTY, I, T, S, Z, J, L, O)
PIECE_IDS: Tuple[int, ...] = tuple(range(1, len(PIECES)))
NUM_PIECES: int = len(PIECE_IDS)

assert NUM_PIECES == 7, f"Expected 7 pieces, got {NUM_PIECES}"
assert all(p.num_blocks == 4 for p in PIECES[1:])


def get_piece(piece_id: int) -> Piece:
    """Get the catalog entry for an id, falling back to EMPTY for unknown ids."""
    if 0 <= piece_id < len(PIECES):
        return PIECES[piece_id]
    return EMPTY


def get_piece_by_index(index: int) -> Piece:
    """Get a piece by its id (1-7)."""
    if index not in PIECE_IDS:
        raise ValueError(f"Piece id must be 1-{NUM_PIECES}, got {index}")
    return PIECES[index]


def get_piece_by_name(name: str) -> Piece:
    """Get a piece by its name."""
    for piece in PIECES[1:]:
        if piece.name == name:
            return piece
    valid = [p.name for p in PIECES[1:]]
    raise ValueError(f"Unknown piece: {name}. Valid pieces: {valid}")


def get_piece_id(piece: Piece) -> int:
    """Get the id of a piece."""
    return PIECES.index(piece)


def rotate_offset(offset: Offset) -> Offset:
    """Rotate an offset a quarter turn about the anchor."""
    r, c = offset
    return (-c, r)


@dataclass(frozen=True)
class Tetromino:
    """The falling piece: catalog id, quarter turns and anchor position."""
    piece_id: int
    rotation: int = 0
    anchor: Offset = (0, 4)

    @property
    def piece(self) -> Piece:
        return get_piece(self.piece_id)

    def cells(self) -> List[Offset]:
        """Absolute board cells covered in this pose."""
        return transform_shape(self)

    def moved(self, rotation: int, anchor: Offset) -> "Tetromino":
        """Same piece in a different pose."""
        return Tetromino(self.piece_id, rotation % 4, anchor)


def transform_shape(tetromino: Tetromino) -> List[Offset]:
    """
    Compute the absolute board cells covered by a tetromino.

    Args:
        tetromino: The piece and its pose

    Returns:
        List of (row, col) board coordinates, empty for unknown ids
    """
    turns = tetromino.rotation % 4
    row, col = tetromino.anchor
    cells = []
    for offset in get_piece(tetromino.piece_id).blocks:
        for _ in range(turns):
            offset = rotate_offset(offset)
        cells.append((row + offset[0], col + offset[1]))
    return cells


def visualize_piece(piece: Piece) -> str:
    """Create a string visualization of a piece."""
    arr = piece.get_shape_array()
    lines = []
    for row in arr:
        line = "".join("□" if cell else " " for cell in row)
        lines.append(line)
    return "\n".join(lines)


if __name__ == "__main__":
    # Print all pieces for verification
    print(f"Total pieces: {NUM_PIECES}")
    print("-" * 40)
    for piece_id in PIECE_IDS:
        piece = PIECES[piece_id]
        print(f"\n[{piece_id}] {piece.name} ({piece.width}x{piece.height}):")
        print(visualize_piece(piece))
