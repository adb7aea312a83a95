"""
Tetris Game Engine.

This module implements the complete game logic including:
- Immutable game model
- Collision-checked movement and piece spawning
- Drop/landing timing with difficulty levels
- Line clear scoring
- A pure update function driven by events
- A seeded driver that answers random piece requests
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum
import numpy as np

from .board import Board
from .events import Command, Event, KeyPress, NewGame, PieceReady, RequestPiece, Tick
from .pieces import NUM_PIECES, PIECE_IDS, Offset, Tetromino


class GameStatus(Enum):
    """Game status enumeration."""
    FALLING = "falling"
    LANDING = "landing"
    GAME_OVER = "game_over"


PIECES_PER_LEVEL = 70
BASE_DROP_MS = 1000.0
LANDING_MS = 500.0
SPAWN_ANCHOR: Offset = (0, 4)
# Sits above the board, so it exempts no real cell from the spawn check.
GHOST_POSE = Tetromino(1, 0, (-1, 4))

# key -> (rotation delta, column delta)
KEY_BINDINGS: Dict[str, Tuple[int, int]] = {
    "a": (1, 0),   # rotate counter-clockwise
    "s": (3, 0),   # rotate clockwise
    "j": (0, -1),  # move left
    "k": (0, 1),   # move right
}


@dataclass(frozen=True)
class Model:
    """Snapshot of one game between two events."""
    board: Board = field(default_factory=Board)
    pieces_placed: int = 0
    score: int = 0
    active: Optional[Tetromino] = None  # None while a spawn is pending
    elapsed_ms: float = 0.0
    status: GameStatus = GameStatus.FALLING
    lines_cleared: int = 0

    @property
    def level(self) -> int:
        return level_for(self.pieces_placed)

    def is_game_over(self) -> bool:
        return self.status == GameStatus.GAME_OVER


def level_for(pieces_placed: int) -> int:
    """Every 70 pieces placed raises the level by one."""
    return pieces_placed // PIECES_PER_LEVEL


def drop_period(level: int) -> float:
    """
    Milliseconds between two automatic one-row drops.

    Level 0 falls once per second; higher levels shrink the period
    as ((0.8 - 0.001 * level) ** level) seconds.
    """
    if level <= 0:
        return BASE_DROP_MS
    return ((0.8 - 0.001 * level) ** level) * BASE_DROP_MS


def line_clear_score(rows_cleared: int, level: int) -> int:
    """
    Score for clearing rows with a single lock.

    1 row: 1x, 2 rows: 3x, 3 rows: 7x, 4 rows: 15x, scaled by level + 1.
    """
    return (2 ** rows_cleared - 1) * (level + 1)


def new_game() -> Tuple[Model, List[Command]]:
    """Fresh model plus the request for its first piece."""
    return Model(), [RequestPiece()]


def move(rotation: int, position: Offset, model: Model) -> Model:
    """
    Move the active piece to a new pose.

    Args:
        rotation: Target rotation (taken mod 4)
        position: Target anchor (row, col)
        model: Current model

    Returns:
        The updated model, or the same model if the move is blocked
    """
    active = model.active
    if active is None:
        return model

    candidate = active.moved(rotation, position)
    if not model.board.can_move(active, candidate):
        return model

    return replace(
        model,
        board=model.board.replace_piece(active, candidate),
        active=candidate,
    )


def spawn_piece(piece_id: int, model: Model) -> Model:
    """
    Put a new piece at the top of the board.

    If any of its cells is taken the game is over and the board is left
    as it was. Ids outside 1-7 are ignored, so the piece request stays
    open until a valid id arrives.
    """
    if piece_id not in PIECE_IDS:
        return model

    candidate = Tetromino(piece_id, 0, SPAWN_ANCHOR)
    if not model.board.can_move(GHOST_POSE, candidate):
        return replace(model, status=GameStatus.GAME_OVER)

    return replace(
        model,
        board=model.board.place(candidate),
        active=candidate,
        pieces_placed=model.pieces_placed + 1,
    )


def lock_piece(model: Model) -> Model:
    """Commit the active piece, collapse complete rows and score them."""
    board, rows_cleared = model.board.collapse()
    return replace(
        model,
        board=board,
        score=model.score + line_clear_score(rows_cleared, model.level),
        lines_cleared=model.lines_cleared + rows_cleared,
        active=None,
        elapsed_ms=0.0,
        status=GameStatus.FALLING,
    )


def _fall(model: Model) -> Model:
    """Drop the active piece one row, or start landing if it is blocked."""
    active = model.active
    if active is None:
        return replace(model, elapsed_ms=0.0)

    row, col = active.anchor
    below = active.moved(active.rotation, (row + 1, col))
    if not model.board.can_move(active, below):
        return replace(model, elapsed_ms=0.0, status=GameStatus.LANDING)

    return replace(move(below.rotation, below.anchor, model), elapsed_ms=0.0)


def tick(elapsed_ms: float, model: Model) -> Tuple[Model, List[Command]]:
    """
    Advance the clock.

    Args:
        elapsed_ms: Milliseconds since the previous tick
        model: Current model

    Returns:
        Tuple of (next model, commands to run)
    """
    if model.status == GameStatus.GAME_OVER:
        return model, []

    elapsed = model.elapsed_ms + elapsed_ms

    if model.status == GameStatus.FALLING:
        if elapsed < drop_period(model.level):
            return replace(model, elapsed_ms=elapsed), []
        return _fall(model), []

    # Landing: the piece can still be adjusted until the grace period ends.
    if elapsed < LANDING_MS:
        waiting = replace(model, elapsed_ms=elapsed)
        active = waiting.active
        if active is None:
            return waiting, []
        return move(active.rotation, active.anchor, waiting), []

    return lock_piece(model), [RequestPiece()]


def key_press(key: str, model: Model) -> Model:
    """
    Apply a player input.

    Only the first character counts, case-insensitively. Unknown keys,
    game over and a missing active piece leave the model untouched.
    """
    if model.status == GameStatus.GAME_OVER or model.active is None or not key:
        return model

    binding = KEY_BINDINGS.get(key[0].lower())
    if binding is None:
        return model

    turn, shift = binding
    active = model.active
    row, col = active.anchor
    return move(active.rotation + turn, (row, col + shift), model)


def update(model: Model, event: Event) -> Tuple[Model, List[Command]]:
    """
    Consume one event.

    Args:
        model: Current model (never modified)
        event: Tick, KeyPress, PieceReady or NewGame

    Returns:
        Tuple of (next model, commands for the caller to run)
    """
    if isinstance(event, Tick):
        return tick(event.elapsed_ms, model)
    if isinstance(event, KeyPress):
        return key_press(event.key, model), []
    if isinstance(event, PieceReady):
        if model.status == GameStatus.GAME_OVER:
            return model, []
        return spawn_piece(event.piece_id, model), []
    if isinstance(event, NewGame):
        return new_game()
    raise TypeError(f"Unknown event: {event!r}")


class GameEngine:
    """
    Runs a game on top of the pure update function.

    Holds the current model and answers every RequestPiece command right
    away with a piece id drawn from its own random generator.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize a new game.

        Args:
            seed: Random seed for reproducibility
        """
        self.rng = np.random.default_rng(seed)
        self.model, commands = new_game()
        self._run(commands)

    def reset(self, seed: Optional[int] = None) -> Model:
        """
        Start a new game.

        Args:
            seed: New random seed (optional)

        Returns:
            The model of the new game
        """
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        return self.dispatch(NewGame())

    def dispatch(self, event: Event) -> Model:
        """Feed one event through update and run the resulting commands."""
        self.model, commands = update(self.model, event)
        self._run(commands)
        return self.model

    def _run(self, commands: List[Command]) -> None:
        for command in commands:
            if isinstance(command, RequestPiece):
                piece_id = int(self.rng.integers(1, NUM_PIECES + 1))
                self.dispatch(PieceReady(piece_id))

    def tick(self, elapsed_ms: float) -> Model:
        return self.dispatch(Tick(elapsed_ms))

    def press(self, key: str) -> Model:
        return self.dispatch(KeyPress(key))

    @property
    def board(self) -> Board:
        return self.model.board

    @property
    def score(self) -> int:
        return self.model.score

    @property
    def level(self) -> int:
        return self.model.level

    @property
    def status(self) -> GameStatus:
        return self.model.status

    def is_game_over(self) -> bool:
        """Check if the game is over."""
        return self.model.is_game_over()

    def get_statistics(self) -> Dict[str, Any]:
        """Get game statistics."""
        board = self.model.board
        return {
            'score': self.model.score,
            'level': self.model.level,
            'pieces_placed': self.model.pieces_placed,
            'lines_cleared': self.model.lines_cleared,
            'holes': board.count_holes(),
            'bumpiness': board.get_bumpiness(),
            'board_fill_ratio': board.total_blocks / (Board.ROWS * Board.COLS),
            'status': self.model.status.value,
        }

    def __str__(self) -> str:
        """String representation of the game state."""
        lines = [str(self.model.board)]
        lines.append(f"\nScore: {self.model.score} | Level: {self.model.level} | "
                     f"Lines: {self.model.lines_cleared} | Status: {self.model.status.value}")
        return "\n".join(lines)


RANDOM_KEYS = ("a", "s", "j", "k", "")


def play_random_game(
    seed: Optional[int] = None,
    tick_ms: float = 1000.0,
    max_ticks: int = 100_000,
    verbose: bool = False,
) -> Dict[str, Any]:
    """
    Play a complete game with random key presses for testing.

    Args:
        seed: Random seed
        tick_ms: Milliseconds passed per tick
        max_ticks: Stop after this many ticks even if the game is still running
        verbose: Whether to print game progress

    Returns:
        Dictionary with game statistics
    """
    engine = GameEngine(seed=seed)

    if verbose:
        print("Starting random game...")

    ticks = 0
    while not engine.is_game_over() and ticks < max_ticks:
        key = RANDOM_KEYS[engine.rng.integers(len(RANDOM_KEYS))]
        if key:
            engine.press(key)

        lines_before = engine.model.lines_cleared
        engine.tick(tick_ms)
        ticks += 1

        cleared = engine.model.lines_cleared - lines_before
        if verbose and cleared > 0:
            print(f"Tick {ticks}: cleared {cleared} lines, score {engine.score}")

    stats = engine.get_statistics()
    stats['ticks'] = ticks

    if verbose:
        print("\n" + "=" * 40)
        print("GAME OVER!" if engine.is_game_over() else "Tick limit reached")
        print(engine)
        print(f"\nFinal Statistics: {stats}")

    return stats


if __name__ == "__main__":
    stats = play_random_game(seed=42, verbose=True)
    print(f"\nFinal score: {stats['score']}")
