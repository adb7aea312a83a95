"""
Events consumed by the update function and commands it hands back.

The only command is a request for a random piece id; whoever runs the game
answers it later with a PieceReady event.
"""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Tick:
    """Time passed since the previous tick, in milliseconds."""
    elapsed_ms: float


@dataclass(frozen=True)
class KeyPress:
    """A single input symbol from the player."""
    key: str


@dataclass(frozen=True)
class PieceReady:
    """Resolved random piece id (1-7)."""
    piece_id: int


@dataclass(frozen=True)
class NewGame:
    """Discard the current game and start over."""


@dataclass(frozen=True)
class RequestPiece:
    """Ask for one uniformly distributed integer in 1-7."""


Event = Union[Tick, KeyPress, PieceReady, NewGame]
Command = RequestPiece
