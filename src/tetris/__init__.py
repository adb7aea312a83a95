"""Game engine module for Tetris."""
from .pieces import Piece, PIECES, Tetromino, get_piece, get_piece_by_name, transform_shape
from .board import Board, can_move
from .events import Tick, KeyPress, PieceReady, NewGame, RequestPiece
from .engine import (
    GameEngine,
    GameStatus,
    Model,
    drop_period,
    level_for,
    move,
    spawn_piece,
    update,
)

__all__ = [
    "Piece",
    "PIECES",
    "Tetromino",
    "get_piece",
    "get_piece_by_name",
    "transform_shape",
    "Board",
    "can_move",
    "Tick",
    "KeyPress",
    "PieceReady",
    "NewGame",
    "RequestPiece",
    "GameEngine",
    "GameStatus",
    "Model",
    "drop_period",
    "level_for",
    "move",
    "spawn_piece",
    "update",
]
