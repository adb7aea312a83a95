"""Gymnasium environment for Tetris."""
from .tetris_env import TetrisEnv
from .wrappers import (
    VectorizedTetrisEnv, make_env, make_env_from_config, make_vec_env, stack_observations,
)

__all__ = [
    "TetrisEnv",
    "VectorizedTetrisEnv",
    "make_env",
    "make_env_from_config",
    "make_vec_env",
    "stack_observations",
]
