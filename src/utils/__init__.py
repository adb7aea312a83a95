"""Utility functions for the Tetris engine scripts."""
from .config import DEFAULT_CONFIG, load_config, merge_config
from .logger import GameLogger, RollingStats, SUMMARY_FIELDS, to_json_value

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
    "merge_config",
    "GameLogger",
    "RollingStats",
    "SUMMARY_FIELDS",
    "to_json_value",
]
