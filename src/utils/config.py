"""
Configuration loading.

Settings live in a YAML file; anything the file leaves out falls back to
DEFAULT_CONFIG.
"""
import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml


DEFAULT_CONFIG: Dict[str, Any] = {
    'game': {
        'seed': 42,
        'tick_ms': 50.0,
    },
    'environment': {
        'tick_ms': 100.0,
        'max_episode_steps': 10000,
        'rewards': {
            'score_scale': 1.0,
            'line_clear': 1.0,
            'game_over_penalty': -10.0,
            'survival_bonus': 0.001,
            'hole_penalty': -0.05,
        },
    },
    'logging': {
        'log_dir': 'logs',
        'log_interval': 10,
    },
    'play': {
        'delay': 0.05,
        'games': 10,
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML file; None returns the defaults

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    return merge_config(DEFAULT_CONFIG, loaded)
