"""
Game logs for the play scripts.

GameLogger appends one JSON record per finished game (the dict returned by
GameEngine.get_statistics or play_random_game) to <name>_<timestamp>.jsonl
and writes a summary of the run. RollingStats keeps the last few values of
each game field for progress lines.
"""
from collections import Counter, deque
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Union
import json
import time
import numpy as np


# Numeric fields of a game record that get aggregated
SUMMARY_FIELDS = ('score', 'pieces_placed', 'lines_cleared', 'level', 'ticks')


def to_json_value(value: Any) -> Any:
    """Make engine statistics JSON friendly (numpy scalars and arrays, enums)."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.number)) and not isinstance(value, bool)


class GameLogger:
    """
    Writes one JSON line per finished game.

    Each record holds the game number, the seed it was played with, seconds
    since the logger started, and every statistic of the game.
    """

    def __init__(self, log_dir: Union[str, Path], name: str = "games"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.name = name
        self.started = time.time()
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{stamp}.jsonl"

        self.games: List[Dict[str, Any]] = []

    def log_game(self, stats: Dict[str, Any], seed: Optional[int] = None) -> Dict[str, Any]:
        """
        Record one finished game.

        Args:
            stats: Game statistics, e.g. from play_random_game
            seed: Seed the game was played with

        Returns:
            The record as written
        """
        record = {
            'game': len(self.games) + 1,
            'seed': seed,
            'elapsed': round(time.time() - self.started, 3),
            **to_json_value(stats),
        }
        self.games.append(record)

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(record) + '\n')
        return record

    def field_values(self, field: str) -> List[float]:
        """Numeric values of one field across the logged games."""
        return [float(g[field]) for g in self.games if _is_number(g.get(field))]

    def summary(self) -> Dict[str, Any]:
        """Aggregate the run: best game, outcome counts and per-field stats."""
        best = max(self.games, key=lambda g: g.get('score', 0), default=None)

        fields = {}
        for field in SUMMARY_FIELDS:
            values = self.field_values(field)
            if values:
                fields[field] = {
                    'mean': float(np.mean(values)),
                    'std': float(np.std(values)),
                    'min': float(np.min(values)),
                    'max': float(np.max(values)),
                }

        return {
            'name': self.name,
            'games': len(self.games),
            'seconds': time.time() - self.started,
            'best_game': best['game'] if best else None,
            'best_score': best.get('score') if best else None,
            'outcomes': dict(Counter(g.get('status') for g in self.games)),
            'fields': fields,
        }

    def save_summary(self) -> Path:
        """Write <name>_summary.json next to the log and return its path."""
        path = self.log_dir / f"{self.name}_summary.json"
        with open(path, 'w') as f:
            json.dump(self.summary(), f, indent=2)
        return path


class RollingStats:
    """Last `window` values of each summary field."""

    def __init__(self, window: int = 100):
        self.window = window
        self.values: Dict[str, Deque[float]] = {}

    def add_game(self, stats: Dict[str, Any]) -> None:
        for field in SUMMARY_FIELDS:
            if _is_number(stats.get(field)):
                self.values.setdefault(field, deque(maxlen=self.window)).append(float(stats[field]))

    def mean(self, field: str) -> float:
        values = self.values.get(field)
        return float(np.mean(values)) if values else 0.0

    def max(self, field: str) -> float:
        values = self.values.get(field)
        return float(np.max(values)) if values else 0.0

    def progress_line(self) -> str:
        """e.g. 'score 12.5 (max 40)  pieces_placed 31.0 (max 44)'"""
        return "  ".join(
            f"{field} {self.mean(field):.1f} (max {self.max(field):.0f})"
            for field in SUMMARY_FIELDS
            if field in self.values
        )
