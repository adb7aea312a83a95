"""
Interactive play script for Tetris.

Allows playing in the terminal, watching a random player, or collecting
statistics over many random games.
"""
import argparse
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tetris.engine import GameEngine, RANDOM_KEYS, play_random_game
from tetris.renderer import Renderer, clear_screen
from utils.config import load_config
from utils.logger import GameLogger, RollingStats


def play_manual(config: Dict[str, Any], seed: int = 42) -> None:
    """
    Play Tetris in the terminal, one line of input per event.

    Args:
        config: Loaded configuration
        seed: Random seed
    """
    engine = GameEngine(seed=seed)
    renderer = Renderer()
    tick_ms = float(config['game']['tick_ms'])

    print("\n" + "=" * 60)
    print("TETRIS - Manual Play")
    print("=" * 60)
    print("\nControls:")
    print("  a / s     rotate counter-clockwise / clockwise")
    print("  j / k     move left / right")
    print("  t <ms>    let time pass (Enter alone ticks once)")
    print("  n         new game")
    print("  q         quit")
    print("=" * 60 + "\n")

    while True:
        clear_screen()
        print(renderer.render_game_state(engine.model))

        if engine.is_game_over():
            print("\n*** GAME OVER! ***")
            print(f"Final Score: {engine.score:,}")
            print(f"Lines: {engine.model.lines_cleared}")

        user_input = input("\n> ").strip().lower()

        if user_input == 'q':
            print("Thanks for playing!")
            break
        elif user_input == 'n':
            engine.reset()
        elif user_input == '':
            engine.tick(tick_ms)
        elif user_input.startswith('t'):
            parts = user_input.split()
            try:
                elapsed = float(parts[1]) if len(parts) > 1 else tick_ms
                if elapsed < 0:
                    raise ValueError(elapsed)
            except ValueError:
                print("Invalid input. Use format: t <milliseconds>")
                time.sleep(1)
                continue
            engine.tick(elapsed)
        else:
            engine.press(user_input)


def watch_random(config: Dict[str, Any], seed: int = 42, delay: float = 0.05) -> None:
    """
    Watch a random player.

    Args:
        config: Loaded configuration
        seed: Random seed
        delay: Seconds between frames
    """
    engine = GameEngine(seed=seed)
    renderer = Renderer()
    tick_ms = float(config['game']['tick_ms'])

    while not engine.is_game_over():
        key = RANDOM_KEYS[engine.rng.integers(len(RANDOM_KEYS))]
        if key:
            engine.press(key)
        engine.tick(tick_ms)

        clear_screen()
        print(renderer.render_game_state(engine.model, title="Random player"))
        time.sleep(delay)

    print(f"\nFinal Score: {engine.score:,}")


def play_random(config: Dict[str, Any], num_games: int = 10, seed: int = 42) -> None:
    """
    Play random games, log each one and show statistics.

    Args:
        config: Loaded configuration
        num_games: Number of games to play
        seed: Seed of the first game; game i uses seed + i
    """
    log_config = config['logging']
    log_interval = max(1, int(log_config['log_interval']))
    logger = GameLogger(log_config['log_dir'], "random_games")
    recent = RollingStats(window=log_interval)

    print(f"\nPlaying {num_games} random games...")

    for i in range(num_games):
        stats = play_random_game(seed=seed + i, tick_ms=float(config['game']['tick_ms']))
        record = logger.log_game(stats, seed=seed + i)
        recent.add_game(stats)

        print(f"Game {record['game']}: Score={stats['score']:,}, "
              f"Pieces={stats['pieces_placed']}, "
              f"Lines={stats['lines_cleared']}")

        if record['game'] % log_interval == 0:
            print(f"  last {len(recent.values['score'])}: {recent.progress_line()}")

    summary = logger.summary()
    summary_file = logger.save_summary()
    fields = summary['fields']

    print("\n" + "=" * 60)
    print("RANDOM PLAYER STATISTICS")
    print("=" * 60)
    print(f"Games: {summary['games']}")
    if fields:
        print(f"Mean Score: {fields['score']['mean']:.1f} ± {fields['score']['std']:.1f}")
        print(f"Best Score: {summary['best_score']:,} (game {summary['best_game']})")
        print(f"Mean Pieces: {fields['pieces_placed']['mean']:.1f}")
        print(f"Mean Lines: {fields['lines_cleared']['mean']:.1f}")
    print(f"Log: {logger.log_file}")
    print(f"Summary: {summary_file}")
    print("=" * 60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Play Tetris")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["manual", "watch", "random"],
        default="manual",
        help="Play mode: play manually, watch a random player, or run random games"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: config/default.yaml if present)"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=None,
        help="Number of games for random mode"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Delay between frames (seconds) for watch mode"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed"
    )

    args = parser.parse_args()

    if args.config is not None:
        if not os.path.exists(args.config):
            print(f"Config file not found: {args.config}")
            sys.exit(1)
        config = load_config(args.config)
    else:
        default_path = Path(__file__).parent.parent / "config" / "default.yaml"
        config = load_config(default_path if default_path.exists() else None)

    seed = args.seed if args.seed is not None else config['game']['seed']

    if args.mode == "manual":
        play_manual(config, seed=seed)

    elif args.mode == "watch":
        delay = args.delay if args.delay is not None else config['play']['delay']
        watch_random(config, seed=seed, delay=delay)

    elif args.mode == "random":
        games = args.games if args.games is not None else config['play']['games']
        play_random(config, num_games=games, seed=seed)


if __name__ == "__main__":
    main()
