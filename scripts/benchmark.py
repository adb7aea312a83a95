"""
Throughput benchmarks for the Tetris engine and environments.

Engine: random games per second and ticks per second.
Environment: single and batched Gymnasium steps per second.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict
import numpy as np
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def timed(label: str, iterations: int, body: Callable[[int], None]) -> float:
    """Run body(i) for every iteration under a progress bar; return seconds."""
    start = time.perf_counter()
    for i in tqdm(range(iterations), desc=label):
        body(i)
    return time.perf_counter() - start


def benchmark_engine(num_games: int = 100, seed: int = 42, tick_ms: float = 1000.0) -> Dict[str, Any]:
    """Play random games back to back and count ticks."""
    from tetris.engine import play_random_game

    totals = {'ticks': 0, 'pieces_placed': 0, 'lines_cleared': 0}

    def play(i: int) -> None:
        stats = play_random_game(seed=seed + i, tick_ms=tick_ms)
        for key in totals:
            totals[key] += stats[key]

    elapsed = timed("Engine", num_games, play)
    return {
        'games': num_games,
        'ticks': totals['ticks'],
        'seconds': elapsed,
        'ticks_per_second': totals['ticks'] / elapsed,
        'games_per_second': num_games / elapsed,
        'pieces_per_game': totals['pieces_placed'] / num_games,
        'lines_per_game': totals['lines_cleared'] / num_games,
    }


def benchmark_environment(num_steps: int = 50000, seed: int = 42, tick_ms: float = 100.0) -> Dict[str, Any]:
    """Step one environment with random actions, resetting on game over."""
    from environment.wrappers import make_env

    env = make_env(seed=seed, tick_ms=tick_ms)
    env.reset(seed=seed)
    finished = [0]

    def step(_: int) -> None:
        _, _, terminated, truncated, _ = env.step(env.sample_action())
        if terminated or truncated:
            finished[0] += 1
            env.reset()

    elapsed = timed("Environment", num_steps, step)
    env.close()
    return {
        'steps': num_steps,
        'episodes': finished[0],
        'seconds': elapsed,
        'steps_per_second': num_steps / elapsed,
        'steps_per_episode': num_steps / finished[0] if finished[0] else float('nan'),
    }


def benchmark_vectorized_env(num_envs: int = 16, num_steps: int = 2000, seed: int = 42) -> Dict[str, Any]:
    """Step a batch of environments in lockstep."""
    from environment.wrappers import make_vec_env

    vec_env = make_vec_env(num_envs, seed=seed)
    vec_env.reset(seed=seed)
    finished = [0]

    def step(_: int) -> None:
        _, _, terminated, truncated, _ = vec_env.step(vec_env.sample_actions())
        finished[0] += int(np.count_nonzero(terminated | truncated))

    elapsed = timed(f"Vectorized x{num_envs}", num_steps, step)
    vec_env.close()
    return {
        'envs': num_envs,
        'steps': num_steps * num_envs,
        'episodes': finished[0],
        'seconds': elapsed,
        'steps_per_second': num_steps * num_envs / elapsed,
    }


def print_results(title: str, results: Dict[str, Any]) -> None:
    print(f"\n{title}")
    print("-" * 40)
    for key, value in results.items():
        shown = f"{value:,.2f}" if isinstance(value, float) else f"{value:,}"
        print(f"  {key:<20}{shown:>16}")


BENCHMARKS = {
    'engine': ("Game engine", lambda args: benchmark_engine(num_games=args.games, seed=args.seed)),
    'env': ("Environment", lambda args: benchmark_environment(seed=args.seed)),
    'vec_env': ("Vectorized environment", lambda args: benchmark_vectorized_env(seed=args.seed)),
}


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Benchmark Tetris")
    parser.add_argument("--engine", action="store_true", help="Benchmark the game engine")
    parser.add_argument("--env", action="store_true", help="Benchmark the environment")
    parser.add_argument("--vec-env", action="store_true", help="Benchmark the vectorized environment")
    parser.add_argument("--all", action="store_true", help="Run every benchmark")
    parser.add_argument("--games", type=int, default=100, help="Games for the engine benchmark")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    selected = [name for name in BENCHMARKS if args.all or getattr(args, name)]
    if not selected:
        print("No benchmark selected. Use --all to run all benchmarks.")
        parser.print_help()
        return

    for name in selected:
        title, run = BENCHMARKS[name]
        print_results(title, run(args))


if __name__ == "__main__":
    main()
