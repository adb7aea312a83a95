"""
Batched Tetris environments and factories.

VectorizedTetrisEnv keeps one TetrisEnv per slot and advances every slot with
a single call. A slot whose game ends is restarted in place; its last
observation and final score travel in that slot's info dict.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import numpy as np

from .tetris_env import TetrisEnv

Observation = Dict[str, np.ndarray]


def _slot_seed(seed: Optional[int], slot: int) -> Optional[int]:
    return seed + slot if seed is not None else None


def stack_observations(observations: Iterable[Observation]) -> Observation:
    """Turn per-slot observations into (num_envs, 20, 10) planes."""
    observations = list(observations)
    return {
        key: np.stack([obs[key] for obs in observations])
        for key in ('board', 'piece')
    }


class VectorizedTetrisEnv:
    """Lockstep batch of Tetris games."""

    def __init__(
        self,
        num_envs: int,
        seed: Optional[int] = None,
        reward_config: Optional[Dict[str, float]] = None,
        tick_ms: float = 100.0,
    ):
        self.num_envs = num_envs
        self.envs = [
            make_env(seed=_slot_seed(seed, i), reward_config=reward_config, tick_ms=tick_ms)
            for i in range(num_envs)
        ]
        self.observation_space = self.envs[0].observation_space
        self.action_space = self.envs[0].action_space

    def reset(self, seed: Optional[int] = None) -> Tuple[Observation, List[Dict[str, Any]]]:
        """Start a new game in every slot; slot i is seeded with seed + i."""
        results = [env.reset(seed=_slot_seed(seed, i)) for i, env in enumerate(self.envs)]
        observations, infos = zip(*results)
        return stack_observations(observations), list(infos)

    def step(
        self, actions: Sequence[int]
    ) -> Tuple[Observation, np.ndarray, np.ndarray, np.ndarray, List[Dict[str, Any]]]:
        """
        Advance every slot by one action.

        Args:
            actions: One action index per slot

        Returns:
            Tuple of (observations, rewards, terminated, truncated, infos),
            each batched over the slots
        """
        if len(actions) != self.num_envs:
            raise ValueError(f"Expected {self.num_envs} actions, got {len(actions)}")

        observations = []
        infos = []
        rewards = np.zeros(self.num_envs, dtype=np.float32)
        terminated = np.zeros(self.num_envs, dtype=bool)
        truncated = np.zeros(self.num_envs, dtype=bool)

        for i, env in enumerate(self.envs):
            obs, rewards[i], terminated[i], truncated[i], info = env.step(int(actions[i]))
            if terminated[i] or truncated[i]:
                info['terminal_observation'] = obs
                info['final_score'] = info['score']
                # Unseeded, so the slot's generator moves on to a fresh game
                obs, _ = env.reset()
            observations.append(obs)
            infos.append(info)

        return stack_observations(observations), rewards, terminated, truncated, infos

    def sample_actions(self) -> np.ndarray:
        return np.array([env.sample_action() for env in self.envs])

    def close(self) -> None:
        for env in self.envs:
            env.close()


def make_env(
    seed: Optional[int] = None,
    reward_config: Optional[Dict[str, float]] = None,
    tick_ms: float = 100.0,
    max_episode_steps: int = 10000,
    render_mode: Optional[str] = None,
) -> TetrisEnv:
    """Create a single environment."""
    return TetrisEnv(
        render_mode=render_mode,
        reward_config=reward_config,
        tick_ms=tick_ms,
        max_episode_steps=max_episode_steps,
        seed=seed,
    )


def make_env_from_config(config: Dict[str, Any], seed: Optional[int] = None) -> TetrisEnv:
    """Create an environment from the 'environment' section of a config."""
    env_config = config.get('environment', {})
    return make_env(
        seed=seed,
        reward_config=env_config.get('rewards'),
        tick_ms=env_config.get('tick_ms', 100.0),
        max_episode_steps=env_config.get('max_episode_steps', 10000),
    )


def make_vec_env(
    num_envs: int,
    seed: Optional[int] = None,
    reward_config: Optional[Dict[str, float]] = None,
    tick_ms: float = 100.0,
) -> VectorizedTetrisEnv:
    """Create a batch of num_envs environments seeded seed, seed + 1, ..."""
    return VectorizedTetrisEnv(num_envs, seed=seed, reward_config=reward_config, tick_ms=tick_ms)
