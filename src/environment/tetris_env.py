"""
Tetris Gymnasium Environment.

This module provides a Gymnasium-compatible environment around the game
engine, so agents can play through the same tick/key interface a human uses.
"""
from typing import Dict, Tuple, Any, Optional
import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetris.board import Board
from tetris.engine import GameEngine
from tetris.renderer import Renderer


class TetrisEnv(gym.Env):
    """
    Gymnasium environment for Tetris.

    Observation Space:
        Dictionary with:
        - 'board': (20, 10) float32 array, 0=empty, 1=filled (includes the active piece)
        - 'piece': (20, 10) float32 array, cells of the active piece

    Action Space:
        Discrete(5) - no-op, rotate CCW, rotate CW, move left, move right.
        Each step presses the key and then advances the clock by tick_ms.
    """

    metadata = {"render_modes": ["human", "ansi"]}

    ACTIONS = ("", "a", "s", "j", "k")

    def __init__(
        self,
        render_mode: Optional[str] = None,
        reward_config: Optional[Dict[str, float]] = None,
        tick_ms: float = 100.0,
        max_episode_steps: int = 10000,
        seed: Optional[int] = None,
    ):
        """
        Initialize the Tetris environment.

        Args:
            render_mode: 'human' for console output, 'ansi' for string return
            reward_config: Custom reward configuration
            tick_ms: Milliseconds of game time per step
            max_episode_steps: Truncate episodes after this many steps
            seed: Random seed for reproducibility
        """
        super().__init__()

        self.render_mode = render_mode
        self.tick_ms = tick_ms
        self.max_episode_steps = max_episode_steps

        self.reward_config = {
            'score_scale': 1.0,
            'line_clear': 1.0,
            'game_over_penalty': -10.0,
            'survival_bonus': 0.001,
            'hole_penalty': -0.05,
        }
        if reward_config:
            self.reward_config.update(reward_config)

        self.engine = GameEngine(seed=seed)
        self.renderer = Renderer()

        shape = (Board.ROWS, Board.COLS)
        self.observation_space = spaces.Dict({
            'board': spaces.Box(low=0.0, high=1.0, shape=shape, dtype=np.float32),
            'piece': spaces.Box(low=0.0, high=1.0, shape=shape, dtype=np.float32),
        })
        self.action_space = spaces.Discrete(len(self.ACTIONS))

        self._steps = 0
        self._prev_holes = 0

    def _get_observation(self) -> Dict[str, np.ndarray]:
        """Get the current observation."""
        model = self.engine.model
        piece = np.zeros((Board.ROWS, Board.COLS), dtype=np.float32)
        if model.active is not None:
            for row, col in model.active.cells():
                if model.board.in_bounds(row, col):
                    piece[row, col] = 1.0

        return {
            'board': model.board.to_tensor(),
            'piece': piece,
        }

    def _calculate_reward(self, score_gained: int, lines: int, terminated: bool) -> float:
        """
        Calculate reward for a step.

        Args:
            score_gained: Score earned during the step
            lines: Rows cleared during the step
            terminated: Whether the game ended

        Returns:
            Reward value
        """
        reward = self.reward_config['survival_bonus']
        reward += score_gained * self.reward_config['score_scale']
        reward += lines * self.reward_config['line_clear']

        current_holes = self.engine.board.count_holes()
        hole_delta = current_holes - self._prev_holes
        if hole_delta > 0:
            reward += hole_delta * self.reward_config['hole_penalty']
        self._prev_holes = current_holes

        if terminated:
            reward += self.reward_config['game_over_penalty']

        return reward

    def reset(
        self,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment to initial state.

        Args:
            seed: Reseed the piece generator; None keeps drawing from it
            options: Additional options (unused)

        Returns:
            Tuple of (observation, info)
        """
        super().reset(seed=seed)

        self.engine.reset(seed=seed)
        self._steps = 0
        self._prev_holes = 0

        return self._get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Take a step in the environment.

        Args:
            action: Action index (0-4)

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        before = self.engine.model

        key = self.ACTIONS[int(action)]
        if key:
            self.engine.press(key)
        self.engine.tick(self.tick_ms)
        self._steps += 1

        after = self.engine.model
        score_gained = after.score - before.score
        lines = after.lines_cleared - before.lines_cleared

        terminated = self.engine.is_game_over()
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = self._calculate_reward(score_gained, lines, terminated)

        observation = self._get_observation()
        info = self._get_info()
        info['last_step'] = {
            'score_gained': score_gained,
            'lines_cleared': lines,
        }

        if self.render_mode == "human":
            self.render()

        return observation, reward, terminated, truncated, info

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary."""
        info = self.engine.get_statistics()
        info['steps'] = self._steps
        return info

    def render(self) -> Optional[str]:
        """Render the current game state."""
        text = self.renderer.render_game_state(self.engine.model)
        if self.render_mode == "ansi":
            return text
        elif self.render_mode == "human":
            print("\033[2J\033[H")  # Clear screen
            print(text)
        return None

    def close(self) -> None:
        """Clean up resources."""
        pass

    def sample_action(self) -> int:
        """Sample a random action from the environment's generator."""
        return int(self.np_random.integers(len(self.ACTIONS)))


gym.register(
    id='Tetris-v0',
    entry_point='environment.tetris_env:TetrisEnv',
)


if __name__ == "__main__":
    print("Testing TetrisEnv...")
    env = TetrisEnv(render_mode="ansi", tick_ms=250.0)

    obs, info = env.reset(seed=42)
    print(f"Initial observation shapes:")
    print(f"  board: {obs['board'].shape}")
    print(f"  piece: {obs['piece'].shape}")

    total_reward = 0.0
    done = False
    while not done:
        obs, reward, terminated, truncated, info = env.step(env.sample_action())
        total_reward += reward
        done = terminated or truncated

    print(env.render())
    print(f"\nGame over after {info['steps']} steps")
    print(f"Final score: {info['score']}")
    print(f"Total reward: {total_reward:.2f}")
    env.close()
