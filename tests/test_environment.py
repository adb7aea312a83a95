"""
Tests for the Gymnasium environment.
"""
import pytest
import numpy as np
import gymnasium as gym
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from environment.tetris_env import TetrisEnv
from environment.wrappers import (
    VectorizedTetrisEnv, make_env, make_env_from_config, make_vec_env, stack_observations,
)
from utils.config import load_config


class TestEnvironmentCreation:
    """Test environment creation."""

    def test_create_env(self):
        env = TetrisEnv()
        assert env.ACTIONS == ("", "a", "s", "j", "k")
        assert env.tick_ms == 100.0

    def test_observation_space(self):
        env = TetrisEnv()
        assert 'board' in env.observation_space.spaces
        assert 'piece' in env.observation_space.spaces
        assert env.observation_space['board'].shape == (20, 10)

    def test_action_space(self):
        env = TetrisEnv()
        assert env.action_space.n == 5

    def test_custom_rewards_merge(self):
        env = TetrisEnv(reward_config={'line_clear': 5.0})
        assert env.reward_config['line_clear'] == 5.0
        assert env.reward_config['game_over_penalty'] == -10.0

    def test_registered(self):
        env = gym.make("Tetris-v0")
        obs, _ = env.reset(seed=0)
        assert obs['board'].shape == (20, 10)
        env.close()


class TestEnvironmentReset:
    """Test environment reset."""

    def test_reset_observation(self):
        env = TetrisEnv()
        obs, info = env.reset(seed=42)

        assert obs['board'].shape == (20, 10)
        assert obs['piece'].shape == (20, 10)
        assert obs['board'].dtype == np.float32
        assert isinstance(info, dict)
        assert info['steps'] == 0

    def test_active_piece_visible(self):
        """The spawned piece shows up in both planes."""
        env = TetrisEnv()
        obs, _ = env.reset(seed=42)
        assert obs['piece'].sum() == 4
        assert obs['board'].sum() == 4
        assert np.all(obs['board'][obs['piece'] == 1] == 1)

    def test_reset_with_seed(self):
        env = TetrisEnv()
        obs1, _ = env.reset(seed=42)
        obs2, _ = env.reset(seed=42)
        assert np.array_equal(obs1['piece'], obs2['piece'])

    @staticmethod
    def _piece_sequence(env, steps=200):
        """Active piece id after each of a run of no-op steps."""
        ids = []
        for _ in range(steps):
            env.step(0)
            active = env.engine.model.active
            ids.append(active.piece_id if active is not None else 0)
        return ids

    def test_unseeded_reset_draws_new_pieces(self):
        """Without a seed, a reset keeps drawing from the same generator."""
        env = TetrisEnv(seed=5, tick_ms=2000.0)
        env.reset()
        first = self._piece_sequence(env)
        env.reset()
        second = self._piece_sequence(env)
        assert first != second

    def test_seeded_reset_replays_pieces(self):
        env = TetrisEnv(tick_ms=2000.0)
        env.reset(seed=5)
        first = self._piece_sequence(env)
        env.reset(seed=5)
        second = self._piece_sequence(env)
        assert first == second

    def test_reset_clears_game(self):
        env = TetrisEnv(tick_ms=1000.0)
        env.reset(seed=3)
        for _ in range(60):
            env.step(0)
        _, info = env.reset(seed=3)
        assert info['score'] == 0
        assert info['pieces_placed'] == 1


class TestEnvironmentStep:
    """Test environment step."""

    def test_step_returns(self):
        env = TetrisEnv()
        env.reset(seed=42)
        obs, reward, terminated, truncated, info = env.step(0)

        assert 'board' in obs
        assert isinstance(reward, float)
        assert not terminated
        assert not truncated
        assert info['steps'] == 1
        assert 'last_step' in info

    def test_noop_reward_is_survival_bonus(self):
        env = TetrisEnv()
        env.reset(seed=42)
        _, reward, _, _, _ = env.step(0)
        assert reward == pytest.approx(0.001)

    def test_move_action(self):
        env = TetrisEnv(tick_ms=1.0)
        env.reset(seed=42)
        before = env.engine.model.active.anchor
        env.step(4)
        assert env.engine.model.active.anchor == (before[0], before[1] + 1)

    def test_piece_falls_with_time(self):
        env = TetrisEnv(tick_ms=1000.0)
        env.reset(seed=42)
        env.step(0)
        assert env.engine.model.active.anchor[0] == 1

    def test_episode_terminates(self):
        env = TetrisEnv(tick_ms=1000.0, seed=7)
        env.reset(seed=7)

        terminated = truncated = False
        steps = 0
        while not (terminated or truncated):
            _, reward, terminated, truncated, info = env.step(env.sample_action())
            steps += 1

        assert terminated
        assert info['status'] == "game_over"
        assert info['steps'] == steps

    def test_truncation(self):
        env = TetrisEnv(max_episode_steps=3)
        env.reset(seed=42)
        results = [env.step(0) for _ in range(3)]
        assert not results[1][3]
        assert results[2][3]
        assert not results[2][2]

    def test_deterministic_episode(self):
        rewards = []
        for _ in range(2):
            env = TetrisEnv(tick_ms=1000.0)
            env.reset(seed=11)
            total = 0.0
            for action in [0, 1, 3, 4, 2] * 20:
                _, reward, terminated, _, _ = env.step(action)
                total += reward
                if terminated:
                    break
            rewards.append(total)
        assert rewards[0] == rewards[1]


class TestRendering:
    """Test rendering."""

    def test_ansi(self):
        env = TetrisEnv(render_mode="ansi")
        env.reset(seed=42)
        text = env.render()
        assert "Score" in text
        assert "Status: falling" in text

    def test_no_render_mode(self):
        env = TetrisEnv()
        env.reset(seed=42)
        assert env.render() is None


class TestVectorizedEnv:
    """Test vectorized environment."""

    def test_create(self):
        vec_env = VectorizedTetrisEnv(num_envs=4, seed=42)
        assert vec_env.num_envs == 4
        assert len(vec_env.envs) == 4

    def test_reset(self):
        vec_env = VectorizedTetrisEnv(num_envs=4, seed=42)
        obs, infos = vec_env.reset(seed=42)
        assert obs['board'].shape == (4, 20, 10)
        assert obs['piece'].shape == (4, 20, 10)
        assert len(infos) == 4

    def test_step(self):
        vec_env = VectorizedTetrisEnv(num_envs=3, seed=42)
        vec_env.reset(seed=42)
        obs, rewards, terminated, truncated, infos = vec_env.step(vec_env.sample_actions())

        assert obs['board'].shape == (3, 20, 10)
        assert rewards.shape == (3,)
        assert terminated.dtype == bool
        assert truncated.shape == (3,)
        assert len(infos) == 3

    def test_auto_reset(self):
        vec_env = VectorizedTetrisEnv(num_envs=2, seed=1, tick_ms=1000.0)
        vec_env.reset(seed=1)
        for _ in range(5000):
            _, _, terminated, _, infos = vec_env.step(vec_env.sample_actions())
            if terminated.any():
                index = int(np.argmax(terminated))
                assert 'terminal_observation' in infos[index]
                assert 'final_score' in infos[index]
                assert vec_env.envs[index].engine.model.pieces_placed == 1
                break
        else:
            pytest.fail("no episode finished")

    def test_wrong_action_count(self):
        vec_env = VectorizedTetrisEnv(num_envs=2, seed=0)
        vec_env.reset(seed=0)
        with pytest.raises(ValueError):
            vec_env.step(np.zeros(3, dtype=int))

    def test_stack_observations(self):
        env = TetrisEnv()
        obs, _ = env.reset(seed=0)
        stacked = stack_observations([obs, obs, obs])
        assert stacked['board'].shape == (3, 20, 10)
        assert np.array_equal(stacked['piece'][2], obs['piece'])

    def test_make_vec_env(self):
        vec_env = make_vec_env(num_envs=2, seed=0)
        assert isinstance(vec_env, VectorizedTetrisEnv)
        vec_env.close()


class TestFactories:
    """Test environment factories."""

    def test_make_env(self):
        env = make_env(seed=1, tick_ms=250.0, max_episode_steps=50)
        assert isinstance(env, TetrisEnv)
        assert env.tick_ms == 250.0
        assert env.max_episode_steps == 50

    def test_make_env_from_config(self):
        config = load_config()
        config['environment']['tick_ms'] = 500.0
        config['environment']['rewards']['hole_penalty'] = -1.0
        env = make_env_from_config(config, seed=2)
        assert env.tick_ms == 500.0
        assert env.reward_config['hole_penalty'] == -1.0
        assert env.max_episode_steps == 10000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
