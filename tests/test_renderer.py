"""
Tests for the ASCII renderer.
"""
import pytest
import numpy as np
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tetris.board import Board
from tetris.engine import GameStatus, Model, spawn_piece
from tetris.renderer import Renderer


class TestRenderCell:
    """Test single cell rendering."""

    def test_empty(self):
        assert Renderer().render_cell(0) == Renderer.EMPTY

    @pytest.mark.parametrize("value,letter", [
        (1, "I"), (2, "T"), (3, "S"), (4, "Z"), (5, "J"), (6, "L"), (7, "O"),
    ])
    def test_piece_letters(self, value, letter):
        assert Renderer().render_cell(value) == letter

    def test_grayed_after_game_over(self):
        renderer = Renderer()
        assert renderer.render_cell(3, GameStatus.GAME_OVER) == Renderer.GRAYED
        assert renderer.render_cell(0, GameStatus.GAME_OVER) == Renderer.EMPTY


class TestRenderBoard:
    """Test board rendering."""

    def test_dimensions(self):
        text = Renderer().render_board(Board(), show_coords=False)
        lines = text.split("\n")
        assert len(lines) == 20
        assert all(len(line.split(" ")) == 10 for line in lines)

    def test_coordinates(self):
        text = Renderer().render_board(Board())
        assert text.split("\n")[0].strip() == "0 1 2 3 4 5 6 7 8 9"
        assert "19|" in text

    def test_active_piece_shown(self):
        model = spawn_piece(7, Model())
        row0 = Renderer().render_board(model.board, show_coords=False).split("\n")[0]
        assert row0 == "· · · · O O · · · ·"

    def test_game_over_stack(self):
        grid = np.zeros((20, 10), dtype=np.int8)
        grid[19, :5] = 2
        text = Renderer().render_board(Board(grid), GameStatus.GAME_OVER, show_coords=False)
        assert text.split("\n")[-1] == "▒ ▒ ▒ ▒ ▒ · · · · ·"
        assert "T" not in text


class TestRenderGameState:
    """Test full game state rendering."""

    def test_header(self):
        model = replace(spawn_piece(1, Model()), score=1234, lines_cleared=5)
        text = Renderer().render_game_state(model, title="Test")
        assert "Test" in text
        assert "Score: 1,234" in text
        assert "Level: 0" in text
        assert "Lines: 5" in text
        assert "Status: falling" in text

    def test_game_over_status(self):
        model = replace(spawn_piece(1, Model()), status=GameStatus.GAME_OVER)
        text = Renderer().render_game_state(model)
        assert "Status: game_over" in text
        assert "▒" in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
