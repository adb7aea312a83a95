"""
Tetris Board Renderer.

Provides visualization utilities for the game board.
"""
from typing import Optional

from .board import Board
from .engine import GameStatus, Model
from .pieces import get_piece


class Renderer:
    """
    ASCII renderer for the game.

    Occupied cells show the letter of the piece that placed them; after
    game over every occupied cell is grayed out.
    """

    EMPTY = "·"
    GRAYED = "▒"

    def render_cell(self, value: int, status: GameStatus = GameStatus.FALLING) -> str:
        """Render one cell value."""
        if value == Board.EMPTY:
            return self.EMPTY
        if status == GameStatus.GAME_OVER:
            return self.GRAYED
        return get_piece(value).name[:1]

    def render_board(
        self,
        board: Board,
        status: GameStatus = GameStatus.FALLING,
        show_coords: bool = True,
    ) -> str:
        """
        Render the board as ASCII art.

        Args:
            board: The board to render
            status: Game status (GAME_OVER grays out the stack)
            show_coords: Whether to show row/column numbers

        Returns:
            String representation of the board
        """
        lines = []

        if show_coords:
            lines.append("   " + " ".join(str(i) for i in range(Board.COLS)))
            lines.append("   " + "-" * (Board.COLS * 2 - 1))

        for row in range(Board.ROWS):
            cells = " ".join(
                self.render_cell(board.get_cell(row, col), status)
                for col in range(Board.COLS)
            )
            lines.append(f"{row:2d}|{cells}" if show_coords else cells)

        if show_coords:
            lines.append("   " + "-" * (Board.COLS * 2 - 1))

        return "\n".join(lines)

    def render_game_state(self, model: Model, title: Optional[str] = None) -> str:
        """
        Render complete game state.

        Args:
            model: The game model
            title: Optional heading line

        Returns:
            Complete game state visualization
        """
        lines = []
        lines.append("=" * 40)
        if title:
            lines.append(title)
        lines.append(f"Score: {model.score:,}  |  Level: {model.level}  |  "
                     f"Lines: {model.lines_cleared}")
        lines.append(f"Status: {model.status.value}")
        lines.append("=" * 40)
        lines.append("")
        lines.append(self.render_board(model.board, model.status))
        lines.append("=" * 40)

        return "\n".join(lines)


def clear_screen():
    """Clear the terminal screen."""
    print("\033[2J\033[H", end="")


if __name__ == "__main__":
    from .engine import GameEngine

    engine = GameEngine(seed=42)
    for _ in range(30):
        engine.tick(1000.0)

    renderer = Renderer()
    print(renderer.render_game_state(engine.model))
