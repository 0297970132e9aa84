import matplotlib

matplotlib.use("Agg")

import pytest

from arcade_ai import (
    ConfigProvider,
    MinesweeperSnapshot,
    Position,
    SnakeSnapshot,
    TetrisSnapshot,
)


@pytest.fixture
def config():
    return ConfigProvider()


@pytest.fixture
def make_minesweeper():
    """Build a snapshot from lists of revealed/flagged cells and mines."""

    def build(width, height, mines, revealed=(), flagged=()):
        revealed = {Position(*p) for p in revealed}
        flagged = {Position(*p) for p in flagged}
        return MinesweeperSnapshot(
            revealed=[[Position(x, y) in revealed for x in range(width)] for y in range(height)],
            flagged=[[Position(x, y) in flagged for x in range(width)] for y in range(height)],
            mine_positions=frozenset(Position(*m) for m in mines),
        )

    return build


@pytest.fixture
def snake_scenario():
    """Three-segment snake heading right with food far down-right."""
    return SnakeSnapshot(
        body=(Position(5, 5), Position(4, 5), Position(3, 5)),
        food=Position(10, 10),
        direction="right",
        width=20,
        height=20,
    )


@pytest.fixture
def empty_tetris():
    return TetrisSnapshot(board=[[0] * 10 for _ in range(20)], piece="I")
