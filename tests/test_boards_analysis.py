import random

import matplotlib.pyplot as plt
import pytest

from arcade_ai import (
    MinesweeperAssistant,
    MinesweeperBoard,
    Position,
    format_minesweeper_knowledge,
    plot_benchmark_summary,
    random_snake_snapshot,
    random_tetris_snapshot,
    run_assistant_benchmark,
    run_minesweeper_many_games,
    run_minesweeper_single_game,
)
from arcade_ai.types import RISK_LEVELS
from arcade_ai.utils import get_neighborhoods, manhattan_distance


class TestMinesweeperBoard:
    """Mine placement, reveals and flags on the playable board."""

    @pytest.mark.parametrize("seed", range(5))
    def test_first_click_neighborhood_is_safe(self, seed):
        board = MinesweeperBoard(9, 9, 10, rng=random.Random(seed))
        first = Position(4, 4)
        assert board.reveal(first) == 0
        assert len(board.mines) == 10
        assert first not in board.mines
        assert not set(get_neighborhoods(9, 9)[first]) & board.mines

    def test_first_action_rule_keeps_only_the_cell(self):
        board = MinesweeperBoard(3, 3, 8, mines_generation_algorithm="safe_first_action_rule",
                                 rng=random.Random(0))
        assert board.reveal(Position(1, 1)) == 1
        assert Position(1, 1) not in board.mines

    @pytest.mark.parametrize("args", [
        (0, 5, 1),
        (5, 5, -1),
        (3, 3, 1),
    ])
    def test_invalid_arguments(self, args):
        with pytest.raises(ValueError):
            MinesweeperBoard(*args)

    def test_unknown_rule(self):
        with pytest.raises(ValueError):
            MinesweeperBoard(5, 5, 1, mines_generation_algorithm="anything")

    def test_out_of_bounds_reveal(self):
        with pytest.raises(ValueError):
            MinesweeperBoard(5, 5, 1).reveal(Position(5, 0))

    def test_flags_block_reveals(self):
        board = MinesweeperBoard(5, 5, 3, rng=random.Random(1))
        board.reveal(Position(0, 0))
        hidden = next(
            Position(x, y) for y in range(5) for x in range(5) if not board.revealed[y][x]
        )
        board.toggle_flag(hidden)
        assert board.reveal(hidden) == 0
        assert not board.revealed[hidden.y][hidden.x]
        board.toggle_flag(hidden)
        assert not board.flagged[hidden.y][hidden.x]

    def test_hitting_a_mine(self):
        # 15 of the 16 border cells are mines, so the first click cannot win
        board = MinesweeperBoard(5, 5, 15, rng=random.Random(2))
        assert board.reveal(Position(2, 2)) == 0
        mine = next(iter(board.mines))
        assert board.reveal(mine) == -1
        assert board.game_over


class TestSnapshotFactories:
    """Random snapshots used by tests and benchmarks."""

    @pytest.mark.parametrize("seed", range(10))
    def test_snake_is_contiguous(self, seed):
        rng = random.Random(seed)
        snap = random_snake_snapshot(8, 8, 20, rng)
        assert len(set(snap.body)) == len(snap.body)
        for a, b in zip(snap.body, snap.body[1:]):
            assert manhattan_distance(a, b) == 1
        assert snap.food not in snap.body
        if len(snap.body) > 1:
            neck, head = snap.body[1], snap.body[0]
            assert (head.x - neck.x, head.y - neck.y) == {
                "up": (0, -1), "down": (0, 1), "left": (-1, 0), "right": (1, 0)
            }[snap.direction]

    @pytest.mark.parametrize("seed", range(10))
    def test_tetris_has_no_full_rows(self, seed):
        snap = random_tetris_snapshot(random.Random(seed))
        assert snap.width == 10 and snap.height == 20
        assert not any(all(row) for row in snap.board)


class TestKnowledgeFormat:
    """Text rendering of what the assistant knows."""

    def test_symbols(self, make_minesweeper):
        snap = make_minesweeper(3, 1, mines=[(2, 0)], revealed=[(0, 0), (1, 0)])
        assistant = MinesweeperAssistant()
        assistant.analyze_game_state(snap)
        text = format_minesweeper_knowledge(snap, assistant.cell_analyses, show_coords=False)
        assert text == " 0  1  *"

    def test_board_wide_estimate_is_not_marked_safe(self, make_minesweeper):
        # the wrong flag leaves zero mines for the one cell no clue constrains
        snap = make_minesweeper(3, 1, mines=[], revealed=[(1, 0)], flagged=[(0, 0)])
        assistant = MinesweeperAssistant()
        assistant.analyze_game_state(snap)
        assert assistant.cell_probabilities == {Position(2, 0): 0.0}
        text = format_minesweeper_knowledge(snap, assistant.cell_analyses, show_coords=False)
        assert text == " F  0  ."

    def test_flags_and_unknowns(self, make_minesweeper):
        snap = make_minesweeper(3, 1, mines=[(2, 0)], revealed=[(1, 0)], flagged=[(2, 0)])
        text = format_minesweeper_knowledge(snap, show_coords=False)
        assert text == " .  1  F"

    def test_coordinates(self, make_minesweeper):
        snap = make_minesweeper(2, 2, mines=[], revealed=[(0, 0)])
        lines = format_minesweeper_knowledge(snap).split("\n")
        assert lines[0] == "    0  1"
        assert lines[2].startswith(" 0 |")
        assert len(lines) == 4


class TestSelfPlay:
    """Minesweeper self-play statistics."""

    def test_single_game(self):
        payload = run_minesweeper_single_game(6, 6, 4, seed=3)
        assert payload["status"] in (-1.0, 0.0, 1.0)
        assert payload["reveal_moves_count"] >= 1
        assert payload["revealed_cells_count"] >= 1

    def test_single_game_is_reproducible(self):
        assert run_minesweeper_single_game(8, 8, 10, seed=5) == run_minesweeper_single_game(
            8, 8, 10, seed=5
        )

    def test_many_games(self):
        out = run_minesweeper_many_games(6, 6, 4, 5, seed=1)
        assert 0.0 <= out["win_rate"] <= 1.0
        assert out["win_rate"] + out["loss_rate"] <= 1.0
        assert out["guess_failure_rate"] >= 0.0
        assert "avg_reveal_moves_count" in out

    def test_many_games_requires_runs(self):
        with pytest.raises(ValueError):
            run_minesweeper_many_games(6, 6, 4, 0)

    def test_show_boards_prints(self, capsys):
        run_minesweeper_single_game(5, 5, 2, seed=0, show_boards=True)
        out = capsys.readouterr().out
        assert "Underlying board (mines visible):" in out
        assert "Finished with status" in out


class TestBenchmark:
    """Cross-game benchmark and plots."""

    @pytest.mark.parametrize("game_type", ["minesweeper", "snake", "tetris"])
    def test_rates(self, game_type):
        out = run_assistant_benchmark(game_type, 4, seed=7)
        assert sum(out[f"{level}_rate"] for level in RISK_LEVELS) == pytest.approx(1.0)
        assert 0.0 <= out["avg_confidence"] <= 1.0
        assert 0.0 <= out["empty_rate"] <= 1.0
        assert out["avg_execution_ms"] >= 0.0

    def test_reproducible(self):
        first = run_assistant_benchmark("tetris", 3, seed=2)
        second = run_assistant_benchmark("tetris", 3, seed=2)
        for key in ("avg_confidence", "avg_actions", "low_rate", "critical_rate"):
            assert first[key] == second[key]

    def test_unknown_game(self):
        with pytest.raises(ValueError):
            run_assistant_benchmark("pong", 1)

    def test_plot_summary(self):
        results = {
            "snake": run_assistant_benchmark("snake", 3),
            "tetris": run_assistant_benchmark("tetris", 3),
        }
        figures = plot_benchmark_summary(results, show=False)
        assert len(figures) == 2
        for fig in figures:
            plt.close(fig)
