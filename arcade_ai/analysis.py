"""Analysis and benchmarking tools for the game assistants."""

import logging
import random
from collections import defaultdict
from typing import Callable, Dict, List, Mapping, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .assistant import GameAssistant
from .boards import (
    MinesweeperBoard,
    random_minesweeper_snapshot,
    random_snake_snapshot,
    random_tetris_snapshot,
)
from .config import ConfigProvider
from .minesweeper import CellAnalysis, MinesweeperAssistant
from .snake import SnakeAssistant
from .tetris import TetrisAssistant
from .types import RISK_LEVELS, MinesweeperSnapshot, Position
from .utils import get_neighborhoods

logger = logging.getLogger("arcade_ai.analysis")


def format_minesweeper_knowledge(
    snapshot: MinesweeperSnapshot,
    cells: Optional[Mapping[Position, CellAnalysis]] = None,
    *,
    show_coords: bool = True,
) -> str:
    """
    Format what the player (and assistant) can see as a text grid.

    Args:
        snapshot: Board to display.
        cells: Optional per-cell findings, usually
            ``MinesweeperAssistant.cell_analyses``.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid: revealed cells show their number, flags 'F', hidden
        cells proven safe 'S', proven mines '*', any other hidden cell '.'.
    """
    cells = cells or {}
    neighborhoods = get_neighborhoods(snapshot.width, snapshot.height)

    def cell_char(x: int, y: int) -> str:
        pos = Position(x, y)
        if snapshot.flagged[y][x]:
            return "F"
        if snapshot.revealed[y][x]:
            if pos in snapshot.mine_positions:
                return "M"
            return str(sum(1 for n in neighborhoods[pos] if n in snapshot.mine_positions))
        cell = cells.get(pos)
        if cell is None:
            return "."
        if cell.is_safe:
            return "S"
        if cell.is_mine:
            return "*"
        return "."

    w, h = snapshot.width, snapshot.height
    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{x:2d}" for x in range(w))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * w - 1))

    for y in range(h):
        row = " ".join(f" {cell_char(x, y)}" for x in range(w))
        lines.append(f"{y:2d} |" + row if show_coords else row)

    return "\n".join(lines)


# -----------------------------------------------------------------------------
# Minesweeper self-play
# -----------------------------------------------------------------------------


def run_minesweeper_single_game(
    width: int,
    height: int,
    mines_count: int,
    *,
    seed: Optional[int] = None,
    mines_generation_algorithm: str = "safe_neighborhood_rule",
    assistant: Optional[MinesweeperAssistant] = None,
    show_boards: bool = False,
) -> Dict[str, float]:
    """
    Let the assistant play one game, always following its top suggestion.

    The first click is the board center. A game ends on a win, a mine hit or
    when the assistant has nothing to suggest.

    Returns:
        Counters for the game plus "status" (-1 loss, 0 stuck, 1 win).
    """
    board = MinesweeperBoard(
        width,
        height,
        mines_count,
        mines_generation_algorithm=mines_generation_algorithm,
        rng=random.Random(seed),
    )
    assistant = assistant if assistant is not None else MinesweeperAssistant()

    status = board.reveal(Position(width // 2, height // 2))
    reveal_moves = 1
    flags = 0
    guesses = 0
    certain_moves = 0

    # Every move reveals or flags a hidden cell, so the loop is bounded.
    for _ in range(width * height):
        if status != 0:
            break
        analysis = assistant.analyze_game_state(board.snapshot())
        suggestion = assistant.get_suggestion()
        action = suggestion.action
        if action.target is None:
            break

        if analysis.risk_assessment != "low" and action.kind == "reveal":
            guesses += 1
        else:
            certain_moves += 1

        if action.kind == "flag":
            board.toggle_flag(action.target)
            flags += 1
        else:
            status = board.reveal(action.target)
            reveal_moves += 1

    if show_boards:
        print("Underlying board (mines visible):")
        print(board.format_board(reveal_all=True))
        print()
        print("Final knowledge ('S' safe, '*' mine):")
        print(format_minesweeper_knowledge(board.snapshot(), assistant.cell_analyses))
        print()
        print(f"Finished with status {status}.")

    revealed = sum(1 for row in board.revealed for v in row if v)
    return {
        "status": float(status),
        "reveal_moves_count": float(reveal_moves),
        "flags_count": float(flags),
        "guesses_count": float(guesses),
        "certain_moves_count": float(certain_moves),
        "revealed_cells_count": float(revealed),
    }


def run_minesweeper_many_games(
    width: int,
    height: int,
    mines_count: int,
    runs: int,
    *,
    seed: int = 0,
    mines_generation_algorithm: str = "safe_neighborhood_rule",
) -> Dict[str, float]:
    """
    Play ``runs`` seeded games and average the per-game counters.

    Returns:
        Averages prefixed with "avg_" plus win_rate, loss_rate and
        guess_failure_rate (losses per guess).
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")

    sums: Dict[str, float] = defaultdict(float)
    wins = 0
    losses = 0
    assistant = MinesweeperAssistant()

    for i in range(runs):
        payload = run_minesweeper_single_game(
            width,
            height,
            mines_count,
            seed=seed + i,
            mines_generation_algorithm=mines_generation_algorithm,
            assistant=assistant,
        )
        if payload["status"] == 1:
            wins += 1
        elif payload["status"] == -1:
            losses += 1

        for k, v in payload.items():
            if k != "status":
                sums[f"avg_{k}"] += v

    out: Dict[str, float] = {k: total / runs for k, total in sums.items()}
    out["win_rate"] = wins / runs
    out["loss_rate"] = losses / runs
    total_guesses = out.get("avg_guesses_count", 0.0) * runs
    out["guess_failure_rate"] = losses / total_guesses if total_guesses > 0 else 0.0

    logger.info(
        f"{width}x{height}/{mines_count}: win rate {out['win_rate']:.2f} over {runs} games"
    )
    return out


def run_minesweeper_level_analysis(
    runs: int, *, seed: int = 0, show: bool = True
) -> Dict[str, Dict[str, float]]:
    """
    Run self-play on the standard difficulty levels and plot win rates.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines
    """
    levels: Dict[str, Tuple[int, int, int]] = {
        "beginner": (9, 9, 10),
        "intermediate": (16, 16, 40),
        "expert": (30, 16, 99),
    }

    results: Dict[str, Dict[str, float]] = {}
    for level, (w, h, m) in levels.items():
        results[level] = run_minesweeper_many_games(w, h, m, runs, seed=seed)

    level_names = list(levels.keys())
    x = np.arange(len(level_names))

    plt.figure()
    plt.bar(x, [results[n]["win_rate"] for n in level_names])
    plt.xticks(x, level_names)
    plt.ylabel("Win rate")
    plt.ylim(0.0, 1.0)
    plt.title("Assistant self-play win rate by difficulty level")
    plt.tight_layout()
    if show:
        plt.show()

    return results


# -----------------------------------------------------------------------------
# Cross-game benchmark
# -----------------------------------------------------------------------------

_BENCHMARK_FACTORIES: Dict[str, Callable[[random.Random], object]] = {
    "minesweeper": lambda rng: random_minesweeper_snapshot(16, 16, 40, rng, reveals=3),
    "snake": lambda rng: random_snake_snapshot(20, 20, rng.randint(3, 30), rng),
    "tetris": lambda rng: random_tetris_snapshot(rng),
}


def _make_assistant(game_type: str, config: ConfigProvider) -> GameAssistant:
    if game_type == "minesweeper":
        return MinesweeperAssistant(config)
    if game_type == "snake":
        return SnakeAssistant(config)
    if game_type == "tetris":
        return TetrisAssistant(config)
    raise ValueError(f"Unknown game type: {game_type!r}")


def run_assistant_benchmark(
    game_type: str, runs: int, *, seed: int = 0
) -> Dict[str, float]:
    """
    Analyze ``runs`` seeded random snapshots of one game.

    Args:
        game_type: "minesweeper", "snake" or "tetris".
        runs: Number of snapshots to analyze.
        seed: Seed of the snapshot generator.

    Returns:
        avg_confidence, std_confidence, avg_actions, avg_alternatives,
        avg_execution_ms, empty_rate (fraction with no suggestion) and one
        "<risk>_rate" per risk level.

    Raises:
        ValueError: If the game type is unknown or runs is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")
    if game_type not in _BENCHMARK_FACTORIES:
        raise ValueError(f"Unknown game type: {game_type!r}")

    rng = random.Random(seed)
    config = ConfigProvider(debug_mode=True)
    assistant = _make_assistant(game_type, config)
    factory = _BENCHMARK_FACTORIES[game_type]

    confidences: List[float] = []
    actions: List[int] = []
    alternatives: List[int] = []
    timings: List[float] = []
    risks: Dict[str, int] = {level: 0 for level in RISK_LEVELS}

    try:
        for _ in range(runs):
            analysis = assistant.analyze_game_state(factory(rng))
            confidences.append(analysis.confidence)
            actions.append(len(analysis.suggested_actions))
            alternatives.append(len(analysis.alternative_options))
            risks[analysis.risk_assessment] += 1

            record = assistant.telemetry.latest(game_type)
            if record is not None and analysis.suggested_actions:
                timings.append(record.details.execution_time_ms)
    finally:
        assistant.close()

    conf = np.array(confidences)
    out: Dict[str, float] = {
        "avg_confidence": float(conf.mean()),
        "std_confidence": float(conf.std()),
        "avg_actions": float(np.mean(actions)),
        "avg_alternatives": float(np.mean(alternatives)),
        "avg_execution_ms": float(np.mean(timings)) if timings else 0.0,
        "empty_rate": float(np.mean(np.array(actions) == 0)),
    }
    for level, count in risks.items():
        out[f"{level}_rate"] = count / runs

    logger.info(
        f"{game_type}: avg confidence {out['avg_confidence']:.2f} over {runs} snapshots"
    )
    return out


def plot_benchmark_summary(
    results: Mapping[str, Mapping[str, float]], *, show: bool = True
) -> List[plt.Figure]:
    """
    Plot per-game confidence and risk distributions.

    Args:
        results: game type -> ``run_assistant_benchmark`` output.
        show: Call ``plt.show()`` after drawing.

    Returns:
        The created figures.
    """
    names = list(results.keys())
    x = np.arange(len(names))
    figures: List[plt.Figure] = []

    # 1) Average confidence with spread
    fig = plt.figure()
    plt.bar(
        x,
        [results[n]["avg_confidence"] for n in names],
        yerr=[results[n]["std_confidence"] for n in names],
    )
    plt.xticks(x, names)
    plt.ylabel("Average confidence")
    plt.ylim(0.0, 1.0)
    plt.title("Assistant confidence by game")
    plt.tight_layout()
    figures.append(fig)

    # 2) Risk level mix
    fig = plt.figure()
    bar_w = 0.2
    for i, level in enumerate(RISK_LEVELS):
        offset = (i - (len(RISK_LEVELS) - 1) / 2) * bar_w
        plt.bar(
            x + offset,
            [results[n][f"{level}_rate"] for n in names],
            width=bar_w,
            label=level,
        )
    plt.xticks(x, names)
    plt.ylabel("Fraction of snapshots")
    plt.title("Risk assessment by game")
    plt.legend()
    plt.tight_layout()
    figures.append(fig)

    if show:
        plt.show()
    return figures
