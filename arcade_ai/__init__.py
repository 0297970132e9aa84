"""
Arcade AI Assistants

Decision-support engines for three classic games, sharing one interface:
- Minesweeper: constraint satisfaction with probability ranking
- Snake: A* pathfinding with open-space analysis
- Tetris: exhaustive placement search with weighted board heuristics

Each assistant turns a board snapshot into an analysis, a ranked suggestion,
a difficulty-tiered hint and a plain-text explanation.
"""

from .types import (
    Action,
    Analysis,
    Hint,
    MinesweeperSnapshot,
    Position,
    SnakeSnapshot,
    Suggestion,
    TetrisSnapshot,
)
from .config import AssistantSettings, ConfigProvider
from .telemetry import AlgorithmDetails, DebugTelemetry
from .explainer import Explainer, Explanation, ExplanationStep
from .assistant import GameAssistant
from .minesweeper import MinesweeperAssistant
from .snake import SnakeAssistant
from .tetris import TetrisAssistant
from .boards import (
    MinesweeperBoard,
    random_minesweeper_snapshot,
    random_snake_snapshot,
    random_tetris_snapshot,
)
from .analysis import (
    format_minesweeper_knowledge,
    plot_benchmark_summary,
    run_assistant_benchmark,
    run_minesweeper_level_analysis,
    run_minesweeper_many_games,
    run_minesweeper_single_game,
)

__version__ = "1.0.0"

__all__ = [
    # Value types
    "Action",
    "Analysis",
    "Hint",
    "Position",
    "Suggestion",
    "MinesweeperSnapshot",
    "SnakeSnapshot",
    "TetrisSnapshot",
    # Configuration and collaborators
    "AssistantSettings",
    "ConfigProvider",
    "AlgorithmDetails",
    "DebugTelemetry",
    "Explainer",
    "Explanation",
    "ExplanationStep",
    # Assistants
    "GameAssistant",
    "MinesweeperAssistant",
    "SnakeAssistant",
    "TetrisAssistant",
    # Boards
    "MinesweeperBoard",
    "random_minesweeper_snapshot",
    "random_snake_snapshot",
    "random_tetris_snapshot",
    # Analysis functions
    "format_minesweeper_knowledge",
    "plot_benchmark_summary",
    "run_assistant_benchmark",
    "run_minesweeper_level_analysis",
    "run_minesweeper_many_games",
    "run_minesweeper_single_game",
]
