"""Tetris assistant: exhaustive placement search scored by weighted board heuristics."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from .assistant import GameAssistant
from .config import ConfigProvider
from .explainer import Explainer
from .telemetry import DebugTelemetry
from .types import Action, Analysis, Position, Suggestion, TetrisSnapshot

logger = logging.getLogger("arcade_ai.tetris")

Shape = Tuple[Tuple[int, ...], ...]

PIECE_SHAPES: Dict[str, Tuple[Shape, ...]] = {
    "I": (
        ((1, 1, 1, 1),),
        ((1,), (1,), (1,), (1,)),
    ),
    "O": (
        ((1, 1), (1, 1)),
    ),
    "T": (
        ((0, 1, 0), (1, 1, 1)),
        ((1, 0), (1, 1), (1, 0)),
        ((1, 1, 1), (0, 1, 0)),
        ((0, 1), (1, 1), (0, 1)),
    ),
    "S": (
        ((0, 1, 1), (1, 1, 0)),
        ((1, 0), (1, 1), (0, 1)),
    ),
    "Z": (
        ((1, 1, 0), (0, 1, 1)),
        ((0, 1), (1, 1), (1, 0)),
    ),
    "J": (
        ((1, 0, 0), (1, 1, 1)),
        ((1, 1), (1, 0), (1, 0)),
        ((1, 1, 1), (0, 0, 1)),
        ((0, 1), (0, 1), (1, 1)),
    ),
    "L": (
        ((0, 0, 1), (1, 1, 1)),
        ((1, 0), (1, 0), (1, 1)),
        ((1, 1, 1), (1, 0, 0)),
        ((1, 1), (0, 1), (0, 1)),
    ),
}

BASE_FALL_MS = 1000


@dataclass(frozen=True)
class HeuristicWeights:
    lines_cleared: float = 10.0
    height: float = -0.5
    holes: float = -3.0
    bumpiness: float = -0.2
    completeness: float = 2.0


@dataclass(frozen=True)
class BoardMetrics:
    lines_cleared: int
    aggregate_height: int
    holes: int
    bumpiness: int
    completeness: float


@dataclass(frozen=True)
class PlacementCandidate:
    position: Position
    rotation: int
    score: float
    reasoning: str
    metrics: BoardMetrics


# -----------------------------------------------------------------------------
# Board metrics
# -----------------------------------------------------------------------------


def _as_grid(board: Sequence[Sequence[int]]) -> np.ndarray:
    grid = np.asarray(board)
    if grid.ndim != 2:
        return np.zeros((len(board), 0), dtype=bool)
    return grid != 0


def column_heights(board: Sequence[Sequence[int]]) -> np.ndarray:
    """Height of the topmost filled cell in each column (0 for an empty column)."""
    grid = _as_grid(board)
    rows = grid.shape[0]
    if grid.size == 0:
        return np.zeros(grid.shape[1], dtype=int)
    return np.where(grid.any(axis=0), rows - grid.argmax(axis=0), 0)


def count_holes(board: Sequence[Sequence[int]]) -> int:
    """Empty cells with at least one filled cell above them in the same column."""
    grid = _as_grid(board)
    if grid.size == 0:
        return 0
    covered = np.cumsum(grid, axis=0) > 0
    return int((covered & ~grid).sum())


def compute_metrics(board: Sequence[Sequence[int]]) -> BoardMetrics:
    """
    Measure a board.

    Args:
        board: Rows top to bottom, 0 = empty.

    Returns:
        BoardMetrics with:
        - lines_cleared: number of completely filled rows
        - aggregate_height: sum of column heights
        - holes: see ``count_holes``
        - bumpiness: sum of absolute height differences of adjacent columns
        - completeness: sum over rows of the filled fraction
    """
    grid = _as_grid(board)
    if grid.size == 0:
        return BoardMetrics(0, 0, 0, 0, 0.0)

    cols = grid.shape[1]
    heights = column_heights(board)
    return BoardMetrics(
        lines_cleared=int(grid.all(axis=1).sum()),
        aggregate_height=int(heights.sum()),
        holes=count_holes(board),
        bumpiness=int(np.abs(np.diff(heights)).sum()),
        completeness=float((grid.sum(axis=1) / cols).sum()),
    )


def score_metrics(metrics: BoardMetrics, weights: HeuristicWeights = HeuristicWeights()) -> float:
    return (
        weights.lines_cleared * metrics.lines_cleared
        + weights.height * metrics.aggregate_height
        + weights.holes * metrics.holes
        + weights.bumpiness * metrics.bumpiness
        + weights.completeness * metrics.completeness
    )


# -----------------------------------------------------------------------------
# Placement geometry
# -----------------------------------------------------------------------------


def fits(board: Sequence[Sequence[int]], shape: Shape, position: Position) -> bool:
    """True when every filled shape cell lands inside the board on an empty cell."""
    rows = len(board)
    cols = len(board[0]) if rows else 0
    for dy, shape_row in enumerate(shape):
        for dx, filled in enumerate(shape_row):
            if not filled:
                continue
            bx, by = position.x + dx, position.y + dy
            if bx < 0 or bx >= cols or by < 0 or by >= rows:
                return False
            if board[by][bx] != 0:
                return False
    return True


def find_landing_position(
    board: Sequence[Sequence[int]], shape: Shape, x: int
) -> Optional[Position]:
    """
    Drop ``shape`` straight down at column offset ``x``.

    Returns:
        The last row offset that fits before the first collision, or None
        when the shape does not fit at row 0.
    """
    rows = len(board)
    for y in range(rows):
        if not fits(board, shape, Position(x, y)):
            return Position(x, y - 1) if y > 0 else None
    max_y = rows - len(shape)
    return Position(x, max_y) if max_y >= 0 else None


def place(board: Sequence[Sequence[int]], shape: Shape, position: Position) -> np.ndarray:
    """Copy of ``board`` with ``shape`` stamped in (filled cells set to 1)."""
    grid = np.array(board, dtype=int, ndmin=2)
    for dy, shape_row in enumerate(shape):
        for dx, filled in enumerate(shape_row):
            if filled:
                grid[position.y + dy, position.x + dx] = 1
    return grid


class TetrisAssistant(GameAssistant):
    """
    Heuristic Tetris assistant.

    Every rotation of the active piece is dropped at every column offset; the
    resulting boards are scored with ``HeuristicWeights`` and ranked.
    """

    game_type = "tetris"
    algorithm_name = "Heuristic Evaluation"
    decision_label = "Suggested placement"
    null_action_kind = "place"
    null_action_description = "No valid placements available"
    null_explanation = "Unable to find valid piece placements"
    clear_phrase = "Good opportunities available"
    caution_phrase = "Careful placement needed!"

    def __init__(
        self,
        config: Optional[ConfigProvider] = None,
        telemetry: Optional[DebugTelemetry] = None,
        explainer: Optional[Explainer] = None,
        weights: Optional[HeuristicWeights] = None,
    ) -> None:
        super().__init__(config, telemetry, explainer)
        self.weights = weights if weights is not None else HeuristicWeights()
        self.last_placements: List[PlacementCandidate] = []

    # -------------------------------------------------------------------------
    # Core analysis
    # -------------------------------------------------------------------------

    def _analyze(self, snapshot: TetrisSnapshot) -> Tuple[Analysis, Dict[str, Any]]:
        placements = self.evaluate_all_placements(snapshot)
        self.last_placements = placements
        current = compute_metrics(snapshot.board)

        risk = self.calculate_risk_level(placements, current, snapshot)
        analysis = Analysis(
            confidence=self.calculate_confidence(placements, current, snapshot),
            reasoning=self.generate_reasoning(placements, current, risk),
            suggested_actions=self.generate_suggested_actions(placements),
            risk_assessment=risk,
            alternative_options=self.generate_alternative_options(placements),
        )

        heuristic_scores = None
        if placements:
            scores = np.array([p.score for p in placements])
            heuristic_scores = {
                "bestScore": float(scores[0]),
                "avgScore": float(scores.mean()),
                "worstScore": float(scores[-1]),
            }
        details = {
            "steps_evaluated": len(placements),
            "heuristic_scores": heuristic_scores,
            "additional_info": {
                "placementsEvaluated": len(placements),
                "linesCleared": snapshot.lines_cleared,
                "boardHeight": current.aggregate_height,
                "holes": current.holes,
            },
        }
        return analysis, details

    def evaluate_all_placements(self, snapshot: TetrisSnapshot) -> List[PlacementCandidate]:
        """
        Score every reachable resting position of the active piece.

        Returns:
            Candidates sorted by descending score; ties keep rotation-major,
            left-to-right order.
        """
        board = snapshot.board
        if snapshot.width == 0 or snapshot.height == 0:
            return []

        holes_before = count_holes(board)
        placements: List[PlacementCandidate] = []

        for rotation, shape in enumerate(PIECE_SHAPES[snapshot.piece]):
            for x in range(-len(shape[0]) + 1, snapshot.width):
                position = find_landing_position(board, shape, x)
                if position is None or not fits(board, shape, position):
                    continue

                metrics = compute_metrics(place(board, shape, position))
                placements.append(PlacementCandidate(
                    position=position,
                    rotation=rotation,
                    score=score_metrics(metrics, self.weights),
                    reasoning=self._placement_reasoning(metrics, holes_before),
                    metrics=metrics,
                ))

        logger.debug(f"{snapshot.piece}: {len(placements)} placements evaluated")
        return sorted(placements, key=lambda p: p.score, reverse=True)

    @staticmethod
    def _placement_reasoning(metrics: BoardMetrics, holes_before: int) -> str:
        parts: List[str] = []
        if metrics.lines_cleared > 0:
            parts.append(f"Clears {metrics.lines_cleared} line(s).")
        if metrics.holes > holes_before:
            parts.append(f"Creates {metrics.holes - holes_before} hole(s).")
        if not parts:
            return "Maintains board stability."
        return " ".join(parts)

    # -------------------------------------------------------------------------
    # Output shaping
    # -------------------------------------------------------------------------

    @staticmethod
    def _height_ratio(current: BoardMetrics, snapshot: TetrisSnapshot) -> float:
        if snapshot.height == 0:
            return 0.0
        return current.aggregate_height / snapshot.height

    def calculate_risk_level(
        self,
        placements: Sequence[PlacementCandidate],
        current: BoardMetrics,
        snapshot: TetrisSnapshot,
    ) -> str:
        if not placements:
            return "critical"
        best = placements[0].score
        ratio = self._height_ratio(current, snapshot)
        if ratio > 0.8 or best < -10:
            return "high"
        if ratio > 0.6 or best < 0:
            return "medium"
        return "low"

    def calculate_confidence(
        self,
        placements: Sequence[PlacementCandidate],
        current: BoardMetrics,
        snapshot: TetrisSnapshot,
    ) -> float:
        if not placements:
            return 0.0
        best = placements[0].score
        confidence = 0.5
        if best > 0:
            confidence += min(0.3, best * 0.02)
        confidence -= min(1.0, self._height_ratio(current, snapshot)) * 0.3
        if len(placements) > 3:
            confidence += 0.1
        return max(0.0, min(1.0, confidence))

    @staticmethod
    def generate_reasoning(
        placements: Sequence[PlacementCandidate], current: BoardMetrics, risk: str
    ) -> str:
        if not placements:
            return "No valid placements found. Game over imminent."
        best = placements[0]
        return (
            f"Found {len(placements)} valid placements. "
            f"Best option scores {best.score:.1f}. "
            f"Current board height: {current.aggregate_height}. "
            f"Risk level: {risk}. {best.reasoning}"
        )

    @staticmethod
    def generate_suggested_actions(
        placements: Sequence[PlacementCandidate],
    ) -> Tuple[Action, ...]:
        return tuple(
            Action(
                "place",
                10 - i,
                f"x:{p.position.x} rot:{p.rotation} ({p.score:.1f})",
                p.position,
            )
            for i, p in enumerate(placements[:3])
        )

    @staticmethod
    def generate_alternative_options(
        placements: Sequence[PlacementCandidate],
    ) -> Tuple[Action, ...]:
        return tuple(
            Action(
                "place",
                5 - i,
                f"Alternative: ({p.position.x}, {p.position.y}) rotation {p.rotation}",
                p.position,
            )
            for i, p in enumerate(placements[3:8])
        )

    def _action_explanation(self, action: Action) -> str:
        if action.target is None:
            return action.description
        return (
            f"This placement at ({action.target.x}, {action.target.y}) provides the "
            "best heuristic score based on line clearing potential, height "
            "management, and hole avoidance."
        )

    def _detailed_hint_message(self, suggestion: Suggestion) -> str:
        return f"Best: {suggestion.action.description}"

    def _basic_hint_message(self, suggestion: Suggestion) -> str:
        return f"Try: {suggestion.action.description}"

    def _debug_details(self) -> List[str]:
        lines = ["Top Placements:"]
        for p in self.last_placements[:3]:
            m = p.metrics
            lines.append(
                f"  x:{p.position.x} y:{p.position.y} rot:{p.rotation} -> "
                f"lines={m.lines_cleared} height={m.aggregate_height} holes={m.holes} "
                f"bumpiness={m.bumpiness} completeness={m.completeness:.2f}"
            )
        return lines

    # -------------------------------------------------------------------------
    # Host feedback
    # -------------------------------------------------------------------------

    def calculate_adaptive_speed(self, snapshot: TetrisSnapshot, player_level: int) -> int:
        """
        Fall interval in milliseconds for the given level and clearing rate.

        Higher levels and faster line clearing both shorten the interval, each
        bounded below (10% and 30% of the base respectively).
        """
        level_multiplier = max(0.1, 1 - (player_level - 1) * 0.05)
        minutes = max(1.0, snapshot.elapsed_seconds / 60.0)
        lines_per_minute = snapshot.lines_cleared / minutes
        performance_multiplier = max(0.3, 1 - lines_per_minute * 0.02)
        return int(np.floor(BASE_FALL_MS * level_multiplier * performance_multiplier))

    def get_optimal_ghost_position(self, snapshot: TetrisSnapshot) -> Optional[Position]:
        placements = self.evaluate_all_placements(snapshot)
        if not placements:
            return None
        return placements[0].position
