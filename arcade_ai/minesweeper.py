"""Minesweeper assistant: constraint satisfaction over revealed clues plus probability ranking."""

import logging
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)

from .assistant import GameAssistant
from .types import Action, Analysis, MinesweeperSnapshot, Position, Suggestion
from .utils import get_neighborhoods

logger = logging.getLogger("arcade_ai.minesweeper")

# Above this many constrained unknown cells the exact search is replaced by
# the local-density heuristic.
MAX_EXACT_CELLS = 15
# Hard cap on collected valid assignments.
MAX_SOLUTIONS = 1000


class ConstraintGroup(NamedTuple):
    """One revealed clue: ``remaining_mines`` of ``unknown_cells`` are mines."""

    unknown_cells: Tuple[Position, ...]
    known_mines: int
    total_mines: int

    @property
    def remaining_mines(self) -> int:
        return self.total_mines - self.known_mines


@dataclass(frozen=True)
class CellAnalysis:
    position: Position
    probability: float
    reasoning: str
    # False for estimates no clue constrains; those are never acted on as proven
    certain: bool = True

    @property
    def is_safe(self) -> bool:
        return self.certain and self.probability == 0

    @property
    def is_mine(self) -> bool:
        return self.certain and self.probability == 1


Assignment = frozenset


class MinesweeperAssistant(GameAssistant):
    """
    Constraint-based Minesweeper assistant.

    Each analysis runs a tiered approach:
    1. Constraint extraction: one linear constraint per revealed clue with
       hidden neighbors.
    2. Exact enumeration: bounded backtracking over the constrained cells
       when there are at most ``MAX_EXACT_CELLS`` of them.
    3. Heuristic fallback: local mine density averaged per cell otherwise.
    4. Global density for hidden cells no clue touches.
    """

    game_type = "minesweeper"
    algorithm_name = "Constraint Satisfaction"
    null_action_kind = "reveal"
    null_action_description = "No safe moves identified"
    null_explanation = "Unable to determine safe cells with current information"
    clear_phrase = "Safe moves available"
    caution_phrase = "Careful analysis required"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # Per-cell findings of the last analysis, in discovery order
        self.cell_analyses: Dict[Position, CellAnalysis] = {}

    @property
    def cell_probabilities(self) -> Dict[Position, float]:
        """Mine probability for every hidden, unflagged cell of the last analysis."""
        return {pos: c.probability for pos, c in self.cell_analyses.items()}

    # -------------------------------------------------------------------------
    # Core analysis
    # -------------------------------------------------------------------------

    def _analyze(
        self, snapshot: MinesweeperSnapshot
    ) -> Tuple[Analysis, Dict[str, Any]]:
        self.cell_analyses = {}

        constraints = self.extract_constraints(snapshot)
        variables, solutions, exact = self.solve_constraints(constraints)
        self.calculate_probabilities(variables, solutions, exact, snapshot)

        safe_cells = [c for c in self.cell_analyses.values() if c.is_safe]
        mine_cells = [c for c in self.cell_analyses.values() if c.is_mine]

        risk = self.calculate_risk_level(safe_cells, snapshot)
        analysis = Analysis(
            confidence=self.calculate_confidence(safe_cells, mine_cells),
            reasoning=self.generate_reasoning(safe_cells, mine_cells, risk),
            suggested_actions=self.generate_suggested_actions(safe_cells, mine_cells),
            risk_assessment=risk,
            alternative_options=self.generate_alternative_options(),
        )

        details = {
            "steps_evaluated": len(self.cell_analyses),
            "constraints_solved": len(constraints),
            "additional_info": {
                "safeCellsFound": len(safe_cells),
                "mineCellsFound": len(mine_cells),
                "solutionsGenerated": len(solutions),
                "constraintsExtracted": len(constraints),
                "cellsAnalyzed": len(self.cell_analyses),
                "exactEnumeration": exact,
            },
        }
        return analysis, details

    def extract_constraints(
        self, snapshot: MinesweeperSnapshot
    ) -> List[ConstraintGroup]:
        """
        Build one constraint per revealed, non-mine cell with hidden neighbors.

        Cells are scanned row by row; neighbors follow the cached
        neighborhood order, so the result is identical for identical boards.
        """
        neighborhoods = get_neighborhoods(snapshot.width, snapshot.height)
        mines = snapshot.mine_positions
        constraints: List[ConstraintGroup] = []

        for y in range(snapshot.height):
            for x in range(snapshot.width):
                if not snapshot.revealed[y][x]:
                    continue
                pos = Position(x, y)
                if pos in mines:
                    continue

                unknown: List[Position] = []
                flagged_count = 0
                adjacent_mines = 0
                for n in neighborhoods[pos]:
                    if n in mines:
                        adjacent_mines += 1
                    if snapshot.flagged[n.y][n.x]:
                        flagged_count += 1
                    elif not snapshot.revealed[n.y][n.x]:
                        unknown.append(n)

                if unknown:
                    constraints.append(
                        ConstraintGroup(tuple(unknown), flagged_count, adjacent_mines)
                    )

        return constraints

    def solve_constraints(
        self, constraints: Sequence[ConstraintGroup]
    ) -> Tuple[Tuple[Position, ...], List[Assignment], bool]:
        """
        Enumerate (or approximate) mine assignments for the constrained cells.

        Returns:
            Tuple of (variables, solutions, exact) where:
            - variables: constrained unknown cells in first-seen order
            - solutions: each solution is the frozenset of cells assigned a mine
            - exact: False when the heuristic fallback produced the solution
        """
        variables: Tuple[Position, ...] = tuple(
            dict.fromkeys(cell for c in constraints for cell in c.unknown_cells)
        )

        if not variables:
            return (), [frozenset()], True

        if len(variables) > MAX_EXACT_CELLS:
            return variables, [self._heuristic_solve(constraints, variables)], False

        constraints_by_cell: Dict[Position, List[ConstraintGroup]] = {
            v: [] for v in variables
        }
        for c in constraints:
            for cell in c.unknown_cells:
                constraints_by_cell[cell].append(c)

        solutions: List[Assignment] = []
        self._backtrack(variables, 0, {}, constraints, constraints_by_cell, solutions)

        if not solutions:
            logger.warning(
                f"No assignment satisfies {len(constraints)} constraints; "
                "falling back to global density"
            )
            return (), [frozenset()], True

        return variables, solutions, True

    def _backtrack(
        self,
        variables: Tuple[Position, ...],
        i: int,
        assignment: Dict[Position, int],
        constraints: Sequence[ConstraintGroup],
        constraints_by_cell: Dict[Position, List[ConstraintGroup]],
        solutions: List[Assignment],
    ) -> None:
        """
        Depth-first 0/1 assignment (safe before mine) with early pruning.

        A branch is cut only when some constraint can no longer be met, so the
        valid assignments found, and their order, match the exhaustive search.
        """
        if len(solutions) >= MAX_SOLUTIONS:
            return

        if i == len(variables):
            if self._satisfies(assignment, constraints):
                solutions.append(frozenset(c for c, v in assignment.items() if v))
            return

        cell = variables[i]
        for value in (0, 1):
            assignment[cell] = value
            if self._consistent(assignment, constraints_by_cell[cell]):
                self._backtrack(
                    variables, i + 1, assignment, constraints, constraints_by_cell, solutions
                )
                if len(solutions) >= MAX_SOLUTIONS:
                    break

        del assignment[cell]

    @staticmethod
    def _consistent(
        assignment: Dict[Position, int], touched: Sequence[ConstraintGroup]
    ) -> bool:
        for c in touched:
            assigned_mines = 0
            unassigned = 0
            for cell in c.unknown_cells:
                v = assignment.get(cell)
                if v is None:
                    unassigned += 1
                else:
                    assigned_mines += v
            needed = c.remaining_mines
            if assigned_mines > needed or assigned_mines + unassigned < needed:
                return False
        return True

    @staticmethod
    def _satisfies(
        assignment: Dict[Position, int], constraints: Sequence[ConstraintGroup]
    ) -> bool:
        for c in constraints:
            mines = sum(assignment.get(cell, 0) for cell in c.unknown_cells)
            if mines != c.remaining_mines:
                return False
        return True

    @staticmethod
    def _heuristic_solve(
        constraints: Sequence[ConstraintGroup], variables: Sequence[Position]
    ) -> Assignment:
        """
        Approximate a single assignment from local constraint densities.

        A cell is a mine when the average of remaining/unknown over the
        constraints touching it exceeds one half.
        """
        densities: Dict[Position, List[float]] = {v: [] for v in variables}
        for c in constraints:
            density = c.remaining_mines / len(c.unknown_cells)
            for cell in c.unknown_cells:
                densities[cell].append(density)

        return frozenset(
            v for v in variables
            if densities[v] and sum(densities[v]) / len(densities[v]) > 0.5
        )

    # -------------------------------------------------------------------------
    # Probabilities
    # -------------------------------------------------------------------------

    def calculate_probabilities(
        self,
        variables: Sequence[Position],
        solutions: Sequence[Assignment],
        exact: bool,
        snapshot: MinesweeperSnapshot,
    ) -> None:
        """Fill ``cell_analyses`` from the solutions, then with global density."""
        total = len(solutions)
        if total:
            for cell in variables:
                count = sum(1 for s in solutions if cell in s)
                probability = count / total

                if not exact:
                    label = "Likely safe" if probability == 0 else "Likely a mine"
                    reasoning = (
                        f"{label} - heuristic estimate from local constraint "
                        "densities (too many unknown cells for exact enumeration)"
                    )
                elif probability == 0:
                    reasoning = "Definitely safe - all valid solutions show no mine here"
                elif probability == 1:
                    reasoning = "Definitely a mine - all valid solutions show a mine here"
                else:
                    reasoning = (
                        f"{probability * 100:.1f}% chance of mine based on "
                        f"{total} valid configuration(s)"
                    )

                self.cell_analyses[cell] = CellAnalysis(cell, probability, reasoning)

        self._add_global_probability_analysis(snapshot)

    def _add_global_probability_analysis(self, snapshot: MinesweeperSnapshot) -> None:
        total_cells = snapshot.width * snapshot.height
        revealed_count = sum(1 for row in snapshot.revealed for v in row if v)
        flagged_count = sum(1 for row in snapshot.flagged for v in row if v)
        total_mines = len(snapshot.mine_positions)

        unknown_cells = total_cells - revealed_count - flagged_count
        # Wrong flags can push the count below zero
        remaining_mines = max(0, total_mines - flagged_count)
        global_probability = (
            min(1.0, remaining_mines / unknown_cells) if unknown_cells > 0 else 0.0
        )

        reasoning = (
            f"Global probability: {global_probability * 100:.1f}% "
            f"({remaining_mines} mines in {unknown_cells} unknown cells)"
        )
        for y in range(snapshot.height):
            for x in range(snapshot.width):
                if snapshot.revealed[y][x] or snapshot.flagged[y][x]:
                    continue
                pos = Position(x, y)
                if pos not in self.cell_analyses:
                    self.cell_analyses[pos] = CellAnalysis(
                        pos, global_probability, reasoning, certain=False
                    )

    # -------------------------------------------------------------------------
    # Output shaping
    # -------------------------------------------------------------------------

    def calculate_risk_level(
        self, safe_cells: Sequence[CellAnalysis], snapshot: MinesweeperSnapshot
    ) -> str:
        if safe_cells:
            return "low"

        if any(c.probability < 0.3 for c in self.cell_analyses.values()):
            return "medium"

        total_cells = snapshot.width * snapshot.height
        revealed_count = sum(1 for row in snapshot.revealed for v in row if v)
        progress = revealed_count / total_cells if total_cells else 0.0
        if progress < 0.2:
            return "medium"

        return "high"

    def generate_suggested_actions(
        self, safe_cells: Sequence[CellAnalysis], mine_cells: Sequence[CellAnalysis]
    ) -> Tuple[Action, ...]:
        actions: List[Action] = []

        for i, cell in enumerate(safe_cells):
            x, y = cell.position
            actions.append(Action(
                "reveal",
                round(10 - i * 0.1, 1),
                f"Reveal ({x}, {y}) - {cell.reasoning}",
                cell.position,
            ))

        for i, cell in enumerate(mine_cells):
            x, y = cell.position
            actions.append(Action(
                "flag",
                round(9 - i * 0.1, 1),
                f"Flag ({x}, {y}) as mine - {cell.reasoning}",
                cell.position,
            ))

        if not actions:
            best_guesses = sorted(
                self.cell_analyses.values(), key=lambda c: c.probability
            )[:3]
            for i, cell in enumerate(best_guesses):
                x, y = cell.position
                actions.append(Action(
                    "reveal",
                    5 - i,
                    f"Consider ({x}, {y}) - {cell.reasoning}",
                    cell.position,
                ))

        return tuple(sorted(actions, key=lambda a: a.priority, reverse=True))

    def generate_alternative_options(self) -> Tuple[Action, ...]:
        candidates = sorted(
            (c for c in self.cell_analyses.values() if 0 < c.probability < 0.5),
            key=lambda c: c.probability,
        )[:5]
        return tuple(
            Action(
                "reveal",
                round(3 - i * 0.1, 1),
                f"Alternative: ({c.position.x}, {c.position.y}) - {c.reasoning}",
                c.position,
            )
            for i, c in enumerate(candidates)
        )

    def calculate_confidence(
        self, safe_cells: Sequence[CellAnalysis], mine_cells: Sequence[CellAnalysis]
    ) -> float:
        if safe_cells:
            return 1.0
        if mine_cells:
            return 0.9
        if not self.cell_analyses:
            return 0.0
        lowest = min(c.probability for c in self.cell_analyses.values())
        return max(0.1, 1 - lowest)

    def generate_reasoning(
        self,
        safe_cells: Sequence[CellAnalysis],
        mine_cells: Sequence[CellAnalysis],
        risk: str,
    ) -> str:
        reasoning = ""
        if safe_cells:
            reasoning += (
                f"Found {len(safe_cells)} definitely safe cell(s) "
                "through constraint satisfaction. "
            )
        if mine_cells:
            reasoning += f"Identified {len(mine_cells)} certain mine(s). "

        if not safe_cells and not mine_cells:
            reasoning += "No certain moves available. "
            if self.cell_analyses:
                lowest = min(c.probability for c in self.cell_analyses.values())
                reasoning += f"Best guess has {lowest * 100:.1f}% mine probability. "
            else:
                reasoning += "No unknown cells left to analyze. "

        reasoning += f"Risk level: {risk}."
        return reasoning

    def _action_explanation(self, action: Action) -> str:
        if action.target is None:
            return action.description
        cell = self.cell_analyses.get(action.target)
        if cell is None:
            return action.description

        x, y = action.target
        explanation = f"Cell at ({x}, {y}): "
        if cell.is_safe:
            explanation += "Constraint satisfaction proves this cell is safe. "
        elif cell.is_mine:
            explanation += "Constraint satisfaction proves this cell contains a mine. "
        else:
            explanation += (
                f"Probability analysis shows {cell.probability * 100:.1f}% chance of mine. "
            )
        return explanation + cell.reasoning

    # -------------------------------------------------------------------------
    # Hint and explanation hooks
    # -------------------------------------------------------------------------

    def safe_cell_positions(self) -> Tuple[Position, ...]:
        return tuple(c.position for c in self.cell_analyses.values() if c.is_safe)

    def _detailed_hint_message(self, suggestion: Suggestion) -> str:
        count = len(self.safe_cell_positions())
        return f"{count} safe cell(s) identified. {suggestion.action.description}"

    def _detailed_indicator(self, suggestion: Suggestion) -> Tuple[Position, ...]:
        safe = self.safe_cell_positions()
        if safe:
            return safe
        analysis = self.last_analysis
        if analysis is None:
            return ()
        return tuple(a.target for a in analysis.suggested_actions if a.target is not None)

    def _basic_indicator(self, suggestion: Suggestion) -> Optional[Tuple[Position, ...]]:
        safe = self.safe_cell_positions()
        if safe:
            return (safe[0],)
        return super()._basic_indicator(suggestion)

    def _debug_details(self) -> List[str]:
        lines = ["Cell Probabilities:"]
        for pos, cell in self.cell_analyses.items():
            lines.append(
                f"  {pos.x},{pos.y}: {cell.probability * 100:.1f}% mine - {cell.reasoning}"
            )
        return lines
