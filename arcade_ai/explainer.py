"""Step-by-step educational explanations of assistant decisions."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .types import Action, Analysis, Suggestion


@dataclass(frozen=True)
class ExplanationStep:
    step_number: int
    description: str
    reasoning: str
    visual_aid: Optional[str] = None


@dataclass(frozen=True)
class Explanation:
    summary: str
    steps: Tuple[ExplanationStep, ...]
    concepts: Tuple[str, ...]
    learning_tips: Tuple[str, ...]


_SNAKE_CONCEPTS = (
    "A* Pathfinding: An algorithm that finds the shortest path between two points",
    "Heuristic: An estimate of distance used to guide the search",
    "Space Analysis: Evaluating how much room is available to maneuver",
    "Risk Assessment: Determining danger level based on available options",
)
_SNAKE_TIPS = (
    "Always prioritize moves that keep the most space available",
    "Think ahead: consider where your next move will lead",
    "When in doubt, move toward open space rather than toward food",
    "Watch for patterns that could trap you in corners",
)
_TETRIS_CONCEPTS = (
    "Heuristic Evaluation: Scoring positions based on multiple factors",
    "Aggregate Height: Total height of all columns",
    "Holes: Empty cells with blocks above them",
    "Bumpiness: Variation in column heights",
    "Line Clearing: Completing full rows to score points",
)
_TETRIS_TIPS = (
    "Keep the board flat to avoid creating holes",
    "Save the I-piece for clearing multiple lines",
    "Don't always take the highest-scoring immediate move - think ahead",
    "Build with future pieces in mind",
)
_MINESWEEPER_CONCEPTS = (
    "Constraint Satisfaction: Using logical rules to eliminate possibilities",
    "Probability Analysis: Calculating likelihood when logic isn't enough",
    "Mine Density: The ratio of mines to unknown cells",
    "Local vs Global Probability: Specific constraints vs overall board statistics",
)
_MINESWEEPER_TIPS = (
    "Start by finding cells that are definitely safe or mines",
    "Look for patterns: 1-2-1 patterns often reveal safe cells",
    "When guessing is necessary, choose cells with lowest mine probability",
    "Work on areas with the most information (revealed numbers)",
)


class Explainer:
    """Builds ``Explanation`` objects for each game and renders them as text."""

    def explain(
        self, game_type: str, analysis: Analysis, suggestion: Suggestion
    ) -> Explanation:
        if game_type == "snake":
            return self.explain_snake_decision(analysis, suggestion)
        if game_type == "tetris":
            return self.explain_tetris_decision(analysis, suggestion)
        if game_type == "minesweeper":
            return self.explain_minesweeper_decision(analysis, suggestion)
        raise ValueError(f"Unknown game type: {game_type!r}")

    @staticmethod
    def _summary(verb: str, analysis: Analysis, suggestion: Suggestion) -> str:
        return (
            f"The AI {verb} {suggestion.action.description} with "
            f"{suggestion.confidence * 100:.0f}% confidence. {analysis.reasoning}"
        )

    def explain_snake_decision(
        self, analysis: Analysis, suggestion: Suggestion
    ) -> Explanation:
        steps: List[ExplanationStep] = []
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Identify safe moves",
            "The AI first checks all possible directions (up, down, left, right) "
            "and eliminates moves that would cause immediate collision with walls "
            "or the snake's body.",
            "Green arrows indicate safe directions",
        ))
        if "Clear path to food" in analysis.reasoning:
            steps.append(ExplanationStep(
                len(steps) + 1,
                "Find path to food using A* algorithm",
                "A* pathfinding calculates the shortest safe path to the food. It "
                "considers both the distance to the goal (heuristic) and the actual "
                "path cost.",
                "Blue line shows the calculated path",
            ))
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Evaluate available space",
            "For each safe move, the AI calculates how much open space would be "
            "accessible. This prevents getting trapped in dead ends.",
            "Numbers show available space in each direction",
        ))
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Assess risk level",
            f"Risk level is {analysis.risk_assessment}. This is based on the number "
            "of safe moves available and the current board state.",
            f"Risk indicator: {analysis.risk_assessment}",
        ))
        return Explanation(
            self._summary("recommends", analysis, suggestion),
            tuple(steps),
            _SNAKE_CONCEPTS,
            _SNAKE_TIPS,
        )

    def explain_tetris_decision(
        self, analysis: Analysis, suggestion: Suggestion
    ) -> Explanation:
        steps: List[ExplanationStep] = []
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Evaluate all possible placements",
            "The AI tries every possible position and rotation for the current "
            "piece, calculating a score for each placement.",
            "Ghost pieces show evaluated positions",
        ))
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Calculate heuristic scores",
            "Each placement is scored based on: lines cleared (good), height "
            "increase (bad), holes created (bad), and surface bumpiness (bad).",
            "Score breakdown shown for top placements",
        ))
        if "Clears" in analysis.reasoning:
            steps.append(ExplanationStep(
                len(steps) + 1,
                "Prioritize line clearing",
                "Placements that clear lines receive bonus points. Clearing multiple "
                "lines simultaneously is especially valuable.",
                "Highlighted rows show potential line clears",
            ))
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Avoid creating holes",
            "Holes (empty cells with blocks above them) are heavily penalized "
            "because they're difficult to fill later.",
            "Red cells indicate potential holes",
        ))
        return Explanation(
            self._summary("suggests", analysis, suggestion),
            tuple(steps),
            _TETRIS_CONCEPTS,
            _TETRIS_TIPS,
        )

    def explain_minesweeper_decision(
        self, analysis: Analysis, suggestion: Suggestion
    ) -> Explanation:
        steps: List[ExplanationStep] = []
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Extract constraints from revealed cells",
            "Each revealed number creates a constraint: the number tells us exactly "
            "how many adjacent cells contain mines.",
            "Numbers show mine counts for adjacent cells",
        ))
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Solve constraints using logic",
            "The AI tries different mine configurations and keeps only those that "
            "satisfy all constraints. If all valid configurations agree on a cell, "
            "we know it's safe or a mine.",
            "Green = definitely safe, Red = definitely mine",
        ))
        if "probability" in analysis.reasoning:
            steps.append(ExplanationStep(
                len(steps) + 1,
                "Calculate probabilities",
                "For cells where we're not certain, the AI calculates the probability "
                "of a mine based on how many valid configurations have a mine there.",
                "Percentages show mine probability",
            ))
        steps.append(ExplanationStep(
            len(steps) + 1,
            "Assess risk and recommend action",
            f"Risk level is {analysis.risk_assessment}. The AI recommends the safest "
            "available move based on logical deduction and probability.",
            f"Confidence: {suggestion.confidence * 100:.0f}%",
        ))
        return Explanation(
            self._summary("recommends", analysis, suggestion),
            tuple(steps),
            _MINESWEEPER_CONCEPTS,
            _MINESWEEPER_TIPS,
        )

    def format_explanation(self, explanation: Explanation) -> str:
        out = [explanation.summary, "", "=== Step-by-Step Reasoning ==="]
        for step in explanation.steps:
            out.append("")
            out.append(f"Step {step.step_number}: {step.description}")
            out.append(step.reasoning)
            if step.visual_aid:
                out.append(f"Visual: {step.visual_aid}")

        out.append("")
        out.append("=== Key Concepts ===")
        out.extend(f"• {concept}" for concept in explanation.concepts)

        out.append("")
        out.append("=== Learning Tips ===")
        out.extend(f"• {tip}" for tip in explanation.learning_tips)
        return "\n".join(out) + "\n"

    def simple_explanation(self, action: Action, confidence: float) -> str:
        """One-paragraph explanation suitable for a tooltip."""
        if confidence > 0.8:
            confidence_text = "highly confident"
        elif confidence > 0.5:
            confidence_text = "moderately confident"
        else:
            confidence_text = "uncertain"
        return (
            f"{action.description}\n\nThe AI is {confidence_text} in this "
            f"recommendation ({confidence * 100:.0f}% confidence)."
        )
