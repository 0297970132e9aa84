"""Debug telemetry: per-call algorithm metrics pushed by the assistants."""

import json
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .types import Analysis, Suggestion
from .utils import format_priority

logger = logging.getLogger("arcade_ai.telemetry")


@dataclass(frozen=True)
class AlgorithmDetails:
    algorithm_name: str
    execution_time_ms: float
    steps_evaluated: int
    heuristic_scores: Optional[Dict[str, float]] = None
    path_length: Optional[int] = None
    constraints_solved: Optional[int] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DebugRecord:
    timestamp: float
    game_type: str
    analysis: Analysis
    suggestion: Suggestion
    details: AlgorithmDetails


class DebugTelemetry:
    """
    Bounded history of decision records.

    Recording only happens while enabled; disabling clears the history.
    """

    def __init__(self, max_history: int = 50) -> None:
        if max_history <= 0:
            raise ValueError("max_history must be positive.")
        self.max_history = max_history
        self._history: List[DebugRecord] = []
        self._enabled = False

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self.clear_history()

    def is_enabled(self) -> bool:
        return self._enabled

    def log_decision(
        self,
        game_type: str,
        analysis: Analysis,
        suggestion: Suggestion,
        details: AlgorithmDetails,
    ) -> Optional[DebugRecord]:
        """Append a record while enabled; returns it, or None when disabled."""
        if not self._enabled:
            return None

        record = DebugRecord(time.time(), game_type, analysis, suggestion, details)
        self._history.append(record)
        if len(self._history) > self.max_history:
            self._history.pop(0)

        logger.debug(
            f"{game_type}: {details.algorithm_name} evaluated "
            f"{details.steps_evaluated} steps in {details.execution_time_ms:.2f}ms"
        )
        return record

    def latest(self, game_type: Optional[str] = None) -> Optional[DebugRecord]:
        """Most recent record, optionally restricted to one game."""
        for record in reversed(self._history):
            if game_type is None or record.game_type == game_type:
                return record
        return None

    def history(self) -> List[DebugRecord]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history = []

    def format_record(self, record: DebugRecord, include_timing: bool = True) -> str:
        """
        Render a record as text.

        With ``include_timing=False`` the wall-clock timestamp and execution
        time are left out, so the text depends only on the analysed board.
        """
        details = record.details
        lines: List[str] = [f"=== AI Debug Info ({record.game_type}) ==="]
        if include_timing:
            stamp = datetime.fromtimestamp(record.timestamp).strftime("%H:%M:%S")
            lines.append(f"Timestamp: {stamp}")
        lines.append("")

        lines.append(f"Algorithm: {details.algorithm_name}")
        if include_timing:
            lines.append(f"Execution Time: {details.execution_time_ms:.2f}ms")
        lines.append(f"Steps Evaluated: {details.steps_evaluated}")
        if details.path_length is not None:
            lines.append(f"Path Length: {details.path_length}")
        if details.constraints_solved is not None:
            lines.append(f"Constraints Solved: {details.constraints_solved}")

        if details.heuristic_scores:
            lines.append("")
            lines.append("Heuristic Scores:")
            for key, value in details.heuristic_scores.items():
                lines.append(f"  {key}: {value:.2f}")

        analysis = record.analysis
        lines.append("")
        lines.append("Analysis:")
        lines.append(f"  Confidence: {analysis.confidence * 100:.1f}%")
        lines.append(f"  Risk: {analysis.risk_assessment}")
        lines.append(f"  Reasoning: {analysis.reasoning}")

        suggestion = record.suggestion
        lines.append("")
        lines.append("Suggestion:")
        lines.append(f"  Action: {suggestion.action.description}")
        lines.append(f"  Priority: {format_priority(suggestion.action.priority)}")
        lines.append(f"  Explanation: {suggestion.explanation}")

        if len(analysis.suggested_actions) > 1:
            lines.append("")
            lines.append("Top Actions:")
            for i, action in enumerate(analysis.suggested_actions[:3], start=1):
                lines.append(
                    f"  {i}. {action.description} "
                    f"(priority: {format_priority(action.priority)})"
                )

        if analysis.alternative_options:
            lines.append("")
            lines.append(
                f"Alternatives: {len(analysis.alternative_options)} options available"
            )

        if details.additional_info:
            lines.append("")
            lines.append("Additional Info:")
            for key, value in details.additional_info.items():
                lines.append(f"  {key}: {json.dumps(value)}")

        return "\n".join(lines) + "\n"

    def export_history(self) -> str:
        """Serialize the whole history as indented JSON."""
        return json.dumps([asdict(r) for r in self._history], indent=2, default=str)
