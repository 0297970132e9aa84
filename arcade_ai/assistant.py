"""Shared decision-shaping layer: Analysis -> Suggestion -> Hint -> Explanation."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from .config import AssistantSettings, ConfigProvider
from .explainer import Explainer
from .telemetry import AlgorithmDetails, DebugRecord, DebugTelemetry
from .types import Action, Analysis, Hint, Position, Suggestion
from .utils import format_priority, is_finite_number

logger = logging.getLogger("arcade_ai.assistant")

EASY_HINT_THRESHOLD = 0.3
MEDIUM_HINT_THRESHOLD = 0.7


class GameAssistant(ABC):
    """
    Common interface implemented by the three game assistants.

    Subclasses implement ``_analyze``; everything derived from the last
    analysis (suggestion, tiered hint, explanation text) lives here. The
    configuration is re-read at the start of every public call, so a change
    made between calls is visible on the next one.
    """

    game_type: str = ""
    algorithm_name: str = ""
    decision_label: str = "Suggested action"
    null_action_kind: str = ""
    null_action_description: str = "No action available"
    null_explanation: str = "Unable to determine an action"
    clear_phrase: str = ""
    caution_phrase: str = ""

    def __init__(
        self,
        config: Optional[ConfigProvider] = None,
        telemetry: Optional[DebugTelemetry] = None,
        explainer: Optional[Explainer] = None,
    ) -> None:
        """
        Args:
            config: Settings provider. A private one with defaults is created
                when omitted.
            telemetry: Sink for per-call debug records. A private one is
                created when omitted.
            explainer: Educational explanation generator. Defaults to a new
                ``Explainer``.
        """
        self.config: ConfigProvider = config if config is not None else ConfigProvider()
        self.telemetry: DebugTelemetry = (
            telemetry if telemetry is not None else DebugTelemetry()
        )
        self.explainer: Explainer = explainer if explainer is not None else Explainer()
        self._last_analysis: Optional[Analysis] = None
        # Telemetry record logged by the last analysis, if any
        self._last_record: Optional[DebugRecord] = None

        if self.config.get_config().debug_mode:
            self.telemetry.set_enabled(True)
        self._unsubscribe = self.config.subscribe(self._on_config_change)

    def _on_config_change(self, settings: AssistantSettings) -> None:
        if settings.debug_mode != self.telemetry.is_enabled():
            self.telemetry.set_enabled(settings.debug_mode)

    def close(self) -> None:
        """Stop listening to configuration changes."""
        self._unsubscribe()

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    @abstractmethod
    def _analyze(self, snapshot: Any) -> Tuple[Analysis, Dict[str, Any]]:
        """
        Run the game-specific algorithm.

        Returns:
            The analysis plus keyword arguments for ``AlgorithmDetails``
            (everything except the algorithm name and execution time).
        """

    def analyze_game_state(self, snapshot: Any) -> Analysis:
        """Analyze a board snapshot; the result replaces the previous analysis."""
        settings = self.config.get_config()
        start = time.perf_counter()
        self._last_record = None

        analysis, details = self._analyze(snapshot)
        self._last_analysis = analysis

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.debug(
            f"{self.game_type}: {len(analysis.suggested_actions)} actions, "
            f"risk={analysis.risk_assessment}, confidence={analysis.confidence:.3f} "
            f"({elapsed_ms:.2f}ms)"
        )

        if settings.debug_mode and analysis.suggested_actions:
            self._last_record = self.telemetry.log_decision(
                self.game_type,
                analysis,
                self.get_suggestion(),
                AlgorithmDetails(
                    algorithm_name=self.algorithm_name,
                    execution_time_ms=elapsed_ms,
                    **details,
                ),
            )

        return analysis

    @property
    def last_analysis(self) -> Optional[Analysis]:
        return self._last_analysis

    # -------------------------------------------------------------------------
    # Suggestion
    # -------------------------------------------------------------------------

    def null_suggestion(self) -> Suggestion:
        return Suggestion(
            Action(self.null_action_kind, 0, self.null_action_description),
            0.0,
            self.null_explanation,
        )

    def get_suggestion(self) -> Suggestion:
        analysis = self._last_analysis
        if analysis is None or not analysis.suggested_actions:
            return self.null_suggestion()

        best = analysis.suggested_actions[0]
        return Suggestion(best, analysis.confidence, self._action_explanation(best))

    def _action_explanation(self, action: Action) -> str:
        return action.description

    # -------------------------------------------------------------------------
    # Hints
    # -------------------------------------------------------------------------

    def get_hint(self, difficulty: Optional[float] = None) -> Hint:
        """
        Return a hint whose detail depends on difficulty.

        Below 0.3 the hint carries an indicator and a detailed explanation;
        from 0.3 to 0.7 a short message and indicator; from 0.7 up only a
        phrase derived from the risk level. ``None`` or a non-finite value
        falls back to the configured difficulty.
        """
        analysis = self._last_analysis
        if analysis is None:
            return Hint("Analyze game state first", confidence=0.0)

        settings = self.config.get_config()
        suggestion = self.get_suggestion()
        level = difficulty if is_finite_number(difficulty) else settings.difficulty_level
        confidence = suggestion.confidence if settings.show_confidence else None

        if level < EASY_HINT_THRESHOLD:
            detailed = analysis.reasoning
            if settings.educational_mode:
                detailed = self._educational_text(analysis, suggestion)
            return Hint(
                self._detailed_hint_message(suggestion),
                self._detailed_indicator(suggestion),
                confidence,
                detailed,
            )

        if level < MEDIUM_HINT_THRESHOLD:
            return Hint(
                self._basic_hint_message(suggestion),
                self._basic_indicator(suggestion),
                confidence,
            )

        return Hint(self._risk_phrase(analysis.risk_assessment), confidence=confidence)

    def _detailed_hint_message(self, suggestion: Suggestion) -> str:
        return suggestion.action.description

    def _basic_hint_message(self, suggestion: Suggestion) -> str:
        return suggestion.action.description

    def _detailed_indicator(self, suggestion: Suggestion) -> Tuple[Position, ...]:
        target = suggestion.action.target
        return (target,) if target is not None else ()

    def _basic_indicator(self, suggestion: Suggestion) -> Optional[Tuple[Position, ...]]:
        target = suggestion.action.target
        return (target,) if target is not None else None

    def _risk_phrase(self, risk: str) -> str:
        return self.caution_phrase if risk in ("high", "critical") else self.clear_phrase

    # -------------------------------------------------------------------------
    # Explanation
    # -------------------------------------------------------------------------

    def _educational_text(self, analysis: Analysis, suggestion: Suggestion) -> str:
        explanation = self.explainer.explain(self.game_type, analysis, suggestion)
        return self.explainer.format_explanation(explanation)

    def _debug_details(self) -> List[str]:
        """Extra engine-specific lines for the debug block."""
        return []

    def explain_decision(self, suggestion: Suggestion) -> str:
        """
        Render a suggestion as text.

        Sections always appear in the same order: description, confidence,
        priority, reasoning, alternatives, debug block, educational walkthrough.
        """
        settings = self.config.get_config()
        analysis = self._last_analysis
        action = suggestion.action

        text = f"{self.decision_label}: {action.description}\n"
        if settings.show_confidence:
            text += f"Confidence: {round(suggestion.confidence * 100)}%\n"
        text += f"Priority: {format_priority(action.priority)}\n"
        text += f"Reasoning: {suggestion.explanation}"

        if settings.show_alternatives and analysis and analysis.alternative_options:
            text += "\n\nAlternative Options:\n"
            for i, alt in enumerate(analysis.alternative_options[:3], start=1):
                text += f"  {i}. {alt.description}\n"

        if settings.debug_mode and analysis:
            text += "\n\n=== Debug Info ===\n"
            text += f"Risk Assessment: {analysis.risk_assessment}\n"
            text += f"Alternative Options: {len(analysis.alternative_options)}\n"
            text += f"Full Analysis: {analysis.reasoning}"

            extra = self._debug_details()
            if extra:
                text += "\n\n" + "\n".join(extra)

            if self._last_record is not None:
                text += "\n\n" + self.telemetry.format_record(
                    self._last_record, include_timing=False
                )

        if settings.educational_mode and analysis:
            text += "\n\n=== Educational Explanation ===\n"
            text += self._educational_text(analysis, suggestion)

        return text

    # -------------------------------------------------------------------------
    # Configuration accessors
    # -------------------------------------------------------------------------

    def set_difficulty_level(self, level: float) -> None:
        """Clamp into [0, 1]; non-finite values are ignored by the provider."""
        self.config.set_difficulty_level(level)

    def get_difficulty_level(self) -> float:
        return self.config.get_config().difficulty_level

    def set_debug_mode(self, enabled: bool) -> None:
        self.config.set_debug_mode(enabled)
        self.telemetry.set_enabled(bool(enabled))

    def is_debug_mode_enabled(self) -> bool:
        return self.config.get_config().debug_mode
