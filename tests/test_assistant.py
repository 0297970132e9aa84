import pytest

from arcade_ai import (
    ConfigProvider,
    DebugTelemetry,
    Hint,
    SnakeAssistant,
    SnakeSnapshot,
    TetrisAssistant,
)


class TestBeforeAnalysis:
    """Calls made before any snapshot was analyzed."""

    def test_hint(self):
        hint = SnakeAssistant().get_hint(0.1)
        assert hint == Hint("Analyze game state first", confidence=0.0)

    def test_suggestion_is_null_action(self):
        suggestion = SnakeAssistant().get_suggestion()
        assert suggestion.action.priority == 0
        assert suggestion.action.target is None
        assert suggestion.confidence == 0.0


class TestHintTiers:
    """Detail decreases as difficulty rises."""

    @pytest.fixture
    def assistant(self, snake_scenario, config):
        assistant = SnakeAssistant(config)
        assistant.analyze_game_state(snake_scenario)
        return assistant

    def test_easy_has_indicator_and_walkthrough(self, assistant):
        hint = assistant.get_hint(0.1)
        target = assistant.get_suggestion().action.target
        assert hint.visual_indicator == (target,)
        assert hint.confidence == pytest.approx(1.0)
        assert "=== Step-by-Step Reasoning ===" in hint.detailed_explanation

    def test_easy_without_educational_mode_uses_reasoning(self, assistant, config):
        config.set_educational_mode(False)
        hint = assistant.get_hint(0.1)
        assert hint.detailed_explanation == assistant.last_analysis.reasoning

    def test_medium_has_indicator_only(self, assistant):
        hint = assistant.get_hint(0.5)
        assert hint.visual_indicator == (assistant.get_suggestion().action.target,)
        assert hint.detailed_explanation is None

    def test_hard_has_no_position(self, assistant):
        hint = assistant.get_hint(0.9)
        assert hint.visual_indicator is None
        assert hint.detailed_explanation is None
        assert hint.message == "Path looks clear"

    @pytest.mark.parametrize("level, expected", [(0.29, "easy"), (0.3, "medium"), (0.69, "medium"), (0.7, "hard")])
    def test_boundaries(self, assistant, level, expected):
        hint = assistant.get_hint(level)
        if expected == "easy":
            assert hint.detailed_explanation is not None
        elif expected == "medium":
            assert hint.visual_indicator is not None and hint.detailed_explanation is None
        else:
            assert hint.visual_indicator is None

    @pytest.mark.parametrize("difficulty", [None, float("nan"), float("inf")])
    def test_falls_back_to_configured_difficulty(self, assistant, config, difficulty):
        config.set_difficulty_level(0.9)
        assert assistant.get_hint(difficulty).message == "Path looks clear"
        config.set_difficulty_level(0.1)
        assert assistant.get_hint(difficulty).detailed_explanation is not None

    def test_confidence_hidden(self, assistant, config):
        config.set_show_confidence(False)
        for level in (0.1, 0.5, 0.9):
            assert assistant.get_hint(level).confidence is None


class TestExplainDecision:
    """Section order and optional blocks of the explanation text."""

    def test_sections_in_fixed_order(self, snake_scenario):
        config = ConfigProvider(show_alternatives=True, debug_mode=True, educational_mode=True)
        assistant = SnakeAssistant(config)
        assistant.analyze_game_state(snake_scenario)
        text = assistant.explain_decision(assistant.get_suggestion())

        markers = [
            "Suggested action:",
            "Confidence: 100%",
            "Priority: 10",
            "Reasoning:",
            "Alternative Options:\n  1. Move up (safe)",
            "=== Debug Info ===",
            "Path To Food:",
            "=== AI Debug Info (snake) ===",
            "=== Educational Explanation ===",
        ]
        positions = [text.index(m) for m in markers]
        assert positions == sorted(positions)

    def test_debug_block_has_no_wall_clock(self, snake_scenario):
        assistant = SnakeAssistant(ConfigProvider(debug_mode=True))
        assistant.analyze_game_state(snake_scenario)
        text = assistant.explain_decision(assistant.get_suggestion())
        assert "Steps Evaluated: 3" in text
        assert "Timestamp:" not in text
        assert "Execution Time:" not in text

    def test_debug_block_follows_latest_board(self, snake_scenario):
        trapped = SnakeSnapshot(
            body=((0, 0), (1, 0), (2, 0)), food=(3, 0), direction="left", width=4, height=1
        )
        reused = SnakeAssistant(ConfigProvider(debug_mode=True))
        reused.analyze_game_state(snake_scenario)
        reused.analyze_game_state(trapped)

        fresh = SnakeAssistant(ConfigProvider(debug_mode=True))
        fresh.analyze_game_state(trapped)

        text = reused.explain_decision(reused.get_suggestion())
        assert text == fresh.explain_decision(fresh.get_suggestion())
        assert "=== AI Debug Info" not in text
        assert "Full Analysis: Found 0 safe moves." in text

    def test_shared_telemetry_shows_own_record(self, snake_scenario, empty_tetris):
        telemetry = DebugTelemetry()
        config = ConfigProvider(debug_mode=True)
        snake = SnakeAssistant(config, telemetry)
        tetris = TetrisAssistant(config, telemetry)
        snake.analyze_game_state(snake_scenario)
        tetris.analyze_game_state(empty_tetris)
        snake.analyze_game_state(snake_scenario)

        text = snake.explain_decision(snake.get_suggestion())
        assert text.count("=== AI Debug Info (snake) ===") == 1
        assert "(tetris)" not in text

    def test_minimal_explanation(self, snake_scenario):
        config = ConfigProvider(educational_mode=False, show_confidence=False)
        assistant = SnakeAssistant(config)
        assistant.analyze_game_state(snake_scenario)
        suggestion = assistant.get_suggestion()
        text = assistant.explain_decision(suggestion)
        assert text == (
            f"Suggested action: {suggestion.action.description}\n"
            "Priority: 10\n"
            f"Reasoning: {suggestion.explanation}"
        )


class TestConfiguration:
    """Delegation to the provider and telemetry wiring."""

    def test_difficulty_is_clamped(self):
        assistant = SnakeAssistant()
        assistant.set_difficulty_level(5)
        assert assistant.get_difficulty_level() == 1.0
        assistant.set_difficulty_level(float("nan"))
        assert assistant.get_difficulty_level() == 1.0

    def test_debug_mode_enables_telemetry(self, snake_scenario):
        assistant = SnakeAssistant()
        assert not assistant.is_debug_mode_enabled()
        assistant.analyze_game_state(snake_scenario)
        assert assistant.telemetry.history() == []

        assistant.set_debug_mode(True)
        assert assistant.is_debug_mode_enabled()
        assistant.analyze_game_state(snake_scenario)
        record = assistant.telemetry.latest()
        assert record.game_type == "snake"
        assert record.details.algorithm_name == "A* Pathfinding"
        assert record.details.path_length == 11

    def test_shared_config_drives_telemetry(self, config):
        telemetry = DebugTelemetry()
        assistant = SnakeAssistant(config, telemetry)
        config.set_debug_mode(True)
        assert telemetry.is_enabled()
        config.set_debug_mode(False)
        assert not telemetry.is_enabled()

        assistant.close()
        config.set_debug_mode(True)
        assert not telemetry.is_enabled()

    def test_debug_config_at_construction(self):
        assistant = SnakeAssistant(ConfigProvider(debug_mode=True))
        assert assistant.telemetry.is_enabled()

    def test_no_record_without_actions(self):
        assistant = SnakeAssistant(ConfigProvider(debug_mode=True))
        trapped = SnakeSnapshot(
            body=((0, 0), (1, 0), (2, 0)), food=(3, 0), direction="left", width=4, height=1
        )
        assistant.analyze_game_state(trapped)
        assert assistant.telemetry.history() == []
