import random
from collections import deque

import pytest

from arcade_ai import Position, SnakeAssistant, SnakeSnapshot, random_snake_snapshot
from arcade_ai.utils import manhattan_distance


def bfs_distance(snapshot):
    """Shortest head-to-food distance over cells not covered by body[:-1]."""
    blocked = set(snapshot.body[:-1])
    start = snapshot.head
    queue = deque([(start, 0)])
    seen = {start}
    while queue:
        pos, dist = queue.popleft()
        if pos == snapshot.food:
            return dist
        for dx, dy in ((0, -1), (0, 1), (-1, 0), (1, 0)):
            nxt = Position(pos.x + dx, pos.y + dy)
            if not (0 <= nxt.x < snapshot.width and 0 <= nxt.y < snapshot.height):
                continue
            if nxt in blocked or nxt in seen:
                continue
            seen.add(nxt)
            queue.append((nxt, dist + 1))
    return None


class TestSnakeScenario:
    """Open board with a short snake."""

    def test_analysis(self, snake_scenario):
        assistant = SnakeAssistant()
        analysis = assistant.analyze_game_state(snake_scenario)

        assert analysis.confidence == pytest.approx(1.0)
        assert analysis.risk_assessment == "low"
        assert analysis.reasoning == (
            "Found 3 safe moves. Clear path to food exists (10 steps). Risk level: low."
        )

    def test_ranked_actions(self, snake_scenario):
        assistant = SnakeAssistant()
        analysis = assistant.analyze_game_state(snake_scenario)

        actions = analysis.suggested_actions
        assert [a.priority for a in actions] == [10, 5, 4, 3]
        assert actions[0].description.endswith("towards food")
        assert actions[0].target in {(5, 6), (6, 5)}
        assert [a.description for a in actions[1:]] == [
            "Move up (50 spaces available)",
            "Move down (50 spaces available)",
            "Move right (50 spaces available)",
        ]

    def test_alternatives_exclude_reverse(self, snake_scenario):
        analysis = SnakeAssistant().analyze_game_state(snake_scenario)
        assert [a.description for a in analysis.alternative_options] == [
            "Move up (safe)",
            "Move down (safe)",
            "Move right (safe)",
        ]
        assert all(a.priority == 5 for a in analysis.alternative_options)

    def test_suggestion_and_hints(self, snake_scenario):
        assistant = SnakeAssistant()
        assistant.analyze_game_state(snake_scenario)
        suggestion = assistant.get_suggestion()
        target = suggestion.action.target
        direction = suggestion.action.description.split(" ")[1]

        assert suggestion.explanation == (
            f"This move leads to position ({target.x}, {target.y}) which appears to be "
            "the safest option based on pathfinding analysis."
        )
        assert assistant.get_hint(0.1).message == f"Move {direction}. {suggestion.explanation}"
        assert assistant.get_hint(0.5).message == f"Consider moving {direction}"
        assert assistant.get_hint(0.9).message == "Path looks clear"

    def test_path_is_shortest(self, snake_scenario):
        assistant = SnakeAssistant()
        path = assistant.find_path(snake_scenario)
        assert path[0] == snake_scenario.head
        assert path[-1] == snake_scenario.food
        assert len(path) - 1 == manhattan_distance(snake_scenario.head, snake_scenario.food)


class TestSnakeDanger:
    """Blocked food, a single exit and a trapped head."""

    def test_unreachable_food(self):
        snap = SnakeSnapshot(
            body=((1, 0), (2, 0), (3, 0)), food=(4, 0), direction="left", width=5, height=1
        )
        assistant = SnakeAssistant()
        analysis = assistant.analyze_game_state(snap)

        assert assistant.find_path(snap) is None
        assert "No direct path to food found." in analysis.reasoning
        assert analysis.risk_assessment == "high"
        assert analysis.confidence == pytest.approx(0.65)
        assert [a.description for a in analysis.suggested_actions] == [
            "Move left (1 spaces available)"
        ]
        assert analysis.suggested_actions[0].priority == 8
        assert assistant.get_hint(0.9).message == "Danger ahead!"

    def test_trapped_head(self):
        snap = SnakeSnapshot(
            body=((0, 0), (1, 0), (2, 0)), food=(3, 0), direction="left", width=4, height=1
        )
        assistant = SnakeAssistant()
        analysis = assistant.analyze_game_state(snap)

        assert analysis.risk_assessment == "critical"
        assert analysis.confidence == 0.0
        assert analysis.suggested_actions == ()
        assert [a.description for a in analysis.alternative_options] == [
            "Move up (risky)",
            "Move down (risky)",
            "Move left (risky)",
        ]
        suggestion = assistant.get_suggestion()
        assert suggestion.action.description == "No safe moves available"
        assert suggestion.explanation == "Unable to find safe moves"
        assert assistant.get_hint(0.9).message == "Danger ahead!"

    def test_tail_blocks_only_when_eating(self):
        assistant = SnakeAssistant()
        body = ((1, 1), (1, 2), (2, 2), (2, 1))
        moving = SnakeSnapshot(body=body, food=(0, 0), direction="up", width=4, height=4)
        eating = SnakeSnapshot(body=body, food=(2, 1), direction="up", width=4, height=4)
        assert assistant.is_safe_move(Position(2, 1), moving)
        assert not assistant.is_safe_move(Position(2, 1), eating)

    def test_empty_body(self):
        snap = SnakeSnapshot(body=(), food=(0, 0), direction="up", width=5, height=5)
        analysis = SnakeAssistant().analyze_game_state(snap)
        assert analysis.risk_assessment == "critical"
        assert analysis.confidence == 0.0
        assert analysis.suggested_actions == ()

    def test_space_search_is_capped(self, snake_scenario):
        assistant = SnakeAssistant()
        assert assistant.calculate_available_space(Position(10, 10), snake_scenario) == 50


class TestPathfinding:
    """A* agrees with breadth-first search on random boards."""

    @pytest.mark.parametrize("seed", range(20))
    def test_astar_matches_bfs(self, seed):
        rng = random.Random(seed)
        snap = random_snake_snapshot(12, 12, rng.randint(3, 40), rng)
        assistant = SnakeAssistant()
        path = assistant.find_path(snap)
        expected = bfs_distance(snap)

        if expected is None:
            assert path is None
            analysis = assistant.analyze_game_state(snap)
            assert "No direct path to food found." in analysis.reasoning
            return

        assert path is not None
        assert len(path) - 1 == expected
        blocked = set(snap.body[:-1])
        for a, b in zip(path, path[1:]):
            assert manhattan_distance(a, b) == 1
            assert b not in blocked


class TestStrategicFood:
    """Strategic food lands on a free cell, preferring a moderate challenge."""

    @pytest.mark.parametrize("seed", range(10))
    def test_food_is_free_and_in_bounds(self, seed):
        rng = random.Random(seed)
        snap = random_snake_snapshot(10, 10, rng.randint(1, 30), rng)
        food = SnakeAssistant().generate_strategic_food_position(snap)
        assert food is not None
        assert 0 <= food.x < 10 and 0 <= food.y < 10
        assert food not in snap.body

    def test_candidate_is_moderately_far(self, snake_scenario, monkeypatch):
        picked = []

        def choose(seq):
            picked.append(list(seq))
            return seq[0]

        monkeypatch.setattr("arcade_ai.snake.random.choice", choose)
        assistant = SnakeAssistant()
        food = assistant.generate_strategic_food_position(snake_scenario)

        assert len(picked) == 1
        assert 3 <= manhattan_distance(snake_scenario.head, food) <= 8
        assert 1 <= assistant.count_paths(snake_scenario.head, food, snake_scenario, 3) <= 2

    def test_full_board_has_no_food(self):
        snap = SnakeSnapshot(body=((0, 0), (1, 0)), food=(1, 0), direction="left", width=2, height=1)
        assert SnakeAssistant().generate_strategic_food_position(snap) is None
