"""Snake assistant: A* path to food, bounded open-space flood fill, strategic food."""

import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Set, Tuple

from .assistant import GameAssistant
from .types import Action, Analysis, Position, SnakeSnapshot, Suggestion
from .utils import manhattan_distance

logger = logging.getLogger("arcade_ai.snake")

SPACE_SEARCH_LIMIT = 50
FOOD_PATH_DEPTH = 3
FOOD_MIN_DISTANCE = 3
FOOD_MAX_DISTANCE = 8

_STEPS: Dict[str, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
_OPPOSITE = {"up": "down", "down": "up", "left": "right", "right": "left"}

Move = Tuple[str, Position]


@dataclass
class PathNode:
    position: Position
    g_cost: int
    h_cost: int
    parent: Optional["PathNode"] = None

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost


def step(position: Position, direction: str) -> Position:
    dx, dy = _STEPS[direction]
    return Position(position.x + dx, position.y + dy)


def direction_between(start: Position, end: Position) -> str:
    """Direction of a single step from ``start`` to the adjacent ``end``."""
    if end.y < start.y:
        return "up"
    if end.y > start.y:
        return "down"
    if end.x < start.x:
        return "left"
    return "right"


class SnakeAssistant(GameAssistant):
    """
    Path-planning Snake assistant.

    Every candidate move is checked for walls and body collisions, the food is
    searched with A*, and each safe move is scored by how much open space a
    bounded flood fill reaches from it.
    """

    game_type = "snake"
    algorithm_name = "A* Pathfinding"
    null_action_kind = "move"
    null_action_description = "No safe moves available"
    null_explanation = "Unable to find safe moves"
    clear_phrase = "Path looks clear"
    caution_phrase = "Danger ahead!"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.last_path: Optional[List[Position]] = None

    # -------------------------------------------------------------------------
    # Core analysis
    # -------------------------------------------------------------------------

    def _analyze(self, snapshot: SnakeSnapshot) -> Tuple[Analysis, Dict[str, Any]]:
        head = snapshot.head
        if head is None or snapshot.width == 0 or snapshot.height == 0:
            self.last_path = None
            analysis = Analysis(
                confidence=0.0,
                reasoning="No snake on the board to analyze. Risk level: critical.",
                suggested_actions=(),
                risk_assessment="critical",
            )
            return analysis, {"steps_evaluated": 0}

        possible_moves = self.get_possible_moves(snapshot)
        safe_moves = [m for m in possible_moves if self.is_safe_move(m[1], snapshot)]
        risk = self.calculate_risk_level(len(safe_moves))

        path = self.find_path(snapshot)
        self.last_path = path

        actions = self.generate_suggested_actions(safe_moves, path, snapshot)
        analysis = Analysis(
            confidence=self.calculate_confidence(len(safe_moves), path) if actions else 0.0,
            reasoning=self.generate_reasoning(safe_moves, path, risk),
            suggested_actions=actions,
            risk_assessment=risk,
            alternative_options=self.generate_alternative_options(possible_moves, snapshot),
        )

        details = {
            "steps_evaluated": len(possible_moves),
            "path_length": len(path) if path else None,
            "additional_info": {
                "safeMoves": len(safe_moves),
                "totalMoves": len(possible_moves),
                "snakeLength": len(snapshot.body),
                "gridSize": f"{snapshot.width}x{snapshot.height}",
            },
        }
        return analysis, details

    def get_possible_moves(self, snapshot: SnakeSnapshot) -> List[Move]:
        """Every direction except reversing onto the neck, with its target cell."""
        head = snapshot.head
        if head is None:
            return []
        reverse = _OPPOSITE[snapshot.direction]
        return [(d, step(head, d)) for d in _STEPS if d != reverse]

    @staticmethod
    def _in_bounds(position: Position, snapshot: SnakeSnapshot) -> bool:
        return 0 <= position.x < snapshot.width and 0 <= position.y < snapshot.height

    def is_safe_move(self, position: Position, snapshot: SnakeSnapshot) -> bool:
        """
        In bounds and off the body.

        The tail moves away on a normal step, so it only blocks when the move
        eats the food and the snake grows.
        """
        if not self._in_bounds(position, snapshot):
            return False
        body = snapshot.body if position == snapshot.food else snapshot.body[:-1]
        return position not in body

    def _is_valid_path_position(self, position: Position, snapshot: SnakeSnapshot) -> bool:
        return self._in_bounds(position, snapshot) and position not in snapshot.body[:-1]

    @staticmethod
    def calculate_risk_level(safe_count: int) -> str:
        if safe_count == 0:
            return "critical"
        if safe_count == 1:
            return "high"
        if safe_count == 2:
            return "medium"
        return "low"

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def find_path(self, snapshot: SnakeSnapshot) -> Optional[List[Position]]:
        """
        A* from the head to the food.

        The open list is scanned in insertion order and the first node with
        the lowest f cost wins, which keeps tie-breaking stable.

        Returns:
            The path including both the head and the food, or None.
        """
        start = snapshot.head
        if start is None:
            return None
        food = snapshot.food

        open_list: List[PathNode] = [PathNode(start, 0, manhattan_distance(start, food))]
        closed: Set[Position] = set()

        while open_list:
            current_index = 0
            for i in range(1, len(open_list)):
                if open_list[i].f_cost < open_list[current_index].f_cost:
                    current_index = i
            current = open_list.pop(current_index)
            closed.add(current.position)

            if current.position == food:
                return self._reconstruct_path(current)

            for direction in _STEPS:
                neighbor = step(current.position, direction)
                if neighbor in closed:
                    continue
                if not self._is_valid_path_position(neighbor, snapshot):
                    continue

                g_cost = current.g_cost + 1
                existing = next((n for n in open_list if n.position == neighbor), None)
                if existing is None:
                    open_list.append(
                        PathNode(neighbor, g_cost, manhattan_distance(neighbor, food), current)
                    )
                elif g_cost < existing.g_cost:
                    existing.g_cost = g_cost
                    existing.parent = current

        return None

    @staticmethod
    def _reconstruct_path(node: PathNode) -> List[Position]:
        path: List[Position] = []
        current: Optional[PathNode] = node
        while current is not None:
            path.append(current.position)
            current = current.parent
        path.reverse()
        return path

    def calculate_available_space(self, position: Position, snapshot: SnakeSnapshot) -> int:
        """Count cells reachable from ``position``, stopping at ``SPACE_SEARCH_LIMIT``."""
        visited: Set[Position] = set()
        queue: Deque[Position] = deque([position])
        count = 0

        while queue and count < SPACE_SEARCH_LIMIT:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            count += 1

            for direction in _STEPS:
                neighbor = step(current, direction)
                if neighbor not in visited and self._is_valid_path_position(neighbor, snapshot):
                    queue.append(neighbor)

        return count

    # -------------------------------------------------------------------------
    # Output shaping
    # -------------------------------------------------------------------------

    def generate_suggested_actions(
        self,
        safe_moves: List[Move],
        path: Optional[List[Position]],
        snapshot: SnakeSnapshot,
    ) -> Tuple[Action, ...]:
        actions: List[Action] = []

        if path and len(path) > 1:
            next_position = path[1]
            direction = direction_between(path[0], next_position)
            actions.append(Action("move", 10, f"Move {direction} towards food", next_position))

        base = 5 if path else 8
        for i, (direction, position) in enumerate(safe_moves):
            space = self.calculate_available_space(position, snapshot)
            actions.append(Action(
                "move",
                base - i,
                f"Move {direction} ({space} spaces available)",
                position,
            ))

        return tuple(sorted(actions, key=lambda a: a.priority, reverse=True))

    def generate_alternative_options(
        self, possible_moves: List[Move], snapshot: SnakeSnapshot
    ) -> Tuple[Action, ...]:
        options: List[Action] = []
        for direction, position in possible_moves:
            safe = self.is_safe_move(position, snapshot)
            options.append(Action(
                "move",
                5 if safe else 1,
                f"Move {direction} {'(safe)' if safe else '(risky)'}",
                position,
            ))
        return tuple(options)

    @staticmethod
    def calculate_confidence(safe_count: int, path: Optional[List[Position]]) -> float:
        confidence = 0.5 + safe_count * 0.15
        if path:
            confidence += 0.3
        return min(1.0, confidence)

    @staticmethod
    def generate_reasoning(
        safe_moves: List[Move], path: Optional[List[Position]], risk: str
    ) -> str:
        reasoning = f"Found {len(safe_moves)} safe moves. "
        if path:
            reasoning += f"Clear path to food exists ({len(path) - 1} steps). "
        else:
            reasoning += "No direct path to food found. "
        return reasoning + f"Risk level: {risk}."

    def _action_explanation(self, action: Action) -> str:
        if action.target is None:
            return action.description
        return (
            f"This move leads to position ({action.target.x}, {action.target.y}) "
            "which appears to be the safest option based on pathfinding analysis."
        )

    @staticmethod
    def _direction_of(action: Action) -> str:
        words = action.description.split(" ")
        if action.target is None or len(words) < 2:
            return "unknown"
        return words[1]

    def _detailed_hint_message(self, suggestion: Suggestion) -> str:
        return f"Move {self._direction_of(suggestion.action)}. {suggestion.explanation}"

    def _basic_hint_message(self, suggestion: Suggestion) -> str:
        return f"Consider moving {self._direction_of(suggestion.action)}"

    def _debug_details(self) -> List[str]:
        if not self.last_path:
            return ["Path To Food: none"]
        return ["Path To Food: " + " -> ".join(f"{p.x},{p.y}" for p in self.last_path)]

    # -------------------------------------------------------------------------
    # Strategic food placement
    # -------------------------------------------------------------------------

    def generate_strategic_food_position(self, snapshot: SnakeSnapshot) -> Optional[Position]:
        """
        Pick a food cell that is a moderate challenge to reach.

        Candidates are empty cells 3 to 8 steps (Manhattan) from the head
        reachable by one or two simple paths of at most 3 steps. One is chosen
        at random; without candidates any empty cell is chosen.

        Returns:
            The chosen cell, or None when the snake fills the board.
        """
        head = snapshot.head
        body = set(snapshot.body)
        candidates: List[Position] = []

        if head is not None:
            for x in range(snapshot.width):
                for y in range(snapshot.height):
                    pos = Position(x, y)
                    if pos in body:
                        continue
                    distance = manhattan_distance(head, pos)
                    if not FOOD_MIN_DISTANCE <= distance <= FOOD_MAX_DISTANCE:
                        continue
                    paths = self.count_paths(head, pos, snapshot, FOOD_PATH_DEPTH)
                    if 0 < paths <= 2:
                        candidates.append(pos)

        if candidates:
            return random.choice(candidates)

        empty = [
            Position(x, y)
            for x in range(snapshot.width)
            for y in range(snapshot.height)
            if Position(x, y) not in body
        ]
        if not empty:
            logger.debug("No empty cell left for food")
            return None
        return random.choice(empty)

    def count_paths(
        self, start: Position, target: Position, snapshot: SnakeSnapshot, max_depth: int
    ) -> int:
        """Number of simple paths from ``start`` to ``target`` of at most ``max_depth`` steps."""
        count = 0
        path: List[Position] = [start]

        def dfs(current: Position, depth: int) -> None:
            nonlocal count
            if depth > max_depth:
                return
            if current == target:
                count += 1
                return
            for direction in _STEPS:
                neighbor = step(current, direction)
                if not self._is_valid_path_position(neighbor, snapshot):
                    continue
                if neighbor in path:
                    continue
                path.append(neighbor)
                dfs(neighbor, depth + 1)
                path.pop()

        dfs(start, 0)
        return count
