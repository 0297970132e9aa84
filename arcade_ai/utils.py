"""Grid helpers shared by the assistants."""

import math
from typing import Dict, List, Tuple

from .types import Position

# Module-level cache: (width, height) -> {Position: (Position, ...), ...}
_NEIGHBORHOODS_CACHE: Dict[
    Tuple[int, int],
    Dict[Position, Tuple[Position, ...]]
] = {}


def get_neighborhoods(
    width: int, height: int
) -> Dict[Position, Tuple[Position, ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Neighbors are listed row by row (dy outer, dx inner), which fixes the
    order in which constraint cells are discovered.

    Args:
        width: Grid width (number of columns). May be zero.
        height: Grid height (number of rows). May be zero.

    Returns:
        Mapping from each cell to a tuple of valid neighboring positions
        under 8-connectivity. Empty for a zero-size grid.

    Raises:
        ValueError: If width or height is negative.
    """
    if width < 0 or height < 0:
        raise ValueError("width and height must be non-negative.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Position, Tuple[Position, ...]] = {}
    for y in range(height):
        for x in range(width):
            nbrs: List[Position] = []
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    if dx == 0 and dy == 0:
                        continue
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < width and 0 <= ny < height:
                        nbrs.append(Position(nx, ny))
            neighborhoods[Position(x, y)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def manhattan_distance(a: Position, b: Position) -> int:
    """Return |ax - bx| + |ay - by|."""
    return abs(a.x - b.x) + abs(a.y - b.y)


def is_finite_number(value: object) -> bool:
    """True for real numbers that are neither NaN nor infinite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def clamp_unit(value: float) -> float:
    """Clamp a finite number into [0, 1]."""
    return max(0.0, min(1.0, float(value)))


def format_priority(priority: float) -> str:
    """Render a priority without a trailing '.0' (10 -> '10', 9.9 -> '9.9')."""
    return f"{priority:g}"
