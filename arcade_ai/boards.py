"""Board generators: a playable Minesweeper board and seeded random snapshots for all three games."""

import random
from collections import deque
from typing import Deque, Dict, FrozenSet, List, Optional, Set, Tuple

from .types import (
    DIRECTIONS,
    PIECE_TYPES,
    MinesweeperSnapshot,
    Position,
    SnakeSnapshot,
    TetrisSnapshot,
)
from .utils import get_neighborhoods

MINE_GENERATION_RULES = ("safe_first_action_rule", "safe_neighborhood_rule")


class MinesweeperBoard:
    """Playable Minesweeper board with first-click safety; produces snapshots for the assistant."""

    def __init__(
        self,
        width: int,
        height: int,
        mines_count: int,
        mines_generation_algorithm: str = "safe_neighborhood_rule",
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mines_count: Total number of mines to place, must be >= 0.
            mines_generation_algorithm: Mine placement rule; one of
                {"safe_first_action_rule", "safe_neighborhood_rule"}.
            rng: Random source for mine placement. Defaults to a fresh,
                unseeded ``random.Random``.

        Raises:
            ValueError: If dimensions are invalid, the rule is unrecognized or
                the board cannot hold the mines plus the safe zone.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mines_count < 0:
            raise ValueError("mines_count must be non-negative.")
        if mines_generation_algorithm not in MINE_GENERATION_RULES:
            raise ValueError(
                'mines_generation_algorithm must be "safe_first_action_rule" '
                'or "safe_neighborhood_rule".'
            )
        safe_zone = 1 if mines_generation_algorithm == "safe_first_action_rule" else 9
        if mines_count > width * height - safe_zone:
            raise ValueError(
                f"Cannot place {mines_count} mines and keep the first click safe "
                f"under {mines_generation_algorithm}."
            )

        self.width = width
        self.height = height
        self.mines_count = mines_count
        self.mines_generation_algorithm = mines_generation_algorithm
        self.rng = rng if rng is not None else random.Random()

        self.mines: FrozenSet[Position] = frozenset()
        self.revealed: List[List[bool]] = [[False] * width for _ in range(height)]
        self.flagged: List[List[bool]] = [[False] * width for _ in range(height)]
        self.first_move = True
        self.game_over = False
        self.unrevealed_count = width * height - mines_count

        self._neighborhoods = get_neighborhoods(width, height)

    def place_mines(self, first: Position) -> None:
        """Place mines once, keeping ``first`` (and its neighbors, by rule) clear."""
        safe: Set[Position] = {first}
        if self.mines_generation_algorithm == "safe_neighborhood_rule":
            safe.update(self._neighborhoods[first])

        eligible = [
            Position(x, y)
            for y in range(self.height)
            for x in range(self.width)
            if Position(x, y) not in safe
        ]
        self.mines = frozenset(self.rng.sample(eligible, self.mines_count))
        self.first_move = False

    def adjacent_mines(self, pos: Position) -> int:
        return sum(1 for n in self._neighborhoods[pos] if n in self.mines)

    def flood_fill(self, start: Position) -> List[Position]:
        """Reveal the connected zero region around ``start``; returns newly revealed cells."""
        frontier: Deque[Position] = deque([start])
        visited: Set[Position] = {start}
        newly_revealed: List[Position] = []

        while frontier:
            current = frontier.popleft()
            if self.revealed[current.y][current.x] or self.flagged[current.y][current.x]:
                continue

            self.revealed[current.y][current.x] = True
            self.unrevealed_count -= 1
            newly_revealed.append(current)

            if self.adjacent_mines(current) == 0:
                for n in self._neighborhoods[current]:
                    if n in visited or self.revealed[n.y][n.x]:
                        continue
                    visited.add(n)
                    frontier.append(n)

        return newly_revealed

    def reveal(self, pos: Position) -> int:
        """
        Reveal a cell.

        Returns:
            -1 when a mine is hit, 1 when every safe cell is revealed, else 0
            (also for no-op reveals of revealed or flagged cells).

        Raises:
            ValueError: If the cell is outside the board.
        """
        pos = Position(*pos)
        if not (0 <= pos.x < self.width and 0 <= pos.y < self.height):
            raise ValueError("Cell coordinates are outside the board.")
        if self.game_over or self.revealed[pos.y][pos.x] or self.flagged[pos.y][pos.x]:
            return 0

        if self.first_move:
            self.place_mines(pos)

        if pos in self.mines:
            self.revealed[pos.y][pos.x] = True
            self.game_over = True
            return -1

        self.flood_fill(pos)
        if self.unrevealed_count == 0:
            self.game_over = True
            return 1
        return 0

    def toggle_flag(self, pos: Position) -> None:
        pos = Position(*pos)
        if self.revealed[pos.y][pos.x]:
            return
        self.flagged[pos.y][pos.x] = not self.flagged[pos.y][pos.x]

    def snapshot(self) -> MinesweeperSnapshot:
        return MinesweeperSnapshot(
            revealed=tuple(tuple(row) for row in self.revealed),
            flagged=tuple(tuple(row) for row in self.flagged),
            mine_positions=self.mines,
        )

    def format_board(self, reveal_all: bool = False) -> str:
        """
        Render the board as text.

        Unknown cells are '.', flags 'F', mines 'M' (only when revealed or
        ``reveal_all``), other revealed cells their adjacent mine count.
        """

        def cell_str(x: int, y: int) -> str:
            pos = Position(x, y)
            if self.flagged[y][x] and not reveal_all:
                return "F"
            if reveal_all or self.revealed[y][x]:
                return "M" if pos in self.mines else str(self.adjacent_mines(pos))
            return "."

        header = " ".join(f"{x:2d}" for x in range(self.width))
        out = ["   " + header, "   " + "-" * (3 * self.width - 1)]
        for y in range(self.height):
            row = " ".join(f" {cell_str(x, y)}" for x in range(self.width))
            out.append(f"{y:2d} |" + row)
        return "\n".join(out)


# -----------------------------------------------------------------------------
# Seeded snapshot factories
# -----------------------------------------------------------------------------


def random_minesweeper_snapshot(
    width: int,
    height: int,
    mines_count: int,
    rng: random.Random,
    *,
    reveals: int = 1,
) -> MinesweeperSnapshot:
    """
    Play ``reveals`` random safe clicks on a fresh board and snapshot it.

    The first click is uniform over the board; later clicks are uniform over
    hidden safe cells.
    """
    board = MinesweeperBoard(width, height, mines_count, rng=rng)
    board.reveal(Position(rng.randrange(width), rng.randrange(height)))

    for _ in range(reveals - 1):
        hidden = [
            Position(x, y)
            for y in range(height)
            for x in range(width)
            if not board.revealed[y][x] and Position(x, y) not in board.mines
        ]
        if not hidden:
            break
        board.reveal(rng.choice(hidden))

    return board.snapshot()


_DELTAS: Dict[str, Tuple[int, int]] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}


def random_snake_snapshot(
    width: int, height: int, length: int, rng: random.Random
) -> SnakeSnapshot:
    """
    Grow a snake of up to ``length`` cells by a self-avoiding random walk.

    The walk starts at the tail; it stops early when boxed in. The heading
    points from the second segment to the head; food is a random free cell.

    Raises:
        ValueError: If the grid is empty or ``length`` is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be positive.")
    if length <= 0:
        raise ValueError("length must be positive.")

    walk: List[Position] = [Position(rng.randrange(width), rng.randrange(height))]
    occupied: Set[Position] = set(walk)
    while len(walk) < length:
        last = walk[-1]
        options = []
        for dx, dy in _DELTAS.values():
            nxt = Position(last.x + dx, last.y + dy)
            if 0 <= nxt.x < width and 0 <= nxt.y < height and nxt not in occupied:
                options.append(nxt)
        if not options:
            break
        nxt = rng.choice(options)
        walk.append(nxt)
        occupied.add(nxt)

    body = tuple(reversed(walk))
    if len(body) > 1:
        head, neck = body[0], body[1]
        direction = next(
            d for d, (dx, dy) in _DELTAS.items()
            if (neck.x + dx, neck.y + dy) == (head.x, head.y)
        )
    else:
        direction = rng.choice(DIRECTIONS)

    free = [
        Position(x, y)
        for y in range(height)
        for x in range(width)
        if Position(x, y) not in occupied
    ]
    food = rng.choice(free) if free else body[-1]
    return SnakeSnapshot(body, food, direction, width, height)


def random_tetris_snapshot(
    rng: random.Random,
    width: int = 10,
    height: int = 20,
    *,
    max_stack: int = 8,
    density: float = 0.7,
) -> TetrisSnapshot:
    """
    Random settled stack of up to ``max_stack`` rows, each with at least one gap.

    Rows above the stack are empty; the active piece is uniform over the
    seven types.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be positive.")

    stack = rng.randint(0, min(max_stack, height))
    board = [[0] * width for _ in range(height)]
    for y in range(height - stack, height):
        row = [1 if rng.random() < density else 0 for _ in range(width)]
        if all(row):
            row[rng.randrange(width)] = 0
        board[y] = row

    return TetrisSnapshot(
        board=board,
        piece=rng.choice(PIECE_TYPES),
        lines_cleared=rng.randint(0, 40),
        elapsed_seconds=float(rng.randint(0, 600)),
    )
