"""Immutable value types shared by the assistants and their hosts."""

from dataclasses import dataclass, field
from typing import (
    FrozenSet,
    Iterable,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

T = TypeVar("T")

RISK_LEVELS: Tuple[str, ...] = ("low", "medium", "high", "critical")
DIRECTIONS: Tuple[str, ...] = ("up", "down", "left", "right")
PIECE_TYPES: Tuple[str, ...] = ("I", "O", "T", "S", "Z", "J", "L")

BoardMatrix = Tuple[Tuple[T, ...], ...]


class Position(NamedTuple):
    """A grid cell, x = column, y = row (row 0 at the top)."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def as_matrix(
    rows: Iterable[Sequence[T]], width: Optional[int] = None
) -> BoardMatrix:
    """
    Freeze a list of rows into a rectangular tuple-of-tuples.

    Args:
        rows: Row sequences, top row first.
        width: Declared width. Defaults to the length of the first row.

    Returns:
        The matrix as nested tuples. Zero rows is allowed.

    Raises:
        ValueError: If a row's length differs from the declared width.
    """
    frozen = tuple(tuple(row) for row in rows)
    if width is None:
        width = len(frozen[0]) if frozen else 0
    for y, row in enumerate(frozen):
        if len(row) != width:
            raise ValueError(
                f"Row {y} has length {len(row)}; expected width {width}."
            )
    return frozen


@dataclass(frozen=True)
class Action:
    """A ranked move proposed by an assistant."""

    kind: str
    priority: float
    description: str
    target: Optional[Position] = None


@dataclass(frozen=True)
class Analysis:
    """Result of one ``analyze_game_state`` call."""

    confidence: float
    reasoning: str
    suggested_actions: Tuple[Action, ...]
    risk_assessment: str
    alternative_options: Tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        if self.risk_assessment not in RISK_LEVELS:
            raise ValueError(f"Unknown risk level: {self.risk_assessment!r}")


@dataclass(frozen=True)
class Suggestion:
    action: Action
    confidence: float
    explanation: str


@dataclass(frozen=True)
class Hint:
    message: str
    visual_indicator: Optional[Tuple[Position, ...]] = None
    confidence: Optional[float] = None
    detailed_explanation: Optional[str] = None


# -----------------------------------------------------------------------------
# Board snapshots
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class MinesweeperSnapshot:
    """
    Read-only view of a Minesweeper board.

    ``mine_positions`` is ground truth; the solver reads it only to compute
    the number a player already sees on a revealed cell.
    """

    revealed: BoardMatrix
    flagged: BoardMatrix
    mine_positions: FrozenSet[Position] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        revealed = as_matrix(self.revealed)
        width = len(revealed[0]) if revealed else 0
        flagged = as_matrix(self.flagged, width)
        if len(flagged) != len(revealed):
            raise ValueError("revealed and flagged grids must have the same shape.")
        mines = frozenset(Position(*p) for p in self.mine_positions)
        object.__setattr__(self, "revealed", revealed)
        object.__setattr__(self, "flagged", flagged)
        object.__setattr__(self, "mine_positions", mines)

    @property
    def width(self) -> int:
        return len(self.revealed[0]) if self.revealed else 0

    @property
    def height(self) -> int:
        return len(self.revealed)

    def is_revealed(self, pos: Position) -> bool:
        return bool(self.revealed[pos.y][pos.x])

    def is_flagged(self, pos: Position) -> bool:
        return bool(self.flagged[pos.y][pos.x])


@dataclass(frozen=True)
class SnakeSnapshot:
    """Snake body (head first), food, heading and grid size."""

    body: Tuple[Position, ...]
    food: Position
    direction: str
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {self.direction!r}")
        if self.width < 0 or self.height < 0:
            raise ValueError("Grid size must be non-negative.")
        object.__setattr__(self, "body", tuple(Position(*p) for p in self.body))
        object.__setattr__(self, "food", Position(*self.food))

    @property
    def head(self) -> Optional[Position]:
        return self.body[0] if self.body else None


@dataclass(frozen=True)
class TetrisSnapshot:
    """Settled cells (0 = empty) plus the active piece type."""

    board: BoardMatrix
    piece: str
    lines_cleared: int = 0
    elapsed_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.piece not in PIECE_TYPES:
            raise ValueError(f"Unknown piece type: {self.piece!r}")
        object.__setattr__(self, "board", as_matrix(self.board))

    @property
    def width(self) -> int:
        return len(self.board[0]) if self.board else 0

    @property
    def height(self) -> int:
        return len(self.board)
