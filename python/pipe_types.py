"""
Shared type definitions for the pipe loop system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class Direction(Enum):
    """Cardinal direction for traversal."""

    N = "N"  # Up (decreasing row)
    S = "S"  # Down (increasing row)
    E = "E"  # Right (increasing col)
    W = "W"  # Left (decreasing col)


_REVERSE = {
    Direction.N: Direction.S,
    Direction.S: Direction.N,
    Direction.E: Direction.W,
    Direction.W: Direction.E,
}

# (row delta, col delta)
DELTAS = {
    Direction.N: (-1, 0),
    Direction.S: (1, 0),
    Direction.E: (0, 1),
    Direction.W: (0, -1),
}


def reverse(direction: Direction) -> Direction:
    """Return the opposite direction."""
    return _REVERSE[direction]


# =============================================================================
# Errors
# =============================================================================


class PipeLoopError(ValueError):
    """Base class for every failure raised while parsing or tracing a grid."""


class EmptyGridError(PipeLoopError):
    pass


class IrregularRowError(PipeLoopError):
    def __init__(self, message: str, mismatched: list[tuple[int, int]]) -> None:
        super().__init__(message)
        self.mismatched = mismatched


class InvalidSymbolError(PipeLoopError):
    def __init__(self, symbol: str, position: Position) -> None:
        super().__init__(
            f"Invalid tile symbol '{symbol}'\n"
            f"  Row {position.row}, column {position.col}\n"
            f"  Valid symbols: {' '.join(TILE_CONNECTIONS)}"
        )
        self.symbol = symbol
        self.position = position


class NoStartTileError(PipeLoopError):
    pass


class MultipleStartTilesError(PipeLoopError):
    def __init__(self, positions: list[Position]) -> None:
        listed = ", ".join(f"(row {p.row}, col {p.col})" for p in positions)
        super().__init__(
            f"Found {len(positions)} start tiles, expected exactly one\n"
            f"  Positions: {listed}"
        )
        self.positions = positions


class LoopBreak(Enum):
    """Reason why tracing failed to close the loop."""

    TOO_FEW_LEGS = "too_few_legs"  # Start has fewer than two connected neighbours
    DEAD_END = "dead_end"  # A pipe leads nowhere compatible
    STEP_LIMIT = "step_limit"  # Walked more steps than there are pipe tiles
    EXTRA_LOOP = "extra_loop"  # Start closes more than one loop


class MalformedLoopError(PipeLoopError):
    def __init__(self, reason: LoopBreak, position: Position, detail: str = "") -> None:
        message = (
            f"Malformed loop ({reason.value})\n"
            f"  Stopped at row {position.row}, column {position.col}"
        )
        if detail:
            message += f"\n  {detail}"
        super().__init__(message)
        self.reason = reason
        self.position = position


class InconsistentPathError(PipeLoopError):
    pass


# =============================================================================
# Tile Catalog
# =============================================================================


TILE_CONNECTIONS: dict[str, frozenset[Direction]] = {
    "|": frozenset({Direction.N, Direction.S}),
    "-": frozenset({Direction.E, Direction.W}),
    "L": frozenset({Direction.N, Direction.E}),
    "J": frozenset({Direction.N, Direction.W}),
    "7": frozenset({Direction.S, Direction.W}),
    "F": frozenset({Direction.S, Direction.E}),
    "S": frozenset(Direction),
    ".": frozenset(),
}

# Two-direction connectors only; the start and ground tiles have no inverse.
_SYMBOLS_BY_CONNECTIONS = {
    directions: symbol
    for symbol, directions in TILE_CONNECTIONS.items()
    if len(directions) == 2
}


def connections_for(symbol: str, position: Position) -> frozenset[Direction]:
    """Look up the directions a tile symbol connects."""
    try:
        return TILE_CONNECTIONS[symbol]
    except KeyError:
        raise InvalidSymbolError(symbol, position) from None


def symbol_for(directions: frozenset[Direction]) -> str:
    """Find the connector symbol that joins exactly ``directions``."""
    symbol = _SYMBOLS_BY_CONNECTIONS.get(directions)
    if symbol is None:
        names = ", ".join(sorted(d.value for d in directions))
        raise InconsistentPathError(f"No connector joins directions {{{names}}}")
    return symbol


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class Position:
    """A cell coordinate within the grid."""

    row: int
    col: int

    def step(self, direction: Direction) -> Position:
        dr, dc = DELTAS[direction]
        return Position(self.row + dr, self.col + dc)


@dataclass(frozen=True)
class Tile:
    """A single grid cell and the directions it connects."""

    position: Position
    symbol: str
    directions: frozenset[Direction]

    @property
    def is_start(self) -> bool:
        return len(self.directions) == 4

    @property
    def is_empty(self) -> bool:
        return not self.directions


def is_compatible(tile: Tile, direction: Direction, neighbor: Tile | None) -> bool:
    """True when ``tile`` and ``neighbor`` are joined through ``direction``."""
    return (
        neighbor is not None
        and direction in tile.directions
        and reverse(direction) in neighbor.directions
    )


@dataclass(frozen=True)
class StartShape:
    """
    The shape the start tile really has, resolved from the loop.

    ``departure`` is the direction of the first step away from the start;
    ``arrival`` is the side of the start tile the loop re-enters through.
    """

    departure: Direction
    arrival: Direction

    @property
    def directions(self) -> frozenset[Direction]:
        return frozenset({self.departure, self.arrival})

    @property
    def symbol(self) -> str:
        return symbol_for(self.directions)


@dataclass(frozen=True)
class PipeGrid:
    """A rectangular 2D grid of tiles with exactly one start tile."""

    tiles: tuple[tuple[Tile, ...], ...]
    start: Position

    @property
    def height(self) -> int:
        return len(self.tiles)

    @property
    def width(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def start_tile(self) -> Tile:
        return self.tile_at(self.start)

    def contains(self, position: Position) -> bool:
        return 0 <= position.row < self.height and 0 <= position.col < self.width

    def tile_at(self, position: Position) -> Tile:
        return self.tiles[position.row][position.col]

    def neighbor(self, position: Position, direction: Direction) -> Tile | None:
        """Return the adjacent tile, or None when the step leaves the grid."""
        target = position.step(direction)
        if not self.contains(target):
            return None
        return self.tile_at(target)

    def tiles_iter(self) -> Iterator[Tile]:
        for row in self.tiles:
            yield from row

    def non_empty_count(self) -> int:
        return sum(1 for tile in self.tiles_iter() if not tile.is_empty)


# =============================================================================
# Configuration
# =============================================================================


class EdgeClass(Enum):
    """Which connectors count as a vertical boundary crossing in a row scan."""

    SOUTH = "south"  # Connectors reaching the row below: | F 7
    NORTH = "north"  # Connectors reaching the row above: | L J

    @property
    def symbols(self) -> frozenset[str]:
        return _EDGE_SYMBOLS[self]


_EDGE_SYMBOLS = {
    EdgeClass.SOUTH: frozenset({"|", "F", "7"}),
    EdgeClass.NORTH: frozenset({"|", "L", "J"}),
}


@dataclass(frozen=True)
class LoopRules:
    """Rules governing interior counting."""

    edge_class: EdgeClass = EdgeClass.SOUTH
