"""
Pipe loop tracing and enclosed-area counting.
Two-phase algorithm: trace (builds the closed path) -> count (scanline parity).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction

from pipe_types import (
    TILE_CONNECTIONS,
    Direction,
    InconsistentPathError,
    LoopBreak,
    LoopRules,
    MalformedLoopError,
    PipeGrid,
    Position,
    StartShape,
    Tile,
    is_compatible,
    reverse,
)

logger = logging.getLogger(__name__)

__all__ = [
    "TracedLoop",
    "count_interior",
    "count_row_interior",
    "enclosed_area",
    "furthest_point_steps",
    "interior_by_pick",
    "interior_tile_count",
    "trace",
]


# =============================================================================
# Phase 1: Trace
# =============================================================================


@dataclass(frozen=True)
class TracedLoop:
    """A closed loop through the start tile and the start tile's real shape."""

    path: tuple[Tile, ...]  # Start tile first and last
    start_shape: StartShape

    @property
    def length(self) -> int:
        """Number of edges in the loop."""
        return len(self.path) - 1

    @property
    def positions(self) -> frozenset[Position]:
        return frozenset(tile.position for tile in self.path)


def _connected_directions(grid: PipeGrid, tile: Tile) -> list[Direction]:
    return [
        d
        for d in Direction
        if is_compatible(tile, d, grid.neighbor(tile.position, d))
    ]


def _walk(
    grid: PipeGrid, start: Tile, leg: Direction, max_steps: int
) -> tuple[tuple[Tile, ...], Direction]:
    """
    Follow the pipes from ``start`` through ``leg`` until the start is reached again.

    Returns:
        (path, heading) where heading is the direction of the final step
        into the start tile
    """
    path = [start]
    heading = leg
    current = grid.neighbor(start.position, leg)
    steps = 1

    while current is not None and not current.is_start:
        # A closed chain of two-way tiles cannot exceed this; guards bad callers
        if steps >= max_steps:
            raise MalformedLoopError(
                LoopBreak.STEP_LIMIT,
                current.position,
                f"No return to start within {max_steps} steps",
            )
        path.append(current)

        # Every direction except the one leading straight back
        onward = [
            d
            for d in current.directions
            if d != reverse(heading)
            and is_compatible(current, d, grid.neighbor(current.position, d))
        ]
        if len(onward) != 1:
            raise MalformedLoopError(
                LoopBreak.DEAD_END,
                current.position,
                f"Tile '{current.symbol}' entered heading {heading.value} "
                f"has {len(onward)} onward connections",
            )

        heading = onward[0]
        current = grid.neighbor(current.position, heading)
        steps += 1

    if current is None:
        # is_compatible never lets a step leave the grid
        raise MalformedLoopError(LoopBreak.DEAD_END, path[-1].position, "Walked off the grid")

    path.append(current)
    return tuple(path), heading


def trace(grid: PipeGrid) -> TracedLoop:
    """
    Trace the loop passing through the start tile.

    Every compatible neighbour of the start is a candidate leg. Legs are tried
    in turn; the first that leads back to the start defines the loop, and the
    direction it returns through resolves the start tile's shape. Any other leg
    that also closes means a second loop crosses the start.

    Raises:
        MalformedLoopError: The start has fewer than two connected legs, no
            leg closes into a loop, or more than one loop passes the start
    """
    start = grid.start_tile
    legs = _connected_directions(grid, start)
    if len(legs) < 2:
        raise MalformedLoopError(
            LoopBreak.TOO_FEW_LEGS,
            start.position,
            f"Start connects to {len(legs)} neighbours, a loop needs two",
        )

    max_steps = grid.non_empty_count()
    failure: MalformedLoopError | None = None
    found: TracedLoop | None = None

    for leg in legs:
        if found is not None and leg in found.start_shape.directions:
            continue
        try:
            path, heading = _walk(grid, start, leg, max_steps)
        except MalformedLoopError as exc:
            logger.debug("trace: leg %s abandoned (%s)", leg.value, exc.reason.value)
            failure = exc
            continue

        shape = StartShape(departure=leg, arrival=reverse(heading))
        if found is not None:
            raise MalformedLoopError(
                LoopBreak.EXTRA_LOOP,
                start.position,
                f"Legs {found.start_shape.departure.value}/{found.start_shape.arrival.value} "
                f"and {shape.departure.value}/{shape.arrival.value} both close",
            )
        found = TracedLoop(path, shape)

    if found is None:
        assert failure is not None
        raise failure

    logger.debug(
        "trace: loop of %d edges, start resolves to '%s'",
        found.length,
        found.start_shape.symbol,
    )
    return found


def furthest_point_steps(grid: PipeGrid) -> int:
    """Steps along the loop from the start to the farthest tile."""
    loop = trace(grid)
    return (loop.length + 1) // 2


# =============================================================================
# Phase 2: Count
# =============================================================================


def _effective_symbol(tile: Tile, start_symbol: str) -> str:
    return start_symbol if tile.is_start else tile.symbol


def count_row_interior(
    grid: PipeGrid,
    row: int,
    path_positions: frozenset[Position],
    start_symbol: str,
    rules: LoopRules = LoopRules(),
) -> int:
    """
    Count interior tiles in a single row by scanning left to right.

    A tile is inside when an odd number of vertical edges lie to its left.
    Rows are independent of each other.
    """
    edges = rules.edge_class.symbols
    inside = False
    count = 0

    for tile in grid.tiles[row]:
        if tile.position in path_positions:
            if _effective_symbol(tile, start_symbol) in edges:
                inside = not inside
        elif inside:
            count += 1

    return count


def count_interior(
    grid: PipeGrid,
    path: tuple[Tile, ...],
    start_shape: StartShape,
    rules: LoopRules = LoopRules(),
) -> int:
    """
    Count tiles strictly enclosed by the loop.

    Uses the even-odd rule row by row, crossing vertical edges picked by
    ``rules.edge_class``. The start tile is treated as the connector given by
    ``start_shape``.

    Raises:
        InconsistentPathError: A path tile disagrees with the grid, or is not
            a two-way connector once the start is substituted
    """
    start_symbol = start_shape.symbol

    for tile in path:
        if not grid.contains(tile.position) or grid.tile_at(tile.position) != tile:
            raise InconsistentPathError(
                f"Path tile '{tile.symbol}' does not match the grid\n"
                f"  Row {tile.position.row}, column {tile.position.col}"
            )
        symbol = _effective_symbol(tile, start_symbol)
        if len(TILE_CONNECTIONS.get(symbol, ())) != 2:
            raise InconsistentPathError(
                f"Path tile '{symbol}' is not a connector\n"
                f"  Row {tile.position.row}, column {tile.position.col}"
            )

    path_positions = frozenset(tile.position for tile in path)
    return sum(
        count_row_interior(grid, row, path_positions, start_symbol, rules)
        for row in range(grid.height)
    )


def interior_tile_count(grid: PipeGrid, rules: LoopRules = LoopRules()) -> int:
    """Number of non-loop tiles enclosed by the loop."""
    loop = trace(grid)
    count = count_interior(grid, loop.path, loop.start_shape, rules)
    logger.info(
        "interior_tile_count: loop=%d, interior=%d, edge_class=%s",
        loop.length,
        count,
        rules.edge_class.value,
    )
    return count


# =============================================================================
# Geometric Cross-Check
# =============================================================================


def enclosed_area(path: tuple[Tile, ...]) -> Fraction:
    """
    Area enclosed by a closed path of tile centres (shoelace formula).

    The path must start and end on the same tile.
    """
    points = [tile.position for tile in path]
    twice_area = sum(
        a.col * b.row - b.col * a.row for a, b in zip(points, points[1:])
    )
    return Fraction(abs(twice_area), 2)


def interior_by_pick(loop: TracedLoop) -> int:
    """
    Interior tile count from Pick's theorem: A = I + B/2 - 1.

    Independent of the scanline count, so the two can check each other.
    """
    interior = enclosed_area(loop.path) - Fraction(loop.length, 2) + 1
    if interior.denominator != 1:
        raise InconsistentPathError(f"Non-integral interior count {interior}")
    return int(interior)
