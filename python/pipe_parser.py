"""
Grid parsing utilities for pipe loops.

Turns a block of text (one row per line) into a validated PipeGrid.
"""

from __future__ import annotations

from typing import Sequence

from pipe_types import (
    EmptyGridError,
    IrregularRowError,
    MultipleStartTilesError,
    NoStartTileError,
    PipeGrid,
    Position,
    Tile,
    connections_for,
)

__all__ = ["parse_pipe_grid", "split_rows"]


def split_rows(text: str) -> list[str]:
    """
    Split a text block into grid rows.

    Handles both ``\\n`` and ``\\r\\n`` line endings and ignores a single
    trailing newline, so text read straight from a file parses the same as
    a literal.
    """
    rows = text.splitlines()
    # Drop empty lines at the edges only; whitespace rows are left for validation
    while rows and not rows[-1]:
        rows.pop()
    while rows and not rows[0]:
        rows.pop(0)
    return rows


def parse_pipe_grid(source: str | Sequence[str]) -> PipeGrid:
    """
    Parse a pipe grid.

    Format:
    - One row per line, every row the same length
    - Each character is one tile:
      * '|' '-' 'L' 'J' '7' 'F': connector pipes
      * 'S': the start tile (connects in all four directions)
      * '.': ground (connects nothing)

    Example:
        .....
        .S-7.
        .|.|.
        .L-J.
        .....

    Args:
        source: Either a text block or a sequence of row strings

    Returns:
        The parsed PipeGrid

    Raises:
        EmptyGridError: No rows at all
        IrregularRowError: Rows differ in length
        InvalidSymbolError: A character outside the tile alphabet
        NoStartTileError: No 'S' tile
        MultipleStartTilesError: More than one 'S' tile
    """
    row_strings = split_rows(source) if isinstance(source, str) else list(source)

    if not row_strings:
        raise EmptyGridError("Grid has no rows")

    # Validate all rows have same length
    cols = len(row_strings[0])
    mismatched = [(i, len(row)) for i, row in enumerate(row_strings) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in grid\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of tiles"
        raise IrregularRowError(error_msg, mismatched)

    rows: list[tuple[Tile, ...]] = []
    starts: list[Position] = []

    for row_idx, row_str in enumerate(row_strings):
        tiles: list[Tile] = []
        for col_idx, char in enumerate(row_str):
            position = Position(row_idx, col_idx)
            tile = Tile(position, char, connections_for(char, position))
            if tile.is_start:
                starts.append(position)
            tiles.append(tile)
        rows.append(tuple(tiles))

    if not starts:
        raise NoStartTileError(
            f"Grid has no start tile\n"
            f"  Size: {cols}x{len(rows)}\n"
            f"  Exactly one 'S' is required"
        )
    if len(starts) > 1:
        raise MultipleStartTilesError(starts)

    return PipeGrid(tuple(rows), starts[0])
