"""
Test rotation framework for systematic directional testing.

Rotates pipe grids (tile positions and tile shapes) so each loop case runs in
all 4 rotations (0°, 90°, 180°, 270°).
"""

from dataclasses import dataclass

import pytest

from pipe_parser import parse_pipe_grid, split_rows
from pipe_types import TILE_CONNECTIONS, Direction, StartShape, symbol_for
from pipeloop import interior_by_pick, interior_tile_count, furthest_point_steps, trace

from test_pipeloop import JUNK, NESTED, SQUARE, SQUEEZE, STUB, WINDING


# =============================================================================
# Rotation Utilities
# =============================================================================


def rotate_direction_90(direction: Direction) -> Direction:
    """Rotate a direction 90° clockwise."""
    rotation_map = {
        Direction.N: Direction.E,
        Direction.E: Direction.S,
        Direction.S: Direction.W,
        Direction.W: Direction.N,
    }
    return rotation_map[direction]


def rotate_symbol_90(symbol: str) -> str:
    """Rotate a tile's shape 90° clockwise; S and ground are unchanged."""
    directions = TILE_CONNECTIONS[symbol]
    if len(directions) != 2:
        return symbol
    return symbol_for(frozenset(rotate_direction_90(d) for d in directions))


def rotate_text_90(text: str) -> str:
    """
    Rotate a grid 90° clockwise.

    In an N×M grid rotated 90° clockwise, it becomes M×N.
    Position (row, col) → (col, N - 1 - row)
    """
    rows = split_rows(text)
    original_rows = len(rows)
    original_cols = len(rows[0])

    new_rows = []
    for new_row in range(original_cols):
        new_rows.append(
            "".join(
                rotate_symbol_90(rows[original_rows - 1 - new_col][new_row])
                for new_col in range(original_rows)
            )
        )
    return "\n".join(new_rows)


# =============================================================================
# Test Case Data Structures
# =============================================================================


@dataclass
class RotationalTestCase:
    """A loop with known answers that must hold in every rotation."""

    name: str
    text: str
    interior: int
    steps: int | None = None  # None = take the unrotated answer as reference

    __test__ = False

    def get_all_rotations(self) -> list[tuple[int, str]]:
        """
        Generate all 4 rotations of this test case.

        Returns:
            List of (rotation_degrees, text) tuples
        """
        results = []
        current = self.text
        for rotation in [0, 90, 180, 270]:
            results.append((rotation, current))
            current = rotate_text_90(current)
        return results


def run_rotational_test(test_case: RotationalTestCase) -> None:
    """Check both answers and the Pick cross-check in all 4 rotations."""
    steps = test_case.steps
    if steps is None:
        steps = furthest_point_steps(parse_pipe_grid(test_case.text))

    for rotation, text in test_case.get_all_rotations():
        grid = parse_pipe_grid(text)
        label = f"{test_case.name} at {rotation}°"

        assert furthest_point_steps(grid) == steps, label
        assert interior_tile_count(grid) == test_case.interior, label
        assert interior_by_pick(trace(grid)) == test_case.interior, label


CASES = [
    RotationalTestCase("square", SQUARE, interior=1, steps=4),
    RotationalTestCase("winding", WINDING, interior=1, steps=8),
    RotationalTestCase("squeeze", SQUEEZE, interior=4),
    RotationalTestCase("nested", NESTED, interior=8),
    RotationalTestCase("junk", JUNK, interior=10),
    RotationalTestCase("stub", STUB, interior=1, steps=4),
]


# =============================================================================
# Tests
# =============================================================================


class TestRotationUtilities:
    """Tests for the rotation helpers themselves."""

    def test_symbols(self) -> None:
        assert [rotate_symbol_90(s) for s in "|-LFJ7S."] == list("-|F7LJS.")

    def test_four_rotations_restore_text(self) -> None:
        text = WINDING
        for _ in range(4):
            text = rotate_text_90(text)
        assert text == WINDING

    def test_dimensions_swap(self) -> None:
        grid = parse_pipe_grid(rotate_text_90(SQUEEZE))
        original = parse_pipe_grid(SQUEEZE)

        assert (grid.width, grid.height) == (original.height, original.width)


class TestRotations:
    """Loop answers are independent of grid orientation."""

    @pytest.mark.parametrize("test_case", CASES, ids=[case.name for case in CASES])
    def test_all_rotations(self, test_case: RotationalTestCase) -> None:
        run_rotational_test(test_case)

    def test_start_shape_rotates(self) -> None:
        """The resolved start shape turns with the grid."""
        shape = trace(parse_pipe_grid(SQUARE)).start_shape
        rotated = trace(parse_pipe_grid(rotate_text_90(SQUARE))).start_shape

        expected = StartShape(
            rotate_direction_90(shape.departure), rotate_direction_90(shape.arrival)
        )
        assert rotated.directions == expected.directions
