"""
Demo for pipe loop analysis.
Runs the sample layouts (or grid files given on the command line) and prints
the furthest-point distance and enclosed tile count for each.
"""

from pathlib import Path
import logging
import sys

import simple_chalk as chalk  # type: ignore[import-untyped]
from rich.console import Console
from rich.table import Table
from rich.text import Text

from pipe_parser import parse_pipe_grid
from pipe_types import PipeLoopError
from pipeloop import count_interior, interior_by_pick, trace


LAYOUTS = dict(
    square="""\
.....
.S-7.
.|.|.
.L-J.
.....""",
    winding="""\
..F7.
.FJ|.
SJ.L7
|F--J
LJ...""",
    squeeze="""\
...........
.S-------7.
.|F-----7|.
.||.....||.
.||.....||.
.|L-7.F-J|.
.|..|.|..|.
.L--J.L--J.
...........""",
    nested="""\
.F----7F7F7F7F-7....
.|F--7||||||||FJ....
.||.FJ||||||||L7....
FJL7L7LJLJ||LJ.L-7..
L--J.L7...LJS7F-7L7.
....F-J..F7FJ|L7L7L7
....L7.F7||L7|.L7L7|
.....|FJLJ|FJ|F7|.LJ
....FJL-7.||.||||...
....L---J.LJ.LJLJ...""",
    junk="""\
FF7FSF7F7F7F7F7F---7
L|LJ||||||||||||F--J
FL-7LJLJ||||||LJL-77
F--JF--7||LJLJ7F7FJ-
L---JF-JLJ.||-FJLJJ7
|F|F-JF---7F7-L7L|7|
|FFJF7L7F-JF7|JL---7
7-L-JL7||F7|L7F-7F7|
L.L7LFJ|||||FJL7||LJ
L7JLJL-JLJLJL--JLJ.L""",
    broken="""\
.....
.S-7.
.|...
.L-J.
.....""",
)


def analyze_layout(name: str, text: str) -> list[str | Text]:
    """Build one results row for a layout, reporting failures inline."""
    try:
        grid = parse_pipe_grid(text)
        loop = trace(grid)
        interior = count_interior(grid, loop.path, loop.start_shape)
        pick = interior_by_pick(loop)
    except PipeLoopError as exc:
        summary = str(exc).splitlines()[0]
        return [name, "-", "-", "-", Text.from_ansi(chalk.red(f"{type(exc).__name__}: {summary}"))]

    check = chalk.green("ok") if pick == interior else chalk.red(f"pick={pick}")
    return [
        name,
        f"{grid.width}x{grid.height}",
        str((loop.length + 1) // 2),
        str(interior),
        Text.from_ansi(check),
    ]


def main(layouts: dict[str, str]) -> None:
    """Print a results table for every layout."""
    table = Table(title="Pipe Loops")
    table.add_column("Layout", style="bold")
    table.add_column("Size")
    table.add_column("Furthest", justify="right")
    table.add_column("Interior", justify="right")
    table.add_column("Check")

    for name, text in layouts.items():
        table.add_row(*analyze_layout(name, text))

    Console().print(table)


if __name__ == "__main__":
    args = sys.argv[1:]
    if args and args[0] == 'verbose':
        # Show trace and count summaries
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
        args = args[1:]

    if args:
        main({path: Path(path).read_text() for path in args})
    else:
        main(LAYOUTS)
