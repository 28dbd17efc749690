# grid_io.py
# Text format for 9x9 grids: 9 lines, first 9 characters of each line read
# positionally ('1'..'9' are digits, anything else is a blank).

import sys
from typing import Iterable, List, Optional, TextIO

BORDER = "+-------+-------+-------+"


def parse_row(line: str) -> Optional[List[int]]:
    line = line.rstrip("\r\n")
    if len(line) < 9:
        return None
    return [int(ch) if "1" <= ch <= "9" else 0 for ch in line[:9]]


def parse_grid(lines: Iterable[str]) -> Optional[List[List[int]]]:
    """Read 9 rows from 'lines'; None if there are fewer or one is too short."""
    grid = []
    it = iter(lines)
    for _ in range(9):
        row = parse_row(next(it, ""))
        if row is None:
            return None
        grid.append(row)
    return grid


def read_grid(stream: Optional[TextIO] = None) -> Optional[List[List[int]]]:
    stream = sys.stdin if stream is None else stream
    return parse_grid(stream.readline() for _ in range(9))


def format_grid(grid: List[List[int]]) -> str:
    """Bordered 9x9 box, blanks shown as '_'; ends with a newline."""
    out = [BORDER]
    for r in range(9):
        parts = ["|"]
        for c in range(9):
            parts.append(" _" if grid[r][c] == 0 else f" {grid[r][c]}")
            if c % 3 == 2:
                parts.append(" |")
        out.append("".join(parts))
        if r % 3 == 2:
            out.append(BORDER)
    return "\n".join(out) + "\n"
