# sudoku.py
# Solve one 9x9 Sudoku read from stdin via SAT and print it before and after.
#   $ printf '530070000\n600195000\n...' | python sudoku.py

import logging
import sys
from typing import Optional, TextIO

from grid_io import read_grid
from sudoku_sat import (
    InconsistentAssignmentError,
    MalformedGridError,
    Sudoku,
    SudokuError,
    UnsolvableError,
    is_valid_solution,
)

log = logging.getLogger(__name__)

EXIT_CODES = {
    UnsolvableError: 1,
    MalformedGridError: 2,
    InconsistentAssignmentError: 3,
}


def run(stream: Optional[TextIO] = None) -> None:
    grid = read_grid(stream)
    if grid is None:
        raise MalformedGridError("Expected 9 lines of at least 9 characters")
    with Sudoku(grid) as sudoku:
        print(f"Input:\n{sudoku}")
        sudoku.solve()
        if not is_valid_solution(sudoku.grid):
            raise InconsistentAssignmentError("Solver answer breaks a row, column or box rule")
        print(f"Output:\n{sudoku}")


def main(stream: Optional[TextIO] = None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    try:
        run(stream)
    except SudokuError as e:
        log.error("%s", e)
        return EXIT_CODES.get(type(e), 1)
    return 0


if __name__ == "__main__":
    sys.exit(main())
