# sudoku_sat.py
# Encode a 9x9 Sudoku as CNF on a SolverBackend, solve it, decode the model.
# Direct (pairwise) encoding over 729 variables x_{r,c,d}: "cell (r,c) holds d+1".

import logging
from typing import Dict, List, Optional

from grid_io import format_grid
from sat_backend import SolveResult, SolverBackend, Status, make_backend

log = logging.getLogger(__name__)

Grid = List[List[int]]

N = 9
NUM_VARS = N * N * N
# per cell: 1 at-least-one + 9*8 pairs for each of cell/row/column/box
RULE_CLAUSES = N * N * (1 + 4 * N * (N - 1))


# ----- errors
class SudokuError(Exception):
    """Base class for every failure of the encode/solve/decode pipeline."""


class MalformedGridError(SudokuError, ValueError):
    """No usable grid could be read from the input, or the grid is not 9x9 digits."""


class UnsolvableError(SudokuError):
    """The solver did not return a satisfying assignment."""

    def __init__(self, result: SolveResult):
        super().__init__(f"Couldn't solve: solver answered {result.status.value}")
        self.result = result


class InconsistentAssignmentError(SudokuError):
    """A satisfying assignment that does not describe a valid fill of the grid."""


# ----- variable mapping: (row, col, digit) -> slot in the flat literal table
def lit_index(r: int, c: int, d: int) -> int:
    # r, c, d are 0-based; d stands for digit d+1
    return 81 * r + 9 * c + d


def build_literal_table(backend: SolverBackend) -> List[int]:
    """Allocate one fresh variable per (row, col, digit), row-major then col then digit."""
    return [backend.new_var() for _ in range(NUM_VARS)]


def encode_rules(backend: SolverBackend, lits: List[int]) -> None:
    """Puzzle-independent clauses: exactly one digit per cell, no repeats in a row/column/box."""
    for i in range(N):
        for j in range(N):
            alo = []
            for k in range(N):
                x = lits[lit_index(i, j, k)]
                alo.append(x)
                for l in range(N):
                    # cell (i,j) == k+1  =>  cell (i,j) != l+1
                    if k != l:
                        backend.add_clause([-x, -lits[lit_index(i, j, l)]])
                    # ... and no other cell of row i holds k+1
                    if j != l:
                        backend.add_clause([-x, -lits[lit_index(i, l, k)]])
                    # ... nor of column j
                    if i != l:
                        backend.add_clause([-x, -lits[lit_index(l, j, k)]])
                    # ... nor of the 3x3 box around (i,j)
                    mod_i = (i // 3) * 3 + l // 3
                    mod_j = (j // 3) * 3 + l % 3
                    if (mod_i, mod_j) != (i, j):
                        backend.add_clause([-x, -lits[lit_index(mod_i, mod_j, k)]])
            # at least one of 1..9 in cell (i,j)
            backend.add_clause(alo)


def encode_clues(backend: SolverBackend, lits: List[int], grid: Grid) -> int:
    """Unit clause for every pre-filled cell; returns how many were added."""
    count = 0
    for i in range(N):
        for j in range(N):
            d = grid[i][j]
            if d:
                backend.add_clause([lits[lit_index(i, j, d - 1)]])
                count += 1
    return count


def decode(grid: Grid, lits: List[int], assignment: Dict[int, bool]) -> Grid:
    """Write the digits chosen by 'assignment' into 'grid' (in place) and return it.

    Nothing is written unless every cell decodes to exactly one digit that
    agrees with its clue.
    """
    out = [[0] * N for _ in range(N)]
    for i in range(N):
        for j in range(N):
            digits = [k + 1 for k in range(N) if assignment[lits[lit_index(i, j, k)]]]
            if len(digits) != 1:
                raise InconsistentAssignmentError(
                    f"Cell ({i},{j}) has {len(digits)} digits assigned: {digits}")
            d = digits[0]
            if grid[i][j] != 0 and grid[i][j] != d:
                raise InconsistentAssignmentError(
                    f"Cell ({i},{j}) is a clue {grid[i][j]} but the solver picked {d}")
            out[i][j] = d
    for i in range(N):
        grid[i][:] = out[i]
    return grid


def check_grid(grid: Grid) -> None:
    if len(grid) != N or any(len(row) != N for row in grid):
        raise MalformedGridError("Sudoku grid must be 9x9")
    for r, row in enumerate(grid):
        for c, v in enumerate(row):
            if type(v) is not int or not 0 <= v <= N:
                raise MalformedGridError(f"Cell ({r},{c}) value {v!r} out of range 0..9")


def is_valid_solution(grid: Grid) -> bool:
    """True when every row, column and 3x3 box is a permutation of 1..9."""
    full = set(range(1, N + 1))
    rows = [list(row) for row in grid]
    cols = [[grid[r][c] for r in range(N)] for c in range(N)]
    boxes = [[grid[br + r][bc + c] for r in range(3) for c in range(3)]
             for br in range(0, N, 3) for bc in range(0, N, 3)]
    return all(len(unit) == N and set(unit) == full for unit in rows + cols + boxes)


class Sudoku:
    """A puzzle bound to one solver instance.

    Encoding happens in the constructor; ``solve`` makes a single
    assumption-free call and overwrites ``grid`` with the solution.
    A backend created here is closed again if encoding fails.
    """

    def __init__(self, grid: Grid, backend: Optional[SolverBackend] = None):
        check_grid(grid)
        self.grid = [row[:] for row in grid]
        owned = backend is None
        self.backend = make_backend() if owned else backend
        try:
            self.lits = build_literal_table(self.backend)
            encode_rules(self.backend, self.lits)
            self.num_clues = encode_clues(self.backend, self.lits, self.grid)
        except BaseException:
            if owned:
                self.backend.close()
            raise
        log.debug("Encoded %d variables, %d clauses (%d clues)",
                  self.backend.nof_vars, self.backend.nof_clauses, self.num_clues)

    def solve(self) -> Grid:
        result = self.backend.solve([])
        log.debug("Solver %s answered %s", self.backend.name, result.status.name)
        if result.status is not Status.SAT:
            # UNKNOWN / BEST carry nothing usable for a pure feasibility query
            raise UnsolvableError(result)
        return self.decode(result.assignment)

    def decode(self, assignment: Dict[int, bool]) -> Grid:
        return decode(self.grid, self.lits, assignment)

    def close(self) -> None:
        self.backend.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __str__(self) -> str:
        return format_grid(self.grid)


def solve_sudoku(grid: Grid, backend: str = "pysat", **options) -> Grid:
    """Encode, solve and decode in one go; returns a new solved grid."""
    check_grid(grid)
    with make_backend(backend, **options) as engine:
        return Sudoku(grid, engine).solve()
