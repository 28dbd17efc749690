# sat_backend.py
# Narrow SAT solver interface used by the Sudoku encoder:
#   new_var()  -> fresh variable id (1, 2, 3, ...)
#   add_clause -> register a disjunction of literals
#   solve      -> one call under optional assumptions
# Literals are DIMACS-style ints: +v for variable v, -v for its negation.

import abc
import enum
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from pysat.solvers import Solver
from z3 import Bool, Not, Or, is_true, sat, unsat
from z3 import Solver as Z3Solver

log = logging.getLogger(__name__)


class Status(enum.Enum):
    SAT = "satisfiable"
    UNSAT = "unsatisfiable"
    UNKNOWN = "unknown"
    BEST = "best-effort"


class SolveResult:
    """Outcome of a single solve call.

    ``assignment`` maps every allocated variable to its truth value when the
    status is SAT, holds a partial mapping for BEST and is None otherwise.
    """

    def __init__(self, status: Status, assignment: Optional[Dict[int, bool]] = None):
        self.status = status
        self.assignment = assignment

    @property
    def satisfiable(self) -> bool:
        return self.status is Status.SAT

    def __repr__(self) -> str:
        size = None if self.assignment is None else len(self.assignment)
        return f"SolveResult({self.status.name}, assigned={size})"


class SolverBackend(abc.ABC):
    """Base class: variable allocation and clause bookkeeping shared by all engines.

    Engines override ``_on_clause`` (hand a checked clause to the engine) and
    ``solve``; ``_on_new_var`` and ``close`` are optional hooks.
    """

    name = "abstract"

    def __init__(self):
        self._nvars = 0
        self._nclauses = 0

    # ----- allocation / registration
    def new_var(self) -> int:
        self._nvars += 1
        self._on_new_var(self._nvars)
        return self._nvars

    def add_clause(self, lits: Iterable[int]) -> None:
        clause = list(lits)
        if not clause:
            raise ValueError("empty clause")
        for lit in clause:
            if lit == 0 or abs(lit) > self._nvars:
                raise ValueError(f"literal {lit} refers to an unallocated variable")
        self._nclauses += 1
        self._on_clause(clause)

    @abc.abstractmethod
    def solve(self, assumptions: Sequence[int] = ()) -> SolveResult:
        pass

    @property
    def nof_vars(self) -> int:
        return self._nvars

    @property
    def nof_clauses(self) -> int:
        return self._nclauses

    # ----- engine hooks
    def _on_new_var(self, var: int) -> None:
        pass

    @abc.abstractmethod
    def _on_clause(self, clause: List[int]) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _complete(self, true_vars) -> Dict[int, bool]:
        """Total assignment over 1..nof_vars from the set of true variables."""
        return {v: v in true_vars for v in range(1, self._nvars + 1)}


# ----- python-sat
class PySatBackend(SolverBackend):
    """Wraps a python-sat solver; Glucose 3 unless told otherwise."""

    name = "pysat"

    def __init__(self, solver_name: str = "g3", conf_budget: Optional[int] = None):
        super().__init__()
        self.solver_name = solver_name
        self.conf_budget = conf_budget
        self._solver = Solver(name=solver_name)

    def _on_clause(self, clause: List[int]) -> None:
        self._solver.add_clause(clause)

    def solve(self, assumptions: Sequence[int] = ()) -> SolveResult:
        if self.conf_budget is not None:
            self._solver.conf_budget(self.conf_budget)
        # solve_limited honours the budget and reports None when it runs out
        answer = self._solver.solve_limited(assumptions=list(assumptions))
        if answer is None:
            return SolveResult(Status.UNKNOWN)
        if not answer:
            return SolveResult(Status.UNSAT)
        model = self._solver.get_model() or []
        return SolveResult(Status.SAT, self._complete({l for l in model if l > 0}))

    def close(self) -> None:
        if self._solver is not None:
            self._solver.delete()
            self._solver = None


# ----- z3
class Z3Backend(SolverBackend):
    """Each variable is a z3 Bool, each clause an Or over those Bools."""

    name = "z3"

    def __init__(self, timeout_ms: Optional[int] = None):
        super().__init__()
        self._solver = Z3Solver()
        if timeout_ms is not None:
            self._solver.set("timeout", timeout_ms)
        self._bools = [None]  # index 0 unused, ids start at 1

    def _on_new_var(self, var: int) -> None:
        self._bools.append(Bool(f"x_{var}"))

    def _term(self, lit: int):
        b = self._bools[abs(lit)]
        return b if lit > 0 else Not(b)

    def _on_clause(self, clause: List[int]) -> None:
        terms = [self._term(l) for l in clause]
        self._solver.add(terms[0] if len(terms) == 1 else Or(terms))

    def solve(self, assumptions: Sequence[int] = ()) -> SolveResult:
        answer = self._solver.check(*[self._term(l) for l in assumptions])
        if answer == unsat:
            return SolveResult(Status.UNSAT)
        if answer != sat:
            return SolveResult(Status.UNKNOWN)
        m = self._solver.model()
        true_vars = {v for v in range(1, self._nvars + 1)
                     if is_true(m.eval(self._bools[v], model_completion=True))}
        return SolveResult(Status.SAT, self._complete(true_vars))


# ----- registry
def _dpll_factory(**options):
    from dpll import DpllBackend
    return DpllBackend(**options)


_BACKENDS = {
    "pysat": PySatBackend,
    "z3": Z3Backend,
    "dpll": _dpll_factory,
}


def make_backend(name: str = "pysat", **options) -> SolverBackend:
    """Build a solver engine by name: 'pysat' | 'z3' | 'dpll'."""
    try:
        factory = _BACKENDS[name]
    except KeyError:
        raise ValueError(f"Unknown SAT backend: {name!r} (choose from {sorted(_BACKENDS)})") from None
    backend = factory(**options)
    log.debug("Using SAT backend %s %s", name, options or "")
    return backend
