# dpll.py
# Minimal SAT engine (DPLL with unit propagation + backtracking) behind the
# SolverBackend interface. No external libraries required; handy as a
# stand-in engine when checking encodings.

from typing import Dict, List, Optional, Sequence, Set, Tuple

from sat_backend import SolveResult, SolverBackend, Status

Clauses = List[List[int]]


def simplify(clauses: Clauses, lits: Set[int]) -> Optional[Clauses]:
    """Make every literal in 'lits' true; return simplified clauses or None on conflict."""
    new_clauses: Clauses = []
    for clause in clauses:
        if any(l in lits for l in clause):
            continue
        new_clause = [l for l in clause if -l not in lits]
        if not new_clause:
            return None  # conflict
        new_clauses.append(new_clause)
    return new_clauses


def unit_propagate(clauses: Clauses, assignment: Dict[int, bool]) -> Optional[Tuple[Clauses, Dict[int, bool]]]:
    """Repeatedly apply unit propagation; return (simplified_clauses, assignment) or None on conflict."""
    while True:
        units = {cl[0] for cl in clauses if len(cl) == 1}
        if not units:
            break
        for lit in units:
            var, val = abs(lit), lit > 0
            if -lit in units or assignment.get(var, val) != val:
                return None  # conflict
            assignment[var] = val
        clauses = simplify(clauses, units)
        if clauses is None:
            return None
    return clauses, assignment


def choose_literal(clauses: Clauses) -> int:
    """Positive literal from the shortest clause that has one, else any literal."""
    best = None
    for clause in clauses:
        pos = [l for l in clause if l > 0]
        if pos and (best is None or len(clause) < len(best)):
            best = clause
            if len(clause) == 2:
                break
    if best is None:
        return clauses[0][0]
    return next(l for l in best if l > 0)


def dpll(clauses: Clauses, assignment: Dict[int, bool]) -> Optional[Dict[int, bool]]:
    up = unit_propagate(clauses, assignment)
    if up is None:
        return None
    clauses, assignment = up
    if not clauses:
        return assignment  # SAT

    lit = choose_literal(clauses)
    # Try lit then -lit
    for lit_try in (lit, -lit):
        new_clauses = simplify(clauses, {lit_try})
        if new_clauses is None:
            continue
        new_assignment = assignment.copy()
        new_assignment[abs(lit_try)] = lit_try > 0
        res = dpll(new_clauses, new_assignment)
        if res is not None:
            return res
    return None  # UNSAT


class DpllBackend(SolverBackend):
    name = "dpll"

    def __init__(self):
        super().__init__()
        self._clauses: Clauses = []

    def _on_clause(self, clause: List[int]) -> None:
        self._clauses.append(clause)

    def solve(self, assumptions: Sequence[int] = ()) -> SolveResult:
        clauses = self._clauses + [[a] for a in assumptions]
        sol = dpll(clauses, {})
        if sol is None:
            return SolveResult(Status.UNSAT)
        # variables left free by the search are set to false
        return SolveResult(Status.SAT, self._complete({v for v, val in sol.items() if val}))
