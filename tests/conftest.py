# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so the top-level modules import without installing
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sat_backend import SolverBackend  # noqa: E402

CLASSIC_PUZZLE = [
    "530070000",
    "600195000",
    "098000060",
    "800060003",
    "400803001",
    "700020006",
    "060000280",
    "000419005",
    "000080079",
]

CLASSIC_SOLUTION = [
    "534678912",
    "672195348",
    "198342567",
    "859761423",
    "426853791",
    "713924856",
    "961537284",
    "287419635",
    "345286179",
]


def to_grid(rows):
    return [[int(ch) for ch in row] for row in rows]


@pytest.fixture
def classic():
    return to_grid(CLASSIC_PUZZLE)


@pytest.fixture
def classic_solution():
    return to_grid(CLASSIC_SOLUTION)


@pytest.fixture
def blank():
    return [[0] * 9 for _ in range(9)]


class CannedBackend(SolverBackend):
    """Accepts any clauses and always answers with the same result."""

    name = "canned"

    def __init__(self, result):
        super().__init__()
        self.result = result
        self.closed = False

    def _on_clause(self, clause):
        pass

    def solve(self, assumptions=()):
        return self.result

    def close(self):
        self.closed = True
