# tests/test_grid_io.py
import io

import pytest

import sudoku_sat
from conftest import CLASSIC_PUZZLE, CannedBackend, to_grid
from grid_io import format_grid, parse_grid, read_grid
from sat_backend import SolveResult, Status
from sudoku import main
from sudoku_sat import lit_index


def test_parse_classic():
    assert parse_grid(CLASSIC_PUZZLE) == to_grid(CLASSIC_PUZZLE)


def test_parse_non_digits_are_blank_and_extra_chars_ignored():
    lines = ["5.3 _x0007extra"] + ["........."] * 8
    grid = parse_grid(lines)
    assert grid[0] == [5, 0, 3, 0, 0, 0, 0, 0, 0]
    assert all(v == 0 for row in grid[1:] for v in row)


def test_parse_strips_line_endings_before_length_check():
    assert parse_grid(["12345678\n"] * 9) is None
    assert parse_grid(["123456789\r\n"] * 9)[0] == list(range(1, 10))


@pytest.mark.parametrize("lines", [
    CLASSIC_PUZZLE[:8],
    CLASSIC_PUZZLE[:4] + ["53007000"] + CLASSIC_PUZZLE[5:],
    [],
])
def test_malformed_input_gives_no_grid(lines):
    assert parse_grid(lines) is None


def test_read_grid_from_stream():
    stream = io.StringIO("\n".join(CLASSIC_PUZZLE) + "\n")
    assert read_grid(stream) == to_grid(CLASSIC_PUZZLE)
    assert read_grid(io.StringIO("000000000\n" * 3)) is None


def test_format_grid():
    text = format_grid(to_grid(CLASSIC_PUZZLE))
    lines = text.splitlines()
    assert text.endswith("\n")
    assert len(lines) == 13
    assert lines[0] == lines[4] == lines[8] == lines[12] == "+-------+-------+-------+"
    assert lines[1] == "| 5 3 _ | _ 7 _ | _ _ _ |"
    assert lines[11] == "| _ _ _ | _ 8 _ | _ 7 9 |"


# ----- command line
def test_main_solves_classic(capsys):
    assert main(io.StringIO("\n".join(CLASSIC_PUZZLE) + "\n")) == 0
    out = capsys.readouterr().out
    assert out.startswith("Input:\n+-------+-------+-------+\n| 5 3 _ |")
    assert "\n\nOutput:\n" in out
    assert "| 5 3 4 | 6 7 8 | 9 1 2 |" in out
    assert out.endswith("| 3 4 5 | 2 8 6 | 1 7 9 |\n+-------+-------+-------+\n\n")


def test_main_blank_rows_sum_to_45(capsys):
    assert main(io.StringIO("000000000\n" * 9)) == 0
    out = capsys.readouterr().out.split("Output:\n")[1]
    rows = [line for line in out.splitlines() if line.startswith("|")]
    assert len(rows) == 9
    assert all(sum(int(ch) for ch in row if ch.isdigit()) == 45 for row in rows)


def test_main_malformed_input(capsys, caplog):
    assert main(io.StringIO("123\n")) == 2
    assert capsys.readouterr().out == ""
    assert "Expected 9 lines" in caplog.text


def test_main_unsolvable(capsys, caplog):
    assert main(io.StringIO("550000000\n" + "000000000\n" * 8)) == 1
    out = capsys.readouterr().out
    assert "Input:" in out and "Output:" not in out
    assert "unsatisfiable" in caplog.text


def test_main_rejects_answer_breaking_the_rules(monkeypatch, capsys, caplog):
    # one digit per cell, but every cell holds 1
    ones = {lit_index(i, j, 0) + 1 for i in range(9) for j in range(9)}
    all_ones = {v: v in ones for v in range(1, 730)}
    canned = CannedBackend(SolveResult(Status.SAT, all_ones))
    monkeypatch.setattr(sudoku_sat, "make_backend", lambda *a, **kw: canned)
    assert main(io.StringIO("000000000\n" * 9)) == 3
    out = capsys.readouterr().out
    assert "Input:" in out and "Output:" not in out
    assert "| 1 1 1 |" not in out
    assert "breaks a row, column or box rule" in caplog.text
    assert canned.closed
