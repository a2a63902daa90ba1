"""
===================================================================
Tests for the Sanitization Module
===================================================================

Parsing of free-text judgment and confidence cells, and resizing of
partial judgment matrices.
"""

import pytest

from ahpTopsisPy.sanitization import (
    parse_judgment, parse_confidence, get_cell, resize_judgment_matrix, SAATY_SCALE_OPTIONS
)
from ahpTopsisPy.validation import InvalidInputError

# --- Judgment Parsing ---

@pytest.mark.parametrize("raw, expected", [
    ("3", 3.0),
    (" 7 ", 7.0),
    ("1/4", 0.25),
    ("2/5", 0.4),
    ("2.5", 2.5),
    (5, 5.0),
    (0.5, 0.5),
])
def test_parse_judgment_valid(raw, expected):
    assert parse_judgment(raw) == pytest.approx(expected)

@pytest.mark.parametrize("raw", ["", "   ", None, "abc", "1/0", "1/2/3", "-3", "0", 0, -2, True, float("nan"), "inf"])
def test_parse_judgment_defaults_to_equal_importance(raw):
    assert parse_judgment(raw) == 1.0

def test_parse_confidence():
    assert parse_confidence("low") == "low"
    assert parse_confidence(" HIGH ") == "high"
    assert parse_confidence("medium") == "medium"
    assert parse_confidence("certain") == "medium"
    assert parse_confidence(None) == "medium"
    assert parse_confidence(3) == "medium"

def test_scale_options_cover_saaty_scale():
    values = [value for value, _ in SAATY_SCALE_OPTIONS]
    assert len(values) == 17
    assert values[0] == "1"
    assert "9" in values and "1/9" in values
    assert all(parse_judgment(v) > 0 for v in values)

# --- Partial Matrix Access ---

def test_get_cell_tolerates_missing_rows_and_cells():
    matrix = [["1", "3"], None, ["1", None]]
    assert get_cell(matrix, 0, 1) == "3"
    assert get_cell(matrix, 1, 0, default="1") == "1"
    assert get_cell(matrix, 2, 1, default="1") == "1"
    assert get_cell(matrix, 5, 0, default="x") == "x"
    assert get_cell(None, 0, 0, default="1") == "1"

# --- Resizing ---

def test_resize_grows_with_fill_and_keeps_existing_cells():
    matrix = [["1", "3"], ["1/3", "1"]]
    resized = resize_judgment_matrix(matrix, 3)
    assert resized == [
        ["1", "3", "1"],
        ["1/3", "1", "1"],
        ["1", "1", "1"],
    ]

def test_resize_shrinks():
    matrix = [["1", "3", "5"], ["", "1", "7"], ["", "", "1"]]
    assert resize_judgment_matrix(matrix, 2) == [["1", "3"], ["", "1"]]

def test_resize_does_not_mutate_input():
    matrix = [["1", "3"], ["", "1"]]
    resized = resize_judgment_matrix(matrix, 3, fill="medium")
    resized[0][0] = "9"
    assert matrix == [["1", "3"], ["", "1"]]
    assert resized[2][2] == "medium"

def test_resize_to_zero_and_invalid_size():
    assert resize_judgment_matrix([["1"]], 0) == []
    with pytest.raises(InvalidInputError):
        resize_judgment_matrix([["1"]], -1)
    with pytest.raises(InvalidInputError):
        resize_judgment_matrix([["1"]], 2.0)
