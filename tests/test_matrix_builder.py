"""
===================================================================
Tests for the Matrix Factory Module
===================================================================

This script contains unit tests for the matrix creation and conversion
functionalities, ensuring that user input is correctly transformed into
valid, reciprocal comparison matrices.
"""

import pytest
import numpy as np

# Import the code to be tested
from ahpTopsisPy.matrix_builder import (
    FuzzyScale,
    SAATY_TFN_SCALE,
    create_comparison_matrix,
    complete_matrix_from_upper_triangle,
    build_crisp_matrix,
    build_fuzzy_matrix,
    to_crisp_array,
)
from ahpTopsisPy.types import TFN, Crisp
from ahpTopsisPy.validation import InvalidInputError, Validation

# --- Tests for FuzzyScale Class ---

def test_fuzzyscale_tfn_conversion():
    """Test conversion of a Saaty judgment to a TFN."""
    tfn = FuzzyScale.get_fuzzy_number("3")
    assert tfn == TFN(2, 3, 4)

    # Reciprocal judgments are the inverse of the scale TFN
    reciprocal_tfn = FuzzyScale.get_fuzzy_number("1/3")
    assert reciprocal_tfn == tfn.inverse()
    assert reciprocal_tfn.l == pytest.approx(0.25)
    assert reciprocal_tfn.u == pytest.approx(0.5)

    # Test equal importance
    assert FuzzyScale.get_fuzzy_number("1") == TFN(1, 1, 1)

def test_fuzzyscale_extremes_have_no_spread():
    assert FuzzyScale.get_fuzzy_number("9") == TFN(9, 9, 9)
    assert FuzzyScale.get_fuzzy_number("9", confidence="low") == TFN(9, 9, 9)

def test_fuzzyscale_accepts_numbers():
    assert FuzzyScale.get_fuzzy_number(5) == TFN(4, 5, 6)
    assert FuzzyScale.get_fuzzy_number(1/5) == TFN(4, 5, 6).inverse()

@pytest.mark.parametrize("value", ["abc", "", "10", "1/10", 2.5, 0, None])
def test_fuzzyscale_unknown_judgment_is_equal_importance(value):
    assert FuzzyScale.get_fuzzy_number(value) == TFN(1, 1, 1)

def test_fuzzyscale_confidence_widens_and_narrows():
    assert FuzzyScale.get_fuzzy_number("2", confidence="low") == TFN(0.75, 2, 3.25)
    assert FuzzyScale.get_fuzzy_number("2", confidence="medium") == TFN(1, 2, 3)
    assert FuzzyScale.get_fuzzy_number("2", confidence="high") == TFN(1.25, 2, 2.75)
    # Unknown levels fall back to medium
    assert FuzzyScale.get_fuzzy_number("2", confidence="sure") == TFN(1, 2, 3)

def test_fuzzyscale_confidence_applies_after_inversion():
    tfn = FuzzyScale.get_fuzzy_number("1/3", confidence="low")
    assert tfn.m == pytest.approx(1/3)
    assert tfn.l == pytest.approx(1/3 - (1/3 - 1/4) * 1.25)
    assert tfn.u == pytest.approx(1/3 + (1/2 - 1/3) * 1.25)

def test_apply_confidence_clamps_lower_bound_at_zero():
    assert FuzzyScale.apply_confidence(TFN(0.1, 1, 2), "low") == TFN(0, 1, 2.25)

def test_fuzzyscale_tables_are_read_only():
    assert FuzzyScale.available_confidence_levels() == ["low", "medium", "high"]
    with pytest.raises(TypeError):
        SAATY_TFN_SCALE["3"] = (1, 3, 5)

# --- Tests for Matrix Creation ---

def test_create_comparison_matrix():
    """Test the creation of an identity comparison matrix."""
    matrix = create_comparison_matrix(3, TFN)
    assert matrix.shape == (3, 3)
    assert matrix.dtype == object
    assert all(cell == TFN(1, 1, 1) for cell in matrix.flatten())

def test_complete_matrix_from_upper_triangle():
    matrix = create_comparison_matrix(3, Crisp)
    matrix[0, 1] = Crisp(3)
    matrix[0, 2] = Crisp(5)
    matrix[1, 2] = Crisp(2)
    matrix[2, 2] = Crisp(7) # diagonal is reset

    completed = complete_matrix_from_upper_triangle(matrix)

    assert completed[1, 0].value == pytest.approx(1/3)
    assert completed[2, 0].value == pytest.approx(1/5)
    assert completed[2, 1].value == pytest.approx(1/2)
    assert completed[2, 2].value == 1.0
    # The input is left untouched
    assert matrix[2, 2].value == 7.0

def test_complete_matrix_requires_square_matrix():
    with pytest.raises(InvalidInputError, match="2D square"):
        complete_matrix_from_upper_triangle(np.empty((2, 3), dtype=object))

def test_build_crisp_matrix_reads_only_upper_triangle():
    matrix = build_crisp_matrix([["1", "3"], ["7", "1"]], 2)
    np.testing.assert_allclose(to_crisp_array(matrix), [[1, 3], [1/3, 1]])

def test_build_crisp_matrix_from_partial_input():
    matrix = build_crisp_matrix([["1", "2"]], 3)
    np.testing.assert_allclose(to_crisp_array(matrix), [
        [1, 2, 1],
        [0.5, 1, 1],
        [1, 1, 1],
    ])
    assert not any(Validation.run_all_matrix_validations(matrix, expected_size=3).values())

def test_build_crisp_matrix_rejects_oversized_input():
    with pytest.raises(InvalidInputError):
        build_crisp_matrix([["1", "2", "3"]], 2)

def test_build_fuzzy_matrix_with_confidence():
    matrix = build_fuzzy_matrix([["1", "3"], ["", "1"]], 2, confidence=[["", "high"], ["", ""]])
    assert matrix[0, 0] == TFN(1, 1, 1)
    assert matrix[0, 1] == TFN(2.25, 3, 3.75)
    assert matrix[1, 0] == TFN(2.25, 3, 3.75).inverse()

def test_build_fuzzy_matrix_is_reciprocal():
    matrix = build_fuzzy_matrix([["1", "5", "1/2"], ["", "1", "3"], ["", "", "1"]], 3)
    errors = Validation.run_all_matrix_validations(matrix, expected_size=3)
    assert not any(errors.values())

def test_to_crisp_array_uses_centroid_by_default():
    matrix = build_fuzzy_matrix([["1", "2"]], 2)
    crisp = to_crisp_array(matrix)
    assert crisp.dtype == float
    assert crisp[0, 1] == pytest.approx(2.0)
    assert crisp[1, 0] == pytest.approx((1/3 + 1/2 + 1) / 3)
    assert to_crisp_array(matrix, method="graded_mean")[1, 0] == pytest.approx((1/3 + 4/2 + 1) / 6)
