"""
===================================================================
Tests for the AHP Calculator
===================================================================

This script checks the crisp AHP calculator end to end: weights of the
criteria and alternatives, the synthesized scores, consistency reporting
and input validation.
"""

import dataclasses

import pytest
import numpy as np

from ahpTopsisPy.ahp import calculate_ahp
from ahpTopsisPy.config import ConfigurationContextManager
from ahpTopsisPy.results import AHPResult
from ahpTopsisPy.validation import InvalidInputError


def test_two_by_two_worked_example(criteria_judgments, alternative_judgments):
    result = calculate_ahp(criteria_judgments, alternative_judgments, num_criteria=2, num_alternatives=2)

    assert isinstance(result, AHPResult)
    np.testing.assert_allclose(result.criteria_weights, [0.75, 0.25])
    np.testing.assert_allclose(result.alternative_scores, [[2/3, 1/3], [1/3, 2/3]])
    # X: 0.75 * 2/3 + 0.25 * 1/3
    np.testing.assert_allclose(result.final_scores, [7/12, 5/12])
    assert result.final_scores[0] > result.final_scores[1]

def test_matrices_are_exposed_as_float_arrays(criteria_judgments, alternative_judgments):
    result = calculate_ahp(criteria_judgments, alternative_judgments, 2, 2)
    assert result.criteria_matrix.dtype == float
    np.testing.assert_allclose(result.criteria_matrix, [[1, 3], [1/3, 1]])
    assert len(result.alternative_matrices) == 2
    np.testing.assert_allclose(result.alternative_matrices[1], [[1, 0.5], [2, 1]])

def test_scores_sum_to_one(consistent_3x3_judgments):
    alternatives = [consistent_3x3_judgments, [["1", "1/3", "1/5"]], [["1"]]]
    result = calculate_ahp(consistent_3x3_judgments, alternatives, num_criteria=3, num_alternatives=3)

    assert result.criteria_weights.sum() == pytest.approx(1.0)
    np.testing.assert_allclose(result.alternative_scores.sum(axis=1), [1.0, 1.0, 1.0])
    assert result.final_scores.sum() == pytest.approx(1.0)
    # An all-default matrix gives equal weights
    np.testing.assert_allclose(result.alternative_scores[2], [1/3, 1/3, 1/3])

def test_consistency_ratios(consistent_3x3_judgments, inconsistent_3x3_judgments):
    alternatives = [[["1", "2"]], [["1", "2"]], [["1", "2"]]]
    consistent = calculate_ahp(consistent_3x3_judgments, alternatives, 3, 2)
    inconsistent = calculate_ahp(inconsistent_3x3_judgments, alternatives, 3, 2)

    assert consistent.consistency_ratios["criteria"] == pytest.approx(0.0, abs=1e-9)
    assert consistent.consistency_ratios["alternatives"] == (0.0, 0.0, 0.0)
    assert consistent.is_consistent()

    assert inconsistent.consistency_ratios["criteria"] > 0.1
    assert not inconsistent.is_consistent()
    assert inconsistent.is_consistent(threshold=10.0)

def test_inconsistent_matrix_still_produces_a_result(inconsistent_3x3_judgments):
    alternatives = [[["1", "2"]]] * 3
    result = calculate_ahp(inconsistent_3x3_judgments, alternatives, 3, 2)
    # Cyclic judgments cancel out
    np.testing.assert_allclose(result.criteria_weights, [1/3, 1/3, 1/3])

def test_inconsistency_warning_when_enabled(inconsistent_3x3_judgments):
    alternatives = [[["1", "2"]]] * 3
    with ConfigurationContextManager(WARN_ON_INCONSISTENCY=True):
        with pytest.warns(UserWarning, match="Criteria matrix is inconsistent"):
            calculate_ahp(inconsistent_3x3_judgments, alternatives, 3, 2)

def test_eigenvector_method(consistent_3x3_judgments):
    alternatives = [[["1", "3"]]] * 3
    result = calculate_ahp(consistent_3x3_judgments, alternatives, 3, 2, method="eigenvector")
    assert result.method == "eigenvector"
    np.testing.assert_allclose(result.criteria_weights, [4/7, 2/7, 1/7], atol=1e-9)

def test_unknown_method(criteria_judgments, alternative_judgments):
    with pytest.raises(ValueError, match="not registered"):
        calculate_ahp(criteria_judgments, alternative_judgments, 2, 2, method="least_squares")

def test_malformed_cells_default_to_equal_importance(alternative_judgments):
    result = calculate_ahp([["1", "banana"], ["", "1"]], alternative_judgments, 2, 2)
    np.testing.assert_allclose(result.criteria_weights, [0.5, 0.5])

@pytest.mark.parametrize("kwargs, message", [
    ({"num_criteria": 0, "num_alternatives": 2}, "num_criteria"),
    ({"num_criteria": 2, "num_alternatives": -1}, "num_alternatives"),
    ({"num_criteria": 3, "num_alternatives": 2}, "alternative judgment matrices"),
])
def test_invalid_inputs(criteria_judgments, alternative_judgments, kwargs, message):
    with pytest.raises(InvalidInputError, match=message):
        calculate_ahp(criteria_judgments, alternative_judgments, **kwargs)

def test_oversized_alternative_matrix(criteria_judgments):
    alternatives = [[["1", "2", "3"]], [["1", "2"]]]
    with pytest.raises(InvalidInputError, match="criterion 0"):
        calculate_ahp(criteria_judgments, alternatives, 2, 2)

def test_result_is_immutable(criteria_judgments, alternative_judgments):
    result = calculate_ahp(criteria_judgments, alternative_judgments, 2, 2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.final_scores = np.zeros(2)
    with pytest.raises(ValueError):
        result.final_scores[0] = 1.0
    with pytest.raises(TypeError):
        result.consistency_ratios["criteria"] = 1.0

def test_inputs_are_not_mutated(criteria_judgments, alternative_judgments):
    before = [row[:] for row in criteria_judgments]
    calculate_ahp(criteria_judgments, alternative_judgments, 2, 2)
    assert criteria_judgments == before

def test_to_dict(criteria_judgments, alternative_judgments):
    data = calculate_ahp(criteria_judgments, alternative_judgments, 2, 2).to_dict()
    assert data["criteria_weights"] == pytest.approx([0.75, 0.25])
    assert data["consistency_ratios"] == {"criteria": 0.0, "alternatives": [0.0, 0.0]}
    assert data["method"] == "geometric_mean"
