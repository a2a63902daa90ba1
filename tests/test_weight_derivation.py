"""
===================================================================
Tests for the Weight Derivation Module
===================================================================

This script contains unit tests for the weight derivation algorithms,
ensuring they produce correct, expected results for both crisp and
fuzzy comparison matrices.
"""

import pytest
import numpy as np

# Import the code to be tested
from ahpTopsisPy.weight_derivation import (
    derive_weights,
    fuzzy_geometric_mean,
    weights_from_geometric_means,
    register_weight_method,
    available_weight_methods,
    WEIGHT_DERIVATION_REGISTRY,
)
from ahpTopsisPy.types import TFN, Crisp

# --- Test Fixtures ---

@pytest.fixture
def crisp_3x3_matrix() -> np.ndarray:
    """A standard 3x3 crisp comparison matrix for testing."""
    return np.array([
        [Crisp(1), Crisp(3), Crisp(5)],
        [Crisp(1/3), Crisp(1), Crisp(2)],
        [Crisp(1/5), Crisp(1/2), Crisp(1)]
    ], dtype=object)

@pytest.fixture
def tfn_3x3_matrix() -> np.ndarray:
    """A standard 3x3 TFN comparison matrix for testing."""
    return np.array([
        [TFN(1,1,1), TFN(2,3,4), TFN(3,4,5)],
        [TFN(1/4,1/3,1/2), TFN(1,1,1), TFN(1,2,3)],
        [TFN(1/5,1/4,1/3), TFN(1/3,1/2,1), TFN(1,1,1)]
    ], dtype=object)

# --- Tests for Building Blocks ---

def test_fuzzy_geometric_mean():
    result = fuzzy_geometric_mean([TFN(1, 1, 1), TFN(2, 3, 4)])
    assert result.l == pytest.approx(np.sqrt(2))
    assert result.m == pytest.approx(np.sqrt(3))
    assert result.u == pytest.approx(2.0)

def test_fuzzy_geometric_mean_of_empty_row():
    with pytest.raises(ValueError, match="empty row"):
        fuzzy_geometric_mean([])

def test_weights_from_zero_geometric_means_are_neutral():
    weights = weights_from_geometric_means([Crisp(0), Crisp(0)], Crisp)
    assert [w.value for w in weights] == [0.0, 0.0]

# --- Tests for Crisp Weight Derivation ---

def test_derive_weights_crisp_geometric_mean(crisp_3x3_matrix):
    results = derive_weights(crisp_3x3_matrix, Crisp, method="geometric_mean")

    geo_means = np.array([15 ** (1/3), (2/3) ** (1/3), 0.1 ** (1/3)])
    expected = geo_means / geo_means.sum()

    np.testing.assert_allclose(results["crisp_weights"], expected)
    assert results["crisp_weights"].sum() == pytest.approx(1.0)
    assert all(isinstance(w, Crisp) for w in results["weights"])

def test_derive_weights_crisp_eigenvector(crisp_3x3_matrix):
    eigen = derive_weights(crisp_3x3_matrix, Crisp, method="eigenvector")["crisp_weights"]
    geometric = derive_weights(crisp_3x3_matrix, Crisp, method="geometric_mean")["crisp_weights"]

    assert eigen.sum() == pytest.approx(1.0)
    assert np.all(eigen > 0)
    # For 3x3 matrices both methods give the same priority vector
    np.testing.assert_allclose(eigen, geometric, atol=1e-6)

def test_derive_weights_consistent_matrix_recovers_ratios():
    matrix = np.array([
        [Crisp(1), Crisp(2), Crisp(4)],
        [Crisp(0.5), Crisp(1), Crisp(2)],
        [Crisp(0.25), Crisp(0.5), Crisp(1)]
    ], dtype=object)
    for method in ("geometric_mean", "eigenvector"):
        weights = derive_weights(matrix, Crisp, method=method)["crisp_weights"]
        np.testing.assert_allclose(weights, [4/7, 2/7, 1/7], atol=1e-9)

# --- Tests for Fuzzy Weight Derivation ---

def test_derive_weights_tfn_geometric_mean(tfn_3x3_matrix):
    results = derive_weights(tfn_3x3_matrix, TFN, method="geometric_mean")

    assert len(results["weights"]) == 3
    for w in results["weights"]:
        assert isinstance(w, TFN)
        assert w.l <= w.m <= w.u

    crisp = results["crisp_weights"]
    assert crisp.sum() == pytest.approx(1.0)
    assert crisp[0] > crisp[1] > crisp[2]
    np.testing.assert_allclose(results["defuzzified_weights"], [w.defuzzify() for w in results["weights"]])

def test_derive_weights_with_other_defuzzifier(tfn_3x3_matrix):
    results = derive_weights(tfn_3x3_matrix, TFN, consistency_method="graded_mean")
    np.testing.assert_allclose(results["defuzzified_weights"], [(w.l + 4 * w.m + w.u) / 6 for w in results["weights"]])

def test_derive_weights_unknown_method(tfn_3x3_matrix):
    with pytest.raises(ValueError, match="Method 'eigenvector' is not registered for number type 'TFN'"):
        derive_weights(tfn_3x3_matrix, TFN, method="eigenvector")

# --- Tests for the Registry ---

def test_available_weight_methods():
    assert set(available_weight_methods("Crisp")) == {"geometric_mean", "eigenvector"}
    assert available_weight_methods("TFN") == ["geometric_mean"]

def test_register_custom_weight_method(crisp_3x3_matrix):
    @register_weight_method("Crisp", "uniform")
    def uniform_method(matrix, number_type):
        n = matrix.shape[0]
        return [number_type(1.0 / n) for _ in range(n)]

    try:
        weights = derive_weights(crisp_3x3_matrix, Crisp, method="uniform")["crisp_weights"]
        np.testing.assert_allclose(weights, [1/3, 1/3, 1/3])
    finally:
        del WEIGHT_DERIVATION_REGISTRY[("Crisp", "uniform")]
