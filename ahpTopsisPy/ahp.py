from __future__ import annotations
from typing import Any, List, Sequence
import numpy as np

from .consistency import Consistency
from .matrix_builder import build_crisp_matrix, to_crisp_array
from .results import AHPResult
from .types import Crisp
from .validation import Validation
from .weight_derivation import derive_weights


def _crisp_priorities(matrix: np.ndarray, method: str) -> tuple[np.ndarray, float]:
    """Weights of one crisp comparison matrix and the CR they imply."""
    weights = derive_weights(matrix, Crisp, method=method)["crisp_weights"]
    cr = Consistency.calculate_saaty_cr(matrix, weights=weights)
    return weights, cr

def calculate_ahp(
    criteria_matrix: Sequence[Sequence[Any]],
    alternative_matrices: Sequence[Sequence[Sequence[Any]]],
    num_criteria: int,
    num_alternatives: int,
    method: str = "geometric_mean"
) -> AHPResult:
    """
    Runs a classic (crisp) AHP with one criteria matrix and one alternative
    matrix per criterion.

    Judgments are read from the upper triangle of each string matrix ("3",
    "1/5", ...). Missing or malformed cells count as equal importance. The
    consistency ratio of every matrix is reported but never blocks the result.

    Args:
        criteria_matrix: (num_criteria x num_criteria) judgment strings.
        alternative_matrices: num_criteria matrices of (num_alternatives x
            num_alternatives) judgment strings, in criterion order.
        num_criteria: The number of criteria.
        num_alternatives: The number of alternatives.
        method: Weight derivation method, "geometric_mean" or "eigenvector".

    Returns:
        An `AHPResult`.

    Raises:
        InvalidInputError: On non-positive counts, a wrong number of alternative
            matrices, or a matrix larger than its declared size.
        ValueError: If `method` is not a registered crisp weight method.

    Example:
    >>> result = calculate_ahp([["1", "3"], ["", "1"]], [[["1", "1/2"]], [["1", "3"]]], 2, 2)
    >>> result.criteria_weights
    array([0.75, 0.25])
    """
    num_criteria = Validation.ensure_count("num_criteria", num_criteria)
    num_alternatives = Validation.ensure_count("num_alternatives", num_alternatives)
    Validation.ensure_judgment_matrix(criteria_matrix, num_criteria, label="Criteria matrix")
    alternative_matrices = Validation.ensure_judgment_matrices(alternative_matrices, num_criteria, num_alternatives)

    # --- 1. Criteria level ---
    crisp_criteria = build_crisp_matrix(criteria_matrix, num_criteria)
    criteria_weights, criteria_cr = _crisp_priorities(crisp_criteria, method)
    Consistency.warn_if_inconsistent("Criteria matrix", criteria_cr)

    # --- 2. Alternative level, one matrix per criterion ---
    alternative_arrays: List[np.ndarray] = []
    alternative_scores = np.zeros((num_criteria, num_alternatives))
    alternative_crs = []
    for c, values in enumerate(alternative_matrices):
        crisp_alternatives = build_crisp_matrix(values, num_alternatives)
        weights, cr = _crisp_priorities(crisp_alternatives, method)
        Consistency.warn_if_inconsistent(f"Alternative matrix for criterion {c + 1}", cr)
        alternative_arrays.append(to_crisp_array(crisp_alternatives))
        alternative_scores[c, :] = weights
        alternative_crs.append(cr)

    # --- 3. Synthesis ---
    final_scores = criteria_weights @ alternative_scores

    return AHPResult(
        criteria_matrix=to_crisp_array(crisp_criteria),
        alternative_matrices=tuple(alternative_arrays),
        criteria_weights=criteria_weights,
        alternative_scores=alternative_scores,
        final_scores=final_scores,
        consistency_ratios={"criteria": criteria_cr, "alternatives": alternative_crs},
        method=method,
    )
