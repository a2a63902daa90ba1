from __future__ import annotations
from typing import Sequence, Tuple
import numpy as np

from .ranking import closeness_coefficient, rank_descending
from .results import TOPSISResult
from .validation import Validation


# ==============================================================================
# 1. STEP FUNCTIONS
# ==============================================================================

def vector_normalize(matrix: np.ndarray) -> np.ndarray:
    """Divides each column by its Euclidean norm. An all-zero column stays zero."""
    norm = np.sqrt((matrix ** 2).sum(axis=0))
    norm[norm == 0] = 1
    return matrix / norm

def ideal_solutions(weighted_matrix: np.ndarray, criteria_types: Sequence[str]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Positive and negative ideal solutions per criterion: max/min for 'benefit',
    min/max for 'cost'.
    """
    col_max = weighted_matrix.max(axis=0)
    col_min = weighted_matrix.min(axis=0)
    is_cost = np.array([kind == "cost" for kind in criteria_types])
    ideal_best = np.where(is_cost, col_min, col_max)
    ideal_worst = np.where(is_cost, col_max, col_min)
    return ideal_best, ideal_worst

def euclidean_distances(weighted_matrix: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Euclidean distance of every alternative (row) to a reference point."""
    diff = weighted_matrix - reference
    return np.sqrt((diff ** 2).sum(axis=1))


# ==============================================================================
# 2. CALCULATOR
# ==============================================================================

def calculate_topsis(
    raw_matrix: Sequence[Sequence[float]] | np.ndarray,
    weights: Sequence[float] | np.ndarray,
    criteria_types: Sequence[str]
) -> TOPSISResult:
    """
    Ranks alternatives by their relative closeness to the ideal solution.

    Args:
        raw_matrix: (alternatives x criteria) crisp performance values.
        weights: One non-negative weight per criterion. The weights are not
            normalized: they scale `weighted_normalized_matrix`, the ideals and
            the distances as given, while scores and rankings depend only on
            their ratios. Pass weights summing to 1 for the textbook matrices.
        criteria_types: 'benefit' or 'cost' per criterion.

    Returns:
        A `TOPSISResult`. `performance_scores` lie in [0, 1]; rank 1 is best and
        equal scores keep their input order.

    Raises:
        InvalidInputError: On a ragged or empty matrix, or weights/criteria types
            whose length differs from the number of criteria.
    """
    matrix = Validation.ensure_decision_matrix(raw_matrix)
    num_criteria = matrix.shape[1]
    weights = Validation.ensure_weights(weights, num_criteria)
    criteria_types = Validation.ensure_criteria_types(criteria_types, num_criteria)

    # Step 1: Normalize
    normalized = vector_normalize(matrix)

    # Step 2: Apply weights
    weighted = normalized * weights

    # Step 3: Determine ideal solutions
    ideal_best, ideal_worst = ideal_solutions(weighted, criteria_types)

    # Step 4: Calculate distances
    d_best = euclidean_distances(weighted, ideal_best)
    d_worst = euclidean_distances(weighted, ideal_worst)

    # Step 5: Closeness coefficient and ranking
    scores = closeness_coefficient(d_best, d_worst)

    return TOPSISResult(
        raw_matrix=matrix,
        normalized_matrix=normalized,
        weighted_normalized_matrix=weighted,
        ideal_best=ideal_best,
        ideal_worst=ideal_worst,
        distance_from_best=d_best,
        distance_from_worst=d_worst,
        performance_scores=scores,
        rankings=rank_descending(scores),
        weights=weights,
        criteria_types=criteria_types,
    )
