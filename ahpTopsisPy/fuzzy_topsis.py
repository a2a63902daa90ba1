from __future__ import annotations
from types import MappingProxyType
from typing import List, Sequence, Tuple
import numpy as np

from .ranking import closeness_coefficient, rank_descending
from .results import FuzzyTOPSISResult
from .types import TFN
from .validation import InvalidInputError, Validation

# Linguistic importance levels for criterion weights.
FUZZY_WEIGHT_PRESETS = MappingProxyType({
    "very_low": (0.0, 0.1, 0.3),
    "low": (0.1, 0.3, 0.5),
    "medium": (0.3, 0.5, 0.7),
    "high": (0.5, 0.7, 0.9),
    "very_high": (0.7, 0.9, 1.0),
})

# Half-width of a weight TFN around its mode for each confidence level.
WEIGHT_CONFIDENCE_SPREADS = MappingProxyType({
    "low": 0.2,
    "medium": 0.12,
    "high": 0.06,
})


# ==============================================================================
# 1. LINGUISTIC WEIGHT PRESETS
# ==============================================================================

def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))

def build_fuzzy_weight(importance: str, confidence: str = "medium") -> TFN:
    """
    Builds a criterion weight TFN from an importance level and a confidence level.

    The mode comes from `FUZZY_WEIGHT_PRESETS[importance]`, the spread from
    `WEIGHT_CONFIDENCE_SPREADS[confidence]`. Every component is clamped to [0, 1].

    Example:
    >>> build_fuzzy_weight("high", "high")
    TFN(0.6400, 0.7000, 0.7600)
    """
    if importance not in FUZZY_WEIGHT_PRESETS:
        raise InvalidInputError(f"Unknown importance '{importance}'. Available: {list(FUZZY_WEIGHT_PRESETS)}")
    if confidence not in WEIGHT_CONFIDENCE_SPREADS:
        raise InvalidInputError(f"Unknown confidence '{confidence}'. Available: {list(WEIGHT_CONFIDENCE_SPREADS)}")

    m = _clamp01(FUZZY_WEIGHT_PRESETS[importance][1])
    spread = WEIGHT_CONFIDENCE_SPREADS[confidence]
    return TFN(_clamp01(m - spread), m, _clamp01(m + spread))

def closest_importance(tfn: TFN) -> str:
    """The importance preset whose mode is nearest to the mode of `tfn` (first key on ties)."""
    return min(FUZZY_WEIGHT_PRESETS, key=lambda name: abs(tfn.m - FUZZY_WEIGHT_PRESETS[name][1]))

def closest_confidence(tfn: TFN) -> str:
    """The confidence level whose spread is nearest to the half-width (u - l) / 2 of `tfn`."""
    half_width = (tfn.u - tfn.l) / 2
    return min(WEIGHT_CONFIDENCE_SPREADS, key=lambda name: abs(half_width - WEIGHT_CONFIDENCE_SPREADS[name]))


# ==============================================================================
# 2. STEP FUNCTIONS
# ==============================================================================

def to_fuzzy_matrix(raw_matrix: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Lifts every crisp value x of a decision matrix to the degenerate TFN(x, x, x)."""
    matrix = Validation.ensure_decision_matrix(raw_matrix)
    fuzzy = np.empty(matrix.shape, dtype=object)
    for i in range(matrix.shape[0]):
        for j in range(matrix.shape[1]):
            fuzzy[i, j] = TFN.from_crisp(matrix[i, j])
    return fuzzy

def normalize_fuzzy_matrix(fuzzy_matrix: np.ndarray) -> np.ndarray:
    """
    Divides l, m and u of every cell by the column scalar sqrt(sum of m^2).
    A column whose modes are all zero is left unchanged.
    """
    n_rows, n_cols = fuzzy_matrix.shape
    normalized = np.empty((n_rows, n_cols), dtype=object)
    for j in range(n_cols):
        denominator = float(np.sqrt(sum(cell.m ** 2 for cell in fuzzy_matrix[:, j])))
        if denominator == 0:
            denominator = 1.0
        for i in range(n_rows):
            normalized[i, j] = fuzzy_matrix[i, j] / denominator
    return normalized

def apply_fuzzy_weights(normalized_matrix: np.ndarray, fuzzy_weights: Sequence[TFN]) -> np.ndarray:
    """Componentwise product of every cell with the weight TFN of its criterion."""
    n_rows, n_cols = normalized_matrix.shape
    weighted = np.empty((n_rows, n_cols), dtype=object)
    for i in range(n_rows):
        for j in range(n_cols):
            weighted[i, j] = normalized_matrix[i, j] * fuzzy_weights[j]
    return weighted

def fuzzy_ideal_solutions(weighted_matrix: np.ndarray, criteria_types: Sequence[str]) -> Tuple[List[TFN], List[TFN]]:
    """
    Picks, per criterion, the whole TFN of the alternative with the largest and
    smallest mode. For 'benefit' the largest is the ideal best, for 'cost' the
    smallest. On ties the first alternative wins.
    """
    ideal_best, ideal_worst = [], []
    for j, kind in enumerate(criteria_types):
        column = weighted_matrix[:, j]
        modes = np.array([cell.m for cell in column])
        max_cell, min_cell = column[int(np.argmax(modes))], column[int(np.argmin(modes))]
        if kind == "cost":
            ideal_best.append(min_cell)
            ideal_worst.append(max_cell)
        else:
            ideal_best.append(max_cell)
            ideal_worst.append(min_cell)
    return ideal_best, ideal_worst

def fuzzy_distances(weighted_matrix: np.ndarray, reference: Sequence[TFN]) -> np.ndarray:
    """Sum over criteria of the vertex distance between each cell and the reference TFN."""
    n_rows, n_cols = weighted_matrix.shape
    return np.array([
        sum(weighted_matrix[i, j].distance(reference[j]) for j in range(n_cols))
        for i in range(n_rows)
    ], dtype=float)


# ==============================================================================
# 3. CALCULATORS
# ==============================================================================

def calculate_fuzzy_topsis(
    fuzzy_matrix: Sequence[Sequence[TFN]] | np.ndarray,
    fuzzy_weights: Sequence[TFN],
    criteria_types: Sequence[str]
) -> FuzzyTOPSISResult:
    """
    Runs Fuzzy TOPSIS on a matrix of TFN performance values.

    Args:
        fuzzy_matrix: (alternatives x criteria) non-negative TFNs.
        fuzzy_weights: One non-negative TFN weight per criterion.
        criteria_types: 'benefit' or 'cost' per criterion.

    Returns:
        A `FuzzyTOPSISResult`; rank 1 is best, ties keep input order.

    Raises:
        InvalidInputError: On a ragged matrix, non-TFN or negative cells, or
            weights/criteria types of the wrong length.
    """
    matrix = Validation.ensure_fuzzy_matrix(fuzzy_matrix)
    num_criteria = matrix.shape[1]
    fuzzy_weights = Validation.ensure_fuzzy_weights(fuzzy_weights, num_criteria)
    criteria_types = Validation.ensure_criteria_types(criteria_types, num_criteria)

    normalized = normalize_fuzzy_matrix(matrix)
    weighted = apply_fuzzy_weights(normalized, fuzzy_weights)
    ideal_best, ideal_worst = fuzzy_ideal_solutions(weighted, criteria_types)

    d_best = fuzzy_distances(weighted, ideal_best)
    d_worst = fuzzy_distances(weighted, ideal_worst)
    scores = closeness_coefficient(d_best, d_worst)

    return FuzzyTOPSISResult(
        fuzzy_matrix=matrix,
        normalized_fuzzy_matrix=normalized,
        weighted_normalized_fuzzy_matrix=weighted,
        fuzzy_weights=fuzzy_weights,
        ideal_best=ideal_best,
        ideal_worst=ideal_worst,
        distance_from_best_fuzzy=[TFN.from_crisp(d) for d in d_best],
        distance_from_worst_fuzzy=[TFN.from_crisp(d) for d in d_worst],
        distance_from_best=d_best,
        distance_from_worst=d_worst,
        performance_scores=scores,
        rankings=rank_descending(scores),
        criteria_types=criteria_types,
    )

def calculate_fuzzy_topsis_from_crisp(
    raw_matrix: Sequence[Sequence[float]] | np.ndarray,
    fuzzy_weights: Sequence[TFN],
    criteria_types: Sequence[str]
) -> FuzzyTOPSISResult:
    """Fuzzy TOPSIS on crisp performance values, each lifted to TFN(x, x, x)."""
    return calculate_fuzzy_topsis(to_fuzzy_matrix(raw_matrix), fuzzy_weights, criteria_types)
