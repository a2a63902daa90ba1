from __future__ import annotations
from types import MappingProxyType
from typing import Any, List, Sequence, Tuple, Type
import numpy as np

from .config import configure_parameters
from .sanitization import get_cell, parse_confidence, parse_judgment, DEFAULT_CONFIDENCE
from .types import Crisp, TFN, Number
from .validation import Validation

# Canonical Saaty-to-TFN table. The extremes 1 and 9 carry no spread.
SAATY_TFN_SCALE = MappingProxyType({
    "1": (1.0, 1.0, 1.0),
    "2": (1.0, 2.0, 3.0),
    "3": (2.0, 3.0, 4.0),
    "4": (3.0, 4.0, 5.0),
    "5": (4.0, 5.0, 6.0),
    "6": (5.0, 6.0, 7.0),
    "7": (6.0, 7.0, 8.0),
    "8": (7.0, 8.0, 9.0),
    "9": (9.0, 9.0, 9.0),
})

# Factor applied to the (m - l) and (u - m) gaps of a scale TFN.
CONFIDENCE_SPREAD_MULTIPLIERS = MappingProxyType({
    "low": 1.25,
    "medium": 1.0,
    "high": 0.75,
})


# ==============================================================================
# 1. FUZZY SCALE CONVERSION
# ==============================================================================

class FuzzyScale:
    """
    Converts Saaty-scale judgments ("1".."9" and their reciprocals "1/2".."1/9")
    into triangular fuzzy numbers, widening or narrowing the spread according to
    the confidence the decision maker has in the judgment.
    """
    @staticmethod
    def available_confidence_levels() -> List[str]:
        return list(CONFIDENCE_SPREAD_MULTIPLIERS.keys())

    @staticmethod
    def _resolve_scale_key(value: Any) -> Tuple[str | None, bool]:
        """
        Maps a judgment to (scale key, is_reciprocal). An unknown judgment maps to
        (None, False), which the caller reads as equal importance.
        """
        if isinstance(value, bool) or value is None:
            return None, False

        if isinstance(value, (int, float, np.number)):
            value = float(value)
            if not np.isfinite(value) or value <= 0:
                return None, False
            is_reciprocal = value < 1
            magnitude = 1.0 / value if is_reciprocal else value
            rounded = round(magnitude)
            if abs(magnitude - rounded) > 1e-6:
                return None, False
            key = str(int(rounded))
            return (key, is_reciprocal) if key in SAATY_TFN_SCALE else (None, False)

        text = str(value).strip()
        if text.startswith("1/"):
            key = text[2:].strip()
            return (key, True) if key in SAATY_TFN_SCALE else (None, False)
        return (text, False) if text in SAATY_TFN_SCALE else (None, False)

    @staticmethod
    def apply_confidence(tfn: TFN, confidence: str = DEFAULT_CONFIDENCE) -> TFN:
        """
        Scales the spread of `tfn` around its mode. The lower bound never drops
        below zero. 'medium' (and any unknown level) returns the TFN unchanged.
        """
        multiplier = CONFIDENCE_SPREAD_MULTIPLIERS[parse_confidence(confidence)]
        return tfn if multiplier == 1.0 else tfn.scale_spread(multiplier)

    @staticmethod
    def get_fuzzy_number(value: Any, confidence: str = DEFAULT_CONFIDENCE) -> TFN:
        """
        Converts one Saaty judgment to a TFN.

        Args:
            value: A scale string ("3", "1/5"), or a number on the 1-9 scale or its
                   reciprocal. Anything else is treated as equal importance.
            confidence: 'low', 'medium' or 'high'. Applied after the reciprocal
                        of a "1/k" judgment has been taken.

        Returns:
            The TFN for the judgment.

        Example:
        >>> FuzzyScale.get_fuzzy_number("3")
        TFN(2.0000, 3.0000, 4.0000)
        >>> FuzzyScale.get_fuzzy_number("1/3")
        TFN(0.2500, 0.3333, 0.5000)
        """
        key, is_reciprocal = FuzzyScale._resolve_scale_key(value)
        if key is None:
            base = TFN.multiplicative_identity()
        else:
            base = TFN(*SAATY_TFN_SCALE[key])
            if is_reciprocal:
                base = base.inverse()
        return FuzzyScale.apply_confidence(base, confidence)


# ==============================================================================
# 2. MATRIX CREATION AND MANIPULATION
# ==============================================================================

def create_comparison_matrix(size: int, number_type: Type[Number]) -> np.ndarray:
    """
    Creates an (n x n) pairwise comparison matrix where each element
    is an object of the specified number_type, initialized to the
    multiplicative identity (e.g., 1).
    """
    matrix = np.empty((size, size), dtype=object)
    identity = number_type.multiplicative_identity()
    for i in range(size):
        for j in range(size):
            matrix[i, j] = identity
    return matrix

def complete_matrix_from_upper_triangle(matrix: np.ndarray) -> np.ndarray:
    """
    Returns a copy of `matrix` made reciprocal from its upper triangle.

    The diagonal is reset to the multiplicative identity and every lower-triangle
    cell [j, i] is replaced by the inverse of the upper-triangle cell [i, j].
    Whatever was stored below the diagonal is ignored.
    """
    Validation.ensure_square_object_matrix(matrix)
    n = matrix.shape[0]
    completed_matrix = matrix.copy()
    if n == 0:
        return completed_matrix

    identity = type(matrix[0, 0]).multiplicative_identity()
    for i in range(n):
        completed_matrix[i, i] = identity
        for j in range(i + 1, n):
            completed_matrix[j, i] = completed_matrix[i, j].inverse()
    return completed_matrix

def build_crisp_matrix(values: Sequence[Sequence[Any]] | None, size: int) -> np.ndarray:
    """
    Builds a complete reciprocal crisp comparison matrix from string judgments.

    Only the upper triangle of `values` is read. Missing rows or cells and
    unparseable judgments count as equal importance (1).

    Args:
        values: A list-of-lists of judgment strings, possibly partial.
        size: The number of compared items.

    Returns:
        An (n x n) object array of `Crisp` cells.
    """
    Validation.ensure_count("Matrix size", size)
    Validation.ensure_judgment_matrix(values, size)

    matrix = create_comparison_matrix(size, Crisp)
    for i in range(size):
        for j in range(i + 1, size):
            matrix[i, j] = Crisp(parse_judgment(get_cell(values, i, j, default="1")))
    return complete_matrix_from_upper_triangle(matrix)

def build_fuzzy_matrix(
    values: Sequence[Sequence[Any]] | None,
    size: int,
    confidence: Sequence[Sequence[Any]] | None = None
) -> np.ndarray:
    """
    Builds a complete reciprocal TFN comparison matrix from string judgments.

    Each upper-triangle judgment is fuzzified with `FuzzyScale`, using the matching
    cell of `confidence` (default 'medium'). The lower triangle holds the inverse
    of the adjusted upper cell.
    """
    Validation.ensure_count("Matrix size", size)
    Validation.ensure_judgment_matrix(values, size)
    Validation.ensure_judgment_matrix(confidence, size, label="Confidence matrix")

    matrix = create_comparison_matrix(size, TFN)
    for i in range(size):
        for j in range(i + 1, size):
            matrix[i, j] = FuzzyScale.get_fuzzy_number(
                get_cell(values, i, j, default="1"),
                confidence=get_cell(confidence, i, j, default=DEFAULT_CONFIDENCE)
            )
    return complete_matrix_from_upper_triangle(matrix)

def to_crisp_array(matrix: np.ndarray, method: str | None = None) -> np.ndarray:
    """Defuzzifies every cell of an object matrix into a float array."""
    method = method or configure_parameters.DEFAULT_DEFUZZIFY_METHOD
    return np.array(
        [[cell.defuzzify(method=method) for cell in row] for row in matrix],
        dtype=float
    ).reshape(matrix.shape)
