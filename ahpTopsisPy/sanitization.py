from __future__ import annotations
from typing import Any, List, Sequence, Tuple
import math

from .validation import InvalidInputError

CONFIDENCE_LEVELS = ("low", "medium", "high")
DEFAULT_CONFIDENCE = "medium"

# Ordered (value, label) pairs for building judgment input forms.
SAATY_SCALE_OPTIONS: Tuple[Tuple[str, str], ...] = (
    ("1", "1 - Equal importance"),
    ("2", "2 - Weak"),
    ("3", "3 - Moderate importance"),
    ("4", "4 - Moderate plus"),
    ("5", "5 - Strong importance"),
    ("6", "6 - Strong plus"),
    ("7", "7 - Very strong importance"),
    ("8", "8 - Very very strong"),
    ("9", "9 - Extreme importance"),
    ("1/2", "1/2 - Weak (inverse)"),
    ("1/3", "1/3 - Moderate (inverse)"),
    ("1/4", "1/4 - Moderate plus (inverse)"),
    ("1/5", "1/5 - Strong (inverse)"),
    ("1/6", "1/6 - Strong plus (inverse)"),
    ("1/7", "1/7 - Very strong (inverse)"),
    ("1/8", "1/8 - Very very strong (inverse)"),
    ("1/9", "1/9 - Extreme (inverse)"),
)


# ==============================================================================
# 1. CELL PARSING
# ==============================================================================

def _to_positive_float(text: str) -> float | None:
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value

def parse_judgment(value: Any) -> float:
    """
    Parses a single pairwise judgment into a positive float.

    Accepts numbers, numeric strings ("3", "2.5") and fractions ("1/3", "2/5").
    Anything else (empty cells, None, malformed text, zero or negative values)
    is read as equal importance and returns 1.0. Never raises.

    Example:
    >>> parse_judgment("1/4")
    0.25
    >>> parse_judgment("abc")
    1.0
    """
    if value is None or isinstance(value, bool):
        return 1.0
    if isinstance(value, (int, float)):
        value = float(value)
        return value if math.isfinite(value) and value > 0 else 1.0

    text = str(value).strip()
    if not text:
        return 1.0

    if "/" in text:
        parts = text.split("/")
        if len(parts) != 2:
            return 1.0
        numerator = _to_positive_float(parts[0].strip())
        denominator = _to_positive_float(parts[1].strip())
        if numerator is None or denominator is None:
            return 1.0
        return numerator / denominator

    parsed = _to_positive_float(text)
    return parsed if parsed is not None else 1.0

def parse_confidence(value: Any) -> str:
    """Normalizes a confidence cell to 'low', 'medium' or 'high' (default 'medium')."""
    if isinstance(value, str):
        level = value.strip().lower()
        if level in CONFIDENCE_LEVELS:
            return level
    return DEFAULT_CONFIDENCE

def get_cell(matrix: Sequence[Sequence[Any]] | None, i: int, j: int, default: Any = None) -> Any:
    """Reads matrix[i][j] from a possibly partial list-of-lists, returning `default` if absent."""
    if matrix is None or i >= len(matrix):
        return default
    row = matrix[i]
    if row is None or j >= len(row):
        return default
    cell = row[j]
    return default if cell is None else cell


# ==============================================================================
# 2. MATRIX RESIZING
# ==============================================================================

def resize_judgment_matrix(matrix: Sequence[Sequence[Any]] | None, new_size: int, fill: Any = "1") -> List[List[Any]]:
    """
    Returns a new `new_size` x `new_size` judgment matrix.

    The overlapping top-left block of `matrix` is copied, every new cell is set to
    `fill`. The input is never mutated. Use `fill="medium"` to resize a matching
    confidence matrix.

    Args:
        matrix: The current (possibly partial) list-of-lists matrix.
        new_size: The size of the resized matrix.
        fill: Value placed in cells that did not exist in the input.

    Returns:
        A new list-of-lists matrix.
    """
    if isinstance(new_size, bool) or not isinstance(new_size, int) or new_size < 0:
        raise InvalidInputError(f"new_size must be a non-negative integer, got {new_size!r}.")

    return [
        [get_cell(matrix, i, j, default=fill) for j in range(new_size)]
        for i in range(new_size)
    ]
