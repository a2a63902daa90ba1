from __future__ import annotations
from typing import Dict, List
import numpy as np
from .types import TFN, Crisp


# ==============================================================================
# 1. DEFUZZIFICATION METHODS
# ==============================================================================

def crisp_value(number: Crisp) -> float:
    return number.value

def centroid(tfn: TFN) -> float:
    """Center of area of the triangle, (l + m + u) / 3."""
    return sum(tfn) / 3.0

def graded_mean(tfn: TFN) -> float:
    """Graded mean integration, (l + 4m + u) / 6."""
    return (tfn.l + 4 * tfn.m + tfn.u) / 6.0

def alpha_cut_midpoint(tfn: TFN, alpha: float = 0.5) -> float:
    """
    Midpoint of the alpha-cut interval.

    Parameters:
    -----------
    tfn : TFN
        The triangular fuzzy number
    alpha : float
        Membership level of the cut, between 0 and 1. At 1 the cut collapses
        to the mode.
    """
    lower, upper = tfn.alpha_cut(alpha)
    return (lower + upper) / 2.0


_CRISP_METHODS = {"centroid": crisp_value, "value": crisp_value}
_TFN_METHODS = {"centroid": centroid, "graded_mean": graded_mean, "alpha_cut": alpha_cut_midpoint}

for _name, _func in _CRISP_METHODS.items():
    Crisp.register_defuzzify_method(_name, _func)
for _name, _func in _TFN_METHODS.items():
    TFN.register_defuzzify_method(_name, _func)


def available_methods() -> Dict[str, List[str]]:
    """Names of the built-in defuzzification methods per number type."""
    return {"Crisp": list(_CRISP_METHODS), "TFN": list(_TFN_METHODS)}


# ==============================================================================
# 2. WEIGHT NORMALIZATION
# ==============================================================================

def normalize_crisp_weights(crisp_weights: np.ndarray) -> np.ndarray:
    """
    Scales a weight vector to sum to 1.

    Parameters:
    -----------
    crisp_weights : array-like
        Non-negative crisp weights

    Returns:
    --------
    np.ndarray
        The normalized weights. An all-zero vector becomes uniform.

    Raises:
    -------
    ValueError
        If the weights are not all zero and their sum is not positive.
    """
    weights = np.asarray(crisp_weights, dtype=float)
    if not weights.any():
        return np.full(len(weights), 1.0 / len(weights))

    total = weights.sum()
    if total <= 0:
        raise ValueError("Sum of weights is not positive, cannot normalize")
    return weights / total
