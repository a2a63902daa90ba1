from __future__ import annotations
from typing import Sequence
import numpy as np


def rank_descending(scores: Sequence[float]) -> np.ndarray:
    """
    Ranks scores from best (1) to worst (n).

    Equal scores keep their original input order, so the ranking is always a
    permutation of 1..n.

    Example:
    >>> rank_descending([0.2, 0.5, 0.2])
    array([2, 1, 3])
    """
    scores = np.asarray(scores, dtype=float)
    order = np.argsort(-scores, kind="stable")
    ranks = np.empty(len(scores), dtype=int)
    ranks[order] = np.arange(1, len(scores) + 1)
    return ranks

def closeness_coefficient(distance_from_best: Sequence[float], distance_from_worst: Sequence[float]) -> np.ndarray:
    """
    Relative closeness to the ideal solution, S- / (S+ + S-).

    An alternative that is at distance 0 from both ideals scores 0.
    """
    d_best = np.asarray(distance_from_best, dtype=float)
    d_worst = np.asarray(distance_from_worst, dtype=float)
    total = d_best + d_worst
    safe_total = np.where(total == 0, 1.0, total)
    return np.where(total == 0, 0.0, d_worst / safe_total)

def order_by_rank(rankings: Sequence[int]) -> np.ndarray:
    """Indices of the alternatives sorted from rank 1 downwards."""
    return np.argsort(np.asarray(rankings), kind="stable")
