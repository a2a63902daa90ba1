"""
Result containers returned by the calculators.

All results are frozen dataclasses. NumPy arrays are stored as read-only copies
and list-valued fields as tuples, so a result can be shared without being
modified by the code that receives it. `to_dict()` returns a JSON-ready dict.
"""
from __future__ import annotations
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Mapping, Tuple
import numpy as np

from .config import configure_parameters
from .ranking import order_by_rank
from .types import TFN, Crisp


# ==============================================================================
# 1. HELPERS
# ==============================================================================

def _readonly(array: Any, dtype: Any = float) -> np.ndarray:
    frozen = np.array(array, dtype=dtype, copy=True)
    frozen.setflags(write=False)
    return frozen

def _readonly_objects(array: np.ndarray) -> np.ndarray:
    frozen = np.empty(array.shape, dtype=object)
    frozen[...] = array
    frozen.setflags(write=False)
    return frozen

def _to_serializable(value: Any) -> Any:
    """Recursively converts result values into JSON-compatible Python objects."""
    if isinstance(value, TFN):
        return value.to_dict()
    if isinstance(value, Crisp):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, np.ndarray):
        if value.dtype == object:
            return [_to_serializable(v) for v in value]
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Mapping):
        return {str(k): _to_serializable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_serializable(v) for v in value]
    return value


class _ResultMixin:
    def to_dict(self) -> dict:
        """Serializes every field of the result to a JSON-compatible dictionary."""
        return {f.name: _to_serializable(getattr(self, f.name)) for f in fields(self)}

    def _freeze(self, **converted):
        for name, value in converted.items():
            object.__setattr__(self, name, value)


# ==============================================================================
# 2. AHP FAMILY
# ==============================================================================

@dataclass(frozen=True, eq=False)
class AHPResult(_ResultMixin):
    """Output of `calculate_ahp`. Scores are not ranked; sort `final_scores` as needed."""
    criteria_matrix: np.ndarray                  # (c x c) crisp reciprocal matrix
    alternative_matrices: Tuple[np.ndarray, ...]  # one (a x a) matrix per criterion
    criteria_weights: np.ndarray                 # sums to 1
    alternative_scores: np.ndarray               # (c x a), each row sums to 1
    final_scores: np.ndarray                     # (a,)
    consistency_ratios: Mapping[str, Any]        # {"criteria": float, "alternatives": tuple}
    method: str = "geometric_mean"

    def __post_init__(self):
        self._freeze(
            criteria_matrix=_readonly(self.criteria_matrix),
            alternative_matrices=tuple(_readonly(m) for m in self.alternative_matrices),
            criteria_weights=_readonly(self.criteria_weights),
            alternative_scores=_readonly(self.alternative_scores),
            final_scores=_readonly(self.final_scores),
            consistency_ratios=MappingProxyType({
                "criteria": float(self.consistency_ratios["criteria"]),
                "alternatives": tuple(float(cr) for cr in self.consistency_ratios["alternatives"]),
            }),
        )

    def is_consistent(self, threshold: float | None = None) -> bool:
        """True if every matrix has a CR at or below `threshold` (configured default 0.10)."""
        threshold = threshold if threshold is not None else configure_parameters.DEFAULT_SAATY_CR_THRESHOLD
        ratios = (self.consistency_ratios["criteria"],) + self.consistency_ratios["alternatives"]
        return all(cr <= threshold for cr in ratios)


@dataclass(frozen=True, eq=False)
class FAHPResult(_ResultMixin):
    """Output of `calculate_fahp`."""
    fuzzy_criteria_matrix: np.ndarray
    criteria_geometric_means: Tuple[TFN, ...]
    fuzzy_criteria_weights: Tuple[TFN, ...]
    crisp_criteria_weights: np.ndarray           # centroid of each fuzzy weight
    normalized_criteria_weights: np.ndarray      # sums to 1
    fuzzy_alternative_matrices: Tuple[np.ndarray, ...]
    alternative_geometric_means: Tuple[Tuple[TFN, ...], ...]
    fuzzy_alternative_weights: Tuple[Tuple[TFN, ...], ...]
    crisp_alternative_weights: np.ndarray        # (c x a)
    normalized_alternative_weights: np.ndarray   # (c x a), rows sum to 1
    final_scores: np.ndarray
    rankings: np.ndarray                         # 1 = best
    consistency_ratios: Mapping[str, Any]

    def __post_init__(self):
        self._freeze(
            fuzzy_criteria_matrix=_readonly_objects(self.fuzzy_criteria_matrix),
            criteria_geometric_means=tuple(self.criteria_geometric_means),
            fuzzy_criteria_weights=tuple(self.fuzzy_criteria_weights),
            crisp_criteria_weights=_readonly(self.crisp_criteria_weights),
            normalized_criteria_weights=_readonly(self.normalized_criteria_weights),
            fuzzy_alternative_matrices=tuple(_readonly_objects(m) for m in self.fuzzy_alternative_matrices),
            alternative_geometric_means=tuple(tuple(row) for row in self.alternative_geometric_means),
            fuzzy_alternative_weights=tuple(tuple(row) for row in self.fuzzy_alternative_weights),
            crisp_alternative_weights=_readonly(self.crisp_alternative_weights),
            normalized_alternative_weights=_readonly(self.normalized_alternative_weights),
            final_scores=_readonly(self.final_scores),
            rankings=_readonly(self.rankings, dtype=int),
            consistency_ratios=MappingProxyType({
                "criteria": float(self.consistency_ratios["criteria"]),
                "alternatives": tuple(float(cr) for cr in self.consistency_ratios["alternatives"]),
            }),
        )


# ==============================================================================
# 3. TOPSIS FAMILY
# ==============================================================================

@dataclass(frozen=True, eq=False)
class TOPSISResult(_ResultMixin):
    """Output of `calculate_topsis`."""
    raw_matrix: np.ndarray
    normalized_matrix: np.ndarray
    weighted_normalized_matrix: np.ndarray
    ideal_best: np.ndarray
    ideal_worst: np.ndarray
    distance_from_best: np.ndarray
    distance_from_worst: np.ndarray
    performance_scores: np.ndarray
    rankings: np.ndarray
    weights: np.ndarray
    criteria_types: Tuple[str, ...]

    def __post_init__(self):
        self._freeze(
            raw_matrix=_readonly(self.raw_matrix),
            normalized_matrix=_readonly(self.normalized_matrix),
            weighted_normalized_matrix=_readonly(self.weighted_normalized_matrix),
            ideal_best=_readonly(self.ideal_best),
            ideal_worst=_readonly(self.ideal_worst),
            distance_from_best=_readonly(self.distance_from_best),
            distance_from_worst=_readonly(self.distance_from_worst),
            performance_scores=_readonly(self.performance_scores),
            rankings=_readonly(self.rankings, dtype=int),
            weights=_readonly(self.weights),
            criteria_types=tuple(self.criteria_types),
        )

    @property
    def ranked_alternatives(self) -> np.ndarray:
        """Alternative indices from best to worst."""
        return order_by_rank(self.rankings)


@dataclass(frozen=True, eq=False)
class FuzzyTOPSISResult(_ResultMixin):
    """Output of `calculate_fuzzy_topsis` and `calculate_fuzzy_topsis_from_crisp`."""
    fuzzy_matrix: np.ndarray
    normalized_fuzzy_matrix: np.ndarray
    weighted_normalized_fuzzy_matrix: np.ndarray
    fuzzy_weights: Tuple[TFN, ...]
    ideal_best: Tuple[TFN, ...]
    ideal_worst: Tuple[TFN, ...]
    distance_from_best_fuzzy: Tuple[TFN, ...]    # degenerate TFNs of the crisp sums
    distance_from_worst_fuzzy: Tuple[TFN, ...]
    distance_from_best: np.ndarray
    distance_from_worst: np.ndarray
    performance_scores: np.ndarray
    rankings: np.ndarray
    criteria_types: Tuple[str, ...]

    def __post_init__(self):
        self._freeze(
            fuzzy_matrix=_readonly_objects(self.fuzzy_matrix),
            normalized_fuzzy_matrix=_readonly_objects(self.normalized_fuzzy_matrix),
            weighted_normalized_fuzzy_matrix=_readonly_objects(self.weighted_normalized_fuzzy_matrix),
            fuzzy_weights=tuple(self.fuzzy_weights),
            ideal_best=tuple(self.ideal_best),
            ideal_worst=tuple(self.ideal_worst),
            distance_from_best_fuzzy=tuple(self.distance_from_best_fuzzy),
            distance_from_worst_fuzzy=tuple(self.distance_from_worst_fuzzy),
            distance_from_best=_readonly(self.distance_from_best),
            distance_from_worst=_readonly(self.distance_from_worst),
            performance_scores=_readonly(self.performance_scores),
            rankings=_readonly(self.rankings, dtype=int),
            criteria_types=tuple(self.criteria_types),
        )

    @property
    def ranked_alternatives(self) -> np.ndarray:
        return order_by_rank(self.rankings)


# ==============================================================================
# 4. HYBRID
# ==============================================================================

@dataclass(frozen=True)
class AlternativeDetail:
    """One ranked row of a hybrid result."""
    name: str
    rank: int
    score: float
    distance_to_best: float
    distance_to_worst: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "rank": int(self.rank),
            "score": float(self.score),
            "distance_to_best": float(self.distance_to_best),
            "distance_to_worst": float(self.distance_to_worst),
        }


@dataclass(frozen=True, eq=False)
class HybridFuzzyAHPTopsisResult(_ResultMixin):
    """Output of `calculate_hybrid_fuzzy_ahp_topsis`."""
    fuzzy_criteria_matrix: np.ndarray
    fuzzy_ahp_weights: Tuple[TFN, ...]
    crisp_ahp_weights: np.ndarray
    normalized_ahp_weights: np.ndarray
    criteria_consistency_ratio: float
    fuzzy_topsis_result: FuzzyTOPSISResult
    final_rankings: np.ndarray
    final_scores: np.ndarray
    alternative_details: Tuple[AlternativeDetail, ...]  # sorted by rank

    def __post_init__(self):
        self._freeze(
            fuzzy_criteria_matrix=_readonly_objects(self.fuzzy_criteria_matrix),
            fuzzy_ahp_weights=tuple(self.fuzzy_ahp_weights),
            crisp_ahp_weights=_readonly(self.crisp_ahp_weights),
            normalized_ahp_weights=_readonly(self.normalized_ahp_weights),
            criteria_consistency_ratio=float(self.criteria_consistency_ratio),
            final_rankings=_readonly(self.final_rankings, dtype=int),
            final_scores=_readonly(self.final_scores),
            alternative_details=tuple(self.alternative_details),
        )


# The hybrid is also published as the "Fuzzy ATP-TOPSIS" result
HybridFuzzyATPTopsisResult = HybridFuzzyAHPTopsisResult
