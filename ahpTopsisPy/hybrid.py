from __future__ import annotations
from typing import Any, Sequence
import numpy as np

from .consistency import Consistency
from .fahp import derive_fuzzy_weights
from .fuzzy_topsis import calculate_fuzzy_topsis_from_crisp
from .matrix_builder import build_fuzzy_matrix
from .ranking import order_by_rank
from .results import AlternativeDetail, HybridFuzzyAHPTopsisResult
from .validation import InvalidInputError, Validation


def calculate_hybrid_fuzzy_ahp_topsis(
    criteria_matrix: Sequence[Sequence[Any]],
    alternative_data: Sequence[Sequence[float]] | np.ndarray,
    num_criteria: int,
    num_alternatives: int,
    criteria_types: Sequence[str],
    criteria_confidence: Sequence[Sequence[Any]] | None = None,
    alternative_names: Sequence[str] | None = None
) -> HybridFuzzyAHPTopsisResult:
    """
    Weights the criteria with Fuzzy AHP and ranks the alternatives with
    Fuzzy TOPSIS.

    Only the criteria are compared pairwise. The fuzzy AHP weights are handed
    unchanged to Fuzzy TOPSIS, which runs on the crisp performance data; the
    final scores are the TOPSIS closeness coefficients.

    Args:
        criteria_matrix: (num_criteria x num_criteria) judgment strings.
        alternative_data: (num_alternatives x num_criteria) crisp performance values.
        num_criteria: The number of criteria.
        num_alternatives: The number of alternatives.
        criteria_types: 'benefit' or 'cost' per criterion.
        criteria_confidence: Optional confidence levels for the criteria matrix.
        alternative_names: Optional display names, defaulting to "Alternative 1", ...

    Returns:
        A `HybridFuzzyAHPTopsisResult` whose `alternative_details` are sorted by rank.
    """
    num_criteria = Validation.ensure_count("num_criteria", num_criteria)
    num_alternatives = Validation.ensure_count("num_alternatives", num_alternatives)
    Validation.ensure_judgment_matrix(criteria_matrix, num_criteria, label="Criteria matrix")

    data = Validation.ensure_decision_matrix(alternative_data)
    if data.shape != (num_alternatives, num_criteria):
        raise InvalidInputError(
            f"Alternative data has shape {data.shape}, expected ({num_alternatives}, {num_criteria})."
        )
    if alternative_names is None:
        alternative_names = [f"Alternative {i + 1}" for i in range(num_alternatives)]
    elif len(alternative_names) != num_alternatives:
        raise InvalidInputError(f"Expected {num_alternatives} alternative names, got {len(alternative_names)}.")

    # --- 1. Fuzzy AHP on the criteria ---
    fuzzy_criteria = build_fuzzy_matrix(criteria_matrix, num_criteria, confidence=criteria_confidence)
    priorities = derive_fuzzy_weights(fuzzy_criteria)
    criteria_cr = Consistency.calculate_saaty_cr(fuzzy_criteria)
    Consistency.warn_if_inconsistent("Fuzzy criteria matrix", criteria_cr)

    # --- 2. Fuzzy TOPSIS on the performance data ---
    topsis_result = calculate_fuzzy_topsis_from_crisp(data, priorities["fuzzy_weights"], criteria_types)

    details = [
        AlternativeDetail(
            name=str(alternative_names[i]),
            rank=int(topsis_result.rankings[i]),
            score=float(topsis_result.performance_scores[i]),
            distance_to_best=float(topsis_result.distance_from_best[i]),
            distance_to_worst=float(topsis_result.distance_from_worst[i]),
        )
        for i in order_by_rank(topsis_result.rankings)
    ]

    return HybridFuzzyAHPTopsisResult(
        fuzzy_criteria_matrix=fuzzy_criteria,
        fuzzy_ahp_weights=priorities["fuzzy_weights"],
        crisp_ahp_weights=priorities["crisp_weights"],
        normalized_ahp_weights=priorities["normalized_weights"],
        criteria_consistency_ratio=criteria_cr,
        fuzzy_topsis_result=topsis_result,
        final_rankings=topsis_result.rankings,
        final_scores=topsis_result.performance_scores,
        alternative_details=details,
    )


calculate_hybrid_fuzzy_atp_topsis = calculate_hybrid_fuzzy_ahp_topsis
