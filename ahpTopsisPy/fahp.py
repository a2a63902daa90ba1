from __future__ import annotations
from typing import Any, Dict, Sequence
import numpy as np

from .config import configure_parameters
from .consistency import Consistency
from .defuzzification import normalize_crisp_weights
from .matrix_builder import build_fuzzy_matrix
from .ranking import rank_descending
from .results import FAHPResult
from .types import TFN
from .validation import InvalidInputError, Validation
from .weight_derivation import row_geometric_means, weights_from_geometric_means


def derive_fuzzy_weights(fuzzy_matrix: np.ndarray, defuzzify_method: str | None = None) -> Dict[str, Any]:
    """
    Derives fuzzy and crisp priorities from a TFN comparison matrix with
    Buckley's fuzzy geometric mean.

    1. r_i = fuzzy geometric mean of row i
    2. w_i = r_i * (r_1 + ... + r_n)^-1
    3. crisp_i = defuzzify(w_i) (centroid by default)
    4. normalized_i = crisp_i / sum(crisp)

    Returns:
        A dict with `geometric_means`, `fuzzy_weights`, `crisp_weights` and
        `normalized_weights`.
    """
    Validation.ensure_square_object_matrix(fuzzy_matrix)
    method = defuzzify_method or configure_parameters.DEFAULT_DEFUZZIFY_METHOD

    geometric_means = row_geometric_means(fuzzy_matrix)
    fuzzy_weights = weights_from_geometric_means(geometric_means, TFN)
    crisp_weights = np.array([w.defuzzify(method=method) for w in fuzzy_weights], dtype=float)

    return {
        "geometric_means": geometric_means,
        "fuzzy_weights": fuzzy_weights,
        "crisp_weights": crisp_weights,
        "normalized_weights": normalize_crisp_weights(crisp_weights),
    }

def calculate_fahp(
    criteria_matrix: Sequence[Sequence[Any]],
    alternative_matrices: Sequence[Sequence[Sequence[Any]]],
    num_criteria: int,
    num_alternatives: int,
    criteria_confidence: Sequence[Sequence[Any]] | None = None,
    alternative_confidences: Sequence[Sequence[Sequence[Any]] | None] | None = None
) -> FAHPResult:
    """
    Runs a Fuzzy AHP over Saaty-scale string judgments.

    Every upper-triangle judgment is mapped to a TFN, its spread adjusted by the
    matching confidence cell ('low' widens, 'high' narrows, default 'medium'),
    and the lower triangle filled with inverses. Priorities come from
    `derive_fuzzy_weights`; the final score of an alternative is the sum over
    criteria of normalized criterion weight times normalized alternative weight.

    Args:
        criteria_matrix: (num_criteria x num_criteria) judgment strings.
        alternative_matrices: One judgment matrix per criterion.
        num_criteria: The number of criteria.
        num_alternatives: The number of alternatives.
        criteria_confidence: Optional confidence levels for the criteria matrix.
        alternative_confidences: Optional list with one confidence matrix (or
            None) per criterion.

    Returns:
        A `FAHPResult` with rankings (1 = best, ties in input order).
    """
    num_criteria = Validation.ensure_count("num_criteria", num_criteria)
    num_alternatives = Validation.ensure_count("num_alternatives", num_alternatives)
    Validation.ensure_judgment_matrix(criteria_matrix, num_criteria, label="Criteria matrix")
    alternative_matrices = Validation.ensure_judgment_matrices(alternative_matrices, num_criteria, num_alternatives)
    if alternative_confidences is None:
        alternative_confidences = [None] * num_criteria
    elif len(alternative_confidences) != num_criteria:
        raise InvalidInputError(
            f"Expected {num_criteria} alternative confidence matrices, got {len(alternative_confidences)}."
        )

    # --- 1. Criteria level ---
    fuzzy_criteria = build_fuzzy_matrix(criteria_matrix, num_criteria, confidence=criteria_confidence)
    criteria_priorities = derive_fuzzy_weights(fuzzy_criteria)
    criteria_cr = Consistency.calculate_saaty_cr(fuzzy_criteria)
    Consistency.warn_if_inconsistent("Fuzzy criteria matrix", criteria_cr)

    # --- 2. Alternative level ---
    fuzzy_alternatives, alternative_geo_means, fuzzy_alternative_weights = [], [], []
    crisp_alternative_weights = np.zeros((num_criteria, num_alternatives))
    normalized_alternative_weights = np.zeros((num_criteria, num_alternatives))
    alternative_crs = []
    for c in range(num_criteria):
        fuzzy_matrix = build_fuzzy_matrix(alternative_matrices[c], num_alternatives, confidence=alternative_confidences[c])
        priorities = derive_fuzzy_weights(fuzzy_matrix)
        cr = Consistency.calculate_saaty_cr(fuzzy_matrix)
        Consistency.warn_if_inconsistent(f"Fuzzy alternative matrix for criterion {c + 1}", cr)

        fuzzy_alternatives.append(fuzzy_matrix)
        alternative_geo_means.append(priorities["geometric_means"])
        fuzzy_alternative_weights.append(priorities["fuzzy_weights"])
        crisp_alternative_weights[c, :] = priorities["crisp_weights"]
        normalized_alternative_weights[c, :] = priorities["normalized_weights"]
        alternative_crs.append(cr)

    # --- 3. Synthesis ---
    final_scores = criteria_priorities["normalized_weights"] @ normalized_alternative_weights

    return FAHPResult(
        fuzzy_criteria_matrix=fuzzy_criteria,
        criteria_geometric_means=criteria_priorities["geometric_means"],
        fuzzy_criteria_weights=criteria_priorities["fuzzy_weights"],
        crisp_criteria_weights=criteria_priorities["crisp_weights"],
        normalized_criteria_weights=criteria_priorities["normalized_weights"],
        fuzzy_alternative_matrices=fuzzy_alternatives,
        alternative_geometric_means=alternative_geo_means,
        fuzzy_alternative_weights=fuzzy_alternative_weights,
        crisp_alternative_weights=crisp_alternative_weights,
        normalized_alternative_weights=normalized_alternative_weights,
        final_scores=final_scores,
        rankings=rank_descending(final_scores),
        consistency_ratios={"criteria": criteria_cr, "alternatives": alternative_crs},
    )
