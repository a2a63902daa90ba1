from __future__ import annotations
import warnings
from types import MappingProxyType
from typing import Dict, List, Any, Callable, Sequence
import numpy as np

from .config import configure_parameters

# Saaty's Random Index by matrix size. Sizes above 15 use the last value.
SAATY_RI_VALUES = MappingProxyType({
    1: 0.0, 2: 0.0, 3: 0.58, 4: 0.9, 5: 1.12, 6: 1.24, 7: 1.32, 8: 1.41,
    9: 1.45, 10: 1.49, 11: 1.51, 12: 1.48, 13: 1.56, 14: 1.57, 15: 1.59
})
SAATY_RI_FALLBACK = 1.59


class Registry(dict):
    """
    A custom dictionary that validates insertions to ensure only
    callable objects (functions, methods) are registered.
    """
    def __setitem__(self, key: str, value: Callable):
        if not callable(value):
            raise TypeError(
                f"Attempted to register a non-callable object of type '{type(value).__name__}' "
                f"for the key '{key}'. Only functions or methods can be registered."
            )
        super().__setitem__(key, value)

    def register(self, name: str) -> Callable:
        """Decorator factory for registering a function."""
        def decorator(func: Callable) -> Callable:
            if name in self:
                print(f"Warning: Overwriting consistency method '{name}'")
            self[name] = func
            return func
        return decorator

CONSISTENCY_METHODS = Registry()


def _reciprocal_crisp_matrix(matrix: np.ndarray | Sequence[Sequence[float]], consistency_method: str = 'centroid') -> np.ndarray:
    """
    Builds a strictly reciprocal float matrix from the upper triangle of `matrix`.
    Cells may be Crisp/TFN objects (defuzzified) or plain numbers.
    """
    matrix = np.asarray(matrix, dtype=object)
    n = matrix.shape[0]
    crisp_matrix = np.eye(n)
    for i in range(n):
        for j in range(i + 1, n):
            cell = matrix[i, j]
            val = cell.defuzzify(method=consistency_method) if hasattr(cell, 'defuzzify') else float(cell)
            if val <= 1e-9: val = 1e-9
            crisp_matrix[i, j] = val
            crisp_matrix[j, i] = 1.0 / val
    return crisp_matrix

def _geometric_mean_weights(crisp_matrix: np.ndarray) -> np.ndarray:
    log_matrix = np.log(np.maximum(crisp_matrix, configure_parameters.LOG_EPSILON))
    row_geometric_means = np.exp(np.mean(log_matrix, axis=1))
    return row_geometric_means / np.sum(row_geometric_means)


class Consistency:
    """
    A class with static methods to calculate, check, and analyze the
    consistency of pairwise comparison matrices.

    Consistency is advisory: no calculator refuses an inconsistent matrix.
    """
    @staticmethod
    def _get_saaty_cr_threshold(saaty_cr_threshold: float | None = None) -> float:
        return saaty_cr_threshold if saaty_cr_threshold is not None else configure_parameters.DEFAULT_SAATY_CR_THRESHOLD

    @staticmethod
    def _get_gci_threshold(n: int) -> float:
        return configure_parameters.GCI_THRESHOLDS.get(n, configure_parameters.GCI_THRESHOLDS['default'])

    @staticmethod
    def get_random_index(n: int) -> float:
        """Saaty's Random Index (RI) for a matrix of size n."""
        return SAATY_RI_VALUES.get(n, SAATY_RI_FALLBACK)

    @CONSISTENCY_METHODS.register("saaty_cr")
    def calculate_saaty_cr(
        matrix: np.ndarray,
        weights: Sequence[float] | None = None,
        consistency_method: str = 'centroid',
        **kwargs) -> float:
        """
        Calculates Saaty's Consistency Ratio (CR).

        lambda_max is the mean of (A w)_i / w_i, CI = (lambda_max - n) / (n - 1) and
        CR = CI / RI(n). Matrices of size 1 or 2 are always consistent (CR = 0).
        A CI that comes out slightly negative through rounding is clamped to 0.

        .. warning::
            **Academic Limitation:** For a fuzzy matrix the CR is computed on the
            defuzzified upper triangle. This is a widely used heuristic, not a true
            fuzzy consistency measure.

        Args:
            matrix: The comparison matrix (Crisp/TFN objects or floats).
            weights: The priority vector to test against. Geometric mean weights
                     are derived when omitted.
            consistency_method: The method used to convert fuzzy numbers to crisp ones.

        Returns:
            The consistency ratio as a float.
        """
        n = np.asarray(matrix, dtype=object).shape[0]
        if n <= 2: return 0.0

        crisp_matrix = _reciprocal_crisp_matrix(matrix, consistency_method)
        if weights is None:
            weights = _geometric_mean_weights(crisp_matrix)
        weights = np.asarray(weights, dtype=float)

        # Lambda max
        Aw = crisp_matrix @ weights
        lambda_max = np.mean(Aw / np.maximum(weights, 1e-9))

        ci = (lambda_max - n) / (n - 1)
        if ci < 0: ci = 0.0

        ri = Consistency.get_random_index(n)
        return float(ci / ri)

    @CONSISTENCY_METHODS.register("gci")
    def calculate_gci(matrix: np.ndarray, consistency_method: str = 'centroid', **kwargs) -> float:
        """
        Calculates the Geometric Consistency Index (GCI) for the matrix.
        A lower GCI value indicates better consistency.

        .. note::
            **Academic Note:** GCI is an alternative to Saaty's CR. Thresholds
            proposed by Aguarón & Moreno-Jiménez (2003) are often cited:
            GCI <= 0.31 for n=3, <= 0.35 for n=4, <= 0.37 for n>4.
        """
        n = np.asarray(matrix, dtype=object).shape[0]
        if n <= 2: return 0.0

        crisp_matrix = _reciprocal_crisp_matrix(matrix, consistency_method)
        weights = _geometric_mean_weights(crisp_matrix)

        sum_of_squared_errors = 0.0
        for i in range(n):
            for j in range(i + 1, n):
                error = np.log(crisp_matrix[i, j]) - np.log(weights[i]) + np.log(weights[j])
                sum_of_squared_errors += error**2

        return float((2 / ((n - 1) * (n - 2))) * sum_of_squared_errors)

    @staticmethod
    def check_matrix_consistency(
        matrix: np.ndarray,
        consistency_method: str = 'centroid',
        saaty_cr_threshold: float | None = None,
        required_indices: List[str] | None = None
    ) -> Dict[str, Any]:
        """
        Runs every registered consistency index on a single matrix.

        Args:
            matrix: The comparison matrix to check.
            consistency_method: Defuzzification method for fuzzy matrices.
            saaty_cr_threshold: The acceptable CR. Uses the configured default if None.
            required_indices: Indices that MUST pass for `is_consistent` to be True.
                Defaults to ["saaty_cr"]; pass ["saaty_cr", "gci"] for the stricter
                combined check.

        Returns:
            A dict with `matrix_size`, one entry per registered index and
            the overall `is_consistent` flag.
        """
        n = np.asarray(matrix, dtype=object).shape[0]
        report: Dict[str, Any] = {"matrix_size": n}
        for name, func in CONSISTENCY_METHODS.items():
            report[name] = func(matrix=matrix, consistency_method=consistency_method)

        indices = required_indices or ["saaty_cr"]
        consistent = True
        if "saaty_cr" in indices and report["saaty_cr"] > Consistency._get_saaty_cr_threshold(saaty_cr_threshold):
            consistent = False
        if "gci" in indices and report["gci"] > Consistency._get_gci_threshold(n):
            consistent = False

        report["is_consistent"] = consistent
        return report

    @staticmethod
    def get_consistency_recommendations(
        matrix: np.ndarray,
        consistency_method: str = 'centroid',
        item_names: Sequence[str] | None = None
    ) -> Dict[str, Any]:
        """
        Provides a ranked list of judgments to change to improve consistency.

        Each upper-triangle judgment a_ij is compared with the ratio w_i / w_j
        implied by the geometric mean weights. Revisions are sorted by descending
        log error |ln(a_ij / (w_i / w_j))|, ties broken by pair index.
        """
        crisp = _reciprocal_crisp_matrix(matrix, consistency_method)
        n = crisp.shape[0]
        w = _geometric_mean_weights(crisp)

        all_errors = []
        for i in range(n):
            for j in range(i+1, n):
                expected = w[i] / w[j]
                actual = crisp[i, j]
                all_errors.append({
                    "pair": (i, j),
                    "error": float(abs(np.log(actual / expected))),
                    "current_value": float(actual),
                    "suggested_value": float(expected)
                })

        # Deterministic sort
        all_errors.sort(key=lambda x: (-x['error'], x['pair']))

        return {
            "revisions": all_errors,
            "item_names": list(item_names) if item_names is not None else [f"Item {k+1}" for k in range(n)]
        }

    @staticmethod
    def warn_if_inconsistent(label: str, consistency_ratio: float, saaty_cr_threshold: float | None = None) -> bool:
        """
        Emits a UserWarning for an inconsistent matrix when
        `configure_parameters.WARN_ON_INCONSISTENCY` is enabled.
        Returns True if a warning was issued.
        """
        threshold = Consistency._get_saaty_cr_threshold(saaty_cr_threshold)
        if configure_parameters.WARN_ON_INCONSISTENCY and consistency_ratio > threshold:
            warnings.warn(
                f"{label} is inconsistent (CR={consistency_ratio:.4f} > {threshold}). "
                "Consider revising its judgments.",
                UserWarning
            )
            return True
        return False
