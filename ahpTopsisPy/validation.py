from __future__ import annotations
from typing import List, Dict, Sequence, Any
import numpy as np

CRITERIA_TYPES = ("benefit", "cost")


class InvalidInputError(ValueError):
    """
    Raised when a calculator receives inputs that violate one of its
    preconditions (counts, matrix dimensions, weight vector length, ...).
    Malformed judgment strings are NOT errors: they default to equal importance.
    """


def _raise_if_errors(errors: List[str]):
    if errors:
        raise InvalidInputError("; ".join(errors))


class Validation:
    """
    A class containing static methods to validate calculator inputs and
    built comparison matrices.

    The `validate_*` methods return a list of error strings (an empty list means
    the input is valid). The `ensure_*` methods run the same checks and raise
    `InvalidInputError` on the first failing input, returning the input coerced
    into the shape the engines work with.
    """

    # ==========================================================================
    # 1. COMPARISON MATRICES
    # ==========================================================================

    @staticmethod
    def validate_matrix_dimensions(matrix: np.ndarray, expected_size: int | None = None) -> List[str]:
        """Validates that a matrix is a 2D square NumPy array of the expected size."""
        errors = []
        if not isinstance(matrix, np.ndarray) or matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            errors.append("Input must be a 2D square NumPy array.")
            return errors # Stop further checks
        if expected_size is not None and matrix.shape[0] != expected_size:
            errors.append(f"Matrix has size {matrix.shape[0]}, but expected size {expected_size}.")
        return errors

    @staticmethod
    def validate_matrix_diagonal(matrix: np.ndarray, tolerance: float = 1e-9) -> List[str]:
        """Validates that diagonal elements are the multiplicative identity (e.g., 1)."""
        errors = []
        if matrix.shape[0] == 0: return errors # Handle empty matrix
        identity_one = matrix[0, 0].multiplicative_identity()
        for i in range(matrix.shape[0]):
            if abs(matrix[i, i].defuzzify() - identity_one.defuzzify()) > tolerance:
                errors.append(f"Diagonal element at ({i},{i}) is not 1. Found: {matrix[i,i]}")
        return errors

    @staticmethod
    def validate_matrix_reciprocity(matrix: np.ndarray, tolerance: float = 1e-9) -> List[str]:
        """Validates the reciprocal property a_ji = 1/a_ij for the entire matrix."""
        errors = []
        n = matrix.shape[0]
        for i in range(n):
            for j in range(i + 1, n):
                inverse_val = matrix[j, i].inverse()
                val = matrix[i, j]
                # Compare the defuzzified centroids for a stable check
                if abs(val.defuzzify() - inverse_val.defuzzify()) > tolerance:
                    errors.append(f"Reciprocity failed between ({i},{j}) and ({j},{i}). "
                                  f"Value: {val}, Inverse of counterpart: {inverse_val}")
        return errors

    @staticmethod
    def run_all_matrix_validations(matrix: np.ndarray, expected_size: int | None = None, tolerance: float = 1e-9) -> Dict[str, List[str]]:
        """Runs a complete suite of validations on a single comparison matrix."""
        all_errors = {"dimensions": [], "diagonal": [], "reciprocity": []}
        all_errors["dimensions"] = Validation.validate_matrix_dimensions(matrix, expected_size)

        # Only run further checks if dimensions are valid
        if not all_errors["dimensions"]:
            all_errors["diagonal"] = Validation.validate_matrix_diagonal(matrix, tolerance)
            all_errors["reciprocity"] = Validation.validate_matrix_reciprocity(matrix, tolerance)
        return all_errors

    # ==========================================================================
    # 2. CALCULATOR PRECONDITIONS
    # ==========================================================================

    @staticmethod
    def validate_count(name: str, value: Any) -> List[str]:
        """A count of criteria or alternatives must be a positive integer."""
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
            return [f"{name} must be a positive integer, got {value!r}."]
        return []

    @staticmethod
    def validate_judgment_matrix(matrix: Sequence[Sequence[Any]] | None, size: int, label: str = "Judgment matrix") -> List[str]:
        """
        Validates a (possibly partial) string judgment matrix against its size.

        Rows and cells may be missing (they default to equal importance), but a
        matrix may never be larger than `size` in either direction.
        """
        if matrix is None:
            return []
        errors = []
        if len(matrix) > size:
            errors.append(f"{label} has {len(matrix)} rows, but expected at most {size}.")
        for i, row in enumerate(matrix):
            if row is not None and len(row) > size:
                errors.append(f"{label} row {i} has {len(row)} cells, but expected at most {size}.")
        return errors

    @staticmethod
    def validate_decision_matrix(matrix: Any) -> List[str]:
        """Validates a crisp alternatives x criteria performance matrix."""
        try:
            arr = np.asarray(matrix, dtype=float)
        except (TypeError, ValueError):
            return ["Decision matrix must be a rectangular array of numbers."]
        if arr.ndim != 2 or arr.shape[0] == 0 or arr.shape[1] == 0:
            return [f"Decision matrix must be a non-empty 2D array, got shape {arr.shape}."]
        if not np.all(np.isfinite(arr)):
            return ["Decision matrix contains non-finite values."]
        return []

    @staticmethod
    def validate_weights(weights: Any, num_criteria: int) -> List[str]:
        """Validates a crisp weight vector against the number of criteria."""
        try:
            arr = np.asarray(weights, dtype=float)
        except (TypeError, ValueError):
            return ["Weights must be a 1D array of numbers."]
        if arr.ndim != 1 or arr.shape[0] != num_criteria:
            return [f"Expected {num_criteria} weights, got shape {arr.shape}."]
        if np.any(arr < 0) or not np.all(np.isfinite(arr)):
            return ["Weights must be finite and non-negative."]
        return []

    @staticmethod
    def validate_criteria_types(criteria_types: Sequence[str], num_criteria: int) -> List[str]:
        """Each criterion needs a 'benefit' or 'cost' direction."""
        errors = []
        if len(criteria_types) != num_criteria:
            errors.append(f"Expected {num_criteria} criteria types, got {len(criteria_types)}.")
        for j, kind in enumerate(criteria_types):
            if kind not in CRITERIA_TYPES:
                errors.append(f"Criterion {j} has unknown type {kind!r}. Available: {list(CRITERIA_TYPES)}")
        return errors

    @staticmethod
    def validate_fuzzy_matrix(matrix: Any) -> List[str]:
        """Validates an alternatives x criteria matrix of non-negative TFN cells."""
        from .types import TFN
        if len(matrix) == 0 or len(matrix[0]) == 0:
            return ["Fuzzy decision matrix must be non-empty."]
        n_cols = len(matrix[0])
        errors = []
        for i, row in enumerate(matrix):
            if len(row) != n_cols:
                errors.append(f"Fuzzy decision matrix row {i} has {len(row)} cells, expected {n_cols}.")
                continue
            for j, cell in enumerate(row):
                if not isinstance(cell, TFN):
                    errors.append(f"Cell ({i},{j}) is not a TFN: {cell!r}.")
                elif cell.l < 0:
                    errors.append(f"Cell ({i},{j}) has a negative lower bound: {cell}.")
        return errors

    @staticmethod
    def validate_fuzzy_weights(weights: Sequence[Any], num_criteria: int) -> List[str]:
        from .types import TFN
        if len(weights) != num_criteria:
            return [f"Expected {num_criteria} fuzzy weights, got {len(weights)}."]
        errors = []
        for j, w in enumerate(weights):
            if not isinstance(w, TFN):
                errors.append(f"Fuzzy weight {j} is not a TFN: {w!r}.")
            elif w.l < 0:
                errors.append(f"Fuzzy weight {j} has a negative lower bound: {w}.")
        return errors

    # ==========================================================================
    # 3. FAIL-FAST WRAPPERS
    # ==========================================================================

    @staticmethod
    def ensure_count(name: str, value: Any) -> int:
        _raise_if_errors(Validation.validate_count(name, value))
        return int(value)

    @staticmethod
    def ensure_square_object_matrix(matrix: np.ndarray, expected_size: int | None = None) -> np.ndarray:
        _raise_if_errors(Validation.validate_matrix_dimensions(matrix, expected_size))
        return matrix

    @staticmethod
    def ensure_judgment_matrix(matrix, size: int, label: str = "Judgment matrix"):
        _raise_if_errors(Validation.validate_judgment_matrix(matrix, size, label))
        return matrix

    @staticmethod
    def ensure_judgment_matrices(matrices: Sequence[Any] | None, count: int, size: int) -> list:
        """Validates one alternative judgment matrix per criterion."""
        if matrices is None or len(matrices) != count:
            found = 0 if matrices is None else len(matrices)
            raise InvalidInputError(f"Expected {count} alternative judgment matrices (one per criterion), got {found}.")
        for c, matrix in enumerate(matrices):
            Validation.ensure_judgment_matrix(matrix, size, label=f"Alternative matrix for criterion {c}")
        return list(matrices)

    @staticmethod
    def ensure_decision_matrix(matrix: Any) -> np.ndarray:
        _raise_if_errors(Validation.validate_decision_matrix(matrix))
        return np.array(matrix, dtype=float)

    @staticmethod
    def ensure_weights(weights: Any, num_criteria: int) -> np.ndarray:
        _raise_if_errors(Validation.validate_weights(weights, num_criteria))
        return np.array(weights, dtype=float)

    @staticmethod
    def ensure_criteria_types(criteria_types: Sequence[str], num_criteria: int) -> tuple:
        _raise_if_errors(Validation.validate_criteria_types(criteria_types, num_criteria))
        return tuple(criteria_types)

    @staticmethod
    def ensure_fuzzy_matrix(matrix: Any) -> np.ndarray:
        _raise_if_errors(Validation.validate_fuzzy_matrix(matrix))
        n_rows, n_cols = len(matrix), len(matrix[0])
        fuzzy = np.empty((n_rows, n_cols), dtype=object)
        for i in range(n_rows):
            for j in range(n_cols):
                fuzzy[i, j] = matrix[i][j]
        return fuzzy

    @staticmethod
    def ensure_fuzzy_weights(weights: Sequence[Any], num_criteria: int) -> list:
        _raise_if_errors(Validation.validate_fuzzy_weights(weights, num_criteria))
        return list(weights)
