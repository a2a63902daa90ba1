from __future__ import annotations
from typing import List, Type, Dict, Any, Sequence, TYPE_CHECKING
import numpy as np

from .config import configure_parameters
from .defuzzification import normalize_crisp_weights

if TYPE_CHECKING:
    from .types import Number, Crisp


# ==============================================================================
# 1. REGISTRY FOR CUSTOMIZATION
# ==============================================================================

WEIGHT_DERIVATION_REGISTRY = {}

def register_weight_method(number_type_name: str, method_name: str):
    """A decorator to register a new weight derivation method."""
    def decorator(func):
        if (number_type_name, method_name) in WEIGHT_DERIVATION_REGISTRY:
            print(f"Warning: Overwriting existing weight method for ({number_type_name}, {method_name})")
        WEIGHT_DERIVATION_REGISTRY[(number_type_name, method_name)] = func
        return func
    return decorator

def available_weight_methods(number_type_name: str) -> List[str]:
    return [m for (t, m) in WEIGHT_DERIVATION_REGISTRY.keys() if t == number_type_name]


# ==============================================================================
# 2. GEOMETRIC MEAN BUILDING BLOCKS
# ==============================================================================

def fuzzy_geometric_mean(cells: Sequence[Number]) -> Number:
    """
    The n-th root of the componentwise product of `cells`.

    For TFNs this is ((prod l)^(1/n), (prod m)^(1/n), (prod u)^(1/n)); for
    Crisp numbers it is the ordinary geometric mean.
    """
    if len(cells) == 0:
        raise ValueError("Cannot take the geometric mean of an empty row.")
    product = type(cells[0]).multiplicative_identity()
    for cell in cells:
        product = product * cell
    return product.power(1.0 / len(cells))

def row_geometric_means(matrix: np.ndarray) -> List[Number]:
    """Geometric mean of every row of a comparison matrix."""
    return [fuzzy_geometric_mean(list(matrix[i, :])) for i in range(matrix.shape[0])]

def weights_from_geometric_means(row_geo_means: List[Number], number_type: Type[Number]) -> List[Number]:
    """
    Normalizes row geometric means into weights: w_i = r_i * (sum r)^-1.

    For TFNs the inverse of the sum is (1/u, 1/m, 1/l), so the resulting fuzzy
    weights do not sum exactly to one. Only their defuzzified values are
    normalized afterwards.
    """
    n = len(row_geo_means)
    total_sum = sum(row_geo_means, number_type.neutral_element())
    if abs(total_sum.defuzzify()) < configure_parameters.FLOAT_TOLERANCE:
        return [number_type.neutral_element() for _ in range(n)]

    sum_inverse = total_sum.inverse()
    return [geo_mean * sum_inverse for geo_mean in row_geo_means]


# ==============================================================================
# 3. REGISTERED ALGORITHMS
# ==============================================================================

@register_weight_method('TFN', 'geometric_mean')
@register_weight_method('Crisp', 'geometric_mean')
def geometric_mean_method(matrix: np.ndarray, number_type: Type[Number]) -> List[Number]:
    """
    Derives weights using the (fuzzy) geometric mean method of Buckley (1985).

    .. note::
        **Academic Note:** This method is a direct extension of the geometric mean
        used in classical AHP. It handles the ratio-scale nature of AHP judgments
        and is the method both the crisp and the fuzzy calculators default to.

    Args:
        matrix: The comparison matrix of shape (n, n).
        number_type: The class of the number type being used (e.g., Crisp, TFN).

    Returns:
        A list of derived weights of the specified number_type.
    """
    return weights_from_geometric_means(row_geometric_means(matrix), number_type)

@register_weight_method('Crisp', 'eigenvector')
def eigenvector_method(matrix: np.ndarray, number_type: Type[Crisp]) -> List[Number]:
    """
    Derives weights using the principal right eigenvector of the matrix.
    This implementation is for CRISP matrices only.
    """
    if number_type.__name__ != 'Crisp':
        raise TypeError("Standard eigenvector method is only applicable to crisp matrices.")

    crisp_matrix = np.array([[cell.value for cell in row] for row in matrix], dtype=float)

    eigenvalues, eigenvectors = np.linalg.eig(crisp_matrix)
    max_eig_index = np.argmax(np.real(eigenvalues))
    weights = np.abs(np.real(eigenvectors[:, max_eig_index]))
    normalized_weights = weights / np.sum(weights)
    return [number_type(w) for w in normalized_weights]


# ==============================================================================
# 4. THE PRIMARY DISPATCHER FUNCTION
# ==============================================================================

def derive_weights(
    matrix: np.ndarray,
    number_type: Type[Number],
    method: str = "geometric_mean",
    consistency_method: str | None = None
) -> Dict[str, Any]:
    """
    Derives weights from a comparison matrix using the specified method.
    This function acts as a dispatcher, selecting the appropriate algorithm
    based on the number type and chosen method.

    Args:
        matrix: The comparison matrix of shape (n, n).
        number_type: The class of the number type (Crisp or TFN).
        method: The weight derivation method to use.
            Crisp: "geometric_mean", "eigenvector"
            TFN: "geometric_mean"
        consistency_method: Defuzzification method used to turn the weights
            crisp. Defaults to `configure_parameters.DEFAULT_DEFUZZIFY_METHOD`.

    Returns:
        A dict with the raw `weights` (number_type objects), their
        `defuzzified_weights` and the `crisp_weights` normalized to sum to 1.
    """
    type_name = number_type.__name__
    derivation_func = WEIGHT_DERIVATION_REGISTRY.get((type_name, method))

    if derivation_func is None:
        raise ValueError(
            f"Method '{method}' is not registered for number type '{type_name}'. "
            f"Available methods for '{type_name}': {available_weight_methods(type_name)}"
        )

    weights = derivation_func(matrix, number_type)
    if not isinstance(weights, list):
        raise TypeError(f"Registered method {derivation_func.__name__} returned an unexpected type: {type(weights)}")

    consistency_method = consistency_method or configure_parameters.DEFAULT_DEFUZZIFY_METHOD
    defuzzified = np.array([w.defuzzify(method=consistency_method) for w in weights], dtype=float)
    return {
        "weights": weights,
        "defuzzified_weights": defuzzified,
        "crisp_weights": normalize_crisp_weights(defuzzified),
    }
