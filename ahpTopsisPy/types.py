from __future__ import annotations
import numpy as np
from typing import Protocol, TypeVar, Union, Dict, Iterator, List, Callable, runtime_checkable
from functools import total_ordering


# ==============================================================================
# 1. THE PROTOCOL BLUEPRINT
# ==============================================================================

@runtime_checkable
class NumericType(Protocol):
    """
    The cell interface shared by comparison matrices. `Crisp` backs classic AHP
    and TOPSIS, `TFN` backs Fuzzy AHP and Fuzzy TOPSIS; weight derivation and
    consistency code is written once against this protocol.
    """
    def __add__(self, other) -> 'NumericType': ...
    def __mul__(self, other) -> 'NumericType': ...
    def __truediv__(self, other) -> 'NumericType': ...
    def __pow__(self, exponent: float) -> 'NumericType': ...
    def __lt__(self, other) -> bool: ...

    def inverse(self) -> 'NumericType': ...
    @staticmethod
    def neutral_element() -> 'NumericType': ...
    @staticmethod
    def multiplicative_identity() -> 'NumericType': ...
    @staticmethod
    def from_crisp(value: float) -> 'NumericType': ...
    def defuzzify(self, method: str = 'centroid', **kwargs) -> float: ...


class _DefuzzifierRegistry:
    """Per-class registry of defuzzification functions `func(number, **kwargs) -> float`."""
    _defuzzify_methods: Dict[str, Callable]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._defuzzify_methods = {}

    @classmethod
    def get_available_defuzzify_methods(cls) -> List[str]:
        return list(cls._defuzzify_methods)

    @classmethod
    def register_defuzzify_method(cls, name: str, func: Callable):
        """Registers a new defuzzification function for this number type."""
        if name in cls._defuzzify_methods:
            print(f"Warning: Overwriting defuzzify method '{name}' for {cls.__name__}")
        cls._defuzzify_methods[name] = func


def _as_float(value: Union['Crisp', float]) -> float:
    return value.value if isinstance(value, Crisp) else float(value)


# ==============================================================================
# 2. CRISP NUMBERS
# ==============================================================================

@total_ordering
class Crisp(_DefuzzifierRegistry):
    """A plain real number that satisfies `NumericType`."""
    __slots__ = ("value",)

    def __init__(self, value: Union['Crisp', float]):
        # Crisp(Crisp(x)) is the same as Crisp(x)
        self.value = _as_float(value)

    def __repr__(self) -> str:
        return f"Crisp({self.value:.4f})"

    def __float__(self) -> float:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __add__(self, other) -> Crisp:
        return Crisp(self.value + _as_float(other))

    __radd__ = __add__

    def __sub__(self, other) -> Crisp:
        return Crisp(self.value - _as_float(other))

    def __rsub__(self, other) -> Crisp:
        return Crisp(_as_float(other) - self.value)

    def __mul__(self, other) -> Crisp:
        return Crisp(self.value * _as_float(other))

    __rmul__ = __mul__

    def __truediv__(self, other) -> Crisp:
        divisor = _as_float(other)
        if divisor == 0:
            raise ZeroDivisionError("Division by zero.")
        return Crisp(self.value / divisor)

    def __rtruediv__(self, other) -> Crisp:
        return Crisp(other) / self

    def __pow__(self, exponent: float) -> Crisp:
        return Crisp(self.value ** exponent)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Crisp, int, float, np.number)):
            return self.value == _as_float(other)
        return False

    def __lt__(self, other) -> bool:
        return self.value < _as_float(other)

    def inverse(self) -> Crisp:
        if self.value == 0:
            raise ValueError("Cannot invert zero.")
        return Crisp(1.0 / self.value)

    @staticmethod
    def neutral_element() -> Crisp:
        return Crisp(0.0)

    @staticmethod
    def multiplicative_identity() -> Crisp:
        return Crisp(1.0)

    @staticmethod
    def from_crisp(value: float) -> Crisp:
        return Crisp(value)

    def power(self, exponent: float) -> Crisp:
        return self ** exponent

    def defuzzify(self, method: str = 'centroid', **kwargs) -> float:
        func = Crisp._defuzzify_methods.get(method)
        return self.value if func is None else func(self, **kwargs)


# ==============================================================================
# 3. TRIANGULAR FUZZY NUMBERS
# ==============================================================================

def _as_tfn(value: Union['TFN', Crisp, float]) -> 'TFN':
    return value if isinstance(value, TFN) else TFN.from_crisp(_as_float(value))


@total_ordering
class TFN(_DefuzzifierRegistry):
    """
    Triangular fuzzy number (l, m, u) with l <= m <= u: lower bound, mode and
    upper bound. Plain numbers in arithmetic are lifted to (x, x, x).

    Products are taken componentwise, the usual approximation in Fuzzy AHP and
    Fuzzy TOPSIS, rather than the exact extension-principle product.
    """
    __slots__ = ("l", "m", "u")

    def __init__(self, l, m, u):
        if not (l <= m <= u):
            raise ValueError(f"TFN values must satisfy l <= m <= u, got ({l}, {m}, {u})")
        self.l, self.m, self.u = float(l), float(m), float(u)

    def __repr__(self):
        return f"TFN({self.l:.4f}, {self.m:.4f}, {self.u:.4f})"

    def __iter__(self) -> Iterator[float]:
        return iter((self.l, self.m, self.u))

    def __hash__(self) -> int:
        return hash(self.to_tuple())

    def __float__(self):
        return self.m

    def __add__(self, other) -> TFN:
        o = _as_tfn(other)
        return TFN(self.l + o.l, self.m + o.m, self.u + o.u)

    __radd__ = __add__

    def __sub__(self, other) -> TFN:
        o = _as_tfn(other)
        return TFN(self.l - o.u, self.m - o.m, self.u - o.l)

    def __rsub__(self, other) -> TFN:
        return _as_tfn(other) - self

    def __mul__(self, other) -> TFN:
        o = _as_tfn(other)
        return TFN(self.l * o.l, self.m * o.m, self.u * o.u)

    __rmul__ = __mul__

    def __truediv__(self, other) -> TFN:
        if isinstance(other, TFN):
            if other.l <= 0:
                raise ZeroDivisionError("Cannot divide by a TFN whose range includes zero or negative numbers.")
            return TFN(self.l / other.u, self.m / other.m, self.u / other.l)
        divisor = _as_float(other)
        if divisor == 0:
            raise ZeroDivisionError("Division by zero.")
        bounds = sorted((self.l / divisor, self.u / divisor))
        return TFN(bounds[0], self.m / divisor, bounds[1])

    def __rtruediv__(self, other) -> TFN:
        return _as_tfn(other) / self

    def __pow__(self, exponent: float) -> TFN:
        if not isinstance(exponent, (int, float)):
            return NotImplemented
        if exponent < 0:
            return self.inverse() ** -exponent
        return TFN(self.l ** exponent, self.m ** exponent, self.u ** exponent)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TFN) and self.to_tuple() == other.to_tuple()

    def __lt__(self, other) -> bool:
        other_value = other.defuzzify() if hasattr(other, 'defuzzify') else float(other)
        return self.defuzzify() < other_value

    def inverse(self) -> TFN:
        """(l, m, u)^-1 = (1/u, 1/m, 1/l)."""
        if self.l <= 0:
            raise ValueError("Cannot invert a TFN with non-positive values")
        return TFN(1.0 / self.u, 1.0 / self.m, 1.0 / self.l)

    @staticmethod
    def neutral_element() -> TFN:
        return TFN(0.0, 0.0, 0.0)

    @staticmethod
    def multiplicative_identity() -> TFN:
        return TFN(1.0, 1.0, 1.0)

    @staticmethod
    def from_crisp(value: float) -> TFN:
        return TFN(value, value, value)

    @staticmethod
    def from_saaty(value: str | float, confidence: str = "medium") -> TFN:
        """The scale TFN for a Saaty judgment, e.g. "3" -> TFN(2, 3, 4)."""
        from .matrix_builder import FuzzyScale
        return FuzzyScale.get_fuzzy_number(value, confidence=confidence)

    def power(self, exponent: float) -> TFN:
        return self ** exponent

    def scale_spread(self, factor: float) -> TFN:
        """Multiplies both gaps around the mode by `factor`; the lower bound is clamped at 0."""
        return TFN(max(0.0, self.m - (self.m - self.l) * factor), self.m, self.m + (self.u - self.m) * factor)

    def to_array(self) -> np.ndarray:
        return np.array(self.to_tuple())

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.l, self.m, self.u)

    def to_dict(self) -> Dict[str, float]:
        """Serializes the TFN to a JSON-compatible dictionary."""
        return dict(zip("lmu", self.to_tuple()))

    def distance(self, other: TFN) -> float:
        """Vertex distance: sqrt(((l1-l2)^2 + (m1-m2)^2 + (u1-u2)^2) / 3)."""
        if not isinstance(other, TFN):
            raise TypeError("Can only calculate distance between two TFNs")
        return float(np.sqrt(np.mean((self.to_array() - other.to_array()) ** 2)))

    def alpha_cut(self, alpha: float) -> tuple[float, float]:
        """The interval of values whose membership is at least `alpha`."""
        if not (0 <= alpha <= 1):
            raise ValueError("Alpha must be between 0 and 1.")
        return self.l + alpha * (self.m - self.l), self.u - alpha * (self.u - self.m)

    def defuzzify(self, method: str = 'centroid', **kwargs) -> float:
        """
        Reduces the TFN to a single value with a registered method.

        'centroid' (l+m+u)/3 is the default and is what the Fuzzy AHP and Fuzzy
        TOPSIS calculators use. 'graded_mean' (l+4m+u)/6 favours the mode;
        'alpha_cut' takes the midpoint of the cut at `alpha`.
        """
        func = TFN._defuzzify_methods.get(method)
        if func is None:
            raise ValueError(f"Method '{method}' not implemented for TFN. "
                             f"Available: {TFN.get_available_defuzzify_methods()}")
        return func(self, **kwargs)


Number = TypeVar('Number', bound=NumericType)
