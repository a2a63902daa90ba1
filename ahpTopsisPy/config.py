import copy
from typing import Any, Dict


_DEFAULTS: Dict[str, Any] = {
    # Saaty consistency ratio above which a matrix counts as inconsistent
    "DEFAULT_SAATY_CR_THRESHOLD": 0.1,
    # Geometric Consistency Index limits by matrix size (Aguarón & Moreno-Jiménez, 2003)
    "GCI_THRESHOLDS": {3: 0.31, 4: 0.35, 'default': 0.37},
    # Emit a UserWarning from the calculators for every inconsistent matrix
    "WARN_ON_INCONSISTENCY": False,
    # Method turning fuzzy weights into crisp ones
    "DEFAULT_DEFUZZIFY_METHOD": 'centroid',
    # Tolerance for float comparisons such as reciprocity checks
    "FLOAT_TOLERANCE": 1e-9,
    # Floor applied before taking logarithms
    "LOG_EPSILON": 1e-10,
}


class Configuration:
    """
    Process-wide tunables of the ahpTopsisPy calculators, read at call time.

    Only thresholds and switches live here. The tables that define the methods
    (Random Index, Saaty-to-TFN scale, linguistic weight presets) are immutable
    module constants.

    Example:
    >>> from ahpTopsisPy.config import configure_parameters
    >>> configure_parameters.DEFAULT_SAATY_CR_THRESHOLD = 0.05
    >>> configure_parameters.WARN_ON_INCONSISTENCY = True
    """
    DEFAULT_SAATY_CR_THRESHOLD: float
    GCI_THRESHOLDS: Dict[int | str, float]
    WARN_ON_INCONSISTENCY: bool
    DEFAULT_DEFUZZIFY_METHOD: str
    FLOAT_TOLERANCE: float
    LOG_EPSILON: float

    def __init__(self):
        self.reset_to_defaults()

    def reset_to_defaults(self):
        """Restores every parameter to its default value."""
        for name, value in _DEFAULTS.items():
            setattr(self, name, copy.deepcopy(value))

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in _DEFAULTS}


configure_parameters = Configuration()


class ConfigurationContextManager:
    """
    Temporarily overrides configuration parameters, restoring them on exit even
    when the block raises.

    Usage:
    >>> with ConfigurationContextManager(WARN_ON_INCONSISTENCY=True) as config:
    ...     result = calculate_ahp(...)
    """
    def __init__(self, **overrides):
        unknown = [key for key in overrides if key not in _DEFAULTS]
        if unknown:
            raise AttributeError(f"Configuration object has no attribute '{unknown[0]}'")
        self.overrides = overrides
        self.saved: Dict[str, Any] = {}

    def __enter__(self) -> Configuration:
        self.saved = {key: getattr(configure_parameters, key) for key in self.overrides}
        for key, value in self.overrides.items():
            setattr(configure_parameters, key, value)
        return configure_parameters

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, value in self.saved.items():
            setattr(configure_parameters, key, value)
