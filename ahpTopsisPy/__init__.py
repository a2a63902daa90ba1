__version__ = "0.1.0"

from . import defuzzification
from .config import configure_parameters, ConfigurationContextManager
from .types import Crisp, TFN
from .validation import InvalidInputError, Validation
from .matrix_builder import FuzzyScale, build_crisp_matrix, build_fuzzy_matrix
from .consistency import Consistency
from .model import DecisionProblem, Criterion, Alternative

from .ahp import calculate_ahp
from .fahp import calculate_fahp, derive_fuzzy_weights
from .topsis import calculate_topsis
from .fuzzy_topsis import calculate_fuzzy_topsis, calculate_fuzzy_topsis_from_crisp, build_fuzzy_weight
from .hybrid import calculate_hybrid_fuzzy_ahp_topsis, calculate_hybrid_fuzzy_atp_topsis
from .results import (AHPResult, FAHPResult, TOPSISResult, FuzzyTOPSISResult,
                      HybridFuzzyAHPTopsisResult, HybridFuzzyATPTopsisResult, AlternativeDetail)

from .weight_derivation import register_weight_method
from .consistency import CONSISTENCY_METHODS
