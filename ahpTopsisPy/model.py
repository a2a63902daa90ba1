from __future__ import annotations
import json
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

from .validation import CRITERIA_TYPES, InvalidInputError, Validation

if TYPE_CHECKING:
    import numpy as np
    from .types import TFN
    from .results import (AHPResult, FAHPResult, TOPSISResult, FuzzyTOPSISResult,
                          HybridFuzzyAHPTopsisResult)


class Criterion:
    """A named decision criterion and the direction in which it is preferred."""
    def __init__(self, name: str, criterion_type: str = "benefit", description: Optional[str] = None):
        if not name:
            raise InvalidInputError("Criterion name cannot be empty.")
        if criterion_type not in CRITERIA_TYPES:
            raise InvalidInputError(f"Unknown criterion type '{criterion_type}'. Available: {list(CRITERIA_TYPES)}")
        self.name = name
        self.criterion_type = criterion_type
        self.description = description

    def __repr__(self) -> str:
        return f"Criterion(name='{self.name}', type='{self.criterion_type}')"

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.criterion_type, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Criterion':
        return cls(name=data['name'], criterion_type=data.get('type', 'benefit'), description=data.get('description'))


class Alternative:
    """An option being ranked (e.g., a supplier or a candidate)."""
    def __init__(self, name: str, description: Optional[str] = None):
        if not name:
            raise InvalidInputError("Alternative name cannot be empty.")
        self.name = name
        self.description = description

    def __repr__(self):
        return f"Alternative(name='{self.name}')"

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the Alternative to a JSON-compatible dictionary."""
        return {"name": self.name, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Alternative':
        """Creates an Alternative instance from a dictionary."""
        return cls(name=data['name'], description=data.get('description'))


class DecisionProblem:
    """
    A decision goal with named criteria and alternatives.

    The problem holds only names and criterion directions. Judgments and
    performance data are passed to the `run_*` methods, which forward them to
    the calculators together with the problem's sizes and directions.

    Example:
    >>> problem = DecisionProblem("Pick a laptop", ["Price", "Battery"], ["A", "B"],
    ...                           criteria_types=["cost", "benefit"])
    >>> result = problem.run_topsis([[900, 10], [1200, 14]], weights=[0.6, 0.4])
    """
    def __init__(
        self,
        goal: str,
        criteria: Sequence[str | Criterion],
        alternatives: Sequence[str | Alternative],
        criteria_types: Sequence[str] | None = None
    ):
        self.goal = goal
        self.criteria: List[Criterion] = []
        self.alternatives: List[Alternative] = []

        if criteria_types is not None and len(criteria_types) != len(criteria):
            raise InvalidInputError(f"Expected {len(criteria)} criteria types, got {len(criteria_types)}.")
        for k, criterion in enumerate(criteria):
            if isinstance(criterion, Criterion):
                self.add_criterion(criterion.name, criterion.criterion_type, criterion.description)
            else:
                self.add_criterion(criterion, criteria_types[k] if criteria_types is not None else "benefit")
        for alternative in alternatives:
            if isinstance(alternative, Alternative):
                self.add_alternative(alternative.name, alternative.description)
            else:
                self.add_alternative(alternative)

    def __repr__(self) -> str:
        return (f"DecisionProblem(goal='{self.goal}', criteria={self.criteria_names}, "
                f"alternatives={self.alternative_names})")

    # --------------------------------------------------------------------------
    # Structure
    # --------------------------------------------------------------------------

    @property
    def criteria_names(self) -> List[str]:
        return [c.name for c in self.criteria]

    @property
    def criteria_types(self) -> List[str]:
        return [c.criterion_type for c in self.criteria]

    @property
    def alternative_names(self) -> List[str]:
        return [a.name for a in self.alternatives]

    @property
    def num_criteria(self) -> int:
        return len(self.criteria)

    @property
    def num_alternatives(self) -> int:
        return len(self.alternatives)

    def add_criterion(self, name: str, criterion_type: str = "benefit", description: Optional[str] = None) -> Criterion:
        if name in self.criteria_names:
            raise InvalidInputError(f"Criterion '{name}' already exists.")
        criterion = Criterion(name, criterion_type, description)
        self.criteria.append(criterion)
        return criterion

    def add_alternative(self, name: str, description: Optional[str] = None) -> Alternative:
        if name in self.alternative_names:
            raise InvalidInputError(f"Alternative '{name}' already exists.")
        alternative = Alternative(name, description)
        self.alternatives.append(alternative)
        return alternative

    def _require_structure(self):
        Validation.ensure_count("Number of criteria", self.num_criteria)
        Validation.ensure_count("Number of alternatives", self.num_alternatives)

    # --------------------------------------------------------------------------
    # Serialization
    # --------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the problem to a JSON-compatible dictionary."""
        return {
            "goal": self.goal,
            "criteria": [c.to_dict() for c in self.criteria],
            "alternatives": [a.to_dict() for a in self.alternatives],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DecisionProblem':
        if "criteria" not in data or "alternatives" not in data:
            raise InvalidInputError("Problem data must contain 'criteria' and 'alternatives' keys.")
        criteria = [Criterion.from_dict(c) if isinstance(c, dict) else c for c in data["criteria"]]
        alternatives = [Alternative.from_dict(a) if isinstance(a, dict) else a for a in data["alternatives"]]
        return cls(goal=data.get("goal", ""), criteria=criteria, alternatives=alternatives)

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_string: str) -> 'DecisionProblem':
        """
        Constructs a DecisionProblem from a JSON string.

        The JSON must define 'criteria' and 'alternatives'; criteria and
        alternatives may be plain names or objects with a 'name' key.
        """
        return cls.from_dict(json.loads(json_string))

    # --------------------------------------------------------------------------
    # Calculators
    # --------------------------------------------------------------------------

    def run_ahp(self, criteria_matrix, alternative_matrices, method: str = "geometric_mean") -> 'AHPResult':
        from .ahp import calculate_ahp
        self._require_structure()
        return calculate_ahp(criteria_matrix, alternative_matrices,
                             self.num_criteria, self.num_alternatives, method=method)

    def run_fahp(self, criteria_matrix, alternative_matrices,
                 criteria_confidence=None, alternative_confidences=None) -> 'FAHPResult':
        from .fahp import calculate_fahp
        self._require_structure()
        return calculate_fahp(criteria_matrix, alternative_matrices,
                              self.num_criteria, self.num_alternatives,
                              criteria_confidence=criteria_confidence,
                              alternative_confidences=alternative_confidences)

    def run_topsis(self, performance_matrix, weights) -> 'TOPSISResult':
        from .topsis import calculate_topsis
        self._require_structure()
        self._check_performance_shape(performance_matrix)
        return calculate_topsis(performance_matrix, weights, self.criteria_types)

    def run_fuzzy_topsis(self, fuzzy_matrix: Sequence[Sequence['TFN']], fuzzy_weights: Sequence['TFN']) -> 'FuzzyTOPSISResult':
        from .fuzzy_topsis import calculate_fuzzy_topsis
        self._require_structure()
        self._check_performance_shape(fuzzy_matrix)
        return calculate_fuzzy_topsis(fuzzy_matrix, fuzzy_weights, self.criteria_types)

    def run_fuzzy_topsis_from_crisp(self, performance_matrix, fuzzy_weights: Sequence['TFN']) -> 'FuzzyTOPSISResult':
        from .fuzzy_topsis import calculate_fuzzy_topsis_from_crisp
        self._require_structure()
        self._check_performance_shape(performance_matrix)
        return calculate_fuzzy_topsis_from_crisp(performance_matrix, fuzzy_weights, self.criteria_types)

    def run_hybrid(self, criteria_matrix, performance_matrix, criteria_confidence=None) -> 'HybridFuzzyAHPTopsisResult':
        from .hybrid import calculate_hybrid_fuzzy_ahp_topsis
        self._require_structure()
        return calculate_hybrid_fuzzy_ahp_topsis(
            criteria_matrix, performance_matrix, self.num_criteria, self.num_alternatives,
            self.criteria_types, criteria_confidence=criteria_confidence,
            alternative_names=self.alternative_names
        )

    def _check_performance_shape(self, matrix):
        if len(matrix) != self.num_alternatives:
            raise InvalidInputError(f"Expected {self.num_alternatives} rows of performance data, got {len(matrix)}.")
        for i, row in enumerate(matrix):
            if len(row) != self.num_criteria:
                raise InvalidInputError(f"Row {i} has {len(row)} values, expected {self.num_criteria}.")

    # --------------------------------------------------------------------------
    # Reporting
    # --------------------------------------------------------------------------

    def summary(self, result) -> str:
        """Returns a plain-text report of `result` labelled with this problem's names."""
        from .visualization import format_result_summary
        return format_result_summary(result, goal=self.goal, criteria_names=self.criteria_names,
                                     alternative_names=self.alternative_names)

    def export_results(self, result, target: str, output_format: str = "csv"):
        """Writes `result` to `target` as CSV or JSON, labelled with this problem's names."""
        from .visualization import export_results
        return export_results(result, target, output_format=output_format, goal=self.goal,
                              criteria_names=self.criteria_names, alternative_names=self.alternative_names)

    def plot_rankings(self, result, figsize=(10, 6)):
        """Plots the final scores of the alternatives."""
        from .visualization import plot_final_rankings
        return plot_final_rankings(result, alternative_names=self.alternative_names, figsize=figsize)

    def plot_weights(self, result, figsize=(10, 6)):
        """Plots the criterion weights of `result`."""
        from .visualization import plot_weights
        return plot_weights(result, criteria_names=self.criteria_names, figsize=figsize)
