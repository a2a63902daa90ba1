from __future__ import annotations
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Sequence, Tuple
import json
import numpy as np

from .ranking import order_by_rank, rank_descending
from .results import (AHPResult, FAHPResult, TOPSISResult, FuzzyTOPSISResult,
                      HybridFuzzyAHPTopsisResult, _to_serializable)
from .defuzzification import normalize_crisp_weights

try:
    import matplotlib.pyplot as plt
    _PLOT_AVAILABLE = True
except ImportError:
    _PLOT_AVAILABLE = False

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

if TYPE_CHECKING:
    from .types import TFN

def _check_pandas_availability():
    """Helper function to raise an error if pandas is not installed."""
    if not _PANDAS_AVAILABLE:
        raise ImportError("Table and CSV export functionality requires the 'pandas' library. "
                          "Please install it using: pip install pandas")

def _check_plotting_availability():
    """Helper function to raise an error if plotting libraries are not installed."""
    if not _PLOT_AVAILABLE:
        raise ImportError("Plotting functionality requires matplotlib. "
                          "Please install it using: pip install matplotlib")


# ==============================================================================
# 1. RESULT ACCESSORS
# ==============================================================================

_METHOD_NAMES = {
    AHPResult: "AHP",
    FAHPResult: "Fuzzy AHP",
    TOPSISResult: "TOPSIS",
    FuzzyTOPSISResult: "Fuzzy TOPSIS",
    HybridFuzzyAHPTopsisResult: "Hybrid Fuzzy AHP-TOPSIS",
}

def _method_name(result) -> str:
    for cls, name in _METHOD_NAMES.items():
        if isinstance(result, cls):
            return name
    raise TypeError(f"Unsupported result type: {type(result).__name__}")

def _scores_and_ranks(result) -> Tuple[np.ndarray, np.ndarray]:
    if isinstance(result, AHPResult):
        return result.final_scores, rank_descending(result.final_scores)
    if isinstance(result, FAHPResult):
        return result.final_scores, result.rankings
    if isinstance(result, (TOPSISResult, FuzzyTOPSISResult)):
        return result.performance_scores, result.rankings
    if isinstance(result, HybridFuzzyAHPTopsisResult):
        return result.final_scores, result.final_rankings
    raise TypeError(f"Unsupported result type: {type(result).__name__}")

def _distances(result) -> Tuple[np.ndarray, np.ndarray] | None:
    if isinstance(result, HybridFuzzyAHPTopsisResult):
        result = result.fuzzy_topsis_result
    if isinstance(result, (TOPSISResult, FuzzyTOPSISResult)):
        return result.distance_from_best, result.distance_from_worst
    return None

def _criteria_weights(result) -> Tuple[np.ndarray, Sequence[TFN] | None]:
    """Normalized crisp criterion weights and, for fuzzy methods, the fuzzy weights."""
    if isinstance(result, AHPResult):
        return result.criteria_weights, None
    if isinstance(result, FAHPResult):
        return result.normalized_criteria_weights, result.fuzzy_criteria_weights
    if isinstance(result, TOPSISResult):
        return result.weights, None
    if isinstance(result, FuzzyTOPSISResult):
        crisp = np.array([w.defuzzify() for w in result.fuzzy_weights], dtype=float)
        return normalize_crisp_weights(crisp), result.fuzzy_weights
    if isinstance(result, HybridFuzzyAHPTopsisResult):
        return result.normalized_ahp_weights, result.fuzzy_ahp_weights
    raise TypeError(f"Unsupported result type: {type(result).__name__}")

def _consistency_ratios(result) -> Dict[str, Any] | None:
    if isinstance(result, (AHPResult, FAHPResult)):
        return dict(result.consistency_ratios)
    if isinstance(result, HybridFuzzyAHPTopsisResult):
        return {"criteria": result.criteria_consistency_ratio}
    return None

def _alternative_names(result, alternative_names: Sequence[str] | None) -> List[str]:
    scores, ranks = _scores_and_ranks(result)
    n = len(scores)
    if alternative_names is not None:
        if len(alternative_names) != n:
            raise ValueError(f"Expected {n} alternative names, got {len(alternative_names)}.")
        return list(alternative_names)
    if isinstance(result, HybridFuzzyAHPTopsisResult):
        by_rank = {d.rank: d.name for d in result.alternative_details}
        return [by_rank[int(r)] for r in ranks]
    return [f"Alternative {i + 1}" for i in range(n)]

def _criteria_names(weights: np.ndarray, criteria_names: Sequence[str] | None) -> List[str]:
    if criteria_names is None:
        return [f"Criterion {j + 1}" for j in range(len(weights))]
    if len(criteria_names) != len(weights):
        raise ValueError(f"Expected {len(weights)} criteria names, got {len(criteria_names)}.")
    return list(criteria_names)


# ==============================================================================
# 2. TABLES
# ==============================================================================

def results_to_dataframe(result, alternative_names: Sequence[str] | None = None) -> 'pd.DataFrame':
    """
    One row per alternative, sorted by rank.

    Columns are 'Rank', 'Alternative' and 'Score'; TOPSIS-family results add
    'Distance to Best' and 'Distance to Worst'.
    """
    _check_pandas_availability()

    scores, ranks = _scores_and_ranks(result)
    names = _alternative_names(result, alternative_names)
    distances = _distances(result)

    rows = []
    for i in order_by_rank(ranks):
        row = {"Rank": int(ranks[i]), "Alternative": names[i], "Score": float(scores[i])}
        if distances is not None:
            row["Distance to Best"] = float(distances[0][i])
            row["Distance to Worst"] = float(distances[1][i])
        rows.append(row)
    return pd.DataFrame(rows)

def weights_to_dataframe(result, criteria_names: Sequence[str] | None = None) -> 'pd.DataFrame':
    """Criterion weights; fuzzy methods add the 'l', 'm' and 'u' of each fuzzy weight."""
    _check_pandas_availability()

    weights, fuzzy = _criteria_weights(result)
    names = _criteria_names(weights, criteria_names)

    rows = []
    for j, name in enumerate(names):
        row = {"Criterion": name, "Weight": float(weights[j])}
        if fuzzy is not None:
            row.update({"l": fuzzy[j].l, "m": fuzzy[j].m, "u": fuzzy[j].u})
        rows.append(row)
    return pd.DataFrame(rows)

def format_matrix_as_table(
    matrix: np.ndarray,
    item_names: List[str],
    consistency_method: str | None = None
) -> 'pd.DataFrame':
    """
    Formats a single comparison matrix into a classic n x n table.

    Args:
        matrix: A comparison matrix of floats, Crisp or TFN cells.
        item_names: A list of the names of the criteria/alternatives.
        consistency_method (optional): If provided, converts fuzzy numbers to crisp values.

    Returns:
        A pandas DataFrame of string cells.
    """
    _check_pandas_availability()

    n = len(item_names)
    if matrix.shape != (n, n):
        raise ValueError(f"Matrix shape {matrix.shape} does not match {n} item names.")

    table_data = []
    for i in range(n):
        row_data = []
        for j in range(n):
            cell = matrix[i, j]
            if consistency_method and hasattr(cell, 'defuzzify'):
                row_data.append(f"{cell.defuzzify(method=consistency_method):.3f}")
            elif isinstance(cell, (float, np.floating)):
                row_data.append(f"{cell:.3f}")
            else:
                row_data.append(str(cell))
        table_data.append(row_data)

    return pd.DataFrame(table_data, index=item_names, columns=item_names)


# ==============================================================================
# 3. TEXT SUMMARY
# ==============================================================================

def format_result_summary(
    result,
    goal: str | None = None,
    criteria_names: Sequence[str] | None = None,
    alternative_names: Sequence[str] | None = None
) -> str:
    """
    Generates a plain-text report of a result: criterion weights, the ranking
    and, where the method has them, consistency ratios.
    """
    method = _method_name(result)
    scores, ranks = _scores_and_ranks(result)
    names = _alternative_names(result, alternative_names)
    weights, fuzzy = _criteria_weights(result)
    c_names = _criteria_names(weights, criteria_names)

    lines = []
    header = f" {method.upper()} RESULTS" + (f" for: {goal} " if goal else " ")
    lines.append("=" * len(header))
    lines.append(header)
    lines.append("=" * len(header))

    lines.append("\nCriteria Weights:")
    for j, name in enumerate(c_names):
        line = f"  - {name}: {weights[j]:.4f}"
        if fuzzy is not None:
            line += f"  (l={fuzzy[j].l:.4f}, m={fuzzy[j].m:.4f}, u={fuzzy[j].u:.4f})"
        lines.append(line)

    lines.append("\nRanking:")
    for i in order_by_rank(ranks):
        lines.append(f"  {int(ranks[i])}. {names[i]}: {scores[i]:.4f}")

    ratios = _consistency_ratios(result)
    if ratios is not None:
        lines.append("\nConsistency Ratios:")
        lines.append(f"  - Criteria: {ratios['criteria']:.4f}")
        for j, cr in enumerate(ratios.get("alternatives", ())):
            label = c_names[j] if j < len(c_names) else f"Criterion {j + 1}"
            lines.append(f"  - Alternatives under {label}: {cr:.4f}")
    lines.append("-" * 40)

    return "\n".join(lines)


# ==============================================================================
# 4. EXPORT
# ==============================================================================

def _export_metadata(result, goal, criteria_names, alternative_names) -> Dict[str, Any]:
    weights, _ = _criteria_weights(result)
    return {
        "method": _method_name(result),
        "goal": goal,
        "criteria": _criteria_names(weights, criteria_names),
        "alternatives": _alternative_names(result, alternative_names),
        "exported_at": datetime.now(timezone.utc).isoformat(),
    }

def _export_to_csv(result, filename, criteria_names, alternative_names) -> List[str]:
    base_name = filename[:-4] if filename.endswith('.csv') else filename
    paths = [f"{base_name}_rankings.csv", f"{base_name}_weights.csv"]
    results_to_dataframe(result, alternative_names).to_csv(paths[0], index=False)
    weights_to_dataframe(result, criteria_names).to_csv(paths[1], index=False)
    return paths

def _export_to_json(result, filename, goal, criteria_names, alternative_names) -> List[str]:
    if not filename.endswith('.json'):
        filename += '.json'
    payload = {
        "metadata": _export_metadata(result, goal, criteria_names, alternative_names),
        "rankings": results_to_dataframe(result, alternative_names).to_dict(orient="records"),
        "criteria_weights": weights_to_dataframe(result, criteria_names).to_dict(orient="records"),
        "result": result.to_dict(),
    }
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(_to_serializable(payload), f, indent=2)
    return [filename]

def export_results(
    result,
    target: str,
    output_format: str = 'csv',
    *,  # Makes subsequent arguments keyword-only
    goal: str | None = None,
    criteria_names: Sequence[str] | None = None,
    alternative_names: Sequence[str] | None = None
) -> List[str]:
    """
    Saves a result to disk.

    Args:
        result: Any calculator result.
        target: The file path. For 'csv' it is a base name: two files,
                `<target>_rankings.csv` and `<target>_weights.csv`, are written.
        output_format (str, optional): 'csv' or 'json'. Defaults to 'csv'.
        goal, criteria_names, alternative_names: Labels for the report.

    Returns:
        The list of written file paths.
    """
    _check_pandas_availability()

    if output_format.lower() == 'csv':
        return _export_to_csv(result, target, criteria_names, alternative_names)
    elif output_format.lower() == 'json':
        return _export_to_json(result, target, goal, criteria_names, alternative_names)
    else:
        raise ValueError(f"Unsupported output_format: '{output_format}'. Choose from 'csv' or 'json'.")


# ==============================================================================
# 5. MATPLOTLIB PLOTTING FUNCTIONS
# ==============================================================================

def plot_weights(result, criteria_names: Sequence[str] | None = None, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the normalized criterion weights of a result.

    Args:
        result: Any calculator result.
        criteria_names: Bar labels, defaulting to "Criterion 1", ...
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    weights, fuzzy = _criteria_weights(result)
    labels = _criteria_names(weights, criteria_names)

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.bar(labels, weights, color=plt.cm.viridis(np.linspace(0, 1, len(labels))))

    ax.set_ylabel('Weight (Defuzzified)' if fuzzy is not None else 'Weight')
    ax.set_title(f'Criteria Weights ({_method_name(result)})')
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")

    for bar in bars:
        yval = bar.get_height()
        ax.text(bar.get_x() + bar.get_width()/2.0, yval, f'{yval:.3f}', va='bottom', ha='center')

    fig.tight_layout()
    return fig

def plot_final_rankings(result, alternative_names: Sequence[str] | None = None, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the alternatives' final scores, best at the top.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    scores, ranks = _scores_and_ranks(result)
    names = _alternative_names(result, alternative_names)
    order = order_by_rank(ranks)
    alt_names = [names[i] for i in order]
    ordered_scores = [float(scores[i]) for i in order]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.barh(alt_names, ordered_scores, color=plt.cm.plasma(np.linspace(0.4, 0.9, len(ordered_scores))))

    ax.set_xlabel('Final Score')
    ax.set_ylabel('Alternative')
    ax.set_title(f'Final Alternative Rankings ({_method_name(result)})')
    ax.grid(axis='x', linestyle='--', alpha=0.6)
    ax.invert_yaxis()

    for i, bar in enumerate(bars):
        ax.text(bar.get_width() + 0.005, bar.get_y() + bar.get_height()/2,
                f'{ordered_scores[i]:.4f}', va='center')

    fig.tight_layout()
    return fig
