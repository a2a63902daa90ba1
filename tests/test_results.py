"""
===================================================================
Tests for the Result Containers
===================================================================
"""

import dataclasses
import json

import pytest
import numpy as np

from ahpTopsisPy.results import AlternativeDetail, TOPSISResult, _to_serializable
from ahpTopsisPy.types import TFN, Crisp


@pytest.fixture
def topsis_result() -> TOPSISResult:
    return TOPSISResult(
        raw_matrix=[[1.0, 2.0], [3.0, 4.0]],
        normalized_matrix=[[0.3, 0.4], [0.9, 0.9]],
        weighted_normalized_matrix=[[0.15, 0.2], [0.45, 0.45]],
        ideal_best=[0.45, 0.45],
        ideal_worst=[0.15, 0.2],
        distance_from_best=[0.39, 0.0],
        distance_from_worst=[0.0, 0.39],
        performance_scores=[0.0, 1.0],
        rankings=[2, 1],
        weights=[0.5, 0.5],
        criteria_types=["benefit", "benefit"],
    )

def test_fields_are_converted_to_read_only_arrays(topsis_result):
    assert isinstance(topsis_result.raw_matrix, np.ndarray)
    assert topsis_result.rankings.dtype.kind == "i"
    assert topsis_result.criteria_types == ("benefit", "benefit")
    with pytest.raises(ValueError):
        topsis_result.rankings[0] = 1

def test_source_arrays_are_copied():
    scores = np.array([0.2, 0.8])
    result = TOPSISResult(
        raw_matrix=[[1.0]], normalized_matrix=[[1.0]], weighted_normalized_matrix=[[1.0]],
        ideal_best=[1.0], ideal_worst=[1.0], distance_from_best=[0.0], distance_from_worst=[0.0],
        performance_scores=scores, rankings=[2, 1], weights=[1.0], criteria_types=["benefit"],
    )
    scores[0] = 0.9
    assert result.performance_scores[0] == 0.2

def test_result_is_frozen(topsis_result):
    with pytest.raises(dataclasses.FrozenInstanceError):
        topsis_result.rankings = np.array([1, 2])

def test_to_dict_is_json_serializable(topsis_result):
    data = topsis_result.to_dict()
    assert json.loads(json.dumps(data)) == data
    assert data["performance_scores"] == [0.0, 1.0]

def test_ranked_alternatives(topsis_result):
    np.testing.assert_array_equal(topsis_result.ranked_alternatives, [1, 0])

def test_alternative_detail():
    detail = AlternativeDetail(name="A", rank=1, score=0.8, distance_to_best=0.1, distance_to_worst=0.4)
    assert detail.to_dict() == {
        "name": "A", "rank": 1, "score": 0.8, "distance_to_best": 0.1, "distance_to_worst": 0.4
    }
    with pytest.raises(dataclasses.FrozenInstanceError):
        detail.rank = 2

def test_to_serializable_handles_numbers():
    assert _to_serializable(TFN(1, 2, 3)) == {"l": 1.0, "m": 2.0, "u": 3.0}
    assert _to_serializable(Crisp(2)) == 2.0
    assert _to_serializable(np.float64(0.5)) == 0.5
    assert isinstance(_to_serializable(np.int64(3)), int)
    assert _to_serializable({"a": (TFN(1, 1, 1),)}) == {"a": [{"l": 1.0, "m": 1.0, "u": 1.0}]}
