"""
===================================================================
Tests for the Ranking Module
===================================================================
"""

import pytest
import numpy as np

from ahpTopsisPy.ranking import rank_descending, closeness_coefficient, order_by_rank


def test_rank_descending():
    np.testing.assert_array_equal(rank_descending([0.2, 0.9, 0.5]), [3, 1, 2])

def test_rank_descending_breaks_ties_by_input_order():
    np.testing.assert_array_equal(rank_descending([0.2, 0.5, 0.2]), [2, 1, 3])
    np.testing.assert_array_equal(rank_descending([0.4, 0.4, 0.4]), [1, 2, 3])

def test_ranks_are_a_permutation():
    scores = np.random.default_rng(0).random(25).round(1)
    ranks = rank_descending(scores)
    assert sorted(ranks.tolist()) == list(range(1, 26))

def test_closeness_coefficient():
    np.testing.assert_allclose(closeness_coefficient([1.0, 0.0], [1.0, 2.0]), [0.5, 1.0])

def test_closeness_coefficient_with_zero_total():
    assert closeness_coefficient([0.0], [0.0])[0] == 0.0

def test_order_by_rank():
    np.testing.assert_array_equal(order_by_rank([3, 1, 2]), [1, 2, 0])
