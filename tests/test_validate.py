"""Tests for the oracle and property helpers."""

from __future__ import annotations

import math

import pytest

from sortlab.validate import (
    ORACLE_NAME,
    assert_in_place,
    equals_oracle,
    first_nondecreasing_violation_index,
    is_nondecreasing,
    is_permutation,
    oracle_sort,
    permutation_counter_diff,
)


def test_oracle_does_not_mutate() -> None:
    a = [3, 1, 2]
    assert oracle_sort(a) == [1, 2, 3]
    assert a == [3, 1, 2]
    assert isinstance(ORACLE_NAME, str)


def test_equals_oracle_with_distinct_nans() -> None:
    a = [float("nan"), 2.0, float("nan")]
    assert equals_oracle(a, [2.0, float("nan"), float("nan")])
    assert not equals_oracle(a, [float("nan"), 2.0, float("nan")])
    assert not equals_oracle(a, [2.0, float("nan")])


def test_nondecreasing_under_policy() -> None:
    assert is_nondecreasing([-math.inf, 1.0, math.inf, math.nan, math.nan])
    assert is_nondecreasing(["", "", "a"])
    assert is_nondecreasing([])
    assert not is_nondecreasing([math.nan, 1.0])


def test_first_violation_index() -> None:
    assert first_nondecreasing_violation_index([1, 2, 2, 1, 0]) == 2
    assert first_nondecreasing_violation_index([1, 2, 3]) is None


def test_permutation_counts_nans_together() -> None:
    a = [float("nan"), 1, float("nan")]
    b = [1, float("nan"), float("nan")]
    assert is_permutation(a, b)
    assert not is_permutation(a, [1, float("nan"), 2])
    assert not is_permutation(a, [1])


def test_permutation_counter_diff() -> None:
    diff = permutation_counter_diff([1, 1, 2, float("nan")], [1, 3])
    assert diff[1] == 1
    assert diff[2] == 1
    assert diff[3] == -1
    assert diff[math.nan] == 1
    assert permutation_counter_diff([1, 2], [2, 1]) == {}


def test_assert_in_place() -> None:
    a = [2, 1]
    assert_in_place(a, a, 2)
    with pytest.raises(AssertionError, match="new list"):
        assert_in_place(a, list(a), 2)
    with pytest.raises(AssertionError, match="length changed"):
        assert_in_place(a, a, 3)
