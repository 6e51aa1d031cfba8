"""
Tests for Library Sort (gapped insertion sort), including the rebalance step and
the switch to plain insertion sort when gaps run out.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List

import pytest
from hypothesis import given, settings, strategies as st

from sortlab.algorithms import MissingValueError, library_sort
from sortlab.algorithms.library_sort import GappedBuffer, Phase, sort_with_phase
from sortlab.algorithms.ordering import ORDERINGS
from sortlab.validate import is_nondecreasing, is_permutation

INT = ORDERINGS["integer"]


@dataclass(order=True)
class Item:
    value: int
    name: str = field(compare=False)


# ------------------------- contract ------------------------- #

def test_none_returns_none() -> None:
    assert library_sort.sort(None) is None


def test_empty_and_single() -> None:
    empty: list = []
    assert library_sort.sort(empty) is empty
    one = [42]
    assert library_sort.sort(one) == [42]


@pytest.mark.parametrize(
    "a, expected",
    [
        ([5, 2], [2, 5]),
        ([7, 7, 7, 7, 7], [7, 7, 7, 7, 7]),
        (list(range(1, 11)), list(range(1, 11))),
        (list(range(10, 0, -1)), list(range(1, 11))),
        ([64, 34, 25, 12, 22, 11, 90], [11, 12, 22, 25, 34, 64, 90]),
        ([5, 2, 8, 2, 9, 1, 5, 4], [1, 2, 2, 4, 5, 5, 8, 9]),
        ([-5, -1, -10, -3, -8], [-10, -8, -5, -3, -1]),
        ([-3, 5, -1, 8, 0, -7, 2], [-7, -3, -1, 0, 2, 5, 8]),
        (
            [23, 45, 16, 37, 3, 99, 22, 55, 33, 12, 67, 89, 8, 41, 77],
            [3, 8, 12, 16, 22, 23, 33, 37, 41, 45, 55, 67, 77, 89, 99],
        ),
        (
            [100, 1, 99, 2, 98, 3, 97, 4, 96, 5, 95, 6, 94, 7, 93, 8],
            [1, 2, 3, 4, 5, 6, 7, 8, 93, 94, 95, 96, 97, 98, 99, 100],
        ),
        (
            ["banana", "apple", "cherry", "date", "elderberry"],
            ["apple", "banana", "cherry", "date", "elderberry"],
        ),
        (["", "banana", "apple", ""], ["", "", "apple", "banana"]),
    ],
)
def test_known_inputs(a: list, expected: list) -> None:
    out = library_sort.sort(a)
    assert out is a
    assert out == expected


def test_pseudo_random_fifty() -> None:
    a = [(i * 17 + 13) % 100 for i in range(50)]
    assert library_sort.sort(list(a)) == sorted(a)


def test_float_specials() -> None:
    out = library_sort.sort([math.nan, 1.0, math.nan, -math.inf, math.inf])
    assert out[:3] == [-math.inf, 1.0, math.inf]
    assert math.isnan(out[3]) and math.isnan(out[4])


def test_custom_objects_use_natural_order() -> None:
    a = [Item(3, "third"), Item(1, "first"), Item(2, "second"), Item(1, "another_first")]
    out = library_sort.sort(a)
    assert [x.value for x in out] == [1, 1, 2, 3]


def test_lists_and_huge_ints() -> None:
    assert library_sort.sort([[3], [1], [2]]) == [[1], [2], [3]]
    big = 10**400
    assert library_sort.sort([0.5, big, 2.5, 1.0]) == [0.5, 1.0, 2.5, big]


def test_missing_value_surfaces_from_comparison() -> None:
    with pytest.raises(MissingValueError):
        library_sort.sort([3, None])


# ------------------------- phases ------------------------- #

def test_default_gap_factor_stays_gapped() -> None:
    a = [100, 1, 99, 2, 98, 3, 97, 4, 96, 5, 95, 6, 94, 7, 93, 8]
    out, phase = sort_with_phase(a, INT)
    assert phase is Phase.GAPPED
    assert out == sorted(a)


def test_tight_buffer_falls_back_to_insertion_sort() -> None:
    # size 3: [_, 1, 3] leaves no slot between 1 and 3, and rebalancing can't make one
    a = [1, 3, 2]
    out, phase = sort_with_phase(a, INT, gap_factor=1.0)
    assert phase is Phase.DENSE
    assert out is a
    assert out == [1, 2, 3]


def test_fallback_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="sortlab.algorithms.library_sort")
    assert library_sort.sort([1, 3, 2], config={"gap_factor": 1.0}) == [1, 2, 3]
    assert "switching to insertion sort" in caplog.text


@pytest.mark.parametrize("gap_factor", [1.0, 1.1, 1.5, 3.0])
def test_sorted_for_any_gap_factor(gap_factor: float) -> None:
    a = [9, 3, 7, 3, 1, 8, 2, 6, 0, 5, 4, 7, 1]
    assert library_sort.sort(list(a), config={"gap_factor": gap_factor}) == sorted(a)


@pytest.mark.parametrize("gap_factor", [0.5, 0, -1.0, "2", True, float("nan")])
def test_invalid_gap_factor(gap_factor: object) -> None:
    with pytest.raises(ValueError, match="gap_factor"):
        library_sort.sort([2, 1], config={"gap_factor": gap_factor})


# ------------------------- gapped buffer ------------------------- #

def test_rebalance_spreads_values_evenly() -> None:
    buf = GappedBuffer(8, INT)
    for pos, v in enumerate([1, 2, 3]):
        buf.place(pos, v)
    buf.rebalance()
    assert [i for i, occ in enumerate(buf.occupied) if occ] == [2, 4, 6]
    assert buf.values() == [1, 2, 3]
    assert buf.count == 3
    assert buf.rebalances == 1


def test_insert_keeps_occupied_slots_ordered() -> None:
    buf = GappedBuffer(40, INT)
    buf.place(20, 50)
    for v in [20, 80, 50, 10, 90, 30, 70, 60, 40, 0]:
        assert buf.insert(v)
        assert is_nondecreasing(buf.values(), INT)
    assert buf.count == 11


def test_find_slot_respects_neighbours() -> None:
    buf = GappedBuffer(5, INT)
    buf.place(1, 10)
    buf.place(3, 30)
    assert buf.find_slot(20) == 2
    assert buf.find_slot(5) == 0
    assert buf.find_slot(40) == 4


def test_insert_rebalances_before_retrying() -> None:
    buf = GappedBuffer(3, INT)
    buf.place(0, 1)
    buf.place(1, 2)
    assert buf.find_slot(0) is None
    assert buf.insert(0)
    assert buf.rebalances == 1
    assert buf.values() == [0, 1, 2]


def test_insert_fails_only_after_rebalance() -> None:
    buf = GappedBuffer(3, INT)
    buf.place(1, 1)
    buf.place(2, 2)
    assert not buf.insert(5)
    assert buf.rebalances == 1
    assert buf.values() == [1, 2]


def test_buffer_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        GappedBuffer(0, INT)


# ------------------------- properties ------------------------- #

@settings(deadline=None, max_examples=100)
@given(
    a=st.lists(st.integers(min_value=-1000, max_value=1000), min_size=0, max_size=150),
    gap_factor=st.sampled_from([1.0, 1.25, 2.0, 3.0]),
)
def test_property_sorted_permutation(a: List[int], gap_factor: float) -> None:
    before = list(a)
    out = library_sort.sort(a, config={"gap_factor": gap_factor})
    assert out == sorted(before)
    assert is_permutation(before, out)


@settings(deadline=None, max_examples=60)
@given(a=st.lists(st.integers(min_value=-1000, max_value=1000), min_size=0, max_size=100))
def test_property_idempotent(a: List[int]) -> None:
    once = library_sort.sort(list(a))
    assert library_sort.sort(list(once)) == once
