"""
Property helpers for validating sorting results.

Used by the tests and by the benchmark harness (`validate: true`) to check
outputs without trusting any one algorithm.

Public API (stable):
    is_nondecreasing(xs, ordering="auto") -> bool
    first_nondecreasing_violation_index(xs, ordering="auto") -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    assert_in_place(a, out, n_before) -> None

Notes
-----
- Order checks go through the ordering policy, so [-inf, 1.0, inf, nan] and
  ["", "a"] are nondecreasing.
- Multiset checks count every NaN under the single key `math.nan`; plain
  Counter() would treat each NaN object as a distinct value.
- Stability is not checked: neither sorter promises it.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Dict, Optional, Sequence, Union

from sortlab.algorithms.ordering import Ordering, resolve_ordering

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_in_place",
]


def _multiset_key(x: Any) -> Any:
    if x != x:  # NaN is the only value not equal to itself
        return math.nan
    return x


def _counts(xs: Sequence[Any]) -> Counter:
    return Counter(_multiset_key(x) for x in xs)


def first_nondecreasing_violation_index(
    xs: Sequence[Any], ordering: Union[str, Ordering] = "auto"
) -> Optional[int]:
    """
    Return the first index i where xs[i] > xs[i+1], or None if nondecreasing.

    Useful for precise error messages:
        i = first_nondecreasing_violation_index(out)
        assert i is None, f"not nondecreasing at i={i}: {out[i]} > {out[i+1]}"
    """
    if len(xs) < 2:
        return None
    cmp = resolve_ordering(xs, ordering).compare
    for i in range(len(xs) - 1):
        if cmp(xs[i], xs[i + 1]) > 0:
            return i
    return None


def is_nondecreasing(xs: Sequence[Any], ordering: Union[str, Ordering] = "auto") -> bool:
    """Return True iff xs[i] <= xs[i+1] for all i under the ordering policy."""
    return first_nondecreasing_violation_index(xs, ordering) is None


def is_permutation(a: Sequence[Any], b: Sequence[Any]) -> bool:
    """Return True iff `a` and `b` contain exactly the same multiset of values."""
    if len(a) != len(b):
        return False
    return _counts(a) == _counts(b)


def permutation_counter_diff(a: Sequence[Any], b: Sequence[Any]) -> Dict[Any, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities. NaNs are
    reported under `math.nan`.
    """
    ca = _counts(a)
    cb = _counts(b)
    diff: Dict[Any, int] = {}
    for k in list(ca) + [k for k in cb if k not in ca]:
        d = ca.get(k, 0) - cb.get(k, 0)
        if d != 0:
            diff[k] = d
    return diff


def assert_in_place(a: Sequence[Any], out: Any, n_before: int) -> None:
    """
    Assert that a sorter honoured the in-place contract: it returned the very
    list it was given, and that list still holds `n_before` elements.

    Raises AssertionError with a concise message otherwise.
    """
    if out is not a:
        raise AssertionError(
            f"Sorter returned a new {type(out).__name__} instead of the input list"
        )
    if len(a) != n_before:
        raise AssertionError(f"Input length changed from {n_before} to {len(a)}")
