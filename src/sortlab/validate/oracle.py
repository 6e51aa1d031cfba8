"""
Oracle for sorting correctness.

Ground truth is Python's built-in `sorted()` keyed by the ordering policy, so
NaN, infinities and empty strings land where every algorithm in this repo is
expected to put them.

Public API (stable):
    oracle_sort(a: list, ordering="auto") -> list
    equals_oracle(a: list, out: list, ordering="auto") -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- Equality is judged by the ordering policy (compare == 0), not `==`, so two
  distinct NaN objects count as equal.
"""

from __future__ import annotations

from typing import Any, List, Sequence, Union

from sortlab.algorithms.ordering import Ordering, resolve_ordering, sort_values

ORACLE_NAME: str = "python_sorted_ordering_policy"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[Any], ordering: Union[str, Ordering] = "auto") -> List[Any]:
    """Return a new list with the elements of `a` in reference order."""
    return sort_values(a, ordering)


def equals_oracle(
    a: Sequence[Any], out: Sequence[Any], ordering: Union[str, Ordering] = "auto"
) -> bool:
    """
    Check whether an algorithm's output matches the oracle element by element.

    Parameters
    ----------
    a : list
        The original input (pass a copy taken before an in-place sort).
    out : list
        The algorithm's output to check.
    """
    policy = resolve_ordering(a, ordering)
    expected = sort_values(a, policy)
    if len(expected) != len(out):
        return False
    return all(policy.compare(x, y) == 0 for x, y in zip(expected, out))
