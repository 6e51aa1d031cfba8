"""
Sorting algorithms public API.

Every algorithm module exposes the same call contract:
    sort(a: list | None, *, config: dict | None = None) -> list | None

Re-exports the registry and the ordering policy so callers can write:
    from sortlab.algorithms import ALGORITHMS, MissingValueError, sort_values
"""

from . import builtin_timsort, double_hashing, library_sort
from .ordering import (
    ORDERINGS,
    MissingValueError,
    Ordering,
    resolve_ordering,
    sort_values,
)

ALGORITHMS = {
    "builtin_timsort": builtin_timsort,
    "double_hashing": double_hashing,
    "library_sort": library_sort,
}

__all__ = [
    "ALGORITHMS",
    "ORDERINGS",
    "MissingValueError",
    "Ordering",
    "resolve_ordering",
    "sort_values",
]
