"""
Double Hashing Sort.

Elements are distributed over `min(n, max_buckets)` buckets using a fixed
double-hash combination of the element's structural hash, each bucket is sorted
with the ordering policy, and the buckets are written back in index order:

    h      = abs(structural_hash(x))
    hash1  = h % bucket_count
    hash2  = 7 - (h % 7)
    bucket = (hash1 + hash2) % bucket_count

This is a single probe (no open-addressing retry); colliding elements simply
share a bucket.

Caveat (kept on purpose): the concatenated output is globally ordered only when
the bucket mapping is rank-monotonic for the data, which the formula does not
guarantee. With n == 7 every element lands in bucket 0 and the result is always
sorted; for other sizes it may not be, e.g. [1..10] -> [7, 8, 9, 10, 1, ..., 6].

Complexity: O(n) distribution plus O(b log b) per bucket; O(n) extra space.

Public API (stable):
    sort(a: list | None, *, config: dict | None = None) -> list | None
    bucket_index(value, bucket_count, ordering) -> int
    distribute(values, bucket_count, ordering) -> list[list]
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from ._config import merge_config
from .ordering import MissingValueError, Ordering, resolve_ordering

__all__ = ["DEFAULT_MAX_BUCKETS", "sort", "bucket_index", "distribute"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUCKETS = 10
_SECONDARY_MODULUS = 7

_DEFAULTS: Dict[str, Any] = {"max_buckets": DEFAULT_MAX_BUCKETS, "ordering": "auto"}


def bucket_index(value: Any, bucket_count: int, ordering: Ordering) -> int:
    """Return the bucket for `value` under the double-hash formula."""
    h = abs(ordering.structural_hash(value))
    hash1 = h % bucket_count
    hash2 = _SECONDARY_MODULUS - (h % _SECONDARY_MODULUS)
    return (hash1 + hash2) % bucket_count


def distribute(values: Sequence[Any], bucket_count: int, ordering: Ordering) -> List[List[Any]]:
    """Split `values` into buckets, keeping input order inside each bucket."""
    buckets: List[List[Any]] = [[] for _ in range(bucket_count)]
    for v in values:
        buckets[bucket_index(v, bucket_count, ordering)].append(v)
    return buckets


def sort(a: Optional[List[Any]], *, config: Optional[Dict[str, Any]] = None) -> Optional[List[Any]]:
    """
    Sort `a` in place with Double Hashing Sort and return it.

    Parameters
    ----------
    a : list | None
        Elements to sort. None is returned as None; lists of length <= 1 are
        returned unchanged.
    config : dict | None
        "max_buckets" (int >= 1, default 10) and "ordering" (default "auto").

    Raises
    ------
    MissingValueError
        If `a` has more than one element and any of them is None. Raised before
        `a` is modified.
    ValueError
        If `config` is invalid.
    """
    if a is None or len(a) <= 1:
        return a

    opts = merge_config("double_hashing", config, _DEFAULTS)
    max_buckets = opts["max_buckets"]
    if not isinstance(max_buckets, int) or isinstance(max_buckets, bool) or max_buckets < 1:
        raise ValueError(f"double_hashing.max_buckets must be an integer >= 1; got {max_buckets!r}")

    if any(v is None for v in a):
        raise MissingValueError()

    ordering = resolve_ordering(a, opts["ordering"])
    bucket_count = min(len(a), max_buckets)
    buckets = distribute(a, bucket_count, ordering)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "n=%d buckets=%d ordering=%s sizes=%s",
            len(a), bucket_count, ordering.name, [len(b) for b in buckets],
        )

    i = 0
    for bucket in buckets:
        if not bucket:
            continue
        bucket.sort(key=ordering.key)
        a[i:i + len(bucket)] = bucket
        i += len(bucket)
    return a
