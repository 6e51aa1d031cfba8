"""
Reference sorter: Python's built-in list.sort (Timsort) under the ordering policy.

Follows the same call contract as the other algorithms (in place, returns `a`)
so it can sit next to them in benchmarks as a baseline.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ._config import merge_config
from .ordering import resolve_ordering

__all__ = ["sort"]

_DEFAULTS: Dict[str, Any] = {"ordering": "auto"}


def sort(a: Optional[List[Any]], *, config: Optional[Dict[str, Any]] = None) -> Optional[List[Any]]:
    if a is None or len(a) <= 1:
        return a
    opts = merge_config("builtin_timsort", config, _DEFAULTS)
    ordering = resolve_ordering(a, opts["ordering"])
    a.sort(key=ordering.key)
    return a
