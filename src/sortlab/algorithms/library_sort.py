"""
Library Sort (gapped insertion sort).

Insertion sort over a sparse working buffer of `int(n * gap_factor)` slots. Each
element is placed in an empty slot whose nearest occupied neighbours bracket
it, so the occupied slots read left to right are always non-decreasing and no
shifting is needed. When no such slot exists the buffer is rebalanced (values
spread out evenly) and the search is retried once.

The call runs as a two-phase state machine:

    Phase.GAPPED  insert every element into the buffer, then compact it into `a`
    Phase.DENSE   entered when an element still has no slot after a rebalance;
                  the buffer is dropped and `a` is finished with a plain, stable
                  insertion sort over the whole list

With the default gap_factor of 2.0 a rebalance always leaves a gap between
every pair of values, so Phase.DENSE is only reached with tighter buffers.

Complexity: O(n log n) expected comparisons; O(n^2) worst case. O(n) extra space.

Public API (stable):
    sort(a: list | None, *, config: dict | None = None) -> list | None
    sort_with_phase(a: list, ordering, gap_factor=2.0) -> tuple[list, Phase]
    GappedBuffer
    Phase
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Optional, Tuple

from ._config import merge_config
from .ordering import Ordering, resolve_ordering

__all__ = ["DEFAULT_GAP_FACTOR", "Phase", "GappedBuffer", "sort", "sort_with_phase"]

logger = logging.getLogger(__name__)

DEFAULT_GAP_FACTOR = 2.0

_DEFAULTS: Dict[str, Any] = {"gap_factor": DEFAULT_GAP_FACTOR, "ordering": "auto"}


class Phase(enum.Enum):
    GAPPED = "gapped"
    DENSE = "dense"


class GappedBuffer:
    """Fixed-capacity sparse array with a parallel occupancy marker per slot."""

    def __init__(self, size: int, ordering: Ordering) -> None:
        if size < 1:
            raise ValueError(f"buffer size must be >= 1; got {size}")
        self.size = size
        self.slots: List[Any] = [None] * size
        self.occupied: List[bool] = [False] * size
        self.count = 0
        self.rebalances = 0
        self._cmp = ordering.compare

    def place(self, pos: int, value: Any) -> None:
        self.slots[pos] = value
        self.occupied[pos] = True
        self.count += 1

    def values(self) -> List[Any]:
        """Occupied values, left to right."""
        return [v for v, occ in zip(self.slots, self.occupied) if occ]

    def insert(self, value: Any) -> bool:
        """Place `value`, rebalancing once if needed. False if it still does not fit."""
        pos = self.find_slot(value)
        if pos is None:
            self.rebalance()
            pos = self.find_slot(value)
            if pos is None:
                return False
        self.place(pos, value)
        return True

    def find_slot(self, value: Any) -> Optional[int]:
        """
        Return an empty slot where `value` keeps the buffer ordered, or None.

        Binary search first; if it converges without landing on a usable gap,
        probe outward from where it stopped.
        """
        left, right = 0, self.size - 1
        while left <= right:
            mid = (left + right) // 2
            if not self.occupied[mid]:
                if self._fits(value, mid):
                    return mid
                if self._goes_left(value, mid):
                    right = mid - 1
                else:
                    left = mid + 1
            elif self._cmp(value, self.slots[mid]) < 0:
                right = mid - 1
            else:
                left = mid + 1
        return self._nearby_gap(value, left)

    def _fits(self, value: Any, pos: int) -> bool:
        for i in range(pos - 1, -1, -1):
            if self.occupied[i]:
                if self._cmp(value, self.slots[i]) < 0:
                    return False
                break
        for i in range(pos + 1, self.size):
            if self.occupied[i]:
                if self._cmp(value, self.slots[i]) > 0:
                    return False
                break
        return True

    def _goes_left(self, value: Any, pos: int) -> bool:
        for i in range(pos + 1, self.size):
            if self.occupied[i]:
                return self._cmp(value, self.slots[i]) < 0
        return False

    def _nearby_gap(self, value: Any, center: int) -> Optional[int]:
        center = max(0, min(center, self.size - 1))
        for offset in range(self.size):
            pos = center + offset
            if pos < self.size and not self.occupied[pos] and self._fits(value, pos):
                return pos
            pos = center - offset
            if pos >= 0 and not self.occupied[pos] and self._fits(value, pos):
                return pos
        return None

    def rebalance(self) -> None:
        """Spread the held values evenly: value i goes to slot (i + 1) * gap."""
        held = self.values()
        self.slots = [None] * self.size
        self.occupied = [False] * self.size
        self.count = 0
        self.rebalances += 1
        if not held:
            return
        gap = max(1, self.size // (len(held) + 1))
        # (i + 1) * gap <= k * size / (k + 1) < size, so every target is in range
        for i, v in enumerate(held):
            self.place((i + 1) * gap, v)
        logger.debug("rebalanced %d values into %d slots (gap=%d)", len(held), self.size, gap)


def _insertion_sort(a: List[Any], ordering: Ordering) -> List[Any]:
    cmp = ordering.compare
    for i in range(1, len(a)):
        key = a[i]
        j = i - 1
        while j >= 0 and cmp(a[j], key) > 0:
            a[j + 1] = a[j]
            j -= 1
        a[j + 1] = key
    return a


def sort_with_phase(
    a: List[Any], ordering: Ordering, gap_factor: float = DEFAULT_GAP_FACTOR
) -> Tuple[List[Any], Phase]:
    """
    Sort a non-empty list in place and report the phase the call finished in.

    `sort` is the public entry point; this exists so callers (and tests) can
    see whether the gapped strategy was abandoned.
    """
    n = len(a)
    buf = GappedBuffer(int(n * gap_factor), ordering)
    buf.place(buf.size // 2, a[0])
    for i in range(1, n):
        if not buf.insert(a[i]):
            logger.debug(
                "no gap for element %d of %d after %d rebalance(s); switching to insertion sort",
                i, n, buf.rebalances,
            )
            return _insertion_sort(a, ordering), Phase.DENSE
    a[:] = buf.values()
    return a, Phase.GAPPED


def sort(a: Optional[List[Any]], *, config: Optional[Dict[str, Any]] = None) -> Optional[List[Any]]:
    """
    Sort `a` in place with Library Sort and return it.

    Parameters
    ----------
    a : list | None
        Elements to sort. None is returned as None; lists of length <= 1 are
        returned unchanged. Missing elements are not rejected up front; comparing
        one against a present value raises the ordering policy's error.
    config : dict | None
        "gap_factor" (float >= 1.0, default 2.0) and "ordering" (default "auto").

    Raises
    ------
    ValueError
        If `config` is invalid.
    """
    if a is None or len(a) <= 1:
        return a

    opts = merge_config("library_sort", config, _DEFAULTS)
    gap_factor = opts["gap_factor"]
    if isinstance(gap_factor, bool) or not isinstance(gap_factor, (int, float)) or not gap_factor >= 1.0:
        raise ValueError(f"library_sort.gap_factor must be a number >= 1.0; got {gap_factor!r}")

    ordering = resolve_ordering(a, opts["ordering"])
    out, _phase = sort_with_phase(a, ordering, float(gap_factor))
    return out
