"""
Ordering policy shared by the sorting algorithms.

Every sorter compares elements through one strategy object chosen once per call
(never per comparison). A strategy provides:

    compare(a, b) -> int            # negative / zero / positive
    key                             # functools.cmp_to_key wrapper for sorted()
    structural_hash(x) -> int       # deterministic hash used for bucketing

Strategies (closed set, see ORDERINGS):

- "integer": natural numeric order; the value itself when it fits in 32 bits,
             otherwise the 64-bit pattern folded to 32 bits (hi ^ lo).
- "float":   -inf < finite < +inf < NaN, two NaNs compare equal;
             IEEE-754 bit pattern folded to 32 bits (NaN canonicalised).
             Integers mixed into a float list keep the integer hash.
- "text":    empty string first, then code-point lexicographic order;
             polynomial hash h = 31 * h + unit over UTF-16 code units,
             wrapped to signed 32 bits.
- "natural": the element type's own `<`; Python's builtin hash(), or the
             string hash of repr(x) for unhashable values such as lists.

Shared rules for all strategies:
- Two missing values (None) compare equal.
- A missing value compared against a present value raises MissingValueError.

The structural hashes do not depend on PYTHONHASHSEED, so bucket assignments
repeat from run to run.

Public API (stable):
    MissingValueError
    ORDERINGS: dict[str, Ordering]
    resolve_ordering(values, name="auto") -> Ordering
    sort_values(values, ordering="auto") -> list
"""

from __future__ import annotations

import functools
import math
import numbers
import struct
from typing import Any, Dict, Iterable, List, Union

__all__ = [
    "MISSING_VALUE_MESSAGE",
    "MissingValueError",
    "Ordering",
    "IntegerOrdering",
    "FloatOrdering",
    "TextOrdering",
    "ORDERINGS",
    "resolve_ordering",
    "sort_values",
]

MISSING_VALUE_MESSAGE = "input contains a missing value"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_CANONICAL_NAN_BITS = 0x7FF8000000000000


class MissingValueError(ValueError):
    """Raised when a missing element (None) takes part in an ordering decision."""

    def __init__(self, message: str = MISSING_VALUE_MESSAGE) -> None:
        super().__init__(message)


def _to_int32(x: int) -> int:
    """Truncate an arbitrary Python int to a signed 32-bit value."""
    x &= 0xFFFFFFFF
    return x - (1 << 32) if x > _INT32_MAX else x


def _fold64(bits: int) -> int:
    # hi ^ lo of the 64-bit pattern
    bits &= 0xFFFFFFFFFFFFFFFF
    return _to_int32(bits ^ (bits >> 32))


def _int_hash(x: Any) -> int:
    v = int(x)
    if _INT32_MIN <= v <= _INT32_MAX:
        return v
    return _fold64(v)


def _utf16_hash(s: str) -> int:
    h = 0
    for ch in s:
        cp = ord(ch)
        if cp > 0xFFFF:
            # Surrogate pair, as the UTF-16 code units are hashed
            cp -= 0x10000
            h = (31 * h + (0xD800 + (cp >> 10))) & 0xFFFFFFFF
            cp = 0xDC00 + (cp & 0x3FF)
        h = (31 * h + cp) & 0xFFFFFFFF
    return _to_int32(h)


def _is_nan(x: Any) -> bool:
    # Integers are never NaN and may be too large for float()
    return not isinstance(x, numbers.Integral) and math.isnan(x)


def _sign(x: Any, y: Any) -> int:
    if x < y:
        return -1
    if y < x:
        return 1
    return 0


class Ordering:
    """Natural order of the element type; base class of the other strategies."""

    name = "natural"

    def __init__(self) -> None:
        self.key = functools.cmp_to_key(self.compare)

    def compare(self, a: Any, b: Any) -> int:
        if a is None or b is None:
            if a is None and b is None:
                return 0
            raise MissingValueError()
        return self._compare(a, b)

    def _compare(self, a: Any, b: Any) -> int:
        return _sign(a, b)

    def structural_hash(self, x: Any) -> int:
        try:
            return hash(x)
        except TypeError:
            # Unhashable (e.g. lists): hash the repr like a string
            return _utf16_hash(repr(x))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class IntegerOrdering(Ordering):
    name = "integer"

    def structural_hash(self, x: Any) -> int:
        return _int_hash(x)


class FloatOrdering(Ordering):
    """Total order over reals with NaN last and infinities at the extremes."""

    name = "float"

    def _compare(self, a: Any, b: Any) -> int:
        a_nan = _is_nan(a)
        b_nan = _is_nan(b)
        if a_nan or b_nan:
            # NaN sorts after every non-NaN value
            return int(a_nan) - int(b_nan)
        # -inf / +inf already sit at the ends of the numeric order
        return _sign(a, b)

    def structural_hash(self, x: Any) -> int:
        if isinstance(x, numbers.Integral):
            return _int_hash(x)
        f = float(x)
        if math.isnan(f):
            bits = _CANONICAL_NAN_BITS
        else:
            bits = struct.unpack(">Q", struct.pack(">d", f))[0]
        return _fold64(bits)


class TextOrdering(Ordering):
    name = "text"

    def _compare(self, a: Any, b: Any) -> int:
        if not a or not b:
            # Empty string before every non-empty string
            return int(bool(a)) - int(bool(b))
        return _sign(a, b)

    def structural_hash(self, x: Any) -> int:
        return _utf16_hash(x)


ORDERINGS: Dict[str, Ordering] = {
    o.name: o for o in (Ordering(), IntegerOrdering(), FloatOrdering(), TextOrdering())
}


def _auto_ordering(values: Iterable[Any]) -> Ordering:
    present = [v for v in values if v is not None]
    if not present:
        return ORDERINGS["natural"]
    if all(isinstance(v, str) for v in present):
        return ORDERINGS["text"]
    if all(isinstance(v, numbers.Real) for v in present):
        if all(isinstance(v, numbers.Integral) for v in present):
            return ORDERINGS["integer"]
        return ORDERINGS["float"]
    return ORDERINGS["natural"]


def resolve_ordering(values: Iterable[Any], name: Union[str, Ordering] = "auto") -> Ordering:
    """
    Pick the ordering strategy for one sort call.

    Parameters
    ----------
    values : iterable
        The elements to be sorted. Only inspected when `name == "auto"`.
    name : str | Ordering
        "auto", one of ORDERINGS, or an Ordering instance (returned as is).

    Raises
    ------
    ValueError
        If `name` is not a known ordering.
    """
    if isinstance(name, Ordering):
        return name
    if name == "auto":
        return _auto_ordering(values)
    try:
        return ORDERINGS[name]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown ordering: {name!r}. Supported: {['auto'] + sorted(ORDERINGS)}"
        ) from None


def sort_values(values: Iterable[Any], ordering: Union[str, Ordering] = "auto") -> List[Any]:
    """Return a new list with `values` sorted under the ordering policy."""
    items = list(values)
    policy = resolve_ordering(items, ordering)
    return sorted(items, key=policy.key)
