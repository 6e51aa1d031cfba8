"""
Dataset generators for sorting benchmarks and tests.

Integer distributions:
- "random":        uniform integers from an inclusive range.
- "nearly_sorted": [0, 1, ..., n-1] with ceil(swap_frac * n) random index swaps.
- "few_uniques":   up to k distinct integers, sampled with replacement.
- "small_range":   like "random" with a small default domain [0, 255].
- "reversed":      deterministic [n-1, ..., 0].

Ordering-policy distributions:
- "float_specials": uniform floats with a fraction of NaN / -inf / +inf.
- "words":          short lowercase words with a fraction of empty strings.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list

Conventions:
- Every "range" param is inclusive on both ends and given as [min, max].
- Returns a plain Python list (algorithms stay NumPy-agnostic).
- The caller supplies the RNG so runs are reproducible from a single seed.
"""

from __future__ import annotations

import math
import string
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

__all__ = ["SUPPORTED_DISTS", "make_dataset"]

_SPECIAL_FLOATS = (math.nan, -math.inf, math.inf)


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[Any]:
    """
    Generate a dataset according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict
        {"dist": <name>, "params": {...}}. See the module docstring and the
        per-distribution helpers below for the accepted params.
    rng : numpy.random.Generator
        Random number generator owned by the caller (seeded upstream).

    Raises
    ------
    ValueError
        If inputs are invalid or if the distribution is unsupported.
    """
    _validate_n(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in _GENERATORS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )

    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"{dist}.params must be a dict")
    # Params are validated even for n == 0 so a bad spec fails on the first size.
    return _GENERATORS[dist](n, params, rng)


# ------------------------- integer distributions ------------------------- #


def _gen_random(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    lo, hi = _parse_inclusive_range(params, "random")
    # Generator.integers is half-open; +1 makes hi inclusive.
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _gen_nearly_sorted(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    swap_frac = _parse_fraction(params, "swap_frac", 0.05, "nearly_sorted")
    arr = list(range(n))
    num_swaps = int(math.ceil(swap_frac * n))
    if n == 0 or num_swaps == 0:
        return arr
    idxs = rng.integers(0, n, size=2 * num_swaps)
    for k in range(num_swaps):
        i, j = int(idxs[2 * k]), int(idxs[2 * k + 1])
        # i == j is a no-op, so effective swaps may be fewer than requested
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def _gen_few_uniques(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    k = params.get("k")
    if not isinstance(k, int) or isinstance(k, bool) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    lo, hi = _parse_inclusive_range(params, "few_uniques", default=(0, 4294967295))
    if n == 0:
        return []

    # Never ask for more distinct values than the span or the array can hold.
    actual_k = int(min(k, n, hi - lo + 1))
    chosen: List[int] = []
    seen = set()
    while len(chosen) < actual_k:
        need = actual_k - len(chosen)
        for v in map(int, rng.integers(lo, hi + 1, size=need * 2)):
            if v not in seen:
                seen.add(v)
                chosen.append(v)
                if len(chosen) == actual_k:
                    break

    return [chosen[int(t)] for t in rng.integers(0, actual_k, size=n)]


def _gen_small_range(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    if "range" in params:
        lo, hi = _parse_inclusive_range(params, "small_range")
    else:
        lo_raw, hi_raw = params.get("min_val", 0), params.get("max_val", 255)
        if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
            raise ValueError("small_range.params.min_val/max_val must be integers")
        lo, hi = int(lo_raw), int(hi_raw)
        if lo > hi:
            raise ValueError(f"small_range invalid: min > max ({lo} > {hi})")
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _gen_reversed(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    return list(range(n - 1, -1, -1))


# ------------------------- ordering-policy distributions ------------------------- #


def _gen_float_specials(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[float]:
    """
    params:
        "range":        [min, max] for the finite values (default [-1000, 1000])
        "special_frac": fraction of positions holding NaN/-inf/+inf (default 0.1)
    """
    lo, hi = _parse_float_range(params, default=(-1000.0, 1000.0))
    frac = _parse_fraction(params, "special_frac", 0.1, "float_specials")
    out = rng.uniform(lo, hi, size=n).tolist()
    num_special = min(n, int(math.ceil(frac * n)))
    if num_special:
        positions = rng.choice(n, size=num_special, replace=False)
        kinds = rng.integers(0, len(_SPECIAL_FLOATS), size=num_special)
        for pos, kind in zip(positions, kinds):
            out[int(pos)] = _SPECIAL_FLOATS[int(kind)]
    return out


def _gen_words(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[str]:
    """
    params:
        "max_len":    longest word (default 8)
        "alphabet":   characters to draw from (default a-z)
        "empty_frac": probability a word is forced empty (default 0.1)
    """
    max_len = params.get("max_len", 8)
    if not isinstance(max_len, int) or isinstance(max_len, bool) or max_len < 0:
        raise ValueError(f"words.params.max_len must be an integer >= 0; got {max_len!r}")
    alphabet = params.get("alphabet", string.ascii_lowercase)
    if not isinstance(alphabet, str) or not alphabet:
        raise ValueError("words.params.alphabet must be a non-empty string")
    empty_frac = _parse_fraction(params, "empty_frac", 0.1, "words")

    lengths = rng.integers(0, max_len + 1, size=n)
    empty = rng.random(size=n) < empty_frac
    words: List[str] = []
    for length, is_empty in zip(lengths, empty):
        if is_empty:
            words.append("")
            continue
        letters = rng.integers(0, len(alphabet), size=int(length))
        words.append("".join(alphabet[int(j)] for j in letters))
    return words


_GENERATORS: Dict[str, Callable[[int, Dict[str, Any], np.random.Generator], List[Any]]] = {
    "random": _gen_random,
    "nearly_sorted": _gen_nearly_sorted,
    "few_uniques": _gen_few_uniques,
    "small_range": _gen_small_range,
    "reversed": _gen_reversed,
    "float_specials": _gen_float_specials,
    "words": _gen_words,
}

SUPPORTED_DISTS = frozenset(_GENERATORS)


# ------------------------- helpers ------------------------- #


def _validate_n(n: int) -> None:
    if not isinstance(n, int) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")


def _parse_inclusive_range(
    params: Dict[str, Any], dist: str, default: Optional[Tuple[int, int]] = None
) -> Tuple[int, int]:
    """
    Parse params["range"] == [min_int, max_int] (inclusive).

    Required unless `default` is given.
    """
    if "range" not in params:
        if default is None:
            raise ValueError(f"{dist}.params.range must be provided as [min, max] (inclusive)")
        return default

    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError(f"{dist}.params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError(f"{dist}.params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"{dist}.params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_float_range(params: Dict[str, Any], default: Tuple[float, float]) -> Tuple[float, float]:
    spec = params.get("range", default)
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("float_specials.params.range must be a 2-element list/tuple [min, max]")
    try:
        lo, hi = float(spec[0]), float(spec[1])
    except (TypeError, ValueError) as e:
        raise ValueError("float_specials.params.range values must be numbers") from e
    if not (math.isfinite(lo) and math.isfinite(hi)) or lo > hi:
        raise ValueError(f"float_specials.params.range invalid: [{lo}, {hi}]")
    return lo, hi


def _parse_fraction(params: Dict[str, Any], name: str, default: float, dist: str) -> float:
    val = params.get(name, default)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{dist}.params.{name} must be a float in [0.0, 1.0]; got {val!r}") from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(f"{dist}.params.{name} must be in [0.0, 1.0]; got {x}")
    return x


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
