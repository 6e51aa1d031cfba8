"""
Timing harness for sorting algorithms.

We measure exactly one call to an algorithm's `sort(a, config=...)` per sample,
using a monotonic high-resolution clock. The sorters rearrange their input in
place, so every sample gets a fresh copy of `a`, made outside the timed block
along with GC handling and warmup.

Public API (stable):
    time_sort_call(... ) -> dict

Returned dict schema:
    {
        "algo": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
        "sorted_ok": bool | None,           # None unless validate=True and a sample ran
    }
"""

from __future__ import annotations

import gc
import time
from typing import Any, Callable, Dict, List, Optional

from sortlab.validate.properties import is_nondecreasing, is_permutation

__all__ = ["time_sort_call"]


def _check_output(a: List[Any], out: Optional[List[Any]], config: Optional[Dict[str, Any]]) -> bool:
    if out is None:
        return False
    ordering = (config or {}).get("ordering", "auto")
    return is_permutation(a, out) and is_nondecreasing(out, ordering)


def time_sort_call(
    *,
    algo_name: str,
    algo_fn: Callable[..., Optional[List[Any]]],
    a: List[Any],
    config: Optional[Dict[str, Any]],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    validate: bool = False,
) -> Dict[str, Any]:
    """
    Time repeated calls to `algo_fn(copy_of_a, config=config)`.

    Parameters
    ----------
    algo_name : str
        Logical name of the algorithm (for logs/records).
    algo_fn : Callable[..., list]
        Callable implementing sort(a: list, *, config: dict | None) -> list.
    a : list
        Input array. Never passed to `algo_fn` directly; each call sorts a copy.
    config : dict | None
        Algorithm configuration passed through unchanged.
    repeats : int
        Number of timed samples to collect (best practice: >=5).
    warmup : bool
        If True, make one untimed call before timing to prime caches.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample timeout threshold. If a single call exceeds this threshold,
        we mark status="timeout" and stop further sampling.
    validate : bool
        If True, check the first timed output is a nondecreasing permutation of
        `a` (under the config's ordering) and report it as "sorted_ok".

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "algo": algo_name,
        "repeats": repeats,
        "samples_ns": [],  # type: List[int]
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
        "sorted_ok": None,
    }

    # ---- Warmup (outside GC disable & outside timed block) ----
    if warmup and repeats > 0:
        try:
            algo_fn(list(a), config=config)
        except Exception as e:
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                # Fresh input OUTSIDE the timed block; the sorter will mutate it
                arg = list(a)

                t0 = time.perf_counter_ns()
                out = algo_fn(arg, config=config)
                t1 = time.perf_counter_ns()

                elapsed = t1 - t0
                result["samples_ns"].append(int(elapsed))

                if validate and r == 0:
                    result["sorted_ok"] = _check_output(a, out, config)

                if elapsed > threshold_ns:
                    result["status"] = "timeout"
                    result["timed_out_on_repeat"] = r
                    break

            except Exception as e:
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

    finally:
        # Restore GC only if we were the ones who turned it off
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
