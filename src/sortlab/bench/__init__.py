"""
Benchmark harness public API.

Re-exports:
    time_sort_call   -- timed samples of one algorithm on one input
    run_experiment   -- full sweep driven by a YAML config
"""

from .measure import time_sort_call
from .runner import run_experiment

__all__ = ["time_sort_call", "run_experiment"]
