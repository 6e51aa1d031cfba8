"""sortlab: gapped-insertion and double-hashing sorts with a benchmarking harness."""

__version__ = "0.1.0"
