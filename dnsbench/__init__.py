"""Benchmark DNS servers to find the fastest one for your location."""

__version__ = "0.9.1"
__all__ = ["__version__"]