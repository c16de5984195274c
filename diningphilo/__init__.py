"""Dining philosophers simulation with fixed-forks and pooled-forks runners."""

__version__ = "1.0.0"
__all__ = ["__version__"]