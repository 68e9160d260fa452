"""Accumulate architecture rule violations into a single JSON report."""

__version__ = "0.1.0"
