"""Hybrid heat pump sizing, savings and grid peak-load analysis."""

__version__ = "0.1.0"
