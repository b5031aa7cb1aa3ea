"""Turnip Forecaster: weekly turnip price patterns, bounds and probabilities."""

__version__ = "0.1.0"
