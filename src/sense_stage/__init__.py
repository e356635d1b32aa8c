"""Sense Stage: publication engagement and visibility backend."""

__version__ = "0.1.0"
