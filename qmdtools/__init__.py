"""Helpers for Quarto documentation workflows."""

__version__ = "0.1.0"
