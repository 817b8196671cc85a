"""Tufo climbing-route catalog."""

__version__ = "1.0.0"
