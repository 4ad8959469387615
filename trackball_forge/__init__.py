"""Parametric top / bottom case for a trackball mouse."""

__version__ = "0.1.0"
