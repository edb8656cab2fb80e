"""Retreat booking price, discount and payment schedule engine."""

__version__ = "0.1.0"
