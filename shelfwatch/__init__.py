"""Shelfwatch: product inventory with expiration warnings."""

__version__ = "1.0.0"
