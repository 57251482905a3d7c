"""Indicator and evidence attachment service."""

__version__ = "0.1.0"
