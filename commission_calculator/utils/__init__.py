"""Utility functions for the commission calculator."""

from commission_calculator.utils.formatters import format_cents, format_rate

__all__ = [
    "format_cents",
    "format_rate",
]
