"""Exceptions raised while configuring or computing residual metrics."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Metric configuration names an unknown metric or holds a non-boolean value."""


class LengthMismatch(ValueError):
    """Predictions and targets do not have the same length."""
