from __future__ import annotations


class PeriodError(ValueError):
    """Base exception for date and period arithmetic."""


class InvalidRange(PeriodError):
    """A date input cannot be parsed, or a range runs past its year boundary."""
