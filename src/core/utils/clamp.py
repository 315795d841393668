"""Numeric clamping helpers for bounded score components."""

from __future__ import annotations


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp ``value`` into ``[lower, upper]``."""

    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator``, or 0.0 when the denominator is not positive."""

    if denominator <= 0:
        return 0.0
    return numerator / denominator


def capped_fraction(value: float, full_marks: float) -> float:
    """Fraction of ``full_marks`` reached by ``value``, bounded to ``[0, 1]``."""

    return clamp(safe_ratio(value, full_marks), 0.0, 1.0)
