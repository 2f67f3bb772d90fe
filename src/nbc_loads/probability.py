"""Conversions between 50-year probability of exceedance and return period."""

from __future__ import annotations

import math

DEFAULT_RETURN_PERIOD = 2475  # years, 2% in 50 years


def return_period_from_poe50(poe50: float) -> int:
    """Return period (years) for a 50-year probability of exceedance.

    ``T = -50 / ln(1 - poe50)``. Outside the open interval (0, 1) the
    logarithm is undefined, so the reference return period is returned
    instead of raising.
    """
    if poe50 <= 0 or poe50 >= 1:
        return DEFAULT_RETURN_PERIOD
    return round(-50 / math.log(1 - poe50))


def poe50_from_return_period(return_period: float) -> float:
    """50-year probability of exceedance, ``1 - exp(-50 / T)``. T must be non-zero."""
    return 1 - math.exp(-50 / return_period)


def poe50_percent(return_period: float) -> float:
    """Probability of exceedance in percent, as the CanSHM service expects it."""
    return 100 * poe50_from_return_period(return_period)
