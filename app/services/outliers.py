"""Outlier clipping (winsorization) with the IQR fence."""

from typing import List, Sequence, Tuple

from app.services.summary_stats import quantiles


WINSORIZE_MIN_SAMPLES = 5
IQR_MULTIPLIER = 1.5


def iqr_bounds(numbers: Sequence[float], multiplier: float = IQR_MULTIPLIER) -> Tuple[float, float]:
    """Return (lower, upper) = (q1 - k*IQR, q3 + k*IQR)."""
    q = quantiles(numbers)
    iqr = q.q3 - q.q1
    return q.q1 - multiplier * iqr, q.q3 + multiplier * iqr


def winsorize(
    numbers: Sequence[float],
    min_samples: int = WINSORIZE_MIN_SAMPLES,
    multiplier: float = IQR_MULTIPLIER,
) -> List[float]:
    """Clip values outside the IQR fence to the nearest bound.

    Samples smaller than ``min_samples`` are returned unchanged.  Values
    inside the fence are passed through as-is.
    """
    if len(numbers) < min_samples:
        return list(numbers)

    lower, upper = iqr_bounds(numbers, multiplier)
    return [lower if v < lower else upper if v > upper else v for v in numbers]
