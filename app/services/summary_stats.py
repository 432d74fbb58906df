"""Column summary statistics: quartiles, median and mode."""

from collections import Counter
from typing import Any, Iterable, NamedTuple, Optional, Sequence

import numpy as np


QUARTILE_POINTS = (0.25, 0.5, 0.75)


class Quantiles(NamedTuple):
    q1: float
    q2: float
    q3: float

    @property
    def median(self) -> float:
        return self.q2

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1


def quantiles(numbers: Sequence[float]) -> Quantiles:
    """Quartiles with linear interpolation between closest ranks.

    Empty input gives (0, 0, 0).
    """
    if len(numbers) == 0:
        return Quantiles(0.0, 0.0, 0.0)

    q1, q2, q3 = np.quantile(np.asarray(numbers, dtype=float), QUARTILE_POINTS, method="linear")
    return Quantiles(float(q1), float(q2), float(q3))


def median(numbers: Sequence[float]) -> float:
    return quantiles(numbers).q2


def mode(values: Iterable[Any]) -> Optional[Any]:
    """Most frequent value; on a tie the value seen first wins."""
    counts = Counter(values)
    if not counts:
        return None
    # Counter keeps first-seen order and most_common() is stable on ties
    return counts.most_common(1)[0][0]
