"""Reductions over ordered metric samples."""

from __future__ import annotations

from typing import Sequence

from pipelines.errors import InsufficientDataError
from pipelines.model import MetricSample

VOLATILITY_WINDOW = 10


def _values(samples: Sequence[MetricSample | float]) -> list[int | float]:
    return [s.value if isinstance(s, MetricSample) else s for s in samples]


def latest(samples: Sequence[MetricSample | float]) -> int | float:
    """Return the most recent value; providers list the newest observation first."""

    if not samples:
        raise InsufficientDataError(required=1, available=0)
    return _values(samples[:1])[0]


def average(samples: Sequence[MetricSample | float], window: int = VOLATILITY_WINDOW) -> float:
    """Unweighted arithmetic mean of the first ``window`` samples.

    Raises ``InsufficientDataError`` when fewer than ``window`` samples are
    available instead of averaging a shorter series.
    """

    if window < 1:
        raise ValueError(f"window must be positive, got {window}")
    if len(samples) < window:
        raise InsufficientDataError(required=window, available=len(samples))
    values = _values(samples[:window])
    return sum(values) / window


__all__ = ["VOLATILITY_WINDOW", "average", "latest"]
