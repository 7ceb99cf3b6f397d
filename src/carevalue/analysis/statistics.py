# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Summary statistics for simulated values: moments, percentiles, histogram.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np
from scipy import stats

from ..core.primitives import Model

PERCENTILE_LEVELS = (5, 25, 50, 75, 95)


class PercentileSummary(Model):
    p5: float
    p25: float
    p50: float
    p75: float
    p95: float


class HistogramBucket(Model):
    """One fixed-width histogram bucket; `bucket` is the bucket midpoint."""

    bucket: float
    range_start: float
    range_end: float
    count: int
    percentage: float


def percentiles(values: Sequence[float]) -> PercentileSummary:
    """Linearly interpolated order statistics."""
    if len(values) == 0:
        return PercentileSummary(p5=0.0, p25=0.0, p50=0.0, p75=0.0, p95=0.0)
    levels = np.percentile(np.asarray(values, dtype=float), PERCENTILE_LEVELS)
    return PercentileSummary(**{f"p{level}": float(v) for level, v in zip(PERCENTILE_LEVELS, levels)})


def histogram(values: Sequence[float], bucket_count: int = 20) -> List[HistogramBucket]:
    """
    Fixed-width histogram spanning [min, max].

    The maximum falls in the last bucket, so counts always sum to len(values).
    When every value is equal all of them land in the first bucket.
    """
    if len(values) == 0:
        return []
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be at least 1, got {bucket_count}")
    array = np.asarray(values, dtype=float)
    low, high = float(array.min()), float(array.max())
    width = (high - low) / bucket_count
    if width > 0:
        index = np.minimum(((array - low) / width).astype(int), bucket_count - 1)
    else:
        index = np.zeros(len(array), dtype=int)
    counts = np.bincount(index, minlength=bucket_count)
    total = len(array)
    return [
        HistogramBucket(
            bucket=low + (i + 0.5) * width,
            range_start=low + i * width,
            range_end=low + (i + 1) * width,
            count=int(count),
            percentage=count / total * 100,
        )
        for i, count in enumerate(counts)
    ]


def mean_confidence_interval(values: Sequence[float], confidence: float = 0.95) -> Tuple[float, float]:
    """Student-t confidence interval for the mean."""
    n = len(values)
    if n == 0:
        return 0.0, 0.0
    array = np.asarray(values, dtype=float)
    mean = float(array.mean())
    if n < 2:
        return mean, mean
    margin = stats.t.ppf((1 + confidence) / 2, df=n - 1) * array.std(ddof=1) / np.sqrt(n)
    return mean - float(margin), mean + float(margin)
