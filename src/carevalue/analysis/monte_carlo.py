# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Monte Carlo Simulation

Each iteration samples every configured parameter, applies the samples to
copies of the facility and settings, and records the valuation. Iterations
are independent; a seeded generator makes a run reproducible.

Cancellation is cooperative: the token is checked before each iteration and
a cancelled run returns statistics over the iterations that completed.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from pydantic import Field, model_validator

from ..core.primitives import DistributionTypeEnum, FacilityAttributes, Model
from ..core.settings import Settings
from .paths import apply_overrides, get_path
from .sensitivity import Valuator, reconciled_value, warn_if_invalid
from .statistics import (
    HistogramBucket,
    PercentileSummary,
    histogram,
    mean_confidence_interval,
    percentiles,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class DistributionConfig(Model):
    """
    Sampling distribution for one parameter path.

    Uniform uses min and max; normal uses mean and std_dev; triangular uses
    min, mode and max.
    """

    parameter: str
    distribution: DistributionTypeEnum
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    std_dev: Optional[float] = Field(default=None, ge=0)
    mode: Optional[float] = None

    @model_validator(mode="after")
    def _validate_shape(self) -> "DistributionConfig":
        if self.distribution == DistributionTypeEnum.NORMAL:
            if self.mean is None or self.std_dev is None:
                raise ValueError(f"{self.parameter}: normal distribution requires mean and std_dev")
            return self
        if self.min is None or self.max is None:
            raise ValueError(f"{self.parameter}: {self.distribution.value} distribution requires min and max")
        if self.min > self.max:
            raise ValueError(f"{self.parameter}: min ({self.min}) exceeds max ({self.max})")
        if self.distribution == DistributionTypeEnum.TRIANGULAR:
            if self.mode is None:
                raise ValueError(f"{self.parameter}: triangular distribution requires mode")
            if not self.min <= self.mode <= self.max:
                raise ValueError(
                    f"{self.parameter}: mode ({self.mode}) must lie within [{self.min}, {self.max}]"
                )
        return self

    def sample(self, rng: np.random.Generator) -> float:
        if self.distribution == DistributionTypeEnum.UNIFORM:
            return self.min + rng.random() * (self.max - self.min)
        if self.distribution == DistributionTypeEnum.NORMAL:
            return float(rng.normal(self.mean, self.std_dev))
        return _triangular(rng.random(), self.min, self.mode, self.max)


def _triangular(u: float, low: float, mode: float, high: float) -> float:
    """Inverse CDF of the triangular distribution at u."""
    span = high - low
    if span == 0:
        return low
    split = (mode - low) / span
    if u < split:
        return low + math.sqrt(u * span * (mode - low))
    return high - math.sqrt((1 - u) * span * (high - mode))


class CancellationToken:
    """Thread-safe flag a caller sets to stop a running simulation."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class MonteCarloResult(Model):
    """
    Distribution of valuations over the completed iterations.

    Attributes:
        iterations: Iterations actually completed
        requested_iterations: Iterations asked for
        cancelled: True when the run stopped early
        confidence_interval: 95% Student-t interval for the mean
        calculation_time: Wall time in milliseconds
    """

    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    percentiles: PercentileSummary
    distribution: List[HistogramBucket]
    confidence_interval: Tuple[float, float]
    iterations: int
    requested_iterations: int
    cancelled: bool = False
    calculation_time: float


def summarize(
    values: Sequence[float],
    requested_iterations: int,
    cancelled: bool,
    elapsed_ms: float,
    bucket_count: int = 20,
) -> MonteCarloResult:
    if len(values) == 0:
        return MonteCarloResult(
            mean=0.0,
            median=0.0,
            std_dev=0.0,
            min=0.0,
            max=0.0,
            percentiles=percentiles(values),
            distribution=[],
            confidence_interval=(0.0, 0.0),
            iterations=0,
            requested_iterations=requested_iterations,
            cancelled=cancelled,
            calculation_time=elapsed_ms,
        )
    array = np.asarray(values, dtype=float)
    return MonteCarloResult(
        mean=float(array.mean()),
        median=float(np.median(array)),
        std_dev=float(array.std()),
        min=float(array.min()),
        max=float(array.max()),
        percentiles=percentiles(array),
        distribution=histogram(array, bucket_count),
        confidence_interval=mean_confidence_interval(array),
        iterations=len(array),
        requested_iterations=requested_iterations,
        cancelled=cancelled,
        calculation_time=elapsed_ms,
    )


def run_monte_carlo(
    facility: FacilityAttributes,
    settings: Settings,
    distributions: Sequence[DistributionConfig],
    iterations: int = 1000,
    seed: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
    cancel_token: Optional[CancellationToken] = None,
    progress_interval: int = 250,
    bucket_count: int = 20,
    valuator: Valuator = reconciled_value,
) -> MonteCarloResult:
    """
    Simulate the valuation under sampled parameters.

    Args:
        distributions: One sampling distribution per parameter path
        iterations: Number of iterations to run (at least 1)
        seed: Seed for a reproducible run
        progress: Called with percent complete every `progress_interval`
            iterations and once at the end
        cancel_token: Checked before every iteration

    Raises:
        ValueError: If iterations is below 1
        ValuationInvariantError: If a distribution names an unknown path
    """
    if iterations < 1:
        raise ValueError(f"iterations must be at least 1, got {iterations}")
    warn_if_invalid(settings)
    for config in distributions:
        get_path(facility, settings, config.parameter)

    rng = np.random.default_rng(seed)
    started = time.perf_counter()
    values: List[float] = []
    cancelled = False

    for i in range(iterations):
        if cancel_token is not None and cancel_token.cancelled:
            cancelled = True
            break
        samples = {config.parameter: config.sample(rng) for config in distributions}
        values.append(valuator(*apply_overrides(facility, settings, samples)))
        if progress is not None and (i + 1) % progress_interval == 0 and i + 1 < iterations:
            progress((i + 1) / iterations * 100)

    if progress is not None and not cancelled:
        progress(100.0)

    elapsed_ms = (time.perf_counter() - started) * 1000
    if cancelled:
        logger.info(f"Monte Carlo cancelled after {len(values)} of {iterations} iterations")
    else:
        logger.info(f"Monte Carlo completed {iterations} iterations in {elapsed_ms:.0f}ms")
    return summarize(values, iterations, cancelled, elapsed_ms, bucket_count)
