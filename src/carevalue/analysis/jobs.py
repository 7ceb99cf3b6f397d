# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Background execution of Monte Carlo runs.

`start_monte_carlo` returns immediately with a `SimulationJob` that reports
progress, accepts cancellation, and yields the result when done.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Sequence

from ..core.primitives import FacilityAttributes
from ..core.settings import Settings
from .monte_carlo import CancellationToken, DistributionConfig, MonteCarloResult, run_monte_carlo
from .sensitivity import Valuator, reconciled_value


class SimulationJob:
    """Handle to a simulation running on a worker thread."""

    def __init__(self, executor: ThreadPoolExecutor) -> None:
        self._executor = executor
        self._token = CancellationToken()
        self._lock = threading.Lock()
        self._progress = 0.0
        self._future: Optional[Future] = None

    def _report(self, percent: float) -> None:
        with self._lock:
            self._progress = percent

    @property
    def progress(self) -> float:
        """Percent complete as last reported by the simulation."""
        with self._lock:
            return self._progress

    @property
    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def cancel(self) -> None:
        """Ask the simulation to stop; `result()` then returns partial statistics."""
        self._token.cancel()

    def result(self, timeout: Optional[float] = None) -> MonteCarloResult:
        """Block until the run finishes and return its result (re-raises its errors)."""
        return self._future.result(timeout=timeout)


def start_monte_carlo(
    facility: FacilityAttributes,
    settings: Settings,
    distributions: Sequence[DistributionConfig],
    iterations: int = 1000,
    seed: Optional[int] = None,
    progress_interval: int = 250,
    valuator: Valuator = reconciled_value,
) -> SimulationJob:
    """Run `run_monte_carlo` on a dedicated worker thread."""
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="carevalue-monte-carlo")
    job = SimulationJob(executor)
    job._future = executor.submit(
        run_monte_carlo,
        facility,
        settings,
        distributions,
        iterations=iterations,
        seed=seed,
        progress=job._report,
        cancel_token=job._token,
        progress_interval=progress_interval,
        valuator=valuator,
    )
    job._future.add_done_callback(lambda _: executor.shutdown(wait=False))
    return job
