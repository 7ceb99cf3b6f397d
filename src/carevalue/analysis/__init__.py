# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Analysis on top of the valuation engine: tornado sensitivity, parameter
sweeps, scenario comparison and Monte Carlo simulation.
"""

from .jobs import SimulationJob, start_monte_carlo
from .monte_carlo import (
    CancellationToken,
    DistributionConfig,
    MonteCarloResult,
    run_monte_carlo,
)
from .paths import apply_overrides, get_path
from .sensitivity import (
    ScenarioComparison,
    SensitivityParameter,
    SensitivityResult,
    SweepPoint,
    SweepResult,
    compare_scenarios,
    modified_parameters,
    run_tornado,
    sweep_parameter,
)
from .statistics import HistogramBucket, PercentileSummary, histogram, percentiles

__all__ = [
    "CancellationToken",
    "DistributionConfig",
    "HistogramBucket",
    "MonteCarloResult",
    "PercentileSummary",
    "ScenarioComparison",
    "SensitivityParameter",
    "SensitivityResult",
    "SimulationJob",
    "SweepPoint",
    "SweepResult",
    "apply_overrides",
    "compare_scenarios",
    "get_path",
    "histogram",
    "modified_parameters",
    "percentiles",
    "run_monte_carlo",
    "run_tornado",
    "start_monte_carlo",
    "sweep_parameter",
]
