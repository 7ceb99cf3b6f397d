# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Sensitivity Analysis

Tornado analysis varies each parameter to its minimum and maximum while every
other parameter stays at its current value, and ranks parameters by the
spread of the reconciled value. Locked parameters are held at their current
value and not swept.

A valuator callable maps (facility, settings) to a value. It defaults to the
reconciled value from `value_facility`, and can be swapped for any other
output of interest (a single method's value, value per bed, ...).
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import numpy as np
from pydantic import Field, model_validator

from ..core.primitives import FacilityAttributes, Model
from ..core.settings import Settings, validate_settings
from ..valuation import value_facility
from .paths import apply_overrides

logger = logging.getLogger(__name__)

Valuator = Callable[[FacilityAttributes, Settings], float]


def reconciled_value(facility: FacilityAttributes, settings: Settings) -> float:
    return value_facility(facility, settings).reconciled_value


class SensitivityParameter(Model):
    """
    A tunable input addressed by a dotted path.

    Attributes:
        id: Stable identifier used for locking
        path: ``facility.<field>`` or ``settings.<path>``
        value: Current value held while other parameters are swept
        default_value: Reference value used by `is_modified`
        min: Low end of the sweep
        max: High end of the sweep
        step: Granularity of the parameter; also the modification tolerance
    """

    id: str
    name: str
    path: str
    value: float
    default_value: float
    min: float
    max: float
    step: float = Field(default=0.01, gt=0)
    unit: str = ""
    description: Optional[str] = None

    @model_validator(mode="after")
    def _validate_range(self) -> "SensitivityParameter":
        if self.min > self.max:
            raise ValueError(f"Parameter {self.id}: min ({self.min}) exceeds max ({self.max})")
        return self

    @property
    def is_modified(self) -> bool:
        """True when the current value differs from the default by more than half a step."""
        return abs(self.value - self.default_value) > self.step / 2


class SensitivityResult(Model):
    parameter: str
    name: str
    low_value: float
    high_value: float
    range: float
    baseline_value: float


class SweepPoint(Model):
    input_value: float
    value: float


class SweepResult(Model):
    """Value across evenly spaced points of one parameter's range."""

    parameter: str
    points: List[SweepPoint]
    baseline_input: float
    baseline_value: float
    elasticity: Optional[float] = Field(
        default=None,
        description="Percent change in value per percent change in input across the sweep",
    )


class ScenarioComparison(Model):
    name: str
    value: float
    change: float
    change_percent: Optional[float] = None


def warn_if_invalid(settings: Settings) -> None:
    check = validate_settings(settings)
    if not check.valid:
        logger.warning(f"Running analysis with invalid settings: {'; '.join(check.errors)}")


def current_values(parameters: Iterable[SensitivityParameter]) -> Dict[str, float]:
    return {p.path: p.value for p in parameters}


def run_tornado(
    facility: FacilityAttributes,
    settings: Settings,
    parameters: Sequence[SensitivityParameter],
    locked_ids: Iterable[str] = (),
    valuator: Valuator = reconciled_value,
) -> List[SensitivityResult]:
    """
    One-at-a-time sensitivity of the valuation to each unlocked parameter.

    Returns:
        Results sorted by descending range (high_value - low_value)
    """
    warn_if_invalid(settings)
    locked = set(locked_ids)
    base_facility, base_settings = apply_overrides(facility, settings, current_values(parameters))
    baseline = valuator(base_facility, base_settings)

    results: List[SensitivityResult] = []
    for parameter in parameters:
        if parameter.id in locked:
            continue
        low = valuator(*apply_overrides(base_facility, base_settings, {parameter.path: parameter.min}))
        high = valuator(*apply_overrides(base_facility, base_settings, {parameter.path: parameter.max}))
        results.append(
            SensitivityResult(
                parameter=parameter.id,
                name=parameter.name,
                low_value=low,
                high_value=high,
                range=abs(high - low),
                baseline_value=baseline,
            )
        )

    results.sort(key=lambda r: r.range, reverse=True)
    logger.info(f"Tornado analysis over {len(results)} parameters ({len(locked)} locked)")
    return results


def sweep_parameter(
    facility: FacilityAttributes,
    settings: Settings,
    parameter: SensitivityParameter,
    points: Optional[int] = 11,
    others: Sequence[SensitivityParameter] = (),
    valuator: Valuator = reconciled_value,
) -> SweepResult:
    """
    Evaluate the valuation at evenly spaced points across a parameter's range.

    With `points=None` the grid walks from min to max in the parameter's
    step (max is always included). Other parameters are held at their
    current values. Elasticity is the arc elasticity between the two ends of
    the sweep, or None when either end has a zero input or value.
    """
    if points is None:
        grid = np.arange(parameter.min, parameter.max, parameter.step)
        grid = np.append(grid[~np.isclose(grid, parameter.max)], parameter.max)
    elif points < 2:
        raise ValueError(f"points must be at least 2, got {points}")
    else:
        grid = np.linspace(parameter.min, parameter.max, points)
    base_facility, base_settings = apply_overrides(
        facility, settings, {**current_values(others), parameter.path: parameter.value}
    )
    baseline = valuator(base_facility, base_settings)

    sweep = [
        SweepPoint(
            input_value=float(x),
            value=valuator(*apply_overrides(base_facility, base_settings, {parameter.path: float(x)})),
        )
        for x in grid
    ]

    first, last = sweep[0], sweep[-1]
    elasticity = None
    input_mid = (first.input_value + last.input_value) / 2
    value_mid = (first.value + last.value) / 2
    if input_mid and value_mid and last.input_value != first.input_value:
        elasticity = ((last.value - first.value) / value_mid) / (
            (last.input_value - first.input_value) / input_mid
        )

    return SweepResult(
        parameter=parameter.id,
        points=sweep,
        baseline_input=parameter.value,
        baseline_value=baseline,
        elasticity=elasticity,
    )


def compare_scenarios(
    facility: FacilityAttributes,
    settings: Settings,
    scenarios: Mapping[str, Mapping[str, float]],
    valuator: Valuator = reconciled_value,
) -> List[ScenarioComparison]:
    """
    Value named override sets against the unmodified baseline.

    Args:
        scenarios: Scenario name -> {path: value}

    Returns:
        One comparison per scenario, in the given order
    """
    baseline = valuator(facility, settings)
    comparisons = []
    for name, overrides in scenarios.items():
        value = valuator(*apply_overrides(facility, settings, overrides))
        comparisons.append(
            ScenarioComparison(
                name=name,
                value=value,
                change=value - baseline,
                change_percent=(value - baseline) / baseline if baseline else None,
            )
        )
    return comparisons


def modified_parameters(parameters: Iterable[SensitivityParameter]) -> List[SensitivityParameter]:
    return [p for p in parameters if p.is_modified]


__all__ = [
    "ScenarioComparison",
    "SensitivityParameter",
    "SensitivityResult",
    "SweepPoint",
    "SweepResult",
    "compare_scenarios",
    "current_values",
    "modified_parameters",
    "reconciled_value",
    "run_tornado",
    "sweep_parameter",
    "warn_if_invalid",
]
