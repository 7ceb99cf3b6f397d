# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Method Results and Shared Calculator Helpers

Every valuation method returns a `MethodResult` whose `inputs` carry a typed,
per-method record discriminated by `kind`. Helpers here implement the rules
shared by all calculators: clamping, required-input coverage and the
not-applicable result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Literal, Optional, Sequence, Tuple, Union

from pydantic import Field

from ..core.primitives import (
    AssetTypeEnum,
    ConfidenceEnum,
    FacilityAttributes,
    Model,
    ValuationInvariantError,
    ValuationMethodEnum,
)
from ..core.settings import Bounds

logger = logging.getLogger(__name__)


class Adjustment(Model):
    """One applied adjustment: an additive rate delta or a multiplicative factor."""

    description: str
    impact: float


# === TYPED METHOD INPUTS ===


class CapRateInputs(Model):
    kind: Literal["cap_rate"] = "cap_rate"
    noi: float
    base_cap_rate: float
    total_adjustment: float
    adjusted_cap_rate: float


class PricePerBedInputs(Model):
    kind: Literal["price_per_bed"] = "price_per_bed"
    beds: int
    base_price: float
    adjusted_price_per_bed: float
    regional_multiplier: float


class DCFInputs(Model):
    kind: Literal["dcf"] = "dcf"
    noi: float
    revenue: float
    revenue_estimated: bool
    discount_rate: float
    projection_years: int
    terminal_value: float
    present_value_cash_flows: float
    present_value_terminal: float
    implied_irr: Optional[float] = None


class NOIMultipleInputs(Model):
    kind: Literal["noi_multiple"] = "noi_multiple"
    noi: float
    base_multiple: float
    adjusted_multiple: float
    market_strength: Optional[str] = None


class ComparableSalesInputs(Model):
    kind: Literal["comparable_sales"] = "comparable_sales"
    comparables_used: int
    weighted_price_per_bed: float
    coefficient_of_variation: float
    average_gross_adjustment: float


class ReplacementCostInputs(Model):
    kind: Literal["replacement_cost"] = "replacement_cost"
    beds: int
    cost_per_bed: float
    regional_multiplier: float
    building_age: float
    age_depreciation: float
    total_depreciation: float


MethodInputs = Annotated[
    Union[
        CapRateInputs,
        PricePerBedInputs,
        DCFInputs,
        NOIMultipleInputs,
        ComparableSalesInputs,
        ReplacementCostInputs,
    ],
    Field(discriminator="kind"),
]


class MethodResult(Model):
    """
    Output of one valuation method.

    `weight` is the configured weight for the facility's asset type as returned
    by a calculator, and the effective (renormalized, confidence-adjusted)
    weight once the result has passed through reconciliation. Methods that are
    not applicable carry `value == 0` and `weight == 0`.
    """

    method: ValuationMethodEnum
    label: str
    value: float = 0.0
    confidence: ConfidenceEnum = ConfidenceEnum.LOW
    inputs: Optional[MethodInputs] = None
    adjustments: Tuple[Adjustment, ...] = ()
    weight: float = 0.0
    applicable: bool = True
    notes: Tuple[str, ...] = ()


# === SHARED RULES ===


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp `value` into `[lower, upper]`."""
    return min(max(value, lower), upper)


def method_bounds(limits: Bounds, global_min: float, global_max: float) -> Tuple[float, float]:
    """Intersect an asset-type limit with the global limit."""
    return max(limits.min, global_min), min(limits.max, global_max)


def require_asset_type(asset_type) -> AssetTypeEnum:
    try:
        return AssetTypeEnum(asset_type)
    except ValueError as e:
        raise ValuationInvariantError(
            f"Asset type must be one of SNF, ALF or ILF, got {asset_type!r}"
        ) from e


def require_non_negative_beds(facility: FacilityAttributes) -> None:
    if facility.beds is not None and facility.beds < 0:
        raise ValuationInvariantError(f"Bed count cannot be negative, got {facility.beds}")


@dataclass(frozen=True)
class InputCoverage:
    """Which of a method's required attributes the facility provides."""

    present: Tuple[str, ...]
    missing: Tuple[str, ...]

    @classmethod
    def of(cls, facility: FacilityAttributes, required: Sequence[str]) -> "InputCoverage":
        present = tuple(name for name in required if facility.has(name))
        missing = tuple(name for name in required if name not in present)
        return cls(present=present, missing=missing)

    @property
    def total(self) -> int:
        return len(self.present) + len(self.missing)

    @property
    def sufficient(self) -> bool:
        """At least half of the required attributes are present."""
        return 2 * len(self.present) >= self.total

    def confidence(self, baseline: ConfidenceEnum = ConfidenceEnum.HIGH) -> ConfidenceEnum:
        """Baseline confidence, one tier lower when any required attribute is missing."""
        return baseline.downgrade() if self.missing else baseline

    def describe(self) -> str:
        return f"{len(self.present)} of {self.total} required inputs"


def not_applicable(
    method: ValuationMethodEnum, label: str, reason: str
) -> MethodResult:
    """Result for a method that cannot be computed for this facility."""
    logger.debug(f"{label} not applicable: {reason}")
    return MethodResult(
        method=method,
        label=label,
        value=0.0,
        confidence=ConfidenceEnum.LOW,
        weight=0.0,
        applicable=False,
        notes=(f"{label} not applicable: {reason}",),
    )


def missing_notes(label: str, coverage: InputCoverage) -> Tuple[str, ...]:
    if not coverage.missing:
        return ()
    return (f"{label} missing {', '.join(coverage.missing)}",)
