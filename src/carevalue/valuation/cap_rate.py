# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Direct Capitalization - Value = NOI / Adjusted Cap Rate

The asset-type base rate is adjusted additively by up to thirteen bracket
lookups, a regional adjustment and any state override, then clamped to the
intersection of the asset-type and global cap rate limits.
"""

from __future__ import annotations

import logging

from ..core.primitives import FacilityAttributes, ValuationInvariantError, ValuationMethodEnum
from ..core.settings import CapRateBaseSettings, Settings, merge_model
from .base import (
    Adjustment,
    CapRateInputs,
    InputCoverage,
    MethodResult,
    clamp,
    method_bounds,
    missing_notes,
    not_applicable,
    require_asset_type,
    require_non_negative_beds,
)
from .brackets import (
    ACUITY_BRACKETS,
    AGE_BRACKETS,
    COMPETITION_BRACKETS,
    MEDICAID_BRACKETS,
    MEDICARE_BRACKETS,
    OCCUPANCY_BRACKETS,
    PRIVATE_PAY_BRACKETS,
    QUALITY_BRACKETS,
    RENOVATION_BRACKETS,
    SIZE_BRACKETS,
    AdjustmentStep,
    apply_steps,
    by_brackets,
    by_enum,
    by_payer_share,
    regulatory_bracket,
)
from .registry import register_method

logger = logging.getLogger(__name__)

LABEL = "Cap Rate"
REQUIRED_INPUTS = ("noi", "beds", "occupancy_rate", "quality_rating")

CAP_RATE_STEPS = (
    AdjustmentStep("Quality", "quality_rating", "quality_adjustments",
                   by_brackets("quality_rating", QUALITY_BRACKETS)),
    AdjustmentStep("Size", "beds", "size_adjustments", by_brackets("beds", SIZE_BRACKETS)),
    AdjustmentStep("Age", "building_age", "age_adjustments", by_brackets("building_age", AGE_BRACKETS)),
    AdjustmentStep("Occupancy", "occupancy_rate", "occupancy_adjustments",
                   by_brackets("occupancy_rate", OCCUPANCY_BRACKETS)),
    AdjustmentStep("Medicare mix", "payer_mix", "payer_mix_adjustments",
                   by_payer_share("medicare", MEDICARE_BRACKETS)),
    AdjustmentStep("Medicaid mix", "payer_mix", "payer_mix_adjustments",
                   by_payer_share("medicaid", MEDICAID_BRACKETS)),
    AdjustmentStep("Private pay mix", "payer_mix", "payer_mix_adjustments",
                   by_payer_share("private_pay", PRIVATE_PAY_BRACKETS)),
    AdjustmentStep("Acuity", "acuity_index", "acuity_adjustments",
                   by_brackets("acuity_index", ACUITY_BRACKETS)),
    AdjustmentStep("Location", "location_type", "location_adjustments", by_enum("location_type")),
    AdjustmentStep("Ownership", "ownership", "ownership_adjustments", by_enum("ownership")),
    AdjustmentStep("Chain", "chain", "chain_adjustments", by_enum("chain")),
    AdjustmentStep("Market", "market_condition", "market_conditions", by_enum("market_condition")),
    AdjustmentStep("Competition", "market_occupancy", "competition_adjustments",
                   by_brackets("market_occupancy", COMPETITION_BRACKETS)),
    AdjustmentStep("Renovation", "years_since_renovation", "renovation_adjustments",
                   by_brackets("years_since_renovation", RENOVATION_BRACKETS)),
    AdjustmentStep("Regulatory", "deficiency_count", "regulatory_adjustments", regulatory_bracket),
)


def resolve_cap_rate_settings(facility: FacilityAttributes, settings: Settings) -> CapRateBaseSettings:
    """Asset-type cap rate settings with the facility's state override merged in."""
    cap_rate = settings.valuation.cap_rate
    base = cap_rate.by_asset_type.for_type(facility.asset_type)
    override = cap_rate.state_overrides.get(facility.state) if facility.state else None
    if override:
        logger.debug(f"Applying {facility.state} cap rate override")
        base = merge_model(base, override)
    return base


@register_method(ValuationMethodEnum.CAP_RATE, LABEL)
def calculate_cap_rate(facility: FacilityAttributes, settings: Settings) -> MethodResult:
    """
    Value the facility by direct capitalization of NOI.

    Returns a not-applicable result when NOI is missing or not positive, or
    when fewer than half of the required inputs are present.
    """
    asset_type = require_asset_type(facility.asset_type)
    require_non_negative_beds(facility)
    method = ValuationMethodEnum.CAP_RATE

    coverage = InputCoverage.of(facility, REQUIRED_INPUTS)
    if facility.noi is None:
        return not_applicable(method, LABEL, "NOI not provided")
    if facility.noi <= 0:
        return not_applicable(method, LABEL, "NOI is not positive")
    if not coverage.sufficient:
        return not_applicable(method, LABEL, f"insufficient data ({coverage.describe()})")

    cap_rate_settings = settings.valuation.cap_rate
    base = resolve_cap_rate_settings(facility, settings)
    outcome = apply_steps(CAP_RATE_STEPS, facility, base)
    if facility.region is not None:
        outcome.adjustments.append(
            Adjustment(
                description=f"Region: {facility.region.value}",
                impact=cap_rate_settings.regional_adjustments.adjustment_for(facility.region.value),
            )
        )

    total_adjustment = sum(outcome.impacts)
    lower, upper = method_bounds(
        cap_rate_settings.limits.for_type(asset_type),
        cap_rate_settings.global_min_cap_rate,
        cap_rate_settings.global_max_cap_rate,
    )
    adjusted_rate = clamp(base.base_rate + total_adjustment, lower, upper)
    if adjusted_rate <= 0:
        raise ValuationInvariantError(
            f"Adjusted cap rate must be positive, got {adjusted_rate:.4f}; check cap rate limits"
        )

    value = facility.noi / adjusted_rate
    logger.debug(f"{LABEL}: {base.base_rate:.4f} base -> {adjusted_rate:.4f} adjusted, value {value:,.0f}")

    return MethodResult(
        method=method,
        label=LABEL,
        value=value,
        confidence=coverage.confidence(),
        inputs=CapRateInputs(
            noi=facility.noi,
            base_cap_rate=base.base_rate,
            total_adjustment=total_adjustment,
            adjusted_cap_rate=adjusted_rate,
        ),
        adjustments=tuple(outcome.adjustments),
        weight=settings.valuation.method_weights.for_type(asset_type).cap_rate,
        notes=missing_notes(LABEL, coverage),
    )
