# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Price Per Bed - Value = Beds x Adjusted Price Per Bed

Size and age brackets add per-bed dollar amounts to the base price; quality,
condition, construction, location quality and licensure apply multipliers,
followed by the regional multiplier and the price-per-bed clamp.
"""

from __future__ import annotations

import logging
import math

from ..core.primitives import FacilityAttributes, ValuationMethodEnum
from ..core.settings import PricePerBedBaseSettings, Settings, merge_model
from .base import (
    Adjustment,
    InputCoverage,
    MethodResult,
    PricePerBedInputs,
    clamp,
    method_bounds,
    missing_notes,
    not_applicable,
    require_asset_type,
    require_non_negative_beds,
)
from .brackets import (
    AGE_BRACKETS,
    QUALITY_BRACKETS,
    SIZE_BRACKETS,
    AdjustmentStep,
    apply_steps,
    by_brackets,
    by_enum,
)
from .registry import register_method

logger = logging.getLogger(__name__)

LABEL = "Price Per Bed"
REQUIRED_INPUTS = ("beds", "quality_rating", "building_age", "condition")

DOLLAR_STEPS = (
    AdjustmentStep("Size", "beds", "size_adjustments", by_brackets("beds", SIZE_BRACKETS)),
    AdjustmentStep("Age", "building_age", "age_adjustments", by_brackets("building_age", AGE_BRACKETS)),
)

MULTIPLIER_STEPS = (
    AdjustmentStep("Quality", "quality_rating", "quality_multipliers",
                   by_brackets("quality_rating", QUALITY_BRACKETS)),
    AdjustmentStep("Condition", "condition", "condition_multipliers", by_enum("condition")),
    AdjustmentStep("Construction", "construction_status", "construction_adjustments",
                   by_enum("construction_status")),
    AdjustmentStep("Location quality", "location_quality", "location_adjustments",
                   by_enum("location_quality")),
    AdjustmentStep("Licensure", "licensure", "licensure_adjustments", by_enum("licensure")),
)


def resolve_price_settings(facility: FacilityAttributes, settings: Settings) -> PricePerBedBaseSettings:
    price_settings = settings.valuation.price_per_bed
    base = price_settings.by_asset_type.for_type(facility.asset_type)
    override = price_settings.state_overrides.get(facility.state) if facility.state else None
    if override:
        base = merge_model(base, override)
    return base


@register_method(ValuationMethodEnum.PRICE_PER_BED, LABEL)
def calculate_price_per_bed(facility: FacilityAttributes, settings: Settings) -> MethodResult:
    asset_type = require_asset_type(facility.asset_type)
    require_non_negative_beds(facility)
    method = ValuationMethodEnum.PRICE_PER_BED

    coverage = InputCoverage.of(facility, REQUIRED_INPUTS)
    if not facility.beds:
        return not_applicable(method, LABEL, "bed count not provided")
    if not coverage.sufficient:
        return not_applicable(method, LABEL, f"insufficient data ({coverage.describe()})")

    price_settings = settings.valuation.price_per_bed
    base = resolve_price_settings(facility, settings)

    dollars = apply_steps(DOLLAR_STEPS, facility, base)
    multipliers = apply_steps(MULTIPLIER_STEPS, facility, base)
    regional_multiplier = 1.0
    if facility.region is not None:
        regional_multiplier = price_settings.regional_multipliers.adjustment_for(facility.region.value)
        multipliers.adjustments.append(
            Adjustment(description=f"Region: {facility.region.value}", impact=regional_multiplier)
        )

    adjusted_base = base.base_price + sum(dollars.impacts)
    lower, upper = method_bounds(
        price_settings.limits.for_type(asset_type),
        price_settings.global_min_price_per_bed,
        price_settings.global_max_price_per_bed,
    )
    price = clamp(adjusted_base * math.prod(multipliers.impacts), lower, upper)
    value = facility.beds * price
    logger.debug(f"{LABEL}: ${price:,.0f}/bed x {facility.beds} beds = ${value:,.0f}")

    return MethodResult(
        method=method,
        label=LABEL,
        value=value,
        confidence=coverage.confidence(),
        inputs=PricePerBedInputs(
            beds=facility.beds,
            base_price=base.base_price,
            adjusted_price_per_bed=price,
            regional_multiplier=regional_multiplier,
        ),
        adjustments=tuple(dollars.adjustments + multipliers.adjustments),
        weight=settings.valuation.method_weights.for_type(asset_type).price_per_bed,
        notes=missing_notes(LABEL, coverage),
    )
