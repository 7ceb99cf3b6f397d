# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Replacement Cost - Depreciated Cost to Rebuild

value = beds x cost per bed x regional multiplier
        x (1 - functional obsolescence - economic obsolescence - age depreciation)

Age depreciation accrues linearly per year since construction and the
remaining-value factor is floored at zero.
"""

from __future__ import annotations

import logging

from ..core.primitives import ConfidenceEnum, FacilityAttributes, ValuationMethodEnum
from ..core.settings import Settings
from .base import (
    Adjustment,
    InputCoverage,
    MethodResult,
    ReplacementCostInputs,
    missing_notes,
    not_applicable,
    require_asset_type,
    require_non_negative_beds,
)
from .registry import register_method

logger = logging.getLogger(__name__)

LABEL = "Replacement Cost"
REQUIRED_INPUTS = ("beds", "building_age", "region")

# Older plants depart further from replacement cost
RELIABLE_AGE_YEARS = 30


@register_method(ValuationMethodEnum.REPLACEMENT_COST, LABEL)
def calculate_replacement_cost(facility: FacilityAttributes, settings: Settings) -> MethodResult:
    asset_type = require_asset_type(facility.asset_type)
    require_non_negative_beds(facility)
    method = ValuationMethodEnum.REPLACEMENT_COST

    coverage = InputCoverage.of(facility, REQUIRED_INPUTS)
    if not facility.beds:
        return not_applicable(method, LABEL, "bed count not provided")
    if not coverage.sufficient:
        return not_applicable(method, LABEL, f"insufficient data ({coverage.describe()})")

    cost_settings = settings.valuation.replacement_cost
    base = cost_settings.by_asset_type.for_type(asset_type)
    regional_multiplier = (
        cost_settings.regional_multipliers.adjustment_for(facility.region.value)
        if facility.region is not None
        else 1.0
    )
    building_age = facility.building_age if facility.building_age is not None else 0.0
    age_depreciation = base.depreciation_rate_annual * building_age
    total_depreciation = (
        base.functional_obsolescence + base.economic_obsolescence + age_depreciation
    )
    remaining = max(1.0 - total_depreciation, 0.0)

    replacement_cost = facility.beds * base.cost_per_bed * regional_multiplier
    value = replacement_cost * remaining
    logger.debug(f"{LABEL}: ${replacement_cost:,.0f} new, {remaining:.1%} remaining")

    adjustments = [
        Adjustment(description="Functional obsolescence", impact=-base.functional_obsolescence),
        Adjustment(description="Economic obsolescence", impact=-base.economic_obsolescence),
    ]
    if facility.building_age is not None:
        adjustments.append(
            Adjustment(
                description=f"Age depreciation: {building_age:.0f} years",
                impact=-age_depreciation,
            )
        )
    if facility.region is not None:
        adjustments.append(
            Adjustment(description=f"Region: {facility.region.value}", impact=regional_multiplier)
        )

    baseline = ConfidenceEnum.HIGH if building_age <= RELIABLE_AGE_YEARS else ConfidenceEnum.MEDIUM
    return MethodResult(
        method=method,
        label=LABEL,
        value=value,
        confidence=coverage.confidence(baseline),
        inputs=ReplacementCostInputs(
            beds=facility.beds,
            cost_per_bed=base.cost_per_bed,
            regional_multiplier=regional_multiplier,
            building_age=building_age,
            age_depreciation=age_depreciation,
            total_depreciation=total_depreciation,
        ),
        adjustments=tuple(adjustments),
        weight=settings.valuation.method_weights.for_type(asset_type).replacement_cost,
        notes=missing_notes(LABEL, coverage),
    )
