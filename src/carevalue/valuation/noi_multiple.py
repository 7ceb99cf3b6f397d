# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
NOI Multiple - Value = NOI x Adjusted Multiple
"""

from __future__ import annotations

import logging
from typing import Optional

from ..core.primitives import FacilityAttributes, ValuationMethodEnum
from ..core.settings import Settings
from .base import (
    Adjustment,
    InputCoverage,
    MethodResult,
    NOIMultipleInputs,
    clamp,
    method_bounds,
    missing_notes,
    not_applicable,
    require_asset_type,
    require_non_negative_beds,
)
from .brackets import (
    GROWTH_BRACKETS,
    QUALITY_BRACKETS,
    STABILITY_BRACKETS,
    AdjustmentStep,
    apply_steps,
    by_brackets,
    by_enum,
)
from .registry import register_method

logger = logging.getLogger(__name__)

LABEL = "NOI Multiple"
REQUIRED_INPUTS = ("noi", "quality_rating", "noi_growth_rate", "noi_variance")

NOI_MULTIPLE_STEPS = (
    AdjustmentStep("Quality", "quality_rating", "quality_adjustments",
                   by_brackets("quality_rating", QUALITY_BRACKETS)),
    AdjustmentStep("NOI growth", "noi_growth_rate", "growth_adjustments",
                   by_brackets("noi_growth_rate", GROWTH_BRACKETS)),
    AdjustmentStep("NOI stability", "noi_variance", "stability_adjustments",
                   by_brackets("noi_variance", STABILITY_BRACKETS)),
    AdjustmentStep("Market position", "market_position", "market_position_adjustments",
                   by_enum("market_position")),
)


def market_strength(facility: FacilityAttributes) -> Optional[str]:
    """
    Score market strength from market occupancy, demand growth and supply growth.

    Returns "strong" (score >= 4), "average" (>= 2) or "weak", or None when
    market occupancy is unknown.
    """
    if facility.market_occupancy is None:
        return None
    score = 0
    if facility.market_occupancy > 0.88:
        score += 2
    elif facility.market_occupancy > 0.82:
        score += 1
    if facility.demand_growth is not None:
        if facility.demand_growth > 0.03:
            score += 2
        elif facility.demand_growth > 0.01:
            score += 1
    if facility.supply_growth is not None:
        if facility.supply_growth < 0.01:
            score += 1
        elif facility.supply_growth > 0.03:
            score -= 1
    if score >= 4:
        return "strong"
    if score >= 2:
        return "average"
    return "weak"


@register_method(ValuationMethodEnum.NOI_MULTIPLE, LABEL)
def calculate_noi_multiple(facility: FacilityAttributes, settings: Settings) -> MethodResult:
    asset_type = require_asset_type(facility.asset_type)
    require_non_negative_beds(facility)
    method = ValuationMethodEnum.NOI_MULTIPLE

    coverage = InputCoverage.of(facility, REQUIRED_INPUTS)
    if facility.noi is None or facility.noi <= 0:
        return not_applicable(method, LABEL, "positive NOI not provided")
    if not coverage.sufficient:
        return not_applicable(method, LABEL, f"insufficient data ({coverage.describe()})")

    multiple_settings = settings.valuation.noi_multiple
    base = multiple_settings.by_asset_type.for_type(asset_type)
    outcome = apply_steps(NOI_MULTIPLE_STEPS, facility, base)

    strength = market_strength(facility)
    if strength is not None:
        outcome.adjustments.append(
            Adjustment(
                description=f"Market strength: {strength}",
                impact=base.market_strength_adjustments.adjustment_for(strength),
            )
        )

    lower, upper = method_bounds(
        multiple_settings.limits.for_type(asset_type),
        multiple_settings.min_multiple,
        multiple_settings.max_multiple,
    )
    multiple = clamp(base.base_multiple + sum(outcome.impacts), lower, upper)
    value = facility.noi * multiple
    logger.debug(f"{LABEL}: {multiple:.2f}x NOI = ${value:,.0f}")

    return MethodResult(
        method=method,
        label=LABEL,
        value=value,
        confidence=coverage.confidence(),
        inputs=NOIMultipleInputs(
            noi=facility.noi,
            base_multiple=base.base_multiple,
            adjusted_multiple=multiple,
            market_strength=strength,
        ),
        adjustments=tuple(outcome.adjustments),
        weight=settings.valuation.method_weights.for_type(asset_type).noi_multiple,
        notes=missing_notes(LABEL, coverage),
    )
