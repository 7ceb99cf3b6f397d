# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Comparable Sales - Weighted Average of Adjusted Comparable Prices

Comparable transactions are supplied with the facility. Those within the
configured radius, recency and bed-count variance are ranked by weighted
similarity; each selected sale is adjusted for differences in age, occupancy,
quality, payer mix and size (each factor capped, the net capped by
`max_adjustments.total`) and the subject is valued at the similarity-weighted
adjusted price per bed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pandas as pd

from ..core.primitives import (
    ComparableSale,
    ConfidenceEnum,
    FacilityAttributes,
    ValuationMethodEnum,
)
from ..core.settings import ComparableSalesSettings, Settings
from .base import (
    Adjustment,
    ComparableSalesInputs,
    InputCoverage,
    MethodResult,
    clamp,
    missing_notes,
    not_applicable,
    require_asset_type,
    require_non_negative_beds,
)
from .registry import register_method

logger = logging.getLogger(__name__)

LABEL = "Comparable Sales"
REQUIRED_INPUTS = ("beds", "comparables", "quality_rating", "occupancy_rate")

NEUTRAL_MATCH = 0.5  # similarity credited when either side lacks the attribute


@dataclass(frozen=True)
class AdjustedComparable:
    sale: ComparableSale
    similarity: float
    weight: float
    adjusted_price_per_bed: float
    gross_adjustment: float
    adjustments: Tuple[Adjustment, ...]


def _closeness(difference: Optional[float], scale: float) -> float:
    if difference is None or scale <= 0:
        return NEUTRAL_MATCH
    return max(1.0 - abs(difference) / scale, 0.0)


def _difference(subject: Optional[float], comparable: Optional[float]) -> Optional[float]:
    if subject is None or comparable is None:
        return None
    return subject - comparable


def _subject_medicaid(facility: FacilityAttributes) -> Optional[float]:
    return facility.payer_mix.medicaid if facility.payer_mix is not None else None


def similarity_score(
    facility: FacilityAttributes, sale: ComparableSale, settings: ComparableSalesSettings
) -> float:
    """Weighted similarity in [0, 1] between the subject and one comparable sale."""
    factors = settings.weighting_factors
    criteria = settings.selection_criteria
    beds = facility.beds or 0
    scores = {
        "geographic_proximity": _closeness(sale.distance_miles, criteria.max_miles_radius),
        "bed_count_match": _closeness(
            (sale.beds - beds) / beds if beds else None, criteria.bed_count_variance_percent
        ),
        "asset_type_match": 1.0 if sale.asset_type == facility.asset_type else 0.0,
        "quality_rating_match": _closeness(_difference(facility.quality_rating, sale.quality_rating), 5.0),
        "sale_recency": _closeness(sale.months_since_sale, criteria.max_months_old),
        "payer_mix_match": _closeness(_difference(_subject_medicaid(facility), sale.medicaid_share), 1.0),
        "occupancy_match": _closeness(_difference(facility.occupancy_rate, sale.occupancy_rate), 0.20),
        "age_match": _closeness(_difference(facility.building_age, sale.building_age), 20.0),
        "condition_match": NEUTRAL_MATCH,
        "ownership_type_match": NEUTRAL_MATCH,
    }
    total_weight = factors.total
    if total_weight <= 0:
        return 0.0
    return sum(getattr(factors, name) * score for name, score in scores.items()) / total_weight


def select_comparables(
    facility: FacilityAttributes, settings: ComparableSalesSettings
) -> List[ComparableSale]:
    """Comparables inside the selection criteria, most similar first, capped at `max_comparables`."""
    criteria = settings.selection_criteria
    beds = facility.beds or 0
    selected = []
    for sale in facility.comparables:
        if criteria.require_same_asset_type and sale.asset_type != facility.asset_type:
            continue
        if criteria.require_same_state and facility.state and sale.state != facility.state:
            continue
        if sale.distance_miles > criteria.max_miles_radius:
            continue
        if sale.months_since_sale > criteria.max_months_old:
            continue
        if beds and abs(sale.beds - beds) / beds > criteria.bed_count_variance_percent:
            continue
        selected.append(sale)
    selected.sort(key=lambda sale: similarity_score(facility, sale, settings), reverse=True)
    return selected[: criteria.max_comparables]


def adjust_comparable(
    facility: FacilityAttributes, sale: ComparableSale, settings: ComparableSalesSettings
) -> AdjustedComparable:
    """
    Adjust one comparable's price per bed toward the subject.

    Positive adjustments mean the subject is superior on that factor. Distance
    does not move the price; it discounts the comparable's weight and counts
    toward its gross adjustment.
    """
    rates = settings.adjustment_rates
    caps = settings.max_adjustments
    candidates = []

    age_gap = _difference(sale.building_age, facility.building_age)
    if age_gap is not None:
        candidates.append(("Age", age_gap * rates.per_year_age, caps.age))
    occupancy_gap = _difference(facility.occupancy_rate, sale.occupancy_rate)
    if occupancy_gap is not None:
        candidates.append(("Occupancy", occupancy_gap * 100 * rates.per_percent_occupancy, caps.occupancy))
    quality_gap = _difference(facility.quality_rating, sale.quality_rating)
    if quality_gap is not None:
        candidates.append(("Quality", quality_gap * rates.per_star_rating, caps.quality))
    medicaid_gap = _difference(sale.medicaid_share, _subject_medicaid(facility))
    if medicaid_gap is not None:
        candidates.append(("Payer mix", medicaid_gap * 100 * rates.per_percent_payer_mix, caps.payer_mix))
    if facility.beds:
        candidates.append(("Size", (facility.beds - sale.beds) * rates.per_bed_difference, caps.size))

    adjustments = tuple(
        Adjustment(description=f"{sale.sale_id} {name}", impact=clamp(raw, -cap, cap))
        for name, raw, cap in candidates
    )
    location = min(sale.distance_miles * rates.per_mile_distance, caps.location)
    net = clamp(sum(a.impact for a in adjustments), -caps.total, caps.total)
    gross = sum(abs(a.impact) for a in adjustments) + location

    similarity = similarity_score(facility, sale, settings)
    return AdjustedComparable(
        sale=sale,
        similarity=similarity,
        weight=similarity * (1.0 - location),
        adjusted_price_per_bed=sale.price_per_bed * (1.0 + net),
        gross_adjustment=gross,
        adjustments=adjustments,
    )


def comparable_confidence(
    count: int,
    coefficient_of_variation: float,
    average_gross_adjustment: float,
    settings: ComparableSalesSettings,
) -> ConfidenceEnum:
    """
    Confidence from comparable count, price dispersion and adjustment magnitude.

    Half of the score rewards reaching the ideal comparable count; the rest is
    split between low dispersion (CV under 25%) and light adjustment relative
    to the total adjustment cap.
    """
    criteria = settings.selection_criteria
    if count < criteria.min_comparables:
        return ConfidenceEnum.LOW
    count_score = min(count / max(criteria.ideal_comparables, 1), 1.0)
    dispersion_score = max(1.0 - coefficient_of_variation / 0.25, 0.0)
    adjustment_cap = settings.max_adjustments.total
    adjustment_score = (
        max(1.0 - average_gross_adjustment / adjustment_cap, 0.0) if adjustment_cap > 0 else 0.0
    )
    score = 0.5 * count_score + 0.25 * dispersion_score + 0.25 * adjustment_score

    thresholds = settings.confidence_thresholds
    if score >= thresholds.high_confidence:
        return ConfidenceEnum.HIGH
    if score >= thresholds.medium_confidence:
        return ConfidenceEnum.MEDIUM
    return ConfidenceEnum.LOW


@register_method(ValuationMethodEnum.COMPARABLE_SALES, LABEL)
def calculate_comparable_sales(facility: FacilityAttributes, settings: Settings) -> MethodResult:
    asset_type = require_asset_type(facility.asset_type)
    require_non_negative_beds(facility)
    method = ValuationMethodEnum.COMPARABLE_SALES

    coverage = InputCoverage.of(facility, REQUIRED_INPUTS)
    if not facility.beds or not facility.comparables:
        return not_applicable(method, LABEL, "no bed count or comparable sales provided")
    if not coverage.sufficient:
        return not_applicable(method, LABEL, f"insufficient data ({coverage.describe()})")

    comp_settings = settings.valuation.comparable_sales
    selected = select_comparables(facility, comp_settings)
    if not selected:
        return not_applicable(method, LABEL, "no comparable sales within selection criteria")

    adjusted = [adjust_comparable(facility, sale, comp_settings) for sale in selected]
    prices = pd.Series([comp.adjusted_price_per_bed for comp in adjusted])
    weights = pd.Series([comp.weight for comp in adjusted])
    if weights.sum() <= 0:
        weights = pd.Series([1.0] * len(adjusted))

    weighted_price = float((prices * weights).sum() / weights.sum())
    mean_price = prices.mean()
    cv = float(prices.std(ddof=0) / mean_price) if mean_price > 0 else 0.0
    average_gross = float(pd.Series([comp.gross_adjustment for comp in adjusted]).mean())
    value = facility.beds * weighted_price
    logger.debug(
        f"{LABEL}: {len(adjusted)} comparables, ${weighted_price:,.0f}/bed, CV {cv:.2f}"
    )

    confidence = comparable_confidence(len(adjusted), cv, average_gross, comp_settings)
    return MethodResult(
        method=method,
        label=LABEL,
        value=value,
        confidence=coverage.confidence(confidence),
        inputs=ComparableSalesInputs(
            comparables_used=len(adjusted),
            weighted_price_per_bed=weighted_price,
            coefficient_of_variation=cv,
            average_gross_adjustment=average_gross,
        ),
        adjustments=tuple(a for comp in adjusted for a in comp.adjustments),
        weight=settings.valuation.method_weights.for_type(asset_type).comparable_sales,
        notes=missing_notes(LABEL, coverage),
    )
