# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Reconciliation - Combining Method Results into One Value

Steps, in order:
1. Drop methods that are not applicable or carry no configured weight.
2. Optionally drop outliers deviating from the median by more than the
   configured threshold (only with three or more methods, and never leaving
   fewer than two).
3. Renormalize the configured weights of the remaining methods.
4. Scale by the confidence multiplier (unless disabled) and renormalize again.
5. Combine the remaining values: weighted average (default), plain median,
   or a mode-adjusted average that scales each weight by
   1 / (1 + relative distance from the median). The range is the min and
   max of the remaining values.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..core.primitives import (
    AssetTypeEnum,
    ConfidenceEnum,
    Model,
    ReconciliationMethodEnum,
    ValuationInvariantError,
    ValuationMethodEnum,
)
from ..core.settings import Settings
from .base import MethodResult

logger = logging.getLogger(__name__)

NO_METHOD_APPLICABLE = "No valuation method was applicable"
MIN_METHODS_FOR_OUTLIERS = 3
MIN_METHODS_AFTER_OUTLIERS = 2


class MethodResults(Model):
    """The six method results of one valuation."""

    cap_rate: MethodResult
    price_per_bed: MethodResult
    dcf: MethodResult
    noi_multiple: MethodResult
    comparable_sales: MethodResult
    replacement_cost: MethodResult

    def get(self, method: ValuationMethodEnum) -> MethodResult:
        return getattr(self, ValuationMethodEnum(method).value)

    def results(self) -> Iterator[MethodResult]:
        for method in ValuationMethodEnum:
            yield self.get(method)


class ValuationResult(Model):
    """
    Reconciled valuation of one facility.

    Attributes:
        methods: Every method result, carrying its effective weight (0 when excluded)
        reconciled_value: Remaining methods combined by the configured reconciliation method
        value_low: Lowest remaining method value
        value_high: Highest remaining method value
        overall_confidence: Tier holding the most effective weight
        confidence_factors: High-confidence methods, outlier exclusions and missing-input notes
        excluded_outliers: Methods dropped by outlier exclusion
    """

    asset_type: AssetTypeEnum
    methods: MethodResults
    reconciled_value: float
    value_low: float
    value_high: float
    overall_confidence: ConfidenceEnum
    confidence_factors: Tuple[str, ...] = ()
    excluded_outliers: Tuple[ValuationMethodEnum, ...] = ()
    value_per_bed: Optional[float] = None
    implied_cap_rate: Optional[float] = None

    @property
    def effective_weights(self) -> Dict[ValuationMethodEnum, float]:
        return {result.method: result.weight for result in self.methods.results()}


def normalize(weights: Sequence[float]) -> np.ndarray:
    """Scale weights to sum to 1."""
    array = np.asarray(weights, dtype=float)
    total = array.sum()
    if total <= 0:
        raise ValuationInvariantError(f"Cannot normalize weights summing to {total}")
    return array / total


def weighted_average(values: Sequence[float], weights: Sequence[float]) -> float:
    if len(values) != len(weights):
        raise ValuationInvariantError(
            f"Got {len(values)} values but {len(weights)} weights"
        )
    return float(np.dot(np.asarray(values, dtype=float), normalize(weights)))


def mode_adjusted_average(values: Sequence[float], weights: Sequence[float]) -> float:
    """Weighted average with each weight scaled by its proximity to the median."""
    array = np.asarray(values, dtype=float)
    median = float(np.median(array))
    proximity = 1.0 / (1.0 + np.abs(array - median) / median)
    return weighted_average(array, np.asarray(weights, dtype=float) * proximity)


def combine(
    values: Sequence[float], weights: Sequence[float], method: ReconciliationMethodEnum
) -> float:
    if method == ReconciliationMethodEnum.MEDIAN:
        return float(np.median(values))
    if method == ReconciliationMethodEnum.MODE_ADJUSTED:
        return mode_adjusted_average(values, weights)
    return weighted_average(values, weights)


def exclude_outliers(
    candidates: List[MethodResult], threshold: float
) -> Tuple[List[MethodResult], List[Tuple[MethodResult, float]]]:
    """Split candidates into kept results and (outlier, deviation from median) pairs."""
    if len(candidates) < MIN_METHODS_FOR_OUTLIERS:
        return candidates, []
    median = float(np.median([result.value for result in candidates]))
    deviations = [abs(result.value - median) / median for result in candidates]
    kept = [result for result, deviation in zip(candidates, deviations) if deviation <= threshold]
    if len(kept) < MIN_METHODS_AFTER_OUTLIERS:
        logger.debug("Outlier exclusion would leave fewer than two methods; keeping all")
        return candidates, []
    outliers = [
        (result, deviation)
        for result, deviation in zip(candidates, deviations)
        if deviation > threshold
    ]
    return kept, outliers


def majority_confidence(results: Sequence[MethodResult], weights: Sequence[float]) -> ConfidenceEnum:
    """Tier with the greatest total weight; ties resolve to the lower tier."""
    totals = {tier: 0.0 for tier in ConfidenceEnum}
    for result, weight in zip(results, weights):
        totals[result.confidence] += weight
    return max(totals, key=lambda tier: (totals[tier], -tier.rank))


def reconcile(
    results: Mapping[ValuationMethodEnum, MethodResult],
    settings: Settings,
    asset_type: AssetTypeEnum,
    beds: Optional[int] = None,
    noi: Optional[float] = None,
) -> ValuationResult:
    """
    Reconcile method results into a single value with a range and confidence.

    Args:
        results: One result per valuation method
        settings: Reconciliation policy and confidence multipliers
        asset_type: Asset type of the valued facility
        beds: Bed count, for value per bed
        noi: NOI, for the implied cap rate

    Returns:
        ValuationResult; when no method applies the reconciled value is 0 with
        low confidence

    Raises:
        ValuationInvariantError: If a method result is missing
    """
    missing = [method.value for method in ValuationMethodEnum if method not in results]
    if missing:
        raise ValuationInvariantError(f"Missing results for methods: {', '.join(missing)}")

    policy = settings.valuation.reconciliation
    notes = [note for method in ValuationMethodEnum for note in results[method].notes]
    candidates = [
        results[method]
        for method in ValuationMethodEnum
        if results[method].applicable and results[method].weight > 0 and results[method].value > 0
    ]

    outliers: List[Tuple[MethodResult, float]] = []
    if policy.exclude_outliers:
        candidates, outliers = exclude_outliers(candidates, policy.outlier_threshold_percent)

    if not candidates:
        logger.info(f"{NO_METHOD_APPLICABLE} for {asset_type.value} facility")
        return ValuationResult(
            asset_type=asset_type,
            methods=_with_weights(results, {}),
            reconciled_value=0.0,
            value_low=0.0,
            value_high=0.0,
            overall_confidence=ConfidenceEnum.LOW,
            confidence_factors=tuple([NO_METHOD_APPLICABLE] + notes),
        )

    effective = normalize([result.weight for result in candidates])
    if policy.confidence_weighting:
        multipliers = np.array(
            [settings.valuation.confidence_weights.multiplier(result.confidence) for result in candidates]
        )
        effective = normalize(effective * multipliers)

    values = [result.value for result in candidates]
    value_low, value_high = min(values), max(values)
    reconciled = min(max(combine(values, effective, policy.method), value_low), value_high)

    factors = [
        f"{result.label} (high confidence)"
        for result in candidates
        if result.confidence == ConfidenceEnum.HIGH
    ]
    factors += [
        f"Excluded {result.label} as outlier ({deviation:.0%} from median)"
        for result, deviation in outliers
    ]
    factors += notes

    logger.debug(
        f"Reconciled {len(candidates)} methods by {policy.method.value} to ${reconciled:,.0f} "
        f"(range ${value_low:,.0f} - ${value_high:,.0f})"
    )
    return ValuationResult(
        asset_type=asset_type,
        methods=_with_weights(
            results, {result.method: float(w) for result, w in zip(candidates, effective)}
        ),
        reconciled_value=reconciled,
        value_low=value_low,
        value_high=value_high,
        overall_confidence=majority_confidence(candidates, effective),
        confidence_factors=tuple(factors),
        excluded_outliers=tuple(result.method for result, _ in outliers),
        value_per_bed=reconciled / beds if beds else None,
        implied_cap_rate=noi / reconciled if noi and noi > 0 else None,
    )


def _with_weights(
    results: Mapping[ValuationMethodEnum, MethodResult],
    weights: Mapping[ValuationMethodEnum, float],
) -> MethodResults:
    return MethodResults(
        **{
            method.value: results[method].model_copy(update={"weight": weights.get(method, 0.0)})
            for method in ValuationMethodEnum
        }
    )
