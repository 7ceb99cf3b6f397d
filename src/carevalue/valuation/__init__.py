# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valuation methods and reconciliation.

Six independent calculators map (facility, settings) to a `MethodResult`:

- `calculate_cap_rate`: NOI / adjusted cap rate
- `calculate_price_per_bed`: beds x adjusted price per bed
- `calculate_dcf`: discounted projected cash flows plus terminal value
- `calculate_noi_multiple`: NOI x adjusted multiple
- `calculate_comparable_sales`: weighted adjusted comparable prices
- `calculate_replacement_cost`: depreciated cost to rebuild

`reconcile` merges them into a `ValuationResult`; `value_facility` runs the
whole pipeline.
"""

from .base import (
    Adjustment,
    CapRateInputs,
    ComparableSalesInputs,
    DCFInputs,
    InputCoverage,
    MethodInputs,
    MethodResult,
    NOIMultipleInputs,
    PricePerBedInputs,
    ReplacementCostInputs,
    clamp,
)
from .brackets import AdjustmentStep, Bracket, apply_steps, first_match
from .cap_rate import calculate_cap_rate
from .comparable_sales import calculate_comparable_sales, select_comparables
from .dcf import DCFProjection, calculate_dcf, project_cash_flows
from .engine import calculate_methods, preferred_method_for, value_facility
from .noi_multiple import calculate_noi_multiple, market_strength
from .price_per_bed import calculate_price_per_bed
from .reconciliation import (
    MethodResults,
    ValuationResult,
    combine,
    exclude_outliers,
    majority_confidence,
    mode_adjusted_average,
    normalize,
    reconcile,
    weighted_average,
)
from .registry import METHOD_REGISTRY, method_label, register_method, registered_methods
from .replacement_cost import calculate_replacement_cost

__all__ = [
    "Adjustment",
    "AdjustmentStep",
    "Bracket",
    "CapRateInputs",
    "ComparableSalesInputs",
    "DCFInputs",
    "DCFProjection",
    "InputCoverage",
    "METHOD_REGISTRY",
    "MethodInputs",
    "MethodResult",
    "MethodResults",
    "NOIMultipleInputs",
    "PricePerBedInputs",
    "ReplacementCostInputs",
    "ValuationResult",
    "apply_steps",
    "calculate_cap_rate",
    "calculate_comparable_sales",
    "calculate_dcf",
    "calculate_methods",
    "calculate_noi_multiple",
    "calculate_price_per_bed",
    "calculate_replacement_cost",
    "clamp",
    "combine",
    "exclude_outliers",
    "first_match",
    "majority_confidence",
    "market_strength",
    "method_label",
    "mode_adjusted_average",
    "normalize",
    "preferred_method_for",
    "project_cash_flows",
    "reconcile",
    "register_method",
    "registered_methods",
    "select_comparables",
    "value_facility",
    "weighted_average",
]
