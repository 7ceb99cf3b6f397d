# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..core.primitives import FacilityAttributes, TransactionScenarioEnum, ValuationMethodEnum
from ..core.settings import Settings

# Calculator modules register themselves on import
from . import cap_rate, comparable_sales, dcf, noi_multiple, price_per_bed, replacement_cost  # noqa: F401
from .base import MethodResult, require_asset_type
from .reconciliation import ValuationResult, reconcile
from .registry import registered_methods

logger = logging.getLogger(__name__)


def calculate_methods(
    facility: FacilityAttributes, settings: Settings
) -> Dict[ValuationMethodEnum, MethodResult]:
    """Run every registered method calculator against the facility."""
    require_asset_type(facility.asset_type)
    return {entry.method: entry.calculate(facility, settings) for entry in registered_methods()}


def value_facility(
    facility: FacilityAttributes, settings: Optional[Settings] = None
) -> ValuationResult:
    """
    Value a facility with all six methods and reconcile the results.

    Args:
        facility: Subject facility attributes
        settings: Valuation settings; defaults to `Settings()`

    Returns:
        ValuationResult with every method result and the reconciled value

    Raises:
        ValuationInvariantError: On invariant violations such as an unknown
            asset type or a negative bed count

    Example:
        ```python
        result = value_facility(
            FacilityAttributes(asset_type="SNF", beds=120, noi=1_800_000)
        )
        result.reconciled_value  # 18,000,000 with default settings
        ```
    """
    settings = settings if settings is not None else Settings()
    results = calculate_methods(facility, settings)
    return reconcile(
        results,
        settings,
        asset_type=require_asset_type(facility.asset_type),
        beds=facility.beds,
        noi=facility.noi,
    )


def preferred_method_for(
    scenario: TransactionScenarioEnum, settings: Optional[Settings] = None
) -> Optional[ValuationMethodEnum]:
    """Method configured as preferred for a transaction scenario, if any."""
    settings = settings if settings is not None else Settings()
    return settings.valuation.reconciliation.preferred_method_by_scenario.get(
        TransactionScenarioEnum(scenario)
    )
