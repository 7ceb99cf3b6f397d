# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for CareValue testing.

Factories build facilities, comparable sales and method results with sensible
defaults so each test only states the attributes it cares about.
"""

from __future__ import annotations

from typing import Dict, Optional

import pytest

from carevalue.core.primitives import (
    ComparableSale,
    ConfidenceEnum,
    FacilityAttributes,
    PayerMix,
    ValuationMethodEnum,
)
from carevalue.core.settings import Settings
from carevalue.valuation import MethodResult, method_label


def create_facility(**overrides) -> FacilityAttributes:
    """Sparse SNF facility: beds and NOI only, plus any overrides."""
    attributes = {"asset_type": "SNF", "beds": 120, "noi": 1_800_000}
    attributes.update(overrides)
    return FacilityAttributes(**attributes)


def create_full_facility(**overrides) -> FacilityAttributes:
    """SNF facility with every attribute the calculators read."""
    attributes = dict(
        asset_type="SNF",
        name="Maple Grove Care Center",
        state="OH",
        region="midwest",
        beds=120,
        building_age=12,
        years_since_renovation=6,
        condition="good",
        construction_status="minor_renovation",
        location_quality="good_location",
        location_type="suburban",
        occupancy_rate=0.88,
        quality_rating=4,
        payer_mix=PayerMix(medicare=0.18, medicaid=0.62, private_pay=0.15, other=0.05),
        acuity_index=1.1,
        deficiency_count=4,
        licensure="fully_licensed",
        noi=1_800_000,
        ebitdar=2_400_000,
        revenue=14_000_000,
        noi_growth_rate=0.03,
        noi_variance=0.08,
        ownership="for_profit",
        chain="regional_chain",
        market_condition="balanced",
        market_occupancy=0.86,
        market_position="average_position",
        demand_growth=0.02,
        supply_growth=0.015,
    )
    attributes.update(overrides)
    return FacilityAttributes(**attributes)


def create_comparable(sale_id: str = "C1", **overrides) -> ComparableSale:
    """SNF sale of 100 beds at $100,000 per bed, six months ago, next door."""
    attributes = dict(
        sale_id=sale_id,
        asset_type="SNF",
        sale_price=10_000_000,
        beds=100,
        months_since_sale=6,
        distance_miles=0,
    )
    attributes.update(overrides)
    return ComparableSale(**attributes)


def create_result(
    method: ValuationMethodEnum,
    value: float,
    confidence: ConfidenceEnum = ConfidenceEnum.MEDIUM,
    weight: Optional[float] = None,
    applicable: bool = True,
    notes: tuple = (),
) -> MethodResult:
    """Method result with the default SNF weight for its method."""
    if weight is None:
        weight = Settings().valuation.method_weights.SNF.for_method(method)
    return MethodResult(
        method=method,
        label=method_label(method),
        value=value if applicable else 0.0,
        confidence=confidence,
        weight=weight if applicable else 0.0,
        applicable=applicable,
        notes=notes,
    )


def all_not_applicable() -> Dict[ValuationMethodEnum, MethodResult]:
    return {method: create_result(method, 0.0, applicable=False) for method in ValuationMethodEnum}


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def sparse_facility() -> FacilityAttributes:
    return create_facility()


@pytest.fixture
def full_facility() -> FacilityAttributes:
    return create_full_facility()


# Factory fixtures: tests call them with the overrides they care about


@pytest.fixture
def make_facility():
    return create_facility


@pytest.fixture
def make_full_facility():
    return create_full_facility


@pytest.fixture
def make_comparable():
    return create_comparable


@pytest.fixture
def make_result():
    return create_result
