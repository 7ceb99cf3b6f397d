# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Facility Inputs - Attributes of the Subject Facility and its Comparables

Every attribute other than the asset type is optional: a missing value means
"not provided" and leads to a skipped adjustment or an excluded method, never
to an error.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import Field, model_validator

from .enums import (
    AssetTypeEnum,
    ChainAffiliationEnum,
    ConditionEnum,
    ConstructionStatusEnum,
    LicensureEnum,
    LocationQualityEnum,
    LocationTypeEnum,
    MarketConditionEnum,
    MarketPositionEnum,
    OwnershipEnum,
    RegionEnum,
    RiskTierEnum,
)
from .model import Model
from .types import FloatBetween0And1, PositiveFloat, PositiveInt, StarRating


class PayerMix(Model):
    """Share of census by payer source, expressed as fractions of 1."""

    medicare: FloatBetween0And1 = 0.0
    medicaid: FloatBetween0And1 = 0.0
    private_pay: FloatBetween0And1 = 0.0
    other: FloatBetween0And1 = 0.0

    @model_validator(mode="after")
    def validate_total(self) -> "PayerMix":
        """Payer shares cannot exceed the whole census."""
        total = self.medicare + self.medicaid + self.private_pay + self.other
        if total > 1.0 + 1e-6:
            raise ValueError(f"Payer mix shares sum to {total:.2f}, which exceeds 1.0")
        return self

    @property
    def unassigned(self) -> float:
        """Census share not attributed to any payer."""
        return max(1.0 - self.medicare - self.medicaid - self.private_pay - self.other, 0.0)


class ComparableSale(Model):
    """A closed transaction used by the comparable sales approach."""

    sale_id: str = Field(..., description="Transaction identifier")
    asset_type: AssetTypeEnum
    sale_price: PositiveFloat = Field(..., description="Total sale price")
    beds: int = Field(..., gt=0, description="Licensed beds at sale")
    state: Optional[str] = None
    months_since_sale: PositiveFloat = Field(default=0.0, description="Age of the sale in months")
    distance_miles: PositiveFloat = Field(default=0.0, description="Distance from the subject facility")
    building_age: Optional[PositiveFloat] = None
    occupancy_rate: Optional[FloatBetween0And1] = None
    quality_rating: Optional[StarRating] = None
    medicaid_share: Optional[FloatBetween0And1] = None

    @property
    def price_per_bed(self) -> float:
        return self.sale_price / self.beds


class FacilityAttributes(Model):
    """
    Subject facility attributes consumed by every valuation method.

    Attributes:
        asset_type: SNF, ALF or ILF
        beds: Licensed bed count
        building_age: Years since original construction
        years_since_renovation: Years since the last major renovation
        occupancy_rate: Current occupancy (0-1)
        quality_rating: CMS-style overall star rating, 0 meaning unrated
        acuity_index: Case mix index
        noi: Trailing twelve month net operating income
        ebitdar: Earnings before interest, taxes, depreciation, amortization and rent
        noi_growth_rate: Annual NOI growth (0.04 = 4%)
        noi_variance: Coefficient of variation of historical NOI
        market_occupancy: Occupancy across the competitive market
        deficiency_count: Health inspection deficiencies on the latest survey
        comparables: Externally supplied comparable transactions

    Example:
        ```python
        facility = FacilityAttributes(
            asset_type=AssetTypeEnum.SNF,
            beds=120,
            noi=1_800_000,
        )
        ```
    """

    asset_type: AssetTypeEnum
    name: Optional[str] = None
    state: Optional[str] = None
    region: Optional[RegionEnum] = None

    # === PHYSICAL ===
    beds: Optional[int] = None
    building_age: Optional[PositiveFloat] = None
    years_since_renovation: Optional[PositiveFloat] = None
    condition: Optional[ConditionEnum] = None
    construction_status: Optional[ConstructionStatusEnum] = None
    location_quality: Optional[LocationQualityEnum] = None
    location_type: Optional[LocationTypeEnum] = None

    # === OPERATIONS ===
    occupancy_rate: Optional[FloatBetween0And1] = None
    quality_rating: Optional[StarRating] = None
    payer_mix: Optional[PayerMix] = None
    acuity_index: Optional[PositiveFloat] = None
    deficiency_count: Optional[PositiveInt] = None
    special_focus_facility: bool = False
    licensure: Optional[LicensureEnum] = None

    # === FINANCIALS ===
    noi: Optional[float] = None
    ebitdar: Optional[float] = None
    revenue: Optional[PositiveFloat] = None
    noi_growth_rate: Optional[float] = None
    noi_variance: Optional[PositiveFloat] = None

    # === OWNERSHIP & MARKET ===
    ownership: Optional[OwnershipEnum] = None
    chain: Optional[ChainAffiliationEnum] = None
    market_condition: Optional[MarketConditionEnum] = None
    market_occupancy: Optional[FloatBetween0And1] = None
    market_position: Optional[MarketPositionEnum] = None
    demand_growth: Optional[float] = None
    supply_growth: Optional[float] = None
    risk_tier: Optional[RiskTierEnum] = None

    comparables: Tuple[ComparableSale, ...] = ()

    def has(self, attribute: str) -> bool:
        """Whether an attribute was provided (empty comparables count as missing)."""
        value = getattr(self, attribute)
        if isinstance(value, tuple):
            return len(value) > 0
        return value is not None
