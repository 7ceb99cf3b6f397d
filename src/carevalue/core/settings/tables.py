# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Adjustment Tables - Named Brackets Mapped to Adjustments

Each table is a frozen model whose field names are bracket keys. Rate-like
methods store additive deltas (cap rate, multiple) and price-like methods
store multipliers or per-bed dollar adjustments. Which facility attribute
value selects which bracket is defined alongside the calculators.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from ..primitives import AssetTypeEnum, Model, ValuationInvariantError

T = TypeVar("T")


class AdjustmentTable(Model):
    """Base for bracket tables; `adjustment_for` resolves a bracket key."""

    def adjustment_for(self, key: str) -> float:
        if key not in type(self).model_fields:
            raise ValuationInvariantError(
                f"Unknown bracket '{key}' for {type(self).__name__}"
            )
        return getattr(self, key)


class AssetTypeTable(Model, Generic[T]):
    """One entry per asset type."""

    SNF: T
    ALF: T
    ILF: T

    def for_type(self, asset_type: AssetTypeEnum) -> T:
        try:
            return getattr(self, AssetTypeEnum(asset_type).value)
        except ValueError as e:
            raise ValuationInvariantError(
                f"Asset type must be one of SNF, ALF or ILF, got {asset_type!r}"
            ) from e


class Bounds(Model):
    """Inclusive clamp range."""

    min: float
    max: float


class RegionalTable(AdjustmentTable):
    west: float
    midwest: float
    northeast: float
    southeast: float
    southwest: float


class QualityTable(AdjustmentTable):
    five_star: float
    four_star: float
    three_star: float
    two_star: float
    one_star: float
    unrated: float


class SizeTable(AdjustmentTable):
    under_30_beds: float
    beds_30_to_50: float
    beds_50_to_75: float
    beds_75_to_100: float
    beds_100_to_125: float
    beds_125_to_150: float
    beds_150_to_200: float
    beds_200_to_300: float
    over_300_beds: float


class AgeTable(AdjustmentTable):
    under_3_years: float
    years_3_to_5: float
    years_5_to_10: float
    years_10_to_15: float
    years_15_to_20: float
    years_20_to_25: float
    years_25_to_30: float
    years_30_to_40: float
    over_40_years: float


class OccupancyTable(AdjustmentTable):
    above_98: float
    percent_95_to_98: float
    percent_92_to_95: float
    percent_90_to_92: float
    percent_87_to_90: float
    percent_85_to_87: float
    percent_82_to_85: float
    percent_80_to_82: float
    percent_75_to_80: float
    percent_70_to_75: float
    below_70: float


class PayerMixTable(AdjustmentTable):
    high_medicare: float  # >30% Medicare
    moderate_medicare: float
    low_medicare: float  # <20% Medicare
    high_medicaid: float  # >70% Medicaid
    moderate_medicaid: float
    low_medicaid: float  # <50% Medicaid
    high_private_pay: float  # >30% private pay
    moderate_private_pay: float
    low_private_pay: float  # <15% private pay


class AcuityTable(AdjustmentTable):
    high_acuity: float  # CMI > 1.2
    moderate_acuity: float
    low_acuity: float  # CMI < 1.0


class LocationTypeTable(AdjustmentTable):
    urban: float
    suburban: float
    rural: float
    frontier: float


class OwnershipTable(AdjustmentTable):
    for_profit: float
    nonprofit: float
    government: float


class ChainTable(AdjustmentTable):
    major_chain: float
    regional_chain: float
    small_chain: float
    independent: float


class MarketConditionTable(AdjustmentTable):
    very_hot: float
    hot: float
    balanced: float
    cool: float
    very_cool: float


class CompetitionTable(AdjustmentTable):
    low_competition: float  # <85% market occupancy
    moderate_competition: float
    high_competition: float
    very_high_competition: float  # >97% market occupancy


class RenovationTable(AdjustmentTable):
    recently_renovated: float  # <3 years
    modernized: float
    needs_updates: float
    significant_deferred: float  # >20 years


class RegulatoryTable(AdjustmentTable):
    excellent_compliance: float  # no deficiencies
    good_compliance: float
    moderate_compliance: float
    poor_compliance: float
    severe_issues: float  # >20 deficiencies or special focus facility


class ConditionTable(AdjustmentTable):
    excellent: float
    good: float
    fair: float
    poor: float
    critical: float


class ConstructionTable(AdjustmentTable):
    new_construction: float
    major_renovation: float
    minor_renovation: float
    original_condition: float


class LocationQualityTable(AdjustmentTable):
    prime_location: float
    good_location: float
    average_location: float
    challenging_location: float


class LicensureTable(AdjustmentTable):
    fully_licensed: float
    provisional_license: float
    limited_license: float


class GrowthTable(AdjustmentTable):
    rapid_growth: float  # >7% NOI growth
    strong_growth: float
    moderate_growth: float
    slow_growth: float
    stable: float
    declining: float  # negative NOI growth


class StabilityTable(AdjustmentTable):
    very_stable: float  # <5% NOI variance
    stable: float
    moderate: float
    volatile: float
    very_volatile: float  # >25% NOI variance


class MarketPositionTable(AdjustmentTable):
    market_leader: float
    strong_position: float
    average_position: float
    weak_position: float
    struggling: float


class RiskTierTable(AdjustmentTable):
    very_low_risk: float
    low_risk: float
    moderate_risk: float
    high_risk: float
    very_high_risk: float


class MarketStrengthTable(AdjustmentTable):
    strong: float
    average: float
    weak: float
