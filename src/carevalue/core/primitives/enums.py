# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class AssetTypeEnum(str, Enum):
    """Healthcare real estate asset types handled by the valuation engine."""

    SNF = "SNF"  # Skilled nursing facility
    ALF = "ALF"  # Assisted living facility
    ILF = "ILF"  # Independent living facility


class RegionEnum(str, Enum):
    """US regions used for regional cap rate, price and cost adjustments."""

    WEST = "west"
    MIDWEST = "midwest"
    NORTHEAST = "northeast"
    SOUTHEAST = "southeast"
    SOUTHWEST = "southwest"


class ConfidenceEnum(str, Enum):
    """
    Confidence tier attached to each method result and to the reconciled value.

    Tiers are ordered HIGH > MEDIUM > LOW; `downgrade()` moves one tier down and
    bottoms out at LOW.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]

    def downgrade(self, tiers: int = 1) -> "ConfidenceEnum":
        rank = max(self.rank - tiers, 0)
        return next(tier for tier, value in _CONFIDENCE_RANK.items() if value == rank)


_CONFIDENCE_RANK = {
    ConfidenceEnum.LOW: 0,
    ConfidenceEnum.MEDIUM: 1,
    ConfidenceEnum.HIGH: 2,
}


class ValuationMethodEnum(str, Enum):
    """The six valuation approaches combined by reconciliation."""

    CAP_RATE = "cap_rate"
    PRICE_PER_BED = "price_per_bed"
    DCF = "dcf"
    NOI_MULTIPLE = "noi_multiple"
    COMPARABLE_SALES = "comparable_sales"
    REPLACEMENT_COST = "replacement_cost"


class ReconciliationMethodEnum(str, Enum):
    """How remaining method values combine into the reconciled value."""

    WEIGHTED_AVERAGE = "weighted_average"
    MEDIAN = "median"
    MODE_ADJUSTED = "mode_adjusted"  # Weighted average favoring values near the median


class TransactionScenarioEnum(str, Enum):
    """Transaction context used to look up a preferred valuation method."""

    ACQUISITION = "acquisition"
    REFINANCE = "refinance"
    DISPOSITION = "disposition"


class LocationTypeEnum(str, Enum):
    URBAN = "urban"
    SUBURBAN = "suburban"
    RURAL = "rural"
    FRONTIER = "frontier"


class OwnershipEnum(str, Enum):
    FOR_PROFIT = "for_profit"
    NONPROFIT = "nonprofit"
    GOVERNMENT = "government"


class ChainAffiliationEnum(str, Enum):
    """Operator chain size: major (>50 facilities), regional (10-50), small (2-10), independent."""

    MAJOR_CHAIN = "major_chain"
    REGIONAL_CHAIN = "regional_chain"
    SMALL_CHAIN = "small_chain"
    INDEPENDENT = "independent"


class MarketConditionEnum(str, Enum):
    VERY_HOT = "very_hot"
    HOT = "hot"
    BALANCED = "balanced"
    COOL = "cool"
    VERY_COOL = "very_cool"


class MarketPositionEnum(str, Enum):
    MARKET_LEADER = "market_leader"
    STRONG_POSITION = "strong_position"
    AVERAGE_POSITION = "average_position"
    WEAK_POSITION = "weak_position"
    STRUGGLING = "struggling"


class ConditionEnum(str, Enum):
    """Physical plant condition."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    CRITICAL = "critical"


class ConstructionStatusEnum(str, Enum):
    NEW_CONSTRUCTION = "new_construction"
    MAJOR_RENOVATION = "major_renovation"
    MINOR_RENOVATION = "minor_renovation"
    ORIGINAL_CONDITION = "original_condition"


class LocationQualityEnum(str, Enum):
    PRIME_LOCATION = "prime_location"
    GOOD_LOCATION = "good_location"
    AVERAGE_LOCATION = "average_location"
    CHALLENGING_LOCATION = "challenging_location"


class LicensureEnum(str, Enum):
    FULLY_LICENSED = "fully_licensed"
    PROVISIONAL_LICENSE = "provisional_license"
    LIMITED_LICENSE = "limited_license"


class RiskTierEnum(str, Enum):
    """Risk tier selecting the DCF company risk premium."""

    VERY_LOW_RISK = "very_low_risk"
    LOW_RISK = "low_risk"
    MODERATE_RISK = "moderate_risk"
    HIGH_RISK = "high_risk"
    VERY_HIGH_RISK = "very_high_risk"


class DistributionTypeEnum(str, Enum):
    """Probability distributions available to the Monte Carlo engine."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    TRIANGULAR = "triangular"


class CoverageStatusEnum(str, Enum):
    """Sale-leaseback rent coverage health."""

    HEALTHY = "healthy"  # >= 1.40x
    WARNING = "warning"  # >= 1.25x
    CRITICAL = "critical"
