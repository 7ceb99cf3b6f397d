# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .enums import (
    AssetTypeEnum,
    ChainAffiliationEnum,
    ConditionEnum,
    ConfidenceEnum,
    ConstructionStatusEnum,
    CoverageStatusEnum,
    DistributionTypeEnum,
    LicensureEnum,
    LocationQualityEnum,
    LocationTypeEnum,
    MarketConditionEnum,
    MarketPositionEnum,
    OwnershipEnum,
    ReconciliationMethodEnum,
    RegionEnum,
    RiskTierEnum,
    TransactionScenarioEnum,
    ValuationMethodEnum,
)
from .errors import ValuationInvariantError
from .facility import ComparableSale, FacilityAttributes, PayerMix
from .model import Model
from .types import FloatBetween0And1, PositiveFloat, PositiveInt, StarRating

__all__ = [
    "AssetTypeEnum",
    "ChainAffiliationEnum",
    "ComparableSale",
    "ConditionEnum",
    "ConfidenceEnum",
    "ConstructionStatusEnum",
    "CoverageStatusEnum",
    "DistributionTypeEnum",
    "FacilityAttributes",
    "FloatBetween0And1",
    "LicensureEnum",
    "LocationQualityEnum",
    "LocationTypeEnum",
    "MarketConditionEnum",
    "MarketPositionEnum",
    "Model",
    "OwnershipEnum",
    "PayerMix",
    "PositiveFloat",
    "PositiveInt",
    "ReconciliationMethodEnum",
    "RegionEnum",
    "RiskTierEnum",
    "StarRating",
    "TransactionScenarioEnum",
    "ValuationInvariantError",
    "ValuationMethodEnum",
]
