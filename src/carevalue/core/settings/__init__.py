# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Settings layer: versioned valuation configuration, merge and validation.
"""

from .merge import deep_merge, merge_model, merge_settings
from .settings import (
    ActiveAssetTypes,
    CMSScoringSettings,
    OverallRatingWeights,
    RiskCategoryWeights,
    RiskSettings,
    Settings,
)
from .tables import AdjustmentTable, AssetTypeTable, Bounds
from .validation import SettingsValidationResult, validate_settings
from .valuation import (
    CapRateBaseSettings,
    CapRateSettings,
    ComparableSalesSettings,
    ConfidenceWeights,
    DCFBaseSettings,
    DCFSettings,
    MethodWeights,
    NOIMultipleBaseSettings,
    NOIMultipleSettings,
    PricePerBedBaseSettings,
    PricePerBedSettings,
    ReconciliationSettings,
    ReplacementCostBaseSettings,
    ReplacementCostSettings,
    ValuationSettings,
)

__all__ = [
    "ActiveAssetTypes",
    "AdjustmentTable",
    "AssetTypeTable",
    "Bounds",
    "CMSScoringSettings",
    "CapRateBaseSettings",
    "CapRateSettings",
    "ComparableSalesSettings",
    "ConfidenceWeights",
    "DCFBaseSettings",
    "DCFSettings",
    "MethodWeights",
    "NOIMultipleBaseSettings",
    "NOIMultipleSettings",
    "OverallRatingWeights",
    "PricePerBedBaseSettings",
    "PricePerBedSettings",
    "ReconciliationSettings",
    "ReplacementCostBaseSettings",
    "ReplacementCostSettings",
    "RiskCategoryWeights",
    "RiskSettings",
    "Settings",
    "SettingsValidationResult",
    "ValuationSettings",
    "deep_merge",
    "merge_model",
    "merge_settings",
    "validate_settings",
]
