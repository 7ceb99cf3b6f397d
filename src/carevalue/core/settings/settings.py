# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import List

from pydantic import Field

from ..primitives import AssetTypeEnum, Model
from .defaults import SETTINGS_VERSION
from .valuation import ValuationSettings


class OverallRatingWeights(Model):
    """Weights combining CMS star rating domains into an overall score."""

    health_inspection: float = 0.5
    staffing: float = 0.3
    quality_measures: float = 0.2

    @property
    def total(self) -> float:
        return self.health_inspection + self.staffing + self.quality_measures


class CMSScoringSettings(Model):
    overall_rating_weights: OverallRatingWeights = Field(default_factory=OverallRatingWeights)


class RiskCategoryWeights(Model):
    """Weights of each risk category in the composite risk score."""

    regulatory: float = 0.25
    operational: float = 0.25
    financial: float = 0.20
    market: float = 0.15
    reputational: float = 0.08
    legal: float = 0.04
    environmental: float = 0.02
    technology: float = 0.01

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in type(self).model_fields)


class RiskSettings(Model):
    cms_scoring: CMSScoringSettings = Field(default_factory=CMSScoringSettings)
    category_weights: RiskCategoryWeights = Field(default_factory=RiskCategoryWeights)


class ActiveAssetTypes(Model):
    SNF: bool = True
    ALF: bool = True
    ILF: bool = True

    def active(self) -> List[AssetTypeEnum]:
        return [asset_type for asset_type in AssetTypeEnum if getattr(self, asset_type.value)]


class Settings(Model):
    """
    Complete, versioned valuation configuration.

    `Settings()` yields the default configuration. Settings are immutable and
    passed explicitly to every calculation; use `merge_settings` to derive a
    variant and `validate_settings` to check cross-field consistency.

    Example:
        ```python
        settings = merge_settings(
            Settings(),
            {"valuation": {"reconciliation": {"exclude_outliers": False}}},
        )
        ```
    """

    version: str = SETTINGS_VERSION
    active_asset_types: ActiveAssetTypes = Field(default_factory=ActiveAssetTypes)
    valuation: ValuationSettings = Field(default_factory=ValuationSettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)
