# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Valuation Settings - Per-Method Configuration

Schema for the six valuation methods, their per-asset-type weights and the
reconciliation policy. Types are enforced on construction; cross-field sums
(weights adding to 1, min below max) are checked by `validate_settings` so that
an inconsistent configuration can still be built, reported and computed with.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import Field

from ..primitives import (
    ConfidenceEnum,
    Model,
    PositiveFloat,
    PositiveInt,
    ReconciliationMethodEnum,
    TransactionScenarioEnum,
    ValuationMethodEnum,
)
from . import defaults
from .tables import (
    AcuityTable,
    AgeTable,
    AssetTypeTable,
    Bounds,
    ChainTable,
    CompetitionTable,
    ConditionTable,
    ConstructionTable,
    GrowthTable,
    LicensureTable,
    LocationQualityTable,
    LocationTypeTable,
    MarketConditionTable,
    MarketPositionTable,
    MarketStrengthTable,
    OccupancyTable,
    OwnershipTable,
    PayerMixTable,
    QualityTable,
    RegionalTable,
    RegulatoryTable,
    RenovationTable,
    RiskTierTable,
    SizeTable,
    StabilityTable,
)


def _per_asset_type(model_cls, table: Dict[str, Any]):
    """Default factory building an `AssetTypeTable` from plain per-type data."""

    def factory():
        return AssetTypeTable[model_cls].model_validate(table)

    return factory


# === CAP RATE ===


class CapRateBaseSettings(Model):
    """Base cap rate and additive bracket adjustments for one asset type."""

    base_rate: float
    quality_adjustments: QualityTable
    size_adjustments: SizeTable
    age_adjustments: AgeTable
    occupancy_adjustments: OccupancyTable
    payer_mix_adjustments: PayerMixTable
    acuity_adjustments: AcuityTable
    location_adjustments: LocationTypeTable
    ownership_adjustments: OwnershipTable
    chain_adjustments: ChainTable
    market_conditions: MarketConditionTable
    competition_adjustments: CompetitionTable
    renovation_adjustments: RenovationTable
    regulatory_adjustments: RegulatoryTable


class CapRateSettings(Model):
    by_asset_type: AssetTypeTable[CapRateBaseSettings] = Field(
        default_factory=_per_asset_type(
            CapRateBaseSettings,
            {"SNF": defaults.CAP_RATE_SNF, "ALF": defaults.CAP_RATE_ALF, "ILF": defaults.CAP_RATE_ILF},
        )
    )
    regional_adjustments: RegionalTable = Field(
        default_factory=lambda: RegionalTable(**defaults.CAP_RATE_REGIONAL)
    )
    state_overrides: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Partial CapRateBaseSettings per state code, merged over the asset-type defaults",
    )
    global_min_cap_rate: float = 0.04
    global_max_cap_rate: float = 0.20
    limits: AssetTypeTable[Bounds] = Field(
        default_factory=_per_asset_type(Bounds, defaults.CAP_RATE_LIMITS)
    )


# === PRICE PER BED ===


class PricePerBedBaseSettings(Model):
    """Base price per bed, per-bed dollar adjustments and multipliers for one asset type."""

    base_price: PositiveFloat
    quality_multipliers: QualityTable
    size_adjustments: SizeTable
    age_adjustments: AgeTable
    condition_multipliers: ConditionTable
    construction_adjustments: ConstructionTable
    location_adjustments: LocationQualityTable
    licensure_adjustments: LicensureTable


class PricePerBedSettings(Model):
    by_asset_type: AssetTypeTable[PricePerBedBaseSettings] = Field(
        default_factory=_per_asset_type(
            PricePerBedBaseSettings,
            {
                "SNF": defaults.PRICE_PER_BED_SNF,
                "ALF": defaults.PRICE_PER_BED_ALF,
                "ILF": defaults.PRICE_PER_BED_ILF,
            },
        )
    )
    regional_multipliers: RegionalTable = Field(
        default_factory=lambda: RegionalTable(**defaults.PRICE_PER_BED_REGIONAL)
    )
    state_overrides: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    global_min_price_per_bed: float = 20_000
    global_max_price_per_bed: float = 400_000
    limits: AssetTypeTable[Bounds] = Field(
        default_factory=_per_asset_type(Bounds, defaults.PRICE_PER_BED_LIMITS)
    )


# === DCF ===


class DiscountRateComponents(Model):
    """Build-up components of the discount rate."""

    risk_free_rate: float
    equity_risk_premium: float
    size_risk_premium: float
    industry_risk_premium: float
    company_specific_risk: float

    @property
    def build_up_rate(self) -> float:
        return (
            self.risk_free_rate
            + self.equity_risk_premium
            + self.size_risk_premium
            + self.industry_risk_premium
            + self.company_specific_risk
        )


class TerminalValueSettings(Model):
    exit_cap_rate: float
    perpetual_growth_rate: float
    use_exit_cap_rate: bool = True
    selling_costs_percent: float = 0.02


class RevenueGrowthTable(Model):
    medicare_part_a: float
    medicare_part_b: float
    medicare_advantage: float
    medicaid: float
    private_pay: float
    managed_care: float
    va_contract: float
    hospice: float
    other: float


class ExpenseGrowthTable(Model):
    nursing_labor: float
    other_labor: float
    agency_labor: float
    benefits: float
    food_and_dietary: float
    medical_supplies: float
    general_supplies: float
    utilities: float
    insurance: float
    property_tax: float
    management_fee: float
    marketing: float
    maintenance: float
    professional_fees: float
    technology: float
    other: float


class OccupancyRampSettings(Model):
    stabilized_occupancy: float
    ramp_up_months_new_acquisition: PositiveInt
    ramp_up_months_turnaround: PositiveInt
    ramp_up_months_stabilized: PositiveInt = 0


class CapexAssumptions(Model):
    routine_per_bed_annual: PositiveFloat
    major_capex_cycle_years: PositiveInt
    major_capex_per_bed: PositiveFloat
    technology_per_bed_annual: PositiveFloat = 0.0
    furniture_replacement_years: PositiveInt = 0
    furniture_per_bed: PositiveFloat = 0.0


class WorkingCapitalSettings(Model):
    working_capital_percent: float = Field(
        ..., description="Working capital held as a share of revenue"
    )


class DCFBaseSettings(Model):
    discount_rates: DiscountRateComponents
    risk_premium_tiers: RiskTierTable
    terminal_value: TerminalValueSettings
    revenue_growth: RevenueGrowthTable
    expense_growth: ExpenseGrowthTable
    occupancy_ramp: OccupancyRampSettings
    capex_assumptions: CapexAssumptions
    working_capital: WorkingCapitalSettings


class DCFSettings(Model):
    projection_years: PositiveInt = 10
    max_projection_years: PositiveInt = 15
    monthly_granularity: bool = True
    by_asset_type: AssetTypeTable[DCFBaseSettings] = Field(
        default_factory=_per_asset_type(
            DCFBaseSettings,
            {"SNF": defaults.DCF_SNF, "ALF": defaults.DCF_ALF, "ILF": defaults.DCF_ILF},
        )
    )
    discount_rate_limits: AssetTypeTable[Bounds] = Field(
        default_factory=_per_asset_type(Bounds, defaults.DCF_DISCOUNT_RATE_LIMITS)
    )

    @property
    def effective_projection_years(self) -> int:
        return min(self.projection_years, self.max_projection_years)


# === NOI MULTIPLE ===


class NOIMultipleBaseSettings(Model):
    base_multiple: float
    quality_adjustments: QualityTable
    growth_adjustments: GrowthTable
    stability_adjustments: StabilityTable
    market_position_adjustments: MarketPositionTable
    market_strength_adjustments: MarketStrengthTable


class NOIMultipleSettings(Model):
    by_asset_type: AssetTypeTable[NOIMultipleBaseSettings] = Field(
        default_factory=_per_asset_type(
            NOIMultipleBaseSettings,
            {
                "SNF": defaults.NOI_MULTIPLE_SNF,
                "ALF": defaults.NOI_MULTIPLE_ALF,
                "ILF": defaults.NOI_MULTIPLE_ILF,
            },
        )
    )
    min_multiple: float = 4.0
    max_multiple: float = 18.0
    limits: AssetTypeTable[Bounds] = Field(
        default_factory=_per_asset_type(Bounds, defaults.NOI_MULTIPLE_LIMITS)
    )


# === COMPARABLE SALES ===


class ComparableWeightingFactors(Model):
    """Similarity weights used to rank comparables; should sum to 1."""

    geographic_proximity: float = 0.15
    bed_count_match: float = 0.12
    asset_type_match: float = 0.15
    quality_rating_match: float = 0.12
    sale_recency: float = 0.12
    payer_mix_match: float = 0.08
    occupancy_match: float = 0.08
    age_match: float = 0.08
    condition_match: float = 0.05
    ownership_type_match: float = 0.05

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in type(self).model_fields)


class ComparableMaxAdjustments(Model):
    """Caps on the absolute adjustment per factor and in total (fractions of price)."""

    location: float = 0.15
    size: float = 0.12
    age: float = 0.12
    condition: float = 0.10
    quality: float = 0.15
    occupancy: float = 0.10
    payer_mix: float = 0.08
    market_timing: float = 0.10
    amenities: float = 0.05
    total: float = 0.40


class ComparableSelectionCriteria(Model):
    max_miles_radius: PositiveFloat = 100
    max_months_old: PositiveFloat = 24
    min_comparables: PositiveInt = 3
    max_comparables: PositiveInt = 10
    ideal_comparables: PositiveInt = 6
    bed_count_variance_percent: PositiveFloat = 0.30
    require_same_state: bool = False
    require_same_asset_type: bool = True


class ComparableConfidenceThresholds(Model):
    """Minimum confidence score for each tier; anything below medium is low."""

    high_confidence: float = 0.80
    medium_confidence: float = 0.60


class ComparableAdjustmentRates(Model):
    per_mile_distance: float = 0.001
    per_year_age: float = 0.005
    per_percent_occupancy: float = 0.01
    per_star_rating: float = 0.03
    per_percent_payer_mix: float = 0.005
    per_bed_difference: float = 0.0005


class ComparableSalesSettings(Model):
    weighting_factors: ComparableWeightingFactors = Field(default_factory=ComparableWeightingFactors)
    max_adjustments: ComparableMaxAdjustments = Field(default_factory=ComparableMaxAdjustments)
    selection_criteria: ComparableSelectionCriteria = Field(default_factory=ComparableSelectionCriteria)
    confidence_thresholds: ComparableConfidenceThresholds = Field(
        default_factory=ComparableConfidenceThresholds
    )
    adjustment_rates: ComparableAdjustmentRates = Field(default_factory=ComparableAdjustmentRates)


# === REPLACEMENT COST ===


class ReplacementCostBaseSettings(Model):
    cost_per_bed: PositiveFloat
    depreciation_rate_annual: PositiveFloat
    functional_obsolescence: PositiveFloat
    economic_obsolescence: PositiveFloat


class ReplacementCostSettings(Model):
    by_asset_type: AssetTypeTable[ReplacementCostBaseSettings] = Field(
        default_factory=_per_asset_type(ReplacementCostBaseSettings, defaults.REPLACEMENT_COST)
    )
    regional_multipliers: RegionalTable = Field(
        default_factory=lambda: RegionalTable(**defaults.REPLACEMENT_COST_REGIONAL)
    )


# === RECONCILIATION ===


class MethodWeights(Model):
    """Configured reconciliation weight of each method for one asset type."""

    cap_rate: float
    price_per_bed: float
    dcf: float
    noi_multiple: float
    comparable_sales: float
    replacement_cost: float

    def for_method(self, method: ValuationMethodEnum) -> float:
        return getattr(self, ValuationMethodEnum(method).value)

    @property
    def total(self) -> float:
        return sum(self.for_method(method) for method in ValuationMethodEnum)


class ConfidenceWeights(Model):
    high_confidence_multiplier: PositiveFloat = 1.2
    medium_confidence_multiplier: PositiveFloat = 1.0
    low_confidence_multiplier: PositiveFloat = 0.8

    def multiplier(self, confidence: ConfidenceEnum) -> float:
        return {
            ConfidenceEnum.HIGH: self.high_confidence_multiplier,
            ConfidenceEnum.MEDIUM: self.medium_confidence_multiplier,
            ConfidenceEnum.LOW: self.low_confidence_multiplier,
        }[ConfidenceEnum(confidence)]


class ReconciliationSettings(Model):
    method: ReconciliationMethodEnum = ReconciliationMethodEnum.WEIGHTED_AVERAGE
    confidence_weighting: bool = Field(
        default=True, description="Scale configured weights by each method's confidence multiplier"
    )
    exclude_outliers: bool = True
    outlier_threshold_percent: PositiveFloat = Field(
        default=0.25, description="Maximum deviation from the median before a method is dropped"
    )
    preferred_method_by_scenario: Dict[TransactionScenarioEnum, ValuationMethodEnum] = Field(
        default_factory=lambda: {
            TransactionScenarioEnum.ACQUISITION: ValuationMethodEnum.DCF,
            TransactionScenarioEnum.REFINANCE: ValuationMethodEnum.CAP_RATE,
            TransactionScenarioEnum.DISPOSITION: ValuationMethodEnum.COMPARABLE_SALES,
        }
    )


class ValuationSettings(Model):
    cap_rate: CapRateSettings = Field(default_factory=CapRateSettings)
    price_per_bed: PricePerBedSettings = Field(default_factory=PricePerBedSettings)
    dcf: DCFSettings = Field(default_factory=DCFSettings)
    noi_multiple: NOIMultipleSettings = Field(default_factory=NOIMultipleSettings)
    comparable_sales: ComparableSalesSettings = Field(default_factory=ComparableSalesSettings)
    replacement_cost: ReplacementCostSettings = Field(default_factory=ReplacementCostSettings)
    method_weights: AssetTypeTable[MethodWeights] = Field(
        default_factory=_per_asset_type(MethodWeights, defaults.METHOD_WEIGHTS)
    )
    confidence_weights: ConfidenceWeights = Field(default_factory=ConfidenceWeights)
    reconciliation: ReconciliationSettings = Field(default_factory=ReconciliationSettings)
