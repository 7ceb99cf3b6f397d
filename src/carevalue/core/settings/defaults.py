# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Default valuation tables (settings version 2.0.0).

Plain data consumed by the settings schema's default factories. ALF and ILF
cap rate tables inherit every SNF bracket except base rate, quality and size.
"""

from __future__ import annotations

from typing import Any, Dict

SETTINGS_VERSION = "2.0.0"

# === CAP RATE ===

CAP_RATE_SNF: Dict[str, Any] = {
    "base_rate": 0.10,
    "quality_adjustments": {
        "five_star": -0.015, "four_star": -0.0075, "three_star": 0.0,
        "two_star": 0.01, "one_star": 0.025, "unrated": 0.015,
    },
    "size_adjustments": {
        "under_30_beds": 0.025, "beds_30_to_50": 0.015, "beds_50_to_75": 0.01,
        "beds_75_to_100": 0.005, "beds_100_to_125": 0.0, "beds_125_to_150": -0.005,
        "beds_150_to_200": -0.0075, "beds_200_to_300": -0.01, "over_300_beds": -0.0125,
    },
    "age_adjustments": {
        "under_3_years": -0.015, "years_3_to_5": -0.01, "years_5_to_10": -0.005,
        "years_10_to_15": 0.0, "years_15_to_20": 0.005, "years_20_to_25": 0.01,
        "years_25_to_30": 0.015, "years_30_to_40": 0.02, "over_40_years": 0.025,
    },
    "occupancy_adjustments": {
        "above_98": -0.015, "percent_95_to_98": -0.01, "percent_92_to_95": -0.005,
        "percent_90_to_92": 0.0, "percent_87_to_90": 0.005, "percent_85_to_87": 0.01,
        "percent_82_to_85": 0.015, "percent_80_to_82": 0.02, "percent_75_to_80": 0.025,
        "percent_70_to_75": 0.035, "below_70": 0.05,
    },
    "payer_mix_adjustments": {
        "high_medicare": -0.01, "moderate_medicare": 0.0, "low_medicare": 0.005,
        "high_medicaid": 0.015, "moderate_medicaid": 0.005, "low_medicaid": 0.0,
        "high_private_pay": -0.015, "moderate_private_pay": -0.005, "low_private_pay": 0.0,
    },
    "acuity_adjustments": {"high_acuity": -0.005, "moderate_acuity": 0.0, "low_acuity": 0.005},
    "location_adjustments": {"urban": -0.005, "suburban": 0.0, "rural": 0.01, "frontier": 0.02},
    "ownership_adjustments": {"for_profit": 0.0, "nonprofit": 0.005, "government": 0.01},
    "chain_adjustments": {
        "major_chain": -0.005, "regional_chain": 0.0, "small_chain": 0.005, "independent": 0.01,
    },
    "market_conditions": {
        "very_hot": -0.015, "hot": -0.0075, "balanced": 0.0, "cool": 0.0075, "very_cool": 0.015,
    },
    "competition_adjustments": {
        "low_competition": -0.01, "moderate_competition": 0.0,
        "high_competition": 0.005, "very_high_competition": 0.01,
    },
    "renovation_adjustments": {
        "recently_renovated": -0.01, "modernized": -0.005,
        "needs_updates": 0.005, "significant_deferred": 0.015,
    },
    "regulatory_adjustments": {
        "excellent_compliance": -0.01, "good_compliance": -0.005, "moderate_compliance": 0.0,
        "poor_compliance": 0.01, "severe_issues": 0.025,
    },
}

CAP_RATE_ALF: Dict[str, Any] = {
    **CAP_RATE_SNF,
    "base_rate": 0.075,
    "quality_adjustments": {
        "five_star": -0.01, "four_star": -0.005, "three_star": 0.0,
        "two_star": 0.0075, "one_star": 0.015, "unrated": 0.01,
    },
    "size_adjustments": {
        "under_30_beds": 0.02, "beds_30_to_50": 0.015, "beds_50_to_75": 0.01,
        "beds_75_to_100": 0.005, "beds_100_to_125": 0.0, "beds_125_to_150": -0.005,
        "beds_150_to_200": -0.0075, "beds_200_to_300": -0.01, "over_300_beds": -0.0125,
    },
}

CAP_RATE_ILF: Dict[str, Any] = {
    **CAP_RATE_SNF,
    "base_rate": 0.065,
    "quality_adjustments": {
        "five_star": -0.0075, "four_star": -0.00375, "three_star": 0.0,
        "two_star": 0.005, "one_star": 0.01, "unrated": 0.0075,
    },
    "size_adjustments": {
        "under_30_beds": 0.015, "beds_30_to_50": 0.01, "beds_50_to_75": 0.0075,
        "beds_75_to_100": 0.005, "beds_100_to_125": 0.0, "beds_125_to_150": -0.0025,
        "beds_150_to_200": -0.005, "beds_200_to_300": -0.0075, "over_300_beds": -0.01,
    },
}

CAP_RATE_REGIONAL = {
    "west": -0.005, "midwest": 0.01, "northeast": -0.01, "southeast": 0.005, "southwest": 0.0,
}

CAP_RATE_LIMITS = {
    "SNF": {"min": 0.06, "max": 0.16},
    "ALF": {"min": 0.05, "max": 0.12},
    "ILF": {"min": 0.04, "max": 0.10},
}

# === PRICE PER BED ===


def _size_dollars(*values: float) -> Dict[str, float]:
    keys = (
        "under_30_beds", "beds_30_to_50", "beds_50_to_75", "beds_75_to_100", "beds_100_to_125",
        "beds_125_to_150", "beds_150_to_200", "beds_200_to_300", "over_300_beds",
    )
    return dict(zip(keys, values))


def _age_dollars(*values: float) -> Dict[str, float]:
    keys = (
        "under_3_years", "years_3_to_5", "years_5_to_10", "years_10_to_15", "years_15_to_20",
        "years_20_to_25", "years_25_to_30", "years_30_to_40", "over_40_years",
    )
    return dict(zip(keys, values))


PRICE_PER_BED_SNF: Dict[str, Any] = {
    "base_price": 85_000,
    "quality_multipliers": {
        "five_star": 1.25, "four_star": 1.12, "three_star": 1.0,
        "two_star": 0.85, "one_star": 0.70, "unrated": 0.90,
    },
    "size_adjustments": _size_dollars(-8000, -5000, -2500, 0, 2500, 5000, 7500, 10000, 12500),
    "age_adjustments": _age_dollars(15000, 10000, 5000, 0, -5000, -10000, -15000, -20000, -25000),
    "condition_multipliers": {"excellent": 1.20, "good": 1.05, "fair": 0.90, "poor": 0.70, "critical": 0.50},
    "construction_adjustments": {
        "new_construction": 1.25, "major_renovation": 1.10,
        "minor_renovation": 1.0, "original_condition": 0.85,
    },
    "location_adjustments": {
        "prime_location": 1.15, "good_location": 1.05,
        "average_location": 1.0, "challenging_location": 0.85,
    },
    "licensure_adjustments": {"fully_licensed": 1.0, "provisional_license": 0.90, "limited_license": 0.80},
}

PRICE_PER_BED_ALF: Dict[str, Any] = {
    "base_price": 120_000,
    "quality_multipliers": {
        "five_star": 1.20, "four_star": 1.10, "three_star": 1.0,
        "two_star": 0.88, "one_star": 0.75, "unrated": 0.92,
    },
    "size_adjustments": _size_dollars(-10000, -6000, -3000, 0, 3000, 6000, 9000, 12000, 15000),
    "age_adjustments": _age_dollars(20000, 14000, 8000, 0, -6000, -12000, -18000, -24000, -30000),
    "condition_multipliers": {"excellent": 1.25, "good": 1.08, "fair": 0.88, "poor": 0.68, "critical": 0.48},
    "construction_adjustments": {
        "new_construction": 1.30, "major_renovation": 1.12,
        "minor_renovation": 1.0, "original_condition": 0.82,
    },
    "location_adjustments": {
        "prime_location": 1.20, "good_location": 1.08,
        "average_location": 1.0, "challenging_location": 0.82,
    },
    "licensure_adjustments": {"fully_licensed": 1.0, "provisional_license": 0.88, "limited_license": 0.78},
}

PRICE_PER_BED_ILF: Dict[str, Any] = {
    "base_price": 150_000,
    "quality_multipliers": {
        "five_star": 1.18, "four_star": 1.08, "three_star": 1.0,
        "two_star": 0.90, "one_star": 0.78, "unrated": 0.94,
    },
    "size_adjustments": _size_dollars(-12000, -8000, -4000, 0, 4000, 8000, 12000, 16000, 20000),
    "age_adjustments": _age_dollars(25000, 18000, 10000, 0, -8000, -16000, -24000, -32000, -40000),
    "condition_multipliers": {"excellent": 1.28, "good": 1.10, "fair": 0.85, "poor": 0.65, "critical": 0.45},
    "construction_adjustments": {
        "new_construction": 1.35, "major_renovation": 1.15,
        "minor_renovation": 1.0, "original_condition": 0.80,
    },
    "location_adjustments": {
        "prime_location": 1.25, "good_location": 1.10,
        "average_location": 1.0, "challenging_location": 0.80,
    },
    "licensure_adjustments": {"fully_licensed": 1.0, "provisional_license": 0.85, "limited_license": 0.75},
}

PRICE_PER_BED_REGIONAL = {
    "west": 1.25, "midwest": 0.85, "northeast": 1.15, "southeast": 0.95, "southwest": 1.05,
}

PRICE_PER_BED_LIMITS = {
    "SNF": {"min": 30_000, "max": 200_000},
    "ALF": {"min": 50_000, "max": 300_000},
    "ILF": {"min": 75_000, "max": 400_000},
}

# === DCF ===

DCF_SNF: Dict[str, Any] = {
    "discount_rates": {
        "risk_free_rate": 0.04, "equity_risk_premium": 0.05, "size_risk_premium": 0.02,
        "industry_risk_premium": 0.015, "company_specific_risk": 0.01,
    },
    "risk_premium_tiers": {
        "very_low_risk": 0.005, "low_risk": 0.01, "moderate_risk": 0.02,
        "high_risk": 0.035, "very_high_risk": 0.05,
    },
    "terminal_value": {"exit_cap_rate": 0.105, "perpetual_growth_rate": 0.02, "use_exit_cap_rate": True},
    "revenue_growth": {
        "medicare_part_a": 0.025, "medicare_part_b": 0.02, "medicare_advantage": 0.03,
        "medicaid": 0.02, "private_pay": 0.035, "managed_care": 0.025,
        "va_contract": 0.025, "hospice": 0.02, "other": 0.02,
    },
    "expense_growth": {
        "nursing_labor": 0.04, "other_labor": 0.035, "agency_labor": 0.03, "benefits": 0.045,
        "food_and_dietary": 0.025, "medical_supplies": 0.03, "general_supplies": 0.025,
        "utilities": 0.03, "insurance": 0.05, "property_tax": 0.02, "management_fee": 0.025,
        "marketing": 0.02, "maintenance": 0.025, "professional_fees": 0.03, "technology": 0.02,
        "other": 0.025,
    },
    "occupancy_ramp": {
        "stabilized_occupancy": 0.90, "ramp_up_months_new_acquisition": 12,
        "ramp_up_months_turnaround": 24, "ramp_up_months_stabilized": 0,
    },
    "capex_assumptions": {
        "routine_per_bed_annual": 1500, "major_capex_cycle_years": 15, "major_capex_per_bed": 25000,
        "technology_per_bed_annual": 300, "furniture_replacement_years": 7, "furniture_per_bed": 3000,
    },
    "working_capital": {"working_capital_percent": 0.05},
}

DCF_ALF: Dict[str, Any] = {
    "discount_rates": {
        "risk_free_rate": 0.04, "equity_risk_premium": 0.045, "size_risk_premium": 0.015,
        "industry_risk_premium": 0.01, "company_specific_risk": 0.01,
    },
    "risk_premium_tiers": {
        "very_low_risk": 0.005, "low_risk": 0.01, "moderate_risk": 0.018,
        "high_risk": 0.03, "very_high_risk": 0.045,
    },
    "terminal_value": {"exit_cap_rate": 0.08, "perpetual_growth_rate": 0.022, "use_exit_cap_rate": True},
    "revenue_growth": {
        "medicare_part_a": 0.0, "medicare_part_b": 0.0, "medicare_advantage": 0.0,
        "medicaid": 0.02, "private_pay": 0.04, "managed_care": 0.03,
        "va_contract": 0.025, "hospice": 0.02, "other": 0.025,
    },
    "expense_growth": {
        "nursing_labor": 0.038, "other_labor": 0.032, "agency_labor": 0.025, "benefits": 0.04,
        "food_and_dietary": 0.025, "medical_supplies": 0.025, "general_supplies": 0.022,
        "utilities": 0.028, "insurance": 0.045, "property_tax": 0.02, "management_fee": 0.025,
        "marketing": 0.025, "maintenance": 0.025, "professional_fees": 0.028, "technology": 0.02,
        "other": 0.022,
    },
    "occupancy_ramp": {
        "stabilized_occupancy": 0.92, "ramp_up_months_new_acquisition": 15,
        "ramp_up_months_turnaround": 18, "ramp_up_months_stabilized": 0,
    },
    "capex_assumptions": {
        "routine_per_bed_annual": 1200, "major_capex_cycle_years": 12, "major_capex_per_bed": 20000,
        "technology_per_bed_annual": 250, "furniture_replacement_years": 6, "furniture_per_bed": 3500,
    },
    "working_capital": {"working_capital_percent": 0.04},
}

DCF_ILF: Dict[str, Any] = {
    "discount_rates": {
        "risk_free_rate": 0.04, "equity_risk_premium": 0.04, "size_risk_premium": 0.01,
        "industry_risk_premium": 0.008, "company_specific_risk": 0.008,
    },
    "risk_premium_tiers": {
        "very_low_risk": 0.004, "low_risk": 0.008, "moderate_risk": 0.015,
        "high_risk": 0.025, "very_high_risk": 0.04,
    },
    "terminal_value": {"exit_cap_rate": 0.07, "perpetual_growth_rate": 0.025, "use_exit_cap_rate": True},
    "revenue_growth": {
        "medicare_part_a": 0.0, "medicare_part_b": 0.0, "medicare_advantage": 0.0,
        "medicaid": 0.0, "private_pay": 0.045, "managed_care": 0.0,
        "va_contract": 0.0, "hospice": 0.0, "other": 0.03,
    },
    "expense_growth": {
        "nursing_labor": 0.035, "other_labor": 0.03, "agency_labor": 0.02, "benefits": 0.038,
        "food_and_dietary": 0.025, "medical_supplies": 0.02, "general_supplies": 0.02,
        "utilities": 0.025, "insurance": 0.04, "property_tax": 0.02, "management_fee": 0.025,
        "marketing": 0.03, "maintenance": 0.025, "professional_fees": 0.025, "technology": 0.02,
        "other": 0.02,
    },
    "occupancy_ramp": {
        "stabilized_occupancy": 0.95, "ramp_up_months_new_acquisition": 18,
        "ramp_up_months_turnaround": 12, "ramp_up_months_stabilized": 0,
    },
    "capex_assumptions": {
        "routine_per_bed_annual": 1000, "major_capex_cycle_years": 10, "major_capex_per_bed": 18000,
        "technology_per_bed_annual": 200, "furniture_replacement_years": 5, "furniture_per_bed": 4000,
    },
    "working_capital": {"working_capital_percent": 0.03},
}

DCF_DISCOUNT_RATE_LIMITS = {
    "SNF": {"min": 0.08, "max": 0.20},
    "ALF": {"min": 0.07, "max": 0.18},
    "ILF": {"min": 0.06, "max": 0.16},
}

# === NOI MULTIPLE ===

NOI_MULTIPLE_SNF: Dict[str, Any] = {
    "base_multiple": 8.0,
    "quality_adjustments": {
        "five_star": 1.5, "four_star": 0.75, "three_star": 0.0,
        "two_star": -0.75, "one_star": -1.5, "unrated": -0.5,
    },
    "growth_adjustments": {
        "rapid_growth": 2.0, "strong_growth": 1.25, "moderate_growth": 0.5,
        "slow_growth": 0.0, "stable": -0.25, "declining": -1.5,
    },
    "stability_adjustments": {
        "very_stable": 1.0, "stable": 0.5, "moderate": 0.0, "volatile": -0.75, "very_volatile": -1.5,
    },
    "market_position_adjustments": {
        "market_leader": 1.0, "strong_position": 0.5, "average_position": 0.0,
        "weak_position": -0.75, "struggling": -1.5,
    },
    "market_strength_adjustments": {"strong": 1.0, "average": 0.0, "weak": -1.0},
}

NOI_MULTIPLE_ALF: Dict[str, Any] = {
    "base_multiple": 10.0,
    "quality_adjustments": {
        "five_star": 1.25, "four_star": 0.6, "three_star": 0.0,
        "two_star": -0.6, "one_star": -1.25, "unrated": -0.4,
    },
    "growth_adjustments": {
        "rapid_growth": 2.5, "strong_growth": 1.5, "moderate_growth": 0.75,
        "slow_growth": 0.25, "stable": 0.0, "declining": -1.25,
    },
    "stability_adjustments": {
        "very_stable": 1.25, "stable": 0.6, "moderate": 0.0, "volatile": -0.6, "very_volatile": -1.25,
    },
    "market_position_adjustments": {
        "market_leader": 1.25, "strong_position": 0.6, "average_position": 0.0,
        "weak_position": -0.6, "struggling": -1.25,
    },
    "market_strength_adjustments": {"strong": 1.5, "average": 0.0, "weak": -1.5},
}

NOI_MULTIPLE_ILF: Dict[str, Any] = {
    "base_multiple": 12.0,
    "quality_adjustments": {
        "five_star": 1.0, "four_star": 0.5, "three_star": 0.0,
        "two_star": -0.5, "one_star": -1.0, "unrated": -0.3,
    },
    "growth_adjustments": {
        "rapid_growth": 3.0, "strong_growth": 2.0, "moderate_growth": 1.0,
        "slow_growth": 0.5, "stable": 0.0, "declining": -1.0,
    },
    "stability_adjustments": {
        "very_stable": 1.5, "stable": 0.75, "moderate": 0.0, "volatile": -0.5, "very_volatile": -1.0,
    },
    "market_position_adjustments": {
        "market_leader": 1.5, "strong_position": 0.75, "average_position": 0.0,
        "weak_position": -0.5, "struggling": -1.0,
    },
    "market_strength_adjustments": {"strong": 1.0, "average": 0.0, "weak": -1.0},
}

NOI_MULTIPLE_LIMITS = {
    "SNF": {"min": 5.0, "max": 12.0},
    "ALF": {"min": 6.0, "max": 15.0},
    "ILF": {"min": 8.0, "max": 18.0},
}

# === REPLACEMENT COST ===

REPLACEMENT_COST = {
    "SNF": {
        "cost_per_bed": 175_000, "depreciation_rate_annual": 0.025,
        "functional_obsolescence": 0.05, "economic_obsolescence": 0.03,
    },
    "ALF": {
        "cost_per_bed": 200_000, "depreciation_rate_annual": 0.022,
        "functional_obsolescence": 0.04, "economic_obsolescence": 0.025,
    },
    "ILF": {
        "cost_per_bed": 225_000, "depreciation_rate_annual": 0.02,
        "functional_obsolescence": 0.03, "economic_obsolescence": 0.02,
    },
}

REPLACEMENT_COST_REGIONAL = {
    "west": 1.30, "midwest": 0.85, "northeast": 1.25, "southeast": 0.90, "southwest": 1.05,
}

# === RECONCILIATION ===

METHOD_WEIGHTS = {
    "SNF": {
        "cap_rate": 0.30, "price_per_bed": 0.20, "dcf": 0.25,
        "noi_multiple": 0.15, "comparable_sales": 0.08, "replacement_cost": 0.02,
    },
    "ALF": {
        "cap_rate": 0.25, "price_per_bed": 0.22, "dcf": 0.25,
        "noi_multiple": 0.12, "comparable_sales": 0.12, "replacement_cost": 0.04,
    },
    "ILF": {
        "cap_rate": 0.22, "price_per_bed": 0.25, "dcf": 0.23,
        "noi_multiple": 0.10, "comparable_sales": 0.15, "replacement_cost": 0.05,
    },
}
