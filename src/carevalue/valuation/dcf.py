# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Discounted Cash Flow Valuation

Projects monthly (or annual) operating cash flows from the trailing revenue
and NOI, growing revenue at the payer-mix blended rate and expenses at the
expense-mix blended rate, with occupancy ramping to the stabilized level.
Routine and cyclical capex and working capital build reduce free cash flow.
Cash flows and the terminal value are discounted at a build-up rate: risk-free
rate plus equity, size, industry and company premia plus a risk-tier premium.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import pandas as pd
from pyxirr import irr

from ..core.primitives import (
    FacilityAttributes,
    RiskTierEnum,
    ValuationInvariantError,
    ValuationMethodEnum,
)
from ..core.settings import DCFBaseSettings, Settings
from .base import (
    Adjustment,
    DCFInputs,
    InputCoverage,
    MethodResult,
    clamp,
    missing_notes,
    not_applicable,
    require_asset_type,
    require_non_negative_beds,
)
from .brackets import QUALITY_BRACKETS, first_match
from .registry import register_method

logger = logging.getLogger(__name__)

LABEL = "DCF"
REQUIRED_INPUTS = ("noi", "revenue", "occupancy_rate", "payer_mix")

ESTIMATED_NOI_MARGIN = 0.10
TURNAROUND_OCCUPANCY_GAP = 0.10

# Share of operating expenses by category, used to blend expense growth
EXPENSE_MIX: Dict[str, float] = {
    "nursing_labor": 0.35,
    "other_labor": 0.15,
    "agency_labor": 0.03,
    "benefits": 0.10,
    "food_and_dietary": 0.05,
    "medical_supplies": 0.04,
    "general_supplies": 0.03,
    "utilities": 0.04,
    "insurance": 0.04,
    "property_tax": 0.03,
    "management_fee": 0.05,
    "marketing": 0.01,
    "maintenance": 0.03,
    "professional_fees": 0.02,
    "technology": 0.01,
    "other": 0.02,
}

RISK_TIER_BY_QUALITY = {
    "five_star": RiskTierEnum.VERY_LOW_RISK,
    "four_star": RiskTierEnum.LOW_RISK,
    "three_star": RiskTierEnum.MODERATE_RISK,
    "two_star": RiskTierEnum.HIGH_RISK,
    "one_star": RiskTierEnum.VERY_HIGH_RISK,
    "unrated": RiskTierEnum.MODERATE_RISK,
}


@dataclass(frozen=True)
class DCFProjection:
    """Projected cash flows and the resulting present value."""

    cash_flows: pd.DataFrame
    discount_rate: float
    periods_per_year: int
    terminal_value: float
    present_value_cash_flows: float
    present_value_terminal: float
    revenue: float
    revenue_estimated: bool

    @property
    def value(self) -> float:
        return self.present_value_cash_flows + self.present_value_terminal

    def annual_free_cash_flows(self) -> pd.Series:
        return self.cash_flows.groupby("year")["free_cash_flow"].sum()

    def implied_irr(self) -> Optional[float]:
        """IRR of buying at the DCF value, holding, and selling at the terminal value."""
        flows = self.annual_free_cash_flows().to_list()
        if not flows:
            return None
        flows[-1] += self.terminal_value
        result = irr([-self.value] + flows, silent=True)
        if result is None or math.isnan(result):
            return None
        return float(result)


def blended_revenue_growth(facility: FacilityAttributes, base: DCFBaseSettings) -> float:
    growth = base.revenue_growth
    mix = facility.payer_mix
    if mix is None:
        return growth.other
    return (
        mix.medicare * growth.medicare_part_a
        + mix.medicaid * growth.medicaid
        + mix.private_pay * growth.private_pay
        + (mix.other + mix.unassigned) * growth.other
    )


def blended_expense_growth(base: DCFBaseSettings) -> float:
    return sum(share * getattr(base.expense_growth, name) for name, share in EXPENSE_MIX.items())


def risk_tier_for(facility: FacilityAttributes) -> RiskTierEnum:
    if facility.risk_tier is not None:
        return facility.risk_tier
    if facility.quality_rating is not None:
        return RISK_TIER_BY_QUALITY[first_match(QUALITY_BRACKETS, facility.quality_rating)]
    return RiskTierEnum.MODERATE_RISK


def discount_rate_for(facility: FacilityAttributes, settings: Settings) -> float:
    dcf_settings = settings.valuation.dcf
    base = dcf_settings.by_asset_type.for_type(facility.asset_type)
    tier = risk_tier_for(facility)
    rate = base.discount_rates.build_up_rate + base.risk_premium_tiers.adjustment_for(tier.value)
    limits = dcf_settings.discount_rate_limits.for_type(facility.asset_type)
    return clamp(rate, limits.min, limits.max)


def occupancy_path(
    current: float, base: DCFBaseSettings, periods: int, periods_per_year: int
) -> np.ndarray:
    """Occupancy per period, ramping linearly from current to stabilized occupancy."""
    ramp = base.occupancy_ramp
    gap = ramp.stabilized_occupancy - current
    if gap <= 0:
        months = ramp.ramp_up_months_stabilized
        gap = 0.0
    elif gap > TURNAROUND_OCCUPANCY_GAP:
        months = ramp.ramp_up_months_turnaround
    else:
        months = ramp.ramp_up_months_new_acquisition
    elapsed_months = np.arange(1, periods + 1) * (12 / periods_per_year)
    progress = np.ones(periods) if months <= 0 else np.minimum(elapsed_months / months, 1.0)
    return current + gap * progress


def project_cash_flows(facility: FacilityAttributes, settings: Settings) -> DCFProjection:
    """
    Build the cash flow projection for a facility with positive NOI.

    Raises:
        ValuationInvariantError: If the exit cap rate is not positive or, for
            perpetuity growth, the discount rate does not exceed the growth rate
    """
    dcf_settings = settings.valuation.dcf
    base = dcf_settings.by_asset_type.for_type(facility.asset_type)
    years = dcf_settings.effective_projection_years
    periods_per_year = 12 if dcf_settings.monthly_granularity else 1
    periods = years * periods_per_year

    revenue_estimated = facility.revenue is None
    revenue = facility.noi / ESTIMATED_NOI_MARGIN if revenue_estimated else facility.revenue
    expenses = revenue - facility.noi
    current_occupancy = (
        facility.occupancy_rate
        if facility.occupancy_rate
        else base.occupancy_ramp.stabilized_occupancy
    )
    beds = facility.beds or 0
    building_age = facility.building_age or 0.0

    period_index = np.arange(1, periods + 1)
    year = (period_index - 1) // periods_per_year + 1
    occupancy = occupancy_path(current_occupancy, base, periods, periods_per_year)
    revenue_growth = (1 + blended_revenue_growth(facility, base)) ** (year - 1)
    expense_growth = (1 + blended_expense_growth(base)) ** (year - 1)

    period_revenue = revenue / periods_per_year * revenue_growth * occupancy / current_occupancy
    period_expenses = expenses / periods_per_year * expense_growth
    noi = period_revenue - period_expenses

    capex_assumptions = base.capex_assumptions
    capex = np.full(
        periods,
        beds * (capex_assumptions.routine_per_bed_annual + capex_assumptions.technology_per_bed_annual)
        / periods_per_year,
    )
    first_period_of_year = (period_index - 1) % periods_per_year == 0
    for cycle, per_bed in (
        (capex_assumptions.major_capex_cycle_years, capex_assumptions.major_capex_per_bed),
        (capex_assumptions.furniture_replacement_years, capex_assumptions.furniture_per_bed),
    ):
        if cycle > 0:
            due = first_period_of_year & (np.floor(building_age + year) % cycle == 0)
            capex = capex + np.where(due, beds * per_bed, 0.0)

    annualized_revenue = period_revenue * periods_per_year
    working_capital = base.working_capital.working_capital_percent * annualized_revenue
    working_capital_change = np.diff(
        working_capital, prepend=base.working_capital.working_capital_percent * revenue
    )
    free_cash_flow = noi - capex - working_capital_change

    rate = discount_rate_for(facility, settings)
    discount_factor = (1 + rate) ** (-period_index / periods_per_year)
    present_value = free_cash_flow * discount_factor

    terminal = base.terminal_value
    final_year_noi = float(noi[-periods_per_year:].sum())
    if terminal.use_exit_cap_rate:
        if terminal.exit_cap_rate <= 0:
            raise ValuationInvariantError(
                f"Exit cap rate must be positive, got {terminal.exit_cap_rate}"
            )
        terminal_value = final_year_noi / terminal.exit_cap_rate * (1 - terminal.selling_costs_percent)
    else:
        if rate <= terminal.perpetual_growth_rate:
            raise ValuationInvariantError(
                f"Discount rate ({rate:.2%}) must exceed perpetual growth "
                f"({terminal.perpetual_growth_rate:.2%})"
            )
        final_year_fcf = float(free_cash_flow[-periods_per_year:].sum())
        terminal_value = (
            final_year_fcf * (1 + terminal.perpetual_growth_rate)
            / (rate - terminal.perpetual_growth_rate)
        )
    present_value_terminal = terminal_value * (1 + rate) ** (-years)

    frame = pd.DataFrame(
        {
            "period": period_index,
            "year": year,
            "occupancy": occupancy,
            "revenue": period_revenue,
            "expenses": period_expenses,
            "noi": noi,
            "capex": capex,
            "working_capital_change": working_capital_change,
            "free_cash_flow": free_cash_flow,
            "discount_factor": discount_factor,
            "present_value": present_value,
        }
    ).set_index("period")

    return DCFProjection(
        cash_flows=frame,
        discount_rate=rate,
        periods_per_year=periods_per_year,
        terminal_value=terminal_value,
        present_value_cash_flows=float(present_value.sum()),
        present_value_terminal=present_value_terminal,
        revenue=revenue,
        revenue_estimated=revenue_estimated,
    )


@register_method(ValuationMethodEnum.DCF, LABEL)
def calculate_dcf(facility: FacilityAttributes, settings: Settings) -> MethodResult:
    asset_type = require_asset_type(facility.asset_type)
    require_non_negative_beds(facility)
    method = ValuationMethodEnum.DCF

    coverage = InputCoverage.of(facility, REQUIRED_INPUTS)
    if facility.noi is None or facility.noi <= 0:
        return not_applicable(method, LABEL, "positive NOI not provided")
    if not coverage.sufficient:
        return not_applicable(method, LABEL, f"insufficient data ({coverage.describe()})")

    projection = project_cash_flows(facility, settings)
    value = projection.value
    if value <= 0:
        return not_applicable(method, LABEL, "projected cash flows do not support a positive value")

    terminal = settings.valuation.dcf.by_asset_type.for_type(asset_type).terminal_value
    adjustments = [
        Adjustment(description="Discount rate", impact=projection.discount_rate),
        Adjustment(
            description="Exit cap rate" if terminal.use_exit_cap_rate else "Perpetual growth rate",
            impact=terminal.exit_cap_rate if terminal.use_exit_cap_rate else terminal.perpetual_growth_rate,
        ),
    ]
    logger.debug(
        f"{LABEL}: {projection.discount_rate:.2%} discount rate, "
        f"PV cash flows ${projection.present_value_cash_flows:,.0f}, "
        f"PV terminal ${projection.present_value_terminal:,.0f}"
    )

    confidence = coverage.confidence()

    return MethodResult(
        method=method,
        label=LABEL,
        value=value,
        confidence=confidence,
        inputs=DCFInputs(
            noi=facility.noi,
            revenue=projection.revenue,
            revenue_estimated=projection.revenue_estimated,
            discount_rate=projection.discount_rate,
            projection_years=settings.valuation.dcf.effective_projection_years,
            terminal_value=projection.terminal_value,
            present_value_cash_flows=projection.present_value_cash_flows,
            present_value_terminal=projection.present_value_terminal,
            implied_irr=projection.implied_irr(),
        ),
        adjustments=tuple(adjustments),
        weight=settings.valuation.method_weights.for_type(asset_type).dcf,
        notes=missing_notes(LABEL, coverage),
    )
