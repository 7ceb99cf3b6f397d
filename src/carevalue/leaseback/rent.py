# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Sale-Leaseback Rent Suggestion

    purchase price = NOI / cap rate
    annual rent    = purchase price x yield
    coverage ratio = EBITDAR / annual rent

Coverage of at least 1.40x is healthy, at least 1.25x a warning, and
anything lower critical.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd
from pydantic import Field

from ..core.primitives import (
    CoverageStatusEnum,
    FloatBetween0And1,
    Model,
    PositiveFloat,
    ValuationInvariantError,
)

logger = logging.getLogger(__name__)

HEALTHY_COVERAGE = 1.40
WARNING_COVERAGE = 1.25
CRITICAL_COVERAGE = 1.10


class RentAssumptions(Model):
    cap_rate: PositiveFloat = 0.075
    yield_rate: PositiveFloat = 0.085
    min_coverage_ratio: PositiveFloat = HEALTHY_COVERAGE
    warning_coverage_ratio: PositiveFloat = WARNING_COVERAGE
    escalation: FloatBetween0And1 = 0.02


class RentSuggestion(Model):
    """
    Suggested acquisition price and rent for one facility.

    Attributes:
        max_rent_at_140: Highest rent that keeps coverage at 1.40x
        escalation_schedule: Annual rent for each lease year, escalated from year one
    """

    name: Optional[str] = None
    beds: Optional[int] = None
    noi: float
    ebitdar: float
    purchase_price: float
    annual_rent: float
    monthly_rent: float
    rent_per_bed: Optional[float] = None
    price_per_bed: Optional[float] = None
    coverage_ratio: float
    coverage_status: CoverageStatusEnum
    max_rent_at_140: float
    max_rent_at_125: float
    max_rent_at_110: float
    escalation_schedule: List[float] = Field(default_factory=list)


class PortfolioRentSummary(Model):
    facilities: List[RentSuggestion]
    total_beds: int
    total_noi: float
    total_ebitdar: float
    total_purchase_price: float
    total_annual_rent: float
    total_monthly_rent: float
    weighted_cap_rate: float
    weighted_yield: float
    weighted_coverage_ratio: float
    coverage_status: CoverageStatusEnum
    healthy_count: int
    warning_count: int
    critical_count: int


def coverage_status(
    coverage_ratio: float,
    healthy: float = HEALTHY_COVERAGE,
    warning: float = WARNING_COVERAGE,
) -> CoverageStatusEnum:
    if coverage_ratio >= healthy:
        return CoverageStatusEnum.HEALTHY
    if coverage_ratio >= warning:
        return CoverageStatusEnum.WARNING
    return CoverageStatusEnum.CRITICAL


def project_rent_escalation(base_rent: float, escalation: float, years: int) -> pd.DataFrame:
    """Rent by lease year with running total; year one is the base rent."""
    if years < 0:
        raise ValueError(f"years must be non-negative, got {years}")
    year = pd.RangeIndex(1, years + 1, name="year")
    rent = pd.Series(base_rent * (1 + escalation) ** np.arange(years), index=year, name="rent")
    return pd.DataFrame({"rent": rent, "cumulative": rent.cumsum()})


def calculate_rent_suggestion(
    noi: float,
    ebitdar: float,
    beds: Optional[int] = None,
    cap_rate: float = 0.075,
    yield_rate: float = 0.085,
    escalation: float = 0.02,
    years: int = 10,
    name: Optional[str] = None,
) -> RentSuggestion:
    """
    Suggest purchase price and rent from NOI, and test rent against EBITDAR.

    Example:
        ```python
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000)
        s.purchase_price   # 13,333,333.33
        s.annual_rent      # 1,133,333.33
        s.coverage_ratio   # 1.41 (healthy)
        ```

    Raises:
        ValuationInvariantError: If cap rate or yield is not positive, or beds is negative
    """
    if cap_rate <= 0:
        raise ValuationInvariantError(f"Cap rate must be positive, got {cap_rate}")
    if yield_rate <= 0:
        raise ValuationInvariantError(f"Yield must be positive, got {yield_rate}")
    if beds is not None and beds < 0:
        raise ValuationInvariantError(f"Bed count cannot be negative, got {beds}")

    purchase_price = noi / cap_rate
    annual_rent = purchase_price * yield_rate
    coverage_ratio = ebitdar / annual_rent if annual_rent > 0 else 0.0
    per_bed = beds is not None and beds > 0

    schedule = project_rent_escalation(annual_rent, escalation, years)
    return RentSuggestion(
        name=name,
        beds=beds,
        noi=noi,
        ebitdar=ebitdar,
        purchase_price=purchase_price,
        annual_rent=annual_rent,
        monthly_rent=annual_rent / 12,
        rent_per_bed=annual_rent / beds if per_bed else None,
        price_per_bed=purchase_price / beds if per_bed else None,
        coverage_ratio=coverage_ratio,
        coverage_status=coverage_status(coverage_ratio),
        max_rent_at_140=ebitdar / HEALTHY_COVERAGE,
        max_rent_at_125=ebitdar / WARNING_COVERAGE,
        max_rent_at_110=ebitdar / CRITICAL_COVERAGE,
        escalation_schedule=schedule["rent"].tolist(),
    )


def summarize_portfolio(suggestions: Sequence[RentSuggestion]) -> PortfolioRentSummary:
    """
    Roll facility suggestions up to portfolio totals.

    Weighted metrics are ratios of totals, so larger facilities dominate.
    """
    frame = pd.DataFrame(
        [
            {
                "beds": s.beds or 0,
                "noi": s.noi,
                "ebitdar": s.ebitdar,
                "purchase_price": s.purchase_price,
                "annual_rent": s.annual_rent,
                "status": s.coverage_status,
            }
            for s in suggestions
        ],
        columns=["beds", "noi", "ebitdar", "purchase_price", "annual_rent", "status"],
    )
    totals = frame[["beds", "noi", "ebitdar", "purchase_price", "annual_rent"]].sum()
    price, rent = float(totals["purchase_price"]), float(totals["annual_rent"])
    weighted_coverage = float(totals["ebitdar"]) / rent if rent > 0 else 0.0
    counts = frame["status"].value_counts()
    logger.debug(f"Portfolio of {len(frame)} facilities: coverage {weighted_coverage:.2f}x")

    return PortfolioRentSummary(
        facilities=list(suggestions),
        total_beds=int(totals["beds"]),
        total_noi=float(totals["noi"]),
        total_ebitdar=float(totals["ebitdar"]),
        total_purchase_price=price,
        total_annual_rent=rent,
        total_monthly_rent=rent / 12,
        weighted_cap_rate=float(totals["noi"]) / price if price > 0 else 0.0,
        weighted_yield=rent / price if price > 0 else 0.0,
        weighted_coverage_ratio=weighted_coverage,
        coverage_status=coverage_status(weighted_coverage),
        healthy_count=int(counts.get(CoverageStatusEnum.HEALTHY, 0)),
        warning_count=int(counts.get(CoverageStatusEnum.WARNING, 0)),
        critical_count=int(counts.get(CoverageStatusEnum.CRITICAL, 0)),
    )


def rent_for_target_coverage(ebitdar: float, target_coverage: float) -> float:
    if target_coverage <= 0:
        raise ValuationInvariantError(f"Target coverage must be positive, got {target_coverage}")
    return ebitdar / target_coverage


def rent_scenarios(
    noi: float,
    cap_rates: Iterable[float] = (0.07, 0.075, 0.08, 0.085, 0.09),
    yields: Iterable[float] = (0.08, 0.085, 0.09),
) -> pd.DataFrame:
    """Purchase price and rent across a grid of cap rates and yields."""
    rows = []
    yields = list(yields)
    for cap_rate in cap_rates:
        if cap_rate <= 0:
            raise ValuationInvariantError(f"Cap rate must be positive, got {cap_rate}")
        for yield_rate in yields:
            price = noi / cap_rate
            rows.append(
                {
                    "cap_rate": cap_rate,
                    "yield_rate": yield_rate,
                    "purchase_price": price,
                    "annual_rent": price * yield_rate,
                    "monthly_rent": price * yield_rate / 12,
                }
            )
    return pd.DataFrame(rows)


def suggest_with_assumptions(
    noi: float, ebitdar: float, assumptions: RentAssumptions, beds: Optional[int] = None, years: int = 10
) -> RentSuggestion:
    """`calculate_rent_suggestion` driven by a `RentAssumptions` object."""
    suggestion = calculate_rent_suggestion(
        noi,
        ebitdar,
        beds=beds,
        cap_rate=assumptions.cap_rate,
        yield_rate=assumptions.yield_rate,
        escalation=assumptions.escalation,
        years=years,
    )
    status = coverage_status(
        suggestion.coverage_ratio, assumptions.min_coverage_ratio, assumptions.warning_coverage_ratio
    )
    return suggestion.model_copy(update={"coverage_status": status})
