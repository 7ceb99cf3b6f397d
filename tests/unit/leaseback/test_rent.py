# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for sale-leaseback rent suggestions and portfolio roll-up."""

import pytest

from carevalue.core.primitives import CoverageStatusEnum, ValuationInvariantError
from carevalue.leaseback import (
    RentAssumptions,
    calculate_rent_suggestion,
    coverage_status,
    project_rent_escalation,
    rent_for_target_coverage,
    rent_scenarios,
    suggest_with_assumptions,
    summarize_portfolio,
)


class TestCalculateRentSuggestion:
    """Price, rent and coverage for a single facility."""

    def test_default_assumptions(self):
        """Test price and rent at a 7.5% cap rate and 8.5% yield."""
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000, beds=100)

        assert s.purchase_price == pytest.approx(13_333_333.33, abs=0.01)
        assert s.annual_rent == pytest.approx(1_133_333.33, abs=0.01)
        assert s.monthly_rent == pytest.approx(94_444.44, abs=0.01)
        assert s.coverage_ratio == pytest.approx(1.4118, abs=1e-4)
        assert s.coverage_status == CoverageStatusEnum.HEALTHY

    def test_per_bed_figures(self):
        """Test rent and price per bed."""
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000, beds=100)

        assert s.rent_per_bed == pytest.approx(11_333.33, abs=0.01)
        assert s.price_per_bed == pytest.approx(133_333.33, abs=0.01)

    def test_no_beds_omits_per_bed_figures(self):
        """Test that per-bed figures are absent without a bed count."""
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000)

        assert s.rent_per_bed is None
        assert s.price_per_bed is None

    def test_max_rent_thresholds(self):
        """Test the highest rent supported at each coverage threshold."""
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000)

        assert s.max_rent_at_140 == pytest.approx(1_142_857.14, abs=0.01)
        assert s.max_rent_at_125 == pytest.approx(1_280_000)
        assert s.max_rent_at_110 == pytest.approx(1_454_545.45, abs=0.01)

    def test_escalation_schedule(self):
        """Test compounding rent escalation from year one."""
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000, escalation=0.03, years=5)

        assert len(s.escalation_schedule) == 5
        assert s.escalation_schedule[0] == pytest.approx(s.annual_rent)
        assert s.escalation_schedule[4] == pytest.approx(s.annual_rent * 1.03**4)

    def test_critical_coverage(self):
        """Test that thin EBITDAR cover is critical."""
        s = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_200_000)

        assert s.coverage_ratio < 1.25
        assert s.coverage_status == CoverageStatusEnum.CRITICAL

    @pytest.mark.parametrize("kwargs", [{"cap_rate": 0.0}, {"yield_rate": -0.01}, {"beds": -5}])
    def test_invalid_inputs(self, kwargs):
        """Test that non-positive rates and negative beds are rejected."""
        with pytest.raises(ValuationInvariantError):
            calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000, **kwargs)


class TestCoverageStatus:
    @pytest.mark.parametrize(
        "ratio, expected",
        [
            (1.60, CoverageStatusEnum.HEALTHY),
            (1.40, CoverageStatusEnum.HEALTHY),
            (1.39, CoverageStatusEnum.WARNING),
            (1.25, CoverageStatusEnum.WARNING),
            (1.24, CoverageStatusEnum.CRITICAL),
        ],
    )
    def test_thresholds(self, ratio, expected):
        """Test status boundaries at 1.40x and 1.25x."""
        assert coverage_status(ratio) == expected

    def test_custom_thresholds(self):
        """Test assumption-driven thresholds."""
        assumptions = RentAssumptions(min_coverage_ratio=1.5, warning_coverage_ratio=1.3)
        s = suggest_with_assumptions(1_000_000, 1_600_000, assumptions)

        assert s.coverage_status == CoverageStatusEnum.WARNING

    def test_rent_for_target_coverage(self):
        """Test rent implied by a target coverage."""
        assert rent_for_target_coverage(1_600_000, 1.6) == pytest.approx(1_000_000)
        with pytest.raises(ValuationInvariantError):
            rent_for_target_coverage(1_600_000, 0.0)


class TestPortfolio:
    def test_summarize_portfolio(self):
        """Test totals, ratio-of-totals metrics and status counts."""
        healthy = calculate_rent_suggestion(noi=1_000_000, ebitdar=1_600_000, beds=100, name="A")
        critical = calculate_rent_suggestion(noi=500_000, ebitdar=600_000, beds=60, name="B")
        summary = summarize_portfolio([healthy, critical])

        assert summary.total_beds == 160
        assert summary.total_noi == pytest.approx(1_500_000)
        assert summary.total_purchase_price == pytest.approx(20_000_000)
        assert summary.total_annual_rent == pytest.approx(1_700_000)
        assert summary.weighted_cap_rate == pytest.approx(0.075)
        assert summary.weighted_yield == pytest.approx(0.085)
        assert summary.weighted_coverage_ratio == pytest.approx(2_200_000 / 1_700_000)
        assert summary.coverage_status == CoverageStatusEnum.WARNING
        assert (summary.healthy_count, summary.warning_count, summary.critical_count) == (1, 0, 1)

    def test_empty_portfolio(self):
        """Test that an empty portfolio rolls up to zeros."""
        summary = summarize_portfolio([])

        assert summary.total_beds == 0
        assert summary.weighted_coverage_ratio == 0.0
        assert summary.coverage_status == CoverageStatusEnum.CRITICAL


class TestProjections:
    def test_project_rent_escalation(self):
        """Test the rent schedule frame."""
        frame = project_rent_escalation(100_000, 0.02, 3)

        assert list(frame.index) == [1, 2, 3]
        assert frame.index.name == "year"
        assert frame["rent"].tolist() == pytest.approx([100_000, 102_000, 104_040])
        assert frame["cumulative"].iloc[-1] == pytest.approx(306_040)

    def test_rent_scenarios_grid(self):
        """Test one row per cap rate and yield pair."""
        grid = rent_scenarios(1_000_000, cap_rates=(0.07, 0.08), yields=(0.08, 0.09))

        assert len(grid) == 4
        row = grid[(grid["cap_rate"] == 0.08) & (grid["yield_rate"] == 0.09)].iloc[0]
        assert row["purchase_price"] == pytest.approx(12_500_000)
        assert row["annual_rent"] == pytest.approx(1_125_000)
