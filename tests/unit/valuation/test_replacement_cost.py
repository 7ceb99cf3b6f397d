# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for the replacement cost method."""

import pytest

from carevalue.core.primitives import ConfidenceEnum
from carevalue.valuation import calculate_replacement_cost


class TestCalculateReplacementCost:
    """Replacement cost calculator."""

    def test_depreciated_cost(self, settings, make_facility):
        """Test cost new less obsolescence and age depreciation."""
        facility = make_facility(beds=100, building_age=10, region="midwest")
        result = calculate_replacement_cost(facility, settings)

        # 100 x 175,000 x 0.85 midwest x (1 - 0.05 - 0.03 - 10 x 0.025)
        assert result.value == pytest.approx(100 * 175_000 * 0.85 * 0.67)
        assert result.inputs.total_depreciation == pytest.approx(0.33)
        assert result.confidence == ConfidenceEnum.HIGH
        assert result.weight == 0.02

    def test_remaining_value_floored_at_zero(self, settings, make_facility):
        """Test that depreciation beyond 100% leaves zero value, not negative."""
        facility = make_facility(beds=100, building_age=40, region="midwest")
        result = calculate_replacement_cost(facility, settings)

        assert result.value == 0
        assert result.confidence == ConfidenceEnum.MEDIUM

    def test_missing_region_uses_neutral_multiplier(self, settings, make_facility):
        """Test a neutral regional multiplier and lower confidence without a region."""
        result = calculate_replacement_cost(make_facility(beds=100, building_age=10), settings)

        assert result.inputs.regional_multiplier == 1.0
        assert result.value == pytest.approx(100 * 175_000 * 0.67)
        assert result.confidence == ConfidenceEnum.MEDIUM

    def test_alf_cost_table(self, settings, make_facility):
        """Test that ALF facilities use the ALF cost per bed."""
        facility = make_facility(asset_type="ALF", beds=80, building_age=0, region="southwest")
        result = calculate_replacement_cost(facility, settings)

        assert result.inputs.cost_per_bed == 200_000
        assert result.value == pytest.approx(80 * 200_000 * 1.05 * (1 - 0.04 - 0.025))

    def test_sparse_facility_not_applicable(self, settings, make_facility):
        """Test that beds alone are insufficient."""
        assert not calculate_replacement_cost(make_facility(), settings).applicable
