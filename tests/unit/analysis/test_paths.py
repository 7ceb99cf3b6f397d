# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for dotted parameter paths."""

import pytest
from pydantic import ValidationError

from carevalue.analysis import apply_overrides, get_path
from carevalue.analysis.paths import _coerce, field_bounds
from carevalue.core.primitives import ValuationInvariantError

BASE_RATE = "settings.valuation.cap_rate.by_asset_type.SNF.base_rate"


class TestGetPath:
    """Reading values by path."""

    def test_facility_and_settings_paths(self, sparse_facility, settings):
        """Test reads from both roots."""
        assert get_path(sparse_facility, settings, "facility.noi") == 1_800_000
        assert get_path(sparse_facility, settings, BASE_RATE) == 0.10

    def test_missing_optional_value(self, sparse_facility, settings):
        """Test that an unset optional attribute reads as None."""
        assert get_path(sparse_facility, settings, "facility.occupancy_rate") is None

    @pytest.mark.parametrize(
        "path",
        ["facility.nope", "settings.valuation.cap_rate.SNF", "noi", "market.noi", "facility"],
    )
    def test_unknown_paths(self, sparse_facility, settings, path):
        """Test that unknown or malformed paths are invariant violations."""
        with pytest.raises(ValuationInvariantError):
            get_path(sparse_facility, settings, path)


class TestApplyOverrides:
    """Writing values by path."""

    def test_returns_new_objects(self, sparse_facility, settings):
        """Test that overrides produce copies and leave the inputs untouched."""
        facility, new_settings = apply_overrides(
            sparse_facility, settings, {"facility.noi": 2_000_000, BASE_RATE: 0.08}
        )

        assert facility.noi == 2_000_000
        assert new_settings.valuation.cap_rate.by_asset_type.SNF.base_rate == 0.08
        assert new_settings.valuation.cap_rate.by_asset_type.ALF.base_rate == 0.075
        assert sparse_facility.noi == 1_800_000
        assert settings.valuation.cap_rate.by_asset_type.SNF.base_rate == 0.10

    def test_untouched_root_is_same_object(self, sparse_facility, settings):
        """Test that a root without overrides is returned as is."""
        _, same = apply_overrides(sparse_facility, settings, {"facility.noi": 1.0})
        assert same is settings

    def test_integer_fields_rounded(self, sparse_facility, settings):
        """Test that float samples for integer fields take the nearest integer."""
        facility, _ = apply_overrides(sparse_facility, settings, {"facility.beds": 99.6})
        assert facility.beds == 100

    def test_numeric_values_clamped_to_field_bounds(self, sparse_facility, settings):
        """Test that floats outside a field's ge/le constraints clamp to the nearest bound."""
        high, _ = apply_overrides(sparse_facility, settings, {"facility.occupancy_rate": 1.017})
        low, _ = apply_overrides(sparse_facility, settings, {"facility.building_age": -3.2})

        assert high.occupancy_rate == 1.0
        assert low.building_age == 0.0

    def test_integer_field_clamped_above_exclusive_bound(self, make_comparable):
        """Test that an integer field with gt=0 never rounds down to 0."""
        sale = make_comparable()
        assert field_bounds(sale, "beds")[0] > 0
        assert _coerce(sale.beds, sale, "beds", -4.0) == 1

    def test_settings_values_clamped(self, sparse_facility, settings):
        """Test clamping of bounded settings fields."""
        _, clamped = apply_overrides(
            sparse_facility, settings, {"settings.valuation.confidence_weights.low_confidence_multiplier": -0.2}
        )
        assert clamped.valuation.confidence_weights.low_confidence_multiplier == 0.0

    def test_invalid_value_raises(self, sparse_facility, settings):
        """Test that values failing the field's type raise ValidationError."""
        with pytest.raises(ValidationError):
            apply_overrides(sparse_facility, settings, {"facility.asset_type": "hospital"})
