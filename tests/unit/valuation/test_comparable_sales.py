# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for the comparable sales method."""

import pytest
from pydantic import ValidationError

from carevalue.core.primitives import ConfidenceEnum
from carevalue.core.settings import merge_settings
from carevalue.valuation import calculate_comparable_sales, select_comparables
from carevalue.valuation.comparable_sales import (
    adjust_comparable,
    comparable_confidence,
    similarity_score,
)


@pytest.fixture
def subject(make_facility):
    return make_facility(beds=100, quality_rating=3, occupancy_rate=0.85)


class TestSelectComparables:
    """Selection criteria and similarity ranking."""

    def test_filters_outside_criteria(self, settings, subject, make_comparable):
        """Test exclusion by asset type, distance, recency and bed variance."""
        sales = (
            make_comparable("keep"),
            make_comparable("alf", asset_type="ALF"),
            make_comparable("far", distance_miles=150),
            make_comparable("stale", months_since_sale=36),
            make_comparable("large", beds=200, sale_price=20_000_000),
        )
        selected = select_comparables(
            subject.model_copy(update={"comparables": sales}), settings.valuation.comparable_sales
        )
        assert [sale.sale_id for sale in selected] == ["keep"]

    def test_ranked_by_similarity(self, settings, subject, make_comparable):
        """Test that closer, more recent sales rank first."""
        sales = (
            make_comparable("distant", distance_miles=80, months_since_sale=20),
            make_comparable("near", distance_miles=2, months_since_sale=1),
        )
        selected = select_comparables(
            subject.model_copy(update={"comparables": sales}), settings.valuation.comparable_sales
        )
        assert [sale.sale_id for sale in selected] == ["near", "distant"]

    def test_capped_at_max_comparables(self, settings, subject, make_comparable):
        """Test that at most max_comparables sales are used."""
        sales = tuple(make_comparable(f"C{i}") for i in range(15))
        selected = select_comparables(
            subject.model_copy(update={"comparables": sales}), settings.valuation.comparable_sales
        )
        assert len(selected) == 10

    def test_similarity_in_unit_interval(self, settings, subject, make_comparable):
        """Test similarity bounds for an identical and a mismatched sale."""
        comp_settings = settings.valuation.comparable_sales
        identical = similarity_score(subject, make_comparable(quality_rating=3, occupancy_rate=0.85), comp_settings)
        mismatched = similarity_score(
            subject,
            make_comparable(asset_type="ALF", distance_miles=100, months_since_sale=24, quality_rating=0),
            comp_settings,
        )
        assert 0 <= mismatched < identical <= 1


class TestAdjustComparable:
    """Per-comparable adjustments."""

    def test_adjusts_toward_subject(self, settings, make_facility, make_comparable):
        """Test quality, occupancy and age adjustments, and the distance discount."""
        subject = make_facility(beds=100, quality_rating=4, occupancy_rate=0.90, building_age=10)
        sale = make_comparable(quality_rating=3, occupancy_rate=0.85, building_age=20, distance_miles=10)
        adjusted = adjust_comparable(subject, sale, settings.valuation.comparable_sales)

        # +0.05 older comparable, +0.05 five points lower occupancy, +0.03 one star lower
        assert adjusted.adjusted_price_per_bed == pytest.approx(100_000 * 1.13)
        assert adjusted.gross_adjustment == pytest.approx(0.13 + 0.01)
        assert adjusted.weight == pytest.approx(adjusted.similarity * 0.99)

    def test_factor_and_total_caps(self, settings, make_facility, make_comparable):
        """Test that each factor and the net adjustment are capped."""
        subject = make_facility(
            beds=100, quality_rating=5, occupancy_rate=0.95, building_age=0, payer_mix={"medicaid": 0.3}
        )
        sale = make_comparable(quality_rating=0, occupancy_rate=0.65, building_age=40, medicaid_share=0.9)
        adjusted = adjust_comparable(subject, sale, settings.valuation.comparable_sales)

        impacts = {a.description.split(" ", 1)[1]: a.impact for a in adjusted.adjustments}
        assert impacts["Quality"] == pytest.approx(0.15)
        assert impacts["Age"] == pytest.approx(0.12)
        assert impacts["Occupancy"] == pytest.approx(0.10)
        assert impacts["Payer mix"] == pytest.approx(0.08)
        assert adjusted.adjusted_price_per_bed == pytest.approx(140_000)


class TestComparableConfidence:
    """Confidence from count, dispersion and adjustment size."""

    def test_ideal_set_is_high(self, settings):
        """Test that six tight, lightly adjusted comparables give high confidence."""
        assert comparable_confidence(6, 0.0, 0.0, settings.valuation.comparable_sales) == ConfidenceEnum.HIGH

    def test_minimum_set_is_medium(self, settings):
        """Test that the minimum count with no dispersion scores medium."""
        assert comparable_confidence(3, 0.0, 0.0, settings.valuation.comparable_sales) == ConfidenceEnum.MEDIUM

    def test_below_minimum_is_low(self, settings):
        """Test that fewer than the minimum comparables give low confidence."""
        assert comparable_confidence(2, 0.0, 0.0, settings.valuation.comparable_sales) == ConfidenceEnum.LOW

    def test_dispersed_heavily_adjusted_is_low(self, settings):
        """Test that high dispersion and heavy adjustment pull confidence down."""
        assert comparable_confidence(3, 0.5, 0.4, settings.valuation.comparable_sales) == ConfidenceEnum.LOW

    def test_thresholds_define_high_and_medium_only(self, settings):
        """Test that scores below the medium threshold are low, with no separate low threshold."""
        thresholds = settings.valuation.comparable_sales.confidence_thresholds
        assert set(type(thresholds).model_fields) == {"high_confidence", "medium_confidence"}
        with pytest.raises(ValidationError):
            merge_settings(
                settings,
                {"valuation": {"comparable_sales": {"confidence_thresholds": {"low_confidence": 0.4}}}},
            )


class TestCalculateComparableSales:
    """Comparable sales calculator."""

    def test_identical_comparables(self, settings, subject, make_comparable):
        """Test that identical comparables value the subject at their price per bed."""
        sales = tuple(
            make_comparable(f"C{i}", quality_rating=3, occupancy_rate=0.85) for i in range(3)
        )
        result = calculate_comparable_sales(subject.model_copy(update={"comparables": sales}), settings)

        assert result.value == pytest.approx(10_000_000)
        assert result.inputs.comparables_used == 3
        assert result.inputs.coefficient_of_variation == pytest.approx(0.0)
        assert result.confidence == ConfidenceEnum.MEDIUM
        assert result.weight == 0.08

    def test_weighted_toward_similar_sales(self, settings, subject, make_comparable):
        """Test that the weighted price leans toward the more similar sale."""
        sales = (
            make_comparable("near", sale_price=12_000_000, quality_rating=3, occupancy_rate=0.85),
            make_comparable(
                "far", sale_price=8_000_000, distance_miles=90, months_since_sale=22,
                quality_rating=3, occupancy_rate=0.85,
            ),
        )
        result = calculate_comparable_sales(subject.model_copy(update={"comparables": sales}), settings)

        assert result.inputs.weighted_price_per_bed > 100_000
        assert result.confidence == ConfidenceEnum.LOW

    def test_not_applicable_without_comparables(self, settings, subject):
        """Test that no comparables makes the method inapplicable."""
        result = calculate_comparable_sales(subject, settings)
        assert not result.applicable

    def test_not_applicable_when_none_selected(self, settings, subject, make_comparable):
        """Test inapplicability when every comparable fails selection."""
        facility = subject.model_copy(update={"comparables": (make_comparable(distance_miles=500),)})
        result = calculate_comparable_sales(facility, settings)

        assert not result.applicable
        assert "selection criteria" in result.notes[0]
