# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for reconciling method results into one value."""

import pytest

from carevalue.core.primitives import (
    AssetTypeEnum,
    ConfidenceEnum,
    ReconciliationMethodEnum,
    ValuationInvariantError,
    ValuationMethodEnum,
)
from carevalue.core.settings import merge_settings
from carevalue.valuation import (
    combine,
    exclude_outliers,
    majority_confidence,
    mode_adjusted_average,
    normalize,
    reconcile,
    weighted_average,
)

M = ValuationMethodEnum
C = ConfidenceEnum


@pytest.fixture
def results_with(make_result):
    """Build a full result mapping; methods not given are not applicable."""

    def _build(**values):
        results = {method: make_result(method, 0.0, applicable=False) for method in M}
        for name, entry in values.items():
            value, confidence = entry
            results[M(name)] = make_result(M(name), value, confidence)
        return results

    return _build


class TestHelpers:
    """Weight arithmetic."""

    def test_normalize(self):
        """Test scaling weights to sum to 1."""
        assert normalize([1, 3]).tolist() == pytest.approx([0.25, 0.75])

    def test_normalize_rejects_zero_total(self):
        """Test that weights summing to zero cannot be normalized."""
        with pytest.raises(ValuationInvariantError):
            normalize([0, 0])

    def test_weighted_average_length_mismatch(self):
        """Test that values and weights must align."""
        with pytest.raises(ValuationInvariantError, match="2 values but 3 weights"):
            weighted_average([1, 2], [1, 1, 1])

    def test_majority_confidence_tie_goes_low(self, make_result):
        """Test that a tie between tiers resolves to the lower tier."""
        results = [make_result(M.CAP_RATE, 1.0, C.HIGH), make_result(M.DCF, 1.0, C.LOW)]
        assert majority_confidence(results, [0.5, 0.5]) == C.LOW

    def test_majority_confidence(self, make_result):
        """Test that the tier holding the most weight wins."""
        results = [
            make_result(M.CAP_RATE, 1.0, C.HIGH),
            make_result(M.DCF, 1.0, C.MEDIUM),
            make_result(M.PRICE_PER_BED, 1.0, C.MEDIUM),
        ]
        assert majority_confidence(results, [0.5, 0.3, 0.3]) == C.MEDIUM


class TestOutlierExclusion:
    """Median-based outlier exclusion."""

    def test_outlier_dropped(self, make_result):
        """Test that a method far from the median is excluded."""
        candidates = [
            make_result(M.CAP_RATE, 10_000_000),
            make_result(M.DCF, 10_500_000),
            make_result(M.PRICE_PER_BED, 20_000_000),
        ]
        kept, outliers = exclude_outliers(candidates, 0.25)

        assert [r.method for r in kept] == [M.CAP_RATE, M.DCF]
        assert outliers[0][0].method == M.PRICE_PER_BED
        assert outliers[0][1] == pytest.approx(9.5 / 10.5)

    def test_fewer_than_three_untouched(self, make_result):
        """Test that two methods are never tested for outliers."""
        candidates = [make_result(M.CAP_RATE, 10_000_000), make_result(M.DCF, 30_000_000)]
        kept, outliers = exclude_outliers(candidates, 0.25)

        assert len(kept) == 2
        assert outliers == []

    def test_never_leaves_fewer_than_two(self, make_result):
        """Test that exclusion is skipped when it would leave one method."""
        candidates = [
            make_result(M.CAP_RATE, 10_000_000),
            make_result(M.DCF, 20_000_000),
            make_result(M.PRICE_PER_BED, 40_000_000),
        ]
        kept, outliers = exclude_outliers(candidates, 0.25)

        assert len(kept) == 3
        assert outliers == []


class TestReconcile:
    """End-to-end reconciliation."""

    def test_confidence_weighted_value(self, settings, results_with):
        """Test renormalized, confidence-scaled weights and the value range."""
        results = results_with(
            cap_rate=(10_000_000, C.HIGH),
            dcf=(11_000_000, C.MEDIUM),
            price_per_bed=(9_000_000, C.LOW),
        )
        valuation = reconcile(results, settings, AssetTypeEnum.SNF, beds=100, noi=900_000)

        # Configured 0.30/0.25/0.20 renormalized, then x1.2/x1.0/x0.8 and renormalized
        raw = {M.CAP_RATE: 0.4 * 1.2, M.DCF: 0.25 / 0.75 * 1.0, M.PRICE_PER_BED: 0.2 / 0.75 * 0.8}
        total = sum(raw.values())
        expected = (10e6 * raw[M.CAP_RATE] + 11e6 * raw[M.DCF] + 9e6 * raw[M.PRICE_PER_BED]) / total

        assert valuation.reconciled_value == pytest.approx(expected)
        assert valuation.value_low == 9_000_000
        assert valuation.value_high == 11_000_000
        assert sum(valuation.effective_weights.values()) == pytest.approx(1.0)
        assert valuation.effective_weights[M.CAP_RATE] == pytest.approx(raw[M.CAP_RATE] / total)
        assert valuation.effective_weights[M.NOI_MULTIPLE] == 0
        assert valuation.overall_confidence == C.HIGH
        assert "Cap Rate (high confidence)" in valuation.confidence_factors
        assert valuation.value_per_bed == pytest.approx(expected / 100)
        assert valuation.implied_cap_rate == pytest.approx(900_000 / expected)

    def test_reconciled_within_range(self, settings, results_with):
        """Test that the reconciled value lies within [low, high]."""
        results = results_with(
            cap_rate=(12_000_000, C.LOW),
            dcf=(10_000_000, C.HIGH),
            noi_multiple=(11_000_000, C.MEDIUM),
            replacement_cost=(10_500_000, C.HIGH),
        )
        valuation = reconcile(results, settings, AssetTypeEnum.SNF)
        assert valuation.value_low <= valuation.reconciled_value <= valuation.value_high

    def test_outlier_excluded_and_reported(self, settings, results_with):
        """Test that an excluded outlier gets zero weight and a confidence factor."""
        results = results_with(
            cap_rate=(10_000_000, C.HIGH),
            dcf=(10_500_000, C.HIGH),
            price_per_bed=(20_000_000, C.HIGH),
        )
        valuation = reconcile(results, settings, AssetTypeEnum.SNF)

        assert valuation.excluded_outliers == (M.PRICE_PER_BED,)
        assert valuation.effective_weights[M.PRICE_PER_BED] == 0
        assert valuation.value_high == 10_500_000
        assert "Excluded Price Per Bed as outlier (90% from median)" in valuation.confidence_factors

    def test_outlier_exclusion_disabled(self, settings, results_with):
        """Test that outliers are kept when exclusion is turned off."""
        keep_all = merge_settings(settings, {"valuation": {"reconciliation": {"exclude_outliers": False}}})
        results = results_with(
            cap_rate=(10_000_000, C.HIGH),
            dcf=(10_500_000, C.HIGH),
            price_per_bed=(20_000_000, C.HIGH),
        )
        valuation = reconcile(results, keep_all, AssetTypeEnum.SNF)

        assert valuation.excluded_outliers == ()
        assert valuation.value_high == 20_000_000

    def test_single_method(self, settings, results_with):
        """Test that one applicable method carries all the weight."""
        valuation = reconcile(results_with(cap_rate=(18_000_000, C.MEDIUM)), settings, AssetTypeEnum.SNF)

        assert valuation.reconciled_value == pytest.approx(18_000_000)
        assert valuation.value_low == valuation.value_high == 18_000_000
        assert valuation.effective_weights[M.CAP_RATE] == pytest.approx(1.0)
        assert valuation.overall_confidence == C.MEDIUM

    def test_zero_weight_method_ignored(self, settings, results_with):
        """Test that a method configured with zero weight does not contribute."""
        no_dcf = merge_settings(
            settings,
            {"valuation": {"method_weights": {"SNF": {"dcf": 0.0, "cap_rate": 0.55}}}},
        )
        results = results_with(cap_rate=(10_000_000, C.MEDIUM))
        results[M.DCF] = results[M.DCF].model_copy(
            update={"applicable": True, "value": 50_000_000, "weight": 0.0}
        )
        valuation = reconcile(results, no_dcf, AssetTypeEnum.SNF)
        assert valuation.reconciled_value == pytest.approx(10_000_000)

    def test_no_applicable_method(self, settings, results_with):
        """Test the zero-value, low-confidence result when nothing applies."""
        valuation = reconcile(results_with(), settings, AssetTypeEnum.SNF, beds=100, noi=1_000_000)

        assert valuation.reconciled_value == 0
        assert valuation.value_low == valuation.value_high == 0
        assert valuation.overall_confidence == C.LOW
        assert valuation.confidence_factors[0] == "No valuation method was applicable"
        assert valuation.value_per_bed is None
        assert valuation.implied_cap_rate is None

    def test_missing_method_result(self, settings, results_with):
        """Test that every method must report a result."""
        results = results_with(cap_rate=(10_000_000, C.HIGH))
        del results[M.DCF]
        with pytest.raises(ValuationInvariantError, match="dcf"):
            reconcile(results, settings, AssetTypeEnum.SNF)

    def test_method_notes_carried(self, settings, results_with, make_result):
        """Test that method notes appear among the confidence factors."""
        results = results_with(cap_rate=(10_000_000, C.MEDIUM))
        results[M.CAP_RATE] = make_result(
            M.CAP_RATE, 10_000_000, C.MEDIUM, notes=("Cap Rate missing quality_rating",)
        )
        valuation = reconcile(results, settings, AssetTypeEnum.SNF)
        assert "Cap Rate missing quality_rating" in valuation.confidence_factors


class TestReconciliationMethods:
    """Alternative ways of combining the remaining method values."""

    @pytest.fixture
    def three_methods(self, results_with):
        return results_with(
            cap_rate=(10_000_000, C.MEDIUM),
            dcf=(11_000_000, C.MEDIUM),
            price_per_bed=(9_000_000, C.MEDIUM),
        )

    def test_default_is_weighted_average(self, settings):
        """Test the default reconciliation policy."""
        policy = settings.valuation.reconciliation
        assert policy.method == ReconciliationMethodEnum.WEIGHTED_AVERAGE
        assert policy.confidence_weighting

    def test_median(self, settings, three_methods):
        """Test that the median ignores weights."""
        by_median = merge_settings(settings, {"valuation": {"reconciliation": {"method": "median"}}})
        valuation = reconcile(three_methods, by_median, AssetTypeEnum.SNF)

        assert valuation.reconciled_value == pytest.approx(10_000_000)
        assert valuation.value_low <= valuation.reconciled_value <= valuation.value_high

    def test_median_of_even_count(self, settings, results_with):
        """Test that an even count averages the middle pair."""
        by_median = merge_settings(settings, {"valuation": {"reconciliation": {"method": "median"}}})
        results = results_with(
            cap_rate=(10_000_000, C.HIGH),
            dcf=(10_500_000, C.LOW),
            price_per_bed=(11_000_000, C.MEDIUM),
            noi_multiple=(12_000_000, C.MEDIUM),
        )
        valuation = reconcile(results, by_median, AssetTypeEnum.SNF)
        assert valuation.reconciled_value == pytest.approx(10_750_000)

    def test_mode_adjusted(self, settings, three_methods):
        """Test that weights are scaled by proximity to the median."""
        mode_adjusted = merge_settings(
            settings, {"valuation": {"reconciliation": {"method": "mode_adjusted"}}}
        )
        valuation = reconcile(three_methods, mode_adjusted, AssetTypeEnum.SNF)

        # Equal confidence leaves the configured 0.30/0.25/0.20 renormalized
        weights = {10e6: 0.30 * 1.0, 11e6: 0.25 / 1.1, 9e6: 0.20 / 1.1}
        expected = sum(v * w for v, w in weights.items()) / sum(weights.values())
        assert valuation.reconciled_value == pytest.approx(expected)
        assert valuation.value_low <= valuation.reconciled_value <= valuation.value_high

    def test_mode_adjusted_average_helper(self):
        """Test that a value at the median keeps its full weight."""
        assert mode_adjusted_average([10.0, 20.0], [1.0, 1.0]) == pytest.approx(15.0)
        assert mode_adjusted_average([10.0, 10.0, 40.0], [1.0, 1.0, 1.0]) == pytest.approx(
            (10 + 10 + 40 / 4) / 2.25
        )
        assert combine([5.0, 7.0, 100.0], [1, 1, 1], ReconciliationMethodEnum.MEDIAN) == 7.0

    def test_confidence_weighting_disabled(self, settings, results_with):
        """Test that configured weights are used as-is without confidence multipliers."""
        unweighted = merge_settings(
            settings, {"valuation": {"reconciliation": {"confidence_weighting": False}}}
        )
        results = results_with(
            cap_rate=(10_000_000, C.HIGH),
            dcf=(11_000_000, C.MEDIUM),
            price_per_bed=(9_000_000, C.LOW),
        )
        valuation = reconcile(results, unweighted, AssetTypeEnum.SNF)

        expected = (10e6 * 0.30 + 11e6 * 0.25 + 9e6 * 0.20) / 0.75
        assert valuation.reconciled_value == pytest.approx(expected)
        assert valuation.effective_weights[M.CAP_RATE] == pytest.approx(0.4)
        assert sum(valuation.effective_weights.values()) == pytest.approx(1.0)
