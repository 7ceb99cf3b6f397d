# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Tests for summary statistics helpers."""

import pytest

from carevalue.analysis import histogram, percentiles
from carevalue.analysis.statistics import mean_confidence_interval


class TestPercentiles:
    def test_linear_interpolation(self):
        """Test linearly interpolated order statistics."""
        summary = percentiles([1, 2, 3, 4, 5])

        assert summary.p5 == pytest.approx(1.2)
        assert summary.p25 == pytest.approx(2.0)
        assert summary.p50 == pytest.approx(3.0)
        assert summary.p75 == pytest.approx(4.0)
        assert summary.p95 == pytest.approx(4.8)

    def test_empty(self):
        """Test zeros for an empty sample."""
        assert percentiles([]).p50 == 0


class TestHistogram:
    def test_fixed_width_buckets(self):
        """Test bucket assignment, midpoints and percentages."""
        buckets = histogram(list(range(10)), bucket_count=5)

        assert [b.count for b in buckets] == [2, 2, 2, 2, 2]
        assert buckets[0].bucket == pytest.approx(0.9)
        assert buckets[-1].range_end == pytest.approx(9.0)
        assert sum(b.percentage for b in buckets) == pytest.approx(100.0)

    def test_maximum_in_last_bucket(self):
        """Test that counts always sum to the sample size."""
        values = [0.1, 0.5, 0.5, 0.9, 1.0]
        assert sum(b.count for b in histogram(values, bucket_count=20)) == len(values)

    def test_constant_sample(self):
        """Test that equal values all land in the first bucket."""
        buckets = histogram([7.0] * 4, bucket_count=3)

        assert [b.count for b in buckets] == [4, 0, 0]
        assert buckets[0].percentage == 100

    def test_empty(self):
        """Test that an empty sample has no buckets."""
        assert histogram([]) == []

    def test_invalid_bucket_count(self):
        """Test that at least one bucket is required."""
        with pytest.raises(ValueError):
            histogram([1.0], bucket_count=0)


class TestConfidenceInterval:
    def test_contains_mean(self):
        """Test that the interval brackets the sample mean."""
        low, high = mean_confidence_interval([1.0, 2.0, 3.0, 4.0])
        assert low < 2.5 < high

    def test_single_value(self):
        """Test a degenerate interval for one observation."""
        assert mean_confidence_interval([5.0]) == (5.0, 5.0)
