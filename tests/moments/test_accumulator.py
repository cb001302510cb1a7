"""
Tests for scalar moment accumulators.

Validates:
    - Running mean/variance match numpy (population ddof=0, sample ddof=1)
    - Merge (add_all / combine) is associative and commutative to rounding
    - IdentityMoments is a neutral element
    - Summary constructors reproduce their inputs
    - Compensated updates stay accurate on a large-offset stream
    - Error conditions (no data, n < 2 for sample variance)
"""

import numpy as np
import pytest

from pystreamstats.core.exceptions import InsufficientDataError, ValidationError
from pystreamstats.moments import (
    IdentityMoments,
    PopulationMoments,
    SampleMoments,
)


# ═══════════════════════════════════════════════════════════════════════
# Basic accumulation
# ═══════════════════════════════════════════════════════════════════════


class TestAccumulation:

    def test_sample_matches_numpy(self, normal_sample):
        acc = SampleMoments.from_array(normal_sample)
        assert acc.count == 200
        assert acc.mean == pytest.approx(np.mean(normal_sample), rel=1e-14)
        assert acc.variance == pytest.approx(np.var(normal_sample, ddof=1), rel=1e-12)
        assert acc.standard_deviation == pytest.approx(np.std(normal_sample, ddof=1), rel=1e-12)

    def test_population_matches_numpy(self, normal_sample):
        acc = PopulationMoments.from_array(normal_sample)
        assert acc.variance == pytest.approx(np.var(normal_sample), rel=1e-12)

    def test_incremental_equals_batch(self, rng):
        data = rng.uniform(-5, 5, size=50)
        acc = SampleMoments()
        for x in data:
            acc.add(x)
        batch = SampleMoments.from_array(data)
        assert acc.mean == pytest.approx(batch.mean, rel=1e-15)
        assert acc.variance == pytest.approx(batch.variance, rel=1e-15)

    def test_add_returns_self(self):
        acc = SampleMoments()
        assert acc.add(1.0) is acc
        assert acc.extend([2.0, 3.0]) is acc

    def test_sum_of_squares(self):
        acc = PopulationMoments.from_array([1.0, 2.0, 3.0, 4.0])
        assert acc.sum_of_squares == pytest.approx(5.0)

    def test_len_and_size(self):
        acc = SampleMoments.from_array([1.0, 2.0, 3.0])
        assert len(acc) == 3
        assert acc.size == 3
        assert not acc.is_empty

    def test_variance_updates_after_add(self):
        acc = SampleMoments.from_array([1.0, 2.0, 3.0])
        assert acc.variance == pytest.approx(1.0)
        acc.add(10.0)
        assert acc.variance == pytest.approx(np.var([1.0, 2.0, 3.0, 10.0], ddof=1))


class TestNumericalStability:

    def test_large_offset(self):
        """Variance of a tiny spread on a 1e9 offset."""
        data = 1e9 + np.array([4.0, 7.0, 13.0, 16.0] * 250)
        acc = SampleMoments.from_array(data)
        assert acc.mean == pytest.approx(1e9 + 10.0, rel=1e-15)
        assert acc.variance == pytest.approx(np.var([4.0, 7.0, 13.0, 16.0] * 250, ddof=1), rel=1e-9)

    def test_alternating_magnitudes(self):
        """10^6 values alternating 1 and 1e8."""
        data = np.tile([1.0, 1e8], 500_000)
        acc = PopulationMoments.from_array(data)
        assert acc.count == 1_000_000
        assert acc.mean == pytest.approx(50_000_000.5, rel=1e-14)
        assert acc.variance == pytest.approx(49_999_999.5 ** 2, rel=1e-12)

    def test_many_small_values(self):
        acc = PopulationMoments.from_array(np.full(100_000, 0.1))
        assert acc.mean == pytest.approx(0.1, rel=1e-15)
        assert acc.variance == pytest.approx(0.0, abs=1e-25)


# ═══════════════════════════════════════════════════════════════════════
# Merging
# ═══════════════════════════════════════════════════════════════════════


class TestMerge:

    def test_merge_equals_whole(self, normal_sample):
        a = SampleMoments.from_array(normal_sample[:70])
        b = SampleMoments.from_array(normal_sample[70:])
        merged = a.combine(b)
        whole = SampleMoments.from_array(normal_sample)
        assert merged.count == whole.count
        assert merged.mean == pytest.approx(whole.mean, rel=1e-14)
        assert merged.variance == pytest.approx(whole.variance, rel=1e-12)

    def test_combine_leaves_operands_unchanged(self):
        a = SampleMoments.from_array([1.0, 2.0])
        b = SampleMoments.from_array([3.0, 4.0])
        c = a.combine(b)
        assert c is not a
        assert a.count == 2
        assert b.count == 2
        assert c.count == 4

    def test_add_all_mutates_receiver(self):
        a = SampleMoments.from_array([1.0, 2.0])
        assert a.add_all(SampleMoments.from_array([3.0])) is a
        assert a.count == 3
        assert a.mean == pytest.approx(2.0)

    def test_associative_and_commutative(self, rng):
        parts = [rng.normal(size=n) for n in (5, 17, 31)]
        a, b, c = (SampleMoments.from_array(p) for p in parts)
        left = a.combine(b).combine(c)
        right = a.combine(b.combine(c))
        swapped = c.combine(a).combine(b)
        for other in (right, swapped):
            assert other.mean == pytest.approx(left.mean, rel=1e-13)
            assert other.variance == pytest.approx(left.variance, rel=1e-12)

    def test_merge_into_empty(self):
        a = SampleMoments()
        a.add_all(SampleMoments.from_array([2.0, 4.0]))
        assert a.mean == 3.0
        assert a.variance == pytest.approx(2.0)

    def test_copy_is_independent(self):
        a = SampleMoments.from_array([1.0, 2.0, 3.0])
        b = a.copy()
        b.add(100.0)
        assert a.count == 3
        assert b.count == 4


class TestIdentity:

    def test_identity_is_neutral(self):
        a = SampleMoments.from_array([1.0, 2.0, 3.0])
        assert a.combine(SampleMoments.identity()).mean == a.mean
        merged = SampleMoments.identity().add_all(a)
        assert merged is not a
        assert merged.mean == a.mean
        assert merged.variance == a.variance

    def test_identity_reduction(self, rng):
        parts = [rng.normal(size=10) for _ in range(4)]
        acc = SampleMoments.identity()
        for p in parts:
            acc = acc.add_all(SampleMoments.from_array(p))
        assert isinstance(acc, SampleMoments)
        assert acc.count == 40
        assert acc.mean == pytest.approx(np.mean(np.concatenate(parts)), rel=1e-14)

    def test_identity_add_allocates(self):
        ident = PopulationMoments.identity()
        acc = ident.add(5.0)
        assert isinstance(acc, PopulationMoments)
        assert acc.count == 1
        assert ident.count == 0

    def test_identity_has_no_mean(self):
        with pytest.raises(InsufficientDataError):
            IdentityMoments(SampleMoments).mean


# ═══════════════════════════════════════════════════════════════════════
# Summary construction and errors
# ═══════════════════════════════════════════════════════════════════════


class TestSummary:

    def test_sample_round_trip(self):
        acc = SampleMoments.from_summary(5.0, 4.0, 10)
        assert acc.count == 10
        assert acc.mean == 5.0
        assert acc.variance == pytest.approx(4.0)

    def test_population_round_trip(self):
        acc = PopulationMoments.from_summary(-1.0, 2.5, 8)
        assert acc.variance == pytest.approx(2.5)

    def test_summary_merges_with_data(self):
        data = np.array([2.0, 4.0, 6.0, 8.0])
        summary = SampleMoments.from_summary(np.mean(data), np.var(data, ddof=1), 4)
        merged = summary.combine(SampleMoments.from_array([10.0]))
        expected = np.append(data, 10.0)
        assert merged.variance == pytest.approx(np.var(expected, ddof=1), rel=1e-12)

    def test_negative_variance_rejected(self):
        with pytest.raises(ValidationError, match="variance"):
            SampleMoments.from_summary(0.0, -1.0, 5)

    def test_zero_count_rejected(self):
        with pytest.raises(ValidationError, match="count"):
            SampleMoments.from_summary(0.0, 1.0, 0)


class TestErrors:

    def test_mean_of_empty(self):
        with pytest.raises(InsufficientDataError):
            SampleMoments().mean

    def test_sample_variance_needs_two(self):
        acc = SampleMoments().add(3.0)
        with pytest.raises(InsufficientDataError, match="too small") as exc_info:
            acc.variance
        assert exc_info.value.required == 2

    def test_population_variance_of_one(self):
        assert PopulationMoments().add(3.0).variance == 0.0
