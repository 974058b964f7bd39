"""
Tests for trimmed means and winsorized variances.

Reference values for x = 1..10, trim = 0.2 (k = 2), computed by hand:
    trimmed mean         mean(3..8)                       = 5.5
    winsorized sample    3 3 3 4 5 6 7 8 8 8
    winsorized variance  42.5 / 9                         = 4.7222...
R: mean(1:10, trim = 0.2) -> 5.5
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from pyreplication.core.exceptions import DegenerateSampleError, InvalidParameterError
from pyreplication.descriptive import (
    n_trimmed,
    trimmed_mean,
    winsorize,
    winsorized_variance,
)
from pyreplication.descriptive._robust import check_trimmed_size

X = np.arange(1.0, 11.0)


class TestNTrimmed:

    @pytest.mark.parametrize("n,trim,k", [
        (20, 0.0, 0), (20, 0.1, 2), (20, 0.2, 4), (10, 0.25, 2), (7, 0.2, 1),
    ])
    def test_floor(self, n, trim, k):
        assert n_trimmed(n, trim) == k

    def test_check_trimmed_size_returns_kept(self):
        assert check_trimmed_size(20, 0.2) == 12

    def test_check_trimmed_size_rejects_one_left(self):
        with pytest.raises(DegenerateSampleError) as exc_info:
            check_trimmed_size(3, 0.4)
        assert exc_info.value.n_kept == 1


class TestTrimmedMean:

    def test_hand_computed(self):
        assert trimmed_mean(X, 0.2) == pytest.approx(5.5)

    def test_zero_trim_is_mean(self, rng):
        x = rng.standard_normal(15)
        assert trimmed_mean(x, 0.0) == pytest.approx(np.mean(x))

    def test_unsorted_input(self, rng):
        x = rng.permutation(X)
        assert trimmed_mean(x, 0.2) == pytest.approx(5.5)

    def test_ignores_extremes(self):
        x = X.copy()
        x[-1] = 1e6
        assert trimmed_mean(x, 0.2) == pytest.approx(5.5)

    def test_returns_float_for_1d(self):
        assert isinstance(trimmed_mean(X, 0.1), float)

    def test_batched_rows(self, rng):
        samples = rng.standard_normal((4, 20))
        result = trimmed_mean(samples, 0.1)
        assert result.shape == (4,)
        for i in range(4):
            assert result[i] == pytest.approx(trimmed_mean(samples[i], 0.1))

    def test_invalid_trim(self):
        with pytest.raises(InvalidParameterError):
            trimmed_mean(X, 0.5)


class TestWinsorize:

    def test_hand_computed(self):
        assert_array_equal(winsorize(X, 0.2), [3, 3, 3, 4, 5, 6, 7, 8, 8, 8])

    def test_zero_trim_sorts_only(self, rng):
        x = rng.standard_normal(10)
        assert_array_equal(winsorize(x, 0.0), np.sort(x))

    def test_does_not_modify_input(self):
        x = X.copy()
        winsorize(x, 0.2, presorted=True)
        assert_array_equal(x, X)


class TestWinsorizedVariance:

    def test_hand_computed(self):
        assert winsorized_variance(X, 0.2) == pytest.approx(42.5 / 9)

    def test_zero_trim_is_sample_variance(self, rng):
        x = rng.standard_normal(12)
        assert winsorized_variance(x, 0.0) == pytest.approx(np.var(x, ddof=1))

    def test_batched_matches_rows(self, rng):
        samples = rng.standard_normal((3, 20))
        expected = [winsorized_variance(row, 0.2) for row in samples]
        assert_allclose(winsorized_variance(samples, 0.2), expected)
