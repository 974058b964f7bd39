"""
Tests for the g-and-h distribution family.

Closed-form references:
    gh_mean(0.5, 0)   = (exp(0.125) - 1) / 0.5 = 0.26629690...
    gh_moments(0, 0.1) variance = 0.8 ** -1.5 = 1.39754248...
Trimmed means are checked against an independent integral of the
quantile function over [trim, 1 - trim].
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import integrate
from scipy import stats as sp_stats

from pyreplication.core.exceptions import ConvergenceError, InvalidParameterError
from pyreplication.distributions import (
    GHShape,
    dgh,
    gh_mean,
    gh_moments,
    gh_transform,
    gh_trimmed_mean,
    pgh,
    qgh,
    rgh,
)
from pyreplication.distributions import gh as gh_module


# ═══════════════════════════════════════════════════════════════════════
# Shapes and sampling
# ═══════════════════════════════════════════════════════════════════════


class TestGHShape:

    def test_grid(self):
        shapes = GHShape.grid([0.0, 0.5], h=0.1)
        assert shapes == (GHShape(0.0, 0.1), GHShape(0.5, 0.1))

    def test_normal(self):
        assert GHShape().is_normal
        assert not GHShape(g=0.1).is_normal

    def test_rejects_negative_h(self):
        with pytest.raises(InvalidParameterError):
            GHShape(g=0.0, h=-0.1)


class TestSampler:

    def test_shape_and_determinism(self):
        a = rgh(50, 0.5, 0.1, seed=7)
        b = rgh(50, 0.5, 0.1, seed=7)
        assert a.shape == (50,)
        np.testing.assert_array_equal(a, b)

    def test_g_zero_branch(self):
        """g == 0 uses z * exp(h z^2 / 2), no division by g."""
        z = np.random.default_rng(3).standard_normal(25)
        x = rgh(25, 0.0, 0.2, seed=3)
        assert_allclose(x, z * np.exp(0.2 * z * z / 2.0))
        assert np.all(np.isfinite(x))

    def test_standard_normal(self):
        z = np.random.default_rng(11).standard_normal(10)
        assert_allclose(rgh(10, seed=11), z)

    def test_small_g_continuous(self):
        z = np.linspace(-3, 3, 13)
        assert_allclose(gh_transform(z, 1e-9, 0.0), z, atol=1e-8)

    def test_generator_is_advanced(self):
        gen = np.random.default_rng(5)
        a = rgh(5, 0.3, 0.0, seed=gen)
        b = rgh(5, 0.3, 0.0, seed=gen)
        assert not np.array_equal(a, b)

    def test_positive_g_bounded_below(self):
        x = rgh(10_000, 0.8, 0.0, seed=1)
        assert np.all(x > -1.0 / 0.8)

    @pytest.mark.parametrize("n,g,h", [(0, 0.0, 0.0), (5, 0.0, -0.5), (5, np.nan, 0.0)])
    def test_invalid(self, n, g, h):
        with pytest.raises(InvalidParameterError):
            rgh(n, g, h)

    def test_sample_mean_near_population_mean(self):
        x = rgh(400_000, 0.5, 0.0, seed=2)
        assert np.mean(x) == pytest.approx(gh_mean(0.5, 0.0), abs=5e-3)


# ═══════════════════════════════════════════════════════════════════════
# Quantile, CDF, density
# ═══════════════════════════════════════════════════════════════════════


class TestDistributionFunctions:

    def test_normal_quantiles(self):
        p = np.array([0.025, 0.5, 0.975])
        assert_allclose(qgh(p), sp_stats.norm.ppf(p))

    def test_scalar_quantile_is_float(self):
        assert isinstance(qgh(0.3, 0.2, 0.1), float)

    @pytest.mark.parametrize("g,h", [(0.0, 0.0), (0.5, 0.0), (1.0, 0.1), (-0.4, 0.2)])
    def test_cdf_inverts_quantile(self, g, h):
        p = np.array([0.001, 0.1, 0.3, 0.5, 0.8, 0.999])
        assert_allclose(pgh(qgh(p, g, h), g, h), p, atol=1e-9)

    def test_cdf_outside_support(self):
        assert pgh(-1.0 / 0.5 - 0.1, 0.5, 0.0) == 0.0
        assert pgh(1.0 / 0.5 + 0.1, -0.5, 0.0) == 1.0

    def test_density_matches_normal(self):
        x = np.linspace(-2, 2, 5)
        assert_allclose(dgh(x), sp_stats.norm.pdf(x), rtol=1e-9)

    def test_density_integrates_to_one(self):
        lo, hi = qgh(1e-9, 0.5, 0.1), qgh(1 - 1e-9, 0.5, 0.1)
        total, _ = integrate.quad(lambda v: dgh(v, 0.5, 0.1), lo, hi, limit=200)
        assert total == pytest.approx(1.0, abs=1e-6)

    def test_cdf_convergence_error(self):
        with pytest.raises(ConvergenceError) as exc_info:
            pgh(1.0, 0.5, 0.1, maxiter=1)
        assert exc_info.value.iterations >= 1

    def test_quantile_rejects_bad_p(self):
        with pytest.raises(InvalidParameterError):
            qgh(1.5)


# ═══════════════════════════════════════════════════════════════════════
# Population parameters
# ═══════════════════════════════════════════════════════════════════════


class TestPopulationMean:

    def test_symmetric_zero(self):
        assert gh_mean(0.0, 0.3) == 0.0

    def test_closed_form(self):
        assert gh_mean(0.5, 0.0) == pytest.approx(0.26629690, rel=1e-7)

    def test_with_tails(self):
        expected = np.expm1(0.25 / 1.8) / (0.5 * np.sqrt(0.9))
        assert gh_mean(0.5, 0.1) == pytest.approx(expected, rel=1e-12)

    def test_undefined_for_h_one(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            gh_mean(0.5, 1.0)
        assert exc_info.value.parameter == "h"

    def test_moments(self):
        mean, var = gh_moments(0.0, 0.1)
        assert mean == 0.0
        assert var == pytest.approx(0.8 ** -1.5)

    def test_normal_moments(self):
        assert gh_moments() == (0.0, pytest.approx(1.0))

    def test_infinite_variance(self):
        assert np.isinf(gh_moments(0.2, 0.6)[1])


class TestPopulationTrimmedMean:

    def test_zero_trim_is_mean_exactly(self):
        for g in (0.0, 0.3, 1.0):
            assert gh_trimmed_mean(0.0, g, 0.1) == gh_mean(g, 0.1)

    @pytest.mark.parametrize("g,h", [(0.3, 0.0), (1.0, 0.0), (0.5, 0.1)])
    def test_tiny_trim_approaches_mean(self, g, h):
        """The quadrature path converges to the untrimmed mean as trim -> 0."""
        assert gh_trimmed_mean(1e-10, g, h) == pytest.approx(gh_mean(g, h), abs=1e-5)

    def test_symmetric_zero(self):
        assert gh_trimmed_mean(0.2, 0.0, 0.5) == 0.0

    @pytest.mark.parametrize("trim,g,h", [(0.1, 0.5, 0.0), (0.2, 1.0, 0.0), (0.2, 0.7, 0.1)])
    def test_matches_quantile_integral(self, trim, g, h):
        ref, _ = integrate.quad(lambda p: qgh(p, g, h), trim, 1.0 - trim,
                                epsabs=1e-12, epsrel=1e-12, limit=200)
        expected = ref / (1.0 - 2.0 * trim)
        assert gh_trimmed_mean(trim, g, h) == pytest.approx(expected, abs=1e-7)

    def test_between_median_and_mean(self):
        """Right skew: median < trimmed mean < mean."""
        tm = gh_trimmed_mean(0.2, 0.5, 0.0)
        assert 0.0 < tm < gh_mean(0.5, 0.0)

    def test_decreases_with_trim(self):
        values = [gh_trimmed_mean(t, 0.8, 0.0) for t in (0.0, 0.1, 0.2, 0.3)]
        assert values == sorted(values, reverse=True)

    def test_defined_when_mean_is_not(self):
        assert np.isfinite(gh_trimmed_mean(0.2, 0.5, 1.2))

    def test_quadrature_failure_raises(self, monkeypatch):
        def failing_quad(*args, **kwargs):
            return 0.1, 1e-3, {"last": 200}, "The maximum number of subdivisions (200) has been achieved."

        monkeypatch.setattr(gh_module.integrate, "quad", failing_quad)
        with pytest.raises(ConvergenceError) as exc_info:
            gh_trimmed_mean(0.2, 0.5, 0.0)
        assert exc_info.value.iterations == 200
        assert "subdivisions" in exc_info.value.reason

    def test_error_estimate_above_guarantee(self, monkeypatch):
        monkeypatch.setattr(
            gh_module.integrate, "quad",
            lambda *args, **kwargs: (0.1, 1e-5, {"last": 12}),
        )
        with pytest.raises(ConvergenceError) as exc_info:
            gh_trimmed_mean(0.1, 0.5, 0.0)
        assert exc_info.value.reason == "tolerance"
