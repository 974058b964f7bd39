"""
Tests for simulate() on the CPU backend.

Statistical checks use fixed seeds, so they are deterministic; their
bounds are wide enough that a correct implementation passes for any seed
with overwhelming probability.
"""

import numpy as np
import pytest

from pyreplication.core.exceptions import (
    ConvergenceError,
    DegenerateSampleError,
    SimulationError,
    ValidationError,
)
from pyreplication.distributions import gh_trimmed_mean
from pyreplication.montecarlo import (
    FALSE_POSITIVE,
    TRUE_POSITIVE,
    SimulationDesign,
    simulate,
)
from pyreplication.montecarlo.backends import cpu as cpu_backend


@pytest.fixture(scope="module")
def small_run():
    """Two shapes, three trims, 2000 trials in four blocks."""
    return simulate(g_values=[0.0, 0.5], n_trials=2000, block_size=500, seed=3)


class TestOutputLayout:

    def test_indicator_shapes(self, small_run):
        assert small_run.false_positive.shape == (2000, 2, 3)
        assert small_run.true_positive.shape == (2000, 2, 3)
        assert small_run.false_positive.dtype == np.bool_

    def test_indicators_read_only(self, small_run):
        with pytest.raises(ValueError):
            small_run.false_positive[0, 0, 0] = True

    def test_population_targets(self, small_run):
        targets = small_run.population_targets
        assert targets.shape == (2, 3)
        np.testing.assert_array_equal(targets[0], 0.0)
        assert targets[1, 2] == pytest.approx(gh_trimmed_mean(0.2, 0.5, 0.0))

    def test_rates_in_unit_interval(self, small_run):
        for rates in (small_run.false_positive_rate, small_run.true_positive_rate):
            assert rates.shape == (2, 3)
            assert np.all((rates >= 0.0) & (rates <= 1.0))

    def test_result_metadata(self, small_run):
        assert small_run.backend_name == "cpu_simulation"
        assert small_run.info["n_blocks"] == 4
        assert small_run.info["seed"] == 3
        assert "population_targets" in small_run.timing
        assert "trials" in small_run.timing

    def test_summary(self, small_run):
        text = small_run.summary()
        assert "False positive rate:" in text
        assert "20% trimmed mean" in text


class TestReproducibility:

    def test_same_seed_bit_identical(self, small_run):
        again = simulate(g_values=[0.0, 0.5], n_trials=2000, block_size=500, seed=3)
        np.testing.assert_array_equal(again.false_positive, small_run.false_positive)
        np.testing.assert_array_equal(again.true_positive, small_run.true_positive)

    def test_different_seed_differs(self, small_run):
        other = simulate(g_values=[0.0, 0.5], n_trials=2000, block_size=500, seed=4)
        assert not np.array_equal(other.true_positive, small_run.true_positive)

    def test_n_jobs_invariant(self):
        kwargs = dict(g_values=[0.0, 0.8], n_trials=600, block_size=200, seed=9)
        serial = simulate(**kwargs, n_jobs=1)
        parallel = simulate(**kwargs, n_jobs=2)
        np.testing.assert_array_equal(serial.false_positive, parallel.false_positive)
        np.testing.assert_array_equal(serial.true_positive, parallel.true_positive)

    def test_null_and_shifted_streams_distinct(self):
        seeds = cpu_backend.block_seeds(3, 2, 4)
        states = {
            tuple(seq.generate_state(4))
            for shape in seeds for pair in shape for seq in pair
        }
        assert len(states) == 2 * 4 * 2


class TestNominalRates:
    """Classical t-test on normal data: nominal alpha and calibrated power."""

    @pytest.fixture(scope="class")
    def normal_run(self):
        return simulate(g_values=[0.0], trims=(0.0,), n_trials=100_000, seed=2024)

    def test_false_positive_rate(self, normal_run):
        rate = normal_run.empirical_rate(0, 0, FALSE_POSITIVE)
        assert 0.048 <= rate <= 0.052
        lo, hi = normal_run.rate_conf_int(FALSE_POSITIVE, conf_level=0.999)
        assert lo[0, 0] <= 0.05 <= hi[0, 0]

    def test_true_positive_rate(self, normal_run):
        rate = normal_run.empirical_rate(0, 0, TRUE_POSITIVE)
        assert rate == pytest.approx(0.80, abs=0.01)


class TestSkewnessTrend:
    """Trimming limits the type I error inflation caused by skewness."""

    @pytest.fixture(scope="class")
    def skew_run(self):
        return simulate(g_values=[0.0, 0.5, 1.0], n_trials=20_000, seed=7)

    def test_mean_inflates_with_g(self, skew_run):
        fp = skew_run.false_positive_rate
        assert fp[2, 0] > fp[0, 0]

    def test_trimming_inflates_less(self, skew_run):
        fp = skew_run.false_positive_rate
        assert fp[2, 0] - fp[0, 0] > fp[2, 2] - fp[0, 2]
        assert fp[2, 2] < fp[2, 0]


class TestFailures:

    def test_degenerate_trial_wrapped(self, monkeypatch):
        def failing_decide(sorted_samples, trims, targets, alpha):
            raise DegenerateSampleError("zero winsorized variance", trim=0.1, index=4)

        monkeypatch.setattr(cpu_backend, "_decide", failing_decide)
        with pytest.raises(SimulationError) as exc_info:
            simulate(g_values=[0.3], n_trials=50, block_size=50, seed=1)
        err = exc_info.value
        assert err.g == 0.3
        assert err.h == 0.0
        assert err.trim == 0.1
        assert err.trial == 4
        assert isinstance(err.__cause__, DegenerateSampleError)
        assert "false positive" in str(err)

    def test_population_target_failure_wrapped(self, monkeypatch):
        def failing_target(trim, g, h):
            raise ConvergenceError("quadrature did not converge", iterations=200)

        monkeypatch.setattr(cpu_backend, "gh_trimmed_mean", failing_target)
        with pytest.raises(SimulationError) as exc_info:
            simulate(g_values=[0.7], n_trials=10, seed=1)
        assert exc_info.value.trial is None
        assert exc_info.value.g == 0.7
        assert isinstance(exc_info.value.__cause__, ConvergenceError)

    def test_design_and_kwargs_exclusive(self):
        design = SimulationDesign.for_simulation(n_trials=10, seed=1)
        with pytest.raises(ValidationError):
            simulate(design, n_trials=20)

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            simulate(n_trials=10, seed=1, backend="tpu")
