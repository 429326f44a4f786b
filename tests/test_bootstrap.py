"""Bootstrap ratio of mean per-sample counts."""
import numpy as np
import pytest

from germline_burden import bootstrap_from_counts, bootstrap_ratio, fit_odds_ratio


def test_fixed_seed_is_bit_identical():
    cases = [0] * 80 + [1] * 20
    controls = [0] * 180 + [1] * 20
    a = bootstrap_ratio(cases, controls, n_boot=5000, rng=np.random.default_rng(11))
    b = bootstrap_ratio(cases, controls, n_boot=5000, rng=np.random.default_rng(11))
    assert np.array_equal(a.replicates, b.replicates)
    assert (a.lower, a.median, a.upper) == (b.lower, b.median, b.upper)


def test_chunking_does_not_change_length():
    res = bootstrap_ratio([0, 1, 1, 0], [0, 1, 0, 0, 0, 1], n_boot=2500,
                          rng=np.random.default_rng(0), chunk_size=1000)
    assert res.replicates.size + res.n_dropped == 2500


def test_percentiles_are_ordered():
    res = bootstrap_ratio([0] * 70 + [1] * 30, [0] * 90 + [1] * 10, n_boot=4000,
                          rng=np.random.default_rng(5))
    assert res.lower <= res.median <= res.upper
    assert res.observed == pytest.approx(3.0)
    assert res.lower < 3.0 < res.upper


def test_zero_control_mean_replicates_are_dropped():
    res = bootstrap_ratio([0] * 10 + [1] * 10, [0] * 19 + [1], n_boot=2000,
                          rng=np.random.default_rng(2))
    assert res.n_dropped > 0
    assert np.isfinite(res.replicates).all()
    assert np.isfinite(res.upper)


def test_all_zero_controls_fail():
    with pytest.raises(ValueError, match="zero control mean"):
        bootstrap_ratio([1, 0, 1], [0, 0, 0], n_boot=100, rng=np.random.default_rng(0))


def test_agrees_with_logistic_odds_ratio(established_indicators):
    established = established_indicators
    or_res = fit_odds_ratio(established, "established")
    boot = bootstrap_from_counts(established, n_boot=5000, rng=np.random.default_rng(8),
                                 label="established")
    assert boot.observed == pytest.approx((31 / 200) / (8 / 400))
    assert boot.lower <= or_res.odds_ratio <= boot.upper
    assert or_res.ci_low <= boot.median <= or_res.ci_high
