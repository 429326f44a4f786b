"""Robust Poisson trend test and binomial carrier percentages."""
import numpy as np
import pandas as pd
import pytest

from germline_burden import (
    ModelFitError,
    add_group_labels,
    fit_trend,
    lineage_proportions,
    load_cohort,
)


def _cohort(strata):
    """strata: list of (age_group, lineage, n, carriers)."""
    frames = []
    for age_group, lineage, n, carriers in strata:
        frames.append(
            pd.DataFrame(
                {
                    "source": "SJ",
                    "lineage": lineage,
                    "age_group": age_group,
                    "variant_count": [1] * carriers + [0] * (n - carriers),
                }
            )
        )
    return add_group_labels(pd.concat(frames, ignore_index=True))


@pytest.fixture
def ball_vs_aml():
    return _cohort([("Pediatric", "B-ALL", 100, 5), ("Pediatric", "AML", 50, 10)])


def test_aml_proportion_and_exact_ci(ball_vs_aml):
    props = lineage_proportions(ball_vs_aml).set_index("lineage")
    aml = props.loc["AML"]
    assert aml["n"] == 50
    assert aml["carriers"] == 10
    assert aml["percent"] == pytest.approx(20.0)
    assert aml["ci_low"] > 0
    assert aml["ci_low"] <= aml["percent"] <= aml["ci_high"]
    assert props.loc["B-ALL", "percent"] == pytest.approx(5.0)


def test_proportions_follow_group_order(cohort_csv):
    props = lineage_proportions(load_cohort(cohort_csv))
    assert props["group"].tolist()[:4] == [
        "Pediatric BALL",
        "Pediatric TALL",
        "Pediatric AML",
        "Pediatric MDS",
    ]


def test_zero_carrier_group_has_zero_lower_bound():
    cohort = _cohort([("Pediatric", "T-ALL", 40, 0), ("Pediatric", "AML", 20, 3)])
    props = lineage_proportions(cohort).set_index("lineage")
    assert props.loc["T-ALL", "percent"] == 0.0
    assert props.loc["T-ALL", "ci_low"] == 0.0
    assert props.loc["T-ALL", "ci_high"] > 0.0


def test_trend_aml_rate_exceeds_ball(ball_vs_aml):
    res = fit_trend(ball_vs_aml, "Pediatric")
    assert res.n == 150
    assert res.df == 1
    assert res.rates["AML"] > res.rates["B-ALL"]
    assert res.rates["AML"] == pytest.approx(0.2, rel=1e-4)
    assert res.rates["B-ALL"] == pytest.approx(0.05, rel=1e-4)
    assert res.linear_coef > 0
    assert res.pvalue < 0.05
    assert res.significant


def test_trend_lr_statistic(ball_vs_aml):
    res = fit_trend(ball_vs_aml, "Pediatric")
    # saturated Poisson log-likelihoods (constant terms cancel)
    full = 5 * np.log(0.05) - 5 + 10 * np.log(0.2) - 10
    null = 15 * np.log(0.1) - 15
    assert res.lr_stat == pytest.approx(2 * (full - null), rel=1e-4)


def test_trend_over_four_lineages(cohort_csv):
    res = fit_trend(load_cohort(cohort_csv), "Pediatric")
    assert res.df == 3
    assert list(res.rates) == ["B-ALL", "T-ALL", "AML", "MDS"]
    assert res.linear_coef > 0
    assert res.pvalue < 0.001


def test_zero_variance_stratum_fails_loudly():
    cohort = _cohort([("Pediatric", "B-ALL", 30, 0), ("Pediatric", "AML", 20, 0)])
    with pytest.raises(ModelFitError, match="zero variance"):
        fit_trend(cohort, "Pediatric")


def test_single_lineage_fails(ball_vs_aml):
    cohort = ball_vs_aml[ball_vs_aml["lineage"] == "AML"]
    with pytest.raises(ModelFitError, match="two lineages"):
        fit_trend(cohort, "Pediatric")


def test_missing_stratum_fails(ball_vs_aml):
    with pytest.raises(ModelFitError, match="Adult"):
        fit_trend(ball_vs_aml, "Adult")


def test_single_outlier_patient_is_not_a_robust_trend():
    # 5/100 B-ALL carriers against one AML patient with 15 variants
    cohort = _cohort([("Pediatric", "B-ALL", 100, 5), ("Pediatric", "AML", 50, 0)])
    aml = cohort.index[cohort["lineage"] == "AML"][0]
    cohort.loc[aml, "variant_count"] = 15

    res = fit_trend(cohort, "Pediatric")
    assert res.pvalue < 0.001
    assert res.robust_pvalue > 0.05
    assert not res.significant


def test_robust_wald_agrees_without_outliers(ball_vs_aml):
    res = fit_trend(ball_vs_aml, "Pediatric")
    assert res.robust_stat > 0
    assert res.robust_pvalue < 0.05
    assert res.significant
