"""Presence indicators and logistic odds ratios."""
import pandas as pd
import pytest

from germline_burden import (
    DataIntegrityError,
    ModelFitError,
    fit_odds_ratio,
    presence_indicators,
    sample_variant_counts,
)


@pytest.fixture
def status():
    return pd.DataFrame(
        {
            "sample_id": ["A1", "A2", "A3", "A4", "B1", "B2", "B3", "B4", "B5", "B6"],
            "status": ["case"] * 4 + ["control"] * 6,
        }
    )


@pytest.fixture
def variants():
    return pd.DataFrame(
        {
            "sample_id": ["A1", "A1", "A1", "A2", "B1"],
            "gene": ["RUNX1", "ETV6", "GATA2", "RUNX1", "GATA2"],
            "consequence": ["stop_gained"] * 5,
            "af": [0.0] * 5,
        }
    )


def test_samples_without_variants_get_zero(variants, status):
    ind = presence_indicators(variants, status)
    assert len(ind) == len(status)
    assert ind.loc["A3", "count"] == 0
    assert ind.loc["A3", "indicator"] == 0
    assert ind.loc["B6", "indicator"] == 0


def test_counts_are_clamped(variants, status):
    ind = presence_indicators(variants, status)
    assert ind.loc["A1", "count"] == 3
    assert ind.loc["A1", "indicator"] == 1
    assert set(ind["indicator"]) == {0, 1}


def test_status_order_preserved(variants, status):
    counts = sample_variant_counts(variants, status)
    assert counts.index.tolist() == status["sample_id"].tolist()
    assert counts["is_case"].sum() == 4


def test_unknown_variant_sample_is_an_error(variants, status):
    bad = pd.concat(
        [variants, pd.DataFrame({"sample_id": ["Z9"], "gene": ["RUNX1"],
                                 "consequence": ["stop_gained"], "af": [0.0]})]
    )
    with pytest.raises(DataIntegrityError, match="Z9"):
        presence_indicators(bad, status, "established")


def test_odds_ratio_matches_cross_product(variants, status):
    ind = presence_indicators(variants, status)
    res = fit_odds_ratio(ind, "established")
    # 2 of 4 cases, 1 of 6 controls carry a variant
    assert res.odds_ratio == pytest.approx((2 * 5) / (2 * 1), rel=1e-5)
    assert res.ci_low < res.odds_ratio < res.ci_high
    assert 0 < res.pvalue < 1
    assert (res.case_carriers, res.control_carriers) == (2, 1)
    assert (res.n_cases, res.n_controls) == (4, 6)


def test_odds_ratio_on_fixture_tables(established_indicators):
    res = fit_odds_ratio(established_indicators, "established")
    assert res.odds_ratio == pytest.approx((30 * 392) / (170 * 8), rel=1e-5)
    assert res.ci_low < res.odds_ratio < res.ci_high
    assert res.pvalue < 1e-4


def test_empty_cell_fails(status):
    variants = pd.DataFrame(
        {"sample_id": ["A1"], "gene": ["RUNX1"], "consequence": ["stop_gained"], "af": [0.0]}
    )
    with pytest.raises(ModelFitError, match="empty cell"):
        fit_odds_ratio(presence_indicators(variants, status), "candidate")


def test_no_carriers_fails(status):
    variants = pd.DataFrame(columns=["sample_id", "gene", "consequence", "af"])
    with pytest.raises(ModelFitError, match="no carriers"):
        fit_odds_ratio(presence_indicators(variants, status), "random")
