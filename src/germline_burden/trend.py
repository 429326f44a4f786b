"""
Trend testing of germline variant counts across ordered lineages.

Fits a Poisson GLM of the per-patient P/LP variant count on lineage coded as
an ordered factor (orthogonal polynomial contrasts) with heteroskedasticity-
robust (sandwich) standard errors, and compares it with an intercept-only
model by a likelihood-ratio chi-square test.

Functions
---------
fit_trend
    Robust Poisson trend test within one age stratum.
lineage_proportions
    Carrier percentages with exact binomial confidence intervals.

Classes
-------
TrendResult
    Container for the trend test statistics.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd
import patsy
import statsmodels.api as sm
from scipy import stats
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from .constants import DEFAULT_ALPHA
from .errors import ModelFitError
from .labels import GROUP_ORDER, add_group_labels

logger = logging.getLogger(__name__)

TREND_FORMULA = "variant_count ~ C(lineage_cat, Poly)"


@dataclass
class TrendResult:
    """Likelihood-ratio trend test for one age stratum."""

    age_group: str
    #: Number of patients in the stratum.
    n: int
    #: Likelihood-ratio chi-square statistic (full vs. intercept-only).
    lr_stat: float
    df: int
    pvalue: float
    #: Joint Wald test of the lineage terms on the robust (HC0) covariance.
    robust_stat: float
    robust_pvalue: float
    #: Linear polynomial contrast (log scale) with robust SE and p-value.
    linear_coef: float
    linear_se: float
    linear_pvalue: float
    #: Fitted mean count per lineage, in trend order.
    rates: dict[str, float] = field(default_factory=dict)
    alpha: float = DEFAULT_ALPHA
    #: Fitted statsmodels results, kept for inspection.
    full_res: Optional[object] = field(default=None, repr=False)
    null_res: Optional[object] = field(default=None, repr=False)

    @property
    def significant(self) -> bool:
        return self.robust_pvalue < self.alpha


def _fit_poisson(y: np.ndarray, X: pd.DataFrame, label: str):
    model = sm.GLM(y, X, family=sm.families.Poisson())
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConvergenceWarning)
        try:
            res = model.fit(maxiter=200, cov_type="HC0")
        except (ConvergenceWarning, ValueError, np.linalg.LinAlgError) as e:
            raise ModelFitError(f"Robust Poisson fit failed for {label}: {e}") from e

    if not getattr(res, "converged", True):
        raise ModelFitError(f"Robust Poisson fit did not converge for {label}")
    if not np.isfinite(res.llf) or not np.all(np.isfinite(res.bse)):
        raise ModelFitError(f"Robust Poisson fit for {label} gave non-finite statistics")
    return res


def fit_trend(
    cohort: pd.DataFrame,
    age_group: str = "Pediatric",
    *,
    alpha: float = DEFAULT_ALPHA,
) -> TrendResult:
    """Robust Poisson trend test of variant count across ordered lineages.

    Parameters
    ----------
    cohort : pd.DataFrame
        Cohort table with ``age_group``, ``lineage`` and ``variant_count``
        (``lineage_cat`` is added if missing).
    age_group : str, default "Pediatric"
        Stratum to test.
    alpha : float, default 0.05
        Significance threshold for :attr:`TrendResult.significant`.

    Returns
    -------
    TrendResult

    Raises
    ------
    ModelFitError
        If the stratum has fewer than two lineages, all counts are equal,
        or either model fails to converge.

    Notes
    -----
    The LR statistic is ``2 * (llf_full - llf_null)`` on ``k - 1`` degrees
    of freedom for ``k`` lineages present. It ignores the sandwich
    covariance, so significance is judged by the joint Wald test of the
    ``k - 1`` lineage terms on the HC0 covariance instead. Because lineage enters as a
    saturated factor, the fitted rate of each lineage equals its mean count.

    Examples
    --------
    >>> res = fit_trend(cohort, "Pediatric")
    >>> print(f"LR={res.lr_stat:.1f}, p={res.pvalue:.2g}")
    """
    if "lineage_cat" not in cohort.columns:
        cohort = add_group_labels(cohort)

    sub = cohort.loc[cohort["age_group"] == age_group].copy()
    label = f"age group '{age_group}'"
    if sub.empty:
        raise ModelFitError(f"No patients in {label}")

    sub["lineage_cat"] = sub["lineage_cat"].cat.remove_unused_categories()
    levels = list(sub["lineage_cat"].cat.categories)
    if len(levels) < 2:
        raise ModelFitError(f"Trend test needs at least two lineages in {label}, found {levels}")

    y_raw = sub["variant_count"].to_numpy(dtype=float)
    if np.ptp(y_raw) == 0:
        raise ModelFitError(
            f"Variant counts in {label} have zero variance (all equal {y_raw[0]:g})"
        )

    y, X = patsy.dmatrices(TREND_FORMULA, data=sub, return_type="dataframe")
    y = np.asarray(y).ravel()

    full = _fit_poisson(y, X, label)
    null = _fit_poisson(y, X[["Intercept"]], f"{label} (null model)")

    lr = float(2.0 * (full.llf - null.llf))
    df = int(round(full.df_model - null.df_model))
    pval = float(stats.chi2.sf(max(lr, 0.0), df))
    if not np.isfinite(pval):
        raise ModelFitError(f"Likelihood-ratio test for {label} gave a non-finite p-value")

    lineage_terms = [c for c in X.columns if c != "Intercept"]
    R = np.zeros((len(lineage_terms), len(X.columns)))
    for i, c in enumerate(lineage_terms):
        R[i, X.columns.get_loc(c)] = 1.0
    wald = full.wald_test(R, use_f=False, scalar=True)
    robust_stat = float(np.squeeze(wald.statistic))
    robust_pval = float(np.squeeze(wald.pvalue))
    if not np.isfinite(robust_pval):
        raise ModelFitError(f"Robust Wald test for {label} gave a non-finite p-value")

    lin_name = next(c for c in X.columns if c.endswith(".Linear"))

    level_rows = X.groupby(sub["lineage_cat"], observed=True).first()
    rates = {
        str(lv): float(np.exp(level_rows.loc[lv].to_numpy() @ full.params.to_numpy()))
        for lv in levels
    }

    logger.info(
        f"Trend test {age_group}: LR={lr:.2f} on {df} df, p={pval:.3g}, "
        f"robust Wald p={robust_pval:.3g}, "
        f"linear coef={full.params[lin_name]:.3f}"
    )

    return TrendResult(
        age_group=age_group,
        n=len(sub),
        lr_stat=lr,
        df=df,
        pvalue=pval,
        robust_stat=robust_stat,
        robust_pvalue=robust_pval,
        linear_coef=float(full.params[lin_name]),
        linear_se=float(full.bse[lin_name]),
        linear_pvalue=float(full.pvalues[lin_name]),
        rates=rates,
        alpha=alpha,
        full_res=full,
        null_res=null,
    )


def lineage_proportions(cohort: pd.DataFrame, confidence: float = 0.95) -> pd.DataFrame:
    """Percentage of patients with at least one variant, per group.

    Parameters
    ----------
    cohort : pd.DataFrame
        Cohort table; group labels are added if missing.
    confidence : float, default 0.95
        Confidence level of the exact (Clopper-Pearson) interval.

    Returns
    -------
    pd.DataFrame
        One row per group in display order with columns ``group``,
        ``age_group``, ``lineage``, ``n``, ``carriers``, ``percent``,
        ``ci_low`` and ``ci_high`` (all three in percent).

    Examples
    --------
    >>> lineage_proportions(cohort)[["group", "percent", "ci_low", "ci_high"]]
    """
    if "group" not in cohort.columns:
        cohort = add_group_labels(cohort)

    rows = []
    for g, sub in cohort.groupby("group", sort=False):
        n = len(sub)
        k = int((sub["variant_count"] > 0).sum())
        ci = stats.binomtest(k, n).proportion_ci(confidence_level=confidence, method="exact")
        rows.append(
            {
                "group": g,
                "age_group": sub["age_group"].iloc[0],
                "lineage": sub["lineage"].iloc[0],
                "n": n,
                "carriers": k,
                "percent": 100.0 * k / n,
                "ci_low": 100.0 * ci.low,
                "ci_high": 100.0 * ci.high,
            }
        )

    df = pd.DataFrame(rows)
    if df.empty:
        return df
    rank = {g: i for i, g in enumerate(GROUP_ORDER)}
    df["_rank"] = df["group"].map(lambda g: rank.get(g, len(rank)))
    return df.sort_values("_rank", kind="stable").drop(columns="_rank").reset_index(drop=True)
