"""
Case-control odds ratios from per-sample variant presence.

Each sample in the status table gets one binary indicator (1 if it carries at
least one qualifying variant in the gene set, else 0). Disease status is
regressed on the indicator with a binomial GLM; the exponentiated
coefficient is the odds ratio.

Functions
---------
sample_variant_counts
    Per-sample qualifying-variant counts over the full status table.
presence_indicators
    Counts clamped to presence/absence.
fit_odds_ratio
    Logistic odds ratio with Wald confidence interval.

Classes
-------
OddsRatioResult
    Container for the odds ratio estimate.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd
import statsmodels.api as sm
from statsmodels.tools.sm_exceptions import ConvergenceWarning

from .constants import CASE
from .errors import DataIntegrityError, ModelFitError

logger = logging.getLogger(__name__)


@dataclass
class OddsRatioResult:
    """Odds ratio of disease given variant presence."""

    label: str
    odds_ratio: float
    ci_low: float
    ci_high: float
    pvalue: float
    n_cases: int
    n_controls: int
    case_carriers: int
    control_carriers: int
    #: Fitted statsmodels results, kept for inspection.
    res: Optional[object] = field(default=None, repr=False)

    def as_row(self) -> dict:
        return {
            "gene_set": self.label,
            "odds_ratio": self.odds_ratio,
            "ci_low": self.ci_low,
            "ci_high": self.ci_high,
            "pvalue": self.pvalue,
            "n_cases": self.n_cases,
            "n_controls": self.n_controls,
            "case_carriers": self.case_carriers,
            "control_carriers": self.control_carriers,
        }


def sample_variant_counts(
    variants: pd.DataFrame,
    status: pd.DataFrame,
    label: str = "variants",
) -> pd.DataFrame:
    """Count qualifying variants for every sample in the status table.

    Parameters
    ----------
    variants : pd.DataFrame
        Variant table (``sample_id`` column) restricted to one gene set.
    status : pd.DataFrame
        Table from :func:`load_sample_status`.
    label : str
        Gene-set name used in error messages.

    Returns
    -------
    pd.DataFrame
        Indexed by ``sample_id`` in status-table order, with columns
        ``status``, ``is_case`` (0/1) and ``count``. Samples with no
        variant rows have count 0.

    Raises
    ------
    DataIntegrityError
        If the variant table references samples missing from the status table.
    """
    known = pd.Index(status["sample_id"])
    unknown = pd.Index(variants["sample_id"].unique()).difference(known)
    if len(unknown):
        raise DataIntegrityError(
            f"{label}: {len(unknown)} variant samples have no status label: "
            f"{unknown[:10].tolist()}"
        )

    per_sample = variants.groupby("sample_id").size()
    out = status.set_index("sample_id")[["status"]].copy()
    out["is_case"] = (out["status"] == CASE).astype(int)
    out["count"] = per_sample.reindex(out.index, fill_value=0).astype(int)
    return out


def presence_indicators(
    variants: pd.DataFrame,
    status: pd.DataFrame,
    label: str = "variants",
) -> pd.DataFrame:
    """Per-sample counts plus an ``indicator`` column clamped to 0/1."""
    out = sample_variant_counts(variants, status, label)
    out["indicator"] = (out["count"] > 0).astype(int)
    return out


def fit_odds_ratio(
    indicators: pd.DataFrame,
    label: str = "variants",
    confidence: float = 0.95,
) -> OddsRatioResult:
    """Logistic regression of disease status on variant presence.

    Fits ``is_case ~ 1 + indicator`` with a binomial GLM.

    Parameters
    ----------
    indicators : pd.DataFrame
        Output of :func:`presence_indicators`.
    label : str
        Gene-set name for reporting and error messages.
    confidence : float, default 0.95
        Confidence level of the Wald interval.

    Returns
    -------
    OddsRatioResult

    Raises
    ------
    ModelFitError
        If there are no cases or controls, no carriers, carriers in only
        one arm (the MLE does not exist), or the fit fails.

    Examples
    --------
    >>> ind = presence_indicators(established, status, "established")
    >>> res = fit_odds_ratio(ind, "established")
    >>> print(f"OR={res.odds_ratio:.2f} [{res.ci_low:.2f}-{res.ci_high:.2f}]")
    """
    y = indicators["is_case"].to_numpy(dtype=float)
    x = indicators["indicator"].to_numpy(dtype=float)

    n_cases = int(y.sum())
    n_controls = int(y.size - n_cases)
    case_carriers = int(x[y == 1].sum())
    control_carriers = int(x[y == 0].sum())

    if n_cases == 0 or n_controls == 0:
        raise ModelFitError(f"{label}: need both cases and controls ({n_cases} / {n_controls})")
    if case_carriers + control_carriers == 0:
        raise ModelFitError(f"{label}: no carriers among {y.size} samples")
    cells = (
        case_carriers,
        n_cases - case_carriers,
        control_carriers,
        n_controls - control_carriers,
    )
    if min(cells) == 0:
        raise ModelFitError(
            f"{label}: 2x2 table has an empty cell {cells}; odds ratio is not estimable"
        )

    X = sm.add_constant(pd.DataFrame({"indicator": x}))
    model = sm.GLM(y, X, family=sm.families.Binomial())
    with warnings.catch_warnings():
        warnings.simplefilter("error", ConvergenceWarning)
        try:
            res = model.fit(maxiter=100)
        except (ConvergenceWarning, ValueError, np.linalg.LinAlgError) as e:
            raise ModelFitError(f"Logistic fit failed for {label}: {e}") from e

    ci = res.conf_int(alpha=1.0 - confidence).loc["indicator"]
    result = OddsRatioResult(
        label=label,
        odds_ratio=float(np.exp(res.params["indicator"])),
        ci_low=float(np.exp(ci.iloc[0])),
        ci_high=float(np.exp(ci.iloc[1])),
        pvalue=float(res.pvalues["indicator"]),
        n_cases=n_cases,
        n_controls=n_controls,
        case_carriers=case_carriers,
        control_carriers=control_carriers,
        res=res,
    )
    logger.info(
        f"{label}: OR={result.odds_ratio:.3f} "
        f"[{result.ci_low:.3f}-{result.ci_high:.3f}], p={result.pvalue:.3g}"
    )
    return result
