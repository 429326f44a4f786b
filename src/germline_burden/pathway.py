"""
Targeted test of a single curated pathway gene set (DNA repair by default).

Builds the 2x2 table of variant presence by disease status, runs a
chi-square test of independence and reports the logistic odds ratio for
the same indicators.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import pandas as pd
from scipy.stats import chi2_contingency

from .constants import CASE, CONTROL, DNA_REPAIR_GENES
from .gene_sets import restrict_to_genes
from .odds_ratio import OddsRatioResult, fit_odds_ratio, presence_indicators

logger = logging.getLogger(__name__)


@dataclass
class PathwayResult:
    label: str
    table: pd.DataFrame
    chi2: float
    chi2_pvalue: float
    dof: int
    odds_ratio: OddsRatioResult


def contingency_table(indicators: pd.DataFrame) -> pd.DataFrame:
    """2x2 counts of variant presence (rows) by status (columns).

    Every sample in ``indicators`` is counted, including those with no
    variant rows.
    """
    present = indicators["indicator"] == 1
    is_case = indicators["is_case"] == 1
    return pd.DataFrame(
        {
            CASE: [int((present & is_case).sum()), int((~present & is_case).sum())],
            CONTROL: [int((present & ~is_case).sum()), int((~present & ~is_case).sum())],
        },
        index=pd.Index(["variant", "no_variant"], name="presence"),
    )


def pathway_test(
    variants: pd.DataFrame,
    status: pd.DataFrame,
    genes: Sequence[str] = DNA_REPAIR_GENES,
    *,
    label: str = "dna_repair",
    correction: bool = True,
    confidence: float = 0.95,
) -> PathwayResult:
    """Chi-square test and odds ratio for one curated gene list.

    Parameters
    ----------
    variants : pd.DataFrame
        Qualifying variants for cases and controls.
    status : pd.DataFrame
        Sample status table.
    genes : sequence of str
        Genes in the pathway.
    label : str
        Name used in reports and error messages.
    correction : bool, default True
        Apply Yates' continuity correction to the 2x2 chi-square test.
    confidence : float, default 0.95
        Confidence level of the odds ratio interval.

    Returns
    -------
    PathwayResult
    """
    subset = restrict_to_genes(variants, genes)
    ind = presence_indicators(subset, status, label)
    table = contingency_table(ind)

    chi2, p, dof, _ = chi2_contingency(table.to_numpy(), correction=correction)
    or_res = fit_odds_ratio(ind, label, confidence=confidence)

    logger.info(f"{label}: chi2={chi2:.3f} on {dof} df, p={p:.3g}")
    return PathwayResult(
        label=label,
        table=table,
        chi2=float(chi2),
        chi2_pvalue=float(p),
        dof=int(dof),
        odds_ratio=or_res,
    )
