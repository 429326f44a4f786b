"""
Cohort comparison workflow.

Load the combined cohort, label groups, report carrier percentages with
exact binomial intervals, run the robust Poisson trend test per age stratum
and resample per-group burden as a distribution-free check.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .config import AnalysisConfig, Paths
from .io import load_cohort, write_table
from .labels import GROUP_ORDER, add_group_labels, group_counts
from .plots import burden_distribution_plot
from .resample import resample_burden, summarize_burden
from .trend import TrendResult, fit_trend, lineage_proportions

logger = logging.getLogger(__name__)


@dataclass
class CohortComparisonResult:
    proportions: pd.DataFrame
    trends: dict[str, TrendResult] = field(default_factory=dict)
    resampled: pd.DataFrame = field(default_factory=pd.DataFrame, repr=False)
    burden_summary: pd.DataFrame = field(default_factory=pd.DataFrame)

    def print_summary(self) -> None:
        print("=" * 70)
        print("COHORT COMPARISON")
        print("=" * 70)
        print(f"\n{'Group':<20} {'N':>6} {'Carriers':>9} {'%':>7} {'95% CI':>18}")
        print("-" * 64)
        for r in self.proportions.itertuples(index=False):
            ci = f"[{r.ci_low:.1f}, {r.ci_high:.1f}]"
            print(f"{r.group:<20} {r.n:>6} {r.carriers:>9} {r.percent:>7.1f} {ci:>18}")

        for ag, t in self.trends.items():
            print(f"\nRobust Poisson trend ({ag}): LR chi2={t.lr_stat:.2f}, df={t.df}, p={t.pvalue:.3g}")
            print(f"  robust Wald chi2={t.robust_stat:.2f}, p={t.robust_pvalue:.3g}")
            print(f"  linear contrast={t.linear_coef:.3f} (SE {t.linear_se:.3f}, p={t.linear_pvalue:.3g})")
            for lineage, rate in t.rates.items():
                print(f"  {lineage:<8} mean count {rate:.4f}")

        if not self.burden_summary.empty:
            print(f"\n{'Group':<20} {'Mean':>8} {'2.5%':>8} {'97.5%':>8}  (resampled burden)")
            print("-" * 48)
            for r in self.burden_summary.itertuples(index=False):
                print(f"{r.group:<20} {r.mean:>8.3f} {r.lower:>8.3f} {r.upper:>8.3f}")


def run_cohort_comparison(
    paths: Paths,
    config: AnalysisConfig = AnalysisConfig(),
    *,
    age_groups: Sequence[str] = ("Pediatric",),
    make_plots: bool = True,
) -> CohortComparisonResult:
    """Run the full cohort comparison and write tables/plots to ``paths.results_path``.

    Any fit or resampling failure propagates; there are no partial results.
    """
    paths.require("cohort")
    cohort = add_group_labels(load_cohort(paths.cohort))
    logger.info(f"Loaded {len(cohort)} patients in {cohort['group'].nunique()} groups")

    proportions = lineage_proportions(cohort)
    trends = {ag: fit_trend(cohort, ag, alpha=config.alpha) for ag in age_groups}

    rng = np.random.default_rng(config.seed)
    groups = group_counts(cohort)
    resampled = resample_burden(
        groups, config.resample_size, config.resample_replicates, rng
    )
    summary = summarize_burden(resampled)

    out = paths.results_path
    write_table(proportions, out / "cohort_proportions.csv")
    write_table(summary, out / "cohort_resampled_burden.csv")
    write_table(
        pd.DataFrame(
            [
                {
                    "age_group": t.age_group,
                    "n": t.n,
                    "lr_stat": t.lr_stat,
                    "df": t.df,
                    "pvalue": t.pvalue,
                    "robust_stat": t.robust_stat,
                    "robust_pvalue": t.robust_pvalue,
                    "significant": t.significant,
                    "linear_coef": t.linear_coef,
                    "linear_pvalue": t.linear_pvalue,
                }
                for t in trends.values()
            ]
        ),
        out / "cohort_trend_tests.csv",
    )

    if make_plots:
        fig, _ = burden_distribution_plot(
            resampled,
            order=GROUP_ORDER,
            title=f"Resampled burden (n={config.resample_size}, m={config.resample_replicates})",
            outpath=out / "plots" / "cohort_burden.png",
        )
        plt.close(fig)
    logger.info(f"Cohort comparison results saved to {out}")

    return CohortComparisonResult(
        proportions=proportions, trends=trends, resampled=resampled, burden_summary=summary
    )
