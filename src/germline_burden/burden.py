"""
Case-control burden testing workflow.

For each gene set (established predisposition genes, candidate genes and,
when supplied, random genes) estimate pLOF enrichment in cases by a
logistic odds ratio, a bootstrap ratio of means and a resampled carrier
burden per arm; then test the DNA-repair gene set with a 2x2 chi-square.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .bootstrap import BootstrapResult, bootstrap_from_counts
from .config import AnalysisConfig, Paths
from .constants import CASE, CONTROL, DNA_REPAIR_GENES
from .gene_sets import build_gene_sets, qualifying_variants
from .io import load_gene_classification, load_sample_status, load_variants, write_table
from .odds_ratio import OddsRatioResult, fit_odds_ratio, presence_indicators
from .pathway import PathwayResult, pathway_test
from .plots import bootstrap_histogram, burden_distribution_plot
from .resample import resample_burden, summarize_burden

logger = logging.getLogger(__name__)

PATHWAY_SET = "dna_repair"


@dataclass
class GeneSetResult:
    name: str
    odds_ratio: OddsRatioResult
    bootstrap: BootstrapResult
    resampled: pd.DataFrame = field(repr=False)


@dataclass
class BurdenTestingResult:
    gene_sets: dict[str, GeneSetResult]
    pathway: PathwayResult
    summary: pd.DataFrame
    burden_summary: pd.DataFrame

    def print_summary(self) -> None:
        print("=" * 70)
        print("CASE-CONTROL BURDEN TESTING")
        print("=" * 70)
        print(f"\n{'Gene set':<14} {'OR':>7} {'95% CI':>18} {'P':>10} {'Boot':>7} {'Boot 95% CI':>18}")
        print("-" * 78)
        for name, r in self.gene_sets.items():
            o, b = r.odds_ratio, r.bootstrap
            ci = f"[{o.ci_low:.2f}, {o.ci_high:.2f}]"
            bci = f"[{b.lower:.2f}, {b.upper:.2f}]"
            print(f"{name:<14} {o.odds_ratio:>7.2f} {ci:>18} {o.pvalue:>10.2e} {b.median:>7.2f} {bci:>18}")

        p = self.pathway
        print(f"\nPathway gene set: {p.label}")
        print(p.table.to_string())
        print(f"  chi2={p.chi2:.3f}, df={p.dof}, p={p.chi2_pvalue:.3g}")
        o = p.odds_ratio
        print(f"  OR={o.odds_ratio:.2f} [{o.ci_low:.2f}, {o.ci_high:.2f}], p={o.pvalue:.3g}")


def _load_inputs(paths: Paths, config: AnalysisConfig):
    status = load_sample_status(paths.sample_status)
    genes = load_gene_classification(paths.gene_classification)

    variants = pd.concat(
        [load_variants(paths.case_variants), load_variants(paths.control_variants)],
        ignore_index=True,
    )
    variants = qualifying_variants(variants, max_af=config.max_af)

    random_variants = None
    if paths.random_variants is not None:
        random_variants = qualifying_variants(
            load_variants(paths.random_variants), max_af=config.max_af
        )

    n_case = int((status["status"] == CASE).sum())
    logger.info(
        f"Loaded {len(status)} samples ({n_case} cases, {len(status) - n_case} controls), "
        f"{len(variants)} qualifying variants"
    )
    return status, genes, variants, random_variants


def run_burden_testing(
    paths: Paths,
    config: AnalysisConfig = AnalysisConfig(),
    *,
    make_plots: bool = True,
) -> BurdenTestingResult:
    """Run burden testing for every gene set and the DNA-repair pathway.

    Odds ratio intervals are at the ``1 - config.alpha`` level; bootstrap
    intervals are always the 2.5th and 97.5th percentiles. A failure in any
    gene set (integrity, fit or resampling) ends the run.
    """
    paths.require("case_variants", "control_variants", "gene_classification", "sample_status")
    status, genes, variants, random_variants = _load_inputs(paths, config)

    gene_sets = build_gene_sets(
        variants,
        genes,
        random_variants=random_variants,
        pathway_genes=DNA_REPAIR_GENES,
        inheritance=config.inheritance,
    )

    confidence = 1.0 - config.alpha
    rng = np.random.default_rng(config.seed)
    results = {}
    for name, set_variants in gene_sets.items():
        if name == PATHWAY_SET:
            continue
        ind = presence_indicators(set_variants, status, name)
        or_res = fit_odds_ratio(ind, name, confidence=confidence)
        boot = bootstrap_from_counts(ind, n_boot=config.n_boot, rng=rng, label=name)

        arms = {
            f"{name} {CASE}": ind.loc[ind["is_case"] == 1, "count"].to_numpy(),
            f"{name} {CONTROL}": ind.loc[ind["is_case"] == 0, "count"].to_numpy(),
        }
        resampled = resample_burden(
            arms,
            config.burden_resample_size,
            config.resample_replicates,
            rng,
            slop=config.slop,
        )
        results[name] = GeneSetResult(
            name=name, odds_ratio=or_res, bootstrap=boot, resampled=resampled
        )

    pathway = pathway_test(
        gene_sets[PATHWAY_SET],
        status,
        DNA_REPAIR_GENES,
        label=PATHWAY_SET,
        confidence=confidence,
    )

    rows = [{**r.odds_ratio.as_row(), **r.bootstrap.as_row()} for r in results.values()]
    rows.append(
        {
            **pathway.odds_ratio.as_row(),
            "chi2": pathway.chi2,
            "chi2_pvalue": pathway.chi2_pvalue,
        }
    )
    summary = pd.DataFrame(rows)

    resampled_all = pd.concat([r.resampled for r in results.values()], ignore_index=True)
    burden_summary = summarize_burden(resampled_all)

    out = paths.results_path
    write_table(summary, out / "burden_summary.csv")
    write_table(burden_summary, out / "burden_resampled.csv")
    write_table(pathway.table.reset_index(), out / f"{PATHWAY_SET}_contingency.csv")

    if make_plots:
        for name, r in results.items():
            fig, _ = bootstrap_histogram(
                r.bootstrap,
                reference=r.odds_ratio.odds_ratio,
                outpath=out / "plots" / f"bootstrap_{name}.png",
            )
            plt.close(fig)
        fig, _ = burden_distribution_plot(
            resampled_all,
            title=f"Resampled carrier burden (n={config.burden_resample_size}, slop={config.slop})",
            outpath=out / "plots" / "burden_case_control.png",
        )
        plt.close(fig)
    logger.info(f"Burden testing results saved to {out}")

    return BurdenTestingResult(
        gene_sets=results,
        pathway=pathway,
        summary=summary,
        burden_summary=burden_summary,
    )
