#!/usr/bin/env python3
"""
Regenerate every published table and figure.

Runs, from the fixed input files under ``data/``:

1. Cohort comparison (pediatric trend test, Pediatric and Adult carrier
   percentages, resampled burden with n=30, m=1000).
2. Case-control burden testing for all gene sets (established, candidate,
   random, DNA repair).
3. The same burden testing restricted to autosomal dominant genes.

Each analysis writes into its own subdirectory of ``results/``. A failure in
one analysis is reported and the remaining analyses still run.
"""

import sys
import traceback
from dataclasses import replace
from pathlib import Path

import matplotlib.pyplot as plt

# Add src to path
BASE_PATH = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_PATH / 'src'))

import germline_burden as gb

# =============================================================================
# Configuration
# =============================================================================

DATA_PATH = BASE_PATH / 'data'
RESULTS_PATH = BASE_PATH / 'results'

COHORT_CSV = DATA_PATH / 'combined_cohort.csv'
CASE_VARIANTS = DATA_PATH / 'aml_plof_variants.tsv'
CONTROL_VARIANTS = DATA_PATH / 'control_plof_variants.tsv'
RANDOM_VARIANTS = DATA_PATH / 'random_gene_variants.tsv'
GENE_CLASSIFICATION = DATA_PATH / 'gene_classification.csv'
SAMPLE_STATUS = DATA_PATH / 'sample_status.tsv'

CONFIG = gb.AnalysisConfig()


def run_cohort():
    paths = gb.Paths(results_path=RESULTS_PATH / 'cohort', cohort=COHORT_CSV)
    res = gb.run_cohort_comparison(paths, CONFIG, age_groups=('Pediatric',))
    res.print_summary()


def run_burden(name, config):
    paths = gb.Paths(
        results_path=RESULTS_PATH / name,
        case_variants=CASE_VARIANTS,
        control_variants=CONTROL_VARIANTS,
        random_variants=RANDOM_VARIANTS if RANDOM_VARIANTS.exists() else None,
        gene_classification=GENE_CLASSIFICATION,
        sample_status=SAMPLE_STATUS,
    )
    res = gb.run_burden_testing(paths, config)
    res.print_summary()


def main():
    """Main entry point."""
    print("="*60)
    print("GERMLINE BURDEN ANALYSES")
    print("="*60)

    analyses = [
        ('cohort', run_cohort),
        ('burden', lambda: run_burden('burden', CONFIG)),
        ('burden_ad', lambda: run_burden('burden_ad', replace(CONFIG, inheritance='AD'))),
    ]

    for name, run in analyses:
        print(f"\n--- {name} ---")
        try:
            run()
        except (gb.BurdenAnalysisError, ValueError, OSError) as e:
            print(f"\n*** ERROR running {name}: {e} ***\n")
            traceback.print_exc()
        finally:
            plt.close('all')

    print("\n" + "="*60)
    print(f"ALL ANALYSES COMPLETE. Results in: {RESULTS_PATH}")
    print("="*60)


if __name__ == "__main__":
    main()
