"""Command-line interface for the cohort comparison and burden testing workflows."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .burden import run_burden_testing
from .cohort import run_cohort_comparison
from .config import AnalysisConfig, Paths
from .constants import (
    DEFAULT_ALPHA,
    DEFAULT_BURDEN_RESAMPLE_SIZE,
    DEFAULT_MAX_AF,
    DEFAULT_N_BOOT,
    DEFAULT_RESAMPLE_REPLICATES,
    DEFAULT_RESAMPLE_SIZE,
    DEFAULT_SEED,
    DEFAULT_SLOP,
)


def _optional_path(value):
    return Path(value) if value is not None else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Germline P/LP and pLOF variant burden analyses'
    )
    parser.add_argument(
        '--results_path',
        required=True,
        help='Path to output directory',
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=DEFAULT_SEED,
        help='Random seed for resampling and bootstrap',
    )
    parser.add_argument(
        '--replicates',
        type=int,
        default=DEFAULT_RESAMPLE_REPLICATES,
        help='Resampling replicates per group',
    )
    parser.add_argument(
        '--alpha',
        type=float,
        default=DEFAULT_ALPHA,
        help='Significance threshold (cohort trend test; odds ratio CI level is 1 - alpha)',
    )
    parser.add_argument(
        '--no_plots',
        action='store_true',
        help='Skip figure generation',
    )
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        help='Enable debug logging',
    )

    sub = parser.add_subparsers(dest='command', required=True)

    cohort = sub.add_parser('cohort', help='Trend test and resampling across lineages')
    cohort.add_argument('--cohort', required=True, help='Combined cohort CSV')
    cohort.add_argument(
        '--resample_size',
        type=int,
        default=DEFAULT_RESAMPLE_SIZE,
        help='Patients drawn per replicate',
    )
    cohort.add_argument(
        '--age_group',
        action='append',
        default=None,
        help='Age stratum to trend-test (repeatable, default Pediatric)',
    )

    burden = sub.add_parser('burden', help='Case-control pLOF burden testing')
    burden.add_argument('--case_variants', required=True, help='Case variant table')
    burden.add_argument('--control_variants', required=True, help='Control variant table')
    burden.add_argument('--random_variants', default=None, help='Random-gene variant table (optional)')
    burden.add_argument('--gene_classification', required=True, help='Gene classification table')
    burden.add_argument('--sample_status', required=True, help='Sample status table')
    burden.add_argument(
        '--resample_size',
        type=int,
        default=DEFAULT_BURDEN_RESAMPLE_SIZE,
        help='Samples drawn per replicate and arm',
    )
    burden.add_argument(
        '--slop',
        type=int,
        default=DEFAULT_SLOP,
        help='Total width of the draw-size jitter',
    )
    burden.add_argument(
        '--n_boot',
        type=int,
        default=DEFAULT_N_BOOT,
        help='Bootstrap replicates',
    )
    burden.add_argument(
        '--max_af',
        type=float,
        default=DEFAULT_MAX_AF,
        help='Maximum population allele frequency for qualifying variants',
    )
    burden.add_argument(
        '--inheritance',
        default=None,
        help='Restrict gene sets to one inheritance mode (e.g. AD)',
    )
    return parser


def main(argv=None):
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    results_path = Path(args.results_path)

    if args.command == 'cohort':
        paths = Paths(results_path=results_path, cohort=Path(args.cohort))
        config = AnalysisConfig(
            seed=args.seed,
            resample_size=args.resample_size,
            resample_replicates=args.replicates,
            alpha=args.alpha,
        )
        result = run_cohort_comparison(
            paths,
            config,
            age_groups=tuple(args.age_group or ('Pediatric',)),
            make_plots=not args.no_plots,
        )
    else:
        paths = Paths(
            results_path=results_path,
            case_variants=Path(args.case_variants),
            control_variants=Path(args.control_variants),
            random_variants=_optional_path(args.random_variants),
            gene_classification=Path(args.gene_classification),
            sample_status=Path(args.sample_status),
        )
        config = AnalysisConfig(
            seed=args.seed,
            burden_resample_size=args.resample_size,
            resample_replicates=args.replicates,
            slop=args.slop,
            n_boot=args.n_boot,
            alpha=args.alpha,
            max_af=args.max_af,
            inheritance=args.inheritance,
        )
        result = run_burden_testing(paths, config, make_plots=not args.no_plots)

    result.print_summary()
    return result


if __name__ == '__main__':
    main()
