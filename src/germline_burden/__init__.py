"""
germline-burden: Germline variant burden analyses for pediatric leukemia and MDS.

This package reproduces two analyses: a cohort comparison of pathogenic /
likely-pathogenic (P/LP) germline variant prevalence across disease
lineages, and case-control testing of putative loss-of-function (pLOF)
variant enrichment in curated gene sets.

Modules
-------
io
    Loaders and schemas for cohort, variant, gene and status tables.
labels
    Group labels and explicit lineage ordering.
trend
    Robust Poisson trend test and exact binomial carrier percentages.
resample
    Without-replacement resampling of per-group burden.
gene_sets
    Qualifying-variant filter and gene-set partitioning.
odds_ratio
    Per-sample presence indicators and logistic odds ratios.
bootstrap
    Bootstrap ratio-of-means confidence intervals.
pathway
    2x2 chi-square and odds ratio for a curated pathway gene set.
plots
    Burden distribution and bootstrap histogram figures.
cohort, burden
    The two end-to-end workflows.

Example
-------
>>> import germline_burden as gb
>>> cohort = gb.add_group_labels(gb.load_cohort("data/cohort.csv"))
>>> gb.lineage_proportions(cohort)
>>> res = gb.fit_trend(cohort, "Pediatric")
"""

__version__ = "0.1.0"

# bootstrap
from .bootstrap import (
    BootstrapResult,
    bootstrap_from_counts,
    bootstrap_ratio,
)

# workflows
from .burden import BurdenTestingResult, run_burden_testing
from .cohort import CohortComparisonResult, run_cohort_comparison

# config
from .config import AnalysisConfig, Paths

# errors
from .errors import (
    BurdenAnalysisError,
    DataIntegrityError,
    InsufficientSampleError,
    ModelFitError,
)

# gene_sets
from .gene_sets import (
    build_gene_sets,
    partition_by_status,
    qualifying_variants,
    restrict_to_genes,
)

# io
from .io import (
    CohortSchema,
    GeneSchema,
    StatusSchema,
    VariantSchema,
    load_cohort,
    load_gene_classification,
    load_sample_status,
    load_variants,
)

# labels
from .labels import (
    GROUP_ORDER,
    add_group_labels,
    group_counts,
    group_label,
    ordered_lineage,
)

# odds_ratio
from .odds_ratio import (
    OddsRatioResult,
    fit_odds_ratio,
    presence_indicators,
    sample_variant_counts,
)

# pathway
from .pathway import (
    PathwayResult,
    contingency_table,
    pathway_test,
)

# plots
from .plots import (
    bootstrap_histogram,
    burden_distribution_plot,
)

# resample
from .resample import (
    draw_sizes,
    resample_burden,
    summarize_burden,
)

# trend
from .trend import (
    TrendResult,
    fit_trend,
    lineage_proportions,
)

__all__ = [
    # bootstrap
    "BootstrapResult",
    "bootstrap_from_counts",
    "bootstrap_ratio",
    # workflows
    "BurdenTestingResult",
    "run_burden_testing",
    "CohortComparisonResult",
    "run_cohort_comparison",
    # config
    "AnalysisConfig",
    "Paths",
    # errors
    "BurdenAnalysisError",
    "DataIntegrityError",
    "InsufficientSampleError",
    "ModelFitError",
    # gene_sets
    "build_gene_sets",
    "partition_by_status",
    "qualifying_variants",
    "restrict_to_genes",
    # io
    "CohortSchema",
    "GeneSchema",
    "StatusSchema",
    "VariantSchema",
    "load_cohort",
    "load_gene_classification",
    "load_sample_status",
    "load_variants",
    # labels
    "GROUP_ORDER",
    "add_group_labels",
    "group_counts",
    "group_label",
    "ordered_lineage",
    # odds_ratio
    "OddsRatioResult",
    "fit_odds_ratio",
    "presence_indicators",
    "sample_variant_counts",
    # pathway
    "PathwayResult",
    "contingency_table",
    "pathway_test",
    # plots
    "bootstrap_histogram",
    "burden_distribution_plot",
    # resample
    "draw_sizes",
    "resample_burden",
    "summarize_burden",
    # trend
    "TrendResult",
    "fit_trend",
    "lineage_proportions",
]
