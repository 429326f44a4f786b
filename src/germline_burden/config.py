from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

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


@dataclass(frozen=True)
class Paths:
    """Input files and output directory for one analysis run.

    Only the files needed by a workflow have to be set: the cohort
    comparison reads ``cohort``; burden testing reads the rest.
    """

    results_path: Path
    cohort: Optional[Path] = None
    case_variants: Optional[Path] = None
    control_variants: Optional[Path] = None
    random_variants: Optional[Path] = None
    gene_classification: Optional[Path] = None
    sample_status: Optional[Path] = None

    def require(self, *names: str) -> None:
        missing = [n for n in names if getattr(self, n) is None]
        if missing:
            raise ValueError(f"Missing input paths: {missing}")


@dataclass(frozen=True)
class AnalysisConfig:
    #: Seed for every random draw in a run.
    seed: Optional[int] = DEFAULT_SEED
    #: Patients drawn per replicate in the cohort resampling.
    resample_size: int = DEFAULT_RESAMPLE_SIZE
    #: Replicates per group for both resampling workflows.
    resample_replicates: int = DEFAULT_RESAMPLE_REPLICATES
    #: Samples drawn per replicate in the case-control resampling.
    burden_resample_size: int = DEFAULT_BURDEN_RESAMPLE_SIZE
    #: Total width of the draw-size jitter in the case-control resampling.
    slop: int = DEFAULT_SLOP
    #: Bootstrap replicates for the ratio-of-means estimate.
    n_boot: int = DEFAULT_N_BOOT
    alpha: float = DEFAULT_ALPHA
    #: Population allele frequency ceiling for qualifying variants.
    max_af: float = DEFAULT_MAX_AF
    #: Restrict established/candidate genes to one inheritance mode (e.g. "AD").
    inheritance: Optional[str] = None
