"""
Constants for germline variant burden analysis.

Contains the lineage ordering used for trend testing, the fixed group
exclusion policy for resampling, curated gene lists and the consequence
terms that define putative loss-of-function (pLOF) variants.
"""

# Disease lineages in trend order (least to most myeloid)
LINEAGE_ORDER = ("B-ALL", "T-ALL", "AML", "MDS")

AGE_GROUPS = ("Pediatric", "Adult")

# Adult ALL subtypes are too small to resample stably
EXCLUDED_RESAMPLE_GROUPS = ("Adult BALL", "Adult TALL")

# Sample status labels as they appear in the status table
CASE = "case"
CONTROL = "control"

STATUS_ALIASES = {
    "case": CASE,
    "cases": CASE,
    "aml": CASE,
    "1": CASE,
    "control": CONTROL,
    "controls": CONTROL,
    "ctrl": CONTROL,
    "0": CONTROL,
}

# Gene classification flags
ESTABLISHED = "established"
CANDIDATE = "candidate"

# VEP consequence terms counted as pLOF
PLOF_CONSEQUENCES = (
    "stop_gained",
    "frameshift_variant",
    "splice_acceptor_variant",
    "splice_donor_variant",
    "start_lost",
    "transcript_ablation",
)

# DNA repair genes tested as a single targeted set
DNA_REPAIR_GENES = (
    "ATM",
    "BLM",
    "BRCA1",
    "BRCA2",
    "BRIP1",
    "CHEK2",
    "ERCC4",
    "ERCC6L2",
    "FANCA",
    "FANCC",
    "FANCD2",
    "FANCE",
    "FANCF",
    "FANCG",
    "FANCI",
    "FANCL",
    "FANCM",
    "MRE11",
    "NBN",
    "PALB2",
    "RAD50",
    "RAD51C",
    "RAD51D",
    "SLX4",
)

# Default analysis parameters
DEFAULT_SEED = 20240501
DEFAULT_RESAMPLE_SIZE = 30
DEFAULT_RESAMPLE_REPLICATES = 1000
DEFAULT_BURDEN_RESAMPLE_SIZE = 100
DEFAULT_SLOP = 10
DEFAULT_N_BOOT = 100_000
DEFAULT_MAX_AF = 0.001
DEFAULT_ALPHA = 0.05
