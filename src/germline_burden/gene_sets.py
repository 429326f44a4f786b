"""
Qualifying-variant filtering and gene-set partitioning for burden testing.

Functions
---------
qualifying_variants
    Keep rare pLOF variants.
restrict_to_genes
    Keep variants in a gene list.
partition_by_status
    Split variants into established and candidate predisposition genes.
build_gene_sets
    Ordered mapping of every tested gene set to its variants.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import pandas as pd

from .constants import (
    CANDIDATE,
    DEFAULT_MAX_AF,
    DNA_REPAIR_GENES,
    ESTABLISHED,
    PLOF_CONSEQUENCES,
)

logger = logging.getLogger(__name__)


def _split_consequence(s: str) -> list[str]:
    # VEP joins multiple terms with '&' (sometimes ',')
    return [t.strip() for t in str(s).replace(",", "&").split("&") if t.strip()]


def qualifying_variants(
    variants: pd.DataFrame,
    *,
    consequences: Sequence[str] = PLOF_CONSEQUENCES,
    max_af: float = DEFAULT_MAX_AF,
) -> pd.DataFrame:
    """Keep variants with a pLOF consequence and population AF <= ``max_af``.

    A variant qualifies if any of its ``&``-joined consequence terms is in
    ``consequences``.
    """
    terms = set(consequences)
    is_lof = variants["consequence"].map(lambda s: any(t in terms for t in _split_consequence(s)))
    keep = is_lof & (variants["af"] <= max_af)
    return variants.loc[keep].reset_index(drop=True)


def restrict_to_genes(variants: pd.DataFrame, genes: Iterable[str]) -> pd.DataFrame:
    gene_set = {str(g).strip().upper() for g in genes}
    return variants.loc[variants["gene"].isin(gene_set)].reset_index(drop=True)


def partition_by_status(
    variants: pd.DataFrame,
    genes: pd.DataFrame,
    *,
    inheritance: Optional[str] = None,
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Split variants into established and candidate gene sets.

    Parameters
    ----------
    variants : pd.DataFrame
        Variant table from :func:`load_variants`.
    genes : pd.DataFrame
        Gene classification from :func:`load_gene_classification`.
    inheritance : str or None
        If given, only genes with this inheritance mode (case-insensitive,
        e.g. "AD") are used.

    Returns
    -------
    established, candidate : pd.DataFrame
        Variants in each gene set. Variants in unclassified genes are in
        neither.
    """
    if inheritance is not None:
        genes = genes.loc[genes["inheritance"].str.upper() == inheritance.upper()]

    established = restrict_to_genes(variants, genes.loc[genes["status"] == ESTABLISHED, "gene"])
    candidate = restrict_to_genes(variants, genes.loc[genes["status"] == CANDIDATE, "gene"])
    return established, candidate


def build_gene_sets(
    variants: pd.DataFrame,
    genes: pd.DataFrame,
    *,
    random_variants: Optional[pd.DataFrame] = None,
    pathway_genes: Sequence[str] = DNA_REPAIR_GENES,
    inheritance: Optional[str] = None,
) -> dict[str, pd.DataFrame]:
    """Variants for every tested gene set, in reporting order.

    ``variants`` holds the combined case and control calls; the random
    gene set comes from its own table and is skipped when not given.
    """
    established, candidate = partition_by_status(variants, genes, inheritance=inheritance)
    out = {"established": established, "candidate": candidate}
    if random_variants is not None:
        out["random"] = random_variants.reset_index(drop=True)
    out["dna_repair"] = restrict_to_genes(variants, pathway_genes)

    for name, df in out.items():
        logger.info(f"Gene set {name}: {len(df)} variants in {df['gene'].nunique()} genes")
    return out
