"""
Group labels and category ordering for the cohort comparison.

Lineage is treated as an ordered factor in the trend regression and groups
render in a fixed order in plots, so the ordering is stated explicitly here
rather than derived from the data.

Functions
---------
group_label
    Composite age group + lineage key.
ordered_lineage
    Ordered categorical of lineages.
add_group_labels
    Add ``group`` and ``lineage_cat`` columns to a cohort table.
group_counts
    Per-group arrays of variant counts, in display order.
"""
from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from .constants import AGE_GROUPS, EXCLUDED_RESAMPLE_GROUPS, LINEAGE_ORDER
from .errors import DataIntegrityError


def group_label(age_group: str, lineage: str) -> str:
    """Build the composite group key, e.g. ("Pediatric", "B-ALL") -> "Pediatric BALL"."""
    return f"{str(age_group).strip()} {str(lineage).strip().replace('-', '')}"


GROUP_ORDER = tuple(group_label(a, ln) for a in AGE_GROUPS for ln in LINEAGE_ORDER)


def ordered_lineage(lineage: pd.Series, order: Sequence[str] = LINEAGE_ORDER) -> pd.Series:
    """Convert lineage labels to an ordered categorical.

    Raises
    ------
    DataIntegrityError
        If any label is outside ``order``.
    """
    unknown = sorted(set(lineage.dropna().astype(str)) - set(order))
    if unknown or lineage.isna().any():
        raise DataIntegrityError(
            f"Lineages outside the trend ordering {list(order)}: {unknown or ['<missing>']}"
        )
    cat = pd.Categorical(lineage.astype(str), categories=list(order), ordered=True)
    return pd.Series(cat, index=lineage.index, name="lineage_cat")


def add_group_labels(cohort: pd.DataFrame) -> pd.DataFrame:
    """Add ``group`` and ordered ``lineage_cat`` columns.

    Parameters
    ----------
    cohort : pd.DataFrame
        Table from :func:`load_cohort` with ``lineage`` and ``age_group``.

    Returns
    -------
    pd.DataFrame
        Copy of the input with the two derived columns.
    """
    out = cohort.copy()
    out["group"] = [group_label(a, ln) for a, ln in zip(out["age_group"], out["lineage"])]
    out["lineage_cat"] = ordered_lineage(out["lineage"])
    return out


def group_counts(
    cohort: pd.DataFrame,
    *,
    exclude: Iterable[str] = EXCLUDED_RESAMPLE_GROUPS,
    order: Sequence[str] = GROUP_ORDER,
) -> dict[str, np.ndarray]:
    """Per-patient variant counts for each group, in ``order``.

    Groups named in ``exclude`` are left out; groups absent from the data
    are skipped. Groups present in the data but missing from ``order``
    follow in order of first appearance.
    """
    if "group" not in cohort.columns:
        cohort = add_group_labels(cohort)

    excluded = set(exclude)
    present = list(dict.fromkeys(cohort["group"]))
    ordered = [g for g in order if g in present] + [g for g in present if g not in order]

    out = {}
    for g in ordered:
        if g in excluded:
            continue
        out[g] = cohort.loc[cohort["group"] == g, "variant_count"].to_numpy(dtype=int)
    return out
