"""
Resampling estimates of per-group variant burden.

Burden is the fraction of sampled patients carrying at least one qualifying
variant. Each replicate draws a fixed number of patients without
replacement from a group, so the empirical distribution of burden makes no
assumption about the count distribution.

Functions
---------
draw_sizes
    Per-replicate draw sizes, optionally jittered.
resample_burden
    Burden distributions for a mapping of groups.
summarize_burden
    Mean and percentile summary of resampled burden.
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from .errors import InsufficientSampleError

logger = logging.getLogger(__name__)


def draw_sizes(n: int, m: int, rng: np.random.Generator, slop: float = 0) -> np.ndarray:
    """Draw size for each of ``m`` replicates.

    With ``slop > 0`` each size is ``round(n + U(-slop/2, slop/2))``, so the
    total jitter window is ``slop`` wide and centred on ``n``. Sizes never
    drop below 1.

    Examples
    --------
    >>> rng = np.random.default_rng(0)
    >>> sizes = draw_sizes(100, 5, rng, slop=10)
    >>> bool(((sizes >= 95) & (sizes <= 105)).all())
    True
    """
    if n < 1:
        raise ValueError(f"Draw size must be positive, got n={n}")
    if m < 1:
        raise ValueError(f"Replicate count must be positive, got m={m}")
    if slop < 0:
        raise ValueError(f"slop must be non-negative, got {slop}")

    if slop == 0:
        return np.full(m, int(n), dtype=int)
    half = slop / 2.0
    sizes = np.rint(n + rng.uniform(-half, half, size=m)).astype(int)
    return np.clip(sizes, 1, None)


def _max_draw(n: int, slop: float) -> int:
    return int(np.rint(n + slop / 2.0))


def resample_burden(
    groups: Mapping[str, Sequence[int]],
    n: int,
    m: int,
    rng: Optional[np.random.Generator] = None,
    *,
    slop: float = 0,
) -> pd.DataFrame:
    """Resample each group without replacement and record burden.

    Parameters
    ----------
    groups : mapping of str to sequence of int
        Group label -> per-patient variant counts. Output follows the
        mapping's order.
    n : int
        Patients drawn per replicate.
    m : int
        Replicates per group.
    rng : numpy.random.Generator or None
        Random source. A fresh unseeded generator is used if None, in which
        case results vary between runs.
    slop : float, default 0
        Total width of the per-replicate size jitter (see :func:`draw_sizes`).

    Returns
    -------
    pd.DataFrame
        Long-format table with columns ``group``, ``replicate``, ``size``
        and ``burden``; ``m`` rows per group.

    Raises
    ------
    InsufficientSampleError
        If any group has fewer patients than the largest possible draw.

    Examples
    --------
    >>> rng = np.random.default_rng(1)
    >>> res = resample_burden({"Pediatric AML": counts}, n=30, m=1000, rng=rng)
    >>> res.groupby("group")["burden"].mean()
    """
    if rng is None:
        rng = np.random.default_rng()

    max_draw = _max_draw(n, slop)
    for g, counts in groups.items():
        if len(counts) < max_draw:
            raise InsufficientSampleError(
                f"Group '{g}' has {len(counts)} patients; cannot draw {max_draw} "
                f"without replacement (n={n}, slop={slop})"
            )

    frames = []
    for g, counts in groups.items():
        carrier = np.asarray(counts) > 0
        sizes = draw_sizes(n, m, rng, slop=slop)
        burden = np.empty(m, dtype=float)
        for i, size in enumerate(sizes):
            idx = rng.choice(carrier.size, size=size, replace=False)
            burden[i] = carrier[idx].mean()
        frames.append(
            pd.DataFrame(
                {"group": g, "replicate": np.arange(m), "size": sizes, "burden": burden}
            )
        )
        logger.debug(f"{g}: {m} replicates, mean burden {burden.mean():.4f}")

    if not frames:
        return pd.DataFrame(columns=["group", "replicate", "size", "burden"])
    return pd.concat(frames, ignore_index=True)


def summarize_burden(resampled: pd.DataFrame) -> pd.DataFrame:
    """Mean and 2.5/50/97.5 percentiles of burden per group, order preserved."""
    g = resampled.groupby("group", sort=False)["burden"]
    out = pd.DataFrame(
        {
            "mean": g.mean(),
            "lower": g.quantile(0.025),
            "median": g.median(),
            "upper": g.quantile(0.975),
        }
    )
    return out.reset_index()
