"""
Visualization functions for burden results.

Functions
---------
burden_distribution_plot
    Resampled burden distribution per group.
bootstrap_histogram
    Histogram of bootstrap ratio replicates with percentile interval.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from .bootstrap import BootstrapResult


def _save(fig, outpath: Optional[str | Path], dpi: int) -> None:
    if outpath is not None:
        outpath = Path(outpath)
        outpath.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(outpath, dpi=dpi, bbox_inches="tight")


def burden_distribution_plot(
    resampled: pd.DataFrame,
    *,
    order: Optional[Sequence[str]] = None,
    title: Optional[str] = None,
    outpath: Optional[str | Path] = None,
    dpi: int = 200,
):
    """Violin plot of resampled burden by group.

    Parameters
    ----------
    resampled : pd.DataFrame
        Output of :func:`resample_burden` (``group`` and ``burden`` columns).
    order : sequence of str or None
        Group order on the x-axis. Groups missing from ``order`` follow in
        order of first appearance; the default is first appearance only.
    title : str or None
        Plot title.
    outpath : str, Path, or None
        If provided, save the figure to this path.
    dpi : int, default 200
        Resolution for saved figure.

    Returns
    -------
    fig : matplotlib.figure.Figure
    ax : matplotlib.axes.Axes

    Raises
    ------
    ValueError
        If ``resampled`` is empty.
    """
    if resampled.empty:
        raise ValueError("burden_distribution_plot received an empty DataFrame.")

    present = list(dict.fromkeys(resampled["group"]))
    if order is None:
        order = present
    else:
        order = [g for g in order if g in present] + [g for g in present if g not in order]

    data = resampled.assign(percent=100.0 * resampled["burden"])

    fig, ax = plt.subplots(figsize=(max(4, 1.2 * len(order) + 1), 4))
    sns.violinplot(
        data=data, x="group", y="percent", order=order, color="#c6dbef", cut=0,
        inner="quartile", ax=ax,
    )
    means = data.groupby("group")["percent"].mean().reindex(order)
    ax.scatter(range(len(order)), means.to_numpy(), color="#e34a33", s=18, zorder=3, label="mean")

    ax.set_xlabel("")
    ax.set_ylabel("Patients with P/LP variant (%)")
    ax.tick_params(axis="x", rotation=45)
    for lbl in ax.get_xticklabels():
        lbl.set_ha("right")
    if title:
        ax.set_title(title)
    ax.legend(frameon=False, fontsize=8)

    fig.tight_layout()
    _save(fig, outpath, dpi)
    return fig, ax


def bootstrap_histogram(
    result: BootstrapResult,
    *,
    reference: Optional[float] = None,
    bins: int = 100,
    title: Optional[str] = None,
    outpath: Optional[str | Path] = None,
    dpi: int = 200,
):
    """Histogram of bootstrap ratio replicates.

    Dashed lines mark the 2.5th and 97.5th percentiles, a solid line the
    median. ``reference`` (e.g. the logistic odds ratio) is drawn in red.

    Returns
    -------
    fig : matplotlib.figure.Figure
    ax : matplotlib.axes.Axes
    """
    reps = np.asarray(result.replicates, dtype=float)
    if reps.size == 0:
        raise ValueError(f"{result.label}: no bootstrap replicates to plot.")

    fig, ax = plt.subplots()
    ax.hist(reps, bins=bins, color="#9ecae1", edgecolor="none")

    ax.axvline(result.median, color="black", linewidth=1.0)
    ax.axvline(result.lower, color="gray", linestyle="--", linewidth=0.8)
    ax.axvline(result.upper, color="gray", linestyle="--", linewidth=0.8)
    if reference is not None and np.isfinite(reference):
        ax.axvline(reference, color="#e34a33", linewidth=1.0, label="logistic OR")
        ax.legend(frameon=False, fontsize=8)

    ax.set_xlabel("Case / control ratio of mean variant count")
    ax.set_ylabel("Replicates")
    ax.set_title(title or f"{result.label} (n_boot={result.n_boot:,})")

    fig.tight_layout()
    _save(fig, outpath, dpi)
    return fig, ax
