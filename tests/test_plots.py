"""Figure helpers: axis order, saved output."""
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from germline_burden import bootstrap_histogram, bootstrap_ratio, burden_distribution_plot


def _resampled(groups, m=20):
    rng = np.random.default_rng(3)
    return pd.DataFrame(
        {
            "group": np.repeat(groups, m),
            "replicate": np.tile(np.arange(m), len(groups)),
            "size": 30,
            "burden": rng.uniform(0, 0.3, size=m * len(groups)),
        }
    )


def test_groups_outside_order_are_appended():
    resampled = _resampled(["Young Adult AML", "Pediatric AML", "Pediatric BALL"])
    fig, ax = burden_distribution_plot(
        resampled, order=["Pediatric BALL", "Pediatric TALL", "Pediatric AML"]
    )
    fig.canvas.draw()
    labels = [t.get_text() for t in ax.get_xticklabels()]
    assert labels == ["Pediatric BALL", "Pediatric AML", "Young Adult AML"]
    assert len(ax.collections[-1].get_offsets()) == 3
    plt.close(fig)


def test_burden_plot_saves(tmp_path):
    out = tmp_path / "plots" / "burden.png"
    fig, _ = burden_distribution_plot(_resampled(["A", "B"]), outpath=out)
    plt.close(fig)
    assert out.exists()


def test_burden_plot_rejects_empty():
    with pytest.raises(ValueError, match="empty"):
        burden_distribution_plot(pd.DataFrame(columns=["group", "burden"]))


def test_bootstrap_histogram(tmp_path):
    res = bootstrap_ratio(
        [1] * 30 + [0] * 170, [1] * 8 + [0] * 392, n_boot=500,
        rng=np.random.default_rng(0), label="established",
    )
    out = tmp_path / "boot.png"
    fig, ax = bootstrap_histogram(res, reference=8.6, outpath=out)
    plt.close(fig)
    assert out.exists()
    assert "established" in ax.get_title()
