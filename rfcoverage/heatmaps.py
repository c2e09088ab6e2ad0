"""Margin heatmap rendering (PNG) for a sampled coverage grid.

Approach:
- Map margin over the display window (default -10..+30 dB) to 0..1.
- Hide every cell whose received power is below the paint cutoff
  (default -110 dBm) or that was skipped during sampling.
- Color with the policy's matplotlib colormap (viridis) and save a PNG with
  the transmitter marked.

The engine never sees these thresholds; they come from DisplayPolicy.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .config import DisplayPolicy
from .coverage import CoverageGrid


def margin_to_unit(margin_db: np.ndarray | float, policy: DisplayPolicy = DisplayPolicy()) -> np.ndarray:
    """Normalize margins into [0, 1] over the policy's color window."""
    span = max(policy.margin_max_db - policy.margin_min_db, 1e-9)
    t = (np.asarray(margin_db, dtype=np.float64) - policy.margin_min_db) / span
    return np.clip(t, 0.0, 1.0)


def paint_mask(pr_dbm: np.ndarray, policy: DisplayPolicy = DisplayPolicy()) -> np.ndarray:
    """True where a cell should be painted (finite and at/above the cutoff)."""
    pr = np.asarray(pr_dbm, dtype=np.float64)
    return np.isfinite(pr) & (pr >= policy.power_cutoff_dbm)


def coverage_rgba(grid: CoverageGrid, policy: DisplayPolicy = DisplayPolicy()) -> np.ndarray:
    """RGBA image (rows x cols x 4) with unpainted cells fully transparent."""
    import matplotlib.pyplot as plt

    cmap = plt.get_cmap(policy.colormap)
    rgba = cmap(margin_to_unit(np.nan_to_num(grid.margin_db, nan=policy.margin_min_db), policy))
    rgba[..., 3] = np.where(paint_mask(grid.pr_dbm, policy), policy.alpha, 0.0)
    return rgba


def render_coverage_map(
    grid: CoverageGrid,
    policy: DisplayPolicy = DisplayPolicy(),
    outfile: str | Path = "coverage_map.png",
    title: str | None = None,
    tx_latlon: tuple[float, float] | None = None,
) -> Path:
    """Render the margin heatmap to a PNG and return its path."""
    import matplotlib.pyplot as plt

    extent = [
        float(np.nanmin(grid.lon_deg)), float(np.nanmax(grid.lon_deg)),
        float(np.nanmin(grid.lat_deg)), float(np.nanmax(grid.lat_deg)),
    ]
    fig, ax = plt.subplots(figsize=(6, 6), dpi=150)
    ax.imshow(coverage_rgba(grid, policy), origin="lower", extent=extent, interpolation="nearest")
    sm = plt.cm.ScalarMappable(
        cmap=policy.colormap,
        norm=plt.Normalize(vmin=policy.margin_min_db, vmax=policy.margin_max_db),
    )
    fig.colorbar(sm, ax=ax, label="Margin (dB)")
    if tx_latlon is not None:
        ax.scatter([tx_latlon[1]], [tx_latlon[0]], c="r", s=30, marker="^", label="Tx")
        ax.legend(loc="upper right")
    ax.set_title(title or "Coverage margin")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    outp = Path(outfile)
    outp.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(outp)
    plt.close(fig)
    return outp
