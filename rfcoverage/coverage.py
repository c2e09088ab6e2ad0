"""Coverage grid sampler (client-side view of the engine).

Samples a square grid of points around the transmitter, computes the
great-circle distance to each point, and calls predict_link once per cell.

Assumptions (kept explicit):
- Local east/north offsets are converted to degrees with a flat-earth
  approximation; the distance handed to the engine is still haversine.
- A cell whose evaluation raises is skipped: its values stay NaN and its mode
  code is -1. The batch is never aborted.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np

from .contracts import Environment, HFContext, PathContext, PathMode, Receiver, Transmitter
from .geodesy import haversine_distance_km, offset_to_latlon
from .hf_model import HFModelParams
from .propagation import predict_link
from .vuhf_model import VUHFModelParams

logger = logging.getLogger(__name__)

MODE_ORDER: List[PathMode] = list(PathMode)
NO_MODE = -1


def mode_code(mode: PathMode) -> int:
    return MODE_ORDER.index(mode)


def mode_from_code(code: int) -> Optional[PathMode]:
    return None if code == NO_MODE else MODE_ORDER[code]


@dataclass
class CoverageGrid:
    """2D arrays indexed [row (south->north), col (west->east)]."""
    lat_deg: np.ndarray
    lon_deg: np.ndarray
    distance_km: np.ndarray
    pr_dbm: np.ndarray
    margin_db: np.ndarray
    mode: np.ndarray  # int codes into MODE_ORDER, NO_MODE for skipped cells
    sensitivity_dbm: float
    skipped: int = 0

    @property
    def shape(self) -> tuple:
        return self.margin_db.shape


def sample_coverage(
    transmitter: Transmitter,
    receiver: Receiver,
    environment: Environment,
    hf: HFContext | None = None,
    radius_km: float = 30.0,
    step_km: float = 1.0,
    hf_params: HFModelParams | None = None,
    vuhf_params: VUHFModelParams | None = None,
) -> CoverageGrid:
    """Evaluate the link on a (2n+1) x (2n+1) grid centered on the transmitter."""
    if step_km <= 0 or radius_km <= 0:
        raise ValueError("radius_km and step_km must be positive")
    half = int(np.ceil(radius_km / step_km))
    offsets = np.arange(-half, half + 1) * step_km
    n = offsets.size

    lat = np.full((n, n), np.nan)
    lon = np.full((n, n), np.nan)
    dist = np.full((n, n), np.nan)
    pr = np.full((n, n), np.nan)
    margin = np.full((n, n), np.nan)
    modes = np.full((n, n), NO_MODE, dtype=np.int8)
    sens = np.nan
    skipped = 0

    for iy, dy in enumerate(offsets):
        for ix, dx in enumerate(offsets):
            try:
                p_lat, p_lon = offset_to_latlon(transmitter.lat_deg, transmitter.lon_deg, float(dx), float(dy))
                d_km = haversine_distance_km(transmitter.lat_deg, transmitter.lon_deg, p_lat, p_lon)
                ctx = PathContext(distance_km=d_km, hf=hf)
                link = predict_link(transmitter, receiver, environment, ctx, hf_params, vuhf_params)
            except Exception:
                logger.debug("Skipping cell (%d, %d)", iy, ix, exc_info=True)
                skipped += 1
                continue
            lat[iy, ix] = p_lat
            lon[iy, ix] = p_lon
            dist[iy, ix] = d_km
            pr[iy, ix] = link.pr_dbm
            margin[iy, ix] = link.margin_db
            modes[iy, ix] = mode_code(link.mode)
            sens = link.sensitivity_dbm

    if skipped:
        logger.warning("Coverage grid: skipped %d of %d cells", skipped, n * n)
    return CoverageGrid(
        lat_deg=lat,
        lon_deg=lon,
        distance_km=dist,
        pr_dbm=pr,
        margin_db=margin,
        mode=modes,
        sensitivity_dbm=sens,
        skipped=skipped,
    )


def coverage_cells(grid: CoverageGrid) -> List[List[str]]:
    """Flatten a grid to a table (strings) for printing or CSV export."""
    table = [["lat_deg", "lon_deg", "distance_km", "pr_dbm", "margin_db", "mode"]]
    rows, cols = grid.shape
    for iy in range(rows):
        for ix in range(cols):
            mode = mode_from_code(int(grid.mode[iy, ix]))
            if mode is None:
                continue
            table.append([
                f"{grid.lat_deg[iy, ix]:.6f}",
                f"{grid.lon_deg[iy, ix]:.6f}",
                f"{grid.distance_km[iy, ix]:.3f}",
                f"{grid.pr_dbm[iy, ix]:.2f}",
                f"{grid.margin_db[iy, ix]:.2f}",
                mode.value,
            ])
    return table


def save_coverage_csv(grid: CoverageGrid, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerows(coverage_cells(grid))
    return p
