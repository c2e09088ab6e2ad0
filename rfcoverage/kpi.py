from collections import Counter
from typing import Dict, Iterable

import numpy as np

from .config import DisplayPolicy
from .contracts import PathMode
from .coverage import CoverageGrid, mode_from_code
from .heatmaps import paint_mask


def coverage_fraction(margins_db: Iterable[float], threshold_db: float = 0.0) -> float:
    """Fraction of samples with margin >= threshold (NaN samples ignored).

    Args:
        margins_db: iterable of margins in dB
        threshold_db: coverage threshold (default 0 dB)
    Returns:
        fraction in [0, 1]
    """
    values = [float(m) for m in margins_db if not np.isnan(m)]
    if not values:
        return 0.0
    return sum(1 for m in values if m >= threshold_db) / len(values)


def mode_histogram(modes: Iterable[PathMode]) -> Dict[str, int]:
    """Count samples per propagation mode tag."""
    return dict(Counter(m.value for m in modes))


def coverage_stats(grid: CoverageGrid, policy: DisplayPolicy = DisplayPolicy(), threshold_db: float = 0.0) -> dict:
    """Simple stats for a sampled grid.

    Returns a dict with cell counts, the covered fraction, the painted
    fraction under the display cutoff, the mode histogram and the best/worst
    margin.
    """
    margins = grid.margin_db[np.isfinite(grid.margin_db)]
    modes = [m for m in (mode_from_code(int(c)) for c in grid.mode.ravel()) if m is not None]
    painted = int(np.count_nonzero(paint_mask(grid.pr_dbm, policy)))
    total = int(grid.margin_db.size)
    return {
        "cells": total,
        "skipped": grid.skipped,
        "covered_fraction": coverage_fraction(margins.tolist(), threshold_db),
        "painted_fraction": painted / total if total else 0.0,
        "modes": mode_histogram(modes),
        "max_margin_db": float(margins.max()) if margins.size else float("nan"),
        "min_margin_db": float(margins.min()) if margins.size else float("nan"),
    }
