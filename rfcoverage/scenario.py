"""Distance-sweep runner for a single transmitter/receiver setup.

Evaluates the link budget at a list of distances and keeps one row per distance
(path loss, received power, margin, mode). Useful for checking regime
handovers (ground -> sky, LOS -> NLOS) without sampling a whole map.
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .contracts import Environment, HFContext, PathContext, Receiver, Transmitter
from .hf_model import HFModelParams
from .propagation import link_from_path, predict_path
from .vuhf_model import VUHFModelParams


@dataclass
class Scenario:
    """One link setup evaluated at several distances.

    Fields:
    - transmitter / receiver / environment: the link under test
    - distances_km: sample distances from the transmitter
    - hf: optional HF context (foF2, NVIS hint, override)
    """
    transmitter: Transmitter
    receiver: Receiver
    environment: Environment
    distances_km: List[float] = field(default_factory=list)
    hf: Optional[HFContext] = None


@dataclass
class ResultRow:
    """One row of results for a distance."""
    distance_km: float
    path_loss_db: float
    pr_dbm: float
    sensitivity_dbm: float
    margin_db: float
    mode: str


def run_scenario(
    scenario: Scenario,
    hf_params: Optional[HFModelParams] = None,
    vuhf_params: Optional[VUHFModelParams] = None,
) -> List[ResultRow]:
    """Compute one ResultRow per distance."""
    rows: List[ResultRow] = []
    for d_km in scenario.distances_km:
        ctx = PathContext(distance_km=d_km, hf=scenario.hf)
        path = predict_path(scenario.transmitter, scenario.receiver, scenario.environment, ctx, hf_params, vuhf_params)
        link = link_from_path(scenario.transmitter, scenario.receiver, path)
        rows.append(ResultRow(
            distance_km=d_km,
            path_loss_db=path.loss_db,
            pr_dbm=link.pr_dbm,
            sensitivity_dbm=link.sensitivity_dbm,
            margin_db=link.margin_db,
            mode=link.mode.value,
        ))
    return rows


def rows_to_table(rows: Iterable[ResultRow]) -> List[List[str]]:
    """Convert results to a simple table (strings) for printing or CSV export."""
    table = [["distance_km", "path_loss_db", "pr_dbm", "sensitivity_dbm", "margin_db", "mode"]]
    for r in rows:
        table.append([
            f"{r.distance_km:.3f}",
            f"{r.path_loss_db:.2f}",
            f"{r.pr_dbm:.2f}",
            f"{r.sensitivity_dbm:.2f}",
            f"{r.margin_db:.2f}",
            r.mode,
        ])
    return table


def print_table(table: List[List[str]]) -> None:
    """Pretty-print a simple table to the console."""
    widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
    for row in table:
        print("  ".join(cell.ljust(widths[j]) for j, cell in enumerate(row)))


def save_rows_csv(rows: Iterable[ResultRow], path: str | Path) -> None:
    p = Path(path)
    with p.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerows(rows_to_table(rows))
