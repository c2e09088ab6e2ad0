"""Single-point prediction response builder.

Solves the path once and wraps it with its link budget into a JSON-ready dict
so a caller (CLI, UI, notebook) gets inputs, geometry context and the result
in one object.
"""

import json
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Optional

from .contracts import Environment, HFContext, PathContext, Receiver, Transmitter
from .geometry import radio_horizon_km
from .hf_model import HFModelParams
from .link_budget import eirp_dbm
from .propagation import is_hf, link_from_path, predict_path
from .vuhf_model import VUHFModelParams


def _plain(record) -> Dict[str, Any]:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in asdict(record).items()}


def build_link_response(
    transmitter: Transmitter,
    receiver: Receiver,
    environment: Environment,
    distance_km: float,
    hf: Optional[HFContext] = None,
    hf_params: Optional[HFModelParams] = None,
    vuhf_params: Optional[VUHFModelParams] = None,
) -> Dict[str, Any]:
    """Return a dict with inputs and the predicted link.

    Output format:
    {
      "inputs": {"transmitter": {...}, "receiver": {...}, "environment": {...}, "hf": {...}|None},
      "distanceKm": 5.0, "band": "VUHF", "radioHorizonKm": 27.6, "eirpDbm": 44.0,
      "pathLossDb": 124.8, "prDbm": -80.8, "sensitivityDbm": -116.0,
      "marginDb": 35.2, "mode": "LOS"
    }
    """
    ctx = PathContext(distance_km=distance_km, hf=hf)
    path = predict_path(transmitter, receiver, environment, ctx, hf_params, vuhf_params)
    link = link_from_path(transmitter, receiver, path)
    return {
        "inputs": {
            "transmitter": _plain(transmitter),
            "receiver": _plain(receiver),
            "environment": _plain(environment),
            "hf": _plain(hf) if hf is not None else None,
        },
        "distanceKm": ctx.guarded_distance_km,
        "band": "HF" if is_hf(transmitter.frequency_mhz) else "VUHF",
        "radioHorizonKm": radio_horizon_km(transmitter.height_m, receiver.height_m, environment.k_factor),
        "eirpDbm": eirp_dbm(transmitter.power_w, transmitter.gain_dbi, transmitter.cable_loss_db),
        "pathLossDb": path.loss_db,
        "prDbm": link.pr_dbm,
        "sensitivityDbm": link.sensitivity_dbm,
        "marginDb": link.margin_db,
        "mode": link.mode.value,
    }


def build_link_response_json(*args, **kwargs) -> str:
    return json.dumps(build_link_response(*args, **kwargs), ensure_ascii=False, indent=2)
