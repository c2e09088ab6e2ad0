"""Loaders for link setup files.

A setup file (JSON or YAML) holds up to four sections:

    transmitter: {lat, lon, power_W, gain_dBi, cable_dB, height_m, frequency_MHz}
    receiver:    {gain_dBi, cable_dB, height_m, bandwidth_Hz, noiseFigure_dB, requiredSNR_dB}
    environment: {environment, kFactor, groundClass, foliageDepth_m}
    hf:          {foF2_MHz, NVIS_enabled, propagationMode}

Both the snake_case field names of the contracts and the camel/unit-suffixed
names used by the web control panel are accepted.
"""

import json
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional

import yaml

from .contracts import Environment, HFContext, Receiver, Transmitter

_TX_ALIASES = {
    "lat": "lat_deg",
    "lon": "lon_deg",
    "power_W": "power_w",
    "gain_dBi": "gain_dbi",
    "cable_dB": "cable_loss_db",
    "frequency_MHz": "frequency_mhz",
}
_RX_ALIASES = {
    "gain_dBi": "gain_dbi",
    "cable_dB": "cable_loss_db",
    "bandwidth_Hz": "bandwidth_hz",
    "noiseFigure_dB": "noise_figure_db",
    "requiredSNR_dB": "required_snr_db",
}
_ENV_ALIASES = {
    "kFactor": "k_factor",
    "groundClass": "ground_class",
    "foliageDepth_m": "foliage_depth_m",
}
_HF_ALIASES = {
    "foF2_MHz": "fof2_mhz",
    "NVIS_enabled": "nvis_enabled",
    "propagationMode": "propagation_mode",
}


class LinkSetup(NamedTuple):
    transmitter: Transmitter
    receiver: Receiver
    environment: Environment
    hf: Optional[HFContext]


def normalize_record(rec: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    """Rename aliased keys to contract field names (explicit names win)."""
    out = dict(rec)
    for alias, name in aliases.items():
        if alias in out and name not in out:
            out[name] = out.pop(alias)
        else:
            out.pop(alias, None)
    return out


def _build(cls, rec: Dict[str, Any], aliases: Dict[str, str], section: str):
    try:
        return cls(**normalize_record(rec, aliases))
    except TypeError as exc:
        raise ValueError(f"Invalid '{section}' section: {exc}") from exc


def link_setup_from_dict(data: Dict[str, Any]) -> LinkSetup:
    """Build contract records from a nested dict."""
    if "transmitter" not in data:
        raise ValueError("Link setup needs a 'transmitter' section")
    hf_rec = data.get("hf")
    return LinkSetup(
        transmitter=_build(Transmitter, data["transmitter"], _TX_ALIASES, "transmitter"),
        receiver=_build(Receiver, data.get("receiver", {}), _RX_ALIASES, "receiver"),
        environment=_build(Environment, data.get("environment", {}), _ENV_ALIASES, "environment"),
        hf=_build(HFContext, hf_rec, _HF_ALIASES, "hf") if hf_rec is not None else None,
    )


def load_link_setup(path: str | Path) -> LinkSetup:
    """Read a JSON (.json) or YAML (anything else) link setup file."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    data = json.loads(text) if p.suffix.lower() == ".json" else yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"{p}: expected a mapping at the top level")
    return link_setup_from_dict(data)
