"""Band presets and per-environment defaults.

BAND_PRESETS mirror the bands offered in the control panel (HF 40/20 m, VHF
2 m, UHF 70 cm, sub-GHz ISM). ENV_DEFAULTS holds the log-distance exponent
used by the V/UHF fallback model, a location-variability sigma kept for a
future probability view, and an optional default foliage depth.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .contracts import (
    Environment,
    EnvironmentClass,
    GroundClass,
    HFContext,
    HFPropagationMode,
    Receiver,
)


@dataclass(frozen=True)
class EnvDefaults:
    n: float  # log-distance exponent
    sigma_db: float
    foliage_depth_m: Optional[float] = None


ENV_DEFAULTS: Dict[EnvironmentClass, EnvDefaults] = {
    EnvironmentClass.OPEN: EnvDefaults(n=2.1, sigma_db=4.0),
    EnvironmentClass.RURAL: EnvDefaults(n=2.4, sigma_db=5.0),
    EnvironmentClass.URBAN: EnvDefaults(n=3.5, sigma_db=8.0),
    EnvironmentClass.FOREST: EnvDefaults(n=3.8, sigma_db=10.0, foliage_depth_m=30.0),
    EnvironmentClass.WATER: EnvDefaults(n=2.0, sigma_db=3.0),
    EnvironmentClass.MOUNTAIN: EnvDefaults(n=2.6, sigma_db=6.0),
}


@dataclass(frozen=True)
class BandPreset:
    """One selectable band with receiver defaults and optional HF defaults."""
    label: str
    frequency_mhz: float
    rx_height_m: float
    rx_gain_dbi: float
    bandwidth_hz: float
    noise_figure_db: float
    required_snr_db: float
    ground_class: Optional[GroundClass] = None
    fof2_mhz: Optional[float] = None
    propagation_mode: Optional[HFPropagationMode] = None


BAND_PRESETS: List[BandPreset] = [
    BandPreset("HF 40 m Ground (7.1 MHz)", 7.1, 10.0, 0.0, 2700.0, 5.0, 10.0,
               ground_class=GroundClass.WET, propagation_mode=HFPropagationMode.GROUND),
    # foF2 8 MHz gives a workable MUF with the 30 deg takeoff convention
    BandPreset("HF 40 m Sky (7.1 MHz)", 7.1, 10.0, 0.0, 2700.0, 5.0, 10.0,
               ground_class=GroundClass.WET, fof2_mhz=8.0, propagation_mode=HFPropagationMode.SKY),
    BandPreset("HF 20 m Sky (14.2 MHz)", 14.2, 10.0, 0.0, 2700.0, 5.0, 10.0,
               ground_class=GroundClass.WET, fof2_mhz=12.5, propagation_mode=HFPropagationMode.SKY),
    BandPreset("VHF 2 m (146 MHz)", 146.0, 1.5, 0.0, 20000.0, 5.0, 10.0),
    BandPreset("UHF 70 cm (446 MHz)", 446.0, 1.5, 0.0, 12500.0, 5.0, 10.0),
    BandPreset("UHF ISM 868 MHz", 868.0, 1.5, 0.0, 125000.0, 5.0, 8.0),
    BandPreset("UHF ISM 915 MHz", 915.0, 1.5, 0.0, 125000.0, 5.0, 8.0),
]


def find_preset(label: str) -> BandPreset:
    """Look up a preset by exact label or by a case-insensitive substring."""
    for p in BAND_PRESETS:
        if p.label == label:
            return p
    matches = [p for p in BAND_PRESETS if label.lower() in p.label.lower()]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise ValueError(f"Unknown band preset: {label!r}")
    raise ValueError(f"Ambiguous band preset {label!r}: {[p.label for p in matches]}")


def receiver_from_preset(preset: BandPreset, cable_loss_db: float = 0.0) -> Receiver:
    return Receiver(
        gain_dbi=preset.rx_gain_dbi,
        cable_loss_db=cable_loss_db,
        height_m=preset.rx_height_m,
        bandwidth_hz=preset.bandwidth_hz,
        noise_figure_db=preset.noise_figure_db,
        required_snr_db=preset.required_snr_db,
    )


def hf_context_from_preset(preset: BandPreset, nvis_enabled: bool = False) -> Optional[HFContext]:
    """HF context for HF presets; None for V/UHF presets."""
    if preset.frequency_mhz >= 30.0:
        return None
    return HFContext(
        fof2_mhz=preset.fof2_mhz or 0.0,
        nvis_enabled=nvis_enabled,
        propagation_mode=preset.propagation_mode or HFPropagationMode.AUTO,
    )


def make_environment(environment, **overrides) -> Environment:
    """Build an Environment with sensible defaults for the given class.

    Forest picks up a 30 m default foliage depth unless overridden.
    """
    env_cls = environment if isinstance(environment, EnvironmentClass) else EnvironmentClass(environment)
    base = {
        "environment": env_cls,
        "k_factor": 1.33,
        "ground_class": GroundClass.WET,
        "foliage_depth_m": ENV_DEFAULTS[env_cls].foliage_depth_m,
    }
    base.update(overrides)
    return Environment(**base)
