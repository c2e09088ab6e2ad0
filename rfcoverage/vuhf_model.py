"""V/UHF propagation (f >= 30 MHz): LOS/NLOS with a seam-free horizon blend.

Both candidates are always computed so the blended loss stays continuous:
1. LOS: two-slope model (FSPL up to the 2-ray breakpoint, 40 dB/decade after).
2. NLOS: Okumura-Hata median (150-2000 MHz) or a log-distance fallback with an
   environment exponent, plus Weissberger foliage loss in forests.
3. The NLOS curve is shifted by a constant so both meet at the radio horizon,
   then blended linearly across 0.95..1.05 of the horizon distance.
"""

import math
from dataclasses import dataclass
from typing import Optional

from .contracts import (
    Environment,
    EnvironmentClass,
    PathContext,
    PathMode,
    PathResult,
    Receiver,
    Transmitter,
    MIN_DISTANCE_KM,
)
from .fspl import fspl_db
from .geometry import MIN_FREQUENCY_MHZ, floor_positive, radio_horizon_km, wavelength_m
from .presets import ENV_DEFAULTS

# Environments that take the Okumura open-area correction
_OPEN_AREA_CLASSES = (
    EnvironmentClass.OPEN,
    EnvironmentClass.RURAL,
    EnvironmentClass.WATER,
    EnvironmentClass.MOUNTAIN,
)


@dataclass(frozen=True)
class VUHFModelParams:
    """Horizon blend band and log-distance reference distance."""
    blend_start: float = 0.95  # fraction of the horizon distance
    blend_width: float = 0.10
    reference_distance_km: float = 0.1
    hata_min_mhz: float = 150.0
    hata_max_mhz: float = 2000.0


DEFAULT_VUHF_PARAMS = VUHFModelParams()


def breakpoint_distance_m(frequency_mhz: float, h_t_m: float, h_r_m: float) -> float:
    """Two-ray breakpoint 4 hT hR / lambda in meters (at least 1 m)."""
    lam = floor_positive(wavelength_m(frequency_mhz), 1e-6)
    return floor_positive(4.0 * h_t_m * h_r_m / lam, 1.0)


def two_slope_loss_db(distance_km: float, frequency_mhz: float, h_t_m: float, h_r_m: float) -> float:
    """Median LOS loss: FSPL to the breakpoint, then 40 log10(d / d_bp).

    No fringing; the interference nulls before the breakpoint are ignored.
    """
    d_m = floor_positive(distance_km * 1000.0, 1.0)
    d_bp_m = breakpoint_distance_m(frequency_mhz, h_t_m, h_r_m)
    if d_m <= d_bp_m:
        return fspl_db(d_m / 1000.0, frequency_mhz)
    return fspl_db(d_bp_m / 1000.0, frequency_mhz) + 40.0 * math.log10(d_m / d_bp_m)


def hata_loss_db(
    distance_km: float,
    frequency_mhz: float,
    h_t_m: float,
    h_r_m: float,
    environment: EnvironmentClass,
    params: VUHFModelParams = DEFAULT_VUHF_PARAMS,
) -> Optional[float]:
    """Okumura-Hata / COST-231 median loss in dB.

    Heights and distance are clamped to the model's domain (hT 30-200 m,
    hR 1-10 m, d 1-20 km); frequency is not. Returns None outside
    150-2000 MHz so the caller can fall back to log-distance.
    """
    f = frequency_mhz
    if not params.hata_min_mhz <= f <= params.hata_max_mhz:
        return None
    ht = min(max(h_t_m, 30.0), 200.0)
    hr = min(max(h_r_m, 1.0), 10.0)
    d = min(max(distance_km, 1.0), 20.0)
    log_f = math.log10(f)

    if environment is EnvironmentClass.URBAN and 300.0 <= f <= 1500.0:
        # large-city mobile antenna correction
        a_hr = 8.29 * math.log10(1.54 * hr) ** 2 - 1.1
    else:
        a_hr = (1.1 * log_f - 0.7) * hr - (1.56 * log_f - 0.8)

    loss = (69.55 + 26.16 * log_f - 13.82 * math.log10(ht) - a_hr
            + (44.9 - 6.55 * math.log10(ht)) * math.log10(d))

    if environment is EnvironmentClass.URBAN:
        loss += 3.0  # metropolitan C_m
    elif environment in _OPEN_AREA_CLASSES:
        loss -= 4.78 * log_f ** 2 - 18.33 * log_f + 40.94
    return loss


def path_loss_exponent(environment: EnvironmentClass) -> float:
    return ENV_DEFAULTS[environment].n


def log_distance_loss_db(
    distance_km: float,
    frequency_mhz: float,
    n: float,
    reference_distance_km: float = 0.1,
) -> float:
    """L = FSPL(d0) + 10 n log10(d / d0)."""
    d0 = floor_positive(reference_distance_km, 1e-4)
    return fspl_db(d0, frequency_mhz) + 10.0 * n * math.log10(floor_positive(distance_km, 1e-6) / d0)


def foliage_loss_db(frequency_mhz: float, depth_m: Optional[float]) -> float:
    """Weissberger excess loss through vegetation.

    depth <= 14 m: 0.45 f^0.284 D
    depth > 14 m:  1.33 f^0.284 D^0.588, D capped at 400 m
    """
    if not depth_m or depth_m <= 0:
        return 0.0
    f = floor_positive(frequency_mhz, 1.0)
    if depth_m <= 14.0:
        return 0.45 * f ** 0.284 * depth_m
    return 1.33 * f ** 0.284 * min(depth_m, 400.0) ** 0.588


def nlos_loss_db(
    distance_km: float,
    frequency_mhz: float,
    h_t_m: float,
    h_r_m: float,
    environment: Environment,
    params: VUHFModelParams = DEFAULT_VUHF_PARAMS,
) -> float:
    """Median NLOS loss: Hata, else log-distance, plus forest foliage."""
    loss = hata_loss_db(distance_km, frequency_mhz, h_t_m, h_r_m, environment.environment, params)
    if loss is None:
        loss = log_distance_loss_db(
            distance_km, frequency_mhz,
            path_loss_exponent(environment.environment),
            params.reference_distance_km,
        )
    if environment.environment is EnvironmentClass.FOREST:
        loss += foliage_loss_db(frequency_mhz, environment.foliage_depth_m)
    return loss


def blend_weight(distance_km: float, horizon_km: float, params: VUHFModelParams = DEFAULT_VUHF_PARAMS) -> float:
    """0 well inside the horizon, 1 well beyond it, linear across the band."""
    start = params.blend_start * horizon_km
    width = floor_positive(params.blend_width * horizon_km, 1e-6)
    return min(max((distance_km - start) / width, 0.0), 1.0)


def solve_vuhf(
    transmitter: Transmitter,
    receiver: Receiver,
    environment: Environment,
    context: PathContext,
    params: Optional[VUHFModelParams] = None,
) -> PathResult:
    """Blend the LOS and NLOS candidates around the radio horizon."""
    params = params or DEFAULT_VUHF_PARAMS
    f = floor_positive(transmitter.frequency_mhz, MIN_FREQUENCY_MHZ)
    h_t = transmitter.height_m
    h_r = receiver.height_m
    d = context.guarded_distance_km

    l_los = two_slope_loss_db(d, f, h_t, h_r)
    l_nlos = nlos_loss_db(d, f, h_t, h_r, environment, params)

    d_h = radio_horizon_km(h_t, h_r, environment.k_factor)
    d_h_eval = floor_positive(d_h, MIN_DISTANCE_KM)
    # Shift NLOS so both curves meet exactly at the horizon (no ring seam)
    delta = two_slope_loss_db(d_h_eval, f, h_t, h_r) - nlos_loss_db(d_h_eval, f, h_t, h_r, environment, params)

    b = blend_weight(d, d_h, params)
    loss = (1.0 - b) * l_los + b * (l_nlos + delta)
    mode = PathMode.LOS if b < 0.5 else PathMode.NLOS
    return PathResult(loss_db=loss, mode=mode)
