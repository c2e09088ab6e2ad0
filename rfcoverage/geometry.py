"""Radio geometry primitives shared by the HF and V/UHF models.

- floor_positive: epsilon guard applied before every logarithm/division
- wavelength_m: lambda = c / f
- radio_horizon_km: LOS/NLOS handover distance with k-factor refraction
- fresnel_radius_m, los_by_horizon: informational only (no gating)
"""

import math

from .geodesy import EARTH_RADIUS_KM

SPEED_OF_LIGHT = 2.99792458e8  # m/s
MIN_FREQUENCY_MHZ = 1e-6


def floor_positive(value: float, floor: float) -> float:
    """Return value, or floor when value is below it (or NaN)."""
    return value if value > floor else floor


def wavelength_m(frequency_mhz: float) -> float:
    """Wavelength in meters for a frequency in MHz (f floored to 1e-6 MHz)."""
    return SPEED_OF_LIGHT / (floor_positive(frequency_mhz, MIN_FREQUENCY_MHZ) * 1e6)


def radio_horizon_km(h_t_m: float, h_r_m: float, k_factor: float) -> float:
    """Radio horizon in km: sqrt(2 k Re h) per terminal, summed.

    With Re = 6371 km and h in meters this is 3.57 * (sqrt(k hT) + sqrt(k hR)).
    Typical k: 1.0 (no refraction), 1.33 (standard atmosphere), 1.7 (ducting).
    """
    k = floor_positive(k_factor, 0.0)

    def term(h_m: float) -> float:
        return math.sqrt(2.0 * k * EARTH_RADIUS_KM * floor_positive(h_m, 0.0) / 1000.0)

    return term(h_t_m) + term(h_r_m)


def fresnel_radius_m(wavelength: float, d1_m: float, d2_m: float) -> float:
    """First Fresnel zone radius (m) at a point d1 from Tx and d2 from Rx."""
    return math.sqrt(floor_positive(wavelength, 1e-9) * d1_m * d2_m / floor_positive(d1_m + d2_m, 1.0))


def los_by_horizon(distance_km: float, h_t_m: float, h_r_m: float, k_factor: float) -> bool:
    """Simple LOS check without terrain: path length within the radio horizon."""
    return distance_km <= radio_horizon_km(h_t_m, h_r_m, k_factor)
