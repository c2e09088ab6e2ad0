"""Free-space path loss, the baseline every regime builds on.

FSPL [dB] = 32.44 + 20 log10(d_km) + 20 log10(f_MHz)  (ITU-R P.525 form)

Distance and frequency are floored to a tiny epsilon instead of raising, since
the sampling layer probes boundary points (d -> 0) many times per second.
"""

import math

from .geometry import floor_positive

_EPS = 1e-6


def fspl_db(distance_km: float, frequency_mhz: float) -> float:
    """Free-space path loss in dB.

    Args:
        distance_km: distance in kilometers (floored to 1e-6)
        frequency_mhz: frequency in MHz (floored to 1e-6)
    """
    d = floor_positive(distance_km, _EPS)
    f = floor_positive(frequency_mhz, _EPS)
    return 32.44 + 20.0 * math.log10(d) + 20.0 * math.log10(f)
