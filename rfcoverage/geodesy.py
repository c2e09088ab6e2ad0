"""Geodesy helpers (great-circle distances).

Haversine distance from the transmitter to each sample point; this is the
only geographic input the propagation models see.
"""

import math

EARTH_RADIUS_KM = 6371.0


def haversine_distance_km(lat1_deg: float, lon1_deg: float, lat2_deg: float, lon2_deg: float) -> float:
    """Great-circle distance between two points on a spherical Earth in km.

    Args:
        lat1_deg, lon1_deg: point 1 latitude/longitude in degrees
        lat2_deg, lon2_deg: point 2 latitude/longitude in degrees
    Returns:
        distance in kilometers (R = 6371 km, within ~0.5% of WGS-84)
    """
    lat1 = math.radians(lat1_deg)
    lat2 = math.radians(lat2_deg)
    dlat = lat2 - lat1
    dlon = math.radians(lon2_deg - lon1_deg)
    a = math.sin(dlat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    # Rounding can push a a hair outside [0, 1] for antipodal points
    a = min(max(a, 0.0), 1.0)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c


def offset_to_latlon(lat_deg: float, lon_deg: float, dx_km: float, dy_km: float) -> tuple[float, float]:
    """Shift a point by a local east/north offset in km (small-area approximation)."""
    dlat = dy_km / 111.32
    dlon = dx_km / (111.32 * math.cos(math.radians(lat_deg)) + 1e-12)
    return lat_deg + dlat, lon_deg + dlon
