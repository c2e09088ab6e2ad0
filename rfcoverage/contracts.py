"""Value types and units shared by every propagation model.

Units are authoritative at this boundary:
- heights in meters, distances in kilometers (path loss), frequencies in MHz
- gains in dBi, losses and margins in dB, transmit power in watts

All records are frozen dataclasses so a single evaluation can never mutate its
inputs, and identical inputs hash identically (safe to memoize).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

MIN_DISTANCE_KM = 0.001


class EnvironmentClass(Enum):
    """Coarse clutter classification (no sub-city split)."""
    OPEN = "open"
    RURAL = "rural"
    URBAN = "urban"
    FOREST = "forest"
    WATER = "water"
    MOUNTAIN = "mountain"


class GroundClass(Enum):
    """Ground conductivity class used by the HF ground-wave model."""
    SEA = "sea"
    WET = "wet"
    DRY = "dry"


class PathMode(Enum):
    """Propagation mode tag attached to every path result."""
    GROUND = "GROUND"
    IONO = "IONO"
    NVIS = "NVIS"
    LOS = "LOS"
    NLOS = "NLOS"
    DIFFRACTION = "DIFFRACTION"  # reserved, never emitted by the engine
    BLOCKED = "BLOCKED"


class HFPropagationMode(Enum):
    """Explicit HF regime override."""
    AUTO = "auto"
    GROUND = "ground"
    SKY = "sky"
    NVIS = "nvis"


@dataclass(frozen=True)
class Transmitter:
    lat_deg: float
    lon_deg: float
    power_w: float
    gain_dbi: float
    cable_loss_db: float
    height_m: float
    frequency_mhz: float


@dataclass(frozen=True)
class Receiver:
    gain_dbi: float = 0.0
    cable_loss_db: float = 0.0
    height_m: float = 1.5
    bandwidth_hz: float = 20000.0
    noise_figure_db: float = 5.0
    required_snr_db: float = 10.0


@dataclass(frozen=True)
class Environment:
    """Clutter class, atmospheric k-factor, HF ground class, optional foliage.

    foliage_depth_m is only used when environment is FOREST.
    """
    environment: EnvironmentClass = EnvironmentClass.OPEN
    k_factor: float = 1.33
    ground_class: GroundClass = GroundClass.WET
    foliage_depth_m: Optional[float] = None

    def __post_init__(self):
        # Accept plain strings from config files and UI widgets
        if not isinstance(self.environment, EnvironmentClass):
            object.__setattr__(self, "environment", EnvironmentClass(self.environment))
        if not isinstance(self.ground_class, GroundClass):
            object.__setattr__(self, "ground_class", GroundClass(self.ground_class))


@dataclass(frozen=True)
class HFContext:
    """Manual ionosphere inputs: foF2 proxy, NVIS hint and regime override."""
    fof2_mhz: float = 0.0
    nvis_enabled: bool = False
    propagation_mode: HFPropagationMode = HFPropagationMode.AUTO

    def __post_init__(self):
        if not isinstance(self.propagation_mode, HFPropagationMode):
            object.__setattr__(self, "propagation_mode", HFPropagationMode(self.propagation_mode))


@dataclass(frozen=True)
class PathContext:
    """Per-sample context: great-circle distance to the sample point.

    time_utc is a label only; the ionosphere is not time-varying.
    """
    distance_km: float
    hf: Optional[HFContext] = None
    time_utc: Optional[str] = None

    @property
    def guarded_distance_km(self) -> float:
        """Distance floored to MIN_DISTANCE_KM (NaN maps to the floor too)."""
        d = self.distance_km
        return d if d > MIN_DISTANCE_KM else MIN_DISTANCE_KM


@dataclass(frozen=True)
class PathResult:
    loss_db: float
    mode: PathMode


@dataclass(frozen=True)
class LinkResult:
    pr_dbm: float
    sensitivity_dbm: float
    margin_db: float  # rendered coverage metric
    mode: PathMode
