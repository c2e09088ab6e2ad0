"""HF propagation (f < 30 MHz): ground-wave, sky-wave and NVIS.

Regime selection is an explicit override or, in auto mode, the first
applicable regime in the order NVIS -> sky-wave -> ground-wave. A regime whose
predicate fails (frequency/distance window, MUF gate, hop cap) is skipped; if
none applies the result is BLOCKED with a fixed sentinel loss. Nothing here
raises for numeric inputs.

Model assumption (single convention for both sky regimes):
- A virtual mirror layer at a fixed height (F2 300 km, E 110 km for NVIS).
- alpha is the takeoff *elevation* angle, fixed per layer (30 deg, 80 deg).
- MUF gate: f <= f_c * sec(alpha), f_c = critical_ratio * foF2.
- Flat-earth hop geometry: ground range s = 2h / tan(alpha),
  slant path per hop 2h / sin(alpha); N = ceil(d / s), capped at 2 hops.
- Per-hop loss FSPL(slant) + a0 * f^-2 * sec(alpha); (N - 1) * 3 dB for the
  ground reflections between hops.
- NVIS is a single high-angle hop for d <= 500 km and f <= 7 MHz.

The absorption constants and layer heights are empirical placeholders, so all
of them live in HFModelParams and can be overridden per call or from YAML.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from .contracts import (
    Environment,
    GroundClass,
    HFContext,
    HFPropagationMode,
    PathContext,
    PathMode,
    PathResult,
    Receiver,
    Transmitter,
)
from .fspl import fspl_db
from .geometry import floor_positive

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkyLayerParams:
    """Virtual reflecting layer used by a sky-wave regime."""
    layer_height_km: float
    takeoff_angle_deg: float
    absorption_a0_db: float
    critical_ratio: float = 1.0  # layer critical frequency as a fraction of foF2
    min_distance_km: float = 0.0  # exclusive
    max_distance_km: Optional[float] = None
    max_frequency_mhz: float = 30.0

    @property
    def takeoff_angle_rad(self) -> float:
        return math.radians(self.takeoff_angle_deg)

    @property
    def hop_range_km(self) -> float:
        """Ground range covered by one hop."""
        return 2.0 * self.layer_height_km / math.tan(self.takeoff_angle_rad)

    @property
    def slant_km(self) -> float:
        """Up-and-down ray length of one hop."""
        return 2.0 * self.layer_height_km / math.sin(self.takeoff_angle_rad)

    @property
    def secant(self) -> float:
        return 1.0 / math.cos(self.takeoff_angle_rad)


@dataclass(frozen=True)
class GroundWaveParams:
    """Ground-wave window and conductivity per ground class (S/m)."""
    max_frequency_mhz: float = 10.0
    max_distance_km: float = 300.0
    excess_coefficient: float = 0.1
    sea_conductivity: float = 5.0
    wet_conductivity: float = 0.01
    dry_conductivity: float = 0.001

    def conductivity(self, ground_class: GroundClass) -> float:
        return {
            GroundClass.SEA: self.sea_conductivity,
            GroundClass.WET: self.wet_conductivity,
            GroundClass.DRY: self.dry_conductivity,
        }[ground_class]


def _default_f2() -> SkyLayerParams:
    return SkyLayerParams(
        layer_height_km=300.0,
        takeoff_angle_deg=30.0,
        absorption_a0_db=10.0,
        critical_ratio=1.0,
        min_distance_km=50.0,
    )


def _default_nvis() -> SkyLayerParams:
    return SkyLayerParams(
        layer_height_km=110.0,
        takeoff_angle_deg=80.0,
        absorption_a0_db=15.0,
        critical_ratio=0.3,
        max_distance_km=500.0,
        max_frequency_mhz=7.0,
    )


@dataclass(frozen=True)
class HFModelParams:
    f2: SkyLayerParams = field(default_factory=_default_f2)
    nvis: SkyLayerParams = field(default_factory=_default_nvis)
    ground: GroundWaveParams = field(default_factory=GroundWaveParams)
    max_hops: int = 2
    ground_reflection_loss_db: float = 3.0
    blocked_loss_db: float = 200.0


DEFAULT_HF_PARAMS = HFModelParams()


def groundwave_loss_db(
    distance_km: float,
    frequency_mhz: float,
    ground_class: GroundClass,
    params: GroundWaveParams = GroundWaveParams(),
) -> Optional[float]:
    """Ground-wave loss: FSPL plus an excess term that grows with distance.

    excess = c * d * sqrt(f) * sqrt(1 / sigma); better ground (higher sigma)
    means less excess loss. Returns None outside f <= 10 MHz, d <= 300 km.
    """
    if frequency_mhz > params.max_frequency_mhz or distance_km > params.max_distance_km:
        return None
    sigma = floor_positive(params.conductivity(ground_class), 0.001)
    f = floor_positive(frequency_mhz, 1e-6)
    excess = params.excess_coefficient * distance_km * math.sqrt(f) * math.sqrt(1.0 / sigma)
    return fspl_db(distance_km, frequency_mhz) + excess


def muf_mhz(fof2_mhz: float, layer: SkyLayerParams) -> float:
    """Maximum usable frequency of a layer by the secant law."""
    return layer.critical_ratio * fof2_mhz * layer.secant


def absorption_db(frequency_mhz: float, layer: SkyLayerParams) -> float:
    """Non-deviative absorption surrogate a0 * f^-2 * sec(alpha), per hop."""
    f = floor_positive(frequency_mhz, 1e-3)
    return layer.absorption_a0_db * f ** -2 * layer.secant


def hop_count(distance_km: float, layer: SkyLayerParams) -> int:
    return max(1, math.ceil(distance_km / layer.hop_range_km))


def _hops_loss_db(frequency_mhz: float, layer: SkyLayerParams, hops: int, reflection_loss_db: float) -> float:
    per_hop = fspl_db(layer.slant_km, frequency_mhz) + absorption_db(frequency_mhz, layer)
    return hops * per_hop + (hops - 1) * reflection_loss_db


def skywave_loss_db(
    distance_km: float,
    frequency_mhz: float,
    fof2_mhz: float,
    params: HFModelParams = DEFAULT_HF_PARAMS,
) -> Optional[float]:
    """F2 sky-wave loss, or None when the MUF gate, window or hop cap fails."""
    layer = params.f2
    if fof2_mhz <= 0 or not 0 < frequency_mhz <= layer.max_frequency_mhz:
        return None
    if distance_km <= layer.min_distance_km:
        return None
    if frequency_mhz > muf_mhz(fof2_mhz, layer):
        return None
    hops = hop_count(distance_km, layer)
    if hops > params.max_hops:
        return None
    return _hops_loss_db(frequency_mhz, layer, hops, params.ground_reflection_loss_db)


def nvis_loss_db(
    distance_km: float,
    frequency_mhz: float,
    fof2_mhz: float,
    params: HFModelParams = DEFAULT_HF_PARAMS,
) -> Optional[float]:
    """Single-hop near-vertical E-layer path, or None outside its window."""
    layer = params.nvis
    if fof2_mhz <= 0 or not 0 < frequency_mhz <= layer.max_frequency_mhz:
        return None
    if layer.max_distance_km is not None and distance_km > layer.max_distance_km:
        return None
    if frequency_mhz > muf_mhz(fof2_mhz, layer):
        return None
    return _hops_loss_db(frequency_mhz, layer, 1, params.ground_reflection_loss_db)


def regime_order(hf: HFContext) -> List[PathMode]:
    """Regimes to try, in priority order, for an HF context."""
    sky: List[PathMode] = [PathMode.NVIS] if hf.nvis_enabled else []
    sky.append(PathMode.IONO)
    if hf.propagation_mode is HFPropagationMode.GROUND:
        return [PathMode.GROUND]
    if hf.propagation_mode is HFPropagationMode.NVIS:
        return [PathMode.NVIS]
    if hf.propagation_mode is HFPropagationMode.SKY:
        return sky
    return sky + [PathMode.GROUND]


def solve_hf(
    transmitter: Transmitter,
    receiver: Receiver,
    environment: Environment,
    context: PathContext,
    params: Optional[HFModelParams] = None,
) -> PathResult:
    """Select an HF regime and return its path loss and mode tag."""
    params = params or DEFAULT_HF_PARAMS
    f = transmitter.frequency_mhz
    d = context.guarded_distance_km
    hf = context.hf or HFContext()

    for regime in regime_order(hf):
        if regime is PathMode.NVIS:
            loss = nvis_loss_db(d, f, hf.fof2_mhz, params)
        elif regime is PathMode.IONO:
            loss = skywave_loss_db(d, f, hf.fof2_mhz, params)
        else:
            loss = groundwave_loss_db(d, f, environment.ground_class, params.ground)
        if loss is not None:
            logger.debug("HF f=%.3f MHz d=%.1f km foF2=%.2f -> %s %.1f dB",
                         f, d, hf.fof2_mhz, regime.value, loss)
            return PathResult(loss_db=loss, mode=regime)

    logger.debug("HF f=%.3f MHz d=%.1f km foF2=%.2f mode=%s -> BLOCKED",
                 f, d, hf.fof2_mhz, hf.propagation_mode.value)
    return PathResult(loss_db=params.blocked_loss_db, mode=PathMode.BLOCKED)
