"""
Configuration management for rfcoverage

Model constants (layer heights, absorption coefficients, blend band) and the
outer-layer display/grid settings are plain dataclasses with defaults; a YAML
file may override any subset of them.
"""

import os
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .hf_model import GroundWaveParams, HFModelParams, SkyLayerParams
from .vuhf_model import VUHFModelParams


@dataclass(frozen=True)
class DisplayPolicy:
    """Rendering policy applied outside the engine.

    margin_min_db/margin_max_db: color window over margin
    power_cutoff_dbm: cells with lower received power are not painted
    """
    margin_min_db: float = -10.0
    margin_max_db: float = 30.0
    power_cutoff_dbm: float = -110.0
    colormap: str = "viridis"
    alpha: float = 200 / 255


@dataclass(frozen=True)
class GridConfig:
    """Coverage sampling grid around the transmitter"""
    radius_km: float = 30.0
    step_km: float = 1.0


@dataclass
class RFCoverageConfig:
    """Master configuration"""

    hf: HFModelParams = field(default_factory=HFModelParams)
    vuhf: VUHFModelParams = field(default_factory=VUHFModelParams)
    display: DisplayPolicy = field(default_factory=DisplayPolicy)
    grid: GridConfig = field(default_factory=GridConfig)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> 'RFCoverageConfig':
        """Build a configuration from a (possibly partial) nested dict"""
        config_dict = config_dict or {}
        return cls(
            hf=_hf_from_dict(config_dict.get('hf', {})),
            vuhf=_merge(VUHFModelParams(), config_dict.get('vuhf', {})),
            display=_merge(DisplayPolicy(), config_dict.get('display', {})),
            grid=_merge(GridConfig(), config_dict.get('grid', {})),
            log_level=str(config_dict.get('log_level', 'INFO')),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'RFCoverageConfig':
        """Load configuration from YAML file"""
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hf': asdict(self.hf),
            'vuhf': asdict(self.vuhf),
            'display': asdict(self.display),
            'grid': asdict(self.grid),
            'log_level': self.log_level,
        }

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to YAML file"""
        with open(yaml_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)


def _merge(base, overrides: Optional[Dict[str, Any]]):
    """Return a copy of a dataclass with known keys replaced; unknown keys raise."""
    if not overrides:
        return base
    known = {f.name for f in fields(base)}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown {type(base).__name__} keys: {sorted(unknown)}")
    return replace(base, **overrides)


def _hf_from_dict(hf_dict: Optional[Dict[str, Any]]) -> HFModelParams:
    hf_dict = dict(hf_dict or {})
    base = HFModelParams()
    f2: SkyLayerParams = _merge(base.f2, hf_dict.pop('f2', None))
    nvis: SkyLayerParams = _merge(base.nvis, hf_dict.pop('nvis', None))
    ground: GroundWaveParams = _merge(base.ground, hf_dict.pop('ground', None))
    return _merge(replace(base, f2=f2, nvis=nvis, ground=ground), hf_dict)


def get_config(config_path: Optional[str] = None) -> RFCoverageConfig:
    """
    Get configuration

    Priority:
    1. Provided config_path
    2. RFCOVERAGE_CONFIG environment variable
    3. config/rfcoverage.yml in the working directory
    4. Default configuration
    """
    if config_path is None:
        config_path = os.getenv('RFCOVERAGE_CONFIG')

    if config_path is None:
        default_path = Path('config/rfcoverage.yml')
        if default_path.exists():
            config_path = str(default_path)

    if config_path and Path(config_path).exists():
        return RFCoverageConfig.from_yaml(config_path)

    return RFCoverageConfig()
