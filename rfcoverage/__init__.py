from .contracts import (
	EnvironmentClass,
	GroundClass,
	PathMode,
	HFPropagationMode,
	Transmitter,
	Receiver,
	Environment,
	HFContext,
	PathContext,
	PathResult,
	LinkResult,
)
from .geometry import (
	wavelength_m,
	radio_horizon_km,
	fresnel_radius_m,
	los_by_horizon,
)
from .fspl import fspl_db
from .geodesy import haversine_distance_km, offset_to_latlon
from .link_budget import (
	eirp_dbm,
	noise_floor_dbm,
	sensitivity_dbm,
	received_power_dbm,
	link_margin_db,
)
from .hf_model import (
	SkyLayerParams,
	GroundWaveParams,
	HFModelParams,
	groundwave_loss_db,
	muf_mhz,
	solve_hf,
)
from .vuhf_model import (
	VUHFModelParams,
	two_slope_loss_db,
	hata_loss_db,
	log_distance_loss_db,
	foliage_loss_db,
	solve_vuhf,
)
from .propagation import predict_path, predict_link, link_from_path
from .presets import (
	BandPreset,
	BAND_PRESETS,
	ENV_DEFAULTS,
	find_preset,
	receiver_from_preset,
	hf_context_from_preset,
	make_environment,
)
from .config import DisplayPolicy, GridConfig, RFCoverageConfig, get_config
from .loaders import LinkSetup, load_link_setup, link_setup_from_dict
from .scenario import (
	Scenario,
	run_scenario,
	rows_to_table,
	print_table,
	save_rows_csv,
)
from .api import build_link_response, build_link_response_json
from .coverage import CoverageGrid, sample_coverage, coverage_cells, save_coverage_csv
from .heatmaps import render_coverage_map
from .kpi import coverage_fraction, mode_histogram, coverage_stats

__all__ = [
	"EnvironmentClass",
	"GroundClass",
	"PathMode",
	"HFPropagationMode",
	"Transmitter",
	"Receiver",
	"Environment",
	"HFContext",
	"PathContext",
	"PathResult",
	"LinkResult",
	"wavelength_m",
	"radio_horizon_km",
	"fresnel_radius_m",
	"los_by_horizon",
	"fspl_db",
	"haversine_distance_km",
	"offset_to_latlon",
	"eirp_dbm",
	"noise_floor_dbm",
	"sensitivity_dbm",
	"received_power_dbm",
	"link_margin_db",
	"SkyLayerParams",
	"GroundWaveParams",
	"HFModelParams",
	"groundwave_loss_db",
	"muf_mhz",
	"solve_hf",
	"VUHFModelParams",
	"two_slope_loss_db",
	"hata_loss_db",
	"log_distance_loss_db",
	"foliage_loss_db",
	"solve_vuhf",
	"predict_path",
	"predict_link",
	"link_from_path",
	"BandPreset",
	"BAND_PRESETS",
	"ENV_DEFAULTS",
	"find_preset",
	"receiver_from_preset",
	"hf_context_from_preset",
	"make_environment",
	"DisplayPolicy",
	"GridConfig",
	"RFCoverageConfig",
	"get_config",
	"LinkSetup",
	"load_link_setup",
	"link_setup_from_dict",
	"Scenario",
	"run_scenario",
	"rows_to_table",
	"print_table",
	"save_rows_csv",
	"build_link_response",
	"build_link_response_json",
	"CoverageGrid",
	"sample_coverage",
	"coverage_cells",
	"save_coverage_csv",
	"render_coverage_map",
	"coverage_fraction",
	"mode_histogram",
	"coverage_stats",
]
