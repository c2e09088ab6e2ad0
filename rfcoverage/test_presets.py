import pytest

from rfcoverage.contracts import EnvironmentClass, GroundClass, HFPropagationMode
from rfcoverage.presets import (
	BAND_PRESETS,
	ENV_DEFAULTS,
	find_preset,
	hf_context_from_preset,
	make_environment,
	receiver_from_preset,
)


def test_env_defaults_cover_every_class():
	assert set(ENV_DEFAULTS) == set(EnvironmentClass)
	assert ENV_DEFAULTS[EnvironmentClass.URBAN].n == 3.5
	assert ENV_DEFAULTS[EnvironmentClass.WATER].n == 2.0


def test_find_preset():
	assert find_preset("VHF 2 m (146 MHz)").frequency_mhz == 146.0
	assert find_preset("915").frequency_mhz == 915.0
	with pytest.raises(ValueError):
		find_preset("40 m")  # ground and sky variants
	with pytest.raises(ValueError):
		find_preset("23 cm")


def test_preset_receiver_and_hf_context():
	sky = find_preset("20 m Sky")
	rx = receiver_from_preset(sky, cable_loss_db=1.5)
	assert rx.bandwidth_hz == 2700.0
	assert rx.cable_loss_db == 1.5
	hf = hf_context_from_preset(sky, nvis_enabled=True)
	assert hf.fof2_mhz == 12.5
	assert hf.nvis_enabled
	assert hf.propagation_mode is HFPropagationMode.SKY
	assert hf_context_from_preset(find_preset("70 cm")) is None
	assert all(p.frequency_mhz > 0 for p in BAND_PRESETS)


def test_make_environment():
	forest = make_environment("forest")
	assert forest.environment is EnvironmentClass.FOREST
	assert forest.foliage_depth_m == 30.0
	assert make_environment(EnvironmentClass.URBAN).foliage_depth_m is None
	sea = make_environment("water", ground_class="sea", k_factor=1.0)
	assert sea.ground_class is GroundClass.SEA
	assert sea.k_factor == 1.0
