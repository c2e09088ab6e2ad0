import math
import subprocess
import sys

from rfcoverage.fspl import fspl_db
from rfcoverage.geodesy import haversine_distance_km, offset_to_latlon
from rfcoverage.geometry import floor_positive, fresnel_radius_m, los_by_horizon, radio_horizon_km, wavelength_m
from rfcoverage.link_budget import eirp_dbm, link_margin_db, noise_floor_dbm, received_power_dbm, sensitivity_dbm
from rfcoverage.contracts import PathContext, Receiver


def test_fspl_reference_values():
    # 1 km at 100 MHz: 32.44 + 0 + 40
    assert abs(fspl_db(1.0, 100.0) - 72.44) < 1e-9
    # doubling distance adds ~6.02 dB
    assert abs(fspl_db(2.0, 100.0) - fspl_db(1.0, 100.0) - 6.0206) < 1e-3


def test_fspl_edge_inputs_are_finite():
    for d, f in [(0.0, 146.0), (-5.0, 146.0), (1.0, 0.0), (float("nan"), 146.0)]:
        assert math.isfinite(fspl_db(d, f))


def test_floor_positive():
    assert floor_positive(5.0, 1.0) == 5.0
    assert floor_positive(0.5, 1.0) == 1.0
    assert floor_positive(float("nan"), 1e-3) == 1e-3


def test_wavelength():
    assert abs(wavelength_m(300.0) - 0.99931) < 1e-4
    assert math.isfinite(wavelength_m(0.0))


def test_radio_horizon_and_monotonicity():
    d_h = radio_horizon_km(30.0, 1.5, 1.33)
    # 3.57 * (sqrt(1.33*30) + sqrt(1.33*1.5)) ~ 27.6 km
    assert 27.0 < d_h < 28.2
    assert radio_horizon_km(60.0, 1.5, 1.33) > d_h
    assert radio_horizon_km(30.0, 10.0, 1.33) > d_h
    assert radio_horizon_km(30.0, 1.5, 1.7) > d_h
    assert radio_horizon_km(-5.0, -5.0, 1.33) == 0.0
    assert los_by_horizon(10.0, 30.0, 1.5, 1.33)
    assert not los_by_horizon(40.0, 30.0, 1.5, 1.33)


def test_fresnel_radius_midpoint():
    # lambda 1 m, 1 km path, midpoint: sqrt(1 * 500 * 500 / 1000) ~ 15.8 m
    assert abs(fresnel_radius_m(1.0, 500.0, 500.0) - math.sqrt(250.0)) < 1e-9


def test_haversine_and_offset():
    one_deg = haversine_distance_km(0.0, 0.0, 1.0, 0.0)
    assert abs(one_deg - 111.195) < 0.01
    assert haversine_distance_km(41.0, 29.0, 41.0, 29.0) == 0.0
    lat, lon = offset_to_latlon(41.0, 29.0, 3.0, 4.0)
    d = haversine_distance_km(41.0, 29.0, lat, lon)
    assert abs(d - 5.0) / 5.0 < 0.01


def test_path_context_distance_guard():
    assert PathContext(distance_km=0.0).guarded_distance_km == 0.001
    assert PathContext(distance_km=-3.0).guarded_distance_km == 0.001
    assert PathContext(distance_km=float("nan")).guarded_distance_km == 0.001
    assert PathContext(distance_km=12.5).guarded_distance_km == 12.5


def test_eirp_noise_and_sensitivity():
    eirp = eirp_dbm(25.0, 2.15, 2.0)
    # 10 log10(25000) = 43.98
    assert abs(eirp - 44.129) < 1e-3
    assert math.isfinite(eirp_dbm(0.0, 0.0, 0.0))

    n = noise_floor_dbm(20000.0, 5.0)
    # -174 + 43.01 + 5
    assert abs(n - (-125.99)) < 0.01
    assert noise_floor_dbm(0.0, 5.0) == -169.0

    rx = Receiver(bandwidth_hz=20000.0, noise_figure_db=5.0, required_snr_db=10.0)
    assert abs(sensitivity_dbm(rx) - (n + 10.0)) < 1e-9


def test_received_power_and_margin():
    pr = received_power_dbm(44.0, 3.0, 1.0, 120.0, misc_loss_db=2.0)
    assert abs(pr - (44.0 + 3.0 - 122.0 - 1.0)) < 1e-9
    assert link_margin_db(-130.0, -116.0) == -14.0
    # sentinel-sized losses stay finite
    assert math.isfinite(received_power_dbm(44.0, 0.0, 0.0, 1e6))


def test_package_import_does_not_load_pyplot():
    code = "import sys, rfcoverage; assert 'matplotlib.pyplot' not in sys.modules"
    subprocess.run([sys.executable, "-c", code], check=True)
