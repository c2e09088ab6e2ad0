import math
from dataclasses import replace

from rfcoverage.contracts import (
    Environment,
    GroundClass,
    HFContext,
    HFPropagationMode,
    PathContext,
    PathMode,
    Receiver,
    Transmitter,
)
from rfcoverage.fspl import fspl_db
from rfcoverage.hf_model import (
    DEFAULT_HF_PARAMS,
    HFModelParams,
    GroundWaveParams,
    groundwave_loss_db,
    hop_count,
    muf_mhz,
    nvis_loss_db,
    regime_order,
    skywave_loss_db,
    solve_hf,
)


def _tx(freq_mhz: float) -> Transmitter:
    return Transmitter(lat_deg=41.0, lon_deg=29.0, power_w=100.0, gain_dbi=0.0,
                       cable_loss_db=1.0, height_m=10.0, frequency_mhz=freq_mhz)


def _solve(freq_mhz, distance_km, fof2=0.0, nvis=False, mode="auto", ground="wet", params=None):
    hf = HFContext(fof2_mhz=fof2, nvis_enabled=nvis, propagation_mode=mode)
    ctx = PathContext(distance_km=distance_km, hf=hf)
    env = Environment(ground_class=ground)
    return solve_hf(_tx(freq_mhz), Receiver(height_m=10.0), env, ctx, params)


def test_muf_secant_law():
    f2 = DEFAULT_HF_PARAMS.f2
    # 30 deg takeoff: sec = 2 / sqrt(3)
    assert abs(muf_mhz(8.0, f2) - 8.0 * 2.0 / math.sqrt(3.0)) < 1e-9
    assert abs(muf_mhz(6.0, f2) - 6.928) < 1e-3


def test_muf_gate_is_monotonic_in_fof2():
    seen_open = False
    for i in range(0, 200):
        fof2 = 0.1 * i
        open_now = skywave_loss_db(1000.0, 7.1, fof2) is not None
        if seen_open:
            assert open_now
        seen_open = seen_open or open_now
    assert seen_open


def test_skywave_single_hop_at_1000_km():
    res = _solve(7.1, 1000.0, fof2=8.0)
    assert res.mode is PathMode.IONO
    # one hop: slant 1200 km + small absorption
    expected = fspl_db(1200.0, 7.1) + 10.0 * 7.1 ** -2 * 2.0 / math.sqrt(3.0)
    assert abs(res.loss_db - expected) < 1e-6
    assert 110.5 < res.loss_db < 112.0


def test_low_fof2_blocks_long_path():
    res = _solve(7.1, 1000.0, fof2=6.0)
    assert res.mode is PathMode.BLOCKED
    assert res.loss_db == DEFAULT_HF_PARAMS.blocked_loss_db


def test_two_hops_add_reflection_loss():
    one = _solve(7.1, 1000.0, fof2=8.0).loss_db
    two = _solve(7.1, 1500.0, fof2=8.0)
    assert two.mode is PathMode.IONO
    assert abs(two.loss_db - (2.0 * one + 3.0)) < 1e-6


def test_hop_cap():
    f2 = DEFAULT_HF_PARAMS.f2
    cap_km = DEFAULT_HF_PARAMS.max_hops * f2.hop_range_km
    assert 2070.0 < cap_km < 2090.0
    assert hop_count(cap_km - 1.0, f2) == 2
    assert hop_count(cap_km + 1.0, f2) == 3
    assert skywave_loss_db(cap_km + 1.0, 7.1, 8.0) is None
    assert _solve(7.1, cap_km + 50.0, fof2=8.0, mode="sky").mode is PathMode.BLOCKED


def test_short_path_falls_back_to_ground_wave():
    # sky-wave needs d > 50 km
    res = _solve(7.1, 30.0, fof2=8.0)
    assert res.mode is PathMode.GROUND


def test_ground_wave_window():
    assert groundwave_loss_db(100.0, 3.0, GroundClass.WET) is not None
    assert groundwave_loss_db(100.0, 12.0, GroundClass.WET) is None
    assert groundwave_loss_db(350.0, 3.0, GroundClass.WET) is None


def test_ground_class_ordering():
    sea = groundwave_loss_db(100.0, 3.0, GroundClass.SEA)
    wet = groundwave_loss_db(100.0, 3.0, GroundClass.WET)
    dry = groundwave_loss_db(100.0, 3.0, GroundClass.DRY)
    assert sea < wet < dry
    assert sea > fspl_db(100.0, 3.0)


def test_ground_override():
    assert _solve(7.1, 100.0, fof2=8.0, mode="ground").mode is PathMode.GROUND
    assert _solve(7.1, 1000.0, fof2=8.0, mode=HFPropagationMode.GROUND).mode is PathMode.BLOCKED


def test_nvis_selected_when_enabled():
    res = _solve(5.0, 200.0, fof2=8.0, nvis=True)
    assert res.mode is PathMode.NVIS
    assert _solve(5.0, 200.0, fof2=8.0, nvis=False).mode is PathMode.IONO


def test_nvis_window():
    # above 7 MHz NVIS is not applicable
    assert _solve(8.0, 200.0, fof2=8.0, mode="nvis").mode is PathMode.BLOCKED
    # beyond 500 km NVIS is not applicable
    assert _solve(5.0, 600.0, fof2=8.0, mode="nvis").mode is PathMode.BLOCKED
    assert _solve(5.0, 300.0, fof2=8.0, mode="nvis").mode is PathMode.NVIS


def test_sky_regimes_need_positive_frequency():
    assert skywave_loss_db(500.0, 0.0, 8.0) is None
    assert skywave_loss_db(500.0, -1.0, 8.0) is None
    assert nvis_loss_db(200.0, 0.0, 8.0) is None
    assert nvis_loss_db(200.0, float("nan"), 8.0) is None
    # beyond the ground-wave window nothing is left
    assert _solve(0.0, 500.0, fof2=8.0).mode is PathMode.BLOCKED
    assert _solve(-1.0, 200.0, fof2=8.0, nvis=True, mode="sky").mode is PathMode.BLOCKED


def test_regime_order():
    assert regime_order(HFContext()) == [PathMode.IONO, PathMode.GROUND]
    assert regime_order(HFContext(nvis_enabled=True)) == [PathMode.NVIS, PathMode.IONO, PathMode.GROUND]
    assert regime_order(HFContext(propagation_mode="sky")) == [PathMode.IONO]
    assert regime_order(HFContext(propagation_mode="nvis")) == [PathMode.NVIS]
    assert regime_order(HFContext(nvis_enabled=True, propagation_mode="ground")) == [PathMode.GROUND]


def test_missing_hf_context_uses_ground_wave():
    ctx = PathContext(distance_km=50.0)
    res = solve_hf(_tx(3.5), Receiver(), Environment(), ctx)
    assert res.mode is PathMode.GROUND


def test_zero_distance_is_finite():
    res = _solve(7.1, 0.0, fof2=8.0)
    assert res.mode is PathMode.GROUND
    assert math.isfinite(res.loss_db)


def test_params_are_tunable():
    params = HFModelParams(blocked_loss_db=250.0)
    assert _solve(7.1, 1000.0, fof2=6.0, params=params).loss_db == 250.0

    base = _solve(7.1, 1000.0, fof2=8.0).loss_db
    hotter = replace(DEFAULT_HF_PARAMS, f2=replace(DEFAULT_HF_PARAMS.f2, absorption_a0_db=510.0))
    extra = 500.0 * 7.1 ** -2 * 2.0 / math.sqrt(3.0)
    assert abs(_solve(7.1, 1000.0, fof2=8.0, params=hotter).loss_db - base - extra) < 1e-6

    short = replace(DEFAULT_HF_PARAMS, ground=GroundWaveParams(max_distance_km=20.0))
    assert _solve(3.5, 40.0, params=short).mode is PathMode.BLOCKED
