import json
from pathlib import Path

import numpy as np
import pytest

from rfcoverage import propagation
from rfcoverage.api import build_link_response, build_link_response_json
from rfcoverage.cli import main
from rfcoverage.config import DisplayPolicy
from rfcoverage.contracts import Environment, EnvironmentClass, HFContext, PathMode, Receiver, Transmitter
from rfcoverage.coverage import NO_MODE, coverage_cells, mode_code, mode_from_code, sample_coverage, save_coverage_csv
from rfcoverage.kpi import coverage_stats


def _vhf_tx() -> Transmitter:
    return Transmitter(lat_deg=41.0, lon_deg=29.0, power_w=25.0, gain_dbi=2.15,
                       cable_loss_db=2.0, height_m=30.0, frequency_mhz=146.0)


def test_mode_codes():
    for mode in PathMode:
        assert mode_from_code(mode_code(mode)) is mode
    assert mode_from_code(NO_MODE) is None


def test_sample_coverage_grid():
    grid = sample_coverage(_vhf_tx(), Receiver(), Environment(environment=EnvironmentClass.URBAN),
                           radius_km=3.0, step_km=1.0)
    assert grid.shape == (7, 7)
    assert grid.skipped == 0
    # center cell sits on the transmitter
    assert grid.distance_km[3, 3] == 0.0
    assert abs(grid.lat_deg[3, 3] - 41.0) < 1e-12
    # north row is farther north than south row
    assert grid.lat_deg[6, 3] > grid.lat_deg[0, 3]
    assert grid.lon_deg[3, 6] > grid.lon_deg[3, 0]
    # margin falls off with distance
    assert grid.margin_db[3, 3] > grid.margin_db[3, 6]
    assert np.all(np.isfinite(grid.pr_dbm))
    assert np.all(grid.mode == mode_code(PathMode.LOS))


def test_sample_coverage_rejects_bad_grid():
    with pytest.raises(ValueError):
        sample_coverage(_vhf_tx(), Receiver(), Environment(), radius_km=0.0)
    with pytest.raises(ValueError):
        sample_coverage(_vhf_tx(), Receiver(), Environment(), step_km=-1.0)


def test_failing_cells_are_skipped(monkeypatch: pytest.MonkeyPatch):
    real = propagation.predict_link

    def flaky(tx, rx, env, ctx, *args, **kwargs):
        if ctx.distance_km > 1.5:
            raise RuntimeError("boom")
        return real(tx, rx, env, ctx, *args, **kwargs)

    monkeypatch.setattr("rfcoverage.coverage.predict_link", flaky)
    grid = sample_coverage(_vhf_tx(), Receiver(), Environment(), radius_km=2.0, step_km=1.0)
    assert grid.shape == (5, 5)
    # center, 4 neighbours at 1 km and 4 diagonals at ~1.41 km survive
    assert grid.skipped == 25 - 9
    assert np.isnan(grid.margin_db[0, 0])
    assert grid.mode[0, 0] == NO_MODE
    assert len(coverage_cells(grid)) == 1 + 9


def test_coverage_csv_and_stats(tmp_path: Path):
    grid = sample_coverage(_vhf_tx(), Receiver(), Environment(), radius_km=2.0, step_km=1.0)
    out = save_coverage_csv(grid, tmp_path / "sub" / "coverage.csv")
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "lat_deg,lon_deg,distance_km,pr_dbm,margin_db,mode"
    assert len(lines) == 1 + 25

    stats = coverage_stats(grid, DisplayPolicy())
    assert stats["cells"] == 25
    assert stats["covered_fraction"] == 1.0
    assert stats["painted_fraction"] == 1.0
    assert stats["modes"] == {"LOS": 25}
    strict = coverage_stats(grid, DisplayPolicy(power_cutoff_dbm=50.0))
    assert strict["painted_fraction"] == 0.0


def test_hf_coverage_has_blocked_cells():
    tx = Transmitter(lat_deg=41.0, lon_deg=29.0, power_w=100.0, gain_dbi=0.0,
                     cable_loss_db=1.0, height_m=10.0, frequency_mhz=7.1)
    grid = sample_coverage(tx, Receiver(bandwidth_hz=2700.0), Environment(),
                           hf=HFContext(fof2_mhz=6.0), radius_km=400.0, step_km=100.0)
    stats = coverage_stats(grid)
    assert stats["modes"]["GROUND"] > 0
    assert stats["modes"]["BLOCKED"] > 0
    assert np.all(np.isfinite(grid.pr_dbm))


def test_build_link_response():
    env = Environment(environment=EnvironmentClass.URBAN)
    resp = build_link_response(_vhf_tx(), Receiver(), env, 5.0)
    assert resp["band"] == "VUHF"
    assert resp["mode"] == "LOS"
    assert resp["inputs"]["environment"]["environment"] == "urban"
    assert resp["inputs"]["hf"] is None
    assert abs(resp["eirpDbm"] - 44.129) < 1e-3
    assert abs(resp["marginDb"] - (resp["prDbm"] - resp["sensitivityDbm"])) < 1e-9
    assert 27.0 < resp["radioHorizonKm"] < 28.2

    parsed = json.loads(build_link_response_json(_vhf_tx(), Receiver(), env, 5.0))
    assert parsed["mode"] == "LOS"


def test_build_link_response_solves_path_once(monkeypatch: pytest.MonkeyPatch):
    calls = []
    real = propagation.predict_path

    def counting(*args, **kwargs):
        calls.append(args[3].distance_km)
        return real(*args, **kwargs)

    monkeypatch.setattr("rfcoverage.api.predict_path", counting)
    resp = build_link_response(_vhf_tx(), Receiver(), Environment(environment=EnvironmentClass.URBAN), 5.0)
    assert calls == [5.0]
    # default receiver has no gain or cable loss
    assert abs(resp["prDbm"] - (resp["eirpDbm"] - resp["pathLossDb"])) < 1e-9


def test_build_link_response_hf():
    tx = Transmitter(lat_deg=41.0, lon_deg=29.0, power_w=100.0, gain_dbi=0.0,
                     cable_loss_db=1.0, height_m=10.0, frequency_mhz=7.1)
    resp = build_link_response(tx, Receiver(), Environment(), 1000.0, HFContext(fof2_mhz=8.0))
    assert resp["band"] == "HF"
    assert resp["mode"] == "IONO"
    assert resp["inputs"]["hf"]["propagation_mode"] == "auto"


def test_cli_point_json(capsys: pytest.CaptureFixture):
    main(["point", "--band", "VHF 2 m", "--env", "urban", "--distance", "5", "--json"])
    out = json.loads(capsys.readouterr().out)
    assert out["mode"] == "LOS"
    assert out["marginDb"] > 20.0


def test_cli_sweep_and_map(tmp_path: Path, capsys: pytest.CaptureFixture):
    csv_path = tmp_path / "sweep.csv"
    main(["sweep", "--band", "40 m Sky", "--fof2", "8", "--distances", "100,1000", "--out", str(csv_path)])
    assert csv_path.exists()
    assert "IONO" in capsys.readouterr().out

    out_dir = tmp_path / "map"
    main(["map", "--band", "70 cm", "--radius", "2", "--step", "1", "--out-dir", str(out_dir)])
    assert (out_dir / "coverage.csv").exists()
    assert (out_dir / "coverage_map.png").exists()
