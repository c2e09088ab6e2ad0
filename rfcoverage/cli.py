"""CLI to run point predictions, distance sweeps and coverage maps.

Usage:
    python -m rfcoverage.cli point --band "VHF 2 m" --env urban --distance 5
    python -m rfcoverage.cli point --band "40 m Sky" --fof2 8 --distance 1000 --json
    python -m rfcoverage.cli sweep --band "70 cm" --distances 1,5,10,20,40 --out sweep.csv
    python -m rfcoverage.cli map --setup link.yml --radius 30 --step 1 --out-dir out/
"""

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .api import build_link_response, build_link_response_json
from .config import RFCoverageConfig, get_config
from .contracts import EnvironmentClass, GroundClass, HFContext, HFPropagationMode, Transmitter
from .coverage import sample_coverage, save_coverage_csv
from .heatmaps import render_coverage_map
from .kpi import coverage_stats
from .loaders import LinkSetup, load_link_setup
from .logging_config import setup_logging
from .presets import find_preset, hf_context_from_preset, make_environment, receiver_from_preset
from .scenario import Scenario, print_table, rows_to_table, run_scenario, save_rows_csv

logger = logging.getLogger(__name__)


def _parse_distances(text: str) -> List[float]:
    try:
        return [float(x) for x in text.split(",") if x.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid distance list: {text!r}") from exc


def _add_link_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--band", type=str, default="VHF 2 m", help="band preset label (substring match)")
    p.add_argument("--setup", type=Path, default=None, help="JSON/YAML link setup file (overrides --band)")
    p.add_argument("--config", type=str, default=None, help="YAML model/display configuration")
    p.add_argument("--log-level", type=str, default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--lat", type=float, default=41.0)
    p.add_argument("--lon", type=float, default=29.0)
    p.add_argument("--power-w", type=float, default=25.0)
    p.add_argument("--tx-gain", type=float, default=2.15, help="Tx antenna gain (dBi)")
    p.add_argument("--tx-cable", type=float, default=2.0, help="Tx cable loss (dB)")
    p.add_argument("--tx-height", type=float, default=30.0, help="Tx antenna height (m)")
    p.add_argument("--rx-height", type=float, default=None, help="override preset Rx height (m)")
    p.add_argument("--env", type=str, default="open", choices=[e.value for e in EnvironmentClass])
    p.add_argument("--k-factor", type=float, default=1.33)
    p.add_argument("--ground", type=str, default=None, choices=[g.value for g in GroundClass])
    p.add_argument("--foliage-m", type=float, default=None, help="foliage depth (m), forest only")
    p.add_argument("--fof2", type=float, default=None, help="F2 critical frequency (MHz)")
    p.add_argument("--nvis", action="store_true", help="allow the NVIS regime")
    p.add_argument("--hf-mode", type=str, default=None, choices=[m.value for m in HFPropagationMode])


def build_setup(args: argparse.Namespace) -> LinkSetup:
    """Link setup from --setup, or from the band preset plus command-line overrides."""
    if args.setup is not None:
        return load_link_setup(args.setup)

    preset = find_preset(args.band)
    rx = receiver_from_preset(preset)
    if args.rx_height is not None:
        rx = replace(rx, height_m=args.rx_height)
    env_overrides = {"k_factor": args.k_factor}
    ground = args.ground or (preset.ground_class.value if preset.ground_class else None)
    if ground:
        env_overrides["ground_class"] = ground
    if args.foliage_m is not None:
        env_overrides["foliage_depth_m"] = args.foliage_m
    env = make_environment(args.env, **env_overrides)

    tx = Transmitter(
        lat_deg=args.lat,
        lon_deg=args.lon,
        power_w=args.power_w,
        gain_dbi=args.tx_gain,
        cable_loss_db=args.tx_cable,
        height_m=args.tx_height,
        frequency_mhz=preset.frequency_mhz,
    )

    hf: Optional[HFContext] = hf_context_from_preset(preset, nvis_enabled=args.nvis)
    if hf is not None:
        hf = HFContext(
            fof2_mhz=args.fof2 if args.fof2 is not None else hf.fof2_mhz,
            nvis_enabled=hf.nvis_enabled,
            propagation_mode=args.hf_mode or hf.propagation_mode,
        )
    return LinkSetup(transmitter=tx, receiver=rx, environment=env, hf=hf)


def cmd_point(args: argparse.Namespace, setup: LinkSetup, cfg: RFCoverageConfig) -> None:
    if args.json:
        print(build_link_response_json(
            setup.transmitter, setup.receiver, setup.environment, args.distance, setup.hf, cfg.hf, cfg.vuhf,
        ))
        return
    resp = build_link_response(
        setup.transmitter, setup.receiver, setup.environment, args.distance, setup.hf, cfg.hf, cfg.vuhf,
    )
    print(f"Band {resp['band']} @ {setup.transmitter.frequency_mhz:g} MHz, d = {resp['distanceKm']:.3f} km")
    print(f"  EIRP        {resp['eirpDbm']:8.2f} dBm")
    print(f"  Path loss   {resp['pathLossDb']:8.2f} dB ({resp['mode']})")
    print(f"  Pr          {resp['prDbm']:8.2f} dBm")
    print(f"  Sensitivity {resp['sensitivityDbm']:8.2f} dBm")
    print(f"  Margin      {resp['marginDb']:8.2f} dB")


def cmd_sweep(args: argparse.Namespace, setup: LinkSetup, cfg: RFCoverageConfig) -> None:
    scenario = Scenario(
        transmitter=setup.transmitter,
        receiver=setup.receiver,
        environment=setup.environment,
        distances_km=args.distances,
        hf=setup.hf,
    )
    rows = run_scenario(scenario, cfg.hf, cfg.vuhf)
    print_table(rows_to_table(rows))
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        save_rows_csv(rows, args.out)
        print(f"Saved {len(rows)} rows to {args.out}")


def cmd_map(args: argparse.Namespace, setup: LinkSetup, cfg: RFCoverageConfig) -> None:
    radius = args.radius if args.radius is not None else cfg.grid.radius_km
    step = args.step if args.step is not None else cfg.grid.step_km
    logger.info("Sampling coverage: radius %.1f km, step %.2f km", radius, step)
    grid = sample_coverage(
        setup.transmitter, setup.receiver, setup.environment, setup.hf,
        radius_km=radius, step_km=step, hf_params=cfg.hf, vuhf_params=cfg.vuhf,
    )
    out_dir: Path = args.out_dir
    csv_path = save_coverage_csv(grid, out_dir / "coverage.csv")
    png_path = render_coverage_map(
        grid,
        cfg.display,
        out_dir / "coverage_map.png",
        title=f"Coverage margin @ {setup.transmitter.frequency_mhz:g} MHz",
        tx_latlon=(setup.transmitter.lat_deg, setup.transmitter.lon_deg),
    )
    stats = coverage_stats(grid, cfg.display)
    print(f"Saved {csv_path} and {png_path}")
    print(
        f"Cells: {stats['cells']} (skipped {stats['skipped']}), "
        f"covered {stats['covered_fraction']:.1%}, painted {stats['painted_fraction']:.1%}"
    )
    print("Modes: " + ", ".join(f"{k}={v}" for k, v in sorted(stats["modes"].items())))


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Radio coverage and link-budget predictions")
    sub = parser.add_subparsers(dest="command", required=True)

    p_point = sub.add_parser("point", help="single-distance link prediction")
    _add_link_args(p_point)
    p_point.add_argument("--distance", type=float, required=True, help="Tx-Rx distance (km)")
    p_point.add_argument("--json", action="store_true", help="print the JSON response")
    p_point.set_defaults(func=cmd_point)

    p_sweep = sub.add_parser("sweep", help="evaluate a list of distances")
    _add_link_args(p_sweep)
    p_sweep.add_argument("--distances", type=_parse_distances, default=[1.0, 2.0, 5.0, 10.0, 20.0, 50.0])
    p_sweep.add_argument("--out", type=Path, default=None, help="optional CSV output")
    p_sweep.set_defaults(func=cmd_sweep)

    p_map = sub.add_parser("map", help="sample a coverage grid and render it")
    _add_link_args(p_map)
    p_map.add_argument("--radius", type=float, default=None, help="grid half-width (km)")
    p_map.add_argument("--step", type=float, default=None, help="grid step (km)")
    p_map.add_argument("--out-dir", type=Path, default=Path("coverage_out"))
    p_map.set_defaults(func=cmd_map)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = make_parser().parse_args(argv)
    cfg = get_config(args.config)
    setup_logging(log_level=args.log_level or cfg.log_level)
    setup = build_setup(args)
    args.func(args, setup, cfg)


if __name__ == "__main__":
    main()
