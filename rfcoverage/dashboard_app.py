"""Streamlit control panel for coverage predictions (simple MVP).

Renders:
- Sidebar controls: band preset, transmitter, environment, HF context
- Folium map with the transmitter marker and the radio-horizon ring
- Single-point link budget for a chosen distance
- Coverage margin PNG (matplotlib) and KPIs for the sampled grid
- Distance sweep as a pandas table with CSV download

Usage:
    streamlit run rfcoverage/dashboard_app.py

Colors and the paint cutoff come from DisplayPolicy (config file, if any);
the engine itself has no display thresholds.
"""

import tempfile
from pathlib import Path

import streamlit as st
import numpy as np
import pandas as pd
import folium
from streamlit_folium import st_folium

from rfcoverage.api import build_link_response
from rfcoverage.config import get_config
from rfcoverage.contracts import EnvironmentClass, GroundClass, HFContext, HFPropagationMode, Transmitter
from rfcoverage.coverage import sample_coverage
from rfcoverage.geometry import radio_horizon_km
from rfcoverage.heatmaps import render_coverage_map
from rfcoverage.kpi import coverage_stats
from rfcoverage.presets import BAND_PRESETS, hf_context_from_preset, make_environment, receiver_from_preset
from rfcoverage.scenario import Scenario, rows_to_table, run_scenario


def _color_for_margin(margin_db: float, green_thresh: float = 10.0, red_thresh: float = 0.0) -> str:
    if margin_db < red_thresh:
        return "#e74c3c"  # red
    if margin_db >= green_thresh:
        return "#2ecc71"  # green
    return "#f1c40f"  # yellow


def main():
    st.set_page_config(page_title="RF Coverage", layout="wide")
    st.title("RF Coverage and Link Budget")
    cfg = get_config()

    with st.sidebar:
        st.header("Band")
        labels = [p.label for p in BAND_PRESETS]
        preset = BAND_PRESETS[labels.index(st.selectbox("Preset", labels, index=3))]

        st.header("Transmitter")
        st.markdown("Site coordinates (WGS-84)")
        tx_lat = st.number_input("Latitude", value=41.000000, format="%.6f")
        tx_lon = st.number_input("Longitude", value=29.000000, format="%.6f")
        power_w = st.number_input("Power (W)", value=25.0, min_value=0.0)
        tx_gain = st.number_input("Antenna gain (dBi)", value=2.15)
        tx_cable = st.number_input("Cable loss (dB)", value=2.0, min_value=0.0)
        tx_height = st.number_input("Antenna height (m)", value=30.0, min_value=0.0)

        st.header("Environment")
        env_cls = st.selectbox("Class", [e.value for e in EnvironmentClass], index=0)
        k_factor = st.number_input("k-factor", value=1.33, min_value=0.5)
        ground = st.selectbox(
            "Ground", [g.value for g in GroundClass],
            index=list(GroundClass).index(preset.ground_class or GroundClass.WET),
        )

        hf = hf_context_from_preset(preset)
        if hf is not None:
            st.header("HF")
            fof2 = st.number_input("foF2 (MHz)", value=float(hf.fof2_mhz), min_value=0.0)
            nvis = st.checkbox("Allow NVIS", value=False)
            modes = [m.value for m in HFPropagationMode]
            mode = st.selectbox("Propagation mode", modes, index=modes.index(hf.propagation_mode.value))
            hf = HFContext(fof2_mhz=fof2, nvis_enabled=nvis, propagation_mode=mode)

        st.header("Grid")
        distance_km = st.number_input("Point distance (km)", value=5.0, min_value=0.0)
        radius_km = st.number_input("Map radius (km)", value=float(cfg.grid.radius_km), min_value=1.0)
        step_km = st.number_input("Map step (km)", value=float(cfg.grid.step_km), min_value=0.05)
        run_btn = st.button("Compute coverage", type="primary")

    tx = Transmitter(
        lat_deg=float(tx_lat),
        lon_deg=float(tx_lon),
        power_w=float(power_w),
        gain_dbi=float(tx_gain),
        cable_loss_db=float(tx_cable),
        height_m=float(tx_height),
        frequency_mhz=preset.frequency_mhz,
    )
    rx = receiver_from_preset(preset)
    env = make_environment(env_cls, k_factor=float(k_factor), ground_class=ground)

    col_map, col_link = st.columns([3, 2])
    with col_map:
        st.subheader("Location")
        horizon_km = radio_horizon_km(tx.height_m, rx.height_m, env.k_factor)
        m = folium.Map(location=[tx.lat_deg, tx.lon_deg], zoom_start=10, tiles="OpenStreetMap")
        folium.Marker([tx.lat_deg, tx.lon_deg], tooltip="Tx site", icon=folium.Icon(color="blue")).add_to(m)
        folium.Circle(
            [tx.lat_deg, tx.lon_deg],
            radius=horizon_km * 1000.0,
            color="gray",
            weight=1,
            fill=False,
            tooltip=f"Radio horizon {horizon_km:.1f} km",
        ).add_to(m)
        st_folium(m, height=350, width=None)

    with col_link:
        st.subheader("Point prediction")
        resp = build_link_response(tx, rx, env, float(distance_km), hf, cfg.hf, cfg.vuhf)
        color = _color_for_margin(resp["marginDb"])
        st.markdown(
            f"<div style='background:{color}; padding:8px; border-radius:4px;'>"
            f"<b>{resp['mode']}</b> margin {resp['marginDb']:.1f} dB</div>",
            unsafe_allow_html=True,
        )
        st.table(pd.DataFrame(
            [
                ("EIRP (dBm)", resp["eirpDbm"]),
                ("Path loss (dB)", resp["pathLossDb"]),
                ("Pr (dBm)", resp["prDbm"]),
                ("Sensitivity (dBm)", resp["sensitivityDbm"]),
                ("Radio horizon (km)", resp["radioHorizonKm"]),
            ],
            columns=["quantity", "value"],
        ))

    st.subheader("Distance sweep")
    max_km = max(float(radius_km), float(distance_km), 1.0)
    distances = np.round(np.linspace(max_km / 20.0, max_km, 20), 3).tolist()
    rows = run_scenario(Scenario(tx, rx, env, distances, hf), cfg.hf, cfg.vuhf)
    table = rows_to_table(rows)
    st.dataframe(pd.DataFrame(table[1:], columns=table[0]), use_container_width=True)
    st.download_button(
        label="Download CSV",
        data="\n".join([",".join(r) for r in table]),
        file_name="sweep.csv",
        mime="text/csv",
    )

    if run_btn:
        with st.spinner("Sampling coverage grid"):
            grid = sample_coverage(
                tx, rx, env, hf,
                radius_km=float(radius_km), step_km=float(step_km),
                hf_params=cfg.hf, vuhf_params=cfg.vuhf,
            )
        stats = coverage_stats(grid, cfg.display)
        with tempfile.TemporaryDirectory() as tmp:
            png = render_coverage_map(
                grid, cfg.display, Path(tmp) / "coverage_map.png",
                title=f"{preset.label}", tx_latlon=(tx.lat_deg, tx.lon_deg),
            )
            st.image(png.read_bytes(), caption="Coverage margin")
        st.write(
            f"Covered {stats['covered_fraction']:.1%} of {stats['cells']} cells "
            f"(painted {stats['painted_fraction']:.1%}, skipped {stats['skipped']})"
        )
        st.write(stats["modes"])


if __name__ == "__main__":
    main()
