"""Link budget utilities.

Functions:
- eirp_dbm: EIRP from Tx power (W), antenna gain and cable loss.
- noise_floor_dbm: thermal noise floor from bandwidth and NF (290 K).
- sensitivity_dbm: noise floor plus the required SNR of a receiver.
- received_power_dbm: Pr = EIRP + G_rx - (PL + L_misc) - L_rx_cable.
- link_margin_db: Pr minus sensitivity; never clamped.
"""

import math

from .contracts import Receiver
from .geometry import floor_positive

# kT at 290 K in dBm/Hz
THERMAL_NOISE_DBM_PER_HZ = -174.0
_MIN_POWER_W = 1e-15


def eirp_dbm(power_w: float, gain_dbi: float, cable_loss_db: float) -> float:
    """Compute EIRP in dBm.

    EIRP [dBm] = 10 log10(P_W * 1000) + G_tx - L_cable.
    """
    return 10.0 * math.log10(floor_positive(power_w, _MIN_POWER_W) * 1000.0) + gain_dbi - cable_loss_db


def noise_floor_dbm(bandwidth_hz: float, noise_figure_db: float) -> float:
    """Thermal noise floor in dBm: N = -174 + 10 log10(max(B, 1)) + NF."""
    return THERMAL_NOISE_DBM_PER_HZ + 10.0 * math.log10(floor_positive(bandwidth_hz, 1.0)) + noise_figure_db


def sensitivity_dbm(receiver: Receiver) -> float:
    """Minimum received power for the receiver's required SNR."""
    return noise_floor_dbm(receiver.bandwidth_hz, receiver.noise_figure_db) + receiver.required_snr_db


def received_power_dbm(
    eirp: float,
    rx_gain_dbi: float,
    rx_cable_loss_db: float,
    path_loss_db: float,
    misc_loss_db: float = 0.0,
) -> float:
    """Received power in dBm.

    Pr = EIRP + G_rx - (PL + L_misc) - L_rx_cable
    """
    return eirp + rx_gain_dbi - (path_loss_db + misc_loss_db) - rx_cable_loss_db


def link_margin_db(pr_dbm: float, sens_dbm: float) -> float:
    """Margin above sensitivity. Negative means no coverage."""
    return pr_dbm - sens_dbm
