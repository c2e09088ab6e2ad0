"""Engine dispatcher: pick the HF or V/UHF solver, then apply the link budget.

predict_path routes on frequency (below 30 MHz -> HF) and predict_link turns
the path loss into received power, sensitivity and margin. Both are pure and
stateless; the sampling layer calls predict_link once per map cell.
"""

from typing import Optional

from .contracts import Environment, LinkResult, PathContext, PathResult, Receiver, Transmitter
from .hf_model import HFModelParams, solve_hf
from .link_budget import eirp_dbm, link_margin_db, received_power_dbm, sensitivity_dbm
from .vuhf_model import VUHFModelParams, solve_vuhf

HF_VUHF_CROSSOVER_MHZ = 30.0


def is_hf(frequency_mhz: float) -> bool:
    return frequency_mhz < HF_VUHF_CROSSOVER_MHZ


def predict_path(
    transmitter: Transmitter,
    receiver: Receiver,
    environment: Environment,
    context: PathContext,
    hf_params: Optional[HFModelParams] = None,
    vuhf_params: Optional[VUHFModelParams] = None,
) -> PathResult:
    """Path loss and mode from the solver matching the transmitter frequency."""
    if is_hf(transmitter.frequency_mhz):
        return solve_hf(transmitter, receiver, environment, context, hf_params)
    return solve_vuhf(transmitter, receiver, environment, context, vuhf_params)


def predict_link(
    transmitter: Transmitter,
    receiver: Receiver,
    environment: Environment,
    context: PathContext,
    hf_params: Optional[HFModelParams] = None,
    vuhf_params: Optional[VUHFModelParams] = None,
    misc_loss_db: float = 0.0,
) -> LinkResult:
    """Received power, sensitivity and margin for one sample point.

    BLOCKED paths carry their sentinel loss through unchanged, so pr_dbm and
    margin_db stay finite and thresholdable by the display layer.
    """
    path = predict_path(transmitter, receiver, environment, context, hf_params, vuhf_params)
    return link_from_path(transmitter, receiver, path, misc_loss_db)


def link_from_path(
    transmitter: Transmitter,
    receiver: Receiver,
    path: PathResult,
    misc_loss_db: float = 0.0,
) -> LinkResult:
    """Link budget for an already-solved path (no second model evaluation)."""
    eirp = eirp_dbm(transmitter.power_w, transmitter.gain_dbi, transmitter.cable_loss_db)
    pr = received_power_dbm(eirp, receiver.gain_dbi, receiver.cable_loss_db, path.loss_db, misc_loss_db)
    sens = sensitivity_dbm(receiver)
    return LinkResult(
        pr_dbm=pr,
        sensitivity_dbm=sens,
        margin_db=link_margin_db(pr, sens),
        mode=path.mode,
    )
