"""
Wind Load Calculator for sign panels.
Velocity pressure from the reference wind speed, modifier chain and panel force.
"""

from typing import Dict, Any, List, Sequence

import pandas as pd

from ..core.constants import (
    ALLOWABLE_STRESS_FACTOR,
    EPS_MODULUS,
    PROJECTING_LEVER_ARM,
    WIND_Q0_FACTOR,
    WIND_SWEEP_SPEEDS,
)
from ..core.data_models import (
    DesignInputs,
    PanelInput,
    SignType,
    WindCoefficientMode,
    WindInput,
    WindResult,
)
from .load_combiner import automatic_total, effective_column_count, self_weight


def basic_velocity_pressure(v0: float) -> float:
    """q0 = 0.613 V² (N/m²)"""
    return WIND_Q0_FACTOR * v0 * v0


def effective_modifiers(wind: WindInput) -> Dict[str, float]:
    """Kz, Gf, Iw, Kd, Kt as applied; all 1.0 when Cf already includes them"""
    if wind.cf_mode == WindCoefficientMode.CF_INCLUDES_ALL:
        return {"Kz": 1.0, "Gf": 1.0, "Iw": 1.0, "Kd": 1.0, "Kt": 1.0}
    return {"Kz": wind.kz, "Gf": wind.gf, "Iw": wind.iw, "Kd": wind.kd, "Kt": wind.kt}


def design_velocity_pressure(wind: WindInput, v0: float = None) -> float:
    """qz = q0 × Kz·Gf·Iw·Kd·Kt (N/m²). ``v0`` overrides the input speed."""
    qz = basic_velocity_pressure(wind.v0 if v0 is None else v0)
    for value in effective_modifiers(wind).values():
        qz *= value
    return qz


def panel_wind_force(panel: PanelInput, wind: WindInput, v0: float = None) -> float:
    """Total wind force on the panel, Fw = qz × Cf × W × H × area factor (N)"""
    return design_velocity_pressure(wind, v0) * wind.shape_cf * panel.area


class WindEngine:
    """
    Wind load calculator for a single sign panel.
    Keeps an audit trail of the calculation steps.
    """

    def __init__(self, inputs: DesignInputs):
        self.inputs = inputs
        self.calculations: List[Dict[str, Any]] = []

    def _add_calc_step(self, description: str, calculation: str, reference: str = ""):
        """Add a calculation step to the audit trail"""
        self.calculations.append({
            "description": description,
            "calculation": calculation,
            "reference": reference
        })

    def calculate(self) -> WindResult:
        """
        Main calculation method for panel wind load.
        Returns WindResult with velocity pressures and total force.
        """
        self.calculations = []

        panel = self.inputs.panel
        wind = self.inputs.wind

        q0 = basic_velocity_pressure(wind.v0)
        self._add_calc_step(
            "Basic velocity pressure",
            f"q0 = 0.613 × V0² = 0.613 × {wind.v0:.1f}² = {q0:.1f} N/m²",
            "Dynamic pressure"
        )

        modifiers = effective_modifiers(wind)
        qz = design_velocity_pressure(wind)
        factors = " × ".join(f"{value:.2f}" for value in modifiers.values())
        self._add_calc_step(
            "Design velocity pressure",
            f"Cf mode: {wind.cf_mode.value}\n"
            f"qz = q0 × Kz × Gf × Iw × Kd × Kt\n"
            f"qz = {q0:.1f} × {factors} = {qz:.1f} N/m²",
            "Modifier chain"
        )

        area = panel.area
        force = qz * wind.shape_cf * area
        self._add_calc_step(
            "Panel wind force",
            f"A = {panel.width:.2f} × {panel.height:.2f} × {panel.area_factor:.2f} = {area:.2f} m²\n"
            f"Fw = qz × Cf × A = {qz:.1f} × {wind.shape_cf:.2f} × {area:.2f} = {force:.1f} N",
            "Force on a flat sign panel"
        )

        return WindResult(
            element_type="Wind Load",
            q0=q0,
            qz=qz,
            modifiers=modifiers,
            shape_cf=wind.shape_cf,
            panel_area=area,
            wind_force=force,
            calculations=self.calculations,
        )


def wind_speed_sweep(
    inputs: DesignInputs, speeds: Sequence[float] = WIND_SWEEP_SPEEDS
) -> pd.DataFrame:
    """
    Per-column bending utilisation of the selected section against wind speed.

    Pure wind combination only: the manual force override is not applied.
    Free-standing signs use the centre-of-gravity height as lever arm, all
    other types the projecting bracket arm.

    Returns:
        DataFrame with columns ``V`` (m/s) and ``eta`` (σ / σa)
    """
    panel = inputs.panel
    section = inputs.active_section()
    modulus = section.modulus(inputs.axis) if section is not None else 0.0
    sigma_allow = ALLOWABLE_STRESS_FACTOR * inputs.member.fy
    weight = self_weight(panel.panel_kg)
    n_col = effective_column_count(inputs.member)
    lever = panel.cg_height if panel.sign_type == SignType.FREESTANDING else PROJECTING_LEVER_ARM

    rows = []
    for v in speeds:
        fw = panel_wind_force(panel, inputs.wind, v0=v)
        total = automatic_total(panel.sign_type, fw, weight, inputs.wind.seismic_c0)
        moment = total / n_col * lever
        sigma = moment / max(modulus, EPS_MODULUS) / 1e6
        rows.append({"V": v, "eta": sigma / sigma_allow})

    return pd.DataFrame(rows, columns=["V", "eta"])
