"""
Base Plate Model - cantilever strip thickness under the top-row anchor tension.
"""

import math
from typing import Dict, Any, List

from ..core.catalogs import snap_plate_thickness
from ..core.constants import ALLOWABLE_STRESS_FACTOR, PLATE_MIN_CLEAR, PLATE_MIN_ROW_SPACING
from ..core.data_models import AnchorTension, BasePlateResult, DesignInputs
from .anchor_engine import compute_anchor_tensions


def top_row_tension(tensions: List[AnchorTension]) -> float:
    """Largest tension among anchors above the neutral axis, floored at 0 (N)"""
    return max([t.tension for t in tensions if t.y > 0] + [0.0])


def compute_plate_thickness(t_row: float, a_mm: float, s_mm: float, plate_fy: float) -> float:
    """
    Required plate thickness (mm) from a cantilever strip.

    m = T_row·a / s (N·mm/mm), t = √(6m / σa)
    """
    sigma_allow = ALLOWABLE_STRESS_FACTOR * plate_fy
    m = t_row * a_mm / max(1.0, s_mm)
    return math.sqrt(6.0 * m / max(sigma_allow, 1.0))


class BasePlateEngine:
    """
    Base plate bending checker.
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

    def calculate(self, moment: float) -> BasePlateResult:
        """Check the adopted plate thickness for the per-column moment (N·m)."""
        self.calculations = []
        plate = self.inputs.plate
        layout = self.inputs.anchor

        tensions, _ = compute_anchor_tensions(moment, layout.gauge, layout.pitch)
        t_row = top_row_tension(tensions)
        a_mm = max(PLATE_MIN_CLEAR, plate.a_clear)
        s_mm = max(PLATE_MIN_ROW_SPACING, layout.pitch)
        sigma_allow = ALLOWABLE_STRESS_FACTOR * plate.plate_fy
        m = t_row * a_mm / max(1.0, s_mm)
        t_required = compute_plate_thickness(t_row, a_mm, s_mm, plate.plate_fy)

        self._add_calc_step(
            "Base plate thickness",
            f"T_row = {t_row:.1f} N, a = {a_mm:.0f} mm, s = {s_mm:.0f} mm\n"
            f"m = T_row × a / s = {m:.1f} N·mm/mm\n"
            f"σa = 2/3 × {plate.plate_fy:.0f} = {sigma_allow:.2f} N/mm²\n"
            f"t_req = √(6m / σa) = {t_required:.2f} mm\n"
            f"t_adopted = {plate.thickness:.0f} mm",
            "Cantilever strip, concentrated load"
        )

        result = BasePlateResult(
            element_type="Base Plate",
            utilization=t_required / plate.thickness if plate.thickness > 0 else float("inf"),
            t_row=t_row,
            a_mm=a_mm,
            s_mm=s_mm,
            moment_per_width=m,
            sigma_allow=sigma_allow,
            t_required=t_required,
            t_adopted=plate.thickness,
            t_suggested=snap_plate_thickness(t_required),
            calculations=self.calculations,
        )
        if plate.thickness < t_required:
            result.status = "FAIL"
            result.warnings.append(
                f"Plate {plate.thickness:.0f} mm thinner than required {t_required:.1f} mm"
            )
        return result
