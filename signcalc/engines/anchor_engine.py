"""
Anchor Group Model - rigid-plate tension distribution, concrete cone capacity,
tension/shear interaction and detailing checks.
"""

import math
from typing import Dict, Any, List, Tuple

import numpy as np

from ..core.catalogs import AnchorSpec, required_embedment
from ..core.constants import (
    ANCHOR_CONC_K,
    ANCHOR_CONC_PHI,
    ANCHOR_CONC_PSI_CRACK,
    ANCHOR_CONC_PSI_EDGE,
    ANCHOR_LAYOUT_COUNT,
    ANCHOR_SHEAR_DIVISOR,
)
from ..core.data_models import (
    AnchorInput,
    AnchorResult,
    AnchorTension,
    DesignInputs,
    LoadState,
    SignType,
)

# 2×2 layout: id, x sign, y sign
ANCHOR_LAYOUT = (
    ("UL", -1.0, 1.0),
    ("UR", 1.0, 1.0),
    ("LL", -1.0, -1.0),
    ("LR", 1.0, -1.0),
)


def compute_anchor_tensions(
    moment: float, gauge: float, pitch: float
) -> Tuple[List[AnchorTension], float]:
    """
    Distribute the base moment over the four anchors, Tᵢ = M·yᵢ / Σy².

    Args:
        moment: Base moment per column (N·m)
        gauge: Vertical spacing of anchor rows (mm)
        pitch: Horizontal spacing of anchor columns (mm)

    Returns:
        (tensions, Σy² in m²). Compression is reported as negative tension.
    """
    signs = np.array([[sx, sy] for _, sx, sy in ANCHOR_LAYOUT])
    x_mm = signs[:, 0] * pitch / 2.0
    y_mm = signs[:, 1] * gauge / 2.0
    y_m = y_mm / 1000.0
    sum_y2 = float(np.sum(y_m ** 2))
    if sum_y2 > 0:
        tension = moment * y_m / sum_y2
    else:
        tension = np.zeros(ANCHOR_LAYOUT_COUNT)

    tensions = [
        AnchorTension(anchor_id=anchor_id, x=float(x), y=float(y), tension=float(t))
        for (anchor_id, _, _), x, y, t in zip(ANCHOR_LAYOUT, x_mm, y_mm, tension)
    ]
    return tensions, sum_y2


def max_tension(tensions: List[AnchorTension]) -> float:
    """Largest anchor tension, compression ignored (N)"""
    return max([max(0.0, t.tension) for t in tensions] + [0.0])


def concrete_tension_capacity(fc: float, hef: float) -> float:
    """
    Concrete-side tension capacity of one anchor (N).
    Ta_conc = k·√Fc·hef^1.5·φ·ψe·ψc, zero without concrete strength or embedment.
    """
    if fc <= 0 or hef <= 0:
        return 0.0
    return (
        ANCHOR_CONC_K
        * math.sqrt(fc)
        * hef ** 1.5
        * ANCHOR_CONC_PHI
        * ANCHOR_CONC_PSI_EDGE
        * ANCHOR_CONC_PSI_CRACK
    )


def interaction_ratio(t_max: float, ta_eff: float, shear: float, va: float) -> float:
    """Linear tension + shear interaction. Pass when < 1."""
    tension_term = t_max / ta_eff if ta_eff > 0 else float("inf")
    shear_term = shear / va if va > 0 else 0.0
    return tension_term + shear_term


def detailing_checks(
    anchor: AnchorSpec, layout: AnchorInput, sign_type: SignType
) -> Tuple[bool, bool, bool]:
    """(edge1_ok, edge2_ok, spacing_ok). The second edge is waived for projecting signs."""
    edge1_ok = layout.edge1 >= anchor.required_edge
    edge2_ok = True if sign_type == SignType.PROJECTING else layout.edge2 >= anchor.required_edge
    spacing_ok = layout.spacing >= anchor.required_spacing
    return edge1_ok, edge2_ok, spacing_ok


def check_anchor(
    anchor: AnchorSpec,
    layout: AnchorInput,
    sign_type: SignType,
    moment: float,
    force_per_column: float,
    fc: float,
    hef: float,
) -> AnchorResult:
    """Full anchor group check for one catalog anchor and embedment."""
    tensions, sum_y2 = compute_anchor_tensions(moment, layout.gauge, layout.pitch)
    t_max = max_tension(tensions)
    shear = force_per_column / ANCHOR_SHEAR_DIVISOR

    ta_conc = concrete_tension_capacity(fc, hef)
    ta_eff = min(anchor.ta, ta_conc)
    ratio_steel = t_max / anchor.ta if anchor.ta > 0 else float("inf")
    ratio_conc = t_max / ta_conc if ta_conc > 0 else float("inf")
    ratio = interaction_ratio(t_max, ta_eff, shear, anchor.va)

    edge1_ok, edge2_ok, spacing_ok = detailing_checks(anchor, layout, sign_type)
    hef_required = required_embedment(anchor, sign_type == SignType.FREESTANDING)

    result = AnchorResult(
        element_type="Anchor Bolts",
        utilization=ratio,
        anchor=anchor,
        tensions=tensions,
        sum_y2=sum_y2,
        t_max=t_max,
        shear_per_anchor=shear,
        ta_conc=ta_conc,
        ta_eff=ta_eff,
        ratio_steel=ratio_steel,
        ratio_conc=ratio_conc,
        ratio_combined=ratio,
        combined_ok=ratio < 1.0,
        min_edge=anchor.required_edge,
        min_spacing=anchor.required_spacing,
        edge1_ok=edge1_ok,
        edge2_ok=edge2_ok,
        spacing_ok=spacing_ok,
        hef=hef,
        hef_required=hef_required,
        hef_ok=hef >= hef_required,
    )

    if not result.combined_ok:
        result.warnings.append(f"Tension/shear interaction {ratio:.2f} ≥ 1.0")
    if not (edge1_ok and edge2_ok):
        result.warnings.append(f"Edge distance below {anchor.required_edge:.0f} mm")
    if not spacing_ok:
        result.warnings.append(f"Anchor spacing below {anchor.required_spacing:.0f} mm")
    if not result.hef_ok:
        result.warnings.append(f"Embedment {hef:.0f} mm below required {hef_required:.0f} mm")

    passed = result.combined_ok and edge1_ok and edge2_ok and spacing_ok and result.hef_ok
    result.status = "OK" if passed else "FAIL"
    return result


class AnchorEngine:
    """
    Anchor group checker for the selected anchor and accepted embedment.
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

    def calculate(self, loads: LoadState) -> AnchorResult:
        self.calculations = []
        anchor = self.inputs.active_anchor()
        layout = self.inputs.anchor
        fc = self.inputs.foundation.fc

        if anchor is None:
            tensions, sum_y2 = compute_anchor_tensions(
                loads.moment_per_column, layout.gauge, layout.pitch
            )
            result = AnchorResult(
                element_type="Anchor Bolts",
                utilization=float("inf"),
                status="FAIL",
                tensions=tensions,
                sum_y2=sum_y2,
                t_max=max_tension(tensions),
                shear_per_anchor=loads.force_per_column / ANCHOR_SHEAR_DIVISOR,
                ratio_combined=float("inf"),
                combined_ok=False,
                hef=layout.embed,
            )
            result.warnings.append("Anchor catalog is empty, no anchor to check")
            self._add_calc_step(
                "Anchor tension distribution",
                f"Σy² = {sum_y2:.4f} m², Tmax = {result.t_max:.1f} N\n"
                "No catalog anchor available",
                "Rigid base plate, T = M·y / Σy²"
            )
            result.calculations = self.calculations
            return result

        result = check_anchor(
            anchor,
            layout,
            self.inputs.panel.sign_type,
            loads.moment_per_column,
            loads.force_per_column,
            fc,
            layout.embed,
        )

        self._add_calc_step(
            "Anchor tension distribution",
            f"Layout: {ANCHOR_LAYOUT_COUNT} anchors, gauge {layout.gauge:.0f} mm, pitch {layout.pitch:.0f} mm\n"
            f"Σy² = {result.sum_y2:.4f} m²\n"
            + "\n".join(f"T_{t.anchor_id} = {t.tension:.1f} N" for t in result.tensions)
            + f"\nTmax = {result.t_max:.1f} N",
            "Rigid base plate, T = M·y / Σy²"
        )
        self._add_calc_step(
            "Anchor capacity",
            f"Anchor: {anchor.name}, Ta = {anchor.ta:.0f} N, Va = {anchor.va:.0f} N\n"
            f"Ta,conc = 7.0 × √{fc:.1f} × {layout.embed:.0f}^1.5 × 0.75 × 0.85 × 0.85 = {result.ta_conc:.0f} N\n"
            f"Ta,eff = {result.ta_eff:.0f} N\n"
            f"V = Fh / {ANCHOR_SHEAR_DIVISOR} = {result.shear_per_anchor:.1f} N\n"
            f"η = Tmax/Ta,eff + V/Va = {result.ratio_combined:.3f}",
            "Simplified concrete cone, linear interaction"
        )
        self._add_calc_step(
            "Anchor detailing",
            f"Edge ≥ {result.min_edge:.0f} mm: e1 {layout.edge1:.0f} ({'OK' if result.edge1_ok else 'NG'}), "
            f"e2 {layout.edge2:.0f} ({'OK' if result.edge2_ok else 'NG'})\n"
            f"Spacing ≥ {result.min_spacing:.0f} mm: {layout.spacing:.0f} ({'OK' if result.spacing_ok else 'NG'})\n"
            f"hef ≥ {result.hef_required:.0f} mm: {result.hef:.0f} ({'OK' if result.hef_ok else 'NG'})",
            "Catalog minimums, else 1.5d / 3d"
        )

        result.calculations = self.calculations
        return result
