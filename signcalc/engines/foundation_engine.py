"""
Foundation Stability Model - pad footing under one column of a free-standing sign.

Evaluates ground contact, bearing, overturning and sliding for a footing
geometry. The same evaluation is used by the design check and by the
footing optimizer, so both always agree.
"""

import math
from typing import Dict, Any, List, Tuple

from ..core.constants import CONCRETE_BEARING_FACTOR, EPS, PASSIVE_KP
from ..core.data_models import (
    ContactMode,
    DesignInputs,
    FoundationGeometry,
    FoundationInput,
    FoundationResult,
    LoadState,
    StabilityResult,
)


def classify_contact(eccentricity: float, width_b: float) -> Tuple[ContactMode, float]:
    """
    Contact state and effective bearing width b_eff.

    e ≤ B/6: full contact, b_eff = B
    B/6 < e < B/2: partial contact, b_eff = 3(B/2 - e)
    e ≥ B/2: no stable contact, b_eff = 0
    """
    if eccentricity <= width_b / 6.0:
        return ContactMode.FULL, width_b
    if eccentricity < width_b / 2.0:
        return ContactMode.PARTIAL, max(3.0 * (width_b / 2.0 - eccentricity), 0.0)
    return ContactMode.NONE, 0.0


def bearing_pressures(
    vertical: float, eccentricity: float, geometry: FoundationGeometry,
    mode: ContactMode, b_eff: float,
) -> Tuple[float, float]:
    """(σmax, σmin) in kPa. σmax is infinite when there is no contact."""
    b, d = geometry.width_b, geometry.depth_d
    if mode == ContactMode.FULL:
        sigma_avg = vertical / max(b * d, EPS)
        ratio = 6.0 * eccentricity / max(b, EPS)
        return sigma_avg * (1 + ratio) / 1000.0, sigma_avg * (1 - ratio) / 1000.0
    if mode == ContactMode.PARTIAL:
        return 2.0 * vertical / max(b_eff * d, EPS) / 1000.0, 0.0
    return math.inf, 0.0


def bearing_allowables(foundation: FoundationInput) -> Tuple[float, float, float]:
    """(soil, concrete, governing) allowable bearing pressure in kPa"""
    qa_soil = foundation.soil_qa / max(foundation.gamma_bearing, EPS)
    qa_conc = CONCRETE_BEARING_FACTOR * foundation.fc * 1000.0
    return qa_soil, qa_conc, min(qa_soil, qa_conc)


def passive_resistance(foundation: FoundationInput, geometry: FoundationGeometry) -> Tuple[float, float, float]:
    """
    Passive earth resistance in front of the footing.

    Returns:
        (Pp before reduction, Pp after reduction η, moment Pp·z/3)
    """
    z = max(0.0, geometry.embed_depth_z)
    if z <= 0 or not (foundation.use_passive and foundation.front_soil_available):
        return 0.0, 0.0, 0.0
    gamma = foundation.soil_unit_w * 1000.0
    pp_raw = 0.5 * PASSIVE_KP * gamma * geometry.depth_d * z * z
    pp = pp_raw * foundation.eta_passive
    return pp_raw, pp, pp * z / 3.0


def evaluate_foundation(
    geometry: FoundationGeometry,
    foundation: FoundationInput,
    moment: float,
    horizontal: float,
    superstructure_weight: float,
) -> StabilityResult:
    """
    Full stability evaluation of one footing geometry.

    Args:
        geometry: Footing geometry to evaluate
        foundation: Soil, material and acceptance criteria
        moment: Base moment per column (N·m)
        horizontal: Horizontal force per column (N)
        superstructure_weight: Sign self weight per column (N)

    Returns:
        StabilityResult. Deterministic for identical arguments.
    """
    area = geometry.effective_area
    w_conc = foundation.conc_unit_w * 1000.0 * area * geometry.thickness_h
    w_cover = foundation.soil_unit_w * 1000.0 * area * foundation.cover_t
    vertical = w_conc + w_cover + superstructure_weight

    b = geometry.width_b
    e = abs(moment) / max(vertical, EPS)
    mode, b_eff = classify_contact(e, b)

    sigma_max, sigma_min = bearing_pressures(vertical, e, geometry, mode, b_eff)
    no_uplift = mode == ContactMode.FULL and sigma_min >= 0

    qa_soil, qa_conc, qa_allow = bearing_allowables(foundation)
    bearing_ok = math.isfinite(sigma_max) and sigma_max <= qa_allow

    pp_raw, pp, m_passive = passive_resistance(foundation, geometry)

    lever = max(b / 2.0 - e, 0.0)
    resisting = vertical * lever + m_passive
    fs_ot = resisting / max(abs(moment), EPS)
    overturning_ok = fs_ot >= foundation.req_fs_ot and (foundation.allow_uplift or no_uplift)

    contact_ratio = min(max(b_eff / b, 0.0), 1.0) if b > 0 else 0.0
    if foundation.use_contact_ratio_for_friction:
        n_eff = vertical * contact_ratio
    else:
        n_eff = vertical
    sliding = foundation.mu * n_eff + pp
    fs_sl = sliding / max(horizontal, EPS)
    sliding_ok = fs_sl >= foundation.req_fs_sl

    achievement = min(
        fs_ot / max(foundation.req_fs_ot, EPS),
        fs_sl / max(foundation.req_fs_sl, EPS),
        qa_allow / max(sigma_max, EPS),
    )

    return StabilityResult(
        geometry=geometry,
        effective_area=area,
        volume=area * geometry.thickness_h,
        vertical_load=vertical,
        eccentricity=e,
        contact_mode=mode,
        effective_width=b_eff,
        contact_ratio=contact_ratio,
        sigma_max=sigma_max,
        sigma_min=sigma_min,
        no_uplift=no_uplift,
        qa_allow_soil=qa_soil,
        qa_allow_conc=qa_conc,
        qa_allow=qa_allow,
        bearing_ok=bearing_ok,
        passive_raw=pp_raw,
        passive_force=pp,
        passive_moment=m_passive,
        lever_arm=lever,
        resisting_moment=resisting,
        fs_overturning=fs_ot,
        overturning_ok=overturning_ok,
        effective_vertical=n_eff,
        sliding_resistance=sliding,
        fs_sliding=fs_sl,
        sliding_ok=sliding_ok,
        ok=bearing_ok and overturning_ok and sliding_ok,
        achievement_ratio=achievement,
    )


def overturning_note(stability: StabilityResult) -> str:
    if stability.contact_mode == ContactMode.FULL:
        return "Lever arm = B/2 - e (full compression)"
    return "Lever arm = max(B/2 - e, 0) (partial contact)"


def sliding_note(stability: StabilityResult, foundation: FoundationInput) -> str:
    if not foundation.use_contact_ratio_for_friction:
        return "Sliding: N_eff = N (contact ratio not applied)"
    if stability.contact_mode == ContactMode.FULL:
        return "Sliding: N_eff = N (full compression)"
    return (
        f"Sliding: N_eff = N × contact ratio "
        f"(b_eff/B = {stability.contact_ratio:.2f}, partial contact)"
    )


class FoundationEngine:
    """
    Footing stability checker for free-standing signs.
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

    def calculate(self, loads: LoadState) -> FoundationResult:
        self.calculations = []
        foundation = self.inputs.foundation
        geometry = foundation.geometry

        s = evaluate_foundation(
            geometry,
            foundation,
            loads.moment_per_column,
            loads.force_per_column,
            loads.vertical_per_column,
        )

        self._add_calc_step(
            "Footing vertical load and eccentricity",
            f"Shape: {geometry.shape.value}, B = {geometry.width_b:.2f} m, D = {geometry.depth_d:.2f} m, "
            f"H = {geometry.thickness_h:.2f} m\n"
            f"A = {s.effective_area:.3f} m²\n"
            f"N = {s.vertical_load:.0f} N\n"
            f"e = |M| / N = {abs(loads.moment_per_column):.0f} / {s.vertical_load:.0f} = {s.eccentricity:.3f} m\n"
            f"Contact: {s.contact_mode.value}, b_eff = {s.effective_width:.3f} m",
            "Rigid footing, linear soil pressure"
        )
        self._add_calc_step(
            "Bearing pressure",
            f"σmax = {s.sigma_max:.1f} kPa, σmin = {s.sigma_min:.1f} kPa\n"
            f"qa = min({s.qa_allow_soil:.1f}, {s.qa_allow_conc:.1f}) = {s.qa_allow:.1f} kPa",
            "Soil allowable / γ and 0.25 Fc"
        )
        self._add_calc_step(
            "Overturning",
            f"Pp = {s.passive_force:.0f} N (raw {s.passive_raw:.0f} N), M_passive = {s.passive_moment:.0f} N·m\n"
            f"Mr = N × {s.lever_arm:.3f} + M_passive = {s.resisting_moment:.0f} N·m\n"
            f"FS_OT = {s.fs_overturning:.2f} (required {foundation.req_fs_ot:.2f})",
            overturning_note(s)
        )
        self._add_calc_step(
            "Sliding",
            f"R = μ × N_eff + Pp = {foundation.mu:.2f} × {s.effective_vertical:.0f} + {s.passive_force:.0f} "
            f"= {s.sliding_resistance:.0f} N\n"
            f"FS_SL = {s.fs_sliding:.2f} (required {foundation.req_fs_sl:.2f})",
            sliding_note(s, foundation)
        )

        result = FoundationResult(
            element_type="Foundation",
            utilization=1.0 / s.achievement_ratio if s.achievement_ratio > 0 else float("inf"),
            status="OK" if s.ok else "FAIL",
            stability=s,
            overturning_note=overturning_note(s),
            sliding_note=sliding_note(s, foundation),
            calculations=self.calculations,
        )
        if not s.bearing_ok:
            result.warnings.append("Bearing pressure exceeds allowable")
        if not s.overturning_ok:
            result.warnings.append(f"Overturning FS {s.fs_overturning:.2f} below required or uplift not allowed")
        if not s.sliding_ok:
            result.warnings.append(f"Sliding FS {s.fs_sliding:.2f} below required")
        return result
