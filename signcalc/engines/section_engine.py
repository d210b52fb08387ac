"""
Section Capacity Checker - bending stress and slenderness of the support member.
"""

from typing import Dict, Any, List, Optional

from ..core.catalogs import SectionSpec
from ..core.constants import (
    ALLOWABLE_STRESS_FACTOR,
    DEFAULT_R_CM,
    DEFAULT_Z_CM3,
    EPS_MODULUS,
    EPS_RADIUS,
    SLENDERNESS_LIMIT,
)
from ..core.data_models import DesignInputs, LoadState, SectionResult


def allowable_stress(fy: float) -> float:
    """σa = (2/3) Fy (N/mm²)"""
    return ALLOWABLE_STRESS_FACTOR * fy


def bending_stress(moment: float, modulus: float) -> float:
    """σ = M / Z in N/mm² for M in N·m and Z in m³"""
    return moment / max(modulus, EPS_MODULUS) / 1e6


def slenderness(k_factor: float, length: float, radius: float) -> float:
    """λ = K·L / r"""
    return k_factor * length / max(radius, EPS_RADIUS)


def check_section(
    section: Optional[SectionSpec],
    axis: str,
    moment: float,
    fy: float,
    k_factor: float,
    length: float,
) -> SectionResult:
    """Stress ratio and slenderness of one section under a base moment."""
    if section is not None:
        modulus = section.modulus(axis)
        radius = section.radius(axis)
    else:
        modulus = DEFAULT_Z_CM3 * 1e-6
        radius = DEFAULT_R_CM * 0.01

    sigma = bending_stress(moment, modulus)
    sigma_allow = allowable_stress(fy)
    ratio = sigma / sigma_allow if sigma_allow > 0 else float("inf")
    lam = slenderness(k_factor, length, radius)

    result = SectionResult(
        element_type="Support Member",
        section=section,
        axis=axis,
        modulus=modulus,
        radius=radius,
        sigma=sigma,
        sigma_allow=sigma_allow,
        ratio=ratio,
        stress_ok=ratio < 1.0,
        slenderness=lam,
        slenderness_ok=lam <= SLENDERNESS_LIMIT,
        utilization=ratio,
    )
    if not result.stress_ok:
        result.warnings.append(f"Bending stress ratio {ratio:.2f} ≥ 1.0")
    if not result.slenderness_ok:
        result.warnings.append(f"Slenderness {lam:.0f} exceeds {SLENDERNESS_LIMIT:.0f}")
    result.status = "OK" if result.stress_ok and result.slenderness_ok else "FAIL"
    return result


class SectionEngine:
    """
    Support member checker for the selected catalog section.
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

    def calculate(self, loads: LoadState) -> SectionResult:
        """Check the active section against the per-column moment."""
        self.calculations = []
        member = self.inputs.member
        section = self.inputs.active_section()

        result = check_section(
            section,
            self.inputs.axis,
            loads.moment_per_column,
            member.fy,
            member.k_factor,
            member.length,
        )

        name = section.name if section is not None else "(none)"
        self._add_calc_step(
            "Bending stress",
            f"Section: {name}, axis {result.axis}\n"
            f"Z = {result.modulus * 1e6:.2f} cm³\n"
            f"σ = M / Z = {loads.moment_per_column:.1f} / {result.modulus:.3e} / 1e6 = {result.sigma:.2f} N/mm²\n"
            f"σa = 2/3 × {member.fy:.0f} = {result.sigma_allow:.2f} N/mm²\n"
            f"σ/σa = {result.ratio:.3f}",
            "Allowable stress design, short term"
        )
        self._add_calc_step(
            "Slenderness",
            f"λ = K·L / r = {member.k_factor:.2f} × {member.length:.2f} / {result.radius:.4f} = {result.slenderness:.1f}\n"
            f"Limit: {SLENDERNESS_LIMIT:.0f}",
            "Slenderness limit"
        )

        result.calculations = self.calculations
        return result
