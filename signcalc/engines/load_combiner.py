"""
Load Combiner - governing horizontal force, per-column share and base moment.
"""

from typing import Dict, Any, List

from ..core.constants import G, PROJECTING_LEVER_ARM, WALL_LEVER_ARM
from ..core.data_models import (
    DesignInputs,
    ForceUnit,
    LoadState,
    MemberInput,
    PanelInput,
    SignType,
    WindInput,
)


def self_weight(panel_kg: float) -> float:
    """W = m × g (N)"""
    return panel_kg * G


def automatic_total(sign_type: SignType, wind_force: float, weight: float, c0: float) -> float:
    """
    Automatic horizontal total.
    Free-standing signs take the larger of wind and seismic; projecting and
    wall signs carry both.
    """
    seismic = weight * c0
    if sign_type == SignType.FREESTANDING:
        return max(wind_force, seismic)
    return wind_force + seismic


def manual_total(wind: WindInput) -> float:
    """Manual horizontal force override in N (0 = none)"""
    force = max(0.0, wind.manual_force)
    if wind.force_unit == ForceUnit.KGF:
        return force * G
    return force


def effective_column_count(member: MemberInput) -> int:
    """
    Posts sharing the load. Posts without an inter-post connection do not
    share, so each is checked for the full load.
    """
    if member.has_inter_post_connection:
        return max(1, int(member.post_qty))
    return 1


def lever_arm(panel: PanelInput) -> float:
    """Moment lever arm (m) by mounting type"""
    if panel.sign_type == SignType.FREESTANDING:
        return panel.cg_height
    if panel.sign_type == SignType.PROJECTING:
        return PROJECTING_LEVER_ARM
    return WALL_LEVER_ARM


class LoadCombiner:
    """
    Combines wind, seismic and manual forces into the governing load case.
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

    def combine(self, wind_force: float) -> LoadState:
        """Governing load case for a given total wind force (N)."""
        self.calculations = []

        panel = self.inputs.panel
        wind = self.inputs.wind

        weight = self_weight(panel.panel_kg)
        seismic = weight * wind.seismic_c0
        auto = automatic_total(panel.sign_type, wind_force, weight, wind.seismic_c0)
        rule = "max(Fw, W·C0)" if panel.sign_type == SignType.FREESTANDING else "Fw + W·C0"
        self._add_calc_step(
            "Automatic horizontal force",
            f"W = {panel.panel_kg:.1f} kg × {G} = {weight:.1f} N\n"
            f"W·C0 = {weight:.1f} × {wind.seismic_c0:.2f} = {seismic:.1f} N\n"
            f"Fh = {rule} = {auto:.1f} N",
            f"Sign type: {panel.sign_type.value}"
        )

        manual = manual_total(wind)
        total = manual if manual > 0 else auto
        if manual > 0:
            self._add_calc_step(
                "Manual horizontal force override",
                f"Fh = {wind.manual_force:.1f} {wind.force_unit.value} = {manual:.1f} N",
                "Manual input governs"
            )

        n_col = effective_column_count(self.inputs.member)
        per_column = total / n_col
        arm = lever_arm(panel)
        moment = per_column * arm
        self._add_calc_step(
            "Per-column force and base moment",
            f"n = {n_col}\n"
            f"Fh,col = {total:.1f} / {n_col} = {per_column:.1f} N\n"
            f"M = Fh,col × {arm:.2f} m = {moment:.1f} N·m",
            "Lever arm by mounting type"
        )

        return LoadState(
            wind_force=wind_force,
            self_weight=weight,
            seismic_force=seismic,
            auto_total=auto,
            manual_total=manual,
            total_force=total,
            column_count=n_col,
            force_per_column=per_column,
            lever_arm=arm,
            moment_per_column=moment,
            vertical_per_column=weight / n_col,
        )
