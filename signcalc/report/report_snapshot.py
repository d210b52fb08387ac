"""
Report Snapshot for signcalc

Collects every reported quantity of a design check into a nested mapping of
plain numbers, strings and booleans. Layout and rendering (HTML, PDF, ...)
belong to the caller; this module only decides which numbers are reported and
how the headline stress and moment are rounded.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import pandas as pd

from ..core.catalogs import FAMILY_LABELS, get_families
from ..core.constants import G
from ..core.data_models import (
    DesignCheckResult,
    ForceUnit,
    ReportInput,
    RoundingMode,
)


def to_kgf(value: float) -> float:
    """N → kgf (also N·m → kgf·m)"""
    return value / G


def round_by_mode(value: float, digits: int, mode: Union[RoundingMode, str] = RoundingMode.ROUND) -> float:
    """
    Round to ``digits`` decimals by mode (round / ceil / floor).
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    mode = RoundingMode(mode)
    factor = 10 ** digits
    if mode == RoundingMode.CEIL:
        return math.ceil(value * factor) / factor
    if mode == RoundingMode.FLOOR:
        return math.floor(value * factor) / factor
    # Half-up, not the bankers' rounding of round()
    return math.floor(value * factor + 0.5) / factor


@dataclass(frozen=True)
class RoundingPolicy:
    """Rounding of the headline bending stress and base moment in reports"""
    sigma_digits: int = 2
    moment_digits: int = 1
    mode: RoundingMode = RoundingMode.ROUND

    @classmethod
    def from_report_input(cls, report: ReportInput) -> "RoundingPolicy":
        return cls(report.sigma_digits, report.moment_digits, report.rounding_mode)

    def sigma(self, value: float) -> float:
        return round_by_mode(value, self.sigma_digits, self.mode)

    def moment(self, value: float) -> float:
        return round_by_mode(value, self.moment_digits, self.mode)


def _force(value: float, unit: ForceUnit) -> float:
    return to_kgf(value) if unit == ForceUnit.KGF else value


def build_report_snapshot(
    result: DesignCheckResult, rounding: Optional[RoundingPolicy] = None
) -> Dict[str, Any]:
    """
    Nested snapshot of a design check for report rendering.

    Forces and moments are in N and N·m; the ``display`` block repeats the
    headline values in the selected force unit with the rounding policy
    applied.
    """
    inputs = result.inputs
    rounding = rounding or RoundingPolicy.from_report_input(inputs.report)
    unit = inputs.wind.force_unit
    report = inputs.report
    loads = result.loads
    section = result.section
    anchor = result.anchor
    plate = result.plate

    snapshot: Dict[str, Any] = {
        "meta": {
            "project_name": report.project_name,
            "project_no": report.project_no,
            "rev": report.rev,
            "author": report.author,
            "checker": report.checker,
            "approver": report.approver,
            "finish_spec": report.finish_spec,
            "conc_spec": report.conc_spec,
            "law_ref": report.law_ref,
            "site_notes": report.site_notes,
            "plate_d": inputs.plate.plate_d,
            "hole_clearance": inputs.plate.hole_clearance,
        },
        "panel": {
            "sign_type": inputs.panel.sign_type.value,
            "width": inputs.panel.width,
            "height": inputs.panel.height,
            "area": result.wind.panel_area,
            "panel_kg": inputs.panel.panel_kg,
            "cg_height": inputs.panel.cg_height,
        },
        "wind": {
            "v0": inputs.wind.v0,
            "cf_mode": inputs.wind.cf_mode.value,
            "modifiers": dict(result.wind.modifiers),
            "shape_cf": result.wind.shape_cf,
            "q0": result.wind.q0,
            "qz": result.wind.qz,
            "wind_force": result.wind.wind_force,
        },
        "loads": {
            "self_weight": loads.self_weight,
            "seismic_force": loads.seismic_force,
            "auto_total": loads.auto_total,
            "manual_total": loads.manual_total,
            "is_manual": loads.is_manual,
            "total_force": loads.total_force,
            "column_count": loads.column_count,
            "force_per_column": loads.force_per_column,
            "lever_arm": loads.lever_arm,
            "moment_per_column": loads.moment_per_column,
        },
        "section": {
            "family": inputs.member.family,
            "family_label": FAMILY_LABELS.get(inputs.member.family, inputs.member.family),
            "families": {f: FAMILY_LABELS.get(f, f) for f in get_families(inputs.sections)},
            "name": section.section.name if section.section is not None else "",
            "axis": section.axis,
            "modulus_cm3": section.modulus * 1e6,
            "radius_cm": section.radius * 100,
            "sigma": section.sigma,
            "sigma_allow": section.sigma_allow,
            "ratio": section.ratio,
            "stress_ok": section.stress_ok,
            "slenderness": section.slenderness,
            "slenderness_ok": section.slenderness_ok,
        },
        "anchor": {
            "name": anchor.anchor.name if anchor.anchor is not None else "",
            "qty": inputs.anchor.qty,
            "gauge": inputs.anchor.gauge,
            "pitch": inputs.anchor.pitch,
            "tensions": {t.anchor_id: t.tension for t in anchor.tensions},
            "sum_y2": anchor.sum_y2,
            "t_max": anchor.t_max,
            "shear_per_anchor": anchor.shear_per_anchor,
            "ta_conc": anchor.ta_conc,
            "ta_eff": anchor.ta_eff,
            "ratio_steel": anchor.ratio_steel,
            "ratio_conc": anchor.ratio_conc,
            "ratio_combined": anchor.ratio_combined,
            "combined_ok": anchor.combined_ok,
            "min_edge": anchor.min_edge,
            "min_spacing": anchor.min_spacing,
            "edge1_ok": anchor.edge1_ok,
            "edge2_ok": anchor.edge2_ok,
            "spacing_ok": anchor.spacing_ok,
            "hef": anchor.hef,
            "hef_required": anchor.hef_required,
            "hef_ok": anchor.hef_ok,
        },
        "plate": {
            "t_row": plate.t_row,
            "a_mm": plate.a_mm,
            "s_mm": plate.s_mm,
            "moment_per_width": plate.moment_per_width,
            "sigma_allow": plate.sigma_allow,
            "t_required": plate.t_required,
            "t_adopted": plate.t_adopted,
            "t_suggested": plate.t_suggested,
            "ok": plate.is_ok,
        },
        "foundation": None,
        "display": {
            "force_unit": unit.value,
            "sigma": rounding.sigma(section.sigma),
            "moment": rounding.moment(_force(loads.moment_per_column, unit)),
            "force_per_column": _force(loads.force_per_column, unit),
            "total_force": _force(loads.total_force, unit),
            "rounding_mode": rounding.mode.value,
        },
        "overall_ok": result.overall_ok,
    }

    if result.foundation is not None and result.foundation.stability is not None:
        s = result.foundation.stability
        g = s.geometry
        snapshot["foundation"] = {
            "shape": g.shape.value,
            "width_b": g.width_b,
            "depth_d": g.depth_d,
            "thickness_h": g.thickness_h,
            "embed_depth_z": g.embed_depth_z,
            "effective_area": s.effective_area,
            "volume": s.volume,
            "vertical_load": s.vertical_load,
            "eccentricity": s.eccentricity,
            "eccentricity_ratio": s.eccentricity / g.width_b,
            "contact_mode": s.contact_mode.value,
            "effective_width": s.effective_width,
            "contact_ratio": s.contact_ratio,
            "sigma_max": s.sigma_max,
            "sigma_min": s.sigma_min,
            "no_uplift": s.no_uplift,
            "allow_uplift": inputs.foundation.allow_uplift,
            "qa_allow_soil": s.qa_allow_soil,
            "qa_allow_conc": s.qa_allow_conc,
            "qa_allow": s.qa_allow,
            "bearing_ok": s.bearing_ok,
            "passive_raw": s.passive_raw,
            "passive_force": s.passive_force,
            "passive_moment": s.passive_moment,
            "lever_arm": s.lever_arm,
            "resisting_moment": s.resisting_moment,
            "fs_overturning": s.fs_overturning,
            "overturning_ok": s.overturning_ok,
            "overturning_note": result.foundation.overturning_note,
            "sliding_resistance": s.sliding_resistance,
            "fs_sliding": s.fs_sliding,
            "sliding_ok": s.sliding_ok,
            "sliding_note": result.foundation.sliding_note,
            "ok": s.ok,
        }

    return snapshot


def _flatten(prefix: str, value: Any, rows: list) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), item, rows)
    else:
        rows.append({"item": prefix, "value": value})


def snapshot_to_dataframe(snapshot: Dict[str, Any]) -> pd.DataFrame:
    """Flatten a report snapshot into an ``item`` / ``value`` table"""
    rows: list = []
    _flatten("", snapshot, rows)
    return pd.DataFrame(rows, columns=["item", "value"])
