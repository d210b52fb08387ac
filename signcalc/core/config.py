"""
Design Configuration Snapshot for signcalc.

This module turns a ``DesignInputs`` into a flat configuration mapping and
back, and applies every clamping / derivation rule in one place.

Usage:
    inputs = normalize(DesignInputs())
    data = to_config(inputs)
    restored, report = config_from_dict(data)
"""

import json
import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, Type, Union

from .catalogs import (
    find_anchor,
    find_section,
    is_finite_number,
    load_anchor_catalog,
    load_section_catalog,
    required_embedment,
    snap_plate_thickness,
    catalog_to_records,
)
from .constants import EMBED_AUTO_OFFSET, PASSIVE_ETA_MAX, PASSIVE_ETA_MIN
from .data_models import (
    BendAxis,
    DesignInputs,
    FoundationShape,
    ForceUnit,
    OptimizationObjective,
    RoundingMode,
    SignType,
    WindCoefficientMode,
)

logger = logging.getLogger(__name__)

CONFIG_APP = "signcalc"
CONFIG_VERSION = "1"

# Older snapshots stored the reference wind speed under "V0"
CONFIG_ALIASES = {"V0": "windV0"}


class ConfigError(ValueError):
    """Raised when a configuration payload is not a mapping"""


def normalize(inputs: DesignInputs) -> DesignInputs:
    """
    Apply all clamping and derivation rules once, deterministically.

    - Cf covering all effects resets Kz/Gf/Iw/Kd/Kt to 1.0
    - post quantity ≥ 1, manual force ≥ 0
    - section and anchor names resolved against their catalogs
    - accepted embedment raised to the required minimum
    - plate thickness snapped up to stock
    - passive reduction clamped to [0, 1]
    - z follows H - 0.1 when embed_depth_auto is set
    """
    wind = inputs.wind
    if wind.cf_mode == WindCoefficientMode.CF_INCLUDES_ALL:
        wind = replace(wind, kz=1.0, gf=1.0, iw=1.0, kd=1.0, kt=1.0)
    wind = replace(wind, manual_force=max(0.0, wind.manual_force))

    member = replace(inputs.member, post_qty=max(1, int(math.floor(inputs.member.post_qty))))
    section = find_section(inputs.sections, member.family, member.section_name)
    if section is not None:
        member = replace(member, family=section.family, section_name=section.name)

    anchor_in = inputs.anchor
    anchor = find_anchor(inputs.anchor_catalog(), anchor_in.anchor_name)
    if anchor is not None:
        hef_min = required_embedment(anchor, inputs.is_freestanding)
        anchor_in = replace(anchor_in, anchor_name=anchor.name, embed=max(anchor_in.embed, hef_min))

    plate = replace(inputs.plate, thickness=snap_plate_thickness(inputs.plate.thickness))

    foundation = inputs.foundation
    foundation = replace(foundation, eta_passive=min(max(foundation.eta_passive, 0.0), 1.0))
    if foundation.embed_depth_auto:
        geometry = foundation.geometry
        z = max(0.0, geometry.thickness_h - EMBED_AUTO_OFFSET)
        foundation = replace(foundation, geometry=replace(geometry, embed_depth_z=z))

    return replace(
        inputs,
        wind=wind,
        member=member,
        anchor=anchor_in,
        plate=plate,
        foundation=foundation,
    )


# ---------------------------------------------------------------------------
# Field validators: return the converted value or raise ValueError
# ---------------------------------------------------------------------------

def _number(value: Any) -> float:
    if not is_finite_number(value):
        raise ValueError("not a finite number")
    return float(value)


def _positive(value: Any) -> float:
    v = _number(value)
    if v <= 0:
        raise ValueError("must be positive")
    return v


def _non_negative(value: Any) -> float:
    v = _number(value)
    if v < 0:
        raise ValueError("must not be negative")
    return v


def _count(value: Any) -> int:
    return max(1, int(math.floor(_number(value))))


def _digits(value: Any) -> int:
    v = int(_number(value))
    if not 0 <= v <= 6:
        raise ValueError("digits must be within 0-6")
    return v


def _passive_eta(value: Any) -> float:
    return min(max(_number(value), PASSIVE_ETA_MIN), PASSIVE_ETA_MAX)


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("not a string")
    return value


def _boolean(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError("not a boolean")
    return value


def _enum(enum_cls: Type[Enum]) -> Callable[[Any], Enum]:
    def convert(value: Any) -> Enum:
        try:
            return enum_cls(value)
        except ValueError:
            raise ValueError(f"must be one of {[m.value for m in enum_cls]}")
    return convert


# key -> (group, attribute, validator). Group "geometry" is foundation.geometry.
CONFIG_FIELDS: Dict[str, Tuple[str, str, Callable[[Any], Any]]] = {
    # Panel
    "signType": ("panel", "sign_type", _enum(SignType)),
    "width": ("panel", "width", _positive),
    "height": ("panel", "height", _positive),
    "panelKg": ("panel", "panel_kg", _non_negative),
    "cgHeight": ("panel", "cg_height", _non_negative),
    "areaFactor": ("panel", "area_factor", _non_negative),
    # Wind / seismic
    "windV0": ("wind", "v0", _non_negative),
    "windKz": ("wind", "kz", _non_negative),
    "windGf": ("wind", "gf", _non_negative),
    "windIw": ("wind", "iw", _non_negative),
    "windKd": ("wind", "kd", _non_negative),
    "windKt": ("wind", "kt", _non_negative),
    "cfMode": ("wind", "cf_mode", _enum(WindCoefficientMode)),
    "shapeCf": ("wind", "shape_cf", _non_negative),
    "seismicC0": ("wind", "seismic_c0", _non_negative),
    "FhInput": ("wind", "manual_force", _non_negative),
    "forceUnit": ("wind", "force_unit", _enum(ForceUnit)),
    # Member
    "family": ("member", "family", _string),
    "sectionName": ("member", "section_name", _string),
    "bendAxis": ("member", "bend_axis", _enum(BendAxis)),
    "Fy": ("member", "fy", _positive),
    "K": ("member", "k_factor", _positive),
    "L": ("member", "length", _non_negative),
    "postQty": ("member", "post_qty", _count),
    "hasInterPostConnection": ("member", "has_inter_post_connection", _boolean),
    # Anchors
    "anchorName": ("anchor", "anchor_name", _string),
    "anchorQty": ("anchor", "qty", _count),
    "anchorGauge": ("anchor", "gauge", _positive),
    "anchorPitch": ("anchor", "pitch", _positive),
    "edge1": ("anchor", "edge1", _non_negative),
    "edge2": ("anchor", "edge2", _non_negative),
    "spacing": ("anchor", "spacing", _non_negative),
    "anchorEmbed": ("anchor", "embed", _non_negative),
    # Base plate
    "plateFy": ("plate", "plate_fy", _positive),
    "a_clear": ("plate", "a_clear", _non_negative),
    "plateT": ("plate", "thickness", _positive),
    "plateB": ("plate", "plate_b", _positive),
    "plateD": ("plate", "plate_d", _positive),
    "ecc": ("plate", "ecc", _non_negative),
    "holeClearance": ("plate", "hole_clearance", _non_negative),
    # Footing geometry
    "footShape": ("geometry", "shape", _enum(FoundationShape)),
    "footB": ("geometry", "width_b", _positive),
    "footD": ("geometry", "depth_d", _positive),
    "footH": ("geometry", "thickness_h", _positive),
    "embedDepth": ("geometry", "embed_depth_z", _non_negative),
    "L_t1": ("geometry", "t1", _non_negative),
    "L_t2": ("geometry", "t2", _non_negative),
    # Foundation / soil / criteria
    "embedDepthAuto": ("foundation", "embed_depth_auto", _boolean),
    "soilQa": ("foundation", "soil_qa", _positive),
    "gammaBearing": ("foundation", "gamma_bearing", _positive),
    "mu": ("foundation", "mu", _non_negative),
    "soilUnitW": ("foundation", "soil_unit_w", _non_negative),
    "coverT": ("foundation", "cover_t", _non_negative),
    "concUnitW": ("foundation", "conc_unit_w", _non_negative),
    "Fc": ("foundation", "fc", _non_negative),
    "etaPassive": ("foundation", "eta_passive", _passive_eta),
    "usePassive": ("foundation", "use_passive", _boolean),
    "frontAvailable": ("foundation", "front_soil_available", _boolean),
    "useContactRatioForFriction": ("foundation", "use_contact_ratio_for_friction", _boolean),
    "allowUpliftOK": ("foundation", "allow_uplift", _boolean),
    "reqFS_OT": ("foundation", "req_fs_ot", _positive),
    "reqFS_SL": ("foundation", "req_fs_sl", _positive),
    "foundationOptMode": ("foundation", "opt_objective", _enum(OptimizationObjective)),
    # Report metadata and rounding
    "projectName": ("report", "project_name", _string),
    "projectNo": ("report", "project_no", _string),
    "rev": ("report", "rev", _string),
    "author": ("report", "author", _string),
    "checker": ("report", "checker", _string),
    "approver": ("report", "approver", _string),
    "finishSpec": ("report", "finish_spec", _string),
    "concSpec": ("report", "conc_spec", _string),
    "lawRef": ("report", "law_ref", _string),
    "siteNotes": ("report", "site_notes", _string),
    "pdfSigmaDigits": ("report", "sigma_digits", _digits),
    "pdfMDigits": ("report", "moment_digits", _digits),
    "pdfRoundingMode": ("report", "rounding_mode", _enum(RoundingMode)),
}

_CATALOG_KEYS = ("sections", "anchors")
_MARKER_KEYS = ("__app", "__ver")


def _group(inputs: DesignInputs, name: str) -> Any:
    if name == "geometry":
        return inputs.foundation.geometry
    return getattr(inputs, name)


def to_config(inputs: DesignInputs) -> Dict[str, Any]:
    """Export inputs as a flat, JSON-serialisable configuration mapping"""
    data: Dict[str, Any] = {"__app": CONFIG_APP, "__ver": CONFIG_VERSION}
    for key, (group, attr, _) in CONFIG_FIELDS.items():
        value = getattr(_group(inputs, group), attr)
        data[key] = value.value if isinstance(value, Enum) else value
    data["sections"] = catalog_to_records(inputs.sections)
    data["anchors"] = catalog_to_records(inputs.anchors)
    return data


@dataclass
class ConfigLoadReport:
    """What happened to each key of an imported configuration"""
    applied: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)   # key -> reason
    ignored: List[str] = field(default_factory=list)        # unknown keys
    messages: List[str] = field(default_factory=list)


def config_from_dict(
    data: Any, base: DesignInputs = None
) -> Tuple[DesignInputs, ConfigLoadReport]:
    """
    Apply a configuration mapping on top of ``base``.

    Unknown keys are ignored and invalid fields skipped one by one; the import
    never aborts for a bad field. The result is normalized, so clamped and
    derived values are re-derived rather than trusted.

    Raises:
        ConfigError: If ``data`` is not a mapping
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")

    base = base if base is not None else DesignInputs()
    report = ConfigLoadReport()
    data = dict(data)

    for alias, key in CONFIG_ALIASES.items():
        if alias in data:
            value = data.pop(alias)
            if key not in data or not is_finite_number(data[key]):
                data[key] = value

    updates: Dict[str, Dict[str, Any]] = {}
    for key, value in data.items():
        if key in _MARKER_KEYS or key in _CATALOG_KEYS:
            continue
        field_def = CONFIG_FIELDS.get(key)
        if field_def is None:
            report.ignored.append(key)
            continue
        group, attr, validator = field_def
        try:
            converted = validator(value)
        except ValueError as e:
            report.skipped[key] = str(e)
            logger.warning(f"Config field '{key}' skipped: {e}")
            continue
        updates.setdefault(group, {})[attr] = converted
        report.applied.append(key)

    sections = base.sections
    if "sections" in data:
        result = load_section_catalog(data["sections"], base.sections)
        report.messages.append(result.message)
        if result.accepted:
            sections = result.catalog
            report.applied.append("sections")
        else:
            report.skipped["sections"] = result.message

    anchors = base.anchors
    if "anchors" in data:
        result = load_anchor_catalog(data["anchors"], base.anchors)
        report.messages.append(result.message)
        if result.accepted:
            anchors = result.catalog
            report.applied.append("anchors")
        else:
            report.skipped["anchors"] = result.message

    # A newly selected anchor starts from its own minimum embedment
    anchor_updates = updates.get("anchor", {})
    if "anchor_name" in anchor_updates and "embed" not in anchor_updates:
        anchor_updates["embed"] = 0.0

    # An explicit embedment depth is kept unless auto-follow is requested
    geometry_updates = updates.get("geometry", {})
    if "embed_depth_z" in geometry_updates and "embed_depth_auto" not in updates.get("foundation", {}):
        updates.setdefault("foundation", {})["embed_depth_auto"] = False

    foundation = base.foundation
    if geometry_updates:
        try:
            geometry = replace(foundation.geometry, **geometry_updates)
        except ValueError as e:
            for attr in geometry_updates:
                report.skipped[attr] = str(e)
            logger.warning(f"Footing geometry skipped: {e}")
            geometry = foundation.geometry
        foundation = replace(foundation, geometry=geometry)
    foundation = replace(foundation, **updates.get("foundation", {}))

    inputs = replace(
        base,
        panel=replace(base.panel, **updates.get("panel", {})),
        wind=replace(base.wind, **updates.get("wind", {})),
        member=replace(base.member, **updates.get("member", {})),
        anchor=replace(base.anchor, **anchor_updates),
        plate=replace(base.plate, **updates.get("plate", {})),
        foundation=foundation,
        report=replace(base.report, **updates.get("report", {})),
        sections=sections,
        anchors=anchors,
    )

    if report.ignored:
        logger.debug(f"Ignored unknown config keys: {report.ignored}")
    logger.info(f"Config applied: {len(report.applied)} fields, {len(report.skipped)} skipped")
    return normalize(inputs), report


def save_config(path: Union[str, Path], inputs: DesignInputs) -> Path:
    """Write the configuration snapshot as JSON"""
    path = Path(path)
    path.write_text(json.dumps(to_config(inputs), ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def load_config(
    path: Union[str, Path], base: DesignInputs = None
) -> Tuple[DesignInputs, ConfigLoadReport]:
    """Read a JSON configuration snapshot and apply it on top of ``base``.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid configuration JSON: {e}")
    return config_from_dict(data, base)
