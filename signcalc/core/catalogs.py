"""
Section and Anchor Catalogs for sign support design.

Catalog entries are immutable. Catalogs are plain tuples owned by the caller;
nothing in this package keeps a process-wide mutable catalog.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .constants import (
    DEFAULT_R_CM,
    DEFAULT_Z_CM3,
    HEF_DEFAULT_FACTOR,
    HEF_FREESTANDING_FACTOR,
    MIN_EDGE_FACTOR,
    MIN_SPACING_FACTOR,
    PLATE_T_OPTIONS,
)

logger = logging.getLogger(__name__)


def is_finite_number(value: Any) -> bool:
    """True for real, finite numbers (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True)
class SectionSpec:
    """Steel member cross-section catalog entry.

    Attributes:
        family: Family tag (H, CT, L, C, CLIP, I, SHS, PIPE, ...)
        name: Section designation, unique within a family
        zx_cm3: Elastic section modulus about x-x (cm³)
        zy_cm3: Elastic section modulus about y-y (cm³)
        ix_cm: Radius of gyration about x-x (cm)
        iy_cm: Radius of gyration about y-y (cm)
        area_cm2: Cross-sectional area (cm²), informational
        weight_kgpm: Mass per metre (kg/m), informational
        ix4_cm4: Second moment of area about x-x (cm⁴), informational
        iy4_cm4: Second moment of area about y-y (cm⁴), informational
    """
    family: str
    name: str
    zx_cm3: Optional[float] = None
    zy_cm3: Optional[float] = None
    ix_cm: Optional[float] = None
    iy_cm: Optional[float] = None
    area_cm2: Optional[float] = None
    weight_kgpm: Optional[float] = None
    ix4_cm4: Optional[float] = None
    iy4_cm4: Optional[float] = None

    def modulus(self, axis: str) -> float:
        """Section modulus about the bending axis (m³)"""
        z_cm3 = self.zx_cm3 if axis == "x" else self.zy_cm3
        return (z_cm3 if z_cm3 is not None else DEFAULT_Z_CM3) * 1e-6

    def radius(self, axis: str) -> float:
        """Radius of gyration about the bending axis (m)"""
        r_cm = self.ix_cm if axis == "x" else self.iy_cm
        return (r_cm if r_cm is not None else DEFAULT_R_CM) * 0.01

    # Record keys used by catalog files
    _KEYS = (
        ("zx_cm3", "Zx_cm3"),
        ("zy_cm3", "Zy_cm3"),
        ("ix_cm", "ix_cm"),
        ("iy_cm", "iy_cm"),
        ("area_cm2", "A_cm2"),
        ("weight_kgpm", "w_kgpm"),
        ("ix4_cm4", "Ix_cm4"),
        ("iy4_cm4", "Iy_cm4"),
    )

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "SectionSpec":
        """Build from a catalog record. Raises ValueError on malformed rows."""
        if not isinstance(record, dict):
            raise ValueError("Section record must be an object")
        family = record.get("family")
        name = record.get("name")
        if not isinstance(family, str) or not isinstance(name, str):
            raise ValueError("Section record requires string 'family' and 'name'")
        values: Dict[str, Optional[float]] = {}
        for attr, key in cls._KEYS:
            raw = record.get(key)
            if raw is None:
                values[attr] = None
            elif is_finite_number(raw):
                values[attr] = float(raw)
            else:
                raise ValueError(f"Section '{name}': field {key} is not a finite number")
        return cls(family=family, name=name, **values)

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"family": self.family, "name": self.name}
        for attr, key in self._KEYS:
            value = getattr(self, attr)
            if value is not None:
                record[key] = value
        return record


@dataclass(frozen=True)
class AnchorSpec:
    """Anchor bolt catalog entry.

    Attributes:
        name: Anchor designation
        d: Nominal diameter (mm)
        ta: Allowable steel tension (N)
        va: Allowable steel shear (N)
        min_edge: Minimum edge distance (mm), defaults to 1.5d
        min_spacing: Minimum spacing (mm), defaults to 3d
        hef_rec: Recommended effective embedment (mm), defaults to 10d
    """
    name: str
    d: float
    ta: float
    va: float
    min_edge: Optional[float] = None
    min_spacing: Optional[float] = None
    hef_rec: Optional[float] = None

    @property
    def required_edge(self) -> float:
        if self.min_edge is not None:
            return self.min_edge
        return float(math.floor(MIN_EDGE_FACTOR * self.d + 0.5))

    @property
    def required_spacing(self) -> float:
        if self.min_spacing is not None:
            return self.min_spacing
        return float(math.floor(MIN_SPACING_FACTOR * self.d + 0.5))

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "AnchorSpec":
        """Build from a catalog record. Raises ValueError on malformed rows."""
        if not isinstance(record, dict):
            raise ValueError("Anchor record must be an object")
        name = record.get("name")
        if not isinstance(name, str):
            raise ValueError("Anchor record requires a string 'name'")
        for key in ("d", "Ta", "Va"):
            if not is_finite_number(record.get(key)):
                raise ValueError(f"Anchor '{name}': field {key} is not a finite number")
        if record["d"] <= 0:
            raise ValueError(f"Anchor '{name}': diameter must be positive")

        def optional(key: str) -> Optional[float]:
            raw = record.get(key)
            return float(raw) if is_finite_number(raw) else None

        return cls(
            name=name,
            d=float(record["d"]),
            ta=float(record["Ta"]),
            va=float(record["Va"]),
            min_edge=optional("min_e"),
            min_spacing=optional("min_s"),
            hef_rec=optional("hefRec"),
        )

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"name": self.name, "d": self.d, "Ta": self.ta, "Va": self.va}
        if self.min_edge is not None:
            record["min_e"] = self.min_edge
        if self.min_spacing is not None:
            record["min_s"] = self.min_spacing
        if self.hef_rec is not None:
            record["hefRec"] = self.hef_rec
        return record


def _section(family: str, name: str, zx: float, zy: float, ix: float, iy: float) -> SectionSpec:
    return SectionSpec(family=family, name=name, zx_cm3=zx, zy_cm3=zy, ix_cm=ix, iy_cm=iy)


# Steel section catalog (Zx, Zy in cm³; ix, iy in cm)
DEFAULT_SECTIONS: Tuple[SectionSpec, ...] = (
    # H sections
    _section("H", "H-100×50×5×7", 37.5, 5.91, 3.98, 1.12),
    _section("H", "H-100×100×6×8", 75.6, 26.7, 4.18, 2.49),
    _section("H", "H-125×60×6×8", 65.5, 9.71, 4.95, 1.32),
    _section("H", "H-150×75×5×7", 88.8, 13.2, 6.11, 1.66),
    _section("H", "H-150×150×7×10", 216, 75.1, 6.4, 3.77),
    _section("H", "H-175×175×7.5×11", 331, 112, 7.5, 4.37),
    _section("H", "H-200×100×5.5×8", 181, 26.7, 8.23, 2.24),
    _section("H", "H-200×200×8×12", 472, 160, 8.62, 5.02),
    # CT sections
    _section("CT", "CT-50×50×5×7", 3.18, 2.96, 1.41, 1.12),
    _section("CT", "CT-75×75×5×7", 7.46, 6.6, 2.18, 1.66),
    _section("CT", "CT-100×100×5.5×8", 14.8, 13.4, 2.93, 2.24),
    _section("CT", "CT-125×125×6×9", 25.6, 23.5, 3.66, 2.82),
    _section("CT", "CT-150×150×6.5×9", 40.0, 33.8, 4.45, 3.29),
    _section("CT", "CT-175×175×7×11", 60.2, 51.0, 5.1, 3.95),
    _section("CT", "CT-200×200×8×12", 90.5, 76.3, 5.92, 4.5),
    _section("CT", "CT-250×250×9×14", 150.4, 126.8, 7.4, 5.6),
    _section("CT", "CT-300×300×10×15", 228.6, 193.5, 8.85, 6.72),
    _section("CT", "CT-350×350×12×18", 340.3, 285.7, 10.4, 8.05),
    # Equal angles
    _section("L", "L-40×40×3", 1.21, 1.21, 1.23, 1.23),
    _section("L", "L-50×50×4", 2.49, 2.49, 1.53, 1.53),
    _section("L", "L-65×65×6", 6.27, 6.27, 1.98, 1.98),
    _section("L", "L-75×75×6", 8.47, 8.47, 2.3, 2.3),
    _section("L", "L-90×90×7", 14.2, 14.2, 2.76, 2.76),
    _section("L", "L-100×100×8", 21.3, 21.3, 3.3, 3.3),
    _section("L", "L-125×125×9", 36.8, 36.8, 4.15, 4.15),
    _section("L", "L-150×150×12", 70.2, 70.2, 5.25, 5.25),
    _section("L", "L-200×200×15", 144.0, 144.0, 6.8, 6.8),
    _section("L", "L-250×250×18", 254.0, 254.0, 8.4, 8.4),
    # Channels
    _section("C", "C-75×40×5×7", 20.2, 4.54, 2.93, 1.19),
    _section("C", "C-100×50×5×7.5", 37.8, 7.82, 3.98, 1.5),
    _section("C", "C-125×65×6×8", 68.0, 14.4, 4.99, 1.96),
    _section("C", "C-150×75×6.5×10", 115, 23.6, 6.04, 2.27),
    _section("C", "C-200×70×7×10", 162, 21.8, 7.77, 2.04),
    # Lipped channels
    _section("CLIP", "LC-60×30×10×1.6", 3.88, 1.32, 2.37, 1.11),
    _section("CLIP", "LC-75×45×15×1.6", 7.24, 3.13, 3.03, 1.72),
    _section("CLIP", "LC-100×50×20×1.6", 11.7, 4.36, 3.99, 1.95),
    _section("CLIP", "LC-100×50×20×3.2", 21.3, 7.81, 3.9, 1.87),
    _section("CLIP", "LC-120×60×20×3.2", 31.0, 10.5, 4.74, 2.22),
    # I sections
    _section("I", "I-100×75×5×8", 56.5, 12.9, 4.15, 1.72),
    _section("I", "I-150×75×5.5×9.5", 109, 15.8, 6.13, 1.65),
    _section("I", "I-200×100×7×10", 218, 28.4, 8.11, 2.07),
    _section("I", "I-250×125×7.5×12.5", 415, 55.2, 10.3, 2.66),
    _section("I", "I-300×150×8×13", 633, 80.0, 12.4, 3.12),
    # Square hollow sections
    _section("SHS", "SHS-50×50×3.2", 20.7, 20.7, 1.75, 1.75),
    _section("SHS", "SHS-75×75×4.5", 54.3, 54.3, 2.65, 2.65),
    _section("SHS", "SHS-100×100×4.5", 102, 102, 3.48, 3.48),
    _section("SHS", "SHS-100×100×6", 129, 129, 3.43, 3.43),
    _section("SHS", "SHS-125×125×6", 207, 207, 4.55, 4.55),
    _section("SHS", "SHS-150×150×4.5", 171, 171, 4.09, 4.09),
    _section("SHS", "SHS-200×200×6", 416, 416, 6.45, 6.45),
    _section("SHS", "SHS-200×200×9", 585, 585, 6.29, 6.29),
    _section("SHS", "SHS-250×250×9", 1020, 1020, 7.86, 7.86),
    # Circular pipes
    _section("PIPE", "PIPE-48.6×2.3", 5.48, 5.48, 1.72, 1.72),
    _section("PIPE", "PIPE-60.5×2.3", 9.18, 9.18, 2.14, 2.14),
    _section("PIPE", "PIPE-76.3×3.2", 20.4, 20.4, 2.8, 2.8),
    _section("PIPE", "PIPE-89.1×3.2", 28.7, 28.7, 3.28, 3.28),
    _section("PIPE", "PIPE-101.6×3.2", 38.8, 38.8, 3.73, 3.73),
    _section("PIPE", "PIPE-114.3×3.5", 56.4, 56.4, 4.26, 4.26),
    _section("PIPE", "PIPE-139.8×4.5", 104.1, 104.1, 5.34, 5.34),
    _section("PIPE", "PIPE-165.2×4.5", 144.3, 144.3, 6.28, 6.28),
    _section("PIPE", "PIPE-216.3×6.0", 314.0, 314.0, 8.3, 8.3),
    _section("PIPE", "PIPE-267.4×6.6", 535.0, 535.0, 10.4, 10.4),
)

# General anchor catalog (projecting / wall signs). Ta, Va in N; lengths in mm.
DEFAULT_ANCHORS: Tuple[AnchorSpec, ...] = (
    AnchorSpec("M12 A-BOLT", 12, 12000, 5000, min_edge=18, min_spacing=36, hef_rec=150),
    AnchorSpec("M16 A-BOLT", 16, 22000, 9000, min_edge=24, min_spacing=48, hef_rec=200),
    AnchorSpec("M20 A-BOLT", 20, 35000, 14000, min_edge=30, min_spacing=60, hef_rec=250),
    AnchorSpec("M24 A-BOLT", 24, 51000, 20000, min_edge=36, min_spacing=72, hef_rec=300),
    AnchorSpec("M30 A-BOLT", 30, 75000, 30000, min_edge=45, min_spacing=90, hef_rec=380),
    AnchorSpec("M32 A-BOLT", 32, 90000, 36000, min_edge=48, min_spacing=96, hef_rec=420),
)


def _abr(name: str, d: float, ta: float, va: float) -> AnchorSpec:
    return AnchorSpec(name, d, ta, va, hef_rec=d * HEF_FREESTANDING_FACTOR)


# Regulated ABR anchors (short-term allowable), free-standing signs only.
ABR_ANCHORS: Tuple[AnchorSpec, ...] = (
    _abr("M16 ABR", 16, 36.9e3, 21.3e3),
    _abr("M20 ABR", 20, 57.6e3, 33.2e3),
    _abr("M22 ABR", 22, 71.2e3, 41.1e3),
    _abr("M24 ABR", 24, 83.0e3, 47.9e3),
    _abr("M27 ABR", 27, 108e3, 62.4e3),
    _abr("M30 ABR", 30, 132e3, 76.2e3),
    _abr("M33 ABR", 33, 163e3, 94.1e3),
    _abr("M36 ABR", 36, 192e3, 111e3),
    _abr("M39 ABR", 39, 229e3, 132e3),
    _abr("M42 ABR", 42, 263e3, 152e3),
    _abr("M45 ABR", 45, 282e3, 163e3),
    _abr("M48 ABR", 48, 316e3, 182e3),
)

FAMILY_LABELS = {
    "H": "H-section",
    "LH": "Light H-section",
    "CT": "CT-section",
    "C": "Channel",
    "CLIP": "Lipped channel",
    "I": "I-section",
    "PIPE": "Circular pipe",
    "SHS": "Square hollow section",
    "FLAT": "Flat bar",
    "ROUND": "Round bar",
    "L": "Equal angle",
}


def get_families(sections: Sequence[SectionSpec]) -> List[str]:
    """Family tags in catalog order, without duplicates"""
    return list(dict.fromkeys(s.family for s in sections))


def find_section(sections: Sequence[SectionSpec], family: str, name: str) -> Optional[SectionSpec]:
    """Resolve a section by family and name.

    Falls back to the first entry of the family, then to the first entry of
    the catalog. Returns None only for an empty catalog.
    """
    candidates = [s for s in sections if s.family == family]
    for section in candidates:
        if section.name == name:
            return section
    if candidates:
        return candidates[0]
    return sections[0] if sections else None


def find_anchor(anchors: Sequence[AnchorSpec], name: Optional[str]) -> Optional[AnchorSpec]:
    """Resolve an anchor by name, falling back to the first catalog entry"""
    for anchor in anchors:
        if anchor.name == name:
            return anchor
    return anchors[0] if anchors else None


def snap_plate_thickness(t_requested: float) -> float:
    """Smallest stock plate thickness ≥ t_requested, else the largest stock value"""
    for t in PLATE_T_OPTIONS:
        if t >= t_requested:
            return float(t)
    return float(PLATE_T_OPTIONS[-1])


def required_embedment(anchor: AnchorSpec, freestanding: bool) -> float:
    """Minimum effective embedment hef (mm).

    Free-standing signs always need 20d. Other mounting types use the catalog
    recommendation, else 10d.
    """
    if freestanding:
        return anchor.d * HEF_FREESTANDING_FACTOR
    return anchor.hef_rec or anchor.d * HEF_DEFAULT_FACTOR


@dataclass(frozen=True)
class CatalogLoadResult:
    """Outcome of a catalog import.

    When ``accepted`` is False, ``catalog`` is the previously loaded catalog,
    unchanged.
    """
    catalog: Tuple[Any, ...]
    accepted: bool
    message: str
    skipped: int = 0


def _load_catalog(records: Any, current: Tuple[Any, ...], builder, label: str) -> CatalogLoadResult:
    if not isinstance(records, list):
        message = f"{label} catalog rejected: expected a JSON array of records"
        logger.warning(message)
        return CatalogLoadResult(catalog=current, accepted=False, message=message)

    rows = []
    skipped = 0
    for record in records:
        try:
            rows.append(builder(record))
        except ValueError as e:
            skipped += 1
            logger.debug(f"Skipping {label.lower()} record: {e}")

    if not rows:
        message = f"{label} catalog rejected: no valid records ({skipped} malformed)"
        logger.warning(message)
        return CatalogLoadResult(catalog=current, accepted=False, message=message, skipped=skipped)

    message = f"{label} catalog loaded: {len(rows)} records"
    if skipped:
        message += f", {skipped} malformed skipped"
    logger.info(message)
    return CatalogLoadResult(catalog=tuple(rows), accepted=True, message=message, skipped=skipped)


def load_section_catalog(
    records: Any, current: Tuple[SectionSpec, ...] = DEFAULT_SECTIONS
) -> CatalogLoadResult:
    """Validate a proposed section catalog (list of records)."""
    return _load_catalog(records, current, SectionSpec.from_dict, "Section")


def load_anchor_catalog(
    records: Any, current: Tuple[AnchorSpec, ...] = DEFAULT_ANCHORS
) -> CatalogLoadResult:
    """Validate a proposed general anchor catalog (list of records)."""
    return _load_catalog(records, current, AnchorSpec.from_dict, "Anchor")


def catalog_to_records(catalog: Iterable[Any]) -> List[Dict[str, Any]]:
    """Export a catalog as a list of plain records"""
    return [entry.to_dict() for entry in catalog]
