"""
Data Models for signcalc - Sign Support Structural Verification
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .catalogs import (
    ABR_ANCHORS,
    DEFAULT_ANCHORS,
    DEFAULT_SECTIONS,
    AnchorSpec,
    SectionSpec,
    find_anchor,
    find_section,
    required_embedment,
)
from .constants import EPS


class SignType(Enum):
    """Sign mounting type"""
    FREESTANDING = "freestanding"   # Pole-mounted, own footing
    PROJECTING = "projecting"       # Projecting from a wall on a bracket
    WALL = "wall"                   # Flush wall-mounted


class WindCoefficientMode(Enum):
    """Which factors the shape coefficient Cf is taken to include"""
    SHAPE_ONLY = "SHAPE_ONLY"             # Kz/Gf/Iw/Kd/Kt applied separately
    CF_INCLUDES_ALL = "CF_INCLUDES_ALL"   # Cf already carries all effects


class BendAxis(Enum):
    """Member bending axis"""
    X = "x"
    Y = "y"


class FoundationShape(Enum):
    """Footing plan shape"""
    RECT = "RECT"   # Rectangular pad B × D
    L = "L"         # L-shaped band, widths t1 (under column) and t2 (toe side)


class ContactMode(Enum):
    """Ground contact state of the footing underside"""
    FULL = "full"         # e ≤ B/6, trapezoidal pressure
    PARTIAL = "partial"   # B/6 < e < B/2, triangular pressure over b_eff
    NONE = "none"         # e ≥ B/2, no stable contact


class OptimizationObjective(Enum):
    """Footing optimizer objective"""
    BD = "BD"     # 100B + 10D + H, favours small plan dimensions
    VOL = "VOL"   # effective area × H


class ForceUnit(Enum):
    """Unit of manually entered horizontal force"""
    N = "N"
    KGF = "kgf"


class RoundingMode(Enum):
    """Rounding direction used for reported values"""
    ROUND = "round"
    CEIL = "ceil"
    FLOOR = "floor"


@dataclass(frozen=True)
class FoundationGeometry:
    """Footing geometry.

    Attributes:
        width_b: Width B in the overturning direction (m)
        depth_d: Depth D orthogonal to overturning (m)
        thickness_h: Footing thickness H (m)
        embed_depth_z: Embedment depth z for passive resistance (m)
        shape: Plan shape
        t1: L-shape band width under the column (m)
        t2: L-shape band width on the toe side (m)
    """
    width_b: float = 0.8
    depth_d: float = 0.8
    thickness_h: float = 0.8
    embed_depth_z: float = 0.7
    shape: FoundationShape = FoundationShape.RECT
    t1: float = 0.2
    t2: float = 0.2

    def __post_init__(self):
        if not (self.width_b > 0 and self.depth_d > 0 and self.thickness_h > 0):
            raise ValueError("Footing B, D and H must be positive")
        if not self.embed_depth_z >= 0:
            raise ValueError("Embedment depth cannot be negative")
        if self.t1 < 0 or self.t2 < 0:
            raise ValueError("L-shape band widths cannot be negative")

    @property
    def effective_area(self) -> float:
        """Plan area carrying self-weight (m²). L-shape overlap counted once."""
        b, d = self.width_b, self.depth_d
        if self.shape == FoundationShape.L:
            return max(b * self.t1 + d * self.t2 - self.t1 * self.t2, EPS)
        return max(b * d, EPS)

    @property
    def volume(self) -> float:
        """Concrete volume (m³)"""
        return self.effective_area * self.thickness_h

    def resized(self, width_b: float, depth_d: float, thickness_h: float) -> "FoundationGeometry":
        """Same footing with new plan size and thickness"""
        return replace(self, width_b=width_b, depth_d=depth_d, thickness_h=thickness_h)


@dataclass(frozen=True)
class PanelInput:
    """Sign panel inputs"""
    sign_type: SignType = SignType.FREESTANDING
    width: float = 3.0          # m
    height: float = 2.0         # m
    panel_kg: float = 250.0     # kg
    cg_height: float = 3.5      # m, centre of gravity above base
    area_factor: float = 1.0    # effective area multiplier

    @property
    def area(self) -> float:
        """Effective wind area (m²)"""
        return self.width * self.height * self.area_factor


@dataclass(frozen=True)
class WindInput:
    """Wind and seismic load inputs"""
    v0: float = 34.0            # reference wind speed (m/s)
    kz: float = 1.0             # height / exposure
    gf: float = 1.0             # gust
    iw: float = 1.0             # importance
    kd: float = 1.0             # directionality
    kt: float = 1.0             # topography
    cf_mode: WindCoefficientMode = WindCoefficientMode.SHAPE_ONLY
    shape_cf: float = 2.0
    seismic_c0: float = 0.3
    manual_force: float = 0.0   # total horizontal force override, in force_unit
    force_unit: ForceUnit = ForceUnit.N


@dataclass(frozen=True)
class MemberInput:
    """Support member inputs"""
    family: str = "H"
    section_name: str = "H-100×50×5×7"
    bend_axis: BendAxis = BendAxis.X
    fy: float = 235.0           # N/mm²
    k_factor: float = 1.0       # effective length factor
    length: float = 3.0         # unsupported length (m)
    post_qty: int = 1           # number of identical posts
    has_inter_post_connection: bool = True


@dataclass(frozen=True)
class AnchorInput:
    """Anchor bolt inputs (mm unless noted)"""
    anchor_name: str = "M27 ABR"
    qty: int = 4                # displayed quantity, informational
    gauge: float = 200.0        # vertical spacing of anchor rows
    pitch: float = 160.0        # horizontal spacing of anchor columns
    edge1: float = 50.0
    edge2: float = 50.0
    spacing: float = 120.0
    embed: float = 540.0        # accepted effective embedment hef


@dataclass(frozen=True)
class PlateInput:
    """Base plate inputs"""
    plate_fy: float = 235.0     # N/mm²
    a_clear: float = 80.0       # mm, support face to anchor line
    thickness: float = 16.0     # mm, adopted stock thickness
    plate_b: float = 0.4        # m, plate width
    plate_d: float = 0.4        # m, plate depth
    ecc: float = 0.05           # m
    hole_clearance: float = 2.0  # mm, hole = d + clearance


@dataclass(frozen=True)
class FoundationInput:
    """Footing, soil and stability criteria inputs"""
    geometry: FoundationGeometry = field(default_factory=FoundationGeometry)
    embed_depth_auto: bool = True   # z follows H - 0.1
    soil_qa: float = 150.0          # kPa allowable bearing
    gamma_bearing: float = 1.0      # bearing safety factor
    mu: float = 0.5                 # base friction coefficient
    soil_unit_w: float = 18.0       # kN/m³
    cover_t: float = 0.3            # m of soil over the footing
    conc_unit_w: float = 24.0       # kN/m³
    fc: float = 21.0                # N/mm² concrete strength
    eta_passive: float = 0.5        # passive resistance reduction (0-1)
    use_passive: bool = True
    front_soil_available: bool = True
    use_contact_ratio_for_friction: bool = True
    allow_uplift: bool = False
    req_fs_ot: float = 1.5
    req_fs_sl: float = 1.5
    opt_objective: OptimizationObjective = OptimizationObjective.BD


@dataclass(frozen=True)
class ReportInput:
    """Report metadata and numeric rounding policy"""
    project_name: str = ""
    project_no: str = ""
    rev: str = "A"
    author: str = ""
    checker: str = ""
    approver: str = ""
    finish_spec: str = "TBD"
    conc_spec: str = "Fc as input, slump/curing per site specification"
    law_ref: str = ""
    site_notes: str = ""
    sigma_digits: int = 2
    moment_digits: int = 1
    rounding_mode: RoundingMode = RoundingMode.ROUND


@dataclass(frozen=True)
class DesignInputs:
    """
    Complete, immutable set of inputs for one verification pass.
    Derive modified copies with ``dataclasses.replace``; apply ``normalize``
    before running any check.
    """
    panel: PanelInput = field(default_factory=PanelInput)
    wind: WindInput = field(default_factory=WindInput)
    member: MemberInput = field(default_factory=MemberInput)
    anchor: AnchorInput = field(default_factory=AnchorInput)
    plate: PlateInput = field(default_factory=PlateInput)
    foundation: FoundationInput = field(default_factory=FoundationInput)
    report: ReportInput = field(default_factory=ReportInput)
    sections: Tuple[SectionSpec, ...] = DEFAULT_SECTIONS
    anchors: Tuple[AnchorSpec, ...] = DEFAULT_ANCHORS

    @property
    def is_freestanding(self) -> bool:
        return self.panel.sign_type == SignType.FREESTANDING

    @property
    def axis(self) -> str:
        return self.member.bend_axis.value

    def anchor_catalog(self) -> Tuple[AnchorSpec, ...]:
        """Anchor catalog applicable to the sign type"""
        return ABR_ANCHORS if self.is_freestanding else self.anchors

    def active_anchor(self) -> Optional[AnchorSpec]:
        return find_anchor(self.anchor_catalog(), self.anchor.anchor_name)

    def active_section(self) -> Optional[SectionSpec]:
        return find_section(self.sections, self.member.family, self.member.section_name)

    def family_sections(self) -> List[SectionSpec]:
        return [s for s in self.sections if s.family == self.member.family]

    def required_embedment(self) -> float:
        anchor = self.active_anchor()
        if anchor is None:
            return 0.0
        return required_embedment(anchor, self.is_freestanding)

    def to_config(self) -> Dict[str, Any]:
        """Flat configuration snapshot, see ``signcalc.core.config``"""
        from .config import to_config
        return to_config(self)


@dataclass(frozen=True)
class LoadState:
    """Governing horizontal load case, total and per column"""
    wind_force: float           # N, total
    self_weight: float          # N, total
    seismic_force: float        # N, total (self weight × C0)
    auto_total: float           # N, automatic combination
    manual_total: float         # N, manual override (0 = none)
    total_force: float          # N, governing total
    column_count: int           # effective count used for division
    force_per_column: float     # N
    lever_arm: float            # m
    moment_per_column: float    # N·m
    vertical_per_column: float  # N, superstructure self weight per column

    @property
    def is_manual(self) -> bool:
        return self.manual_total > 0


@dataclass(frozen=True)
class StabilityResult:
    """
    Footing stability evaluation for one geometry.
    Pressures in kPa, forces in N, moments in N·m, lengths in m.
    """
    geometry: FoundationGeometry
    effective_area: float
    volume: float
    vertical_load: float        # N
    eccentricity: float         # e
    contact_mode: ContactMode
    effective_width: float      # b_eff
    contact_ratio: float        # b_eff / B clamped to [0, 1]
    sigma_max: float            # kPa, inf when no contact
    sigma_min: float            # kPa
    no_uplift: bool
    qa_allow_soil: float        # kPa
    qa_allow_conc: float        # kPa
    qa_allow: float             # kPa, governing
    bearing_ok: bool
    passive_raw: float          # N, Pp before reduction
    passive_force: float        # N, Pp
    passive_moment: float       # N·m
    lever_arm: float            # m, max(B/2 - e, 0)
    resisting_moment: float     # N·m
    fs_overturning: float
    overturning_ok: bool
    effective_vertical: float   # N, friction-effective N
    sliding_resistance: float   # N
    fs_sliding: float
    sliding_ok: bool
    ok: bool
    achievement_ratio: float    # min(FS_OT/req, FS_SL/req, qa/σmax)


@dataclass
class DesignResult:
    """Base class for check results"""
    element_type: str
    utilization: float = 0.0
    status: str = "OK"
    warnings: List[str] = field(default_factory=list)
    calculations: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return self.status == "OK"


@dataclass
class WindResult(DesignResult):
    """Wind load results"""
    q0: float = 0.0             # N/m², basic velocity pressure
    qz: float = 0.0             # N/m², design velocity pressure
    modifiers: Dict[str, float] = field(default_factory=dict)
    shape_cf: float = 0.0
    panel_area: float = 0.0     # m²
    wind_force: float = 0.0     # N


@dataclass
class SectionResult(DesignResult):
    """Member bending and slenderness results"""
    section: Optional[SectionSpec] = None
    axis: str = "x"
    modulus: float = 0.0        # m³
    radius: float = 0.0         # m
    sigma: float = 0.0          # N/mm²
    sigma_allow: float = 0.0    # N/mm²
    ratio: float = 0.0
    stress_ok: bool = True
    slenderness: float = 0.0
    slenderness_ok: bool = True


@dataclass
class AnchorTension:
    """Single anchor in the 2×2 layout"""
    anchor_id: str
    x: float    # mm
    y: float    # mm
    tension: float  # N


@dataclass
class AnchorResult(DesignResult):
    """Anchor group results"""
    anchor: Optional[AnchorSpec] = None
    tensions: List[AnchorTension] = field(default_factory=list)
    sum_y2: float = 0.0         # m²
    t_max: float = 0.0          # N
    shear_per_anchor: float = 0.0  # N
    ta_conc: float = 0.0        # N
    ta_eff: float = 0.0         # N
    ratio_steel: float = 0.0
    ratio_conc: float = 0.0
    ratio_combined: float = 0.0
    combined_ok: bool = True
    min_edge: float = 0.0
    min_spacing: float = 0.0
    edge1_ok: bool = True
    edge2_ok: bool = True
    spacing_ok: bool = True
    hef: float = 0.0
    hef_required: float = 0.0
    hef_ok: bool = True


@dataclass
class BasePlateResult(DesignResult):
    """Base plate bending results"""
    t_row: float = 0.0          # N
    a_mm: float = 0.0
    s_mm: float = 0.0
    moment_per_width: float = 0.0  # N·mm/mm
    sigma_allow: float = 0.0    # N/mm²
    t_required: float = 0.0     # mm
    t_adopted: float = 0.0      # mm
    t_suggested: float = 0.0    # mm, stock thickness covering t_required


@dataclass
class FoundationResult(DesignResult):
    """Footing stability results with explanatory notes"""
    stability: Optional[StabilityResult] = None
    overturning_note: str = ""
    sliding_note: str = ""


@dataclass
class DesignCheckResult:
    """Aggregate of all checks for one set of inputs"""
    inputs: DesignInputs
    wind: WindResult
    loads: LoadState
    section: SectionResult
    anchor: AnchorResult
    plate: BasePlateResult
    foundation: Optional[FoundationResult] = None

    @property
    def foundation_ok(self) -> bool:
        return self.foundation is None or self.foundation.is_ok

    @property
    def overall_ok(self) -> bool:
        return (
            self.section.stress_ok
            and self.section.slenderness_ok
            and self.anchor.combined_ok
            and self.anchor.edge1_ok
            and self.anchor.edge2_ok
            and self.anchor.spacing_ok
            and self.anchor.hef_ok
            and self.plate.is_ok
            and self.foundation_ok
        )
