"""
Automatic Design Module

Picks the lightest passing member section, the weakest passing anchor, a
stock base plate and, for free-standing signs, the smallest passing footing.
Each stage works on the loads of the current inputs; the caller's inputs are
never modified, a new ``DesignInputs`` is returned.

Usage:
    designer = AutoDesigner(inputs)
    result = designer.run()
    result.inputs        # adopted design
    result.check.overall_ok
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple
import logging

from ..core.catalogs import AnchorSpec, SectionSpec, required_embedment, snap_plate_thickness
from ..core.config import normalize
from ..core.constants import (
    ANCHOR_QTY_CANDIDATES,
    ANCHOR_SHEAR_DIVISOR,
    PLATE_AUTO_MARGIN,
    PLATE_MIN_CLEAR,
    PLATE_MIN_ROW_SPACING,
)
from ..core.data_models import DesignCheckResult, DesignInputs, LoadState
from ..core.settings import EngineSettings
from ..engines.anchor_engine import (
    compute_anchor_tensions,
    concrete_tension_capacity,
    detailing_checks,
    interaction_ratio,
    max_tension,
)
from ..engines.base_plate_engine import compute_plate_thickness, top_row_tension
from ..engines.design_check import run_design_check
from ..engines.load_combiner import LoadCombiner
from ..engines.section_engine import check_section
from ..engines.wind_engine import WindEngine
from .optimizer import FoundationOptimizer, OptimizationResult

logger = logging.getLogger(__name__)


def _catalog_modulus(section: SectionSpec, axis: str) -> float:
    """Catalog Z about the bending axis (cm³), 0 when the row has none"""
    z_cm3 = section.zx_cm3 if axis == "x" else section.zy_cm3
    return z_cm3 if z_cm3 is not None else 0.0


@dataclass(frozen=True)
class AutoDesignResult:
    """
    Outcome of an automatic design pass.

    Attributes:
        inputs: Adopted design inputs (normalized)
        section: Adopted member section
        section_ok: Adopted section passes stress and slenderness
        anchor: Adopted anchor
        anchor_qty: Displayed anchor quantity
        anchor_embed: Adopted embedment (mm)
        anchor_ok: A passing anchor was found
        plate_thickness: Adopted stock plate thickness (mm)
        foundation: Footing optimizer result (free-standing signs only)
        check: Full design check of the adopted inputs
    """
    inputs: DesignInputs
    section: Optional[SectionSpec]
    section_ok: bool
    anchor: Optional[AnchorSpec]
    anchor_qty: int
    anchor_embed: float
    anchor_ok: bool
    plate_thickness: float
    foundation: Optional[OptimizationResult]
    check: DesignCheckResult

    @property
    def foundation_feasible(self) -> bool:
        return self.foundation is None or self.foundation.feasible


class AutoDesigner:
    """
    Automatic design orchestrator.
    """

    def __init__(self, inputs: DesignInputs, settings: Optional[EngineSettings] = None):
        self.inputs = normalize(inputs)
        self.settings = settings or EngineSettings()

    def _loads(self) -> LoadState:
        wind = WindEngine(self.inputs).calculate()
        return LoadCombiner(self.inputs).combine(wind.wind_force)

    def select_section(self, loads: LoadState) -> Tuple[Optional[SectionSpec], bool]:
        """
        Scan the current family by ascending section modulus. Stop at the
        first passing section, otherwise keep the last one scanned.
        """
        axis = self.inputs.axis
        member = self.inputs.member
        candidates = sorted(self.inputs.family_sections(), key=lambda s: _catalog_modulus(s, axis))
        if not candidates:
            return self.inputs.active_section(), False

        picked = None
        for section in candidates:
            picked = section
            result = check_section(
                section, axis, loads.moment_per_column, member.fy, member.k_factor, member.length
            )
            logger.debug(f"Section {section.name}: η={result.ratio:.3f}, λ={result.slenderness:.0f}")
            if result.stress_ok and result.slenderness_ok:
                return picked, True
        return picked, False

    def select_anchor(self, loads: LoadState) -> Tuple[Optional[AnchorSpec], int, float, bool]:
        """
        Scan the applicable anchor catalog by ascending steel tension capacity.

        Candidates failing edge distance or spacing are skipped. Embedment is
        the required minimum of each candidate. Shear is always shared by four
        anchors, so the displayed quantity only records the first candidate
        quantity that passes.

        Returns:
            (anchor, quantity, embedment, found)
        """
        layout = self.inputs.anchor
        sign_type = self.inputs.panel.sign_type
        fc = self.inputs.foundation.fc
        tensions, _ = compute_anchor_tensions(loads.moment_per_column, layout.gauge, layout.pitch)
        t_max = max_tension(tensions)
        shear = loads.force_per_column / ANCHOR_SHEAR_DIVISOR

        for candidate in sorted(self.inputs.anchor_catalog(), key=lambda a: a.ta):
            if not all(detailing_checks(candidate, layout, sign_type)):
                logger.debug(f"Anchor {candidate.name} skipped: edge/spacing")
                continue
            hef_try = required_embedment(candidate, self.inputs.is_freestanding)
            ta_eff = min(candidate.ta, concrete_tension_capacity(fc, hef_try))
            ratio = interaction_ratio(t_max, ta_eff, shear, candidate.va)
            logger.debug(f"Anchor {candidate.name}: η={ratio:.3f} at hef={hef_try:.0f} mm")
            if ratio < 1.0:
                # Quantity does not enter the ratio, the first candidate passes
                return candidate, ANCHOR_QTY_CANDIDATES[0], hef_try, True

        return self.inputs.active_anchor(), layout.qty, layout.embed, False

    def select_plate(self, loads: LoadState) -> float:
        """Stock thickness covering t_req plus a fixed margin (mm)"""
        layout = self.inputs.anchor
        plate = self.inputs.plate
        tensions, _ = compute_anchor_tensions(loads.moment_per_column, layout.gauge, layout.pitch)
        t_req = compute_plate_thickness(
            top_row_tension(tensions),
            max(PLATE_MIN_CLEAR, plate.a_clear),
            max(PLATE_MIN_ROW_SPACING, layout.pitch),
            plate.plate_fy,
        )
        return snap_plate_thickness(t_req + PLATE_AUTO_MARGIN)

    def optimize_foundation(self, loads: LoadState) -> OptimizationResult:
        optimizer = FoundationOptimizer(
            self.inputs.foundation,
            step=self.settings.opt_step,
            workers=self.settings.opt_workers,
        )
        return optimizer.optimize(
            loads.moment_per_column, loads.force_per_column, loads.vertical_per_column
        )

    def run(self) -> AutoDesignResult:
        """Run every stage and return the adopted design."""
        inputs = self.inputs
        loads = self._loads()

        section, section_ok = self.select_section(loads)
        anchor, qty, embed, anchor_ok = self.select_anchor(loads)
        thickness = self.select_plate(loads)

        member = inputs.member
        if section is not None:
            member = replace(member, family=section.family, section_name=section.name)

        anchor_input = inputs.anchor
        if anchor is not None:
            embed = max(embed, required_embedment(anchor, inputs.is_freestanding))
            anchor_input = replace(anchor_input, anchor_name=anchor.name, qty=qty, embed=embed)

        foundation = inputs.foundation
        opt_result = None
        if inputs.is_freestanding:
            opt_result = self.optimize_foundation(loads)
            if opt_result.best is not None:
                foundation = replace(foundation, geometry=opt_result.best)

        adopted = normalize(replace(
            inputs,
            member=member,
            anchor=anchor_input,
            plate=replace(inputs.plate, thickness=thickness),
            foundation=foundation,
        ))
        check = run_design_check(adopted, normalized=True)

        logger.info(
            f"Auto design: section {adopted.member.section_name} ({'OK' if section_ok else 'NG'}), "
            f"anchor {adopted.anchor.anchor_name} ×{adopted.anchor.qty} hef={adopted.anchor.embed:.0f} mm "
            f"({'OK' if anchor_ok else 'NG'}), plate t={thickness:.0f} mm, "
            f"overall {'OK' if check.overall_ok else 'NG'}"
        )
        if not anchor_ok:
            logger.warning("Auto design: no anchor in the catalog passes, current anchor kept")

        return AutoDesignResult(
            inputs=adopted,
            section=section,
            section_ok=section_ok,
            anchor=anchor,
            anchor_qty=adopted.anchor.qty,
            anchor_embed=adopted.anchor.embed,
            anchor_ok=anchor_ok,
            plate_thickness=thickness,
            foundation=opt_result,
            check=check,
        )
