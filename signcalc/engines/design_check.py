"""
Design Check - runs every engine on one set of inputs.
"""

import logging

from ..core.config import normalize
from ..core.data_models import DesignCheckResult, DesignInputs
from .anchor_engine import AnchorEngine
from .base_plate_engine import BasePlateEngine
from .foundation_engine import FoundationEngine
from .load_combiner import LoadCombiner
from .section_engine import SectionEngine
from .wind_engine import WindEngine

logger = logging.getLogger(__name__)


def run_design_check(inputs: DesignInputs, normalized: bool = False) -> DesignCheckResult:
    """
    Full verification pass: wind, load combination, member, anchors,
    base plate and, for free-standing signs, the footing.

    Args:
        inputs: Design inputs
        normalized: Skip ``normalize`` when the caller already applied it

    Returns:
        DesignCheckResult with one result per element
    """
    if not normalized:
        inputs = normalize(inputs)

    wind = WindEngine(inputs).calculate()
    loads = LoadCombiner(inputs).combine(wind.wind_force)
    section = SectionEngine(inputs).calculate(loads)
    anchor = AnchorEngine(inputs).calculate(loads)
    plate = BasePlateEngine(inputs).calculate(loads.moment_per_column)
    foundation = FoundationEngine(inputs).calculate(loads) if inputs.is_freestanding else None

    result = DesignCheckResult(
        inputs=inputs,
        wind=wind,
        loads=loads,
        section=section,
        anchor=anchor,
        plate=plate,
        foundation=foundation,
    )
    logger.debug(
        f"Design check: section η={section.ratio:.3f}, anchor η={anchor.ratio_combined:.3f}, "
        f"plate t_req={plate.t_required:.1f} mm, overall {'OK' if result.overall_ok else 'NG'}"
    )
    return result
