"""
Footing Optimization Module

Exhaustive grid search over footing width B, depth D and thickness H for the
smallest footing that passes bearing, overturning and sliding. Organised as
a candidate generator, an evaluator and a reducer, so the evaluation can be
spread over worker processes without changing the result.

When no candidate passes, the reducer switches to a rescue ranking and
returns the closest candidate, flagged as infeasible.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple
import logging

import numpy as np

from ..core.constants import (
    EMBED_AUTO_OFFSET,
    OPT_ADOPT_DIGITS,
    OPT_B_RANGE,
    OPT_D_RANGE,
    OPT_H_RANGE,
    OPT_RESCUE_SCALE,
    OPT_STEP,
)
from ..core.data_models import (
    FoundationGeometry,
    FoundationInput,
    OptimizationObjective,
    StabilityResult,
)
from ..engines.foundation_engine import evaluate_foundation

logger = logging.getLogger(__name__)


class OptimizationStatus(Enum):
    """Footing search outcome."""
    FEASIBLE = "feasible"       # passing footing found
    RESCUED = "rescued"         # nothing passed, closest candidate returned
    FAILED = "failed"           # empty grid


@dataclass(frozen=True)
class OptimizationResult:
    """
    Footing optimization result.

    Attributes:
        status: Search outcome
        best: Adopted geometry, dimensions rounded to 0.01 m
        stability: Evaluation of the winning grid candidate
        feasible: True when the adopted footing passes every check
        objective_value: Objective (feasible) or rescue score (infeasible)
        evaluated: Number of candidates evaluated
        message: Human-readable summary
    """
    status: OptimizationStatus
    best: Optional[FoundationGeometry]
    stability: Optional[StabilityResult]
    feasible: bool
    objective_value: float
    evaluated: int
    message: str


def grid_axis(bounds: Tuple[float, float], step: float) -> np.ndarray:
    """Inclusive axis from integer indices, lo + i·step, rounded to avoid drift"""
    lo, hi = bounds
    count = int(round((hi - lo) / step)) + 1
    return np.round(lo + np.arange(count) * step, 10)


def generate_candidates(
    base: FoundationGeometry,
    step: float = OPT_STEP,
    b_range: Tuple[float, float] = OPT_B_RANGE,
    d_range: Tuple[float, float] = OPT_D_RANGE,
    h_range: Tuple[float, float] = OPT_H_RANGE,
    embed_offset: Optional[float] = None,
) -> Iterator[FoundationGeometry]:
    """
    Candidate footings in enumeration order: B ascending, then D, then H.
    Shape and L-shape band widths are taken from ``base``. The embedment depth
    is kept from ``base`` unless ``embed_offset`` is given, in which case it
    follows each thickness as z = max(0, H - offset).
    """
    for b in grid_axis(b_range, step):
        for d in grid_axis(d_range, step):
            for h in grid_axis(h_range, step):
                candidate = base.resized(float(b), float(d), float(h))
                if embed_offset is not None:
                    candidate = replace(candidate, embed_depth_z=max(0.0, float(h) - embed_offset))
                yield candidate


def objective_value(stability: StabilityResult, objective: OptimizationObjective) -> float:
    """BD: 100B + 10D + H (smallest plan first). VOL: effective area × H."""
    g = stability.geometry
    if objective == OptimizationObjective.VOL:
        return stability.volume
    return 100.0 * g.width_b + 10.0 * g.depth_d + g.thickness_h


def rescue_score(stability: StabilityResult, objective: OptimizationObjective) -> float:
    """Closeness to passing, scaled, minus a size penalty. Larger is better."""
    g = stability.geometry
    if objective == OptimizationObjective.VOL:
        penalty = g.width_b * g.depth_d * g.thickness_h
    else:
        penalty = 100.0 * g.width_b + 10.0 * g.depth_d + g.thickness_h
    return stability.achievement_ratio * OPT_RESCUE_SCALE - penalty


def _evaluate_chunk(
    args: Tuple[List[FoundationGeometry], FoundationInput, float, float, float]
) -> List[StabilityResult]:
    geometries, foundation, moment, horizontal, weight = args
    return [evaluate_foundation(g, foundation, moment, horizontal, weight) for g in geometries]


def _chunked(items: Iterable[FoundationGeometry], size: int) -> Iterator[List[FoundationGeometry]]:
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


def _round_geometry(geometry: FoundationGeometry) -> FoundationGeometry:
    return geometry.resized(
        round(geometry.width_b, OPT_ADOPT_DIGITS),
        round(geometry.depth_d, OPT_ADOPT_DIGITS),
        round(geometry.thickness_h, OPT_ADOPT_DIGITS),
    )


class FoundationOptimizer:
    """
    Grid-search footing optimizer.

    Usage:
        optimizer = FoundationOptimizer(foundation_input, workers=1)
        result = optimizer.optimize(moment, horizontal, weight)
    """

    def __init__(
        self,
        foundation: FoundationInput,
        step: float = OPT_STEP,
        workers: int = 1,
        chunk_size: int = 1000,
    ):
        self.foundation = foundation
        self.step = step
        self.workers = max(1, int(workers))
        self.chunk_size = max(1, int(chunk_size))

    def evaluate(
        self, candidates: Iterable[FoundationGeometry],
        moment: float, horizontal: float, weight: float,
    ) -> Iterator[StabilityResult]:
        """Evaluate candidates lazily, results in candidate order."""
        if self.workers == 1:
            return (
                evaluate_foundation(g, self.foundation, moment, horizontal, weight)
                for g in candidates
            )
        return self._evaluate_parallel(candidates, moment, horizontal, weight)

    def _evaluate_parallel(
        self, candidates: Iterable[FoundationGeometry],
        moment: float, horizontal: float, weight: float,
    ) -> Iterator[StabilityResult]:
        jobs = (
            (chunk, self.foundation, moment, horizontal, weight)
            for chunk in _chunked(candidates, self.chunk_size)
        )
        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            # map() yields chunks in submission order
            for chunk_result in executor.map(_evaluate_chunk, jobs):
                yield from chunk_result

    def reduce(self, evaluations: Iterable[StabilityResult]) -> OptimizationResult:
        """
        Pick the optimum. Strict comparisons keep the first enumerated
        candidate on ties, so the outcome does not depend on evaluation order.
        """
        objective = self.foundation.opt_objective
        best: Optional[StabilityResult] = None
        best_value = float("inf")
        near: Optional[StabilityResult] = None
        near_score = float("-inf")
        evaluated = 0

        for stability in evaluations:
            evaluated += 1
            if stability.ok:
                value = objective_value(stability, objective)
                if value < best_value:
                    best, best_value = stability, value
            elif best is None:
                score = rescue_score(stability, objective)
                if near is None or score > near_score:
                    near, near_score = stability, score

        if best is not None:
            adopted = _round_geometry(best.geometry)
            message = (
                f"Footing optimized ({objective.value}): B={adopted.width_b:.2f} "
                f"D={adopted.depth_d:.2f} H={adopted.thickness_h:.2f} m"
            )
            logger.info(message)
            return OptimizationResult(
                status=OptimizationStatus.FEASIBLE,
                best=adopted,
                stability=best,
                feasible=True,
                objective_value=best_value,
                evaluated=evaluated,
                message=message,
            )

        if near is not None:
            adopted = _round_geometry(near.geometry)
            message = (
                f"No passing footing in the search grid; closest candidate "
                f"B={adopted.width_b:.2f} D={adopted.depth_d:.2f} H={adopted.thickness_h:.2f} m "
                f"(achievement {near.achievement_ratio:.3f}, allow uplift "
                f"{'ON' if self.foundation.allow_uplift else 'OFF'})"
            )
            logger.warning(message)
            return OptimizationResult(
                status=OptimizationStatus.RESCUED,
                best=adopted,
                stability=near,
                feasible=False,
                objective_value=near_score,
                evaluated=evaluated,
                message=message,
            )

        message = "Footing search grid is empty"
        logger.warning(message)
        return OptimizationResult(
            status=OptimizationStatus.FAILED,
            best=None,
            stability=None,
            feasible=False,
            objective_value=float("nan"),
            evaluated=0,
            message=message,
        )

    def optimize(self, moment: float, horizontal: float, weight: float) -> OptimizationResult:
        """
        Search the grid for the footing under one column.

        Args:
            moment: Base moment per column (N·m)
            horizontal: Horizontal force per column (N)
            weight: Sign self weight per column (N)
        """
        offset = EMBED_AUTO_OFFSET if self.foundation.embed_depth_auto else None
        candidates = generate_candidates(self.foundation.geometry, self.step, embed_offset=offset)
        logger.debug(f"Evaluating footing grid at {self.step} m on {self.workers} worker(s)")
        evaluations = self.evaluate(candidates, moment, horizontal, weight)
        return self.reduce(evaluations)
