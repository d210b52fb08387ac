"""
Tests for the footing grid-search optimizer.
"""

from dataclasses import replace

import pytest

from signcalc.ai.optimizer import (
    FoundationOptimizer,
    OptimizationStatus,
    generate_candidates,
    grid_axis,
    objective_value,
)
from signcalc.core.data_models import (
    FoundationGeometry,
    FoundationInput,
    OptimizationObjective,
)
from signcalc.engines.foundation_engine import evaluate_foundation
from signcalc.engines.load_combiner import LoadCombiner
from signcalc.engines.wind_engine import WindEngine


def _loads(inputs):
    wind = WindEngine(inputs).calculate()
    loads = LoadCombiner(inputs).combine(wind.wind_force)
    return loads.moment_per_column, loads.force_per_column, loads.vertical_per_column


class TestCandidateGeneration:
    """Grid from integer indices."""

    def test_axis_endpoints_inclusive(self):
        axis = grid_axis((0.6, 2.0), 0.05)
        assert len(axis) == 29
        assert axis[0] == pytest.approx(0.6)
        assert axis[-1] == pytest.approx(2.0)

    def test_full_grid_size_and_order(self):
        candidates = list(generate_candidates(FoundationGeometry()))

        assert len(candidates) == 29 * 29 * 33
        first, second, last = candidates[0], candidates[1], candidates[-1]
        assert (first.width_b, first.depth_d, first.thickness_h) == pytest.approx((0.6, 0.6, 0.4))
        assert second.thickness_h == pytest.approx(0.45)
        assert (last.width_b, last.depth_d, last.thickness_h) == pytest.approx((2.0, 2.0, 2.0))

    def test_candidates_keep_shape_and_embedment(self):
        base = FoundationGeometry(embed_depth_z=0.5, t1=0.3, t2=0.25)
        candidate = next(generate_candidates(base, step=0.1))
        assert candidate.embed_depth_z == 0.5
        assert (candidate.t1, candidate.t2) == (0.3, 0.25)

    def test_embedment_follows_thickness(self):
        candidates = list(generate_candidates(FoundationGeometry(), step=0.1, embed_offset=0.1))
        assert all(c.embed_depth_z == pytest.approx(c.thickness_h - 0.1) for c in candidates)


class TestObjective:

    def test_bd_objective(self, foundation_input):
        geometry = FoundationGeometry(width_b=1.0, depth_d=0.8, thickness_h=0.5)
        s = evaluate_foundation(geometry, foundation_input, 0.0, 0.0, 0.0)

        assert objective_value(s, OptimizationObjective.BD) == pytest.approx(108.5)
        assert objective_value(s, OptimizationObjective.VOL) == pytest.approx(0.4)


class TestReducer:
    """Tie-breaking and infeasible rescue."""

    def test_first_candidate_wins_ties(self):
        foundation = FoundationInput(opt_objective=OptimizationObjective.VOL)
        optimizer = FoundationOptimizer(foundation)
        a = FoundationGeometry(width_b=0.8, depth_d=0.6, thickness_h=0.5)
        b = FoundationGeometry(width_b=0.6, depth_d=0.8, thickness_h=0.5)

        forward = optimizer.reduce(optimizer.evaluate([a, b], 0.0, 0.0, 0.0))
        backward = optimizer.reduce(optimizer.evaluate([b, a], 0.0, 0.0, 0.0))

        assert forward.best.width_b == pytest.approx(0.8)
        assert backward.best.width_b == pytest.approx(0.6)

    def test_unloaded_sign_takes_smallest_footing(self, foundation_input):
        result = FoundationOptimizer(foundation_input, step=0.1).optimize(0.0, 0.0, 0.0)

        assert result.status == OptimizationStatus.FEASIBLE
        assert (result.best.width_b, result.best.depth_d, result.best.thickness_h) == (0.6, 0.6, 0.4)

    def test_infeasible_grid_returns_closest(self, foundation_input):
        result = FoundationOptimizer(foundation_input, step=0.1).optimize(1.0e7, 1.0e6, 0.0)

        assert result.status == OptimizationStatus.RESCUED
        assert not result.feasible
        assert result.best is not None
        assert not result.stability.ok
        assert result.evaluated == 15 * 15 * 17

    def test_empty_candidate_list(self, foundation_input):
        result = FoundationOptimizer(foundation_input).reduce([])
        assert result.status == OptimizationStatus.FAILED
        assert result.best is None


class TestOptimize:
    """Default free-standing sign."""

    def test_feasible_optimum_is_minimal(self, default_inputs):
        moment, horizontal, weight = _loads(default_inputs)
        optimizer = FoundationOptimizer(default_inputs.foundation, step=0.1)
        result = optimizer.optimize(moment, horizontal, weight)

        assert result.feasible
        assert result.stability.ok

        candidates = list(generate_candidates(default_inputs.foundation.geometry, step=0.1, embed_offset=0.1))
        passing = [s for s in optimizer.evaluate(candidates, moment, horizontal, weight) if s.ok]
        best = min(objective_value(s, OptimizationObjective.BD) for s in passing)
        assert result.objective_value == pytest.approx(best)

    def test_adopted_dimensions_rounded(self, default_inputs):
        moment, horizontal, weight = _loads(default_inputs)
        result = FoundationOptimizer(default_inputs.foundation, step=0.1).optimize(moment, horizontal, weight)

        for value in (result.best.width_b, result.best.depth_d, result.best.thickness_h):
            assert value == round(value, 2)

    def test_parallel_matches_sequential(self, default_inputs):
        moment, horizontal, weight = _loads(default_inputs)
        foundation = replace(default_inputs.foundation, opt_objective=OptimizationObjective.VOL)

        sequential = FoundationOptimizer(foundation, step=0.1).optimize(moment, horizontal, weight)
        parallel = FoundationOptimizer(foundation, step=0.1, workers=2, chunk_size=250).optimize(
            moment, horizontal, weight
        )

        assert parallel.best == sequential.best
        assert parallel.objective_value == sequential.objective_value
        assert parallel.evaluated == sequential.evaluated


class TestLazyEvaluation:
    """Sequential evaluation pulls one candidate at a time."""

    def test_sequential_evaluation_is_lazy(self, foundation_input):
        def candidates():
            yield FoundationGeometry()
            raise AssertionError("second candidate requested too early")

        evaluations = FoundationOptimizer(foundation_input).evaluate(candidates(), 0.0, 0.0, 0.0)
        first = next(iter(evaluations))
        assert first.geometry == FoundationGeometry()

    def test_chunks_cover_generator(self, foundation_input):
        optimizer = FoundationOptimizer(foundation_input, step=0.1, workers=2, chunk_size=7)
        grid = generate_candidates(FoundationGeometry(), step=0.2)
        evaluations = list(optimizer.evaluate(grid, 0.0, 0.0, 0.0))
        expected = [s.geometry for s in FoundationOptimizer(foundation_input).evaluate(
            generate_candidates(FoundationGeometry(), step=0.2), 0.0, 0.0, 0.0
        )]
        assert [s.geometry for s in evaluations] == expected
