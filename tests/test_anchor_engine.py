"""
Tests for the anchor group model.
"""

import math
from dataclasses import replace

import pytest

from signcalc.core.catalogs import AnchorSpec
from signcalc.core.data_models import AnchorInput, SignType
from signcalc.engines.anchor_engine import (
    AnchorEngine,
    check_anchor,
    compute_anchor_tensions,
    concrete_tension_capacity,
    detailing_checks,
    interaction_ratio,
    max_tension,
)
from signcalc.engines.design_check import run_design_check
from signcalc.engines.load_combiner import LoadCombiner
from signcalc.report import build_report_snapshot


class TestTensionDistribution:
    """Σy² distribution over the 2×2 layout."""

    def test_layout_positions(self):
        tensions, _ = compute_anchor_tensions(1000.0, 200.0, 160.0)
        positions = {t.anchor_id: (t.x, t.y) for t in tensions}

        assert positions == {
            "UL": (-80.0, 100.0),
            "UR": (80.0, 100.0),
            "LL": (-80.0, -100.0),
            "LR": (80.0, -100.0),
        }

    def test_gauge_200_pitch_160(self):
        """Σy² over four offsets is 0.04 m², the upper row carries 5M."""
        moment = 1000.0
        tensions, sum_y2 = compute_anchor_tensions(moment, 200.0, 160.0)
        upper = [t.tension for t in tensions if t.y > 0]

        assert sum_y2 == pytest.approx(0.04)
        assert upper == pytest.approx([2500.0, 2500.0])
        assert sum(upper) == pytest.approx(5 * moment)
        assert max_tension(tensions) == pytest.approx(2500.0)

    @pytest.mark.parametrize("moment,gauge", [(1234.5, 200.0), (-800.0, 300.0), (52000.0, 150.0)])
    def test_moment_consistency(self, moment, gauge):
        tensions, _ = compute_anchor_tensions(moment, gauge, 160.0)
        assert sum(t.tension * t.y / 1000.0 for t in tensions) == pytest.approx(moment)

    def test_negative_moment_loads_lower_row(self):
        tensions, _ = compute_anchor_tensions(-1000.0, 200.0, 160.0)
        by_id = {t.anchor_id: t.tension for t in tensions}

        assert by_id["UL"] == pytest.approx(-2500.0)
        assert by_id["UR"] == pytest.approx(-2500.0)
        assert max_tension(tensions) == pytest.approx(2500.0)

    def test_compression_is_not_tension(self):
        tensions, _ = compute_anchor_tensions(-1000.0, 200.0, 160.0)
        compressed = [t for t in tensions if t.tension < 0]

        assert len(compressed) == 2
        assert max_tension(compressed) == 0.0
        assert max_tension([]) == 0.0

    def test_zero_gauge_gives_zero_tension(self):
        tensions, sum_y2 = compute_anchor_tensions(1000.0, 0.0, 160.0)
        assert sum_y2 == 0.0
        assert all(t.tension == 0.0 for t in tensions)


class TestCapacity:
    """Concrete cone capacity and interaction."""

    def test_concrete_capacity_value(self):
        expected = 7.0 * math.sqrt(21.0) * 540.0 ** 1.5 * 0.75 * 0.85 * 0.85
        assert concrete_tension_capacity(21.0, 540.0) == pytest.approx(expected)

    def test_concrete_capacity_scales_with_hef(self):
        assert concrete_tension_capacity(21.0, 400.0) == pytest.approx(
            8.0 * concrete_tension_capacity(21.0, 100.0)
        )

    @pytest.mark.parametrize("fc,hef", [(0.0, 300.0), (21.0, 0.0), (-1.0, 300.0)])
    def test_concrete_capacity_zero(self, fc, hef):
        assert concrete_tension_capacity(fc, hef) == 0.0

    def test_interaction_infinite_without_tension_capacity(self):
        assert math.isinf(interaction_ratio(100.0, 0.0, 10.0, 100.0))

    def test_interaction_without_shear_capacity(self):
        assert interaction_ratio(50.0, 100.0, 10.0, 0.0) == pytest.approx(0.5)

    def test_check_anchor_takes_smaller_capacity(self):
        anchor = AnchorSpec("T", 20.0, ta=1.0e6, va=1.0e5)
        result = check_anchor(anchor, AnchorInput(), SignType.WALL, 1000.0, 400.0, 21.0, 200.0)

        assert result.ta_eff == pytest.approx(result.ta_conc)
        assert result.shear_per_anchor == pytest.approx(100.0)
        assert result.ratio_combined == pytest.approx(
            result.t_max / result.ta_conc + 100.0 / 1.0e5
        )
        assert result.ratio_steel == pytest.approx(result.t_max / 1.0e6)
        assert result.ratio_conc == pytest.approx(result.t_max / result.ta_conc)


class TestDetailing:
    """Edge distance, spacing and embedment."""

    def test_default_minimums_round_half_up(self):
        anchor = AnchorSpec("T", 27.0, 1.0, 1.0)
        assert anchor.required_edge == 41.0
        assert anchor.required_spacing == 81.0

    def test_second_edge_waived_for_projecting(self):
        anchor = AnchorSpec("T", 20.0, 1.0, 1.0)
        layout = AnchorInput(edge1=50.0, edge2=10.0, spacing=100.0)

        assert detailing_checks(anchor, layout, SignType.PROJECTING) == (True, True, True)
        assert detailing_checks(anchor, layout, SignType.WALL) == (True, False, True)

    def test_spacing_uses_catalog_minimum(self):
        anchor = AnchorSpec("T", 20.0, 1.0, 1.0, min_spacing=150.0)
        layout = AnchorInput(spacing=120.0)
        assert detailing_checks(anchor, layout, SignType.WALL)[2] is False

    def test_embedment_check(self, default_inputs):
        loads = LoadCombiner(default_inputs).combine(1000.0)
        result = AnchorEngine(default_inputs).calculate(loads)

        assert result.anchor.name == "M27 ABR"
        assert result.hef_required == pytest.approx(540.0)
        assert result.hef_ok
        assert result.shear_per_anchor == pytest.approx(loads.force_per_column / 4)
        assert len(result.calculations) == 3


class TestEmptyCatalog:
    """A wall sign with no general anchors is reported, not raised."""

    def test_empty_general_catalog_fails_check(self, wall_inputs):
        inputs = replace(wall_inputs, anchors=())
        loads = LoadCombiner(inputs).combine(1000.0)
        result = AnchorEngine(inputs).calculate(loads)

        assert result.anchor is None
        assert result.status == "FAIL"
        assert not result.combined_ok
        assert result.warnings
        assert result.t_max > 0
        assert result.calculations

    def test_design_check_not_ok(self, wall_inputs):
        result = run_design_check(replace(wall_inputs, anchors=()))

        assert not result.overall_ok
        assert build_report_snapshot(result)["anchor"]["name"] == ""
