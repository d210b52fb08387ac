"""
Tests for footing stability: contact state, bearing, overturning, sliding.
"""

import math
from dataclasses import replace

import pytest

from signcalc.core.data_models import (
    ContactMode,
    FoundationGeometry,
    FoundationInput,
    FoundationShape,
)
from signcalc.engines.design_check import run_design_check
from signcalc.engines.foundation_engine import (
    bearing_allowables,
    bearing_pressures,
    classify_contact,
    evaluate_foundation,
    passive_resistance,
)


class TestContactState:
    """Contact classification and pressure continuity."""

    def test_full_contact_at_kern_limit(self):
        assert classify_contact(0.8 / 6, 0.8) == (ContactMode.FULL, 0.8)

    def test_partial_contact(self):
        mode, b_eff = classify_contact(0.3, 0.8)
        assert mode == ContactMode.PARTIAL
        assert b_eff == pytest.approx(3 * (0.4 - 0.3))

    def test_no_contact_at_half_width(self):
        assert classify_contact(0.4, 0.8) == (ContactMode.NONE, 0.0)

    def test_sigma_max_continuous_at_kern_limit(self):
        geometry = FoundationGeometry(width_b=1.2, depth_d=1.0)
        vertical = 50000.0
        e = 1.2 / 6

        full = bearing_pressures(vertical, e, geometry, *classify_contact(e, 1.2))
        e_partial = e + 1e-9
        partial = bearing_pressures(vertical, e_partial, geometry, *classify_contact(e_partial, 1.2))

        assert full[0] == pytest.approx(partial[0], rel=1e-6)
        assert full[1] == pytest.approx(0.0, abs=1e-6)


class TestEvaluateFoundation:
    """Full evaluation of one geometry."""

    def test_vertical_load_rect(self, foundation_input):
        geometry = FoundationGeometry()
        s = evaluate_foundation(geometry, foundation_input, 0.0, 0.0, 2450.0)

        # 24 kN/m³ × 0.512 m³ + 18 kN/m³ × 0.64 m² × 0.3 m + 2450 N
        assert s.vertical_load == pytest.approx(12288.0 + 3456.0 + 2450.0)
        assert s.contact_mode == ContactMode.FULL
        assert s.no_uplift

    def test_l_shape_effective_area(self):
        geometry = FoundationGeometry(
            width_b=1.2, depth_d=1.0, thickness_h=0.5, shape=FoundationShape.L, t1=0.3, t2=0.4
        )
        assert geometry.effective_area == pytest.approx(0.36 + 0.4 - 0.12)

    def test_no_contact_fails_bearing(self, foundation_input):
        """e > B/2 -> no contact, σmax infinite, bearing fails."""
        s = evaluate_foundation(FoundationGeometry(), foundation_input, 1.0e6, 1000.0, 0.0)

        assert s.eccentricity > 0.4
        assert s.contact_mode == ContactMode.NONE
        assert math.isinf(s.sigma_max)
        assert not s.bearing_ok
        assert not s.ok
        assert s.achievement_ratio == 0.0

    def test_bearing_allowable_governed_by_smaller(self):
        foundation = FoundationInput(soil_qa=300.0, gamma_bearing=2.0, fc=0.5)
        soil, conc, governing = bearing_allowables(foundation)

        assert soil == pytest.approx(150.0)
        assert conc == pytest.approx(125.0)
        assert governing == pytest.approx(125.0)

    def test_evaluation_is_idempotent(self, foundation_input, large_footing):
        first = evaluate_foundation(large_footing, foundation_input, 47040.0, 5000.0, 0.0)
        second = evaluate_foundation(large_footing, foundation_input, 47040.0, 5000.0, 0.0)
        assert first == second

    def test_overturning_improves_with_width(self, foundation_input):
        previous = 0.0
        for b in (0.8, 1.0, 1.2, 1.6, 2.0):
            geometry = FoundationGeometry(width_b=b, depth_d=1.0, thickness_h=0.8)
            s = evaluate_foundation(geometry, foundation_input, 20000.0, 5000.0, 2450.0)
            assert s.fs_overturning >= previous
            previous = s.fs_overturning

    def test_bearing_allowable_independent_of_thickness(self, foundation_input):
        values = {
            evaluate_foundation(
                FoundationGeometry(thickness_h=h), foundation_input, 1000.0, 100.0, 0.0
            ).qa_allow
            for h in (0.4, 0.8, 1.6)
        }
        assert len(values) == 1


class TestPassiveResistance:

    def test_passive_values(self, foundation_input):
        geometry = FoundationGeometry(depth_d=0.8, embed_depth_z=0.7)
        raw, reduced, moment = passive_resistance(foundation_input, geometry)

        assert raw == pytest.approx(0.5 * 3.0 * 18000.0 * 0.8 * 0.49)
        assert reduced == pytest.approx(raw * 0.5)
        assert moment == pytest.approx(reduced * 0.7 / 3)

    @pytest.mark.parametrize("changes", [
        {"use_passive": False},
        {"front_soil_available": False},
    ])
    def test_passive_switched_off(self, foundation_input, changes):
        foundation = replace(foundation_input, **changes)
        assert passive_resistance(foundation, FoundationGeometry()) == (0.0, 0.0, 0.0)

    def test_zero_embedment(self, foundation_input):
        geometry = FoundationGeometry(embed_depth_z=0.0)
        assert passive_resistance(foundation_input, geometry) == (0.0, 0.0, 0.0)


class TestUpliftAndSliding:
    """Partial contact: 2.0 m pad, e = 0.4 m."""

    MOMENT = 0.4 * 117600.0

    def test_partial_contact_uplift_policy(self, foundation_input, large_footing):
        strict = evaluate_foundation(large_footing, foundation_input, self.MOMENT, 5000.0, 0.0)
        lenient = evaluate_foundation(
            large_footing, replace(foundation_input, allow_uplift=True), self.MOMENT, 5000.0, 0.0
        )

        assert strict.contact_mode == ContactMode.PARTIAL
        assert strict.fs_overturning >= 1.5
        assert not strict.no_uplift
        assert not strict.overturning_ok
        assert lenient.overturning_ok

    def test_sliding_uses_contact_ratio(self, foundation_input, large_footing):
        s = evaluate_foundation(large_footing, foundation_input, self.MOMENT, 5000.0, 0.0)

        assert s.effective_width == pytest.approx(1.8)
        assert s.contact_ratio == pytest.approx(0.9)
        assert s.effective_vertical == pytest.approx(0.9 * s.vertical_load)
        assert s.sliding_resistance == pytest.approx(0.5 * s.effective_vertical + s.passive_force)
        assert s.fs_sliding == pytest.approx(s.sliding_resistance / 5000.0)

    def test_contact_ratio_switch(self, foundation_input, large_footing):
        foundation = replace(foundation_input, use_contact_ratio_for_friction=False)
        s = evaluate_foundation(large_footing, foundation, self.MOMENT, 5000.0, 0.0)
        assert s.effective_vertical == pytest.approx(s.vertical_load)


class TestFoundationEngine:

    def test_notes_follow_contact_state(self, default_inputs, with_foundation, large_footing):
        full = run_design_check(with_foundation(default_inputs, geometry=large_footing)).foundation
        assert full.stability.contact_mode == ContactMode.FULL
        assert "full compression" in full.overturning_note
        assert "N_eff = N " in full.sliding_note

        small = run_design_check(default_inputs).foundation
        assert small.stability.contact_mode != ContactMode.FULL
        assert "partial contact" in small.overturning_note

    def test_projecting_sign_has_no_footing(self, projecting_inputs):
        result = run_design_check(projecting_inputs)
        assert result.foundation is None
        assert result.foundation_ok
