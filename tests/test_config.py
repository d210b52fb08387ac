"""
Tests for normalization and the configuration snapshot.

Tests cover:
- Clamping and derivation rules in normalize()
- Partial application of imported configurations
- Legacy key aliases
- Catalog replacement through the configuration
- JSON save / load
"""

import json
from dataclasses import replace

import pytest

from signcalc.core.catalogs import DEFAULT_SECTIONS
from signcalc.core.config import (
    ConfigError,
    config_from_dict,
    load_config,
    normalize,
    save_config,
    to_config,
)
from signcalc.core.data_models import (
    DesignInputs,
    FoundationShape,
    SignType,
    WindCoefficientMode,
)


class TestNormalize:
    """normalize() applies every clamp once."""

    def test_normalize_is_idempotent(self, default_inputs):
        assert normalize(default_inputs) == default_inputs

    def test_cf_mode_resets_modifiers(self):
        inputs = DesignInputs()
        inputs = replace(inputs, wind=replace(
            inputs.wind, kz=1.3, gf=2.0, cf_mode=WindCoefficientMode.CF_INCLUDES_ALL
        ))
        wind = normalize(inputs).wind
        assert (wind.kz, wind.gf, wind.iw, wind.kd, wind.kt) == (1.0, 1.0, 1.0, 1.0, 1.0)

    def test_embedment_raised_to_minimum(self):
        inputs = DesignInputs()
        inputs = replace(inputs, anchor=replace(inputs.anchor, embed=100.0))
        assert normalize(inputs).anchor.embed == pytest.approx(540.0)

    def test_unknown_section_falls_back_to_family(self):
        inputs = DesignInputs()
        inputs = replace(inputs, member=replace(inputs.member, family="PIPE", section_name="missing"))
        member = normalize(inputs).member
        assert member.family == "PIPE"
        assert member.section_name == "PIPE-48.6×2.3"

    def test_embedment_depth_follows_thickness(self):
        inputs = DesignInputs()
        foundation = replace(
            inputs.foundation, geometry=replace(inputs.foundation.geometry, thickness_h=1.5)
        )
        z = normalize(replace(inputs, foundation=foundation)).foundation.geometry.embed_depth_z
        assert z == pytest.approx(1.4)


class TestConfigImport:
    """config_from_dict() partial application."""

    def test_snapshot_markers_and_keys(self, default_inputs):
        data = to_config(default_inputs)

        assert data["__app"] == "signcalc"
        assert data["signType"] == "freestanding"
        assert data["windV0"] == 34.0
        assert len(data["sections"]) == len(DEFAULT_SECTIONS)
        json.dumps(data)

    def test_snapshot_restores_inputs(self, default_inputs):
        restored, report = config_from_dict(to_config(default_inputs))
        assert restored == default_inputs
        assert not report.skipped

    def test_non_mapping_rejected(self):
        with pytest.raises(ConfigError):
            config_from_dict([1, 2, 3])

    def test_invalid_fields_skipped_individually(self):
        inputs, report = config_from_dict({"width": 4.0, "height": "tall", "colour": "red"})

        assert inputs.panel.width == 4.0
        assert inputs.panel.height == 2.0
        assert "height" in report.skipped
        assert report.ignored == ["colour"]
        assert "width" in report.applied

    def test_legacy_wind_speed_alias(self):
        inputs, _ = config_from_dict({"V0": 40})
        assert inputs.wind.v0 == 40.0

    def test_current_key_wins_over_alias(self):
        inputs, _ = config_from_dict({"V0": 40, "windV0": 36})
        assert inputs.wind.v0 == 36.0

    def test_enum_fields(self):
        inputs, report = config_from_dict({"signType": "wall", "footShape": "L", "cfMode": "bogus"})

        assert inputs.panel.sign_type == SignType.WALL
        assert inputs.foundation.geometry.shape == FoundationShape.L
        assert "cfMode" in report.skipped

    def test_embedment_reclamped(self):
        inputs, _ = config_from_dict({"anchorEmbed": 100})
        assert inputs.anchor.embed == pytest.approx(540.0)

    def test_new_anchor_starts_at_its_minimum(self):
        inputs, _ = config_from_dict({"anchorName": "M36 ABR"})
        assert inputs.anchor.anchor_name == "M36 ABR"
        assert inputs.anchor.embed == pytest.approx(720.0)

    def test_plate_thickness_snapped(self):
        inputs, _ = config_from_dict({"plateT": 20})
        assert inputs.plate.thickness == 22.0

    @pytest.mark.parametrize("value,expected", [(5.0, 1.0), (0.01, 0.1), (0.7, 0.7)])
    def test_passive_reduction_clamped(self, value, expected):
        inputs, _ = config_from_dict({"etaPassive": value})
        assert inputs.foundation.eta_passive == pytest.approx(expected)

    def test_post_quantity_floored(self):
        inputs, _ = config_from_dict({"postQty": 2.7})
        assert inputs.member.post_qty == 2

    def test_explicit_embedment_depth_kept(self):
        inputs, _ = config_from_dict({"embedDepth": 0.5})
        assert not inputs.foundation.embed_depth_auto
        assert inputs.foundation.geometry.embed_depth_z == pytest.approx(0.5)

    def test_thickness_drives_embedment_depth(self):
        inputs, _ = config_from_dict({"footH": 1.2})
        assert inputs.foundation.geometry.embed_depth_z == pytest.approx(1.1)

    def test_non_positive_footing_skipped(self):
        inputs, report = config_from_dict({"footB": -1.0})
        assert inputs.foundation.geometry.width_b == 0.8
        assert "footB" in report.skipped

    def test_bad_catalog_keeps_current(self):
        inputs, report = config_from_dict({"sections": "not a list"})
        assert inputs.sections == DEFAULT_SECTIONS
        assert "sections" in report.skipped

    def test_catalog_replaced(self):
        sections = [{"family": "SHS", "name": "SHS-X", "Zx_cm3": 300.0, "Zy_cm3": 300.0}]
        inputs, _ = config_from_dict({"sections": sections, "family": "SHS", "sectionName": "SHS-X"})

        assert len(inputs.sections) == 1
        assert inputs.active_section().zx_cm3 == 300.0


class TestConfigFiles:

    def test_save_and_load(self, tmp_path, projecting_inputs):
        path = save_config(tmp_path / "sign.json", projecting_inputs)
        restored, _ = load_config(path)

        assert restored.panel.sign_type == SignType.PROJECTING
        assert restored == projecting_inputs

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)
