"""Tests for configuration validation, regions and change events."""

import json
from pathlib import Path

import numpy as np
import pytest
from pydantic import ValidationError

import settings
from settings import ConfigValidationError, CrystalConfig, Region

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"


class TestRegion:
    """Test region construction."""

    def test_bounds(self):
        region = Region(center=(10, 20), distance=100, padding=5)
        np.testing.assert_allclose(region.lower, [-85, -75])
        np.testing.assert_allclose(region.upper, [105, 115])

    @pytest.mark.parametrize("distance", [0, -5])
    def test_non_positive_distance_fails(self, distance):
        with pytest.raises(ValidationError):
            Region(center=(0, 0), distance=distance)

    def test_negative_padding_fails(self):
        with pytest.raises(ValidationError):
            Region(center=(0, 0), distance=10, padding=-1)

    def test_padding_must_leave_room(self):
        with pytest.raises(ValidationError):
            Region(center=(0, 0), distance=10, padding=10)

    def test_unknown_field_fails(self):
        with pytest.raises(ValidationError):
            Region(center=(0, 0), distance=10, margin=2)

    def test_region_is_immutable(self):
        region = Region(center=(0, 0), distance=10)
        with pytest.raises(ValidationError):
            region.distance = 20


class TestCrystalConfig:
    """Test option validation."""

    def test_defaults_are_valid(self):
        assert CrystalConfig.from_dict({}) == CrystalConfig()

    @pytest.mark.parametrize("option, value", [
        ("particle_number", 501),
        ("particle_number", -1),
        ("particle_number", 2.5),
        ("particle_number", True),
        ("particle_speed", 0.0),
        ("particle_speed", 3.0),
        ("link_radius", -10.0),
        ("link_threshold", 21),
        ("quadtree_capacity", 0),
        ("edge_color_jitter", 200),
        ("edge_color", (0, 0, 256)),
        ("background_color", (0, 0)),
        ("display_points", 1),
        ("pause", "yes"),
    ])
    def test_out_of_range_values_fail(self, option, value):
        with pytest.raises(ConfigValidationError):
            CrystalConfig.from_dict({option: value})

    def test_padding_not_below_distance_fails(self):
        with pytest.raises(ConfigValidationError):
            CrystalConfig.from_dict({"distance": 20.0, "padding": 20.0})

    def test_int_accepted_for_float_options(self):
        loaded = CrystalConfig.from_dict({"link_radius": 150, "particle_speed": 1})
        assert loaded.link_radius == 150.0
        assert loaded.particle_speed == 1.0

    def test_direct_construction_raises_pydantic_error(self):
        with pytest.raises(ValidationError):
            CrystalConfig(particle_number=501)

    def test_config_is_immutable(self):
        config = CrystalConfig()
        with pytest.raises(ValidationError):
            config.particle_speed = 1.0

    def test_region_from_config(self):
        region = CrystalConfig(distance=150.0, padding=4.0).region((1, 2))
        assert region == Region(center=(1.0, 2.0), distance=150.0, padding=4.0)

    def test_region_rejection_maps_to_config_error(self):
        with pytest.raises(ConfigValidationError):
            CrystalConfig().region(("left", 0))


class TestFromDict:
    """Test loading the 'simulation' section."""

    def test_shipped_config_loads(self):
        with open(CONFIG_PATH, 'r') as f:
            config = json.load(f)
        loaded = CrystalConfig.from_dict(config['simulation'])
        assert loaded.edge_color == (210, 119, 95)
        assert loaded.particle_number == 25

    def test_unknown_option_fails(self):
        with pytest.raises(ConfigValidationError, match="particleNumber"):
            CrystalConfig.from_dict({"particleNumber": 10})

    def test_invalid_value_fails(self):
        with pytest.raises(ConfigValidationError):
            CrystalConfig.from_dict({"particle_speed": 99})

    def test_list_colors_are_accepted(self):
        loaded = CrystalConfig.from_dict({"edge_color": [1, 2, 3]})
        assert loaded.edge_color == (1, 2, 3)

    def test_error_keeps_the_pydantic_cause(self):
        with pytest.raises(ConfigValidationError) as excinfo:
            CrystalConfig.from_dict({"link_threshold": 99})
        assert isinstance(excinfo.value.__cause__, ValidationError)
        assert "link_threshold" in str(excinfo.value)


class TestApplyChange:
    """Test typed change events against a config."""

    def test_each_event_updates_its_option(self):
        config = CrystalConfig()
        assert settings.apply_change(config, settings.ParticleNumberChanged(30)).particle_number == 30
        assert settings.apply_change(config, settings.ParticleSpeedChanged(1.2)).particle_speed == 1.2
        assert settings.apply_change(config, settings.LinkRadiusChanged(250.0)).link_radius == 250.0
        assert settings.apply_change(config, settings.LinkThresholdChanged(3)).link_threshold == 3
        assert settings.apply_change(config, settings.PauseChanged(True)).pause is True
        toggled = settings.apply_change(
            config, settings.DisplayOptionChanged(settings.DisplayOption.BORDER, True)
        )
        assert toggled.display_border is True

    def test_rejected_change_leaves_config_untouched(self):
        config = CrystalConfig()
        with pytest.raises(ConfigValidationError):
            settings.apply_change(config, settings.ParticleSpeedChanged(10.0))
        assert config.particle_speed == 0.3

    def test_unrelated_change_keeps_other_options(self):
        config = CrystalConfig(distance=10.0, padding=5.0)
        assert settings.apply_change(config, settings.ParticleNumberChanged(3)).padding == 5.0

    def test_unknown_event_fails(self):
        with pytest.raises(TypeError):
            settings.apply_change(CrystalConfig(), object())
