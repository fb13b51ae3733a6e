"""Tests for plant configuration."""

from __future__ import annotations

import math

import pytest

from canopy.errors import PlantConfigurationError
from canopy.plant.config import DEFAULT_AXIOM, DEFAULT_RULES, PlantConfig


class TestPlantConfig:
    """Group configuration checks so invalid plants are rejected on construction."""

    def test_defaults(self) -> None:
        """Verify the default plant matches the classic bracketed tree."""
        config = PlantConfig()

        assert config.axiom == DEFAULT_AXIOM == "SX"
        assert dict(config.rules) == dict(DEFAULT_RULES) == {"X": "F[+X][-X]FX"}
        assert config.iterations == 3
        assert config.stage_cap == 5
        assert config.tick_interval_ms == 500.0

    def test_origin_is_trunk_base_on_ground(self) -> None:
        """Ensure the turtle starts on the ground line at the scene centre."""
        config = PlantConfig()

        assert config.origin == (640.0, config.scene.ground_y)
        assert config.interpreter().origin == config.origin

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"iterations": -1},
            {"rules": {"XY": "F"}},
            {"angle_degrees": math.inf},
            {"initial_length": 0.0},
            {"length_reduction": 2.0},
            {"tick_interval_ms": 0.0},
            {"stage_cap": 0},
        ],
    )
    def test_invalid_settings_rejected(self, kwargs: dict[str, object]) -> None:
        """Verify each invalid setting raises a configuration error."""
        with pytest.raises(PlantConfigurationError):
            PlantConfig(**kwargs)

    def test_with_iterations_validates(self) -> None:
        """Check changing iterations re-runs validation."""
        with pytest.raises(PlantConfigurationError):
            PlantConfig().with_iterations(-2)

    def test_from_env_reads_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Ensure environment overrides flow into the configuration."""
        monkeypatch.setenv("CANOPY_ITERATIONS", "2")
        monkeypatch.setenv("CANOPY_TICK_INTERVAL_MS", "250")
        monkeypatch.setenv("CANOPY_SCENE_WIDTH", "800")

        config = PlantConfig.from_env()

        assert config.iterations == 2
        assert config.tick_interval_ms == 250.0
        assert config.scene.width == 800.0

    def test_from_env_explicit_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify keyword overrides take precedence over the environment."""
        monkeypatch.setenv("CANOPY_ITERATIONS", "2")

        assert PlantConfig.from_env(iterations=4).iterations == 4
