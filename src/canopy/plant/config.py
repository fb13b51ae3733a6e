from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from canopy.errors import PlantConfigurationError
from canopy.growth.geometry import DEFAULT_QUANTIZATION_STEP
from canopy.growth.phase import DEFAULT_STAGE_CAP
from canopy.growth.scene import SceneGeometry
from canopy.lsystem.grammar import LSystem
from canopy.lsystem.turtle import LSystemInterpreter
from canopy.utilities.env import Configuration
from canopy.utilities.env.growth import (DEFAULT_ITERATIONS,
                                         DEFAULT_MAX_INSTRUCTION_LENGTH,
                                         DEFAULT_TICK_INTERVAL_MS)

DEFAULT_AXIOM = "SX"
DEFAULT_RULES: Mapping[str, str] = MappingProxyType({"X": "F[+X][-X]FX"})


@dataclass(frozen=True)
class PlantConfig:
    """Construction-time settings for one plant.

    Angles are in degrees. Everything is validated up front so a bad
    configuration fails here rather than halfway through a growth stage.
    """

    axiom: str = DEFAULT_AXIOM
    rules: Mapping[str, str] = field(default_factory=lambda: DEFAULT_RULES)
    iterations: int = DEFAULT_ITERATIONS
    angle_degrees: float = 20.0
    initial_length: float = 5.0
    length_reduction: float = 0.85
    initial_width: float = 2.5
    stage_cap: int = DEFAULT_STAGE_CAP
    tick_interval_ms: float = DEFAULT_TICK_INTERVAL_MS
    quantization_step: float = DEFAULT_QUANTIZATION_STEP
    max_instruction_length: int = DEFAULT_MAX_INSTRUCTION_LENGTH
    scene: SceneGeometry = field(default_factory=SceneGeometry)

    def __post_init__(self) -> None:
        # Building the grammar validates rules, iterations and the length limit.
        self.lsystem()
        for name in (
            "angle_degrees",
            "initial_length",
            "length_reduction",
            "initial_width",
            "tick_interval_ms",
            "quantization_step",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise PlantConfigurationError(f"{name} must be finite, got {value}")
        if self.tick_interval_ms <= 0 or self.quantization_step <= 0:
            raise PlantConfigurationError(
                "tick_interval_ms and quantization_step must be positive"
            )
        if self.stage_cap < 1:
            raise PlantConfigurationError("stage_cap must be at least 1")
        # Surfaces geometry errors now instead of at first regeneration.
        self.interpreter()

    @classmethod
    def from_env(cls, **overrides) -> PlantConfig:
        config = cls(
            iterations=Configuration.iterations(),
            tick_interval_ms=Configuration.tick_interval_ms(),
            max_instruction_length=Configuration.max_instruction_length(),
            scene=SceneGeometry(
                width=float(Configuration.scene_width()),
                height=float(Configuration.scene_height()),
            ),
        )
        return replace(config, **overrides) if overrides else config

    @property
    def origin(self) -> tuple[float, float]:
        return self.scene.ground_center

    def with_iterations(self, iterations: int) -> PlantConfig:
        return replace(self, iterations=iterations)

    def lsystem(self) -> LSystem:
        return LSystem(
            axiom=self.axiom,
            rules=self.rules,
            iterations=self.iterations,
            max_length=self.max_instruction_length,
        )

    def interpreter(self) -> LSystemInterpreter:
        return LSystemInterpreter(
            angle=math.radians(self.angle_degrees),
            initial_length=self.initial_length,
            length_reduction=self.length_reduction,
            initial_width=self.initial_width,
            origin=self.origin,
        )
