from __future__ import annotations

import math
from dataclasses import dataclass

from canopy.errors import PlantConfigurationError
from canopy.lsystem.segment import Point

GROUND_RATIO = 0.67


@dataclass(frozen=True)
class SceneGeometry:
    width: float = 1280.0
    height: float = 720.0

    def __post_init__(self) -> None:
        for name, value in (("width", self.width), ("height", self.height)):
            if not math.isfinite(value) or value <= 0:
                raise PlantConfigurationError(
                    f"Scene {name} must be a positive finite number, got {value}"
                )

    @property
    def ground_y(self) -> float:
        return self.height * GROUND_RATIO

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def ground_center(self) -> Point:
        return (self.center_x, self.ground_y)
