from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import StrEnum

Point = tuple[float, float]


class PlantPartType(StrEnum):
    STEM = "stem"
    BRANCH = "branch"
    ROOT = "root"
    LEAF = "leaf"


@dataclass(frozen=True, slots=True)
class Segment:
    start: Point
    end: Point
    width: float
    part_type: PlantPartType
    age: int = 0
    generation: int = 0

    @property
    def vector(self) -> Point:
        return (self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def length(self) -> float:
        dx, dy = self.vector
        return math.hypot(dx, dy)

    @property
    def angle(self) -> float:
        """Heading of the segment in radians (screen space, y grows downward)."""
        dx, dy = self.vector
        return math.atan2(dy, dx)

    def aged(self) -> Segment:
        return replace(self, age=self.age + 1)

    def translated(self, dx: float, dy: float) -> Segment:
        return replace(
            self,
            start=(self.start[0] + dx, self.start[1] + dy),
            end=(self.end[0] + dx, self.end[1] + dy),
        )

    def is_finite(self) -> bool:
        return all(
            math.isfinite(value)
            for value in (*self.start, *self.end, self.width)
        )
