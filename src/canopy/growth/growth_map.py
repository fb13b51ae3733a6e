from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

import numpy as np

from canopy.growth.geometry import DEFAULT_QUANTIZATION_STEP, quantize
from canopy.lsystem.segment import Point

ROOT_SUPPRESSION_RADIUS = 5.0


@dataclass(frozen=True)
class GrowthMap:
    """Occupancy counts of quantized cells where growth already happened.

    ``radius_cap`` bounds the suppression distance regardless of what callers
    ask for; the roots map uses it so root fans can stay dense.
    """

    quantization_step: float = DEFAULT_QUANTIZATION_STEP
    radius_cap: float | None = None
    cells: Mapping[Point, int] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def for_roots(
        cls, quantization_step: float = DEFAULT_QUANTIZATION_STEP
    ) -> GrowthMap:
        return cls(
            quantization_step=quantization_step,
            radius_cap=ROOT_SUPPRESSION_RADIUS,
        )

    def __len__(self) -> int:
        return len(self.cells)

    def cell_for(self, position: Point) -> Point:
        return quantize(position, self.quantization_step)

    def count(self, position: Point) -> int:
        return self.cells.get(self.cell_for(position), 0)

    def record(self, position: Point) -> GrowthMap:
        cell = self.cell_for(position)
        cells = dict(self.cells)
        cells[cell] = cells.get(cell, 0) + 1
        return replace(self, cells=MappingProxyType(cells))

    def cleared(self) -> GrowthMap:
        return replace(self, cells=MappingProxyType({}))

    def effective_distance(self, min_distance: float) -> float:
        if self.radius_cap is None:
            return min_distance
        return min(min_distance, self.radius_cap)

    def is_too_close(self, position: Point, min_distance: float) -> bool:
        if not self.cells:
            return False
        occupied = np.fromiter(
            (coordinate for cell in self.cells for coordinate in cell),
            dtype=float,
            count=len(self.cells) * 2,
        ).reshape(-1, 2)
        x, y = self.cell_for(position)
        distances = np.hypot(occupied[:, 0] - x, occupied[:, 1] - y)
        return bool((distances < self.effective_distance(min_distance)).any())
