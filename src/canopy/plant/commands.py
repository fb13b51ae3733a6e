from __future__ import annotations

from dataclasses import dataclass

from canopy.growth.phase import GrowthKind


@dataclass(frozen=True, slots=True)
class RegenerateWithIteration:
    iterations: int


@dataclass(frozen=True, slots=True)
class ActivateGrowth:
    kind: GrowthKind


PlantCommand = RegenerateWithIteration | ActivateGrowth
