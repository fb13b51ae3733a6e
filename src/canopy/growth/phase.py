from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

DEFAULT_STAGE_CAP = 5


class GrowthKind(StrEnum):
    BRANCHES = "branches"
    LEAVES = "leaves"
    ROOTS = "roots"


# Fixed order when several kinds are active on the same tick.
TICK_ORDER = (GrowthKind.LEAVES, GrowthKind.ROOTS, GrowthKind.BRANCHES)


class GrowthStatus(StrEnum):
    IDLE = "idle"
    GROWING = "growing"


@dataclass(frozen=True)
class GrowthPhase:
    """Idle, or growing with ``stage`` stages completed so far."""

    status: GrowthStatus = GrowthStatus.IDLE
    stage: int = 0

    @property
    def is_growing(self) -> bool:
        return self.status is GrowthStatus.GROWING

    @classmethod
    def activated(cls) -> GrowthPhase:
        return cls(status=GrowthStatus.GROWING, stage=0)

    def advance(self, stage_cap: int = DEFAULT_STAGE_CAP) -> GrowthPhase:
        """Move to the next stage, or back to idle once ``stage_cap`` is hit.

        Callers run a growth stage only when the returned phase is still
        growing, so at most ``stage_cap - 1`` stages run per activation.
        """
        if not self.is_growing:
            return self
        stage = self.stage + 1
        if stage >= stage_cap:
            return GrowthPhase(status=GrowthStatus.IDLE, stage=stage)
        return GrowthPhase(status=GrowthStatus.GROWING, stage=stage)
