from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from canopy.growth.engine import GrowthEngine
from canopy.growth.growth_map import GrowthMap
from canopy.growth.phase import TICK_ORDER, GrowthKind, GrowthPhase
from canopy.lsystem.segment import PlantPartType, Segment
from canopy.plant.config import PlantConfig
from canopy.plant.normalize import normalize_roots
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GrowthChannel:
    phase: GrowthPhase = field(default_factory=GrowthPhase)
    growth_map: GrowthMap = field(default_factory=GrowthMap)

    @property
    def is_growing(self) -> bool:
        return self.phase.is_growing


def _empty_channels(config: PlantConfig) -> Mapping[GrowthKind, GrowthChannel]:
    step = config.quantization_step
    return MappingProxyType(
        {
            GrowthKind.BRANCHES: GrowthChannel(growth_map=GrowthMap(quantization_step=step)),
            GrowthKind.LEAVES: GrowthChannel(growth_map=GrowthMap(quantization_step=step)),
            GrowthKind.ROOTS: GrowthChannel(growth_map=GrowthMap.for_roots(step)),
        }
    )


@dataclass(frozen=True)
class PlantState:
    """One immutable snapshot of a growing plant.

    ``segments`` is the definitive segment store. Every transition returns
    a new state, so consumers only ever see whole stages.
    """

    config: PlantConfig
    segments: tuple[Segment, ...] = ()
    channels: Mapping[GrowthKind, GrowthChannel] = field(
        default_factory=lambda: MappingProxyType({})
    )
    growth_cycle: int = 0
    time_since_last_tick_ms: float = 0.0

    @classmethod
    def generate(cls, config: PlantConfig) -> PlantState:
        """Expand the grammar, interpret it and normalise the roots."""

        instructions = config.lsystem().generate()
        segments = config.interpreter().interpret(instructions)
        segments = normalize_roots(segments, config.scene.ground_y)
        logger.info(
            "Generated plant with %d segments from %d instructions (iterations=%d)",
            len(segments),
            len(instructions),
            config.iterations,
        )
        return cls(
            config=config,
            segments=tuple(segments),
            channels=_empty_channels(config),
        )

    def regenerate(self, iterations: int) -> PlantState:
        return PlantState.generate(self.config.with_iterations(iterations))

    def channel(self, kind: GrowthKind) -> GrowthChannel:
        return self.channels[kind]

    def is_growing(self, kind: GrowthKind) -> bool:
        return self.channels[kind].is_growing

    @property
    def any_growing(self) -> bool:
        return any(channel.is_growing for channel in self.channels.values())

    @property
    def growing_kinds(self) -> tuple[GrowthKind, ...]:
        return tuple(kind for kind in TICK_ORDER if self.is_growing(kind))

    def count(self, part_type: PlantPartType) -> int:
        return sum(1 for segment in self.segments if segment.part_type is part_type)

    def activate(self, kind: GrowthKind) -> PlantState:
        """Start (or restart) growth for ``kind`` with a cleared growth map."""

        channels = dict(self.channels)
        channels[kind] = GrowthChannel(
            phase=GrowthPhase.activated(),
            growth_map=channels[kind].growth_map.cleared(),
        )
        logger.info("Activated %s growth", kind)
        return replace(
            self, channels=MappingProxyType(channels), time_since_last_tick_ms=0.0
        )

    def tick(self, engine: GrowthEngine) -> PlantState:
        """Run one stage for every active kind, leaves then roots then branches."""

        state = self
        for kind in TICK_ORDER:
            state = state._tick_kind(kind, engine)
        return state

    def _tick_kind(self, kind: GrowthKind, engine: GrowthEngine) -> PlantState:
        channel = self.channels[kind]
        if not channel.is_growing:
            return self

        phase = channel.phase.advance(self.config.stage_cap)
        channels = dict(self.channels)
        if not phase.is_growing:
            logger.info("%s growth finished after %d stage(s)", kind, phase.stage - 1)
            channels[kind] = replace(channel, phase=phase)
            return replace(self, channels=MappingProxyType(channels))

        result = engine.grow(kind, self.segments, channel.growth_map, phase.stage)
        channels[kind] = GrowthChannel(phase=phase, growth_map=result.growth_map)
        return replace(
            self,
            segments=result.segments,
            channels=MappingProxyType(channels),
            growth_cycle=self.growth_cycle + 1,
        )

    def advance(self, dt_ms: float, engine: GrowthEngine) -> PlantState:
        """Accumulate ``dt_ms`` and run one tick per elapsed interval.

        The timer only runs while some kind is growing, so a fresh activation
        always waits a full interval before its first stage.
        """

        if not self.any_growing:
            if self.time_since_last_tick_ms == 0.0:
                return self
            return replace(self, time_since_last_tick_ms=0.0)

        interval = self.config.tick_interval_ms
        state = self
        accumulated = self.time_since_last_tick_ms + dt_ms
        while accumulated >= interval and state.any_growing:
            state = state.tick(engine)
            accumulated -= interval
        if not state.any_growing:
            accumulated = 0.0
        return replace(state, time_since_last_tick_ms=accumulated)
