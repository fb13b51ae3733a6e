from __future__ import annotations

import random
from typing import Any, Callable

import reactivex
from reactivex import operators as ops

from canopy.errors import PlantConfigurationError
from canopy.growth.engine import GrowthEngine
from canopy.peripheral.manager import PeripheralManager
from canopy.peripheral.providers import RngStateProvider
from canopy.plant.commands import (ActivateGrowth, PlantCommand,
                                   RegenerateWithIteration)
from canopy.plant.config import PlantConfig
from canopy.plant.state import PlantState
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

StateOp = Callable[[PlantState], PlantState]


class PlantStateProvider(RngStateProvider[PlantState]):
    """Folds plant commands and game ticks into a stream of plant states."""

    def __init__(
        self,
        peripheral_manager: PeripheralManager,
        config: PlantConfig,
        *,
        rng: random.Random | None = None,
        engine: GrowthEngine | None = None,
    ) -> None:
        super().__init__(rng=rng)
        self._peripheral_manager = peripheral_manager
        self._config = config
        self._engine = engine or GrowthEngine(config.scene, rng=self.rng)

    @property
    def engine(self) -> GrowthEngine:
        return self._engine

    def initial_state(self) -> PlantState:
        return PlantState.generate(self._config)

    def apply_command(self, state: PlantState, command: PlantCommand) -> PlantState:
        if isinstance(command, RegenerateWithIteration):
            try:
                return state.regenerate(command.iterations)
            except PlantConfigurationError as exc:
                logger.warning(
                    "Ignoring regeneration with %d iteration(s): %s",
                    command.iterations,
                    exc,
                )
                return state
        if isinstance(command, ActivateGrowth):
            return state.activate(command.kind)
        raise TypeError(f"Unsupported plant command: {command!r}")

    def advance_state(self, state: PlantState, clock: Any) -> PlantState:
        return state.advance(dt_ms=float(clock.get_time()), engine=self._engine)

    def observable(self) -> reactivex.Observable[PlantState]:
        clocks = self._peripheral_manager.clock.pipe(
            ops.filter(lambda clock: clock is not None),
            ops.share(),
        )

        def op_from_command(command: PlantCommand) -> StateOp:
            return lambda state: self.apply_command(state, command)

        def op_from_clock(clock: Any) -> StateOp:
            return lambda state: self.advance_state(state, clock)

        operations: reactivex.Observable[StateOp] = reactivex.merge(
            self._peripheral_manager.commands.pipe(ops.map(op_from_command)),
            self._peripheral_manager.game_tick.pipe(
                ops.with_latest_from(clocks),
                ops.map(lambda latest: latest[1]),
                ops.map(op_from_clock),
            ),
        )

        initial_state = self.initial_state()
        return operations.pipe(
            ops.scan(lambda state, op: op(state), seed=initial_state),
            ops.start_with(initial_state),
            ops.share(),
        )
