"""Tests for the reactive plant state provider."""

from __future__ import annotations

import random

import pytest

from canopy.growth.engine import GrowthEngine
from canopy.growth.phase import GrowthKind
from canopy.lsystem.segment import PlantPartType
from canopy.peripheral.manager import PeripheralManager
from canopy.plant.commands import ActivateGrowth, RegenerateWithIteration
from canopy.plant.config import PlantConfig
from canopy.plant.provider import PlantStateProvider
from canopy.plant.state import PlantState
from canopy.utilities.env import BranchOverlapStrategy


@pytest.fixture()
def manager() -> PeripheralManager:
    return PeripheralManager()


@pytest.fixture()
def provider(manager: PeripheralManager) -> PlantStateProvider:
    config = PlantConfig(iterations=2)
    rng = random.Random(5)
    return PlantStateProvider(
        manager,
        config,
        rng=rng,
        engine=GrowthEngine(
            config.scene, rng=rng, overlap_strategy=BranchOverlapStrategy.OFF
        ),
    )


@pytest.fixture()
def states(provider: PlantStateProvider) -> list[PlantState]:
    collected: list[PlantState] = []
    provider.observable().subscribe(collected.append)
    return collected


class TestPlantStateProvider:
    """Group stream checks so commands and clock ticks fold into whole states."""

    def test_emits_initial_plant(self, states: list[PlantState]) -> None:
        """Verify subscribers immediately receive the generated plant."""
        assert len(states) == 1
        assert states[0].config.iterations == 2
        assert not states[0].any_growing

    def test_activate_command_starts_growth(
        self, manager: PeripheralManager, states: list[PlantState]
    ) -> None:
        """Ensure an activation command produces a growing state."""
        manager.send(ActivateGrowth(GrowthKind.BRANCHES))

        assert states[-1].is_growing(GrowthKind.BRANCHES)

    def test_game_tick_advances_with_clock_time(
        self,
        manager: PeripheralManager,
        states: list[PlantState],
        stub_clock: type,
    ) -> None:
        """Check each game tick feeds the latest clock delta into the growth timer."""
        manager.send(ActivateGrowth(GrowthKind.ROOTS))
        manager.clock.on_next(stub_clock(200, 300))

        manager.game_tick.on_next(True)
        assert states[-1].growth_cycle == 0
        assert states[-1].time_since_last_tick_ms == 200.0

        manager.game_tick.on_next(True)
        assert states[-1].growth_cycle == 1
        assert states[-1].count(PlantPartType.ROOT) > 0

    def test_ticks_without_clock_are_ignored(
        self, manager: PeripheralManager, states: list[PlantState]
    ) -> None:
        """Verify game ticks before the first clock do not emit states."""
        manager.game_tick.on_next(True)

        assert len(states) == 1

    def test_regenerate_replaces_plant(
        self, manager: PeripheralManager, states: list[PlantState]
    ) -> None:
        """Ensure regeneration swaps in a plant built with the new iteration count."""
        manager.send(RegenerateWithIteration(3))

        assert states[-1].config.iterations == 3
        assert len(states[-1].segments) > len(states[0].segments)

    def test_invalid_regenerate_keeps_previous_state(
        self, manager: PeripheralManager, states: list[PlantState]
    ) -> None:
        """Check a bad iteration count is logged and ignored without erroring the stream."""
        manager.send(RegenerateWithIteration(-1))

        assert states[-1] is states[0]

    def test_unknown_command_rejected(self, provider: PlantStateProvider) -> None:
        """Verify unsupported commands raise instead of being silently dropped."""
        state = provider.initial_state()

        with pytest.raises(TypeError):
            provider.apply_command(state, object())  # type: ignore[arg-type]

    def test_default_engine_shares_provider_rng(self, manager: PeripheralManager) -> None:
        """Ensure the default engine draws from the provider's generator."""
        rng = random.Random(1)
        provider = PlantStateProvider(manager, PlantConfig(iterations=1), rng=rng)

        assert provider.rng is rng
        assert provider.engine.rng is rng
