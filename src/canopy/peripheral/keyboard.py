from __future__ import annotations

from typing import Callable, Sequence

import pygame

from canopy.growth.phase import GrowthKind
from canopy.peripheral.manager import PeripheralManager
from canopy.plant.commands import ActivateGrowth, RegenerateWithIteration
from canopy.plant.state import PlantState
from canopy.renderers.camera import Camera
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

MIN_ITERATIONS = 1
PAN_SPEED = 5.0
ZOOM_IN_FACTOR = 1.02
ZOOM_OUT_FACTOR = 0.98

GROWTH_KEYS: dict[int, GrowthKind] = {
    pygame.K_b: GrowthKind.BRANCHES,
    pygame.K_l: GrowthKind.LEAVES,
    pygame.K_r: GrowthKind.ROOTS,
}


class PlantKeyboardController:
    """Translates pygame key events into plant commands and camera moves.

    Key presses (iteration changes, growth activation) are edge triggered and
    go out through ``PeripheralManager.send``. Panning and zooming follow the
    keys that are held down on each frame.

    The iteration count is read from ``state_source`` on every press; the
    controller keeps no copy of it.
    """

    def __init__(
        self,
        peripheral_manager: PeripheralManager,
        camera: Camera,
        *,
        state_source: Callable[[], PlantState],
        max_iterations: int,
    ) -> None:
        self.peripheral_manager = peripheral_manager
        self.camera = camera
        self.state_source = state_source
        self.max_iterations = max_iterations

    @property
    def iterations(self) -> int:
        return self.state_source().config.iterations

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_UP:
            self._change_iterations(1)
        elif event.key == pygame.K_DOWN:
            self._change_iterations(-1)
        elif event.key in GROWTH_KEYS:
            self.peripheral_manager.send(ActivateGrowth(GROWTH_KEYS[event.key]))

    def _change_iterations(self, delta: int) -> None:
        current = self.iterations
        iterations = max(MIN_ITERATIONS, min(current + delta, self.max_iterations))
        if iterations == current:
            return
        logger.info("Regenerating plant with %d iteration(s)", iterations)
        self.peripheral_manager.send(RegenerateWithIteration(iterations))

    def apply_held_keys(self, pressed: Sequence[bool]) -> Camera:
        dx = (pressed[pygame.K_d] - pressed[pygame.K_a]) * PAN_SPEED
        dy = (pressed[pygame.K_s] - pressed[pygame.K_w]) * PAN_SPEED
        camera = self.camera
        if dx or dy:
            camera = camera.panned(dx, dy)
        if pressed[pygame.K_q]:
            camera = camera.zoomed(ZOOM_IN_FACTOR)
        if pressed[pygame.K_e]:
            camera = camera.zoomed(ZOOM_OUT_FACTOR)
        self.camera = camera
        return camera
