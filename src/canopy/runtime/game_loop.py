from __future__ import annotations

import pygame

from canopy.peripheral.keyboard import PlantKeyboardController
from canopy.peripheral.manager import PeripheralManager
from canopy.renderers.plant import PlantRenderer
from canopy.runtime.container import RuntimeContainer
from canopy.utilities.env import Configuration
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

WINDOW_TITLE = "Canopy"


class GameLoop:
    """Owns the pygame window and drives the plant stream frame by frame."""

    def __init__(self, resolver: RuntimeContainer, max_fps: int | None = None) -> None:
        self.resolver = resolver
        self.max_fps = max_fps if max_fps is not None else Configuration.max_fps()
        self.peripheral_manager = resolver[PeripheralManager]
        self.renderer = resolver[PlantRenderer]
        self.controller = resolver[PlantKeyboardController]
        self.running = False
        self.screen: pygame.Surface | None = None
        self.clock: pygame.time.Clock | None = None

    def _ensure_initialized(self) -> None:
        if self.screen is not None:
            return
        pygame.init()
        self.screen = pygame.display.set_mode(self.renderer.camera.screen_size)
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()
        self.renderer.initialize()

    def start(self) -> None:
        logger.info("Starting GameLoop")
        self._ensure_initialized()
        self.running = True
        try:
            while self.running:
                self._one_loop()
        finally:
            logger.info("Shutting down GameLoop.")
            self.renderer.reset()
            pygame.quit()
            self.screen = None

    def _one_loop(self) -> None:
        assert self.screen is not None and self.clock is not None
        self._handle_events(pygame.event.get())
        self.renderer.camera = self.controller.apply_held_keys(pygame.key.get_pressed())

        self.clock.tick(self.max_fps)
        self.peripheral_manager.clock.on_next(self.clock)
        self.peripheral_manager.game_tick.on_next(True)

        self.renderer.process(self.screen)
        pygame.display.flip()

    def _handle_events(self, events: list[pygame.event.Event]) -> None:
        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            else:
                self.controller.handle_event(event)
