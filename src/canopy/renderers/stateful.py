from __future__ import annotations

from typing import Generic, TypeVar

import pygame
from reactivex.disposable import Disposable

from canopy.peripheral.providers import ObservableProvider
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

StateT = TypeVar("StateT")


class StatefulBaseRenderer(Generic[StateT]):
    """Renderer that draws the latest state pushed by its provider."""

    def __init__(self, builder: ObservableProvider[StateT]) -> None:
        self.builder = builder
        self.initialized = False
        self._state: StateT | None = None
        self._subscription: Disposable | None = None

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def state(self) -> StateT:
        assert self._state is not None
        return self._state

    def set_state(self, state: StateT) -> None:
        self._state = state

    def initialize(self) -> None:
        logger.info("Subscribing %s to its state provider", self.name)
        self._subscription = self.builder.observable().subscribe(on_next=self.set_state)
        self.initialized = True

    def process(self, window: pygame.Surface) -> None:
        if not self.initialized:
            raise ValueError("Needs to be initialized")
        self.real_process(window)

    def real_process(self, window: pygame.Surface) -> None:
        raise NotImplementedError("Please implement")

    def reset(self) -> None:
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
        self.initialized = False
