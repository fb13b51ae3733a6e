from __future__ import annotations

import random
from typing import Any, Mapping

from lagom import Container, Singleton

from canopy.peripheral.keyboard import PlantKeyboardController
from canopy.peripheral.manager import PeripheralManager
from canopy.plant.config import PlantConfig
from canopy.plant.provider import PlantStateProvider
from canopy.renderers.camera import Camera
from canopy.renderers.plant import PlantRenderer
from canopy.utilities.env import Configuration
from canopy.utilities.logging import get_logger

logger = get_logger(__name__)

RuntimeContainer = Container


def _build_rng(seed: int | None) -> random.Random:
    return random.Random(seed)


def _build_camera(resolver: RuntimeContainer) -> Camera:
    scene = resolver[PlantConfig].scene
    return Camera.centered_on(scene, (int(scene.width), int(scene.height)))


def _build_plant_state_provider(resolver: RuntimeContainer) -> PlantStateProvider:
    return PlantStateProvider(
        peripheral_manager=resolver[PeripheralManager],
        config=resolver[PlantConfig],
        rng=resolver[random.Random],
    )


def _build_plant_renderer(resolver: RuntimeContainer) -> PlantRenderer:
    return PlantRenderer(builder=resolver[PlantStateProvider], camera=resolver[Camera])


def _build_keyboard_controller(resolver: RuntimeContainer) -> PlantKeyboardController:
    renderer = resolver[PlantRenderer]
    return PlantKeyboardController(
        peripheral_manager=resolver[PeripheralManager],
        camera=resolver[Camera],
        state_source=lambda: renderer.state,
        max_iterations=Configuration.max_iterations(),
    )


def build_runtime_container(
    config: PlantConfig | None = None,
    *,
    seed: int | None = None,
    overrides: Mapping[type[Any], object] | None = None,
) -> RuntimeContainer:
    container = RuntimeContainer()
    configure_runtime_container(
        container=container,
        config=config if config is not None else PlantConfig.from_env(),
        seed=seed if seed is not None else Configuration.seed(),
        overrides=overrides,
    )
    return container


def configure_runtime_container(
    *,
    container: RuntimeContainer,
    config: PlantConfig,
    seed: int | None,
    overrides: Mapping[type[Any], object] | None = None,
) -> None:
    logger.debug(
        "Configuring Lagom runtime container with overrides=%s.",
        set(overrides.keys()) if overrides else set(),
    )
    _bind(container, overrides, PlantConfig, config)
    _bind(container, overrides, random.Random, _build_rng(seed))
    _bind(container, overrides, PeripheralManager, Singleton(PeripheralManager))
    _bind(container, overrides, Camera, Singleton(_build_camera))
    _bind(
        container, overrides, PlantStateProvider, Singleton(_build_plant_state_provider)
    )
    _bind(container, overrides, PlantRenderer, Singleton(_build_plant_renderer))
    _bind(
        container,
        overrides,
        PlantKeyboardController,
        Singleton(_build_keyboard_controller),
    )


def _bind(
    container: RuntimeContainer,
    overrides: Mapping[type[Any], object] | None,
    key: type[Any],
    value: object,
) -> None:
    if overrides and key in overrides:
        container[key] = overrides[key]
        logger.debug("Applied Lagom override for %s.", key)
        return
    if key in container.defined_types:
        logger.debug("Lagom already defined %s; skipping registration.", key)
        return
    container[key] = value
    logger.debug("Registered Lagom provider for %s.", key)
