import os
import tempfile
from collections import deque

# Module-level loggers are created at import time, so point them at a
# scratch directory before anything from canopy is imported.
os.environ.setdefault("CANOPY_LOG_DIR", tempfile.mkdtemp(prefix="canopy-logs-"))
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame
import pytest
from hypothesis import HealthCheck, settings

from canopy.utilities import logging_control

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
    deadline=None,
)
settings.load_profile("default")

CANOPY_ENV_VARS = (
    "CANOPY_ITERATIONS",
    "CANOPY_SEED",
    "CANOPY_TICK_INTERVAL_MS",
    "CANOPY_MAX_INSTRUCTION_LENGTH",
    "CANOPY_BRANCH_OVERLAP_STRATEGY",
    "CANOPY_SCENE_WIDTH",
    "CANOPY_SCENE_HEIGHT",
    "CANOPY_MAX_FPS",
    "CANOPY_LOG_RULES",
    "CANOPY_LOG_DEFAULT_INTERVAL",
)


class _StubClock:
    def __init__(
        self,
        *times: int,
        default: int = 0,
        repeat_last: bool = True,
    ) -> None:
        self._times: deque[int] = deque(times)
        self._last: int | None = None
        self._default = default
        self._repeat_last = repeat_last

    def get_time(self) -> int:
        if self._times:
            self._last = self._times.popleft()
            return self._last

        if self._repeat_last and self._last is not None:
            return self._last

        return self._default


@pytest.fixture()
def stub_clock() -> type[_StubClock]:
    return _StubClock


@pytest.fixture(autouse=True)
def dummy_sdl_video_driver(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    yield


@pytest.fixture(autouse=True)
def clean_canopy_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop CANOPY_* overrides so every test starts from the built-in defaults."""

    for name in CANOPY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    logging_control.get_logging_controller.cache_clear()
    yield
    logging_control.get_logging_controller.cache_clear()


@pytest.fixture(autouse=True)
def init_pygame() -> None:
    pygame.init()
    yield
