from __future__ import annotations

import numpy as np
import pygame

from canopy.growth.phase import GrowthKind
from canopy.lsystem.segment import PlantPartType
from canopy.plant.provider import PlantStateProvider
from canopy.plant.state import PlantState
from canopy.renderers.camera import Camera
from canopy.renderers.stateful import StatefulBaseRenderer

SKY_COLOR = (135, 206, 235)
GROUND_COLOR = (139, 69, 19)
TEXT_COLOR = (255, 255, 255)
STATUS_COLOR = (144, 238, 144)
SHADOW_COLOR = (0, 0, 0)
GROUND_THICKNESS = 3
FONT_SIZE = 22

PART_COLORS: dict[PlantPartType, tuple[int, int, int]] = {
    PlantPartType.STEM: (101, 67, 33),
    PlantPartType.BRANCH: (140, 98, 57),
    PlantPartType.ROOT: (83, 53, 10),
    PlantPartType.LEAF: (34, 139, 34),
}

HELP_TEXT = (
    "WASD move  QE zoom  Up/Down size  "
    "L grow leaves  R grow roots  B grow branches"
)
STATUS_LABELS = {
    GrowthKind.LEAVES: "Growing leaves...",
    GrowthKind.ROOTS: "Growing roots...",
    GrowthKind.BRANCHES: "Growing branches...",
}


def status_text(state: PlantState) -> str:
    return " ".join(STATUS_LABELS[kind] for kind in state.growing_kinds)


class PlantRenderer(StatefulBaseRenderer[PlantState]):
    def __init__(self, builder: PlantStateProvider, camera: Camera) -> None:
        super().__init__(builder=builder)
        self.camera = camera
        self._font: pygame.font.Font | None = None

    def _get_font(self) -> pygame.font.Font:
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.Font(None, FONT_SIZE)
        return self._font

    def real_process(self, window: pygame.Surface) -> None:
        state = self.state
        window.fill(SKY_COLOR)
        self._draw_ground(window, state)
        self._draw_segments(window, state)
        self._draw_text(window, state)

    def _draw_ground(self, window: pygame.Surface, state: PlantState) -> None:
        ground_y = state.config.scene.ground_y
        (_, y), = self.camera.to_screen(np.array([[0.0, ground_y]]))
        pygame.draw.line(
            window,
            GROUND_COLOR,
            (0, int(y)),
            (window.get_width(), int(y)),
            GROUND_THICKNESS,
        )

    def _draw_segments(self, window: pygame.Surface, state: PlantState) -> None:
        if not state.segments:
            return
        points = np.array(
            [(*segment.start, *segment.end) for segment in state.segments], dtype=float
        ).reshape(-1, 2)
        screen = self.camera.to_screen(points).reshape(-1, 4)
        for segment, (x1, y1, x2, y2) in zip(state.segments, screen):
            width = max(1, int(round(segment.width * self.camera.zoom)))
            pygame.draw.line(
                window,
                PART_COLORS[segment.part_type],
                (x1, y1),
                (x2, y2),
                width,
            )

    def _draw_text(self, window: pygame.Surface, state: PlantState) -> None:
        lines = [(HELP_TEXT, TEXT_COLOR)]
        status = status_text(state)
        if status:
            lines.append((status, STATUS_COLOR))
        lines.append((f"Growth Cycle: {state.growth_cycle}", TEXT_COLOR))

        font = self._get_font()
        for row, (text, color) in enumerate(lines):
            position = (10, 10 + row * 30)
            window.blit(font.render(text, True, SHADOW_COLOR), (position[0] + 1, position[1] + 1))
            window.blit(font.render(text, True, color), position)
