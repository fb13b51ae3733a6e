from __future__ import annotations

from dataclasses import dataclass, replace

import numpy as np

from canopy.growth.scene import SceneGeometry

MIN_ZOOM = 0.1
MAX_ZOOM = 10.0


@dataclass(frozen=True)
class Camera:
    """Maps world coordinates to screen pixels: pan to ``position``, then zoom."""

    screen_size: tuple[int, int]
    position: tuple[float, float]
    zoom: float = 1.0

    @classmethod
    def centered_on(
        cls, scene: SceneGeometry, screen_size: tuple[int, int], zoom: float = 1.0
    ) -> Camera:
        return cls(
            screen_size=screen_size,
            position=(scene.width / 2, scene.height / 2),
            zoom=zoom,
        )

    def panned(self, dx: float, dy: float) -> Camera:
        return replace(self, position=(self.position[0] + dx, self.position[1] + dy))

    def zoomed(self, factor: float) -> Camera:
        return replace(self, zoom=float(np.clip(self.zoom * factor, MIN_ZOOM, MAX_ZOOM)))

    def to_screen(self, points: np.ndarray) -> np.ndarray:
        """Transform an ``(N, 2)`` array of world points into screen space."""
        half_screen = np.asarray(self.screen_size, dtype=float) / 2
        return (np.asarray(points, dtype=float) - self.position) * self.zoom + half_screen
