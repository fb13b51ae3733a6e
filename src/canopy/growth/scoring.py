"""Weighted scores used to rank growth sites.

Every factor is normalised against the scene and clamped to ``[0, 1]``, also
for points outside the scene. Screen space is used throughout: a smaller
``y`` is higher up.
"""

from __future__ import annotations

from typing import Callable

from canopy.growth.scene import SceneGeometry
from canopy.lsystem.segment import Segment

ScoreFn = Callable[[Segment], float]

GENERATION_SOFT_CAP = 10.0
LATERAL_SPREAD_REACH = 0.8


def _unit(value: float) -> float:
    return min(1.0, max(0.0, value))


def height_factor(segment: Segment, scene: SceneGeometry) -> float:
    return _unit(1.0 - segment.end[1] / scene.height)


def depth_factor(segment: Segment, scene: SceneGeometry) -> float:
    return _unit(segment.end[1] / scene.height)


def inverse_age_factor(segment: Segment) -> float:
    return 1.0 / (segment.age + 1)


def generation_factor(segment: Segment) -> float:
    return min(1.0, segment.generation / GENERATION_SOFT_CAP)


def lateral_spread_factor(segment: Segment, scene: SceneGeometry) -> float:
    spread = abs(segment.end[0] - scene.center_x)
    return min(1.0, spread / (LATERAL_SPREAD_REACH * scene.half_width))


def branch_score(segment: Segment, scene: SceneGeometry) -> float:
    """Favour tall, young, distal growth."""
    return (
        0.5 * height_factor(segment, scene)
        + 0.3 * inverse_age_factor(segment)
        + 0.2 * generation_factor(segment)
    )


def leaf_score(segment: Segment, scene: SceneGeometry) -> float:
    """Favour sunlight (height) above all."""
    return (
        0.6 * height_factor(segment, scene)
        + 0.2 * generation_factor(segment)
        + 0.2 * inverse_age_factor(segment)
    )


def root_score(segment: Segment, scene: SceneGeometry) -> float:
    """Favour deep, young, spreading roots."""
    return (
        0.4 * depth_factor(segment, scene)
        + 0.4 * inverse_age_factor(segment)
        + 0.2 * lateral_spread_factor(segment, scene)
    )


def scorer(
    score: Callable[[Segment, SceneGeometry], float], scene: SceneGeometry
) -> ScoreFn:
    return lambda segment: score(segment, scene)
