from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable

from canopy.lsystem.segment import PlantPartType, Segment

DEFAULT_GROUND_TOLERANCE = 1.0
# Vertical drops below this count as flat.
FLAT_EPSILON = 1e-6


def normalize_root(
    segment: Segment, ground_y: float, tolerance: float = DEFAULT_GROUND_TOLERANCE
) -> Segment:
    """Point a root segment downward and drop it onto the ground line.

    Upward roots are mirrored about their start. Flat roots are turned
    straight down with the same length. Zero-length roots only move.
    """

    if segment.part_type is not PlantPartType.ROOT:
        return segment

    (start_x, start_y), (end_x, end_y) = segment.start, segment.end
    if abs(end_y - start_y) < FLAT_EPSILON:
        length = math.hypot(end_x - start_x, end_y - start_y)
        if length > 0:
            end_x, end_y = start_x, start_y + length
    elif end_y < start_y:
        end_y = start_y + (start_y - end_y)
    if start_y < ground_y - tolerance:
        shift = ground_y - start_y
        start_y += shift
        end_y += shift

    start, end = (start_x, start_y), (end_x, end_y)
    if (start, end) == (segment.start, segment.end):
        return segment
    return replace(segment, start=start, end=end)


def normalize_roots(
    segments: Iterable[Segment],
    ground_y: float,
    tolerance: float = DEFAULT_GROUND_TOLERANCE,
) -> list[Segment]:
    """Apply :func:`normalize_root` to every segment.

    Runs once after interpretation. Afterwards every root with a length
    points downward from a position at or below the ground line.
    """

    return [normalize_root(segment, ground_y, tolerance) for segment in segments]
