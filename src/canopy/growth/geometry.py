from __future__ import annotations

import math

from canopy.lsystem.segment import Point

DEFAULT_QUANTIZATION_STEP = 5.0
PARALLEL_EPSILON = 1e-9


def quantize(point: Point, step: float = DEFAULT_QUANTIZATION_STEP) -> Point:
    """Snap ``point`` to the nearest multiple of ``step`` on both axes."""
    return (round(point[0] / step) * step, round(point[1] / step) * step)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def direction(angle: float) -> Point:
    return (math.cos(angle), math.sin(angle))


def normalized(vector: Point) -> Point:
    magnitude = math.hypot(vector[0], vector[1])
    if magnitude == 0:
        return (0.0, 0.0)
    return (vector[0] / magnitude, vector[1] / magnitude)


def offset(point: Point, vector: Point, length: float) -> Point:
    return (point[0] + vector[0] * length, point[1] + vector[1] * length)


def _bounding_boxes_overlap(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    return not (
        max(a1[0], a2[0]) < min(b1[0], b2[0])
        or max(b1[0], b2[0]) < min(a1[0], a2[0])
        or max(a1[1], a2[1]) < min(b1[1], b2[1])
        or max(b1[1], b2[1]) < min(a1[1], a2[1])
    )


def segments_intersect(a1: Point, a2: Point, b1: Point, b2: Point) -> bool:
    """Return whether segment ``a1-a2`` crosses segment ``b1-b2``.

    Rejects on bounding boxes first, then solves ``a1 + t*r = b1 + u*s`` for
    ``t`` and ``u`` in ``[0, 1]``. Parallel and collinear pairs never count as
    crossing.
    """

    if not _bounding_boxes_overlap(a1, a2, b1, b2):
        return False

    r = (a2[0] - a1[0], a2[1] - a1[1])
    s = (b2[0] - b1[0], b2[1] - b1[1])
    denominator = r[0] * s[1] - r[1] * s[0]
    if abs(denominator) < PARALLEL_EPSILON:
        return False

    qp = (b1[0] - a1[0], b1[1] - a1[1])
    t = (qp[0] * s[1] - qp[1] * s[0]) / denominator
    u = (qp[0] * r[1] - qp[1] * r[0]) / denominator
    return 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0
