from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from canopy.growth.geometry import DEFAULT_QUANTIZATION_STEP, quantize
from canopy.growth.growth_map import GrowthMap
from canopy.growth.scoring import ScoreFn
from canopy.lsystem.segment import PlantPartType, Segment


def _ranked(candidates: list[Segment], score_fn: ScoreFn | None) -> list[Segment]:
    if score_fn is None or not candidates:
        return candidates
    return sorted(candidates, key=score_fn, reverse=True)


def find_candidates(
    segments: Sequence[Segment],
    part_type: PlantPartType,
    growth_map: GrowthMap,
    score_fn: ScoreFn | None = None,
    min_distance: float = 20.0,
    max_age: int | None = None,
    quantization_step: float = DEFAULT_QUANTIZATION_STEP,
) -> list[Segment]:
    """Return terminal segments of ``part_type`` that may sprout new growth.

    A segment is terminal when no other segment starts at its (quantized) end.
    Terminals near occupied cells of ``growth_map`` or older than
    ``max_age`` are dropped, and only one candidate is kept per end cell.
    """

    start_counts = Counter(
        quantize(segment.start, quantization_step) for segment in segments
    )
    by_end_cell: dict[tuple[float, float], Segment] = {}

    for segment in segments:
        if segment.part_type != part_type:
            continue
        if max_age is not None and segment.age > max_age:
            continue
        end_cell = quantize(segment.end, quantization_step)
        if end_cell in by_end_cell:
            continue
        # A tip shorter than one cell starts in its own end cell; that is not growth.
        own_start = quantize(segment.start, quantization_step) == end_cell
        if start_counts[end_cell] - own_start > 0:
            continue
        if growth_map.is_too_close(segment.end, min_distance):
            continue
        by_end_cell[end_cell] = segment

    return _ranked(list(by_end_cell.values()), score_fn)


def relax_candidates(
    candidates: Sequence[Segment],
    segments: Sequence[Segment],
    part_types: Iterable[PlantPartType],
    growth_map: GrowthMap,
    score_fn: ScoreFn | None,
    min_distance: float,
    threshold: int,
    cap: int,
    quantization_step: float = DEFAULT_QUANTIZATION_STEP,
) -> list[Segment]:
    """Top up a short candidate list with non-terminal sites of nearby types.

    Keeps growth from stalling once the tips are used up: when fewer than
    ``threshold`` candidates exist, up to ``cap`` extra segments of
    ``part_types`` are admitted, best score first.
    """

    result = list(candidates)
    if len(result) >= threshold or cap <= 0:
        return result

    allowed = set(part_types)
    taken = {quantize(segment.end, quantization_step) for segment in result}
    extras: dict[tuple[float, float], Segment] = {}
    for segment in segments:
        if segment.part_type not in allowed:
            continue
        end_cell = quantize(segment.end, quantization_step)
        if end_cell in taken or end_cell in extras:
            continue
        if growth_map.is_too_close(segment.end, min_distance):
            continue
        extras[end_cell] = segment

    result.extend(_ranked(list(extras.values()), score_fn)[:cap])
    return result


def merge_candidates(
    *groups: Sequence[Segment],
    score_fn: ScoreFn | None = None,
    quantization_step: float = DEFAULT_QUANTIZATION_STEP,
) -> list[Segment]:
    """Concatenate candidate lists, keeping the first segment per end cell."""

    merged: dict[tuple[float, float], Segment] = {}
    for group in groups:
        for segment in group:
            merged.setdefault(quantize(segment.end, quantization_step), segment)
    return _ranked(list(merged.values()), score_fn)
