from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, Sequence

from canopy.growth.candidates import (find_candidates, merge_candidates,
                                      relax_candidates)
from canopy.growth.geometry import (DEFAULT_QUANTIZATION_STEP, direction,
                                    distance, normalized, offset, quantize,
                                    segments_intersect)
from canopy.growth.growth_map import GrowthMap
from canopy.growth.phase import GrowthKind
from canopy.growth.sampling import biased_index
from canopy.growth.scene import SceneGeometry
from canopy.growth.scoring import (ScoreFn, branch_score, leaf_score,
                                   root_score, scorer)
from canopy.lsystem.segment import PlantPartType, Point, Segment
from canopy.utilities.env import BranchOverlapStrategy, Configuration
from canopy.utilities.logging import get_logger
from canopy.utilities.logging_control import get_logging_controller

logger = get_logger(__name__)

STEM, BRANCH, ROOT, LEAF = (
    PlantPartType.STEM,
    PlantPartType.BRANCH,
    PlantPartType.ROOT,
    PlantPartType.LEAF,
)
HALF_PI = math.pi / 2
QUARTER_PI = math.pi / 4
TOUCH_EPSILON = 0.5


@dataclass(frozen=True)
class KindSettings:
    base_count: int
    per_stage: int
    min_distance: float
    relaxed_min_distance: float
    relax_threshold: int
    relax_cap: int


@dataclass(frozen=True)
class GrowthSettings:
    branches: KindSettings = KindSettings(
        base_count=2,
        per_stage=1,
        min_distance=15.0,
        relaxed_min_distance=10.0,
        relax_threshold=2,
        relax_cap=3,
    )
    leaves: KindSettings = KindSettings(
        base_count=3,
        per_stage=1,
        min_distance=10.0,
        relaxed_min_distance=10.0,
        relax_threshold=3,
        relax_cap=4,
    )
    roots: KindSettings = KindSettings(
        base_count=2,
        per_stage=1,
        min_distance=10.0,
        relaxed_min_distance=5.0,
        relax_threshold=2,
        relax_cap=2,
    )
    quantization_step: float = DEFAULT_QUANTIZATION_STEP
    selection_window: int = 5
    selection_exponent: float = 2.0
    branch_max_age: int = 2
    stem_max_age: int = 3
    # Stages that skip the overlap test under ``after_warmup``.
    overlap_warmup_stages: int = 2
    ground_tolerance: float = 15.0
    max_root_anchors: int = 3

    def for_kind(self, kind: GrowthKind) -> KindSettings:
        return {
            GrowthKind.BRANCHES: self.branches,
            GrowthKind.LEAVES: self.leaves,
            GrowthKind.ROOTS: self.roots,
        }[kind]


@dataclass(frozen=True)
class GrowthResult:
    segments: tuple[Segment, ...]
    growth_map: GrowthMap
    emitted: tuple[Segment, ...] = field(default_factory=tuple)


Emitter = Callable[[Segment], list[Segment]]


class GrowthEngine:
    """Runs single growth stages for branches, leaves and roots.

    The engine holds no plant state: each call takes the current segments and
    the kind's growth map and returns their successors. All randomness comes
    from ``rng`` so a seeded generator reproduces a growth sequence exactly.
    """

    def __init__(
        self,
        scene: SceneGeometry,
        *,
        rng: random.Random | None = None,
        settings: GrowthSettings | None = None,
        overlap_strategy: BranchOverlapStrategy | None = None,
    ) -> None:
        self.scene = scene
        self.rng = rng or random.Random()
        self.settings = settings or GrowthSettings()
        self.overlap_strategy = (
            overlap_strategy
            if overlap_strategy is not None
            else Configuration.branch_overlap_strategy()
        )

    def grow(
        self,
        kind: GrowthKind,
        segments: Sequence[Segment],
        growth_map: GrowthMap,
        stage: int,
    ) -> GrowthResult:
        """Age every segment, then run growth stage ``stage`` for ``kind``."""

        aged = [segment.aged() for segment in segments]
        get_logging_controller().log(
            key=f"growth.{kind}.stage",
            logger=logger,
            level=logging.INFO,
            msg="%s growth stage %d over %d segments",
            args=(kind, stage, len(aged)),
        )
        if kind is GrowthKind.BRANCHES:
            return self._grow_branches(aged, growth_map, stage)
        if kind is GrowthKind.LEAVES:
            return self._grow_leaves(aged, growth_map, stage)
        return self._grow_roots(aged, growth_map, stage)

    # Stage drivers

    def _run_stage(
        self,
        kind: GrowthKind,
        segments: list[Segment],
        growth_map: GrowthMap,
        stage: int,
        candidates: list[Segment],
        emit: Emitter,
    ) -> GrowthResult:
        settings = self.settings.for_kind(kind)
        get_logging_controller().log(
            key=f"growth.{kind}.candidates",
            logger=logger,
            level=logging.INFO,
            msg="Found %d %s candidates",
            args=(len(candidates), kind),
        )

        limit = min(len(candidates), settings.base_count + stage * settings.per_stage)
        pool = list(candidates)
        consumed: set[Point] = set()
        emitted: list[Segment] = []

        for _ in range(limit):
            if not pool:
                break
            parent = pool.pop(
                biased_index(
                    self.rng,
                    len(pool),
                    window=self.settings.selection_window,
                    exponent=self.settings.selection_exponent,
                )
            )
            cell = growth_map.cell_for(parent.end)
            if cell in consumed:
                continue
            consumed.add(cell)
            emitted.extend(emit(parent))
            growth_map = growth_map.record(parent.end)

        return GrowthResult(
            segments=tuple(segments) + tuple(emitted),
            growth_map=growth_map,
            emitted=tuple(emitted),
        )

    def _grow_branches(
        self, segments: list[Segment], growth_map: GrowthMap, stage: int
    ) -> GrowthResult:
        settings = self.settings.branches
        step = self.settings.quantization_step
        score = scorer(branch_score, self.scene)
        candidates = merge_candidates(
            find_candidates(
                segments,
                BRANCH,
                growth_map,
                score,
                settings.min_distance,
                max_age=self.settings.branch_max_age,
                quantization_step=step,
            ),
            find_candidates(
                segments,
                STEM,
                growth_map,
                score,
                settings.min_distance,
                max_age=self.settings.stem_max_age,
                quantization_step=step,
            ),
            score_fn=score,
            quantization_step=step,
        )
        candidates = self._relax(candidates, segments, (STEM, BRANCH), growth_map, score, settings)

        check_overlap = self._checks_overlap(stage)
        existing = list(segments)

        def emit(parent: Segment) -> list[Segment]:
            accepted: list[Segment] = []
            for child in self._branch_children(parent):
                if check_overlap and _crosses_any(child, existing):
                    logger.debug("Skipping branch at %s; it crosses existing growth", child.end)
                    continue
                accepted.append(child)
                existing.append(child)
            return accepted

        return self._run_stage(
            GrowthKind.BRANCHES, segments, growth_map, stage, candidates, emit
        )

    def _grow_leaves(
        self, segments: list[Segment], growth_map: GrowthMap, stage: int
    ) -> GrowthResult:
        settings = self.settings.leaves
        step = self.settings.quantization_step
        score = scorer(leaf_score, self.scene)
        candidates = find_candidates(
            segments, BRANCH, growth_map, score, settings.min_distance, quantization_step=step
        )
        if len(candidates) < settings.relax_threshold:
            candidates = merge_candidates(
                candidates,
                find_candidates(
                    segments,
                    STEM,
                    growth_map,
                    score,
                    settings.min_distance,
                    quantization_step=step,
                ),
                quantization_step=step,
            )
        candidates = self._relax(candidates, segments, (BRANCH, STEM), growth_map, score, settings)

        return self._run_stage(
            GrowthKind.LEAVES,
            segments,
            growth_map,
            stage,
            candidates,
            lambda parent: self._leaf_cluster(parent, stage),
        )

    def _grow_roots(
        self, segments: list[Segment], growth_map: GrowthMap, stage: int
    ) -> GrowthResult:
        if not any(segment.part_type is ROOT for segment in segments):
            return self._seed_root_fan(segments, growth_map)

        settings = self.settings.roots
        score = scorer(root_score, self.scene)
        candidates = find_candidates(
            segments,
            ROOT,
            growth_map,
            score,
            settings.min_distance,
            quantization_step=self.settings.quantization_step,
        )
        candidates = self._relax(candidates, segments, (ROOT,), growth_map, score, settings)

        return self._run_stage(
            GrowthKind.ROOTS, segments, growth_map, stage, candidates, self._root_children
        )

    def _relax(
        self,
        candidates: list[Segment],
        segments: list[Segment],
        part_types: tuple[PlantPartType, ...],
        growth_map: GrowthMap,
        score: ScoreFn,
        settings: KindSettings,
    ) -> list[Segment]:
        return relax_candidates(
            candidates,
            segments,
            part_types,
            growth_map,
            score,
            min_distance=settings.relaxed_min_distance,
            threshold=settings.relax_threshold,
            cap=settings.relax_cap,
            quantization_step=self.settings.quantization_step,
        )

    def _checks_overlap(self, stage: int) -> bool:
        if self.overlap_strategy is BranchOverlapStrategy.OFF:
            return False
        if self.overlap_strategy is BranchOverlapStrategy.ALWAYS:
            return True
        return stage > self.settings.overlap_warmup_stages

    # Child geometry

    def _branch_children(self, parent: Segment) -> list[Segment]:
        rng = self.rng
        base_angle = parent.angle
        if 0 < base_angle < math.pi:
            base_angle -= math.radians(rng.randint(10, 30))

        count = 2 if rng.random() < 0.5 else 1
        children = []
        for index in range(count):
            main = index == 0
            if main:
                angle = base_angle + math.radians((rng.random() - 0.5) * 30)
            else:
                deviation = math.radians(rng.randint(30, 60))
                angle = base_angle + (-deviation if rng.randint(0, 1) == 0 else deviation)
            angle = _clamp_downward(angle)

            dx, dy = direction(angle)
            heading = normalized((dx, min(dy, 0.1)))
            length = parent.width * (3 + rng.randint(0, 2)) * (1.0 if main else 0.7)
            children.append(
                Segment(
                    start=parent.end,
                    end=offset(parent.end, heading, length),
                    width=parent.width * (0.85 if main else 0.7),
                    part_type=BRANCH,
                    generation=parent.generation + 1,
                )
            )
        return children

    def _leaf_cluster(self, parent: Segment, stage: int) -> list[Segment]:
        rng = self.rng
        height_ratio = min(1.0, max(0.0, 1.0 - parent.end[1] / self.scene.height))
        leaf_count = 1 + stage // 2 + rng.randint(0, 1)
        leaf_count = int(leaf_count * (0.5 + height_ratio * 0.5)) + 1

        base_angle = rng.random() * 2 * math.pi
        angle_step = 2 * math.pi / leaf_count
        size = 0.8 + height_ratio * 0.4
        leaves = []
        for index in range(leaf_count):
            angle = (
                base_angle
                + index * angle_step
                + (rng.random() - 0.5) * angle_step * 0.7
                - math.radians(rng.randint(5, 20))
            )
            dx, dy = direction(angle)
            heading = normalized((dx, dy - 0.3))
            length = parent.width * (1.5 + rng.randint(0, 1)) * size
            leaves.append(
                Segment(
                    start=parent.end,
                    end=offset(parent.end, heading, length),
                    width=parent.width * 0.6 * size,
                    part_type=LEAF,
                    generation=parent.generation + 1,
                )
            )
        return leaves

    def _root_children(self, parent: Segment) -> list[Segment]:
        rng = self.rng
        count = 2 if rng.random() < 0.6 else 1
        children = []
        for index in range(count):
            main = index == 0
            if main:
                angle = HALF_PI + math.radians((rng.random() - 0.5) * 30)
            else:
                deviation = math.radians(rng.randint(30, 45))
                angle = HALF_PI + (-deviation if rng.randint(0, 1) == 0 else deviation)
            if not 0 < angle < math.pi:
                angle = HALF_PI

            dx, dy = direction(angle)
            heading = normalized((dx, dy + 0.2))
            length = parent.width * (3 + rng.randint(0, 1)) * (1.0 if main else 0.7)
            children.append(
                Segment(
                    start=parent.end,
                    end=offset(parent.end, heading, length),
                    width=parent.width * (0.9 if main else 0.7),
                    part_type=ROOT,
                    generation=parent.generation + 1,
                )
            )
        return children

    # First root activation

    def root_anchors(self, segments: Sequence[Segment]) -> list[Point]:
        """Ground-line points where stems meet the soil, nearest first."""

        ground_y = self.scene.ground_y
        tolerance = self.settings.ground_tolerance
        nearby: list[tuple[float, Point]] = []
        for segment in segments:
            if segment.part_type is not STEM:
                continue
            for point in (segment.start, segment.end):
                gap = abs(point[1] - ground_y)
                if gap <= tolerance:
                    nearby.append((gap, (point[0], ground_y)))

        anchors: dict[float, Point] = {}
        for _, anchor in sorted(nearby, key=lambda item: item[0]):
            key = quantize(anchor, self.settings.quantization_step)[0]
            anchors.setdefault(key, anchor)
            if len(anchors) >= self.settings.max_root_anchors:
                break

        if not anchors:
            return [self.scene.ground_center]
        return list(anchors.values())

    def _seed_root_fan(
        self, segments: list[Segment], growth_map: GrowthMap
    ) -> GrowthResult:
        rng = self.rng
        fan: list[Segment] = []
        anchors = self.root_anchors(segments)
        logger.info("Seeding root fan at %d anchor(s)", len(anchors))

        spread = math.pi * 0.7
        first_angle = HALF_PI - spread / 2
        for anchor in anchors:
            count = 2 + rng.randint(0, 2)
            half = (count - 1) / 2
            for index in range(count):
                angle = first_angle + spread * index / (count - 1)
                angle += (rng.random() - 0.5) * math.pi / 12
                length_factor = 1.0 - 0.6 * abs((index - half) / half)
                length = 12.0 + rng.randint(0, 7) * length_factor
                fan.append(
                    Segment(
                        start=anchor,
                        end=offset(anchor, direction(angle), length),
                        width=1.5 * (0.5 + 0.5 * length_factor),
                        part_type=ROOT,
                        generation=0,
                    )
                )
            growth_map = growth_map.record(anchor)

        return GrowthResult(
            segments=tuple(segments) + tuple(fan),
            growth_map=growth_map,
            emitted=tuple(fan),
        )


def _clamp_downward(angle: float) -> float:
    """Pull a downward-pointing angle back to at most 45 degrees below horizontal."""

    angle = math.atan2(math.sin(angle), math.cos(angle))
    if 0 < angle < math.pi:
        if angle <= HALF_PI:
            return min(angle, QUARTER_PI)
        return max(angle, math.pi - QUARTER_PI)
    return angle


def _crosses_any(candidate: Segment, existing: Sequence[Segment]) -> bool:
    for segment in existing:
        if (
            distance(segment.start, candidate.start) < TOUCH_EPSILON
            or distance(segment.end, candidate.start) < TOUCH_EPSILON
        ):
            continue
        if segments_intersect(candidate.start, candidate.end, segment.start, segment.end):
            return True
    return False
