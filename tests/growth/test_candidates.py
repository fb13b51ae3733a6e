"""Tests for growth candidate discovery."""

from __future__ import annotations

from canopy.growth.candidates import (find_candidates, merge_candidates,
                                      relax_candidates)
from canopy.growth.growth_map import GrowthMap
from canopy.lsystem.segment import PlantPartType, Segment

STEM = PlantPartType.STEM
BRANCH = PlantPartType.BRANCH
ROOT = PlantPartType.ROOT


def _segment(
    start: tuple[float, float],
    end: tuple[float, float],
    part_type: PlantPartType = STEM,
    age: int = 0,
) -> Segment:
    return Segment(start=start, end=end, width=1.0, part_type=part_type, age=age)


def _height(segment: Segment) -> float:
    return -segment.end[1]


class TestFindCandidates:
    """Group terminal detection checks so growth only sprouts from free tips."""

    def test_only_terminals_are_candidates(self) -> None:
        """Verify a segment whose end starts another segment is not a tip."""
        lower = _segment((0, 0), (0, -10))
        upper = _segment((0, -10), (0, -20))

        assert find_candidates([lower, upper], STEM, GrowthMap()) == [upper]

    def test_tip_shorter_than_a_cell_is_terminal(self) -> None:
        """Verify a short root tip whose own start shares its end cell still sprouts."""
        tip = _segment((100, 500), (100, 502), ROOT)

        assert find_candidates([tip], ROOT, GrowthMap.for_roots()) == [tip]

    def test_short_tip_with_growth_from_its_end_is_not_terminal(self) -> None:
        """Ensure another segment starting in the end cell still blocks a short tip."""
        tip = _segment((100, 500), (100, 502), ROOT)
        child = _segment((100, 502), (100, 530), ROOT)

        assert find_candidates([tip, child], ROOT, GrowthMap.for_roots()) == [child]

    def test_filters_by_part_type(self) -> None:
        """Ensure only the requested part type is returned."""
        stem = _segment((0, 0), (0, -10))
        branch = _segment((50, 0), (50, -10), BRANCH)

        assert find_candidates([stem, branch], BRANCH, GrowthMap()) == [branch]

    def test_one_candidate_per_end_cell(self) -> None:
        """Check tips ending in the same quantized cell are deduplicated."""
        first = _segment((0, 0), (20, -20), BRANCH)
        second = _segment((40, 0), (21, -21), BRANCH)

        assert find_candidates([first, second], BRANCH, GrowthMap()) == [first]

    def test_occupied_cells_suppress_candidates(self) -> None:
        """Verify tips near recorded growth are skipped."""
        tip = _segment((0, 0), (0, -10))
        growth_map = GrowthMap().record((0, -12))

        assert find_candidates([tip], STEM, growth_map, min_distance=15.0) == []

    def test_max_age_filters_old_segments(self) -> None:
        """Ensure old tips stop sprouting once they exceed the age limit."""
        young = _segment((0, 0), (0, -10), age=1)
        old = _segment((50, 0), (50, -10), age=4)

        assert find_candidates([young, old], STEM, GrowthMap(), max_age=2) == [young]

    def test_ranked_best_first(self) -> None:
        """Confirm candidates are sorted by descending score."""
        low = _segment((0, 0), (0, -10))
        high = _segment((50, 0), (50, -40))

        assert find_candidates([low, high], STEM, GrowthMap(), score_fn=_height) == [
            high,
            low,
        ]


class TestRelaxCandidates:
    """Group relaxation checks so growth does not stall once tips run out."""

    def test_enough_candidates_are_returned_unchanged(self) -> None:
        """Verify relaxation is skipped when the threshold is already met."""
        tip = _segment((0, 0), (0, -10))

        result = relax_candidates(
            [tip], [tip], [STEM], GrowthMap(), None, min_distance=5, threshold=1, cap=3
        )

        assert result == [tip]

    def test_adds_interior_segments_up_to_cap(self) -> None:
        """Ensure interior sites are admitted best first and capped."""
        chain = [_segment((0, -10 * i), (0, -10 * (i + 1))) for i in range(5)]
        tip = chain[-1]

        result = relax_candidates(
            [tip], chain, [STEM], GrowthMap(), _height, min_distance=5, threshold=3, cap=2
        )

        assert result == [tip, chain[3], chain[2]]

    def test_skips_suppressed_sites(self) -> None:
        """Check relaxed sites still respect the growth map."""
        chain = [_segment((0, -10 * i), (0, -10 * (i + 1))) for i in range(3)]
        growth_map = GrowthMap().record(chain[1].end)

        result = relax_candidates(
            [], chain, [STEM], growth_map, _height, min_distance=5, threshold=2, cap=5
        )

        assert chain[1] not in result
        assert set(result) == {chain[0], chain[2]}


class TestMergeCandidates:
    """Group merge checks so combined lists stay unique per cell."""

    def test_keeps_first_per_cell(self) -> None:
        """Verify duplicates across groups collapse onto the first occurrence."""
        branch = _segment((0, 0), (0, -10), BRANCH)
        stem = _segment((5, 0), (0, -10))
        other = _segment((0, 0), (30, -30))

        assert merge_candidates([branch], [stem, other]) == [branch, other]

    def test_merge_ranks_with_score(self) -> None:
        """Ensure merged lists are re-ranked when a score is given."""
        low = _segment((0, 0), (0, -10))
        high = _segment((50, 0), (50, -40), BRANCH)

        assert merge_candidates([low], [high], score_fn=_height) == [high, low]
