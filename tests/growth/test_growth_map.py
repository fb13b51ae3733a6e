"""Tests for the growth occupancy map."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from canopy.growth.growth_map import ROOT_SUPPRESSION_RADIUS, GrowthMap

POINTS = st.tuples(
    st.floats(min_value=-500, max_value=500, allow_nan=False),
    st.floats(min_value=-500, max_value=500, allow_nan=False),
)


class TestGrowthMap:
    """Group occupancy checks so growth sites are never reused."""

    def test_record_returns_new_map(self) -> None:
        """Verify recording leaves the original map untouched."""
        empty = GrowthMap()

        updated = empty.record((1.0, 1.0))

        assert len(empty) == 0
        assert updated.count((0.0, 0.0)) == 1

    def test_record_accumulates_in_one_cell(self) -> None:
        """Ensure points in the same quantized cell share a counter."""
        growth_map = GrowthMap().record((0.4, 0.4)).record((-1.0, 2.0))

        assert len(growth_map) == 1
        assert growth_map.count((0.0, 0.0)) == 2

    def test_cleared_keeps_settings(self) -> None:
        """Confirm clearing drops cells but keeps the step and radius cap."""
        growth_map = GrowthMap.for_roots(10.0).record((0.0, 0.0))

        cleared = growth_map.cleared()

        assert len(cleared) == 0
        assert cleared.quantization_step == 10.0
        assert cleared.radius_cap == ROOT_SUPPRESSION_RADIUS

    @given(position=POINTS)
    def test_empty_map_is_never_too_close(self, position: tuple[float, float]) -> None:
        """Verify an empty map admits any position."""
        assert not GrowthMap().is_too_close(position, 50.0)

    def test_is_too_close_uses_min_distance(self) -> None:
        """Check suppression applies inside the radius and not beyond it."""
        growth_map = GrowthMap().record((0.0, 0.0))

        assert growth_map.is_too_close((3.0, 0.0), 10.0)
        assert not growth_map.is_too_close((30.0, 0.0), 10.0)

    def test_root_map_caps_suppression_radius(self) -> None:
        """Ensure the roots map ignores larger radii so root fans can stay dense."""
        growth_map = GrowthMap.for_roots().record((0.0, 0.0))

        assert growth_map.effective_distance(10.0) == ROOT_SUPPRESSION_RADIUS
        assert growth_map.is_too_close((1.0, 0.0), 10.0)
        assert not growth_map.is_too_close((10.0, 0.0), 10.0)

    @given(position=POINTS)
    def test_recorded_position_is_too_close_to_itself(
        self, position: tuple[float, float]
    ) -> None:
        """Confirm a consumed site is always suppressed afterwards."""
        growth_map = GrowthMap().record(position)

        assert growth_map.is_too_close(position, 1.0)
