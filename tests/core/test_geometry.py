"""
Tests for unit conversion, grid snapping and page areas.
"""

import pytest

from docbuilder.engine.geometry import (
    A4_HEIGHT_MM,
    A4_WIDTH_MM,
    Margins,
    Rect,
    clamp,
    mm_to_pt,
    mm_to_px,
    page_size_mm,
    px_to_mm,
    snap_to_grid,
    usable_area,
)


class TestUnits:
    """Millimeter/pixel/point conversions."""

    def test_mm_to_px_uses_378_factor(self):
        assert mm_to_px(10) == pytest.approx(37.8)
        assert mm_to_px(210) == pytest.approx(793.8)

    def test_px_to_mm_is_inverse(self):
        for value in (0.0, 1.0, 12.5, 297.0):
            assert px_to_mm(mm_to_px(value)) == pytest.approx(value)

    def test_mm_to_pt(self):
        assert mm_to_pt(25.4) == pytest.approx(72.0)


class TestSnapToGrid:
    """Rounding to the nearest grid line."""

    def test_rounds_to_nearest_step(self):
        assert snap_to_grid(12.4, 5) == 10
        assert snap_to_grid(12.6, 5) == 15
        assert snap_to_grid(0.0, 5) == 0

    def test_non_positive_step_disables_snapping(self):
        assert snap_to_grid(12.34, 0) == 12.34
        assert snap_to_grid(12.34, -5) == 12.34


class TestPageArea:
    """A4 sizes and usable areas."""

    def test_portrait_and_landscape(self):
        assert page_size_mm("portrait") == (A4_WIDTH_MM, A4_HEIGHT_MM)
        assert page_size_mm("landscape") == (297.0, 210.0)

    def test_usable_area_subtracts_margins(self):
        area = usable_area("portrait", Margins(top=20, right=10, bottom=15, left=25))

        assert area.left == 25
        assert area.top == 20
        assert area.right == pytest.approx(200)
        assert area.bottom == pytest.approx(282)

    def test_usable_area_never_negative(self):
        area = usable_area("portrait", Margins.uniform(200))
        assert area.width == 0
        assert area.height == 0


class TestRect:
    def test_edges_and_contains(self):
        rect = Rect(10, 20, 30, 40)

        assert (rect.left, rect.top, rect.right, rect.bottom) == (10, 20, 40, 60)
        assert rect.contains(10, 20)
        assert rect.contains(40, 60)
        assert not rect.contains(41, 30)

    def test_negative_size_is_normalized(self):
        rect = Rect(0, 0, -5, -6)
        assert (rect.width, rect.height) == (5, 6)

    def test_clamp_prefers_lower_bound_for_empty_range(self):
        assert clamp(5, 0, 10) == 5
        assert clamp(-1, 0, 10) == 0
        assert clamp(50, 0, 10) == 10
        assert clamp(5, 8, 4) == 8
