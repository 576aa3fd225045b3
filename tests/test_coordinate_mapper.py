"""
Unit tests for coordinate_mapper module.

Tests mapping of on-screen pointer positions onto native image pixels,
including degenerate (not yet laid out) display rectangles.
"""

import pytest

from NS_Libs.MaskingLib.coordinate_mapper import DisplayRect, DisplayTransform, map_to_native


class TestMapToNative:
    """Tests for map_to_native function."""

    def test_left_top_corner_maps_to_origin(self):
        """Input at the rectangle's left/top edge should map to native 0."""
        rect = DisplayRect(left=100, top=50, width=200, height=100)

        assert map_to_native(100, 50, (800, 400), rect) == (0.0, 0.0)

    def test_right_bottom_corner_maps_to_native_size(self):
        """Input at left+width/top+height should map to the native width/height."""
        rect = DisplayRect(left=100, top=50, width=200, height=100)

        assert map_to_native(300, 150, (800, 400), rect) == (800.0, 400.0)

    def test_mapping_is_linear(self):
        """Midpoint of the rectangle maps to the native midpoint."""
        rect = DisplayRect(left=10, top=20, width=400, height=300)

        x, y = map_to_native(210, 170, (1600, 1200), rect)

        assert x == pytest.approx(800)
        assert y == pytest.approx(600)

    def test_non_uniform_scale(self):
        """X and Y scale independently."""
        rect = DisplayRect(left=0, top=0, width=100, height=50)

        assert map_to_native(50, 25, (1000, 1000), rect) == (500.0, 500.0)

    def test_zero_width_declines(self):
        """A surface with no width yet should not produce a coordinate."""
        rect = DisplayRect(left=0, top=0, width=0, height=100)

        assert map_to_native(10, 10, (800, 400), rect) is None

    def test_zero_height_declines(self):
        rect = DisplayRect(left=0, top=0, width=100, height=0)

        assert map_to_native(10, 10, (800, 400), rect) is None

    def test_unknown_native_size_declines(self):
        """Before the source image loads there is nothing to map onto."""
        rect = DisplayRect(left=0, top=0, width=100, height=100)

        assert map_to_native(10, 10, None, rect) is None

    def test_layout_change_changes_mapping(self):
        """The same pointer position maps differently after a resize."""
        before = DisplayRect(left=0, top=0, width=200, height=200)
        after = DisplayRect(left=0, top=0, width=400, height=400)

        assert map_to_native(100, 100, (800, 800), before) == (400.0, 400.0)
        assert map_to_native(100, 100, (800, 800), after) == (200.0, 200.0)


class TestDisplayTransform:
    """Tests for DisplayTransform."""

    def test_from_degenerate_rect_is_none(self):
        assert DisplayTransform.from_rect((10, 10), DisplayRect(0, 0, 0, 0)) is None

    def test_scale_and_offset(self):
        transform = DisplayTransform.from_rect((1000, 500), DisplayRect(20, 30, 250, 125))

        assert transform.scale_x == 4.0
        assert transform.scale_y == 4.0
        assert transform.offset_x == 20
        assert transform.offset_y == 30

    def test_to_display_inverts_to_native(self):
        transform = DisplayTransform.from_rect((1000, 500), DisplayRect(20, 30, 250, 125))

        native = transform.to_native(145, 92.5)
        assert native == (500.0, 250.0)
        assert transform.to_display(*native) == pytest.approx((145, 92.5))
