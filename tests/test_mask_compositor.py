"""
Tests for the Mask Compositor.

Tests cover:
- Paint and erase strokes
- Clear-all
- Binary, native-resolution export
- Export idempotence
- Deferred drawing before the native size is known
- Stroke replay
"""

import unittest
from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from NS_Libs.MaskingLib.coordinate_mapper import DisplayRect, map_to_native
from NS_Libs.MaskingLib.mask_compositor import (
    BrushMode,
    MaskCompositor,
    Stroke,
    render_strokes,
    surface_to_mask,
)


def decode_mask(png_bytes):
    """Decode exported PNG bytes into an array."""
    return np.asarray(Image.open(BytesIO(png_bytes)).convert("RGB"))


def paint_everything(compositor):
    """One paint stroke whose brush covers the whole surface."""
    width, height = compositor.native_size
    compositor.mode = BrushMode.PAINT
    compositor.brush_radius = 150
    compositor.begin_stroke((width / 2, height / 2))
    compositor.end_stroke()


class TestPaintAndErase(unittest.TestCase):
    """Test stroke rendering."""

    def test_single_stroke_covering_surface_exports_all_white(self):
        """A full-coverage paint stroke yields an all-white mask."""
        compositor = MaskCompositor((40, 30))
        paint_everything(compositor)

        mask = decode_mask(compositor.export_mask())

        self.assertEqual(mask.shape, (30, 40, 3))
        self.assertTrue((mask == 255).all())

    def test_full_coverage_through_small_display_rect(self):
        """Drawing on a scaled-down display still exports at native size."""
        compositor = MaskCompositor((120, 80), brush_radius=150)
        rect = DisplayRect(left=10, top=10, width=30, height=20)

        point = map_to_native(25, 20, compositor.native_size, rect)
        compositor.begin_stroke(point)
        compositor.end_stroke()
        mask = compositor.export_mask_image()

        self.assertEqual(mask.size, (120, 80))
        self.assertTrue((np.asarray(mask) == 255).all())

    def test_continuous_stroke_has_no_gaps(self):
        """Two far-apart samples are joined by a solid segment."""
        compositor = MaskCompositor((100, 30), brush_radius=5)
        compositor.begin_stroke((5, 15))
        compositor.extend_stroke((95, 15))
        compositor.end_stroke()

        mask = np.asarray(compositor.export_mask_image())

        self.assertTrue((mask[15, 5:96] == 255).all())
        self.assertTrue((mask[0, :] == 0).all())

    def test_erase_clears_painted_pixels(self):
        """Erasing reveals black again under the brush only."""
        compositor = MaskCompositor((40, 30))
        paint_everything(compositor)

        compositor.mode = BrushMode.ERASE
        compositor.brush_radius = 5
        compositor.begin_stroke((0, 0))
        compositor.end_stroke()
        mask = np.asarray(compositor.export_mask_image())

        self.assertTrue((mask[0, 0] == 0).all())
        self.assertTrue((mask[29, 39] == 255).all())

    def test_export_is_binary(self):
        """Every exported pixel is pure black or pure white."""
        compositor = MaskCompositor((64, 64), brush_radius=7)
        compositor.begin_stroke((3, 5))
        compositor.extend_stroke((40, 50))
        compositor.extend_stroke((60, 10))
        compositor.end_stroke()

        mask = np.asarray(compositor.export_mask_image())

        self.assertTrue(set(np.unique(mask)).issubset({0, 255}))
        self.assertTrue((mask == 255).any())
        self.assertTrue((mask == 0).any())

    def test_begin_stroke_marks_a_dot(self):
        """A click without motion paints the brush footprint."""
        compositor = MaskCompositor((50, 50), brush_radius=5)
        compositor.begin_stroke((25, 25))
        compositor.end_stroke()

        mask = np.asarray(compositor.export_mask_image())

        self.assertTrue((mask[25, 25] == 255).all())
        self.assertTrue((mask[0, 0] == 0).all())

    def test_extend_without_begin_is_ignored(self):
        compositor = MaskCompositor((20, 20))

        self.assertFalse(compositor.extend_stroke((10, 10)))
        self.assertEqual(compositor.strokes, ())


class TestClearAll(unittest.TestCase):
    """Test clear-all."""

    def test_paint_then_clear_exports_all_black(self):
        compositor = MaskCompositor((40, 30), brush_radius=10)
        for y in (5, 15, 25):
            compositor.begin_stroke((0, y))
            compositor.extend_stroke((40, y))
            compositor.end_stroke()

        compositor.clear_all()
        mask = decode_mask(compositor.export_mask())

        self.assertEqual(mask.shape, (30, 40, 3))
        self.assertTrue((mask == 0).all())
        self.assertEqual(compositor.strokes, ())

    def test_clear_ignores_brush_mode(self):
        compositor = MaskCompositor((40, 30))
        paint_everything(compositor)
        compositor.mode = BrushMode.ERASE

        compositor.clear_all()

        self.assertEqual(compositor.coverage(), 0.0)
        self.assertEqual(compositor.mode, BrushMode.ERASE)


class TestExport:
    """Tests for export behaviour."""

    def test_export_twice_is_byte_identical(self):
        compositor = MaskCompositor((80, 60), brush_radius=12)
        compositor.begin_stroke((10, 10))
        compositor.extend_stroke((70, 50))
        compositor.end_stroke()

        assert compositor.export_mask() == compositor.export_mask()

    def test_export_empty_surface_is_all_black(self):
        compositor = MaskCompositor((16, 9))

        mask = np.asarray(compositor.export_mask_image())

        assert mask.shape == (9, 16, 3)
        assert (mask == 0).all()

    def test_export_is_png(self):
        compositor = MaskCompositor((16, 9))

        assert compositor.export_mask()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_surface_to_mask_flattens_alpha(self):
        surface = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
        surface.putpixel((1, 1), (255, 255, 255, 255))

        mask = surface_to_mask(surface)

        assert mask.mode == "RGB"
        assert mask.getpixel((1, 1)) == (255, 255, 255)
        assert mask.getpixel((0, 0)) == (0, 0, 0)


class TestDeferredSurface:
    """Drawing and export wait for the native size."""

    def test_not_ready_without_size(self):
        compositor = MaskCompositor()

        assert not compositor.is_ready
        assert compositor.begin_stroke((1, 1)) is False
        assert compositor.export_mask() is None
        assert compositor.export_mask_image() is None
        assert compositor.coverage() == 0.0

    def test_ready_after_size_established(self):
        compositor = MaskCompositor()
        compositor.set_native_size((30, 20))

        assert compositor.is_ready
        assert compositor.begin_stroke((5, 5)) is True
        assert compositor.export_mask_image().size == (30, 20)

    def test_same_size_again_is_noop(self):
        compositor = MaskCompositor((30, 20))
        compositor.begin_stroke((5, 5))
        compositor.end_stroke()

        compositor.set_native_size((30, 20))

        assert len(compositor.strokes) == 1

    def test_changing_size_raises(self):
        compositor = MaskCompositor((30, 20))

        with pytest.raises(ValueError):
            compositor.set_native_size((40, 20))

    def test_invalid_size_raises(self):
        with pytest.raises(ValueError):
            MaskCompositor((0, 20))


class TestBrushSettings:
    """Tests for brush configuration."""

    def test_radius_out_of_range(self):
        compositor = MaskCompositor((10, 10))

        with pytest.raises(ValueError):
            compositor.brush_radius = 1
        with pytest.raises(ValueError):
            compositor.brush_radius = 1000

    def test_stroke_records_radius_and_mode(self):
        compositor = MaskCompositor((50, 50), brush_radius=12, mode=BrushMode.ERASE)
        compositor.begin_stroke((1, 2))
        compositor.extend_stroke((3, 4))
        compositor.end_stroke()

        stroke = compositor.strokes[0]
        assert stroke.radius == 12
        assert stroke.mode is BrushMode.ERASE
        assert stroke.points == [(1, 2), (3, 4)]


def zigzag(width, height, step):
    """Native points sweeping left-right-left down the whole surface."""
    rows = list(range(0, height, step)) + [height]
    points = []
    for index, y in enumerate(rows):
        xs = (0, width) if index % 2 == 0 else (width, 0)
        points.extend((x, y) for x in xs)
    return points


class TestLargeSurfaceCoverage:
    """A single stroke covering the surface exports all white at any size."""

    @pytest.mark.parametrize("native_size", [(1000, 800), (640, 1200), (1500, 300)])
    def test_zigzag_stroke_through_scaled_display(self, native_size):
        width, height = native_size
        compositor = MaskCompositor(native_size, brush_radius=150)
        rect = DisplayRect(left=12, top=8, width=width / 4, height=height / 4)

        display_points = [(12 + x / 4, 8 + y / 4) for x, y in zigzag(width, height, 250)]
        native_points = [map_to_native(x, y, native_size, rect) for x, y in display_points]
        compositor.begin_stroke(native_points[0])
        for point in native_points[1:]:
            compositor.extend_stroke(point)
        compositor.end_stroke()

        mask = decode_mask(compositor.export_mask())

        assert mask.shape == (height, width, 3)
        assert (mask == 255).all()
        assert len(compositor.strokes) == 1


class TestStrokeReplay:
    """The recorded strokes fully determine the mask."""

    def test_from_strokes_reproduces_mask(self):
        compositor = MaskCompositor((60, 40), brush_radius=8)
        compositor.begin_stroke((5, 5))
        compositor.extend_stroke((55, 35))
        compositor.end_stroke()
        compositor.mode = BrushMode.ERASE
        compositor.brush_radius = 6
        compositor.begin_stroke((30, 20))
        compositor.end_stroke()

        replayed = MaskCompositor.from_strokes((60, 40), compositor.strokes)

        assert replayed.export_mask() == compositor.export_mask()

    def test_render_strokes_matches_surface(self):
        strokes = [
            Stroke(points=[(0, 0), (20, 20)], radius=6, mode=BrushMode.PAINT),
            Stroke(points=[(10, 10)], radius=5, mode=BrushMode.ERASE),
        ]

        surface = render_strokes((32, 32), strokes)
        replayed = MaskCompositor.from_strokes((32, 32), strokes)

        assert np.array_equal(np.asarray(surface), np.asarray(replayed.surface))

    def test_coverage_full(self):
        compositor = MaskCompositor((40, 30))
        paint_everything(compositor)

        assert compositor.coverage() == 1.0
