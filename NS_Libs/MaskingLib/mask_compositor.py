"""
Mask Compositor for the Nano Studio mask editor.

Accumulates freehand brush strokes on a drawing surface that always has the
native pixel size of the source image, then exports an opaque binary mask
(white = region to change, black = region to keep) of exactly that size.

The surface starts fully transparent. Painting writes opaque white pixels,
erasing writes transparent pixels back ("clear" compositing). Consecutive
sampled points are joined with a stroked segment plus round caps, so fast
pointer motion still produces a continuous mark.

Example:
    >>> compositor = MaskCompositor((1024, 768), brush_radius=40)
    >>> compositor.begin_stroke((100, 100))
    >>> compositor.extend_stroke((300, 120))
    >>> compositor.end_stroke()
    >>> png_bytes = compositor.export_mask()
"""

from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np
from PIL import Image, ImageDraw

from NS_Libs.constants import (
    DEFAULT_BRUSH_RADIUS,
    DEFAULT_OUTPUT_FORMAT,
    MASK_BACKGROUND,
    MAX_BRUSH_RADIUS,
    MIN_BRUSH_RADIUS,
    SURFACE_EMPTY,
    SURFACE_PAINT,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
NativeSize = Tuple[int, int]


class BrushMode(Enum):
    """Compositing mode for a stroke."""
    PAINT = "paint"
    ERASE = "erase"

    @property
    def fill(self) -> Tuple[int, int, int, int]:
        return SURFACE_PAINT if self is BrushMode.PAINT else SURFACE_EMPTY


@dataclass
class Stroke:
    """One continuous brush stroke in native pixel space.

    Attributes:
        points: Sampled points, in the order they were received
        radius: Brush radius in native pixels
        mode: PAINT or ERASE
    """
    points: List[Point] = field(default_factory=list)
    radius: float = DEFAULT_BRUSH_RADIUS
    mode: BrushMode = BrushMode.PAINT


def validate_native_size(native_size: Sequence[int]) -> NativeSize:
    """
    Check that a native size is a pair of positive integers.

    Raises:
        ValueError: If the size is not two positive integers
    """
    if len(native_size) != 2:
        raise ValueError(f"native_size must be (width, height), got {native_size!r}")

    width, height = int(native_size[0]), int(native_size[1])
    if width <= 0 or height <= 0:
        raise ValueError(f"native_size must be positive, got {width}x{height}")

    return width, height


def apply_stroke(
    draw: ImageDraw.ImageDraw,
    points: Sequence[Point],
    radius: float,
    mode: BrushMode,
) -> None:
    """
    Render a run of stroke points onto a drawing surface.

    The same routine serves both brush modes; only the fill differs.
    Each consecutive pair of points is joined by a segment of width
    2 * radius and every point gets a round cap, which also rounds the
    joins. Rendering a run in one call or point by point covers the same
    pixels.

    Args:
        draw: ImageDraw bound to the RGBA drawing surface
        points: One or more points in native pixel space
        radius: Brush radius in native pixels
        mode: PAINT writes opaque white, ERASE writes transparency
    """
    if not points:
        return

    fill = mode.fill
    width = max(1, int(round(radius * 2)))

    for start, end in zip(points, points[1:]):
        draw.line([start, end], fill=fill, width=width)

    for x, y in points:
        draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=fill)


def render_strokes(native_size: Sequence[int], strokes: Iterable[Stroke]) -> Image.Image:
    """
    Replay strokes onto a fresh transparent surface.

    Args:
        native_size: Surface (width, height) in pixels
        strokes: Strokes to apply, in order

    Returns:
        RGBA drawing surface
    """
    surface = Image.new("RGBA", validate_native_size(native_size), SURFACE_EMPTY)
    draw = ImageDraw.Draw(surface)

    for stroke in strokes:
        apply_stroke(draw, stroke.points, stroke.radius, stroke.mode)

    return surface


def surface_to_mask(surface: Image.Image) -> Image.Image:
    """
    Flatten a drawing surface into an opaque binary mask.

    Fills an output buffer with black, then composites the surface on top:
    painted pixels come out white and everything else stays black.

    Args:
        surface: RGBA drawing surface

    Returns:
        RGB mask image with the surface's dimensions
    """
    background = Image.new("RGBA", surface.size, MASK_BACKGROUND)
    return Image.alpha_composite(background, surface).convert("RGB")


class MaskCompositor:
    """
    Owns the drawing surface and stroke list for one mask editing session.

    Created when the editor opens and thrown away on cancel; on save the
    surface is exported once into a mask image. Until the native size of
    the source image is known, every drawing and export call is a no-op.
    """

    def __init__(
        self,
        native_size: Optional[Sequence[int]] = None,
        brush_radius: float = DEFAULT_BRUSH_RADIUS,
        mode: BrushMode = BrushMode.PAINT,
    ):
        self._native_size: Optional[NativeSize] = None
        self._surface: Optional[Image.Image] = None
        self._draw: Optional[ImageDraw.ImageDraw] = None
        self._strokes: List[Stroke] = []
        self._active: Optional[Stroke] = None
        self._brush_radius = DEFAULT_BRUSH_RADIUS
        self.mode = mode
        self.brush_radius = brush_radius

        if native_size is not None:
            self.set_native_size(native_size)

    @classmethod
    def from_strokes(cls, native_size: Sequence[int], strokes: Iterable[Stroke]) -> "MaskCompositor":
        """Rebuild a compositor by replaying recorded strokes."""
        compositor = cls(native_size)
        for stroke in strokes:
            compositor.mode = stroke.mode
            compositor.brush_radius = stroke.radius
            points = list(stroke.points)
            if not points:
                continue
            compositor.begin_stroke(points[0])
            for point in points[1:]:
                compositor.extend_stroke(point)
            compositor.end_stroke()
        return compositor

    @property
    def native_size(self) -> Optional[NativeSize]:
        return self._native_size

    @property
    def is_ready(self) -> bool:
        """True once the source image's native size is established."""
        return self._surface is not None

    @property
    def is_drawing(self) -> bool:
        return self._active is not None

    @property
    def brush_radius(self) -> float:
        return self._brush_radius

    @brush_radius.setter
    def brush_radius(self, value: float) -> None:
        value = float(value)
        if value < MIN_BRUSH_RADIUS or value > MAX_BRUSH_RADIUS:
            raise ValueError(
                f"brush_radius must be {MIN_BRUSH_RADIUS}-{MAX_BRUSH_RADIUS}, got {value}"
            )
        self._brush_radius = value

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._strokes)

    @property
    def surface(self) -> Optional[Image.Image]:
        """Copy of the current RGBA drawing surface, for display."""
        return self._surface.copy() if self._surface is not None else None

    def set_native_size(self, native_size: Sequence[int]) -> None:
        """
        Establish the surface dimensions once the source image has loaded.

        Raises:
            ValueError: If the size is invalid, or differs from a size
                        already established for this session
        """
        size = validate_native_size(native_size)

        if self._native_size is not None:
            if size != self._native_size:
                raise ValueError(
                    f"Native size already established as {self._native_size}, got {size}"
                )
            return

        self._native_size = size
        self._surface = Image.new("RGBA", size, SURFACE_EMPTY)
        self._draw = ImageDraw.Draw(self._surface)
        logger.debug(f"Drawing surface created at {size[0]}x{size[1]}")

    def begin_stroke(self, point: Point) -> bool:
        """
        Start a new stroke at the first sampled point and render its cap.

        Returns:
            False when drawing is deferred (native size unknown)
        """
        if not self.is_ready:
            logger.debug("begin_stroke ignored: surface not ready")
            return False

        self._active = Stroke(points=[point], radius=self._brush_radius, mode=self.mode)
        self._strokes.append(self._active)
        apply_stroke(self._draw, [point], self._active.radius, self._active.mode)
        return True

    def extend_stroke(self, point: Point) -> bool:
        """
        Append a sampled point and render the segment joining it to the previous one.

        Returns:
            False when no stroke is active or drawing is deferred
        """
        if not self.is_ready or self._active is None:
            return False

        previous = self._active.points[-1]
        self._active.points.append(point)
        apply_stroke(self._draw, [previous, point], self._active.radius, self._active.mode)
        return True

    def end_stroke(self) -> None:
        if self._active is not None:
            logger.debug(
                f"Stroke finished: {self._active.mode.value}, "
                f"{len(self._active.points)} points"
            )
        self._active = None

    def clear_all(self) -> None:
        """Reset the surface to empty, whatever the current brush mode."""
        self._active = None
        self._strokes.clear()
        if self._native_size is not None:
            self._surface = Image.new("RGBA", self._native_size, SURFACE_EMPTY)
            self._draw = ImageDraw.Draw(self._surface)
        logger.debug("Drawing surface cleared")

    def coverage(self) -> float:
        """Fraction of native pixels currently marked editable (0.0-1.0)."""
        if self._surface is None:
            return 0.0
        alpha = np.asarray(self._surface.getchannel("A"))
        return float(np.count_nonzero(alpha)) / alpha.size

    def export_mask_image(self) -> Optional[Image.Image]:
        """
        Export the binary mask at native resolution.

        Returns:
            RGB image of pure black/white pixels, or None if not ready
        """
        if self._surface is None:
            logger.debug("export ignored: surface not ready")
            return None
        return surface_to_mask(self._surface)

    def export_mask(self) -> Optional[bytes]:
        """
        Export the binary mask as PNG bytes.

        Exporting twice without new strokes yields identical bytes.

        Returns:
            PNG-encoded mask, or None if not ready
        """
        mask = self.export_mask_image()
        if mask is None:
            return None

        buffer = BytesIO()
        mask.save(buffer, format=DEFAULT_OUTPUT_FORMAT)
        return buffer.getvalue()
