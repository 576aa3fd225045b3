"""
Screen-to-image coordinate mapping for the mask editor.

The drawing surface always has the native pixel size of the source image,
but it is shown scaled inside whatever rectangle the window layout gives it.
Pointer events arrive in that on-screen rectangle's coordinate space and
must be mapped back to native pixels before anything is drawn.

Classes:
    DisplayRect: The rectangle the surface currently occupies on screen
    DisplayTransform: Scale/offset pair derived from a DisplayRect

Functions:
    map_to_native: Map one pointer position to native pixel coordinates
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
NativeSize = Tuple[int, int]


@dataclass(frozen=True)
class DisplayRect:
    """On-screen rectangle of the drawing surface.

    Attributes:
        left: X position of the rectangle's left edge
        top: Y position of the rectangle's top edge
        width: Rendered width (0 while the surface is not laid out)
        height: Rendered height (0 while the surface is not laid out)
    """
    left: float
    top: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class DisplayTransform:
    """Mapping between a DisplayRect and the surface's native pixels.

    Never cached across layout changes: build a new one from the current
    rectangle for every pointer event.
    """
    scale_x: float
    scale_y: float
    offset_x: float
    offset_y: float

    @classmethod
    def from_rect(cls, native_size: NativeSize, rect: DisplayRect) -> Optional["DisplayTransform"]:
        """
        Build a transform for the given native size and display rectangle.

        Args:
            native_size: (width, height) of the drawing surface in pixels
            rect: Rectangle the surface currently occupies on screen

        Returns:
            The transform, or None when the rectangle has no area yet
        """
        if rect.is_degenerate:
            return None

        native_width, native_height = native_size
        return cls(
            scale_x=native_width / rect.width,
            scale_y=native_height / rect.height,
            offset_x=rect.left,
            offset_y=rect.top,
        )

    def to_native(self, x: float, y: float) -> Point:
        return (x - self.offset_x) * self.scale_x, (y - self.offset_y) * self.scale_y

    def to_display(self, x: float, y: float) -> Point:
        return x / self.scale_x + self.offset_x, y / self.scale_y + self.offset_y


def map_to_native(
    x: float,
    y: float,
    native_size: Optional[NativeSize],
    rect: DisplayRect,
) -> Optional[Point]:
    """
    Map a pointer position to native pixel coordinates.

    Args:
        x: Pointer X in the display rectangle's coordinate space
        y: Pointer Y in the display rectangle's coordinate space
        native_size: Native (width, height), or None if not yet known
        rect: Rectangle the surface currently occupies on screen

    Returns:
        (native_x, native_y), or None when the surface is not laid out or
        its native size is unknown. Callers skip drawing for that event.
    """
    if native_size is None:
        logger.debug("Pointer event ignored: native size not established")
        return None

    transform = DisplayTransform.from_rect(native_size, rect)
    if transform is None:
        logger.debug(f"Pointer event ignored: degenerate display rect {rect}")
        return None

    return transform.to_native(x, y)
