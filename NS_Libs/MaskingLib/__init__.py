"""
MaskingLib - Interactive mask painting

This module maps pointer positions onto native image pixels and
accumulates brush strokes into a binary edit mask.
"""

from NS_Libs.MaskingLib.coordinate_mapper import DisplayRect, DisplayTransform, map_to_native
from NS_Libs.MaskingLib.mask_compositor import (
    BrushMode,
    MaskCompositor,
    Stroke,
    apply_stroke,
    render_strokes,
    surface_to_mask,
)

__all__ = [
    "DisplayRect",
    "DisplayTransform",
    "map_to_native",
    "BrushMode",
    "MaskCompositor",
    "Stroke",
    "apply_stroke",
    "render_strokes",
    "surface_to_mask",
]
