"""
Solid color fills.

``solid_fill`` is a pure function of size and color; filling a layer never
depends on the raster it held before.
"""

import logging
import re
from typing import Optional

import numpy as np

from psdforge.errors import InvalidColorError
from psdforge.layers import Layer, PixelLayer, Raster

from .base import MutationResult

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r'#?([0-9a-fA-F]{6})')


def parse_hex_color(value: str) -> tuple[int, int, int]:
    """
    Convert a hex color string (#RRGGBB or RRGGBB) to an RGB tuple (0-255).

    Raises:
        InvalidColorError: If the value is not six hex digits
    """
    match = _HEX_COLOR.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise InvalidColorError(f"Invalid hex color: {value!r} (expected #RRGGBB)")
    digits = match.group(1)
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def solid_fill(width: int, height: int, color: tuple[int, int, int]) -> Raster:
    """
    Build an opaque raster filled with one color.

    Args:
        width: Width in pixels (> 0)
        height: Height in pixels (> 0)
        color: RGB tuple (0-255); alpha is always 255

    Returns:
        Raster with every pixel set to (r, g, b, 255)
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid fill size: {width}x{height}")
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = (color[0], color[1], color[2], 255)
    return Raster.from_array(pixels)


def fill_layer(layer: Optional[Layer], hex_color: str) -> MutationResult:
    """
    Replace a pixel layer's raster with a solid color covering its bounds.

    The color is parsed before the layer is looked at, so a malformed color
    is reported even when the layer does not exist.

    Args:
        layer: Target layer, or None if the lookup found nothing
        hex_color: #RRGGBB or RRGGBB

    Returns:
        applied, or skipped when the layer is missing, not a pixel layer,
        or has empty bounds

    Raises:
        InvalidColorError: If hex_color is malformed
    """
    color = parse_hex_color(hex_color)
    if layer is None:
        return MutationResult.skipped(None, "layer not found")
    if not isinstance(layer, PixelLayer):
        return MutationResult.skipped(layer.name, f"not a pixel layer ({layer.layer_type})")
    bounds = layer.bounds
    if bounds.is_empty:
        return MutationResult.skipped(
            layer.name, f"empty bounds ({bounds.width}x{bounds.height})"
        )

    layer.raster = solid_fill(bounds.width, bounds.height, color)
    layer.invalidate()
    logger.debug(f"Filled '{layer.name}' with {hex_color} ({bounds.width}x{bounds.height})")
    return MutationResult.applied(layer.name)
