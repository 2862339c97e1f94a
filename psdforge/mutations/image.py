"""
Image replacement.

The replacement is scaled to the layer's current size when the layer has
one; a layer with empty bounds takes the image's natural size instead. In
both cases the top-left corner of the layer stays where it is and the
bounds are set to match the new raster.
"""

import logging
from typing import Callable, Optional

from psdforge.imaging import resample_raster
from psdforge.layers import Layer, PixelLayer, Raster

from .base import MutationResult

logger = logging.getLogger(__name__)

Resampler = Callable[[Raster, int, int], Raster]
"Scales a raster to exactly (width, height)"

UNAVAILABLE = "replacement image unavailable"


def target_size(layer: PixelLayer, source: Raster) -> tuple[int, int]:
    """
    Size the replacement image will have in the layer.

    Returns:
        The layer's bounds size if both sides are > 0, else the source size
    """
    bounds = layer.bounds
    if bounds.width > 0 and bounds.height > 0:
        return bounds.width, bounds.height
    return source.width, source.height


def replace_image(
    layer: Optional[Layer],
    source: Optional[Raster],
    resample: Resampler = resample_raster,
) -> MutationResult:
    """
    Replace a pixel layer's raster with a rescaled image.

    Args:
        layer: Target layer, or None if the lookup found nothing
        source: Decoded replacement image, or None if it could not be loaded
        resample: Scaling function

    Returns:
        applied; skipped when the layer is missing or not a pixel layer or
        the image is unavailable; failed when scaling did not produce a
        raster of the target size. The layer is untouched unless applied.
    """
    if layer is None:
        return MutationResult.skipped(None, "layer not found")
    if not isinstance(layer, PixelLayer):
        return MutationResult.skipped(layer.name, f"not a pixel layer ({layer.layer_type})")
    if source is None:
        return MutationResult.skipped(layer.name, UNAVAILABLE)
    if source.width == 0 or source.height == 0:
        return MutationResult.skipped(layer.name, "replacement image is empty")

    width, height = target_size(layer, source)
    try:
        raster = resample(source, width, height)
    except ValueError as e:
        return MutationResult.failed(layer.name, f"resampling failed: {e}")
    if raster.size != (width, height):
        return MutationResult.failed(
            layer.name,
            f"resampled to {raster.width}x{raster.height}, expected {width}x{height}",
        )

    layer.raster = raster
    layer.bounds = layer.bounds.resized(width, height)
    layer.invalidate()
    logger.debug(
        f"Replaced image of '{layer.name}' "
        f"({source.width}x{source.height} -> {width}x{height})"
    )
    return MutationResult.applied(layer.name)
