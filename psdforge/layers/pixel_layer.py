"""
PixelLayer - Raster layer with RGBA pixel data.

The raster covers the layer's bounds. A layer whose bounds are empty is
valid but inert: fills skip it and image replacement adopts the source
image's size.
"""

from typing import Literal, Optional

from pydantic import Field

from .base import ContentLayer
from .raster import Raster


class PixelLayer(ContentLayer):
    """Raster/pixel layer with image data."""

    layer_type: Literal["pixel"] = Field(default="pixel", alias="type")

    raster: Optional[Raster] = Field(default=None)

    def has_content(self) -> bool:
        """Check if layer has pixel content."""
        return self.raster is not None and self.raster.width > 0 and self.raster.height > 0
