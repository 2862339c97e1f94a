"""
BaseLayer - Abstract base model for all layer types.

Provides shared properties for all layers:
- Identity: name, type
- Placement: bounds (left, top, right, bottom in document pixels)
- Appearance: visible

Content layers (text and pixel) additionally carry a cached bitmap, a
previously rendered raster of the layer. ``invalidate()`` is the one place
that drops it when the layer's authoritative content changes.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .raster import Raster


class LayerType(str, Enum):
    """Layer type identifiers."""
    PIXEL = "pixel"
    TEXT = "text"
    GROUP = "group"


class Rect(BaseModel):
    """Axis-aligned rectangle in document pixel coordinates."""

    model_config = ConfigDict(frozen=True)

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        """True if the rectangle covers no pixels (either side <= 0)."""
        return self.width <= 0 or self.height <= 0

    def resized(self, width: int, height: int) -> 'Rect':
        """Rectangle with the same top-left anchor and the given size."""
        return Rect(
            left=self.left,
            top=self.top,
            right=self.left + width,
            bottom=self.top + height,
        )

    def to_api_dict(self) -> dict[str, int]:
        return {
            'left': self.left,
            'top': self.top,
            'right': self.right,
            'bottom': self.bottom,
            'width': self.width,
            'height': self.height,
        }


class BaseLayer(BaseModel):
    """
    Base model for all layer types.

    The codec that parsed a layer may attach a handle to the source file
    layer (``_source``); it is private state and never serialized.
    """

    model_config = ConfigDict(
        # Allow both field names and aliases on input
        populate_by_name=True,
        # Mutators assign fields directly
        validate_assignment=False,
        extra='ignore',
        use_enum_values=True,
    )

    layer_type: str = Field(default=LayerType.PIXEL.value, alias='type')
    name: str = Field(default='Layer')
    visible: bool = Field(default=True)
    bounds: Rect = Field(default_factory=Rect)

    _source: Any = PrivateAttr(default=None)
    _invalidated: bool = PrivateAttr(default=False)

    @property
    def invalidated(self) -> bool:
        """True once the layer's content changed since it was decoded."""
        return self._invalidated

    def invalidate(self) -> None:
        """Mark the layer's content as changed."""
        self._invalidated = True

    def to_api_dict(self) -> dict[str, Any]:
        """
        Structural view of the layer without pixel payloads.

        Returns:
            Dict with name, type, bounds and visible
        """
        return {
            'name': self.name,
            'type': self.layer_type,
            'bounds': self.bounds.to_api_dict(),
            'visible': self.visible,
        }

    def is_group(self) -> bool:
        """Check if this is a group layer."""
        return self.layer_type == LayerType.GROUP

    def is_text(self) -> bool:
        """Check if this is a text layer."""
        return self.layer_type == LayerType.TEXT

    def is_pixel(self) -> bool:
        """Check if this is a pixel layer."""
        return self.layer_type == LayerType.PIXEL


class ContentLayer(BaseLayer):
    """Base for layers whose content can be rendered into a cached bitmap."""

    cached_bitmap: Optional[Raster] = Field(default=None, alias='cachedBitmap')

    def invalidate(self) -> None:
        """
        Drop the cached bitmap and mark the content as changed.

        Called by every mutation after it replaced text or pixels, so a
        renderer downstream never picks up a stale bitmap.
        """
        self.cached_bitmap = None
        super().invalidate()
