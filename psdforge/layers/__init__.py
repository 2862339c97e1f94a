"""
psdforge Layer Models

Pydantic models for the in-memory template document.

Layer Hierarchy:
    BaseLayer (abstract)
    ├── ContentLayer (abstract, carries cachedBitmap)
    │   ├── PixelLayer (type: 'pixel')
    │   └── TextLayer (type: 'text')
    └── LayerGroup (type: 'group')
"""

from .raster import Raster
from .base import BaseLayer, ContentLayer, LayerType, Rect
from .pixel_layer import PixelLayer
from .text_layer import TextLayer
from .layer_group import Layer, LayerGroup
from .document import Document, find_all_layers, find_layer, iter_layers

__all__ = [
    # Geometry and pixels
    'Rect',
    'Raster',
    # Base
    'BaseLayer',
    'ContentLayer',
    'LayerType',
    # Layer types
    'Layer',
    'PixelLayer',
    'TextLayer',
    'LayerGroup',
    # Document
    'Document',
    'iter_layers',
    'find_layer',
    'find_all_layers',
]
