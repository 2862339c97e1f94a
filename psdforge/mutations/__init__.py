"""
Template mutations.

Layer lookup by name, the content mutations (text, fill, image) and the
pipeline that applies a request's values to a document.
"""

from .base import MutationReport, MutationResult, MutationStatus
from .locator import find_all_layers, find_layer, iter_layers
from .text import set_text
from .fill import fill_layer, parse_hex_color, solid_fill
from .image import replace_image, target_size
from .pipeline import (
    OUTPUT_OPTIONS,
    LayerRole,
    TemplatePipeline,
    TemplateValues,
)

__all__ = [
    # Results
    'MutationReport',
    'MutationResult',
    'MutationStatus',
    # Lookup
    'find_all_layers',
    'find_layer',
    'iter_layers',
    # Mutations
    'set_text',
    'fill_layer',
    'parse_hex_color',
    'solid_fill',
    'replace_image',
    'target_size',
    # Pipeline
    'OUTPUT_OPTIONS',
    'LayerRole',
    'TemplatePipeline',
    'TemplateValues',
]
