"""Text replacement."""

import logging
from typing import Optional

from psdforge.layers import Layer, TextLayer

from .base import MutationResult

logger = logging.getLogger(__name__)


def set_text(layer: Optional[Layer], text: str) -> MutationResult:
    """
    Replace the text of a text layer.

    The string is stored verbatim. Bounds are left as they are.

    Args:
        layer: Target layer, or None if the lookup found nothing
        text: New text

    Returns:
        applied, or skipped when the layer is missing or not a text layer
    """
    if layer is None:
        return MutationResult.skipped(None, "layer not found")
    if not isinstance(layer, TextLayer):
        return MutationResult.skipped(layer.name, f"not a text layer ({layer.layer_type})")

    layer.text = text
    layer.invalidate()
    logger.debug(f"Text of '{layer.name}' set ({len(text)} chars)")
    return MutationResult.applied(layer.name)
