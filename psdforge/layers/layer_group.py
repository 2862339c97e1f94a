"""
LayerGroup - Container for organizing layers into folders.

Groups own their children exclusively; the layer tree has no shared
sub-trees and no back-references. ``Layer`` is the tagged union of the
three layer kinds, discriminated by ``type``.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Field

from .base import BaseLayer
from .pixel_layer import PixelLayer
from .text_layer import TextLayer


class LayerGroup(BaseLayer):
    """Layer group holding an ordered list of child layers."""

    layer_type: Literal["group"] = Field(default="group", alias="type")

    children: list['Layer'] = Field(default_factory=list)

    def to_api_dict(self) -> dict[str, Any]:
        data = super().to_api_dict()
        data['children'] = [child.to_api_dict() for child in self.children]
        return data


Layer = Annotated[
    Union[PixelLayer, TextLayer, LayerGroup],
    Field(discriminator='layer_type'),
]

LayerGroup.model_rebuild()
