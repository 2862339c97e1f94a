"""
Document - a parsed template: pixel dimensions plus an ordered layer tree.

A document is built fresh per request by the codec, mutated in place and
written once. It is never shared between requests.

Layers are visited in pre-order, depth first, in document order: a group
is checked before its children, and its children are searched before the
group's next sibling. When several layers share a name, the first one in
that order wins.
"""

from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .layer_group import Layer, LayerGroup


def iter_layers(layers: Iterable[Layer]) -> Iterator[Layer]:
    """
    Iterate a layer forest in pre-order.

    Args:
        layers: Top-level layers in document order

    Yields:
        Every layer, groups before their children
    """
    stack = list(reversed(list(layers)))
    while stack:
        layer = stack.pop()
        yield layer
        if isinstance(layer, LayerGroup):
            stack.extend(reversed(layer.children))


def find_layer(layers: Iterable[Layer], name: str) -> Optional[Layer]:
    """
    Find the first layer with the given name.

    Args:
        layers: Top-level layers in document order
        name: Exact, case-sensitive layer name

    Returns:
        The first matching layer in pre-order, or None
    """
    for layer in iter_layers(layers):
        if layer.name == name:
            return layer
    return None


def find_all_layers(layers: Iterable[Layer], name: str) -> list[Layer]:
    """Find every layer with the given name, in pre-order."""
    return [layer for layer in iter_layers(layers) if layer.name == name]


class Document(BaseModel):
    """
    Document model.

    Structural view (``to_api_dict``):
    {
        "width": 800,
        "height": 600,
        "layers": [
            {"name": "header", "type": "text", "text": "...",
             "bounds": {...}, "visible": true},
            {"name": "Group 1", "type": "group", "bounds": {...},
             "visible": true, "children": [...]}
        ]
    }
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
    )

    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    layers: list[Layer] = Field(default_factory=list)

    _source: Any = PrivateAttr(default=None)

    def iter_layers(self) -> Iterator[Layer]:
        """Iterate all layers in pre-order (groups before their children)."""
        return iter_layers(self.layers)

    def get_layer(self, name: str) -> Optional[Layer]:
        """
        Get the first layer with the given name.

        Args:
            name: Exact, case-sensitive layer name

        Returns:
            Layer or None if no layer has that name
        """
        return find_layer(self.layers, name)

    def to_api_dict(self) -> dict[str, Any]:
        """Structural view of the document without pixel payloads."""
        return {
            'width': self.width,
            'height': self.height,
            'layers': [layer.to_api_dict() for layer in self.layers],
        }
