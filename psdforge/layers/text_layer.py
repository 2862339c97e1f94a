"""
TextLayer - Layer holding a text string.

Only the string is modelled; typography stays in the source file. Bounds
are not reflowed when the text changes, measuring text is left to whatever
renders the document.
"""

from typing import Any, Literal

from pydantic import Field

from .base import ContentLayer


class TextLayer(ContentLayer):
    """Text layer."""

    layer_type: Literal["text"] = Field(default="text", alias="type")

    text: str = Field(default='')

    def to_api_dict(self) -> dict[str, Any]:
        data = super().to_api_dict()
        data['text'] = self.text
        return data
