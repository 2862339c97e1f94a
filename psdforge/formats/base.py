"""Codec interface between documents and file bytes."""

from dataclasses import dataclass
from typing import Protocol

from psdforge.layers import Document


@dataclass(frozen=True)
class WriteOptions:
    """
    Options for writing a document.

    Attributes:
        invalidate_text_layers: Drop the stored glyph pixels of changed text
            layers so that readers re-render them from the text
        trim_image_data: Crop written pixel data to its non-transparent area
            and compress it
    """

    invalidate_text_layers: bool = True
    trim_image_data: bool = True


class DocumentCodec(Protocol):
    """Reads and writes documents in one file format."""

    def decode(self, data: bytes, *, include_pixels: bool = True) -> Document:
        """Parse file bytes into a document."""
        ...

    def encode(self, document: Document, options: WriteOptions) -> bytes:
        """Write a document back to file bytes."""
        ...
