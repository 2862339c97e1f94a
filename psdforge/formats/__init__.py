"""
psdforge file formats.

Codecs turn file bytes into a Document and write mutated documents back.
"""

from .base import DocumentCodec, WriteOptions
from .psd import PsdCodec

__all__ = ['DocumentCodec', 'WriteOptions', 'PsdCodec']
