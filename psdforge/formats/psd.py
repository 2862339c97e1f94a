"""
PSD codec built on psd-tools.

Decoding walks the layers of a ``PSDImage`` in file order and builds the
document model:

- groups become LayerGroup
- type layers become TextLayer; their rendered pixels are the cached bitmap
- every other layer (pixel, shape, smart object, fill, ...) becomes a
  PixelLayer carrying its rendered pixels

Each model keeps a private handle to the psd-tools object it came from.
Encoding writes only layers that were invalidated back into the parsed
file, so everything the model does not describe (styles, masks, effects,
typography) is written out unchanged.
"""

import io
import logging
from typing import Any

import PIL.Image
from psd_tools import PSDImage
from psd_tools.constants import ChannelID, ColorMode, Compression
from psd_tools.psd import engine_data
from psd_tools.psd.descriptor import String

from psdforge.errors import SerializationError, TemplateDecodeError
from psdforge.imaging import raster_from_pil, raster_to_pil
from psdforge.layers import (
    Document,
    Layer,
    LayerGroup,
    PixelLayer,
    Raster,
    Rect,
    TextLayer,
)

from .base import WriteOptions

logger = logging.getLogger(__name__)

# Channel IDs mapped to RGBA band index
_RGBA_BANDS = {
    ChannelID.TRANSPARENCY_MASK: 3,
    ChannelID.CHANNEL_0: 0,
    ChannelID.CHANNEL_1: 1,
    ChannelID.CHANNEL_2: 2,
}


def _bounds_of(layer: Any) -> Rect:
    return Rect(left=layer.left, top=layer.top, right=layer.right, bottom=layer.bottom)


def _pixels_of(layer: Any) -> Raster | None:
    if not layer.has_pixels():
        return None
    image = layer.topil()
    if image is None:
        return None
    return raster_from_pil(image)


class PsdCodec:
    """Reads and writes PSD/PSB files."""

    def decode(self, data: bytes, *, include_pixels: bool = True) -> Document:
        """
        Parse PSD bytes into a document.

        Args:
            data: PSD or PSB file contents
            include_pixels: If False, no pixel data is read (structure only)

        Returns:
            Document with a handle to the parsed file

        Raises:
            TemplateDecodeError: If the bytes are not a readable PSD
        """
        try:
            psd = PSDImage.open(io.BytesIO(data))
            layers = [self._decode_layer(layer, include_pixels) for layer in psd]
        except Exception as e:
            raise TemplateDecodeError(f"Failed to parse PSD: {e}") from e

        document = Document(width=psd.width, height=psd.height, layers=layers)
        document._source = psd
        return document

    def _decode_layer(self, layer: Any, include_pixels: bool) -> Layer:
        common = {
            'name': layer.name,
            'visible': layer.visible,
            'bounds': _bounds_of(layer),
        }
        if layer.is_group():
            model = LayerGroup(
                children=[self._decode_layer(child, include_pixels) for child in layer],
                **common,
            )
        elif layer.kind == 'type':
            model = TextLayer(
                text=layer.text,
                cached_bitmap=_pixels_of(layer) if include_pixels else None,
                **common,
            )
        else:
            model = PixelLayer(
                raster=_pixels_of(layer) if include_pixels else None,
                **common,
            )
        model._source = layer
        return model

    def encode(self, document: Document, options: WriteOptions = WriteOptions()) -> bytes:
        """
        Write a decoded document back to PSD bytes.

        Args:
            document: Document returned by ``decode`` and mutated since
            options: Write options

        Returns:
            PSD file contents

        Raises:
            SerializationError: If the document cannot be written
        """
        psd = document._source
        if psd is None:
            raise SerializationError("Document was not decoded from a PSD file")
        if psd.color_mode != ColorMode.RGB or psd.depth != 8:
            raise SerializationError(
                f"Only 8-bit RGB documents can be written "
                f"(got {psd.color_mode.name}, {psd.depth}-bit)"
            )

        try:
            for layer in document.iter_layers():
                handle = layer._source
                if handle is None:
                    logger.warning(f"Layer '{layer.name}' has no source layer, not written")
                    continue
                if not layer.invalidated:
                    continue
                if isinstance(layer, TextLayer):
                    self._write_text(handle, layer, options)
                elif isinstance(layer, PixelLayer) and layer.has_content():
                    self._write_pixels(handle, layer.raster, layer.bounds, options)

            buffer = io.BytesIO()
            psd.save(buffer)
            return buffer.getvalue()
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError(f"Failed to write PSD: {e}") from e

    def _write_text(self, handle: Any, layer: TextLayer, options: WriteOptions) -> None:
        """Store new text in the type tool data of a type layer."""
        text = layer.text
        handle._data.text_data[b'Txt '] = String(value=text)
        engine = handle.engine_dict
        editor = engine.get('Editor')
        if editor is not None:
            # The text engine terminates paragraphs with carriage returns
            editor['Text'] = engine_data.String(text + '\r')
            _collapse_runs(engine, len(text) + 1)
        if options.invalidate_text_layers:
            self._clear_pixels(handle)

    def _clear_pixels(self, handle: Any) -> None:
        """Make the stored pixels of a layer fully transparent."""
        record = handle._record
        width = record.right - record.left
        height = record.bottom - record.top
        if width <= 0 or height <= 0:
            return
        empty = b'\x00' * (width * height)
        for info, channel in zip(record.channel_info, handle._channels):
            if info.id not in _RGBA_BANDS:
                continue
            channel.set_data(empty, width, height, handle._psd.depth, handle._psd.version)
            info.length = len(channel.data) + 2

    def _write_pixels(
        self,
        handle: Any,
        raster: Raster,
        bounds: Rect,
        options: WriteOptions,
    ) -> None:
        """Replace the channel data and bounds of a layer with a raster."""
        image = raster_to_pil(raster)
        left, top = bounds.left, bounds.top
        compression = None
        if options.trim_image_data:
            image, left, top = _trim(image, left, top)
            compression = Compression.RLE

        record = handle._record
        record.left = left
        record.top = top
        record.right = left + image.width
        record.bottom = top + image.height
        handle._invalidate_bbox()

        bands = image.split()
        for info, channel in zip(record.channel_info, handle._channels):
            band = _RGBA_BANDS.get(info.id)
            if band is None:
                # Masks keep their own data and bounds
                continue
            if compression is not None:
                channel.compression = compression
            channel.set_data(
                bands[band].tobytes(),
                image.width,
                image.height,
                handle._psd.depth,
                handle._psd.version,
            )
            info.length = len(channel.data) + 2


def _collapse_runs(engine: Any, length: int) -> None:
    """
    Replace the style and paragraph runs of a text engine with one run each.

    Run lengths must add up to the editor text length. The first run's
    style is kept for the whole text.
    """
    for key in ('StyleRun', 'ParagraphRun'):
        runs = engine.get(key)
        if runs is None or not runs.get('RunArray'):
            continue
        runs['RunArray'] = engine_data.List([runs['RunArray'][0]])
        runs['RunLengthArray'] = engine_data.List([engine_data.Integer(length)])


def _trim(image: PIL.Image.Image, left: int, top: int) -> tuple[PIL.Image.Image, int, int]:
    """Crop an RGBA image to its non-transparent area."""
    box = image.getchannel('A').getbbox()
    if box is None or box == (0, 0, image.width, image.height):
        return image, left, top
    return image.crop(box), left + box[0], top + box[1]
