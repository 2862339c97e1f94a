"""
Template pipeline.

Applies the request values to the template's named layers, then writes the
document. The five steps always run in this order, each only if its value
was supplied:

    header_text           -> text of layer 'header'
    subheader_text        -> text of layer 'subheader'
    color_hex             -> fill of layer 'color_block'
    background_color_hex  -> fill of layer 'background_block'
    image_url             -> image of layer 'image_block'

Steps are independent. A step that cannot apply is logged and recorded in
the report; the remaining steps still run.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from psdforge.formats import DocumentCodec, WriteOptions
from psdforge.imaging import resample_raster
from psdforge.layers import Document, Layer, Raster

from .base import MutationReport, MutationResult, MutationStatus
from .fill import fill_layer, parse_hex_color
from .image import UNAVAILABLE, Resampler, replace_image
from .locator import find_all_layers
from .text import set_text

logger = logging.getLogger(__name__)


class LayerRole(str, Enum):
    """Layer names the pipeline writes to."""
    HEADER = "header"
    SUBHEADER = "subheader"
    COLOR_BLOCK = "color_block"
    BACKGROUND_BLOCK = "background_block"
    IMAGE_BLOCK = "image_block"


OUTPUT_OPTIONS = WriteOptions(invalidate_text_layers=True, trim_image_data=True)
"Options every generated document is written with"


def is_present(value: object) -> bool:
    """A value counts as supplied unless it is None or an empty string."""
    return value is not None and value != ''


@dataclass
class TemplateValues:
    """
    Substitution values for one request.

    Attributes:
        header_text: New text for 'header'
        subheader_text: New text for 'subheader'
        color_hex: Fill color for 'color_block' (#RRGGBB)
        background_color_hex: Fill color for 'background_block' (#RRGGBB)
        image_url: Where the replacement image for 'image_block' came from
        image: The decoded replacement image, None if it could not be loaded
        image_error: Why the replacement image could not be loaded
    """

    header_text: Optional[str] = None
    subheader_text: Optional[str] = None
    color_hex: Optional[str] = None
    background_color_hex: Optional[str] = None
    image_url: Optional[str] = None
    image: Optional[Raster] = None
    image_error: Optional[str] = None


class TemplatePipeline:
    """Applies TemplateValues to a document and writes it with a codec."""

    def __init__(self, codec: DocumentCodec, resample: Resampler = resample_raster):
        self.codec = codec
        self.resample = resample

    def validate(self, values: TemplateValues) -> None:
        """
        Check caller input before any layer is touched.

        Raises:
            InvalidColorError: If a supplied color is malformed
        """
        for color in (values.color_hex, values.background_color_hex):
            if is_present(color):
                parse_hex_color(color)

    def apply(self, document: Document, values: TemplateValues) -> MutationReport:
        """
        Apply all supplied values to the document in place.

        Args:
            document: Parsed template
            values: Substitution values

        Returns:
            Report with one result per supplied value, in application order

        Raises:
            InvalidColorError: If a supplied color is malformed (nothing is
                modified in that case)
        """
        self.validate(values)

        steps = [
            ('header_text', LayerRole.HEADER, values.header_text,
             lambda layer: set_text(layer, values.header_text)),
            ('subheader_text', LayerRole.SUBHEADER, values.subheader_text,
             lambda layer: set_text(layer, values.subheader_text)),
            ('color_hex', LayerRole.COLOR_BLOCK, values.color_hex,
             lambda layer: fill_layer(layer, values.color_hex)),
            ('background_color_hex', LayerRole.BACKGROUND_BLOCK, values.background_color_hex,
             lambda layer: fill_layer(layer, values.background_color_hex)),
            ('image_url', LayerRole.IMAGE_BLOCK, values.image_url,
             lambda layer: self._replace_image(layer, values)),
        ]

        report = MutationReport()
        for field_name, role, value, mutate in steps:
            if not is_present(value):
                continue
            result = mutate(self._locate(document, role)).for_field(field_name)
            self._log_result(role, result)
            report.add(result)
        return report

    def render(self, document: Document, values: TemplateValues) -> tuple[bytes, MutationReport]:
        """
        Apply the values and write the document.

        Returns:
            (file bytes, mutation report)

        Raises:
            InvalidColorError: If a supplied color is malformed
            SerializationError: If the codec cannot write the document
        """
        report = self.apply(document, values)
        data = self.codec.encode(document, OUTPUT_OPTIONS)
        return data, report

    def _locate(self, document: Document, role: LayerRole) -> Optional[Layer]:
        matches = find_all_layers(document.layers, role.value)
        if len(matches) > 1:
            logger.info(f"{len(matches)} layers named '{role.value}', using the first")
        return matches[0] if matches else None

    def _replace_image(self, layer: Optional[Layer], values: TemplateValues) -> MutationResult:
        result = replace_image(layer, values.image, self.resample)
        if result.reason == UNAVAILABLE and values.image_error:
            return MutationResult.skipped(
                result.layer_name, f"{UNAVAILABLE}: {values.image_error}"
            )
        return result

    @staticmethod
    def _log_result(role: LayerRole, result: MutationResult) -> None:
        if result.status == MutationStatus.APPLIED:
            logger.info(f"  {role.value}: updated ({result.field_name})")
        else:
            logger.warning(f"  {role.value}: {result.status.value} - {result.reason}")
