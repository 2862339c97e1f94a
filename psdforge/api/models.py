"""Request bodies for the template endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from psdforge.mutations import parse_hex_color
from psdforge.mutations.pipeline import is_present

EXPORT_FORMATS = ('psd',)


class InspectRequest(BaseModel):
    """Request body for inspecting a template."""

    model_config = ConfigDict(extra='ignore')

    template_url: str


class GenerateRequest(InspectRequest):
    """Request body for generating a document from a template."""

    header_text: Optional[str] = None
    subheader_text: Optional[str] = None
    image_url: Optional[str] = None
    color_hex: Optional[str] = None
    background_color_hex: Optional[str] = None
    export_format: str = 'psd'

    @field_validator('color_hex', 'background_color_hex')
    @classmethod
    def _check_color(cls, value: Optional[str]) -> Optional[str]:
        if is_present(value):
            parse_hex_color(value)
        return value

    @field_validator('export_format')
    @classmethod
    def _check_export_format(cls, value: str) -> str:
        value = value.lower()
        if value not in EXPORT_FORMATS:
            raise ValueError(f"unsupported export format '{value}' (supported: psd)")
        return value
