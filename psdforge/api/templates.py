"""
Template endpoints.

POST /generate fills a template's named layers and returns the PSD.
POST /inspect returns the template's layer tree without pixel data.

Errors are returned as ``{"error": message}``: 400 for bad input, 500 when
the template cannot be fetched, parsed or written. A replacement image that
cannot be loaded only skips the image step.
"""

import logging
import time
from functools import partial
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from psdforge.config import settings
from psdforge.errors import FetchError, ImageDecodeError, InputError, PsdForgeError
from psdforge.fetch import Fetcher
from psdforge.formats import DocumentCodec
from psdforge.imaging import decode_image
from psdforge.layers import Document, Raster
from psdforge.mutations import LayerRole, TemplatePipeline, TemplateValues
from psdforge.mutations.pipeline import is_present

from .dependencies import get_codec, get_fetcher, get_pipeline
from .models import GenerateRequest, InspectRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["templates"])

OUTPUT_FILENAME = "output.psd"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _parse_body(request: Request, model: type[BaseModel]) -> Any:
    """
    Read and validate a JSON request body.

    Raises:
        InputError: If the body is not a JSON object, template_url is
            missing, or a field is invalid
    """
    try:
        body = await request.json()
    except ValueError:
        raise InputError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise InputError("Request body must be a JSON object")
    if not body.get("template_url"):
        raise InputError("template_url is required")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise InputError(f"Invalid {field}: {first['msg']}")


async def _load_image(fetcher: Fetcher, url: str) -> tuple[Optional[Raster], Optional[str]]:
    """Fetch and decode the replacement image; failures are returned, not raised."""
    try:
        data = await fetcher.fetch(url, max_bytes=settings.MAX_IMAGE_BYTES)
        return await run_in_threadpool(decode_image, data), None
    except (FetchError, ImageDecodeError) as e:
        logger.warning(f"  Failed to load image: {e}")
        return None, str(e)


async def _template_values(
    params: GenerateRequest,
    document: Document,
    fetcher: Fetcher,
) -> TemplateValues:
    values = TemplateValues(
        header_text=params.header_text,
        subheader_text=params.subheader_text,
        color_hex=params.color_hex,
        background_color_hex=params.background_color_hex,
        image_url=params.image_url,
    )
    # Only download the image if there is a layer to put it in
    if is_present(params.image_url) and document.get_layer(LayerRole.IMAGE_BLOCK.value) is not None:
        values.image, values.image_error = await _load_image(fetcher, params.image_url)
    return values


@router.post("/generate")
async def generate(
    request: Request,
    fetcher: Fetcher = Depends(get_fetcher),
    codec: DocumentCodec = Depends(get_codec),
    pipeline: TemplatePipeline = Depends(get_pipeline),
) -> Response:
    """
    Fill a template with the request's values.

    Body (JSON):
        template_url: URL of the PSD template (required)
        header_text, subheader_text: Text for 'header' / 'subheader'
        color_hex, background_color_hex: #RRGGBB fill for 'color_block' /
            'background_block'
        image_url: Image for 'image_block'
        export_format: Output format, only 'psd'

    Returns:
        The generated PSD as an attachment
    """
    try:
        params: GenerateRequest = await _parse_body(request, GenerateRequest)
    except InputError as e:
        return _error(400, str(e))

    start_time = time.perf_counter()
    logger.info("[generate] Starting...")
    try:
        logger.info("[generate] Downloading template...")
        template = await fetcher.fetch(params.template_url, max_bytes=settings.MAX_TEMPLATE_BYTES)

        logger.info("[generate] Parsing PSD...")
        document = await run_in_threadpool(codec.decode, template)

        values = await _template_values(params, document, fetcher)

        logger.info("[generate] Applying changes and writing PSD...")
        output, report = await run_in_threadpool(pipeline.render, document, values)
    except InputError as e:
        return _error(400, str(e))
    except PsdForgeError as e:
        logger.error(f"[generate] Error: {e}")
        return _error(500, str(e))
    except Exception as e:
        logger.exception("[generate] Unexpected error")
        return _error(500, str(e))

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"[generate] Done in {elapsed_ms:.0f}ms ({len(output)} bytes, "
        f"{len(report.applied)} applied, {len(report.skipped) + len(report.failed)} skipped)"
    )

    headers = {"Content-Disposition": f'attachment; filename="{OUTPUT_FILENAME}"'}
    not_applied = [r.field_name for r in report.results if not r.ok]
    if not_applied:
        headers["X-Mutations-Skipped"] = ",".join(not_applied)
    return Response(content=output, media_type="application/octet-stream", headers=headers)


@router.post("/inspect")
async def inspect(
    request: Request,
    fetcher: Fetcher = Depends(get_fetcher),
    codec: DocumentCodec = Depends(get_codec),
) -> Response:
    """
    Describe a template's layer tree.

    Body (JSON):
        template_url: URL of the PSD template

    Returns:
        {width, height, layers}; each layer has name, type, bounds, visible,
        plus text for text layers and children for groups
    """
    try:
        params: InspectRequest = await _parse_body(request, InspectRequest)
    except InputError as e:
        return _error(400, str(e))

    try:
        template = await fetcher.fetch(params.template_url, max_bytes=settings.MAX_TEMPLATE_BYTES)
        document = await run_in_threadpool(
            partial(codec.decode, template, include_pixels=False)
        )
    except PsdForgeError as e:
        logger.error(f"[inspect] Error: {e}")
        return _error(500, str(e))
    except Exception as e:
        logger.exception("[inspect] Unexpected error")
        return _error(500, str(e))

    return JSONResponse(content=document.to_api_dict())
