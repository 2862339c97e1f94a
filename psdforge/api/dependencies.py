"""
Collaborators injected into the endpoints.

Each request gets its own instances; nothing here holds request state.
Tests replace these through ``app.dependency_overrides``.
"""

from functools import partial

from fastapi import Depends

from psdforge.config import settings
from psdforge.fetch import Fetcher
from psdforge.formats import DocumentCodec, PsdCodec
from psdforge.imaging import resample_raster
from psdforge.mutations import TemplatePipeline


def get_fetcher() -> Fetcher:
    return Fetcher(timeout=settings.FETCH_TIMEOUT)


def get_codec() -> DocumentCodec:
    return PsdCodec()


def get_pipeline(codec: DocumentCodec = Depends(get_codec)) -> TemplatePipeline:
    return TemplatePipeline(
        codec,
        resample=partial(resample_raster, method=settings.RESAMPLE_METHOD),
    )
