"""
Pytest fixtures for psdforge tests.

Provides:
1. In-memory documents (`sample_document`) for mutation tests
2. Real PSD bytes built with psd-tools (`template_psd`) for codec tests
3. A URL-table fetcher backed by httpx.MockTransport (`web`)
"""

import io
from typing import Callable, Optional

import httpx
import PIL.Image
import pytest
from psd_tools import PSDImage
from psd_tools.api.layers import Group
from psd_tools.api.layers import PixelLayer as PsdPixelLayer

from psdforge.fetch import Fetcher
from psdforge.layers import (
    Document,
    LayerGroup,
    PixelLayer,
    Raster,
    Rect,
    TextLayer,
)
from psdforge.mutations import solid_fill


def make_raster(width: int, height: int, color: tuple[int, int, int] = (0, 0, 0)) -> Raster:
    """Opaque raster of one color."""
    return solid_fill(width, height, color)


def png_bytes(width: int, height: int, color: tuple[int, int, int, int] = (0, 128, 0, 255)) -> bytes:
    """Encode a single-color PNG."""
    buffer = io.BytesIO()
    PIL.Image.new('RGBA', (width, height), color).save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def sample_document() -> Document:
    """
    Template with every named role:

        background_block  pixel (0, 0, 200, 100)
        content           group
        ├── header        text "Old"
        ├── subheader     text "Old sub"
        ├── color_block   pixel (0, 0, 100, 50)
        └── image_block   pixel (10, 10, 110, 60)
        footer            text "Footer"
    """
    return Document(
        width=200,
        height=100,
        layers=[
            PixelLayer(
                name='background_block',
                bounds=Rect(left=0, top=0, right=200, bottom=100),
                raster=make_raster(200, 100, (255, 255, 255)),
            ),
            LayerGroup(
                name='content',
                children=[
                    TextLayer(
                        name='header',
                        bounds=Rect(left=10, top=5, right=150, bottom=25),
                        text='Old',
                        cached_bitmap=make_raster(140, 20),
                    ),
                    TextLayer(
                        name='subheader',
                        bounds=Rect(left=10, top=30, right=150, bottom=45),
                        text='Old sub',
                        cached_bitmap=make_raster(140, 15),
                    ),
                    PixelLayer(
                        name='color_block',
                        bounds=Rect(left=0, top=0, right=100, bottom=50),
                        raster=make_raster(100, 50, (0, 0, 255)),
                    ),
                    PixelLayer(
                        name='image_block',
                        bounds=Rect(left=10, top=10, right=110, bottom=60),
                        raster=make_raster(100, 50, (128, 128, 128)),
                    ),
                ],
            ),
            TextLayer(
                name='footer',
                bounds=Rect(left=0, top=80, right=200, bottom=100),
                text='Footer',
            ),
        ],
    )


def build_psd(
    layers: list[tuple[str, tuple[int, int, int, int], tuple[int, int, int]]],
    size: tuple[int, int] = (200, 100),
    group: Optional[tuple[str, list]] = None,
) -> bytes:
    """
    Build a PSD with psd-tools.

    Args:
        layers: (name, (left, top, right, bottom), rgb) pixel layers at top level
        size: Canvas (width, height)
        group: Optional (group name, layers) added after the top-level layers

    Returns:
        PSD file bytes
    """
    psd = PSDImage.new('RGB', size)

    def add(parent, specs):
        for name, (left, top, right, bottom), rgb in specs:
            image = PIL.Image.new('RGBA', (right - left, bottom - top), rgb + (255,))
            PsdPixelLayer.frompil(image, parent, name, top=top, left=left)

    add(psd, layers)
    if group is not None:
        group_name, group_layers = group
        add(Group.new(psd, name=group_name), group_layers)

    buffer = io.BytesIO()
    psd.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def template_psd() -> bytes:
    """
    PSD template:

        background_block  (0, 0, 200, 100) white
        content           group
        ├── color_block   (20, 10, 120, 60) blue
        └── image_block   (50, 40, 150, 90) gray
    """
    return build_psd(
        [('background_block', (0, 0, 200, 100), (255, 255, 255))],
        group=('content', [
            ('color_block', (20, 10, 120, 60), (0, 0, 255)),
            ('image_block', (50, 40, 150, 90), (128, 128, 128)),
        ]),
    )


class FakeWeb:
    """URL table served through httpx.MockTransport; records every request."""

    def __init__(self):
        self.routes: dict = {}
        self.requested: list[str] = []

    def add(self, url: str, content: bytes = b'', status_code: int = 200) -> None:
        self.routes[url] = (status_code, content)

    def add_error(self, url: str, error: Callable[[httpx.Request], Exception]) -> None:
        self.routes[url] = error

    def _handle(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404)
        if callable(route):
            raise route(request)
        status_code, content = route
        return httpx.Response(status_code, content=content)

    def fetcher(self, **kwargs) -> Fetcher:
        return Fetcher(transport=httpx.MockTransport(self._handle), **kwargs)


@pytest.fixture
def web() -> FakeWeb:
    """Fake remote host for templates and images."""
    return FakeWeb()
