"""
Tests for the HTTP endpoints.

The fetcher is replaced by a FakeWeb URL table. Tests that need text layers
use a codec stand-in that returns an in-memory document, since psd-tools
cannot create type layers; the rest go through the real PSD codec.
"""

import pytest
from starlette.testclient import TestClient

from psdforge import __version__
from psdforge.api.dependencies import get_codec, get_fetcher
from psdforge.app import create_api_app
from psdforge.errors import TemplateDecodeError
from psdforge.formats import PsdCodec, WriteOptions
from psdforge.layers import Document

from conftest import png_bytes

TEMPLATE_URL = 'http://templates/card.psd'
IMAGE_URL = 'http://images/photo.png'


class InMemoryCodec:
    """Decodes every template to the same in-memory document."""

    def __init__(self, document: Document):
        self.document = document
        self.written: list[WriteOptions] = []

    def decode(self, data: bytes, *, include_pixels: bool = True) -> Document:
        if data != b'template':
            raise TemplateDecodeError("Failed to parse PSD: not a template")
        return self.document

    def encode(self, document: Document, options: WriteOptions) -> bytes:
        self.written.append(options)
        return b'8BPS-output'


class BrokenCodec:
    """Fails with an error outside the psdforge hierarchy."""

    def decode(self, data: bytes, *, include_pixels: bool = True) -> Document:
        raise RuntimeError("codec exploded")

    def encode(self, document: Document, options: WriteOptions) -> bytes:
        raise RuntimeError("codec exploded")


@pytest.fixture
def app(web):
    app = create_api_app()
    app.dependency_overrides[get_fetcher] = lambda: web.fetcher()
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def memory_codec(app, web, sample_document):
    """Serve sample_document as the template."""
    web.add(TEMPLATE_URL, b'template')
    codec = InMemoryCodec(sample_document)
    app.dependency_overrides[get_codec] = lambda: codec
    return codec


@pytest.fixture
def psd_template(web, template_psd):
    """Serve a real PSD as the template."""
    web.add(TEMPLATE_URL, template_psd)
    return template_psd


class TestHealth:
    """Tests for GET /health."""

    def test_health(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.json() == {'status': 'ok', 'version': __version__}


class TestGenerateInput:
    """Tests for request validation on POST /generate."""

    def test_missing_template_url(self, client, web):
        """No fetch is attempted when template_url is missing."""
        response = client.post('/generate', json={'header_text': 'x'})
        assert response.status_code == 400
        assert response.json() == {'error': 'template_url is required'}
        assert web.requested == []

    def test_empty_template_url(self, client, web):
        response = client.post('/generate', json={'template_url': ''})
        assert response.status_code == 400
        assert web.requested == []

    def test_invalid_json(self, client, web):
        response = client.post(
            '/generate',
            content=b'{not json',
            headers={'Content-Type': 'application/json'},
        )
        assert response.status_code == 400
        assert 'error' in response.json()
        assert web.requested == []

    def test_body_not_object(self, client):
        response = client.post('/generate', json=['template_url'])
        assert response.status_code == 400
        assert response.json() == {'error': 'Request body must be a JSON object'}

    @pytest.mark.parametrize("field", ['color_hex', 'background_color_hex'])
    def test_malformed_color(self, client, web, field):
        response = client.post('/generate', json={'template_url': TEMPLATE_URL, field: '#12345'})
        assert response.status_code == 400
        assert field in response.json()['error']
        assert web.requested == []

    def test_unsupported_export_format(self, client):
        response = client.post('/generate', json={'template_url': TEMPLATE_URL, 'export_format': 'png'})
        assert response.status_code == 400
        assert 'export_format' in response.json()['error']

    def test_export_format_case_insensitive(self, client, memory_codec):
        response = client.post('/generate', json={'template_url': TEMPLATE_URL, 'export_format': 'PSD'})
        assert response.status_code == 200

    def test_unknown_fields_ignored(self, client, memory_codec):
        response = client.post('/generate', json={'template_url': TEMPLATE_URL, 'font': 'Arial'})
        assert response.status_code == 200


class TestGenerate:
    """Tests for POST /generate."""

    def test_response_headers(self, client, memory_codec):
        response = client.post('/generate', json={'template_url': TEMPLATE_URL})
        assert response.status_code == 200
        assert response.headers['content-type'] == 'application/octet-stream'
        assert response.headers['content-disposition'] == 'attachment; filename="output.psd"'
        assert 'x-mutations-skipped' not in response.headers
        assert response.content == b'8BPS-output'

    def test_header_text(self, client, memory_codec, sample_document):
        """Scenario: header_text replaces the header layer's text only."""
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'header_text': 'Hello',
        })
        assert response.status_code == 200
        header = sample_document.get_layer('header')
        assert header.text == 'Hello'
        assert header.cached_bitmap is None
        assert sample_document.get_layer('subheader').text == 'Old sub'
        assert sample_document.get_layer('footer').text == 'Footer'
        assert memory_codec.written == [WriteOptions(invalidate_text_layers=True, trim_image_data=True)]

    def test_missing_layer_is_skipped(self, client, web, app):
        """Scenario: color_hex with no color_block layer still succeeds."""
        web.add(TEMPLATE_URL, b'template')
        app.dependency_overrides[get_codec] = lambda: InMemoryCodec(Document(width=10, height=10))
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'color_hex': '#FF0000',
        })
        assert response.status_code == 200
        assert response.headers['x-mutations-skipped'] == 'color_hex'

    def test_template_not_found(self, client, web):
        response = client.post('/generate', json={'template_url': TEMPLATE_URL})
        assert response.status_code == 500
        assert 'HTTP 404' in response.json()['error']

    def test_template_not_psd(self, client, web):
        web.add(TEMPLATE_URL, b'<html>nope</html>')
        response = client.post('/generate', json={'template_url': TEMPLATE_URL})
        assert response.status_code == 500
        assert 'Failed to parse PSD' in response.json()['error']

    def test_image_not_fetched_without_image_block(self, client, web, app):
        web.add(TEMPLATE_URL, b'template')
        app.dependency_overrides[get_codec] = lambda: InMemoryCodec(Document())
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'image_url': IMAGE_URL,
        })
        assert response.status_code == 200
        assert web.requested == [TEMPLATE_URL]
        assert response.headers['x-mutations-skipped'] == 'image_url'

    def test_image_failure_skips_only_image(self, client, web, memory_codec, sample_document):
        """An unreachable image does not fail the request."""
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'header_text': 'Hello',
            'image_url': IMAGE_URL,
        })
        assert response.status_code == 200
        assert response.headers['x-mutations-skipped'] == 'image_url'
        assert web.requested == [TEMPLATE_URL, IMAGE_URL]
        assert sample_document.get_layer('header').text == 'Hello'
        assert sample_document.get_layer('image_block').raster.pixels[:4] == bytes([128, 128, 128, 255])

    def test_undecodable_image_skips_only_image(self, client, web, memory_codec):
        web.add(IMAGE_URL, b'not an image')
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'image_url': IMAGE_URL,
        })
        assert response.status_code == 200
        assert response.headers['x-mutations-skipped'] == 'image_url'


class TestGeneratePsd:
    """POST /generate through the real PSD codec."""

    def test_image_replaced(self, client, web, psd_template):
        """Scenario: a 400x200 image is scaled to the 100x50 image_block."""
        web.add(IMAGE_URL, png_bytes(400, 200, (0, 255, 0, 255)))
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'image_url': IMAGE_URL,
        })
        assert response.status_code == 200

        document = PsdCodec().decode(response.content)
        image_block = document.get_layer('image_block')
        assert image_block.raster.size == (100, 50)
        assert image_block.bounds.left == 50
        assert image_block.bounds.top == 40
        assert image_block.raster.pixels[:4] == bytes([0, 255, 0, 255])

    def test_colors_filled(self, client, psd_template):
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'color_hex': '#FF0000',
            'background_color_hex': '000000',
        })
        assert response.status_code == 200

        document = PsdCodec().decode(response.content)
        assert document.get_layer('color_block').raster.pixels[:4] == bytes([255, 0, 0, 255])
        assert document.get_layer('background_block').raster.pixels[:4] == bytes([0, 0, 0, 255])
        assert document.get_layer('image_block').raster.pixels[:4] == bytes([128, 128, 128, 255])

    def test_text_fields_without_text_layers(self, client, psd_template):
        response = client.post('/generate', json={
            'template_url': TEMPLATE_URL,
            'header_text': 'Hello',
            'subheader_text': 'World',
        })
        assert response.status_code == 200
        assert response.headers['x-mutations-skipped'] == 'header_text,subheader_text'


class TestInspect:
    """Tests for POST /inspect."""

    def test_layer_tree(self, client, psd_template):
        response = client.post('/inspect', json={'template_url': TEMPLATE_URL})
        assert response.status_code == 200
        tree = response.json()
        assert (tree['width'], tree['height']) == (200, 100)
        assert [layer['name'] for layer in tree['layers']] == ['background_block', 'content']
        assert [child['name'] for child in tree['layers'][1]['children']] == ['color_block', 'image_block']

    def test_text_layers(self, client, memory_codec):
        response = client.post('/inspect', json={'template_url': TEMPLATE_URL})
        header = response.json()['layers'][1]['children'][0]
        assert header['type'] == 'text'
        assert header['text'] == 'Old'

    def test_missing_template_url(self, client, web):
        response = client.post('/inspect', json={})
        assert response.status_code == 400
        assert web.requested == []

    def test_template_not_found(self, client):
        response = client.post('/inspect', json={'template_url': TEMPLATE_URL})
        assert response.status_code == 500
        assert 'error' in response.json()

    def test_unexpected_error_is_json(self, client, web, app):
        """Errors outside the psdforge hierarchy still return an error body."""
        web.add(TEMPLATE_URL, b'template')
        app.dependency_overrides[get_codec] = lambda: BrokenCodec()
        response = client.post('/inspect', json={'template_url': TEMPLATE_URL})
        assert response.status_code == 500
        assert response.json() == {'error': 'codec exploded'}
