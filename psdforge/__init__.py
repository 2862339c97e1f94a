"""
psdforge - fill named layers of a PSD template with text, colors and images.

Components:
    psdforge.layers     Document and layer models (group, text, pixel)
    psdforge.mutations  Layer lookup, content mutations and the template pipeline
    psdforge.formats    PSD codec (psd-tools)
    psdforge.imaging    Image decoding and resampling (Pillow)
    psdforge.fetch      Async byte fetcher (httpx)
    psdforge.api        FastAPI routes
"""

__version__ = "2.0.0"

__all__ = ['__version__']
