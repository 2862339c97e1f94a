"""
Image decoding and resampling.

Turns downloaded image bytes into RGBA rasters and scales rasters to an
exact size. Pillow does the decoding and resampling.
"""

import io

import PIL.Image

from psdforge.errors import ImageDecodeError
from psdforge.layers import Raster

RESAMPLE_METHODS = {
    'nearest': PIL.Image.Resampling.NEAREST,
    'bilinear': PIL.Image.Resampling.BILINEAR,
    'bicubic': PIL.Image.Resampling.BICUBIC,
    'lanczos': PIL.Image.Resampling.LANCZOS,
}
"Resampling filters selectable by name"


def raster_from_pil(image: PIL.Image.Image) -> Raster:
    """Convert a PIL image to an RGBA raster."""
    if image.mode != 'RGBA':
        image = image.convert('RGBA')
    return Raster(width=image.width, height=image.height, pixels=image.tobytes())


def raster_to_pil(raster: Raster) -> PIL.Image.Image:
    """Convert a raster to a PIL image in RGBA mode."""
    if raster.width == 0 or raster.height == 0:
        return PIL.Image.new('RGBA', raster.size)
    return PIL.Image.frombytes('RGBA', raster.size, raster.pixels)


def decode_image(data: bytes) -> Raster:
    """
    Decode image bytes into an RGBA raster.

    Args:
        data: Encoded image (PNG, JPEG, WebP, GIF, ... anything Pillow reads)

    Returns:
        Raster with the image's natural size

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    try:
        with PIL.Image.open(io.BytesIO(data)) as image:
            return raster_from_pil(image)
    except (OSError, ValueError, PIL.Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e


def resample_raster(
    raster: Raster,
    width: int,
    height: int,
    method: str = 'bilinear',
) -> Raster:
    """
    Scale a raster to exactly the given size.

    The aspect ratio is not preserved.

    Args:
        raster: Source raster
        width: Target width (> 0)
        height: Target height (> 0)
        method: One of RESAMPLE_METHODS

    Returns:
        Raster of exactly width x height
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid target size: {width}x{height}")
    if raster.width == 0 or raster.height == 0:
        raise ValueError("Cannot resample an empty raster")
    if method not in RESAMPLE_METHODS:
        raise ValueError(f"Unknown resample method: {method}")
    if raster.size == (width, height):
        return raster
    image = raster_to_pil(raster).resize((width, height), resample=RESAMPLE_METHODS[method])
    return raster_from_pil(image)
