"""
Raster - dense RGBA pixel buffer.

A raster is immutable once built. Construction checks that the buffer holds
exactly ``width * height * 4`` bytes, so a raster with a mismatched buffer
can never be observed; mutators replace rasters as a whole.
"""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

CHANNELS = 4
"Bytes per pixel (R, G, B, A at 8 bits each)"


class Raster(BaseModel):
    """
    RGBA raster with 8 bits per channel.

    Pixels are stored row by row, channel order R, G, B, A.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=0)
    height: int = Field(ge=0)
    pixels: bytes = Field(default=b'', repr=False)

    @model_validator(mode='after')
    def _check_buffer_size(self) -> 'Raster':
        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise ValueError(
                f"Raster buffer has {len(self.pixels)} bytes, "
                f"expected {expected} for {self.width}x{self.height} RGBA"
            )
        return self

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) of the raster."""
        return self.width, self.height

    def to_array(self) -> np.ndarray:
        """
        Get the pixels as a read-only array.

        Returns:
            uint8 array of shape (height, width, 4)
        """
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        )

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Raster':
        """
        Create a raster from an RGBA array.

        Args:
            array: uint8 array of shape (height, width, 4)

        Returns:
            Raster holding a copy of the pixels
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected (height, width, 4) array, got {array.shape}")
        height, width = array.shape[:2]
        data = np.ascontiguousarray(array, dtype=np.uint8)
        return cls(width=width, height=height, pixels=data.tobytes())
