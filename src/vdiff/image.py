"""Raster image and diff mask containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from PIL import Image

RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class RGBAImage:
    """Decoded image: row-major RGBA bytes, four 8-bit channels per pixel."""

    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative dimensions: {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(
                f"buffer length {len(self.data)} does not match "
                f"{self.width}x{self.height}x4 = {expected}"
            )

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def as_array(self) -> np.ndarray:
        """Return a read-only (height, width, 4) uint8 view over the buffer."""
        arr = np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)
        arr.flags.writeable = False
        return arr

    def pixel(self, x: int, y: int) -> RGBA:
        i = (y * self.width + x) * 4
        r, g, b, a = self.data[i : i + 4]
        return r, g, b, a

    @classmethod
    def from_array(cls, arr: np.ndarray) -> RGBAImage:
        """Build from a (height, width, 4) uint8 array."""
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"expected (height, width, 4) array, got shape {arr.shape}")
        height, width = int(arr.shape[0]), int(arr.shape[1])
        return cls(width, height, np.ascontiguousarray(arr, dtype=np.uint8).tobytes())

    @classmethod
    def from_pil(cls, img: Image.Image) -> RGBAImage:
        """Build from a Pillow image of any mode."""
        rgba = img if img.mode == "RGBA" else img.convert("RGBA")
        width, height = rgba.size
        return cls(width, height, rgba.tobytes())

    @classmethod
    def solid(cls, width: int, height: int, color: RGBA) -> RGBAImage:
        return cls(width, height, bytes(color) * (width * height))


@dataclass(frozen=True)
class DiffMask:
    """Per-pixel comparison outcome painted as marker or match colour.

    ``pixels`` is a read-only (height, width, 4) uint8 array and
    ``difference`` the matching read-only boolean plane.
    """

    width: int
    height: int
    pixels: np.ndarray = field(repr=False, compare=False)
    difference: np.ndarray = field(repr=False, compare=False)

    def __post_init__(self) -> None:
        self.pixels.flags.writeable = False
        self.difference.flags.writeable = False

    def difference_at(self, x: int, y: int) -> bool:
        return bool(self.difference[y, x])

    def count(self) -> int:
        return int(np.count_nonzero(self.difference))

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def to_pil(self) -> Image.Image:
        from PIL import Image

        return Image.fromarray(np.ascontiguousarray(self.pixels))

    @classmethod
    def from_difference(
        cls,
        difference: np.ndarray,
        marker: tuple[int, int, int],
        match: RGBA = (0, 0, 0, 0),
    ) -> DiffMask:
        """Paint a boolean (height, width) plane into a mask image."""
        height, width = difference.shape
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[...] = match
        pixels[difference] = (*marker, 255)
        return cls(width, height, pixels, difference.astype(bool, copy=True))
