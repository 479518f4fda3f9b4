"""Domain entities and value objects for the pattern overlay pipeline."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

import numpy as np

from .shapes import Point, Shape

PNG_DATA_URI_PREFIX = "data:image/png;base64,"


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded raster exposed as RGBA channel values, row-major.

    ``pixels`` has shape ``(height, width, 4)``; the array is made read-only
    on construction so a buffer can be handed around without copies.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError("Pixel buffer must have shape (height, width, 4)")
        if self.pixels.shape[0] * self.pixels.shape[1] == 0:
            raise ValueError("Pixel buffer must contain at least one pixel")
        if self.pixels.dtype != np.uint8:
            raise ValueError("Pixel buffer channels must be uint8 values")
        self.pixels.setflags(write=False)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def flat(self) -> np.ndarray:
        """Return the flat ``r, g, b, a, r, g, b, a, ...`` channel sequence."""

        return self.pixels.reshape(-1)

    @classmethod
    def from_rgba(cls, width: int, height: int, data: Sequence[int]) -> "PixelBuffer":
        array = np.asarray(data, dtype=np.uint8).reshape(height, width, 4).copy()
        return cls(array)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in pixel coordinates, top-left origin."""

    x: int
    y: int
    width: int
    height: int

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height


@dataclass(frozen=True)
class HandRegion:
    """Detected hand area; ``bounding_box is None`` means the whole frame."""

    bounding_box: BoundingBox | None = None
    landmarks: tuple[Point, ...] = field(default_factory=tuple)

    @property
    def is_full_frame(self) -> bool:
        return self.bounding_box is None


class PatternStyle(str, Enum):
    ARABIC = "arabic"
    MANDALA = "mandala"
    FLORAL = "floral"
    GEOMETRIC = "geometric"

    @classmethod
    def parse(cls, text: str | None) -> "PatternStyle":
        """Resolve free text to a style by case-insensitive substring match.

        Tokens are checked in the order arabic, mandala, geometric. Text that
        names none of them, the empty string included, resolves to
        :attr:`FLORAL`.
        """

        lowered = (text or "").lower()
        for style in (cls.ARABIC, cls.MANDALA, cls.GEOMETRIC):
            if style.value in lowered:
                return style
        return cls.FLORAL


@dataclass(frozen=True)
class PatternDocument:
    """Self-contained vector pattern sized to ``width`` x ``height``.

    Tiled styles keep their shapes in tile coordinates and set
    ``tile_size``; radial styles keep absolute coordinates.
    """

    width: int
    height: int
    style: PatternStyle
    shapes: tuple[Shape, ...]
    color: str = "#6B3410"
    tile_size: int | None = None

    def placed_shapes(self) -> Iterator[Shape]:
        """Yield every shape in document coordinates, repeating tiles."""

        if self.tile_size is None:
            yield from self.shapes
            return
        for offset_y in range(0, self.height, self.tile_size):
            for offset_x in range(0, self.width, self.tile_size):
                for shape in self.shapes:
                    yield shape.translated(offset_x, offset_y)

    def to_svg(self) -> str:
        body = "".join(shape.to_svg(self.color) for shape in self.shapes)
        header = (
            f'<svg width="{self.width}" height="{self.height}" xmlns="http://www.w3.org/2000/svg" '
            f'viewBox="0 0 {self.width} {self.height}">'
        )
        if self.tile_size is None:
            return f"{header}{body}</svg>"
        pattern_id = f"henna-{self.style.value}"
        return (
            f"{header}<defs>"
            f'<pattern id="{pattern_id}" x="0" y="0" width="{self.tile_size}" height="{self.tile_size}" '
            f'patternUnits="userSpaceOnUse">{body}</pattern></defs>'
            f'<rect x="0" y="0" width="{self.width}" height="{self.height}" fill="url(#{pattern_id})"/>'
            "</svg>"
        )


@dataclass(frozen=True)
class DecodedImage:
    """Decoded source image in OpenCV's BGR channel order."""

    data: np.ndarray
    source: str = ""

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])


@dataclass(frozen=True)
class EncodedImage:
    """PNG result returned to the caller as a base64 data URI."""

    data_uri: str
    width: int
    height: int

    def png_bytes(self) -> bytes:
        return base64.b64decode(self.data_uri[len(PNG_DATA_URI_PREFIX):])

    @classmethod
    def from_png(cls, payload: bytes, width: int, height: int) -> "EncodedImage":
        encoded = base64.b64encode(payload).decode("ascii")
        return cls(data_uri=f"{PNG_DATA_URI_PREFIX}{encoded}", width=width, height=height)


CompositeResult = EncodedImage


__all__ = [
    "PixelBuffer",
    "BoundingBox",
    "HandRegion",
    "PatternStyle",
    "PatternDocument",
    "DecodedImage",
    "EncodedImage",
    "CompositeResult",
    "PNG_DATA_URI_PREFIX",
]
