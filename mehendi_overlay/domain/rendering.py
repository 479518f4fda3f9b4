from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

from .entities import PatternDocument, PixelBuffer


class BlendMode(str, Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"


class RasterSurface(ABC):
    """2D drawing surface with canvas-style blend state."""

    @property
    @abstractmethod
    def width(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def height(self) -> int:
        raise NotImplementedError

    @property
    @abstractmethod
    def blend_mode(self) -> BlendMode:
        raise NotImplementedError

    @property
    @abstractmethod
    def opacity(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def set_blend(self, mode: BlendMode, opacity: float) -> None:
        raise NotImplementedError

    def reset_blend(self) -> None:
        self.set_blend(BlendMode.NORMAL, 1.0)

    @abstractmethod
    def draw_image(self, image: np.ndarray, x: int, y: int, width: int, height: int) -> None:
        """Draw a BGR or BGRA ``image`` scaled to fill ``(x, y, width, height)``."""
        raise NotImplementedError

    @abstractmethod
    def read_pixels(self) -> PixelBuffer:
        raise NotImplementedError

    @abstractmethod
    def encode_png(self) -> bytes:
        raise NotImplementedError


class RasterSurfaceProvider(ABC):
    """Capability to obtain surfaces and rasterise vector patterns.

    Implementations raise :class:`~mehendi_overlay.shared.errors.RenderingUnavailable`
    when the host cannot provide a surface.
    """

    @abstractmethod
    def acquire(self, width: int, height: int) -> RasterSurface:
        raise NotImplementedError

    @abstractmethod
    def rasterize(self, document: PatternDocument) -> np.ndarray:
        """Return the document as a BGRA array of its declared size."""
        raise NotImplementedError
