from __future__ import annotations

import cv2
import numpy as np

from mehendi_overlay.domain.entities import PatternDocument, PixelBuffer
from mehendi_overlay.domain.rendering import BlendMode, RasterSurface, RasterSurfaceProvider
from mehendi_overlay.domain.settings import hex_to_bgr
from mehendi_overlay.domain.shapes import Circle, Curve, Ellipse, Polygon, Shape
from mehendi_overlay.shared.errors import RenderingUnavailable

# Fixed-point bits handed to OpenCV so sub-pixel coordinates survive rounding.
_SHIFT = 4
_SCALE = 1 << _SHIFT


def _fixed(value: float) -> int:
    return int(round(value * _SCALE))


def _thickness(stroke_width: float) -> int:
    return max(1, int(round(stroke_width)))


class OpenCvSurface(RasterSurface):
    def __init__(self, width: int, height: int) -> None:
        self._canvas = np.zeros((height, width, 3), dtype=np.uint8)
        self._blend_mode = BlendMode.NORMAL
        self._opacity = 1.0

    @property
    def width(self) -> int:
        return int(self._canvas.shape[1])

    @property
    def height(self) -> int:
        return int(self._canvas.shape[0])

    @property
    def blend_mode(self) -> BlendMode:
        return self._blend_mode

    @property
    def opacity(self) -> float:
        return self._opacity

    def set_blend(self, mode: BlendMode, opacity: float) -> None:
        self._blend_mode = BlendMode(mode)
        self._opacity = min(1.0, max(0.0, float(opacity)))

    def draw_image(self, image: np.ndarray, x: int, y: int, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        scaled = self._scale(image, width, height)

        left, top = max(x, 0), max(y, 0)
        right, bottom = min(x + width, self.width), min(y + height, self.height)
        if left >= right or top >= bottom:
            return

        source = scaled[top - y:bottom - y, left - x:right - x]
        base = self._canvas[top:bottom, left:right].astype(np.float32)
        colour = source[:, :, :3].astype(np.float32)
        if source.shape[2] == 4:
            alpha = source[:, :, 3:4].astype(np.float32) / 255.0
        else:
            alpha = np.ones(source.shape[:2] + (1,), dtype=np.float32)
        alpha *= self._opacity

        if self._blend_mode is BlendMode.MULTIPLY:
            blended = base * colour / 255.0
        else:
            blended = colour
        result = base + alpha * (blended - base)
        self._canvas[top:bottom, left:right] = np.clip(np.rint(result), 0, 255).astype(np.uint8)

    def read_pixels(self) -> PixelBuffer:
        return PixelBuffer(cv2.cvtColor(self._canvas, cv2.COLOR_BGR2RGBA))

    def encode_png(self) -> bytes:
        ok, encoded = cv2.imencode(".png", self._canvas)
        if not ok:
            raise RuntimeError("OpenCV could not encode the surface as PNG")
        return encoded.tobytes()

    @staticmethod
    def _scale(image: np.ndarray, width: int, height: int) -> np.ndarray:
        src_height, src_width = image.shape[:2]
        if (src_width, src_height) == (width, height):
            return image
        shrinking = width < src_width and height < src_height
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
        return cv2.resize(image, (width, height), interpolation=interpolation)


class OpenCvSurfaceProvider(RasterSurfaceProvider):
    """Numpy-backed surfaces with anti-aliased OpenCV shape drawing."""

    def __init__(self, logger, max_pixels: int = 40_000_000) -> None:
        self._logger = logger
        self._max_pixels = max_pixels

    def acquire(self, width: int, height: int) -> OpenCvSurface:
        self._ensure_allowed(width, height)
        try:
            return OpenCvSurface(width, height)
        except MemoryError as exc:
            raise RenderingUnavailable(f"Not enough memory for a {width}x{height} surface") from exc

    def rasterize(self, document: PatternDocument) -> np.ndarray:
        self._ensure_allowed(document.width, document.height)
        mask = np.zeros((document.height, document.width), dtype=np.uint8)
        count = 0
        for shape in document.placed_shapes():
            self._draw_shape(mask, shape)
            count += 1
        self._logger.debug("surface.rasterized", style=document.style.value, shapes=count)

        color = hex_to_bgr(document.color)
        rgba = np.empty((document.height, document.width, 4), dtype=np.uint8)
        rgba[:, :, :3] = color
        rgba[:, :, 3] = mask
        return rgba

    def _ensure_allowed(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise RenderingUnavailable(f"Cannot allocate a {width}x{height} surface")
        if width * height > self._max_pixels:
            raise RenderingUnavailable(
                f"Surface of {width}x{height} exceeds the {self._max_pixels} pixel limit"
            )

    @staticmethod
    def _draw_shape(mask: np.ndarray, shape: Shape) -> None:
        if isinstance(shape, Circle):
            thickness = cv2.FILLED if shape.filled else _thickness(shape.stroke_width)
            cv2.circle(
                mask, (_fixed(shape.cx), _fixed(shape.cy)), _fixed(shape.r), 255,
                thickness, cv2.LINE_AA, _SHIFT,
            )
        elif isinstance(shape, Ellipse):
            cv2.ellipse(
                mask, (_fixed(shape.cx), _fixed(shape.cy)), (_fixed(shape.rx), _fixed(shape.ry)),
                shape.angle, 0, 360, 255, _thickness(shape.stroke_width), cv2.LINE_AA, _SHIFT,
            )
        elif isinstance(shape, (Polygon, Curve)):
            closed = isinstance(shape, Polygon)
            points = shape.points if closed else shape.sample()
            array = np.array([[_fixed(x), _fixed(y)] for x, y in points], dtype=np.int32).reshape(-1, 1, 2)
            cv2.polylines(mask, [array], closed, 255, _thickness(shape.stroke_width), cv2.LINE_AA, _SHIFT)
        else:  # pragma: no cover - closed union
            raise TypeError(f"Unsupported shape: {type(shape)!r}")


__all__ = ["OpenCvSurface", "OpenCvSurfaceProvider"]
