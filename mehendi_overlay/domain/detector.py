"""Skin-tone heuristic that estimates where the hand is in a photo."""

from __future__ import annotations

import math

import numpy as np

from .entities import BoundingBox, HandRegion, PixelBuffer
from .settings import DetectionSettings


class HandRegionDetector:
    """Estimate a padded bounding box around skin-coloured pixels.

    No model and no calibration: a pixel is skin-like when its red channel
    dominates green and blue by fixed margins. When too few pixels qualify
    the region is left empty, which callers treat as "use the whole frame".
    """

    def __init__(self, settings: DetectionSettings | None = None) -> None:
        self._settings = settings or DetectionSettings()

    @property
    def settings(self) -> DetectionSettings:
        return self._settings

    def skin_mask(self, buffer: PixelBuffer) -> np.ndarray:
        s = self._settings
        rgb = buffer.pixels[:, :, :3].astype(np.int16)
        r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
        return (
            (r > s.min_red)
            & (g > s.min_green)
            & (b > s.min_blue)
            & (r > g)
            & (r > b)
            & (np.abs(r - g) > s.min_spread)
            & (r - b > s.min_spread)
        )

    def required_skin_pixels(self, total_pixels: int) -> int:
        # tolerance keeps float noise in total * fraction from raising the bar by one
        return max(1, math.ceil(total_pixels * self._settings.min_skin_fraction - 1e-9))

    def detect(self, buffer: PixelBuffer) -> HandRegion:
        mask = self.skin_mask(buffer)
        skin_pixels = int(np.count_nonzero(mask))
        if skin_pixels < self.required_skin_pixels(buffer.width * buffer.height):
            return HandRegion(bounding_box=None)

        ys, xs = np.nonzero(mask)
        box = self._padded_box(
            int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max()), buffer.width, buffer.height
        )
        return HandRegion(bounding_box=box)

    def _padded_box(self, min_x: int, min_y: int, max_x: int, max_y: int, width: int, height: int) -> BoundingBox:
        pad = self._settings.box_padding
        left = max(0, min_x - pad)
        top = max(0, min_y - pad)
        right = min(width, max_x + pad)
        bottom = min(height, max_y + pad)
        return BoundingBox(x=left, y=top, width=right - left, height=bottom - top)


__all__ = ["HandRegionDetector"]
