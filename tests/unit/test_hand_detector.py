"""Unit tests for the skin-tone hand region detector."""

from __future__ import annotations

import numpy as np
import pytest

from mehendi_overlay.domain.detector import HandRegionDetector
from mehendi_overlay.domain.entities import BoundingBox, PixelBuffer
from mehendi_overlay.domain.settings import DetectionSettings
from tests.fakes import SKIN_RGB, black_bgr, skin_rectangle_bgr, to_rgba_buffer


def _rgba(width: int, height: int, fill=(0, 0, 0)) -> np.ndarray:
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = fill
    pixels[:, :, 3] = 255
    return pixels


def test_detect_returns_padded_box_around_skin_pixels() -> None:
    buffer = to_rgba_buffer(skin_rectangle_bgr(200, 200, x=60, y=70, rect_width=50, rect_height=40))

    region = HandRegionDetector().detect(buffer)

    assert region.bounding_box == BoundingBox(x=40, y=50, width=(109 - 60) + 40, height=(109 - 70) + 40)
    assert region.landmarks == ()


def test_detect_box_covers_scattered_skin_pixels() -> None:
    pixels = _rgba(200, 200)
    pixels[100:112, 100:200, :3] = SKIN_RGB  # 1 200 pixels, exactly 3 %
    pixels[150, 30, :3] = SKIN_RGB
    pixels[40, 170, :3] = SKIN_RGB

    box = HandRegionDetector().detect(PixelBuffer(pixels)).bounding_box

    # min x 30, max x 199, min y 40, max y 150; right edge clamped to 200
    assert box == BoundingBox(x=10, y=20, width=190, height=150)
    assert box.x <= 30 and box.x + box.width > 199
    assert box.y <= 40 and box.y + box.height > 150


def test_detect_without_skin_pixels_returns_full_frame() -> None:
    region = HandRegionDetector().detect(to_rgba_buffer(black_bgr(64, 48)))

    assert region.bounding_box is None
    assert region.is_full_frame


def test_detect_below_threshold_falls_back_to_full_frame() -> None:
    pixels = _rgba(100, 100)
    pixels[0:2, :, :3] = SKIN_RGB
    pixels[2, 0:99, :3] = SKIN_RGB  # 299 of 10 000 pixels, just under 3 %

    assert HandRegionDetector().detect(PixelBuffer(pixels)).bounding_box is None


def test_detect_at_threshold_reports_box() -> None:
    pixels = _rgba(100, 100)
    pixels[10:13, :, :3] = SKIN_RGB  # exactly 300 of 10 000 pixels

    region = HandRegionDetector().detect(PixelBuffer(pixels))

    assert region.bounding_box == BoundingBox(x=0, y=0, width=100, height=32)


def test_detect_clamps_box_to_image_edges() -> None:
    buffer = to_rgba_buffer(skin_rectangle_bgr(50, 40, x=0, y=0, rect_width=50, rect_height=40))

    box = HandRegionDetector().detect(buffer).bounding_box

    assert box == BoundingBox(x=0, y=0, width=50, height=40)


@pytest.mark.parametrize(
    "rgb",
    [
        (90, 40, 30),    # red too low
        (150, 40, 30),   # green not above 40
        (150, 60, 20),   # blue not above 20
        (150, 140, 60),  # red and green too close
        (120, 60, 110),  # red and blue too close
        (60, 150, 200),  # blue-dominant
    ],
)
def test_skin_mask_rejects_non_skin_colours(rgb) -> None:
    pixels = _rgba(4, 4, fill=rgb)

    assert not HandRegionDetector().skin_mask(PixelBuffer(pixels)).any()


def test_skin_mask_accepts_reference_skin_tone() -> None:
    pixels = _rgba(4, 4, fill=SKIN_RGB)

    assert HandRegionDetector().skin_mask(PixelBuffer(pixels)).all()


def test_thresholds_are_overridable() -> None:
    pixels = _rgba(10, 10, fill=SKIN_RGB)
    strict = HandRegionDetector(DetectionSettings(min_red=220))

    assert strict.detect(PixelBuffer(pixels)).bounding_box is None


def test_padding_is_overridable() -> None:
    buffer = to_rgba_buffer(skin_rectangle_bgr(100, 100, x=40, y=40, rect_width=20, rect_height=20))

    box = HandRegionDetector(DetectionSettings(box_padding=5)).detect(buffer).bounding_box

    assert box == BoundingBox(x=35, y=35, width=19 + 10, height=19 + 10)


def test_pixel_buffer_round_trips_flat_rgba() -> None:
    data = [200, 140, 110, 255] * 6
    buffer = PixelBuffer.from_rgba(3, 2, data)

    assert (buffer.width, buffer.height) == (3, 2)
    assert buffer.flat().tolist() == data
    with pytest.raises(ValueError):
        buffer.pixels[0, 0, 0] = 1


def test_pixel_buffer_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError):
        PixelBuffer(np.zeros((2, 2, 3), dtype=np.uint8))
