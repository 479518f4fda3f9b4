"""End-to-end runs of the overlay use case with real adapters."""

from __future__ import annotations

import httpx
import numpy as np
import pytest

from mehendi_overlay.application.apply_pattern import ApplyPatternRequest, ApplyPatternUseCase
from mehendi_overlay.application.compositor import Compositor
from mehendi_overlay.domain.detector import HandRegionDetector
from mehendi_overlay.domain.entities import BoundingBox, PatternStyle
from mehendi_overlay.domain.pattern_generator import PatternGenerator
from mehendi_overlay.infrastructure.image_loader import ImageSourceLoader
from mehendi_overlay.infrastructure.opencv_surface import OpenCvSurfaceProvider
from mehendi_overlay.shared.errors import (
    ImageDecodeError,
    PipelineStageError,
    RenderingUnavailable,
)
from tests.fakes import (
    SKIN_BGR,
    RecordingSurfaceProvider,
    black_bgr,
    decode_data_uri,
    skin_rectangle_bgr,
    to_data_uri,
)


def _use_case(logger, surfaces=None, loader=None, detector=None) -> ApplyPatternUseCase:
    surfaces = surfaces or OpenCvSurfaceProvider(logger)
    return ApplyPatternUseCase(
        loader=loader or ImageSourceLoader(logger),
        surface_provider=surfaces,
        detector=detector or HandRegionDetector(),
        generator=PatternGenerator(),
        compositor=Compositor(surfaces),
        logger=logger,
    )


@pytest.fixture
def hand_photo() -> np.ndarray:
    return skin_rectangle_bgr(400, 600, x=100, y=150, rect_width=200, rect_height=300)


def test_pattern_lands_inside_detected_hand(logger, hand_photo) -> None:
    response = _use_case(logger).execute(ApplyPatternRequest(to_data_uri(hand_photo), "Arabic bridal"))

    assert response.style is PatternStyle.ARABIC
    assert response.bounding_box == BoundingBox(x=80, y=130, width=239, height=339)
    assert response.data_uri.startswith("data:image/png;base64,")

    output = decode_data_uri(response.data_uri)
    assert output.shape == hand_photo.shape
    outside = np.ones(output.shape[:2], dtype=bool)
    outside[130:469, 80:319] = False
    assert (output[outside] == 0).all()

    skin = output[150:450, 100:300].astype(int)
    assert (skin <= np.array(SKIN_BGR)).all()
    assert (skin < np.array(SKIN_BGR)).any()


def test_blank_photo_uses_centred_fallback(logger) -> None:
    surfaces = RecordingSurfaceProvider()

    response = _use_case(logger, surfaces=surfaces).execute(
        ApplyPatternRequest(to_data_uri(black_bgr(100, 100)), "geometric")
    )

    assert response.region.bounding_box is None
    assert response.style is PatternStyle.GEOMETRIC
    composite_surface = surfaces.surfaces[-1]
    pattern_call = composite_surface.calls[-1]
    assert (pattern_call.x, pattern_call.y, pattern_call.width, pattern_call.height) == (10, 10, 80, 80)
    assert surfaces.rasterized[0].style is PatternStyle.GEOMETRIC
    assert (surfaces.rasterized[0].width, surfaces.rasterized[0].height) == (100, 100)


def test_unreachable_url_fails_at_decode(logger) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    loader = ImageSourceLoader(logger, client=httpx.Client(transport=httpx.MockTransport(handler)))

    with pytest.raises(ImageDecodeError) as info:
        _use_case(logger, loader=loader).execute(ApplyPatternRequest("https://unreachable.invalid/hand.jpg"))

    assert info.value.stage == "decode"
    assert info.value.to_dict()["kind"] == "ImageDecodeError"


def test_same_input_gives_same_output(logger, hand_photo) -> None:
    use_case = _use_case(logger)
    request = ApplyPatternRequest(to_data_uri(hand_photo), "mandala")

    assert use_case.execute(request).data_uri == use_case.execute(request).data_uri


def test_unknown_style_falls_back_to_floral(logger) -> None:
    response = _use_case(logger).execute(ApplyPatternRequest(to_data_uri(black_bgr(30, 20)), "celtic knots"))

    assert response.style is PatternStyle.FLORAL
    assert (response.image.width, response.image.height) == (30, 20)


def test_refused_surface_fails_at_extract(logger, hand_photo) -> None:
    surfaces = OpenCvSurfaceProvider(logger, max_pixels=1_000)

    with pytest.raises(RenderingUnavailable) as info:
        _use_case(logger, surfaces=surfaces).execute(ApplyPatternRequest(to_data_uri(hand_photo)))

    assert info.value.stage == "extract"


class _BrokenDetector:
    def detect(self, buffer):
        raise ZeroDivisionError("division by zero")


def test_unexpected_error_is_wrapped_with_stage(logger) -> None:
    use_case = _use_case(logger, detector=_BrokenDetector())

    with pytest.raises(PipelineStageError) as info:
        use_case.execute(ApplyPatternRequest(to_data_uri(black_bgr(10, 10))))

    assert info.value.stage == "detect"
    assert isinstance(info.value.__cause__, ZeroDivisionError)


def test_existing_stage_is_kept(logger) -> None:
    class TaggedLoader:
        def load(self, source):
            raise ImageDecodeError("already tagged", stage="fetch")

    with pytest.raises(ImageDecodeError) as info:
        _use_case(logger, loader=TaggedLoader()).execute(ApplyPatternRequest("anything"))

    assert info.value.stage == "fetch"
