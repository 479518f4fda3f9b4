"""Procedural henna pattern overlay for hand photos."""

from __future__ import annotations

from mehendi_overlay.domain.entities import (
    BoundingBox,
    EncodedImage,
    HandRegion,
    PatternDocument,
    PatternStyle,
    PixelBuffer,
)
from mehendi_overlay.shared.errors import (
    ImageDecodeError,
    OverlayError,
    PipelineStageError,
    RenderingUnavailable,
)

__version__ = "1.0.0"


def apply_pattern(image_source: str, style_name: str = "") -> str:
    """Run the full pipeline and return the composited PNG as a data URI."""

    from mehendi_overlay.app.container import AppContainer
    from mehendi_overlay.application.apply_pattern import ApplyPatternRequest

    container = AppContainer()
    use_case = container.apply_pattern_use_case()
    return use_case.execute(ApplyPatternRequest(image_source=image_source, style_name=style_name)).data_uri


__all__ = [
    "apply_pattern",
    "BoundingBox",
    "EncodedImage",
    "HandRegion",
    "ImageDecodeError",
    "OverlayError",
    "PatternDocument",
    "PatternStyle",
    "PipelineStageError",
    "PixelBuffer",
    "RenderingUnavailable",
]
