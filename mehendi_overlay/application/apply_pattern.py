"""Use case sequencing decode, detect, generate and composite."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, TypeVar

from mehendi_overlay.application.compositor import Compositor
from mehendi_overlay.domain.detector import HandRegionDetector
from mehendi_overlay.domain.entities import (
    BoundingBox,
    DecodedImage,
    EncodedImage,
    HandRegion,
    PatternStyle,
    PixelBuffer,
)
from mehendi_overlay.domain.pattern_generator import PatternGenerator
from mehendi_overlay.domain.rendering import RasterSurfaceProvider
from mehendi_overlay.shared.errors import OverlayError, PipelineStageError

T = TypeVar("T")

STAGE_DECODE = "decode"
STAGE_EXTRACT = "extract"
STAGE_DETECT = "detect"
STAGE_GENERATE = "generate"
STAGE_COMPOSITE = "composite"


class ImageLoader(Protocol):
    def load(self, source: str) -> DecodedImage:
        """Decode the image behind ``source`` or raise ``ImageDecodeError``."""


@dataclass(frozen=True)
class ApplyPatternRequest:
    """Request DTO for :class:`ApplyPatternUseCase`."""

    image_source: str
    style_name: str = ""


@dataclass(frozen=True)
class ApplyPatternResponse:
    """Composited image plus what the pipeline decided along the way."""

    image: EncodedImage
    style: PatternStyle
    region: HandRegion

    @property
    def data_uri(self) -> str:
        return self.image.data_uri

    @property
    def bounding_box(self) -> BoundingBox | None:
        return self.region.bounding_box


def extract_pixels(surfaces: RasterSurfaceProvider, image: DecodedImage) -> PixelBuffer:
    """Render ``image`` onto a scratch surface and read it back as RGBA."""

    surface = surfaces.acquire(image.width, image.height)
    surface.draw_image(image.data, 0, 0, image.width, image.height)
    return surface.read_pixels()


class ApplyPatternUseCase:
    """Turn an image source and a style name into a composited PNG.

    Stages run strictly in order and nothing is kept between calls. The
    first failing stage aborts the run: errors from the overlay taxonomy keep
    their kind and are tagged with the stage, anything else is wrapped in
    :class:`PipelineStageError`.
    """

    def __init__(
        self,
        loader: ImageLoader,
        surface_provider: RasterSurfaceProvider,
        detector: HandRegionDetector,
        generator: PatternGenerator,
        compositor: Compositor,
        logger,
    ) -> None:
        self._loader = loader
        self._surfaces = surface_provider
        self._detector = detector
        self._generator = generator
        self._compositor = compositor
        self._logger = logger

    def execute(self, request: ApplyPatternRequest) -> ApplyPatternResponse:
        style = PatternStyle.parse(request.style_name)
        self._logger.info("overlay.started", style=style.value, requested_style=request.style_name)

        image = self._run(STAGE_DECODE, self._loader.load, request.image_source)
        pixels = self._run(STAGE_EXTRACT, extract_pixels, self._surfaces, image)
        region = self._run(STAGE_DETECT, self._detector.detect, pixels)
        box = region.bounding_box
        self._logger.info(
            "overlay.region_detected",
            full_frame=box is None,
            bounding_box=box.as_tuple() if box is not None else None,
        )
        pattern = self._run(STAGE_GENERATE, self._generator.generate, image.width, image.height, style)
        encoded = self._run(STAGE_COMPOSITE, self._compositor.composite, image, pattern, region)

        self._logger.info("overlay.completed", width=encoded.width, height=encoded.height, style=style.value)
        return ApplyPatternResponse(image=encoded, style=style, region=region)

    def _run(self, stage: str, func: Callable[..., T], *args) -> T:
        try:
            return func(*args)
        except OverlayError as exc:
            if exc.stage is None:
                exc.stage = stage
            self._logger.error("overlay.stage_failed", stage=stage, kind=exc.kind, error=exc.message)
            raise
        except Exception as exc:
            self._logger.error("overlay.stage_failed", stage=stage, kind=PipelineStageError.kind, error=str(exc))
            raise PipelineStageError(f"The {stage} stage failed: {exc}", stage=stage) from exc


__all__ = [
    "ApplyPatternRequest",
    "ApplyPatternResponse",
    "ApplyPatternUseCase",
    "ImageLoader",
    "extract_pixels",
]
