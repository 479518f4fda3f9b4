"""Blend a rasterised pattern onto the source photo."""

from __future__ import annotations

from dataclasses import dataclass

from mehendi_overlay.domain.entities import DecodedImage, EncodedImage, HandRegion, PatternDocument
from mehendi_overlay.domain.rendering import BlendMode, RasterSurfaceProvider
from mehendi_overlay.domain.settings import OverlaySettings


@dataclass(frozen=True)
class Placement:
    x: int
    y: int
    width: int
    height: int


def compute_placement(canvas_width: int, canvas_height: int, region: HandRegion, fallback_scale: float) -> Placement:
    """Return where the pattern goes: the hand box, or a centred fallback."""

    box = region.bounding_box
    if box is not None:
        return Placement(box.x, box.y, max(1, box.width), max(1, box.height))
    width = max(1, int(round(canvas_width * fallback_scale)))
    height = max(1, int(round(canvas_height * fallback_scale)))
    return Placement((canvas_width - width) // 2, (canvas_height - height) // 2, width, height)


class Compositor:
    """Multiply-blend a pattern over the original image.

    Multiply darkens the skin underneath instead of painting over it, which
    reads as a stain rather than a sticker. The surface blend state is always
    restored to normal/opaque once the pattern is drawn.
    """

    def __init__(self, surface_provider: RasterSurfaceProvider, settings: OverlaySettings | None = None) -> None:
        self._surfaces = surface_provider
        self._settings = settings or OverlaySettings()

    def composite(self, original: DecodedImage, pattern: PatternDocument, region: HandRegion) -> EncodedImage:
        surface = self._surfaces.acquire(original.width, original.height)
        surface.reset_blend()
        surface.draw_image(original.data, 0, 0, original.width, original.height)

        rasterized = self._surfaces.rasterize(pattern)
        placement = compute_placement(surface.width, surface.height, region, self._settings.fallback_scale)
        surface.set_blend(BlendMode.MULTIPLY, self._settings.pattern_opacity)
        try:
            surface.draw_image(rasterized, placement.x, placement.y, placement.width, placement.height)
        finally:
            surface.reset_blend()

        return EncodedImage.from_png(surface.encode_png(), surface.width, surface.height)


__all__ = ["Compositor", "Placement", "compute_placement"]
