"""Procedural henna pattern documents, one algorithm per style."""

from __future__ import annotations

import math
from typing import Callable

from .entities import PatternDocument, PatternStyle
from .shapes import Circle, Curve, Ellipse, Polygon, Shape

ARABIC_TILE = 120
FLORAL_TILE = 100
GEOMETRIC_TILE = 80
DEFAULT_PATTERN_COLOR = "#6B3410"


def _polar(cx: float, cy: float, radius: float, degrees: float) -> tuple[float, float]:
    angle = math.radians(degrees)
    return cx + math.cos(angle) * radius, cy + math.sin(angle) * radius


def arabic_tile() -> tuple[Shape, ...]:
    """Flowing vines joining neighbouring tiles, with leaves and dots."""

    return (
        Curve(start=(0, 60), controls=((40, 10), (80, 110)), end=(120, 60), stroke_width=2.5),
        Curve(start=(0, 60), controls=((60, 110),), end=(120, 60), stroke_width=2.0),
        Ellipse(cx=35, cy=38, rx=6, ry=13, angle=-30, stroke_width=1.8),
        Ellipse(cx=85, cy=82, rx=6, ry=13, angle=30, stroke_width=1.8),
        Circle(cx=60, cy=60, r=3, filled=True),
        Circle(cx=20, cy=95, r=2.5, filled=True),
        Circle(cx=100, cy=25, r=2.5, filled=True),
    )


def floral_tile() -> tuple[Shape, ...]:
    centre = FLORAL_TILE / 2
    petals = []
    for i in range(6):
        px, py = _polar(centre, centre, 14, i * 60)
        petals.append(Ellipse(cx=px, cy=py, rx=5, ry=10, angle=i * 60 + 90, stroke_width=2.0))
    return (
        Circle(cx=centre, cy=centre, r=5, filled=True),
        *petals,
        Curve(start=(5, 95), controls=((15, 70),), end=(30, 72), stroke_width=1.5),
        Curve(start=(95, 5), controls=((85, 30),), end=(70, 28), stroke_width=1.5),
        Circle(cx=15, cy=15, r=2, filled=True),
        Circle(cx=85, cy=85, r=2, filled=True),
    )


def geometric_tile() -> tuple[Shape, ...]:
    centre = GEOMETRIC_TILE / 2
    reach = 32
    inset = 14
    vertices = (
        (centre, centre - reach),
        (centre + reach, centre),
        (centre, centre + reach),
        (centre - reach, centre),
    )
    square = (
        (centre - inset, centre - inset),
        (centre + inset, centre - inset),
        (centre + inset, centre + inset),
        (centre - inset, centre + inset),
    )
    return (
        Polygon(points=vertices, stroke_width=2.0),
        Polygon(points=square, stroke_width=1.6),
        Circle(cx=centre, cy=centre, r=8, stroke_width=1.6),
        *(Circle(cx=x, cy=y, r=3, filled=True) for x, y in vertices),
    )


def mandala_shapes(width: int, height: int) -> tuple[Shape, ...]:
    cx, cy = width / 2, height / 2
    radius = min(width, height) / 2.5
    shapes: list[Shape] = []
    for i in range(12):
        px, py = _polar(cx, cy, radius, i * 30)
        shapes.append(Ellipse(cx=px, cy=py, rx=15, ry=30, angle=i * 30, stroke_width=2.5))
    shapes.append(Circle(cx=cx, cy=cy, r=radius, stroke_width=3))
    shapes.append(Circle(cx=cx, cy=cy, r=radius * 0.7, stroke_width=2.5))
    shapes.append(Circle(cx=cx, cy=cy, r=radius * 0.4, stroke_width=2))
    for i in range(8):
        px, py = _polar(cx, cy, radius * 0.2, i * 45)
        shapes.append(Circle(cx=px, cy=py, r=8, stroke_width=2))
    shapes.append(Circle(cx=cx, cy=cy, r=10, filled=True))
    return tuple(shapes)


class PatternGenerator:
    """Build a :class:`PatternDocument` for a free-text style name."""

    def __init__(self, color: str = DEFAULT_PATTERN_COLOR) -> None:
        self._color = color
        self._builders: dict[PatternStyle, Callable[[int, int], PatternDocument]] = {
            PatternStyle.ARABIC: self._tiled(PatternStyle.ARABIC, arabic_tile, ARABIC_TILE),
            PatternStyle.MANDALA: self._mandala,
            PatternStyle.FLORAL: self._tiled(PatternStyle.FLORAL, floral_tile, FLORAL_TILE),
            PatternStyle.GEOMETRIC: self._tiled(PatternStyle.GEOMETRIC, geometric_tile, GEOMETRIC_TILE),
        }

    def generate(self, width: int, height: int, style_name: str | PatternStyle | None) -> PatternDocument:
        if width <= 0 or height <= 0:
            raise ValueError("Pattern dimensions must be positive")
        style = style_name if isinstance(style_name, PatternStyle) else PatternStyle.parse(style_name)
        return self._builders[style](width, height)

    def _tiled(
        self,
        style: PatternStyle,
        tile: Callable[[], tuple[Shape, ...]],
        tile_size: int,
    ) -> Callable[[int, int], PatternDocument]:
        def build(width: int, height: int) -> PatternDocument:
            return PatternDocument(
                width=width,
                height=height,
                style=style,
                shapes=tile(),
                color=self._color,
                tile_size=tile_size,
            )

        return build

    def _mandala(self, width: int, height: int) -> PatternDocument:
        return PatternDocument(
            width=width,
            height=height,
            style=PatternStyle.MANDALA,
            shapes=mandala_shapes(width, height),
            color=self._color,
        )


__all__ = [
    "PatternGenerator",
    "arabic_tile",
    "floral_tile",
    "geometric_tile",
    "mandala_shapes",
    "ARABIC_TILE",
    "FLORAL_TILE",
    "GEOMETRIC_TILE",
]
