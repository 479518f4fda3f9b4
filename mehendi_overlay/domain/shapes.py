"""Vector primitives used to describe henna patterns."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

Point = tuple[float, float]


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    stroke_width: float = 2.0
    filled: bool = False

    def translated(self, dx: float, dy: float) -> "Circle":
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def to_svg(self, color: str) -> str:
        paint = f'fill="{color}"' if self.filled else f'fill="none" stroke="{color}" stroke-width="{_fmt(self.stroke_width)}"'
        return f'<circle cx="{_fmt(self.cx)}" cy="{_fmt(self.cy)}" r="{_fmt(self.r)}" {paint}/>'


@dataclass(frozen=True)
class Ellipse:
    """Outline ellipse rotated by ``angle`` degrees around its centre."""

    cx: float
    cy: float
    rx: float
    ry: float
    angle: float = 0.0
    stroke_width: float = 2.0

    def translated(self, dx: float, dy: float) -> "Ellipse":
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def to_svg(self, color: str) -> str:
        return (
            f'<ellipse cx="{_fmt(self.cx)}" cy="{_fmt(self.cy)}" rx="{_fmt(self.rx)}" ry="{_fmt(self.ry)}" '
            f'transform="rotate({_fmt(self.angle)} {_fmt(self.cx)} {_fmt(self.cy)})" '
            f'fill="none" stroke="{color}" stroke-width="{_fmt(self.stroke_width)}"/>'
        )


@dataclass(frozen=True)
class Polygon:
    """Closed outline through ``points``."""

    points: tuple[Point, ...]
    stroke_width: float = 2.0

    def translated(self, dx: float, dy: float) -> "Polygon":
        return replace(self, points=tuple((x + dx, y + dy) for x, y in self.points))

    def to_svg(self, color: str) -> str:
        coords = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in self.points)
        return f'<polygon points="{coords}" fill="none" stroke="{color}" stroke-width="{_fmt(self.stroke_width)}"/>'


@dataclass(frozen=True)
class Curve:
    """Open Bezier stroke: one control point is quadratic, two are cubic."""

    start: Point
    controls: tuple[Point, ...]
    end: Point
    stroke_width: float = 2.0

    def __post_init__(self) -> None:
        if len(self.controls) not in (1, 2):
            raise ValueError("A curve needs one (quadratic) or two (cubic) control points")

    @property
    def is_cubic(self) -> bool:
        return len(self.controls) == 2

    def translated(self, dx: float, dy: float) -> "Curve":
        return replace(
            self,
            start=(self.start[0] + dx, self.start[1] + dy),
            controls=tuple((x + dx, y + dy) for x, y in self.controls),
            end=(self.end[0] + dx, self.end[1] + dy),
        )

    def sample(self, steps: int = 32) -> list[Point]:
        """Return ``steps + 1`` points along the curve, endpoints included."""

        points: list[Point] = []
        for i in range(steps + 1):
            t = i / steps
            u = 1.0 - t
            if self.is_cubic:
                (c1x, c1y), (c2x, c2y) = self.controls
                x = u**3 * self.start[0] + 3 * u * u * t * c1x + 3 * u * t * t * c2x + t**3 * self.end[0]
                y = u**3 * self.start[1] + 3 * u * u * t * c1y + 3 * u * t * t * c2y + t**3 * self.end[1]
            else:
                cx, cy = self.controls[0]
                x = u * u * self.start[0] + 2 * u * t * cx + t * t * self.end[0]
                y = u * u * self.start[1] + 2 * u * t * cy + t * t * self.end[1]
            points.append((x, y))
        return points

    def to_svg(self, color: str) -> str:
        command = "C" if self.is_cubic else "Q"
        controls = " ".join(f"{_fmt(x)} {_fmt(y)}" for x, y in self.controls)
        d = f"M {_fmt(self.start[0])} {_fmt(self.start[1])} {command} {controls} {_fmt(self.end[0])} {_fmt(self.end[1])}"
        return (
            f'<path d="{d}" fill="none" stroke="{color}" '
            f'stroke-width="{_fmt(self.stroke_width)}" stroke-linecap="round"/>'
        )


Shape = Union[Circle, Ellipse, Polygon, Curve]


__all__ = ["Point", "Circle", "Ellipse", "Polygon", "Curve", "Shape"]
