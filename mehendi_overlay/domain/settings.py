from __future__ import annotations

import re
from dataclasses import dataclass

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def hex_to_bgr(color: str) -> tuple[int, int, int]:
    if not _HEX_COLOR.match(color):
        raise ValueError(f"Invalid colour {color!r}, expected #RRGGBB")
    value = color.lstrip("#")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return b, g, r


@dataclass(frozen=True)
class DetectionSettings:
    """Skin-tone heuristic thresholds; defaults are the uncalibrated originals."""

    min_red: int = 95
    min_green: int = 40
    min_blue: int = 20
    min_spread: int = 15
    min_skin_fraction: float = 0.03
    box_padding: int = 20

    def __post_init__(self) -> None:
        for name in ("min_red", "min_green", "min_blue", "min_spread"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be within [0, 255]")
        if not (0 < self.min_skin_fraction <= 1):
            raise ValueError("Minimum skin fraction must be within (0, 1]")
        if self.box_padding < 0:
            raise ValueError("Box padding must not be negative")


@dataclass(frozen=True)
class OverlaySettings:
    pattern_opacity: float = 0.6
    fallback_scale: float = 0.8
    pattern_color: str = "#6B3410"

    def __post_init__(self) -> None:
        if not (0 < self.pattern_opacity <= 1):
            raise ValueError("Pattern opacity must be within (0, 1]")
        if not (0 < self.fallback_scale <= 1):
            raise ValueError("Fallback scale must be within (0, 1]")
        if not _HEX_COLOR.match(self.pattern_color):
            raise ValueError("Pattern color must be a #RRGGBB hex string")

    def pattern_bgr(self) -> tuple[int, int, int]:
        return hex_to_bgr(self.pattern_color)
