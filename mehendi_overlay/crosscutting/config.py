"""Application configuration loading helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from mehendi_overlay.domain.settings import DetectionSettings, OverlaySettings

ENV_PREFIX = "MEHENDI_"


def _env(key: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{key}", default)


def _int(key: str, default: int):
    return field(default_factory=lambda: int(_env(key, str(default))))


def _float(key: str, default: float):
    return field(default_factory=lambda: float(_env(key, str(default))))


def _str(key: str, default: str):
    return field(default_factory=lambda: _env(key, default))


@dataclass(slots=True)
class AppSettings:
    """Container for runtime configuration values.

    Every value can be overridden with an environment variable carrying the
    ``MEHENDI_`` prefix, e.g. ``MEHENDI_MIN_SKIN_FRACTION=0.05``. Values are
    read when the instance is created, not at import time.
    """

    app_name: str = _str("APP_NAME", "Mehendi Pattern Overlay")
    app_version: str = _str("APP_VERSION", "1.0")
    log_level: str = _str("LOG_LEVEL", "INFO")
    log_format: str = _str("LOG_FORMAT", "console")

    skin_min_red: int = _int("SKIN_MIN_RED", 95)
    skin_min_green: int = _int("SKIN_MIN_GREEN", 40)
    skin_min_blue: int = _int("SKIN_MIN_BLUE", 20)
    skin_min_spread: int = _int("SKIN_MIN_SPREAD", 15)
    min_skin_fraction: float = _float("MIN_SKIN_FRACTION", 0.03)
    box_padding: int = _int("BOX_PADDING", 20)

    pattern_opacity: float = _float("PATTERN_OPACITY", 0.6)
    fallback_scale: float = _float("FALLBACK_SCALE", 0.8)
    pattern_color: str = _str("PATTERN_COLOR", "#6B3410")

    max_surface_pixels: int = _int("MAX_SURFACE_PIXELS", 40_000_000)
    fetch_timeout: float = _float("FETCH_TIMEOUT", 15.0)
    max_image_bytes: int = _int("MAX_IMAGE_BYTES", 10 * 1024 * 1024)

    rate_limit_max: int = _int("RATE_LIMIT_MAX", 10)
    rate_limit_window: float = _float("RATE_LIMIT_WINDOW", 60.0)
    rate_limit_cooldown: float = _float("RATE_LIMIT_COOLDOWN", 1.0)

    @property
    def detection(self) -> DetectionSettings:
        return DetectionSettings(
            min_red=self.skin_min_red,
            min_green=self.skin_min_green,
            min_blue=self.skin_min_blue,
            min_spread=self.skin_min_spread,
            min_skin_fraction=self.min_skin_fraction,
            box_padding=self.box_padding,
        )

    @property
    def overlay(self) -> OverlaySettings:
        return OverlaySettings(
            pattern_opacity=self.pattern_opacity,
            fallback_scale=self.fallback_scale,
            pattern_color=self.pattern_color,
        )


def load_settings() -> AppSettings:
    """Load configuration values from the current environment."""

    return AppSettings()


__all__ = ["AppSettings", "ENV_PREFIX", "load_settings"]
