"""Error taxonomy shared by the overlay pipeline and its outer surfaces."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base error for known application failures."""


class OverlayError(ApplicationError):
    """Pipeline failure carrying a stable machine-readable ``kind``."""

    kind = "OverlayError"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage

    def to_dict(self) -> dict[str, str | None]:
        return {"kind": self.kind, "message": self.message, "stage": self.stage}


class ImageDecodeError(OverlayError):
    """Raised when the source image cannot be loaded or decoded."""

    kind = "ImageDecodeError"


class RenderingUnavailable(OverlayError):
    """Raised when the host refuses to provide a 2D rendering surface."""

    kind = "RenderingUnavailable"


class PipelineStageError(OverlayError):
    """Raised when a stage fails with an error outside the known taxonomy."""

    kind = "PipelineStageError"

