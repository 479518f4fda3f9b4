"""Resolve an image source (data URI, URL or path) into a decoded image."""

from __future__ import annotations

import base64
from binascii import Error as BinasciiError
from pathlib import Path

import cv2
import httpx
import numpy as np

from mehendi_overlay.domain.entities import DecodedImage
from mehendi_overlay.shared.errors import ImageDecodeError

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


def describe_source(source: str) -> str:
    """Short, log-safe description of an image source."""

    stripped = source.strip()
    if stripped.lower().startswith("data:"):
        header = stripped.split(",", 1)[0]
        return f"{header},<{len(stripped)} chars>"
    return stripped if len(stripped) <= 120 else f"{stripped[:117]}..."


def decode_data_uri(source: str, max_bytes: int | None = None) -> bytes:
    stripped = source.strip()
    if stripped.lower().startswith("data:"):
        parts = stripped.split(",", 1)
        if len(parts) != 2:
            raise ImageDecodeError("The image source is not a valid base64 data URI.")
        stripped = parts[1]

    normalized = "".join(stripped.split())
    if not normalized:
        raise ImageDecodeError("The image data URI carries no content.")

    if max_bytes is not None and len(normalized.rstrip("=")) * 3 // 4 > max_bytes:
        raise ImageDecodeError(f"The image data URI exceeds the {max_bytes} byte limit.")

    normalized = normalized.replace("-", "+").replace("_", "/")
    padding = len(normalized) % 4
    if padding:
        normalized += "=" * (4 - padding)

    try:
        return base64.b64decode(normalized, validate=True)
    except (BinasciiError, ValueError) as exc:
        raise ImageDecodeError("The image data URI is not valid base64 data.") from exc


def decode_image_bytes(payload: bytes, source: str = "") -> DecodedImage:
    array = np.frombuffer(payload, dtype=np.uint8)
    if array.size == 0:
        raise ImageDecodeError("The image is empty or corrupted.")

    frame = cv2.imdecode(array, cv2.IMREAD_COLOR)
    if frame is None or frame.size == 0:
        raise ImageDecodeError("Unable to decode the image. Ensure a supported format is used.")
    return DecodedImage(data=frame, source=source)


class ImageSourceLoader:
    """Load images from ``data:`` URIs, ``http(s)`` URLs and, when allowed, local files.

    Payloads larger than ``max_bytes`` are rejected before decoding; URL
    downloads are streamed and abandoned as soon as they cross the limit.
    """

    def __init__(
        self,
        logger,
        client: httpx.Client | None = None,
        timeout: float = 15.0,
        max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
        allow_files: bool = False,
    ) -> None:
        self._logger = logger
        self._client = client
        self._timeout = timeout
        self._max_bytes = max_bytes
        self._allow_files = allow_files

    def load(self, source: str) -> DecodedImage:
        if not isinstance(source, str) or not source.strip():
            raise ImageDecodeError("No image source was provided.")

        stripped = source.strip()
        description = describe_source(stripped)
        lowered = stripped.lower()
        if lowered.startswith("data:"):
            payload = decode_data_uri(stripped, self._max_bytes)
        elif lowered.startswith(("http://", "https://")):
            payload = self._fetch(stripped)
        elif self._allow_files:
            payload = self._read_file(Path(stripped))
        else:
            raise ImageDecodeError("Unsupported image source, expected an http(s) URL or a data URI.")

        image = decode_image_bytes(payload, description)
        self._logger.debug("image.decoded", source=description, bytes=len(payload), width=image.width, height=image.height)
        return image

    def _fetch(self, url: str) -> bytes:
        try:
            if self._client is not None:
                return self._download(self._client, url)
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                return self._download(client, url)
        except httpx.HTTPError as exc:
            raise ImageDecodeError(f"Unable to fetch image from {describe_source(url)}: {exc}") from exc

    def _download(self, client: httpx.Client, url: str) -> bytes:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > self._max_bytes:
                raise self._too_large(url)

            chunks: list[bytes] = []
            total = 0
            for chunk in response.iter_bytes():
                total += len(chunk)
                if total > self._max_bytes:
                    raise self._too_large(url)
                chunks.append(chunk)
        return b"".join(chunks)

    def _read_file(self, path: Path) -> bytes:
        try:
            if path.stat().st_size > self._max_bytes:
                raise ImageDecodeError(f"Image file '{path}' exceeds the {self._max_bytes} byte limit.")
            return path.read_bytes()
        except OSError as exc:
            raise ImageDecodeError(f"Unable to read image file '{path}': {exc.strerror or exc}") from exc

    def _too_large(self, url: str) -> ImageDecodeError:
        self._logger.warning("image.too_large", source=describe_source(url), max_bytes=self._max_bytes)
        return ImageDecodeError(f"Image at {describe_source(url)} exceeds the {self._max_bytes} byte limit.")


__all__ = [
    "DEFAULT_MAX_IMAGE_BYTES",
    "ImageSourceLoader",
    "decode_data_uri",
    "decode_image_bytes",
    "describe_source",
]
