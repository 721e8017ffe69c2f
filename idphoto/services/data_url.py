"""Decoding of base64 data URLs posted by the canvas editor."""

from __future__ import annotations

import base64
import binascii


class InvalidDataUrlError(ValueError):
    """Raised when the payload is not a well-formed base64 data URL."""


class UnsupportedMediaError(ValueError):
    """Raised when the data URL does not carry an image."""


def decode_data_url(data_url: str | None) -> bytes:
    """Return the binary payload of ``data:image/...;base64,...``."""

    if data_url is None or not data_url.strip():
        raise InvalidDataUrlError("No image data provided")

    meta, separator, encoded = data_url.partition(",")
    if not separator:
        raise InvalidDataUrlError("Invalid data URL")
    if "image/" not in meta.lower():
        raise UnsupportedMediaError("Only image data URLs are accepted")

    try:
        # Browsers pad, but some encoders drop the trailing "=".
        padded = encoded.strip() + "=" * (-len(encoded.strip()) % 4)
        return base64.b64decode(padded, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise InvalidDataUrlError(f"Invalid base64 image data: {exc}") from exc
