"""Exceptions raised by the image normalisation pipeline."""

from __future__ import annotations


class ImageProcessingError(Exception):
    """Base class for every failure reported by the pipeline."""


class DecodeError(ImageProcessingError):
    """Raised when input bytes cannot be parsed as an image."""

    def __init__(self, message: str = "unsupported or corrupt image data") -> None:
        super().__init__(message)


class EncodeError(ImageProcessingError):
    """Raised when the JPEG writer fails to produce output."""


class EncoderUnavailableError(EncodeError):
    """Raised when the runtime has no JPEG encoder installed."""

    def __init__(self, message: str = "No JPEG encoder available") -> None:
        super().__init__(message)


class SizeBudgetUnmet(ImageProcessingError):
    """Raised by callers when the best-effort output is above their size ceiling."""

    def __init__(self, final_size_kb: float, limit_kb: float) -> None:
        self.final_size_kb = final_size_kb
        self.limit_kb = limit_kb
        super().__init__(
            f"Unable to compress image below {limit_kb:g} KB (final: {final_size_kb:.2f} KB)."
        )
