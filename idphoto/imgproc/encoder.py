"""Size-constrained JPEG encoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO

from PIL import Image, features

from idphoto.imgproc.errors import EncodeError, EncoderUnavailableError

logger = logging.getLogger(__name__)

# Quality is stepped in whole percent so the ladder has no float drift.
QUALITY_START = 95
QUALITY_FLOOR = 5
QUALITY_STEP = 5


@dataclass(frozen=True, slots=True)
class EncoderCapability:
    """What the installed Pillow build can do with JPEG output."""

    available: bool
    quality_control: bool


@dataclass(frozen=True, slots=True)
class EncodeAttempt:
    """Single JPEG encode at a given quality; ``quality`` is None for default parameters."""

    quality: float | None
    data: bytes

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024.0


@lru_cache(maxsize=1)
def probe_jpeg_encoder() -> EncoderCapability:
    """Return the cached JPEG capability of the running interpreter."""

    Image.init()
    registered = "JPEG" in Image.SAVE
    has_libjpeg = bool(features.check_codec("jpg"))
    return EncoderCapability(available=registered, quality_control=registered and has_libjpeg)


def quality_ladder(
    start: int = QUALITY_START,
    floor: int = QUALITY_FLOOR,
    step: int = QUALITY_STEP,
) -> tuple[float, ...]:
    """Descending quality levels from ``start`` to ``floor`` percent inclusive."""

    return tuple(percent / 100 for percent in range(start, floor - 1, -step))


def _write_jpeg(canvas: Image.Image, **params: int) -> bytes:
    buffer = BytesIO()
    try:
        canvas.save(buffer, format="JPEG", **params)
        return buffer.getvalue()
    except (OSError, ValueError) as exc:
        raise EncodeError(f"JPEG encoding failed: {exc}") from exc
    finally:
        buffer.close()


def encode_jpeg(canvas: Image.Image, quality: float) -> bytes:
    """Encode ``canvas`` once at ``quality`` (0.05 - 0.95 scale)."""

    if canvas.mode != "RGB":
        raise EncodeError(f"Expected an RGB raster, got {canvas.mode}")
    return _write_jpeg(canvas, quality=round(quality * 100))


def encode_within_budget(
    canvas: Image.Image,
    max_size_kb: float,
    ladder: tuple[float, ...] | None = None,
) -> EncodeAttempt:
    """
    Walk the quality ladder from the top and return the first attempt within budget.

    When every level is too large the lowest-quality attempt is returned; the caller
    compares its size against whatever ceiling it enforces. Without quality control
    the canvas is written once with default parameters.
    """

    capability = probe_jpeg_encoder()
    if not capability.available:
        raise EncoderUnavailableError()

    if not capability.quality_control:
        logger.warning("JPEG encoder lacks quality control; writing with default parameters.")
        if canvas.mode != "RGB":
            raise EncodeError(f"Expected an RGB raster, got {canvas.mode}")
        return EncodeAttempt(quality=None, data=_write_jpeg(canvas))

    attempt: EncodeAttempt | None = None
    for quality in ladder or quality_ladder():
        attempt = EncodeAttempt(quality=quality, data=encode_jpeg(canvas, quality))
        logger.debug("Encoded at quality %.2f: %.2f KB", quality, attempt.size_kb)
        if attempt.size_kb <= max_size_kb:
            return attempt

    if attempt is None:
        raise EncodeError("Quality ladder is empty")
    return attempt
