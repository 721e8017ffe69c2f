"""Image normalisation helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from idphoto.imgproc.encoder import EncodeAttempt, encode_within_budget, quality_ladder
from idphoto.imgproc.errors import DecodeError

WHITE = (255, 255, 255)

RESAMPLE_FILTERS = {
    "bicubic": Image.Resampling.BICUBIC,
    "lanczos": Image.Resampling.LANCZOS,
    "bilinear": Image.Resampling.BILINEAR,
}


class CropMode(str, Enum):
    """How the source is fitted onto the target canvas."""

    CONTAIN = "contain"
    COVER = "cover"

    @classmethod
    def from_editor_value(cls, value: str | None) -> "CropMode":
        """Map editor values; ``center`` means cover, anything else contains."""

        normalised = (value or "").strip().lower()
        if normalised in {"center", "cover"}:
            return cls.COVER
        return cls.CONTAIN


@dataclass(frozen=True, slots=True)
class ProcessingRequest:
    """Input of a single normalisation call."""

    image_bytes: bytes
    target_width: int
    target_height: int
    max_size_kb: float
    crop_mode: CropMode = CropMode.CONTAIN

    def __post_init__(self) -> None:
        if self.target_width <= 0 or self.target_height <= 0:
            raise ValueError(
                f"Target dimensions must be positive, got {self.target_width}x{self.target_height}"
            )
        if self.max_size_kb <= 0:
            raise ValueError(f"Size budget must be positive, got {self.max_size_kb}")


@dataclass(frozen=True, slots=True)
class Placement:
    """Size and top-left offset of the scaled source on the canvas."""

    draw_width: int
    draw_height: int
    offset_x: int
    offset_y: int


def set_pixel_limit(limit: int | None) -> None:
    """Set Pillow's decompression-bomb threshold; ``None`` lets any size through."""

    Image.MAX_IMAGE_PIXELS = limit


set_pixel_limit(None)


def decode_image(data: bytes, *, exif_orientation: bool = False) -> Image.Image:
    """Parse ``data`` into a fully loaded image or raise :class:`DecodeError`."""

    if not data:
        raise DecodeError()

    try:
        image = Image.open(BytesIO(data))
        image.load()
        if exif_orientation:
            oriented = ImageOps.exif_transpose(image)
            if oriented is not None and oriented is not image:
                image.close()
                image = oriented
    except Image.DecompressionBombError as exc:
        raise DecodeError(f"image exceeds the configured pixel limit: {exc}") from exc
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError() from exc

    if image.width <= 0 or image.height <= 0:
        image.close()
        raise DecodeError()
    return image


def flatten_to_rgb(image: Image.Image) -> Image.Image:
    """Return a new RGB image with ``image`` composited over solid white."""

    # RGB PNGs can still carry a tRNS colour key in info["transparency"].
    if image.mode == "RGB" and "transparency" not in image.info:
        return image.copy()

    try:
        rgba = image.convert("RGBA")
    except ValueError as exc:
        raise DecodeError(f"cannot flatten image mode {image.mode}") from exc

    with rgba:
        background = Image.new("RGB", rgba.size, WHITE)
        background.paste(rgba, (0, 0), rgba)
    return background


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_placement(
    source_size: tuple[int, int],
    target_size: tuple[int, int],
    crop_mode: CropMode = CropMode.CONTAIN,
) -> Placement:
    """Scale ``source_size`` to contain or cover ``target_size`` and centre it."""

    source_width, source_height = source_size
    target_width, target_height = target_size
    ratios = (target_width / source_width, target_height / source_height)
    scale = max(ratios) if crop_mode is CropMode.COVER else min(ratios)

    draw_width = max(1, _round_half_up(source_width * scale))
    draw_height = max(1, _round_half_up(source_height * scale))
    # int() truncates toward zero: an odd remainder puts the extra pixel on the right/bottom.
    return Placement(
        draw_width=draw_width,
        draw_height=draw_height,
        offset_x=int((target_width - draw_width) / 2),
        offset_y=int((target_height - draw_height) / 2),
    )


def compose_on_canvas(
    source: Image.Image,
    target_width: int,
    target_height: int,
    crop_mode: CropMode = CropMode.CONTAIN,
    *,
    resample: Image.Resampling = Image.Resampling.BICUBIC,
) -> Image.Image:
    """Draw ``source`` centred on a white ``target_width`` x ``target_height`` canvas."""

    placement = compute_placement(source.size, (target_width, target_height), crop_mode)
    canvas = Image.new("RGB", (target_width, target_height), WHITE)
    try:
        if (placement.draw_width, placement.draw_height) == source.size:
            scaled = source.copy()
        else:
            scaled = source.resize((placement.draw_width, placement.draw_height), resample=resample)
        with scaled:
            canvas.paste(scaled, (placement.offset_x, placement.offset_y))
    except Exception:
        canvas.close()
        raise
    return canvas


class ImageNormalizer:
    """Produces JPEGs of exact dimensions within a file-size budget."""

    def __init__(
        self,
        *,
        resample: Image.Resampling = Image.Resampling.BICUBIC,
        exif_orientation: bool = False,
        ladder: tuple[float, ...] | None = None,
    ) -> None:
        self._resample = resample
        self._exif_orientation = exif_orientation
        self._ladder = ladder or quality_ladder()

    @classmethod
    def from_filter_name(cls, name: str, **kwargs) -> "ImageNormalizer":
        try:
            resample = RESAMPLE_FILTERS[name.lower()]
        except KeyError as exc:
            raise ValueError(f"Unknown resample filter: {name}") from exc
        return cls(resample=resample, **kwargs)

    def normalize(self, request: ProcessingRequest) -> EncodeAttempt:
        """Run the full pipeline and return the accepted (or last) encode attempt."""

        with decode_image(request.image_bytes, exif_orientation=self._exif_orientation) as source:
            flat = flatten_to_rgb(source)
        with flat:
            canvas = compose_on_canvas(
                flat,
                request.target_width,
                request.target_height,
                request.crop_mode,
                resample=self._resample,
            )
        with canvas:
            return encode_within_budget(canvas, request.max_size_kb, self._ladder)

    def process(
        self,
        image_bytes: bytes,
        target_width: int,
        target_height: int,
        max_size_kb: float,
        crop_mode: CropMode = CropMode.CONTAIN,
    ) -> bytes:
        """Return JPEG bytes of exactly ``target_width`` x ``target_height``."""

        request = ProcessingRequest(
            image_bytes=image_bytes,
            target_width=target_width,
            target_height=target_height,
            max_size_kb=max_size_kb,
            crop_mode=crop_mode,
        )
        return self.normalize(request).data


def process(
    image_bytes: bytes,
    target_width: int,
    target_height: int,
    max_size_kb: float,
    crop_mode: CropMode = CropMode.CONTAIN,
) -> bytes:
    """Normalise ``image_bytes`` with default settings."""

    return ImageNormalizer().process(image_bytes, target_width, target_height, max_size_kb, crop_mode)
