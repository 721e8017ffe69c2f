"""Business logic binding document presets to the image normaliser."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from idphoto.config.settings import Settings
from idphoto.imgproc import (
    CropMode,
    DecodeError,
    EncodeError,
    ImageNormalizer,
    ProcessingRequest,
    SizeBudgetUnmet,
)
from idphoto.imgproc.normalize import set_pixel_limit
from idphoto.metrics.prometheus_exporter import image_encode_quality, images_processed_total
from idphoto.services.presets import Authority, DocumentType, get_preset, output_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessedImage:
    """Normalised JPEG ready to be sent back to the user."""

    data: bytes
    filename: str
    document_type: DocumentType
    authority: Authority
    quality: float | None

    @property
    def size_kb(self) -> float:
        return len(self.data) / 1024.0


class ImageProcessingService:
    """Facade over presets, the normaliser and the output size ceiling."""

    def __init__(
        self,
        normalizer: ImageNormalizer | None = None,
        *,
        size_ceiling_kb: float = 50.0,
        default_authority: str = Authority.NSDL.value,
    ) -> None:
        self._normalizer = normalizer or ImageNormalizer()
        self._size_ceiling_kb = size_ceiling_kb
        self._default_authority = default_authority

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageProcessingService":
        set_pixel_limit(settings.max_image_pixels)
        normalizer = ImageNormalizer.from_filter_name(
            settings.resample_filter,
            exif_orientation=settings.apply_exif_orientation,
        )
        return cls(
            normalizer,
            size_ceiling_kb=settings.output_ceiling_kb,
            default_authority=settings.default_authority,
        )

    @property
    def size_ceiling_kb(self) -> float:
        return self._size_ceiling_kb

    def process(
        self,
        image_bytes: bytes,
        *,
        document_type: DocumentType,
        authority: Authority | None = None,
        crop_mode: CropMode = CropMode.CONTAIN,
        enforce_ceiling: bool = True,
    ) -> ProcessedImage:
        """
        Normalise ``image_bytes`` to the preset of ``document_type``.

        The preset budget is best-effort; when ``enforce_ceiling`` is set an output
        above the hard ceiling raises :class:`SizeBudgetUnmet`.
        """

        authority = authority or Authority.parse(None, default=self._default_authority)
        preset = get_preset(document_type)
        request = ProcessingRequest(
            image_bytes=image_bytes,
            target_width=preset.width,
            target_height=preset.height,
            max_size_kb=preset.max_size_kb,
            crop_mode=crop_mode,
        )

        try:
            attempt = self._normalizer.normalize(request)
        except DecodeError:
            images_processed_total.labels(document_type.value, "decode_error").inc()
            raise
        except EncodeError:
            images_processed_total.labels(document_type.value, "encode_error").inc()
            raise

        if attempt.size_kb > preset.max_size_kb:
            logger.info(
                "%s output stays at %.2f KB above the %.0f KB preset budget.",
                document_type.value,
                attempt.size_kb,
                preset.max_size_kb,
            )

        if enforce_ceiling and attempt.size_kb > self._size_ceiling_kb:
            images_processed_total.labels(document_type.value, "over_ceiling").inc()
            logger.warning(
                "Rejecting %s output of %.2f KB; ceiling is %.2f KB.",
                document_type.value,
                attempt.size_kb,
                self._size_ceiling_kb,
            )
            raise SizeBudgetUnmet(final_size_kb=attempt.size_kb, limit_kb=self._size_ceiling_kb)

        images_processed_total.labels(document_type.value, "ok").inc()
        if attempt.quality is not None:
            image_encode_quality.observe(attempt.quality)
        logger.info(
            "Normalised %s to %dx%d, %.2f KB (%s, quality %s).",
            document_type.value,
            preset.width,
            preset.height,
            attempt.size_kb,
            crop_mode.value,
            "default" if attempt.quality is None else f"{attempt.quality:.2f}",
        )
        return ProcessedImage(
            data=attempt.data,
            filename=output_filename(authority, document_type),
            document_type=document_type,
            authority=authority,
            quality=attempt.quality,
        )
