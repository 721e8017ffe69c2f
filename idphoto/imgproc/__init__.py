"""Image normalisation pipeline."""

from .encoder import EncodeAttempt, EncoderCapability, encode_jpeg, encode_within_budget, probe_jpeg_encoder
from .errors import (
    DecodeError,
    EncodeError,
    EncoderUnavailableError,
    ImageProcessingError,
    SizeBudgetUnmet,
)
from .normalize import CropMode, ImageNormalizer, ProcessingRequest, process

__all__ = [
    "CropMode",
    "DecodeError",
    "EncodeAttempt",
    "EncodeError",
    "EncoderCapability",
    "EncoderUnavailableError",
    "ImageNormalizer",
    "ImageProcessingError",
    "ProcessingRequest",
    "SizeBudgetUnmet",
    "encode_jpeg",
    "encode_within_budget",
    "probe_jpeg_encoder",
    "process",
]
