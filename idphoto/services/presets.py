"""Document presets required by the PAN card authorities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InvalidDocumentTypeError(ValueError):
    """Raised when the requested document type has no preset."""


class DocumentType(str, Enum):
    """Kinds of images accepted by the authorities."""

    PHOTO = "photo"
    SIGNATURE = "signature"

    @classmethod
    def parse(cls, value: str | None) -> "DocumentType":
        normalised = (value or "").strip().lower()
        if normalised == "photo":
            return cls.PHOTO
        if normalised in {"signature", "sign"}:
            return cls.SIGNATURE
        raise InvalidDocumentTypeError(f"Invalid type '{value}'. Use 'photo' or 'signature'.")


class Authority(str, Enum):
    """Issuing agencies; they share presets but name their files differently."""

    NSDL = "nsdl"
    UTI = "uti"

    @classmethod
    def parse(cls, value: str | None, default: "Authority | str" = "nsdl") -> "Authority":
        """Resolve ``value`` leniently: blanks use ``default``, unknown values fall back to NSDL."""

        normalised = (value or "").strip().lower() or str(getattr(default, "value", default)).lower()
        if normalised in {"uti", "uts"}:
            return cls.UTI
        return cls.NSDL


@dataclass(frozen=True, slots=True)
class DimensionPreset:
    """Pixel dimensions (width first) and file-size limit of an output."""

    width: int
    height: int
    max_size_kb: float


PRESETS: dict[DocumentType, DimensionPreset] = {
    DocumentType.PHOTO: DimensionPreset(width=197, height=276, max_size_kb=50.0),
    DocumentType.SIGNATURE: DimensionPreset(width=354, height=157, max_size_kb=20.0),
}


def get_preset(document_type: DocumentType) -> DimensionPreset:
    return PRESETS[document_type]


def output_filename(authority: Authority, document_type: DocumentType) -> str:
    """Return the download name, e.g. ``nsdl_photo.jpg``."""

    return f"{authority.value}_{document_type.value}.jpg"
