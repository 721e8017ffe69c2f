"""Tests for document presets and naming rules."""

import pytest

from idphoto.services.presets import (
    Authority,
    DimensionPreset,
    DocumentType,
    InvalidDocumentTypeError,
    get_preset,
    output_filename,
)


def test_presets_match_authority_rules() -> None:
    assert get_preset(DocumentType.PHOTO) == DimensionPreset(width=197, height=276, max_size_kb=50.0)
    assert get_preset(DocumentType.SIGNATURE) == DimensionPreset(width=354, height=157, max_size_kb=20.0)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("photo", DocumentType.PHOTO), ("PHOTO", DocumentType.PHOTO), ("Signature", DocumentType.SIGNATURE), ("sign", DocumentType.SIGNATURE)],
)
def test_document_type_parsing(value: str, expected: DocumentType) -> None:
    assert DocumentType.parse(value) is expected


@pytest.mark.parametrize("value", ["", None, "passport"])
def test_unknown_document_type_is_rejected(value) -> None:
    with pytest.raises(InvalidDocumentTypeError, match="photo' or 'signature"):
        DocumentType.parse(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, Authority.NSDL), ("  ", Authority.NSDL), ("UTI", Authority.UTI), ("uts", Authority.UTI), ("other", Authority.NSDL)],
)
def test_authority_parsing_is_lenient(value, expected: Authority) -> None:
    assert Authority.parse(value) is expected


def test_blank_authority_uses_configured_default() -> None:
    assert Authority.parse("", default="uti") is Authority.UTI
    assert Authority.parse(None, default=Authority.UTI) is Authority.UTI


def test_output_filename() -> None:
    assert output_filename(Authority.UTI, DocumentType.SIGNATURE) == "uti_signature.jpg"
    assert output_filename(Authority.NSDL, DocumentType.PHOTO) == "nsdl_photo.jpg"
