"""Tests for the quality ladder and JPEG capability handling."""

from __future__ import annotations

import pytest
import pytest_mock
from PIL import Image

from idphoto.imgproc import (
    EncodeError,
    EncoderCapability,
    EncoderUnavailableError,
    encode_jpeg,
    encode_within_budget,
    probe_jpeg_encoder,
)
from idphoto.imgproc.encoder import quality_ladder


@pytest.fixture
def canvas(gradient_image) -> Image.Image:
    return gradient_image((354, 157))


def test_quality_ladder_spans_095_to_005() -> None:
    ladder = quality_ladder()

    assert len(ladder) == 19
    assert ladder[0] == pytest.approx(0.95)
    assert ladder[-1] == pytest.approx(0.05)
    assert all(a > b for a, b in zip(ladder, ladder[1:]))


def test_generous_budget_keeps_top_quality(canvas: Image.Image) -> None:
    attempt = encode_within_budget(canvas, max_size_kb=500)

    assert attempt.quality == pytest.approx(0.95)
    assert attempt.data == encode_jpeg(canvas, 0.95)


def test_returns_first_quality_within_budget(canvas: Image.Image) -> None:
    sizes = {quality: len(encode_jpeg(canvas, quality)) for quality in quality_ladder()}
    budget_kb = sizes[quality_ladder()[6]] / 1024

    attempt = encode_within_budget(canvas, max_size_kb=budget_kb)

    assert attempt.size_kb <= budget_kb
    assert attempt.data == encode_jpeg(canvas, attempt.quality)
    higher = [quality for quality in quality_ladder() if quality > attempt.quality + 1e-9]
    assert all(sizes[quality] / 1024 > budget_kb for quality in higher)


def test_unreachable_budget_returns_floor_quality(canvas: Image.Image) -> None:
    attempt = encode_within_budget(canvas, max_size_kb=0.01)

    assert attempt.quality == pytest.approx(0.05)
    assert attempt.size_kb > 0.01
    assert attempt.data == encode_jpeg(canvas, 0.05)


def test_lower_quality_never_grows_output(canvas: Image.Image) -> None:
    sizes = [len(encode_jpeg(canvas, quality)) for quality in quality_ladder()]

    assert all(later <= earlier for earlier, later in zip(sizes, sizes[1:]))


def test_encoding_is_deterministic(canvas: Image.Image) -> None:
    assert encode_jpeg(canvas, 0.7) == encode_jpeg(canvas, 0.7)


def test_encode_rejects_alpha_raster() -> None:
    with pytest.raises(EncodeError, match="RGB"):
        encode_jpeg(Image.new("RGBA", (4, 4)), 0.9)


def test_writer_failure_becomes_encode_error(canvas: Image.Image, mocker: pytest_mock.MockerFixture) -> None:
    mocker.patch.object(canvas, "save", side_effect=OSError("encoder error -2"))

    with pytest.raises(EncodeError, match="encoder error"):
        encode_within_budget(canvas, max_size_kb=20)


def test_missing_encoder_is_fatal(canvas: Image.Image, mocker: pytest_mock.MockerFixture) -> None:
    mocker.patch(
        "idphoto.imgproc.encoder.probe_jpeg_encoder",
        return_value=EncoderCapability(available=False, quality_control=False),
    )

    with pytest.raises(EncoderUnavailableError):
        encode_within_budget(canvas, max_size_kb=20)


def test_without_quality_control_writes_once(canvas: Image.Image, mocker: pytest_mock.MockerFixture) -> None:
    mocker.patch(
        "idphoto.imgproc.encoder.probe_jpeg_encoder",
        return_value=EncoderCapability(available=True, quality_control=False),
    )
    save = mocker.spy(canvas, "save")

    attempt = encode_within_budget(canvas, max_size_kb=0.01)

    assert attempt.quality is None
    assert attempt.data[:2] == b"\xff\xd8"
    assert save.call_count == 1


def test_probe_detects_installed_encoder() -> None:
    capability = probe_jpeg_encoder()

    assert capability.available
    assert capability.quality_control
