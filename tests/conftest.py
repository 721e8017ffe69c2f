"""Shared fixtures producing synthetic test images."""

from __future__ import annotations

from io import BytesIO
from typing import Callable

import pytest
from PIL import Image

from idphoto.config.settings import get_settings


def _gradient(size: tuple[int, int]) -> Image.Image:
    red = Image.linear_gradient("L").resize(size)
    green = Image.linear_gradient("L").transpose(Image.Transpose.ROTATE_90).resize(size)
    blue = Image.radial_gradient("L").resize(size)
    return Image.merge("RGB", (red, green, blue))


def _to_bytes(image: Image.Image, fmt: str, **params: object) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def _reset_settings() -> None:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def gradient_image() -> Callable[[tuple[int, int]], Image.Image]:
    return _gradient


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Encode a Pillow image into the requested container format."""

    return _to_bytes


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _to_bytes(_gradient((1000, 1000)), "JPEG", quality=90)


@pytest.fixture
def transparent_png_bytes() -> bytes:
    """3000x1500 RGBA image: transparent left half, opaque blue right half."""

    image = Image.new("RGBA", (3000, 1500), (30, 120, 200, 255))
    image.paste((0, 0, 0, 0), (0, 0, 1500, 1500))
    return _to_bytes(image, "PNG")


@pytest.fixture
def open_image() -> Callable[[bytes], Image.Image]:
    def _open(data: bytes) -> Image.Image:
        image = Image.open(BytesIO(data))
        image.load()
        return image

    return _open
