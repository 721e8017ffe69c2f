"""Normalise an image file on disk to an authority preset."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from idphoto.config.settings import get_settings
from idphoto.imgproc import CropMode, ImageProcessingError
from idphoto.monitoring.logging import configure_logging
from idphoto.services.presets import Authority, DocumentType
from idphoto.services.processing import ImageProcessingService

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idphoto-normalize", description=__doc__)
    parser.add_argument("input", type=Path, help="Source image file.")
    parser.add_argument("--type", dest="document_type", required=True, choices=["photo", "signature", "sign"])
    parser.add_argument("--authority", default=None, help="nsdl (default) or uti.")
    parser.add_argument("--crop", choices=[mode.value for mode in CropMode], default=CropMode.CONTAIN.value)
    parser.add_argument("--output", type=Path, default=None, help="Output file; defaults to the preset filename.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging()

    settings = get_settings()
    service = ImageProcessingService.from_settings(settings)
    try:
        result = service.process(
            args.input.read_bytes(),
            document_type=DocumentType.parse(args.document_type),
            authority=Authority.parse(args.authority, default=settings.default_authority),
            crop_mode=CropMode(args.crop),
        )
        output = args.output or args.input.with_name(result.filename)
        output.write_bytes(result.data)
    except (ImageProcessingError, OSError) as exc:
        logger.error("Cannot normalise %s: %s", args.input, exc)
        return 1

    quality = "default" if result.quality is None else f"{result.quality:.2f}"
    print(f"{output}: {result.size_kb:.2f} KB at quality {quality}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
