"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw or raw.lower() == "none":
        return None
    return int(raw)


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    output_ceiling_kb: float = 50.0
    resample_filter: str = "bicubic"
    apply_exif_orientation: bool = False
    default_authority: str = "nsdl"
    max_image_pixels: int | None = None


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        output_ceiling_kb=float(os.getenv("OUTPUT_CEILING_KB", "50")),
        resample_filter=os.getenv("RESAMPLE_FILTER", "bicubic").lower(),
        apply_exif_orientation=_env_flag("APPLY_EXIF_ORIENTATION", False),
        default_authority=os.getenv("DEFAULT_AUTHORITY", "nsdl").lower(),
        max_image_pixels=_env_int("MAX_IMAGE_PIXELS"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
