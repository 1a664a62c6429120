"""Media pipeline configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from media_core.transport.admission import AdmissionLimits


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


@dataclass(frozen=True, slots=True)
class MediaSettings:
    """Tunables for attachment preparation; sizes are in physical pixels."""

    environment: str = "dev"
    log_level: str = "INFO"

    # Fallbacks until the server advertises its own limits.
    inband_max_bytes: int = 1 << 18
    upload_max_bytes: int = 1 << 23

    shrink_factor: float = 0.70710678118
    max_shrink_iterations: int = 20
    jpeg_quality: int = 80

    max_bitmap_size: int = 1024
    avatar_size: int = 128
    image_preview_size: int = 64
    reply_thumbnail_size: int = 36
    preview_max_file_name_length: int = 16

    @property
    def default_limits(self) -> AdmissionLimits:
        return AdmissionLimits(inband_max=self.inband_max_bytes, upload_max=self.upload_max_bytes)


def _build_settings() -> MediaSettings:
    _load_env_file()

    return MediaSettings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        inband_max_bytes=int(os.getenv("MEDIA_INBAND_MAX_BYTES", str(1 << 18))),
        upload_max_bytes=int(os.getenv("MEDIA_UPLOAD_MAX_BYTES", str(1 << 23))),
        shrink_factor=float(os.getenv("MEDIA_SHRINK_FACTOR", "0.70710678118")),
        max_shrink_iterations=int(os.getenv("MEDIA_MAX_SHRINK_ITERATIONS", "20")),
        jpeg_quality=int(os.getenv("MEDIA_JPEG_QUALITY", "80")),
        max_bitmap_size=int(os.getenv("MEDIA_MAX_BITMAP_SIZE", "1024")),
        avatar_size=int(os.getenv("MEDIA_AVATAR_SIZE", "128")),
        image_preview_size=int(os.getenv("MEDIA_IMAGE_PREVIEW_SIZE", "64")),
        reply_thumbnail_size=int(os.getenv("MEDIA_REPLY_THUMBNAIL_SIZE", "36")),
        preview_max_file_name_length=int(os.getenv("MEDIA_PREVIEW_MAX_FILE_NAME_LENGTH", "16")),
    )


@lru_cache(maxsize=1)
def get_settings() -> MediaSettings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()
