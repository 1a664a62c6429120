"""Pillow-backed encode/decode primitives."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Protocol

from PIL import ExifTags, Image

from media_core.errors import UnsupportedImage
from media_core.imgproc.orientation import OrientationTag

PNG_MIME = "image/png"
JPEG_MIME = "image/jpeg"
DEFAULT_JPEG_QUALITY = 80


def is_lossless(mime_type: str | None) -> bool:
    """PNG is lossless and only shrinks by dimensions; everything else is JPEG."""

    return mime_type == PNG_MIME


def encoded_mime(mime_type: str | None) -> str:
    return PNG_MIME if is_lossless(mime_type) else JPEG_MIME


@dataclass(slots=True)
class DecodedImage:
    """Bitmap read from attachment bytes together with its stored orientation."""

    image: Image.Image
    orientation: OrientationTag
    format: str | None


class Codec(Protocol):
    def encode(self, image: Image.Image, mime_type: str | None, quality: int) -> bytes:
        ...

    def decode(self, data: bytes) -> DecodedImage:
        ...


class PillowCodec:
    """Encodes PNG or JPEG and decodes anything Pillow can open."""

    def encode(self, image: Image.Image, mime_type: str | None, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
        """Return ``image`` encoded for ``mime_type``; PNG ignores ``quality``."""

        buffer = BytesIO()
        if is_lossless(mime_type):
            image.save(buffer, format="PNG")
        else:
            _flatten(image).save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()

    def decode(self, data: bytes) -> DecodedImage:
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                orientation = OrientationTag.from_exif(img.getexif().get(ExifTags.Base.Orientation))
                image_format = img.format
                image = img.copy()
        except (OSError, Image.DecompressionBombError) as exc:
            raise UnsupportedImage("Attachment is not a supported image.") from exc
        return DecodedImage(image=image, orientation=orientation, format=image_format)


def _flatten(image: Image.Image) -> Image.Image:
    """Convert to RGB for JPEG, compositing transparency over white."""

    if image.mode == "RGB":
        return image
    if image.mode in ("P", "LA"):
        image = image.convert("RGBA")
    if image.mode == "RGBA":
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    return image.convert("RGB")
