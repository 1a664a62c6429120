"""Prepares outgoing images, files and avatars for the send pipeline."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from PIL import Image

from media_core.config.settings import MediaSettings
from media_core.errors import BudgetUnsatisfiable, RenderingUnavailable, UnsupportedImage
from media_core.geometry.types import ScaleMode
from media_core.imgproc.codec import JPEG_MIME, Codec, DecodedImage, PillowCodec, encoded_mime
from media_core.imgproc.compress import CompressionBudget, ShrinkResult, shrink_to_budget
from media_core.imgproc.orientation import normalize
from media_core.imgproc.render import PillowRenderer, Renderer
from media_core.imgproc.resize import resize_to_bounds
from media_core.text.formatting import bytes_to_human_size, preview_file_name
from media_core.transport.admission import Admission, admit
from media_core.transport.limits import SessionLimitsFeed

logger = logging.getLogger(__name__)

DEFAULT_FILE_MIME = "application/octet-stream"


@dataclass(slots=True)
class PreparedAttachment:
    """Outcome of preparing one attachment for sending."""

    success: bool
    disposition: Admission
    data: bytes = b""
    mime_type: str | None = None
    file_name: str | None = None
    display_name: str | None = None
    width: int | None = None
    height: int | None = None
    message: str = ""


class AttachmentPreparer:
    """Runs decode, orientation, scaling, byte budgeting and admission off the event loop."""

    def __init__(
        self,
        settings: MediaSettings,
        *,
        codec: Codec | None = None,
        renderer: Renderer | None = None,
        limits: SessionLimitsFeed | None = None,
    ) -> None:
        self._settings = settings
        self._codec = codec or PillowCodec()
        self._renderer = renderer or PillowRenderer()
        self._limits = limits or SessionLimitsFeed(settings.default_limits)

    @property
    def limits(self) -> SessionLimitsFeed:
        return self._limits

    async def prepare_image(
        self,
        data: bytes,
        mime_type: str | None = None,
        file_name: str | None = None,
    ) -> PreparedAttachment:
        """Upright, downscale and budget an image picked by the user."""

        return await asyncio.to_thread(self._prepare_image, data, mime_type, file_name)

    async def prepare_file(
        self,
        data: bytes,
        file_name: str,
        mime_type: str | None = None,
    ) -> PreparedAttachment:
        """Admit an arbitrary file as-is; files are never transcoded."""

        return await asyncio.to_thread(self._prepare_file, data, file_name, mime_type)

    async def prepare_avatar(self, data: bytes) -> PreparedAttachment:
        """Crop an avatar to a square and fit it under the in-band ceiling."""

        return await asyncio.to_thread(self._prepare_avatar, data)

    def thumbnail(self, image: Image.Image, size: int | None = None) -> Image.Image:
        """Square preview, e.g. for quoted replies; defaults to the preview size."""

        size = size or self._settings.image_preview_size
        return resize_to_bounds(image, size, size, ScaleMode.CLIP, self._renderer)

    def _prepare_image(self, data: bytes, mime_type: str | None, file_name: str | None) -> PreparedAttachment:
        limits = self._limits.current()
        try:
            decoded = self._codec.decode(data)
        except UnsupportedImage as exc:
            return self._rejected(file_name, str(exc))

        max_size = self._settings.max_bitmap_size
        image = self._fit(self._upright(decoded), max_size, ScaleMode.FIT)
        try:
            result = self._shrink(image, limits.upload_max, mime_type)
        except (BudgetUnsatisfiable, RenderingUnavailable) as exc:
            logger.debug("Image %s does not fit the upload limit: %s", file_name, exc)
            return self._too_large(file_name, limits.upload_max)

        disposition = admit(len(result.data), limits)
        logger.info("Image %s prepared: %d bytes, %s", file_name, len(result.data), disposition.value)
        width, height = result.image.size
        return PreparedAttachment(
            success=True,
            disposition=disposition,
            data=result.data,
            mime_type=encoded_mime(mime_type),
            file_name=file_name,
            display_name=self._display_name(file_name),
            width=width,
            height=height,
        )

    def _prepare_file(self, data: bytes, file_name: str, mime_type: str | None) -> PreparedAttachment:
        limits = self._limits.current()
        disposition = admit(len(data), limits)
        if disposition is Admission.REJECT:
            return self._too_large(file_name, limits.upload_max)

        logger.info("File %s prepared: %d bytes, %s", file_name, len(data), disposition.value)
        return PreparedAttachment(
            success=True,
            disposition=disposition,
            data=data,
            mime_type=mime_type or DEFAULT_FILE_MIME,
            file_name=file_name,
            display_name=self._display_name(file_name),
        )

    def _prepare_avatar(self, data: bytes) -> PreparedAttachment:
        limits = self._limits.current()
        try:
            decoded = self._codec.decode(data)
        except UnsupportedImage as exc:
            return self._rejected(None, str(exc))

        image = self._fit(self._upright(decoded), self._settings.avatar_size, ScaleMode.CLIP)
        try:
            result = self._shrink(image, limits.inband_max, JPEG_MIME)
        except (BudgetUnsatisfiable, RenderingUnavailable) as exc:
            logger.debug("Avatar does not fit the in-band limit: %s", exc)
            return self._too_large(None, limits.inband_max)

        width, height = result.image.size
        return PreparedAttachment(
            success=True,
            disposition=Admission.EMBED,
            data=result.data,
            mime_type=JPEG_MIME,
            width=width,
            height=height,
        )

    def _upright(self, decoded: DecodedImage) -> Image.Image:
        try:
            return normalize(decoded.image, decoded.orientation, self._renderer)
        except RenderingUnavailable as exc:
            logger.warning("Keeping %s image unrotated: %s", decoded.orientation.name, exc)
            return decoded.image

    def _fit(self, image: Image.Image, size: int, mode: ScaleMode) -> Image.Image:
        try:
            return resize_to_bounds(image, size, size, mode, self._renderer)
        except RenderingUnavailable as exc:
            logger.warning("Keeping %sx%s image unscaled: %s", *image.size, exc)
            return image

    def _shrink(self, image: Image.Image, max_bytes: int, mime_type: str | None) -> ShrinkResult:
        return shrink_to_budget(
            image,
            CompressionBudget(max_bytes=max_bytes, mime_type=mime_type),
            codec=self._codec,
            renderer=self._renderer,
            shrink_factor=self._settings.shrink_factor,
            max_iterations=self._settings.max_shrink_iterations,
            quality=self._settings.jpeg_quality,
        )

    def _display_name(self, file_name: str | None) -> str | None:
        if file_name is None:
            return None
        return preview_file_name(file_name, self._settings.preview_max_file_name_length)

    def _too_large(self, file_name: str | None, limit: int) -> PreparedAttachment:
        return self._rejected(file_name, f"The file size exceeds the limit {bytes_to_human_size(limit)}")

    def _rejected(self, file_name: str | None, message: str) -> PreparedAttachment:
        logger.warning("Attachment %s rejected: %s", file_name, message)
        return PreparedAttachment(
            success=False,
            disposition=Admission.REJECT,
            file_name=file_name,
            display_name=self._display_name(file_name),
            message=message,
        )
