"""Tests for the attachment preparation service."""

from __future__ import annotations

import asyncio
import random
from io import BytesIO

import pytest
import pytest_mock
from PIL import Image

from media_core.config.settings import MediaSettings
from media_core.errors import RenderingUnavailable
from media_core.geometry.transform import AffineTransform
from media_core.imgproc.codec import JPEG_MIME, PNG_MIME
from media_core.services import AttachmentPreparer
from media_core.transport import Admission, AdmissionLimits, SessionLimitsFeed


class BrokenRenderer:
    def render(self, image: Image.Image, transform: AffineTransform, size: tuple[int, int]) -> Image.Image:
        raise RenderingUnavailable("no drawing surface")


def _encode(image: Image.Image, fmt: str, **params: object) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def _noise_png(width: int, height: int) -> bytes:
    raw = random.Random(3).randbytes(width * height * 3)
    return _encode(Image.frombytes("RGB", (width, height), raw), "PNG")


def _rotated_jpeg() -> bytes:
    exif = Image.Exif()
    exif[0x0112] = 6
    return _encode(Image.new("RGB", (40, 20), (0, 120, 200)), "JPEG", exif=exif)


@pytest.fixture
def preparer() -> AttachmentPreparer:
    return AttachmentPreparer(MediaSettings())


@pytest.mark.asyncio
async def test_small_image_is_embedded(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_image(_encode(Image.new("RGB", (32, 32), "red"), "PNG"), PNG_MIME, "dot.png")

    assert result.success
    assert result.disposition is Admission.EMBED
    assert result.mime_type == PNG_MIME
    assert (result.width, result.height) == (32, 32)
    assert result.data.startswith(b"\x89PNG")


@pytest.mark.asyncio
async def test_large_image_is_fitted_to_max_bitmap_size(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_image(_encode(Image.new("RGB", (2048, 1024), "white"), "PNG"), PNG_MIME)

    assert (result.width, result.height) == (1024, 512)
    assert Image.open(BytesIO(result.data)).size == (1024, 512)


@pytest.mark.asyncio
async def test_exif_orientation_is_applied(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_image(_rotated_jpeg(), JPEG_MIME, "camera.jpg")

    assert result.success
    assert (result.width, result.height) == (20, 40)
    assert result.mime_type == JPEG_MIME


@pytest.mark.asyncio
async def test_rendering_failure_keeps_stored_orientation() -> None:
    preparer = AttachmentPreparer(MediaSettings(), renderer=BrokenRenderer())

    result = await preparer.prepare_image(_rotated_jpeg(), JPEG_MIME)

    assert result.success
    assert (result.width, result.height) == (40, 20)


@pytest.mark.asyncio
async def test_rendering_failure_keeps_large_image_unscaled() -> None:
    preparer = AttachmentPreparer(MediaSettings(), renderer=BrokenRenderer())

    result = await preparer.prepare_image(_encode(Image.new("RGB", (2048, 1024), "white"), "PNG"), PNG_MIME)

    assert result.success
    assert (result.width, result.height) == (2048, 1024)


@pytest.mark.asyncio
async def test_rendering_failure_while_shrinking_is_reported_as_too_large() -> None:
    preparer = AttachmentPreparer(MediaSettings(upload_max_bytes=1000), renderer=BrokenRenderer())

    result = await preparer.prepare_image(_noise_png(64, 64), PNG_MIME, "noise.png")

    assert not result.success
    assert result.disposition is Admission.REJECT
    assert result.message == "The file size exceeds the limit 1000 Bytes"


@pytest.mark.asyncio
async def test_sixteen_bit_grayscale_image_is_fitted(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_image(_encode(Image.new("I;16", (2048, 64), 1000), "PNG"), PNG_MIME)

    assert result.success
    assert (result.width, result.height) == (1024, 32)


@pytest.mark.asyncio
async def test_decompression_bomb_is_rejected(
    preparer: AttachmentPreparer, mocker: pytest_mock.MockerFixture
) -> None:
    data = _encode(Image.new("RGB", (300, 300)), "PNG")
    mocker.patch.object(Image, "MAX_IMAGE_PIXELS", 40_000)

    image_result = await preparer.prepare_image(data, PNG_MIME, "huge.png")
    avatar_result = await preparer.prepare_avatar(data)

    assert not image_result.success
    assert image_result.message == "Attachment is not a supported image."
    assert not avatar_result.success

@pytest.mark.asyncio
async def test_image_over_inband_limit_is_uploaded() -> None:
    feed = SessionLimitsFeed(AdmissionLimits(inband_max=200, upload_max=1 << 23))
    preparer = AttachmentPreparer(MediaSettings(), limits=feed)

    result = await preparer.prepare_image(_noise_png(64, 64), PNG_MIME)

    assert result.success
    assert result.disposition is Admission.UPLOAD


@pytest.mark.asyncio
async def test_image_that_cannot_fit_upload_limit_is_rejected() -> None:
    preparer = AttachmentPreparer(MediaSettings(upload_max_bytes=1000, max_shrink_iterations=2))

    result = await preparer.prepare_image(_noise_png(256, 256), PNG_MIME, "noise.png")

    assert not result.success
    assert result.disposition is Admission.REJECT
    assert result.message == "The file size exceeds the limit 1000 Bytes"
    assert result.data == b""


@pytest.mark.asyncio
async def test_unsupported_bytes_are_rejected(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_image(b"%PDF-1.7 not a picture", None, "doc.pdf")

    assert not result.success
    assert result.message == "Attachment is not a supported image."


@pytest.mark.asyncio
async def test_file_between_limits_is_uploaded(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_file(b"\0" * 300_000, "a_very_long_file_name.jpeg")

    assert result.success
    assert result.disposition is Admission.UPLOAD
    assert result.mime_type == "application/octet-stream"
    assert result.display_name == "a_very_l…ame.jpeg"


@pytest.mark.asyncio
async def test_file_over_upload_limit_is_rejected(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_file(b"\0" * 9_000_000, "backup.tar", "application/x-tar")

    assert result.disposition is Admission.REJECT
    assert result.message == "The file size exceeds the limit 8.0 MB"


@pytest.mark.asyncio
async def test_server_limits_apply_to_next_attachment(preparer: AttachmentPreparer) -> None:
    preparer.limits.update({"maxMessageSize": 1024, "maxFileUploadSize": 4096})

    result = await preparer.prepare_file(b"\0" * 5000, "notes.txt", "text/plain")

    assert result.disposition is Admission.REJECT
    assert result.message == "The file size exceeds the limit 4.0 KB"


@pytest.mark.asyncio
async def test_avatar_is_cropped_square_jpeg(preparer: AttachmentPreparer) -> None:
    result = await preparer.prepare_avatar(_encode(Image.new("RGBA", (300, 200), (0, 200, 0, 128)), "PNG"))

    assert result.success
    assert result.disposition is Admission.EMBED
    assert result.mime_type == JPEG_MIME
    assert (result.width, result.height) == (128, 128)
    assert len(result.data) <= 1 << 18


@pytest.mark.asyncio
async def test_preparation_runs_off_the_event_loop(
    preparer: AttachmentPreparer, mocker: pytest_mock.MockerFixture
) -> None:
    to_thread = mocker.spy(asyncio, "to_thread")

    await preparer.prepare_file(b"abc", "a.txt")

    to_thread.assert_called_once()


@pytest.mark.asyncio
async def test_avatar_rendering_failure_keeps_unscaled_image() -> None:
    preparer = AttachmentPreparer(MediaSettings(), renderer=BrokenRenderer())

    result = await preparer.prepare_avatar(_encode(Image.new("RGB", (300, 200), "blue"), "PNG"))

    assert result.success
    assert result.disposition is Admission.EMBED
    assert (result.width, result.height) == (300, 200)


def test_thumbnails_are_square(preparer: AttachmentPreparer) -> None:
    image = Image.new("RGB", (200, 100))

    assert preparer.thumbnail(image).size == (64, 64)
    assert preparer.thumbnail(image, 36).size == (36, 36)
