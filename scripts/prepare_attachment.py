"""Prepare a local file the way the send pipeline would and report the outcome."""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
from pathlib import Path
from typing import Sequence

from media_core.config.settings import get_settings
from media_core.monitoring.logging import configure_logging
from media_core.services import AttachmentPreparer, PreparedAttachment
from media_core.text import bytes_to_human_size


def _format_result(result: PreparedAttachment) -> str:
    status = "✅" if result.success else "❌"
    if not result.success:
        return f"{status} {result.display_name or 'attachment'}: {result.message}"
    dimensions = f", {result.width}x{result.height}" if result.width else ""
    return (
        f"{status} {result.display_name or 'avatar'}: {result.disposition.value} "
        f"{result.mime_type}, {bytes_to_human_size(len(result.data))}{dimensions}"
    )


async def _prepare(path: Path, *, avatar: bool, as_file: bool) -> PreparedAttachment:
    preparer = AttachmentPreparer(get_settings())
    data = await asyncio.to_thread(path.read_bytes)
    mime_type, _ = mimetypes.guess_type(path.name)
    if avatar:
        return await preparer.prepare_avatar(data)
    if as_file:
        return await preparer.prepare_file(data, path.name, mime_type)
    return await preparer.prepare_image(data, mime_type, path.name)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", type=Path, help="image or file to prepare")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--avatar", action="store_true", help="prepare as a square in-band avatar")
    mode.add_argument("--file", dest="as_file", action="store_true", help="send as a plain file, no transcoding")
    args = parser.parse_args(argv)

    configure_logging()
    result = asyncio.run(_prepare(args.path, avatar=args.avatar, as_file=args.as_file))
    print(_format_result(result))


if __name__ == "__main__":
    main()
