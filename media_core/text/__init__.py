"""Text helpers for attachment previews and error messages."""

from .formatting import bytes_to_human_size, preview_file_name

__all__ = ["bytes_to_human_size", "preview_file_name"]
