"""Error taxonomy shared by the media core."""

from __future__ import annotations


class MediaCoreError(Exception):
    """Base class for every error raised by the media core."""


class PreconditionViolation(MediaCoreError, ValueError):
    """Raised when a caller passes arguments outside the documented domain."""


class RenderingUnavailable(MediaCoreError, RuntimeError):
    """Raised when the renderer cannot produce an output canvas for a bitmap."""


class UnsupportedImage(MediaCoreError, ValueError):
    """Raised when attachment bytes cannot be decoded as an image."""


class BudgetUnsatisfiable(MediaCoreError):
    """Raised when no reachable image size encodes under the byte budget."""

    def __init__(self, message: str, *, max_bytes: int, last_size: int, iterations: int) -> None:
        self.max_bytes = max_bytes
        self.last_size = last_size
        self.iterations = iterations
        super().__init__(message)
