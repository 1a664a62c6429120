"""Turns sensor-oriented bitmaps into upright ones."""

from __future__ import annotations

from enum import IntEnum

from PIL import Image

from media_core.geometry.transform import AffineTransform
from media_core.imgproc.render import PillowRenderer, Renderer


class OrientationTag(IntEnum):
    """Stored orientation of a bitmap, valued as the EXIF Orientation tag.

    Member names follow the camera orientation names used by the other
    messenger clients and describe the quarter turn that makes the picture
    upright: ``LEFT`` needs a counter-clockwise turn, ``RIGHT`` a clockwise
    one. ``*_MIRRORED`` are flipped horizontally before that turn, so EXIF 5
    is ``LEFT_MIRRORED`` and EXIF 7 is ``RIGHT_MIRRORED``.
    """

    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8

    @classmethod
    def from_exif(cls, value: object) -> OrientationTag:
        """Map a raw EXIF value to a tag; missing or unknown values are upright."""

        try:
            return cls(int(value))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return cls.UP

    @property
    def is_upright(self) -> bool:
        return self is OrientationTag.UP

    @property
    def is_mirrored(self) -> bool:
        return self in _MIRRORED

    @property
    def swaps_axes(self) -> bool:
        return self in _QUARTER_TURNS


_MIRRORED = frozenset(
    {
        OrientationTag.UP_MIRRORED,
        OrientationTag.DOWN_MIRRORED,
        OrientationTag.LEFT_MIRRORED,
        OrientationTag.RIGHT_MIRRORED,
    },
)
_QUARTER_TURNS = frozenset(
    {
        OrientationTag.LEFT,
        OrientationTag.LEFT_MIRRORED,
        OrientationTag.RIGHT,
        OrientationTag.RIGHT_MIRRORED,
    },
)


def upright_size(size: tuple[int, int], tag: OrientationTag) -> tuple[int, int]:
    """Return the canvas size of the upright bitmap."""

    width, height = size
    return (height, width) if tag.swaps_axes else (width, height)


def orientation_transform(size: tuple[int, int], tag: OrientationTag) -> AffineTransform:
    """Build the stored-to-upright pixel transform for a ``size`` bitmap.

    Mirrored tags flip across the stored width first. The rotation then pivots
    so the result lands back on a canvas starting at the origin.
    """

    width, height = size
    transform = AffineTransform.identity()
    if tag.is_mirrored:
        transform = transform.scaled(-1, 1).translated(width, 0)

    if tag in (OrientationTag.DOWN, OrientationTag.DOWN_MIRRORED):
        transform = transform.rotated(180).translated(width, height)
    elif tag in (OrientationTag.LEFT, OrientationTag.LEFT_MIRRORED):
        transform = transform.rotated(-90).translated(0, width)
    elif tag in (OrientationTag.RIGHT, OrientationTag.RIGHT_MIRRORED):
        transform = transform.rotated(90).translated(height, 0)

    return transform


def normalize(image: Image.Image, tag: OrientationTag, renderer: Renderer | None = None) -> Image.Image:
    """Return ``image`` rendered upright.

    Already upright bitmaps are returned as the same object. Raises
    :class:`~media_core.errors.RenderingUnavailable` when the renderer cannot
    draw the bitmap; callers keep the original in that case.
    """

    if tag.is_upright:
        return image

    renderer = renderer or PillowRenderer()
    return renderer.render(image, orientation_transform(image.size, tag), upright_size(image.size, tag))
