"""Fixed-size resizing for avatars, previews and outgoing images."""

from __future__ import annotations

from PIL import Image

from media_core.geometry.solver import solve
from media_core.geometry.transform import AffineTransform
from media_core.geometry.types import Dimensions, ScaleMode
from media_core.imgproc.render import PillowRenderer, Renderer


def resize_to_bounds(
    image: Image.Image,
    width: float,
    height: float,
    mode: ScaleMode = ScaleMode.FIT,
    renderer: Renderer | None = None,
) -> Image.Image:
    """Shrink ``image`` under ``width`` x ``height`` physical pixels.

    Returns the same object when no scaling or cropping is needed.
    """

    scaling = solve(Dimensions.from_size(image.size), Dimensions(width, height), 1.0, mode)
    if not scaling.altered:
        return image

    size = scaling.destination.to_pixels()
    renderer = renderer or PillowRenderer()
    return renderer.render(image, AffineTransform.mapping(scaling.source_crop, *size), size)
