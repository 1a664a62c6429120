"""Placeholder bitmaps shown while an image attachment is unavailable."""

from __future__ import annotations

from PIL import Image

from media_core.geometry.solver import solve
from media_core.geometry.types import Dimensions, ScaleMode

PLACEHOLDER_BACKGROUND = (242, 242, 247, 255)
BACKGROUND_OPACITY = 0.35
ICON_SIZE = 24


def placeholder_image(
    icon: Image.Image,
    background: Image.Image | None,
    width: int,
    height: int,
    icon_scale: float = 1.0,
) -> Image.Image:
    """Draw ``icon`` centered on a gray ``width`` x ``height`` canvas.

    ``background``, when given, is stretched over the canvas at 35% opacity
    before the icon. The icon is fitted from its nominal 24-point size.
    """

    canvas = Image.new("RGBA", (width, height), PLACEHOLDER_BACKGROUND)

    if background is not None:
        faded = background.convert("RGBA").resize((width, height))
        alpha = faded.getchannel("A").point(lambda value: round(value * BACKGROUND_OPACITY))
        faded.putalpha(alpha)
        canvas.alpha_composite(faded)

    nominal = Dimensions(ICON_SIZE * icon_scale, ICON_SIZE * icon_scale)
    icon_size = solve(nominal, Dimensions(width, height), 1.0, ScaleMode.FIT).destination
    icon_width, icon_height = icon_size.to_pixels()
    left = round((width - icon_width) * 0.5)
    top = round((height - icon_height) * 0.5)

    glyph = icon.convert("RGBA").resize((icon_width, icon_height), Image.Resampling.LANCZOS)
    canvas.alpha_composite(glyph, dest=(left, top))
    return canvas
