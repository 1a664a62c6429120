"""Bitmap processing: codec, renderer, orientation and byte-budget shrinking."""

from .codec import Codec, DecodedImage, PillowCodec
from .compress import CompressionBudget, ShrinkResult, compress_under_budget, shrink_to_budget
from .orientation import OrientationTag, normalize
from .render import PillowRenderer, Renderer
from .resize import resize_to_bounds

__all__ = [
    "Codec",
    "CompressionBudget",
    "DecodedImage",
    "OrientationTag",
    "PillowCodec",
    "PillowRenderer",
    "Renderer",
    "ShrinkResult",
    "compress_under_budget",
    "normalize",
    "resize_to_bounds",
    "shrink_to_budget",
]
