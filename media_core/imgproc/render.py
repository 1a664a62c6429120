"""Raster drawing primitive: bitmap in, transform plus canvas size, bitmap out."""

from __future__ import annotations

import logging
from typing import Protocol

from PIL import Image

from media_core.errors import RenderingUnavailable
from media_core.geometry.transform import AffineTransform

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Draws a bitmap through an affine transform onto a new canvas."""

    def render(self, image: Image.Image, transform: AffineTransform, size: tuple[int, int]) -> Image.Image:
        ...


class PillowRenderer:
    """Renderer backed by Pillow's resampling and affine transform support."""

    def __init__(
        self,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
        rotate_resample: Image.Resampling = Image.Resampling.BICUBIC,
    ) -> None:
        self._resample = resample
        self._rotate_resample = rotate_resample

    def render(self, image: Image.Image, transform: AffineTransform, size: tuple[int, int]) -> Image.Image:
        """Return ``image`` drawn through ``transform`` on a ``size`` canvas.

        Pure down/up-scaling goes through ``Image.resize`` so the high quality
        filter applies; flips and rotations use ``Image.transform``, which
        expects the output-to-input mapping.
        """

        width, height = size
        if width < 1 or height < 1:
            raise RenderingUnavailable(f"Cannot create a {width}x{height} canvas")

        inverse = transform.inverted()
        try:
            if transform.is_axis_aligned_scale():
                return image.resize(size, self._resample, box=self._source_box(image, inverse, size))
            resample = Image.Resampling.NEAREST if transform.is_pixel_exact() else self._rotate_resample
            return image.transform(size, Image.Transform.AFFINE, inverse.coefficients(), resample=resample)
        except (ValueError, OSError) as exc:
            logger.warning("Pillow failed to draw %s image of size %s: %s", image.mode, image.size, exc)
            raise RenderingUnavailable(str(exc)) from exc

    @staticmethod
    def _source_box(
        image: Image.Image,
        inverse: AffineTransform,
        size: tuple[int, int],
    ) -> tuple[float, float, float, float]:
        left, top = inverse.apply(0, 0)
        right, bottom = inverse.apply(*size)
        width, height = image.size
        return (
            max(0.0, left),
            max(0.0, top),
            min(float(width), right),
            min(float(height), bottom),
        )
