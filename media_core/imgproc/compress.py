"""Shrink a bitmap until its encoded form fits a byte budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from PIL import Image

from media_core.errors import BudgetUnsatisfiable, PreconditionViolation
from media_core.geometry.solver import solve
from media_core.geometry.transform import AffineTransform
from media_core.geometry.types import Dimensions, ScaleMode
from media_core.imgproc.codec import DEFAULT_JPEG_QUALITY, Codec, PillowCodec
from media_core.imgproc.render import PillowRenderer, Renderer

logger = logging.getLogger(__name__)

MIN_BUDGET_BYTES = 100
DEFAULT_SHRINK_FACTOR = 0.70710678118  # 1/sqrt(2): half the area every two steps
DEFAULT_MAX_ITERATIONS = 20


@dataclass(frozen=True, slots=True)
class CompressionBudget:
    """Byte ceiling for the encoded image; ``mime_type`` picks PNG or JPEG."""

    max_bytes: int
    mime_type: str | None = None


@dataclass(slots=True)
class ShrinkResult:
    """Final bitmap, its encoding and the pixel size at every step."""

    image: Image.Image
    data: bytes
    sizes: list[tuple[int, int]] = field(default_factory=list)

    @property
    def iterations(self) -> int:
        return len(self.sizes) - 1


def shrink_to_budget(
    image: Image.Image,
    budget: CompressionBudget,
    *,
    codec: Codec | None = None,
    renderer: Renderer | None = None,
    shrink_factor: float = DEFAULT_SHRINK_FACTOR,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> ShrinkResult:
    """Encode ``image`` and keep shrinking it until the bytes fit ``budget``.

    Each step fits the bitmap under its own size times ``shrink_factor`` and
    re-encodes. Stops with :class:`BudgetUnsatisfiable` when the size can no
    longer change or after ``max_iterations`` steps.
    """

    if budget.max_bytes <= MIN_BUDGET_BYTES:
        raise PreconditionViolation(f"Byte budget must exceed {MIN_BUDGET_BYTES} bytes, got {budget.max_bytes}")
    if not 0 < shrink_factor < 1:
        raise PreconditionViolation(f"Shrink factor must be in (0, 1), got {shrink_factor}")
    if max_iterations < 1:
        raise PreconditionViolation(f"Iteration cap must be positive, got {max_iterations}")

    codec = codec or PillowCodec()
    renderer = renderer or PillowRenderer()

    current = image
    data = codec.encode(current, budget.mime_type, quality)
    sizes = [current.size]

    while len(data) > budget.max_bytes:
        if len(sizes) > max_iterations:
            raise _unsatisfiable(budget, data, len(sizes) - 1, "iteration cap reached")

        physical = Dimensions.from_size(current.size)
        scaling = solve(physical, physical.scaled(shrink_factor), 1.0, ScaleMode.FIT)
        next_size = scaling.destination.to_pixels()
        if not scaling.altered or next_size == current.size:
            raise _unsatisfiable(budget, data, len(sizes) - 1, "image is already at its minimum size")

        transform = AffineTransform.mapping(scaling.source_crop, *next_size)
        current = renderer.render(current, transform, next_size)
        data = codec.encode(current, budget.mime_type, quality)
        sizes.append(current.size)
        logger.debug("Shrunk to %sx%s, %d bytes (budget %d)", *current.size, len(data), budget.max_bytes)

    if len(sizes) > 1:
        logger.info(
            "Fitted %sx%s image into %d bytes at %sx%s after %d steps",
            *image.size,
            budget.max_bytes,
            *current.size,
            len(sizes) - 1,
        )
    return ShrinkResult(image=current, data=data, sizes=sizes)


def compress_under_budget(
    image: Image.Image,
    budget: CompressionBudget,
    **options: Any,
) -> Image.Image:
    """Return a bitmap whose encoding fits ``budget``; see :func:`shrink_to_budget`."""

    return shrink_to_budget(image, budget, **options).image


def _unsatisfiable(budget: CompressionBudget, data: bytes, iterations: int, reason: str) -> BudgetUnsatisfiable:
    return BudgetUnsatisfiable(
        f"Cannot fit image into {budget.max_bytes} bytes: {reason} ({len(data)} bytes after {iterations} steps)",
        max_bytes=budget.max_bytes,
        last_size=len(data),
        iterations=iterations,
    )
