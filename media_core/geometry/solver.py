"""Destination size and source crop computation for fit/clip scaling."""

from __future__ import annotations

from media_core.errors import PreconditionViolation
from media_core.geometry.types import Dimensions, Rect, ScaleMode, ScalingResult


def solve(
    original: Dimensions,
    bounds: Dimensions,
    device_scale: float = 1.0,
    mode: ScaleMode = ScaleMode.FIT,
) -> ScalingResult:
    """Compute how ``original`` is brought under ``bounds``.

    ``original`` is in logical units and is multiplied by ``device_scale``
    before solving; ``bounds``, the destination and the source crop are all
    physical. Fit keeps the whole picture and may under-fill one axis, Clip
    crops the worse-fitting axis so the destination lands on ``bounds``.
    Images are never enlarged.

    Physical extents below one pixel are lifted to one so the crop always has
    positive area and stays inside the original.
    """

    if not (bounds.width > 0 and bounds.height > 0):
        raise PreconditionViolation(f"Bounds must be positive, got {bounds.width}x{bounds.height}")
    if not device_scale > 0:
        raise PreconditionViolation(f"Device scale must be positive, got {device_scale}")
    if original.width < 0 or original.height < 0:
        raise PreconditionViolation(f"Original size must not be negative, got {original.width}x{original.height}")

    physical_width = max(1.0, original.width * device_scale)
    physical_height = max(1.0, original.height * device_scale)

    # 1.0 means the axis is already within its bound.
    scale_x = min(physical_width, bounds.width) / physical_width
    scale_y = min(physical_height, bounds.height) / physical_height
    scale = max(scale_x, scale_y) if mode is ScaleMode.CLIP else min(scale_x, scale_y)

    destination = Dimensions(
        max(1.0, min(bounds.width, physical_width * scale)),
        max(1.0, min(bounds.height, physical_height * scale)),
    )

    src_width = min(physical_width, max(1.0, destination.width / scale))
    src_height = min(physical_height, max(1.0, destination.height / scale))
    crop = Rect(
        x=0.5 * (physical_width - src_width),
        y=0.5 * (physical_height - src_height),
        width=src_width,
        height=src_height,
    )

    return ScalingResult(
        destination=destination,
        source_crop=crop,
        altered=physical_width != destination.width or physical_height != destination.height,
    )
