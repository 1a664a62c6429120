"""Value types used by the scaling solver and the renderers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ScaleMode(str, Enum):
    """How an image is brought under a bounding box."""

    FIT = "fit"
    CLIP = "clip"


@dataclass(frozen=True, slots=True)
class Dimensions:
    """Width and height in either logical or physical pixels."""

    width: float
    height: float

    @classmethod
    def from_size(cls, size: tuple[int, int]) -> Dimensions:
        """Build dimensions from a Pillow ``(width, height)`` tuple."""

        width, height = size
        return cls(float(width), float(height))

    def scaled(self, factor: float) -> Dimensions:
        return Dimensions(self.width * factor, self.height * factor)

    def to_pixels(self) -> tuple[int, int]:
        """Round to a whole-pixel size, never below 1x1."""

        return max(1, round(self.width)), max(1, round(self.height))

    def fits_within(self, bounds: Dimensions) -> bool:
        return self.width <= bounds.width and self.height <= bounds.height


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle with its origin at the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def size(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    def scaled(self, factor: float) -> Rect:
        """Return the rectangle in another unit system, e.g. ``1 / device_scale``."""

        return Rect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)

    def contained_in(self, size: Dimensions, tolerance: float = 1e-9) -> bool:
        return (
            self.x >= -tolerance
            and self.y >= -tolerance
            and self.right <= size.width + tolerance
            and self.bottom <= size.height + tolerance
        )

    def as_box(self) -> tuple[float, float, float, float]:
        """Return a Pillow-style ``(left, upper, right, lower)`` box."""

        return self.x, self.y, self.right, self.bottom


@dataclass(frozen=True, slots=True)
class ScalingResult:
    """Outcome of :func:`media_core.geometry.solver.solve`.

    ``source_crop`` is expressed in the same physical units as the solver's
    input, centered inside the physical original.
    """

    destination: Dimensions
    source_crop: Rect
    altered: bool
