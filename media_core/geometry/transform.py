"""Two-dimensional affine transforms in top-left-origin pixel coordinates."""

from __future__ import annotations

import math
from dataclasses import dataclass

from media_core.errors import PreconditionViolation
from media_core.geometry.types import Rect

# cos/sin for quarter turns, so rotated pixel grids stay exact.
_QUARTER_TURNS = {0: (1.0, 0.0), 90: (0.0, 1.0), 180: (-1.0, 0.0), 270: (0.0, -1.0)}


@dataclass(frozen=True, slots=True)
class AffineTransform:
    """Maps ``(x, y)`` to ``(a*x + b*y + c, d*x + e*y + f)``.

    The coefficient order matches Pillow's ``Image.Transform.AFFINE`` data,
    with ``y`` growing downwards.
    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 1.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> AffineTransform:
        return cls(c=tx, f=ty)

    @classmethod
    def scaling(cls, sx: float, sy: float) -> AffineTransform:
        return cls(a=sx, e=sy)

    @classmethod
    def rotation(cls, degrees: float) -> AffineTransform:
        """Rotate about the origin; positive angles turn clockwise on screen."""

        quarter = _QUARTER_TURNS.get(degrees % 360)
        if quarter is not None:
            cos, sin = quarter
        else:
            radians = math.radians(degrees)
            cos, sin = math.cos(radians), math.sin(radians)
        return cls(a=cos, b=-sin, d=sin, e=cos)

    @classmethod
    def mapping(cls, source: Rect, width: float, height: float) -> AffineTransform:
        """Map the ``source`` rectangle onto a ``width`` x ``height`` canvas."""

        if source.width <= 0 or source.height <= 0:
            raise PreconditionViolation("Source rectangle must have positive area")
        return cls.translation(-source.x, -source.y).then(
            cls.scaling(width / source.width, height / source.height),
        )

    def then(self, other: AffineTransform) -> AffineTransform:
        """Return the transform that applies ``self`` first and ``other`` second."""

        return AffineTransform(
            a=other.a * self.a + other.b * self.d,
            b=other.a * self.b + other.b * self.e,
            c=other.a * self.c + other.b * self.f + other.c,
            d=other.d * self.a + other.e * self.d,
            e=other.d * self.b + other.e * self.e,
            f=other.d * self.c + other.e * self.f + other.f,
        )

    def translated(self, tx: float, ty: float) -> AffineTransform:
        return self.then(AffineTransform.translation(tx, ty))

    def rotated(self, degrees: float) -> AffineTransform:
        return self.then(AffineTransform.rotation(degrees))

    def scaled(self, sx: float, sy: float) -> AffineTransform:
        return self.then(AffineTransform.scaling(sx, sy))

    @property
    def determinant(self) -> float:
        return self.a * self.e - self.b * self.d

    def inverted(self) -> AffineTransform:
        det = self.determinant
        if det == 0:
            raise PreconditionViolation("Transform is not invertible")
        a, b, d, e = self.e / det, -self.b / det, -self.d / det, self.a / det
        return AffineTransform(
            a=a,
            b=b,
            c=-(a * self.c + b * self.f),
            d=d,
            e=e,
            f=-(d * self.c + e * self.f),
        )

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return self.a * x + self.b * y + self.c, self.d * x + self.e * y + self.f

    def is_axis_aligned_scale(self) -> bool:
        """True when the transform only scales up or down and shifts."""

        return self.b == 0 and self.d == 0 and self.a > 0 and self.e > 0

    def is_pixel_exact(self) -> bool:
        """True for flips, quarter turns and whole-pixel shifts."""

        linear = (self.a, self.b, self.d, self.e)
        return (
            all(value in (-1.0, 0.0, 1.0) for value in linear)
            and abs(self.determinant) == 1
            and float(self.c).is_integer()
            and float(self.f).is_integer()
        )

    def coefficients(self) -> tuple[float, float, float, float, float, float]:
        return self.a, self.b, self.c, self.d, self.e, self.f
