"""Pure geometry: value types, the scaling solver and affine transforms."""

from .solver import solve
from .transform import AffineTransform
from .types import Dimensions, Rect, ScaleMode, ScalingResult

__all__ = ["AffineTransform", "Dimensions", "Rect", "ScaleMode", "ScalingResult", "solve"]
