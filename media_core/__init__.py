"""Scaling, orientation and byte-budget compression for messenger attachments."""

from .avatars.colors import Color, color_for
from .errors import BudgetUnsatisfiable, MediaCoreError, PreconditionViolation, RenderingUnavailable, UnsupportedImage
from .geometry import Dimensions, Rect, ScaleMode, ScalingResult, solve
from .imgproc import CompressionBudget, OrientationTag, compress_under_budget, normalize
from .transport import Admission, AdmissionLimits, admit

__all__ = [
    "Admission",
    "AdmissionLimits",
    "BudgetUnsatisfiable",
    "Color",
    "CompressionBudget",
    "Dimensions",
    "MediaCoreError",
    "OrientationTag",
    "PreconditionViolation",
    "Rect",
    "RenderingUnavailable",
    "ScaleMode",
    "ScalingResult",
    "UnsupportedImage",
    "admit",
    "color_for",
    "compress_under_budget",
    "normalize",
    "solve",
]
