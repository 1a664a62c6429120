"""Decides whether an attachment travels inside the message, is uploaded, or is refused."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# 256 KiB; does not account for base64 overhead.
DEFAULT_INBAND_MAX_BYTES = 1 << 18
DEFAULT_UPLOAD_MAX_BYTES = 1 << 23


class Admission(str, Enum):
    """Transport disposition for an attachment."""

    EMBED = "embed"
    UPLOAD = "upload"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class AdmissionLimits:
    """In-band and upload ceilings in bytes, as advertised by the server."""

    inband_max: int = DEFAULT_INBAND_MAX_BYTES
    upload_max: int = DEFAULT_UPLOAD_MAX_BYTES


def admit(size: int, limits: AdmissionLimits) -> Admission:
    """Map an attachment byte size to its transport disposition."""

    if size <= limits.inband_max:
        return Admission.EMBED
    if size <= limits.upload_max:
        return Admission.UPLOAD
    return Admission.REJECT
