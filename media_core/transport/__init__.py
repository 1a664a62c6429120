"""Attachment admission against server-advertised size ceilings."""

from .admission import Admission, AdmissionLimits, admit
from .limits import ServerLimits, SessionLimitsFeed

__all__ = ["Admission", "AdmissionLimits", "ServerLimits", "SessionLimitsFeed", "admit"]
