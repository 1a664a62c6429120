"""Latest attachment limits advertised by the messaging server."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from media_core.transport.admission import AdmissionLimits

logger = logging.getLogger(__name__)


class ServerLimits(BaseModel):
    """Subset of the server's connect-time parameters that bound attachments."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    max_message_size: int | None = Field(default=None, alias="maxMessageSize", gt=0)
    max_file_upload_size: int | None = Field(default=None, alias="maxFileUploadSize", gt=0)

    def to_limits(self, defaults: AdmissionLimits) -> AdmissionLimits:
        return AdmissionLimits(
            inband_max=self.max_message_size or defaults.inband_max,
            upload_max=self.max_file_upload_size or defaults.upload_max,
        )


class SessionLimitsFeed:
    """Holds the limits for the current session, falling back to defaults."""

    def __init__(self, defaults: AdmissionLimits | None = None) -> None:
        self._defaults = defaults or AdmissionLimits()
        self._current = self._defaults
        self._lock = threading.Lock()

    @property
    def defaults(self) -> AdmissionLimits:
        return self._defaults

    def current(self) -> AdmissionLimits:
        """Return the most recently advertised limits."""

        with self._lock:
            return self._current

    def update(self, params: Mapping[str, Any] | None) -> AdmissionLimits:
        """Apply server parameters received on (re)connect or a config push."""

        try:
            parsed = ServerLimits.model_validate(params or {})
        except ValidationError as exc:
            logger.warning("Ignoring invalid server limits %s: %s", params, exc)
            parsed = ServerLimits()

        limits = parsed.to_limits(self._defaults)
        with self._lock:
            self._current = limits
        logger.info("Attachment limits: in-band %d bytes, upload %d bytes", limits.inband_max, limits.upload_max)
        return limits

    def reset(self) -> None:
        """Forget server-advertised values, e.g. after a disconnect."""

        with self._lock:
            self._current = self._defaults
