"""Send-pipeline facing services."""

from .attachments import AttachmentPreparer, PreparedAttachment

__all__ = ["AttachmentPreparer", "PreparedAttachment"]
