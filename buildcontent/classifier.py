"""Split run attachments into test-run summary files and auxiliary content."""

from __future__ import annotations

import logging
from typing import Iterable

from .models import AttachmentMetadata, ClassifiedAttachments
from .utils import has_extension

logger = logging.getLogger(__name__)

SUMMARY_ATTACHMENT_TYPE = "tmiTestRunSummary"
SUMMARY_EXTENSION = ".trx"


def is_summary(attachment: AttachmentMetadata) -> bool:
    """Return True if the attachment is a test-run summary file.

    A declared attachment type always wins over the file extension.
    """
    if attachment.attachment_type is not None:
        return attachment.attachment_type == SUMMARY_ATTACHMENT_TYPE
    return has_extension(attachment.file_name, SUMMARY_EXTENSION)


def classify(attachments: Iterable[AttachmentMetadata]) -> ClassifiedAttachments:
    """Partition attachments, preserving their relative order."""
    summaries: list[AttachmentMetadata] = []
    others: list[AttachmentMetadata] = []
    for attachment in attachments:
        if is_summary(attachment):
            logger.debug("Attachment '%s' is a test run summary", attachment.file_name)
            summaries.append(attachment)
        else:
            others.append(attachment)
    return ClassifiedAttachments(summaries=tuple(summaries), others=tuple(others))
