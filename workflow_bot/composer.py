"""Assemble the outbound message of a send-message activity."""

from __future__ import annotations

import logging

from .attachments import AttachmentResolver
from .models import OutboundMessage, SendMessageSpec

logger = logging.getLogger(__name__)


class MessageComposer:
    """Collect content and every resolved attachment, in declaration order."""

    def __init__(self, resolver: AttachmentResolver) -> None:
        self.resolver = resolver

    def compose(self, spec: SendMessageSpec) -> OutboundMessage:
        message = OutboundMessage(content=spec.content)
        try:
            for attachment_spec in spec.attachments:
                message.attachments.extend(self.resolver.resolve(attachment_spec))
        except Exception:
            # Release streams gathered so far.
            message.close()
            raise
        logger.debug("Composed message with %d attachment(s)", len(message.attachments))
        return message
