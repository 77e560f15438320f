"""Turn declared attachments into streams ready to be sent."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from .errors import (
    AttachmentDecodeError,
    AttachmentNotFoundError,
    MessageNotFoundError,
    NoAttachmentsError,
)
from .messaging_client import MessageService
from .models import AttachmentInfo, AttachmentSpec, MessageDescriptor, ResolvedAttachment
from .resources import ResourceLoader
from .utils import filename_from_path

logger = logging.getLogger(__name__)


class RemoteAttachmentFetcher:
    """Download an attachment of an already sent message and decode it."""

    def __init__(self, messages: MessageService) -> None:
        self.messages = messages

    def fetch(self, stream_id: str, message_id: str, attachment_id: str) -> bytes:
        # The stream of the source message, not the destination stream.
        encoded = self.messages.get_attachment(stream_id, message_id, attachment_id)
        try:
            return base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise AttachmentDecodeError(message_id, attachment_id) from exc


class AttachmentResolver:
    """Resolve one ``AttachmentSpec`` into zero or more attachments.

    The local resource (``content_path``) and the forward reference
    (``message_id``/``attachment_id``) are independent: when both are set,
    both contribute, local first.
    """

    def __init__(
        self,
        resources: ResourceLoader,
        fetcher: RemoteAttachmentFetcher,
        messages: MessageService,
    ) -> None:
        self.resources = resources
        self.fetcher = fetcher
        self.messages = messages

    def resolve(self, spec: AttachmentSpec) -> list[ResolvedAttachment]:
        resolved: list[ResolvedAttachment] = []
        local = self._local_attachment(spec)
        if local is not None:
            resolved.append(local)
        try:
            resolved.extend(self._forwarded_attachments(spec))
        except Exception:
            for attachment in resolved:
                attachment.close()
            raise
        return resolved

    def _local_attachment(self, spec: AttachmentSpec) -> ResolvedAttachment | None:
        if spec.content_path is None:
            return None
        content = self.resources.open(spec.content_path)
        if content is None:
            logger.debug("No content for attachment %s, skipping it", spec.content_path)
            return None
        return ResolvedAttachment(filename=filename_from_path(spec.content_path), content=content)

    def _forwarded_attachments(self, spec: AttachmentSpec) -> list[ResolvedAttachment]:
        if spec.message_id is None:
            return []

        message = self.messages.get_message(spec.message_id)
        if message is None:
            raise MessageNotFoundError(spec.message_id)

        if spec.attachment_id is not None:
            if not message.attachments:
                raise NoAttachmentsError(message.message_id or spec.message_id)
            info = next(
                (a for a in message.attachments if a.attachment_id == spec.attachment_id),
                None,
            )
            if info is None:
                raise AttachmentNotFoundError(spec.message_id, spec.attachment_id)
            return [self._download(message, info)]

        logger.debug(
            "Forwarding %d attachment(s) of message %s", len(message.attachments), spec.message_id
        )
        return [self._download(message, info) for info in message.attachments]

    def _download(self, message: MessageDescriptor, info: AttachmentInfo) -> ResolvedAttachment:
        content = self.fetcher.fetch(message.stream_id, message.message_id, info.attachment_id)
        return ResolvedAttachment(filename=info.name, content=io.BytesIO(content))
