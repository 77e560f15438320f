from __future__ import annotations

import base64
import io
from dataclasses import dataclass, field

import pytest

from workflow_bot.models import AttachmentInfo, MessageDescriptor, OutboundMessage


@dataclass
class FakeResourceLoader:
    files: dict[str, bytes] = field(default_factory=dict)
    opened: list[io.BytesIO] = field(default_factory=list)

    def open(self, path: str):
        if path not in self.files:
            return None
        stream = io.BytesIO(self.files[path])
        self.opened.append(stream)
        return stream


@dataclass
class FakeMessageService:
    messages: dict[str, MessageDescriptor] = field(default_factory=dict)
    # (stream_id, message_id, attachment_id) -> transport-encoded bytes
    attachments: dict[tuple[str, str, str], bytes] = field(default_factory=dict)
    sent_id: str | None = "m-1"
    sent: list[tuple[str, object]] = field(default_factory=list)
    sent_payloads: list[list[tuple[str, bytes]]] = field(default_factory=list)
    attachment_requests: list[tuple[str, str, str]] = field(default_factory=list)
    fail_send: Exception | None = None

    def add_message(self, message_id: str, stream_id: str, files: dict[str, bytes] | None = None):
        infos = []
        for index, (name, payload) in enumerate((files or {}).items()):
            attachment_id = f"{message_id}-att-{index}"
            infos.append(AttachmentInfo(attachment_id=attachment_id, name=name, size=len(payload)))
            self.attachments[(stream_id, message_id, attachment_id)] = base64.b64encode(payload)
        descriptor = MessageDescriptor(message_id=message_id, stream_id=stream_id, attachments=infos)
        self.messages[message_id] = descriptor
        return descriptor

    def send(self, stream_id, message):
        self.sent.append((stream_id, message))
        if isinstance(message, OutboundMessage):
            self.sent_payloads.append([(a.filename, a.content.read()) for a in message.attachments])
        if self.fail_send is not None:
            raise self.fail_send
        if self.sent_id is None:
            return None
        return MessageDescriptor(message_id=self.sent_id, stream_id=stream_id)

    def get_message(self, message_id):
        return self.messages.get(message_id)

    def get_attachment(self, stream_id, message_id, attachment_id):
        self.attachment_requests.append((stream_id, message_id, attachment_id))
        return self.attachments[(stream_id, message_id, attachment_id)]


@pytest.fixture
def messages() -> FakeMessageService:
    return FakeMessageService()


@pytest.fixture
def resources() -> FakeResourceLoader:
    return FakeResourceLoader()
