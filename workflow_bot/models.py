"""Typed containers shared across the send-message step."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _ActivityModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class StreamTarget(_ActivityModel):
    """Explicit destination of a send-message activity."""

    stream_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("stream-id", "streamId", "stream_id")
    )


class AttachmentSpec(_ActivityModel):
    """One declared attachment: a local resource, a forwarded one, or both."""

    content_path: Optional[str] = Field(
        None, validation_alias=AliasChoices("content-path", "contentPath", "content_path")
    )
    message_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("message-id", "messageId", "message_id")
    )
    attachment_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("attachment-id", "attachmentId", "attachment_id")
    )


class SendMessageSpec(_ActivityModel):
    """Configuration of a send-message activity."""

    content: str = ""
    to: Optional[StreamTarget] = None
    attachments: list[AttachmentSpec] = Field(default_factory=list)

    @classmethod
    def from_activity(cls, raw: dict[str, Any]) -> "SendMessageSpec":
        """Parse either the activity body or a ``{"send-message": {...}}`` wrapper."""
        body = raw.get("send-message", raw)
        return cls.model_validate(body)


@dataclass
class AttachmentInfo:
    """Metadata for an attachment listed on a sent message."""

    attachment_id: str
    name: str
    size: int = 0


@dataclass
class MessageDescriptor:
    """Essential data about a message known to the remote message store."""

    message_id: Optional[str]
    stream_id: Optional[str]
    attachments: list[AttachmentInfo] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, raw: dict[str, Any]) -> "MessageDescriptor":
        stream = raw.get("stream") or {}
        return cls(
            message_id=raw.get("messageId"),
            stream_id=stream.get("streamId"),
            attachments=[
                AttachmentInfo(
                    attachment_id=item["id"],
                    name=item.get("name", ""),
                    size=item.get("size", 0),
                )
                for item in raw.get("attachments") or []
            ],
            raw=raw,
        )


@dataclass
class ResolvedAttachment:
    """Attachment bytes ready to be sent; the stream is read once."""

    filename: str
    content: BinaryIO

    def close(self) -> None:
        self.content.close()


@dataclass
class OutboundMessage:
    """Content plus attachments, in the order they were declared."""

    content: str
    attachments: list[ResolvedAttachment] = field(default_factory=list)

    @property
    def has_attachments(self) -> bool:
        return bool(self.attachments)

    def close(self) -> None:
        for attachment in self.attachments:
            attachment.close()

    def __enter__(self) -> "OutboundMessage":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@dataclass(frozen=True)
class MessageSentEvent:
    """A message was posted in a stream."""

    message: MessageDescriptor

    @property
    def stream_id(self) -> Optional[str]:
        return self.message.stream_id


@dataclass(frozen=True)
class ElementsActionEvent:
    """A user submitted a form."""

    stream_id: Optional[str]
    form_id: Optional[str] = None
    form_message_id: Optional[str] = None
    form_values: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WorkflowEvent:
    """Event that triggered the current workflow execution."""

    source: Any
    initiator_user_id: Optional[int] = None


@dataclass
class DispatchResult:
    """Outcome of a send; the service may not return an id."""

    message_id: Optional[str]


def event_from_payload(raw: dict[str, Any]) -> WorkflowEvent:
    """Convert a raw datafeed event into a ``WorkflowEvent``."""
    event_type = (raw.get("type") or "").upper()
    payload = raw.get("payload") or {}
    initiator = ((raw.get("initiator") or {}).get("user") or {}).get("userId")

    if event_type == "MESSAGESENT":
        message = (payload.get("messageSent") or {}).get("message") or {}
        source: Any = MessageSentEvent(message=MessageDescriptor.from_payload(message))
    elif event_type == "SYMPHONYELEMENTSACTION":
        action = payload.get("symphonyElementsAction") or {}
        source = ElementsActionEvent(
            stream_id=(action.get("stream") or {}).get("streamId"),
            form_id=action.get("formId"),
            form_message_id=action.get("formMessageId"),
            form_values=action.get("formValues") or {},
        )
    else:
        source = payload

    return WorkflowEvent(source=source, initiator_user_id=initiator)
