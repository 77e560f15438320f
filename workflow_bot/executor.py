"""Send-message activity: resolve destination, compose, dispatch, record id."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .attachments import AttachmentResolver, RemoteAttachmentFetcher
from .composer import MessageComposer
from .messaging_client import MessageService
from .models import DispatchResult, OutboundMessage, SendMessageSpec, WorkflowEvent
from .resources import ResourceLoader
from .stream_id import resolve_stream_id

logger = logging.getLogger(__name__)

OUTPUT_MESSAGE_ID_KEY = "msgId"


class ExecutionContext(Protocol):
    activity_id: str
    activity: SendMessageSpec
    event: Optional[WorkflowEvent]
    messages: MessageService
    resources: ResourceLoader

    def set_output_variable(self, key: str, value: Any) -> None: ...


@dataclass
class WorkflowExecutionContext:
    """Everything one activity execution reads from and writes to."""

    activity_id: str
    activity: SendMessageSpec
    messages: MessageService
    resources: ResourceLoader
    event: Optional[WorkflowEvent] = None
    variables: dict[str, Any] = field(default_factory=dict)

    def set_output_variable(self, key: str, value: Any) -> None:
        scope = self.variables.setdefault(self.activity_id, {}).setdefault("outputs", {})
        scope[key] = value

    def output_variable(self, key: str) -> Any:
        return self.variables.get(self.activity_id, {}).get("outputs", {}).get(key)


class SendMessageExecutor:
    """Send one message for a workflow activity and expose its id as ``msgId``."""

    def execute(self, context: ExecutionContext) -> None:
        stream_id = resolve_stream_id(context.activity, context.event)
        logger.debug("Sending message to room %s", stream_id)

        fetcher = RemoteAttachmentFetcher(context.messages)
        resolver = AttachmentResolver(context.resources, fetcher, context.messages)
        outbound = MessageComposer(resolver).compose(context.activity)

        with outbound:
            result = self._dispatch(context.messages, stream_id, outbound)

        if result.message_id is not None:
            logger.info("Message %s sent to stream %s", result.message_id, stream_id)
            context.set_output_variable(OUTPUT_MESSAGE_ID_KEY, result.message_id)
        else:
            logger.info("Message sent to stream %s without a returned id", stream_id)

    @staticmethod
    def _dispatch(
        messages: MessageService, stream_id: str, outbound: OutboundMessage
    ) -> DispatchResult:
        if outbound.has_attachments:
            sent = messages.send(stream_id, outbound)
        else:
            sent = messages.send(stream_id, outbound.content)
        return DispatchResult(message_id=sent.message_id if sent is not None else None)
