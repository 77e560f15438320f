"""Destination stream resolution for the send-message step."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import NoDestinationError
from .models import ElementsActionEvent, MessageSentEvent, SendMessageSpec, WorkflowEvent

logger = logging.getLogger(__name__)


def to_url_safe_stream_id(stream_id: str) -> str:
    """Convert a base64-padded stream id into its URL-safe form."""
    return stream_id.replace("+", "-").replace("/", "_").rstrip("=")


def resolve_stream_id(spec: SendMessageSpec, event: Optional[WorkflowEvent]) -> str:
    """Pick the explicit target, else the stream of the triggering event."""
    stream_id = _explicit_or_event_stream_id(spec, event)
    if stream_id.endswith("="):
        stream_id = to_url_safe_stream_id(stream_id)
    return stream_id


def _explicit_or_event_stream_id(spec: SendMessageSpec, event: Optional[WorkflowEvent]) -> str:
    if spec.to is not None and spec.to.stream_id:
        logger.debug("Using stream id set on the activity")
        return spec.to.stream_id

    source = event.source if event is not None else None
    match source:
        case MessageSentEvent(message=message) if message.stream_id:
            logger.debug("Using stream id of the message that triggered the workflow")
            return message.stream_id
        case ElementsActionEvent(stream_id=stream_id) if stream_id:
            logger.debug("Using stream id of the submitted form")
            return stream_id
    raise NoDestinationError()
