"""Failures raised while resolving, composing or dispatching a message.

Transport failures are not wrapped here: exceptions raised by ``requests``
reach the caller unchanged.
"""

from __future__ import annotations


class SendMessageError(RuntimeError):
    """Base class for send-message activity failures."""


class NoDestinationError(SendMessageError):
    def __init__(self) -> None:
        super().__init__("No stream id set to send a message")


class MessageNotFoundError(SendMessageError):
    def __init__(self, message_id: str) -> None:
        self.message_id = message_id
        super().__init__(f"Message with id {message_id} not found")


class NoAttachmentsError(SendMessageError):
    def __init__(self, message_id: str) -> None:
        self.message_id = message_id
        super().__init__(f"No attachment in requested message with id {message_id}")


class AttachmentNotFoundError(SendMessageError):
    def __init__(self, message_id: str, attachment_id: str) -> None:
        self.message_id = message_id
        self.attachment_id = attachment_id
        super().__init__(
            f"No attachment with id {attachment_id} found in message with id {message_id}"
        )


class AttachmentDecodeError(SendMessageError):
    def __init__(self, message_id: str, attachment_id: str) -> None:
        self.message_id = message_id
        self.attachment_id = attachment_id
        super().__init__(
            f"Attachment {attachment_id} of message {message_id} is not valid base64"
        )
