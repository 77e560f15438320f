"""Chat service agent client: post messages, read messages and attachments."""

from __future__ import annotations

import logging
from typing import Protocol

import requests
from requests import Response

from .config import Settings
from .models import MessageDescriptor, OutboundMessage
from .stream_id import to_url_safe_stream_id
from .utils import ensure_message_ml

logger = logging.getLogger(__name__)


class MessageService(Protocol):
    def send(self, stream_id: str, message: str | OutboundMessage) -> MessageDescriptor | None: ...

    def get_message(self, message_id: str) -> MessageDescriptor | None: ...

    def get_attachment(self, stream_id: str, message_id: str, attachment_id: str) -> bytes: ...


class MessagingClient:
    """Thin wrapper over the agent REST API used by the send-message step."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.session = requests.Session()
        self.base_url = settings.agent_url
        self.timeout = settings.messaging_timeout_secs

    def send(self, stream_id: str, message: str | OutboundMessage) -> MessageDescriptor | None:
        """Post a message and return the created message as seen by the service."""
        if isinstance(message, str):
            message = OutboundMessage(content=message)

        url = f"{self.base_url}/agent/v4/stream/{to_url_safe_stream_id(stream_id)}/message/create"
        data = {"message": ensure_message_ml(message.content)}
        files = [
            ("attachment", (attachment.filename, attachment.content, "application/octet-stream"))
            for attachment in message.attachments
        ]

        logger.info(
            "Posting message to stream %s with %d attachment(s)", stream_id, len(files)
        )
        response = self._request("POST", url, data=data, files=files or None)
        payload = self._parse_response_body(response)
        if not isinstance(payload, dict):
            logger.warning("Message create response did not include a message; response=%s", payload)
            return None
        return MessageDescriptor.from_payload(payload)

    def get_message(self, message_id: str) -> MessageDescriptor | None:
        """Fetch a message by id, None when the service does not know it."""
        url = f"{self.base_url}/agent/v1/message/{to_url_safe_stream_id(message_id)}"
        response = self._request("GET", url, allow_not_found=True)
        if response.status_code == 404:
            logger.debug("Message %s not found", message_id)
            return None
        payload = self._parse_response_body(response)
        if not isinstance(payload, dict):
            return None
        return MessageDescriptor.from_payload(payload)

    def get_attachment(self, stream_id: str, message_id: str, attachment_id: str) -> bytes:
        """Download attachment bytes, still base64 encoded as the service returns them."""
        url = f"{self.base_url}/agent/v1/stream/{to_url_safe_stream_id(stream_id)}/attachment"
        params = {"fileId": attachment_id, "messageId": message_id}
        response = self._request("GET", url, params=params)
        return response.content

    def _request(self, method: str, url: str, allow_not_found: bool = False, **kwargs) -> Response:
        resp = self.session.request(
            method, url, headers=self._headers(), timeout=self.timeout, **kwargs
        )
        if allow_not_found and resp.status_code == 404:
            return resp
        if resp.status_code >= 400:
            logger.error("Agent request failed (%s): %s", resp.status_code, resp.text)
            resp.raise_for_status()
        return resp

    def _headers(self) -> dict[str, str]:
        headers = {"sessionToken": self.settings.messaging_session_token}
        if self.settings.messaging_key_manager_token:
            headers["keyManagerToken"] = self.settings.messaging_key_manager_token
        return headers

    @staticmethod
    def _parse_response_body(response) -> dict | str:
        if not response.content:
            return ""
        try:
            return response.json()
        except ValueError:
            return response.text
