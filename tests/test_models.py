from __future__ import annotations

import pytest
from pydantic import ValidationError

from workflow_bot.models import (
    ElementsActionEvent,
    MessageSentEvent,
    SendMessageSpec,
    event_from_payload,
)


def test_activity_parses_kebab_case_keys() -> None:
    spec = SendMessageSpec.from_activity(
        {
            "send-message": {
                "id": "sendIt",
                "to": {"stream-id": "S1"},
                "content": "hi",
                "attachments": [
                    {"content-path": "a.png"},
                    {"message-id": "m", "attachment-id": "f"},
                ],
            }
        }
    )
    assert spec.to.stream_id == "S1"
    assert spec.content == "hi"
    assert spec.attachments[0].content_path == "a.png"
    assert (spec.attachments[1].message_id, spec.attachments[1].attachment_id) == ("m", "f")


def test_activity_accepts_camel_case_body() -> None:
    spec = SendMessageSpec.from_activity({"to": {"streamId": "S2"}, "attachments": [{"contentPath": "x"}]})
    assert spec.to.stream_id == "S2"
    assert spec.content == ""
    assert spec.attachments[0].content_path == "x"


def test_activity_is_immutable() -> None:
    spec = SendMessageSpec(content="hi")
    with pytest.raises(ValidationError):
        spec.content = "changed"


def test_message_sent_event_from_payload() -> None:
    event = event_from_payload(
        {
            "type": "MESSAGESENT",
            "initiator": {"user": {"userId": 42}},
            "payload": {
                "messageSent": {
                    "message": {"messageId": "m", "stream": {"streamId": "room"}, "attachments": []}
                }
            },
        }
    )
    assert isinstance(event.source, MessageSentEvent)
    assert event.source.stream_id == "room"
    assert event.initiator_user_id == 42


def test_elements_action_event_from_payload() -> None:
    event = event_from_payload(
        {
            "type": "SYMPHONYELEMENTSACTION",
            "payload": {
                "symphonyElementsAction": {
                    "stream": {"streamId": "form-room"},
                    "formId": "f",
                    "formMessageId": "fm",
                    "formValues": {"action": "ok"},
                }
            },
        }
    )
    assert event.source == ElementsActionEvent(
        stream_id="form-room", form_id="f", form_message_id="fm", form_values={"action": "ok"}
    )


def test_unknown_event_keeps_raw_payload() -> None:
    event = event_from_payload({"type": "USERJOINEDROOM", "payload": {"userJoinedRoom": {}}})
    assert event.source == {"userJoinedRoom": {}}
