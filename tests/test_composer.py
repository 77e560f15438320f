from __future__ import annotations

import pytest

from workflow_bot.attachments import AttachmentResolver, RemoteAttachmentFetcher
from workflow_bot.composer import MessageComposer
from workflow_bot.errors import AttachmentNotFoundError
from workflow_bot.models import AttachmentSpec, SendMessageSpec


@pytest.fixture
def composer(messages, resources) -> MessageComposer:
    return MessageComposer(AttachmentResolver(resources, RemoteAttachmentFetcher(messages), messages))


def test_content_only(composer) -> None:
    message = composer.compose(SendMessageSpec(content="hello"))
    assert message.content == "hello"
    assert not message.has_attachments


def test_order_across_specs(composer, messages, resources) -> None:
    resources.files["one.txt"] = b"1"
    resources.files["three.txt"] = b"3"
    messages.add_message("src", "s", {"two-a.txt": b"2a", "two-b.txt": b"2b"})
    spec = SendMessageSpec(
        content="c",
        attachments=[
            AttachmentSpec(content_path="one.txt"),
            AttachmentSpec(message_id="src"),
            AttachmentSpec(content_path="missing.txt"),
            AttachmentSpec(content_path="three.txt"),
        ],
    )
    message = composer.compose(spec)
    assert [a.filename for a in message.attachments] == ["one.txt", "two-a.txt", "two-b.txt", "three.txt"]


def test_failure_closes_already_resolved_streams(composer, messages, resources) -> None:
    resources.files["one.txt"] = b"1"
    messages.add_message("src", "s", {"a.txt": b"a"})
    spec = SendMessageSpec(
        attachments=[
            AttachmentSpec(content_path="one.txt"),
            AttachmentSpec(message_id="src", attachment_id="unknown"),
        ]
    )
    with pytest.raises(AttachmentNotFoundError):
        composer.compose(spec)
    assert all(stream.closed for stream in resources.opened)


def test_outbound_message_closes_streams(composer, resources) -> None:
    resources.files["one.txt"] = b"1"
    message = composer.compose(SendMessageSpec(attachments=[AttachmentSpec(content_path="one.txt")]))
    with message:
        assert not resources.opened[0].closed
    assert resources.opened[0].closed
