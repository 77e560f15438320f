"""Entry point that runs a single send-message workflow activity."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from workflow_bot.config import Settings
from workflow_bot.errors import SendMessageError
from workflow_bot.executor import OUTPUT_MESSAGE_ID_KEY, SendMessageExecutor, WorkflowExecutionContext
from workflow_bot.messaging_client import MessagingClient
from workflow_bot.models import SendMessageSpec, event_from_payload
from workflow_bot.resources import WorkflowResourceLoader

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a chat message as a workflow activity would.")
    parser.add_argument("--activity", type=Path, help="JSON file holding the send-message activity")
    parser.add_argument("--activity-id", default="sendMessage", help="Activity id scoping output variables")
    parser.add_argument("--content", help="Message content (overrides the activity file)")
    parser.add_argument("--stream-id", help="Destination stream (overrides the activity file)")
    parser.add_argument(
        "--attachment",
        action="append",
        default=[],
        metavar="PATH",
        help="Resource to attach, relative to WORKFLOW_RESOURCES_DIR (repeatable)",
    )
    parser.add_argument(
        "--forward",
        action="append",
        default=[],
        type=parse_forward,
        metavar="MESSAGE_ID[:ATTACHMENT_ID]",
        help="Forward all attachments of a message, or a single one (repeatable)",
    )
    parser.add_argument("--event", type=Path, help="JSON file holding the triggering datafeed event")
    return parser


def parse_forward(value: str) -> dict[str, str]:
    message_id, _, attachment_id = value.partition(":")
    if not message_id:
        raise argparse.ArgumentTypeError(f"Invalid forward reference: {value}")
    forward = {"message-id": message_id}
    if attachment_id:
        forward["attachment-id"] = attachment_id
    return forward


def load_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Unable to read {path}: {exc}") from exc


def build_activity(args: argparse.Namespace) -> SendMessageSpec:
    raw = load_json(args.activity) if args.activity else {}
    body = dict(raw.get("send-message", raw))
    if args.content is not None:
        body["content"] = args.content
    if args.stream_id:
        body["to"] = {"stream-id": args.stream_id}
    extra = [{"content-path": path} for path in args.attachment] + args.forward
    if extra:
        body["attachments"] = list(body.get("attachments") or []) + extra
    return SendMessageSpec.from_activity(body)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings.log_level)

    context = WorkflowExecutionContext(
        activity_id=args.activity_id,
        activity=build_activity(args),
        messages=MessagingClient(settings),
        resources=WorkflowResourceLoader(settings.workflow_resources_dir),
        event=event_from_payload(load_json(args.event)) if args.event else None,
    )

    try:
        SendMessageExecutor().execute(context)
    except SendMessageError as exc:
        logging.error("Send message activity %s failed: %s", args.activity_id, exc)
        raise SystemExit(1) from exc

    message_id = context.output_variable(OUTPUT_MESSAGE_ID_KEY)
    logging.info("Run complete: %s.outputs.%s=%s", args.activity_id, OUTPUT_MESSAGE_ID_KEY, message_id)
    if message_id is not None:
        print(message_id)


if __name__ == "__main__":
    main()
