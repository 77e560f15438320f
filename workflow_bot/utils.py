"""Utility helpers shared across modules."""

from __future__ import annotations

from pathlib import PurePath

MESSAGE_ML_OPEN = "<messageML>"
MESSAGE_ML_CLOSE = "</messageML>"


def filename_from_path(path: str) -> str:
    """Final segment of a resource path, used as the attachment name."""
    return PurePath(path).name


def ensure_message_ml(content: str) -> str:
    """Wrap plain content in a messageML envelope unless it already has one."""
    stripped = (content or "").strip()
    if stripped.startswith(MESSAGE_ML_OPEN) and stripped.endswith(MESSAGE_ML_CLOSE):
        return stripped
    return f"{MESSAGE_ML_OPEN}{stripped}{MESSAGE_ML_CLOSE}"
