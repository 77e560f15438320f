"""Access to files shipped alongside a workflow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Protocol

logger = logging.getLogger(__name__)


class ResourceLoader(Protocol):
    def open(self, path: str) -> BinaryIO | None: ...


class WorkflowResourceLoader:
    """Open resources from the workflow resources directory."""

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()

    def open(self, path: str) -> BinaryIO | None:
        """Return an open binary stream, or None when the resource does not exist."""
        resolved = self.resolve(path)
        if not resolved.is_file():
            logger.debug("Resource %s not found under %s", path, self.root)
            return None
        return resolved.open("rb")

    def resolve(self, path: str) -> Path:
        resolved = (self.root / path.lstrip("/")).resolve()
        if not resolved.is_relative_to(self.root):
            raise ValueError(f"Resource path {path} points outside {self.root}")
        return resolved
