"""Filesystem tool confined to a single data directory.

The model may only name a plain file inside the allowed directory; anything
that looks like a path is refused before touching the disk.
"""

import asyncio
import re
from pathlib import Path
from typing import Any

from ..config import get_settings
from ..exceptions import PathTraversalError
from .base import BaseTool

_SAFE_FILENAME = re.compile(r"[A-Za-z0-9_.\-]+")


def is_valid_filename(filename: Any) -> bool:
    """Check that a filename has no path components and only safe characters."""
    if not isinstance(filename, str) or not filename:
        return False
    if ".." in filename or "/" in filename or "\\" in filename:
        return False
    return _SAFE_FILENAME.fullmatch(filename) is not None


class WriteFileTool(BaseTool):
    """Write content to a file in the allowed directory."""

    def __init__(self, allowed_dir: str | None = None):
        """Initialize the tool.

        Args:
            allowed_dir: Directory files are written to. Defaults to the
                data_dir setting.
        """
        self.allowed_dir = Path(allowed_dir or get_settings().data_dir)

    @property
    def name(self) -> str:
        return "write_file"

    @property
    def description(self) -> str:
        return (
            "Write content to a file in the allowed directory. "
            "Creates parent directories if needed."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "filename": {
                    "type": "string",
                    "description": "Name of the file to write",
                },
                "content": {
                    "type": "string",
                    "description": "Content to write to the file",
                },
            },
            "required": ["filename", "content"],
        }

    async def run(self, filename: str, content: str) -> dict[str, Any]:
        """Write content to filename inside the allowed directory.

        Returns:
            The written path and the number of bytes written

        Raises:
            PathTraversalError: If filename is not a plain, safe file name
        """
        if not is_valid_filename(filename):
            raise PathTraversalError(str(filename), str(self.allowed_dir))

        filepath = self.allowed_dir / filename
        data = str(content).encode("utf-8")

        def _write() -> None:
            self.allowed_dir.mkdir(parents=True, exist_ok=True)
            filepath.write_bytes(data)

        await asyncio.to_thread(_write)
        return {"filepath": str(filepath), "bytes_written": len(data)}
