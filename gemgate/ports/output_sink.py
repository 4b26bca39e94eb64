# /gemgate/ports/output_sink.py
from __future__ import annotations

from typing import Protocol


class OutputSinkPort(Protocol):
    async def write(self, chunk: str) -> None:
        """Append a chunk of markup; raise SinkWriteError (or OSError) on failure."""
