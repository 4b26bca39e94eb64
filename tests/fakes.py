# tests/fakes.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator


class ListSink:
    def __init__(self) -> None:
        self.chunks: list[str] = []

    async def write(self, chunk: str) -> None:
        self.chunks.append(chunk)

    @property
    def text(self) -> str:
        return "".join(self.chunks)


class FailingSink(ListSink):
    """Accepts `ok_writes` chunks, then behaves like a dropped connection."""

    def __init__(self, ok_writes: int) -> None:
        super().__init__()
        self.ok_writes = ok_writes

    async def write(self, chunk: str) -> None:
        if len(self.chunks) >= self.ok_writes:
            raise BrokenPipeError("peer went away")
        await super().write(chunk)


class StubRenderer:
    def render_preamble(self, page):
        return f"<!--start {page.title}-->\n"

    def render_closing(self, page):
        return "<!--end-->\n"


async def lines_of(text: str) -> AsyncIterator[str]:
    for line in text.splitlines(keepends=True):
        yield line


class FakeWriter:
    def __init__(self) -> None:
        self.sent = bytearray()
        self.closed = False

    def write(self, data: bytes) -> None:
        self.sent.extend(data)

    async def drain(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None


class FakeOpener:
    """
    Stands in for asyncio.open_connection. Serves one canned response per
    (host, port); unknown endpoints are refused.
    """

    def __init__(self, responses: dict[tuple[str, int], bytes]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, int, dict]] = []
        self.writers: list[FakeWriter] = []

    async def __call__(self, host: str, port: int, **kwargs):
        self.calls.append((host, port, kwargs))
        if (host, port) not in self._responses:
            raise ConnectionRefusedError(f"{host}:{port} refused")
        reader = asyncio.StreamReader(limit=kwargs.get("limit", 2**16))
        reader.feed_data(self._responses[(host, port)])
        reader.feed_eof()
        writer = FakeWriter()
        self.writers.append(writer)
        return reader, writer


class HangingOpener:
    async def __call__(self, host: str, port: int, **kwargs):
        await asyncio.sleep(3600)


class ScriptedClient:
    """GeminiClientPort fake: maps str(url) to an outcome or an exception."""

    def __init__(self, script: dict) -> None:
        self._script = script
        self.calls: list[str] = []

    async def fetch(self, url, sink):
        self.calls.append(str(url))
        result = self._script[str(url)]
        if isinstance(result, Exception):
            raise result
        return result
