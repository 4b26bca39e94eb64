# /gemgate/adapters/api/queue_sink.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

from gemgate.domain.errors import SinkWriteError


class QueueSink:
    """
    Bounded hand-off between the retrieval task (producer) and the HTTP
    response body (consumer). write() blocks while the queue is full, so a slow
    browser slows down the Gemini read instead of buffering the document.
    """

    def __init__(self, maxsize: int) -> None:
        self._queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, chunk: str) -> None:
        if self._closed:
            raise SinkWriteError("response stream already closed")
        if chunk:
            await self._queue.put(chunk)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._queue.put_nowait(None)
        except asyncio.QueueFull:
            pass  # next_chunk() sees closed + empty once drained

    async def next_chunk(self) -> str | None:
        if self._closed and self._queue.empty():
            return None
        # None is the end marker put by close()
        return await self._queue.get()

    async def chunks(self) -> AsyncIterator[str]:
        while True:
            chunk = await self.next_chunk()
            if chunk is None:
                return
            yield chunk
