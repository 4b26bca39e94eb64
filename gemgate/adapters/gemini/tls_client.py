# /gemgate/adapters/gemini/tls_client.py
from __future__ import annotations

import asyncio
import codecs
import logging
import ssl
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from gemgate.config import settings
from gemgate.domain.errors import (
    GatewayConnectionError,
    InputRequiredUnsupported,
    LinkResolutionError,
    ProtocolReadError,
    RedirectParseError,
    UnhandledStatusError,
    UnsupportedContentType,
)
from gemgate.domain.gateway_service import FetchOutcome
from gemgate.domain.status import ResponseStatus
from gemgate.domain.transcoder import GemtextTranscoder
from gemgate.domain.url import SourceURL
from gemgate.ports.output_sink import OutputSinkPort

LOG = logging.getLogger("adapter.gemini")

Opener = Callable[..., Awaitable[tuple[asyncio.StreamReader, Any]]]


def build_tls_context(min_version: str) -> ssl.SSLContext:
    # Gemini servers mostly use self-signed certificates; trust is per address.
    ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    ctx.minimum_version = ssl.TLSVersion[min_version]
    return ctx


class TLSGeminiClient:
    """
    One request per connection: connect, send "<url>\\r\\n", read the status
    line, then either hand the rest of the stream to the transcoder or report
    a redirect. The connection is closed on every exit path.
    """

    def __init__(self, transcoder: GemtextTranscoder, *, opener: Opener | None = None) -> None:
        self.transcoder = transcoder
        self._opener = opener or asyncio.open_connection
        self._ssl = build_tls_context(settings.TLS_MIN_VERSION)
        self._default_port = settings.DEFAULT_PORT
        self._connect_timeout = settings.CONNECT_TIMEOUT_SECONDS
        self._read_timeout = settings.READ_TIMEOUT_SECONDS
        self._max_line_bytes = settings.MAX_LINE_BYTES

    async def fetch(self, url: SourceURL, sink: OutputSinkPort) -> FetchOutcome:
        reader, writer = await self._connect(url)
        try:
            return await self._exchange(url, sink, reader, writer)
        finally:
            await self._close(url, writer)

    async def _connect(self, url: SourceURL) -> tuple[asyncio.StreamReader, Any]:
        port = url.port or self._default_port
        LOG.info("gemini.connect", extra={"extra": {"host": url.host, "port": port}})
        try:
            async with asyncio.timeout(self._connect_timeout):
                return await self._opener(
                    url.host,
                    port,
                    ssl=self._ssl,
                    server_hostname=url.host,
                    limit=self._max_line_bytes,
                )
        except (OSError, TimeoutError) as e:
            raise GatewayConnectionError(str(url), e) from e

    async def _exchange(
        self, url: SourceURL, sink: OutputSinkPort, reader: asyncio.StreamReader, writer: Any
    ) -> FetchOutcome:
        try:
            writer.write(f"{url}\r\n".encode("utf-8"))
            async with asyncio.timeout(self._read_timeout):
                await writer.drain()
        except (OSError, TimeoutError) as e:
            raise GatewayConnectionError(str(url), e) from e

        raw = await self._readline(url, reader)
        if not raw.endswith(b"\n"):
            raise ProtocolReadError(str(url), "connection closed before end of status line")
        line = raw.decode("utf-8", errors="replace")
        LOG.debug("gemini.status", extra={"extra": {"url": str(url), "status": line}})

        status = ResponseStatus.parse(line)
        if status.family == "1":
            raise InputRequiredUnsupported(str(url), status.meta)
        if status.family == "2":
            if not status.is_gemtext:
                condition = UnsupportedContentType(str(url), status.mime_type)
                LOG.warning(
                    "gemini.unsupported_content_type",
                    extra={"extra": {"url": str(url), "mime": status.mime_type}},
                )
                return FetchOutcome.skipped(url, condition)
            lines = self._lines(url, reader, self._charset(url, status))
            await self.transcoder.transcode(sink, url, lines)
            return FetchOutcome.transcoded(url)
        if status.family == "3":
            return FetchOutcome.redirect(url, self._redirect_target(url, status))
        raise UnhandledStatusError(str(url), line)

    @staticmethod
    def _redirect_target(url: SourceURL, status: ResponseStatus) -> SourceURL:
        target = status.meta.strip()
        if not target:
            raise RedirectParseError(str(url), status.meta)
        try:
            return url.resolve(target)
        except LinkResolutionError as e:
            raise RedirectParseError(str(url), target) from e

    @staticmethod
    def _charset(url: SourceURL, status: ResponseStatus) -> str:
        try:
            return codecs.lookup(status.charset).name
        except LookupError:
            LOG.warning(
                "gemini.unknown_charset",
                extra={"extra": {"url": str(url), "charset": status.charset}},
            )
            return "utf-8"

    async def _readline(self, url: SourceURL, reader: asyncio.StreamReader) -> bytes:
        try:
            async with asyncio.timeout(self._read_timeout):
                return await reader.readline()
        except (OSError, TimeoutError, ValueError) as e:
            # ValueError: line longer than the reader limit
            raise ProtocolReadError(str(url), repr(e)) from e

    async def _lines(
        self, url: SourceURL, reader: asyncio.StreamReader, charset: str
    ) -> AsyncIterator[str]:
        while True:
            raw = await self._readline(url, reader)
            if not raw:
                return
            yield raw.decode(charset, errors="replace")

    async def _close(self, url: SourceURL, writer: Any) -> None:
        writer.close()
        try:
            async with asyncio.timeout(self._connect_timeout):
                await writer.wait_closed()
        except (OSError, TimeoutError) as e:
            LOG.debug("gemini.close_failed", extra={"extra": {"url": str(url), "error": repr(e)}})
