# /gemgate/domain/transcoder.py
from __future__ import annotations

import enum
import html
import logging
from collections.abc import AsyncIterable
from dataclasses import dataclass
from urllib.parse import quote_plus

from gemgate.domain.errors import LinkResolutionError, SinkWriteError
from gemgate.domain.gemtext import DEFAULT_PATTERNS, GemtextLine, GemtextPatterns, LineKind
from gemgate.domain.url import SourceURL
from gemgate.ports.output_sink import OutputSinkPort
from gemgate.ports.page_renderer import PageContext, PageRendererPort

LOG = logging.getLogger("transcoder")

_HEADING_LEVELS = {LineKind.HEADER1: 1, LineKind.HEADER2: 2, LineKind.HEADER3: 3}

# script-bearing schemes would run in the gateway's own origin
_UNLINKED_SCHEMES = frozenset({"javascript", "data", "vbscript"})


class ParserState(enum.Enum):
    DEFAULT = "default"
    IN_PREFORMAT = "in_preformat"
    IN_LIST = "in_list"


@dataclass(frozen=True, slots=True)
class TranscoderOptions:
    site_name: str = "gemgate"
    gateway_path: str = "/"
    escape_text: bool = True
    close_open_blocks: bool = True
    echo_lines: bool = False


class GemtextTranscoder:
    """
    Streams gemtext lines into HTML. One line in, zero or more chunks out;
    the only memory kept between lines is the ParserState.
    escape_text=False embeds captured text raw (preformat still escapes "<"),
    close_open_blocks=False leaves a list or preformat block open at EOF.
    """

    def __init__(
        self,
        renderer: PageRendererPort,
        patterns: GemtextPatterns = DEFAULT_PATTERNS,
        options: TranscoderOptions | None = None,
    ) -> None:
        self.renderer = renderer
        self.patterns = patterns
        self.options = options or TranscoderOptions()

    async def transcode(
        self, sink: OutputSinkPort, base_url: SourceURL, lines: AsyncIterable[str]
    ) -> None:
        page = PageContext(url=str(base_url), title=f"{self.options.site_name} {base_url}")
        await self._emit(sink, self.renderer.render_preamble(page))

        state = ParserState.DEFAULT
        count = 0
        async for raw in lines:
            if self.options.echo_lines:
                LOG.debug("gemtext.line", extra={"extra": {"line": raw}})
            state = await self._feed(sink, base_url, raw.rstrip("\r\n"), state)
            count += 1

        await self._finish(sink, base_url, state)
        await self._emit(sink, self.renderer.render_closing(page))
        LOG.info("gemtext.done", extra={"extra": {"url": str(base_url), "lines": count}})

    # --- per-line state machine ---

    async def _feed(
        self, sink: OutputSinkPort, base_url: SourceURL, line: str, state: ParserState
    ) -> ParserState:
        fence = self.patterns.is_fence(line)
        if fence is not None:
            if state is ParserState.IN_PREFORMAT:
                await self._emit(sink, "</pre>\n")
                return ParserState.DEFAULT
            if state is ParserState.IN_LIST:
                await self._emit(sink, "</ul>\n")
            await self._emit(sink, self._open_pre(fence))
            return ParserState.IN_PREFORMAT

        if state is ParserState.IN_PREFORMAT:
            await self._emit(sink, self._pre_text(line) + "\n")
            return state

        item = self.patterns.classify(line)
        if item.kind is LineKind.LIST_ITEM:
            if state is not ParserState.IN_LIST:
                await self._emit(sink, "<ul>\n")
            await self._emit(sink, f"<li>{self._text(item.text)}</li>\n")
            return ParserState.IN_LIST

        if state is ParserState.IN_LIST:
            await self._emit(sink, "</ul>\n")
        await self._emit(sink, self._render(base_url, item))
        return ParserState.DEFAULT

    def _render(self, base_url: SourceURL, item: GemtextLine) -> str:
        if item.kind is LineKind.BLANK:
            return "<br>\n"
        if item.kind in _HEADING_LEVELS:
            n = _HEADING_LEVELS[item.kind]
            return f"<h{n}>{self._text(item.text)}</h{n}>\n"
        if item.kind is LineKind.LINK:
            return self._render_link(base_url, item)
        if item.kind is LineKind.QUOTE:
            return f"<blockquote>{self._text(item.text)}</blockquote>\n"
        return f"{self._text(item.raw)}<br>\n"

    def _render_link(self, base_url: SourceURL, item: GemtextLine) -> str:
        try:
            absolute = base_url.join(item.target)
            target = SourceURL.parse(absolute)
        except LinkResolutionError as e:
            LOG.warning("gemtext.link_unresolved", extra={"extra": {"line": item.raw, "error": str(e)}})
            return f"<p>{self._text(item.raw)}</p>\n"

        if target.scheme in _UNLINKED_SCHEMES:
            LOG.warning("gemtext.link_unsafe", extra={"extra": {"line": item.raw, "scheme": target.scheme}})
            return f"<p>{self._text(item.raw)}</p>\n"

        # only the gateway re-entry link is normalised; everything else keeps the joined text
        if target.is_gemini:
            primary = f"{self.options.gateway_path}?url={quote_plus(str(target))}"
        else:
            primary = absolute
        label = self._text(item.text or absolute)
        return (
            f'<p><a href="{html.escape(primary)}">{label}</a> '
            f'<span class="scheme"><a href="{html.escape(absolute)}">[{html.escape(target.scheme)}]</a></span></p>\n'
        )

    async def _finish(self, sink: OutputSinkPort, base_url: SourceURL, state: ParserState) -> None:
        if state is ParserState.IN_PREFORMAT:
            LOG.warning(
                "gemtext.unterminated_preformat",
                extra={"extra": {"url": str(base_url), "closed": self.options.close_open_blocks}},
            )
        if not self.options.close_open_blocks:
            return
        if state is ParserState.IN_LIST:
            await self._emit(sink, "</ul>\n")
        elif state is ParserState.IN_PREFORMAT:
            await self._emit(sink, "</pre>\n")

    # --- escaping helpers ---

    def _open_pre(self, fence: GemtextLine) -> str:
        if fence.text:
            return f'<pre aria-label="{html.escape(fence.text)}">\n'
        return "<pre>\n"

    def _pre_text(self, line: str) -> str:
        if self.options.escape_text:
            return html.escape(line, quote=False)
        return line.replace("<", "&lt;")

    def _text(self, text: str) -> str:
        return html.escape(text, quote=False) if self.options.escape_text else text

    @staticmethod
    async def _emit(sink: OutputSinkPort, chunk: str) -> None:
        try:
            await sink.write(chunk)
        except OSError as e:
            raise SinkWriteError(f"sink write failed: {e}") from e
