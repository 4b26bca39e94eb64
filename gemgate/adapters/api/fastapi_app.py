# /gemgate/adapters/api/fastapi_app.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.responses import HTMLResponse, RedirectResponse, Response, StreamingResponse

from gemgate.adapters.api.queue_sink import QueueSink
from gemgate.adapters.gemini.tls_client import TLSGeminiClient
from gemgate.adapters.render.jinja_renderer import JinjaPageRenderer
from gemgate.adapters.system.logging_cfg import configure_logger
from gemgate.config import settings
from gemgate.domain.errors import GatewayError, InputRequiredUnsupported, InvalidURLError
from gemgate.domain.gateway_service import FetchOutcome, GatewayService, OutcomeKind
from gemgate.domain.gemtext import DEFAULT_PATTERNS
from gemgate.domain.transcoder import GemtextTranscoder, TranscoderOptions
from gemgate.domain.url import SourceURL
from gemgate.ports.page_renderer import PageContext

LOG = logging.getLogger("adapter.api")
app = FastAPI(title="gemgate")
configure_logger(settings.DEBUG)

FAILURE_NOTICE = "The page could not be retrieved."
BAD_ADDRESS_NOTICE = "That address could not be understood."
SCHEME_NOTICE = "Only gemini:// addresses can be retrieved."
NOT_GEMTEXT_NOTICE = "This resource is not a gemtext document and cannot be displayed."

_renderer = JinjaPageRenderer(settings.GATEWAY_PATH)
_transcoder = GemtextTranscoder(
    _renderer,
    DEFAULT_PATTERNS,
    TranscoderOptions(
        site_name=settings.SITE_NAME,
        gateway_path=settings.GATEWAY_PATH,
        escape_text=settings.ESCAPE_TEXT,
        close_open_blocks=settings.CLOSE_OPEN_BLOCKS,
        echo_lines=settings.DEBUG,
    ),
)
_service = GatewayService(TLSGeminiClient(_transcoder), max_redirects=settings.MAX_REDIRECTS)


def get_service() -> GatewayService:
    return _service


def _target_from(raw: str) -> SourceURL:
    text = raw.strip()
    if "://" not in text:
        text = f"gemini://{text}"
    return SourceURL.parse(text)


def _page(url: str, notice: str | None = None, status_code: int = 200) -> HTMLResponse:
    title = f"{settings.SITE_NAME} {url}".strip()
    body = _renderer.render_page(PageContext(url=url, title=title, error=notice))
    return HTMLResponse(body, status_code=status_code)


async def _run(service: GatewayService, target: SourceURL, sink: QueueSink) -> FetchOutcome:
    try:
        return await service.proxy(target, sink)
    finally:
        sink.close()


async def _without_body(task: asyncio.Task[FetchOutcome], target: SourceURL) -> Response:
    """The retrieval finished before writing anything: an error, a redirect or a skipped body."""
    try:
        outcome = await task
    except InputRequiredUnsupported:
        LOG.warning("gateway.input_required", extra={"extra": {"url": str(target)}}, exc_info=True)
        return _page(str(target), FAILURE_NOTICE, 501)
    except GatewayError:
        LOG.warning("gateway.failed", extra={"extra": {"url": str(target)}}, exc_info=True)
        return _page(str(target), FAILURE_NOTICE, 502)

    if outcome.kind is OutcomeKind.REDIRECT and outcome.target is not None:
        return RedirectResponse(str(outcome.target), status_code=307)
    if outcome.kind is OutcomeKind.SKIPPED:
        return _page(str(outcome.url), NOT_GEMTEXT_NOTICE)
    return _page(str(outcome.url))


async def _stream(
    first: str, sink: QueueSink, task: asyncio.Task[FetchOutcome], target: SourceURL
) -> AsyncIterator[str]:
    awaited = False
    try:
        yield first
        async for chunk in sink.chunks():
            yield chunk
        awaited = True
        await task
    except GatewayError:
        # headers are already sent; all we can do is say so in the page
        LOG.warning("gateway.stream_failed", extra={"extra": {"url": str(target)}}, exc_info=True)
        yield f'<p class="error">{FAILURE_NOTICE}</p>\n'
    finally:
        if not task.done():
            task.cancel()
        elif not awaited and not task.cancelled() and task.exception() is not None:
            # the browser left after the retrieval failed; read the error so it is not lost
            LOG.info(
                "gateway.stream_abandoned",
                extra={"extra": {"url": str(target), "error": repr(task.exception())}},
            )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get(settings.GATEWAY_PATH, response_class=HTMLResponse)
async def gateway(url: Optional[str] = None, service: GatewayService = Depends(get_service)) -> Response:
    if not url:
        return _page("")

    try:
        target = _target_from(url)
    except InvalidURLError:
        LOG.info("gateway.bad_url", extra={"extra": {"url": url}})
        return _page(url, BAD_ADDRESS_NOTICE, 400)
    if not target.is_gemini:
        return _page(str(target), SCHEME_NOTICE, 400)

    sink = QueueSink(settings.SINK_QUEUE_SIZE)
    task = asyncio.create_task(_run(service, target, sink))
    first = await sink.next_chunk()
    if first is None:
        return await _without_body(task, target)

    LOG.info("gateway.streaming", extra={"extra": {"url": str(target)}})
    return StreamingResponse(_stream(first, sink, task, target), media_type="text/html; charset=utf-8")
