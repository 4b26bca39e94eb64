# /gemgate/ports/gemini_client.py
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gemgate.domain.gateway_service import FetchOutcome
    from gemgate.domain.url import SourceURL
    from gemgate.ports.output_sink import OutputSinkPort


class GeminiClientPort(Protocol):
    async def fetch(self, url: SourceURL, sink: OutputSinkPort) -> FetchOutcome:
        """Request url once; translate a gemtext body into sink or report a redirect."""
