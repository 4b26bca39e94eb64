# /gemgate/domain/gateway_service.py
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from gemgate.domain.errors import RedirectParseError, TooManyRedirectsError, UnsupportedContentType
from gemgate.domain.url import SourceURL
from gemgate.ports.gemini_client import GeminiClientPort
from gemgate.ports.output_sink import OutputSinkPort

LOG = logging.getLogger("gateway_service")

# ==== DTOs ====


class OutcomeKind(enum.Enum):
    TRANSCODED = "transcoded"
    SKIPPED = "skipped"
    REDIRECT = "redirect"


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    kind: OutcomeKind
    url: SourceURL  # the URL that produced this outcome
    target: SourceURL | None = None  # redirects only
    condition: UnsupportedContentType | None = None  # skipped bodies only

    @classmethod
    def transcoded(cls, url: SourceURL) -> FetchOutcome:
        return cls(OutcomeKind.TRANSCODED, url)

    @classmethod
    def skipped(cls, url: SourceURL, condition: UnsupportedContentType) -> FetchOutcome:
        return cls(OutcomeKind.SKIPPED, url, condition=condition)

    @classmethod
    def redirect(cls, origin: SourceURL, target: SourceURL) -> FetchOutcome:
        return cls(OutcomeKind.REDIRECT, origin, target=target)


# ==== Service ====


class GatewayService:
    """Follows Gemini redirects over an injected client, up to max_redirects hops."""

    def __init__(self, client: GeminiClientPort, *, max_redirects: int) -> None:
        self.client = client
        self.max_redirects = max_redirects

    async def proxy(self, url: SourceURL, sink: OutputSinkPort) -> FetchOutcome:
        """
        Returns the final outcome. A REDIRECT outcome is only returned when the
        target leaves the gemini scheme; the caller decides what to do with it.
        """
        current = url
        hops = 0
        while True:
            outcome = await self.client.fetch(current, sink)
            if outcome.kind is not OutcomeKind.REDIRECT:
                return outcome

            target = outcome.target
            if target is None:
                raise RedirectParseError(str(current), "")
            if not target.is_gemini:
                LOG.info(
                    "gateway.redirect_foreign",
                    extra={"extra": {"from": str(current), "to": str(target)}},
                )
                return outcome

            hops += 1
            if hops > self.max_redirects:
                LOG.warning(
                    "gateway.too_many_redirects",
                    extra={"extra": {"url": str(url), "max": self.max_redirects}},
                )
                raise TooManyRedirectsError(str(url), self.max_redirects)

            LOG.info(
                "gateway.redirect",
                extra={"extra": {"from": str(current), "to": str(target), "hop": hops}},
            )
            current = target
