# /gemgate/ports/page_renderer.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class PageContext:
    url: str
    title: str
    error: str | None = None


class PageRendererPort(Protocol):
    def render_preamble(self, page: PageContext) -> str:
        """Markup that opens the document, up to where the body starts."""

    def render_closing(self, page: PageContext) -> str:
        """Markup that closes the document."""
