# /gemgate/adapters/render/jinja_renderer.py
from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from gemgate.ports.page_renderer import PageContext

TEMPLATES_DIR = Path(__file__).parent / "templates"


class JinjaPageRenderer:
    """Page chrome around the translated body: header.html before, footer.html after."""

    def __init__(self, gateway_path: str, templates_dir: Path = TEMPLATES_DIR) -> None:
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
            keep_trailing_newline=True,
        )
        self._gateway_path = gateway_path

    def _render(self, name: str, page: PageContext) -> str:
        return self._env.get_template(name).render(
            url=page.url, title=page.title, error=page.error, gateway_path=self._gateway_path
        )

    def render_preamble(self, page: PageContext) -> str:
        return self._render("header.html", page)

    def render_closing(self, page: PageContext) -> str:
        return self._render("footer.html", page)

    def render_page(self, page: PageContext) -> str:
        """A complete document with no body, for the landing and error pages."""
        return self.render_preamble(page) + self.render_closing(page)
