# tests/test_renderer.py
from __future__ import annotations

from gemgate.adapters.render.jinja_renderer import JinjaPageRenderer
from gemgate.ports.page_renderer import PageContext


def test_preamble_escapes_title_and_url() -> None:
    r = JinjaPageRenderer("/")
    out = r.render_preamble(PageContext(url="gemini://x/<script>", title="gemgate <t>"))
    assert "<title>gemgate &lt;t&gt;</title>" in out
    assert "<script>" not in out
    assert 'action="/"' in out
    assert 'class="error"' not in out
    assert out.rstrip().endswith("<main>")


def test_error_notice_rendered() -> None:
    r = JinjaPageRenderer("/gw")
    out = r.render_page(PageContext(url="gemini://x/", title="t", error="It broke."))
    assert '<div class="error"><p>It broke.</p><p>gemini://x/</p></div>' in out
    assert 'action="/gw"' in out
    assert out.rstrip().endswith("</html>")
