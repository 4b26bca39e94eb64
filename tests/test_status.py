# tests/test_status.py
from __future__ import annotations

import pytest

from gemgate.domain.errors import MalformedStatusError
from gemgate.domain.status import ResponseStatus


def test_success_line() -> None:
    s = ResponseStatus.parse("20 text/gemini; charset=ISO-8859-1\r\n")
    assert s.code == 20
    assert s.family == "2"
    assert s.mime_type == "text/gemini"
    assert s.charset == "ISO-8859-1"
    assert s.is_gemtext


def test_empty_meta_means_gemtext_utf8() -> None:
    s = ResponseStatus.parse("20\r\n")
    assert s.meta == ""
    assert s.is_gemtext and s.charset == "utf-8"


def test_redirect_meta_and_bare_newline() -> None:
    s = ResponseStatus.parse("31 gemini://example.org/new\n")
    assert s.family == "3"
    assert s.meta == "gemini://example.org/new"


def test_other_mime() -> None:
    assert not ResponseStatus.parse("20 Image/PNG\r\n").is_gemtext


@pytest.mark.parametrize(
    "line",
    ["", "\r\n", "hello\r\n", "70 nope\r\n", "2 text/gemini\r\n", "20text/gemini\r\n", "20 text/gemini"],
)
def test_malformed(line: str) -> None:
    with pytest.raises(MalformedStatusError) as ei:
        ResponseStatus.parse(line)
    assert ei.value.line == line
