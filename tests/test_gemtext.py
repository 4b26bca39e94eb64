# tests/test_gemtext.py
from __future__ import annotations

import dataclasses

import pytest

from gemgate.domain.gemtext import DEFAULT_PATTERNS, LineKind


@pytest.mark.parametrize(
    "line,kind,text",
    [
        ("", LineKind.BLANK, ""),
        ("   \t", LineKind.BLANK, ""),
        ("# Title", LineKind.HEADER1, "Title"),
        ("#Tight", LineKind.HEADER1, "Tight"),
        ("## Section", LineKind.HEADER2, "Section"),
        ("### Sub", LineKind.HEADER3, "Sub"),
        ("#### Deeper", LineKind.HEADER3, "# Deeper"),
        ("* item", LineKind.LIST_ITEM, "item"),
        ("*emphasis", LineKind.TEXT, "*emphasis"),
        ("> said", LineKind.QUOTE, "said"),
        (">tight", LineKind.QUOTE, "tight"),
        ("=>", LineKind.TEXT, "=>"),
        ("plain words", LineKind.TEXT, "plain words"),
    ],
)
def test_classify(line: str, kind: LineKind, text: str) -> None:
    got = DEFAULT_PATTERNS.classify(line)
    assert got.kind is kind
    assert got.text == text
    assert got.raw == line


def test_link_with_and_without_label() -> None:
    labelled = DEFAULT_PATTERNS.classify("=> b.gmi  Next page ")
    assert labelled.kind is LineKind.LINK
    assert labelled.target == "b.gmi"
    assert labelled.text == "Next page"

    bare = DEFAULT_PATTERNS.classify("=>gemini://example.org/")
    assert bare.target == "gemini://example.org/"
    assert bare.text == ""


def test_fence_carries_alt_text() -> None:
    assert DEFAULT_PATTERNS.is_fence("```python code") is not None
    assert DEFAULT_PATTERNS.is_fence("```python code").text == "python code"
    assert DEFAULT_PATTERNS.is_fence("`` not a fence") is None


def test_patterns_are_read_only() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_PATTERNS.blank = DEFAULT_PATTERNS.quote  # type: ignore[misc]
