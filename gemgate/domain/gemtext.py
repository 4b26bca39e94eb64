# /gemgate/domain/gemtext.py
from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class LineKind(enum.Enum):
    PREFORMAT_FENCE = "preformat_fence"
    BLANK = "blank"
    HEADER1 = "header1"
    HEADER2 = "header2"
    HEADER3 = "header3"
    LINK = "link"
    LIST_ITEM = "list_item"
    QUOTE = "quote"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class GemtextLine:
    kind: LineKind
    raw: str
    text: str = ""  # heading/list/quote text, link label, or fence alt text
    target: str = ""  # link lines only


@dataclass(frozen=True, slots=True)
class GemtextPatterns:
    """Compiled line matchers, tried in declaration order after the fence check."""

    fence: re.Pattern[str]
    blank: re.Pattern[str]
    header1: re.Pattern[str]
    header2: re.Pattern[str]
    header3: re.Pattern[str]
    link: re.Pattern[str]
    list_item: re.Pattern[str]
    quote: re.Pattern[str]

    @classmethod
    def compile(cls) -> GemtextPatterns:
        return cls(
            fence=re.compile(r"^```(.*)$"),
            blank=re.compile(r"^\s*$"),
            header1=re.compile(r"^#(?!#)[ \t]*(.*)$"),
            header2=re.compile(r"^##(?!#)[ \t]*(.*)$"),
            header3=re.compile(r"^###[ \t]*(.*)$"),
            link=re.compile(r"^=>[ \t]*(\S+)(?:[ \t]+(.*))?$"),
            list_item=re.compile(r"^\* (.*)$"),
            quote=re.compile(r"^>[ \t]?(.*)$"),
        )

    def is_fence(self, line: str) -> GemtextLine | None:
        m = self.fence.match(line)
        if m is None:
            return None
        return GemtextLine(LineKind.PREFORMAT_FENCE, line, text=m.group(1).strip())

    def classify(self, line: str) -> GemtextLine:
        """Classify a line outside preformatted blocks. Falls back to TEXT."""
        if self.blank.match(line):
            return GemtextLine(LineKind.BLANK, line)
        for kind, pattern in (
            (LineKind.HEADER1, self.header1),
            (LineKind.HEADER2, self.header2),
            (LineKind.HEADER3, self.header3),
        ):
            m = pattern.match(line)
            if m:
                return GemtextLine(kind, line, text=m.group(1).strip())
        m = self.link.match(line)
        if m:
            return GemtextLine(LineKind.LINK, line, text=(m.group(2) or "").strip(), target=m.group(1))
        m = self.list_item.match(line)
        if m:
            return GemtextLine(LineKind.LIST_ITEM, line, text=m.group(1).strip())
        m = self.quote.match(line)
        if m:
            return GemtextLine(LineKind.QUOTE, line, text=m.group(1).strip())
        return GemtextLine(LineKind.TEXT, line, text=line)


DEFAULT_PATTERNS = GemtextPatterns.compile()
