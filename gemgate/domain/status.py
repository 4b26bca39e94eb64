# /gemgate/domain/status.py
from __future__ import annotations

import re
from dataclasses import dataclass

from gemgate.domain.errors import MalformedStatusError

GEMTEXT_MIME = "text/gemini"
DEFAULT_META = "text/gemini; charset=utf-8"

_STATUS = re.compile(r"^(?P<code>[1-6][0-9])(?:[ \t]+(?P<meta>.*?))?[ \t]*\r?\n$")


@dataclass(frozen=True, slots=True)
class ResponseStatus:
    """A parsed Gemini response header such as ``20 text/gemini``."""

    code: int
    meta: str
    line: str

    @classmethod
    def parse(cls, line: str) -> ResponseStatus:
        m = _STATUS.match(line)
        if m is None:
            raise MalformedStatusError(line)
        return cls(code=int(m.group("code")), meta=m.group("meta") or "", line=line)

    @property
    def family(self) -> str:
        return str(self.code)[0]

    def _media(self) -> tuple[str, dict[str, str]]:
        mime, *params = (self.meta or DEFAULT_META).split(";")
        parsed: dict[str, str] = {}
        for p in params:
            key, sep, value = p.partition("=")
            if sep:
                parsed[key.strip().lower()] = value.strip().strip('"')
        return mime.strip().lower(), parsed

    @property
    def mime_type(self) -> str:
        return self._media()[0]

    @property
    def charset(self) -> str:
        return self._media()[1].get("charset", "utf-8")

    @property
    def is_gemtext(self) -> bool:
        return self.mime_type == GEMTEXT_MIME
