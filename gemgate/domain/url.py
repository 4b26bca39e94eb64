# /gemgate/domain/url.py
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit, urlunsplit, uses_netloc, uses_relative

from gemgate.domain.errors import InvalidURLError, LinkResolutionError

GEMINI_SCHEME = "gemini"
GEMINI_DEFAULT_PORT = 1965

# urljoin only resolves relative references for schemes it knows about
for _registry in (uses_relative, uses_netloc):
    if GEMINI_SCHEME not in _registry:
        _registry.append(GEMINI_SCHEME)


@dataclass(frozen=True, slots=True)
class SourceURL:
    scheme: str
    host: str
    port: int | None = None
    path: str = ""
    query: str = ""

    @classmethod
    def parse(cls, text: str) -> SourceURL:
        """Parse an absolute URL. Fragments and user info are dropped."""
        raw = text.strip()
        try:
            parts = urlsplit(raw)
            port = parts.port
        except ValueError as e:
            raise InvalidURLError(text, str(e)) from e
        if not parts.scheme:
            raise InvalidURLError(text, "missing scheme")
        host = parts.hostname or ""
        if parts.scheme == GEMINI_SCHEME and not host:
            raise InvalidURLError(text, "missing host")
        return cls(
            scheme=parts.scheme,
            host=host,
            port=port,
            path=parts.path,
            query=parts.query,
        )

    @property
    def is_gemini(self) -> bool:
        return self.scheme == GEMINI_SCHEME

    @property
    def effective_port(self) -> int | None:
        if self.port is not None:
            return self.port
        return GEMINI_DEFAULT_PORT if self.is_gemini else None

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return host if self.port is None else f"{host}:{self.port}"

    def join(self, reference: str) -> str:
        """
        Absolute form of a (possibly relative) reference, exactly as urljoin
        builds it: fragment, user info and host case are kept.
        """
        try:
            joined = urljoin(str(self), reference.strip())
            SourceURL.parse(joined)
        except ValueError as e:
            raise LinkResolutionError(str(self), reference, str(e)) from e
        return joined

    def resolve(self, reference: str) -> SourceURL:
        """Resolve a (possibly relative) reference against this URL."""
        return SourceURL.parse(self.join(reference))

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, ""))
