# /gemgate/domain/errors.py
from __future__ import annotations


class GatewayError(Exception):
    """Base for every failure raised while retrieving or translating a page."""


class InvalidURLError(GatewayError, ValueError):
    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"invalid url {text!r}: {reason}")
        self.text = text
        self.reason = reason


class GatewayConnectionError(GatewayError):
    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"connect to {url} failed: {cause!r}")
        self.url = url
        self.cause = cause


class ProtocolReadError(GatewayError):
    def __init__(self, url: str, detail: str) -> None:
        super().__init__(f"read from {url} failed: {detail}")
        self.url = url
        self.detail = detail


class MalformedStatusError(GatewayError):
    def __init__(self, line: str) -> None:
        super().__init__(f"invalid status line: {line!r}")
        self.line = line


class InputRequiredUnsupported(GatewayError):
    def __init__(self, url: str, prompt: str) -> None:
        super().__init__(f"{url} asks for input, which is not supported: {prompt!r}")
        self.url = url
        self.prompt = prompt


class UnsupportedContentType(GatewayError):
    """Non-fatal: the body is not text/gemini and was not translated."""

    def __init__(self, url: str, mime_type: str) -> None:
        super().__init__(f"{url} has content type {mime_type!r}, expected text/gemini")
        self.url = url
        self.mime_type = mime_type


class RedirectParseError(GatewayError):
    def __init__(self, url: str, target: str) -> None:
        super().__init__(f"{url} redirects to unparsable target {target!r}")
        self.url = url
        self.target = target


class UnhandledStatusError(GatewayError):
    def __init__(self, url: str, line: str) -> None:
        super().__init__(f"{url} answered with status: {line!r}")
        self.url = url
        self.line = line


class LinkResolutionError(GatewayError):
    """Non-fatal: a link line could not be turned into an absolute URL."""

    def __init__(self, base: str, reference: str, reason: str) -> None:
        super().__init__(f"cannot resolve {reference!r} against {base}: {reason}")
        self.base = base
        self.reference = reference


class SinkWriteError(GatewayError):
    pass


class TooManyRedirectsError(GatewayError):
    def __init__(self, url: str, hops: int) -> None:
        super().__init__(f"{url} exceeded {hops} redirects")
        self.url = url
        self.hops = hops
