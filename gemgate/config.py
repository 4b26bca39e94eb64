# /gemgate/config.py
from __future__ import annotations

import os

from pydantic import BaseModel


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    DEBUG: bool = _flag("DEBUG", "false")  # echoes raw protocol lines to the log
    SITE_NAME: str = os.getenv("SITE_NAME", "gemgate")
    GATEWAY_PATH: str = os.getenv("GATEWAY_PATH", "/")

    # Gemini client
    DEFAULT_PORT: int = int(os.getenv("DEFAULT_PORT", "1965"))
    TLS_MIN_VERSION: str = os.getenv("TLS_MIN_VERSION", "TLSv1_2")
    CONNECT_TIMEOUT_SECONDS: float = float(os.getenv("CONNECT_TIMEOUT_SECONDS", "10.0"))
    READ_TIMEOUT_SECONDS: float = float(os.getenv("READ_TIMEOUT_SECONDS", "30.0"))
    MAX_LINE_BYTES: int = int(os.getenv("MAX_LINE_BYTES", "65536"))
    MAX_REDIRECTS: int = int(os.getenv("MAX_REDIRECTS", "5"))

    # Output
    ESCAPE_TEXT: bool = _flag("ESCAPE_TEXT", "true")
    CLOSE_OPEN_BLOCKS: bool = _flag("CLOSE_OPEN_BLOCKS", "true")
    SINK_QUEUE_SIZE: int = int(os.getenv("SINK_QUEUE_SIZE", "64"))  # chunks buffered per response

    # Server
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8080"))


settings = Settings()
