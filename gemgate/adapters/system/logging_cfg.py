# /gemgate/adapters/system/logging_cfg.py
from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO


class JSONLineHandler(logging.StreamHandler):
    """One JSON object per record; structured fields come from extra={"extra": {...}}."""

    def emit(self, record: logging.LogRecord) -> None:
        payload: dict[str, Any] = {
            "ts": round(record.created, 3),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = logging.Formatter().formatException(record.exc_info)
        self.stream.write(json.dumps(payload, default=str) + "\n")
        self.flush()


def configure_logger(debug: bool = False, stream: TextIO | None = None) -> None:
    # debug turns on the raw protocol echo (gemini.status, gemtext.line)
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(JSONLineHandler(stream=stream or sys.stdout))
    # one access line per proxied page is noise next to gateway.* events
    logging.getLogger("uvicorn.access").setLevel(logging.INFO if debug else logging.WARNING)
