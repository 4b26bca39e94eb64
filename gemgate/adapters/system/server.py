# /gemgate/adapters/system/server.py
from __future__ import annotations

import uvicorn

from gemgate.config import settings


def main() -> None:
    """Console entry point: serve the gateway with uvicorn."""
    # log_config=None leaves the JSON root handler from configure_logger in charge
    uvicorn.run(
        "gemgate.adapters.api.fastapi_app:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
