#!/usr/bin/env python3
"""
lottocheck FastAPI Application Entrypoint

All routes live in lottocheck/api.py; this file configures logging and
starts uvicorn. Reads HOST, PORT, LOG_LEVEL from environment (loaded from
.env when available).
"""
import os

from dotenv import load_dotenv

load_dotenv()

from lottocheck.api import app  # noqa: E402
from lottocheck.config import get_settings  # noqa: E402
from lottocheck.logging_config import configure_logging  # noqa: E402

# Uvicorn supported levels
UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


def server_options() -> dict:
    """Resolve host, port and log level for uvicorn, falling back on bad values."""
    port_str = os.getenv("PORT", "8000")
    try:
        port = int(port_str)
    except ValueError:
        port = 8000

    log_level = (os.getenv("LOG_LEVEL") or get_settings().log_level).lower()
    if log_level not in UVICORN_LEVELS:
        log_level = "info"

    return {"host": os.getenv("HOST", "0.0.0.0"), "port": port, "log_level": log_level}


def main() -> None:
    import uvicorn

    options = server_options()
    configure_logging(options["log_level"])
    uvicorn.run(app, **options)


if __name__ == "__main__":
    main()
