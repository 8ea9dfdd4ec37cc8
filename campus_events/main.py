"""Main entry point for campus-events.

Runs the API server with uvicorn using host, port and log level from
settings. ``--reload`` restarts the server on code changes.
"""

from __future__ import annotations

import sys
from typing import NoReturn


def run_fastapi_server(reload: bool = False) -> NoReturn:
    """Run the FastAPI application server."""
    import uvicorn

    from campus_events.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "campus_events.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload or settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )
    sys.exit(0)


def main() -> NoReturn:
    run_fastapi_server(reload="--reload" in sys.argv)


if __name__ == "__main__":
    main()
