"""
Server entrypoint for the Midgen AI 2 API adapter.

Usage:
    python -m midgen2api

Reads `HOST`, `PORT`, `API_MASTER_KEY`, `UPSTREAM_TIMEOUT` and `DEBUG` from
the environment (or `.env`), logs a startup banner, and serves the FastAPI
app with uvicorn. Signal handling and graceful shutdown are left to uvicorn.
"""

import logging

import uvicorn

from midgen2api.api.http_api import create_app
from midgen2api.config import load_settings


logger = logging.getLogger("midgen2api")


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def log_banner(settings) -> None:
    logger.info("%s v%s", settings.project_name, settings.project_version)
    logger.info("Server listening on http://%s:%s", settings.host, settings.port)
    logger.info(
        "API key: %s",
        "configured" if settings.auth_enabled else "not set (development mode)",
    )
    logger.info("Endpoints:")
    logger.info("   - GET  /v1/models")
    logger.info("   - POST /v1/chat/completions")
    logger.info("   - POST /v1/images/generations")


def main():
    settings = load_settings()
    configure_logging(settings.debug)
    log_banner(settings)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
