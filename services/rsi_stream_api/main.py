"""
RSI Stream API - Entry Point

Usage:
    python -m services.rsi_stream_api.main
    curl -N http://localhost:4000/events
"""

import logging

import uvicorn

from config.settings import get_settings
from services.rsi_service.main import configure_logging
from services.rsi_stream_api.app import create_app

logger = logging.getLogger(__name__)


def run() -> None:
    """Console script entry point"""
    settings = get_settings()
    configure_logging(settings.LOG_DIR, settings.LOG_LEVEL, log_name="rsi_stream_api")

    logger.info(f"✅ SSE server listening on http://{settings.SSE_HOST}:{settings.SSE_PORT}")
    logger.info(f"   Test it: curl http://localhost:{settings.SSE_PORT}/health")

    uvicorn.run(
        create_app(),
        host=settings.SSE_HOST,
        port=settings.SSE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
