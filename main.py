"""
Main entry point for Gigboard Service.
"""

import uvicorn
import os
import logging

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    # Get configuration from environment
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "false").lower() == "true"
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logger.info(f"Starting Gigboard Service on {host}:{port}")

    uvicorn.run(
        "gigboard.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=True
    )
