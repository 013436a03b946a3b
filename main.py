"""
Main entrypoint: FastAPI validation server.

Env: RWA_DB_URL / DATABASE_URL, API_HOST, API_PORT, LOG_LEVEL and the
reference-service credentials (see backend_rwa/config/settings.py).

Equivalent: uvicorn backend_rwa.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from backend_rwa.rwa_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Create tables, then run the API server in the main thread."""
    from backend_rwa.config import get_settings
    from backend_rwa.database import get_database

    settings = get_settings()
    get_database()

    from backend_rwa.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
