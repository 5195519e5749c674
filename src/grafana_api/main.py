"""Application entry point for the API server."""

from __future__ import annotations

import uvicorn

from grafana_api.config.logger import setup_logging
from grafana_api.config.settings import AppConfig


def main() -> None:
    """Start the API server."""
    config = AppConfig()
    setup_logging(config.logging)
    uvicorn.run(
        "grafana_api.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=config.reload,
        timeout_keep_alive=config.server.idle_timeout,
        log_level=str(config.logging.level),
    )


if __name__ == "__main__":
    main()
