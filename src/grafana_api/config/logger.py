"""Logging setup for the service process."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grafana_api.config.settings import LoggingConfig

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger from the logging settings.

    Safe to call more than once; the level is always re-applied.
    """
    level = getattr(logging, str(config.level).upper(), logging.INFO)
    logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger().setLevel(level)
    logging.getLogger("grafana_api").setLevel(level)
