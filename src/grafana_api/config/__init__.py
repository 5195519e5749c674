"""Configuration: settings tree and logging setup."""

from grafana_api.config.logger import setup_logging
from grafana_api.config.settings import AppConfig

__all__ = ["AppConfig", "setup_logging"]
