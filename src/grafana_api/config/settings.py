"""Service settings.

Precedence: ``GRAFANA_API_*`` environment variables (``__`` separates
nested sections), then the YAML file named by ``config_path``, then the
defaults below.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class DatabaseEngine(enum.StrEnum):
    """Storage backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class LogLevel(enum.StrEnum):
    """Accepted log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """Listener and timeouts for uvicorn."""

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    idle_timeout: int = 60


class DatabaseConfig(BaseSettings):
    """Database settings.

    When ``dsn`` is empty and the engine is PostgreSQL, the DSN is assembled
    from the discrete host/port/user/password/name fields.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_DB__",
        case_sensitive=False,
    )

    engine: DatabaseEngine = Field(
        default=DatabaseEngine.SQLITE,
        description="Database backend: sqlite or postgresql",
    )
    dsn: str = Field(
        default="sqlite+aiosqlite:///./grafana_api.db",
        description="Async database connection string",
    )
    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = "password"  # noqa: S105
    name: str = "go_grafana"
    ssl_mode: str = "disable"
    max_idle_connections: int = 5
    max_open_connections: int = 10
    debug_sql: bool = False

    @property
    def url(self) -> str:
        """Return the effective async connection string."""
        if self.dsn:
            return self.dsn
        if self.engine == DatabaseEngine.POSTGRESQL:
            url = (
                f"postgresql+asyncpg://{self.user}:{self.password}"
                f"@{self.host}:{self.port}/{self.name}"
            )
            if self.ssl_mode and self.ssl_mode != "disable":
                url += f"?ssl={self.ssl_mode}"
            return url
        return "sqlite+aiosqlite:///./grafana_api.db"


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_LOGGING__",
        case_sensitive=False,
    )

    level: LogLevel = LogLevel.INFO


class CORSConfig(BaseSettings):
    """Cross-origin resource sharing settings."""

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_CORS__",
        case_sensitive=False,
    )

    allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(
        default_factory=lambda: [
            "Origin",
            "Content-Type",
            "Accept",
            "Authorization",
            "X-Requested-With",
        ]
    )
    expose_headers: list[str] = Field(
        default_factory=lambda: ["Content-Length", "Content-Type"]
    )
    allow_credentials: bool = True


class MetricsConfig(BaseSettings):
    """Toggles the Prometheus request instrumentation."""

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


class AuthConfig(BaseSettings):
    """API key authentication settings."""

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_AUTH__",
        case_sensitive=False,
    )

    bootstrap_key: str = Field(
        default="",
        description="Plaintext API key seeded on startup if not already stored",
    )
    bootstrap_key_name: str = "bootstrap"


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Mapping stored in *path*; missing or non-mapping files give ``{}``."""
    file = Path(path)
    if not file.is_file():
        return {}
    data = yaml.safe_load(file.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Root settings object handed to the engine and the app factory."""

    model_config = SettingsConfigDict(
        env_prefix="GRAFANA_API_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    reload: bool = Field(
        default=False,
        description="Restart uvicorn on source changes (development only)",
    )
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    @model_validator(mode="before")
    @classmethod
    def _layer_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fill in from the YAML file anything the environment left unset."""
        path = values.get("config_path")
        if not path:
            return values
        merged = dict(values)
        for section, from_file in _load_yaml(path).items():
            current = merged.get(section)
            if current is None:
                merged[section] = from_file
            elif isinstance(current, dict) and isinstance(from_file, dict):
                merged[section] = from_file | current
        return merged

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Settings with *path* as the YAML layer."""
        return cls(config_path=str(path))

    def log_summary(self) -> dict[str, Any]:
        """Return the non-sensitive settings worth logging at startup."""
        return {
            "server_port": self.server.port,
            "db_engine": str(self.db.engine),
            "db_host": self.db.host,
            "db_name": self.db.name,
            "log_level": str(self.logging.level),
            "metrics_enabled": self.metrics.enabled,
        }
