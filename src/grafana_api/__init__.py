"""py-grafana-api: user and API key management service."""

__version__ = "0.1.0"
