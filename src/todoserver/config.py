"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with TODOSERVER_ prefix.
CLI flags on `todoserver serve` override whatever the environment provides.

Learn: max_concurrency and backlog are the knobs of the worker model.
Uvicorn rejects work beyond max_concurrency with 503, and the listening
socket queues up to `backlog` pending connections. An open WebSocket
holds one concurrency slot for its whole lifetime.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via TODOSERVER_* env vars."""

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 9001

    # Worker model
    max_concurrency: int = 16
    backlog: int = 100

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {"env_prefix": "TODOSERVER_"}

    @model_validator(mode="after")
    def validate_limits(self):
        """Concurrency and backlog must leave room for at least one connection."""
        if self.max_concurrency < 1:
            raise ValueError("TODOSERVER_MAX_CONCURRENCY must be at least 1")
        if self.backlog < 1:
            raise ValueError("TODOSERVER_BACKLOG must be at least 1")
        return self


# Singleton, import this everywhere
settings = Settings()
