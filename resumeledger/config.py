"""Service configuration — env-driven, read once at start-up.

Centralized config using pydantic-settings. Reads from a .env file and
RESUMELEDGER_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_PATH = Path(".resumeledger/resumes.db")


class ServiceConfig(BaseSettings):
    """Service configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export RESUMELEDGER_ENVIRONMENT=production
        export RESUMELEDGER_DATABASE_PATH=/data/resumes.db
        export RESUMELEDGER_TX_WAIT_SECONDS=5

    Or via .env file::

        RESUMELEDGER_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RESUMELEDGER_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage
    database_path: Path = DEFAULT_DATABASE_PATH

    # Write transaction budgets
    tx_wait_seconds: float = 10.0    # how long to queue for the write lock
    tx_timeout_seconds: float = 50.0  # how long a transaction may run
    tx_max_retries: int = 3

    # Analytics collaborator
    analytics_enabled: bool = True
    analytics_background: bool = False
    analytics_workers: int = 2
    analytics_wait_seconds: float = 0.25  # max lock wait per event, no retries

    # Renderer collaborator
    default_template: str = "json"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Module-level singleton: import as `from resumeledger.config import config`
config = ServiceConfig()
