"""Framework configuration loaded from environment variables.

Every field can be overridden via env vars; constructors receive the
resulting objects explicitly rather than reading the environment themselves.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class RetryConfig(BaseSettings):
    """Retry / backoff settings driven by Tenacity.

    Applied by callers of a mailbox refresh; the ingestion core itself never
    retries.
    """

    model_config = {"env_prefix": "RETRY_"}

    max_attempts: int = Field(default=3, description="Maximum refresh attempts")
    initial_wait_seconds: float = Field(
        default=1.0,
        description="Initial backoff wait in seconds",
    )
    max_wait_seconds: float = Field(
        default=30.0,
        description="Maximum backoff wait in seconds",
    )
    multiplier: float = Field(default=2.0, description="Exponential backoff multiplier")


class LoggingConfig(BaseSettings):
    """structlog output settings."""

    model_config = {"env_prefix": "LOG_"}

    level: str = Field(default="INFO", description="Root log level name")
    json_output: bool = Field(
        default=True,
        description="Emit JSON lines (True for prod, False for a console renderer)",
    )
