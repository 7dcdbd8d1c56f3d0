"""Mailbox ingestion configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings

from mailpilot_connector import LoggingConfig, RetryConfig


class ImapConfig(BaseSettings):
    """IMAP server connection settings.

    Credentials default to empty so a half-configured process can still
    start; the connector rejects them with ``ConfigurationError`` before
    opening a session.  ``password`` may hold a vault artifact.
    """

    model_config = {"env_prefix": "IMAP_"}

    host: str = Field(default="imap.gmail.com", description="IMAP server hostname")
    port: int = Field(default=993, description="IMAP server port")
    use_ssl: bool = Field(default=True, description="Use SSL/TLS connection")
    username: str = Field(default="", description="IMAP login username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="IMAP login password, plain or vault-encrypted",
    )
    mailbox: str = Field(default="INBOX", description="IMAP folder to read")
    lookback_days: int = Field(
        default=7,
        ge=1,
        description="Only unseen messages received within this many days are fetched",
    )

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        return value.strip()

    @field_validator("password")
    @classmethod
    def _strip_password_whitespace(cls, value: SecretStr) -> SecretStr:
        # App passwords are often pasted with the spaces they are displayed with.
        return SecretStr("".join(value.get_secret_value().split()))


class IngestionConfig(BaseSettings):
    """Top-level settings for a mailbox refresh.

    Nested configs are populated from their own env-var prefixes.
    """

    model_config = {"env_prefix": "INGESTION_"}

    batch_size: int = Field(default=10, ge=1, description="Messages fetched per refresh")
    rules_path: Path | None = Field(
        default=None,
        description="JSON keyword rule table; the packaged table is used when unset",
    )
    clean_bodies: bool = Field(
        default=False,
        description="Strip signatures and quoted replies before classifying",
    )
    fetch_timeout_seconds: float = Field(
        default=120.0,
        description="Upper bound the CLI places on one refresh attempt",
    )
    health_host: str = Field(default="0.0.0.0", description="Health server bind address")
    health_port: int = Field(default=8080, description="Health server port")

    imap: ImapConfig = Field(default_factory=ImapConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
