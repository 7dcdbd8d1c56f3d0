"""Vault configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class VaultConfig(BaseSettings):
    """Master secret used to derive the vault's symmetric key.

    The secret must stay constant for the lifetime of the stored
    artifacts; rotating it makes every existing artifact undecryptable.
    """

    model_config = {"env_prefix": "VAULT_"}

    master_secret: SecretStr = Field(description="Secret hashed into the AES-256 key")
