"""MailPilot credential vault: authenticated encryption of stored secrets."""

from .config import VaultConfig
from .exceptions import FormatError, IntegrityError, VaultError
from .vault import CredentialVault

__all__ = [
    "CredentialVault",
    "FormatError",
    "IntegrityError",
    "VaultConfig",
    "VaultError",
]
