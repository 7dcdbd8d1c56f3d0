"""Credential vault errors."""

from __future__ import annotations

from mailpilot_connector.exceptions import MailPilotError


class VaultError(MailPilotError):
    """A stored credential could not be decrypted."""

    user_message = "credential corrupted"


class FormatError(VaultError):
    """The artifact is not ``<ivHex>:<ciphertextHex>:<tagHex>``."""


class IntegrityError(VaultError):
    """The authentication tag did not verify (tampered data or wrong key)."""
