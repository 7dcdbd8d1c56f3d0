"""AES-256-GCM encryption of stored credentials.

Artifacts are ``<ivHex>:<ciphertextHex>:<tagHex>``: a 12-byte random IV,
the ciphertext, and the 16-byte GCM authentication tag, each hex-encoded.
The format is versionless; consumers persist it as an opaque string.
"""

from __future__ import annotations

import hashlib
import os
import re

import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import VaultConfig
from .exceptions import FormatError, IntegrityError, VaultError

logger = structlog.get_logger()

IV_LENGTH = 12
TAG_LENGTH = 16
DELIMITER = ":"

_ARTIFACT_RE = re.compile(
    rf"^[0-9a-f]{{{IV_LENGTH * 2}}}:(?:[0-9a-f]{{2}})*:[0-9a-f]{{{TAG_LENGTH * 2}}}$",
    re.IGNORECASE,
)


class CredentialVault:
    """Encrypts and decrypts secret strings with a key derived from config.

    The key is SHA-256 of ``config.master_secret`` and is computed once
    per instance.  Instances hold no other state and are safe to share.
    """

    def __init__(self, config: VaultConfig) -> None:
        secret = config.master_secret.get_secret_value()
        self._aesgcm = AESGCM(hashlib.sha256(secret.encode("utf-8")).digest())

    def encrypt(self, plaintext: str) -> str:
        """Encrypt *plaintext* under a fresh random IV."""
        iv = os.urandom(IV_LENGTH)
        sealed = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), None)
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return DELIMITER.join((iv.hex(), ciphertext.hex(), tag.hex()))

    def decrypt(self, artifact: str) -> str:
        """Decrypt an artifact produced by :meth:`encrypt`.

        Raises
        ------
        FormatError
            The artifact does not have three segments, the IV or tag is
            empty, or a segment is not valid hex of the right length.
        IntegrityError
            The authentication tag does not verify.
        """
        segments = artifact.split(DELIMITER)
        if len(segments) != 3:
            raise FormatError(f"expected 3 segments, got {len(segments)}")
        iv_hex, ciphertext_hex, tag_hex = segments
        if not iv_hex or not tag_hex:
            raise FormatError("missing IV or authentication tag segment")

        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(ciphertext_hex)
            tag = bytes.fromhex(tag_hex)
        except ValueError as exc:
            raise FormatError(f"segment is not valid hex: {exc}") from exc

        if len(iv) != IV_LENGTH:
            raise FormatError(f"IV must be {IV_LENGTH} bytes, got {len(iv)}")
        if len(tag) != TAG_LENGTH:
            raise FormatError(f"tag must be {TAG_LENGTH} bytes, got {len(tag)}")

        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext + tag, None)
        except InvalidTag as exc:
            raise IntegrityError("authentication tag mismatch") from exc
        return plaintext.decode("utf-8")

    def safe_encrypt(self, value: str | None) -> str | None:
        """Encrypt *value*, passing ``None`` and ``""`` through as ``None``."""
        if not value:
            return None
        return self.encrypt(value)

    def safe_decrypt(self, value: str | None) -> str | None:
        """Decrypt *value*, tolerating secrets stored before encryption.

        ``None`` and ``""`` yield ``None``.  Any decryption failure returns
        *value* unchanged; the log event says whether it looked like legacy
        plaintext or like a tampered artifact.
        """
        if not value:
            return None
        try:
            return self.decrypt(value)
        except IntegrityError:
            logger.warning("vault_integrity_failure")
            return value
        except VaultError:
            logger.debug("vault_legacy_plaintext")
            return value

    @staticmethod
    def is_encrypted(value: str | None) -> bool:
        """Whether *value* is shaped like an artifact from :meth:`encrypt`."""
        return bool(value) and _ARTIFACT_RE.match(value) is not None
