"""Shared test fixtures for the MailPilot test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest

from mailpilot_connector import MailboxInterface, RawMessage
from mailpilot_email.config import ImapConfig
from mailpilot_email.exceptions import MailboxConnectionError
from mailpilot_schema import ClassifiedMessage
from mailpilot_vault import CredentialVault, VaultConfig


@pytest.fixture
def imap_config() -> ImapConfig:
    return ImapConfig(
        host="imap.test.com",
        port=993,
        use_ssl=True,
        username="testuser",
        password="testpass",
        mailbox="INBOX",
    )


@pytest.fixture
def vault_config() -> VaultConfig:
    return VaultConfig(master_secret="test-master-secret")


@pytest.fixture
def vault(vault_config: VaultConfig) -> CredentialVault:
    return CredentialVault(vault_config)


# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


def _build_plain_email(
    *,
    subject: str | None = "Test Subject",
    from_addr: str | None = "Test Sender <sender@example.com>",
    body: str = "Hello, World!",
    message_id: str | None = "<test-001@example.com>",
    date: str | None = "Sun, 01 Jun 2025 12:00:00 +0000",
) -> bytes:
    """Build a simple plain-text email as raw bytes; ``None`` omits a header."""
    msg = MIMEText(body, "plain")
    if subject is not None:
        msg["Subject"] = subject
    if from_addr is not None:
        msg["From"] = from_addr
    msg["To"] = "recipient@example.com"
    if message_id is not None:
        msg["Message-ID"] = message_id
    if date is not None:
        msg["Date"] = date
    return msg.as_bytes()


def _build_html_email(*, body_html: str = "<p>Hello</p>") -> bytes:
    msg = MIMEText(body_html, "html")
    msg["Subject"] = "HTML Email"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Message-ID"] = "<html-001@example.com>"
    msg["Date"] = "Sun, 01 Jun 2025 12:00:00 +0000"
    return msg.as_bytes()


def _build_multipart_email(
    *,
    body_text: str = "Plain body",
    body_html: str = "<p>HTML body</p>",
) -> bytes:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = "Multipart Email"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Message-ID"] = "<multi-001@example.com>"
    msg["Date"] = "Sun, 01 Jun 2025 12:00:00 +0000"
    msg.attach(MIMEText(body_text, "plain"))
    msg.attach(MIMEText(body_html, "html"))
    return msg.as_bytes()


def make_raw(uid: str = "100", raw_bytes: bytes | None = None, **kwargs) -> RawMessage:
    if raw_bytes is None:
        raw_bytes = _build_plain_email(message_id=f"<msg-{uid}@example.com>", **kwargs)
    return RawMessage(uid=uid, raw_bytes=raw_bytes)


@pytest.fixture
def plain_eml_bytes() -> bytes:
    return _build_plain_email()


@pytest.fixture
def html_eml_bytes() -> bytes:
    return _build_html_email()


# ------------------------------------------------------------------
# Collaborator fakes
# ------------------------------------------------------------------


class FakeMailbox(MailboxInterface):
    """In-memory mailbox that records session lifecycle like a real connector."""

    def __init__(
        self,
        messages: list[RawMessage],
        *,
        fail_on_open: Exception | None = None,
        fail_after: int | None = None,
    ) -> None:
        self.messages = messages
        self.fail_on_open = fail_on_open
        self.fail_after = fail_after
        self.opened = 0
        self.torn_down = 0
        self.yielded = 0

    async def fetch_recent(self, count: int) -> AsyncIterator[RawMessage]:
        if self.fail_on_open is not None:
            raise self.fail_on_open
        self.opened += 1
        try:
            for message in self.messages[:count]:
                if self.fail_after is not None and self.yielded >= self.fail_after:
                    raise MailboxConnectionError("connection reset")
                self.yielded += 1
                yield message
        finally:
            self.torn_down += 1

    async def test_connection(self) -> bool:
        return self.fail_on_open is None


class RecordingSink:
    def __init__(self) -> None:
        self.saved: list[ClassifiedMessage] = []

    async def save(self, message: ClassifiedMessage) -> None:
        self.saved.append(message)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()

