"""Async IMAP client wrapping stdlib imaplib with asyncio.to_thread."""

from __future__ import annotations

import asyncio
import imaplib
import time
from collections.abc import AsyncIterator, Callable
from datetime import UTC, date, datetime, timedelta
from typing import Any, TypeVar

import structlog

from mailpilot_connector import ConfigurationError, MailboxInterface, RawMessage
from mailpilot_vault import CredentialVault

from .config import ImapConfig
from .exceptions import MailboxConnectionError

logger = structlog.get_logger()

T = TypeVar("T")

# BODY.PEEK leaves the \Seen flag alone; read state belongs to persistence.
FETCH_ITEMS = "(FLAGS INTERNALDATE BODY.PEEK[])"

_Connection = imaplib.IMAP4_SSL | imaplib.IMAP4

# IMAP dates use English month names whatever the process locale.
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def imap_date(value: date) -> str:
    """Format *value* as an IMAP search date, e.g. ``05-Mar-2025``."""
    return f"{value.day:02d}-{MONTHS[value.month - 1]}-{value.year:04d}"


class AsyncImapClient(MailboxInterface):
    """Async-friendly IMAP mailbox connector.

    Each :meth:`fetch_recent` call owns one session: it logs in, selects
    the configured folder, streams matching messages and logs out.  All
    blocking ``imaplib`` operations are wrapped with ``asyncio.to_thread()``
    to avoid blocking the event loop.

    When a *vault* is given, the configured password is passed through
    :meth:`CredentialVault.safe_decrypt`, so both encrypted and legacy
    plaintext passwords work.
    """

    def __init__(self, config: ImapConfig, vault: CredentialVault | None = None) -> None:
        self._config = config
        self._vault = vault

    # ------------------------------------------------------------------
    # Message retrieval
    # ------------------------------------------------------------------

    async def fetch_recent(self, count: int) -> AsyncIterator[RawMessage]:
        """Yield up to *count* unseen messages from the last ``lookback_days``.

        Raises ``ConfigurationError`` before any network activity when
        host or credentials are missing, and ``MailboxConnectionError``
        when the session cannot be opened or breaks while streaming.
        """
        if count <= 0:
            return

        username, password = self._credentials()
        conn = await self._open(username, password)
        try:
            uids = await self._run(self._search_sync, conn, self._search_criteria())
            logger.info("imap_search_complete", matched=len(uids), requested=count)

            yielded = 0
            for uid in uids:
                message = await self._run(self._fetch_sync, conn, uid)
                if message is None:
                    continue
                yield message
                yielded += 1
                if yielded >= count:
                    break
        finally:
            await self._teardown(conn)

    async def test_connection(self) -> bool:
        """Open and immediately close a session."""
        try:
            username, password = self._credentials()
            conn = await self._open(username, password)
        except (ConfigurationError, MailboxConnectionError) as exc:
            logger.warning("imap_connection_test_failed", error=str(exc))
            return False
        await self._teardown(conn)
        return True

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _credentials(self) -> tuple[str, str]:
        password = self._config.password.get_secret_value()
        missing = [
            name
            for name, value in (
                ("host", self._config.host),
                ("username", self._config.username),
                ("password", password),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"IMAP settings missing: {', '.join(missing)}")

        if self._vault is not None:
            password = self._vault.safe_decrypt(password) or ""
        return self._config.username, password

    async def _open(self, username: str, password: str) -> _Connection:
        conn = await self._run(self._connect_sync)
        try:
            await self._run(self._login_sync, conn, username, password)
        except BaseException:
            await self._teardown(conn)
            raise
        logger.info(
            "imap_connected",
            host=self._config.host,
            mailbox=self._config.mailbox,
        )
        return conn

    async def _teardown(self, conn: _Connection) -> None:
        """Log out; failures are logged and never replace the fetch outcome."""
        try:
            await asyncio.to_thread(conn.logout)
        except (imaplib.IMAP4.error, OSError) as exc:
            logger.warning("imap_logout_failed", error=str(exc))
        else:
            logger.info("imap_disconnected")

    @staticmethod
    async def _run(func: Callable[..., T], *args: Any) -> T:
        """Run a blocking imaplib call in a thread, mapping transport errors."""
        try:
            return await asyncio.to_thread(func, *args)
        except (imaplib.IMAP4.error, OSError) as exc:
            raise MailboxConnectionError(str(exc) or type(exc).__name__) from exc

    def _search_criteria(self) -> str:
        since = datetime.now(UTC) - timedelta(days=self._config.lookback_days)
        return f"UNSEEN SINCE {imap_date(since)}"

    # ------------------------------------------------------------------
    # Synchronous helpers (run in thread)
    # ------------------------------------------------------------------

    def _connect_sync(self) -> _Connection:
        if self._config.use_ssl:
            return imaplib.IMAP4_SSL(self._config.host, self._config.port)
        return imaplib.IMAP4(self._config.host, self._config.port)

    def _login_sync(self, conn: _Connection, username: str, password: str) -> None:
        conn.login(username, password)
        status, data = conn.select(self._config.mailbox)
        if status != "OK":
            raise imaplib.IMAP4.error(f"cannot select {self._config.mailbox}: {data!r}")

    @staticmethod
    def _search_sync(conn: _Connection, criteria: str) -> list[str]:
        status, data = conn.uid("SEARCH", None, criteria)
        if status != "OK":
            raise imaplib.IMAP4.error(f"search failed: {data!r}")
        if not data or not data[0]:
            return []
        return [uid.decode() for uid in data[0].split()]

    @staticmethod
    def _fetch_sync(conn: _Connection, uid: str) -> RawMessage | None:
        status, msg_data = conn.uid("FETCH", uid, FETCH_ITEMS)
        if status != "OK" or not msg_data or not isinstance(msg_data[0], tuple):
            logger.debug("imap_fetch_empty", uid=uid)
            return None

        meta, raw_bytes = msg_data[0]
        flags = tuple(flag.decode() for flag in imaplib.ParseFlags(meta))
        date_tuple = imaplib.Internaldate2tuple(meta)
        internal_date = (
            datetime.fromtimestamp(time.mktime(date_tuple), UTC) if date_tuple else None
        )
        return RawMessage(
            uid=uid,
            raw_bytes=raw_bytes,
            flags=flags,
            internal_date=internal_date,
        )
