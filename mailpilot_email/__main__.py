"""Entry point for the email ingestion package.

Usage::

    python -m mailpilot_email refresh   # fetch + classify, print JSON lines
    python -m mailpilot_email check     # open and close one mailbox session
    python -m mailpilot_email health    # serve GET /health
    python -m mailpilot_email encrypt   # read a secret on stdin, print its artifact
"""

from __future__ import annotations

import asyncio
import os
import sys
from typing import TextIO

import structlog
import uvicorn

from mailpilot_connector import MailPilotError, setup_logging, with_retry
from mailpilot_schema import ClassifiedMessage
from mailpilot_vault import CredentialVault, VaultConfig

from .classifier import KeywordClassifier
from .cleaner import EmailCleaner
from .config import IngestionConfig
from .exceptions import MailboxConnectionError
from .health import create_health_app
from .imap_client import AsyncImapClient
from .pipeline import BatchReport, IngestionPipeline
from .rules import load_rules

logger = structlog.get_logger()

MODES = ("refresh", "check", "health", "encrypt")
USAGE = f"Usage: python -m mailpilot_email <{'|'.join(MODES)}>"


class JsonLinesSink:
    """Writes each classified message to *stream* as one JSON line."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    async def save(self, message: ClassifiedMessage) -> None:
        self._stream.write(message.model_dump_json() + "\n")
        self._stream.flush()


def build_vault() -> CredentialVault | None:
    """Return a vault when ``VAULT_MASTER_SECRET`` is configured."""
    if not os.environ.get("VAULT_MASTER_SECRET"):
        return None
    return CredentialVault(VaultConfig())


async def refresh(
    config: IngestionConfig,
    vault: CredentialVault | None,
    out: TextIO,
) -> BatchReport:
    """One refresh, retried on connection failures and bounded by a timeout."""
    pipeline = IngestionPipeline(
        AsyncImapClient(config.imap, vault),
        sink=JsonLinesSink(out),
        classifier=KeywordClassifier(load_rules(config.rules_path)),
        cleaner=EmailCleaner() if config.clean_bodies else None,
    )

    @with_retry(config.retry, retryable_exceptions=(MailboxConnectionError, TimeoutError))
    async def _attempt() -> BatchReport:
        return await asyncio.wait_for(
            pipeline.run(config.batch_size),
            timeout=config.fetch_timeout_seconds,
        )

    return await _attempt()


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] not in MODES:
        print(USAGE, file=sys.stderr)
        return 1

    mode = args[0]
    config = IngestionConfig()
    setup_logging(config.logging)
    vault = build_vault()

    if mode == "encrypt":
        if vault is None:
            print("error: VAULT_MASTER_SECRET is not set", file=sys.stderr)
            return 1
        print(vault.encrypt(sys.stdin.readline().rstrip("\n")))
        return 0

    if mode == "check":
        connected = asyncio.run(AsyncImapClient(config.imap, vault).test_connection())
        print("connected" if connected else "disconnected")
        return 0 if connected else 1

    if mode == "health":
        app = create_health_app(AsyncImapClient(config.imap, vault))
        uvicorn.run(app, host=config.health_host, port=config.health_port, log_level="warning")
        return 0

    try:
        report = asyncio.run(refresh(config, vault, sys.stdout))
    except MailPilotError as exc:
        logger.error("refresh_failed", error=str(exc), error_type=type(exc).__name__)
        print(f"error: {exc.user_message}", file=sys.stderr)
        return 1
    except TimeoutError:
        logger.error("refresh_timed_out", timeout_seconds=config.fetch_timeout_seconds)
        print(f"error: {MailboxConnectionError.user_message}", file=sys.stderr)
        return 1

    for item in report.skipped:
        print(f"skipped uid {item.uid}: {item.reason}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
