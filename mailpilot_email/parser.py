"""MIME parser: walks a raw message to extract the fields the pipeline needs."""

from __future__ import annotations

import email
import email.message
import email.policy
import email.utils
import re
import time
from datetime import UTC, datetime

import structlog
from bs4 import BeautifulSoup

from mailpilot_connector import RawMessage
from mailpilot_schema import ParsedMessage

from .exceptions import ParseError

logger = structlog.get_logger()

DEFAULT_SUBJECT = "No Subject"
DEFAULT_SENDER = "Unknown Sender"

_BLANK_LINES_RE = re.compile(r"\n\s*\n+")


class MessageParser:
    """Stateless parser: :class:`RawMessage` → :class:`ParsedMessage`.

    Missing fields get defaults rather than errors; only a message that
    cannot be decoded at all raises :class:`ParseError`.
    """

    def parse(self, raw: RawMessage, *, index: int = 0) -> ParsedMessage:
        """Parse *raw*; *index* is its position in the batch, used for generated ids."""
        try:
            msg = email.message_from_bytes(raw.raw_bytes, policy=email.policy.default)
            sender, sender_address = self._parse_sender(msg)
            return ParsedMessage(
                message_id=self._message_id(msg, index),
                subject=str(msg.get("Subject", "")).strip() or DEFAULT_SUBJECT,
                sender=sender,
                sender_address=sender_address,
                date=self._parse_date(msg, raw.internal_date),
                body=self._extract_body(msg),
            )
        except ParseError:
            raise
        except Exception as exc:
            raise ParseError(raw.uid, f"{type(exc).__name__}: {exc}") from exc

    # ------------------------------------------------------------------
    # Headers
    # ------------------------------------------------------------------

    @staticmethod
    def _message_id(msg: email.message.Message, index: int) -> str:
        message_id = str(msg.get("Message-ID", "")).strip()
        if message_id:
            return message_id
        return f"{int(time.time() * 1000)}-{index}"

    @staticmethod
    def _parse_sender(msg: email.message.Message) -> tuple[str, str]:
        name, address = email.utils.parseaddr(str(msg.get("From", "")))
        return name or address or DEFAULT_SENDER, address

    @staticmethod
    def _parse_date(msg: email.message.Message, fallback: datetime | None) -> datetime:
        header = str(msg.get("Date", "")).strip()
        if header:
            try:
                parsed = email.utils.parsedate_to_datetime(header)
            except (TypeError, ValueError):
                parsed = None
            if parsed is not None:
                if parsed.tzinfo is None:
                    return parsed.replace(tzinfo=UTC)
                return parsed.astimezone(UTC)
        return fallback or datetime.now(UTC)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def _extract_body(self, msg: email.message.Message) -> str:
        body_text, body_html = self._extract_bodies(msg)
        if body_text is not None:
            return body_text
        if body_html is not None:
            return html_to_text(body_html)
        return ""

    @staticmethod
    def _extract_bodies(msg: email.message.Message) -> tuple[str | None, str | None]:
        """Walk MIME parts and return the first (plain_text, html_text)."""
        body_text: str | None = None
        body_html: str | None = None

        for part in msg.walk():
            if part.get_content_maintype() == "multipart":
                continue
            if "attachment" in str(part.get("Content-Disposition", "")):
                continue

            content_type = part.get_content_type()
            if content_type not in ("text/plain", "text/html"):
                continue
            payload = _decode_text(part)
            if content_type == "text/plain" and body_text is None:
                body_text = payload
            elif content_type == "text/html" and body_html is None:
                body_html = payload

        return body_text, body_html


def _decode_text(part: email.message.Message) -> str:
    """Decode a text part, reading unknown charsets as UTF-8 with replacement."""
    try:
        return part.get_content()
    except LookupError:
        logger.debug("unknown_charset", charset=part.get_content_charset())
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="replace")


def html_to_text(html: str) -> str:
    """Render an HTML body to readable plain text."""
    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style", "head", "meta", "link", "noscript"]):
        element.decompose()
    text = soup.get_text(separator="\n")
    lines = (line.strip() for line in text.splitlines())
    return _BLANK_LINES_RE.sub("\n\n", "\n".join(lines)).strip()
