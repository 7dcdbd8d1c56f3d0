"""Tests for mailpilot_email.parser."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from mailpilot_connector import RawMessage
from mailpilot_email.exceptions import ParseError
from mailpilot_email.parser import DEFAULT_SENDER, DEFAULT_SUBJECT, MessageParser, html_to_text

from tests.conftest import _build_html_email, _build_multipart_email, _build_plain_email


@pytest.fixture
def parser() -> MessageParser:
    return MessageParser()


def _raw(raw_bytes: bytes, uid: str = "7", internal_date: datetime | None = None) -> RawMessage:
    return RawMessage(uid=uid, raw_bytes=raw_bytes, internal_date=internal_date)


class TestMessageParserPlainText:
    def test_parse_plain_email(self, parser: MessageParser, plain_eml_bytes: bytes):
        result = parser.parse(_raw(plain_eml_bytes))
        assert result.message_id == "<test-001@example.com>"
        assert result.subject == "Test Subject"
        assert result.sender == "Test Sender"
        assert result.sender_address == "sender@example.com"
        assert result.body == "Hello, World!"
        assert result.date == datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def test_date_converted_to_utc(self, parser: MessageParser):
        raw = _build_plain_email(date="Sun, 01 Jun 2025 14:00:00 +0200")
        result = parser.parse(_raw(raw))
        assert result.date == datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def test_bare_address_used_as_display(self, parser: MessageParser):
        raw = _build_plain_email(from_addr="pm@company.com")
        result = parser.parse(_raw(raw))
        assert result.sender == "pm@company.com"
        assert result.sender_address == "pm@company.com"


class TestMessageParserBodies:
    def test_html_rendered_to_text(self, parser: MessageParser, html_eml_bytes: bytes):
        result = parser.parse(_raw(html_eml_bytes))
        assert result.body == "Hello"

    def test_plain_preferred_over_html(self, parser: MessageParser):
        raw = _build_multipart_email(body_text="Plain text", body_html="<p>HTML</p>")
        result = parser.parse(_raw(raw))
        assert result.body == "Plain text"

    def test_html_strips_scripts_and_styles(self):
        html = "<html><head><style>p{}</style></head><body><p>Hi</p><script>x()</script><p>there</p></body></html>"
        assert html_to_text(html) == "Hi\nthere"

    def test_empty_body(self, parser: MessageParser):
        result = parser.parse(_raw(_build_plain_email(body="")))
        assert result.body == ""


class TestMessageParserDefaults:
    def test_missing_subject(self, parser: MessageParser):
        result = parser.parse(_raw(_build_plain_email(subject=None)))
        assert result.subject == DEFAULT_SUBJECT

    def test_missing_sender(self, parser: MessageParser):
        result = parser.parse(_raw(_build_plain_email(from_addr=None)))
        assert result.sender == DEFAULT_SENDER
        assert result.sender_address == ""

    def test_missing_date_uses_internal_date(self, parser: MessageParser):
        arrived = datetime(2025, 5, 30, 8, 15, tzinfo=UTC)
        result = parser.parse(_raw(_build_plain_email(date=None), internal_date=arrived))
        assert result.date == arrived

    def test_missing_date_falls_back_to_now(self, parser: MessageParser):
        before = datetime.now(UTC)
        result = parser.parse(_raw(_build_plain_email(date=None)))
        assert before <= result.date <= datetime.now(UTC)

    def test_unparseable_date_falls_back(self, parser: MessageParser):
        arrived = datetime(2025, 5, 30, 8, 15, tzinfo=UTC)
        raw = _build_plain_email(date="not a date")
        result = parser.parse(_raw(raw, internal_date=arrived))
        assert result.date == arrived

    def test_missing_message_id_is_generated(self, parser: MessageParser):
        result = parser.parse(_raw(_build_plain_email(message_id=None)), index=3)
        assert re.fullmatch(r"\d+-3", result.message_id)


class TestMessageParserErrors:
    def test_unknown_charset_decoded_as_utf8(self, parser: MessageParser):
        raw = (
            "Subject: odd charset\r\n"
            "From: a@b.com\r\n"
            "Content-Type: text/plain; charset=x-no-such-charset\r\n"
            "\r\n"
            "caf\u00e9 at noon\r\n"
        ).encode("utf-8")
        result = parser.parse(_raw(raw))
        assert result.body.strip() == "caf\u00e9 at noon"

    def test_decode_failure_raises_parse_error(self, parser: MessageParser, plain_eml_bytes: bytes):
        with patch.object(MessageParser, "_extract_body", side_effect=ValueError("bad payload")):
            with pytest.raises(ParseError) as excinfo:
                parser.parse(_raw(plain_eml_bytes, uid="42"))
        assert excinfo.value.uid == "42"
        assert "bad payload" in excinfo.value.reason
        assert "42" in str(excinfo.value)
