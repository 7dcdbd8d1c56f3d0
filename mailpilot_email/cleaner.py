"""Body cleaning: strips signatures, quoted replies and stray whitespace."""

from __future__ import annotations

import re
from dataclasses import dataclass

# A signature is only cut when at least this much content precedes it.
MIN_CONTENT_BEFORE_SIGNATURE = 50

SIGNATURE_SEPARATORS = [
    re.compile(r"^--\s*$", re.MULTILINE),
    re.compile(r"^___+$", re.MULTILINE),
    re.compile(r"^-{3,}$", re.MULTILINE),
    re.compile(r"^Sent from my (?:iPhone|iPad|Android)", re.MULTILINE | re.IGNORECASE),
    re.compile(r"^Sent from Mail for Windows", re.MULTILINE | re.IGNORECASE),
    re.compile(r"^Get Outlook for (?:iOS|Android)", re.MULTILINE | re.IGNORECASE),
    re.compile(r"^Sent from Outlook", re.MULTILINE | re.IGNORECASE),
    re.compile(
        r"^(?:Best regards?|Kind regards?|Regards|Thanks|Thank you|Cheers|Best|Sincerely),?$",
        re.MULTILINE | re.IGNORECASE,
    ),
]

QUOTE_START_PATTERNS = [
    re.compile(r"^On .+ wrote:$", re.IGNORECASE),
    re.compile(r"^-+\s*(?:Original|Forwarded) Message\s*-+$", re.IGNORECASE),
    re.compile(r"^(?:From|Date|Subject|To): .+$", re.IGNORECASE),
]

_QUOTE_LINE_RE = re.compile(r"^>+")
_QUOTED_HEADER_RE = re.compile(r"^(?:From|To|Date|Subject|Cc):")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


@dataclass(frozen=True)
class CleanedBody:
    """The cleaned body alongside the untouched original."""

    clean: str
    full: str


class EmailCleaner:
    """Reduce an email body to the part its sender actually wrote."""

    def clean(self, body: str) -> CleanedBody:
        if not body:
            return CleanedBody(clean="", full="")

        clean = self._remove_signature(body)
        clean = self._remove_quoted_text(clean)
        clean = self._clean_whitespace(clean)
        return CleanedBody(clean=clean, full=body)

    @staticmethod
    def _remove_signature(body: str) -> str:
        for separator in SIGNATURE_SEPARATORS:
            match = separator.search(body)
            if match is None:
                continue
            before = body[: match.start()]
            if len(before.strip()) > MIN_CONTENT_BEFORE_SIGNATURE:
                return before
        return body

    @staticmethod
    def _remove_quoted_text(body: str) -> str:
        kept: list[str] = []
        in_quoted_block = False

        for line in body.split("\n"):
            is_quote_line = _QUOTE_LINE_RE.match(line) is not None
            starts_quote = is_quote_line or any(p.match(line) for p in QUOTE_START_PATTERNS)

            if starts_quote:
                in_quoted_block = True
            elif in_quoted_block and line.strip() and not _QUOTED_HEADER_RE.match(line):
                in_quoted_block = False

            if not in_quoted_block and not is_quote_line:
                kept.append(line)

        return "\n".join(kept)

    @staticmethod
    def _clean_whitespace(body: str) -> str:
        lines = (line.strip(" \t") for line in body.split("\n"))
        return _EXCESS_NEWLINES_RE.sub("\n\n", "\n".join(lines)).strip()
