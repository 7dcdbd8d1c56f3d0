"""Data models for the mailbox connector framework."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RawMessage:
    """Raw RFC 822 payload plus the protocol metadata captured at fetch time.

    Lives only for the duration of a fetch session; nothing persists it.
    """

    uid: str
    raw_bytes: bytes
    flags: tuple[str, ...] = field(default_factory=tuple)
    internal_date: datetime | None = None
