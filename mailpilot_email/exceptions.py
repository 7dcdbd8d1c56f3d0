"""Errors raised while ingesting a mailbox."""

from __future__ import annotations

from mailpilot_connector.exceptions import MailPilotError


class MailboxConnectionError(MailPilotError):
    """The mailbox session could not be opened or broke mid-fetch.

    Fatal to the whole fetch: no partial batch is returned.  Retrying is
    the caller's decision.
    """

    user_message = "unable to refresh mailbox"


class ParseError(MailPilotError):
    """A single raw message could not be parsed.

    Recovered by the ingestion pipeline, which skips the item and
    carries on with the rest of the batch.
    """

    user_message = "message could not be read"

    def __init__(self, uid: str, reason: str) -> None:
        super().__init__(f"uid {uid}: {reason}")
        self.uid = uid
        self.reason = reason
