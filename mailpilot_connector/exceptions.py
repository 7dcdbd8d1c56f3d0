"""Exception hierarchy shared by every MailPilot package."""

from __future__ import annotations


class MailPilotError(Exception):
    """Base class for all MailPilot errors.

    ``user_message`` is the short, operator-facing description of the
    failure; ``str(exc)`` keeps the technical detail for logs.
    """

    user_message: str = "unexpected error"


class ConfigurationError(MailPilotError):
    """Required settings (host, credentials, secrets) are missing or invalid."""

    user_message = "credential missing"
